"""Roggler Errors - Error Taxonomy.

Decode failures are fatal to one decode call. Everything else is collected
per item and surfaced to the caller alongside the result it affected.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations
from typing import Optional


class RogglerError(Exception):
    """Base class for all roggler_core errors."""


class DecodeError(RogglerError, ValueError):
    """Malformed or truncated wire buffer, or an unsupported wire type."""

    def __init__(self, message: str, offset: Optional[int] = None):
        self.offset = offset
        if offset is not None:
            message = f"{message} (at byte {offset})"
        super().__init__(message)


class DictionaryMissing(RogglerError):
    """No dictionary for a dimension, or a key outside its values."""

    def __init__(self, dictionary_id: str, key: Optional[int] = None):
        self.dictionary_id = dictionary_id
        self.key = key
        if key is None:
            message = f"No dictionary loaded for '{dictionary_id}'"
        else:
            message = f"Key {key} not present in dictionary '{dictionary_id}'"
        super().__init__(message)


class FetchError(RogglerError):
    """Transport failure for one query or one dictionary."""

    def __init__(self, label: str, message: str, status: Optional[int] = None):
        self.label = label
        self.status = status
        self.message = message
        super().__init__(f"{label}: {message}")


class InsufficientData(RogglerError):
    """Item-only result with no basetype, modifier or skill breakdown."""

    def __init__(self, signature: str):
        self.signature = signature
        super().__init__(f"Insufficient data for {signature}; not cached")


class StaleGeneration(RogglerError):
    """Result belongs to a superseded filter state."""

    def __init__(self, expected: int, actual: int):
        self.expected = expected
        self.actual = actual
        super().__init__(f"Generation {expected} superseded by {actual}")


class SelectionError(RogglerError, ValueError):
    """Invalid use of the selection state machine."""


__all__ = [
    "RogglerError",
    "DecodeError",
    "DictionaryMissing",
    "FetchError",
    "InsufficientData",
    "StaleGeneration",
    "SelectionError",
]
