"""Roggler Dictionary Resolver - Key to Label Resolution.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional

from roggler_core.wire.messages import Dictionary


@dataclass(frozen=True)
class Resolution:
    """Resolved label for one key."""
    name: str
    resolved: bool


def placeholder(key: int) -> str:
    return f"Key_{key}"


class DictionaryResolver:
    """Maps coded integer keys to display strings.

    Never raises: an absent dictionary, a key outside the value table, or an
    empty label all yield the deterministic placeholder with resolved=False.
    """

    def resolve(self, key: int, dictionary: Optional[Dictionary]) -> Resolution:
        if dictionary is not None and 0 <= key < len(dictionary.values):
            name = dictionary.values[key]
            if name:
                return Resolution(name=name, resolved=True)
        return Resolution(name=placeholder(key), resolved=False)

    def name(self, key: int, dictionary: Optional[Dictionary]) -> str:
        return self.resolve(key, dictionary).name


__all__ = ["DictionaryResolver", "Resolution", "placeholder"]
