"""Roggler Preference Store - Abstract Preference Interface.

Saved basetype selections keyed by {category, group, filter combination}.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional, Sequence

@dataclass
class StorageConfig:
    """Storage configuration."""
    path: str = ""
    indent: Optional[int] = 2

def preference_key(category: str, group_key: str, combo_key: str) -> str:
    return f"{category}::{group_key}::{combo_key}"

class PreferenceStore(ABC):
    """Abstract preference store."""

    def __init__(self, config: StorageConfig = None):
        self.config = config or StorageConfig()

    @abstractmethod
    def get(self, category: str, group_key: str, combo_key: str) -> Optional[List[str]]:
        pass

    @abstractmethod
    def set(self, category: str, group_key: str, combo_key: str, members: Sequence[str]) -> None:
        pass

    @abstractmethod
    def delete(self, category: str, group_key: str, combo_key: str) -> bool:
        pass

    @abstractmethod
    def list_keys(self, prefix: str = "") -> List[str]:
        pass

    def close(self) -> None:
        pass

__all__ = ["PreferenceStore", "StorageConfig", "preference_key"]
