"""Roggler Memory Preferences - In-Memory Preference Store.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations
from typing import Dict, List, Optional, Sequence
from roggler_core.storage.backend import PreferenceStore, StorageConfig, preference_key

class MemoryPreferenceStore(PreferenceStore):
    """In-memory preference store."""

    def __init__(self, config: StorageConfig = None):
        super().__init__(config)
        self._data: Dict[str, List[str]] = {}

    def get(self, category: str, group_key: str, combo_key: str) -> Optional[List[str]]:
        members = self._data.get(preference_key(category, group_key, combo_key))
        return list(members) if members is not None else None

    def set(self, category: str, group_key: str, combo_key: str, members: Sequence[str]) -> None:
        self._data[preference_key(category, group_key, combo_key)] = list(members)

    def delete(self, category: str, group_key: str, combo_key: str) -> bool:
        key = preference_key(category, group_key, combo_key)
        if key in self._data:
            del self._data[key]
            return True
        return False

    def list_keys(self, prefix: str = "") -> List[str]:
        return [k for k in self._data.keys() if k.startswith(prefix)]

    def clear(self) -> None:
        self._data.clear()

__all__ = ["MemoryPreferenceStore"]
