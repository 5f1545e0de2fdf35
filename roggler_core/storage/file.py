"""Roggler File Preferences - JSON File Preference Store.

The whole store is one JSON document, rewritten on every change.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations
import json
import logging
import os
from typing import Dict, List, Optional, Sequence
from roggler_core.storage.backend import PreferenceStore, StorageConfig, preference_key

logger = logging.getLogger(__name__)

class FilePreferenceStore(PreferenceStore):
    """File-backed preference store."""

    def __init__(self, config: StorageConfig = None):
        super().__init__(config)
        if not self.config.path:
            raise ValueError("FilePreferenceStore requires a path")
        directory = os.path.dirname(self.config.path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        self._data: Dict[str, List[str]] = self._load()

    def _load(self) -> Dict[str, List[str]]:
        if not os.path.exists(self.config.path):
            return {}
        with open(self.config.path, "r", encoding="utf-8") as f:
            data = json.load(f)
        logger.debug(f"Loaded {len(data)} preferences from {self.config.path}")
        return {k: list(v) for k, v in data.items()}

    def _flush(self) -> None:
        tmp_path = f"{self.config.path}.tmp"
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(self._data, f, indent=self.config.indent, sort_keys=True)
        os.replace(tmp_path, self.config.path)

    def get(self, category: str, group_key: str, combo_key: str) -> Optional[List[str]]:
        members = self._data.get(preference_key(category, group_key, combo_key))
        return list(members) if members is not None else None

    def set(self, category: str, group_key: str, combo_key: str, members: Sequence[str]) -> None:
        self._data[preference_key(category, group_key, combo_key)] = list(members)
        self._flush()

    def delete(self, category: str, group_key: str, combo_key: str) -> bool:
        key = preference_key(category, group_key, combo_key)
        if key not in self._data:
            return False
        del self._data[key]
        self._flush()
        return True

    def list_keys(self, prefix: str = "") -> List[str]:
        return [k for k in self._data.keys() if k.startswith(prefix)]

__all__ = ["FilePreferenceStore"]
