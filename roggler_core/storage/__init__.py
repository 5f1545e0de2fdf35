"""Roggler Storage Components.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from roggler_core.storage.backend import PreferenceStore, StorageConfig, preference_key
from roggler_core.storage.memory import MemoryPreferenceStore
from roggler_core.storage.file import FilePreferenceStore

__all__ = ["PreferenceStore", "StorageConfig", "preference_key", "MemoryPreferenceStore", "FilePreferenceStore"]
