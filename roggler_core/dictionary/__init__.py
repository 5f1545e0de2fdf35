"""Roggler Dictionary Components.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from roggler_core.dictionary.resolver import DictionaryResolver, Resolution, placeholder
from roggler_core.dictionary.loader import DictionaryLoader, DictionarySet

__all__ = ["DictionaryResolver", "Resolution", "placeholder", "DictionaryLoader", "DictionarySet"]
