"""Roggler Cache Components.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from roggler_core.cache.state import FilterState, signature, combo_key
from roggler_core.cache.caches import (
    CacheEntry,
    Generation,
    ResultCache,
    TopLevelCache,
    is_insufficient,
)

__all__ = [
    "FilterState",
    "signature",
    "combo_key",
    "CacheEntry",
    "Generation",
    "ResultCache",
    "TopLevelCache",
    "is_insufficient",
]
