"""Roggler Aggregation Components.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from roggler_core.aggregation.aggregations import (
    AggregationEngine,
    AggregateResult,
    AggregatedEntry,
    BasetypeResult,
    BasetypeShare,
    split_basetypes,
)

__all__ = [
    "AggregationEngine",
    "AggregateResult",
    "AggregatedEntry",
    "BasetypeResult",
    "BasetypeShare",
    "split_basetypes",
]
