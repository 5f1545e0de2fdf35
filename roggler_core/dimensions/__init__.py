"""Roggler Dimension Components.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from roggler_core.dimensions.processor import (
    DimensionProcessor,
    DimensionEntry,
    GroupEntry,
    Entry,
    ProcessedDimension,
    ProcessedResult,
    CONTROL_DIMENSION_ID,
    percentage_of,
)
from roggler_core.dimensions.taxonomy import (
    ATTRIBUTE_GROUPS,
    CATEGORY_LABELS,
    RARE_ITEM_TYPES,
    category_for_item,
    category_of_dimension,
    is_groupable,
)

__all__ = [
    "DimensionProcessor",
    "DimensionEntry",
    "GroupEntry",
    "Entry",
    "ProcessedDimension",
    "ProcessedResult",
    "CONTROL_DIMENSION_ID",
    "percentage_of",
    "ATTRIBUTE_GROUPS",
    "CATEGORY_LABELS",
    "RARE_ITEM_TYPES",
    "category_for_item",
    "category_of_dimension",
    "is_groupable",
]
