"""Roggler Wire Messages - Decoded Message Types.

Plain dataclasses, one per message shape in the fixed schema. Dataclass
equality gives the structural comparison used to check decode idempotence.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Iterator, List, Optional


@dataclass
class DimensionCount:
    """One (key, count) pair of a dimension."""

    key: int = 0
    count: int = 0


@dataclass
class Dimension:
    """A named frequency breakdown within a result.

    Attributes:
        id: Semantic key, e.g. ``itembasetypes-Helmet``
        dictionary_id: Dictionary resolving this dimension's keys
        counts: Key/count pairs in wire order
    """

    id: str = ""
    dictionary_id: str = ""
    counts: List[DimensionCount] = field(default_factory=list)

    @property
    def count_sum(self) -> int:
        """Sum of all counts."""
        return sum(c.count for c in self.counts)

    def __iter__(self) -> Iterator[DimensionCount]:
        return iter(self.counts)


@dataclass
class DictionaryRef:
    """Reference from a result to a dictionary, fetched by hash."""

    id: str = ""
    hash: str = ""


@dataclass
class SearchValue:
    """A single typed value inside a value list."""

    text: str = ""
    number: int = 0
    numbers: List[int] = field(default_factory=list)
    texts: List[str] = field(default_factory=list)
    boolean: bool = False


@dataclass
class ValueList:
    """Per-row value list attached to a result."""

    id: str = ""
    values: List[SearchValue] = field(default_factory=list)


@dataclass
class DictionaryProperty:
    """Auxiliary per-key property column of a dictionary."""

    id: str = ""
    values: List[str] = field(default_factory=list)


@dataclass
class Dictionary:
    """Ordered label table resolving integer keys to display names.

    Attributes:
        id: Dictionary identifier
        values: Labels indexed positionally by key
        properties: Auxiliary property columns
        source: Provenance tag
    """

    id: str = ""
    values: List[str] = field(default_factory=list)
    properties: List[DictionaryProperty] = field(default_factory=list)
    source: str = "wire"

    def __len__(self) -> int:
        return len(self.values)


@dataclass
class SearchResult:
    """Decoded search result.

    Attributes:
        total: Reported total, possibly inflated or stale
        dimensions: Dimensions in wire order
        value_lists: Per-row value lists
        dictionary_refs: Dictionaries referenced by the dimensions
    """

    total: int = 0
    dimensions: List[Dimension] = field(default_factory=list)
    value_lists: List[ValueList] = field(default_factory=list)
    dictionary_refs: List[DictionaryRef] = field(default_factory=list)

    def get_dimension(self, dimension_id: str) -> Optional[Dimension]:
        """Get the first dimension with the given id."""
        for dimension in self.dimensions:
            if dimension.id == dimension_id:
                return dimension
        return None

    def dimensions_with_prefix(self, prefix: str) -> List[Dimension]:
        return [d for d in self.dimensions if d.id.startswith(prefix)]


@dataclass
class SearchEnvelope:
    """Root envelope wrapping a search result."""

    result: Optional[SearchResult] = None


__all__ = [
    "DimensionCount",
    "Dimension",
    "DictionaryRef",
    "SearchValue",
    "ValueList",
    "DictionaryProperty",
    "Dictionary",
    "SearchResult",
    "SearchEnvelope",
]
