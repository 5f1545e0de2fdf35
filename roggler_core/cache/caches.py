"""Roggler Result Cache - Signature-Addressed Result Storage.

Two granularities share one signature function:

* whole-combination entries: the processed result or aggregate for a full
  filter state,
* single-basetype entries: raw per-basetype results, keyed by the filter
  state narrowed to that basetype.

Writes are serialised under one lock and rejected when the caller's
generation token has been superseded.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import logging
import threading
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Iterator, List, Optional, Tuple

from roggler_core.aggregation.aggregations import BasetypeResult
from roggler_core.cache.state import FilterState, signature
from roggler_core.dimensions.processor import ProcessedResult
from roggler_core.errors import InsufficientData, StaleGeneration

logger = logging.getLogger(__name__)


class Generation:
    """Monotonically increasing epoch of the active filter state."""

    def __init__(self):
        self._value = 0
        self._lock = threading.RLock()

    @property
    def current(self) -> int:
        return self._value

    def advance(self) -> int:
        with self._lock:
            self._value += 1
            return self._value

    def is_current(self, token: int) -> bool:
        return token == self._value

    def check(self, token: int) -> None:
        """Raise StaleGeneration unless token is the current generation."""
        with self._lock:
            actual = self._value
        if token != actual:
            raise StaleGeneration(token, actual)

    @contextmanager
    def holding(self, token: Optional[int] = None) -> Iterator[int]:
        """Block advances for the duration of the block.

        Raises:
            StaleGeneration: token is given and no longer current
        """
        with self._lock:
            if token is not None:
                self.check(token)
            yield self._value


@dataclass
class CacheEntry:
    """One cached value."""
    signature: str
    value: Any
    generation: int = 0
    stored_at: float = field(default_factory=time.monotonic)


def is_insufficient(state: FilterState, result: ProcessedResult) -> bool:
    """Item-only query whose basetype, modifier and skill breakdowns are empty.

    Such a response usually reflects a transient upstream gap and must stay
    retryable.
    """
    return state.is_item_only() and not result.has_breakdown()


class ResultCache:
    """Whole-combination and single-basetype result maps."""

    def __init__(self, generation: Optional[Generation] = None):
        """Initialize cache.

        Args:
            generation: Epoch used to reject stale writes
        """
        self.generation = generation or Generation()
        self._combinations: Dict[str, CacheEntry] = {}
        self._basetypes: Dict[str, CacheEntry] = {}
        self._lock = threading.RLock()
        self._hits = 0
        self._misses = 0

    def _lookup(self, table: Dict[str, CacheEntry], key: str) -> Optional[Any]:
        with self._lock:
            entry = table.get(key)
            if entry is None:
                self._misses += 1
                logger.debug(f"Cache miss: {key}")
                return None
            self._hits += 1
            logger.debug(f"Cache hit: {key}")
            return entry.value

    def _store(self, table: Dict[str, CacheEntry], key: str, value: Any, token: Optional[int]) -> None:
        with self._lock, self.generation.holding(token) as current:
            table[key] = CacheEntry(
                signature=key,
                value=value,
                generation=current,
            )

    # Whole-combination entries

    def get_combination(self, state: FilterState) -> Optional[Any]:
        return self._lookup(self._combinations, signature(state))

    def put_combination(
        self,
        state: FilterState,
        value: Any,
        token: Optional[int] = None,
    ) -> Optional[InsufficientData]:
        """Store a processed result or aggregate for a full filter state.

        Args:
            state: Filter state the value answers
            value: ProcessedResult or AggregateResult
            token: Generation captured when the request started

        Returns:
            InsufficientData when the value was withheld, else None

        Raises:
            StaleGeneration: token is no longer current
        """
        key = signature(state)
        if isinstance(value, ProcessedResult) and is_insufficient(state, value):
            logger.warning(f"Insufficient result for {key}; not cached")
            return InsufficientData(key)
        self._store(self._combinations, key, value, token)
        return None

    # Single-basetype entries

    def get_basetype(self, state: FilterState, basetype: str) -> Optional[BasetypeResult]:
        return self._lookup(self._basetypes, signature(state.for_basetype(basetype)))

    def has_basetype(self, state: FilterState, basetype: str) -> bool:
        """Membership test that does not touch the hit counters."""
        with self._lock:
            return signature(state.for_basetype(basetype)) in self._basetypes

    def put_basetype(
        self,
        state: FilterState,
        result: BasetypeResult,
        token: Optional[int] = None,
    ) -> None:
        self._store(self._basetypes, signature(state.for_basetype(result.basetype)), result, token)

    def partition(
        self,
        state: FilterState,
        basetypes: Iterable[str],
    ) -> Tuple[Dict[str, BasetypeResult], List[str]]:
        """Split requested basetypes into cached results and ones to fetch.

        Returns:
            (cached results by basetype, uncached basetypes in request order)
        """
        cached: Dict[str, BasetypeResult] = {}
        uncached: List[str] = []
        for basetype in basetypes:
            hit = self.get_basetype(state, basetype)
            if hit is None:
                uncached.append(basetype)
            else:
                cached[basetype] = hit
        return cached, uncached

    def invalidate(self, state: FilterState) -> None:
        with self._lock:
            self._combinations.pop(signature(state), None)

    def clear(self) -> None:
        with self._lock:
            self._combinations.clear()
            self._basetypes.clear()

    def stats(self) -> Dict[str, Any]:
        total = self._hits + self._misses
        return {
            "combinations": len(self._combinations),
            "basetypes": len(self._basetypes),
            "hits": self._hits,
            "misses": self._misses,
            "hit_rate": self._hits / total if total > 0 else 0,
        }


class TopLevelCache:
    """Bounded cache for simple per-snapshot lookups.

    When full, the least recently updated entry is evicted.
    """

    def __init__(self, capacity: int = 100):
        if capacity < 1:
            raise ValueError(f"capacity must be at least 1, got {capacity}")
        self._capacity = capacity
        self._cache: Dict[str, Tuple[Any, float]] = {}
        self._lock = threading.RLock()
        self._hits = 0
        self._misses = 0

    @staticmethod
    def key(snapshot_id: str) -> str:
        return f"toplevel_{snapshot_id}"

    def get(self, snapshot_id: str) -> Optional[Any]:
        key = self.key(snapshot_id)
        with self._lock:
            entry = self._cache.get(key)
            if entry is None:
                self._misses += 1
                return None
            self._hits += 1
            return entry[0]

    def put(self, snapshot_id: str, value: Any) -> None:
        key = self.key(snapshot_id)
        with self._lock:
            # Reinsert so ties on the timestamp still favour insertion order
            self._cache.pop(key, None)
            if len(self._cache) >= self._capacity:
                oldest = min(self._cache.items(), key=lambda x: x[1][1])
                del self._cache[oldest[0]]
                logger.debug(f"Evicted {oldest[0]}")
            self._cache[key] = (value, time.monotonic())

    def __contains__(self, snapshot_id: str) -> bool:
        return self.key(snapshot_id) in self._cache

    def __len__(self) -> int:
        return len(self._cache)

    def clear(self) -> None:
        with self._lock:
            self._cache.clear()

    def stats(self) -> Dict[str, Any]:
        total = self._hits + self._misses
        return {
            "entries": len(self._cache),
            "capacity": self._capacity,
            "hits": self._hits,
            "misses": self._misses,
            "hit_rate": self._hits / total if total > 0 else 0,
        }


__all__ = [
    "CacheEntry",
    "Generation",
    "ResultCache",
    "TopLevelCache",
    "is_insufficient",
]
