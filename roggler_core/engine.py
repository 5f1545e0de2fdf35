"""Roggler Core Engine - Session Coordinator.

The StatsEngine owns one logical session: the active filter state, the
caches, the selection workflow and the generation counter that discards
results of superseded filter states.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import logging
import os
import threading
from dataclasses import MISSING, dataclass, field, fields, replace
from typing import Any, Dict, List, Mapping, Optional, Union

from roggler_core.aggregation.aggregations import (
    AggregateResult,
    AggregationEngine,
    BasetypeResult,
    split_basetypes,
)
from roggler_core.cache.caches import Generation, ResultCache, TopLevelCache
from roggler_core.cache.state import AXES, FilterState, combo_key
from roggler_core.dictionary.loader import DictionaryLoader
from roggler_core.dictionary.resolver import DictionaryResolver
from roggler_core.dimensions.processor import (
    CONTROL_DIMENSION_ID,
    DimensionProcessor,
    GroupEntry,
    ProcessedResult,
)
from roggler_core.errors import FetchError, RogglerError, StaleGeneration
from roggler_core.fetch.batch import BatchFetcher, FetchOutcome, ProgressCallback
from roggler_core.fetch.query import DEFAULT_OVERVIEW, DEFAULT_RESULT_TYPE, UpstreamQuery
from roggler_core.selection.machine import SelectionCommit, SelectionState, SelectionStateMachine
from roggler_core.storage.backend import PreferenceStore
from roggler_core.storage.memory import MemoryPreferenceStore
from roggler_core.transport.backend import TransportConfig
from roggler_core.transport.http import HttpTransport
from roggler_core.wire.decoder import WireDecoder

logger = logging.getLogger(__name__)


@dataclass
class EngineConfig:
    """Engine configuration.

    Attributes:
        api_base: Upstream base URL used by the default HTTP transport
        overview: Fixed overview mode sent with every search
        result_type: Fixed result-type flag sent with every search
        control_dimension: Dimension whose sum is the true total
        top_level_cache_size: Capacity of the per-snapshot overview cache
        max_basetypes: Basetypes fetched per aggregation batch
        blacklisted_basetypes: Basetypes never fetched
        max_workers: Concurrent fetches per batch; 1 is sequential
        display_limit: Entries shown per dimension
        default_selection_size: Members in the count-based default selection
        dictionary_cache_size: Decoded dictionaries memoised by hash
    """

    api_base: str = "https://poe.ninja"
    overview: str = DEFAULT_OVERVIEW
    result_type: str = DEFAULT_RESULT_TYPE
    control_dimension: str = CONTROL_DIMENSION_ID
    top_level_cache_size: int = 100
    max_basetypes: int = 6
    blacklisted_basetypes: List[str] = field(default_factory=lambda: ["Spiked Gloves"])
    max_workers: int = 1
    display_limit: int = 50
    default_selection_size: int = 6
    dictionary_cache_size: int = 256

    @classmethod
    def from_env(
        cls,
        prefix: str = "ROGGLER_",
        environ: Optional[Mapping[str, str]] = None,
    ) -> "EngineConfig":
        """Build a config with fields overridden from the environment.

        ``ROGGLER_MAX_WORKERS=4`` sets ``max_workers``; list fields take
        comma-separated values.
        """
        environ = os.environ if environ is None else environ
        overrides: Dict[str, Any] = {}
        for f in fields(cls):
            raw = environ.get(f"{prefix}{f.name.upper()}")
            if raw is None:
                continue
            default = f.default if f.default is not MISSING else f.default_factory()
            if isinstance(default, bool):
                overrides[f.name] = raw.strip().lower() in ("1", "true", "yes", "on")
            elif isinstance(default, int):
                overrides[f.name] = int(raw)
            elif isinstance(default, list):
                overrides[f.name] = [v.strip() for v in raw.split(",") if v.strip()]
            else:
                overrides[f.name] = raw
        return cls(**overrides)


@dataclass
class QueryOutcome:
    """What a query, split query or aggregation produced.

    Attributes:
        state: Filter state the call answered
        result: ProcessedResult, or AggregateResult for aggregations
        from_cache: Served from a cache without fetching
        stale: Filter state changed mid-call; nothing was cached
        errors: Per-item fetch failures
        warnings: Non-fatal conditions (missing dictionaries, insufficient data)
        fetched: Labels of the items actually fetched
    """

    state: FilterState
    result: Optional[Union[ProcessedResult, AggregateResult]] = None
    from_cache: bool = False
    stale: bool = False
    errors: List[FetchError] = field(default_factory=list)
    warnings: List[RogglerError] = field(default_factory=list)
    fetched: List[str] = field(default_factory=list)


class StatsEngine:
    """Coordinates decoding, aggregation, caching and selection."""

    def __init__(
        self,
        config: Optional[EngineConfig] = None,
        transport=None,
        preferences: Optional[PreferenceStore] = None,
    ):
        """Initialize engine.

        Args:
            config: Engine configuration
            transport: Fetch transport; an HttpTransport against
                config.api_base when omitted
            preferences: Saved-selection store
        """
        self.config = config or EngineConfig()
        if transport is None:
            transport = HttpTransport(TransportConfig(base_url=self.config.api_base))
        self.transport = transport
        self._lock = threading.RLock()

        self.decoder = WireDecoder()
        self.resolver = DictionaryResolver()
        self.loader = DictionaryLoader(self.decoder, max_entries=self.config.dictionary_cache_size)
        self.processor = DimensionProcessor(self.resolver, self.config.control_dimension)
        self.aggregator = AggregationEngine(self.processor)
        self.fetcher = BatchFetcher(self.transport, self.decoder, self.loader, self.config.max_workers)

        self.generation = Generation()
        self.cache = ResultCache(self.generation)
        self.top_level = TopLevelCache(self.config.top_level_cache_size)

        self.preferences = preferences or MemoryPreferenceStore()
        self.selection = SelectionStateMachine(
            self.preferences,
            is_cached=self._basetype_cached,
            top_n=self.config.default_selection_size,
        )
        self._state: Optional[FilterState] = None

        logger.info(f"Stats engine initialized against {self.config.api_base}")

    # Filter state

    @property
    def state(self) -> Optional[FilterState]:
        return self._state

    def _require_state(self) -> FilterState:
        if self._state is None:
            raise RogglerError("No active snapshot; call load_overview or set_filter first")
        return self._state

    def set_filter(self, state: FilterState) -> int:
        """Make state the active filter state.

        Returns:
            The new generation
        """
        with self._lock:
            previous = self._state
            self._state = state
            token = self.generation.advance()
            if previous is None or previous.category != state.category:
                self.selection.collapse()
            self.selection.set_active(state.basetypes)
        logger.debug(f"Filter state now generation {token}: {state.signature()}")
        return token

    def select_item(self, item: str) -> int:
        return self.set_filter(self._require_state().with_item(item))

    def select_skill(self, skill: Optional[str]) -> int:
        skills = [skill] if skill else []
        return self.set_filter(self._require_state().with_skills(skills))

    def _basetype_cached(self, basetype: str) -> bool:
        state = self._state
        return state is not None and state.category is not None and self.cache.has_basetype(state, basetype)

    # Fetching

    def _query_for(self, state: FilterState, label: Optional[str] = None) -> UpstreamQuery:
        return UpstreamQuery.from_filter(
            state,
            overview=self.config.overview,
            result_type=self.config.result_type,
            label=label,
        )

    def _process(self, outcome: FetchOutcome, target: QueryOutcome) -> Optional[ProcessedResult]:
        target.fetched.append(outcome.label)
        target.errors.extend(outcome.dictionary_errors)
        if not outcome.ok:
            target.errors.append(outcome.error)
            return None
        processed = self.processor.process_result(outcome.result, outcome.dictionaries)
        target.warnings.extend(processed.warnings)
        return processed

    def _cache_combination(self, target: QueryOutcome, value: Any, token: int) -> None:
        try:
            insufficient = self.cache.put_combination(target.state, value, token)
        except StaleGeneration as e:
            logger.debug(f"Discarding stale result: {e}")
            target.stale = True
            return
        if insufficient is not None:
            target.warnings.append(insufficient)

    def load_overview(self, snapshot_id: str) -> QueryOutcome:
        """Fetch the unfiltered overview of a snapshot.

        Makes the bare snapshot the active filter state. Overviews live in
        the bounded top-level cache; results with fetch or dictionary
        errors are returned but not cached.
        """
        state = FilterState(snapshot_id=snapshot_id)
        token = self.set_filter(state)
        target = QueryOutcome(state=state)

        cached = self.top_level.get(snapshot_id)
        if cached is not None:
            target.result = cached
            target.from_cache = True
            return target

        query = UpstreamQuery.top_level(snapshot_id, self.config.overview, self.config.result_type)
        processed = self._process(self.fetcher.fetch_one(query), target)
        if processed is None:
            return target
        target.result = processed
        if target.errors:
            return target
        try:
            with self.generation.holding(token):
                self.top_level.put(snapshot_id, processed)
        except StaleGeneration as e:
            logger.debug(f"Discarding stale overview: {e}")
            target.stale = True
        return target

    def query(self, state: Optional[FilterState] = None) -> QueryOutcome:
        """Fetch and process one filter combination.

        Insufficient item-only results are returned but not cached.
        """
        state = state or self._require_state()
        token = self.generation.current
        target = QueryOutcome(state=state)

        cached = self.cache.get_combination(state)
        if cached is not None:
            target.result = cached
            target.from_cache = True
            return target

        processed = self._process(self.fetcher.fetch_one(self._query_for(state)), target)
        if processed is None:
            return target
        target.result = processed
        if not target.errors:
            self._cache_combination(target, processed, token)
        return target

    def query_split(
        self,
        state: Optional[FilterState] = None,
        axis: str = "items",
        on_progress: Optional[ProgressCallback] = None,
    ) -> QueryOutcome:
        """Fetch one request per value of axis and merge the results.

        Raises:
            ValueError: axis is not a filter axis
        """
        if axis not in AXES:
            raise ValueError(f"Unknown filter axis: {axis}")
        state = state or self._require_state()
        token = self.generation.current
        target = QueryOutcome(state=state)

        cached = self.cache.get_combination(state)
        if cached is not None:
            target.result = cached
            target.from_cache = True
            return target

        queries = [
            self._query_for(replace(state, **{axis: frozenset([value])}), label=value)
            for value in sorted(getattr(state, axis))
        ]
        batch = self.fetcher.run(queries, on_progress, lambda: self.generation.is_current(token))
        if batch.cancelled:
            target.stale = True
            return target

        processed = [p for p in (self._process(o, target) for o in batch.outcomes) if p is not None]
        if not processed:
            return target
        target.result = self.aggregator.merge_calls(processed)
        if not target.errors:
            self._cache_combination(target, target.result, token)
        return target

    def aggregate(
        self,
        state: Optional[FilterState] = None,
        on_progress: Optional[ProgressCallback] = None,
    ) -> QueryOutcome:
        """Pool statistics over the selected basetypes.

        Cached basetypes are reused; only the rest are fetched.

        Raises:
            ValueError: state has no item category or no basetypes
        """
        state = state or self._require_state()
        category = state.category
        if category is None or not state.basetypes:
            raise ValueError("Aggregation needs one item and at least one basetype")
        token = self.generation.current
        target = QueryOutcome(state=state)

        cached_aggregate = self.cache.get_combination(state)
        if cached_aggregate is not None:
            target.result = cached_aggregate
            target.from_cache = True
            return target

        allowed, skipped = split_basetypes(
            sorted(state.basetypes),
            blacklist=self.config.blacklisted_basetypes,
            limit=self.config.max_basetypes,
        )
        if skipped:
            logger.info(f"Skipping basetypes {skipped}")
        cached, uncached = self.cache.partition(state, allowed)

        queries = [self._query_for(state.for_basetype(b), label=b) for b in uncached]
        batch = self.fetcher.run(queries, on_progress, lambda: self.generation.is_current(token))
        if batch.cancelled:
            target.stale = True
            return target

        fresh: Dict[str, BasetypeResult] = {}
        for outcome in batch.outcomes:
            target.fetched.append(outcome.label)
            target.errors.extend(outcome.dictionary_errors)
            if not outcome.ok:
                target.errors.append(outcome.error)
                continue
            item = BasetypeResult(
                basetype=outcome.label,
                result=outcome.result,
                dictionaries=outcome.dictionaries,
                true_total=self.processor.true_total(outcome.result),
            )
            fresh[item.basetype] = item
            if outcome.dictionary_errors:
                continue
            try:
                self.cache.put_basetype(state, item, token)
            except StaleGeneration as e:
                logger.debug(f"Discarding stale batch: {e}")
                target.stale = True
                return target

        results = [cached.get(b) or fresh[b] for b in allowed if b in cached or b in fresh]
        aggregate = self.aggregator.aggregate_basetypes(
            results,
            category=category,
            errors=target.errors,
            skipped=skipped,
        )
        target.result = aggregate
        target.warnings.extend(aggregate.warnings)
        if not target.errors:
            self._cache_combination(target, aggregate, token)
        return target

    # Selection

    def expand_group(self, group: GroupEntry) -> SelectionState:
        return self.selection.expand_group(group, combo_key(self._require_state()))

    def expand(self, category: str, attribute: str) -> SelectionState:
        return self.selection.expand(category, attribute, combo_key(self._require_state()))

    def _commit(self, commit: Optional[SelectionCommit]) -> Optional[SelectionCommit]:
        if commit is not None:
            self.set_filter(self._require_state().with_basetypes(commit.basetypes))
        return commit

    def toggle(self, member: str) -> Optional[SelectionCommit]:
        """Toggle a member; commits immediately when every pending member is cached."""
        return self._commit(self.selection.toggle(member))

    def reset_selection(self):
        return self.selection.reset()

    def apply_selection(self) -> Optional[SelectionCommit]:
        return self._commit(self.selection.apply())

    def cancel_selection(self) -> bool:
        return self.selection.cancel()

    # Housekeeping

    def stats(self) -> Dict[str, Any]:
        return {
            "generation": self.generation.current,
            "cache": self.cache.stats(),
            "top_level": self.top_level.stats(),
            "dictionaries": self.loader.stats(),
        }

    def clear_caches(self) -> None:
        self.cache.clear()
        self.top_level.clear()
        self.loader.clear()

    def close(self) -> None:
        self.transport.close()
        logger.info("Stats engine closed")

    def __enter__(self) -> "StatsEngine":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


__all__ = ["EngineConfig", "QueryOutcome", "StatsEngine"]
