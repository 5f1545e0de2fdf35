"""Roggler Batch Fetcher - Isolated Per-Item Fetch, Decode and Load.

Runs a list of queries through a transport. Each item is fetched, decoded
and has its dictionaries loaded on its own; a failure is recorded on that
item's outcome and never aborts its siblings. Outcomes are returned in
input order whatever the completion order.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import concurrent.futures
import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence

from roggler_core.dictionary.loader import DictionaryLoader, DictionarySet
from roggler_core.errors import DecodeError, FetchError
from roggler_core.fetch.query import UpstreamQuery
from roggler_core.wire.decoder import WireDecoder
from roggler_core.wire.messages import SearchResult

logger = logging.getLogger(__name__)

# (completed, total, label of the item just completed)
ProgressCallback = Callable[[int, int, str], None]


@dataclass
class FetchOutcome:
    """Result of one item of a batch.

    Attributes:
        query: The request
        result: Decoded result, None on failure
        dictionaries: Dictionaries loaded for the result
        error: Failure that excluded this item
        dictionary_errors: Dictionaries that could not be loaded
        cancelled: Item was not attempted because the batch was abandoned
    """

    query: UpstreamQuery
    result: Optional[SearchResult] = None
    dictionaries: DictionarySet = field(default_factory=DictionarySet)
    error: Optional[FetchError] = None
    dictionary_errors: List[FetchError] = field(default_factory=list)
    cancelled: bool = False

    @property
    def label(self) -> str:
        return self.query.label

    @property
    def ok(self) -> bool:
        return self.result is not None and self.error is None


@dataclass
class BatchOutcome:
    """All outcomes of a batch, in input order."""

    outcomes: List[FetchOutcome] = field(default_factory=list)

    def successes(self) -> List[FetchOutcome]:
        return [o for o in self.outcomes if o.ok]

    @property
    def errors(self) -> List[FetchError]:
        return [o.error for o in self.outcomes if o.error is not None]

    @property
    def cancelled(self) -> bool:
        return any(o.cancelled for o in self.outcomes)

    def __len__(self) -> int:
        return len(self.outcomes)


class BatchFetcher:
    """Fetches batches sequentially or with a bounded worker pool."""

    def __init__(
        self,
        transport,
        decoder: WireDecoder,
        loader: DictionaryLoader,
        max_workers: int = 1,
    ):
        """Initialize fetcher.

        Args:
            transport: Object providing fetch(query) and fetch_dictionary(hash)
            decoder: Decoder for search responses
            loader: Dictionary loader
            max_workers: Concurrent fetches; 1 fetches sequentially
        """
        self.transport = transport
        self.decoder = decoder
        self.loader = loader
        self.max_workers = max(1, max_workers)

    def fetch_one(self, query: UpstreamQuery) -> FetchOutcome:
        """Fetch, decode and load dictionaries for one query."""
        outcome = FetchOutcome(query=query)
        try:
            payload = self.transport.fetch(query)
            outcome.result = self.decoder.decode(payload)
        except FetchError as e:
            logger.warning(f"Fetch failed for {query.label}: {e}")
            outcome.error = e
            return outcome
        except DecodeError as e:
            logger.warning(f"Malformed response for {query.label}: {e}")
            outcome.error = FetchError(query.label, f"malformed response: {e}")
            return outcome

        outcome.dictionaries, outcome.dictionary_errors = self.loader.load(
            outcome.result.dictionary_refs, self.transport,
        )
        return outcome

    def run(
        self,
        queries: Sequence[UpstreamQuery],
        on_progress: Optional[ProgressCallback] = None,
        should_continue: Optional[Callable[[], bool]] = None,
    ) -> BatchOutcome:
        """Fetch every query.

        Args:
            queries: Requests, each with a label
            on_progress: Called after each completed item
            should_continue: Checked before each item; returning False
                abandons the remaining items

        Returns:
            Outcomes in input order
        """
        logger.info(f"Fetching batch of {len(queries)} (workers={self.max_workers})")
        if self.max_workers == 1 or len(queries) <= 1:
            batch = self._run_sequential(queries, on_progress, should_continue)
        else:
            batch = self._run_parallel(queries, on_progress, should_continue)
        logger.info(f"Batch done: {len(batch.successes())}/{len(queries)} succeeded")
        return batch

    def _run_sequential(self, queries, on_progress, should_continue) -> BatchOutcome:
        outcomes = []
        total = len(queries)
        for i, query in enumerate(queries):
            if should_continue is not None and not should_continue():
                logger.debug(f"Batch abandoned at {i}/{total}")
                outcomes.extend(FetchOutcome(query=q, cancelled=True) for q in queries[i:])
                break
            outcomes.append(self.fetch_one(query))
            if on_progress is not None:
                on_progress(i + 1, total, query.label)
        return BatchOutcome(outcomes=outcomes)

    def _run_parallel(self, queries, on_progress, should_continue) -> BatchOutcome:
        total = len(queries)
        outcomes: List[Optional[FetchOutcome]] = [None] * total

        def task(index: int) -> FetchOutcome:
            if should_continue is not None and not should_continue():
                return FetchOutcome(query=queries[index], cancelled=True)
            return self.fetch_one(queries[index])

        completed = 0
        with concurrent.futures.ThreadPoolExecutor(max_workers=self.max_workers) as pool:
            futures = {pool.submit(task, i): i for i in range(total)}
            for future in concurrent.futures.as_completed(futures):
                index = futures[future]
                outcomes[index] = future.result()
                completed += 1
                if on_progress is not None:
                    on_progress(completed, total, queries[index].label)

        return BatchOutcome(outcomes=outcomes)


__all__ = ["BatchFetcher", "BatchOutcome", "FetchOutcome", "ProgressCallback"]
