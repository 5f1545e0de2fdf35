"""Roggler Dictionary Loader - Lazy Fetch and Memoisation by Hash.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from roggler_core.errors import DecodeError, FetchError
from roggler_core.wire.decoder import WireDecoder
from roggler_core.wire.messages import Dictionary, DictionaryRef

logger = logging.getLogger(__name__)


class DictionarySet:
    """Dictionaries available to one result, keyed by reference id."""

    def __init__(self, dictionaries: Optional[Dict[str, Dictionary]] = None):
        self._by_id: Dict[str, Dictionary] = dict(dictionaries or {})

    def get(self, dictionary_id: str) -> Optional[Dictionary]:
        return self._by_id.get(dictionary_id)

    def add(self, dictionary_id: str, dictionary: Dictionary) -> None:
        self._by_id[dictionary_id] = dictionary

    def merged(self, other: "DictionarySet") -> "DictionarySet":
        """Return a new set with other's entries layered over this one."""
        combined = DictionarySet(self._by_id)
        combined._by_id.update(other._by_id)
        return combined

    def __contains__(self, dictionary_id: str) -> bool:
        return dictionary_id in self._by_id

    def __len__(self) -> int:
        return len(self._by_id)

    def __iter__(self) -> Iterator[str]:
        return iter(self._by_id)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, DictionarySet) and self._by_id == other._by_id


class DictionaryLoader:
    """Fetches referenced dictionaries through a transport.

    Decoded dictionaries are memoised by content hash so results referencing
    the same hash share one instance. The memo is bounded; when full, the
    entry with the oldest timestamp is evicted.
    """

    def __init__(
        self,
        decoder: WireDecoder,
        max_entries: int = 256,
    ):
        """Initialize loader.

        Args:
            decoder: Decoder used for dictionary payloads
            max_entries: Maximum memoised dictionaries
        """
        if max_entries < 1:
            raise ValueError(f"max_entries must be at least 1, got {max_entries}")
        self._decoder = decoder
        self._max_entries = max_entries
        self._by_hash: Dict[str, Tuple[Dictionary, float]] = {}
        self._lock = threading.RLock()
        self._hits = 0
        self._misses = 0

    def _cached(self, dict_hash: str) -> Optional[Dictionary]:
        with self._lock:
            entry = self._by_hash.get(dict_hash)
            if entry is None:
                self._misses += 1
                return None
            self._hits += 1
            return entry[0]

    def _remember(self, dict_hash: str, dictionary: Dictionary) -> None:
        with self._lock:
            if dict_hash not in self._by_hash and len(self._by_hash) >= self._max_entries:
                oldest = min(self._by_hash.items(), key=lambda x: x[1][1])
                del self._by_hash[oldest[0]]
            self._by_hash[dict_hash] = (dictionary, time.monotonic())

    def load(
        self,
        refs: Iterable[DictionaryRef],
        transport,
    ) -> Tuple[DictionarySet, List[FetchError]]:
        """Load every referenced dictionary.

        Args:
            refs: References from a decoded result
            transport: Object providing fetch_dictionary(hash) -> bytes

        Returns:
            (dictionaries keyed by reference id, per-dictionary errors)
        """
        dictionaries = DictionarySet()
        errors: List[FetchError] = []

        for ref in refs:
            dictionary = self._cached(ref.hash)
            if dictionary is None:
                try:
                    payload = transport.fetch_dictionary(ref.hash)
                    dictionary = self._decoder.decode_dictionary(payload, source="api")
                except FetchError as e:
                    logger.warning(f"Failed to load dictionary {ref.id}: {e}")
                    errors.append(e)
                    continue
                except DecodeError as e:
                    logger.warning(f"Malformed dictionary {ref.id}: {e}")
                    errors.append(FetchError(ref.hash, f"malformed dictionary: {e}"))
                    continue
                self._remember(ref.hash, dictionary)
            dictionaries.add(ref.id, dictionary)

        return dictionaries, errors

    def clear(self) -> None:
        with self._lock:
            self._by_hash.clear()

    def stats(self) -> Dict[str, int]:
        return {
            "entries": len(self._by_hash),
            "hits": self._hits,
            "misses": self._misses,
        }


__all__ = ["DictionaryLoader", "DictionarySet"]
