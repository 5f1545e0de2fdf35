"""Roggler Memory Transport - Canned Response Transport.

Serves registered buffers by query signature and dictionary hash, for
offline replay.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations
from typing import Dict, List

from roggler_core.errors import FetchError
from roggler_core.fetch.query import UpstreamQuery
from roggler_core.transport.backend import Transport, TransportConfig

class MemoryTransport(Transport):
    """In-memory transport."""

    def __init__(self, config: TransportConfig = None):
        super().__init__(config)
        self._responses: Dict[str, bytes] = {}
        self._dictionaries: Dict[str, bytes] = {}
        self.requests: List[str] = []

    def register(self, query: UpstreamQuery, payload: bytes) -> None:
        self._responses[query.signature] = payload

    def register_dictionary(self, dict_hash: str, payload: bytes) -> None:
        self._dictionaries[dict_hash] = payload

    def fetch(self, query: UpstreamQuery) -> bytes:
        self.requests.append(query.signature)
        payload = self._responses.get(query.signature)
        if payload is None:
            raise FetchError(query.label or query.signature, "no response registered", status=404)
        return payload

    def fetch_dictionary(self, dict_hash: str) -> bytes:
        self.requests.append(dict_hash)
        payload = self._dictionaries.get(dict_hash)
        if payload is None:
            raise FetchError(dict_hash, "no dictionary registered", status=404)
        return payload

    def clear(self) -> None:
        self._responses.clear()
        self._dictionaries.clear()
        self.requests.clear()

__all__ = ["MemoryTransport"]
