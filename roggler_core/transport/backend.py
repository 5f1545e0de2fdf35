"""Roggler Transport - Abstract Fetch Transport.

The core never opens connections itself; it hands typed queries to a
transport and decodes the bytes that come back.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass

from roggler_core.fetch.query import UpstreamQuery

@dataclass
class TransportConfig:
    """Transport configuration."""
    base_url: str = "https://poe.ninja"
    timeout: float = 3.0
    user_agent: str = "roggler-core/0.1"
    accept: str = "application/x-protobuf, application/json, */*"

class Transport(ABC):
    """Abstract fetch transport."""

    def __init__(self, config: TransportConfig = None):
        self.config = config or TransportConfig()

    @abstractmethod
    def fetch(self, query: UpstreamQuery) -> bytes:
        """Raw search response for a query. Raises FetchError."""

    @abstractmethod
    def fetch_dictionary(self, dict_hash: str) -> bytes:
        """Raw dictionary payload for a content hash. Raises FetchError."""

    def close(self) -> None:
        pass

__all__ = ["Transport", "TransportConfig"]
