"""Roggler Fetch Components.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from roggler_core.fetch.query import UpstreamQuery, dictionary_path
from roggler_core.fetch.batch import BatchFetcher, BatchOutcome, FetchOutcome, ProgressCallback

__all__ = [
    "UpstreamQuery",
    "dictionary_path",
    "BatchFetcher",
    "BatchOutcome",
    "FetchOutcome",
    "ProgressCallback",
]
