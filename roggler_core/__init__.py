"""Roggler - Build Statistics Decoder and Aggregator for BlackRoad OS.

Decodes compact binary build-search responses, resolves coded keys into
labels, and produces normalised, grouped, cross-query statistics with
incremental caching and a staged basetype selection workflow.

Architecture:
┌─────────────────────────────────────────────────────────────────────────────┐
│                            Roggler Stats Engine                             │
├─────────────────────────────────────────────────────────────────────────────┤
│                                                                             │
│   ┌─────────────────────────────────────────────────────────────────────┐   │
│   │                        Decode Pipeline                              │   │
│   │  ┌────────────┐  ┌────────────┐  ┌────────────┐  ┌────────────┐    │   │
│   │  │   Wire     │→ │ Dictionary │→ │ Dimension  │→ │ Aggregate  │    │   │
│   │  │  Decoder   │  │  Resolver  │  │ Processor  │  │   Engine   │    │   │
│   │  └────────────┘  └────────────┘  └────────────┘  └────────────┘    │   │
│   └─────────────────────────────────────────────────────────────────────┘   │
│                                                                             │
│   ┌─────────────────────────────────────────────────────────────────────┐   │
│   │                        Session Layer                                │   │
│   │  ┌────────────┐  ┌────────────┐  ┌────────────┐  ┌────────────┐    │   │
│   │  │  Result    │  │ Top-Level  │  │ Selection  │  │   Batch    │    │   │
│   │  │   Cache    │  │   Cache    │  │  Machine   │  │  Fetcher   │    │   │
│   │  └────────────┘  └────────────┘  └────────────┘  └────────────┘    │   │
│   └─────────────────────────────────────────────────────────────────────┘   │
│                                                                             │
│   ┌─────────────────────────────────────────────────────────────────────┐   │
│   │                        Collaborators                                │   │
│   │  ┌────────────┐  ┌────────────┐  ┌────────────┐  ┌────────────┐    │   │
│   │  │    HTTP    │  │   Memory   │  │   Memory   │  │    File    │    │   │
│   │  │ Transport  │  │ Transport  │  │   Prefs    │  │   Prefs    │    │   │
│   │  └────────────┘  └────────────┘  └────────────┘  └────────────┘    │   │
│   └─────────────────────────────────────────────────────────────────────┘   │
│                                                                             │
└─────────────────────────────────────────────────────────────────────────────┘

Key Features:
- Bounds-checked wire decoder with 64-bit varints and a fixed skip policy
- Placeholder labels for keys no dictionary resolves
- Percentages against the control dimension's population
- Attribute grouping of basetypes by taxonomy
- Cross-call merge and population-weighted cross-basetype pooling
- Signature-addressed caches with partial basetype reuse
- Generation tokens that discard superseded batches

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

__version__ = "0.1.0"
__author__ = "BlackRoad OS"
__license__ = "Proprietary"

# Core engine
from roggler_core.engine import (
    StatsEngine,
    EngineConfig,
    QueryOutcome,
)

# Errors
from roggler_core.errors import (
    RogglerError,
    DecodeError,
    DictionaryMissing,
    FetchError,
    InsufficientData,
    StaleGeneration,
    SelectionError,
)

# Wire format
from roggler_core.wire import (
    WireDecoder,
    WireEncoder,
    WireReader,
    SearchResult,
    Dimension,
    DimensionCount,
    DictionaryRef,
    Dictionary,
)

# Dictionaries
from roggler_core.dictionary import (
    DictionaryResolver,
    DictionaryLoader,
    DictionarySet,
)

# Dimensions
from roggler_core.dimensions import (
    DimensionProcessor,
    DimensionEntry,
    GroupEntry,
    ProcessedDimension,
    ProcessedResult,
)

# Aggregation
from roggler_core.aggregation import (
    AggregationEngine,
    AggregateResult,
    AggregatedEntry,
    BasetypeResult,
)

# Caching
from roggler_core.cache import (
    FilterState,
    ResultCache,
    TopLevelCache,
    Generation,
    signature,
)

# Selection
from roggler_core.selection import (
    SelectionState,
    SelectionStateMachine,
    SelectionCommit,
)

# Fetching
from roggler_core.fetch import (
    UpstreamQuery,
    BatchFetcher,
    BatchOutcome,
)

# Collaborators
from roggler_core.transport import (
    Transport,
    TransportConfig,
    HttpTransport,
    MemoryTransport,
)
from roggler_core.storage import (
    PreferenceStore,
    StorageConfig,
    MemoryPreferenceStore,
    FilePreferenceStore,
)

__all__ = [
    # Version
    "__version__",
    # Core
    "StatsEngine",
    "EngineConfig",
    "QueryOutcome",
    # Errors
    "RogglerError",
    "DecodeError",
    "DictionaryMissing",
    "FetchError",
    "InsufficientData",
    "StaleGeneration",
    "SelectionError",
    # Wire
    "WireDecoder",
    "WireEncoder",
    "WireReader",
    "SearchResult",
    "Dimension",
    "DimensionCount",
    "DictionaryRef",
    "Dictionary",
    # Dictionaries
    "DictionaryResolver",
    "DictionaryLoader",
    "DictionarySet",
    # Dimensions
    "DimensionProcessor",
    "DimensionEntry",
    "GroupEntry",
    "ProcessedDimension",
    "ProcessedResult",
    # Aggregation
    "AggregationEngine",
    "AggregateResult",
    "AggregatedEntry",
    "BasetypeResult",
    # Caching
    "FilterState",
    "ResultCache",
    "TopLevelCache",
    "Generation",
    "signature",
    # Selection
    "SelectionState",
    "SelectionStateMachine",
    "SelectionCommit",
    # Fetching
    "UpstreamQuery",
    "BatchFetcher",
    "BatchOutcome",
    # Collaborators
    "Transport",
    "TransportConfig",
    "HttpTransport",
    "MemoryTransport",
    "PreferenceStore",
    "StorageConfig",
    "MemoryPreferenceStore",
    "FilePreferenceStore",
]
