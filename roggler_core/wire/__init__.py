"""Roggler Wire Format - Decoder, Encoder and Message Types.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from roggler_core.wire.reader import WireReader, WireType
from roggler_core.wire.messages import (
    DimensionCount,
    Dimension,
    DictionaryRef,
    SearchValue,
    ValueList,
    DictionaryProperty,
    Dictionary,
    SearchResult,
    SearchEnvelope,
)
from roggler_core.wire.decoder import WireDecoder
from roggler_core.wire.encoder import WireEncoder, MessageWriter, encode_varint

__all__ = [
    "WireReader",
    "WireType",
    "DimensionCount",
    "Dimension",
    "DictionaryRef",
    "SearchValue",
    "ValueList",
    "DictionaryProperty",
    "Dictionary",
    "SearchResult",
    "SearchEnvelope",
    "WireDecoder",
    "WireEncoder",
    "MessageWriter",
    "encode_varint",
]
