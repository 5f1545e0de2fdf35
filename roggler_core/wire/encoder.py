"""Roggler Wire Encoder - Byte-Exact Message Encoding.

Mirror image of the decoder: same field numbers, same wire types. Zero and
empty scalars are omitted, repeated fields are written in list order.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import struct

from roggler_core.wire.messages import (
    Dictionary,
    DictionaryProperty,
    DictionaryRef,
    Dimension,
    DimensionCount,
    SearchResult,
    SearchValue,
    ValueList,
)
from roggler_core.wire.reader import UINT64_MASK, WireType


def encode_varint(value: int) -> bytes:
    """Encode an unsigned 64-bit integer as a base-128 varint."""
    if value < 0 or value > UINT64_MASK:
        raise ValueError(f"Varint out of range: {value}")
    out = bytearray()
    while True:
        byte = value & 0x7F
        value >>= 7
        if value:
            out.append(byte | 0x80)
        else:
            out.append(byte)
            return bytes(out)


def encode_tag(field_number: int, wire_type: int) -> bytes:
    return encode_varint((field_number << 3) | wire_type)


class MessageWriter:
    """Accumulates the fields of one message.

    Also used directly to craft buffers carrying fields outside the schema.
    """

    def __init__(self):
        self._out = bytearray()

    def varint(self, number: int, value: int, always: bool = False) -> "MessageWriter":
        if value or always:
            self._out += encode_tag(number, WireType.VARINT)
            self._out += encode_varint(value)
        return self

    def raw(self, number: int, data: bytes) -> "MessageWriter":
        self._out += encode_tag(number, WireType.LENGTH_DELIMITED)
        self._out += encode_varint(len(data))
        self._out += data
        return self

    def string(self, number: int, value: str, always: bool = False) -> "MessageWriter":
        if value or always:
            self.raw(number, value.encode("utf-8"))
        return self

    def fixed32(self, number: int, value: int) -> "MessageWriter":
        self._out += encode_tag(number, WireType.FIXED32)
        self._out += struct.pack("<i", value)
        return self

    def double(self, number: int, value: float) -> "MessageWriter":
        self._out += encode_tag(number, WireType.FIXED64)
        self._out += struct.pack("<d", value)
        return self

    def getvalue(self) -> bytes:
        return bytes(self._out)


class WireEncoder:
    """Encodes decoded message types back to wire bytes."""

    def encode_dimension_count(self, count: DimensionCount) -> bytes:
        return MessageWriter().varint(1, count.key).varint(2, count.count).getvalue()

    def encode_dimension(self, dimension: Dimension) -> bytes:
        writer = MessageWriter().string(1, dimension.id).string(2, dimension.dictionary_id)
        for count in dimension.counts:
            writer.raw(3, self.encode_dimension_count(count))
        return writer.getvalue()

    def encode_dictionary_ref(self, ref: DictionaryRef) -> bytes:
        return MessageWriter().string(1, ref.id).string(2, ref.hash).getvalue()

    def encode_search_value(self, value: SearchValue) -> bytes:
        writer = MessageWriter().string(1, value.text).varint(2, value.number)
        if value.numbers:
            writer.raw(3, b"".join(encode_varint(n) for n in value.numbers))
        for text in value.texts:
            writer.string(4, text, always=True)
        return writer.varint(5, int(value.boolean)).getvalue()

    def encode_value_list(self, value_list: ValueList) -> bytes:
        writer = MessageWriter().string(1, value_list.id)
        for value in value_list.values:
            writer.raw(2, self.encode_search_value(value))
        return writer.getvalue()

    def encode_result(self, result: SearchResult) -> bytes:
        """Encode a bare SearchResult."""
        writer = MessageWriter().varint(1, result.total)
        for dimension in result.dimensions:
            writer.raw(2, self.encode_dimension(dimension))
        for value_list in result.value_lists:
            writer.raw(5, self.encode_value_list(value_list))
        for ref in result.dictionary_refs:
            writer.raw(6, self.encode_dictionary_ref(ref))
        return writer.getvalue()

    def encode(self, result: SearchResult) -> bytes:
        """Encode a SearchResult wrapped in the root envelope."""
        return MessageWriter().raw(1, self.encode_result(result)).getvalue()

    def encode_dictionary_property(self, prop: DictionaryProperty) -> bytes:
        writer = MessageWriter().string(1, prop.id)
        for value in prop.values:
            writer.string(2, value, always=True)
        return writer.getvalue()

    def encode_dictionary(self, dictionary: Dictionary) -> bytes:
        writer = MessageWriter().string(1, dictionary.id)
        for value in dictionary.values:
            writer.string(2, value, always=True)
        for prop in dictionary.properties:
            writer.raw(3, self.encode_dictionary_property(prop))
        return writer.getvalue()


__all__ = ["WireEncoder", "MessageWriter", "encode_varint", "encode_tag"]
