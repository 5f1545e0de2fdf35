"""Roggler Wire Decoder - Typed Decoding of the Fixed Message Schema.

One decode function per message shape. Repeated embedded fields are
length-delimited; each payload is decoded recursively with a fresh reader
over the sliced bytes. Unknown fields, and known fields that arrive with an
unexpected wire type, are skipped with the same policy everywhere.

Schema (field number -> name -> wire type):
    Envelope:           1=result (embedded SearchResult)
    SearchResult:       1=total (varint), 2=dimensions (embedded),
                        5=value_lists (embedded), 6=dictionary_refs (embedded)
    Dimension:          1=id (string), 2=dictionary_id (string), 3=counts (embedded)
    DimensionCount:     1=key (varint), 2=count (varint)
    DictionaryRef:      1=id (string), 2=hash (string)
    Dictionary:         1=id (string), 2=values (string), 3=properties (embedded)
    DictionaryProperty: 1=id (string), 2=values (string)
    ValueList:          1=id (string), 2=values (embedded SearchValue)
    SearchValue:        1=text (string), 2=number (varint), 3=numbers (packed
                        or single varint), 4=texts (string), 5=boolean (varint)

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import logging

from roggler_core.wire.messages import (
    Dictionary,
    DictionaryProperty,
    DictionaryRef,
    Dimension,
    DimensionCount,
    SearchEnvelope,
    SearchResult,
    SearchValue,
    ValueList,
)
from roggler_core.wire.reader import BufferLike, WireReader, WireType

logger = logging.getLogger(__name__)

VARINT = WireType.VARINT
BYTES = WireType.LENGTH_DELIMITED


def _skip(reader: WireReader, message: str, field_number: int, wire_type: int) -> None:
    logger.debug(f"Skipping {message} field {field_number} (wire type {wire_type})")
    reader.skip_field(wire_type)


def decode_dimension_count(data: BufferLike) -> DimensionCount:
    reader = WireReader(data)
    count = DimensionCount()
    while reader.has_more():
        number, wire_type = reader.read_tag()
        if number == 1 and wire_type == VARINT:
            count.key = reader.read_varint()
        elif number == 2 and wire_type == VARINT:
            count.count = reader.read_varint()
        else:
            _skip(reader, "DimensionCount", number, wire_type)
    return count


def decode_dimension(data: BufferLike) -> Dimension:
    reader = WireReader(data)
    dimension = Dimension()
    while reader.has_more():
        number, wire_type = reader.read_tag()
        if number == 1 and wire_type == BYTES:
            dimension.id = reader.read_string()
        elif number == 2 and wire_type == BYTES:
            dimension.dictionary_id = reader.read_string()
        elif number == 3 and wire_type == BYTES:
            dimension.counts.append(decode_dimension_count(reader.read_bytes()))
        else:
            _skip(reader, "Dimension", number, wire_type)
    return dimension


def decode_dictionary_ref(data: BufferLike) -> DictionaryRef:
    reader = WireReader(data)
    ref = DictionaryRef()
    while reader.has_more():
        number, wire_type = reader.read_tag()
        if number == 1 and wire_type == BYTES:
            ref.id = reader.read_string()
        elif number == 2 and wire_type == BYTES:
            ref.hash = reader.read_string()
        else:
            _skip(reader, "DictionaryRef", number, wire_type)
    return ref


def decode_search_value(data: BufferLike) -> SearchValue:
    reader = WireReader(data)
    value = SearchValue()
    while reader.has_more():
        number, wire_type = reader.read_tag()
        if number == 1 and wire_type == BYTES:
            value.text = reader.read_string()
        elif number == 2 and wire_type == VARINT:
            value.number = reader.read_varint()
        elif number == 3 and wire_type == BYTES:
            packed = WireReader(reader.read_bytes())
            while packed.has_more():
                value.numbers.append(packed.read_varint())
        elif number == 3 and wire_type == VARINT:
            value.numbers.append(reader.read_varint())
        elif number == 4 and wire_type == BYTES:
            value.texts.append(reader.read_string())
        elif number == 5 and wire_type == VARINT:
            value.boolean = reader.read_bool()
        else:
            _skip(reader, "SearchValue", number, wire_type)
    return value


def decode_value_list(data: BufferLike) -> ValueList:
    reader = WireReader(data)
    value_list = ValueList()
    while reader.has_more():
        number, wire_type = reader.read_tag()
        if number == 1 and wire_type == BYTES:
            value_list.id = reader.read_string()
        elif number == 2 and wire_type == BYTES:
            value_list.values.append(decode_search_value(reader.read_bytes()))
        else:
            _skip(reader, "ValueList", number, wire_type)
    return value_list


def decode_search_result(data: BufferLike) -> SearchResult:
    reader = WireReader(data)
    result = SearchResult()
    while reader.has_more():
        number, wire_type = reader.read_tag()
        if number == 1 and wire_type == VARINT:
            result.total = reader.read_varint()
        elif number == 2 and wire_type == BYTES:
            result.dimensions.append(decode_dimension(reader.read_bytes()))
        elif number == 5 and wire_type == BYTES:
            result.value_lists.append(decode_value_list(reader.read_bytes()))
        elif number == 6 and wire_type == BYTES:
            result.dictionary_refs.append(decode_dictionary_ref(reader.read_bytes()))
        else:
            _skip(reader, "SearchResult", number, wire_type)
    return result


def decode_envelope(data: BufferLike) -> SearchEnvelope:
    reader = WireReader(data)
    envelope = SearchEnvelope()
    while reader.has_more():
        number, wire_type = reader.read_tag()
        if number == 1 and wire_type == BYTES:
            envelope.result = decode_search_result(reader.read_bytes())
        else:
            _skip(reader, "Envelope", number, wire_type)
    return envelope


def decode_dictionary_property(data: BufferLike) -> DictionaryProperty:
    reader = WireReader(data)
    prop = DictionaryProperty()
    while reader.has_more():
        number, wire_type = reader.read_tag()
        if number == 1 and wire_type == BYTES:
            prop.id = reader.read_string()
        elif number == 2 and wire_type == BYTES:
            prop.values.append(reader.read_string())
        else:
            _skip(reader, "DictionaryProperty", number, wire_type)
    return prop


def decode_dictionary(data: BufferLike) -> Dictionary:
    reader = WireReader(data)
    dictionary = Dictionary()
    while reader.has_more():
        number, wire_type = reader.read_tag()
        if number == 1 and wire_type == BYTES:
            dictionary.id = reader.read_string()
        elif number == 2 and wire_type == BYTES:
            dictionary.values.append(reader.read_string())
        elif number == 3 and wire_type == BYTES:
            dictionary.properties.append(decode_dictionary_property(reader.read_bytes()))
        else:
            _skip(reader, "Dictionary", number, wire_type)
    return dictionary


class WireDecoder:
    """Decoder instance passed explicitly to the components that need it."""

    def decode(self, buffer: BufferLike) -> SearchResult:
        """Decode an enveloped search response.

        Args:
            buffer: Raw response bytes

        Returns:
            The wrapped SearchResult; an empty one if the envelope has none

        Raises:
            DecodeError: Buffer is truncated or malformed
        """
        envelope = decode_envelope(buffer)
        if envelope.result is None:
            logger.debug("Envelope carried no result")
            return SearchResult()
        return envelope.result

    def decode_result(self, buffer: BufferLike) -> SearchResult:
        """Decode a bare SearchResult without the envelope."""
        return decode_search_result(buffer)

    def decode_dictionary(self, buffer: BufferLike, source: str = "api") -> Dictionary:
        """Decode a dictionary payload and tag its provenance."""
        dictionary = decode_dictionary(buffer)
        dictionary.source = source
        return dictionary


__all__ = [
    "WireDecoder",
    "decode_envelope",
    "decode_search_result",
    "decode_dimension",
    "decode_dimension_count",
    "decode_dictionary_ref",
    "decode_value_list",
    "decode_search_value",
    "decode_dictionary",
    "decode_dictionary_property",
]
