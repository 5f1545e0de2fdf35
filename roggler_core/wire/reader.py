"""Roggler Wire Reader - Cursor-Based Primitive Decoding.

Every read advances a cursor over an immutable buffer and checks bounds
before slicing, so a truncated buffer fails fast instead of yielding a
silently shortened value.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import struct
from enum import IntEnum
from typing import Tuple, Union

from roggler_core.errors import DecodeError

UINT64_MASK = (1 << 64) - 1
MAX_VARINT_BYTES = 10

_FIXED32 = struct.Struct("<i")
_FLOAT = struct.Struct("<f")
_DOUBLE = struct.Struct("<d")

BufferLike = Union[bytes, bytearray, memoryview]


class WireType(IntEnum):
    """Wire types understood by the reader."""

    VARINT = 0
    FIXED64 = 1
    LENGTH_DELIMITED = 2
    FIXED32 = 5


class WireReader:
    """Sequential reader over one message buffer.

    Embedded messages are never read in place: their bytes are sliced out
    with read_bytes() and handed to a fresh reader.
    """

    def __init__(self, buffer: BufferLike):
        """Initialize reader.

        Args:
            buffer: Raw message bytes
        """
        self._buffer = bytes(buffer)
        self.pos = 0

    def __len__(self) -> int:
        return len(self._buffer)

    @property
    def remaining(self) -> int:
        """Bytes left after the cursor."""
        return len(self._buffer) - self.pos

    def has_more(self) -> bool:
        """Check whether unread bytes remain."""
        return self.pos < len(self._buffer)

    def _require(self, size: int) -> None:
        if size < 0 or size > self.remaining:
            raise DecodeError(
                f"Need {size} bytes, only {self.remaining} remain",
                offset=self.pos,
            )

    def read_varint(self) -> int:
        """Read an unsigned base-128 varint into a 64-bit integer.

        Returns:
            Decoded value, masked to 64 bits

        Raises:
            DecodeError: Buffer ends mid-varint or the varint exceeds 10 bytes
        """
        start = self.pos
        result = 0
        shift = 0
        for _ in range(MAX_VARINT_BYTES):
            if self.pos >= len(self._buffer):
                raise DecodeError("Truncated varint", offset=start)
            byte = self._buffer[self.pos]
            self.pos += 1
            result |= (byte & 0x7F) << shift
            if not byte & 0x80:
                return result & UINT64_MASK
            shift += 7
        raise DecodeError("Varint longer than 10 bytes", offset=start)

    def read_bool(self) -> bool:
        return self.read_varint() != 0

    def read_bytes(self) -> bytes:
        """Read a length-delimited byte string.

        Raises:
            DecodeError: Declared length exceeds the remaining buffer
        """
        length = self.read_varint()
        self._require(length)
        data = self._buffer[self.pos:self.pos + length]
        self.pos += length
        return data

    def read_string(self) -> str:
        """Read a length-delimited UTF-8 string."""
        start = self.pos
        data = self.read_bytes()
        try:
            return data.decode("utf-8")
        except UnicodeDecodeError as e:
            raise DecodeError(f"Invalid UTF-8 string: {e.reason}", offset=start) from e

    def _read_fixed(self, layout: struct.Struct):
        self._require(layout.size)
        (value,) = layout.unpack_from(self._buffer, self.pos)
        self.pos += layout.size
        return value

    def read_fixed32(self) -> int:
        """Read a little-endian signed 32-bit integer."""
        return self._read_fixed(_FIXED32)

    def read_float(self) -> float:
        """Read a little-endian 32-bit float."""
        return self._read_fixed(_FLOAT)

    def read_double(self) -> float:
        """Read a little-endian 64-bit float."""
        return self._read_fixed(_DOUBLE)

    def read_tag(self) -> Tuple[int, int]:
        """Read a field tag.

        Returns:
            (field_number, wire_type)
        """
        start = self.pos
        tag = self.read_varint()
        field_number = tag >> 3
        if field_number == 0:
            raise DecodeError("Field number 0 is not valid", offset=start)
        return field_number, tag & 0x7

    def skip(self, size: int) -> None:
        self._require(size)
        self.pos += size

    def skip_field(self, wire_type: int) -> None:
        """Skip the value of an unknown field.

        Args:
            wire_type: Wire type from the field's tag

        Raises:
            DecodeError: Unsupported wire type or truncated value
        """
        if wire_type == WireType.VARINT:
            self.read_varint()
        elif wire_type == WireType.FIXED64:
            self.skip(8)
        elif wire_type == WireType.LENGTH_DELIMITED:
            self.skip(self.read_varint())
        elif wire_type == WireType.FIXED32:
            self.skip(4)
        else:
            raise DecodeError(f"Unsupported wire type {wire_type}", offset=self.pos)


__all__ = ["WireReader", "WireType", "UINT64_MASK", "MAX_VARINT_BYTES"]
