"""
Bounded Binary Reader

Sequential big-endian reader over an in-memory buffer. Every read either
advances the offset by exactly the requested size or raises without
advancing, so a failed decode never leaves the cursor half way through a
field.
"""

import struct
from typing import Tuple

from .errors import LengthOutOfBounds, Truncated


class BinaryCursor:
    """Big-endian cursor over an immutable byte sequence."""

    def __init__(self, data: bytes, offset: int = 0):
        self._data = bytes(data)
        if offset < 0 or offset > len(self._data):
            raise ValueError(f"offset {offset} outside buffer of {len(self._data)} bytes")
        self._offset = offset

    @property
    def offset(self) -> int:
        return self._offset

    @property
    def exhausted(self) -> bool:
        return self._offset == len(self._data)

    def remaining(self) -> int:
        """Number of unread bytes."""
        return len(self._data) - self._offset

    def read_fixed(self, n: int) -> bytes:
        """Read exactly ``n`` bytes."""
        if n < 0:
            raise ValueError(f"cannot read a negative number of bytes: {n}")
        if n > self.remaining():
            raise Truncated(
                f"needed {n} bytes at offset {self._offset}, {self.remaining()} remain"
            )
        start = self._offset
        self._offset += n
        return self._data[start:self._offset]

    def read_byte(self) -> int:
        return self.read_fixed(1)[0]

    def read_u32(self) -> int:
        return struct.unpack(">I", self.read_fixed(4))[0]

    def read_u64(self) -> int:
        return struct.unpack(">Q", self.read_fixed(8))[0]

    def read_i64(self) -> int:
        return struct.unpack(">q", self.read_fixed(8))[0]

    def read_length_prefixed_block(
        self,
        length_field_size: int,
        max_length: int,
        include_field_size: bool
    ) -> Tuple[int, bytes]:
        """
        Read a length field followed by that many payload bytes.

        The declared length is checked against ``max_length`` before any
        payload is read, so a crafted prefix cannot force a large read.

        Args:
            length_field_size: Width of the big-endian length field in bytes
            max_length: Largest accepted payload length (inclusive)
            include_field_size: Fold the length field's own width into the
                returned consumed length

        Returns:
            Tuple of (consumed_length, payload)
        """
        if length_field_size <= 0:
            raise ValueError(f"invalid length field size: {length_field_size}")

        start = self._offset
        declared = int.from_bytes(self.read_fixed(length_field_size), "big")

        if max_length < 0 or declared > max_length:
            self._offset = start
            raise LengthOutOfBounds(
                f"declared length {declared} exceeds maximum {max_length}"
            )

        try:
            payload = self.read_fixed(declared)
        except Truncated:
            self._offset = start
            raise

        consumed = declared + length_field_size if include_field_size else declared
        return consumed, payload
