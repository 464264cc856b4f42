"""Sequential big-endian reader over an owned byte buffer.

``ByteCursor`` serves two roles in the decoder: it walks the decoded envelope
and decompressed payload one byte at a time, and it doubles as a small scratch
accumulator where multi-byte fields are assembled with :meth:`append_byte`
before being reinterpreted with :meth:`read_u16`.
"""

from __future__ import annotations

from owl_fts.errors import UnexpectedEnd


class ByteCursor:
    """Owned byte sequence plus a read position (``position <= len(cursor)``)."""

    __slots__ = ("_data", "_position")

    def __init__(self, data: bytes | bytearray | None = None) -> None:
        self._data = bytearray(data or b"")
        self._position = 0

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"ByteCursor(length={len(self._data)}, position={self._position})"

    @property
    def position(self) -> int:
        return self._position

    def remaining(self) -> int:
        """Number of unread bytes."""
        return len(self._data) - self._position

    def next_byte(self) -> int:
        """Return the current byte and advance by one.

        Raises:
            UnexpectedEnd: if the cursor is already exhausted.
        """
        if self._position >= len(self._data):
            msg = f"Read past end of buffer at position {self._position}"
            raise UnexpectedEnd(msg)
        value = self._data[self._position]
        self._position += 1
        return value

    def _read_big_endian(self, width: int) -> int:
        # Short reads yield 0 without consuming anything.
        if self.remaining() < width:
            return 0
        start = self._position
        self._position += width
        return int.from_bytes(self._data[start : self._position], "big")

    def read_u16(self) -> int:
        """Read a big-endian unsigned 16-bit integer, or 0 if fewer than 2 bytes remain."""
        return self._read_big_endian(2)

    def read_u32(self) -> int:
        """Read a big-endian unsigned 32-bit integer, or 0 if fewer than 4 bytes remain."""
        return self._read_big_endian(4)

    def extract_range(self, size: int) -> ByteCursor:
        """Copy ``size`` bytes from the current position into a new cursor.

        The source cursor's position is left unchanged.

        Raises:
            UnexpectedEnd: if fewer than ``size`` bytes are available.
        """
        if size < 0 or size > self.remaining():
            msg = f"Requested {size} bytes but only {self.remaining()} remain"
            raise UnexpectedEnd(msg)
        return ByteCursor(self._data[self._position : self._position + size])

    def append_byte(self, byte: int) -> None:
        self._data.append(byte)

    def clear(self) -> None:
        """Empty the buffer and rewind, keeping the object for reuse."""
        self._data.clear()
        self._position = 0

    def to_bytes(self) -> bytes:
        """Return a copy of the whole buffer, independent of the read position."""
        return bytes(self._data)
