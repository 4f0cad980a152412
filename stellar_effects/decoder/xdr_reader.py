"""
Minimal XDR (RFC 4506) reader over an in-memory buffer.

Big-endian fixed-width integers, 4-byte aligned opaque data with zero padding,
uint32 length prefixes for variable data and arrays, uint32 0/1 flags for
optional values. Every failure is an XdrDecodeError carrying the offset.
"""

from __future__ import annotations

import struct
from typing import Callable, TypeVar

T = TypeVar("T")

_UINT32 = struct.Struct(">I")
_INT32 = struct.Struct(">i")
_UINT64 = struct.Struct(">Q")
_INT64 = struct.Struct(">q")


class XdrDecodeError(ValueError):
    """Raised when the buffer does not hold a valid XDR value."""

    def __init__(self, reason: str, offset: int) -> None:
        super().__init__(f"{reason} at offset {offset}")
        self.reason = reason
        self.offset = offset


class XdrReader:
    """Cursor over an XDR byte buffer."""

    def __init__(self, data: bytes) -> None:
        self._data = bytes(data)
        self._offset = 0

    @property
    def offset(self) -> int:
        return self._offset

    @property
    def remaining(self) -> int:
        return len(self._data) - self._offset

    def error(self, reason: str) -> XdrDecodeError:
        return XdrDecodeError(reason, self._offset)

    def unknown(self, what: str, value: int) -> XdrDecodeError:
        return self.error(f"unknown {what} discriminant {value}")

    def _take(self, n: int) -> bytes:
        if n < 0 or self._offset + n > len(self._data):
            raise self.error(f"truncated buffer: need {n} bytes, have {self.remaining}")
        chunk = self._data[self._offset:self._offset + n]
        self._offset += n
        return chunk

    def slice(self, start: int, end: int | None = None) -> bytes:
        """Raw bytes between two offsets (end defaults to the current offset)."""
        return self._data[start:self._offset if end is None else end]

    def uint32(self) -> int:
        return _UINT32.unpack(self._take(4))[0]

    def int32(self) -> int:
        return _INT32.unpack(self._take(4))[0]

    def uint64(self) -> int:
        return _UINT64.unpack(self._take(8))[0]

    def int64(self) -> int:
        return _INT64.unpack(self._take(8))[0]

    def boolean(self) -> bool:
        value = self.uint32()
        if value not in (0, 1):
            raise self.error(f"invalid bool value {value}")
        return value == 1

    def _padding(self, length: int) -> None:
        pad = (4 - length % 4) % 4
        if pad and self._take(pad) != b"\x00" * pad:
            raise self.error("non-zero padding")

    def fixed_opaque(self, length: int) -> bytes:
        value = self._take(length)
        self._padding(length)
        return value

    def var_opaque(self, max_length: int | None = None) -> bytes:
        length = self.uint32()
        if max_length is not None and length > max_length:
            raise self.error(f"opaque length {length} exceeds limit {max_length}")
        return self.fixed_opaque(length)

    def string(self, max_length: int | None = None) -> str:
        raw = self.var_opaque(max_length)
        return raw.decode("utf-8", errors="replace")

    def optional(self, read: Callable[[], T]) -> T | None:
        return read() if self.boolean() else None

    def array(self, read: Callable[[], T], max_length: int | None = None) -> tuple[T, ...]:
        count = self.uint32()
        if max_length is not None and count > max_length:
            raise self.error(f"array length {count} exceeds limit {max_length}")
        # Each element takes at least 4 bytes; bail out before allocating absurd counts.
        if count > self.remaining:
            raise self.error(f"truncated buffer: array of {count} elements")
        return tuple(read() for _ in range(count))

    def extension_point(self) -> None:
        """ExtensionPoint: union switch (int v) { case 0: void; }"""
        v = self.int32()
        if v != 0:
            raise self.unknown("extension point", v)

    def done(self) -> None:
        if self.remaining:
            raise self.error(f"{self.remaining} trailing bytes")
