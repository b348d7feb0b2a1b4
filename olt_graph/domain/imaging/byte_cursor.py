"""Bounded reader over an immutable byte buffer.

Every read checks ``offset + width <= length`` first and returns ``None`` when
the buffer is too short. Nothing here raises on out-of-range access, so format
decoders can treat truncation as "field not present".
"""

from __future__ import annotations

from typing import Literal

Endian = Literal["big", "little"]


class ByteCursor:
    """Random-access, non-throwing view over ``bytes``."""

    __slots__ = ("_data",)

    def __init__(self, data: bytes) -> None:
        self._data = bytes(data)

    @property
    def length(self) -> int:
        return len(self._data)

    def has(self, offset: int, width: int) -> bool:
        return offset >= 0 and width >= 0 and offset + width <= len(self._data)

    def uint8(self, offset: int) -> int | None:
        if not self.has(offset, 1):
            return None
        return self._data[offset]

    def uint16(self, offset: int, endian: Endian = "big") -> int | None:
        return self._read_uint(offset, 2, endian)

    def uint24(self, offset: int, endian: Endian = "little") -> int | None:
        return self._read_uint(offset, 3, endian)

    def uint32(self, offset: int, endian: Endian = "big") -> int | None:
        return self._read_uint(offset, 4, endian)

    def tag(self, offset: int, width: int = 4) -> bytes | None:
        """Raw slice of exactly ``width`` bytes, e.g. a RIFF chunk FourCC."""
        if not self.has(offset, width):
            return None
        return self._data[offset : offset + width]

    def startswith(self, signature: bytes, offset: int = 0) -> bool:
        return self.tag(offset, len(signature)) == signature

    def _read_uint(self, offset: int, width: int, endian: Endian) -> int | None:
        if not self.has(offset, width):
            return None
        return int.from_bytes(self._data[offset : offset + width], endian)
