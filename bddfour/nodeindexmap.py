"""A bounded map from node index to node index that keeps insertion order."""

from __future__ import annotations

from collections.abc import Iterator

_MASK32 = 0xFFFFFFFF


class MapFullError(Exception):
    """Raised when a NodeIndexMap has no room for another entry."""


def hash_32(a: int) -> int:
    """Integer mixing hash on 32-bit values."""
    a &= _MASK32
    a = (a + 0x7ED55D16 + (a << 12)) & _MASK32
    a = (a ^ 0xC761C23C ^ (a >> 19)) & _MASK32
    a = (a + 0x165667B1 + (a << 5)) & _MASK32
    a = ((a + 0xD3A2646C) ^ (a << 9)) & _MASK32
    a = (a + 0xFD7046C5 + (a << 3)) & _MASK32
    a = (a ^ 0xB55A4F09 ^ (a >> 16)) & _MASK32
    return a


class NodeIndexMap:
    """Map of node indices with capacity 2**log2size - 1 entries.

    Entries are kept in the order they were added. Adding a key again
    appends a new entry whose value shadows the earlier one.
    """

    def __init__(self, log2size: int) -> None:
        if not 0 <= log2size <= 32:
            raise ValueError(f"log2size must be between 0 and 32, got {log2size}")
        self.size = 1 << log2size
        self._entries: list[tuple[int, int]] = []
        self._lookup: dict[int, int] = {}

    def add(self, key: int, value: int) -> None:
        if len(self._entries) + 1 >= self.size:
            raise MapFullError("map is too small")
        self._entries.append((key, value))
        self._lookup[key] = value

    def __contains__(self, key: object) -> bool:
        return key in self._lookup

    def get(self, key: int) -> int:
        """Value stored for key; raises KeyError if there is none."""
        try:
            return self._lookup[key]
        except KeyError:
            raise KeyError(f"no value for key {key}") from None

    def reset(self) -> None:
        self._entries.clear()
        self._lookup.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def items(self) -> Iterator[tuple[int, int]]:
        """Entries as (key, value) pairs in insertion order."""
        return iter(list(self._entries))