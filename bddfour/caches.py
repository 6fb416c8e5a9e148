"""Direct-mapped caches for results of unary, binary and ternary operations.

A stored result may refer to a node that has since been disabled; callers
must check for that after a hit. After nodes are freed, caches must be cleared.
"""

from __future__ import annotations

from collections.abc import Callable
from enum import IntEnum

from .node import hash_2, hash_3


class Op(IntEnum):
    UNDEFINED = 0
    AND = 1
    OR = 2
    IFF = 3
    NOT = 4
    SAT = 5
    EXISTS = 6
    IMAGE = 7


def unaryop_hash(ix: int, op: int) -> int:
    return hash_2(op, ix)


def binaryop_hash(ix1: int, ix2: int, op: int) -> int:
    return hash_3(op, ix1, ix2)


def ternaryop_hash(ix1: int, ix2: int, ix3: int, op: int) -> int:
    # The third argument is a variable-set index; leaving it out of the hash is fine.
    return hash_3(op, ix1, ix2)


class OpCache:
    """Cache with 2**log2size slots; each slot holds the most recent entry."""

    def __init__(self, log2size: int, hasher: Callable[..., int]) -> None:
        if not 0 <= log2size < 32:
            raise ValueError(f"log2size must be between 0 and 31, got {log2size}")
        self.size = 1 << log2size
        self.mask = self.size - 1
        self._hasher = hasher
        self._slots: list[tuple[int, tuple[int, ...], int] | None] = [None] * self.size

    def _slot(self, op: int, args: tuple[int, ...]) -> int:
        return self._hasher(*args, op) & self.mask

    def lookup(self, op: int, *args: int) -> int | None:
        """Cached result for op applied to args, or None on a miss."""
        entry = self._slots[self._slot(op, args)]
        if entry is not None and entry[0] == op and entry[1] == args:
            return entry[2]
        return None

    def store(self, op: int, result: int, *args: int) -> None:
        self._slots[self._slot(op, args)] = (op, args, result)

    def clear(self) -> None:
        self._slots = [None] * self.size