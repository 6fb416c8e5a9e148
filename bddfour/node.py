"""BDD nodes and the hash functions used to place them."""

from __future__ import annotations

from dataclasses import dataclass

ZEROINDEX = 0
ONEINDEX = 1
NO_INDEX = 0xFFFFFFFF
"""Largest 32-bit node index. Marks disabled nodes and empty slots."""

_MASK64 = 0xFFFFFFFFFFFFFFFF
_PRIME = 0x7FFFFFFF  # largest 32-bit signed prime


def _pair(l: int, h: int) -> int:
    """Cantor pairing computed with 64-bit wrap-around."""
    s = (l + h) & _MASK64
    return ((s * (s + 1) & _MASK64) // 2 + l) & _MASK64


def hash_2(a: int, b: int) -> int:
    """Hash an 8-bit value and a 32-bit value to a value below 2**31 - 1."""
    return _pair(a & 0xFF, b & 0xFFFFFFFF) % _PRIME


def hash_3(a: int, b: int, c: int) -> int:
    """Hash an 8-bit value and two 32-bit values to a value below 2**31 - 1."""
    pair = _pair(b & 0xFFFFFFFF, c & 0xFFFFFFFF)
    pair = _pair(pair, a & 0xFF)
    return pair % _PRIME


def hash_varlowhigh(var: int, low: int, high: int) -> int:
    """Hash the triple that identifies a node."""
    return hash_3(var, low, high)


@dataclass(slots=True)
class Node:
    """A BDD node: variable 1..255, or 0 for the constants false and true."""

    var: int = 0
    parentcount: int = 0
    low: int = NO_INDEX
    high: int = NO_INDEX
    next: int = 0

    def hash(self) -> int:
        """Hash of the node's (var, low, high) triple."""
        return hash_varlowhigh(self.var, self.low, self.high)

    def disable(self) -> None:
        """Mark the node as disabled by pointing both children at NO_INDEX."""
        self.low = NO_INDEX
        self.high = NO_INDEX

    def is_disabled(self) -> bool:
        return self.low == NO_INDEX and self.high == NO_INDEX

    def is_constant(self) -> bool:
        return self.var == 0

    def constant(self) -> int:
        """Value of a constant node (0 or 1)."""
        return self.low

    def describe(self) -> str:
        if self.is_constant():
            return f"BDDNode({self.constant()}, #parents={self.parentcount})"
        return (
            f"BDDNode(var={self.var}, low={self.low}, high={self.high}, "
            f"#parents={self.parentcount})"
        )