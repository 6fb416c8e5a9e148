"""Bit masks and move order for Connect 4 boards of the supported sizes.

A board of width W and height H is stored column by column in a 64-bit
integer, H + 1 bits per column: H cells plus one spare bit on top. The
lowest bit of a column is its bottom cell.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache

MAX_WIDTH = 10
MAX_HEIGHT = 13
_MAX_BITS = 64


@dataclass(frozen=True)
class BoardConstants:
    """Masks and static move order for one board size."""

    width: int
    height: int
    board_mask: int
    left_board_mask: int
    right_board_mask: int
    bottom_mask: int
    static_move_order: tuple[int, ...]


def _check_width(width: int) -> None:
    if not 1 <= width <= MAX_WIDTH:
        raise ValueError(f"width must be between 1 and {MAX_WIDTH}, got {width}")


def static_move_order(width: int) -> tuple[int, ...]:
    """Columns ordered by distance to the centre, left before right on ties."""
    _check_width(width)
    centre = width // 2
    order = [centre]
    for offset in range(1, width):
        order.extend(c for c in (centre - offset, centre + offset) if 0 <= c < width)
    return tuple(order)


@lru_cache(maxsize=None)
def board_constants(width: int, height: int) -> BoardConstants:
    """Constants for a width x height board.

    Supported are widths 1 to 10 and heights 1 to 13 whose encoding,
    width * (height + 1) bits, fits in 64 bits.
    """
    _check_width(width)
    if not 1 <= height <= MAX_HEIGHT:
        raise ValueError(f"height must be between 1 and {MAX_HEIGHT}, got {height}")
    if width * (height + 1) > _MAX_BITS:
        raise ValueError(f"a {width}x{height} board does not fit in {_MAX_BITS} bits")

    stride = height + 1
    column = (1 << height) - 1

    def columns(cols: range) -> int:
        return sum(column << (c * stride) for c in cols)

    return BoardConstants(
        width=width,
        height=height,
        board_mask=columns(range(width)),
        left_board_mask=columns(range((width + 1) // 2)),
        right_board_mask=columns(range(width // 2, width)),
        bottom_mask=sum(1 << (c * stride) for c in range(width)),
        static_move_order=static_move_order(width),
    )