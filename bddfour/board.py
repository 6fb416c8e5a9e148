"""Bitboard representation of Connect 4 positions.

A position is a pair of integers ``(player, mask)``: ``mask`` holds every
stone on the board and ``player`` holds the stones of the side to move.
Cells are numbered column by column from the bottom, with one spare bit on
top of each column (see :mod:`bddfour.constants`).
"""

from __future__ import annotations

from collections.abc import Iterable

from .constants import board_constants

_MASK64 = 0xFFFFFFFFFFFFFFFF
_HIGHLIGHT = "\033[95m"
_RESET = "\033[0m"


class IllegalMoveError(ValueError):
    """Raised when a stone cannot be dropped into (or taken from) a column."""


class Connect4:
    """Move generation and position analysis for a width x height board."""

    def __init__(self, width: int = 7, height: int = 6) -> None:
        constants = board_constants(width, height)
        self.width = width
        self.height = height
        self.stride = height + 1
        self.board_mask = constants.board_mask
        self.left_board_mask = constants.left_board_mask
        self.right_board_mask = constants.right_board_mask
        self.bottom_mask = constants.bottom_mask
        self.static_move_order = constants.static_move_order

    def _check_column(self, col: int) -> None:
        if not 0 <= col < self.width:
            raise ValueError(f"column must be between 0 and {self.width - 1}, got {col}")

    def column_mask(self, col: int) -> int:
        """Mask of the playable cells of column col."""
        return ((1 << self.height) - 1) << (col * self.stride)

    def is_cell_set(self, pos: int, col: int, row: int) -> bool:
        return bool((pos >> (row + self.stride * col)) & 1)

    def alignment(self, pos: int) -> bool:
        """Whether pos holds four stones in a row in any direction."""
        h = self.height
        for shift in (h + 1, h, h + 2, 1):
            m = pos & (pos >> shift)
            if m & (m >> (2 * shift)):
                return True
        return False

    def is_terminal(self, player: int, mask: int) -> bool:
        """Whether the last move won the game or the board is full."""
        return self.alignment(player ^ mask) or mask == self.board_mask

    def ply(self, mask: int) -> int:
        """Number of stones on the board."""
        return mask.bit_count()

    def pseudo_legal_moves(self, mask: int) -> int:
        """The lowest free cell of each column; full columns spill into the spare bit."""
        return (mask + self.bottom_mask) & _MASK64

    def is_legal_move(self, mask: int, col: int) -> bool:
        self._check_column(col)
        return bool(self.pseudo_legal_moves(mask) & self.column_mask(col))

    def position_key(self, player: int, mask: int) -> int:
        """Key that identifies the position uniquely, whoever is to move."""
        pos = player if self.ply(mask) % 2 == 1 else player ^ mask
        return (((mask << 1) | self.bottom_mask) ^ pos) & _MASK64

    def winning_spots(self, position: int, mask: int) -> int:
        """Empty cells that would complete four in a row for the stones in position."""
        r = (position << 1) & (position << 2) & (position << 3)
        for d in (self.height + 1, self.height, self.height + 2):
            p = (position << d) & (position << (2 * d))
            r |= p & (position << (3 * d))
            r |= p & (position >> d)
            p = (position >> d) & (position >> (2 * d))
            r |= p & (position << d)
            r |= p & (position >> (3 * d))
        return r & (self.board_mask ^ mask)

    def flip(self, player: int, mask: int) -> tuple[int, int]:
        """The position mirrored left to right, as (player, mask)."""
        flipped_player = 0
        flipped_mask = 0
        for col in range(self.width):
            column = self.column_mask(col)
            target = (self.width - 1 - col) * self.stride
            source = col * self.stride
            flipped_mask |= ((mask & column) >> source) << target
            flipped_player |= ((player & column) >> source) << target
        return flipped_player, flipped_mask

    def play(self, player: int, mask: int, col: int) -> tuple[int, int]:
        """Drop a stone of the side to move into col and return the new position."""
        self._check_column(col)
        move = self.pseudo_legal_moves(mask) & self.column_mask(col)
        if not move:
            raise IllegalMoveError(f"column {col} is full")
        return player ^ mask, mask | move

    def undo(self, player: int, mask: int, col: int) -> tuple[int, int]:
        """Take the top stone out of col and return the previous position."""
        self._check_column(col)
        column = self.column_mask(col)
        if not mask & column:
            raise IllegalMoveError(f"column {col} is empty")
        move = self.pseudo_legal_moves(mask >> 1) & column
        mask &= ~move
        return player ^ mask, mask

    def play_sequence(self, moves: str | Iterable[int]) -> tuple[int, int]:
        """Position reached from the empty board by playing moves, digits or ints."""
        player = mask = 0
        for move in moves:
            col = ord(move) - ord("0") if isinstance(move, str) else move
            player, mask = self.play(player, mask, col)
        return player, mask

    def render(self, player: int, mask: int, highlight_col: int | None = None) -> str:
        """Text picture of the position, x moving first, with a few statistics."""
        cnt = self.ply(mask)
        to_play = cnt % 2
        side = "x" if to_play == 0 else "o"
        term = int(self.is_terminal(player, mask))
        lines = [f"Connect4 width={self.width} x height={self.height}"]
        for i in range(self.height - 1, -1, -1):
            row = []
            for j in range(self.width):
                cell = ""
                if j == highlight_col and not (mask >> (i + 1 + self.stride * j)) & 1:
                    cell += _HIGHLIGHT
                bit = i + self.stride * j
                if (mask >> bit) & 1:
                    cell += " x" if ((player >> bit) & 1) != to_play else " o"
                else:
                    cell += " ."
                if j == highlight_col:
                    cell += _RESET
                row.append(cell)
            line = "".join(row)
            if i == 0:
                line += f"  is terminal: {term}"
            elif i == 1:
                line += f"  side to move: {side}"
            elif i == 2:
                line += f"  stones played: {cnt}"
            lines.append(line)
        lines.append("".join(f" {j}" for j in range(self.width)))
        return "\n".join(lines)

    def format_mask(self, mask: int) -> str:
        """Grid of the bits of mask, spare row included, followed by its value."""
        lines = []
        for i in range(self.height, -1, -1):
            lines.append(
                "".join(
                    "1 " if (mask >> (i + self.stride * j)) & 1 else "0 "
                    for j in range(self.width)
                )
            )
        lines.append(f"0x{mask:x}")
        return "\n".join(lines) + "\n"