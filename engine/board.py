"""
Board with per-cell legality flags for corner-only same-colour placement.

Each empty cell carries two bits per colour:
- CORNER: the cell touches that colour diagonally (or is its home cell)
- BLOCKED: the cell touches that colour along an edge

A placement is legal for a colour when the OR of the flags under its
footprint has that colour's CORNER bit set and its BLOCKED bit clear.
Occupied cells hold a sentinel that is BLOCKED for every colour, so the
same test also rules out overlaps.
"""

import logging
from dataclasses import dataclass
from typing import Iterator, List, Optional, Sequence, Tuple

import numpy as np

from .pieces import Offset, Piece

logger = logging.getLogger(__name__)

MAX_PLAYERS = 4

CORNER = 1
BLOCKED = 2
OCCUPIED = BLOCKED | (BLOCKED << 2) | (BLOCKED << 4) | (BLOCKED << 6)

EMPTY = 0

CARDINAL_DIRECTIONS: Tuple[Offset, ...] = ((-1, 0), (0, -1), (0, 1), (1, 0))
DIAGONAL_DIRECTIONS: Tuple[Offset, ...] = ((-1, -1), (1, -1), (-1, 1), (1, 1))


def corner_bit(color: int) -> int:
    return CORNER << (2 * color)


def blocked_bit(color: int) -> int:
    return BLOCKED << (2 * color)


@dataclass(frozen=True)
class Move:
    """A legal placement for the colour to move."""
    piece_id: int
    orientation: int
    offset: int  # flat index of the top-left of the bounding box


@dataclass(frozen=True)
class Placement:
    """A history record of a placed piece."""
    color: int
    piece_id: int
    orientation: int
    offset: int


class PieceVariation:
    """One orientation of a piece, laid out for a board of a given width."""

    def __init__(self, cells: Sequence[Offset], board_cols: int):
        self.cells = tuple(cells)
        self.height = max(r for r, c in self.cells) + 1
        self.width = max(c for r, c in self.cells) + 1
        self.indices = np.array([r * board_cols + c for r, c in self.cells], dtype=np.int64)

    def fits(self, offset: int, rows: int, cols: int) -> bool:
        """Whether the bounding box anchored at offset stays inside the grid."""
        if not 0 <= offset < rows * cols:
            return False
        row, col = divmod(offset, cols)
        return row + self.height <= rows and col + self.width <= cols

    def translation(self, offset: int) -> List[int]:
        return [int(i) + offset for i in self.indices]


def _shifted(mask: np.ndarray, dr: int, dc: int) -> np.ndarray:
    """out[r, c] = mask[r + dr, c + dc], False where that falls off the grid."""
    rows, cols = mask.shape
    out = np.zeros_like(mask)
    out[max(-dr, 0):rows - max(dr, 0), max(-dc, 0):cols - max(dc, 0)] = \
        mask[max(dr, 0):rows - max(-dr, 0), max(dc, 0):cols - max(-dc, 0)]
    return out


class Board:
    """
    Rectangular board shared by up to four colours.

    The grid is stored flat: cell i is at row i // cols, column i % cols.
    - 0 represents empty space
    - color + 1 represents a cell occupied by that colour
    """

    def __init__(self, pieces: Sequence[Piece], rows: int, cols: int, homes: Sequence[Offset]):
        if rows < 1 or cols < 1:
            raise ValueError(f"Board must be at least 1x1, got {rows}x{cols}")
        if not 1 <= len(homes) <= MAX_PLAYERS:
            raise ValueError(f"Need between 1 and {MAX_PLAYERS} home cells, got {len(homes)}")
        for row, col in homes:
            if not (0 <= row < rows and 0 <= col < cols):
                raise ValueError(f"Home cell ({row}, {col}) is outside the {rows}x{cols} board")

        self.rows = rows
        self.cols = cols
        self.pieces = list(pieces)
        self.variations: List[List[PieceVariation]] = [
            [PieceVariation(cells, cols) for cells in piece.orientations()]
            for piece in self.pieces
        ]
        self.homes = [row * cols + col for row, col in homes]
        self.grid = np.zeros(rows * cols, dtype=np.int8)
        self.flags = np.zeros(rows * cols, dtype=np.uint8)
        # positions[c][p] is (orientation, offset) once colour c has placed piece p
        self.positions: List[List[Optional[Tuple[int, int]]]] = [
            [None] * len(self.pieces) for _ in self.homes
        ]
        self._history: List[Placement] = []
        self._update_home_flags()

    @property
    def num_players(self) -> int:
        return len(self.homes)

    @property
    def size(self) -> int:
        return self.rows * self.cols

    @property
    def history(self) -> Tuple[Placement, ...]:
        return tuple(self._history)

    def index(self, row: int, col: int) -> int:
        return row * self.cols + col

    def coord(self, i: int) -> Offset:
        return divmod(i, self.cols)

    def at(self, i: int) -> Optional[int]:
        """Colour occupying cell i, or None if it is empty."""
        value = int(self.grid[i])
        if value == EMPTY:
            return None
        return value - 1

    def occupied_count(self) -> int:
        return int(np.count_nonzero(self.grid))

    def position(self, color: int, piece_id: int) -> Optional[Tuple[int, int]]:
        return self.positions[color][piece_id]

    def cardinal_neighbors(self, i: int) -> Iterator[int]:
        """In-bounds edge neighbours: up, left, right, down."""
        return self._neighbors(i, CARDINAL_DIRECTIONS)

    def diagonal_neighbors(self, i: int) -> Iterator[int]:
        """In-bounds corner neighbours: up-left, down-left, up-right, down-right."""
        return self._neighbors(i, DIAGONAL_DIRECTIONS)

    def _neighbors(self, i: int, directions: Sequence[Offset]) -> Iterator[int]:
        row, col = divmod(i, self.cols)
        for dr, dc in directions:
            r, c = row + dr, col + dc
            if 0 <= r < self.rows and 0 <= c < self.cols:
                yield r * self.cols + c

    def footprint(self, piece_id: int, orientation: int, offset: int) -> List[int]:
        return self.variations[piece_id][orientation].translation(offset)

    def _check_color(self, color: int) -> None:
        if not 0 <= color < self.num_players:
            raise ValueError(f"Color {color} out of range for {self.num_players} players")

    # ------------------------------------------------------------------
    # Flags
    # ------------------------------------------------------------------
    def compute_flag(self, i: int) -> int:
        """Flag of a single cell, derived from its neighbours only."""
        if self.grid[i] != EMPTY:
            return OCCUPIED
        flag = 0
        for j in self.cardinal_neighbors(i):
            color = self.at(j)
            if color is not None:
                flag |= blocked_bit(color)
        for j in self.diagonal_neighbors(i):
            color = self.at(j)
            if color is not None:
                flag |= corner_bit(color)
        return flag

    def _recompute_flags(self) -> None:
        """Rebuild every cell's flag from the grid, then re-add home bonuses."""
        grid = self.grid.reshape(self.rows, self.cols)
        flags = np.zeros((self.rows, self.cols), dtype=np.uint8)
        for color in range(self.num_players):
            mask = grid == color + 1
            if not mask.any():
                continue
            for dr, dc in CARDINAL_DIRECTIONS:
                flags[_shifted(mask, dr, dc)] |= blocked_bit(color)
            for dr, dc in DIAGONAL_DIRECTIONS:
                flags[_shifted(mask, dr, dc)] |= corner_bit(color)
        flags[grid != EMPTY] = OCCUPIED
        self.flags = flags.reshape(-1)
        self._update_home_flags()

    def _update_home_flags(self) -> None:
        for color, i in enumerate(self.homes):
            if not self.flags[i] & blocked_bit(color):
                self.flags[i] |= corner_bit(color)

    # ------------------------------------------------------------------
    # Moves
    # ------------------------------------------------------------------
    def legal_moves(self, color: int) -> List[Move]:
        """
        Get all legal moves for a colour.

        Moves are ordered by piece id, then orientation id, then anchor
        offset in row-major order.

        Args:
            color: Colour to generate moves for

        Returns:
            List of legal moves (possibly empty)
        """
        self._check_color(color)
        flags = self.flags.reshape(self.rows, self.cols)
        test_flags = corner_bit(color) | blocked_bit(color)
        required = corner_bit(color)

        moves = []
        for piece_id, variations in enumerate(self.variations):
            if self.position(color, piece_id) is not None:
                continue
            for orientation, variation in enumerate(variations):
                span_rows = self.rows - variation.height + 1
                span_cols = self.cols - variation.width + 1
                if span_rows <= 0 or span_cols <= 0:
                    continue
                union = np.zeros((span_rows, span_cols), dtype=np.uint8)
                for r, c in variation.cells:
                    union |= flags[r:r + span_rows, c:c + span_cols]
                ys, xs = np.nonzero((union & test_flags) == required)
                for y, x in zip(ys, xs):
                    moves.append(Move(piece_id, orientation, int(y) * self.cols + int(x)))
        logger.debug(f"Legal moves: color={color}, count={len(moves)}")
        return moves

    def is_legal(self, color: int, move: Move) -> bool:
        """Check a single move cell by cell against the current flags."""
        self._check_color(color)
        if self.position(color, move.piece_id) is not None:
            return False
        variation = self.variations[move.piece_id][move.orientation]
        if not variation.fits(move.offset, self.rows, self.cols):
            return False
        flag_union = 0
        for i in variation.translation(move.offset):
            flag_union |= int(self.flags[i])
        return (flag_union & (corner_bit(color) | blocked_bit(color))) == corner_bit(color)

    def apply(self, color: int, piece_id: int, orientation: int, offset: int) -> None:
        """
        Place a piece. Only moves returned by legal_moves may be applied.

        Raises:
            ValueError: color is out of range
            RuntimeError: the piece is already placed, runs off the board or
                is not a legal placement for the colour
        """
        self._check_color(color)
        if self.position(color, piece_id) is not None:
            raise RuntimeError(f"Piece {piece_id} already placed for color {color}")
        if not self.variations[piece_id][orientation].fits(offset, self.rows, self.cols):
            raise RuntimeError(
                f"Piece {piece_id} orientation {orientation} at {self.coord(offset)} "
                f"runs off the {self.rows}x{self.cols} board"
            )
        if not self.is_legal(color, Move(piece_id, orientation, offset)):
            raise RuntimeError(
                f"Illegal placement of piece {piece_id} orientation {orientation} "
                f"at {self.coord(offset)} for color {color}"
            )
        self._write_piece(piece_id, orientation, offset, EMPTY, color + 1)
        self.positions[color][piece_id] = (orientation, offset)
        self._history.append(Placement(color, piece_id, orientation, offset))

    def undo(self) -> Placement:
        """
        Remove the most recent placement.

        Raises:
            IndexError: nothing has been placed
            RuntimeError: the position table disagrees with the history
        """
        if not self._history:
            raise IndexError("No moves to undo")
        placement = self._history.pop()
        expected = (placement.orientation, placement.offset)
        recorded = self.position(placement.color, placement.piece_id)
        if recorded != expected:
            raise RuntimeError(
                f"Position table mismatch for color {placement.color}, "
                f"piece {placement.piece_id}: {recorded} != {expected}"
            )
        self.positions[placement.color][placement.piece_id] = None
        self._write_piece(
            placement.piece_id, placement.orientation, placement.offset,
            placement.color + 1, EMPTY,
        )
        return placement

    def _write_piece(self, piece_id: int, orientation: int, offset: int, prev: int, new: int) -> None:
        cells = self.footprint(piece_id, orientation, offset)
        for i in cells:
            if self.grid[i] != prev:
                raise RuntimeError(
                    f"Cell {self.coord(i)} holds {int(self.grid[i])}, expected {prev}"
                )
        self.grid[cells] = new
        self._recompute_flags()

    def __str__(self) -> str:
        """String representation of the board."""
        result = []
        for row in range(self.rows):
            row_str = ""
            for col in range(self.cols):
                value = self.grid[row * self.cols + col]
                if value == EMPTY:
                    row_str += "."
                else:
                    row_str += str(value - 1)
            result.append(row_str)
        return "\n".join(result)
