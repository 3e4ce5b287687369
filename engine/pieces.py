"""
Polyomino piece catalog with all rotations/reflections of every shape.

Pieces are grown cell by cell from the monomino, so the catalog for a
maximum size of 5 is exactly the 21 classic pieces.
"""

from dataclasses import dataclass
from typing import Iterable, Iterator, List, Sequence, Tuple

import numpy as np

Offset = Tuple[int, int]  # (row, col)


def shape_to_offsets(shape: np.ndarray) -> List[Offset]:
    """
    Convert a numpy shape array to a list of (row, col) offsets.

    Args:
        shape: 2D numpy array with 1s where cells are occupied

    Returns:
        List of (row, col) tuples for occupied cells, in row-major order
    """
    rows, cols = np.nonzero(shape)
    return [(int(r), int(c)) for r, c in zip(rows, cols)]


def offsets_to_shape(offsets: Iterable[Offset]) -> np.ndarray:
    """Convert normalized offsets back to a dense 0/1 numpy array."""
    offsets = list(offsets)
    if not offsets:
        return np.zeros((0, 0), dtype=np.int8)
    height = max(r for r, c in offsets) + 1
    width = max(c for r, c in offsets) + 1
    shape = np.zeros((height, width), dtype=np.int8)
    for r, c in offsets:
        shape[r, c] = 1
    return shape


def normalize_offsets(offsets: Iterable[Offset]) -> List[Offset]:
    """
    Normalize offsets so that min_row = 0 and min_col = 0 (anchor at (0,0)).

    Args:
        offsets: List of (row, col) tuples

    Returns:
        Normalized list of offsets, sorted for canonical ordering
    """
    offsets = list(offsets)
    if not offsets:
        return []

    min_row = min(r for r, c in offsets)
    min_col = min(c for r, c in offsets)

    normalized = [(r - min_row, c - min_col) for r, c in offsets]
    return sorted(normalized)


def generate_orientations(offsets: Iterable[Offset]) -> List[Tuple[Offset, ...]]:
    """
    Generate all unique orientations of a shape.

    The four quarter turns of the shape and of its mirror image are
    normalized, deduplicated and returned in ascending order, so the
    orientation index of a variation is stable for a given shape.

    Args:
        offsets: Cells of the shape, any translation

    Returns:
        Sorted list of distinct orientations, each a sorted offsets tuple
    """
    base_shape = offsets_to_shape(normalize_offsets(offsets))
    if base_shape.size == 0:
        return []

    shape_variants = []
    for shape in (base_shape, np.fliplr(base_shape)):
        for turns in range(4):
            shape_variants.append(np.rot90(shape, turns))

    seen = set()
    for shape in shape_variants:
        seen.add(tuple(normalize_offsets(shape_to_offsets(shape))))
    return sorted(seen)


@dataclass(frozen=True, order=True)
class Piece:
    """A free polyomino, stored as sorted normalized (row, col) offsets."""
    offsets: Tuple[Offset, ...]

    def __post_init__(self):
        """Validate piece after initialization."""
        if not self.offsets:
            raise ValueError("Piece must have at least one cell")
        if list(self.offsets) != normalize_offsets(self.offsets):
            raise ValueError(f"Piece offsets are not normalized: {self.offsets}")

    @classmethod
    def from_offsets(cls, offsets: Iterable[Offset]) -> "Piece":
        return cls(tuple(normalize_offsets(offsets)))

    @property
    def size(self) -> int:
        return len(self.offsets)

    @property
    def height(self) -> int:
        return max(r for r, c in self.offsets) + 1

    @property
    def width(self) -> int:
        return max(c for r, c in self.offsets) + 1

    def orientations(self) -> List[Tuple[Offset, ...]]:
        return generate_orientations(self.offsets)

    def canonical(self) -> "Piece":
        """The smallest orientation, used to identify the free shape."""
        return Piece(self.orientations()[0])

    def grow(self) -> Iterator["Piece"]:
        """Yield every shape made by adding one edge-adjacent cell."""
        cells = set(self.offsets)
        for r, c in self.offsets:
            for dr, dc in [(-1, 0), (1, 0), (0, -1), (0, 1)]:
                cell = (r + dr, c + dc)
                if cell not in cells:
                    yield Piece.from_offsets(self.offsets + (cell,))


def compute_pieces(max_piece_size: int) -> List[Piece]:
    """
    Enumerate all free polyominoes with 1..max_piece_size cells.

    Pieces come grouped by size, smallest first; within a size they are
    sorted by canonical form.

    Args:
        max_piece_size: Largest piece size to include (>= 1)

    Returns:
        List of canonical pieces
    """
    if max_piece_size < 1:
        raise ValueError(f"max_piece_size must be at least 1, got {max_piece_size}")

    result: List[Piece] = []
    generation = [Piece(((0, 0),))]
    for _ in range(1, max_piece_size):
        result.extend(generation)
        grown = {child.canonical() for piece in generation for child in piece.grow()}
        generation = sorted(grown)
    result.extend(generation)
    return result


def required_cells(pieces: Sequence[Piece], num_players: int) -> int:
    """Cells needed for every player to place its full set of pieces."""
    return num_players * sum(piece.size for piece in pieces)


def format_piece(piece: Piece) -> str:
    """Draw a piece with 'x' for occupied cells."""
    shape = offsets_to_shape(piece.offsets)
    lines = ["".join("x" if cell else " " for cell in row).rstrip() for row in shape]
    return "\n".join(lines)
