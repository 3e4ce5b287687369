"""
End-of-game board evaluation.

Score = occupied cells - 3 * (8-connected empty regions) - (4-connected empty regions).

Covering more cells is rewarded; leaving the empty space split into many
pockets is penalized, splits that are not even diagonally connected most.
"""

from dataclasses import dataclass
from typing import Callable

import numpy as np

from .board import Board

_OCCUPIED = 1
_VISITED = 2


@dataclass(frozen=True)
class Evaluation:
    occupied: int
    eightway_components: int
    cardinal_components: int

    @property
    def value(self) -> float:
        return float(self.occupied - 3 * self.eightway_components - self.cardinal_components)


def evaluate(board: Board) -> Evaluation:
    """
    Count occupied cells and empty regions with a two-level flood fill.

    Each 8-connected empty region is partitioned into its 4-connected
    sub-regions while it is being filled: cardinal neighbours continue the
    current sub-region, diagonal neighbours are queued as seeds for the next
    sub-region of the same 8-connected region.

    Args:
        board: Board to evaluate

    Returns:
        Evaluation with the three counts
    """
    marks = np.zeros(board.size, dtype=np.uint8)
    marks[board.grid != 0] = _OCCUPIED
    occupied_count = board.occupied_count()

    eightway_count = 0
    cardinal_count = 0
    for start in np.flatnonzero(marks == 0):
        if marks[start]:
            continue
        eightway_count += 1
        eightway_stack = [int(start)]
        while eightway_stack:
            seed = eightway_stack.pop()
            if marks[seed]:
                continue
            cardinal_count += 1
            cardinal_stack = [seed]
            while cardinal_stack:
                i = cardinal_stack.pop()
                if marks[i]:
                    continue
                marks[i] |= _VISITED
                for j in board.cardinal_neighbors(i):
                    if not marks[j]:
                        cardinal_stack.append(j)
                for j in board.diagonal_neighbors(i):
                    if not marks[j]:
                        eightway_stack.append(j)

    return Evaluation(occupied_count, eightway_count, cardinal_count)


def score_board(board: Board) -> float:
    """Default heuristic used by the game adapter."""
    return evaluate(board).value


Heuristic = Callable[[Board], float]
