"""
Game adapter binding the board to the generic tree search.

Colours move in fixed rotation (move number mod player count). The
adapter exposes exactly the operations the search needs: undo,
move_count, select_move and value.
"""

import logging
from typing import List, Optional, Tuple

from .board import Board, Move, Placement
from .evaluation import Heuristic, evaluate, score_board
from .render import render_board

logger = logging.getLogger(__name__)


class PackingGame:
    """
    Turn-taking view of a Board for the tree search.

    Also keeps track of the best evaluated position seen so far and logs
    positions that come close to it.
    """

    def __init__(
        self,
        board: Board,
        heuristic: Heuristic = score_board,
        report_margin: float = 2.0,
        color_output: bool = True,
    ):
        self.board = board
        self.heuristic = heuristic
        self.report_margin = report_margin
        self.color_output = color_output
        self.count = 0
        self.best_value = float("-inf")
        self.best_placements: Tuple[Placement, ...] = ()
        self.best_rendering: Optional[str] = None
        self._moves: Optional[List[Move]] = None

    @property
    def current_color(self) -> int:
        return self.count % self.board.num_players

    def legal_moves(self) -> List[Move]:
        """Legal moves for the colour to move, cached until the position changes."""
        if self._moves is None:
            self._moves = self.board.legal_moves(self.current_color)
        return self._moves

    def undo(self) -> None:
        self.board.undo()
        self.count -= 1
        self._moves = None

    def move_count(self) -> int:
        return len(self.legal_moves())

    def select_move(self, i: int) -> None:
        moves = self.legal_moves()
        if not 0 <= i < len(moves):
            raise IndexError(f"Only {len(moves)} moves but tried to select number {i}")
        move = moves[i]
        self.board.apply(self.current_color, move.piece_id, move.orientation, move.offset)
        self.count += 1
        self._moves = None

    def value(self) -> float:
        value = self.heuristic(self.board)
        if value >= self.best_value - self.report_margin:
            if value > self.best_value:
                self.best_value = value
                self.best_placements = self.board.history
                self.best_rendering = render_board(self.board, color=self.color_output)
            self._report(value)
        return value

    def _report(self, value: float) -> None:
        rendering = render_board(self.board, color=self.color_output)
        if self.heuristic is not score_board:
            logger.info(f"value = {value}\n{rendering}")
            return
        breakdown = evaluate(self.board)
        logger.info(
            f"occupied = {breakdown.occupied}, eightway = {breakdown.eightway_components}, "
            f"cardinal = {breakdown.cardinal_components}, value = {value}\n"
            f"{rendering}"
        )
