"""
Tests for end-of-game board evaluation and rendering.
"""

import unittest

from engine.board import Board
from engine.evaluation import Evaluation, evaluate, score_board
from engine.pieces import compute_pieces
from engine.render import EMPTY_CELL, FILLED_CELL, render_board


def board_with(rows, cols, occupied, color=0):
    """Board with the given flat cells filled by one colour."""
    board = Board(compute_pieces(1), rows, cols, [(0, 0)])
    for i in occupied:
        board.grid[i] = color + 1
    return board


class TestEvaluation(unittest.TestCase):

    def test_empty_board(self):
        board = board_with(3, 3, [])
        self.assertEqual(evaluate(board), Evaluation(0, 1, 1))
        self.assertEqual(score_board(board), -4.0)

    def test_center_occupied(self):
        # the ring around the centre is still one edge-connected region
        board = board_with(3, 3, [4])
        self.assertEqual(evaluate(board), Evaluation(1, 1, 1))
        self.assertEqual(score_board(board), -3.0)

    def test_edge_midpoints_occupied(self):
        board = board_with(3, 3, [1, 3, 5, 7])
        self.assertEqual(evaluate(board), Evaluation(4, 1, 5))
        self.assertEqual(score_board(board), -4.0)

    def test_diagonal_pair(self):
        board = board_with(2, 2, [1, 2])
        self.assertEqual(evaluate(board), Evaluation(2, 1, 2))
        self.assertEqual(score_board(board), -3.0)

    def test_separated_regions(self):
        board = board_with(1, 3, [1])
        self.assertEqual(evaluate(board), Evaluation(1, 2, 2))
        self.assertEqual(score_board(board), -7.0)

    def test_full_board(self):
        board = board_with(2, 2, [0, 1, 2, 3])
        self.assertEqual(evaluate(board), Evaluation(4, 0, 0))
        self.assertEqual(score_board(board), 4.0)

    def test_colors_do_not_matter(self):
        mixed = board_with(3, 3, [1, 3])
        mixed.grid[5] = 2
        mixed.grid[7] = 3
        self.assertEqual(evaluate(mixed), evaluate(board_with(3, 3, [1, 3, 5, 7])))

    def test_evaluate_leaves_board_untouched(self):
        board = board_with(3, 3, [4])
        before = board.grid.copy()
        evaluate(board)
        self.assertEqual(list(board.grid), list(before))

    def test_value_type(self):
        self.assertIsInstance(Evaluation(3, 1, 1).value, float)


class TestRender(unittest.TestCase):

    def test_plain_rendering(self):
        board = board_with(2, 2, [0])
        self.assertEqual(render_board(board, color=False), "0.\n..")

    def test_colored_rendering(self):
        board = board_with(1, 2, [1], color=2)
        self.assertEqual(render_board(board), EMPTY_CELL + f"\x1b[33m{FILLED_CELL}\x1b[0m")


if __name__ == "__main__":
    unittest.main()
