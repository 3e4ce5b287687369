"""
Tests for the turn-taking game adapter.
"""

import unittest
from unittest import mock

from engine.board import Placement
from engine.evaluation import score_board
from engine.game import PackingGame
from tests.utils_game_states import make_board


class TestPackingGame(unittest.TestCase):
    """Test turn rotation, move selection and undo."""

    def setUp(self):
        self.board = make_board(rows=4, cols=4, homes=[(0, 0), (3, 3)], max_piece_size=2)
        self.game = PackingGame(self.board, color_output=False)

    def test_initial_state(self):
        self.assertEqual(self.game.count, 0)
        self.assertEqual(self.game.current_color, 0)
        # monomino plus both domino orientations at the home corner
        self.assertEqual(self.game.move_count(), 3)

    def test_turns_rotate(self):
        self.game.select_move(0)
        self.assertEqual(self.game.current_color, 1)
        self.assertEqual(self.board.history[-1].color, 0)
        self.game.select_move(0)
        self.assertEqual(self.game.current_color, 0)
        self.assertEqual(self.board.history[-1].color, 1)

    def test_select_move_applies_listed_move(self):
        move = self.game.legal_moves()[2]
        self.game.select_move(2)
        self.assertEqual(
            self.board.history,
            (Placement(0, move.piece_id, move.orientation, move.offset),)
        )

    def test_select_move_out_of_range(self):
        with self.assertRaises(IndexError):
            self.game.select_move(3)
        with self.assertRaises(IndexError):
            self.game.select_move(-1)
        self.assertEqual(self.game.count, 0)

    def test_undo(self):
        self.game.select_move(1)
        self.game.undo()
        self.assertEqual(self.game.count, 0)
        self.assertEqual(self.board.history, ())
        self.assertEqual(self.game.move_count(), 3)

    def test_undo_at_start(self):
        with self.assertRaises(IndexError):
            self.game.undo()

    def test_moves_refresh_after_selection(self):
        first = self.game.legal_moves()
        self.assertIs(self.game.legal_moves(), first)
        self.game.select_move(0)
        self.assertEqual(self.game.legal_moves(), self.board.legal_moves(1))

    def test_colors_without_moves_yield_zero(self):
        board = make_board(rows=1, cols=1, homes=[(0, 0)], max_piece_size=1)
        game = PackingGame(board, color_output=False)
        game.select_move(0)
        self.assertEqual(game.move_count(), 0)


class TestBestTracking(unittest.TestCase):
    """Test value() bookkeeping of the best position."""

    def setUp(self):
        self.board = make_board(rows=4, cols=4, homes=[(0, 0), (3, 3)], max_piece_size=2)
        self.game = PackingGame(self.board, color_output=False)

    def test_value_uses_heuristic(self):
        self.assertEqual(self.game.value(), score_board(self.board))
        game = PackingGame(self.board, heuristic=lambda board: 42.0)
        self.assertEqual(game.value(), 42.0)

    def test_best_is_recorded(self):
        self.game.select_move(0)
        with self.assertLogs("engine.game", level="INFO") as logs:
            value = self.game.value()
        self.assertEqual(self.game.best_value, value)
        self.assertEqual(self.game.best_placements, self.board.history)
        self.assertEqual(self.game.best_rendering, str(self.board))
        self.assertIn("occupied = 1", logs.output[0])

    def test_worse_value_keeps_best(self):
        game = PackingGame(self.board, heuristic=lambda board: float(board.occupied_count()))
        game.select_move(0)
        game.value()
        best = game.best_placements
        game.undo()
        self.assertEqual(game.value(), 0.0)
        self.assertEqual(game.best_value, 1.0)
        self.assertEqual(game.best_placements, best)

    def test_far_below_best_not_reported(self):
        values = iter([10.0, 0.0])
        game = PackingGame(self.board, heuristic=lambda board: next(values), report_margin=2.0)
        game.value()
        with mock.patch.object(game, "_report") as report:
            game.value()
        report.assert_not_called()

    def test_custom_heuristic_report(self):
        game = PackingGame(self.board, heuristic=lambda board: 100.0, color_output=False)
        with mock.patch("engine.game.evaluate") as breakdown:
            with self.assertLogs("engine.game", level="INFO") as logs:
                game.value()
        breakdown.assert_not_called()
        self.assertTrue(logs.output[0].startswith("INFO:engine.game:value = 100.0"))
        self.assertNotIn("occupied", logs.output[0])

    def test_near_best_reported(self):
        values = iter([10.0, 9.0])
        game = PackingGame(self.board, heuristic=lambda board: next(values), report_margin=2.0)
        game.value()
        with self.assertLogs("engine.game", level="INFO"):
            game.value()
        self.assertEqual(game.best_value, 10.0)


if __name__ == "__main__":
    unittest.main()
