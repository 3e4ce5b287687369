"""
Polyomino packing game engine package.

This package contains the core game logic, including:
- Piece catalog with rotations and reflections
- Board with per-cell legality flags and reversible placement
- Legal move generation
- End-of-game evaluation heuristic
- Game adapter for the tree search
"""

from .board import Board, Move, Placement
from .evaluation import Evaluation, evaluate, score_board
from .game import PackingGame
from .pieces import Piece, compute_pieces, generate_orientations
from .render import render_board

__all__ = [
    'Board', 'Move', 'Placement',
    'Piece', 'compute_pieces', 'generate_orientations',
    'Evaluation', 'evaluate', 'score_board',
    'PackingGame',
    'render_board',
]
