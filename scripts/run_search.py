#!/usr/bin/env python3
"""
Run the packing tree search from the command line.

Examples:
    blokus-search --rows 14 --cols 14 --homes 0,0 13,13 --seed 7 --max-iterations 2000
    blokus-search --config configs/search.yaml --log-dir runs
"""

import argparse
import logging
import sys
from typing import List, Optional, Tuple

from engine.board import Board
from engine.game import PackingGame
from engine.pieces import compute_pieces, format_piece
from mcts.treesearch import TreeSearch
from schemas.config import LOG_LEVELS, SearchConfig
from utils.logging_setup import setup_logging
from utils.seeds import make_rng

logger = logging.getLogger(__name__)

OVERRIDABLE = (
    "rows", "cols", "homes", "max_piece_size", "speed", "seed", "max_iterations", "time_limit", "log_dir"
)


def parse_cell(text: str) -> Tuple[int, int]:
    """Parse a 'row,col' home cell."""
    try:
        row, col = (int(part) for part in text.split(","))
    except ValueError:
        raise argparse.ArgumentTypeError(f"Expected ROW,COL but got {text!r}")
    return row, col


def create_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Search for high-scoring polyomino packings",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )
    parser.add_argument("--config", type=str, default=None,
                        help="Path to YAML or JSON config file (CLI args override it)")
    parser.add_argument("--rows", type=int, default=None, help="Board height (default 20)")
    parser.add_argument("--cols", type=int, default=None, help="Board width (default 20)")
    parser.add_argument("--homes", type=parse_cell, nargs="+", default=None, metavar="ROW,COL",
                        help="Home cells, one per player (default: the four corners)")
    parser.add_argument("--max-piece-size", type=int, default=None, help="Largest piece size (default 5)")
    parser.add_argument("--speed", type=float, default=None,
                        help="Temperature increase per iteration (default 1e-5)")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument("--max-iterations", type=int, default=None, help="Stop after N iterations")
    parser.add_argument("--time-limit", type=float, default=None, help="Stop after N seconds")
    parser.add_argument("--log-level", type=str, default=None, choices=LOG_LEVELS)
    parser.add_argument("--log-dir", type=str, default=None, help="Also write logs to a run directory here")
    parser.add_argument("--show-pieces", action="store_true", help="Print the piece catalog and exit")
    parser.add_argument("--no-color", action="store_true", help="Render boards without ANSI colours")
    return parser


def build_config(args: argparse.Namespace) -> SearchConfig:
    config_dict = SearchConfig.read_file(args.config) if args.config else {}
    for key in OVERRIDABLE:
        value = getattr(args, key)
        if value is not None:
            config_dict[key] = value
    if args.log_level is not None:
        config_dict["log_level"] = args.log_level
    return SearchConfig.from_dict(config_dict)


def main(argv: Optional[List[str]] = None) -> int:
    args = create_arg_parser().parse_args(argv)
    config = build_config(args)
    setup_logging(getattr(logging, config.log_level.upper()), config.log_dir)

    pieces = compute_pieces(config.max_piece_size)
    if args.show_pieces:
        for piece_id, piece in enumerate(pieces):
            print(f"#{piece_id} ({len(piece.orientations())} orientations)")
            print(format_piece(piece))
            print()
        return 0

    config.log_config(logger)
    rng = make_rng(config.seed)
    board = Board(pieces, config.rows, config.cols, config.homes)
    game = PackingGame(board, report_margin=config.report_margin, color_output=not args.no_color)
    search = TreeSearch(game, rng, config.speed)

    try:
        stats = search.run(max_iterations=config.max_iterations, time_limit=config.time_limit)
        logger.info(
            f"Search finished after {stats.iterations} iterations in {stats.elapsed:.1f}s "
            f"({stats.nodes} nodes, exhausted={stats.exhausted})"
        )
    except KeyboardInterrupt:
        logger.info(f"Interrupted after {search.iterations} iterations")

    if game.best_rendering is not None:
        logger.info(f"Best value {game.best_value} with {len(game.best_placements)} pieces\n{game.best_rendering}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
