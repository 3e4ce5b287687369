"""
Smoke tests for the blokus-search command line entry point.
"""

import logging

import pytest

from scripts.run_search import build_config, create_arg_parser, main


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    for handler in root.handlers[:]:
        root.removeHandler(handler)
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)


def test_small_search_runs():
    argv = [
        "--rows", "4", "--cols", "4", "--max-piece-size", "2",
        "--seed", "1", "--max-iterations", "10", "--no-color", "--log-level", "WARNING",
    ]
    assert main(argv) == 0


def test_two_player_example_runs():
    argv = [
        "--rows", "14", "--cols", "14", "--homes", "0,0", "13,13",
        "--seed", "7", "--max-iterations", "2", "--log-level", "WARNING",
    ]
    assert main(argv) == 0


def test_homes_option():
    args = create_arg_parser().parse_args(["--rows", "14", "--cols", "14", "--homes", "0,0", "13,13"])
    config = build_config(args)
    assert config.homes == [(0, 0), (13, 13)]
    assert config.num_players == 2


def test_malformed_home_rejected():
    with pytest.raises(SystemExit):
        create_arg_parser().parse_args(["--homes", "0-0"])


def test_show_pieces(capsys):
    assert main(["--max-piece-size", "3", "--show-pieces"]) == 0
    out = capsys.readouterr().out
    assert "#0 (1 orientations)" in out
    assert "#3 (4 orientations)" in out


def test_cli_overrides_config_file(tmp_path):
    path = tmp_path / "search.yaml"
    path.write_text("rows: 8\ncols: 8\nmax_piece_size: 3\nseed: 3\n")
    args = create_arg_parser().parse_args(["--config", str(path), "--seed", "11"])
    config = build_config(args)
    assert config.rows == 8
    assert config.seed == 11


def test_log_dir_creates_log_file(tmp_path):
    argv = [
        "--rows", "3", "--cols", "3", "--max-piece-size", "1",
        "--seed", "2", "--max-iterations", "3", "--log-dir", str(tmp_path),
    ]
    assert main(argv) == 0
    assert list(tmp_path.glob("*_search/search.log"))
