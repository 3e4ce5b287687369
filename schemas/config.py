"""
Search configuration.

Configuration can be provided via CLI arguments or YAML/JSON config files.
Invalid setups (too many homes, homes off the board, a board too small
for every piece) are rejected when the model is built.
"""

import json
import logging
from pathlib import Path
from typing import List, Optional, Tuple

import yaml
from pydantic import BaseModel, Field, model_validator

from engine.board import MAX_PLAYERS
from engine.pieces import compute_pieces, required_cells

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def default_homes(rows: int, cols: int) -> List[Tuple[int, int]]:
    """The four corners: top-left, top-right, bottom-right, bottom-left."""
    return [(0, 0), (0, cols - 1), (rows - 1, cols - 1), (rows - 1, 0)]


class SearchConfig(BaseModel):
    """Configuration for a packing search run."""
    rows: int = Field(default=20, ge=1, le=100)
    cols: int = Field(default=20, ge=1, le=100)
    homes: Optional[List[Tuple[int, int]]] = Field(
        default=None, description="(row, col) home cells, one per player; defaults to the four corners"
    )
    max_piece_size: int = Field(default=5, ge=1, le=8)
    speed: float = Field(default=1e-5, gt=0.0, description="Temperature increase per iteration")
    seed: Optional[int] = None
    max_iterations: Optional[int] = Field(default=None, ge=1)
    time_limit: Optional[float] = Field(default=None, gt=0.0, description="Seconds")
    report_margin: float = Field(default=2.0, ge=0.0)
    log_level: str = "INFO"
    log_dir: Optional[str] = None

    @model_validator(mode="after")
    def _check_board(self) -> "SearchConfig":
        if self.homes is None:
            self.homes = default_homes(self.rows, self.cols)
        if not 1 <= len(self.homes) <= MAX_PLAYERS:
            raise ValueError(f"Need between 1 and {MAX_PLAYERS} home cells, got {len(self.homes)}")
        for row, col in self.homes:
            if not (0 <= row < self.rows and 0 <= col < self.cols):
                raise ValueError(f"Home cell ({row}, {col}) is outside the {self.rows}x{self.cols} board")
        needed = required_cells(compute_pieces(self.max_piece_size), len(self.homes))
        if self.rows * self.cols < needed:
            raise ValueError(f"Need {needed} tiles but have only {self.rows}*{self.cols}")
        if self.log_level.upper() not in LOG_LEVELS:
            raise ValueError(f"Unknown log level: {self.log_level}")
        return self

    @property
    def num_players(self) -> int:
        return len(self.homes)

    @classmethod
    def from_dict(cls, config_dict: dict) -> "SearchConfig":
        """Create config from dictionary, ignoring unknown keys."""
        valid_keys = set(cls.model_fields)
        return cls(**{k: v for k, v in config_dict.items() if k in valid_keys})

    @classmethod
    def from_file(cls, config_path: Path) -> "SearchConfig":
        """Load config from YAML or JSON file."""
        return cls.from_dict(cls.read_file(config_path))

    @staticmethod
    def read_file(config_path: Path) -> dict:
        """Read the raw settings of a YAML or JSON config file."""
        config_path = Path(config_path)

        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        with open(config_path, "r") as f:
            if config_path.suffix.lower() in [".yaml", ".yml"]:
                config_dict = yaml.safe_load(f) or {}
            elif config_path.suffix.lower() == ".json":
                config_dict = json.load(f)
            else:
                raise ValueError(f"Unsupported config file format: {config_path.suffix}")

        return dict(config_dict)

    def to_dict(self) -> dict:
        return self.model_dump()

    def log_config(self, logger: logging.Logger):
        """Log the effective configuration."""
        logger.info(f"Board: {self.rows}x{self.cols}, homes={self.homes}")
        logger.info(f"Max piece size: {self.max_piece_size}")
        logger.info(f"Speed: {self.speed}, seed: {self.seed}")
        logger.info(
            f"Budget: iterations={self.max_iterations or 'unlimited'}, "
            f"time_limit={self.time_limit or 'unlimited'}"
        )
        logger.debug(f"Full config: {self.to_dict()}")
