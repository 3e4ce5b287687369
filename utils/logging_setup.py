"""
Logging setup utilities for search runs.

Console output is always configured; when a log directory is given, a
timestamped run directory is created and the log is also written there.
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Optional

DEFAULT_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def create_run_directory(
    base_dir: Path = Path("runs"),
    experiment_name: Optional[str] = None
) -> Path:
    """
    Create a timestamped run directory.

    Directory format: <base_dir>/<YYYYMMDD>_<HHMMSS>_<experiment_name>/
    If experiment_name is None, uses "run" as default.

    Args:
        base_dir: Base directory for runs (default: "runs")
        experiment_name: Optional experiment name (default: "run")

    Returns:
        Path to the created run directory
    """
    base_dir = Path(base_dir)
    base_dir.mkdir(parents=True, exist_ok=True)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    run_dir = base_dir / f"{timestamp}_{experiment_name or 'run'}"
    run_dir.mkdir(parents=True, exist_ok=True)

    return run_dir


def setup_logging(
    level: int = logging.INFO,
    log_dir: Optional[Path] = None,
    run_name: str = "search",
    format_string: Optional[str] = None
) -> Optional[Path]:
    """
    Set up logging with a console handler and an optional file handler.

    Args:
        level: Logging level (default: logging.INFO)
        log_dir: Base directory for run logs; None logs to the console only
        run_name: Name for the run directory and log file
        format_string: Optional custom format string. If None, uses default format.

    Returns:
        Path to the created log file, or None without a log directory

    Example:
        >>> log_file = setup_logging(logging.INFO, Path("runs"), "corner_search")
        >>> logger = logging.getLogger(__name__)
        >>> logger.info("This will be logged to both console and file")
    """
    formatter = logging.Formatter(
        format_string or DEFAULT_FORMAT,
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Remove existing handlers to avoid duplicates
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_dir is None:
        return None

    run_dir = create_run_directory(Path(log_dir), run_name)
    log_file = run_dir / f"{run_name}.log"
    file_handler = logging.FileHandler(log_file, mode='w', encoding='utf-8')
    file_handler.setLevel(level)
    file_handler.setFormatter(formatter)
    root_logger.addHandler(file_handler)

    return log_file
