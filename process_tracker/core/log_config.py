"""
Logging configuration for the tracker.

Provides a console handler with terse output and an optional detailed log file.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

_ROOT_LOGGER = "process_tracker"


def setup_logging(level: int | str = logging.INFO, log_file: Path | None = None) -> logging.Logger:
    """Configure the package logger and return it.

    Args:
        level: Logging level for the console handler.
        log_file: Optional file receiving DEBUG-level output with timestamps.
    """
    logger = logging.getLogger(_ROOT_LOGGER)
    logger.setLevel(logging.DEBUG if log_file else level)
    logger.handlers.clear()

    # stderr keeps the per-cycle listing on stdout clean
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(fmt="[%(levelname)s] %(message)s"))
    logger.addHandler(console_handler)

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(
            logging.Formatter(
                fmt="%(asctime)s [%(levelname)s] %(name)s - %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        logger.addHandler(file_handler)

    logger.propagate = False
    return logger
