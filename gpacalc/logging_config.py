"""
Logging configuration.

Sets up the package logger used by every gpacalc module.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional


def setup_logging(level: int = logging.WARNING, log_file: Optional[str] = None) -> logging.Logger:
    """
    Configure the 'gpacalc' logger.

    Args:
        level: Logging level (e.g. logging.DEBUG, logging.INFO)
        log_file: Optional path to also write logs to.
    """
    logger = logging.getLogger("gpacalc")
    logger.setLevel(level)

    # Avoid duplicate handlers when main() runs more than once (tests)
    if logger.hasHandlers():
        logger.handlers.clear()

    # stderr keeps log lines out of the rendered screen on stdout
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)

    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%H:%M:%S",
    )
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode="w", encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.debug("Logging initialized.")
    return logger
