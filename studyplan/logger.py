"""Loguru sinks for the study planner CLI."""

import sys
from typing import Optional

from loguru import logger

CONSOLE_FORMAT = "<level>{level: <8}</level> | <cyan>{name}</cyan> - <level>{message}</level>"


def setup_logger(level: str = "INFO", log_file: Optional[str] = None) -> None:
    """Send planner logs to stderr, and to log_file (rotated weekly) when set"""
    logger.remove()
    logger.add(sys.stderr, format=CONSOLE_FORMAT, level=level, colorize=True)

    if log_file:
        logger.add(log_file, level=level, rotation="1 week", retention=4)
