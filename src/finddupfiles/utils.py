"""Utility functions for finddupfiles."""

import sys
from pathlib import Path
from typing import Optional

from loguru import logger


def setup_logging(level: str = "INFO", log_file: Optional[Path] = None) -> None:
    """
    Configure loguru sinks.

    Diagnostics always go to stderr so stdout carries only report lines.

    Args:
        level: Minimum level written to stderr
        log_file: Optional path of a rotating debug log
    """
    logger.remove()
    logger.add(sys.stderr, level=level, format="<level>{level}</level>: {message}")

    if log_file:
        logger.add(
            str(log_file),
            level="DEBUG",
            rotation="10 MB",
            retention="10 days",
            backtrace=True,
            diagnose=False,
        )
