"""Logger configuration for Mapty."""

from __future__ import annotations

import sys
from pathlib import Path

from loguru import logger

CONSOLE_FORMAT = (
    "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan> - <level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{line} - {message}"


def setup_logger(level: str = "INFO", log_file: Path | None = None) -> None:
    """Send logs to stderr, and to a size-rotated file when ``log_file`` is set."""
    logger.remove()
    logger.add(sys.stderr, format=CONSOLE_FORMAT, level=level)
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        logger.add(log_file, format=FILE_FORMAT, level=level, rotation="5 MB", retention=3)
