"""
Logging configuration (loguru). Call setup_logging() once at startup.
"""

from __future__ import annotations

import sys
from pathlib import Path

from loguru import logger

from .config import get_log_file_path

_FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{line} | {message}"


def setup_logging(
    level: str = "INFO",
    log_file: Path | None = None,
    console: bool = True,
) -> Path:
    """
    Replace loguru's default sink with a rotating file sink (and optionally stderr).
    Returns the log file path.
    """
    log_file = log_file or get_log_file_path()
    log_file.parent.mkdir(parents=True, exist_ok=True)

    logger.remove()
    logger.add(
        log_file,
        rotation="10 MB",
        retention=5,
        level=level,
        format=_FILE_FORMAT,
        encoding="utf-8",
    )
    if console:
        logger.add(sys.stderr, level=level, format="{level}: {message}")

    logger.info(f"Logging initialized: {log_file} (level={level})")
    return log_file
