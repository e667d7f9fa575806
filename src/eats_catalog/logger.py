"""
Logging configuration for eats catalog.

Uses loguru for advanced logging capabilities with rotation and retention.
"""

import sys
from pathlib import Path
from typing import Optional

from loguru import logger as _logger

from eats_catalog.config import get_config


def setup_logger(
    level: Optional[str] = None,
    log_file: Optional[str] = None,
    rotation: Optional[str] = None,
    retention: Optional[str] = None,
    format: Optional[str] = None,
) -> None:
    """Configure the logger with file and console handlers.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, etc.)
        log_file: Path to log file
        rotation: Log rotation setting (e.g., "100 MB", "1 day")
        retention: Log retention setting (e.g., "30 days", "1 week")
        format: Log format string
    """
    log_config = get_config().logging

    level = level or log_config.level
    log_file = log_file or log_config.file_path
    rotation = rotation or log_config.rotation
    retention = retention or log_config.retention
    format = format or log_config.format

    # Remove default handler
    _logger.remove()

    if log_config.console_enabled:
        _logger.add(
            sys.stderr,
            format=format,
            level=level,
            colorize=True,
            backtrace=True,
            diagnose=False,
        )

    if log_config.file_enabled:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)

        _logger.add(
            log_file,
            format=format,
            level=level,
            rotation=rotation,
            retention=retention,
            compression="zip",
            encoding="utf-8",
            enqueue=True,  # Thread-safe logging
            backtrace=True,
            diagnose=False,
        )


def get_logger(name: Optional[str] = None):
    """Get a logger instance.

    Args:
        name: Logger name (typically __name__ from calling module)

    Returns:
        Logger instance
    """
    if name:
        return _logger.bind(name=name)
    return _logger


__all__ = [
    "setup_logger",
    "get_logger",
]
