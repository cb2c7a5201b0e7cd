"""
Logging configuration helpers.

Plain stdlib logging with optional rotating log files; the console side of the
CLI uses :mod:`docbuilder.utils.rich_logger`.
"""

import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from typing import Optional

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s"


def _level(level: str) -> int:
    if level.upper() not in LOG_LEVELS:
        raise ValueError(f"Invalid log level: {level}")
    return getattr(logging, level.upper())


def configure_logging(level: str = "INFO", format_string: Optional[str] = None,
                      log_file: Optional[str] = None, max_file_size: int = 10 * 1024 * 1024,
                      backup_count: int = 5) -> None:
    """
    Configure root logging with a stdout handler and an optional rotating file.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_string: Custom format string
        log_file: Log file path
        max_file_size: Maximum log file size in bytes
        backup_count: Number of backup files to keep
    """
    numeric = _level(level)
    root_logger = logging.getLogger()
    root_logger.setLevel(numeric)
    root_logger.handlers.clear()

    formatter = logging.Formatter(format_string or DEFAULT_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(numeric)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_file:
        add_file_handler(root_logger, log_file, level, formatter, max_file_size, backup_count)


def add_file_handler(logger: logging.Logger, file_path: str, level: str = "INFO",
                     formatter: Optional[logging.Formatter] = None,
                     max_file_size: int = 10 * 1024 * 1024, backup_count: int = 5) -> None:
    """
    Add a rotating file handler to ``logger``.

    Args:
        logger: Logger instance
        file_path: Log file path
        level: Log level for this handler
        formatter: Log formatter
        max_file_size: Maximum log file size in bytes
        backup_count: Number of backup files to keep
    """
    if not isinstance(logger, logging.Logger):
        raise ValueError("Logger must be a logging.Logger instance")
    if not file_path or not isinstance(file_path, str):
        raise ValueError("File path must be a non-empty string")

    log_dir = os.path.dirname(file_path)
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)

    file_handler = RotatingFileHandler(file_path, maxBytes=max_file_size, backupCount=backup_count)
    file_handler.setLevel(_level(level))
    file_handler.setFormatter(formatter or logging.Formatter(DEFAULT_FORMAT))
    logger.addHandler(file_handler)
