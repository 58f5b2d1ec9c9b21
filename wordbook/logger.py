"""Logging configuration for the Wordbook vocabulary notebook."""

import logging
import sys
from datetime import datetime

import config


def setup_logger(
    name: str = "wordbook",
    log_file: str | None = None,
    level: int = logging.INFO,
) -> logging.Logger:
    """
    Set up and return a configured logger.

    Args:
        name: Logger name
        log_file: Optional specific log file name. If None, generates a date-based name.
        level: Logging level

    Returns:
        Configured logger instance
    """
    config.LOGS_DIR.mkdir(parents=True, exist_ok=True)

    # One log file per day keeps interactive sessions together
    if log_file is None:
        log_file = f"{name}_{datetime.now().strftime('%Y%m%d')}.log"

    log_path = config.LOGS_DIR / log_file

    logger = logging.getLogger(name)
    logger.setLevel(level)

    # Clear existing handlers to avoid duplicates
    logger.handlers.clear()

    file_formatter = logging.Formatter(
        "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    console_formatter = logging.Formatter("%(message)s")

    # File handler - captures everything
    file_handler = logging.FileHandler(log_path, encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(file_formatter)
    logger.addHandler(file_handler)

    # Console handler - warnings and errors only, the CLI prints its own output
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(max(level, logging.WARNING))
    console_handler.setFormatter(console_formatter)
    logger.addHandler(console_handler)

    logger.debug(f"Log file: {log_path}")

    return logger


def get_logger(name: str = "wordbook") -> logging.Logger:
    """
    Get an existing logger by name.

    Args:
        name: Logger name

    Returns:
        Logger instance
    """
    return logging.getLogger(name)
