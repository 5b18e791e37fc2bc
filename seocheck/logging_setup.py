"""
Logging setup for seocheck.

Console output goes to stderr so `--json` on stdout stays machine-readable.
A rotating file handler is added only when a log file is requested.
"""

import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional, Union

ROOT_LOGGER_NAME = "seocheck"


def setup_logging(
    name: str = ROOT_LOGGER_NAME,
    log_level: Optional[str] = None,
    log_file: Union[str, Path, None] = None,
) -> logging.Logger:
    """
    Setup logging with a console handler and an optional rotating file handler.

    Args:
        name: Logger name (default: "seocheck", the parent of every module logger)
        log_level: Log level (default: from SEOCHECK_LOG_LEVEL env var or WARNING)
        log_file: Log file path (default: from SEOCHECK_LOG_FILE env var, else no file)

    Returns:
        Configured logger instance
    """
    if log_level is None:
        log_level = os.getenv("SEOCHECK_LOG_LEVEL", "WARNING")
    log_level = log_level.upper()
    numeric_level = getattr(logging, log_level, logging.WARNING)

    if log_file is None:
        log_file = os.getenv("SEOCHECK_LOG_FILE") or None

    logger = logging.getLogger(name)
    logger.setLevel(numeric_level)

    # Remove existing handlers to avoid duplicates
    for h in list(logger.handlers):
        logger.removeHandler(h)
        h.close()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(numeric_level)
    console_handler.setFormatter(logging.Formatter("%(levelname)s - %(message)s"))
    logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_path,
            maxBytes=10 * 1024 * 1024,  # 10 MB
            backupCount=5,
            encoding="utf-8",
        )
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        ))
        logger.addHandler(file_handler)

    logger.debug(f"Logging initialized: level={log_level}, file={log_file}")
    return logger


def get_logger(name: str = ROOT_LOGGER_NAME) -> logging.Logger:
    """Get a logger, configuring the package root on first use."""
    root = logging.getLogger(ROOT_LOGGER_NAME)
    if not root.handlers:
        setup_logging(ROOT_LOGGER_NAME)
    return logging.getLogger(name)
