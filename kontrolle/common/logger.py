"""Logging infrastructure for kontrolle.

Every kontrolle logger lives under the ``kontrolle`` namespace so that
applications can silence or redirect the engine with a single logger.
Console output is on by default; file output with rotation is opt-in.
"""

import logging
import logging.handlers
import os
from typing import Optional

from .settings import get_settings

ROOT_LOGGER_NAME = "kontrolle"


def _qualify(name: str) -> str:
    if name == ROOT_LOGGER_NAME or name.startswith(ROOT_LOGGER_NAME + "."):
        return name
    return f"{ROOT_LOGGER_NAME}.{name}"


def setup_logger(
    name: str = ROOT_LOGGER_NAME,
    level: Optional[str] = None,
    log_dir: Optional[str] = None,
    log_format: Optional[str] = None,
    date_format: Optional[str] = None,
    console_logging: bool = True,
    max_bytes: int = 10485760,  # 10MB
    backup_count: int = 5,
) -> logging.Logger:
    """Set up a kontrolle logger with console and optional file handlers.

    Args:
        name: Logger name, qualified under the ``kontrolle`` namespace
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL),
            defaults to the ``KONTROLLE_LOG_LEVEL`` setting
        log_dir: Directory for a rotating log file, defaults to the
            ``KONTROLLE_LOG_DIR`` setting; no file logging when unset
        log_format: Custom log format string
        date_format: Custom date format string (ISO 8601 by default)
        console_logging: Enable console logging
        max_bytes: Maximum log file size before rotation
        backup_count: Number of backup log files to keep

    Returns:
        Configured logger instance

    Raises:
        ValueError: If the level is not a known logging level
    """
    logger = logging.getLogger(_qualify(name))

    settings = get_settings()
    if level is None:
        level = settings.log_level
    if log_dir is None:
        log_dir = settings.log_dir

    level_upper = level.upper()
    if not hasattr(logging, level_upper):
        raise ValueError(
            f"Invalid log level: {level}. "
            f"Must be one of: DEBUG, INFO, WARNING, ERROR, CRITICAL"
        )
    logger.setLevel(getattr(logging, level_upper))

    # Prevent duplicate handlers
    if logger.handlers:
        return logger

    if log_format is None:
        log_format = "%(asctime)s [%(levelname)s] [%(name)s] %(message)s"
    if date_format is None:
        date_format = "%Y-%m-%dT%H:%M:%S"

    formatter = logging.Formatter(log_format, datefmt=date_format)

    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
        log_file = os.path.join(log_dir, f"{logger.name}.log")
        file_handler = logging.handlers.RotatingFileHandler(
            log_file, maxBytes=max_bytes, backupCount=backup_count
        )
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    if console_logging:
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a logger under the kontrolle namespace.

    Args:
        name: Component name, e.g. ``"rules"`` or ``"rbac.transform"``

    Returns:
        Logger instance
    """
    return logging.getLogger(_qualify(name))
