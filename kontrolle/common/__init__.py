"""Common utilities for kontrolle."""

from .logger import setup_logger, get_logger
from .config import KontrolleOptions, load_config, load_options, parse_options
from .settings import KontrolleSettings, get_settings

__all__ = [
    "KontrolleOptions",
    "KontrolleSettings",
    "get_logger",
    "get_settings",
    "load_config",
    "load_options",
    "parse_options",
    "setup_logger",
]
