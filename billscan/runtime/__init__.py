"""Runtime infrastructure for billscan.

This package provides process/runtime services including:
- Logging setup via get_logger()
- OCR provider settings via get_settings(), OCRSettings

Usage:
    from billscan.runtime import get_logger, get_settings

    logger = get_logger(__name__)
    settings = get_settings()
    print(settings.url, settings.max_attempts)
"""

from billscan.runtime.logging import (
    DEFAULT_LOG_LEVEL,
    LOG_FORMAT,
    LOG_FORMAT_DEBUG,
    configure_logging,
    get_logger,
    parse_log_level,
    set_log_level,
)
from billscan.runtime.settings import (
    OCRSettings,
    get_settings,
    load_settings,
    reset_settings,
)

__all__ = [
    # Logging
    "get_logger",
    "configure_logging",
    "set_log_level",
    "parse_log_level",
    "DEFAULT_LOG_LEVEL",
    "LOG_FORMAT",
    "LOG_FORMAT_DEBUG",
    # Settings
    "OCRSettings",
    "get_settings",
    "load_settings",
    "reset_settings",
]
