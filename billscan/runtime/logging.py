"""Logging setup for the billscan namespace.

Usage:
    from billscan.runtime import get_logger
    logger = get_logger(__name__)

Parser decisions (reconstruction strategy, rejected lines) are logged at
DEBUG; OCR attempts at INFO and WARNING.

Environment variables:
    BILLSCAN_LOG_LEVEL: DEBUG, INFO, WARNING (or WARN), ERROR, or a number.
        Default: INFO
"""

import logging
import os
import sys
from collections.abc import Mapping
from typing import TextIO

DEFAULT_LOG_LEVEL = logging.INFO

LOGGER_NAMESPACE = "billscan"
LOG_LEVEL_ENV = "BILLSCAN_LOG_LEVEL"

LOG_FORMAT = "%(levelname)s [%(name)s] %(message)s"
LOG_FORMAT_DEBUG = "%(levelname)s [%(name)s:%(lineno)d] %(message)s"

# Marks the handler installed here so reconfiguring never stacks handlers
_HANDLER_ATTR = "_billscan_handler"


def parse_log_level(value: str | int | None, default: int = DEFAULT_LOG_LEVEL) -> int:
    """Turn a level name or number into a logging level, falling back to default."""
    if value is None:
        return default
    if isinstance(value, int):
        return value

    name = value.strip().upper()
    if not name:
        return default
    if name.isdigit():
        return int(name)
    if name == "WARN":
        name = "WARNING"
    return logging.getLevelNamesMapping().get(name, default)


def _formatter_for(level: int) -> logging.Formatter:
    return logging.Formatter(LOG_FORMAT_DEBUG if level <= logging.DEBUG else LOG_FORMAT)


def _namespace_handler(logger: logging.Logger) -> logging.Handler | None:
    for handler in logger.handlers:
        if getattr(handler, _HANDLER_ATTR, False):
            return handler
    return None


def configure_logging(
    level: int | None = None,
    stream: TextIO | None = None,
    environ: Mapping[str, str] | None = None,
) -> None:
    """
    Attach the billscan stderr handler once.

    Args:
        level: Log level; None reads BILLSCAN_LOG_LEVEL
        stream: Output stream for a fresh handler (default: sys.stderr)
        environ: Environment to read the level from (default: os.environ)
    """
    namespace_logger = logging.getLogger(LOGGER_NAMESPACE)
    if _namespace_handler(namespace_logger) is not None:
        return

    if level is None:
        env = os.environ if environ is None else environ
        level = parse_log_level(env.get(LOG_LEVEL_ENV))

    handler = logging.StreamHandler(stream or sys.stderr)
    setattr(handler, _HANDLER_ATTR, True)
    handler.setFormatter(_formatter_for(level))

    namespace_logger.setLevel(level)
    namespace_logger.addHandler(handler)
    namespace_logger.propagate = False


def get_logger(name: str) -> logging.Logger:
    """Return the logger for a module, inside the billscan namespace."""
    configure_logging()

    if name == LOGGER_NAMESPACE or name.startswith(f"{LOGGER_NAMESPACE}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{LOGGER_NAMESPACE}.{name}")


def set_log_level(level: int | str) -> None:
    """Change the namespace level at runtime, e.g. for `billscan -v`."""
    resolved = parse_log_level(level)
    namespace_logger = logging.getLogger(LOGGER_NAMESPACE)
    namespace_logger.setLevel(resolved)

    handler = _namespace_handler(namespace_logger)
    if handler is not None:
        handler.setFormatter(_formatter_for(resolved))
