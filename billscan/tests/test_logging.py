import io
import logging

import pytest

from billscan.runtime.logging import (
    LOG_FORMAT_DEBUG,
    LOGGER_NAMESPACE,
    configure_logging,
    get_logger,
    parse_log_level,
    set_log_level,
)


def test_get_logger_keeps_package_module_names() -> None:
    assert get_logger("billscan.receipt.formatter").name == "billscan.receipt.formatter"
    assert get_logger(LOGGER_NAMESPACE).name == "billscan"


def test_get_logger_prefixes_foreign_names() -> None:
    assert get_logger("scripts.batch").name == "billscan.scripts.batch"
    assert get_logger("billscanner").name == "billscan.billscanner"


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("debug", logging.DEBUG),
        ("WARN", logging.WARNING),
        (" error ", logging.ERROR),
        ("15", 15),
        (logging.CRITICAL, logging.CRITICAL),
        ("loud", logging.INFO),
        ("", logging.INFO),
        (None, logging.INFO),
    ],
)
def test_parse_log_level(value: str | int | None, expected: int) -> None:
    assert parse_log_level(value) == expected


def test_configure_logging_installs_one_handler() -> None:
    namespace_logger = logging.getLogger(LOGGER_NAMESPACE)
    before = list(namespace_logger.handlers)

    configure_logging(stream=io.StringIO())
    configure_logging(stream=io.StringIO())

    assert namespace_logger.handlers == before
    assert namespace_logger.propagate is False


def test_set_log_level_switches_to_debug_format() -> None:
    namespace_logger = logging.getLogger(LOGGER_NAMESPACE)
    previous = namespace_logger.level
    try:
        set_log_level("DEBUG")

        assert get_logger("billscan.receipt").isEnabledFor(logging.DEBUG)
        formats = [handler.formatter._fmt for handler in namespace_logger.handlers if handler.formatter]
        assert LOG_FORMAT_DEBUG in formats
    finally:
        set_log_level(previous)
