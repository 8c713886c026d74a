"""Shared pytest fixtures for billscan tests."""

from __future__ import annotations

from collections.abc import Iterator

import pytest

from billscan.runtime.settings import reset_settings


@pytest.fixture(autouse=True)
def _fresh_settings(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Keep user config and environment out of every test."""
    for name in (
        "BILLSCAN_CONFIG",
        "BILLSCAN_OCR_URL",
        "BILLSCAN_OCR_API_KEY",
        "BILLSCAN_OCR_LANGUAGE",
        "BILLSCAN_OCR_TIMEOUT",
        "BILLSCAN_OCR_MAX_ATTEMPTS",
        "BILLSCAN_OCR_RETRY_DELAY",
        "BILLSCAN_OCR_MAX_IMAGE_KB",
    ):
        monkeypatch.delenv(name, raising=False)
    reset_settings()
    yield
    reset_settings()
