"""Merchant/date/total line helpers."""

from .common import (
    DATE_PATTERN,
    MERCHANT_MIN_LENGTH,
    MERCHANT_SEARCH_LINES,
    TOTAL_KEYWORDS,
    _contains_digit,
)


def _extract_date(line: str) -> str | None:
    """Return the first d/m/y style date on the line, as printed."""
    match = DATE_PATTERN.search(line)
    return match.group(0) if match else None


def _is_merchant_candidate(line: str, line_index: int) -> bool:
    """
    Return True if the line could be the merchant name.

    Only the first few lines are considered; the name has to be longer than
    a stray OCR fragment and carry no digits (which rules out dates, phone
    numbers and items).
    """
    if line_index >= MERCHANT_SEARCH_LINES:
        return False
    return len(line) >= MERCHANT_MIN_LENGTH and not _contains_digit(line)


def _is_total_line(line: str) -> bool:
    """Return True if the line states a receipt total rather than an item."""
    lowered = line.lower()
    return any(keyword in lowered for keyword in TOTAL_KEYWORDS)
