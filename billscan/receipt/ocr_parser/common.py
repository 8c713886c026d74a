"""Shared constants and helpers for OCR receipt parsing."""

import re
from decimal import Decimal, InvalidOperation

# Values at or below this are taken as quantities, values above it as totals.
# This is a magnitude heuristic for restaurant receipts, not a rule: a
# 15-rupee item or a 25-piece order will be misclassified.
QUANTITY_TOTAL_THRESHOLD = Decimal("20")

# Grouped quantity/rate/total columns are accepted when every total is at
# least this fraction of rate * quantity (leaves room for OCR digit errors).
GROUPED_TOTAL_TOLERANCE = Decimal("0.8")

# Upper bound on numbers handed to one text line by the greedy fallback
MAX_NUMBERS_PER_ITEM = 3

CURRENCY_CHARS = re.compile(r"[₹$,]")

# Plain decimal literal; signs, exponents and underscores are not accepted
NUMBER_TOKEN = re.compile(r"^(?:\d+(?:\.\d*)?|\.\d+)$")

# Digits, currency symbols, separators and whitespace only
PURE_NUMERIC_LINE = re.compile(r"^[\d₹$,.\s]+$")

DATE_PATTERN = re.compile(r"\d{1,2}/\d{1,2}/\d{2,4}")

TOTAL_KEYWORDS = ("total", "subtotal", "amount", "sum")

MERCHANT_SEARCH_LINES = 3
MERCHANT_MIN_LENGTH = 4

CENTS = Decimal("0.01")


def _contains_digit(text: str) -> bool:
    """Return True if text contains any digit."""
    return any(c.isdigit() for c in text)


def _is_pure_numeric_line(text: str) -> bool:
    """Return True if the line holds only numbers and currency/separator characters."""
    return bool(PURE_NUMERIC_LINE.match(text)) and _contains_digit(text)


def _parse_number(token: str) -> Decimal | None:
    """
    Parse a token as a non-negative number.

    Currency symbols and thousands separators are ignored, so "₹1,200"
    and "$1200" both give Decimal("1200").

    Returns:
        The value, or None for non-numeric or negative tokens
    """
    cleaned = CURRENCY_CHARS.sub("", token)
    if not NUMBER_TOKEN.match(cleaned):
        return None
    try:
        return Decimal(cleaned)
    except InvalidOperation:
        return None


def _format_number(value: Decimal) -> str:
    """Render a number so that _parse_number reads it back unchanged."""
    return str(value)
