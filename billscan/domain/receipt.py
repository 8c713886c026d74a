"""Data models for receipt scanning."""

from dataclasses import dataclass, field
from decimal import Decimal


@dataclass(frozen=True)
class NumberToken:
    """A numeric token found on an OCR line."""

    value: Decimal
    index: int  # Position of the token in the whitespace-split line


@dataclass
class LineItem:
    """A single line item on a receipt."""

    name: str
    quantity: int
    rate: Decimal  # Unit price, derived from total / quantity
    total: Decimal  # Line total as printed on the receipt


@dataclass
class ReceiptResult:
    """Parsed receipt data."""

    raw_text: str = ""  # Original OCR text for reference
    items: list[LineItem] = field(default_factory=list)
    total: Decimal | None = None
    merchant: str | None = None
    date: str | None = None  # As printed, e.g. "15/01/2024"
