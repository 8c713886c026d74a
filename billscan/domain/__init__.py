"""Core domain models for billscan.

This module provides the data models produced by receipt parsing:
- LineItem: one parsed receipt row
- ReceiptResult: the parsed receipt
- NumberToken: a numeric token found on an OCR line

Usage:
    from billscan.domain import LineItem, ReceiptResult
"""

from billscan.domain.receipt import LineItem, NumberToken, ReceiptResult

__all__ = [
    "LineItem",
    "NumberToken",
    "ReceiptResult",
]
