"""Parse raw OCR text into structured ReceiptResult data."""

from decimal import Decimal

from billscan.domain.receipt import LineItem, ReceiptResult
from billscan.runtime import get_logger

from .ocr_parser import (
    _extract_date,
    _is_merchant_candidate,
    _is_total_line,
    _parse_item_line,
    _reconstruct_item_lines,
)

logger = get_logger(__name__)


def parse_receipt(text: str) -> ReceiptResult:
    """
    Parse OCR text into a ReceiptResult.

    Runs in two passes: fragmented item rows are re-assembled first, then
    every line is parsed on its own. Lines mentioning total/subtotal/amount/sum
    give the receipt total instead of an item; without one, the total is
    the sum of the items.

    Never raises: lines that cannot be read are skipped.

    Args:
        text: Raw OCR text, newline separated

    Returns:
        Parsed receipt; empty text gives no items and no total, merchant or date
    """
    lines = [line.strip() for line in text.splitlines() if line.strip()]
    reconstructed = _reconstruct_item_lines(lines)
    if reconstructed is not lines:
        logger.debug("Reconstructed lines: %s", reconstructed)

    items: list[LineItem] = []
    stated_total: Decimal | None = None
    merchant: str | None = None
    date: str | None = None

    for i, line in enumerate(reconstructed):
        if merchant is None and not items and _is_merchant_candidate(line, i):
            merchant = line

        if date is None:
            date = _extract_date(line)

        item = _parse_item_line(line)
        if item is None:
            continue

        if _is_total_line(line):
            stated_total = item.total
            logger.debug("Found total line %r: %s", line, stated_total)
        else:
            items.append(item)

    if stated_total is not None:
        total = stated_total
    elif items:
        total = sum((item.total for item in items), Decimal("0"))
    else:
        total = None

    logger.debug("Parsed %d items, total=%s", len(items), total)
    return ReceiptResult(
        raw_text=text,
        items=items,
        total=total,
        merchant=merchant,
        date=date,
    )
