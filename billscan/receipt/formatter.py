"""Format ReceiptResult data for review and for the UI layer."""

from decimal import Decimal
from typing import Any

from billscan.domain.receipt import LineItem, ReceiptResult


def _format_rows_aligned(
    rows: list[tuple[str, str, str, str]],
    indent: str = "  ",
) -> list[str]:
    """
    Format table rows with a left-aligned name and right-aligned numbers.

    Args:
        rows: List of (name, quantity, rate, total) string tuples
        indent: Indentation prefix for each line

    Returns:
        List of formatted lines
    """
    if not rows:
        return []

    widths = [max(len(row[col]) for row in rows) for col in range(4)]

    lines = []
    for name, qty, rate, total in rows:
        lines.append(
            f"{indent}{name.ljust(widths[0])}  {qty.rjust(widths[1])}  "
            f"{rate.rjust(widths[2])}  {total.rjust(widths[3])}"
        )
    return lines


def _items_total(items: list[LineItem]) -> Decimal:
    return sum((item.total for item in items), Decimal("0"))


def format_parsed_receipt(receipt: ReceiptResult) -> str:
    """
    Format a parsed receipt as a plain-text review table.

    Args:
        receipt: Parsed receipt data

    Returns:
        Multi-line text with a header, one row per item and the total
    """
    lines = []
    lines.append(f"Merchant: {receipt.merchant or 'UNKNOWN'}")
    lines.append(f"Date: {receipt.date or 'UNKNOWN'}")
    lines.append("")

    if not receipt.items:
        lines.append("No items found; enter items manually.")
    else:
        rows = [("Item", "Qty", "Rate", "Total")]
        for item in receipt.items:
            rows.append((item.name, str(item.quantity), f"{item.rate:.2f}", f"{item.total:.2f}"))
        lines.extend(_format_rows_aligned(rows))

    lines.append("")
    if receipt.total is None:
        lines.append("Total: UNKNOWN")
    else:
        lines.append(f"Total: {receipt.total:.2f}")
        items_total = _items_total(receipt.items)
        if receipt.items and items_total != receipt.total:
            diff = receipt.total - items_total
            lines.append(f"WARN: items sum to {items_total:.2f} ({diff:+.2f} unaccounted)")

    return "\n".join(lines)


def _money(value: Decimal | None) -> float | None:
    return float(value) if value is not None else None


def receipt_to_dict(receipt: ReceiptResult) -> dict[str, Any]:
    """Convert a receipt to a JSON-ready dict for the item editor."""
    return {
        "text": receipt.raw_text,
        "items": [
            {
                "name": item.name,
                "quantity": item.quantity,
                "rate": float(item.rate),
                "total": float(item.total),
            }
            for item in receipt.items
        ],
        "total": _money(receipt.total),
        "merchant": receipt.merchant,
        "date": receipt.date,
    }
