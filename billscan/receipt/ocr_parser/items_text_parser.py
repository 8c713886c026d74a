"""Text-line based receipt item extraction."""

from decimal import ROUND_HALF_UP, Decimal, DecimalException

from billscan.domain.receipt import LineItem, NumberToken
from billscan.runtime import get_logger

from .common import CENTS, _parse_number

logger = get_logger(__name__)


def _find_number_tokens(tokens: list[str]) -> list[NumberToken]:
    """Return every token that parses as a non-negative number, with its index."""
    numbers: list[NumberToken] = []
    for index, token in enumerate(tokens):
        value = _parse_number(token)
        if value is not None:
            numbers.append(NumberToken(value=value, index=index))
    return numbers


def _parse_item_line(line: str) -> LineItem | None:
    """
    Parse one receipt line into a line item.

    The item name is everything before the first number. The numbers that
    follow are read as:
    - "Chaat 40": a single number is the line total, quantity 1
    - "Biryani 2 1200": quantity then total
    - "Paneer Butter Masala 3 150 450": quantity, unit rate, total; only the
      first and last numbers are used and the rate is recomputed from them

    Args:
        line: Text line, either straight from OCR or reconstructed

    Returns:
        The parsed item, or None if the line does not describe an item
    """
    tokens = line.split()
    if not tokens:
        return None

    numbers = _find_number_tokens(tokens)
    if not numbers:
        return None

    name = " ".join(tokens[: numbers[0].index]).strip()
    if not name:
        return None

    if len(numbers) == 1:
        raw_quantity = Decimal(1)
    else:
        raw_quantity = numbers[0].value
    raw_total = numbers[-1].value

    try:
        quantity = int(raw_quantity.quantize(Decimal(1), rounding=ROUND_HALF_UP))
        if quantity < 1:
            logger.debug("Rejected %r: quantity %s", line, raw_quantity)
            return None
        total = raw_total.quantize(CENTS, rounding=ROUND_HALF_UP)
        rate = (raw_total / quantity).quantize(CENTS, rounding=ROUND_HALF_UP)
    except DecimalException:
        # Values too large to round at cent precision
        logger.debug("Rejected %r: value out of range", line)
        return None

    if rate <= 0 or total <= 0:
        logger.debug("Rejected %r: rate=%s total=%s", line, rate, total)
        return None

    return LineItem(name=name, quantity=quantity, rate=rate, total=total)
