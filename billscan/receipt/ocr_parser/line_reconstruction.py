"""Re-pair item names with numbers that OCR split onto separate lines.

Some OCR engines read a receipt column by column, so a row like
"Biryani 2 1200" comes back as

    ["Biryani", "Garlic Naan", "2", "1", "1200", "50"]

The helpers here collect the numbers from the number-only lines and hand
them back to the text lines, producing "Biryani 2 1200" again so the
per-line parser can treat every receipt the same way. There is no
positional information to work with; pairing relies on counts and on the
magnitude of the values.
"""

from decimal import Decimal, DecimalException

from billscan.runtime import get_logger

from .common import (
    GROUPED_TOTAL_TOLERANCE,
    MAX_NUMBERS_PER_ITEM,
    QUANTITY_TOTAL_THRESHOLD,
    _contains_digit,
    _format_number,
    _is_pure_numeric_line,
    _parse_number,
)

logger = get_logger(__name__)


def _serialize_line(text_line: str, numbers: list[Decimal]) -> str:
    """Join an item name and its numbers into a single parseable line."""
    return " ".join([text_line, *(_format_number(n) for n in numbers)])


def _collect_numbers(number_lines: list[str]) -> list[Decimal]:
    """Flatten all positive numbers from number-only lines, keeping order."""
    numbers: list[Decimal] = []
    for line in number_lines:
        for token in line.split():
            value = _parse_number(token)
            if value is not None and value > 0:
                numbers.append(value)
    return numbers


def _split_by_magnitude(numbers: list[Decimal]) -> tuple[list[Decimal], list[Decimal]]:
    """Split numbers into likely quantities (small) and likely totals (large)."""
    quantities = [n for n in numbers if n <= QUANTITY_TOTAL_THRESHOLD]
    totals = [n for n in numbers if n > QUANTITY_TOTAL_THRESHOLD]
    return quantities, totals


def _pair_by_magnitude(text_lines: list[str], numbers: list[Decimal]) -> list[str] | None:
    """
    Pair the i-th text line with the i-th small and the i-th large number.

    Only applies when there is exactly one quantity and one total per text
    line. Assumes the OCR engine kept quantities in order among themselves
    and totals in order among themselves, even if it interleaved the two.
    """
    quantities, totals = _split_by_magnitude(numbers)
    if not (len(text_lines) == len(quantities) == len(totals)):
        return None
    logger.debug("Pairing by magnitude: quantities=%s totals=%s", quantities, totals)
    return [_serialize_line(text, [qty, total]) for text, qty, total in zip(text_lines, quantities, totals)]


def _pair_sequential(text_lines: list[str], numbers: list[Decimal], width: int) -> list[str]:
    """Give each text line the next `width` numbers; lines that run short stay bare."""
    reconstructed: list[str] = []
    for i, text in enumerate(text_lines):
        chunk = numbers[i * width : (i + 1) * width]
        if len(chunk) == width:
            reconstructed.append(_serialize_line(text, chunk))
        else:
            reconstructed.append(text)
    return reconstructed


def _pair_two_numbers(text_lines: list[str], numbers: list[Decimal]) -> list[str]:
    """Pair (quantity, total) per item."""
    paired = _pair_by_magnitude(text_lines, numbers)
    if paired is not None:
        return paired
    logger.debug("Magnitude pairing failed, using sequential pairs")
    return _pair_sequential(text_lines, numbers, 2)


def _grouped_columns_are_valid(
    quantities: list[Decimal],
    rates: list[Decimal],
    totals: list[Decimal],
) -> bool:
    """Check that quantities look small and totals roughly match rate * quantity."""
    if any(q > QUANTITY_TOTAL_THRESHOLD for q in quantities):
        return False
    max_quantity = max(quantities)
    for qty, rate, total in zip(quantities, rates, totals):
        if total < max_quantity:
            return False
        try:
            expected = rate * qty * GROUPED_TOTAL_TOLERANCE
        except DecimalException:
            # rate * quantity beyond the decimal range cannot be a real line
            return False
        if total < expected:
            return False
    return True


def _pair_three_numbers(text_lines: list[str], numbers: list[Decimal]) -> list[str]:
    """
    Pair (quantity, rate, total) per item.

    First tries the column-wise layout [q1, q2, r1, r2, t1, t2] that OCR
    produces when it reads each column top to bottom, then falls back to
    row-wise triples [q1, r1, t1, q2, r2, t2].
    """
    count = len(text_lines)
    if len(numbers) == count * 3:
        quantities = numbers[:count]
        rates = numbers[count : count * 2]
        totals = numbers[count * 2 :]
        if _grouped_columns_are_valid(quantities, rates, totals):
            logger.debug("Using grouped columns: q=%s r=%s t=%s", quantities, rates, totals)
            return [
                _serialize_line(text, [qty, rate, total])
                for text, qty, rate, total in zip(text_lines, quantities, rates, totals)
            ]

    logger.debug("Grouped columns rejected, using sequential triples")
    return _pair_sequential(text_lines, numbers, 3)


def _fallback_pairing(text_lines: list[str], numbers: list[Decimal]) -> list[str]:
    """
    Pair when the number count fits neither two nor three per item.

    Tries magnitude pairing, then hands out numbers greedily in order. Text
    lines left over once the numbers run out are returned bare, which the
    item parser skips.
    """
    paired = _pair_by_magnitude(text_lines, numbers)
    if paired is not None:
        return paired

    reconstructed: list[str] = []
    position = 0
    for i, text in enumerate(text_lines):
        if position >= len(numbers):
            reconstructed.append(text)
            continue
        remaining_lines = len(text_lines) - i
        remaining_numbers = len(numbers) - position
        take = max(1, min(MAX_NUMBERS_PER_ITEM, remaining_numbers // remaining_lines))
        reconstructed.append(_serialize_line(text, numbers[position : position + take]))
        position += take

    orphans = sum(1 for line, text in zip(reconstructed, text_lines) if line == text)
    if orphans:
        logger.debug("%d text line(s) left without numbers", orphans)
    return reconstructed


def _combine_text_and_numbers(text_lines: list[str], number_lines: list[str]) -> list[str]:
    """Distribute the numbers from number_lines across text_lines."""
    numbers = _collect_numbers(number_lines)
    numbers_per_item = len(numbers) // len(text_lines)
    logger.debug(
        "Reconstructing %d text lines from %d numbers (%d per item)",
        len(text_lines),
        len(numbers),
        numbers_per_item,
    )

    if numbers_per_item == 2:
        return _pair_two_numbers(text_lines, numbers)
    if numbers_per_item == 3:
        return _pair_three_numbers(text_lines, numbers)
    return _fallback_pairing(text_lines, numbers)


def _reconstruct_item_lines(lines: list[str]) -> list[str]:
    """
    Rebuild item lines when OCR separated names from their numbers.

    Lines that already mix text and numbers are kept with the text lines
    and take part in pairing in their original order.

    Args:
        lines: Non-blank, stripped OCR lines

    Returns:
        Reconstructed lines, or the input unchanged when there is nothing
        to re-pair
    """
    text_lines: list[str] = []
    number_lines: list[str] = []
    has_pure_text = False
    for line in lines:
        if _is_pure_numeric_line(line):
            number_lines.append(line)
        else:
            text_lines.append(line)
            if not _contains_digit(line):
                has_pure_text = True

    if not (has_pure_text and number_lines):
        return lines

    return _combine_text_and_numbers(text_lines, number_lines)
