"""Composable OCR receipt parser components."""

from .fields_parser import _extract_date, _is_merchant_candidate, _is_total_line
from .items_text_parser import _parse_item_line
from .line_reconstruction import _reconstruct_item_lines

__all__ = [
    "_extract_date",
    "_is_merchant_candidate",
    "_is_total_line",
    "_parse_item_line",
    "_reconstruct_item_lines",
]
