"""Receipt OCR text parsing.

Usage:
    from billscan.receipt import parse

    result = parse("Restaurant ABC\nBiryani 2 1200\nTotal 1200")
"""

from billscan.receipt.ocr_result_parser import parse_receipt

parse = parse_receipt

__all__ = ["parse", "parse_receipt"]
