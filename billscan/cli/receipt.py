"""Receipt command handlers used by the unified CLI."""

import argparse
import json
import sys
from pathlib import Path

from billscan.receipt.formatter import format_parsed_receipt, receipt_to_dict
from billscan.runtime import get_logger

logger = get_logger(__name__)


def _read_text_input(source: str | None) -> str:
    """Read OCR text from a file path, or stdin when source is None or '-'."""
    if source is None or source == "-":
        return sys.stdin.read()
    return Path(source).read_text(encoding="utf-8")


def cmd_parse(args: argparse.Namespace) -> None:
    """Parse OCR text and print the items."""
    from billscan.receipt.ocr_result_parser import parse_receipt

    try:
        text = _read_text_input(args.text_file)
    except OSError as e:
        logger.error("%s", e)
        print(f"Error: cannot read {args.text_file}: {e.strerror or e}")
        sys.exit(1)

    receipt = parse_receipt(text)
    if args.json:
        print(json.dumps(receipt_to_dict(receipt), indent=2, ensure_ascii=False))
    else:
        print(format_parsed_receipt(receipt))


def cmd_scan(args: argparse.Namespace) -> None:
    """Scan a receipt image via the OCR service and print the items."""
    from billscan.application.receipts.scan import ReceiptScanRequest, run_receipt_scan

    result = run_receipt_scan(ReceiptScanRequest(image_path=Path(args.image)))

    if result.status == "file_not_found":
        logger.error("%s", result.error)
        print(f"Error: {result.error}")
        sys.exit(1)

    receipt = result.receipt
    if receipt is None:
        print("Scan failed: missing receipt output.")
        sys.exit(1)

    if args.json:
        payload = receipt_to_dict(receipt)
        payload["scan_status"] = result.status
        print(json.dumps(payload, indent=2, ensure_ascii=False))
    else:
        print("\n" + "=" * 60)
        print("PARSED RECEIPT")
        print("=" * 60)
        print(format_parsed_receipt(receipt))
        print("=" * 60)

    if result.status == "ocr_unavailable":
        print(f"OCR service unavailable: {result.error}", file=sys.stderr)
        print("Enter the items manually or try again later.", file=sys.stderr)
        sys.exit(2)
    if result.status == "no_text":
        print("No text recognised in the image; enter the items manually.", file=sys.stderr)
        sys.exit(2)


def cmd_serve(args: argparse.Namespace) -> None:
    """Start the FastAPI server for receipt parsing."""
    import uvicorn

    from billscan.runtime import receipt_server as server

    print(f"Starting receipt server on {args.host}:{args.port}")
    print(f"Endpoints: http://{args.host}:{args.port}/parse | /upload | /health")
    print("Press Ctrl+C to stop")

    uvicorn.run(server.app, host=args.host, port=args.port)
