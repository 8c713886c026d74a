"""Receipt workflows."""

from billscan.application.receipts.scan import (
    ReceiptScanRequest,
    ReceiptScanResult,
    run_receipt_scan,
    scan_image_bytes,
)

__all__ = [
    "ReceiptScanRequest",
    "ReceiptScanResult",
    "run_receipt_scan",
    "scan_image_bytes",
]
