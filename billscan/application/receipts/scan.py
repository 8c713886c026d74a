"""Receipt scan workflow orchestration."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Literal

import httpx

from billscan.domain.receipt import ReceiptResult
from billscan.receipt.ocr_helpers import (
    FALLBACK_IMAGE_WIDTH,
    FALLBACK_JPEG_QUALITY,
    MAX_OPTIMIZED_IMAGE_KB,
    image_size_kb,
    optimize_image_bytes,
)
from billscan.receipt.ocr_result_parser import parse_receipt
from billscan.runtime import OCRSettings, get_logger
from billscan.runtime.receipt_pipeline import OCRServiceUnavailable, extract_text_with_retry

logger = get_logger(__name__)

ScanStatus = Literal[
    "file_not_found",
    "ocr_unavailable",
    "no_text",
    "parsed",
]


@dataclass(frozen=True)
class ReceiptScanRequest:
    """Inputs for running receipt scan workflow."""

    image_path: Path
    settings: OCRSettings | None = None


@dataclass(frozen=True)
class ReceiptScanResult:
    """Outcome from receipt scan workflow.

    receipt is always set except for file_not_found; when OCR fails it is the
    empty fallback result so callers can offer manual entry.
    """

    status: ScanStatus
    receipt: ReceiptResult | None = None
    error: str | None = None


def _optimize_for_ocr(image_bytes: bytes) -> bytes:
    """Shrink the image for upload, keeping the original if Pillow cannot read it."""
    try:
        optimized = optimize_image_bytes(image_bytes)
        if image_size_kb(optimized) > MAX_OPTIMIZED_IMAGE_KB:
            logger.info("Image still %.1f KB, compressing further", image_size_kb(optimized))
            optimized = optimize_image_bytes(optimized, width=FALLBACK_IMAGE_WIDTH, quality=FALLBACK_JPEG_QUALITY)
    except (OSError, ValueError) as e:
        logger.warning("Image optimization failed, using original image: %s", e)
        return image_bytes
    logger.debug("Optimized image: %.1f KB -> %.1f KB", image_size_kb(image_bytes), image_size_kb(optimized))
    return optimized


def scan_image_bytes(
    image_bytes: bytes,
    settings: OCRSettings | None = None,
    client: httpx.Client | None = None,
    sleep: Callable[[float], None] | None = None,
) -> ReceiptScanResult:
    """Run OCR -> parse on in-memory image data."""
    optimized = _optimize_for_ocr(image_bytes)

    retry_kwargs = {"sleep": sleep} if sleep is not None else {}
    try:
        text = extract_text_with_retry(optimized, settings, client=client, **retry_kwargs)
    except OCRServiceUnavailable as exc:
        logger.warning("OCR failed, returning empty receipt: %s", exc)
        return ReceiptScanResult(status="ocr_unavailable", receipt=ReceiptResult(), error=str(exc))

    if not text.strip():
        logger.warning("No text extracted after all attempts, returning empty receipt")
        return ReceiptScanResult(status="no_text", receipt=ReceiptResult(), error="No text found in image")

    receipt = parse_receipt(text)
    logger.info("Parsed %d items from receipt", len(receipt.items))
    return ReceiptScanResult(status="parsed", receipt=receipt)


def run_receipt_scan(
    request: ReceiptScanRequest,
    client: httpx.Client | None = None,
    sleep: Callable[[float], None] | None = None,
) -> ReceiptScanResult:
    """Run scan flow: read image -> OCR -> parse."""
    if not request.image_path.exists():
        return ReceiptScanResult(
            status="file_not_found",
            error=f"Receipt file not found: {request.image_path}",
        )

    return scan_image_bytes(
        request.image_path.read_bytes(),
        settings=request.settings,
        client=client,
        sleep=sleep,
    )
