"""Tests for the scan workflow: image -> OCR -> parse, with fallback."""

import io
from decimal import Decimal
from pathlib import Path

import httpx
from PIL import Image

from billscan.application.receipts.scan import ReceiptScanRequest, run_receipt_scan, scan_image_bytes
from billscan.domain.receipt import ReceiptResult
from billscan.runtime.settings import OCRSettings

SETTINGS = OCRSettings(url="https://ocr.test/parse/image", max_attempts=2, retry_delay=0)


def _client(status: int, text: str = "") -> httpx.Client:
    def handler(request: httpx.Request) -> httpx.Response:
        if status != 200:
            return httpx.Response(status)
        return httpx.Response(200, json={"ParsedResults": [{"ParsedText": text}]})

    return httpx.Client(transport=httpx.MockTransport(handler))


def _jpeg_bytes() -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", (1200, 900), "white").save(buffer, format="JPEG")
    return buffer.getvalue()


def test_scan_image_bytes_parses_ocr_text() -> None:
    client = _client(200, "Restaurant ABC\r\nBiryani 2 1200\r\nTotal 1200\r\n")

    result = scan_image_bytes(_jpeg_bytes(), SETTINGS, client=client, sleep=lambda _: None)

    assert result.status == "parsed"
    assert result.receipt is not None
    assert result.receipt.merchant == "Restaurant ABC"
    assert [item.name for item in result.receipt.items] == ["Biryani"]
    assert result.receipt.total == Decimal("1200")


def test_scan_image_bytes_keeps_unreadable_image_as_is() -> None:
    seen: list[bytes] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request.content)
        return httpx.Response(200, json={"ParsedResults": [{"ParsedText": "Chaat 40"}]})

    client = httpx.Client(transport=httpx.MockTransport(handler))

    result = scan_image_bytes(b"not an image", SETTINGS, client=client, sleep=lambda _: None)

    assert result.status == "parsed"
    assert len(seen) == 1


def test_scan_image_bytes_falls_back_when_ocr_unavailable() -> None:
    sleeps: list[float] = []

    result = scan_image_bytes(_jpeg_bytes(), SETTINGS, client=_client(500), sleep=sleeps.append)

    assert result.status == "ocr_unavailable"
    assert result.receipt == ReceiptResult()
    assert result.error is not None
    assert sleeps == [0]


def test_scan_image_bytes_falls_back_when_no_text() -> None:
    result = scan_image_bytes(_jpeg_bytes(), SETTINGS, client=_client(200, ""), sleep=lambda _: None)

    assert result.status == "no_text"
    assert result.receipt == ReceiptResult()


def test_run_receipt_scan_missing_file(tmp_path: Path) -> None:
    result = run_receipt_scan(ReceiptScanRequest(image_path=tmp_path / "missing.jpg"))

    assert result.status == "file_not_found"
    assert result.receipt is None
    assert "missing.jpg" in (result.error or "")


def test_run_receipt_scan_reads_image_file(tmp_path: Path) -> None:
    image_path = tmp_path / "receipt.jpg"
    image_path.write_bytes(_jpeg_bytes())

    result = run_receipt_scan(
        ReceiptScanRequest(image_path=image_path, settings=SETTINGS),
        client=_client(200, "Chaat 40"),
        sleep=lambda _: None,
    )

    assert result.status == "parsed"
    assert result.receipt is not None
    assert result.receipt.total == Decimal("40")


def test_scan_image_bytes_falls_back_on_malformed_ocr_response() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"ParsedResults": [None]})

    client = httpx.Client(transport=httpx.MockTransport(handler))

    result = scan_image_bytes(_jpeg_bytes(), SETTINGS, client=client, sleep=lambda _: None)

    assert result.status == "ocr_unavailable"
    assert result.receipt == ReceiptResult()
    assert "unexpected OCR response shape" in (result.error or "")
