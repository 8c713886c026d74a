"""Runtime helpers for the receipt OCR pipeline (non-HTTP server)."""

import time
from collections.abc import Callable

import httpx

from billscan.receipt.ocr_helpers import image_size_kb, image_to_data_uri, read_ocr_space_payload
from billscan.runtime.logging import get_logger
from billscan.runtime.settings import OCRSettings, get_settings

logger = get_logger(__name__)


class OCRServiceUnavailable(RuntimeError):
    """Raised when the OCR service cannot be reached or returns an error."""


def call_ocr_service(
    image_bytes: bytes,
    settings: OCRSettings | None = None,
    client: httpx.Client | None = None,
) -> str:
    """
    Send one image to the OCR service and return the recognised text.

    Args:
        image_bytes: JPEG image data
        settings: Provider settings (defaults to get_settings())
        client: Optional httpx client, e.g. with a mock transport

    Returns:
        Recognised text; "" when the service found none
    """
    settings = settings or get_settings()

    size_kb = image_size_kb(image_bytes)
    logger.info("Sending %.1f KB image to OCR service at %s", size_kb, settings.url)
    if size_kb > settings.max_image_kb:
        raise OCRServiceUnavailable(f"Image too large for OCR: {size_kb:.1f} KB > {settings.max_image_kb} KB")

    form = {
        "apikey": settings.api_key,
        "language": settings.language,
        "isOverlayRequired": "false",
        "base64Image": image_to_data_uri(image_bytes),
    }

    try:
        start_time = time.time()
        if client is None:
            response = httpx.post(settings.url, data=form, timeout=settings.timeout)
        else:
            response = client.post(settings.url, data=form, timeout=settings.timeout)
        logger.info("OCR service returned in %.2f seconds", time.time() - start_time)
    except httpx.HTTPError as e:
        logger.error("Failed to connect to OCR service: %s", e)
        raise OCRServiceUnavailable(f"Failed to connect to OCR service: {e}") from e

    if response.status_code != 200:
        logger.error("OCR service error: %s", response.status_code)
        raise OCRServiceUnavailable(f"OCR service error: {response.status_code}")

    try:
        payload = response.json()
    except ValueError as e:
        raise OCRServiceUnavailable("OCR service returned invalid JSON") from e

    try:
        text, error = read_ocr_space_payload(payload)
    except ValueError as e:
        logger.error("%s", e)
        raise OCRServiceUnavailable(str(e)) from e
    if error is not None:
        logger.error("OCR processing error: %s", error)
        raise OCRServiceUnavailable(f"OCR processing error: {error}")
    return text


def extract_text_with_retry(
    image_bytes: bytes,
    settings: OCRSettings | None = None,
    client: httpx.Client | None = None,
    sleep: Callable[[float], None] = time.sleep,
) -> str:
    """
    Call the OCR service until it returns text or attempts run out.

    An empty response is retried straight away; a failed attempt waits
    settings.retry_delay first. The error from the last attempt propagates.

    Returns:
        Recognised text, or "" if every attempt came back empty

    Raises:
        OCRServiceUnavailable: If the final attempt failed
    """
    settings = settings or get_settings()

    for attempt in range(1, settings.max_attempts + 1):
        logger.info("OCR attempt %d/%d", attempt, settings.max_attempts)
        try:
            text = call_ocr_service(image_bytes, settings, client=client)
        except OCRServiceUnavailable as e:
            if attempt == settings.max_attempts:
                raise
            logger.warning("OCR attempt %d failed: %s; retrying in %.1fs", attempt, e, settings.retry_delay)
            sleep(settings.retry_delay)
            continue

        if text.strip():
            logger.info("Extracted %d characters on attempt %d", len(text), attempt)
            return text
        logger.warning("OCR attempt %d returned no text", attempt)

    return ""
