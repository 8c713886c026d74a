"""Pure OCR transformation helpers for receipt parsing."""

import base64
import io
from typing import Any

OCR_IMAGE_WIDTH = 800  # Wide enough for receipt text, small enough to upload
OCR_JPEG_QUALITY = 70

# Second, harsher pass for images still above MAX_OPTIMIZED_IMAGE_KB
FALLBACK_IMAGE_WIDTH = 600
FALLBACK_JPEG_QUALITY = 50
MAX_OPTIMIZED_IMAGE_KB = 500


def optimize_image_bytes(
    image_bytes: bytes, width: int = OCR_IMAGE_WIDTH, quality: int = OCR_JPEG_QUALITY
) -> bytes:
    """
    Resize image bytes to a fixed width and re-encode as JPEG.

    Args:
        image_bytes: Image data as bytes
        width: Target width in pixels; height keeps the aspect ratio
        quality: JPEG quality (1-95)

    Returns:
        Image bytes (JPEG format)
    """
    from PIL import Image, ImageOps

    img = Image.open(io.BytesIO(image_bytes))

    # Apply EXIF orientation so OCR reads the receipt upright
    img = ImageOps.exif_transpose(img)

    orig_width, orig_height = img.size
    height = max(1, round(orig_height * (width / orig_width)))
    img_final = img.resize((width, height), Image.Resampling.LANCZOS)

    buffer = io.BytesIO()
    img_final.convert("RGB").save(buffer, format="JPEG", quality=quality)
    return buffer.getvalue()


def image_size_kb(image_bytes: bytes) -> float:
    return len(image_bytes) / 1024


def image_to_data_uri(image_bytes: bytes) -> str:
    """Encode JPEG bytes as a base64 data URI for form upload."""
    encoded = base64.b64encode(image_bytes).decode("ascii")
    return f"data:image/jpeg;base64,{encoded}"


def read_ocr_space_payload(payload: Any) -> tuple[str, str | None]:
    """
    Pull recognised text out of an OCR.space style response.

    Args:
        payload: Decoded JSON response body

    Returns:
        Tuple of (text, error_message). error_message is None on success;
        text is "" when the provider found nothing.

    Raises:
        ValueError: If the body is not shaped like an OCR.space response
    """
    if not isinstance(payload, dict):
        raise ValueError(f"unexpected OCR response shape: {type(payload).__name__}")

    if payload.get("IsErroredOnProcessing"):
        message = payload.get("ErrorMessage") or "unknown error"
        if isinstance(message, list):
            message = "; ".join(str(m) for m in message)
        return "", str(message)

    parsed_results = payload.get("ParsedResults") or []
    if not isinstance(parsed_results, list):
        raise ValueError("unexpected OCR response shape: ParsedResults is not a list")
    if not parsed_results:
        return "", None

    first = parsed_results[0]
    if not isinstance(first, dict):
        raise ValueError("unexpected OCR response shape: ParsedResults[0] is not an object")
    text = first.get("ParsedText") or ""
    if not isinstance(text, str):
        raise ValueError("unexpected OCR response shape: ParsedText is not a string")
    return text, None
