"""FastAPI server for parsing receipt text and uploaded receipt images."""

from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from billscan.application.receipts.scan import scan_image_bytes
from billscan.receipt.formatter import receipt_to_dict
from billscan.receipt.ocr_result_parser import parse_receipt
from billscan.runtime import get_logger

logger = get_logger(__name__)

app = FastAPI(title="Receipt Scanner")


@app.post("/parse")
async def parse_text(request: Request) -> JSONResponse:
    """Parse OCR text sent as JSON {"text": "..."}."""
    try:
        body: Any = await request.json()
    except ValueError:
        return JSONResponse({"status": "error", "message": "Request body must be JSON"}, status_code=400)

    text = body.get("text") if isinstance(body, dict) else None
    if not isinstance(text, str):
        return JSONResponse({"status": "error", "message": "Missing 'text' string"}, status_code=400)

    receipt = parse_receipt(text)
    return JSONResponse({"status": "success", "receipt": receipt_to_dict(receipt)})


@app.post("/upload")
async def upload_receipt(request: Request) -> JSONResponse:
    """Receive a receipt image, run OCR and return the parsed items for review."""
    form = await request.form()

    file = None
    for key, value in form.items():
        logger.debug(f"Form field: key={repr(key)}, type={type(value)}")
        if hasattr(value, "read"):
            file = value
            break

    if not file:
        return JSONResponse({"status": "error", "message": "No file found in request"}, status_code=400)

    contents = await file.read()
    file_filename = getattr(file, "filename", None) or "receipt.jpg"
    logger.info(f"Received {file_filename} ({len(contents)} bytes)")

    # OCR retries block, keep them off the event loop
    result = await run_in_threadpool(scan_image_bytes, contents)
    if result.receipt is None:
        logger.error("Scan finished with status %s but no receipt", result.status)
        return JSONResponse({"status": "error", "message": "Scan failed: missing receipt output"}, status_code=500)

    return JSONResponse(
        {
            "status": "success" if result.status == "parsed" else "fallback",
            "scan_status": result.status,
            "message": result.error,
            "image_filename": file_filename,
            "size_bytes": len(contents),
            "receipt": receipt_to_dict(result.receipt),
        }
    )


@app.get("/health")
async def health() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "ok"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
