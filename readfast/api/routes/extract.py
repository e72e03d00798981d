"""Text extraction API routes (URL and file upload)."""

import logging

from fastapi import APIRouter, Depends, File, UploadFile
from fastapi.responses import JSONResponse

from readfast.config import Settings, get_settings
from readfast.schemas.document import ErrorResponse, ExtractResponse, ExtractUrlRequest
from readfast.services.extraction import extract_from_file, fetch_url_text
from readfast.services.extraction.result import ExtractionResult
from readfast.services.extraction.web import GENERIC_FAILURE

router = APIRouter()
logger = logging.getLogger(__name__)

_ERROR_RESPONSES = {400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}}


def _to_response(result: ExtractionResult):
    if not result.ok:
        return JSONResponse(status_code=400, content={"error": result.error})
    return ExtractResponse(text=result.text)


@router.post("/extract", response_model=ExtractResponse, responses=_ERROR_RESPONSES)
async def extract_url(
    request: ExtractUrlRequest,
    settings: Settings = Depends(get_settings),
):
    """Fetch a web page and return its readable text."""
    try:
        result = await fetch_url_text(
            request.url,
            timeout=settings.url_fetch_timeout_seconds,
            min_chars=settings.min_extracted_chars,
            main_content_min_chars=settings.main_content_min_chars,
        )
    except Exception:
        logger.exception("Extract API error")
        return JSONResponse(status_code=500, content={"error": GENERIC_FAILURE})

    return _to_response(result)


@router.post("/extract/file", response_model=ExtractResponse, responses=_ERROR_RESPONSES)
async def extract_file(
    file: UploadFile = File(...),
    settings: Settings = Depends(get_settings),
):
    """Extract readable text from an uploaded PDF, EPUB, TXT or MD file."""
    data = await file.read(settings.max_upload_bytes + 1)
    if len(data) > settings.max_upload_bytes:
        limit_mb = settings.max_upload_bytes // (1024 * 1024)
        return JSONResponse(
            status_code=400,
            content={"error": f"File is too large. The limit is {limit_mb} MB."},
        )

    try:
        result = extract_from_file(file.filename or "", data)
    except Exception:
        logger.exception("File extraction error for %s", file.filename)
        return JSONResponse(status_code=500, content={"error": GENERIC_FAILURE})

    return _to_response(result)
