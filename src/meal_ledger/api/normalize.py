"""Endpoints that turn meal descriptions into structured items."""

import logging

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse

from meal_ledger.api.dependencies import get_container, require_user
from meal_ledger.api.models import AnalyzeTextRequest
from meal_ledger.services.normalization import (
    DEFAULT_AUDIO_CONTENT_TYPE,
    DEFAULT_AUDIO_FILENAME,
    AudioPayload,
)

MULTIPART_REQUIRED_MESSAGE = "Expected multipart/form-data with a 'file' field"
MISSING_FILE_MESSAGE = "No audio file provided under 'file'"

router = APIRouter(tags=["normalize"], dependencies=[Depends(require_user)])

_logger = logging.getLogger(__name__)


@router.post("/transcribe-and-analyze")
async def transcribe_and_analyze(request: Request) -> JSONResponse:
    """Transcribe an uploaded recording and return sanitized food items."""
    content_type = request.headers.get("content-type", "")
    if "multipart/form-data" not in content_type:
        return error_response(status.HTTP_400_BAD_REQUEST, MULTIPART_REQUIRED_MESSAGE)

    try:
        async with request.form() as form:
            upload = form.get("file")
            if upload is None or isinstance(upload, str):
                return error_response(
                    status.HTTP_400_BAD_REQUEST, MISSING_FILE_MESSAGE
                )
            audio = AudioPayload(
                content=await upload.read(),
                filename=upload.filename or DEFAULT_AUDIO_FILENAME,
                content_type=upload.content_type or DEFAULT_AUDIO_CONTENT_TYPE,
            )
    except Exception:
        _logger.warning("Failed to parse multipart body", exc_info=True)
        return error_response(status.HTTP_400_BAD_REQUEST, MULTIPART_REQUIRED_MESSAGE)

    service = get_container(request).normalization_service
    try:
        result = await service.normalize_audio(audio)
    except Exception as exc:
        _logger.exception("transcribe-and-analyze failed")
        return _failure_response(exc)
    return JSONResponse(result.to_payload())


@router.post("/analyze-text")
async def analyze_text(body: AnalyzeTextRequest, request: Request) -> JSONResponse:
    """Structure a typed meal description into sanitized food items."""
    service = get_container(request).normalization_service
    try:
        result = await service.normalize_text(body.text)
    except Exception as exc:
        _logger.exception("analyze-text failed")
        return _failure_response(exc)
    return JSONResponse(result.to_payload())


def error_response(status_code: int, message: str) -> JSONResponse:
    """Return the `{"error": message}` body used for all failures."""
    return JSONResponse({"error": message}, status_code=status_code)


def _failure_response(exc: Exception) -> JSONResponse:
    return error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR, str(exc) or "Unknown error"
    )
