from typing import Optional
from fastapi import APIRouter, Depends, File, Request, UploadFile
from openlabel.core.errors import ValidationError, error_envelope
from openlabel.schemas.models import FeedbackResponse, ErrorResponse
from openlabel.services.song_analysis_service import SongAnalysisService
import logging

router = APIRouter()
logger = logging.getLogger(__name__)

MAX_UPLOAD_BYTES = 50 * 1024 * 1024  # 50 MiB
# Room for multipart boundaries and part headers around the file itself
MULTIPART_OVERHEAD_BYTES = 64 * 1024
TOO_LARGE_MESSAGE = "File too large. Maximum upload size is 50 MiB."

async def reject_oversized_upload(request: Request, call_next):
    """
    Refuse an /analyze-song body by its Content-Length before the form is parsed.
    Chunked uploads without a length still hit the check in analyze_song.
    """
    if request.url.path == "/analyze-song":
        declared = request.headers.get("content-length", "")
        if declared.isdigit() and int(declared) > MAX_UPLOAD_BYTES + MULTIPART_OVERHEAD_BYTES:
            logger.info(f"Rejected /analyze-song upload declaring {declared} bytes")
            return error_envelope(TOO_LARGE_MESSAGE, 400)
    return await call_next(request)

def get_song_analysis_service(request: Request) -> SongAnalysisService:
    return request.app.state.song_analysis_service

@router.post(
    "/analyze-song",
    response_model=FeedbackResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    summary="Transcribe an uploaded song and review its lyrics",
)
async def analyze_song(
    file: Optional[UploadFile] = File(None),
    service: SongAnalysisService = Depends(get_song_analysis_service)
):
    """
    Accepts one audio file (multipart field `file`).
    Transcribes it and returns A&R-style feedback on the lyrics. When the
    audio cannot be transcribed the response still succeeds with an
    acknowledgment of the upload.
    """
    if file is None:
        raise ValidationError("No file uploaded.")

    try:
        # One byte past the cap is enough to detect an oversized upload
        data = await file.read(MAX_UPLOAD_BYTES + 1)
    finally:
        await file.close()

    if len(data) > MAX_UPLOAD_BYTES:
        raise ValidationError(TOO_LARGE_MESSAGE)

    filename = file.filename or "upload"
    logger.info(f"Song upload received: {filename!r} ({len(data)} bytes)")

    feedback = await service.analyze(data, filename)
    return FeedbackResponse(feedback=feedback)
