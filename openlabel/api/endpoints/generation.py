from fastapi import APIRouter, Depends, Request
from openlabel.core.errors import ValidationError
from openlabel.schemas.models import GenerationRequest, LyricsResponse, CoverArtResponse, ErrorResponse
from openlabel.services.ai_service import AIService
import logging

router = APIRouter()
logger = logging.getLogger(__name__)

ERROR_RESPONSES = {400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}}

# Dependency Injection for Service
def get_ai_service(request: Request) -> AIService:
    return request.app.state.ai_service

@router.post("/generate-lyrics", response_model=LyricsResponse, responses=ERROR_RESPONSES, summary="Generate song lyrics")
async def generate_lyrics(
    body: GenerationRequest,
    service: AIService = Depends(get_ai_service)
):
    """
    Writes original lyrics for the given prompt with the text-generation provider.
    """
    logger.info(f"Songwriter prompt received: {body.prompt!r}")

    if not body.prompt:
        raise ValidationError("No prompt provided for lyrics.")

    lyrics = await service.generate_lyrics(body.prompt)
    return LyricsResponse(lyrics=lyrics)

@router.post("/generate-cover-art", response_model=CoverArtResponse, responses=ERROR_RESPONSES, summary="Generate album cover art")
async def generate_cover_art(
    body: GenerationRequest,
    service: AIService = Depends(get_ai_service)
):
    """
    Generates one 1024x1024 album cover for the prompt and returns its URL.
    """
    logger.info(f"Cover art prompt received: {body.prompt!r}")

    if not body.prompt:
        raise ValidationError("No prompt provided for cover art.")

    image_url = await service.generate_cover_art(body.prompt)
    return CoverArtResponse(image_url=image_url)
