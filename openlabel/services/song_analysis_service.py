import logging

from openlabel.core.errors import InternalError, ProviderError
from openlabel.services.ai_service import AIService
from openlabel.services.staging_service import StagingService

logger = logging.getLogger(__name__)

MIN_TRANSCRIPT_LENGTH = 5
FEEDBACK_FALLBACK = "Could not analyze lyrics, but file was received!"


def acknowledgment(filename: str) -> str:
    return f'✅ Received your song file "{filename}". (But could not transcribe audio.)'


class SongAnalysisService:
    """
    Two-stage pipeline for uploaded songs.
    Coordinators:
    - Staging -> via StagingService
    - Transcription and feedback -> via AIService

    Provider failures never fail the request: an unusable transcript
    produces an acknowledgment, a failed review produces FEEDBACK_FALLBACK.
    """

    def __init__(self, ai_service: AIService, staging: StagingService):
        self.ai_service = ai_service
        self.staging = staging

    async def analyze(self, data: bytes, filename: str) -> str:
        try:
            return await self._analyze(data, filename)
        except OSError as e:
            logger.error(f"Could not stage upload {filename!r}: {e}")
            raise InternalError("Failed to analyze song.") from e
        except Exception as e:
            logger.exception(f"Song analysis failed for {filename!r}")
            raise InternalError("Failed to analyze song.") from e

    async def _analyze(self, data: bytes, filename: str) -> str:
        transcript = await self._transcribe(data, filename)

        if len(transcript) <= MIN_TRANSCRIPT_LENGTH:
            logger.info(f"No usable transcript for {filename!r}; acknowledging upload only.")
            return acknowledgment(filename)

        logger.info(f"Transcribed {len(transcript)} chars from {filename!r}; requesting feedback.")
        try:
            return await self.ai_service.review_transcript(transcript)
        except ProviderError:
            logger.warning(f"Feedback stage failed for {filename!r}; using fallback message.")
            return FEEDBACK_FALLBACK

    async def _transcribe(self, data: bytes, filename: str) -> str:
        async with self.staging.stage(data, filename) as path:
            try:
                transcript = await self.ai_service.transcribe(path)
            except ProviderError:
                logger.warning(f"Transcription failed for {filename!r}; continuing without transcript.")
                return ""
        return transcript.strip()
