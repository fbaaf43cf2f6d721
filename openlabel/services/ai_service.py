import logging
from typing import List, Dict

from openai import AsyncOpenAI, APIStatusError, OpenAIError

from openlabel.core.config import Settings
from openlabel.core.errors import ProviderError
from openlabel.core.http_client import HttpClientManager

logger = logging.getLogger(__name__)

SONGWRITER_SYSTEM_PROMPT = (
    "You are a creative AI songwriter assistant. "
    "Write original song lyrics based on the prompt."
)
REVIEWER_SYSTEM_PROMPT = "You're an expert AI A&R music reviewer."

LYRICS_MAX_TOKENS = 400
LYRICS_TEMPERATURE = 0.85
FEEDBACK_MAX_TOKENS = 300
FEEDBACK_TEMPERATURE = 0.8

COVER_ART_SIZE = "1024x1024"


def build_cover_art_prompt(prompt: str) -> str:
    return f"Album cover art, {prompt}, no text"


def build_review_prompt(transcript: str) -> str:
    return (
        "You are an AI A&R specialist for a record label. "
        "Listen to this song's lyrics and analyze its genre, strengths, weaknesses, "
        "and give technical feedback for the artist. "
        f"Song lyrics transcription:\n\n{transcript}\n\n"
        "Return your analysis in a friendly, constructive, and encouraging style."
    )


def _describe(exc: Exception) -> str:
    """Provider error detail for the server log."""
    if isinstance(exc, APIStatusError):
        return f"HTTP {exc.status_code}: {exc.body or exc.message}"
    return f"{type(exc).__name__}: {exc}"


class AIService:
    """
    Thin wrapper around the OpenAI-compatible provider.
    One coroutine per external call; each call is a single bounded attempt
    and any failure surfaces as ProviderError with a generic message.
    """

    def __init__(self, client: AsyncOpenAI, settings: Settings):
        self.client = client
        self.settings = settings

    @classmethod
    def from_settings(cls, settings: Settings) -> "AIService":
        client = AsyncOpenAI(
            api_key=settings.openai_api_key,
            base_url=settings.openai_base_url,
            timeout=settings.provider_timeout,
            max_retries=0,
            http_client=HttpClientManager.get_client(settings.provider_timeout),
        )
        return cls(client, settings)

    async def generate_lyrics(self, prompt: str) -> str:
        return await self._chat(
            [
                {"role": "system", "content": SONGWRITER_SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
            max_tokens=LYRICS_MAX_TOKENS,
            temperature=LYRICS_TEMPERATURE,
            failure_message="Failed to generate lyrics.",
        )

    async def review_transcript(self, transcript: str) -> str:
        return await self._chat(
            [
                {"role": "system", "content": REVIEWER_SYSTEM_PROMPT},
                {"role": "user", "content": build_review_prompt(transcript)},
            ],
            max_tokens=FEEDBACK_MAX_TOKENS,
            temperature=FEEDBACK_TEMPERATURE,
            failure_message="Failed to analyze lyrics.",
        )

    async def generate_cover_art(self, prompt: str) -> str:
        try:
            response = await self.client.images.generate(
                model=self.settings.image_model,
                prompt=build_cover_art_prompt(prompt),
                n=1,
                size=COVER_ART_SIZE,
                response_format="url",
            )
            image_url = response.data[0].url
        except OpenAIError as e:
            logger.error(f"Cover art provider call failed: {_describe(e)}")
            raise ProviderError("Failed to generate cover art.") from e
        except (IndexError, AttributeError, TypeError) as e:
            logger.error(f"Cover art provider returned a malformed payload: {e}")
            raise ProviderError("Failed to generate cover art.") from e

        if not isinstance(image_url, str) or not image_url:
            logger.error(f"Cover art provider returned no usable image URL: {image_url!r}")
            raise ProviderError("Failed to generate cover art.")
        return image_url

    async def transcribe(self, audio_path: str) -> str:
        """
        Transcribe a staged audio file. Returns the raw transcript text,
        which may be empty.
        """
        try:
            with open(audio_path, "rb") as audio_file:
                response = await self.client.audio.transcriptions.create(
                    model=self.settings.transcription_model,
                    file=audio_file,
                )
            text = response.text
        except OpenAIError as e:
            logger.error(f"Transcription provider call failed: {_describe(e)}")
            raise ProviderError("Failed to transcribe audio.") from e
        except AttributeError as e:
            logger.error(f"Transcription provider returned a malformed payload: {e}")
            raise ProviderError("Failed to transcribe audio.") from e

        if text is None:
            return ""
        if not isinstance(text, str):
            logger.error(f"Transcription provider returned a non-text transcript: {type(text).__name__}")
            raise ProviderError("Failed to transcribe audio.")
        return text

    async def _chat(self, messages: List[Dict], max_tokens: int, temperature: float, failure_message: str) -> str:
        try:
            response = await self.client.chat.completions.create(
                model=self.settings.chat_model,
                messages=messages,
                max_tokens=max_tokens,
                temperature=temperature,
            )
            content = response.choices[0].message.content
        except OpenAIError as e:
            logger.error(f"Chat provider call failed: {_describe(e)}")
            raise ProviderError(failure_message) from e
        except (IndexError, AttributeError, TypeError) as e:
            logger.error(f"Chat provider returned a malformed payload: {e}")
            raise ProviderError(failure_message) from e

        if not isinstance(content, str) or not content:
            logger.error(f"Chat provider returned an unusable completion: {content!r}")
            raise ProviderError(failure_message)
        return content
