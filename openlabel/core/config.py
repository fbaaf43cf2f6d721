# openlabel/core/config.py
import os
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel

from openlabel.core.errors import ConfigurationError

DEFAULT_PORT = 3000
DEFAULT_PROVIDER_TIMEOUT = 60.0


class Settings(BaseModel):
    openai_api_key: str
    openai_base_url: Optional[str] = None
    host: str = "0.0.0.0"
    port: int = DEFAULT_PORT
    chat_model: str = "gpt-3.5-turbo"
    image_model: str = "dall-e-2"
    transcription_model: str = "whisper-1"
    provider_timeout: float = DEFAULT_PROVIDER_TIMEOUT
    upload_dir: str = "uploads"
    log_level: str = "INFO"
    log_format: str = "text"


def _positive_number(name: str, raw: str, cast):
    try:
        value = cast(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}")
    if value <= 0:
        raise ConfigurationError(f"{name} must be positive, got {raw!r}")
    return value


def load_settings() -> Settings:
    """
    Build Settings from the environment (and a .env file, if present).

    Raises ConfigurationError when the provider credential is missing or a
    numeric setting is malformed. Called once at startup.
    """
    load_dotenv()

    api_key = os.getenv("OPENAI_API_KEY", "").strip()
    if not api_key:
        raise ConfigurationError("OPENAI_API_KEY is missing from the environment.")

    return Settings(
        openai_api_key=api_key,
        openai_base_url=os.getenv("OPENAI_BASE_URL") or None,
        host=os.getenv("HOST", "0.0.0.0"),
        port=_positive_number("PORT", os.getenv("PORT", str(DEFAULT_PORT)), int),
        chat_model=os.getenv("OPENAI_CHAT_MODEL", "gpt-3.5-turbo"),
        image_model=os.getenv("OPENAI_IMAGE_MODEL", "dall-e-2"),
        transcription_model=os.getenv("OPENAI_TRANSCRIPTION_MODEL", "whisper-1"),
        provider_timeout=_positive_number(
            "PROVIDER_TIMEOUT", os.getenv("PROVIDER_TIMEOUT", str(DEFAULT_PROVIDER_TIMEOUT)), float
        ),
        upload_dir=os.getenv("UPLOAD_DIR", "uploads"),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        log_format=os.getenv("LOG_FORMAT", "text").lower(),
    )
