import os

import httpx
import pytest
from fastapi.testclient import TestClient
from openai import AsyncOpenAI

from openlabel.api.endpoints.analysis import get_song_analysis_service
from openlabel.api.endpoints.generation import get_ai_service
from openlabel.core.config import Settings
from openlabel.core.errors import ProviderError
from openlabel.main import app
from openlabel.services.ai_service import AIService
from openlabel.services.song_analysis_service import SongAnalysisService
from openlabel.services.staging_service import StagingService


@pytest.fixture
def anyio_backend():
    return "asyncio"


class FakeAIService:
    """Stands in for AIService; `fail` names the calls that should raise ProviderError."""

    def __init__(self):
        self.lyrics = "Neon hearts in a midnight town"
        self.image_url = "https://images.example.com/cover.png"
        self.transcript = "  we were young and the night was long  "
        self.feedback = "Strong chorus, tighten the second verse."
        self.fail = set()
        self.prompts = []
        self.staged = []
        self.reviewed = []

    async def generate_lyrics(self, prompt):
        self.prompts.append(prompt)
        if "lyrics" in self.fail:
            raise ProviderError("Failed to generate lyrics.")
        return self.lyrics

    async def generate_cover_art(self, prompt):
        self.prompts.append(prompt)
        if "cover_art" in self.fail:
            raise ProviderError("Failed to generate cover art.")
        return self.image_url

    async def transcribe(self, audio_path):
        with open(audio_path, "rb") as f:
            self.staged.append((audio_path, f.read()))
        if "transcribe" in self.fail:
            raise ProviderError("Failed to transcribe audio.")
        return self.transcript

    async def review_transcript(self, transcript):
        self.reviewed.append(transcript)
        if "review" in self.fail:
            raise ProviderError("Failed to analyze lyrics.")
        return self.feedback


@pytest.fixture
def settings():
    return Settings(openai_api_key="test-key")


@pytest.fixture
def mock_ai_service(settings):
    """Build a real AIService whose HTTP traffic goes to `handler`."""
    def build(handler):
        client = AsyncOpenAI(
            api_key=settings.openai_api_key,
            max_retries=0,
            http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
        )
        return AIService(client, settings)
    return build


@pytest.fixture
def fake_ai():
    return FakeAIService()


@pytest.fixture
def upload_dir(tmp_path):
    return str(tmp_path / "uploads")


@pytest.fixture
def env(monkeypatch, upload_dir):
    monkeypatch.setenv("OPENAI_API_KEY", "test-key")
    monkeypatch.setenv("UPLOAD_DIR", upload_dir)


@pytest.fixture
def client(env, fake_ai, upload_dir):
    app.dependency_overrides[get_ai_service] = lambda: fake_ai
    app.dependency_overrides[get_song_analysis_service] = lambda: SongAnalysisService(
        fake_ai, StagingService(upload_dir)
    )
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def staged_files(upload_dir):
    def listing():
        if not os.path.isdir(upload_dir):
            return []
        return os.listdir(upload_dir)
    return listing
