import logging
import sys
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.responses import PlainTextResponse

from openlabel.api.endpoints import analysis, generation
from openlabel.core.config import load_settings
from openlabel.core.errors import ConfigurationError, register_exception_handlers
from openlabel.core.http_client import HttpClientManager
from openlabel.core.logging_utils import configure_logging
from openlabel.services.ai_service import AIService
from openlabel.services.song_analysis_service import SongAnalysisService
from openlabel.services.staging_service import StagingService

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Raises ConfigurationError before the server accepts any request
    settings = load_settings()
    configure_logging(settings.log_level, settings.log_format)

    ai_service = AIService.from_settings(settings)
    app.state.settings = settings
    app.state.ai_service = ai_service
    app.state.song_analysis_service = SongAnalysisService(ai_service, StagingService(settings.upload_dir))
    logger.info(f"OpenLabel AI Backend ready (chat={settings.chat_model}, image={settings.image_model})")
    try:
        yield
    finally:
        await HttpClientManager.close()


app = FastAPI(
    title="OpenLabel AI Backend",
    description="Relay for AI lyric writing, cover art and song feedback.",
    version="1.0.0",
    docs_url="/docs",
    openapi_url="/openapi.json",
    lifespan=lifespan,
)

register_exception_handlers(app)
app.middleware("http")(analysis.reject_oversized_upload)
app.include_router(generation.router)
app.include_router(analysis.router)

@app.get("/", response_class=PlainTextResponse)
async def health_check():
    return "OpenLabel AI Backend is running!"


def run() -> None:
    """Console entry point: validate configuration, then serve."""
    try:
        settings = load_settings()
    except ConfigurationError as e:
        configure_logging()
        logger.critical(f"Refusing to start: {e}")
        sys.exit(1)

    configure_logging(settings.log_level, settings.log_format)
    logger.info(f"OpenLabel AI Backend starting on port {settings.port}")
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    run()
