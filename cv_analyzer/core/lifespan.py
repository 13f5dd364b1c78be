from contextlib import asynccontextmanager
import logging
from pathlib import Path

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app):
    settings = app.state.settings
    Path(settings.upload_dir).mkdir(parents=True, exist_ok=True)
    if not settings.llm_configured:
        logger.warning(
            "llm_not_configured provider=%s; analysis endpoints will fail until an API key is set",
            settings.ai_provider,
        )
    else:
        logger.info("llm_configured provider=%s model=%s", settings.ai_provider, settings.ai_model)
    yield
