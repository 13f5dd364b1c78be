from cv_analyzer.ai.config import load_ai_config
from cv_analyzer.ai.types import AIClient
from cv_analyzer.core.config import Settings
from cv_analyzer.core.errors import GenerationFailed

from cv_analyzer.ai.providers.openai_provider import OpenAIProvider
from cv_analyzer.ai.providers.gemini_provider import GeminiProvider


def get_ai_client(settings: Settings) -> AIClient:
    cfg = load_ai_config(settings)
    if not cfg.api_key:
        raise GenerationFailed(
            f"LLM provider '{cfg.provider}' is not configured; set its API key.",
            code="llm_unavailable",
        )

    if cfg.provider == "openai":
        return OpenAIProvider(model=cfg.model, api_key=cfg.api_key, base_url=cfg.base_url)

    if cfg.provider == "gemini":
        return GeminiProvider(model=cfg.model, api_key=cfg.api_key)

    raise ValueError(f"Unsupported AI_PROVIDER='{cfg.provider}'")
