from dataclasses import dataclass

from cv_analyzer.core.config import Settings


@dataclass(frozen=True)
class AIConfig:
    provider: str
    model: str
    api_key: str | None
    base_url: str | None = None


def load_ai_config(settings: Settings) -> AIConfig:
    if settings.ai_provider == "gemini":
        return AIConfig(provider="gemini", model=settings.ai_model, api_key=settings.gemini_api_key)
    return AIConfig(
        provider=settings.ai_provider,
        model=settings.ai_model,
        api_key=settings.openai_api_key,
        base_url=settings.openai_base_url,
    )
