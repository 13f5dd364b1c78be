from fastapi import APIRouter, Depends

from cv_analyzer.api.deps import get_settings
from cv_analyzer.core.config import Settings

router = APIRouter()


@router.get("/health", summary="Health Check", description="Liveness probe that also reports LLM configuration.")
async def health_check(settings: Settings = Depends(get_settings)):
    return {
        "status": "healthy",
        "llm_configured": settings.llm_configured,
        "provider": settings.ai_provider,
        "model": settings.ai_model,
    }
