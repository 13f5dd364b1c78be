from fastapi import Request

from cv_analyzer.ai.factory import get_ai_client
from cv_analyzer.ai.types import AIClient, ClientProvider
from cv_analyzer.core.config import Settings


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_client_provider(request: Request) -> ClientProvider:
    state = request.app.state

    def provide() -> AIClient:
        if state.ai_client is None:
            state.ai_client = get_ai_client(state.settings)
        return state.ai_client

    return provide
