import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
import sentry_sdk

from cv_analyzer.ai.types import AIClient
from cv_analyzer.api.v1.analysis import router as analysis_router
from cv_analyzer.api.v1.contact import router as contact_router
from cv_analyzer.api.v1.health import router as health_router
from cv_analyzer.core.config import Settings, load_settings
from cv_analyzer.core.cors import cors_allow_origin_regex, cors_allowed_origins
from cv_analyzer.core.errors import AnalysisError
from cv_analyzer.core.lifespan import lifespan
from cv_analyzer.core.rate_limit import build_limiter

logger = logging.getLogger(__name__)


async def _analysis_error_handler(request: Request, exc: AnalysisError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("request_failed path=%s code=%s: %s", request.url.path, exc.code, exc)
    return JSONResponse(status_code=exc.status_code, content={"error": exc.code, "details": str(exc)})


async def _validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        messages.append(f"{location}: {error.get('msg')}" if location else str(error.get("msg")))
    return JSONResponse(
        status_code=400,
        content={"error": "validation_failed", "details": "; ".join(messages)},
    )


def _rate_limit_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    # slowapi's middleware calls this synchronously.
    return JSONResponse(
        status_code=429,
        content={"error": "rate_limited", "details": f"Rate limit exceeded: {exc.detail}"},
    )


async def _unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("unexpected_error path=%s", request.url.path)
    return JSONResponse(status_code=500, content={"error": "internal_error", "details": str(exc)})


def create_app(settings: Settings | None = None, *, ai_client: AIClient | None = None) -> FastAPI:
    settings = settings or load_settings()
    app = FastAPI(title="CV Analyzer API", version="0.1.0", lifespan=lifespan)
    app.state.settings = settings
    app.state.ai_client = ai_client

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_allowed_origins(settings),
        allow_origin_regex=cors_allow_origin_regex(settings),
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.state.limiter = build_limiter(settings)
    app.add_exception_handler(RateLimitExceeded, _rate_limit_handler)
    app.add_middleware(SlowAPIMiddleware)

    app.add_exception_handler(AnalysisError, _analysis_error_handler)
    app.add_exception_handler(RequestValidationError, _validation_error_handler)
    app.add_exception_handler(Exception, _unexpected_error_handler)

    app.include_router(health_router, tags=["Health"])
    app.include_router(analysis_router, tags=["Analysis"])
    app.include_router(contact_router, tags=["Contact"])
    return app


settings = load_settings()
logging.basicConfig(level=settings.log_level, format="%(message)s")
if settings.sentry_dsn:
    sentry_sdk.init(dsn=settings.sentry_dsn)

app = create_app(settings)
