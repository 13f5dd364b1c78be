from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv


def _get_env(name: str, default: str | None = None) -> str | None:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return value


def _get_env_bool(name: str, default: bool) -> bool:
    raw = _get_env(name, None)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _get_env_int(name: str, default: int) -> int:
    raw = _get_env(name, None)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _get_env_float(name: str, default: float) -> float:
    raw = _get_env(name, None)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _get_env_list(name: str, default: list[str]) -> tuple[str, ...]:
    raw = _get_env(name, None)
    if raw is None:
        return tuple(default)
    values = [item.strip() for item in raw.split(",")]
    clean = [item for item in values if item]
    return tuple(clean) if clean else tuple(default)


@dataclass(frozen=True)
class Settings:
    ai_provider: str = "openai"
    ai_model: str = "gpt-4o-mini"
    openai_api_key: str | None = None
    openai_base_url: str | None = None
    gemini_api_key: str | None = None
    generation_timeout_s: float = 60.0
    generation_temperature: float = 0.2
    fetch_timeout_s: float = 10.0
    fetch_block_private_hosts: bool = True
    cv_max_chars: int = 20000
    posting_max_chars: int = 12000
    max_upload_bytes: int = 10 * 1024 * 1024
    max_job_urls: int = 5
    upload_dir: str = "uploads"
    rate_limit: str = "30/minute"
    rate_limit_enabled: bool = True
    log_level: str = "INFO"
    sentry_dsn: str | None = None
    cors_allowed_origins: tuple[str, ...] = ("http://localhost:5173", "http://localhost:3000")
    cors_allow_origin_regex: str | None = None
    cors_allow_credentials: bool = False
    smtp_host: str | None = None
    smtp_port: int = 587
    smtp_user: str | None = None
    smtp_password: str | None = None
    smtp_from: str | None = None
    smtp_use_tls: bool = True
    contact_notify_email: str | None = None

    @property
    def llm_configured(self) -> bool:
        if self.ai_provider == "gemini":
            return bool(self.gemini_api_key)
        return bool(self.openai_api_key)


def load_settings() -> Settings:
    load_dotenv()
    provider = (_get_env("AI_PROVIDER", "openai") or "openai").strip().lower()
    default_model = "gemini-1.5-flash" if provider == "gemini" else "gpt-4o-mini"
    settings = Settings(
        ai_provider=provider,
        ai_model=(_get_env("AI_MODEL", default_model) or default_model).strip(),
        openai_api_key=_get_env("OPENAI_API_KEY"),
        openai_base_url=_get_env("OPENAI_BASE_URL"),
        gemini_api_key=_get_env("GEMINI_API_KEY"),
        generation_timeout_s=_get_env_float("GENERATION_TIMEOUT_S", 60.0),
        generation_temperature=_get_env_float("GENERATION_TEMPERATURE", 0.2),
        fetch_timeout_s=_get_env_float("FETCH_TIMEOUT_S", 10.0),
        fetch_block_private_hosts=_get_env_bool("FETCH_BLOCK_PRIVATE_HOSTS", True),
        cv_max_chars=_get_env_int("CV_MAX_CHARS", 20000),
        posting_max_chars=_get_env_int("POSTING_MAX_CHARS", 12000),
        max_upload_bytes=_get_env_int("MAX_UPLOAD_BYTES", 10 * 1024 * 1024),
        max_job_urls=_get_env_int("MAX_JOB_URLS", 5),
        upload_dir=_get_env("UPLOAD_DIR", "uploads") or "uploads",
        rate_limit=_get_env("RATE_LIMIT", "30/minute") or "30/minute",
        rate_limit_enabled=_get_env_bool("RATE_LIMIT_ENABLED", True),
        log_level=_get_env("LOG_LEVEL", "INFO") or "INFO",
        sentry_dsn=_get_env("SENTRY_DSN"),
        cors_allowed_origins=_get_env_list(
            "CORS_ALLOWED_ORIGINS",
            ["http://localhost:5173", "http://localhost:3000"],
        ),
        cors_allow_origin_regex=_get_env("CORS_ALLOW_ORIGIN_REGEX"),
        cors_allow_credentials=_get_env_bool("CORS_ALLOW_CREDENTIALS", False),
        smtp_host=_get_env("SMTP_HOST"),
        smtp_port=_get_env_int("SMTP_PORT", 587),
        smtp_user=_get_env("SMTP_USER"),
        smtp_password=_get_env("SMTP_PASSWORD"),
        smtp_from=_get_env("SMTP_FROM"),
        smtp_use_tls=_get_env_bool("SMTP_USE_TLS", True),
        contact_notify_email=_get_env("CONTACT_NOTIFY_EMAIL"),
    )

    if settings.ai_provider not in {"openai", "gemini"}:
        raise RuntimeError("AI_PROVIDER must be either 'openai' or 'gemini'.")
    return settings
