from __future__ import annotations

from slowapi import Limiter
from slowapi.util import get_remote_address

from cv_analyzer.core.config import Settings


def build_limiter(settings: Settings) -> Limiter:
    return Limiter(
        key_func=get_remote_address,
        default_limits=[settings.rate_limit],
        enabled=settings.rate_limit_enabled,
    )
