from __future__ import annotations

import asyncio
import logging
import re
import time

from cv_analyzer.ai.types import AIClient
from cv_analyzer.core.errors import GenerationFailed, GenerationTimeout

logger = logging.getLogger(__name__)

_FORMAT_ERROR_RE = re.compile(
    r"\bjson|response_format|response_mime_type|\bmime[ _-]?type\b|\b(?:invalid|unsupported) format\b",
    re.IGNORECASE,
)


def is_format_error(exc: BaseException) -> bool:
    return _FORMAT_ERROR_RE.search(str(exc)) is not None


async def _attempt(
    client: AIClient,
    prompt: str,
    *,
    json_mode: bool,
    max_output_tokens: int,
    temperature: float,
    timeout_s: float,
) -> str:
    try:
        return await asyncio.wait_for(
            client.complete(
                prompt,
                json_mode=json_mode,
                max_output_tokens=max_output_tokens,
                temperature=temperature,
            ),
            timeout=timeout_s,
        )
    except asyncio.TimeoutError as exc:
        raise GenerationTimeout(f"Model did not answer within {timeout_s:g}s.") from exc


async def generate_reply(
    client: AIClient,
    prompt: str,
    *,
    max_output_tokens: int,
    temperature: float = 0.2,
    timeout_s: float = 60.0,
) -> str:
    """Ask the model in JSON mode, retrying once in plain-text mode on format errors.

    Returns the raw reply text; parsing is left to the caller.
    """
    started = time.perf_counter()
    try:
        reply = await _attempt(
            client,
            prompt,
            json_mode=True,
            max_output_tokens=max_output_tokens,
            temperature=temperature,
            timeout_s=timeout_s,
        )
        logger.info(
            "generation_done mode=json prompt_len=%s reply_len=%s latency_ms=%s",
            len(prompt),
            len(reply),
            int((time.perf_counter() - started) * 1000),
        )
        return reply
    except GenerationTimeout:
        raise
    except Exception as exc:  # noqa: BLE001 - provider SDKs raise assorted error types
        if not is_format_error(exc):
            logger.warning("generation_failed mode=json: %s", exc)
            raise GenerationFailed(f"Model call failed: {exc}") from exc
        logger.warning("generation_json_mode_rejected, retrying as text: %s", exc)

    try:
        reply = await _attempt(
            client,
            prompt,
            json_mode=False,
            max_output_tokens=max_output_tokens,
            temperature=temperature,
            timeout_s=timeout_s,
        )
    except GenerationTimeout:
        raise
    except Exception as exc:  # noqa: BLE001
        logger.warning("generation_failed mode=text: %s", exc)
        raise GenerationFailed(f"Model call failed: {exc}") from exc

    logger.info(
        "generation_done mode=text prompt_len=%s reply_len=%s latency_ms=%s",
        len(prompt),
        len(reply),
        int((time.perf_counter() - started) * 1000),
    )
    return reply
