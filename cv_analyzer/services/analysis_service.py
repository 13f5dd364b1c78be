from __future__ import annotations

import asyncio
import contextlib
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

from cv_analyzer.ai.types import AIClient, ClientProvider
from cv_analyzer.core.config import Settings
from cv_analyzer.core.errors import ExtractionFailed, UnparsableReply, ValidationFailed
from cv_analyzer.features.industry import IndustryDetection, detect_industry
from cv_analyzer.features.keywords import keyword_overlap, top_terms
from cv_analyzer.parsing.extract import extract_document, resolve_format
from cv_analyzer.parsing.models import ExtractedDocument
from cv_analyzer.schemas.analysis import (
    AnalysisRequest,
    AnalysisResult,
    JobPosting,
    OutputSizing,
    PostingStatus,
    PostingSummary,
    QuestionSet,
    sizing_for_plan,
)
from cv_analyzer.services.fetcher import combine_postings, fetch_postings
from cv_analyzer.services.generation import generate_reply
from cv_analyzer.services.normalizer import (
    RAW_REPLY_CAP,
    degraded_analysis,
    normalize_analysis,
    normalize_posting_summary,
    normalize_questions,
)
from cv_analyzer.services.prompts import (
    build_analysis_prompt,
    build_posting_summary_prompt,
    build_questions_prompt,
    compose_cv_text,
)
from cv_analyzer.services.recovery import recover_json

logger = logging.getLogger(__name__)

POSTING_KEYWORDS_LIMIT = 15


def validate_job_urls(job_urls: list[str], settings: Settings) -> list[str]:
    urls = [url.strip() for url in job_urls if url and url.strip()]
    if not urls:
        raise ValidationFailed("Provide at least one job posting URL in 'jobUrls'.")
    if len(urls) > settings.max_job_urls:
        raise ValidationFailed(f"At most {settings.max_job_urls} job posting URLs are allowed.")
    return urls


async def extract_cv_upload(content: bytes, filename: str, settings: Settings) -> ExtractedDocument:
    """Write the upload to the scratch directory, extract it and always delete it."""
    fmt = resolve_format(filename)
    upload_dir = Path(settings.upload_dir)
    upload_dir.mkdir(parents=True, exist_ok=True)
    fd, scratch_path = tempfile.mkstemp(prefix="cv-", suffix=f".{fmt}", dir=upload_dir)
    try:
        with os.fdopen(fd, "wb") as handle:
            handle.write(content)
        return await asyncio.to_thread(
            extract_document,
            scratch_path,
            fmt,
            max_chars=settings.cv_max_chars,
        )
    finally:
        with contextlib.suppress(FileNotFoundError):
            os.unlink(scratch_path)


def _posting_meta(postings: list[JobPosting]) -> dict[str, Any]:
    return {
        "postings_total": len(postings),
        "postings_fetched": sum(1 for posting in postings if posting.fetched),
    }


def _overlap(cv_text: str, postings: list[JobPosting], combined: str) -> float | None:
    if not cv_text.strip() or not any(posting.fetched for posting in postings):
        return None
    return keyword_overlap(cv_text, combined)


async def analyze_request(request: AnalysisRequest, settings: Settings, client: AIClient) -> AnalysisResult:
    sizing = sizing_for_plan(request.plan)
    combined = combine_postings(request.postings)
    cv_text = compose_cv_text(request)
    overlap = _overlap(cv_text, request.postings, combined)
    detected = detect_industry(combined) if any(p.fetched for p in request.postings) else IndustryDetection()

    meta: dict[str, Any] = {
        "plan": sizing.plan,
        "keyword_overlap": overlap,
        "detected_industry": detected.industry,
        "selected_industry": request.selected_industry,
        "degraded": False,
        **_posting_meta(request.postings),
    }

    prompt = build_analysis_prompt(
        request,
        sizing,
        combined_postings=combined,
        industry_hint=detected.industry,
    )
    reply = await generate_reply(
        client,
        prompt,
        max_output_tokens=sizing.max_output_tokens,
        temperature=settings.generation_temperature,
        timeout_s=settings.generation_timeout_s,
    )
    try:
        value = recover_json(reply)
    except UnparsableReply as exc:
        logger.warning("analysis_reply_unparsable reply_len=%s", len(reply))
        return degraded_analysis(exc.raw_text, sizing, overlap=overlap, meta=meta)
    return normalize_analysis(value, sizing, overlap=overlap, meta=meta)


async def analyze_cv(
    *,
    cv_content: bytes | None,
    cv_filename: str,
    job_urls: list[str],
    plan: str,
    additional_text: str | None,
    selected_industry: str | None,
    settings: Settings,
    client_provider: ClientProvider,
) -> AnalysisResult:
    urls = validate_job_urls(job_urls, settings)
    additional = (additional_text or "").strip() or None
    if cv_content is None and not additional:
        raise ValidationFailed("Upload a CV file ('cv') or provide 'additionalDescription'.")

    if cv_content is not None:
        # Reject unsupported formats before any network work starts.
        resolve_format(cv_filename)
    client = client_provider()

    cv_text = ""
    if cv_content is not None:
        fetch_task = asyncio.create_task(fetch_postings(urls, settings))
        try:
            document = await extract_cv_upload(cv_content, cv_filename, settings)
        except BaseException:
            fetch_task.cancel()
            await asyncio.gather(fetch_task, return_exceptions=True)
            raise
        postings = await fetch_task
        cv_text = document.raw_text
        if not cv_text.strip() and not additional:
            raise ExtractionFailed("No extractable text found in the CV.")
    else:
        postings = await fetch_postings(urls, settings)

    request = AnalysisRequest(
        cv_text=cv_text,
        additional_text=additional,
        postings=postings,
        plan=sizing_for_plan(plan).plan,
        selected_industry=(selected_industry or "").strip() or None,
    )
    return await analyze_request(request, settings, client)


async def _recovered_reply(client: AIClient, prompt: str, sizing: OutputSizing, settings: Settings) -> Any:
    reply = await generate_reply(
        client,
        prompt,
        max_output_tokens=sizing.max_output_tokens,
        temperature=settings.generation_temperature,
        timeout_s=settings.generation_timeout_s,
    )
    return recover_json(reply)


async def summarize_postings(
    job_urls: list[str],
    settings: Settings,
    client_provider: ClientProvider,
) -> PostingSummary:
    urls = validate_job_urls(job_urls, settings)
    sizing = sizing_for_plan("free")
    client = client_provider()
    postings = await fetch_postings(urls, settings)
    combined = combine_postings(postings)
    fetched = any(posting.fetched for posting in postings)

    statuses = [PostingStatus(url=posting.url, fetched=posting.fetched) for posting in postings]
    keywords = top_terms(combined, POSTING_KEYWORDS_LIMIT) if fetched else []
    meta: dict[str, Any] = {"degraded": False, **_posting_meta(postings)}

    try:
        value = await _recovered_reply(client, build_posting_summary_prompt(combined, sizing), sizing, settings)
    except UnparsableReply as exc:
        logger.warning("posting_summary_reply_unparsable")
        meta.update({"degraded": True, "error": "unparsable_reply", "raw_reply": exc.raw_text[:RAW_REPLY_CAP]})
        value = {}
    return normalize_posting_summary(value, sizing, keywords=keywords, postings=statuses, meta=meta)


async def generate_questions(
    job_urls: list[str],
    plan: str,
    selected_industry: str | None,
    settings: Settings,
    client_provider: ClientProvider,
) -> QuestionSet:
    urls = validate_job_urls(job_urls, settings)
    sizing = sizing_for_plan(plan)
    client = client_provider()
    postings = await fetch_postings(urls, settings)
    combined = combine_postings(postings)
    detected = detect_industry(combined) if any(p.fetched for p in postings) else IndustryDetection()

    meta: dict[str, Any] = {
        "plan": sizing.plan,
        "detected_industry": detected.industry,
        "degraded": False,
        **_posting_meta(postings),
    }
    prompt = build_questions_prompt(
        combined,
        sizing,
        selected_industry=(selected_industry or "").strip() or None,
        industry_hint=detected.industry,
    )
    try:
        value = await _recovered_reply(client, prompt, sizing, settings)
    except UnparsableReply as exc:
        logger.warning("questions_reply_unparsable")
        meta.update({"degraded": True, "error": "unparsable_reply", "raw_reply": exc.raw_text[:RAW_REPLY_CAP]})
        value = {}
    return normalize_questions(value, sizing, meta=meta)


async def detect_posting_industry(job_urls: list[str], settings: Settings) -> IndustryDetection:
    urls = validate_job_urls(job_urls, settings)
    postings = await fetch_postings(urls, settings)
    # All fetched postings are scanned as one text, so the highest-priority
    # category present in any posting wins.
    texts = [posting.text for posting in postings if posting.fetched]
    return detect_industry("\n".join(texts))
