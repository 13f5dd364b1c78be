from __future__ import annotations

import asyncio
import logging
import re

import httpx
from bs4 import BeautifulSoup
from readability import Document

from cv_analyzer.core.config import Settings
from cv_analyzer.core.errors import FetchFailed
from cv_analyzer.schemas.analysis import JobPosting
from cv_analyzer.services.url_guard import host_is_private_or_local, normalize_job_url

logger = logging.getLogger(__name__)

FETCH_FAILED_TEXT = "Nie udało się pobrać treści ogłoszenia."
POSTING_SEPARATOR = "\n\n---\n\n"
MIN_READABLE_CHARS = 120

BROWSER_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
        "AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/122.0.0.0 Safari/537.36"
    ),
    "Accept-Language": "pl-PL,pl;q=0.9,en-US;q=0.8,en;q=0.7",
}

_NOISE_TAGS = ("script", "style", "noscript", "nav", "header", "footer", "aside", "form")


def collapse_whitespace(text: str) -> str:
    return re.sub(r"\s+", " ", text or "").strip()


def _html_to_text(html: str) -> str:
    soup = BeautifulSoup(html, "html.parser")
    for tag in soup(_NOISE_TAGS):
        tag.decompose()
    return collapse_whitespace(soup.get_text(" ", strip=True))


def readable_text(page_html: str) -> str:
    """Reduce a page to its main article-like text."""
    if not (page_html or "").strip():
        return ""
    text = ""
    try:
        summary_html = Document(page_html).summary(html_partial=True)
        text = _html_to_text(summary_html)
    except Exception as exc:  # noqa: BLE001 - readability chokes on odd markup
        logger.debug("readability_failed: %s", exc)
    if len(text) >= MIN_READABLE_CHARS:
        return text
    fallback = _html_to_text(page_html)
    return fallback if len(fallback) > len(text) else text


def _clamp(text: str, max_chars: int) -> str:
    if len(text) <= max_chars:
        return text
    return text[:max_chars] + "…"


async def _fetch_text(client: httpx.AsyncClient, url: str, settings: Settings) -> str:
    normalized_url, hostname = normalize_job_url(url)
    if settings.fetch_block_private_hosts:
        is_private = await asyncio.to_thread(host_is_private_or_local, hostname)
        if is_private:
            raise FetchFailed("Private or local URLs are not allowed.")

    try:
        response = await client.get(normalized_url)
    except httpx.TimeoutException as exc:
        raise FetchFailed(f"Timed out after {settings.fetch_timeout_s:g}s.") from exc
    except (httpx.HTTPError, httpx.InvalidURL) as exc:
        raise FetchFailed(f"Network error: {exc}") from exc

    if not response.is_success:
        raise FetchFailed(f"Job page returned HTTP {response.status_code}.")

    text = readable_text(response.text or "")
    if not text:
        raise FetchFailed("No readable text found on the page.")
    return _clamp(text, settings.posting_max_chars)


async def fetch_posting(client: httpx.AsyncClient, url: str, settings: Settings) -> JobPosting:
    try:
        text = await _fetch_text(client, url, settings)
    except FetchFailed as exc:
        logger.warning("posting_fetch_failed url=%s: %s", url, exc)
        return JobPosting(url=url, text=FETCH_FAILED_TEXT, fetched=False, error=str(exc))
    return JobPosting(url=url, text=text, fetched=True)


async def fetch_postings(
    urls: list[str],
    settings: Settings,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> list[JobPosting]:
    if not urls:
        return []
    async with httpx.AsyncClient(
        timeout=settings.fetch_timeout_s,
        follow_redirects=True,
        headers=BROWSER_HEADERS,
        transport=transport,
    ) as client:
        return list(await asyncio.gather(*(fetch_posting(client, url, settings) for url in urls)))


def combine_postings(postings: list[JobPosting]) -> str:
    texts = [posting.text for posting in postings if posting.fetched and posting.text]
    if not texts:
        return FETCH_FAILED_TEXT
    return POSTING_SEPARATOR.join(texts)
