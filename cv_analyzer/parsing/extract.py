from __future__ import annotations

import logging
from pathlib import Path

from docx import Document
from pypdf import PdfReader

from cv_analyzer.core.errors import ExtractionFailed, UnsupportedFormat
from .models import ExtractedDocument

logger = logging.getLogger(__name__)

SUPPORTED_FORMATS = {"pdf", "docx"}
TRUNCATION_MARKER = "…"


def _parse_pdf(file_path: Path) -> str:
    reader = PdfReader(str(file_path))
    text_parts: list[str] = []
    for page in reader.pages:
        page_text = (page.extract_text() or "").strip()
        if page_text:
            text_parts.append(page_text)
    return "\n".join(text_parts)


def _parse_docx(file_path: Path) -> str:
    document = Document(str(file_path))
    paragraphs = [p.text.strip() for p in document.paragraphs if p.text and p.text.strip()]
    return "\n".join(paragraphs)


def resolve_format(filename: str, declared: str | None = None) -> str:
    """Return the normalized document format or raise ``UnsupportedFormat``."""
    candidate = (declared or "").strip().lower().lstrip(".")
    if not candidate:
        candidate = Path(filename or "").suffix.lower().lstrip(".")
    if candidate not in SUPPORTED_FORMATS:
        shown = f".{candidate}" if candidate else "(none)"
        raise UnsupportedFormat(f"Unsupported file type '{shown}'. Only PDF and DOCX files are supported.")
    return candidate


def clamp_document_text(text: str, max_chars: int) -> tuple[str, bool]:
    if len(text) <= max_chars:
        return text, False
    return text[:max_chars] + TRUNCATION_MARKER, True


def extract_document(file_path: str, source_format: str | None = None, *, max_chars: int = 20000) -> ExtractedDocument:
    path = Path(file_path)
    fmt = resolve_format(path.name, source_format)
    if not path.exists():
        raise ExtractionFailed(f"Input document not found: '{path.name}'")

    try:
        text = _parse_pdf(path) if fmt == "pdf" else _parse_docx(path)
    except Exception as exc:
        logger.warning("document_extraction_failed format=%s file=%s: %s", fmt, path.name, exc)
        raise ExtractionFailed(f"Could not read the {fmt.upper()} document: {exc}") from exc

    text, truncated = clamp_document_text(text.strip(), max_chars)
    if truncated:
        logger.info("document_text_truncated format=%s max_chars=%s", fmt, max_chars)
    return ExtractedDocument(raw_text=text, source_format=fmt, length=len(text), truncated=truncated)
