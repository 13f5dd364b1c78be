"""Best-effort recovery of a JSON value from free-form model output.

Model replies are not guaranteed to be valid JSON even when the prompt and the
provider's JSON mode ask for it.  ``recover_json`` tries progressively more
permissive strategies, cheapest and most precise first:

1. strip a byte-order mark, whitespace and Markdown code fences;
2. parse directly, then with comments and trailing commas removed, then again
   with typographic quotes also straightened;
3. parse balanced ``{...}`` / ``[...]`` spans left to right, found with a
   string-literal aware bracket walk;
4. parse the naive span between the first opening and last closing brace
   (then bracket).

If all of these fail, :class:`UnparsableReply` is raised with a preview of the
original text.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any

from cv_analyzer.core.errors import UnparsableReply

logger = logging.getLogger(__name__)

RAW_PREVIEW_CHARS = 2000
MAX_SPAN_ATTEMPTS = 20

_BOM = "\ufeff"
_OPENING_FENCE_RE = re.compile(r"^```[A-Za-z0-9_+-]*[ \t]*\r?\n?")
_CLOSING_FENCE_RE = re.compile(r"\r?\n?[ \t]*```\s*$")
_QUOTE_TRANSLATION = str.maketrans(
    {
        "“": '"',
        "”": '"',
        "„": '"',
        "‟": '"',
        "″": '"',
        "«": '"',
        "»": '"',
        "‘": "'",
        "’": "'",
        "‚": "'",
        "‛": "'",
    }
)
_PAIRS = {"{": "}", "[": "]"}


def strip_fences(text: str) -> str:
    cleaned = (text or "").replace(_BOM, "").strip()
    if cleaned.startswith("```"):
        cleaned = _OPENING_FENCE_RE.sub("", cleaned, count=1)
        cleaned = _CLOSING_FENCE_RE.sub("", cleaned, count=1)
    return cleaned.strip()


def _strip_comments_and_trailing_commas(text: str) -> str:
    out: list[str] = []
    in_string = False
    escaped = False
    i = 0
    length = len(text)
    while i < length:
        char = text[i]
        if in_string:
            out.append(char)
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
            i += 1
            continue

        if char == '"':
            in_string = True
            out.append(char)
            i += 1
            continue
        if text.startswith("//", i):
            newline = text.find("\n", i)
            i = length if newline == -1 else newline
            continue
        if text.startswith("/*", i):
            end = text.find("*/", i + 2)
            i = length if end == -1 else end + 2
            continue
        if char == ",":
            j = i + 1
            while j < length and text[j].isspace():
                j += 1
            if j < length and text[j] in "}]":
                i += 1
                continue
        out.append(char)
        i += 1
    return "".join(out)


def normalize_json_text(text: str) -> str:
    """Typographic quotes to ASCII, then drop comments and trailing commas."""
    return _strip_comments_and_trailing_commas(text.translate(_QUOTE_TRANSLATION))


def _loads_lenient(text: str) -> Any:
    try:
        return json.loads(text)
    except ValueError:
        pass
    # Typographic quotes inside values stay as they are unless cleanup alone fails.
    try:
        return json.loads(_strip_comments_and_trailing_commas(text))
    except ValueError:
        return json.loads(normalize_json_text(text))


def _balanced_end(text: str, start: int) -> int | None:
    """Index just past the span opened at ``start``, or None if it never closes."""
    depth = 0
    in_string = False
    escaped = False
    for index in range(start, len(text)):
        char = text[index]
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
            continue
        if char == '"':
            in_string = True
        elif char in "{[":
            depth += 1
        elif char in "}]":
            depth -= 1
            if depth == 0:
                return index + 1
    return None


def _next_opening(text: str, position: int) -> int:
    candidates = [index for index in (text.find("{", position), text.find("[", position)) if index != -1]
    return min(candidates) if candidates else -1


def iter_balanced_spans(text: str, limit: int = MAX_SPAN_ATTEMPTS):
    """Yield balanced object/array spans left to right, ignoring brackets in strings.

    After a span is yielded the scan resumes behind it; an opening bracket that
    never closes is skipped.  At most ``limit`` opening brackets are tried.
    """
    position = 0
    for _attempt in range(limit):
        start = _next_opening(text, position)
        if start < 0:
            return
        end = _balanced_end(text, start)
        if end is None:
            position = start + 1
            continue
        yield text[start:end]
        position = end


def find_balanced_span(text: str) -> str | None:
    """Return the first balanced object/array span, ignoring brackets in strings."""
    return next(iter_balanced_spans(text, limit=1), None)


def _naive_spans(text: str) -> list[str]:
    spans: list[str] = []
    for opening, closing in _PAIRS.items():
        first = text.find(opening)
        last = text.rfind(closing)
        if first != -1 and last > first:
            spans.append(text[first : last + 1])
    return spans


def recover_json(raw: str) -> Any:
    cleaned = strip_fences(raw)

    try:
        return _loads_lenient(cleaned)
    except ValueError:
        pass

    for span in iter_balanced_spans(cleaned):
        try:
            return _loads_lenient(span)
        except ValueError:
            logger.debug("balanced_span_unparsable len=%s", len(span))

    for candidate in _naive_spans(cleaned):
        try:
            return _loads_lenient(candidate)
        except ValueError:
            continue

    preview = (raw or "")[:RAW_PREVIEW_CHARS]
    raise UnparsableReply("Model reply does not contain parsable JSON.", raw_text=preview)
