from __future__ import annotations

import re
from typing import Any

from cv_analyzer.schemas.analysis import (
    AnalysisResult,
    OutputSizing,
    PostingStatus,
    PostingSummary,
    QuestionSet,
)

TRUNCATION_MARKER = "…"
PARSE_FAILED_SUMMARY = "Nie udało się przetworzyć odpowiedzi modelu."
RAW_REPLY_CAP = 2000

# (overlap below, match percentage ceiling), strictest first.
OVERLAP_CAPS: tuple[tuple[float, int], ...] = ((0.10, 35), (0.20, 50))
MISMATCH_OVERLAP = 0.10

# Diagnostic keys carried over from an incoming result; anything else in a
# reply's "meta" is dropped.
META_KEYS = frozenset(
    {
        "plan",
        "keyword_overlap",
        "detected_industry",
        "selected_industry",
        "degraded",
        "error",
        "raw_reply",
        "postings_total",
        "postings_fetched",
    }
)


def clamp_text(value: Any, cap: int) -> str:
    if not isinstance(value, str):
        return ""
    text = value.strip()
    if len(text) > cap:
        return text[:cap] + TRUNCATION_MARKER
    return re.sub(r"\s+", " ", text)


def clamp_list(value: Any, *, item_cap: int, max_items: int) -> list[str]:
    if not isinstance(value, list):
        return []
    output: list[str] = []
    for item in value:
        if len(output) >= max_items:
            break
        text = clamp_text(item, item_cap)
        if text:
            output.append(text)
    return output


def _pick(source: Any, *paths: tuple[str, ...]) -> Any:
    """Return the first value found at any of the key paths."""
    if not isinstance(source, dict):
        return None
    for path in paths:
        node: Any = source
        for key in path:
            if not isinstance(node, dict) or key not in node:
                node = None
                break
            node = node[key]
        if node is not None:
            return node
    return None


def match_percentage(strengths: int, gaps: int, overlap: float | None = None) -> int:
    total = strengths + gaps
    percentage = round(strengths / total * 100) if total > 0 else 0
    if overlap is not None:
        for threshold, ceiling in OVERLAP_CAPS:
            if overlap < threshold:
                percentage = min(percentage, ceiling)
                break
    return max(0, min(100, int(percentage)))


def _incoming_meta(value: Any) -> dict[str, Any]:
    meta = _pick(value, ("meta",))
    if not isinstance(meta, dict):
        return {}
    kept: dict[str, Any] = {}
    for key in META_KEYS.intersection(meta):
        item = meta[key]
        if isinstance(item, str):
            kept[key] = item[:RAW_REPLY_CAP]
        elif item is None or isinstance(item, (bool, int, float)):
            kept[key] = item
    return kept


def _known_overlap(meta: dict[str, Any]) -> float | None:
    value = meta.get("keyword_overlap")
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return float(value) if 0.0 <= value <= 1.0 else None


def _questions(value: Any, sizing: OutputSizing) -> tuple[list[str], list[str]]:
    soft = _pick(
        value,
        ("pytania", "kompetencje_miekkie"),
        ("softQuestions",),
        ("soft_questions",),
    )
    hard = _pick(
        value,
        ("pytania", "kompetencje_twarde"),
        ("hardQuestions",),
        ("hard_questions",),
    )
    return (
        clamp_list(soft, item_cap=sizing.question_cap, max_items=sizing.num_soft),
        clamp_list(hard, item_cap=sizing.question_cap, max_items=sizing.num_hard),
    )


def normalize_analysis(
    value: Any,
    sizing: OutputSizing,
    *,
    overlap: float | None = None,
    meta: dict[str, Any] | None = None,
) -> AnalysisResult:
    """Coerce an untrusted decoded reply into an ``AnalysisResult``. Never raises."""
    if isinstance(value, AnalysisResult):
        value = value.model_dump(by_alias=True)
    summary = clamp_text(_pick(value, ("podsumowanie",), ("summary",)), sizing.summary_cap)
    strengths = clamp_list(
        _pick(value, ("dopasowanie", "mocne_strony"), ("strengths",)),
        item_cap=sizing.item_cap,
        max_items=sizing.max_list_items,
    )
    gaps = clamp_list(
        _pick(value, ("dopasowanie", "obszary_do_poprawy"), ("gaps",)),
        item_cap=sizing.item_cap,
        max_items=sizing.max_list_items,
    )
    soft, hard = _questions(value, sizing)

    merged_meta = _incoming_meta(value)
    merged_meta.update(meta or {})
    if overlap is None:
        overlap = _known_overlap(merged_meta)
    else:
        merged_meta["keyword_overlap"] = overlap
    return AnalysisResult(
        summary=summary,
        strengths=strengths,
        gaps=gaps,
        soft_questions=soft,
        hard_questions=hard,
        match_percentage=match_percentage(len(strengths), len(gaps), overlap),
        warning_mismatch=overlap is not None and overlap < MISMATCH_OVERLAP,
        meta=merged_meta,
    )


def degraded_analysis(
    raw_reply: str,
    sizing: OutputSizing,
    *,
    overlap: float | None = None,
    meta: dict[str, Any] | None = None,
) -> AnalysisResult:
    placeholder_meta = dict(meta or {})
    placeholder_meta.update(
        {
            "degraded": True,
            "error": "unparsable_reply",
            "raw_reply": (raw_reply or "")[:RAW_REPLY_CAP],
        }
    )
    return AnalysisResult(
        summary=PARSE_FAILED_SUMMARY,
        match_percentage=0,
        warning_mismatch=overlap is not None and overlap < MISMATCH_OVERLAP,
        meta=placeholder_meta,
    )


def normalize_questions(value: Any, sizing: OutputSizing, *, meta: dict[str, Any] | None = None) -> QuestionSet:
    soft, hard = _questions(value, sizing)
    merged_meta = _incoming_meta(value)
    merged_meta.update(meta or {})
    return QuestionSet(soft_questions=soft, hard_questions=hard, meta=merged_meta)


def normalize_posting_summary(
    value: Any,
    sizing: OutputSizing,
    *,
    keywords: list[str] | None = None,
    postings: list[PostingStatus] | None = None,
    meta: dict[str, Any] | None = None,
) -> PostingSummary:
    merged_meta = _incoming_meta(value)
    merged_meta.update(meta or {})
    return PostingSummary(
        title=clamp_text(_pick(value, ("stanowisko",), ("title",)), 180),
        company=clamp_text(_pick(value, ("firma",), ("company",)), 180),
        summary=clamp_text(_pick(value, ("podsumowanie",), ("summary",)), sizing.summary_cap),
        requirements=clamp_list(
            _pick(value, ("wymagania",), ("requirements",)),
            item_cap=sizing.item_cap,
            max_items=sizing.max_list_items,
        ),
        responsibilities=clamp_list(
            _pick(value, ("obowiazki",), ("obowiązki",), ("responsibilities",)),
            item_cap=sizing.item_cap,
            max_items=sizing.max_list_items,
        ),
        keywords=list(keywords or []),
        postings=list(postings or []),
        meta=merged_meta,
    )
