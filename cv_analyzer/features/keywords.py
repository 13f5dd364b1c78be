from __future__ import annotations

import re
from collections import Counter
from typing import Iterable

# Unicode-aware: Polish diacritics count as word characters.
TOKEN_RE = re.compile(r"[^\W_]+")
MIN_TOKEN_LENGTH = 3
DEFAULT_TOP_TERMS = 40

STOPWORDS = frozenset({
    # Polish function words
    "ale", "albo", "ani", "aby", "bez", "bardzo", "będzie", "będą", "był", "była", "było", "były",
    "czy", "dla", "dlatego", "gdy", "gdzie", "jak", "jako", "jest", "jeśli", "jego", "jej", "już",
    "każdy", "kiedy", "która", "które", "który", "których", "którym", "lub", "między", "może",
    "mamy", "nas", "nasz", "nasza", "nasze", "naszej", "naszym", "nad", "nie", "niż", "oraz",
    "ich", "ona", "one", "oni", "ono", "pod", "przez", "przy", "się", "sobie", "tak", "także",
    "tego", "tej", "ten", "też", "tym", "oferujemy", "wraz", "wszystkie", "zakres",
    "obowiązków", "wymagania", "oczekujemy", "mile", "widziane", "praca", "pracy", "firma",
    "firmy", "osoba", "osoby", "kandydat", "kandydata", "jestem", "mam", "swoje", "twoje",
    # English function words
    "the", "and", "for", "with", "that", "this", "your", "you", "from", "into", "our", "are",
    "its", "his", "her", "their", "they", "them", "these", "those", "which", "what", "who",
    "will", "must", "have", "has", "had", "can", "could", "would", "should", "may", "been",
    "being", "was", "were", "not", "also", "but", "about", "after", "before", "between",
    "over", "through", "while", "here", "there", "all", "any", "some", "more", "other",
    "job", "role", "team", "work", "using", "use", "experience", "ability", "strong",
    "required", "preferred", "skills", "skill",
})


def tokenize(text: str) -> list[str]:
    tokens: list[str] = []
    for raw in TOKEN_RE.findall((text or "").lower()):
        if len(raw) < MIN_TOKEN_LENGTH or raw in STOPWORDS:
            continue
        tokens.append(raw)
    return tokens


def top_terms(text: str, limit: int = DEFAULT_TOP_TERMS) -> list[str]:
    """Most frequent tokens, most common first; ties keep first-seen order."""
    counts = Counter(tokenize(text))
    # Counter preserves insertion order and sorted() is stable.
    ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)
    return [term for term, _count in ranked[: max(limit, 0)]]


def jaccard(left: Iterable[str], right: Iterable[str]) -> float:
    a = set(left)
    b = set(right)
    union = len(a | b)
    return len(a & b) / max(union, 1)


def keyword_overlap(cv_text: str, posting_text: str, limit: int = DEFAULT_TOP_TERMS) -> float:
    return jaccard(top_terms(cv_text, limit), top_terms(posting_text, limit))
