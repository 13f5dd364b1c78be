from .industry import IndustryDetection, detect_industry
from .keywords import jaccard, keyword_overlap, tokenize, top_terms

__all__ = [
    "IndustryDetection",
    "detect_industry",
    "jaccard",
    "keyword_overlap",
    "tokenize",
    "top_terms",
]
