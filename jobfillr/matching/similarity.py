from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache

from jobfillr.core.matching_config import get_matching_value

# Longest first; a suffix is only removed when at least three characters remain.
_SUFFIXES = ("ation", "ing", "ion", "ed", "es", "e", "s")
_MIN_STEM_LENGTH = 3


@dataclass(frozen=True)
class SimilarityRules:
    stopwords: frozenset[str]
    min_token_length: int


@lru_cache(maxsize=1)
def default_similarity_rules() -> SimilarityRules:
    stopwords = get_matching_value("fuzzy.stopwords", [])
    return SimilarityRules(
        stopwords=frozenset(str(word).strip().lower() for word in stopwords),
        min_token_length=int(get_matching_value("fuzzy.min_token_length", 2)),
    )


def stem_token(token: str) -> str:
    if token.endswith("ss"):
        return token
    for suffix in _SUFFIXES:
        if token.endswith(suffix) and len(token) - len(suffix) >= _MIN_STEM_LENGTH:
            return token[: -len(suffix)]
    return token


def content_tokens(normalized: str, rules: SimilarityRules | None = None) -> frozenset[str]:
    """Stemmed token set of an already normalized question, stopwords removed."""
    rules = rules or default_similarity_rules()
    return frozenset(
        stem_token(token)
        for token in normalized.split()
        if token not in rules.stopwords and len(token) >= rules.min_token_length
    )


def dice_similarity(left: frozenset[str], right: frozenset[str]) -> float:
    """Sørensen–Dice overlap of two token sets.

    Symmetric, in [0, 1], and a token absent from the other side can only
    lower the score.
    """
    if not left or not right:
        return 0.0
    return 2 * len(left & right) / (len(left) + len(right))
