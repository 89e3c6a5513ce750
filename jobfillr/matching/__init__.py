from .matcher import HINT_COMPATIBILITY, MatchResult, QuestionMatcher, is_type_compatible
from .normalize import NormalizationRules, normalize_question
from .similarity import SimilarityRules, content_tokens, dice_similarity

__all__ = [
    "HINT_COMPATIBILITY",
    "MatchResult",
    "NormalizationRules",
    "QuestionMatcher",
    "SimilarityRules",
    "content_tokens",
    "dice_similarity",
    "is_type_compatible",
    "normalize_question",
]
