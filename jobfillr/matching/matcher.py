from __future__ import annotations

import logging
from dataclasses import dataclass

from jobfillr.catalog.provider import TemplateCatalog
from jobfillr.core.errors import InvalidInput
from jobfillr.core.matching_config import get_matching_value
from jobfillr.schemas.answers import Confidence, MatchContext, ObservedQuestion
from jobfillr.schemas.templates import QuestionTemplate

from .normalize import NormalizationRules, normalize_question
from .similarity import SimilarityRules, content_tokens, dice_similarity

logger = logging.getLogger(__name__)

_SCORE_PRECISION = 6

# Template types a field of a given widget type may be answered with.
HINT_COMPATIBILITY: dict[str, frozenset[str]] = {
    "text": frozenset({"text", "textarea", "number", "date", "select", "radio"}),
    "textarea": frozenset({"textarea", "text"}),
    "select": frozenset({"select", "radio", "boolean"}),
    "radio": frozenset({"radio", "select", "boolean"}),
    "checkbox": frozenset({"checkbox", "boolean"}),
    "boolean": frozenset({"boolean", "radio", "select", "checkbox"}),
    "date": frozenset({"date", "text"}),
    "number": frozenset({"number", "text"}),
}


def is_type_compatible(hint: str | None, question_type: str) -> bool:
    if hint is None:
        return True
    return question_type in HINT_COMPATIBILITY.get(hint, frozenset({hint}))


@dataclass(frozen=True)
class MatchResult:
    template: QuestionTemplate | None
    confidence: Confidence
    score: float = 0.0

    @property
    def template_id(self) -> int | None:
        return self.template.id if self.template else None

    @property
    def matched(self) -> bool:
        return self.template is not None


UNMATCHED = MatchResult(template=None, confidence=Confidence.UNRESOLVED, score=0.0)


@dataclass(frozen=True)
class _IndexedTemplate:
    template: QuestionTemplate
    phrasings: frozenset[str]
    token_sets: tuple[frozenset[str], ...]


def _recency_rank(template: QuestionTemplate, recent: tuple[str, ...]) -> int:
    """0 for the most recently matched category; same-group matches rank after exact ones."""
    total = len(recent)
    for distance, category in enumerate(reversed(recent)):
        if category == template.category:
            return distance
    for distance, category in enumerate(reversed(recent)):
        if category.split(".", 1)[0] == template.category_group:
            return total + distance
    return 2 * total


def _tie_break_key(template: QuestionTemplate, context: MatchContext | None) -> tuple[int, int]:
    recent = context.recent_categories if context else ()
    return (_recency_rank(template, recent), template.id)


class QuestionMatcher:
    """Maps an observed form label to one catalog template.

    Built once per catalog snapshot; matching itself is a pure function of
    the observed question, the optional session context and that snapshot.
    """

    def __init__(
        self,
        catalog: TemplateCatalog,
        threshold: float | None = None,
        normalization: NormalizationRules | None = None,
        similarity: SimilarityRules | None = None,
    ) -> None:
        if threshold is None:
            threshold = float(get_matching_value("fuzzy.threshold", 0.6))
        if not 0.0 <= threshold <= 1.0:
            raise ValueError("threshold must be between 0 and 1")
        self.threshold = threshold
        self._normalization = normalization
        self._similarity = similarity
        self._index = tuple(self._index_template(template) for template in catalog.all())

    def _index_template(self, template: QuestionTemplate) -> _IndexedTemplate:
        phrasings = {normalize_question(template.question, self._normalization)}
        phrasings.update(normalize_question(alias, self._normalization) for alias in template.aliases)
        phrasings.discard("")
        return _IndexedTemplate(
            template=template,
            phrasings=frozenset(phrasings),
            token_sets=tuple(content_tokens(phrasing, self._similarity) for phrasing in sorted(phrasings)),
        )

    def normalize(self, text: str) -> str:
        return normalize_question(text, self._normalization)

    def score(self, observed_text: str, template: QuestionTemplate) -> float:
        """Best fuzzy similarity between an observed label and any phrasing of a template."""
        tokens = content_tokens(self.normalize(observed_text), self._similarity)
        indexed = self._index_template(template)
        return max((dice_similarity(tokens, candidate) for candidate in indexed.token_sets), default=0.0)

    def match(self, observed: ObservedQuestion, context: MatchContext | None = None) -> MatchResult:
        if not observed.text or not observed.text.strip():
            raise InvalidInput("Observed question text must not be empty.")

        candidates = [
            entry
            for entry in self._index
            if is_type_compatible(observed.question_type, entry.template.question_type)
        ]
        if not candidates:
            return UNMATCHED

        result = self._match_phrasing(self.normalize(observed.text), candidates, context, exact_allowed=True)
        if result.matched or not observed.field_context:
            return result

        # Nearby placeholder text only fills in when the label itself matched nothing,
        # and never grades higher than fuzzy.
        return self._match_phrasing(
            self.normalize(observed.field_context), candidates, context, exact_allowed=False
        )

    def _match_phrasing(
        self,
        form: str,
        candidates: list[_IndexedTemplate],
        context: MatchContext | None,
        exact_allowed: bool,
    ) -> MatchResult:
        if not form:
            return UNMATCHED

        exact = [entry.template for entry in candidates if form in entry.phrasings]
        if exact:
            best = min(exact, key=lambda template: _tie_break_key(template, context))
            confidence = Confidence.EXACT if exact_allowed else Confidence.FUZZY
            logger.debug("question_match confidence=%s template_id=%s", confidence.value, best.id)
            return MatchResult(template=best, confidence=confidence, score=1.0)

        tokens = content_tokens(form, self._similarity)
        scored = [
            (
                round(
                    max((dice_similarity(tokens, candidate) for candidate in entry.token_sets), default=0.0),
                    _SCORE_PRECISION,
                ),
                entry.template,
            )
            for entry in candidates
        ]
        best_score, best = min(
            scored,
            key=lambda item: (-item[0], *_tie_break_key(item[1], context)),
        )
        if best_score > self.threshold:
            logger.debug("question_match confidence=fuzzy template_id=%s score=%.3f", best.id, best_score)
            return MatchResult(template=best, confidence=Confidence.FUZZY, score=best_score)

        logger.debug("question_match confidence=unresolved best_score=%.3f", best_score)
        return UNMATCHED
