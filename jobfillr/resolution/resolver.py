from __future__ import annotations

import logging
from typing import Mapping

from jobfillr.core.errors import InvalidInput
from jobfillr.matching.matcher import MatchResult
from jobfillr.schemas.answers import AnswerSource, Confidence, ResolvedAnswer, UserAnswer
from jobfillr.schemas.profile import ProfileSnapshot

from .synthesis import synthesize
from .validation import coerce_answer

logger = logging.getLogger(__name__)


def resolve_answer(
    match: MatchResult,
    snapshot: ProfileSnapshot,
    answers: Mapping[int, UserAnswer],
) -> ResolvedAnswer:
    """Turn a match into a field value: stored answer, then profile, then template default.

    Read-only; every input is an already fetched snapshot.
    """
    template = match.template
    if template is None:
        return ResolvedAnswer(confidence=Confidence.UNRESOLVED)

    base = {"template_id": template.id, "category": template.category, "score": match.score}

    stored = answers.get(template.id)
    if stored is not None:
        return ResolvedAnswer(
            **base,
            value=stored.answer,
            confidence=match.confidence,
            source=AnswerSource.STORED_ANSWER,
        )

    synthesized = synthesize(template, snapshot)
    if synthesized is not None:
        try:
            value = coerce_answer(template, synthesized)
        except InvalidInput as exc:
            logger.debug("synthesis_rejected template_id=%s reason=%s", template.id, exc)
        else:
            return ResolvedAnswer(
                **base,
                value=value,
                confidence=Confidence.SYNTHESIZED,
                source=AnswerSource.PROFILE_FIELD,
            )

    if template.default is not None:
        default = list(template.default) if isinstance(template.default, tuple) else template.default
        return ResolvedAnswer(
            **base,
            value=default,
            confidence=Confidence.SYNTHESIZED,
            source=AnswerSource.DEFAULT,
        )

    return ResolvedAnswer(**base, confidence=Confidence.UNRESOLVED)
