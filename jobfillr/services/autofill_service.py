from __future__ import annotations

import logging
from functools import lru_cache
from typing import Any, Sequence

from jobfillr.catalog import TemplateCatalog, get_default_catalog
from jobfillr.core.config import settings
from jobfillr.core.errors import InvalidInput, UnknownTemplate
from jobfillr.matching.matcher import MatchResult, QuestionMatcher
from jobfillr.resolution.completion import score_completion
from jobfillr.resolution.resolver import resolve_answer
from jobfillr.resolution.validation import coerce_answer
from jobfillr.schemas.answers import (
    CompletionReport,
    MatchContext,
    ObservedQuestion,
    ResolvedAnswer,
    UserAnswer,
)
from jobfillr.schemas.profile import (
    Education,
    EducationData,
    PersonalInfo,
    Profile,
    ProfileSnapshot,
    WorkExperience,
    WorkExperienceData,
)
from jobfillr.schemas.api import UserDataExport
from jobfillr.storage import AnswerStore, ProfileStore, get_database
from jobfillr.storage.db import utc_now

logger = logging.getLogger(__name__)


def _require_text(observed: ObservedQuestion, position: int | None = None) -> None:
    if observed.text and observed.text.strip():
        return
    where = f" (field {position})" if position is not None else ""
    raise InvalidInput(f"Observed question text must not be empty{where}.")


class AutofillService:
    """Entry points the extension calls: resolve fields, store answers, report completion."""

    def __init__(
        self,
        catalog: TemplateCatalog,
        answers: AnswerStore,
        profiles: ProfileStore,
        matcher: QuestionMatcher | None = None,
    ) -> None:
        self.catalog = catalog
        self.answers = answers
        self.profiles = profiles
        self.matcher = matcher or QuestionMatcher(catalog)

    def match(self, observed: ObservedQuestion, context: MatchContext | None = None) -> MatchResult:
        return self.matcher.match(observed, context)

    def resolve(
        self,
        user_id: int,
        observed: ObservedQuestion,
        context: MatchContext | None = None,
    ) -> ResolvedAnswer:
        return self.resolve_batch(user_id, [observed], context)[0]

    def resolve_batch(
        self,
        user_id: int,
        observed: Sequence[ObservedQuestion],
        context: MatchContext | None = None,
    ) -> list[ResolvedAnswer]:
        if len(observed) > settings.batch_max_fields:
            raise InvalidInput(f"At most {settings.batch_max_fields} fields can be resolved per request.")
        for position, question in enumerate(observed):
            _require_text(question, position if len(observed) > 1 else None)

        # One read of each store per call; every field resolves against the same snapshot.
        snapshot = self.profiles.load_snapshot(user_id)
        stored = self.answers.answers_by_template(user_id)

        results = []
        for question in observed:
            match = self.matcher.match(question, context)
            resolved = resolve_answer(match, snapshot, stored)
            logger.info(
                "field_resolved user_id=%s template_id=%s confidence=%s source=%s",
                user_id,
                resolved.template_id,
                resolved.confidence.value,
                resolved.source.value if resolved.source else None,
            )
            results.append(resolved)
        return results

    def submit_answer(self, user_id: int, template_id: int, value: Any) -> UserAnswer:
        template = self.catalog.find_by_id(template_id)
        if template is None:
            raise UnknownTemplate(template_id)
        answer = self.answers.upsert_answer(user_id, template_id, coerce_answer(template, value))
        logger.info("answer_saved user_id=%s template_id=%s", user_id, template_id)
        return answer

    def list_answers(self, user_id: int) -> list[UserAnswer]:
        return self.answers.list_answers(user_id)

    def get_answer(self, user_id: int, template_id: int) -> UserAnswer | None:
        return self.answers.get_answer(user_id, template_id)

    def delete_answer(self, user_id: int, template_id: int) -> bool:
        return self.answers.delete_answer(user_id, template_id)

    def get_profile_completion(self, user_id: int) -> CompletionReport:
        return score_completion(self.profiles.load_snapshot(user_id))

    # Profile writes; each one recomputes completion inside the store transaction.

    def get_profile(self, user_id: int) -> ProfileSnapshot:
        return self.profiles.load_snapshot(user_id)

    def save_personal_info(self, user_id: int, personal_info: PersonalInfo) -> Profile:
        return self._logged_write("personal_info", user_id, self.profiles.save_personal_info(user_id, personal_info))

    def save_skills(self, user_id: int, skills: list[str]) -> Profile:
        return self._logged_write("skills", user_id, self.profiles.save_skills(user_id, skills))

    def add_work_experience(self, user_id: int, data: WorkExperienceData) -> WorkExperience:
        return self.profiles.add_work_experience(user_id, data)

    def update_work_experience(
        self, user_id: int, entry_id: int, data: WorkExperienceData
    ) -> WorkExperience | None:
        return self.profiles.update_work_experience(user_id, entry_id, data)

    def delete_work_experience(self, user_id: int, entry_id: int) -> bool:
        return self.profiles.delete_work_experience(user_id, entry_id)

    def add_education(self, user_id: int, data: EducationData) -> Education:
        return self.profiles.add_education(user_id, data)

    def update_education(self, user_id: int, entry_id: int, data: EducationData) -> Education | None:
        return self.profiles.update_education(user_id, entry_id, data)

    def delete_education(self, user_id: int, entry_id: int) -> bool:
        return self.profiles.delete_education(user_id, entry_id)

    def reset_profile(self, user_id: int) -> Profile:
        return self._logged_write("reset", user_id, self.profiles.reset_profile(user_id))

    def _logged_write(self, section: str, user_id: int, profile: Profile) -> Profile:
        logger.info(
            "profile_saved user_id=%s section=%s completion=%s",
            user_id,
            section,
            profile.completion_percentage,
        )
        return profile

    def export_user_data(self, user_id: int) -> UserDataExport:
        snapshot = self.profiles.load_snapshot(user_id)
        export = UserDataExport(
            user_id=user_id,
            exported_at=utc_now(),
            profile=snapshot,
            completion=score_completion(snapshot),
            answers=self.answers.list_answers(user_id),
        )
        logger.info("user_data_exported user_id=%s answers=%s", user_id, len(export.answers))
        return export

    def delete_user_data(self, user_id: int) -> dict[str, int]:
        deleted = self.profiles.delete_user(user_id)
        logger.info("user_data_deleted user_id=%s deleted=%s", user_id, deleted)
        return deleted


@lru_cache(maxsize=1)
def get_autofill_service() -> AutofillService:
    db = get_database()
    return AutofillService(
        catalog=get_default_catalog(),
        answers=AnswerStore(db),
        profiles=ProfileStore(db),
    )
