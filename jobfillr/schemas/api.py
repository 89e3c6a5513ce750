from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from .answers import CompletionReport, MatchContext, ObservedQuestion, ResolvedAnswer, UserAnswer
from .profile import ProfileSnapshot
from .templates import QuestionType


class ResolveRequest(BaseModel):
    text: str = Field(max_length=2000)
    question_type: QuestionType | None = None
    field_context: str | None = Field(default=None, max_length=2000)
    recent_categories: list[str] = Field(default_factory=list, max_length=100)

    def observed(self) -> ObservedQuestion:
        return ObservedQuestion(
            text=self.text,
            question_type=self.question_type,
            field_context=self.field_context,
        )

    def context(self) -> MatchContext:
        return MatchContext(recent_categories=tuple(self.recent_categories))


class ResolveBatchRequest(BaseModel):
    fields: list[ObservedQuestion] = Field(min_length=1)
    recent_categories: list[str] = Field(default_factory=list, max_length=100)

    def context(self) -> MatchContext:
        return MatchContext(recent_categories=tuple(self.recent_categories))


class ResolveBatchResponse(BaseModel):
    results: list[ResolvedAnswer]


class SubmitAnswerRequest(BaseModel):
    template_id: int = Field(ge=1)
    answer: Any


class SkillsRequest(BaseModel):
    skills: list[str] = Field(default_factory=list, max_length=500)


class DeleteUserResponse(BaseModel):
    deleted: dict[str, int]


class UserDataExport(BaseModel):
    user_id: int
    exported_at: datetime
    profile: ProfileSnapshot
    completion: CompletionReport
    answers: list[UserAnswer]
