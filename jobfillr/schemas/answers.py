from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Union

from pydantic import BaseModel, ConfigDict, Field

from .templates import QuestionType

AnswerValue = Union[bool, float, int, str, list[str], None]


class Confidence(str, Enum):
    EXACT = "exact"
    FUZZY = "fuzzy"
    SYNTHESIZED = "synthesized"
    UNRESOLVED = "unresolved"


class AnswerSource(str, Enum):
    STORED_ANSWER = "storedAnswer"
    PROFILE_FIELD = "profileField"
    DEFAULT = "default"


class UserAnswer(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    user_id: int
    template_id: int
    answer: Any
    updated_at: datetime


class ObservedQuestion(BaseModel):
    model_config = ConfigDict(frozen=True)

    text: str = Field(max_length=2000)
    question_type: QuestionType | None = None
    field_context: str | None = Field(default=None, max_length=2000)


class MatchContext(BaseModel):
    """Per form session hints; categories ordered oldest to newest."""

    model_config = ConfigDict(frozen=True)

    recent_categories: tuple[str, ...] = ()


class ResolvedAnswer(BaseModel):
    model_config = ConfigDict(frozen=True)

    template_id: int | None = None
    value: AnswerValue = None
    confidence: Confidence
    source: AnswerSource | None = None
    category: str | None = None
    score: float = Field(default=0.0, ge=0.0, le=1.0)


class CompletionSections(BaseModel):
    personal_info: bool = False
    work_experience: bool = False
    education: bool = False
    skills: bool = False


class CompletionReport(BaseModel):
    percentage: int = Field(ge=0, le=100)
    sections: CompletionSections
