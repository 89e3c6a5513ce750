from __future__ import annotations

import re
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

_PARTIAL_DATE_RE = re.compile(r"^\s*(\d{4})(?:[-/](\d{1,2}))?(?:[-/](\d{1,2}))?")


class Address(BaseModel):
    street: str | None = None
    city: str | None = None
    state: str | None = None
    zip: str | None = None
    country: str | None = None


class Links(BaseModel):
    linkedin: str | None = None
    github: str | None = None
    portfolio: str | None = None


class PersonalInfo(BaseModel):
    first_name: str = Field(min_length=1)
    last_name: str = Field(min_length=1)
    email: str = Field(min_length=3, max_length=320)
    phone: str | None = None
    address: Address | None = None
    links: Links | None = None

    @field_validator("email")
    @classmethod
    def _validate_email(cls, value: str) -> str:
        value = value.strip()
        if "@" not in value or value.startswith("@") or value.endswith("@"):
            raise ValueError("email must be a valid address")
        return value


class WorkExperienceData(BaseModel):
    company: str = Field(min_length=1)
    title: str = Field(min_length=1)
    location: str | None = None
    start_date: str | None = None
    end_date: str | None = None
    current: bool = False
    description: str | None = None


class EducationData(BaseModel):
    institution: str = Field(min_length=1)
    degree: str | None = None
    field: str | None = None
    start_date: str | None = None
    end_date: str | None = None
    current: bool = False
    description: str | None = None


class WorkExperience(WorkExperienceData):
    model_config = ConfigDict(frozen=True)

    id: int
    user_id: int
    order: int = 0


class Education(EducationData):
    model_config = ConfigDict(frozen=True)

    id: int
    user_id: int
    order: int = 0


class Profile(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    user_id: int
    personal_info: PersonalInfo | None = None
    skills: tuple[str, ...] = ()
    completion_percentage: int = 0
    updated_at: datetime | None = None


def partial_date_key(raw: str | None) -> tuple[int, int, int]:
    """Sort key for the loose YYYY[-MM[-DD]] dates users type into forms."""
    if not raw:
        return (0, 0, 0)
    match = _PARTIAL_DATE_RE.match(raw)
    if not match:
        return (0, 0, 0)
    year, month, day = match.groups()
    return (int(year), int(month or 0), int(day or 0))


def _most_recent(entries: tuple, end_of) -> object | None:
    if not entries:
        return None
    # max() keeps the first of equal keys, so entry order breaks ties
    return max(entries, key=lambda entry: (entry.current, end_of(entry)))


class ProfileSnapshot(BaseModel):
    """Everything the resolver may read for one user, fetched once per call."""

    model_config = ConfigDict(frozen=True)

    user_id: int
    profile: Profile | None = None
    work_experiences: tuple[WorkExperience, ...] = ()
    educations: tuple[Education, ...] = ()

    @property
    def personal_info(self) -> PersonalInfo | None:
        return self.profile.personal_info if self.profile else None

    @property
    def skills(self) -> tuple[str, ...]:
        return self.profile.skills if self.profile else ()

    @property
    def current_work_experience(self) -> WorkExperience | None:
        return _most_recent(self.work_experiences, lambda exp: partial_date_key(exp.end_date))

    @property
    def latest_education(self) -> Education | None:
        return _most_recent(self.educations, lambda edu: partial_date_key(edu.end_date))
