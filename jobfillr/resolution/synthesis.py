"""Declarative profile-to-answer rules.

Each template category that can be answered from structured profile data
maps to one rule: a dotted path into the ProfileSnapshot, an optional
transform and the question types the produced value fits. The resolver
walks the table; there is no per-category branching anywhere else.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date
from types import MappingProxyType
from typing import Any, Callable, Mapping

from jobfillr.catalog.provider import TemplateCatalog
from jobfillr.schemas.profile import Address, PersonalInfo, ProfileSnapshot, partial_date_key
from jobfillr.schemas.templates import QuestionTemplate

Transform = Callable[[Any, QuestionTemplate], Any]

_NON_DIGIT_RE = re.compile(r"\D")

TEXT_TYPES = frozenset({"text", "textarea"})
DATE_TYPES = frozenset({"date", "text"})
OPTION_TYPES = frozenset({"checkbox", "select", "radio"})


def format_phone(value: str, template: QuestionTemplate) -> str:
    """(123) 456-7890 for North American numbers, the original text otherwise."""
    digits = _NON_DIGIT_RE.sub("", value)
    if len(digits) == 11 and digits.startswith("1"):
        digits = digits[1:]
    if len(digits) == 10:
        return f"({digits[:3]}) {digits[3:6]}-{digits[6:]}"
    return value.strip()


def full_name(info: PersonalInfo, template: QuestionTemplate) -> str:
    return " ".join(part.strip() for part in (info.first_name, info.last_name) if part and part.strip())


def join_address(address: Address, template: QuestionTemplate) -> str:
    region = " ".join(part for part in (address.state, address.zip) if part)
    parts = (address.street, address.city, region, address.country)
    return ", ".join(part.strip() for part in parts if part and part.strip())


def join_list(values: tuple[str, ...], template: QuestionTemplate) -> str:
    return ", ".join(values)


def to_iso_date(value: str, template: QuestionTemplate) -> str | None:
    """Expand YYYY or YYYY-MM to a full ISO date on the first of the period."""
    year, month, day = partial_date_key(value)
    if not year:
        return None
    try:
        return date(year, max(month, 1), max(day, 1)).isoformat()
    except ValueError:
        return None


def pick_options(values: tuple[str, ...], template: QuestionTemplate) -> Any:
    """Option values whose value or label names one of the profile values."""
    options = getattr(template, "options", ())
    wanted = {value.strip().casefold() for value in values}
    picked = [
        option.value
        for option in options
        if option.value.casefold() in wanted or option.label.casefold() in wanted
    ]
    if template.question_type == "checkbox":
        return picked
    return picked[0] if picked else None


@dataclass(frozen=True)
class SynthesisRule:
    path: str
    transform: Transform | None = None
    question_types: frozenset[str] = TEXT_TYPES


SYNTHESIS_RULES: Mapping[str, SynthesisRule] = MappingProxyType(
    {
        "personal.email": SynthesisRule("personal_info.email"),
        "personal.firstName": SynthesisRule("personal_info.first_name"),
        "personal.lastName": SynthesisRule("personal_info.last_name"),
        "personal.fullName": SynthesisRule("personal_info", full_name),
        "personal.phone": SynthesisRule("personal_info.phone", format_phone),
        "personal.address.street": SynthesisRule("personal_info.address.street"),
        "personal.address.city": SynthesisRule("personal_info.address.city"),
        "personal.address.state": SynthesisRule("personal_info.address.state"),
        "personal.address.zip": SynthesisRule("personal_info.address.zip"),
        "personal.address.country": SynthesisRule("personal_info.address.country"),
        "personal.address.full": SynthesisRule("personal_info.address", join_address),
        "personal.links.linkedin": SynthesisRule("personal_info.links.linkedin"),
        "personal.links.github": SynthesisRule("personal_info.links.github"),
        "personal.links.portfolio": SynthesisRule("personal_info.links.portfolio"),
        "experience.currentEmployer": SynthesisRule("current_work_experience.company"),
        "experience.currentTitle": SynthesisRule("current_work_experience.title"),
        "experience.currentStartDate": SynthesisRule(
            "current_work_experience.start_date", to_iso_date, DATE_TYPES
        ),
        "work_history.accomplishment": SynthesisRule("current_work_experience.description"),
        "education.highestDegree": SynthesisRule("latest_education.degree"),
        "education.institution": SynthesisRule("latest_education.institution"),
        "education.fieldOfStudy": SynthesisRule("latest_education.field"),
        "education.graduationDate": SynthesisRule("latest_education.end_date", to_iso_date, DATE_TYPES),
        "education.coursework": SynthesisRule("latest_education.description"),
        "skills.list": SynthesisRule("skills", join_list),
        "skills.programmingLanguages": SynthesisRule("skills", pick_options, OPTION_TYPES),
    }
)


def read_path(snapshot: ProfileSnapshot, path: str) -> Any:
    current: Any = snapshot
    for attribute in path.split("."):
        if current is None:
            return None
        current = getattr(current, attribute, None)
    return current


def is_empty(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple, set, frozenset, dict)):
        return len(value) == 0
    return False


def synthesize(template: QuestionTemplate, snapshot: ProfileSnapshot) -> Any:
    """Profile-derived value for a template, or None when nothing usable exists."""
    rule = SYNTHESIS_RULES.get(template.category)
    if rule is None or template.question_type not in rule.question_types:
        return None
    value = read_path(snapshot, rule.path)
    if is_empty(value):
        return None
    if rule.transform is not None:
        value = rule.transform(value, template)
    return None if is_empty(value) else value


def check_synthesis_coverage(catalog: TemplateCatalog) -> list[str]:
    """Problems with the rule table against a catalog; an empty list means consistent."""
    problems = []
    for template in catalog.all():
        rule = SYNTHESIS_RULES.get(template.category)
        if rule is not None and template.question_type not in rule.question_types:
            problems.append(
                f"template {template.id} ({template.category}) is '{template.question_type}', "
                f"synthesis produces {sorted(rule.question_types)}"
            )
    return problems
