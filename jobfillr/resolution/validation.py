from __future__ import annotations

import math
from datetime import date
from typing import Any, Callable, get_args

from jobfillr.core.errors import AnswerValidationError
from jobfillr.schemas.templates import OptionTemplate, QuestionTemplate, QuestionType


def _invalid(template: QuestionTemplate, reason: str) -> AnswerValidationError:
    return AnswerValidationError(template.id, template.question_type, reason)


def _match_option(template: OptionTemplate, value: str) -> str | None:
    for option in template.options:
        if option.value == value:
            return option.value
    folded = value.strip().casefold()
    for option in template.options:
        if option.value.casefold() == folded or option.label.casefold() == folded:
            return option.value
    return None


def _coerce_text(template: QuestionTemplate, value: Any) -> str:
    if not isinstance(value, str):
        raise _invalid(template, "expected a string")
    if not value.strip():
        raise _invalid(template, "answer must not be blank")
    return value


def _coerce_choice(template: OptionTemplate, value: Any) -> str:
    if not isinstance(value, str):
        raise _invalid(template, "expected one option value")
    matched = _match_option(template, value)
    if matched is None:
        raise _invalid(template, f"'{value}' is not one of the options")
    return matched


def _coerce_multi_choice(template: OptionTemplate, value: Any) -> list[str]:
    if isinstance(value, str) or not isinstance(value, (list, tuple)):
        raise _invalid(template, "expected a list of option values")
    chosen: list[str] = []
    for item in value:
        if not isinstance(item, str):
            raise _invalid(template, "expected a list of option values")
        matched = _match_option(template, item)
        if matched is None:
            raise _invalid(template, f"'{item}' is not one of the options")
        if matched not in chosen:
            chosen.append(matched)
    if not chosen:
        raise _invalid(template, "select at least one option")
    return chosen


def _coerce_boolean(template: QuestionTemplate, value: Any) -> bool:
    if not isinstance(value, bool):
        raise _invalid(template, "expected true or false")
    return value


def _coerce_date(template: QuestionTemplate, value: Any) -> str:
    if not isinstance(value, str):
        raise _invalid(template, "expected an ISO date string")
    try:
        return date.fromisoformat(value.strip()).isoformat()
    except ValueError as exc:
        raise _invalid(template, "expected an ISO date (YYYY-MM-DD)") from exc


def _coerce_number(template: QuestionTemplate, value: Any) -> float | int:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise _invalid(template, "expected a number")
    if not math.isfinite(value):
        raise _invalid(template, "expected a finite number")
    return value


_COERCERS: dict[str, Callable[[Any, Any], Any]] = {
    "text": _coerce_text,
    "textarea": _coerce_text,
    "select": _coerce_choice,
    "radio": _coerce_choice,
    "checkbox": _coerce_multi_choice,
    "boolean": _coerce_boolean,
    "date": _coerce_date,
    "number": _coerce_number,
}

_missing = set(get_args(QuestionType)) - set(_COERCERS)
if _missing:
    raise RuntimeError(f"No answer validator for question types: {sorted(_missing)}")


def coerce_answer(template: QuestionTemplate, value: Any) -> Any:
    """Check a value against the template's answer shape and return its stored form.

    Option answers are stored by option value (a matching label is
    accepted), dates as ISO strings.
    """
    return _COERCERS[template.question_type](template, value)
