from __future__ import annotations


class AutofillError(Exception):
    """Base class for errors raised by the matching and resolution engine."""


class InvalidInput(AutofillError, ValueError):
    """Malformed observed question text or submitted answer. Never retried."""


class AnswerValidationError(InvalidInput):
    def __init__(self, template_id: int, question_type: str, reason: str) -> None:
        self.template_id = template_id
        self.question_type = question_type
        self.reason = reason
        super().__init__(f"Invalid answer for template {template_id} ({question_type}): {reason}")


class UnknownTemplate(InvalidInput):
    def __init__(self, template_id: int) -> None:
        self.template_id = template_id
        super().__init__(f"Question template {template_id} does not exist.")


class StoreUnavailable(AutofillError):
    """The backing profile, answer or template store could not be reached."""
