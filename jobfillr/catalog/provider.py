from __future__ import annotations

from typing import Protocol

from jobfillr.schemas.templates import QuestionTemplate


class TemplateCatalog(Protocol):
    def find_by_id(self, template_id: int) -> QuestionTemplate | None:
        """Return the template, or None when no template has that id."""

    def list_by_category(self, category: str) -> tuple[QuestionTemplate, ...]:
        """Templates in a category or any of its dotted subcategories, ordered by id."""

    def all(self) -> tuple[QuestionTemplate, ...]:
        """Every template, ordered by id."""
