from __future__ import annotations

import json
from pathlib import Path
from typing import Iterable

from jobfillr.schemas.templates import QuestionTemplate, question_template_list_adapter

from .provider import TemplateCatalog

_SEED_PATH = Path(__file__).with_name("seed_templates.json")


def load_seed_templates(path: str | Path | None = None) -> list[QuestionTemplate]:
    seed_path = Path(path) if path else _SEED_PATH
    with seed_path.open("r", encoding="utf-8") as handle:
        raw = json.load(handle)
    return question_template_list_adapter.validate_python(raw)


class LocalCatalog(TemplateCatalog):
    """Immutable in-memory snapshot of the template catalog."""

    def __init__(self, templates: Iterable[QuestionTemplate]) -> None:
        by_id: dict[int, QuestionTemplate] = {}
        for template in templates:
            if template.id in by_id:
                raise ValueError(f"Duplicate question template id {template.id}")
            by_id[template.id] = template
        self._by_id = by_id
        self._ordered = tuple(sorted(by_id.values(), key=lambda template: template.id))

    def find_by_id(self, template_id: int) -> QuestionTemplate | None:
        return self._by_id.get(template_id)

    def list_by_category(self, category: str) -> tuple[QuestionTemplate, ...]:
        prefix = f"{category}."
        return tuple(
            template
            for template in self._ordered
            if template.category == category or template.category.startswith(prefix)
        )

    def all(self) -> tuple[QuestionTemplate, ...]:
        return self._ordered

    def categories(self) -> tuple[str, ...]:
        return tuple(sorted({template.category for template in self._ordered}))

    def __len__(self) -> int:
        return len(self._ordered)
