from __future__ import annotations

import logging
from typing import Iterable

from jobfillr.schemas.templates import QuestionTemplate
from jobfillr.storage.templates_store import TemplateStore

logger = logging.getLogger(__name__)


def seed_templates(store: TemplateStore, templates: Iterable[QuestionTemplate]) -> int:
    """Insert catalog templates that are not stored yet.

    Safe to run on every startup: a template whose id or question text is
    already present is skipped, and stored rows are never rewritten.
    """
    existing_questions = store.existing_questions()
    created = 0
    skipped = 0
    for template in templates:
        if template.question in existing_questions:
            skipped += 1
            continue
        if store.insert_if_absent(template):
            created += 1
            existing_questions.add(template.question)
        else:
            logger.warning("template_seed_id_taken template_id=%s", template.id)
            skipped += 1
    logger.info("template_seed created=%s skipped=%s", created, skipped)
    return created
