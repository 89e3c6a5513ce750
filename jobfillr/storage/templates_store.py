from __future__ import annotations

import json

from jobfillr.schemas.templates import QuestionTemplate, parse_template

from .db import Database


class TemplateStore:
    def __init__(self, db: Database) -> None:
        self._db = db

    def list_templates(self) -> list[QuestionTemplate]:
        with self._db.reading() as conn:
            rows = conn.execute(
                "SELECT payload_json FROM question_templates ORDER BY id"
            ).fetchall()
        return [parse_template(json.loads(row["payload_json"])) for row in rows]

    def get_template(self, template_id: int) -> QuestionTemplate | None:
        with self._db.reading() as conn:
            row = conn.execute(
                "SELECT payload_json FROM question_templates WHERE id = ?",
                (template_id,),
            ).fetchone()
        if not row:
            return None
        return parse_template(json.loads(row["payload_json"]))

    def existing_questions(self) -> set[str]:
        with self._db.reading() as conn:
            rows = conn.execute("SELECT question FROM question_templates").fetchall()
        return {row["question"] for row in rows}

    def insert_if_absent(self, template: QuestionTemplate) -> bool:
        """Insert a template unless its id is taken. Existing rows are never rewritten."""
        payload = template.model_dump(mode="json")
        with self._db.transaction() as conn:
            cur = conn.execute(
                """
                INSERT INTO question_templates (id, category, question, question_type, payload_json)
                VALUES (?, ?, ?, ?, ?)
                ON CONFLICT (id) DO NOTHING
                """,
                (
                    template.id,
                    template.category,
                    template.question,
                    template.question_type,
                    json.dumps(payload, ensure_ascii=False),
                ),
            )
            return int(cur.rowcount or 0) == 1
