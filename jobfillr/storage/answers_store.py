from __future__ import annotations

import json
import sqlite3
from datetime import datetime
from typing import Any

from jobfillr.schemas.answers import UserAnswer

from .db import Database, utc_now


def _row_to_answer(row: sqlite3.Row) -> UserAnswer:
    return UserAnswer(
        id=row["id"],
        user_id=row["user_id"],
        template_id=row["template_id"],
        answer=json.loads(row["answer_json"]),
        updated_at=datetime.fromisoformat(row["updated_at"]),
    )


class AnswerStore:
    def __init__(self, db: Database) -> None:
        self._db = db

    def get_answer(self, user_id: int, template_id: int) -> UserAnswer | None:
        with self._db.reading() as conn:
            row = conn.execute(
                """
                SELECT id, user_id, template_id, answer_json, updated_at
                FROM user_answers
                WHERE user_id = ? AND template_id = ?
                """,
                (user_id, template_id),
            ).fetchone()
        return _row_to_answer(row) if row else None

    def list_answers(self, user_id: int) -> list[UserAnswer]:
        with self._db.reading() as conn:
            rows = conn.execute(
                """
                SELECT id, user_id, template_id, answer_json, updated_at
                FROM user_answers
                WHERE user_id = ?
                ORDER BY template_id
                """,
                (user_id,),
            ).fetchall()
        return [_row_to_answer(row) for row in rows]

    def answers_by_template(self, user_id: int) -> dict[int, UserAnswer]:
        return {answer.template_id: answer for answer in self.list_answers(user_id)}

    def upsert_answer(self, user_id: int, template_id: int, answer: Any) -> UserAnswer:
        """Write the single answer for (user_id, template_id); last writer wins."""
        with self._db.transaction() as conn:
            conn.execute(
                """
                INSERT INTO user_answers (user_id, template_id, answer_json, updated_at)
                VALUES (?, ?, ?, ?)
                ON CONFLICT (user_id, template_id) DO UPDATE SET
                    answer_json = excluded.answer_json,
                    updated_at = excluded.updated_at
                """,
                (
                    user_id,
                    template_id,
                    json.dumps(answer, ensure_ascii=False),
                    utc_now().isoformat(),
                ),
            )
            row = conn.execute(
                """
                SELECT id, user_id, template_id, answer_json, updated_at
                FROM user_answers
                WHERE user_id = ? AND template_id = ?
                """,
                (user_id, template_id),
            ).fetchone()
        return _row_to_answer(row)

    def delete_answer(self, user_id: int, template_id: int) -> bool:
        with self._db.transaction() as conn:
            cur = conn.execute(
                "DELETE FROM user_answers WHERE user_id = ? AND template_id = ?",
                (user_id, template_id),
            )
            return int(cur.rowcount or 0) > 0
