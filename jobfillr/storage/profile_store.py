from __future__ import annotations

import json
import logging
import sqlite3
from datetime import datetime

from jobfillr.resolution.completion import score_completion
from jobfillr.schemas.profile import (
    Education,
    EducationData,
    PersonalInfo,
    Profile,
    ProfileSnapshot,
    WorkExperience,
    WorkExperienceData,
)

from .db import Database, utc_now

logger = logging.getLogger(__name__)

_WORK_COLUMNS = {
    "company": "company",
    "title": "title",
    "location": "location",
    "start_date": "start_date",
    "end_date": "end_date",
    "is_current": "current",
    "description": "description",
}
_EDUCATION_COLUMNS = {
    "institution": "institution",
    "degree": "degree",
    "field": "field",
    "start_date": "start_date",
    "end_date": "end_date",
    "is_current": "current",
    "description": "description",
}


def _row_to_profile(row: sqlite3.Row) -> Profile:
    personal_info = json.loads(row["personal_info_json"]) if row["personal_info_json"] else None
    return Profile(
        id=row["id"],
        user_id=row["user_id"],
        personal_info=PersonalInfo.model_validate(personal_info) if personal_info else None,
        skills=tuple(json.loads(row["skills_json"] or "[]")),
        completion_percentage=row["completion_percentage"],
        updated_at=datetime.fromisoformat(row["updated_at"]),
    )


def _row_to_work_experience(row: sqlite3.Row) -> WorkExperience:
    return WorkExperience(
        id=row["id"],
        user_id=row["user_id"],
        company=row["company"],
        title=row["title"],
        location=row["location"],
        start_date=row["start_date"],
        end_date=row["end_date"],
        current=bool(row["is_current"]),
        description=row["description"],
        order=row["sort_order"],
    )


def _row_to_education(row: sqlite3.Row) -> Education:
    return Education(
        id=row["id"],
        user_id=row["user_id"],
        institution=row["institution"],
        degree=row["degree"],
        field=row["field"],
        start_date=row["start_date"],
        end_date=row["end_date"],
        current=bool(row["is_current"]),
        description=row["description"],
        order=row["sort_order"],
    )


def clean_skills(skills: list[str]) -> list[str]:
    """Strip, drop blanks and de-duplicate case-insensitively, keeping first spelling."""
    seen: set[str] = set()
    cleaned: list[str] = []
    for skill in skills:
        value = skill.strip()
        key = value.lower()
        if not value or key in seen:
            continue
        seen.add(key)
        cleaned.append(value)
    return cleaned


class ProfileStore:
    """Profile, work history and education for a user.

    Every mutation recomputes completion_percentage inside the same
    transaction, so the stored value always reflects the stored content.
    """

    def __init__(self, db: Database) -> None:
        self._db = db

    # Reads

    def get_profile(self, user_id: int) -> Profile | None:
        with self._db.reading() as conn:
            row = conn.execute("SELECT * FROM profiles WHERE user_id = ?", (user_id,)).fetchone()
        return _row_to_profile(row) if row else None

    def load_snapshot(self, user_id: int) -> ProfileSnapshot:
        with self._db.reading() as conn:
            return self._snapshot(conn, user_id)

    # Profile fields

    def save_personal_info(self, user_id: int, personal_info: PersonalInfo) -> Profile:
        payload = json.dumps(personal_info.model_dump(mode="json"), ensure_ascii=False)
        with self._db.transaction() as conn:
            self._ensure_profile(conn, user_id)
            conn.execute(
                "UPDATE profiles SET personal_info_json = ? WHERE user_id = ?",
                (payload, user_id),
            )
            return self._recompute(conn, user_id)

    def save_skills(self, user_id: int, skills: list[str]) -> Profile:
        payload = json.dumps(clean_skills(skills), ensure_ascii=False)
        with self._db.transaction() as conn:
            self._ensure_profile(conn, user_id)
            conn.execute("UPDATE profiles SET skills_json = ? WHERE user_id = ?", (payload, user_id))
            return self._recompute(conn, user_id)

    # Work experience

    def add_work_experience(self, user_id: int, data: WorkExperienceData) -> WorkExperience:
        with self._db.transaction() as conn:
            self._ensure_profile(conn, user_id)
            entry_id = self._insert_entry(conn, "work_experiences", _WORK_COLUMNS, user_id, data)
            self._recompute(conn, user_id)
            row = conn.execute("SELECT * FROM work_experiences WHERE id = ?", (entry_id,)).fetchone()
        return _row_to_work_experience(row)

    def update_work_experience(
        self, user_id: int, entry_id: int, data: WorkExperienceData
    ) -> WorkExperience | None:
        with self._db.transaction() as conn:
            if not self._update_entry(conn, "work_experiences", _WORK_COLUMNS, user_id, entry_id, data):
                return None
            self._recompute(conn, user_id)
            row = conn.execute("SELECT * FROM work_experiences WHERE id = ?", (entry_id,)).fetchone()
        return _row_to_work_experience(row)

    def delete_work_experience(self, user_id: int, entry_id: int) -> bool:
        with self._db.transaction() as conn:
            cur = conn.execute(
                "DELETE FROM work_experiences WHERE id = ? AND user_id = ?",
                (entry_id, user_id),
            )
            if not cur.rowcount:
                return False
            self._recompute(conn, user_id)
        return True

    # Education

    def add_education(self, user_id: int, data: EducationData) -> Education:
        with self._db.transaction() as conn:
            self._ensure_profile(conn, user_id)
            entry_id = self._insert_entry(conn, "educations", _EDUCATION_COLUMNS, user_id, data)
            self._recompute(conn, user_id)
            row = conn.execute("SELECT * FROM educations WHERE id = ?", (entry_id,)).fetchone()
        return _row_to_education(row)

    def update_education(self, user_id: int, entry_id: int, data: EducationData) -> Education | None:
        with self._db.transaction() as conn:
            if not self._update_entry(conn, "educations", _EDUCATION_COLUMNS, user_id, entry_id, data):
                return None
            self._recompute(conn, user_id)
            row = conn.execute("SELECT * FROM educations WHERE id = ?", (entry_id,)).fetchone()
        return _row_to_education(row)

    def delete_education(self, user_id: int, entry_id: int) -> bool:
        with self._db.transaction() as conn:
            cur = conn.execute(
                "DELETE FROM educations WHERE id = ? AND user_id = ?",
                (entry_id, user_id),
            )
            if not cur.rowcount:
                return False
            self._recompute(conn, user_id)
        return True

    # Lifecycle

    def reset_profile(self, user_id: int) -> Profile:
        with self._db.transaction() as conn:
            self._ensure_profile(conn, user_id)
            conn.execute("DELETE FROM work_experiences WHERE user_id = ?", (user_id,))
            conn.execute("DELETE FROM educations WHERE user_id = ?", (user_id,))
            conn.execute(
                "UPDATE profiles SET personal_info_json = NULL, skills_json = '[]' WHERE user_id = ?",
                (user_id,),
            )
            return self._recompute(conn, user_id)

    def delete_user(self, user_id: int) -> dict[str, int]:
        """Remove every row the user owns, answers included, in one transaction."""
        deleted: dict[str, int] = {}
        with self._db.transaction() as conn:
            for table in ("user_answers", "work_experiences", "educations", "profiles"):
                cur = conn.execute(f"DELETE FROM {table} WHERE user_id = ?", (user_id,))
                deleted[table] = int(cur.rowcount or 0)
        return deleted

    # Internals, all run on a connection the caller already holds

    def _ensure_profile(self, conn: sqlite3.Connection, user_id: int) -> None:
        conn.execute(
            """
            INSERT INTO profiles (user_id, skills_json, completion_percentage, updated_at)
            VALUES (?, '[]', 0, ?)
            ON CONFLICT (user_id) DO NOTHING
            """,
            (user_id, utc_now().isoformat()),
        )

    def _insert_entry(
        self,
        conn: sqlite3.Connection,
        table: str,
        columns: dict[str, str],
        user_id: int,
        data: WorkExperienceData | EducationData,
    ) -> int:
        (next_order,) = conn.execute(
            f"SELECT COALESCE(MAX(sort_order) + 1, 0) FROM {table} WHERE user_id = ?",
            (user_id,),
        ).fetchone()
        values = data.model_dump()
        placeholders = ", ".join("?" for _ in columns)
        cur = conn.execute(
            f"INSERT INTO {table} (user_id, {', '.join(columns)}, sort_order) VALUES (?, {placeholders}, ?)",
            (user_id, *(values[name] for name in columns.values()), next_order),
        )
        return int(cur.lastrowid)

    def _update_entry(
        self,
        conn: sqlite3.Connection,
        table: str,
        columns: dict[str, str],
        user_id: int,
        entry_id: int,
        data: WorkExperienceData | EducationData,
    ) -> bool:
        values = data.model_dump()
        assignments = ", ".join(f"{column} = ?" for column in columns)
        cur = conn.execute(
            f"UPDATE {table} SET {assignments} WHERE id = ? AND user_id = ?",
            (*(values[name] for name in columns.values()), entry_id, user_id),
        )
        return bool(cur.rowcount)

    def _work_experiences(self, conn: sqlite3.Connection, user_id: int) -> list[WorkExperience]:
        rows = conn.execute(
            "SELECT * FROM work_experiences WHERE user_id = ? ORDER BY sort_order, id",
            (user_id,),
        ).fetchall()
        return [_row_to_work_experience(row) for row in rows]

    def _educations(self, conn: sqlite3.Connection, user_id: int) -> list[Education]:
        rows = conn.execute(
            "SELECT * FROM educations WHERE user_id = ? ORDER BY sort_order, id",
            (user_id,),
        ).fetchall()
        return [_row_to_education(row) for row in rows]

    def _snapshot(self, conn: sqlite3.Connection, user_id: int) -> ProfileSnapshot:
        row = conn.execute("SELECT * FROM profiles WHERE user_id = ?", (user_id,)).fetchone()
        return ProfileSnapshot(
            user_id=user_id,
            profile=_row_to_profile(row) if row else None,
            work_experiences=tuple(self._work_experiences(conn, user_id)),
            educations=tuple(self._educations(conn, user_id)),
        )

    def _recompute(self, conn: sqlite3.Connection, user_id: int) -> Profile:
        report = score_completion(self._snapshot(conn, user_id))
        conn.execute(
            "UPDATE profiles SET completion_percentage = ?, updated_at = ? WHERE user_id = ?",
            (report.percentage, utc_now().isoformat(), user_id),
        )
        logger.debug("profile_completion_recomputed user_id=%s percentage=%s", user_id, report.percentage)
        row = conn.execute("SELECT * FROM profiles WHERE user_id = ?", (user_id,)).fetchone()
        return _row_to_profile(row)
