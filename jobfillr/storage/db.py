from __future__ import annotations

import logging
import os
import sqlite3
import threading
from contextlib import contextmanager
from datetime import datetime, timezone
from functools import lru_cache
from typing import Iterator

from jobfillr.core.config import settings
from jobfillr.core.errors import StoreUnavailable

logger = logging.getLogger(__name__)

_SCHEMA = (
    """
    CREATE TABLE IF NOT EXISTS question_templates (
        id INTEGER PRIMARY KEY,
        category TEXT NOT NULL,
        question TEXT NOT NULL,
        question_type TEXT NOT NULL,
        payload_json TEXT NOT NULL
    );
    """,
    """
    CREATE TABLE IF NOT EXISTS user_answers (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        user_id INTEGER NOT NULL,
        template_id INTEGER NOT NULL REFERENCES question_templates (id),
        answer_json TEXT NOT NULL,
        updated_at TEXT NOT NULL,
        UNIQUE (user_id, template_id)
    );
    """,
    """
    CREATE TABLE IF NOT EXISTS profiles (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        user_id INTEGER NOT NULL UNIQUE,
        personal_info_json TEXT,
        skills_json TEXT NOT NULL DEFAULT '[]',
        completion_percentage INTEGER NOT NULL DEFAULT 0,
        updated_at TEXT NOT NULL
    );
    """,
    """
    CREATE TABLE IF NOT EXISTS work_experiences (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        user_id INTEGER NOT NULL,
        company TEXT NOT NULL,
        title TEXT NOT NULL,
        location TEXT,
        start_date TEXT,
        end_date TEXT,
        is_current INTEGER NOT NULL DEFAULT 0,
        description TEXT,
        sort_order INTEGER NOT NULL
    );
    """,
    """
    CREATE TABLE IF NOT EXISTS educations (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        user_id INTEGER NOT NULL,
        institution TEXT NOT NULL,
        degree TEXT,
        field TEXT,
        start_date TEXT,
        end_date TEXT,
        is_current INTEGER NOT NULL DEFAULT 0,
        description TEXT,
        sort_order INTEGER NOT NULL
    );
    """,
    """
    CREATE INDEX IF NOT EXISTS idx_work_experiences_user
    ON work_experiences (user_id, sort_order);
    """,
    """
    CREATE INDEX IF NOT EXISTS idx_educations_user
    ON educations (user_id, sort_order);
    """,
)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Database:
    """One shared SQLite connection; every statement runs under a process lock."""

    def __init__(self, db_path: str) -> None:
        self.db_path = db_path
        self._conn: sqlite3.Connection | None = None
        self._lock = threading.RLock()

    def _connect(self) -> sqlite3.Connection:
        if self._conn is not None:
            return self._conn

        if self.db_path != ":memory:":
            directory = os.path.dirname(self.db_path)
            if directory:
                os.makedirs(directory, exist_ok=True)

        conn = sqlite3.connect(
            self.db_path,
            check_same_thread=False,
            timeout=5,
            isolation_level=None,
        )
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA journal_mode=WAL;")
        conn.execute("PRAGMA synchronous=NORMAL;")
        conn.execute("PRAGMA busy_timeout=5000;")
        conn.execute("PRAGMA foreign_keys=ON;")
        for statement in _SCHEMA:
            conn.execute(statement)
        self._conn = conn
        logger.debug("autofill_db_opened path=%s", self.db_path)
        return conn

    @contextmanager
    def reading(self) -> Iterator[sqlite3.Connection]:
        with self._lock:
            try:
                yield self._connect()
            except sqlite3.Error as exc:
                raise StoreUnavailable(f"autofill store read failed: {exc}") from exc

    @contextmanager
    def transaction(self) -> Iterator[sqlite3.Connection]:
        with self._lock:
            try:
                conn = self._connect()
                conn.execute("BEGIN IMMEDIATE;")
            except sqlite3.Error as exc:
                raise StoreUnavailable(f"autofill store unavailable: {exc}") from exc
            try:
                yield conn
            except sqlite3.Error as exc:
                conn.execute("ROLLBACK;")
                raise StoreUnavailable(f"autofill store write failed: {exc}") from exc
            except BaseException:
                conn.execute("ROLLBACK;")
                raise
            else:
                conn.execute("COMMIT;")

    def close(self) -> None:
        with self._lock:
            if self._conn is not None:
                self._conn.close()
                self._conn = None


@lru_cache(maxsize=1)
def get_database() -> Database:
    return Database(settings.autofill_db_path)
