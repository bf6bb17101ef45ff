from __future__ import annotations

import json
import os
import sqlite3
import threading
from datetime import datetime, timezone
from typing import Protocol

from app.core.config import settings
from app.schemas.users import SavedAnalysis, SavedAnalysisCreate, User


class UserExistsError(Exception):
    pass


class UserNotFoundError(Exception):
    pass


class UserStore(Protocol):
    def create(self, username: str, email: str) -> User: ...

    def find_by_email(self, email: str) -> User | None: ...

    def save(self, email: str, record: SavedAnalysisCreate) -> SavedAnalysis: ...

    def list_analyses(self, email: str) -> list[SavedAnalysis]: ...

    def delete_analysis(self, email: str, resume_id: str) -> bool: ...


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class SqliteUserStore:
    def __init__(self, db_path: str):
        self.db_path = db_path
        self._lock = threading.Lock()
        directory = os.path.dirname(db_path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        self._conn = sqlite3.connect(
            db_path,
            check_same_thread=False,
            timeout=5,
            isolation_level=None,
        )
        self._conn.execute("PRAGMA journal_mode=WAL;")
        self._conn.execute("PRAGMA synchronous=NORMAL;")
        self._conn.execute("PRAGMA busy_timeout=5000;")
        self._conn.execute("PRAGMA foreign_keys=ON;")
        self._conn.execute(
            """
            CREATE TABLE IF NOT EXISTS users (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                username TEXT NOT NULL UNIQUE,
                email TEXT NOT NULL UNIQUE,
                created_at TEXT NOT NULL
            );
            """
        )
        self._conn.execute(
            """
            CREATE TABLE IF NOT EXISTS saved_analyses (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                user_id INTEGER NOT NULL REFERENCES users (id) ON DELETE CASCADE,
                resume_id TEXT NOT NULL,
                score INTEGER,
                letter_grade TEXT NOT NULL,
                feedback_json TEXT NOT NULL,
                rejection_letter TEXT NOT NULL,
                job_position TEXT,
                job_field TEXT,
                created_at TEXT NOT NULL
            );
            """
        )
        self._conn.execute(
            """
            CREATE INDEX IF NOT EXISTS idx_saved_analyses_user
            ON saved_analyses (user_id, created_at);
            """
        )

    def close(self) -> None:
        with self._lock:
            self._conn.close()

    def create(self, username: str, email: str) -> User:
        created_at = _utc_now()
        with self._lock:
            existing = self._conn.execute(
                "SELECT 1 FROM users WHERE email = ? OR username = ?",
                (email, username),
            ).fetchone()
            if existing:
                raise UserExistsError("User with this email or username already exists")
            cur = self._conn.execute(
                "INSERT INTO users (username, email, created_at) VALUES (?, ?, ?)",
                (username, email, created_at.isoformat()),
            )
            user_id = cur.lastrowid
        return User(id=user_id, username=username, email=email, created_at=created_at)

    def find_by_email(self, email: str) -> User | None:
        with self._lock:
            row = self._conn.execute(
                "SELECT id, username, email, created_at FROM users WHERE email = ?",
                (email,),
            ).fetchone()
        if not row:
            return None
        return User(id=row[0], username=row[1], email=row[2], created_at=datetime.fromisoformat(row[3]))

    def _require_user_id(self, email: str) -> int:
        user = self.find_by_email(email)
        if user is None:
            raise UserNotFoundError("User not found")
        return user.id

    def save(self, email: str, record: SavedAnalysisCreate) -> SavedAnalysis:
        user_id = self._require_user_id(email)
        created_at = _utc_now()
        with self._lock:
            self._conn.execute(
                """
                INSERT INTO saved_analyses (
                    user_id, resume_id, score, letter_grade, feedback_json,
                    rejection_letter, job_position, job_field, created_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    user_id,
                    record.resume_id,
                    record.score,
                    record.letter_grade,
                    json.dumps(record.feedback, ensure_ascii=False),
                    record.rejection_letter,
                    record.job_position,
                    record.job_field,
                    created_at.isoformat(),
                ),
            )
        return SavedAnalysis(**record.model_dump(), created_at=created_at)

    def list_analyses(self, email: str) -> list[SavedAnalysis]:
        user_id = self._require_user_id(email)
        with self._lock:
            rows = self._conn.execute(
                """
                SELECT resume_id, score, letter_grade, feedback_json, rejection_letter,
                       job_position, job_field, created_at
                FROM saved_analyses
                WHERE user_id = ?
                ORDER BY created_at, id
                """,
                (user_id,),
            ).fetchall()
        return [
            SavedAnalysis(
                resume_id=row[0],
                score=row[1],
                letter_grade=row[2],
                feedback=json.loads(row[3]) if row[3] else [],
                rejection_letter=row[4],
                job_position=row[5],
                job_field=row[6],
                created_at=datetime.fromisoformat(row[7]),
            )
            for row in rows
        ]

    def delete_analysis(self, email: str, resume_id: str) -> bool:
        user_id = self._require_user_id(email)
        with self._lock:
            cur = self._conn.execute(
                "DELETE FROM saved_analyses WHERE user_id = ? AND resume_id = ?",
                (user_id, resume_id),
            )
        return cur.rowcount > 0


_store: SqliteUserStore | None = None
_store_lock = threading.Lock()


def get_user_store() -> SqliteUserStore:
    """FastAPI dependency returning the process-wide store at USERS_DB_PATH."""
    global _store
    with _store_lock:
        if _store is None:
            _store = SqliteUserStore(settings.users_db_path)
        return _store


def close_user_store() -> None:
    global _store
    with _store_lock:
        if _store is not None:
            _store.close()
            _store = None
