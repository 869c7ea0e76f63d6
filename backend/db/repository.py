"""SQLite persistence for users, resumes and their analyses."""

from __future__ import annotations

import json
import logging
import os
import sqlite3
import threading
from datetime import datetime, timezone
from typing import Any

from models.responses import AnalysisRecord, AnalysisResult, ResumeRecord, ResumeSummary

logger = logging.getLogger(__name__)

_LIST_FIELDS = ("strengths", "weaknesses", "suggestions", "keywords_found", "keywords_missing")

_SCHEMA = """
CREATE TABLE IF NOT EXISTS users (
    id TEXT PRIMARY KEY,
    email TEXT NOT NULL DEFAULT '',
    name TEXT NOT NULL DEFAULT '',
    created_at TEXT NOT NULL
);
CREATE TABLE IF NOT EXISTS resumes (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id TEXT NOT NULL REFERENCES users (id),
    file_name TEXT NOT NULL,
    file_url TEXT NOT NULL DEFAULT '',
    content TEXT NOT NULL DEFAULT '',
    created_at TEXT NOT NULL
);
CREATE TABLE IF NOT EXISTS analyses (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    resume_id INTEGER NOT NULL REFERENCES resumes (id),
    score INTEGER NOT NULL,
    strengths TEXT NOT NULL DEFAULT '[]',
    weaknesses TEXT NOT NULL DEFAULT '[]',
    suggestions TEXT NOT NULL DEFAULT '[]',
    keywords_found TEXT NOT NULL DEFAULT '[]',
    keywords_missing TEXT NOT NULL DEFAULT '[]',
    full_analysis TEXT NOT NULL DEFAULT '',
    suggested_role TEXT NOT NULL DEFAULT '',
    similarity_score REAL,
    similarity_explanation TEXT,
    job_description TEXT,
    created_at TEXT NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_resumes_user ON resumes (user_id, created_at);
CREATE INDEX IF NOT EXISTS idx_analyses_resume ON analyses (resume_id);
"""


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _load_list(raw: str | None) -> list[str]:
    if not raw:
        return []
    try:
        value = json.loads(raw)
    except json.JSONDecodeError:
        logger.warning("Corrupt list column value: %r", raw[:80])
        return []
    return [str(v) for v in value] if isinstance(value, list) else []


class ResumeRepository:
    """Thread-safe wrapper around a single SQLite connection."""

    def __init__(self, db_path: str):
        directory = os.path.dirname(db_path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        self._lock = threading.Lock()
        self._conn = sqlite3.connect(
            db_path,
            check_same_thread=False,
            timeout=5,
            isolation_level=None,
        )
        self._conn.row_factory = sqlite3.Row
        self._conn.execute("PRAGMA foreign_keys=ON;")
        self._conn.execute("PRAGMA busy_timeout=5000;")
        self._conn.executescript(_SCHEMA)

    def close(self) -> None:
        with self._lock:
            self._conn.close()

    def get_or_create_user(self, user_id: str, email: str = "", name: str = "") -> str:
        with self._lock:
            row = self._conn.execute("SELECT id FROM users WHERE id = ?", (user_id,)).fetchone()
            if row is not None:
                return row["id"]
            self._conn.execute(
                "INSERT INTO users (id, email, name, created_at) VALUES (?, ?, ?, ?)",
                (user_id, email, name, _utc_now()),
            )
        logger.info("Created user %s", user_id)
        return user_id

    def create_resume(self, user_id: str, file_name: str, file_url: str, content: str) -> int:
        with self._lock:
            cur = self._conn.execute(
                "INSERT INTO resumes (user_id, file_name, file_url, content, created_at) "
                "VALUES (?, ?, ?, ?, ?)",
                (user_id, file_name, file_url, content, _utc_now()),
            )
            return int(cur.lastrowid)

    def create_analysis(self, resume_id: int, analysis: AnalysisResult, suggested_role: str = "") -> int:
        with self._lock:
            cur = self._conn.execute(
                "INSERT INTO analyses (resume_id, score, strengths, weaknesses, suggestions, "
                "keywords_found, keywords_missing, full_analysis, suggested_role, created_at) "
                "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
                (
                    resume_id,
                    analysis.score,
                    *(json.dumps(getattr(analysis, f), ensure_ascii=False) for f in _LIST_FIELDS),
                    analysis.full_analysis,
                    suggested_role,
                    _utc_now(),
                ),
            )
            return int(cur.lastrowid)

    def update_analysis_with_job_similarity(
        self, analysis_id: int, job_description: str, score: float, explanation: str
    ) -> None:
        with self._lock:
            self._conn.execute(
                "UPDATE analyses SET job_description = ?, similarity_score = ?, "
                "similarity_explanation = ? WHERE id = ?",
                (job_description, score, explanation, analysis_id),
            )

    def get_user_resumes(self, user_id: str) -> list[ResumeSummary]:
        with self._lock:
            rows = self._conn.execute(
                "SELECT r.id, r.file_name, r.created_at, a.score, a.suggested_role "
                "FROM resumes r LEFT JOIN analyses a ON r.id = a.resume_id "
                "WHERE r.user_id = ? ORDER BY r.created_at DESC, r.id DESC",
                (user_id,),
            ).fetchall()
        return [ResumeSummary(**dict(row)) for row in rows]

    def get_resume_with_analysis(self, resume_id: int) -> ResumeRecord | None:
        with self._lock:
            row = self._conn.execute(
                "SELECT r.id, r.user_id, r.file_name, r.file_url, r.content, r.created_at, "
                "a.id AS analysis_id, a.score, a.strengths, a.weaknesses, a.suggestions, "
                "a.keywords_found, a.keywords_missing, a.full_analysis, "
                "a.created_at AS analysis_created_at, a.suggested_role, a.similarity_score, "
                "a.similarity_explanation, a.job_description "
                "FROM resumes r LEFT JOIN analyses a ON r.id = a.resume_id "
                "WHERE r.id = ?",
                (resume_id,),
            ).fetchone()
        if row is None:
            return None
        return ResumeRecord(
            id=row["id"],
            user_id=row["user_id"],
            file_name=row["file_name"],
            file_url=row["file_url"],
            content=row["content"],
            created_at=row["created_at"],
            analysis=_analysis_from_row(row) if row["analysis_id"] is not None else None,
        )

    def delete_resume(self, resume_id: int) -> None:
        # Analysis rows reference the resume, so they go first.
        with self._lock:
            self._conn.execute("DELETE FROM analyses WHERE resume_id = ?", (resume_id,))
            self._conn.execute("DELETE FROM resumes WHERE id = ?", (resume_id,))


def _analysis_from_row(row: sqlite3.Row) -> AnalysisRecord:
    fields: dict[str, Any] = {f: _load_list(row[f]) for f in _LIST_FIELDS}
    return AnalysisRecord(
        id=row["analysis_id"],
        resume_id=row["id"],
        score=row["score"],
        full_analysis=row["full_analysis"] or "",
        created_at=row["analysis_created_at"] or "",
        suggested_role=row["suggested_role"] or "",
        similarity_score=row["similarity_score"],
        similarity_explanation=row["similarity_explanation"],
        job_description=row["job_description"],
        **fields,
    )
