"""Persisted video jobs: SQLite-backed job table.

Job lifecycle: pending -> processing -> done | error. The worker claims
the oldest pending job; the claim is a single IMMEDIATE transaction so
two workers sharing a database never process the same row.

Every rendered output is also recorded in a per-user `videos` library
table.
"""

import json
import sqlite3
import uuid
from contextlib import closing
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path

STATUSES = ("pending", "processing", "done", "error")

_SCHEMA = """
CREATE TABLE IF NOT EXISTS video_jobs (
    id TEXT PRIMARY KEY,
    user_id TEXT NOT NULL,
    hook_url TEXT NOT NULL,
    demo_url TEXT NOT NULL,
    hook_text TEXT,
    edit_config TEXT,
    status TEXT NOT NULL DEFAULT 'pending' CHECK (status IN ({statuses})),
    output_url TEXT,
    error_message TEXT,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
);
CREATE INDEX IF NOT EXISTS video_jobs_status_created
    ON video_jobs (status, created_at);
CREATE TABLE IF NOT EXISTS videos (
    id TEXT PRIMARY KEY,
    user_id TEXT NOT NULL,
    url TEXT NOT NULL,
    filename TEXT NOT NULL,
    type TEXT NOT NULL,
    storage_path TEXT NOT NULL,
    created_at TEXT NOT NULL
);
""".format(statuses=", ".join(f"'{s}'" for s in STATUSES))


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass(frozen=True)
class VideoJob:
    id: str
    user_id: str
    hook_url: str
    demo_url: str
    hook_text: str | None
    edit_config: str | None
    status: str
    output_url: str | None
    error_message: str | None
    created_at: str
    updated_at: str

    @classmethod
    def from_row(cls, row: sqlite3.Row) -> "VideoJob":
        return cls(**{key: row[key] for key in row.keys()})


class JobStore:
    """Job table access. Each call opens its own short-lived connection."""

    def __init__(self, db_path: str | Path):
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        with closing(self._connect()) as conn:
            conn.executescript(_SCHEMA)

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self.db_path), timeout=30, isolation_level=None)
        conn.row_factory = sqlite3.Row
        return conn

    def enqueue(
        self,
        user_id: str,
        hook_url: str,
        demo_url: str,
        hook_text: str | None = None,
        edit_config: dict | str | None = None,
    ) -> VideoJob:
        """Insert a pending job and return it."""
        if isinstance(edit_config, dict):
            edit_config = json.dumps(edit_config)
        now = _now()
        job_id = str(uuid.uuid4())
        with closing(self._connect()) as conn:
            conn.execute(
                "INSERT INTO video_jobs (id, user_id, hook_url, demo_url, hook_text, "
                "edit_config, status, created_at, updated_at) "
                "VALUES (?, ?, ?, ?, ?, ?, 'pending', ?, ?)",
                (job_id, user_id, hook_url, demo_url, hook_text, edit_config, now, now),
            )
        return self.get(job_id)

    def get(self, job_id: str) -> VideoJob | None:
        with closing(self._connect()) as conn:
            row = conn.execute("SELECT * FROM video_jobs WHERE id = ?", (job_id,)).fetchone()
        return VideoJob.from_row(row) if row else None

    def claim_next(self) -> VideoJob | None:
        """Move the oldest pending job to processing and return it."""
        with closing(self._connect()) as conn:
            conn.execute("BEGIN IMMEDIATE")
            try:
                row = conn.execute(
                    "SELECT id FROM video_jobs WHERE status = 'pending' "
                    "ORDER BY created_at ASC, rowid ASC LIMIT 1"
                ).fetchone()
                if row is None:
                    conn.execute("COMMIT")
                    return None
                conn.execute(
                    "UPDATE video_jobs SET status = 'processing', updated_at = ? WHERE id = ?",
                    (_now(), row["id"]),
                )
                conn.execute("COMMIT")
            except sqlite3.Error:
                conn.execute("ROLLBACK")
                raise
        return self.get(row["id"])

    def mark_done(self, job_id: str, output_url: str) -> None:
        self._update(job_id, status="done", output_url=output_url)

    def mark_error(self, job_id: str, message: str) -> None:
        self._update(job_id, status="error", error_message=message)

    def _update(self, job_id: str, **values) -> None:
        values["updated_at"] = _now()
        assignments = ", ".join(f"{key} = ?" for key in values)
        with closing(self._connect()) as conn:
            conn.execute(
                f"UPDATE video_jobs SET {assignments} WHERE id = ?",
                (*values.values(), job_id),
            )

    def add_library_video(self, user_id: str, url: str, filename: str, storage_path: str) -> None:
        with closing(self._connect()) as conn:
            conn.execute(
                "INSERT INTO videos (id, user_id, url, filename, type, storage_path, created_at) "
                "VALUES (?, ?, ?, ?, 'output', ?, ?)",
                (str(uuid.uuid4()), user_id, url, filename, storage_path, _now()),
            )

    def list_videos(self, user_id: str) -> list[dict]:
        with closing(self._connect()) as conn:
            rows = conn.execute(
                "SELECT * FROM videos WHERE user_id = ? ORDER BY created_at", (user_id,)
            ).fetchall()
        return [dict(row) for row in rows]
