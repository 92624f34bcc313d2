"""
SQLite database layer for SomaText.

Uses raw sqlite3 with WAL mode and parameterized queries. The schema is
created idempotently on every boot; there is no migration mechanism.
"""

from __future__ import annotations

import logging
import sqlite3
from datetime import datetime, timezone
from pathlib import Path

from flask import current_app, g

from seed_data import SEED_LESSONS, SEED_SUBMISSIONS

logger = logging.getLogger(__name__)


SCHEMA = """
-- Student assignment submissions
CREATE TABLE IF NOT EXISTS submissions (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    student_name TEXT,
    assignment_title TEXT,
    submitted_at TEXT NOT NULL,
    status TEXT NOT NULL DEFAULT 'pending',
    grade TEXT
);
CREATE INDEX IF NOT EXISTS idx_submissions_submitted_at ON submissions(submitted_at);

-- Read-only lesson library
CREATE TABLE IF NOT EXISTS lessons (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    title TEXT,
    subject TEXT,
    description TEXT
);
"""


def utcnow_iso() -> str:
    """Server timestamp in a form that sorts lexicographically."""
    return datetime.now(timezone.utc).isoformat(timespec="microseconds")


def connect(db_path: str) -> sqlite3.Connection:
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode=WAL")
    return conn


def get_db() -> sqlite3.Connection:
    """Return a DB connection from Flask g, creating if needed."""
    if "db" not in g:
        db_path = current_app.config.get("DATABASE", str(Path(__file__).parent / "somatext.db"))
        g.db = connect(db_path)
    return g.db


def close_db(e=None) -> None:
    """Teardown handler — close DB connection."""
    db = g.pop("db", None)
    if db is not None:
        db.close()


def init_db() -> None:
    """Execute schema DDL to create all tables."""
    db = get_db()
    db.executescript(SCHEMA)
    db.commit()


def _seed_table(db: sqlite3.Connection, table: str, sql: str, rows: list[tuple]) -> int:
    """Count-and-insert for one table inside a single write transaction."""
    db.commit()
    db.execute("BEGIN IMMEDIATE")
    try:
        if db.execute(f"SELECT COUNT(*) AS c FROM {table}").fetchone()["c"] != 0:
            db.rollback()
            return 0
        db.executemany(sql, rows)
        db.commit()
    except sqlite3.Error:
        db.rollback()
        raise
    return len(rows)


def seed_db(db: sqlite3.Connection | None = None) -> dict[str, int]:
    """Insert fixture rows into each table that is still empty.

    Tables are seeded independently; a table that already has rows is left
    alone. The emptiness check and the inserts share one ``BEGIN IMMEDIATE``
    transaction, so concurrent callers cannot both seed the same table.
    Returns the number of rows inserted per table.
    """
    db = db if db is not None else get_db()
    inserted = {
        "submissions": _seed_table(
            db,
            "submissions",
            "INSERT INTO submissions (student_name, assignment_title, submitted_at, status, grade) "
            "VALUES (?, ?, ?, ?, ?)",
            [
                (row["student_name"], row["assignment_title"], utcnow_iso(), row["status"], row["grade"])
                for row in SEED_SUBMISSIONS
            ],
        ),
        "lessons": _seed_table(
            db,
            "lessons",
            "INSERT INTO lessons (title, subject, description) VALUES (?, ?, ?)",
            [(row["title"], row["subject"], row["description"]) for row in SEED_LESSONS],
        ),
    }

    if any(inserted.values()):
        logger.info("Seeded fixture rows: %s", inserted)
    return inserted


def init_app(app) -> None:
    """Register teardown, then create the schema and seed before serving."""
    app.teardown_appcontext(close_db)

    with app.app_context():
        init_db()
        seed_db()
