"""
DB-backed store classes for SomaText.

Each store wraps the connection it is given; callers decide where that
connection comes from (request-scoped ``get_db()`` in the web app, a plain
``sqlite3`` connection in scripts and tests).
"""

from __future__ import annotations

import sqlite3
from dataclasses import dataclass, asdict
from typing import Optional

from database import utcnow_iso


# ── Submissions ──────────────────────────────────────────────────────


@dataclass
class Submission:
    id: int
    student_name: Optional[str]
    assignment_title: Optional[str]
    submitted_at: str
    status: str = "pending"
    grade: Optional[str] = None

    @classmethod
    def from_row(cls, row: sqlite3.Row) -> "Submission":
        return cls(
            id=row["id"],
            student_name=row["student_name"],
            assignment_title=row["assignment_title"],
            submitted_at=row["submitted_at"],
            status=row["status"],
            grade=row["grade"],
        )

    @property
    def is_pending(self) -> bool:
        return self.status == "pending"

    def to_dict(self) -> dict:
        """Wire shape used by the JSON API."""
        return {
            "id": self.id,
            "studentName": self.student_name,
            "assignmentTitle": self.assignment_title,
            "submittedAt": self.submitted_at,
            "status": self.status,
            "grade": self.grade,
        }


class SubmissionStoreDB:
    """Insert and list student submissions."""

    def __init__(self, db: sqlite3.Connection):
        self.db = db

    def list(self) -> list[Submission]:
        """All submissions, newest first. Equal timestamps fall back to id."""
        rows = self.db.execute(
            "SELECT * FROM submissions ORDER BY submitted_at DESC, id DESC"
        ).fetchall()
        return [Submission.from_row(r) for r in rows]

    def create(self, student_name: Optional[str], assignment_title: Optional[str]) -> int:
        """Insert a pending submission stamped with the current time."""
        cur = self.db.execute(
            "INSERT INTO submissions (student_name, assignment_title, submitted_at) VALUES (?, ?, ?)",
            (student_name, assignment_title, utcnow_iso()),
        )
        self.db.commit()
        return cur.lastrowid


# ── Lessons ──────────────────────────────────────────────────────────


@dataclass
class Lesson:
    id: int
    title: Optional[str]
    subject: Optional[str]
    description: Optional[str]

    @classmethod
    def from_row(cls, row: sqlite3.Row) -> "Lesson":
        return cls(
            id=row["id"],
            title=row["title"],
            subject=row["subject"],
            description=row["description"],
        )

    def to_dict(self) -> dict:
        return asdict(self)


class LessonStoreDB:
    """Read-only access to the lesson library."""

    def __init__(self, db: sqlite3.Connection):
        self.db = db

    def list(self) -> list[Lesson]:
        rows = self.db.execute("SELECT * FROM lessons").fetchall()
        return [Lesson.from_row(r) for r in rows]

    def get(self, lesson_id: int) -> Lesson | None:
        row = self.db.execute("SELECT * FROM lessons WHERE id = ?", (lesson_id,)).fetchone()
        return Lesson.from_row(row) if row else None
