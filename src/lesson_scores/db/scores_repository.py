"""Repository functions for users, lessons and progress tables.

Read functions return core records in the order the score table expects:
students by username, lessons by id, progress unordered.
"""

from __future__ import annotations

import json
import sqlite3
from contextlib import nullcontext
from pathlib import Path
from typing import Any, ContextManager

import structlog
import yaml

from lesson_scores.core.models import Lesson, ProgressAttempt, Student
from lesson_scores.db.database import get_db

logger = structlog.get_logger(__name__)


def fetch_students() -> list[Student]:
    """Get all student-role users ordered by username."""
    with get_db() as conn:
        rows = conn.execute(
            "SELECT * FROM users WHERE role = 'student' ORDER BY username ASC"
        ).fetchall()
    return [Student.from_dict(dict(row)) for row in rows]


def fetch_lessons() -> list[Lesson]:
    """Get all lessons ordered by id."""
    with get_db() as conn:
        # Numeric ids in numeric order ("2" before "10"), other ids after
        rows = conn.execute(
            """
            SELECT * FROM lessons
            ORDER BY id GLOB '[0-9]*' DESC, CAST(id AS INTEGER) ASC, id ASC
            """
        ).fetchall()
    return [Lesson.from_dict(dict(row)) for row in rows]


def fetch_progress() -> list[ProgressAttempt]:
    """Get all progress attempts, in insertion order."""
    with get_db() as conn:
        rows = conn.execute(
            "SELECT student_id, lesson_id, score, passed FROM progress ORDER BY id"
        ).fetchall()
    return [ProgressAttempt.from_dict(dict(row)) for row in rows]


def _connection(conn: sqlite3.Connection | None) -> ContextManager[sqlite3.Connection]:
    """Reuse the caller's connection (one transaction) or open a new one."""
    return nullcontext(conn) if conn is not None else get_db()


def insert_student(
    student_id: str,
    username: str,
    fullname: str,
    grade_level: str | None = None,
    image: str | None = None,
    role: str = "student",
    conn: sqlite3.Connection | None = None,
) -> None:
    """Insert or update a user record."""
    with _connection(conn) as db:
        db.execute(
            """
            INSERT INTO users (id, username, fullname, grade_level, image, role)
            VALUES (?, ?, ?, ?, ?, ?)
            ON CONFLICT(id) DO UPDATE SET
                username = excluded.username,
                fullname = excluded.fullname,
                grade_level = excluded.grade_level,
                image = excluded.image,
                role = excluded.role
            """,
            (student_id, username, fullname, grade_level, image, role),
        )
    logger.debug("users.inserted", student_id=student_id)


def insert_lesson(
    lesson_id: str,
    xp: int,
    quiz: list[Any] | None = None,
    title: str | None = None,
    conn: sqlite3.Connection | None = None,
) -> None:
    """Insert or update a lesson record."""
    with _connection(conn) as db:
        db.execute(
            """
            INSERT INTO lessons (id, title, xp, quiz) VALUES (?, ?, ?, ?)
            ON CONFLICT(id) DO UPDATE SET
                title = excluded.title, xp = excluded.xp, quiz = excluded.quiz
            """,
            (lesson_id, title, xp, json.dumps(quiz or [], ensure_ascii=False)),
        )
    logger.debug("lessons.inserted", lesson_id=lesson_id)


def insert_progress(
    student_id: str,
    lesson_id: str,
    score: int | None,
    passed: bool,
    conn: sqlite3.Connection | None = None,
) -> None:
    """Append a progress attempt."""
    with _connection(conn) as db:
        db.execute(
            "INSERT INTO progress (student_id, lesson_id, score, passed) VALUES (?, ?, ?, ?)",
            (student_id, lesson_id, score, int(passed)),
        )
    logger.debug("progress.inserted", student_id=student_id, lesson_id=lesson_id)


def seed_from_file(path: Path) -> dict[str, int]:
    """Load users, lessons and progress from a YAML or JSON file.

    Expected keys: ``users``, ``lessons``, ``progress`` (each a list of dicts).
    All rows go in one transaction: a bad row leaves the tables untouched.

    Returns:
        Count of inserted records per table
    """
    text = path.read_text(encoding="utf-8")
    if path.suffix.lower() == ".json":
        data = json.loads(text)
    else:
        data = yaml.safe_load(text) or {}

    counts = {"users": 0, "lessons": 0, "progress": 0}

    with get_db() as conn:
        for u in data.get("users", []):
            student = Student.from_dict(u)
            insert_student(
                student_id=student.id,
                username=student.username,
                fullname=student.fullname,
                grade_level=student.grade_level,
                image=student.image,
                role=student.role,
                conn=conn,
            )
            counts["users"] += 1

        for lesson in data.get("lessons", []):
            insert_lesson(
                lesson_id=str(lesson["id"]),
                xp=int(lesson.get("xp", 0)),
                quiz=lesson.get("quiz"),
                title=lesson.get("title"),
                conn=conn,
            )
            counts["lessons"] += 1

        for p in data.get("progress", []):
            attempt = ProgressAttempt.from_dict(p)
            insert_progress(
                student_id=attempt.student_id,
                lesson_id=attempt.lesson_id,
                score=attempt.score,
                passed=attempt.passed,
                conn=conn,
            )
            counts["progress"] += 1

    logger.info("database.seeded", source=str(path), **counts)
    return counts


class SqliteScoreSource:
    """Data source backed by the SQLite tables."""

    def fetch_students(self) -> list[Student]:
        return fetch_students()

    def fetch_lessons(self) -> list[Lesson]:
        return fetch_lessons()

    def fetch_progress(self) -> list[ProgressAttempt]:
        return fetch_progress()
