"""Fixtures for F2 tests - data store, snapshot loading and session."""

import pytest

from lesson_scores.db.database import init_db, set_db_path
from lesson_scores.db.scores_repository import (
    insert_lesson,
    insert_progress,
    insert_student,
)


@pytest.fixture
def temp_db(tmp_path):
    """Fresh SQLite database with the schema created."""
    db_path = tmp_path / "db" / "scores.db"
    init_db(db_path)
    yield db_path
    set_db_path(None)


@pytest.fixture
def seeded_db(temp_db, sample_students, sample_lessons, sample_attempts):
    """Database holding the sample records plus one teacher account."""
    for s in sample_students:
        insert_student(s.id, s.username, s.fullname, s.grade_level, s.image)
    insert_student("t1", "teacher", "Kru Somsri", role="teacher")

    for lesson in sample_lessons:
        insert_lesson(lesson.id, lesson.xp, list(lesson.quiz), lesson.title)

    for a in sample_attempts:
        insert_progress(a.student_id, a.lesson_id, a.score, a.passed)

    return temp_db
