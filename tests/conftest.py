"""Pytest configuration for phased testing.

Tests are organized by phase (f1, f2, ..., f4):
- f1: rollup core (index, metrics, filters, row table)
- f2: data store, snapshot loading and session
- f3: spreadsheet and PDF exports
- f4: CLI, web API and configuration

Future phase tests are automatically skipped.
"""

import pytest

from lesson_scores.core.models import Lesson, ProgressAttempt, Student

# Current implementation phase
CURRENT_PHASE = 4


def pytest_collection_modifyitems(config, items):
    """Skip tests from phases that haven't been implemented yet."""
    for item in items:
        # Extract phase from path (tests/f2/... -> 2)
        parts = item.fspath.strpath.split("/")
        for part in parts:
            if part.startswith("f") and part[1:].isdigit():
                test_phase = int(part[1:])
                if test_phase > CURRENT_PHASE:
                    item.add_marker(
                        pytest.mark.skip(
                            reason=f"Phase F{test_phase} not yet implemented (current: F{CURRENT_PHASE})"
                        )
                    )
                break


# =============================================================================
# SAMPLE RECORDS
# =============================================================================


def _quiz(n: int) -> list[dict]:
    return [{"question": f"Q{i + 1}", "answer": 0} for i in range(n)]


@pytest.fixture
def sample_lessons() -> list[Lesson]:
    """Three lessons: 10 XP/10 questions, 20 XP/10 questions, 5 XP/5 questions."""
    return [
        Lesson(id="1", xp=10, quiz=tuple(_quiz(10)), title="Numbers"),
        Lesson(id="2", xp=20, quiz=tuple(_quiz(10)), title="Fractions"),
        Lesson(id="3", xp=5, quiz=tuple(_quiz(5)), title="Shapes"),
    ]


@pytest.fixture
def sample_students() -> list[Student]:
    """Students in load order (username ascending)."""
    return [
        Student(id="s1", username="12", fullname="Somchai Dee", grade_level="M1"),
        Student(id="s2", username="3", fullname="Anan Suk", grade_level="M1"),
        Student(id="s3", username="7", fullname="Boonmee Rak", grade_level="M1"),
        Student(id="s4", username="alice", fullname="Alice Wong", grade_level="M2"),
        Student(id="s5", username="bob", fullname="Bob Lee", grade_level=None),
        Student(id="s6", username="zed", fullname="Aaron Best", grade_level="M2"),
    ]


@pytest.fixture
def sample_attempts() -> list[ProgressAttempt]:
    """s1 passed L1 (8) and failed L2 (3); s2 passed L1 with no score; s4 passed L3."""
    return [
        ProgressAttempt(student_id="s1", lesson_id="1", score=8, passed=True),
        ProgressAttempt(student_id="s1", lesson_id="2", score=3, passed=False),
        ProgressAttempt(student_id="s2", lesson_id="1", score=None, passed=True),
        ProgressAttempt(student_id="s4", lesson_id="3", score=5, passed=True),
    ]


@pytest.fixture
def sample_snapshot(sample_students, sample_lessons, sample_attempts):
    """Snapshot built from the sample records."""
    from lesson_scores.core.snapshot import Snapshot

    return Snapshot.from_records(sample_students, sample_lessons, sample_attempts)


class StaticSource:
    """In-memory data source; ``fail_on`` names a fetch that raises."""

    def __init__(self, students, lessons, attempts, fail_on: str | None = None):
        self.students = list(students)
        self.lessons = list(lessons)
        self.attempts = list(attempts)
        self.fail_on = fail_on
        self.calls: list[str] = []

    def _fetch(self, name: str, records):
        self.calls.append(name)
        if self.fail_on == name:
            raise ConnectionError(f"{name} unavailable")
        return list(records)

    def fetch_students(self):
        return self._fetch("students", self.students)

    def fetch_lessons(self):
        return self._fetch("lessons", self.lessons)

    def fetch_progress(self):
        return self._fetch("progress", self.attempts)


@pytest.fixture
def static_source(sample_students, sample_lessons, sample_attempts) -> StaticSource:
    """Data source serving the sample records."""
    return StaticSource(sample_students, sample_lessons, sample_attempts)


@pytest.fixture
def failing_source(sample_students, sample_lessons, sample_attempts) -> StaticSource:
    """Data source whose progress fetch fails."""
    return StaticSource(
        sample_students, sample_lessons, sample_attempts, fail_on="progress"
    )
