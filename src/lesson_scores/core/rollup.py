"""Row table projection.

Turns a snapshot plus filter state into the table shared by the screen view,
the spreadsheet export and the PDF report. Every consumer reads the same
RowTable, so what is exported is what is shown.

Column layout:
    Name | Username | Grade | Lesson 1 .. Lesson N | Total Score | Total XP | Passed

Lesson headers follow the lesson's position in the loaded list, not its id.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Sequence, Union

from lesson_scores.config.app_config import Labels
from lesson_scores.core.filters import FilterState, filter_students
from lesson_scores.core.metrics import MetricCalculator, RawScore, StudentRollup
from lesson_scores.core.models import Lesson
from lesson_scores.core.snapshot import Snapshot

Cell = Union[str, int]

NAME = "name"
USERNAME = "username"
GRADE = "grade"
TOTAL_SCORE = "total_score"
TOTAL_XP = "total_xp"
PASSED = "passed"

REPORT_KEYS = (NAME, GRADE, TOTAL_SCORE, TOTAL_XP, PASSED)


@dataclass(frozen=True)
class Column:
    """One column of the row table."""

    key: str
    label: str
    # Secondary header text, e.g. the XP a lesson is worth
    hint: str | None = None


@dataclass(frozen=True)
class RowTable:
    """Ordered columns and one row of cells per student."""

    columns: tuple[Column, ...]
    rows: tuple[tuple[Cell, ...], ...]
    title: str = ""

    @property
    def headers(self) -> list[str]:
        return [c.label for c in self.columns]

    def __len__(self) -> int:
        return len(self.rows)

    def column_index(self, key: str) -> int:
        for i, column in enumerate(self.columns):
            if column.key == key:
                return i
        raise KeyError(key)

    def to_report(self) -> RowTable:
        """Narrow table for the PDF report: Name, Grade, Total Score, Total XP, Passed."""
        positions = [self.column_index(key) for key in REPORT_KEYS]
        return RowTable(
            columns=tuple(self.columns[i] for i in positions),
            rows=tuple(tuple(row[i] for i in positions) for row in self.rows),
            title=self.title,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "columns": [
                {"key": c.key, "label": c.label, "hint": c.hint} for c in self.columns
            ],
            "rows": [list(row) for row in self.rows],
            "count": len(self.rows),
        }


def lesson_key(index: int) -> str:
    return f"lesson_{index + 1}"


def build_columns(lessons: Sequence[Lesson], labels: Labels | None = None) -> tuple[Column, ...]:
    """Column descriptors for the given lesson list."""
    labels = labels or Labels()
    lesson_columns = [
        Column(
            key=lesson_key(i),
            label=labels.lesson_label(i),
            hint=labels.xp_badge.format(xp=lesson.xp),
        )
        for i, lesson in enumerate(lessons)
    ]
    return (
        Column(NAME, labels.name),
        Column(USERNAME, labels.username),
        Column(GRADE, labels.grade),
        *lesson_columns,
        Column(TOTAL_SCORE, labels.total_score),
        Column(TOTAL_XP, labels.total_xp),
        Column(PASSED, labels.passed),
    )


def format_lesson_cell(lesson: Lesson, score: RawScore | None, labels: Labels) -> str:
    """Status text for one lesson: no attempt, failed, or XP earned."""
    if score is None:
        return labels.no_attempt

    obtained = labels.missing if score.obtained is None else score.obtained
    fraction = f"({obtained}/{score.max})"
    if score.passed:
        return f"{labels.xp_badge.format(xp=lesson.xp)} {fraction}"
    return f"{labels.failed_badge} {fraction}"


def build_row(
    rollup: StudentRollup, lessons: Sequence[Lesson], labels: Labels
) -> tuple[Cell, ...]:
    student = rollup.student
    return (
        student.fullname,
        student.username,
        student.grade_level or labels.missing,
        *(
            format_lesson_cell(lesson, score, labels)
            for lesson, score in zip(lessons, rollup.lesson_scores)
        ),
        str(rollup.total_raw_score),
        rollup.total_xp,
        rollup.passed_fraction,
    )


def build_row_table(
    snapshot: Snapshot,
    state: FilterState | None = None,
    labels: Labels | None = None,
    calculator: MetricCalculator | None = None,
) -> RowTable:
    """Project a snapshot into the row table for the given filters.

    Args:
        snapshot: Loaded data
        state: Query and grade filters (defaults to no filtering)
        labels: Column headers and cell texts
        calculator: Metric calculator to reuse across calls on the same snapshot

    Returns:
        RowTable with one row per matching student
    """
    state = state or FilterState()
    labels = labels or Labels()
    calculator = calculator or MetricCalculator.for_snapshot(snapshot)

    students = filter_students(snapshot.students, state)
    rows = tuple(
        build_row(calculator.rollup(s), snapshot.lessons, labels) for s in students
    )
    return RowTable(
        columns=build_columns(snapshot.lessons, labels),
        rows=rows,
        title=labels.report_title,
    )


view = build_row_table
