"""Per-student metrics over a progress index.

All operations are pure: they read the index and lesson list and never
modify them. A missing score on an existing attempt is reported as
``obtained=None``; totals skip it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from lesson_scores.core.models import Lesson, Student
from lesson_scores.core.snapshot import ProgressIndex, Snapshot


@dataclass(frozen=True)
class RawScore:
    """Raw score of one attempt."""

    obtained: int | None
    max: int
    passed: bool


@dataclass(frozen=True)
class RawScoreTotal:
    """Raw score summed over every lesson."""

    obtained: int
    max: int

    def __str__(self) -> str:
        return f"{self.obtained}/{self.max}"


@dataclass(frozen=True)
class StudentRollup:
    """All metrics of one student."""

    student: Student
    lesson_scores: tuple[RawScore | None, ...]
    total_xp: int
    total_raw_score: RawScoreTotal
    pass_count: int
    lesson_count: int

    @property
    def passed_fraction(self) -> str:
        return f"{self.pass_count}/{self.lesson_count}"


class MetricCalculator:
    """Computes XP, raw scores and pass counts for students."""

    def __init__(self, index: ProgressIndex, lessons: Sequence[Lesson]):
        self._index = index
        self._lessons = tuple(lessons)
        self._rollups: dict[str, StudentRollup] = {}

    @classmethod
    def for_snapshot(cls, snapshot: Snapshot) -> MetricCalculator:
        return cls(snapshot.index, snapshot.lessons)

    @property
    def lessons(self) -> tuple[Lesson, ...]:
        return self._lessons

    def xp_for(self, student_id: str, lesson_id: str, lesson_xp: int) -> int:
        """XP earned on a lesson: all of it if passed, else nothing."""
        attempt = self._index.get((student_id, lesson_id))
        if attempt is not None and attempt.passed:
            return lesson_xp
        return 0

    def raw_score_for(self, student_id: str, lesson: Lesson) -> RawScore | None:
        """Raw score of a student on a lesson, or None if never attempted."""
        attempt = self._index.get((student_id, lesson.id))
        if attempt is None:
            return None
        return RawScore(
            obtained=attempt.score,
            max=lesson.question_count,
            passed=attempt.passed,
        )

    def total_xp(self, student_id: str) -> int:
        return sum(
            self.xp_for(student_id, lesson.id, lesson.xp) for lesson in self._lessons
        )

    def total_raw_score(self, student_id: str) -> RawScoreTotal:
        """Sum of obtained scores over the sum of every lesson's question count.

        Unattempted lessons still count toward the maximum.
        """
        obtained = 0
        maximum = 0
        for lesson in self._lessons:
            maximum += lesson.question_count
            attempt = self._index.get((student_id, lesson.id))
            if attempt is not None and attempt.score is not None:
                obtained += attempt.score
        return RawScoreTotal(obtained=obtained, max=maximum)

    def pass_count(self, student_id: str) -> int:
        return sum(
            1
            for lesson in self._lessons
            if (attempt := self._index.get((student_id, lesson.id))) is not None
            and attempt.passed
        )

    def rollup(self, student: Student) -> StudentRollup:
        """Bundle every metric for one student (memoized per calculator)."""
        cached = self._rollups.get(student.id)
        if cached is not None and cached.student == student:
            return cached

        result = StudentRollup(
            student=student,
            lesson_scores=tuple(
                self.raw_score_for(student.id, lesson) for lesson in self._lessons
            ),
            total_xp=self.total_xp(student.id),
            total_raw_score=self.total_raw_score(student.id),
            pass_count=self.pass_count(student.id),
            lesson_count=len(self._lessons),
        )
        self._rollups[student.id] = result
        return result
