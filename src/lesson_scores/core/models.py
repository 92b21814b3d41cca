"""Record types for students, lessons and progress attempts.

Records are immutable for the lifetime of a loaded snapshot. Optional
fields (grade level, avatar, score) stay ``None`` when the source omits them.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Mapping

_TRUE_WORDS = frozenset({"true", "yes", "y", "t", "1"})


def _text_or_none(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _parse_score(value: Any) -> int | None:
    """Whole-number score, or None when absent or not a whole number."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            return None
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    if isinstance(value, int):
        return value
    return None


def _parse_flag(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_WORDS
    if isinstance(value, (bool, int, float)):
        return bool(value)
    return False


@dataclass(frozen=True)
class Student:
    """A student-role user."""

    id: str
    username: str
    fullname: str
    grade_level: str | None = None
    image: str | None = None
    role: str = "student"

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Student:
        return cls(
            id=str(data["id"]),
            username=str(data.get("username") or ""),
            fullname=str(data.get("fullname") or ""),
            grade_level=_text_or_none(data.get("grade_level")),
            image=data.get("image") or None,
            role=data.get("role") or "student",
        )


@dataclass(frozen=True)
class Lesson:
    """A lesson with its XP value and quiz questions."""

    id: str
    xp: int = 0
    quiz: tuple[Any, ...] = ()
    title: str | None = None

    @property
    def question_count(self) -> int:
        """Maximum achievable raw score."""
        return len(self.quiz)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Lesson:
        quiz = data.get("quiz") or ()
        # SQLite rows store the quiz as JSON text
        if isinstance(quiz, str):
            quiz = json.loads(quiz) if quiz.strip() else ()
        return cls(
            id=str(data["id"]),
            xp=int(data.get("xp") or 0),
            quiz=tuple(quiz),
            title=data.get("title"),
        )


@dataclass(frozen=True)
class ProgressAttempt:
    """Outcome of one student on one lesson."""

    student_id: str
    lesson_id: str
    score: int | None = None
    passed: bool = False

    @property
    def key(self) -> tuple[str, str]:
        return (self.student_id, self.lesson_id)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ProgressAttempt:
        return cls(
            student_id=str(data["student_id"]),
            lesson_id=str(data["lesson_id"]),
            score=_parse_score(data.get("score")),
            passed=_parse_flag(data.get("passed")),
        )
