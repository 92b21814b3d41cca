"""Student filtering and ordering.

- Text filter: case-insensitive substring of full name or username
- Grade filter: exact grade match, "all" disables it
- A specific grade also orders students by numeric code, then by name
"""

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from functools import cmp_to_key, lru_cache
from typing import Iterable, Sequence

from pyuca import Collator

from lesson_scores.core.models import Student

ALL_GRADES = "all"

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)", re.ASCII)


@dataclass(frozen=True)
class FilterState:
    """User-selected filters."""

    query: str = ""
    grade: str = ALL_GRADES

    @property
    def all_grades(self) -> bool:
        return self.grade == ALL_GRADES

    def with_query(self, query: str) -> FilterState:
        return replace(self, query=query)

    def with_grade(self, grade: str | None) -> FilterState:
        return replace(self, grade=grade or ALL_GRADES)


@lru_cache(maxsize=1)
def _collator() -> Collator:
    # Loading the collation table is slow, build it once
    return Collator()


def parse_student_code(username: str | None) -> int:
    """Parse the leading integer of a username ("12" -> 12, "7a" -> 7).

    Returns 0 when the username does not start with a number.
    """
    match = _LEADING_INT.match(username or "")
    if not match:
        return 0
    return int(match.group(1))


def collation_key(text: str | None) -> tuple[int, ...]:
    """Unicode collation key for names (handles Thai and other scripts)."""
    return _collator().sort_key(text or "")


def compare_students(a: Student, b: Student) -> int:
    """Numeric code order when both codes are nonzero, else collated names."""
    code_a = parse_student_code(a.username)
    code_b = parse_student_code(b.username)
    if code_a != 0 and code_b != 0:
        return (code_a > code_b) - (code_a < code_b)

    key_a = collation_key(a.fullname)
    key_b = collation_key(b.fullname)
    return (key_a > key_b) - (key_a < key_b)


def matches_query(student: Student, query: str) -> bool:
    needle = (query or "").lower()
    if not needle:
        return True
    return (
        needle in (student.fullname or "").lower()
        or needle in (student.username or "").lower()
    )


def matches_grade(student: Student, grade: str) -> bool:
    if grade == ALL_GRADES:
        return True
    return student.grade_level == grade


def filter_students(
    students: Sequence[Student], state: FilterState
) -> list[Student]:
    """Apply text and grade filters, ordering only when a grade is chosen.

    With all grades selected the load order is preserved. ``sorted`` is
    stable, so students comparing equal keep their relative order.
    """
    result = [
        s
        for s in students
        if matches_query(s, state.query) and matches_grade(s, state.grade)
    ]
    if not state.all_grades:
        result = sorted(result, key=cmp_to_key(compare_students))
    return result


def grade_levels(students: Iterable[Student]) -> list[str]:
    """Distinct non-empty grade levels, sorted ascending."""
    return sorted({s.grade_level for s in students if s.grade_level})
