"""Snapshot loading and progress index.

Responsibilities:
- Fetch students, lessons and progress from a data source concurrently
- Build the (student_id, lesson_id) -> attempt index
- Hand out an immutable Snapshot; a failed fetch yields no snapshot at all
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterable, Mapping, Protocol, Sequence

import structlog

from lesson_scores.core.models import Lesson, ProgressAttempt, Student

logger = structlog.get_logger(__name__)

ProgressIndex = Mapping[tuple[str, str], ProgressAttempt]


class ScoreLoadError(Exception):
    """Error loading one of the three record sets."""

    def __init__(self, source: str, cause: BaseException):
        self.source = source
        self.cause = cause
        super().__init__(f"Failed to load {source}: {cause}")


class ScoreSource(Protocol):
    """Read side of the data store."""

    def fetch_students(self) -> Sequence[Student]: ...

    def fetch_lessons(self) -> Sequence[Lesson]: ...

    def fetch_progress(self) -> Sequence[ProgressAttempt]: ...


def build_progress_index(attempts: Iterable[ProgressAttempt]) -> ProgressIndex:
    """Index attempts by (student_id, lesson_id).

    Later attempts overwrite earlier ones with the same key.
    """
    index: dict[tuple[str, str], ProgressAttempt] = {}
    for attempt in attempts:
        if attempt.key in index:
            logger.debug(
                "progress_index.duplicate_key",
                student_id=attempt.student_id,
                lesson_id=attempt.lesson_id,
            )
        index[attempt.key] = attempt
    return MappingProxyType(index)


@dataclass(frozen=True)
class Snapshot:
    """Read-only view of one data load."""

    students: tuple[Student, ...]
    lessons: tuple[Lesson, ...]
    index: ProgressIndex

    @classmethod
    def from_records(
        cls,
        students: Iterable[Student],
        lessons: Iterable[Lesson],
        attempts: Iterable[ProgressAttempt],
    ) -> Snapshot:
        return cls(
            students=tuple(students),
            lessons=tuple(lessons),
            index=build_progress_index(attempts),
        )


def load_snapshot(source: ScoreSource) -> Snapshot:
    """Fetch all three record sets and build a snapshot.

    The fetches run concurrently. All of them must succeed.

    Args:
        source: Data store exposing the three read operations

    Returns:
        Snapshot of the loaded data

    Raises:
        ScoreLoadError: If any fetch fails
    """
    fetchers = {
        "students": source.fetch_students,
        "lessons": source.fetch_lessons,
        "progress": source.fetch_progress,
    }

    with ThreadPoolExecutor(max_workers=len(fetchers)) as pool:
        futures = {name: pool.submit(fetch) for name, fetch in fetchers.items()}
        results = {}
        for name, future in futures.items():
            try:
                results[name] = future.result()
            except Exception as e:
                logger.error("snapshot.load_failed", source=name, error=str(e))
                raise ScoreLoadError(name, e) from e

    snapshot = Snapshot.from_records(
        results["students"], results["lessons"], results["progress"]
    )
    logger.info(
        "snapshot.loaded",
        students=len(snapshot.students),
        lessons=len(snapshot.lessons),
        attempts=len(snapshot.index),
    )
    return snapshot
