"""Core score rollup logic.

Modules:
- models: Student, Lesson and ProgressAttempt records
- snapshot: concurrent load and (student, lesson) progress index
- metrics: XP, raw score and pass count per student
- filters: text/grade filters and the grade ordering
- rollup: row table shared by screen view and exports
- session: loaded snapshot plus filter state
"""

__all__ = [
    "models",
    "snapshot",
    "metrics",
    "filters",
    "rollup",
    "session",
]
