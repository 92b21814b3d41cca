"""Pydantic schemas for Web API.

Serialization models for the score table, grade list and health check.
"""

from __future__ import annotations

from pydantic import BaseModel


# =============================================================================
# SCORE TABLE SCHEMAS
# =============================================================================


class ColumnResponse(BaseModel):
    """One column of the score table."""

    key: str
    label: str
    hint: str | None = None


class ScoreTableResponse(BaseModel):
    """Filtered and ordered score table."""

    title: str
    columns: list[ColumnResponse]
    rows: list[list[str | int]]
    count: int
    query: str
    grade: str


class GradeListResponse(BaseModel):
    """Grade levels available as filters."""

    grades: list[str]
    count: int


class ReloadResponse(BaseModel):
    """Outcome of a reload request."""

    loaded: bool
    students: int = 0
    lessons: int = 0
    error: str | None = None


# =============================================================================
# HEALTH SCHEMAS
# =============================================================================


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str
    timestamp: str
    loading: bool
