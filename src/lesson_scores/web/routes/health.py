"""Health check endpoint."""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from lesson_scores import __version__
from lesson_scores.core.session import ScoreboardSession
from lesson_scores.web.deps import get_session
from lesson_scores.web.schemas import HealthResponse

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check(session: ScoreboardSession = Depends(get_session)) -> HealthResponse:
    """Check API health status."""
    return HealthResponse(
        status="ok",
        version=__version__,
        timestamp=datetime.now(timezone.utc).isoformat(),
        loading=session.loading,
    )
