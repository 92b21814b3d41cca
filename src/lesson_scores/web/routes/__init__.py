"""Route handlers for Web API."""

from lesson_scores.web.routes.health import router as health_router
from lesson_scores.web.routes.scores import router as scores_router

__all__ = [
    "health_router",
    "scores_router",
]
