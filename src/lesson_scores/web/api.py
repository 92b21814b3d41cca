"""FastAPI application factory.

Main entry point for the Lesson Scores Web API.

Run with:
    uvicorn lesson_scores.web.api:create_app --factory
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from lesson_scores import __version__
from lesson_scores.config.app_config import AppConfig, load_app_config
from lesson_scores.core.session import ScoreboardSession
from lesson_scores.core.snapshot import ScoreSource
from lesson_scores.db.database import set_db_path
from lesson_scores.db.scores_repository import SqliteScoreSource
from lesson_scores.web.routes import health_router, scores_router

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Lifespan context manager for startup/shutdown events."""
    # Startup: initial load, failures leave the API in loading state
    state = app.state
    if not state.load_attempted:
        state.load_attempted = True
        loaded = state.session.reload()
        logger.info("api_startup", loaded=loaded, error=state.session.last_error)
    yield
    # Shutdown (nothing to do for now)


def create_app(
    source: ScoreSource | None = None,
    config: AppConfig | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        source: Data source for the snapshot (defaults to the SQLite store)
        config: Application config (defaults to load_app_config())

    Returns:
        Configured FastAPI app instance
    """
    config = config or load_app_config()
    if source is None:
        set_db_path(config.db_path)
        source = SqliteScoreSource()

    app = FastAPI(
        title="Lesson Scores API",
        description="Per-student XP, raw score and pass count rollups",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    app.state.session = ScoreboardSession(source, config)
    app.state.load_attempted = False

    # CORS middleware for web clients
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # Configure appropriately for production
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include routers
    app.include_router(health_router)
    app.include_router(scores_router)

    return app
