"""Request dependencies shared by the routers."""

from fastapi import Request

from lesson_scores.core.session import ScoreboardSession


def get_session(request: Request) -> ScoreboardSession:
    """Session stored on the app; the first request triggers the initial load."""
    state = request.app.state
    if not state.load_attempted:
        state.load_attempted = True
        state.session.reload()
    return state.session
