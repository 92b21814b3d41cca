"""Database module for SQLite persistence.

Provides:
- Database connection management
- Schema initialization (users, lessons, progress)
- Repository functions feeding the score snapshot
"""

from lesson_scores.db.database import get_db, init_db, set_db_path
from lesson_scores.db.scores_repository import SqliteScoreSource

__all__ = ["get_db", "init_db", "set_db_path", "SqliteScoreSource"]
