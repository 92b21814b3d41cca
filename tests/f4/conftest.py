"""Fixtures for F4 tests - CLI, web API and configuration."""

import pytest
import yaml

from lesson_scores.config.app_config import clear_config_cache
from lesson_scores.db.database import set_db_path


@pytest.fixture(autouse=True)
def isolated_config():
    """Reload configuration for each test."""
    clear_config_cache()
    yield
    clear_config_cache()
    set_db_path(None)


@pytest.fixture
def seed_file(tmp_path):
    """YAML seed with the classic mixed-attempts scenario."""
    data = {
        "users": [
            {"id": "s1", "username": "12", "fullname": "Somchai Dee", "grade_level": "M1"},
            {"id": "s2", "username": "3", "fullname": "Anan Suk", "grade_level": "M1"},
            {"id": "s3", "username": "7", "fullname": "Boonmee Rak", "grade_level": "M1"},
            {"id": "s4", "username": "alice", "fullname": "Alice Wong", "grade_level": "M2"},
            {"id": "t1", "username": "teacher", "fullname": "Kru Somsri", "role": "teacher"},
        ],
        "lessons": [
            {"id": "1", "xp": 10, "quiz": [{"q": i} for i in range(10)]},
            {"id": "2", "xp": 20, "quiz": [{"q": i} for i in range(10)]},
            {"id": "3", "xp": 5, "quiz": [{"q": i} for i in range(5)]},
        ],
        "progress": [
            {"student_id": "s1", "lesson_id": "1", "score": 8, "passed": True},
            {"student_id": "s1", "lesson_id": "2", "score": 3, "passed": False},
        ],
    }
    path = tmp_path / "seed.yaml"
    path.write_text(yaml.safe_dump(data, allow_unicode=True), encoding="utf-8")
    return path


@pytest.fixture
def db_env(tmp_path, monkeypatch):
    """Point the configured database at a temp file."""
    db_path = tmp_path / "db" / "scores.db"
    monkeypatch.setenv("LESSON_SCORES_DB", str(db_path))
    return db_path
