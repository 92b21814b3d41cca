"""Application configuration loader.

Loads centralized configuration from data/config/app_config_v1.yaml.
Missing keys fall back to built-in defaults, so the file is optional.

Usage:
    from lesson_scores.config.app_config import load_app_config

    config = load_app_config()
    config.labels.lesson_label(0)  # "Lesson 1"
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import structlog
import yaml

logger = structlog.get_logger(__name__)

# Config file path (relative to project root)
CONFIG_FILE = Path("data/config/app_config_v1.yaml")

# Overrides paths.db_path when set
DB_PATH_ENV = "LESSON_SCORES_DB"


@dataclass(frozen=True)
class Labels:
    """Column headers, badges and placeholders used by the row table."""

    name: str = "Name"
    username: str = "Username"
    grade: str = "Grade"
    lesson: str = "Lesson {n}"
    total_score: str = "Total Score"
    total_xp: str = "Total XP"
    passed: str = "Passed"
    xp_badge: str = "{xp} XP"
    failed_badge: str = "Failed"
    no_attempt: str = "—"
    missing: str = "-"
    report_title: str = "Student Score Report"

    def lesson_label(self, index: int) -> str:
        """Header for the lesson at 0-based position ``index``."""
        return self.lesson.format(n=index + 1)


@dataclass
class ExportConfig:
    """Configuration for spreadsheet and PDF exports."""

    output_dir: str = "exports"
    spreadsheet_filename: str = "Student_Scores_Full.xlsx"
    sheet_name: str = "Scores"
    report_filename: str = "Student_Scores.pdf"
    # TTF font registered for the PDF report (needed for non-Latin scripts)
    pdf_font_path: str | None = None
    pdf_font_name: str = "ReportFont"


@dataclass
class AppConfig:
    """Application-wide configuration."""

    labels: Labels = field(default_factory=Labels)
    exports: ExportConfig = field(default_factory=ExportConfig)
    paths: dict[str, str] = field(default_factory=dict)

    @property
    def db_path(self) -> Path:
        """Database location, honoring the LESSON_SCORES_DB override."""
        override = os.environ.get(DB_PATH_ENV)
        if override:
            return Path(override)
        return Path(self.paths.get("db_path", "db/lesson_scores.db"))


# Module-level cache
_cached_config: AppConfig | None = None


def _get_defaults() -> dict[str, Any]:
    """Get default configuration values."""
    return {
        "labels": {},
        "exports": {
            "output_dir": "exports",
            "spreadsheet_filename": "Student_Scores_Full.xlsx",
            "sheet_name": "Scores",
            "report_filename": "Student_Scores.pdf",
            "pdf_font_path": None,
        },
        "paths": {
            "db_path": "db/lesson_scores.db",
            "config_dir": "data/config",
        },
    }


def _parse_config(data: dict[str, Any]) -> AppConfig:
    """Parse configuration dictionary into AppConfig object."""
    defaults = _get_defaults()

    labels_data = data.get("labels") or {}
    known = set(Labels.__dataclass_fields__)
    unknown = sorted(set(labels_data) - known)
    if unknown:
        logger.warning("config.unknown_labels", keys=unknown)
    labels = Labels(**{k: str(v) for k, v in labels_data.items() if k in known})

    exports_data = {**defaults["exports"], **(data.get("exports") or {})}
    exports = ExportConfig(
        output_dir=exports_data.get("output_dir", "exports"),
        spreadsheet_filename=exports_data.get(
            "spreadsheet_filename", "Student_Scores_Full.xlsx"
        ),
        sheet_name=exports_data.get("sheet_name", "Scores"),
        report_filename=exports_data.get("report_filename", "Student_Scores.pdf"),
        pdf_font_path=exports_data.get("pdf_font_path"),
        pdf_font_name=exports_data.get("pdf_font_name", "ReportFont"),
    )

    paths = {**defaults["paths"], **(data.get("paths") or {})}

    return AppConfig(labels=labels, exports=exports, paths=paths)


def load_app_config(force_reload: bool = False) -> AppConfig:
    """Load application config.

    Args:
        force_reload: If True, ignore cached config and reload from file.

    Returns:
        AppConfig object with all settings.
    """
    global _cached_config

    if _cached_config is not None and not force_reload:
        return _cached_config

    data: dict[str, Any]

    if CONFIG_FILE.exists():
        logger.debug("loading_app_config", source=str(CONFIG_FILE))
        data = yaml.safe_load(CONFIG_FILE.read_text(encoding="utf-8")) or {}
    else:
        logger.info("using_default_config")
        data = _get_defaults()

    _cached_config = _parse_config(data)
    return _cached_config


def clear_config_cache() -> None:
    """Clear the configuration cache.

    Useful for testing or when config is modified at runtime.
    """
    global _cached_config
    _cached_config = None
