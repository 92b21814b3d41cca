"""Configuration package for lesson scores."""

from lesson_scores.config.app_config import (
    AppConfig,
    ExportConfig,
    Labels,
    clear_config_cache,
    load_app_config,
)

__all__ = [
    "AppConfig",
    "ExportConfig",
    "Labels",
    "clear_config_cache",
    "load_app_config",
]
