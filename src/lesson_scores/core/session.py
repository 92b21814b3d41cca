"""Score table session.

Holds the loaded snapshot and the current filter selection. Every view is
recomputed from the snapshot; nothing derived is stored between calls
except the per-snapshot metric cache.

Load failures leave the session loading: no table is produced until a
later reload succeeds. Export failures are reported in ExportResult and
never touch the snapshot or the filters.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import structlog

from lesson_scores.config.app_config import AppConfig, load_app_config
from lesson_scores.core.filters import FilterState, grade_levels
from lesson_scores.core.metrics import MetricCalculator
from lesson_scores.core.rollup import RowTable, build_row_table
from lesson_scores.core.snapshot import ScoreLoadError, ScoreSource, Snapshot, load_snapshot
from lesson_scores.export.base import ExportError, resolve_output_path
from lesson_scores.export.pdf_report import write_report
from lesson_scores.export.spreadsheet import write_spreadsheet

logger = structlog.get_logger(__name__)


@dataclass
class ExportResult:
    """Result of an export request."""

    success: bool
    path: Path | None
    message: str


class ScoreboardSession:
    """Snapshot plus filter state for one user."""

    def __init__(self, source: ScoreSource, config: AppConfig | None = None):
        self._source = source
        self._config = config or load_app_config()
        self._snapshot: Snapshot | None = None
        self._calculator: MetricCalculator | None = None
        self.filters = FilterState()
        self.loading = True
        self.last_error: str | None = None

    @property
    def config(self) -> AppConfig:
        return self._config

    @property
    def snapshot(self) -> Snapshot | None:
        """Current snapshot, or None while loading."""
        if self.loading:
            return None
        return self._snapshot

    def reload(self) -> bool:
        """Fetch a fresh snapshot.

        Returns:
            True if the load succeeded. On failure the session stays loading.
        """
        self.loading = True
        try:
            snapshot = load_snapshot(self._source)
        except ScoreLoadError as e:
            self.last_error = str(e)
            logger.error("session.reload_failed", source=e.source, error=str(e.cause))
            return False

        self._snapshot = snapshot
        self._calculator = MetricCalculator.for_snapshot(snapshot)
        self.last_error = None
        self.loading = False
        return True

    def set_filter(self, query: str | None = None, grade: str | None = None) -> FilterState:
        """Update the query and/or grade selection; None leaves a field as is."""
        if query is not None:
            self.filters = self.filters.with_query(query)
        if grade is not None:
            self.filters = self.filters.with_grade(grade)
        return self.filters

    def view(self, state: FilterState | None = None) -> RowTable | None:
        """Row table for the current (or given) filters, None while loading."""
        snapshot = self.snapshot
        if snapshot is None:
            return None
        return build_row_table(
            snapshot,
            state or self.filters,
            labels=self._config.labels,
            calculator=self._calculator,
        )

    def grade_levels(self) -> list[str]:
        snapshot = self.snapshot
        if snapshot is None:
            return []
        return grade_levels(snapshot.students)

    def export_spreadsheet(self, output: Path | str | None = None) -> ExportResult:
        """Write the filtered table to an .xlsx file."""
        table = self.view()
        if table is None:
            return ExportResult(False, None, "Scores are still loading")

        exports = self._config.exports
        try:
            path = resolve_output_path(
                output, exports.output_dir, exports.spreadsheet_filename
            )
            write_spreadsheet(table, path, sheet_name=exports.sheet_name)
        except (ExportError, OSError) as e:
            return ExportResult(False, None, f"Could not export spreadsheet: {e}")

        return ExportResult(True, path, f"Spreadsheet saved: {path.name}")

    def export_report(self, output: Path | str | None = None) -> ExportResult:
        """Write the filtered summary report to a PDF file."""
        table = self.view()
        if table is None:
            return ExportResult(False, None, "Scores are still loading")

        exports = self._config.exports
        try:
            path = resolve_output_path(output, exports.output_dir, exports.report_filename)
            write_report(
                table,
                path,
                font_path=exports.pdf_font_path,
                font_name=exports.pdf_font_name,
            )
        except (ExportError, OSError) as e:
            return ExportResult(False, None, f"Could not export report: {e}")

        return ExportResult(True, path, f"Report saved: {path.name}")
