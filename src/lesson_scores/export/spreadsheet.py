"""Spreadsheet export (.xlsx).

One header row with the row table's column labels, then one row per
student. Cells are plain strings and integers, never formulas.
"""

from __future__ import annotations

import io
from pathlib import Path

import openpyxl
import structlog
from openpyxl.utils import get_column_letter

from lesson_scores.core.rollup import RowTable
from lesson_scores.export.base import ExportError

logger = structlog.get_logger(__name__)

# Column width bounds (characters)
MIN_WIDTH = 8
MAX_WIDTH = 40


def _append_plain(ws, values) -> None:
    ws.append(list(values))
    # openpyxl reads a leading "=" as a formula, keep such cells as text
    for cell in ws[ws.max_row]:
        if cell.data_type == "f":
            cell.data_type = "s"


def build_workbook(table: RowTable, sheet_name: str = "Scores") -> openpyxl.Workbook:
    """Build an in-memory workbook for the table."""
    wb = openpyxl.Workbook()
    ws = wb.active
    ws.title = sheet_name

    _append_plain(ws, table.headers)
    for row in table.rows:
        _append_plain(ws, row)

    for i, header in enumerate(table.headers, start=1):
        longest = max(
            [len(str(header))] + [len(str(row[i - 1])) for row in table.rows]
        )
        ws.column_dimensions[get_column_letter(i)].width = min(
            MAX_WIDTH, max(MIN_WIDTH, longest + 2)
        )

    return wb


def write_spreadsheet(table: RowTable, path: Path, sheet_name: str = "Scores") -> Path:
    """Write the table to an .xlsx file.

    Args:
        table: Row table to export
        path: Destination file
        sheet_name: Worksheet title

    Returns:
        The written path

    Raises:
        ExportError: If the workbook cannot be built or saved
    """
    try:
        wb = build_workbook(table, sheet_name)
        wb.save(path)
    except Exception as e:
        logger.error("export.spreadsheet_failed", path=str(path), error=str(e))
        raise ExportError("spreadsheet", str(e)) from e

    logger.info("export.spreadsheet_written", path=str(path), rows=len(table))
    return path


def render_spreadsheet(table: RowTable, sheet_name: str = "Scores") -> bytes:
    """Return the .xlsx file contents as bytes."""
    buf = io.BytesIO()
    try:
        build_workbook(table, sheet_name).save(buf)
    except Exception as e:
        logger.error("export.spreadsheet_failed", error=str(e))
        raise ExportError("spreadsheet", str(e)) from e
    return buf.getvalue()
