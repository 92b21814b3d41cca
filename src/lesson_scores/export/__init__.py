"""Exporters for the row table.

- spreadsheet: .xlsx with every column (openpyxl)
- pdf_report: summary report with a title line (reportlab)
"""

from lesson_scores.export.base import ExportError
from lesson_scores.export.pdf_report import render_report, write_report
from lesson_scores.export.spreadsheet import render_spreadsheet, write_spreadsheet

__all__ = [
    "ExportError",
    "render_report",
    "render_spreadsheet",
    "write_report",
    "write_spreadsheet",
]
