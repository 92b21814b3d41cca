"""PDF report export.

A fixed title line followed by the summary table
(Name, Grade, Total Score, Total XP, Passed). Thai and other non-Latin
names need a TTF font that carries their glyphs; pass its path as
``font_path`` and it is registered with reportlab before rendering.
"""

from __future__ import annotations

import io
from pathlib import Path
from typing import BinaryIO

import structlog
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFont
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from lesson_scores.core.rollup import RowTable
from lesson_scores.export.base import ExportError

logger = structlog.get_logger(__name__)

DEFAULT_FONT = "Helvetica"


def register_font(font_path: str | Path | None, font_name: str = "ReportFont") -> str:
    """Register a TTF font and return the name to draw with.

    Returns the built-in Helvetica when no path is given.
    """
    if not font_path:
        return DEFAULT_FONT
    if font_name not in pdfmetrics.getRegisteredFontNames():
        pdfmetrics.registerFont(TTFont(font_name, str(font_path)))
        logger.debug("export.font_registered", font=font_name, path=str(font_path))
    return font_name


def _build(table: RowTable, target: str | BinaryIO, font: str) -> None:
    report = table.to_report()

    styles = getSampleStyleSheet()
    title_style = styles["Title"].clone("ReportTitle", fontName=font, alignment=0)

    data = [report.headers] + [[str(v) for v in row] for row in report.rows]
    grid = Table(data, repeatRows=1)
    grid.setStyle(
        TableStyle(
            [
                ("FONTNAME", (0, 0), (-1, -1), font),
                ("GRID", (0, 0), (-1, -1), 0.5, colors.grey),
                ("BACKGROUND", (0, 0), (-1, 0), colors.lightgrey),
            ]
        )
    )

    doc = SimpleDocTemplate(
        target,
        pagesize=A4,
        leftMargin=14 * mm,
        rightMargin=14 * mm,
        topMargin=15 * mm,
        title=report.title,
    )
    doc.build([Paragraph(report.title, title_style), Spacer(1, 5 * mm), grid])


def write_report(
    table: RowTable,
    path: Path,
    font_path: str | Path | None = None,
    font_name: str = "ReportFont",
) -> Path:
    """Write the summary report to a PDF file.

    Args:
        table: Full row table; the report columns are taken from it
        path: Destination file
        font_path: Optional TTF font for non-Latin scripts
        font_name: Name to register the font under

    Returns:
        The written path

    Raises:
        ExportError: If the font cannot be loaded or the PDF cannot be built
    """
    try:
        font = register_font(font_path, font_name)
        _build(table, str(path), font)
    except Exception as e:
        logger.error("export.report_failed", path=str(path), error=str(e))
        raise ExportError("report", str(e)) from e

    logger.info("export.report_written", path=str(path), rows=len(table))
    return path


def render_report(
    table: RowTable,
    font_path: str | Path | None = None,
    font_name: str = "ReportFont",
) -> bytes:
    """Return the PDF report contents as bytes."""
    buf = io.BytesIO()
    try:
        font = register_font(font_path, font_name)
        _build(table, buf, font)
    except Exception as e:
        logger.error("export.report_failed", error=str(e))
        raise ExportError("report", str(e)) from e
    return buf.getvalue()
