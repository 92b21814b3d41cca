"""Score table endpoints."""

from urllib.parse import quote

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from lesson_scores.core.filters import ALL_GRADES, FilterState
from lesson_scores.core.rollup import RowTable
from lesson_scores.core.session import ScoreboardSession
from lesson_scores.export.base import ExportError
from lesson_scores.export.pdf_report import render_report
from lesson_scores.export.spreadsheet import render_spreadsheet
from lesson_scores.web.deps import get_session
from lesson_scores.web.schemas import (
    GradeListResponse,
    ReloadResponse,
    ScoreTableResponse,
)

router = APIRouter(prefix="/api/scores", tags=["scores"])

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def _table_or_503(session: ScoreboardSession, state: FilterState) -> RowTable:
    table = session.view(state)
    if table is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Scores are still loading",
        )
    return table


def _content_disposition(filename: str) -> str:
    """Attachment header with an ASCII fallback name and the UTF-8 original (RFC 6266/5987)."""
    fallback = filename.encode("ascii", "replace").decode("ascii").replace('"', "_")
    return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{quote(filename, safe='')}"


def _attachment(content: bytes, media_type: str, filename: str) -> Response:
    return Response(
        content=content,
        media_type=media_type,
        headers={"Content-Disposition": _content_disposition(filename)},
    )


@router.get("", response_model=ScoreTableResponse)
async def get_scores(
    query: str = Query(default=""),
    grade: str = Query(default=ALL_GRADES),
    session: ScoreboardSession = Depends(get_session),
) -> ScoreTableResponse:
    """Score table filtered by name/username and grade."""
    state = FilterState(query=query, grade=grade or ALL_GRADES)
    table = _table_or_503(session, state)
    return ScoreTableResponse(**table.to_dict(), query=state.query, grade=state.grade)


@router.get("/grades", response_model=GradeListResponse)
async def get_grades(session: ScoreboardSession = Depends(get_session)) -> GradeListResponse:
    """Grade levels found among loaded students."""
    if session.loading:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Scores are still loading",
        )
    grades = session.grade_levels()
    return GradeListResponse(grades=grades, count=len(grades))


@router.post("/reload", response_model=ReloadResponse)
async def reload_scores(session: ScoreboardSession = Depends(get_session)) -> ReloadResponse:
    """Replace the snapshot with a fresh load."""
    if not session.reload():
        return ReloadResponse(loaded=False, error=session.last_error)

    snapshot = session.snapshot
    return ReloadResponse(
        loaded=True,
        students=len(snapshot.students),
        lessons=len(snapshot.lessons),
    )


@router.get("/export/xlsx")
async def export_xlsx(
    query: str = Query(default=""),
    grade: str = Query(default=ALL_GRADES),
    session: ScoreboardSession = Depends(get_session),
) -> Response:
    """Download the filtered table as a spreadsheet."""
    table = _table_or_503(session, FilterState(query=query, grade=grade or ALL_GRADES))
    exports = session.config.exports
    try:
        content = render_spreadsheet(table, sheet_name=exports.sheet_name)
    except ExportError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e)
        ) from e
    return _attachment(content, XLSX_MEDIA_TYPE, exports.spreadsheet_filename)


@router.get("/export/pdf")
async def export_pdf(
    query: str = Query(default=""),
    grade: str = Query(default=ALL_GRADES),
    session: ScoreboardSession = Depends(get_session),
) -> Response:
    """Download the filtered summary report as a PDF."""
    table = _table_or_503(session, FilterState(query=query, grade=grade or ALL_GRADES))
    exports = session.config.exports
    try:
        content = render_report(
            table, font_path=exports.pdf_font_path, font_name=exports.pdf_font_name
        )
    except ExportError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e)
        ) from e
    return _attachment(content, "application/pdf", exports.report_filename)
