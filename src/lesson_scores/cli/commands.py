"""CLI commands for lesson scores.

Commands:
- init-db: Create the SQLite schema
- seed: Load users, lessons and progress from a YAML/JSON file
- grades: List grade levels available as filters
- show: Print the score table (optionally filtered)
- export-xlsx: Write the filtered table to a spreadsheet
- export-pdf: Write the filtered summary report to a PDF
"""

import sqlite3
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from lesson_scores.config.app_config import load_app_config
from lesson_scores.core.filters import ALL_GRADES
from lesson_scores.core.rollup import TOTAL_XP, PASSED, RowTable
from lesson_scores.core.session import ExportResult, ScoreboardSession
from lesson_scores.db.database import init_db as do_init_db, set_db_path
from lesson_scores.db.scores_repository import SqliteScoreSource, seed_from_file

app = typer.Typer(
    name="scores",
    help="Student lesson scores: XP, raw quiz scores and pass counts.",
    no_args_is_help=True,
)

console = Console()


def _open_session(query: str = "", grade: str = ALL_GRADES) -> ScoreboardSession:
    """Load the snapshot from the configured database, or exit with an error."""
    config = load_app_config()
    set_db_path(config.db_path)

    session = ScoreboardSession(SqliteScoreSource(), config)
    if not session.reload():
        console.print(f"[red]✗ Could not load scores: {session.last_error}[/red]")
        raise typer.Exit(code=1)

    session.set_filter(query=query, grade=grade)
    return session


def _print_table(table: RowTable) -> None:
    grid = Table(title=table.title, show_lines=False)
    numeric = {table.column_index(TOTAL_XP), table.column_index(PASSED)}
    for i, column in enumerate(table.columns):
        header = column.label if not column.hint else f"{column.label}\n[dim]({column.hint})[/dim]"
        grid.add_column(header, justify="right" if i in numeric else "left")

    for row in table.rows:
        grid.add_row(*(str(v) for v in row))

    console.print(grid)


def _report_export(result: ExportResult) -> None:
    if result.success:
        console.print(f"[green]✓ {result.message}[/green]")
        console.print(f"  [dim]path:[/dim] {result.path}")
    else:
        console.print(f"[red]✗ {result.message}[/red]")
        raise typer.Exit(code=1)


@app.command(name="init-db")
def init_db() -> None:
    """Create the database schema."""
    path = load_app_config().db_path
    do_init_db(path)
    console.print(f"[green]✓ Database ready:[/green] {path}")


@app.command()
def seed(
    file: str = typer.Argument(..., help="YAML or JSON file with users, lessons, progress"),
) -> None:
    """Load records into the database."""
    path = Path(file).expanduser().resolve()
    if not path.exists():
        console.print(f"[red]✗ File not found: {path}[/red]")
        raise typer.Exit(code=1)

    do_init_db(load_app_config().db_path)
    try:
        counts = seed_from_file(path)
    except (sqlite3.Error, KeyError, ValueError) as e:
        console.print(f"[red]✗ Seed failed, nothing was written: {e}[/red]")
        raise typer.Exit(code=1)
    console.print(
        f"[green]✓ Seeded[/green] {counts['users']} users, "
        f"{counts['lessons']} lessons, {counts['progress']} attempts"
    )


@app.command()
def grades() -> None:
    """List grade levels found among students."""
    session = _open_session()
    levels = session.grade_levels()
    if not levels:
        console.print("[yellow]No grade levels recorded[/yellow]")
        return
    for level in levels:
        console.print(f"  - {level}")


@app.command()
def show(
    query: str = typer.Option("", "--query", "-q", help="Match name or username"),
    grade: str = typer.Option(ALL_GRADES, "--grade", "-g", help="Grade level or 'all'"),
) -> None:
    """Show the score table."""
    session = _open_session(query, grade)
    table = session.view()

    if table is None or len(table) == 0:
        console.print("[yellow]No students match the filters[/yellow]")
        return

    _print_table(table)
    console.print(f"[dim]{len(table)} students[/dim]")


@app.command(name="export-xlsx")
def export_xlsx(
    output: str | None = typer.Option(None, "--output", "-o", help="Output file or directory"),
    query: str = typer.Option("", "--query", "-q", help="Match name or username"),
    grade: str = typer.Option(ALL_GRADES, "--grade", "-g", help="Grade level or 'all'"),
) -> None:
    """Export the filtered table to a spreadsheet."""
    session = _open_session(query, grade)
    _report_export(session.export_spreadsheet(output))


@app.command(name="export-pdf")
def export_pdf(
    output: str | None = typer.Option(None, "--output", "-o", help="Output file or directory"),
    query: str = typer.Option("", "--query", "-q", help="Match name or username"),
    grade: str = typer.Option(ALL_GRADES, "--grade", "-g", help="Grade level or 'all'"),
) -> None:
    """Export the filtered summary report to a PDF."""
    session = _open_session(query, grade)
    _report_export(session.export_report(output))
