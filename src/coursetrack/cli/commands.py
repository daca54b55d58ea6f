"""CLI commands for coursetrack administration.

Commands:
- init-db: Create the database schema
- course: Show the course definition table
- progress: Show a user's progress per day
- complete-day: Run the day completion gate for a user
- issue-certificate: Issue (or show) a user's certificate
- serve: Run the Web API with uvicorn
"""

from pathlib import Path

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from coursetrack.core import certificate_engine, completion_engine, progress_engine
from coursetrack.core.course_definition import (
    COURSE_ID,
    COURSE_TITLE,
    get_section_ids,
    list_course_days,
)
from coursetrack.db.database import init_db

app = typer.Typer(
    name="coursetrack",
    help="Progress, badges and certificates for the five-day AI course.",
    no_args_is_help=True,
)

console = Console()


@app.callback()
def main(
    db: Path | None = typer.Option(
        None, "--db", envvar="COURSETRACK_DB_PATH", help="SQLite database file"
    ),
) -> None:
    """Open (and create if needed) the database before any command."""
    init_db(db)


@app.command(name="init-db")
def init_db_command() -> None:
    """Create the database schema (idempotent)."""
    db_path = init_db()
    console.print(f"[green]✓ Database ready[/green] [dim]{db_path}[/dim]")


@app.command()
def course() -> None:
    """Show the course definition table."""
    table = Table(show_header=True, header_style="bold", title=COURSE_TITLE)
    table.add_column("Day", justify="center", width=5)
    table.add_column("Title", style="cyan")
    table.add_column("Time", width=8)
    table.add_column("Sections")

    for day in list_course_days():
        table.add_row(
            str(day.day_id),
            day.title,
            day.estimated_time,
            ", ".join(day.section_ids),
        )

    console.print(table)
    console.print(f"[dim]course_id:[/dim] {COURSE_ID}")


@app.command()
def progress(
    user_id: str = typer.Argument(..., help="Identity-provider user id"),
) -> None:
    """Show a user's progress per day."""
    result = progress_engine.get_all_progress(user_id)
    if not result.success:
        console.print(f"[red]✗ {result.message}[/red]")
        raise typer.Exit(code=1)

    rows = {p.day_id: p for p in result.progress}

    table = Table(show_header=True, header_style="bold")
    table.add_column("Day", justify="center", width=5)
    table.add_column("Sections", justify="center", width=10)
    table.add_column("Quizzes")
    table.add_column("Complete", justify="center", width=10)

    for day in list_course_days():
        record = rows.get(day.day_id)
        total = len(day.section_ids)
        if record is None:
            table.add_row(str(day.day_id), f"0/{total}", "-", "[dim]-[/dim]")
            continue
        done = len(set(record.completed_sections) & set(get_section_ids(day.day_id)))
        quizzes = ", ".join(f"{k}={v}" for k, v in record.quiz_scores.items()) or "-"
        complete = "[green]✓[/green]" if record.is_completed else "[yellow]…[/yellow]"
        table.add_row(str(day.day_id), f"{done}/{total}", quizzes, complete)

    console.print(Panel(f"[bold]{user_id}[/bold]", expand=False))
    console.print(table)


@app.command(name="complete-day")
def complete_day(
    user_id: str = typer.Argument(..., help="Identity-provider user id"),
    day_id: int = typer.Argument(..., help="Day number (1-5)"),
) -> None:
    """Mark a day complete if all of its sections are done."""
    result = completion_engine.complete_day(user_id, day_id)

    if not result.success:
        console.print(f"[red]✗ {result.message}[/red]")
        if result.missing_sections:
            console.print(
                f"  [dim]completed:[/dim] {result.completed_count}/{result.total_count}"
            )
        raise typer.Exit(code=1)

    console.print(f"[green]✓ {result.message}[/green]")
    if result.badge:
        console.print(f"  [dim]badge:[/dim] {result.badge.badge_data.get('title')}")


@app.command(name="issue-certificate")
def issue_certificate(
    user_id: str = typer.Argument(..., help="Identity-provider user id"),
) -> None:
    """Issue the course certificate for a user (or show the existing one)."""
    result = certificate_engine.issue_certificate(user_id)

    if not result.success or result.certificate is None:
        console.print(f"[red]✗ {result.message}[/red]")
        if result.missing_days:
            console.print(
                f"  [dim]completed days:[/dim] {result.completed_days}/{result.required_days}"
            )
        raise typer.Exit(code=1)

    data = result.certificate.certificate_data
    color = "yellow" if result.already_issued else "green"
    console.print(f"[{color}]✓ {result.message}[/{color}]")
    console.print(f"  [dim]certificate:[/dim] {result.certificate.id}")
    console.print(f"  [dim]name:[/dim]        {data.get('userName')}")
    console.print(f"  [dim]score:[/dim]       {data.get('overallScore')}")
    console.print(f"  [dim]date:[/dim]        {data.get('completionDate')}")


@app.command()
def serve(
    host: str = typer.Option("127.0.0.1", "--host", help="Bind address"),
    port: int = typer.Option(8000, "--port", "-p", help="Port"),
    reload: bool = typer.Option(False, "--reload", help="Auto-reload on changes"),
) -> None:
    """Run the Web API."""
    import uvicorn

    uvicorn.run("coursetrack.web.api:app", host=host, port=port, reload=reload)


if __name__ == "__main__":
    app()
