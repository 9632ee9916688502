"""
Lemon Learn: terminal interface for the lesson scheduler.

Commands:
- lemon add       - Save a new lesson (due tomorrow)
- lemon review    - Mark a lesson reviewed
- lemon reset     - Send a lesson back to a 1-day interval
- lemon delete    - Remove a lesson
- lemon today     - Lessons due today
- lemon list      - Search and filter lessons
- lemon stats     - Reviewed / pending counts
- lemon remind    - Run the due-lesson reminder
- lemon export    - Write a JSON backup
- lemon import    - Load a JSON backup
- lemon serve     - Start the HTTP API
"""
from __future__ import annotations

import threading
from dataclasses import dataclass, field
from datetime import datetime, tzinfo
from pathlib import Path
from typing import Optional

import typer
from loguru import logger
from rich.console import Console
from rich.panel import Panel
from rich.prompt import Confirm
from rich.table import Table

from config import Settings, get_settings

from .errors import LessonError
from .log_config import configure_logging
from .models import Lesson
from .reminder import DueReminder, ReminderConfig
from .service import LessonService


# =============================================================================
# CLI Setup
# =============================================================================

app = typer.Typer(
    name="lemon",
    help="Lemon Learn: spaced-repetition lesson tracker",
    no_args_is_help=True,
)
console = Console()


@dataclass
class CliState:
    """Per-invocation settings and lazily opened service."""

    settings: Settings
    _service: LessonService | None = field(default=None, repr=False)

    @property
    def service(self) -> LessonService:
        if self._service is None:
            self._service = LessonService.from_settings(self.settings)
        return self._service

    @property
    def tz(self) -> tzinfo | None:
        return self.service.scheduler.tz


# =============================================================================
# Styling
# =============================================================================

STYLES = {
    "reviewed": "bold green",
    "pending": "bold yellow",
    "info": "bold cyan",
    "warning": "bold yellow",
    "dim": "dim",
}


def format_date(value: datetime | None, tz: tzinfo | None = None) -> str:
    """Format as dd/mm/YYYY in `tz` (local zone if None)."""
    if value is None:
        return "-"
    return value.astimezone(tz).strftime("%d/%m/%Y")


def style_status(lesson: Lesson) -> str:
    if lesson.is_reviewed:
        return f"[{STYLES['reviewed']}]reviewed[/{STYLES['reviewed']}]"
    return f"[{STYLES['pending']}]not reviewed[/{STYLES['pending']}]"


# =============================================================================
# Display Helpers
# =============================================================================

def lesson_table(lessons: list[Lesson], title: str, tz: tzinfo | None = None) -> Table:
    """Build a table of lessons."""
    table = Table(title=title, show_lines=False)
    table.add_column("ID", style="dim", no_wrap=True)
    table.add_column("Title", style="bold")
    table.add_column("Tag", style="cyan")
    table.add_column("Status")
    table.add_column("Reviews", justify="right")
    table.add_column("Saved")
    table.add_column("Next review")

    for lesson in lessons:
        table.add_row(
            lesson.id[:8],
            lesson.title,
            f"#{lesson.tag}" if lesson.tag else "",
            style_status(lesson),
            str(lesson.reviews),
            format_date(lesson.created_at, tz),
            format_date(lesson.next_review, tz),
        )
    return table


def display_lesson(lesson: Lesson, heading: str, tz: tzinfo | None = None) -> None:
    """Show one lesson in a panel."""
    content = f"[bold]{lesson.title}[/bold]"
    if lesson.tag:
        content += f"  [cyan]#{lesson.tag}[/cyan]"
    if lesson.note:
        content += f"\n\n{lesson.note}"
    if lesson.has_link:
        content += f"\n\n[link={lesson.link}]{lesson.link}[/link]"
    content += (
        f"\n\n[dim]id {lesson.id} | {lesson.reviews} reviews | "
        f"next review {format_date(lesson.next_review, tz)}[/dim]"
    )
    console.print(Panel(content, title=heading, title_align="left", border_style="yellow", padding=(1, 2)))


def resolve_id(service: LessonService, lesson_id: str) -> str:
    """
    Expand an id prefix (as shown in tables) to a full lesson id.

    Unknown or ambiguous prefixes are returned unchanged.
    """
    if service.get(lesson_id) is not None:
        return lesson_id
    matches = [lesson.id for lesson in service.search() if lesson.id.startswith(lesson_id)]
    if len(matches) == 1:
        return matches[0]
    return lesson_id


def not_found(lesson_id: str) -> None:
    console.print(f"[{STYLES['warning']}]No lesson found with id {lesson_id}[/{STYLES['warning']}]")
    raise typer.Exit(code=1)


def _state(ctx: typer.Context) -> CliState:
    return ctx.obj


# =============================================================================
# Commands
# =============================================================================

@app.callback()
def main_callback(
    ctx: typer.Context,
    db: Optional[str] = typer.Option(
        None,
        "--db",
        help="Database URL (overrides DATABASE_URL)",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose", "-v",
        help="Show debug logging",
    ),
) -> None:
    """Track lessons and review them on a widening schedule."""
    settings = get_settings()
    if db:
        settings = settings.model_copy(update={"database_url": db})
    configure_logging(settings, level="DEBUG" if verbose else "WARNING")
    ctx.obj = CliState(settings=settings)


@app.command()
def add(
    ctx: typer.Context,
    title: str = typer.Argument(..., help="Lesson title"),
    note: str = typer.Option("", "--note", "-n", help="Notes"),
    tag: str = typer.Option("", "--tag", "-t", help="Topic tag"),
    link: str = typer.Option("", "--link", "-l", help="Lecture or video URL"),
) -> None:
    """Save a new lesson. It is due for review tomorrow."""
    state = _state(ctx)
    try:
        lesson = state.service.create(title, note=note, tag=tag, link=link)
    except LessonError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(code=1)

    console.print(f"[green]✓[/green] Saved [bold]{lesson.title}[/bold] ({lesson.id})")
    console.print(f"  Next review: {format_date(lesson.next_review, state.tz)}", style=STYLES["dim"])


@app.command()
def review(
    ctx: typer.Context,
    lesson_id: str = typer.Argument(..., help="Lesson id (or unique prefix)"),
) -> None:
    """Mark a lesson reviewed and schedule the next review."""
    state = _state(ctx)
    service = state.service
    lesson = service.mark_reviewed(resolve_id(service, lesson_id))
    if lesson is None:
        not_found(lesson_id)

    console.print(
        f"[green]✓[/green] Reviewed [bold]{lesson.title}[/bold] "
        f"({lesson.reviews} reviews). Next review: {format_date(lesson.next_review, state.tz)}"
    )


@app.command()
def reset(
    ctx: typer.Context,
    lesson_id: str = typer.Argument(..., help="Lesson id (or unique prefix)"),
) -> None:
    """Mark a lesson as needing review again from the start."""
    state = _state(ctx)
    service = state.service
    lesson = service.reset_review(resolve_id(service, lesson_id))
    if lesson is None:
        not_found(lesson_id)

    console.print(
        f"[yellow]↺[/yellow] Reset [bold]{lesson.title}[/bold]. "
        f"Next review: {format_date(lesson.next_review, state.tz)}"
    )


@app.command()
def delete(
    ctx: typer.Context,
    lesson_id: str = typer.Argument(..., help="Lesson id (or unique prefix)"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Delete a lesson permanently."""
    service = _state(ctx).service
    full_id = resolve_id(service, lesson_id)
    lesson = service.get(full_id)
    if lesson is None:
        not_found(lesson_id)

    if not yes and not Confirm.ask(f"Delete [bold]{lesson.title}[/bold]?", default=False):
        console.print("Cancelled.")
        raise typer.Exit()

    service.delete(full_id)
    console.print(f"[green]✓[/green] Deleted [bold]{lesson.title}[/bold]")


@app.command()
def today(ctx: typer.Context) -> None:
    """Show lessons due for review today."""
    state = _state(ctx)
    lessons = state.service.due_today()
    if not lessons:
        console.print("[green]Nothing to review today![/green]")
        return

    for lesson in lessons:
        display_lesson(lesson, heading="Due today", tz=state.tz)


@app.command(name="list")
def list_lessons(
    ctx: typer.Context,
    search: str = typer.Option("", "--search", "-s", help="Text in title or note"),
    tag: str = typer.Option("", "--tag", "-t", help="Text in tag"),
) -> None:
    """List lessons, optionally filtered by text and tag."""
    state = _state(ctx)
    lessons = state.service.search(search, tag)
    if not lessons:
        console.print("[cyan]No lessons found...[/cyan]")
        return

    console.print(lesson_table(lessons, title="Lessons", tz=state.tz))


@app.command()
def stats(ctx: typer.Context) -> None:
    """Show lesson counts."""
    result = _state(ctx).service.stats()

    table = Table(title="Statistics", show_header=False)
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")
    table.add_row("Total lessons", str(result.total))
    table.add_row("Reviewed", f"[green]{result.reviewed_count}[/green]")
    table.add_row("Not reviewed", f"[yellow]{result.pending_count}[/yellow]")
    console.print(table)


@app.command()
def remind(
    ctx: typer.Context,
    once: bool = typer.Option(False, "--once", help="Check once and exit"),
    interval: Optional[int] = typer.Option(
        None,
        "--interval", "-i",
        min=1,
        help="Minutes between checks (default from settings)",
    ),
) -> None:
    """Remind about lessons due today, every hour by default."""
    state = _state(ctx)
    settings = state.settings

    def deliver(message: str) -> None:
        console.print(Panel(f"[bold yellow]{message}[/bold yellow]", border_style="yellow"))
        logger.info(message)

    reminder = DueReminder(
        state.service.due_today,
        deliver=deliver,
        config=ReminderConfig(
            interval_minutes=interval or settings.reminder_interval_minutes,
            enabled=settings.notifications_enabled,
        ),
    )

    if not settings.notifications_enabled:
        console.print("[yellow]Reminders are disabled (NOTIFICATIONS_ENABLED=false).[/yellow]")
        raise typer.Exit(code=1)

    if once:
        if reminder.check() is None:
            console.print("[green]Nothing to review today![/green]")
        return

    console.print(
        f"[cyan]Checking every {reminder.config.interval_minutes} min. Press Ctrl+C to stop.[/cyan]"
    )
    stop = threading.Event()
    try:
        reminder.run(stop)
    except KeyboardInterrupt:
        stop.set()
        console.print("\nStopped.")


@app.command(name="export")
def export_lessons(
    ctx: typer.Context,
    path: Path = typer.Argument(..., help="Backup file to write"),
) -> None:
    """Write all lessons to a JSON backup."""
    try:
        count = _state(ctx).service.store.export_json(path)
    except LessonError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(code=1)
    console.print(f"[green]✓[/green] Exported {count} lessons to {path}")


@app.command(name="import")
def import_lessons(
    ctx: typer.Context,
    path: Path = typer.Argument(..., exists=True, dir_okay=False, help="Backup file to read"),
) -> None:
    """Load lessons from a JSON backup (existing ids are overwritten)."""
    service = _state(ctx).service
    try:
        count = service.store.import_json(path)
        service.reload()
    except LessonError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(code=1)
    console.print(f"[green]✓[/green] Imported {count} lessons from {path}")


@app.command()
def serve(
    ctx: typer.Context,
    host: Optional[str] = typer.Option(None, "--host", help="Bind address"),
    port: Optional[int] = typer.Option(None, "--port", "-p", help="Port"),
) -> None:
    """Start the HTTP API."""
    import uvicorn

    from src.api.main import create_app

    settings = _state(ctx).settings
    uvicorn.run(
        create_app(settings=settings),
        host=host or settings.api_host,
        port=port or settings.api_port,
        log_level=settings.log_level.lower(),
    )


# =============================================================================
# Entry Point
# =============================================================================

def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
