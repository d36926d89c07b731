"""Time tracking CLI commands."""

from pathlib import Path
from typing import Optional

import typer
from rich.table import Table

from focustree.application import TimerService
from focustree.domain.shared import Err
from focustree.domain.timer import format_duration, today_date_string
from focustree.infrastructure.storage import TimerSessionRepository
from focustree.interfaces.cli.common import (
    console,
    data_dir_option,
    get_settings,
    open_session,
    parse_todo_path,
    print_error,
    print_info,
    print_success,
    require_todo,
)

app = typer.Typer(help="Time tracking commands")


def _service(data_dir: Path) -> TimerService:
    service = TimerService(TimerSessionRepository(data_dir))
    result = service.load_today_sessions()
    if isinstance(result, Err):
        print_error(result.error)
        raise typer.Exit(1)
    return service


@app.command("start")
def start(
    path: str = typer.Argument(..., help="Todo path"),
    data_dir: Optional[Path] = data_dir_option,
) -> None:
    """Start timing a todo (stops any running timer)."""
    settings = get_settings(data_dir)
    todo_path = parse_todo_path(path)
    with open_session(settings) as session:
        todo = require_todo(session.todos, todo_path)
        ancestors = session.project_path(todo_path[:-1])

    service = _service(settings.data_dir)
    result = service.start_timer(todo.id, todo.text, ancestors or None)
    if isinstance(result, Err):
        print_error(result.error)
        raise typer.Exit(1)
    print_success(f"Timer started: {todo.text}")


@app.command("stop")
def stop(data_dir: Optional[Path] = data_dir_option) -> None:
    """Stop the running timer."""
    settings = get_settings(data_dir)
    result = _service(settings.data_dir).stop_timer()
    if isinstance(result, Err):
        print_error(result.error)
        raise typer.Exit(1)
    session = result.value
    print_success(f"Stopped '{session.todo_text}' after {format_duration(session.duration)}")


@app.command("today")
def today(data_dir: Optional[Path] = data_dir_option) -> None:
    """Show today's tracked time per todo."""
    settings = get_settings(data_dir)
    service = _service(settings.data_dir)
    stats = service.daily_stats()

    if service.active is not None:
        print_info(
            f"Running: {service.active.todo_text} ({format_duration(service.elapsed())})"
        )
    if not stats.todo_breakdown:
        print_info(f"No time tracked on {today_date_string()}")
        return

    table = Table(title=f"Time tracked on {stats.date}")
    table.add_column("Todo")
    table.add_column("Sessions", justify="right")
    table.add_column("Time", justify="right")
    for entry in stats.todo_breakdown:
        table.add_row(entry.todo_text, str(entry.session_count), format_duration(entry.total_duration))
    table.add_row("[bold]Total[/bold]", str(stats.session_count), format_duration(stats.total_duration))
    console.print(table)
