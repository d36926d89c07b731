"""Timeboxing CLI commands."""

from pathlib import Path
from typing import Optional

import typer
from rich.table import Table

from focustree.application import TimeboxService
from focustree.domain.timebox import end_time
from focustree.domain.timer import today_date_string
from focustree.domain.todo import find_all
from focustree.infrastructure.storage import TimeboxRepository
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

app = typer.Typer(help="Timeboxing commands")


def _service(data_dir: Path, delay: float) -> TimeboxService:
    service = TimeboxService(TimeboxRepository(data_dir), delay=delay)
    service.load()
    if service.error:
        print_error(service.error)
        raise typer.Exit(1)
    return service


@app.command("add")
def add(
    path: str = typer.Argument(..., help="Todo path"),
    start_time: str = typer.Argument(..., help="Start time, HH:mm"),
    duration: Optional[int] = typer.Option(None, "--duration", "-m", help="Minutes (default 30)"),
    on: Optional[str] = typer.Option(None, "--date", help="YYYY-MM-DD (default today)"),
    data_dir: Optional[Path] = data_dir_option,
) -> None:
    """Schedule a todo into the day."""
    settings = get_settings(data_dir)
    with open_session(settings) as session:
        todo = require_todo(session.todos, parse_todo_path(path))

    service = _service(settings.data_dir, settings.debounce_delay)
    try:
        item = service.add_item(todo.id, start_time, duration, on)
    except ValueError as e:
        print_error(f"Invalid timebox: {e}")
        raise typer.Exit(1) from e
    finally:
        service.close()
    if service.error:
        print_error(service.error)
        raise typer.Exit(1)
    print_success(f"Scheduled '{todo.text}' {item.start_time}-{end_time(item)} on {item.date}")


@app.command("list")
def list_items(
    on: Optional[str] = typer.Option(None, "--date", help="YYYY-MM-DD (default today)"),
    data_dir: Optional[Path] = data_dir_option,
) -> None:
    """Show the timeboxes of a day."""
    settings = get_settings(data_dir)
    day = on or today_date_string()
    items = _service(settings.data_dir, settings.debounce_delay).items_for_date(day)
    if not items:
        print_info(f"Nothing scheduled on {day}")
        return

    with open_session(settings) as session:
        texts = {
            match.todo.id: match.todo.text
            for match in find_all(session.todos, lambda todo, path: True)
        }

    table = Table(title=f"Timeboxes on {day}")
    table.add_column("Time")
    table.add_column("Todo")
    table.add_column("Id", style="dim")
    for item in items:
        table.add_row(
            f"{item.start_time}-{end_time(item)}",
            texts.get(item.todo_id, f"(todo {item.todo_id})"),
            item.id,
        )
    console.print(table)


@app.command("rm")
def remove(
    item_id: str = typer.Argument(..., help="Timebox id"),
    data_dir: Optional[Path] = data_dir_option,
) -> None:
    """Remove a timebox."""
    settings = get_settings(data_dir)
    service = _service(settings.data_dir, settings.debounce_delay)
    if not any(item.id == item_id for item in service.items):
        print_error(f"Timebox {item_id} not found")
        raise typer.Exit(1)
    service.remove_item(item_id)
    service.close()
    if service.error:
        print_error(service.error)
        raise typer.Exit(1)
    print_success(f"Removed {item_id}")
