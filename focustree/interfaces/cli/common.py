"""Shared utilities for focustree CLI commands.

- Data directory option and settings resolution
- Opening a todo session against the local store or a remote server
- Dot-separated todo path parsing
- Formatted output helpers (error, success, info)
"""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

import typer
from rich.console import Console
from rich.tree import Tree as RichTree

from focustree.application import TodoSession
from focustree.config import ENV_DATA_DIR, Settings, load_settings
from focustree.domain.todo import Todo, TodoPath, find_by_path, recurring_display_text
from focustree.domain.shared import Err
from focustree.infrastructure.remote import TodoApiClient
from focustree.infrastructure.storage import TodoRepository

console = Console()

# Reusable data directory option for CLI commands
# Usage: def my_command(data_dir: Optional[Path] = data_dir_option) -> None:
data_dir_option = typer.Option(
    None,
    "--data-dir", "-d",
    help=f"Directory holding the JSON stores (or set {ENV_DATA_DIR})",
    envvar=ENV_DATA_DIR,
)

api_url_option = typer.Option(
    None,
    "--api-url",
    help="Use a running focustree server instead of local files",
)


def get_settings(data_dir: Path | None = None, api_url: str | None = None) -> Settings:
    """Load settings and apply command-line overrides."""
    settings = load_settings()
    overrides: dict = {}
    if data_dir is not None:
        overrides["data_dir"] = data_dir
    if api_url is not None:
        overrides["api_url"] = api_url
    return settings.model_copy(update=overrides) if overrides else settings


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(levelname)s %(name)s: %(message)s",
        force=True,
    )


@contextmanager
def open_session(settings: Settings) -> Iterator[TodoSession]:
    """Load a session, yield it, then flush pending saves.

    Exits with code 1 when the tree cannot be loaded.
    """
    client = TodoApiClient(settings.api_url) if settings.api_url else None
    store = client or TodoRepository(settings.data_dir)
    session = TodoSession(store, delay=settings.debounce_delay)
    try:
        session.load()
        if session.error:
            print_error(session.error)
            raise typer.Exit(1)
        yield session
    finally:
        session.close()
        if client is not None:
            client.close()

    if session.error:
        print_error(session.error)
        raise typer.Exit(1)


def parse_todo_path(raw: str) -> TodoPath:
    """Parse ``12.40.41`` into ``[12, 40, 41]``."""
    try:
        path = [int(part) for part in raw.split(".")]
    except ValueError as e:
        raise typer.BadParameter(f"Invalid todo path: {raw!r}") from e
    if not path:
        raise typer.BadParameter("Todo path cannot be empty")
    return path


def split_path(path: TodoPath) -> tuple[int, TodoPath]:
    """Split a full path into (todo id, parent path)."""
    return path[-1], path[:-1]


def require_todo(todos: list[Todo], path: TodoPath) -> Todo:
    found = find_by_path(todos, path)
    if isinstance(found, Err):
        print_error(found.error)
        raise typer.Exit(1)
    return found.value


def print_error(msg: str) -> None:
    """Print a formatted error message."""
    typer.echo(typer.style(f"Error: {msg}", fg=typer.colors.RED), err=True)


def print_success(msg: str) -> None:
    typer.echo(typer.style(msg, fg=typer.colors.GREEN))


def print_info(msg: str) -> None:
    typer.echo(typer.style(msg, fg=typer.colors.BLUE))


def format_todo(todo: Todo, path: TodoPath) -> str:
    """One-line rich markup for a todo."""
    mark = "[green]\\[x][/green]" if todo.completed else "\\[ ]"
    parts = [mark, f"[dim]{'.'.join(map(str, path))}[/dim]", todo.text or "[dim](blank)[/dim]"]
    if todo.is_focused():
        parts.append(f"[bold magenta]#{todo.focus_priority}[/bold magenta]")
    if todo.due_date:
        parts.append(f"[cyan]due {todo.due_date}[/cyan]")
    if todo.difficulty is not None:
        parts.append(f"[yellow]{todo.difficulty.value}[/yellow]")
    if todo.recurring_pattern is not None:
        parts.append(f"[blue]{recurring_display_text(todo.recurring_pattern)}[/blue]")
    return " ".join(parts)


def render_tree(todos: list[Todo], title: str = "Todos") -> RichTree:
    """Build a rich tree of todos with their dot paths."""
    root = RichTree(f"[bold]{title}[/bold]")

    def add(branch: RichTree, children: list[Todo], parent_path: TodoPath) -> None:
        for todo in children:
            path = [*parent_path, todo.id]
            node = branch.add(format_todo(todo, path))
            add(node, todo.subtasks, path)

    add(root, todos, [])
    return root


__all__ = [
    "console",
    "data_dir_option",
    "api_url_option",
    "get_settings",
    "configure_logging",
    "open_session",
    "parse_todo_path",
    "split_path",
    "require_todo",
    "print_error",
    "print_success",
    "print_info",
    "format_todo",
    "render_tree",
]
