"""CLI interface for focustree using Typer.

Usage:
    focustree todo add "Write report every weekday"
    focustree todo sub 1700000000000 "Outline"
    focustree todo done 1700000000000.1700000000001
    focustree todo list
    focustree serve

The CLI is structured as:
- app: Main Typer application
- commands/: Individual command groups (todo, timer, timebox, serve)
- common.py: Shared utilities for CLI commands
- main.py: Entry point that runs the app
"""

from typing import Optional

import typer

from focustree import __version__
from focustree.config import load_settings
from focustree.interfaces.cli.commands import serve, timebox, timer, todo
from focustree.interfaces.cli.common import configure_logging

app = typer.Typer(
    name="focustree",
    help="Hierarchical todo tree with focus priorities and time tracking",
    add_completion=False,
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"focustree version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-v",
        help="Show version and exit",
        callback=version_callback,
        is_eager=True,
    ),
    log_level: Optional[str] = typer.Option(
        None, "--log-level", help="Logging level (default from settings)"
    ),
) -> None:
    """focustree - nested todos, five focus slots, recurrence and timers."""
    configure_logging(log_level or load_settings().log_level)


# =============================================================================
# Register Command Groups
# =============================================================================

app.add_typer(todo.app, name="todo")
app.add_typer(timer.app, name="timer")
app.add_typer(timebox.app, name="timebox")
app.command("serve")(serve.serve)


# =============================================================================
# Top-Level Shortcuts for Common Commands
# =============================================================================


@app.command("ls")
def ls(
    hide_completed: bool = typer.Option(False, "--hide-completed", "-H"),
    focus: bool = typer.Option(False, "--focus", "-f"),
) -> None:
    """Show the todo tree (shortcut for 'todo list')."""
    todo.list_todos(hide_completed=hide_completed, focus=focus, data_dir=None, api_url=None)


__all__ = ["app"]
