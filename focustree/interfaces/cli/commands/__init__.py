"""CLI command groups for focustree.

Each module provides a Typer app registered with the main app via
app.add_typer(), except ``serve`` which is a single command.

Command groups:
- todo: Todo tree management (list, add, done, focus, etc.)
- timer: Time tracking (start, stop, today)
- timebox: Day scheduling (add, list, rm)
"""

from focustree.interfaces.cli.commands import serve, timebox, timer, todo

__all__ = ["todo", "timer", "timebox", "serve"]
