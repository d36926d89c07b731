"""Todo tree CLI commands.

Todos are addressed by dot-separated id paths, e.g. ``12.40.41`` is todo
41 under 40 under top-level todo 12. ``focustree todo list`` shows them.
"""

from datetime import date
from pathlib import Path
from typing import Optional

import typer
from rich.table import Table

from focustree.domain.todo import Difficulty, Todo, next_difficulty
from focustree.interfaces.cli.common import (
    api_url_option,
    console,
    data_dir_option,
    get_settings,
    open_session,
    parse_todo_path,
    print_error,
    print_info,
    print_success,
    render_tree,
    require_todo,
    split_path,
)

app = typer.Typer(help="Todo tree commands")


def _applied(before: list[Todo], after: list[Todo], action: str) -> None:
    """Exit with an error when a session call left the tree untouched."""
    if after is before:
        print_error(f"Could not {action}")
        raise typer.Exit(1)


@app.command("list")
def list_todos(
    hide_completed: bool = typer.Option(
        False, "--hide-completed", "-H", help="Hide completed top-level todos"
    ),
    focus: bool = typer.Option(False, "--focus", "-f", help="Only focused todos"),
    data_dir: Optional[Path] = data_dir_option,
    api_url: Optional[str] = api_url_option,
) -> None:
    """Show the todo tree."""
    with open_session(get_settings(data_dir, api_url)) as session:
        session.show_completed = not hide_completed
        session.show_only_focus = focus
        todos = session.visible_todos()
        if not todos:
            print_info("No todos")
            return
        console.print(render_tree(todos, "Focus" if focus else "Todos"))


@app.command("add")
def add(
    text: str = typer.Argument(..., help="Todo text; may end with e.g. 'every monday'"),
    data_dir: Optional[Path] = data_dir_option,
    api_url: Optional[str] = api_url_option,
) -> None:
    """Add a top-level todo."""
    with open_session(get_settings(data_dir, api_url)) as session:
        before = session.todos
        after = session.add_todo(text)
        _applied(before, after, "add todo")
        todo = after[-1]
        print_success(f"Added {todo.id}: {todo.text}")


@app.command("sub")
def add_subtask(
    parent: str = typer.Argument(..., help="Path of the parent todo"),
    text: Optional[str] = typer.Argument(None, help="Subtask text"),
    data_dir: Optional[Path] = data_dir_option,
    api_url: Optional[str] = api_url_option,
) -> None:
    """Add a subtask under a todo."""
    parent_path = parse_todo_path(parent)
    with open_session(get_settings(data_dir, api_url)) as session:
        before = session.todos
        after = (
            session.add_subtask(parent_path, text)
            if text
            else session.add_subtask(parent_path)
        )
        _applied(before, after, "add subtask")
        subtask = require_todo(after, parent_path).subtasks[-1]
        print_success(f"Added {'.'.join(map(str, [*parent_path, subtask.id]))}: {subtask.text}")


@app.command("edit")
def edit(
    path: str = typer.Argument(..., help="Todo path"),
    text: str = typer.Argument(..., help="New text; empty deletes the todo"),
    data_dir: Optional[Path] = data_dir_option,
    api_url: Optional[str] = api_url_option,
) -> None:
    """Change a todo's text."""
    todo_id, parent_path = split_path(parse_todo_path(path))
    with open_session(get_settings(data_dir, api_url)) as session:
        before = session.todos
        _applied(before, session.update_text(todo_id, text, parent_path), "update text")
        print_success("Updated" if text.strip() else "Deleted")


@app.command("done")
def done(
    path: str = typer.Argument(..., help="Todo path"),
    data_dir: Optional[Path] = data_dir_option,
    api_url: Optional[str] = api_url_option,
) -> None:
    """Toggle a todo's completion."""
    todo_id, parent_path = split_path(parse_todo_path(path))
    with open_session(get_settings(data_dir, api_url)) as session:
        before = session.todos
        after = session.toggle_todo(todo_id, parent_path)
        _applied(before, after, "toggle todo")
        todo = require_todo(after, [*parent_path, todo_id])
        print_success(f"{'Completed' if todo.completed else 'Reopened'}: {todo.text}")


@app.command("rm")
def remove(
    path: str = typer.Argument(..., help="Todo path"),
    data_dir: Optional[Path] = data_dir_option,
    api_url: Optional[str] = api_url_option,
) -> None:
    """Delete a todo and its subtasks."""
    todo_id, parent_path = split_path(parse_todo_path(path))
    with open_session(get_settings(data_dir, api_url)) as session:
        before = session.todos
        _applied(before, session.delete_todo(todo_id, parent_path), "delete todo")
        print_success(f"Deleted {path}")


@app.command("copy")
def copy(
    path: str = typer.Argument(..., help="Todo path"),
    data_dir: Optional[Path] = data_dir_option,
    api_url: Optional[str] = api_url_option,
) -> None:
    """Duplicate a todo (with its subtasks) right after itself."""
    todo_id, parent_path = split_path(parse_todo_path(path))
    with open_session(get_settings(data_dir, api_url)) as session:
        before = session.todos
        _applied(before, session.copy_todo(todo_id, parent_path), "copy todo")
        print_success(f"Copied {path}")


@app.command("move")
def move(
    path: str = typer.Argument(..., help="Todo path"),
    over: int = typer.Argument(..., help="Id of the sibling whose position to take"),
    data_dir: Optional[Path] = data_dir_option,
    api_url: Optional[str] = api_url_option,
) -> None:
    """Move a todo to a sibling's position."""
    todo_id, parent_path = split_path(parse_todo_path(path))
    with open_session(get_settings(data_dir, api_url)) as session:
        before = session.todos
        _applied(before, session.reorder(todo_id, over, parent_path), "move todo")
        print_success(f"Moved {path}")


@app.command("focus")
def focus(
    path: str = typer.Argument(..., help="Todo path"),
    data_dir: Optional[Path] = data_dir_option,
    api_url: Optional[str] = api_url_option,
) -> None:
    """Add a todo to the focus list, or remove it (max 5)."""
    todo_id, parent_path = split_path(parse_todo_path(path))
    with open_session(get_settings(data_dir, api_url)) as session:
        before = session.todos
        _applied(before, session.toggle_focus(todo_id, parent_path), "toggle focus")
        todo = require_todo(session.todos, [*parent_path, todo_id])
        if todo.focus_priority is None:
            print_success(f"Unfocused: {todo.text}")
        else:
            print_success(f"Focus #{todo.focus_priority}: {todo.text}")


@app.command("due")
def due(
    path: str = typer.Argument(..., help="Todo path"),
    due_date: Optional[str] = typer.Argument(None, help="YYYY-MM-DD, or 'today'"),
    clear: bool = typer.Option(False, "--clear", help="Remove the due date"),
    data_dir: Optional[Path] = data_dir_option,
    api_url: Optional[str] = api_url_option,
) -> None:
    """Set or clear a todo's due date."""
    if not clear and not due_date:
        raise typer.BadParameter("Give a date or --clear")
    value: str | None = None
    if not clear:
        value = date.today().isoformat() if due_date == "today" else due_date
        try:
            date.fromisoformat(value)
        except ValueError as e:
            raise typer.BadParameter(f"Invalid date: {due_date}") from e

    todo_id, parent_path = split_path(parse_todo_path(path))
    with open_session(get_settings(data_dir, api_url)) as session:
        before = session.todos
        _applied(before, session.update_due_date(todo_id, value, parent_path), "set due date")
        print_success(f"Due date {'cleared' if value is None else 'set to ' + value}")


@app.command("difficulty")
def difficulty(
    path: str = typer.Argument(..., help="Todo path"),
    level: Optional[Difficulty] = typer.Argument(None, help="easy, normal or hard; cycles when omitted"),
    data_dir: Optional[Path] = data_dir_option,
    api_url: Optional[str] = api_url_option,
) -> None:
    """Set or cycle a todo's difficulty."""
    full_path = parse_todo_path(path)
    todo_id, parent_path = split_path(full_path)
    with open_session(get_settings(data_dir, api_url)) as session:
        todo = require_todo(session.todos, full_path)
        value = level if level is not None else next_difficulty(todo.difficulty)
        before = session.todos
        _applied(before, session.update_difficulty(todo_id, value, parent_path), "set difficulty")
        print_success(f"Difficulty: {value.value if value else 'none'}")


@app.command("clear")
def clear(
    data_dir: Optional[Path] = data_dir_option,
    api_url: Optional[str] = api_url_option,
) -> None:
    """Delete every completed todo."""
    with open_session(get_settings(data_dir, api_url)) as session:
        removed = session.stats().completed
        session.clear_completed()
        print_success(f"Cleared {removed} completed todo(s)")


@app.command("stats")
def stats(
    data_dir: Optional[Path] = data_dir_option,
    api_url: Optional[str] = api_url_option,
) -> None:
    """Show tree statistics."""
    with open_session(get_settings(data_dir, api_url)) as session:
        summary = session.stats()

    table = Table(title="Todo stats", show_header=False)
    table.add_row("Total", str(summary.total))
    table.add_row("Completed", f"{summary.completed} ({summary.progress_percent}%)")
    table.add_row("Completed today", str(summary.today_completed))
    table.add_row("Focused", str(summary.focus_count))
    table.add_row("Next actions", str(summary.next_actions_count))
    table.add_row("Max depth", str(summary.max_depth))
    console.print(table)
