"""Tests for the command-line interface."""

import json

import pytest
from typer.testing import CliRunner

from focustree import __version__
from focustree.interfaces.cli import app

runner = CliRunner()


@pytest.fixture
def cli(data_dir):
    def invoke(*args: str):
        return runner.invoke(app, [*args, "--data-dir", str(data_dir)])

    return invoke


def stored_todos(data_dir) -> list[dict]:
    return json.loads((data_dir / "todos.json").read_text())


def test_version():
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_add_and_list(cli, data_dir):
    result = cli("todo", "add", "Write report")
    assert result.exit_code == 0, result.output
    assert "Added" in result.output

    todo_id = stored_todos(data_dir)[0]["id"]
    listing = cli("todo", "list")
    assert "Write report" in listing.output
    assert str(todo_id) in listing.output


def test_add_recurring(cli, data_dir):
    cli("todo", "add", "Water plants every 3 days")
    todo = stored_todos(data_dir)[0]
    assert todo["text"] == "Water plants"
    assert todo["recurringPattern"]["type"] == "custom"
    assert todo["recurringPattern"]["interval"] == 3


def test_subtask_completion_completes_parent(cli, data_dir):
    cli("todo", "add", "Project")
    parent = stored_todos(data_dir)[0]["id"]
    result = cli("todo", "sub", str(parent), "Only step")
    assert result.exit_code == 0, result.output

    child = stored_todos(data_dir)[0]["subtasks"][0]["id"]
    result = cli("todo", "done", f"{parent}.{child}")
    assert "Completed: Only step" in result.output

    stored = stored_todos(data_dir)[0]
    assert stored["completed"] is True


def test_unknown_path_fails(cli):
    result = cli("todo", "done", "42")
    assert result.exit_code == 1
    assert "Could not toggle todo" in result.output


def test_malformed_path_is_a_usage_error(cli):
    result = cli("todo", "done", "1.x")
    assert result.exit_code == 2


def test_focus_and_clear(cli, data_dir):
    cli("todo", "add", "First")
    cli("todo", "add", "Second")
    first, second = (t["id"] for t in stored_todos(data_dir))

    assert "Focus #1: First" in cli("todo", "focus", str(first)).output
    assert "Focus #2: Second" in cli("todo", "focus", str(second)).output

    cli("todo", "done", str(first))
    assert [t.get("focusPriority") for t in stored_todos(data_dir)] == [None, 1]

    result = cli("todo", "clear")
    assert "Cleared 1 completed todo(s)" in result.output
    assert [t["text"] for t in stored_todos(data_dir)] == ["Second"]


def test_due_and_difficulty(cli, data_dir):
    cli("todo", "add", "Taxes")
    todo_id = str(stored_todos(data_dir)[0]["id"])

    assert "Due date set to 2024-04-15" in cli("todo", "due", todo_id, "2024-04-15").output
    assert "Difficulty: easy" in cli("todo", "difficulty", todo_id).output
    assert "Difficulty: hard" in cli("todo", "difficulty", todo_id, "hard").output

    stored = stored_todos(data_dir)[0]
    assert stored["dueDate"] == "2024-04-15"
    assert stored["difficulty"] == "hard"

    cli("todo", "due", todo_id, "--clear")
    assert "dueDate" not in stored_todos(data_dir)[0]
    assert cli("todo", "due", todo_id, "someday").exit_code == 2


def test_edit_blank_deletes(cli, data_dir):
    cli("todo", "add", "Temporary")
    todo_id = str(stored_todos(data_dir)[0]["id"])
    result = cli("todo", "edit", todo_id, "  ")
    assert "Deleted" in result.output
    assert stored_todos(data_dir) == []


def test_copy_move_and_stats(cli, data_dir):
    cli("todo", "add", "A")
    cli("todo", "add", "B")
    a, b = (t["id"] for t in stored_todos(data_dir))
    cli("todo", "copy", str(a))
    cli("todo", "move", str(b), str(a))
    assert [t["text"] for t in stored_todos(data_dir)] == ["B", "A", "A"]

    result = cli("todo", "stats")
    assert result.exit_code == 0
    assert "Total" in result.output


def test_timer_start_stop_today(cli, data_dir):
    cli("todo", "add", "Deep work")
    todo_id = str(stored_todos(data_dir)[0]["id"])

    assert "Timer started: Deep work" in cli("timer", "start", todo_id).output
    assert "Running: Deep work" in cli("timer", "today").output
    assert "Stopped 'Deep work' after" in cli("timer", "stop").output
    assert cli("timer", "stop").exit_code == 1

    sessions = json.loads((data_dir / "timer-sessions.json").read_text())
    assert len(sessions) == 1
    assert "endedAt" in sessions[0]


def test_timebox_add_list_rm(cli, data_dir):
    cli("todo", "add", "Email")
    todo_id = str(stored_todos(data_dir)[0]["id"])

    result = cli("timebox", "add", todo_id, "09:00", "--date", "2024-03-01", "-m", "45")
    assert "Scheduled 'Email' 09:00-09:45 on 2024-03-01" in result.output
    assert "Email" in cli("timebox", "list", "--date", "2024-03-01").output

    item_id = json.loads((data_dir / "timeboxes.json").read_text())[0]["id"]
    assert f"Removed {item_id}" in cli("timebox", "rm", item_id).output
    assert cli("timebox", "rm", item_id).exit_code == 1
    assert "Nothing scheduled" in cli("timebox", "list", "--date", "2024-03-01").output


def test_invalid_timebox_time(cli, data_dir):
    cli("todo", "add", "Email")
    todo_id = str(stored_todos(data_dir)[0]["id"])
    result = cli("timebox", "add", todo_id, "9am")
    assert result.exit_code == 1
    assert "Invalid timebox" in result.output


def test_ls_shortcut_uses_environment_data_dir(cli, data_dir, monkeypatch):
    cli("todo", "add", "From env")
    monkeypatch.setenv("FOCUSTREE_DATA_DIR", str(data_dir))
    result = runner.invoke(app, ["ls"])
    assert result.exit_code == 0, result.output
    assert "From env" in result.output
