"""Shared fixtures for the focustree test suite."""

import pytest

from focustree.config import Settings
from focustree.domain.todo import Todo, flatten

CREATED = "2024-01-01T09:00:00.000Z"


def assert_parents_derived(tree: list[Todo]) -> None:
    """Every parent is completed exactly when all of its subtasks are."""
    for flat in flatten(tree):
        todo = flat.todo
        if todo.subtasks:
            assert todo.completed == all(s.completed for s in todo.subtasks), flat.path


def make_todo(todo_id: int, text: str | None = None, subtasks: list[Todo] | None = None, **fields) -> Todo:
    """Build a todo with a fixed creation timestamp."""
    return Todo(
        id=todo_id,
        text=text or f"Todo {todo_id}",
        created_at=CREATED,
        subtasks=subtasks or [],
        **fields,
    )


@pytest.fixture
def tree() -> list[Todo]:
    """A small tree:

    1 Project
      2 Design
        4 Sketch
        5 Review
      3 Build
    6 Groceries
    """
    return [
        make_todo(
            1,
            "Project",
            [
                make_todo(2, "Design", [make_todo(4, "Sketch"), make_todo(5, "Review")]),
                make_todo(3, "Build"),
            ],
        ),
        make_todo(6, "Groceries"),
    ]


@pytest.fixture
def deep_tree() -> list[Todo]:
    """A single chain five levels deep: 1 > 2 > 3 > 4 > 5."""
    node = make_todo(5, "Level 5")
    for todo_id in range(4, 0, -1):
        node = make_todo(todo_id, f"Level {todo_id}", [node])
    return [node]


@pytest.fixture
def data_dir(tmp_path):
    return tmp_path / "data"


@pytest.fixture
def settings(data_dir) -> Settings:
    return Settings(data_dir=data_dir, debounce_delay=0)


@pytest.fixture(autouse=True)
def isolated_home(tmp_path, monkeypatch):
    """Keep ~/.focustree and environment overrides out of the tests."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.delenv("FOCUSTREE_DATA_DIR", raising=False)
    monkeypatch.delenv("FOCUSTREE_DEBOUNCE", raising=False)
    monkeypatch.delenv("FOCUSTREE_LOG_LEVEL", raising=False)
    return home
