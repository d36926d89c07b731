"""Validation for todo operations and for stored todo data.

All checks return ``Result`` values rather than raising: ``Ok`` carries the
validated value (or None), ``Err`` a message suitable for a log line or an
HTTP error body.
"""

from typing import Any

from pydantic import TypeAdapter, ValidationError

from focustree.domain.shared.result import Err, Ok, Result

from .models import MAX_DEPTH, MAX_SUBTASKS_PER_TODO, MAX_TEXT_LENGTH, Todo, TodoPath
from .traversal import find_by_path

_TODO_LIST = TypeAdapter(list[Todo])


def validate_add_subtask(tree: list[Todo], parent_path: TodoPath) -> Result[None, str]:
    """Check that a subtask can be added under ``parent_path``."""
    if len(parent_path) >= MAX_DEPTH:
        return Err(f"Maximum nesting depth of {MAX_DEPTH} levels reached")

    found = find_by_path(tree, parent_path)
    if isinstance(found, Err):
        return Err("Parent todo not found")

    if len(found.value.subtasks) >= MAX_SUBTASKS_PER_TODO:
        return Err(f"Maximum of {MAX_SUBTASKS_PER_TODO} subtasks per todo reached")

    return Ok(None)


def validate_path(tree: list[Todo], path: TodoPath) -> Result[Todo, str]:
    if not path:
        return Err("Path cannot be empty")
    found = find_by_path(tree, path)
    if isinstance(found, Err):
        return Err("Todo not found at specified path")
    return found


def validate_parent_path(tree: list[Todo], parent_path: TodoPath) -> Result[None, str]:
    """Check each id of a parent path, reporting the first failing level.

    An empty parent path (top level) is always valid.
    """
    level = tree
    for depth, todo_id in enumerate(parent_path):
        todo = next((t for t in level if t.id == todo_id), None)
        if todo is None:
            return Err(f"Parent todo with id {todo_id} not found at level {depth}")
        level = todo.subtasks
    return Ok(None)


def validate_todo_text(text: str) -> Result[str, str]:
    """Validate user-entered text, returning it trimmed."""
    trimmed = text.strip()
    if not trimmed:
        return Err("Todo text cannot be empty")
    if len(trimmed) > MAX_TEXT_LENGTH:
        return Err(f"Todo text cannot exceed {MAX_TEXT_LENGTH} characters")
    return Ok(trimmed)


def sanitize_todo_text(text: str) -> str:
    """Trim, strip angle brackets and truncate to the maximum length."""
    return text.strip().replace("<", "").replace(">", "")[:MAX_TEXT_LENGTH]


def would_create_circular_reference(parent_path: TodoPath, todo_id: int) -> bool:
    """Moving ``todo_id`` under ``parent_path`` would nest it inside itself."""
    return todo_id in parent_path


def has_duplicate_ids(tree: list[Todo]) -> bool:
    """Detect an id that appears more than once in the tree."""
    seen: set[int] = set()

    def visit(todos: list[Todo]) -> bool:
        for todo in todos:
            if todo.id in seen:
                return True
            seen.add(todo.id)
            if visit(todo.subtasks):
                return True
        return False

    return visit(tree)


def _check_records(todos: list[Todo]) -> str | None:
    for todo in todos:
        if not todo.text.strip():
            return f"Todo {todo.id} has empty text"
        problem = _check_records(todo.subtasks)
        if problem:
            return problem
    return None


def validate_todos(data: Any) -> Result[list[Todo], str]:
    """Parse and validate a raw JSON payload as a whole todo tree.

    Enforces the store schema: required id/text/completed/createdAt,
    non-empty text, focus priority within 1..5, well-formed optional
    fields, recursive subtasks, and unique ids.
    """
    try:
        todos = _TODO_LIST.validate_python(data)
    except ValidationError as e:
        return Err(_format_validation_error(e))

    for todo_json in _iter_records(data):
        missing = [key for key in ("completed", "createdAt") if key not in todo_json]
        if missing:
            return Err(f"Todo {todo_json.get('id')} is missing {', '.join(missing)}")

    problem = _check_records(todos)
    if problem:
        return Err(problem)
    if has_duplicate_ids(todos):
        return Err("Todo ids must be unique across the tree")
    return Ok(todos)


def _iter_records(data: list):
    for record in data:
        if not isinstance(record, dict):
            continue
        yield record
        yield from _iter_records(record.get("subtasks") or [])


def _format_validation_error(error: ValidationError) -> str:
    first = error.errors()[0]
    location = ".".join(str(part) for part in first["loc"])
    return f"{location}: {first['msg']}" if location else first["msg"]
