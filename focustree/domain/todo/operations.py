"""Pure mutation operations on the todo tree.

Every function takes the current tree and returns a new one; the input is
never mutated. Bad addressing (stale path, unknown id, depth limit) is not
an exception here: the operation is rejected, a warning is logged and the
input tree is returned unchanged.

Callers are responsible for follow-up bookkeeping:
- ``propagate_completion`` after toggle / delete, and after inserts
  below a nested parent (only the direct parent is reopened here)
- ``reorder_focus_priorities`` after toggle / delete / clear
"""

import itertools
import logging
import time
from collections.abc import Iterator
from typing import Any

from .models import (
    MAX_DEPTH,
    MAX_SUBTASKS_PER_TODO,
    Difficulty,
    RecurringPattern,
    Todo,
    TodoPath,
    is_iso_date,
    now_iso,
)
from .traversal import (
    get_children,
    is_valid_path,
    max_id,
    update_at_path,
    update_children,
)

logger = logging.getLogger(__name__)

IdSource = Iterator[int]


def new_id_source(tree: list[Todo]) -> IdSource:
    """Yield fresh ids, unique against every id already in ``tree``.

    Ids start above both the tree's largest id and the current epoch
    milliseconds, then increase by one per id drawn.
    """
    start = max(max_id(tree) + 1, int(time.time() * 1000))
    return itertools.count(start)


def create_todo(
    text: str,
    *,
    todo_id: int | None = None,
    is_editing: bool = False,
    now: str | None = None,
) -> Todo:
    """Create a new incomplete todo with trimmed text."""
    return Todo(
        id=todo_id if todo_id is not None else int(time.time() * 1000),
        text=text.strip(),
        completed=False,
        created_at=now or now_iso(),
        subtasks=[],
        is_editing=is_editing,
    )


def _full_path(todo_id: int, parent_path: TodoPath | None) -> TodoPath:
    return [*(parent_path or []), todo_id]


def _set_completed_recursive(
    subtasks: list[Todo],
    completed: bool,
    completed_at: str | None,
) -> list[Todo]:
    return [
        subtask.model_copy(
            update={
                "completed": completed,
                "completed_at": completed_at,
                "subtasks": _set_completed_recursive(
                    subtask.subtasks, completed, completed_at
                ),
            }
        )
        for subtask in subtasks
    ]


# =============================================================================
# Completion
# =============================================================================


def toggle_completion(
    tree: list[Todo],
    todo_id: int,
    parent_path: TodoPath | None = None,
    now: str | None = None,
) -> list[Todo]:
    """Flip ``completed`` on a todo and cascade it to the whole subtree.

    Completing stamps the todo and every descendant with the same
    ``completed_at``; un-completing clears it everywhere. Ancestors are
    not touched.
    """
    path = _full_path(todo_id, parent_path)
    if not is_valid_path(tree, path):
        logger.warning(f"Cannot toggle todo: invalid path {path}")
        return tree

    def toggle(todo: Todo) -> Todo:
        completed = not todo.completed
        completed_at = (now or now_iso()) if completed else None
        return todo.model_copy(
            update={
                "completed": completed,
                "completed_at": completed_at,
                "subtasks": _set_completed_recursive(
                    todo.subtasks, completed, completed_at
                ),
            }
        )

    return update_at_path(tree, path, toggle)


# =============================================================================
# Structure: delete / add / copy / reorder
# =============================================================================


def delete_todo(
    tree: list[Todo],
    todo_id: int,
    parent_path: TodoPath | None = None,
) -> list[Todo]:
    """Remove a todo (and its subtree) from its parent or the top level."""
    siblings = get_children(tree, parent_path or [])
    if siblings is None:
        logger.warning(f"Cannot delete todo {todo_id}: invalid parent path {parent_path}")
        return tree
    if not any(todo.id == todo_id for todo in siblings):
        logger.warning(f"Cannot delete todo {todo_id}: not found")
        return tree

    return update_children(
        tree,
        parent_path or [],
        lambda todos: [todo for todo in todos if todo.id != todo_id],
    )


def add_todo(tree: list[Todo], todo: Todo) -> list[Todo]:
    """Append a top-level todo."""
    return [*tree, todo]


def add_subtask(
    tree: list[Todo],
    parent_path: TodoPath,
    text: str,
    start_editing: bool = False,
    *,
    ids: IdSource | None = None,
    now: str | None = None,
) -> list[Todo]:
    """Append a new subtask to the todo at ``parent_path``.

    Rejected when the new child would sit beyond the depth limit, when the
    parent does not resolve, or when the parent is full. A completed parent
    is flipped back to incomplete since it now has an incomplete child.
    """
    if not parent_path:
        logger.warning("Cannot add subtask: parent path is required")
        return tree
    if len(parent_path) >= MAX_DEPTH:
        logger.warning(f"Cannot add subtask: maximum nesting depth ({MAX_DEPTH}) reached")
        return tree
    parent_children = get_children(tree, parent_path)
    if parent_children is None:
        logger.warning(f"Cannot add subtask: invalid parent path {parent_path}")
        return tree
    if len(parent_children) >= MAX_SUBTASKS_PER_TODO:
        logger.warning(
            f"Cannot add subtask: maximum of {MAX_SUBTASKS_PER_TODO} subtasks reached"
        )
        return tree

    ids = ids or new_id_source(tree)
    subtask = create_todo(text, todo_id=next(ids), is_editing=start_editing, now=now)

    def append(parent: Todo) -> dict[str, Any]:
        update: dict[str, Any] = {"subtasks": [*parent.subtasks, subtask]}
        if parent.completed:
            update["completed"] = False
            update["completed_at"] = None
        return update

    return update_at_path(tree, parent_path, append)


def add_sibling(
    tree: list[Todo],
    todo_id: int,
    parent_path: TodoPath | None = None,
    *,
    ids: IdSource | None = None,
    now: str | None = None,
) -> list[Todo]:
    """Insert a blank todo in edit mode right after ``todo_id``.

    The blank text is the delete-on-commit sentinel: if the user commits
    it empty, the session deletes it.
    """
    parent_path = parent_path or []
    if len(parent_path) >= MAX_DEPTH:
        logger.warning(f"Cannot add sibling: maximum nesting depth ({MAX_DEPTH}) reached")
        return tree
    siblings = get_children(tree, parent_path)
    if siblings is None:
        logger.warning(f"Cannot add sibling: invalid parent path {parent_path}")
        return tree
    index = next((i for i, todo in enumerate(siblings) if todo.id == todo_id), -1)
    if index == -1:
        logger.warning(f"Cannot add sibling: todo {todo_id} not found")
        return tree

    ids = ids or new_id_source(tree)
    blank = create_todo("", todo_id=next(ids), is_editing=True, now=now)

    def insert(todos: list[Todo]) -> list[Todo]:
        return [*todos[: index + 1], blank, *todos[index + 1 :]]

    return _reopen_parent(update_children(tree, parent_path, insert), parent_path)


def _reopen_parent(tree: list[Todo], parent_path: TodoPath) -> list[Todo]:
    """Flip a completed parent back to incomplete after it gained an open child."""
    if not parent_path:
        return tree
    return update_at_path(
        tree,
        parent_path,
        lambda parent: {"completed": False, "completed_at": None}
        if parent.completed
        else parent,
    )


def clone_todo(todo: Todo, ids: IdSource, now: str | None = None) -> Todo:
    """Deep-copy a todo with fresh ids and cleared completion at every level."""
    return Todo(
        id=next(ids),
        text=todo.text,
        completed=False,
        created_at=now or now_iso(),
        completed_at=None,
        subtasks=[clone_todo(subtask, ids, now) for subtask in todo.subtasks],
        due_date=todo.due_date,
        difficulty=todo.difficulty,
    )


def copy_todo(
    tree: list[Todo],
    todo_id: int,
    parent_path: TodoPath | None = None,
    *,
    ids: IdSource | None = None,
    now: str | None = None,
) -> list[Todo]:
    """Insert a deep copy of a todo immediately after the original.

    The copy is always incomplete, so a completed parent is reopened.
    """
    parent_path = parent_path or []
    siblings = get_children(tree, parent_path)
    if siblings is None:
        logger.warning(f"Cannot copy todo: invalid parent path {parent_path}")
        return tree
    index = next((i for i, todo in enumerate(siblings) if todo.id == todo_id), -1)
    if index == -1:
        logger.warning(f"Cannot copy todo: todo {todo_id} not found")
        return tree

    ids = ids or new_id_source(tree)
    copied = clone_todo(siblings[index], ids, now)

    def insert(todos: list[Todo]) -> list[Todo]:
        return [*todos[: index + 1], copied, *todos[index + 1 :]]

    return _reopen_parent(update_children(tree, parent_path, insert), parent_path)


def reorder(
    tree: list[Todo],
    active_id: int,
    over_id: int,
    parent_path: TodoPath | None = None,
) -> list[Todo]:
    """Move ``active_id`` to the index currently held by ``over_id``.

    Remove-then-insert semantics, within one sibling list. Equal ids or
    ids missing from that list leave the tree unchanged.
    """
    if active_id == over_id:
        return tree
    parent_path = parent_path or []
    siblings = get_children(tree, parent_path)
    if siblings is None:
        logger.warning(f"Cannot reorder: invalid parent path {parent_path}")
        return tree

    ids = [todo.id for todo in siblings]
    if active_id not in ids or over_id not in ids:
        return tree
    active_index = ids.index(active_id)
    over_index = ids.index(over_id)

    def move(todos: list[Todo]) -> list[Todo]:
        items = list(todos)
        moved = items.pop(active_index)
        items.insert(over_index, moved)
        return items

    return update_children(tree, parent_path, move)


def clear_completed(tree: list[Todo]) -> list[Todo]:
    """Remove every completed todo at every level."""
    return [
        todo.model_copy(update={"subtasks": clear_completed(todo.subtasks)})
        for todo in tree
        if not todo.completed
    ]


# =============================================================================
# Field updates
# =============================================================================


def _update_field(
    tree: list[Todo],
    todo_id: int,
    parent_path: TodoPath | None,
    update: dict[str, Any],
    action: str,
) -> list[Todo]:
    path = _full_path(todo_id, parent_path)
    if not is_valid_path(tree, path):
        logger.warning(f"Cannot {action}: invalid path {path}")
        return tree
    return update_at_path(tree, path, lambda todo: update)


def update_text(
    tree: list[Todo],
    todo_id: int,
    text: str,
    parent_path: TodoPath | None = None,
) -> list[Todo]:
    """Replace a todo's text (trimmed). Blank text is handled by the caller."""
    return _update_field(tree, todo_id, parent_path, {"text": text.strip()}, "update text")


def set_editing(
    tree: list[Todo],
    todo_id: int,
    is_editing: bool,
    parent_path: TodoPath | None = None,
) -> list[Todo]:
    return _update_field(
        tree, todo_id, parent_path, {"is_editing": is_editing}, "set editing"
    )


def update_due_date(
    tree: list[Todo],
    todo_id: int,
    due_date: str | None,
    parent_path: TodoPath | None = None,
) -> list[Todo]:
    """Set or clear (``None``) a todo's due date (``YYYY-MM-DD``)."""
    if due_date is not None and not is_iso_date(due_date):
        logger.warning(f"Cannot update due date: invalid date {due_date!r}")
        return tree
    return _update_field(
        tree, todo_id, parent_path, {"due_date": due_date}, "update due date"
    )


def update_difficulty(
    tree: list[Todo],
    todo_id: int,
    difficulty: Difficulty | None,
    parent_path: TodoPath | None = None,
) -> list[Todo]:
    return _update_field(
        tree, todo_id, parent_path, {"difficulty": difficulty}, "update difficulty"
    )


def next_difficulty(current: Difficulty | None) -> Difficulty | None:
    """Cycle none -> easy -> normal -> hard -> none."""
    order = [None, Difficulty.EASY, Difficulty.NORMAL, Difficulty.HARD]
    return order[(order.index(current) + 1) % len(order)]


def update_recurring(
    tree: list[Todo],
    todo_id: int,
    pattern: RecurringPattern | None,
    parent_path: TodoPath | None = None,
) -> list[Todo]:
    """Attach or clear a recurrence rule; ``is_recurring`` follows it."""
    update: dict[str, Any] = {
        "recurring_pattern": pattern,
        "is_recurring": True if pattern else None,
    }
    if pattern and pattern.next_due_date:
        update["due_date"] = pattern.next_due_date
    return _update_field(tree, todo_id, parent_path, update, "update recurrence")


def batch_update(
    tree: list[Todo],
    updates: list[tuple[TodoPath, dict[str, Any]]],
) -> list[Todo]:
    """Apply field updates at several paths, in order."""
    result = tree
    for path, fields in updates:
        result = update_at_path(result, path, lambda todo, fields=fields: fields)
    return result
