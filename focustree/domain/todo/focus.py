"""Focus-priority bookkeeping.

Up to five todos anywhere in the tree can hold a focus priority. The
priorities held must always be exactly 1..N with no gaps or duplicates.
"""

import logging
import math

from .models import MAX_FOCUS, Todo, TodoPath, TodoWithPath
from .operations import batch_update
from .traversal import fold_tree, update_at_path

logger = logging.getLogger(__name__)


def get_focus_todos(tree: list[Todo]) -> list[TodoWithPath]:
    """Every focused todo with its path, ordered by priority ascending."""

    def collect(acc: list[TodoWithPath], todo: Todo, path: TodoPath) -> list[TodoWithPath]:
        if todo.focus_priority is not None:
            acc.append(TodoWithPath(todo=todo, path=path))
        return acc

    focused = fold_tree(tree, [], collect)
    return sorted(focused, key=lambda item: item.todo.focus_priority)


def focus_count(tree: list[Todo]) -> int:
    return len(get_focus_todos(tree))


def reorder_focus_priorities(tree: list[Todo]) -> list[Todo]:
    """Drop focus from completed todos and renumber the rest 1..N.

    Relative order among the remaining focused todos is preserved.
    """
    focused = get_focus_todos(tree)
    updates: list[tuple[TodoPath, dict]] = [
        (item.path, {"focus_priority": None}) for item in focused if item.todo.completed
    ]
    remaining = [item for item in focused if not item.todo.completed]
    updates.extend(
        (item.path, {"focus_priority": rank})
        for rank, item in enumerate(remaining, start=1)
        if item.todo.focus_priority != rank
    )
    if not updates:
        return tree
    return batch_update(tree, updates)


def toggle_focus(
    tree: list[Todo],
    todo_id: int,
    parent_path: TodoPath | None = None,
) -> list[Todo]:
    """Add a todo to the end of the focus ranking, or remove it.

    Removing renumbers the remaining holders to close the gap. Adding is
    rejected when ``MAX_FOCUS`` todos are already focused.
    """
    path = [*(parent_path or []), todo_id]
    focused = get_focus_todos(tree)

    if any(item.path == path for item in focused):
        cleared = update_at_path(tree, path, lambda todo: {"focus_priority": None})
        return reorder_focus_priorities(cleared)

    if len(focused) >= MAX_FOCUS:
        logger.warning(f"Maximum {MAX_FOCUS} focus tasks allowed")
        return tree

    updated = update_at_path(tree, path, lambda todo: {"focus_priority": len(focused) + 1})
    if updated is tree:
        logger.warning(f"Cannot toggle focus: invalid path {path}")
    return updated


def extract_focus_flat(tree: list[Todo]) -> list[Todo]:
    """Focused todos as a flat list, ordered by priority."""
    return [item.todo for item in get_focus_todos(tree)]


def extract_focus_subtree(tree: list[Todo]) -> list[Todo]:
    """Read-only view containing only focused todos and their ancestors.

    A focused todo keeps its full subtree. An unfocused ancestor is kept
    with ``focus_priority`` cleared and only the children that lead to a
    focused todo. Top-level entries are ordered by focus priority, with
    ancestor-only entries after them in tree order.
    """

    def process(todos: list[Todo]) -> list[Todo]:
        kept: list[Todo] = []
        for todo in todos:
            if todo.focus_priority is not None:
                kept.append(todo)
            elif todo.subtasks:
                focused_children = process(todo.subtasks)
                if focused_children:
                    kept.append(
                        todo.model_copy(
                            update={"focus_priority": None, "subtasks": focused_children}
                        )
                    )
        return kept

    def priority(todo: Todo) -> float:
        return todo.focus_priority if todo.focus_priority is not None else math.inf

    return sorted(process(tree), key=priority)
