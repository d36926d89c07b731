"""Pure tree traversal and path-addressing combinators.

All functions in this module are pure - no I/O, no side effects.
A tree is an ordered list of top-level todos; a path is the list of ids
from a top-level todo down to (and including) the addressed todo.
"""

from collections.abc import Callable, Iterable
from typing import Any, TypeVar

from focustree.domain.shared.result import Err, Ok, Result

from .models import MAX_DEPTH, FlatTodo, Todo, TodoPath, TodoWithPath

T = TypeVar("T")

Visitor = Callable[[Todo, TodoPath, Todo | None], None]
Predicate = Callable[[Todo, TodoPath], bool]
Transform = Callable[[Todo], Todo | dict[str, Any]]


# =============================================================================
# Fundamental Operations
# =============================================================================


def fold_tree(
    tree: list[Todo],
    initial: T,
    f: Callable[[T, Todo, TodoPath], T],
) -> T:
    """Fold over all todos in the tree with their full paths.

    Visits every todo in depth-first pre-order, children in stored order.

    Args:
        tree: The top-level todos
        initial: Starting accumulator value
        f: Function (accumulator, todo, path) -> new_accumulator

    Returns:
        Final accumulated value after visiting all todos
    """

    def fold_node(acc: T, todo: Todo, parent_path: TodoPath) -> T:
        current_path = parent_path + [todo.id]
        acc = f(acc, todo, current_path)
        for child in todo.subtasks:
            acc = fold_node(acc, child, current_path)
        return acc

    result = initial
    for todo in tree:
        result = fold_node(result, todo, [])
    return result


def traverse(
    tree: list[Todo],
    visitor: Visitor,
    max_depth: int = MAX_DEPTH,
    include_completed: bool = True,
) -> None:
    """Walk the tree depth-first, pre-order, calling ``visitor`` per todo.

    The visitor receives the todo, the path of its parent (empty for
    top-level todos) and the parent todo itself. Levels at or beyond
    ``max_depth`` are not visited. With ``include_completed=False``,
    completed todos and their subtrees are skipped.
    """

    def walk(todos: list[Todo], parent_path: TodoPath, parent: Todo | None) -> None:
        if len(parent_path) >= max_depth:
            return
        for todo in todos:
            if not include_completed and todo.completed:
                continue
            visitor(todo, parent_path, parent)
            if todo.subtasks:
                walk(todo.subtasks, parent_path + [todo.id], todo)

    walk(tree, [], None)


def find_by_path(tree: list[Todo], path: TodoPath) -> Result[Todo, str]:
    """Resolve a path id-by-id.

    Returns:
        Ok(todo) for the addressed todo, or Err(message) when the path is
        empty or any step has no matching child.
    """
    if not path:
        return Err("Path cannot be empty")

    level = tree
    found: Todo | None = None
    for depth, todo_id in enumerate(path):
        found = next((todo for todo in level if todo.id == todo_id), None)
        if found is None:
            return Err(f"Todo {todo_id} not found at level {depth}")
        level = found.subtasks
    return Ok(found)


def is_valid_path(tree: list[Todo], path: TodoPath) -> bool:
    """Check that every id in the path resolves."""
    return isinstance(find_by_path(tree, path), Ok)


def update_at_path(tree: list[Todo], path: TodoPath, transform: Transform) -> list[Todo]:
    """Replace the todo at ``path`` with ``transform(todo)``.

    The transform may return a full Todo or a dict of field updates.
    Only the ancestor chain is rebuilt; every todo off the path is reused
    as-is. An empty or unresolved path returns ``tree`` unchanged.
    """
    if not is_valid_path(tree, path):
        return tree

    def apply(todo: Todo) -> Todo:
        updated = transform(todo)
        if isinstance(updated, dict):
            return todo.model_copy(update=updated)
        return updated

    def rebuild(todos: list[Todo], remaining: TodoPath) -> list[Todo]:
        target_id, rest = remaining[0], remaining[1:]
        result = []
        for todo in todos:
            if todo.id != target_id:
                result.append(todo)
            elif not rest:
                result.append(apply(todo))
            else:
                result.append(
                    todo.model_copy(update={"subtasks": rebuild(todo.subtasks, rest)})
                )
        return result

    return rebuild(tree, path)


def update_children(
    tree: list[Todo],
    parent_path: TodoPath,
    f: Callable[[list[Todo]], list[Todo]],
) -> list[Todo]:
    """Apply ``f`` to the child list under ``parent_path``.

    An empty parent path addresses the top-level list itself.
    """
    if not parent_path:
        return f(tree)
    return update_at_path(
        tree,
        parent_path,
        lambda parent: {"subtasks": f(parent.subtasks)},
    )


def remove_at_path(tree: list[Todo], path: TodoPath) -> list[Todo]:
    """Remove the todo at ``path``; unresolved paths leave the tree as-is."""
    if not is_valid_path(tree, path):
        return tree
    target_id = path[-1]
    return update_children(
        tree,
        path[:-1],
        lambda todos: [todo for todo in todos if todo.id != target_id],
    )


# =============================================================================
# Queries
# =============================================================================


def get_children(tree: list[Todo], parent_path: TodoPath) -> list[Todo] | None:
    """Get the child list under ``parent_path`` (the tree for an empty path).

    Returns None when the parent path does not resolve.
    """
    if not parent_path:
        return tree
    result = find_by_path(tree, parent_path)
    if isinstance(result, Err):
        return None
    return result.value.subtasks


def get_parent(tree: list[Todo], child_path: TodoPath) -> Todo | None:
    """Get the parent of the todo at ``child_path``, if it has one."""
    if len(child_path) <= 1:
        return None
    result = find_by_path(tree, child_path[:-1])
    return result.value if isinstance(result, Ok) else None


def get_siblings(tree: list[Todo], parent_path: TodoPath) -> list[Todo]:
    """Todos sharing the parent at ``parent_path`` (empty if unresolved)."""
    return get_children(tree, parent_path) or []


def find_all(tree: list[Todo], predicate: Predicate) -> list[TodoWithPath]:
    """Find every todo matching a predicate, in traversal order."""
    matches: list[TodoWithPath] = []

    def visit(todo: Todo, parent_path: TodoPath, parent: Todo | None) -> None:
        path = parent_path + [todo.id]
        if predicate(todo, path):
            matches.append(TodoWithPath(todo=todo, path=path))

    traverse(tree, visit)
    return matches


def flatten(tree: list[Todo]) -> list[FlatTodo]:
    """Flatten the tree into (todo, path, level) records in display order."""
    flat: list[FlatTodo] = []

    def visit(todo: Todo, parent_path: TodoPath, parent: Todo | None) -> None:
        flat.append(
            FlatTodo(todo=todo, path=parent_path + [todo.id], level=len(parent_path))
        )

    traverse(tree, visit)
    return flat


def count_matching(tree: list[Todo], predicate: Predicate | None = None) -> int:
    """Count todos matching ``predicate`` (all todos when omitted)."""
    count = 0

    def visit(todo: Todo, parent_path: TodoPath, parent: Todo | None) -> None:
        nonlocal count
        if predicate is None or predicate(todo, parent_path + [todo.id]):
            count += 1

    traverse(tree, visit)
    return count


def max_depth(tree: list[Todo]) -> int:
    """Number of levels in the deepest branch (0 for an empty tree)."""
    deepest = 0

    def visit(todo: Todo, parent_path: TodoPath, parent: Todo | None) -> None:
        nonlocal deepest
        deepest = max(deepest, len(parent_path) + 1)

    traverse(tree, visit)
    return deepest


def project_path(tree: list[Todo], path: TodoPath) -> list[str]:
    """Texts of the todos along ``path``, stopping at the first unresolved id."""
    names: list[str] = []
    level = tree
    for todo_id in path:
        todo = next((t for t in level if t.id == todo_id), None)
        if todo is None:
            break
        names.append(todo.text)
        level = todo.subtasks
    return names


def collect_ids(tree: Iterable[Todo]) -> list[int]:
    """Every id in the tree, in pre-order."""

    def collect(acc: list[int], todo: Todo, path: TodoPath) -> list[int]:
        acc.append(todo.id)
        return acc

    return fold_tree(list(tree), [], collect)


def max_id(tree: list[Todo]) -> int:
    """Largest id in the tree, or 0 when empty."""
    return fold_tree(tree, 0, lambda acc, todo, path: max(acc, todo.id))
