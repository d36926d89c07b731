"""Parent completion propagation.

A parent's ``completed`` flag is derived: it is true iff the parent has at
least one subtask and every subtask, recursively, is completed. These
functions restore that invariant after a leaf-level change.
"""

from focustree.domain.shared.result import Ok

from .models import Todo, TodoPath, now_iso
from .traversal import find_by_path, update_at_path


def all_subtasks_completed(subtasks: list[Todo]) -> bool:
    """Check that a non-empty subtask list is completed all the way down."""
    if not subtasks:
        return False
    return all(
        subtask.completed
        and (not subtask.subtasks or all_subtasks_completed(subtask.subtasks))
        for subtask in subtasks
    )


def propagate_completion(
    tree: list[Todo],
    changed_path: TodoPath,
    now: str | None = None,
) -> list[Todo]:
    """Recompute ``completed`` for every ancestor of ``changed_path``.

    Walks from the parent of the changed todo up to the top level. At each
    level the flag (and ``completed_at``) is only rewritten when the derived
    value differs, but the walk always continues to the top since a change
    at any level can flip the one above.

    ``changed_path`` may address a todo that was just deleted; only its
    ancestors need to resolve.
    """
    timestamp = now or now_iso()
    result = tree
    for depth in range(len(changed_path) - 1, 0, -1):
        ancestor_path = changed_path[:depth]

        def recompute(parent: Todo) -> Todo:
            derived = all_subtasks_completed(parent.subtasks)
            if parent.completed == derived:
                return parent
            return parent.model_copy(
                update={
                    "completed": derived,
                    "completed_at": timestamp if derived else None,
                }
            )

        result = update_at_path(result, ancestor_path, recompute)
    return result


def parent_ids_to_collapse(tree: list[Todo], parent_path: TodoPath) -> list[int]:
    """Ancestors on ``parent_path`` that are completed parents, deepest first."""
    ids: list[int] = []
    for depth in range(len(parent_path), 0, -1):
        found = find_by_path(tree, parent_path[:depth])
        if not isinstance(found, Ok):
            continue
        todo = found.value
        if todo.completed and todo.has_subtasks():
            ids.append(todo.id)
    return ids
