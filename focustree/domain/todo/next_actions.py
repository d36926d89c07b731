"""Next actions: the first incomplete step of each branch.

Legacy view kept alongside focus priorities. A next action is an
incomplete todo with no incomplete subtasks that is either top-level or
the first incomplete child of its parent.
"""

from .models import Todo, TodoPath, TodoWithPath


def next_action_for(todo: Todo) -> Todo | None:
    """The deepest first-incomplete descendant of an incomplete parent."""
    if not todo.subtasks or todo.completed:
        return None

    for subtask in todo.subtasks:
        if not subtask.completed:
            if subtask.subtasks:
                return next_action_for(subtask) or subtask
            return subtask
    return None


def is_next_action(todo: Todo, parent: Todo | None = None) -> bool:
    if todo.completed:
        return False
    if any(not subtask.completed for subtask in todo.subtasks):
        return False
    if parent is None:
        return not todo.subtasks

    first_incomplete = next((st for st in parent.subtasks if not st.completed), None)
    return first_incomplete is not None and first_incomplete.id == todo.id


def get_all_next_actions(
    tree: list[Todo],
    parent_path: TodoPath | None = None,
    parent: Todo | None = None,
) -> list[TodoWithPath]:
    """Every next action in the tree, in display order."""
    actions: list[TodoWithPath] = []
    for todo in tree:
        path = [*(parent_path or []), todo.id]
        if is_next_action(todo, parent):
            actions.append(TodoWithPath(todo=todo, path=path))
        if todo.subtasks and not todo.completed:
            actions.extend(get_all_next_actions(todo.subtasks, path, todo))
    return actions
