"""Todo session service.

Owns the in-memory todo tree for one user session, applies user actions
through the pure domain functions, and persists the latest tree through a
debounced saver. The in-memory tree is authoritative; the store is only
written to.
"""

import logging
from datetime import date, datetime
from typing import Protocol

from pydantic import BaseModel

from focustree.application.debounce import DebouncedSaver
from focustree.domain.shared import Err, Result
from focustree.domain.todo import (
    DEFAULT_SUBTASK_TEXT,
    Difficulty,
    RecurringPattern,
    Todo,
    TodoPath,
    TodoWithPath,
    count_matching,
    create_todo,
    extract_focus_subtree,
    get_all_next_actions,
    get_focus_todos,
    max_depth,
    new_id_source,
    parent_ids_to_collapse,
    project_path,
    propagate_completion,
    reorder_focus_priorities,
    spawn_recurring_instance,
    toggle_completion,
)
from focustree.domain.todo import operations as ops
from focustree.domain.todo.focus import toggle_focus as toggle_focus_priority
from focustree.domain.todo.recurrence import parse_recurring_text

logger = logging.getLogger(__name__)


class TodoStore(Protocol):
    """Whole-collection persistence for the tree."""

    def load(self) -> Result[list[Todo], str]: ...

    def save(self, todos: list[Todo]) -> Result[None, str]: ...


class TodoStats(BaseModel):
    """Counts shown in the toolbar.

    Computed over the whole tree except ``visible_completed``, which only
    counts what the current filters show.
    """

    total: int
    completed: int
    visible_completed: int
    hidden_count: int
    focus_count: int
    next_actions_count: int
    max_depth: int
    today_completed: int

    @property
    def progress_percent(self) -> float:
        """Calculate completion percentage."""
        if self.total == 0:
            return 0.0
        return round(self.completed / self.total * 100, 1)


def prune_blank(todos: list[Todo]) -> list[Todo]:
    """Drop blank-text nodes (and their subtrees) at every level."""
    return [
        todo.model_copy(update={"subtasks": prune_blank(todo.subtasks)})
        for todo in todos
        if todo.text.strip()
    ]


def _completed_on(todo: Todo, day: date) -> bool:
    if not todo.completed or not todo.completed_at:
        return False
    try:
        stamp = datetime.fromisoformat(todo.completed_at.replace("Z", "+00:00"))
    except ValueError:
        return False
    return stamp.astimezone().date() == day


class TodoSession:
    """Stateful controller over one todo tree.

    Every mutating method returns the new tree and schedules a save. UI
    state (expanded ids and view filters) is held here, never in the tree.

    Example:
        session = TodoSession(TodoRepository(data_dir))
        session.load()
        session.add_todo("Write report every weekday")
        session.close()
    """

    def __init__(self, store: TodoStore, delay: float = 0.5) -> None:
        self._store = store
        self._todos: list[Todo] = []
        self._load_error: str | None = None
        self.loading = False
        self.expanded: set[int] = set()
        self.show_completed = True
        self.show_only_focus = False
        self._saver: DebouncedSaver[list[Todo]] = DebouncedSaver(self._write, delay)

    # -------------------------------------------------------------------------
    # State
    # -------------------------------------------------------------------------

    @property
    def todos(self) -> list[Todo]:
        return self._todos

    @property
    def error(self) -> str | None:
        """The last load or save failure, if any."""
        return self._load_error or self._saver.last_error

    def load(self) -> list[Todo]:
        """Replace the tree with the stored one.

        On failure the previous tree is kept and ``error`` is set.
        """
        self.loading = True
        try:
            result = self._store.load()
        finally:
            self.loading = False

        if isinstance(result, Err):
            logger.error(f"Failed to load todos: {result.error}")
            self._load_error = result.error
            return self._todos

        self._load_error = None
        self._todos = result.value
        return self._todos

    def snapshot(self) -> list[Todo]:
        """The tree as it would be persisted."""
        return prune_blank(self._todos)

    def _write(self, todos: list[Todo]) -> Result[None, str]:
        return self._store.save(todos)

    def _commit(self, todos: list[Todo], persist: bool = True) -> list[Todo]:
        self._todos = todos
        if persist:
            self._saver.schedule(prune_blank(todos))
        return todos

    def flush(self) -> None:
        """Write any pending change immediately."""
        self._saver.flush()

    def close(self) -> None:
        self._saver.flush()
        self._saver.cancel()

    def _ids(self):
        return new_id_source(self._todos)

    # -------------------------------------------------------------------------
    # Expanded state
    # -------------------------------------------------------------------------

    def is_expanded(self, todo_id: int) -> bool:
        return todo_id in self.expanded

    def expand(self, todo_id: int) -> None:
        self.expanded.add(todo_id)

    def collapse(self, todo_id: int) -> None:
        self.expanded.discard(todo_id)

    def toggle_expanded(self, todo_id: int) -> None:
        if todo_id in self.expanded:
            self.expanded.discard(todo_id)
        else:
            self.expanded.add(todo_id)

    def toggle_show_completed(self) -> bool:
        self.show_completed = not self.show_completed
        return self.show_completed

    def toggle_show_only_focus(self) -> bool:
        self.show_only_focus = not self.show_only_focus
        return self.show_only_focus

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def add_todo(self, text: str) -> list[Todo]:
        """Append a top-level todo.

        A trailing recurrence phrase ("every monday", "every 3 days", ...)
        is stripped from the text and becomes the todo's pattern.
        """
        clean, pattern = parse_recurring_text(text.strip())
        if not clean.strip():
            logger.warning("Cannot add todo: text is empty")
            return self._todos

        todo = create_todo(clean, todo_id=next(self._ids()))
        if pattern is not None:
            todo = todo.model_copy(
                update={
                    "recurring_pattern": pattern,
                    "is_recurring": True,
                    "due_date": pattern.next_due_date,
                }
            )
        return self._commit(ops.add_todo(self._todos, todo))

    def toggle_todo(self, todo_id: int, parent_path: TodoPath | None = None) -> list[Todo]:
        """Flip completion and restore every derived invariant.

        Completion cascades down, a completed recurring todo spawns its
        next instance, ancestors are recomputed, completed todos lose
        their focus, and completed ancestors are collapsed. Ancestors are
        recomputed after the spawn so a new open instance keeps its
        parent open.
        """
        path = [*(parent_path or []), todo_id]
        updated = toggle_completion(self._todos, todo_id, parent_path)
        if updated is self._todos:
            return self._todos

        updated = spawn_recurring_instance(updated, path, ids=new_id_source(updated))
        updated = propagate_completion(updated, path)
        updated = reorder_focus_priorities(updated)

        for parent_id in parent_ids_to_collapse(updated, parent_path or []):
            self.collapse(parent_id)

        return self._commit(updated)

    def delete_todo(self, todo_id: int, parent_path: TodoPath | None = None) -> list[Todo]:
        updated = ops.delete_todo(self._todos, todo_id, parent_path)
        if updated is self._todos:
            return self._todos
        updated = propagate_completion(updated, [*(parent_path or []), todo_id])
        updated = reorder_focus_priorities(updated)
        self.expanded.discard(todo_id)
        return self._commit(updated)

    def add_subtask(self, parent_path: TodoPath, text: str = DEFAULT_SUBTASK_TEXT) -> list[Todo]:
        """Append a subtask in edit mode and expand its parent."""
        updated = ops.add_subtask(
            self._todos, parent_path, text, start_editing=True, ids=self._ids()
        )
        if updated is self._todos:
            return self._todos
        updated = propagate_completion(updated, parent_path)
        self.expand(parent_path[-1])
        return self._commit(updated)

    def add_sibling(self, todo_id: int, parent_path: TodoPath | None = None) -> list[Todo]:
        updated = ops.add_sibling(self._todos, todo_id, parent_path, ids=self._ids())
        if updated is self._todos:
            return self._todos
        updated = propagate_completion(updated, [*(parent_path or []), todo_id])
        return self._commit(updated)

    def update_text(
        self,
        todo_id: int,
        text: str,
        parent_path: TodoPath | None = None,
    ) -> list[Todo]:
        """Commit edited text. Blank text deletes the todo."""
        if not text.strip():
            return self.delete_todo(todo_id, parent_path)

        updated = ops.update_text(self._todos, todo_id, text, parent_path)
        if updated is self._todos:
            return self._todos
        updated = ops.set_editing(updated, todo_id, False, parent_path)
        return self._commit(updated)

    def set_editing(
        self,
        todo_id: int,
        is_editing: bool,
        parent_path: TodoPath | None = None,
    ) -> list[Todo]:
        updated = ops.set_editing(self._todos, todo_id, is_editing, parent_path)
        return self._commit(updated, persist=False)

    def update_due_date(
        self,
        todo_id: int,
        due_date: str | None,
        parent_path: TodoPath | None = None,
    ) -> list[Todo]:
        updated = ops.update_due_date(self._todos, todo_id, due_date, parent_path)
        if updated is self._todos:
            return self._todos
        return self._commit(updated)

    def update_difficulty(
        self,
        todo_id: int,
        difficulty: Difficulty | None,
        parent_path: TodoPath | None = None,
    ) -> list[Todo]:
        updated = ops.update_difficulty(self._todos, todo_id, difficulty, parent_path)
        if updated is self._todos:
            return self._todos
        return self._commit(updated)

    def update_recurring(
        self,
        todo_id: int,
        pattern: RecurringPattern | None,
        parent_path: TodoPath | None = None,
    ) -> list[Todo]:
        updated = ops.update_recurring(self._todos, todo_id, pattern, parent_path)
        if updated is self._todos:
            return self._todos
        return self._commit(updated)

    def copy_todo(self, todo_id: int, parent_path: TodoPath | None = None) -> list[Todo]:
        updated = ops.copy_todo(self._todos, todo_id, parent_path, ids=self._ids())
        if updated is self._todos:
            return self._todos
        updated = propagate_completion(updated, [*(parent_path or []), todo_id])
        return self._commit(updated)

    def reorder(
        self,
        active_id: int,
        over_id: int,
        parent_path: TodoPath | None = None,
    ) -> list[Todo]:
        updated = ops.reorder(self._todos, active_id, over_id, parent_path)
        if updated is self._todos:
            return self._todos
        return self._commit(updated)

    def toggle_focus(self, todo_id: int, parent_path: TodoPath | None = None) -> list[Todo]:
        updated = toggle_focus_priority(self._todos, todo_id, parent_path)
        if updated is self._todos:
            return self._todos
        return self._commit(updated)

    def clear_completed(self) -> list[Todo]:
        updated = reorder_focus_priorities(ops.clear_completed(self._todos))
        return self._commit(updated)

    # -------------------------------------------------------------------------
    # Derived views
    # -------------------------------------------------------------------------

    def visible_todos(self) -> list[Todo]:
        """Top-level todos after the show-completed and focus filters."""
        todos = self._todos
        if not self.show_completed:
            todos = [todo for todo in todos if not todo.completed]
        if self.show_only_focus:
            todos = extract_focus_subtree(todos)
        return todos

    def focus_todos(self) -> list[TodoWithPath]:
        return get_focus_todos(self._todos)

    def focus_view(self) -> list[Todo]:
        return extract_focus_subtree(self._todos)

    def project_path(self, path: TodoPath) -> list[str]:
        return project_path(self._todos, path)

    def stats(self, today: date | None = None) -> TodoStats:
        today = today or date.today()
        completed = count_matching(self._todos, lambda todo, path: todo.completed)
        visible_completed = count_matching(self.visible_todos(), lambda todo, path: todo.completed)
        return TodoStats(
            total=count_matching(self._todos),
            completed=completed,
            visible_completed=visible_completed,
            hidden_count=completed - visible_completed,
            focus_count=len(get_focus_todos(self._todos)),
            next_actions_count=len(get_all_next_actions(self._todos)),
            max_depth=max_depth(self._todos),
            today_completed=count_matching(
                self._todos, lambda todo, path: _completed_on(todo, today)
            ),
        )
