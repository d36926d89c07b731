"""Tests for the todo session controller."""

import random
from datetime import date

from focustree.application import TodoSession
from focustree.domain.shared import Err, Ok
from focustree.domain.todo import (
    DEFAULT_SUBTASK_TEXT,
    Difficulty,
    RecurringType,
    find_by_path,
    flatten,
)

from .conftest import assert_parents_derived, make_todo


class MemoryStore:
    def __init__(self, todos=None, load_error=None, save_error=None):
        self.todos = todos or []
        self.load_error = load_error
        self.save_error = save_error
        self.saved = []

    def load(self):
        if self.load_error:
            return Err(self.load_error)
        return Ok(list(self.todos))

    def save(self, todos):
        if self.save_error:
            return Err(self.save_error)
        self.saved.append(todos)
        return Ok(None)


def open_session(todos=None, **store_kwargs):
    store = MemoryStore(todos, **store_kwargs)
    session = TodoSession(store, delay=0)
    session.load()
    return session, store


def test_load_failure_keeps_previous_tree(tree):
    session, store = open_session(tree)
    store.load_error = "Invalid JSON"
    session.load()
    assert session.todos == tree
    assert session.error == "Invalid JSON"


def test_add_todo_parses_recurrence():
    session, store = open_session()
    session.add_todo("Stretch every day")
    todo = session.todos[0]
    assert todo.text == "Stretch"
    assert todo.is_recurring is True
    assert todo.recurring_pattern.type == RecurringType.DAILY
    assert todo.due_date == todo.recurring_pattern.next_due_date
    assert store.saved[-1] == session.todos


def test_add_blank_todo_is_ignored():
    session, store = open_session()
    assert session.add_todo("   ") == []
    assert store.saved == []


def test_toggle_propagates_collapses_and_drops_focus(tree):
    session, store = open_session(tree)
    session.expand(1)
    session.expand(2)
    session.toggle_focus(5, [1, 2])
    session.toggle_focus(6)

    session.toggle_todo(4, [1, 2])
    session.toggle_todo(5, [1, 2])

    assert find_by_path(session.todos, [1, 2]).value.completed is True
    assert not session.is_expanded(2)
    assert session.is_expanded(1)
    assert find_by_path(session.todos, [1, 2, 5]).value.focus_priority is None
    assert find_by_path(session.todos, [6]).value.focus_priority == 1


def test_toggle_recurring_spawns_instance():
    todo = make_todo(
        10, "Standup", due_date="2024-01-10", is_recurring=True,
        recurring_pattern={"type": "daily", "interval": 1},
    )
    session, _ = open_session([todo])
    session.toggle_todo(10)
    assert len(session.todos) == 2
    assert session.todos[1].due_date == "2024-01-11"
    assert session.todos[1].parent_recurring_id == 10


def test_toggle_recurring_subtask_keeps_parent_open():
    daily = make_todo(
        2, "Standup", due_date="2024-01-10", is_recurring=True,
        recurring_pattern={"type": "daily", "interval": 1},
    )
    session, store = open_session([make_todo(1, "Team", [daily])])

    session.toggle_todo(2, [1])

    parent = session.todos[0]
    assert [t.completed for t in parent.subtasks] == [True, False]
    assert parent.subtasks[1].due_date == "2024-01-11"
    assert parent.completed is False
    assert parent.completed_at is None
    assert store.saved[-1][0].completed is False


def test_copy_into_completed_parent_reopens_ancestors():
    tree = [
        make_todo(1, "Goal", [
            make_todo(2, "Project", [make_todo(3, "Done", completed=True)], completed=True),
        ], completed=True),
    ]
    session, _ = open_session(tree)

    session.copy_todo(3, [1, 2])

    project = find_by_path(session.todos, [1, 2]).value
    assert [t.completed for t in project.subtasks] == [True, False]
    assert project.completed is False
    assert session.todos[0].completed is False
    assert_parents_derived(session.todos)


def test_add_sibling_under_completed_parent_reopens_ancestors():
    tree = [
        make_todo(1, "Goal", [
            make_todo(2, "Project", [make_todo(3, "Done", completed=True)], completed=True),
        ], completed=True),
    ]
    session, _ = open_session(tree)

    session.add_sibling(3, [1, 2])

    assert find_by_path(session.todos, [1, 2]).value.completed is False
    assert session.todos[0].completed is False


def test_add_subtask_expands_and_edits(tree):
    session, _ = open_session(tree)
    session.add_subtask([1, 3])
    build = find_by_path(session.todos, [1, 3]).value
    assert build.subtasks[0].text == DEFAULT_SUBTASK_TEXT
    assert build.subtasks[0].is_editing is True
    assert session.is_expanded(3)


def test_blank_text_commit_deletes(tree):
    session, _ = open_session(tree)
    session.update_text(4, "   ", [1, 2])
    assert [t.id for t in find_by_path(session.todos, [1, 2]).value.subtasks] == [5]

    session.update_text(5, " Final review ", [1, 2])
    review = find_by_path(session.todos, [1, 2, 5]).value
    assert review.text == "Final review"
    assert review.is_editing is False


def test_blank_siblings_are_not_persisted(tree):
    session, store = open_session(tree)
    session.add_sibling(6)
    assert len(session.todos) == 3
    assert [t.id for t in store.saved[-1]] == [1, 6]


def test_set_editing_is_not_persisted(tree):
    session, store = open_session(tree)
    session.set_editing(6, True)
    assert find_by_path(session.todos, [6]).value.is_editing is True
    assert store.saved == []


def test_rejected_operations_do_not_save(tree):
    session, store = open_session(tree)
    before = session.todos
    assert session.toggle_todo(99) is before
    assert session.delete_todo(4, [1]) is before
    assert session.reorder(1, 1) is before
    assert store.saved == []


def test_delete_recomputes_parent_and_focus(tree):
    session, _ = open_session(tree)
    session.toggle_focus(4, [1, 2])
    session.toggle_focus(6)
    session.toggle_todo(5, [1, 2])
    session.delete_todo(4, [1, 2])

    assert find_by_path(session.todos, [1, 2]).value.completed is True
    assert find_by_path(session.todos, [6]).value.focus_priority == 1


def test_field_updates_and_copy(tree):
    session, store = open_session(tree)
    session.update_due_date(6, "2024-02-01")
    session.update_difficulty(6, Difficulty.HARD)
    session.copy_todo(6)
    session.reorder(6, 1)

    assert [t.text for t in session.todos] == ["Groceries", "Project", "Groceries"]
    assert session.todos[0].due_date == "2024-02-01"
    assert session.todos[2].difficulty == Difficulty.HARD
    assert len(store.saved) == 4


def test_clear_completed_and_visibility(tree):
    session, _ = open_session(tree)
    session.toggle_todo(6)
    session.toggle_show_completed()
    assert [t.id for t in session.visible_todos()] == [1]

    session.clear_completed()
    session.toggle_show_completed()
    assert [t.id for t in session.visible_todos()] == [1]


def test_focus_only_view(tree):
    session, _ = open_session(tree)
    session.toggle_focus(3, [1])
    session.toggle_show_only_focus()
    assert [t.id for t in session.visible_todos()] == [1]
    assert [t.id for t in session.visible_todos()[0].subtasks] == [3]
    assert [item.path for item in session.focus_todos()] == [[1, 3]]


def test_stats(tree):
    session, _ = open_session(tree)
    session.toggle_todo(6)
    session.toggle_todo(3, [1])
    session.toggle_focus(4, [1, 2])
    session.toggle_show_completed()

    stats = session.stats(today=date.today())
    assert stats.total == 6
    assert stats.completed == 2
    assert stats.visible_completed == 1
    assert stats.hidden_count == 1
    assert stats.focus_count == 1
    assert stats.max_depth == 3
    assert stats.today_completed == 2
    assert stats.progress_percent == 33.3


def test_save_failure_surfaces_as_error(tree):
    session, _ = open_session(tree, save_error="Permission denied")
    session.toggle_todo(6)
    assert session.error == "Permission denied"
    assert find_by_path(session.todos, [6]).value.completed is True


def test_expanded_state_is_kept_off_the_tree(tree):
    session, store = open_session(tree)
    session.toggle_expanded(1)
    assert session.is_expanded(1)
    session.toggle_expanded(1)
    assert not session.is_expanded(1)
    assert store.saved == []


def test_focus_view_and_project_path(tree):
    session, _ = open_session(tree)
    session.toggle_focus(4, [1, 2])
    view = session.focus_view()
    assert [t.id for t in view] == [1]
    assert view[0].subtasks[0].subtasks[0].focus_priority == 1
    assert session.project_path([1, 2, 4]) == ["Project", "Design", "Sketch"]


def test_random_session_actions_keep_parents_derived():
    rng = random.Random(2024)
    daily = make_todo(
        7, "Standup", due_date="2024-01-10", is_recurring=True,
        recurring_pattern={"type": "daily", "interval": 1},
    )
    tree = [
        make_todo(1, "Project", [
            make_todo(2, "Design", [make_todo(4, "Sketch"), daily]),
            make_todo(3, "Build"),
        ]),
        make_todo(6, "Groceries"),
    ]
    session, store = open_session(tree)
    actions = ["toggle", "toggle", "toggle", "copy", "sibling", "subtask", "delete"]

    for _ in range(300):
        paths = [flat.path for flat in flatten(session.todos)]
        if not paths:
            session.add_todo("Restart")
            continue
        path = rng.choice(paths)
        todo_id, parent_path = path[-1], path[:-1]
        action = rng.choice(actions) if len(paths) < 60 else "delete"
        if action == "toggle":
            session.toggle_todo(todo_id, parent_path)
        elif action == "copy":
            session.copy_todo(todo_id, parent_path)
        elif action == "sibling":
            session.add_sibling(todo_id, parent_path)
            for flat in flatten(session.todos):
                if not flat.todo.text:
                    session.update_text(flat.todo.id, "Next", flat.path[:-1])
                    break
        elif action == "subtask":
            session.add_subtask(path, "Step")
        elif len(paths) > 1:
            session.delete_todo(todo_id, parent_path)

        assert_parents_derived(session.todos)
        if store.saved:
            assert_parents_derived(store.saved[-1])
