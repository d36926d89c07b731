"""Tests for derived parent completion."""

import itertools
import random

from focustree.domain.todo import (
    add_subtask,
    all_subtasks_completed,
    delete_todo,
    find_by_path,
    flatten,
    parent_ids_to_collapse,
    propagate_completion,
    toggle_completion,
)

from .conftest import assert_parents_derived, make_todo

NOW = "2024-01-10T12:00:00.000Z"


def test_all_subtasks_completed():
    assert all_subtasks_completed([]) is False
    assert all_subtasks_completed([make_todo(1, completed=True)]) is True
    nested_open = make_todo(1, completed=True, subtasks=[make_todo(2)])
    assert all_subtasks_completed([nested_open]) is False


def test_completing_last_leaf_completes_every_ancestor(tree):
    tree = toggle_completion(tree, 4, [1, 2], now=NOW)
    tree = propagate_completion(tree, [1, 2, 4], now=NOW)
    assert find_by_path(tree, [1, 2]).value.completed is False

    tree = toggle_completion(tree, 5, [1, 2], now=NOW)
    tree = propagate_completion(tree, [1, 2, 5], now=NOW)
    assert find_by_path(tree, [1, 2]).value.completed is True
    assert find_by_path(tree, [1]).value.completed is False

    tree = toggle_completion(tree, 3, [1], now=NOW)
    tree = propagate_completion(tree, [1, 3], now=NOW)
    project = find_by_path(tree, [1]).value
    assert project.completed is True
    assert project.completed_at == NOW


def test_reopening_a_leaf_reopens_ancestors(tree):
    tree = toggle_completion(tree, 1, now=NOW)
    tree = toggle_completion(tree, 4, [1, 2], now=NOW)
    tree = propagate_completion(tree, [1, 2, 4], now=NOW)
    assert find_by_path(tree, [1, 2]).value.completed is False
    assert find_by_path(tree, [1]).value.completed is False
    assert find_by_path(tree, [1]).value.completed_at is None


def test_deleting_last_open_child_completes_parent(tree):
    tree = toggle_completion(tree, 4, [1, 2], now=NOW)
    tree = delete_todo(tree, 5, [1, 2])
    tree = propagate_completion(tree, [1, 2, 5], now=NOW)
    assert find_by_path(tree, [1, 2]).value.completed is True


def test_unchanged_ancestors_are_reused(tree):
    propagated = propagate_completion(tree, [1, 2, 4], now=NOW)
    assert propagated == tree


def test_parent_ids_to_collapse(tree):
    tree = toggle_completion(tree, 2, [1], now=NOW)
    assert parent_ids_to_collapse(tree, [1, 2]) == [2]
    assert parent_ids_to_collapse(tree, [6]) == []


def test_random_operation_sequences_keep_parents_derived():
    rng = random.Random(1234)
    ids = itertools.count(100)
    tree = [make_todo(1, subtasks=[make_todo(2), make_todo(3, subtasks=[make_todo(4)])])]

    for _ in range(200):
        paths = [flat.path for flat in flatten(tree)]
        if not paths:
            tree = [make_todo(next(ids))]
            continue
        path = rng.choice(paths)
        action = rng.choice(["toggle", "toggle", "delete", "add"])
        if action == "toggle":
            tree = toggle_completion(tree, path[-1], path[:-1], now=NOW)
            tree = propagate_completion(tree, path, now=NOW)
        elif action == "delete" and len(paths) > 1:
            tree = delete_todo(tree, path[-1], path[:-1])
            tree = propagate_completion(tree, path, now=NOW)
        elif action == "add":
            tree = add_subtask(tree, path, "child", ids=ids, now=NOW)
            child_id = find_by_path(tree, path).value.subtasks[-1].id if len(path) < 5 else None
            if child_id is not None:
                tree = propagate_completion(tree, [*path, child_id], now=NOW)
        assert_parents_derived(tree)
