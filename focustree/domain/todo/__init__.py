"""Todo domain - the in-memory todo tree and its mutations.

All exports are pure (no I/O, no side effects). Operations take a tree
(list of top-level todos) and return a new tree; invalid addressing is a
logged no-op rather than an exception.

Key Types:
    Todo - Tree node (task with optional subtasks)
    RecurringPattern - Recurrence rule
    Difficulty / RecurringType - Enumerations
    TodoWithPath / FlatTodo - Todo with its location

Traversal Functions:
    find_by_path, update_at_path, remove_at_path, traverse, flatten,
    count_matching, max_depth, project_path

Mutations:
    toggle_completion, delete_todo, add_subtask, add_sibling, copy_todo,
    reorder, update_text, set_editing, update_due_date, clear_completed

Derived State:
    propagate_completion, toggle_focus, reorder_focus_priorities,
    extract_focus_subtree, generate_next_occurrence,
    spawn_recurring_instance, get_all_next_actions
"""

from .completion import all_subtasks_completed, parent_ids_to_collapse, propagate_completion
from .focus import (
    extract_focus_flat,
    extract_focus_subtree,
    focus_count,
    get_focus_todos,
    reorder_focus_priorities,
    toggle_focus,
)
from .models import (
    DEFAULT_SUBTASK_TEXT,
    MAX_DEPTH,
    MAX_FOCUS,
    MAX_SUBTASKS_PER_TODO,
    MAX_TEXT_LENGTH,
    Difficulty,
    FlatTodo,
    RecurringPattern,
    RecurringType,
    Todo,
    TodoPath,
    TodoWithPath,
    dump_todos,
    now_iso,
)
from .next_actions import get_all_next_actions, is_next_action, next_action_for
from .operations import (
    add_sibling,
    add_subtask,
    add_todo,
    batch_update,
    clear_completed,
    clone_todo,
    copy_todo,
    create_todo,
    delete_todo,
    new_id_source,
    next_difficulty,
    reorder,
    set_editing,
    toggle_completion,
    update_difficulty,
    update_due_date,
    update_recurring,
    update_text,
)
from .recurrence import (
    create_recurring_instance,
    generate_next_occurrence,
    parse_recurring_text,
    recurring_display_text,
    should_show_in_today_view,
    spawn_recurring_instance,
)
from .traversal import (
    collect_ids,
    count_matching,
    find_all,
    find_by_path,
    flatten,
    fold_tree,
    get_children,
    get_parent,
    get_siblings,
    is_valid_path,
    max_depth,
    max_id,
    project_path,
    remove_at_path,
    traverse,
    update_at_path,
)
from .validation import (
    has_duplicate_ids,
    sanitize_todo_text,
    validate_add_subtask,
    validate_parent_path,
    validate_path,
    validate_todo_text,
    validate_todos,
    would_create_circular_reference,
)

__all__ = [
    # Models
    "Todo",
    "TodoPath",
    "TodoWithPath",
    "FlatTodo",
    "RecurringPattern",
    "RecurringType",
    "Difficulty",
    "MAX_DEPTH",
    "MAX_FOCUS",
    "MAX_SUBTASKS_PER_TODO",
    "MAX_TEXT_LENGTH",
    "DEFAULT_SUBTASK_TEXT",
    "dump_todos",
    "now_iso",
    # Traversal
    "fold_tree",
    "traverse",
    "find_by_path",
    "is_valid_path",
    "update_at_path",
    "remove_at_path",
    "get_children",
    "get_parent",
    "get_siblings",
    "find_all",
    "flatten",
    "count_matching",
    "max_depth",
    "project_path",
    "collect_ids",
    "max_id",
    # Mutations
    "new_id_source",
    "create_todo",
    "add_todo",
    "toggle_completion",
    "delete_todo",
    "add_subtask",
    "add_sibling",
    "clone_todo",
    "copy_todo",
    "reorder",
    "clear_completed",
    "update_text",
    "set_editing",
    "update_due_date",
    "update_difficulty",
    "next_difficulty",
    "update_recurring",
    "batch_update",
    # Completion
    "all_subtasks_completed",
    "propagate_completion",
    "parent_ids_to_collapse",
    # Focus
    "get_focus_todos",
    "focus_count",
    "toggle_focus",
    "reorder_focus_priorities",
    "extract_focus_flat",
    "extract_focus_subtree",
    # Recurrence
    "generate_next_occurrence",
    "create_recurring_instance",
    "spawn_recurring_instance",
    "parse_recurring_text",
    "recurring_display_text",
    "should_show_in_today_view",
    # Next actions
    "next_action_for",
    "is_next_action",
    "get_all_next_actions",
    # Validation
    "validate_add_subtask",
    "validate_path",
    "validate_parent_path",
    "validate_todo_text",
    "sanitize_todo_text",
    "validate_todos",
    "has_duplicate_ids",
    "would_create_circular_reference",
]
