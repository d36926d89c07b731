"""Recurring todos.

Pure date arithmetic for recurrence rules, plus the tree operation that
appends the next instance of a recurring todo when it is completed.

Weekdays follow the JavaScript convention used on the wire: 0 is Sunday,
6 is Saturday.
"""

import calendar
import logging
import re
from datetime import date, datetime, timedelta

from focustree.domain.shared.result import Err

from .models import RecurringPattern, RecurringType, Todo, TodoPath, now_iso
from .operations import IdSource, new_id_source
from .traversal import find_by_path, get_children, update_children

logger = logging.getLogger(__name__)

DAY_NAMES = ["sunday", "monday", "tuesday", "wednesday", "thursday", "friday", "saturday"]


def _js_weekday(day: date) -> int:
    return (day.weekday() + 1) % 7


def _is_weekend(day: date) -> bool:
    return day.weekday() >= 5


def _add_months(day: date, months: int, day_of_month: int) -> date:
    month_index = day.month - 1 + months
    year = day.year + month_index // 12
    month = month_index % 12 + 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day_of_month, last_day))


def _as_date(value: date | datetime | str) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(value[:10])


# =============================================================================
# Date Arithmetic
# =============================================================================


def generate_next_occurrence(
    pattern: RecurringPattern,
    completion_date: date | datetime | str,
) -> str:
    """Next due date (``YYYY-MM-DD``) after ``completion_date`` for a pattern.

    - daily: +interval days (default 1)
    - weekdays: next Monday-Friday date
    - weekly: first date within the next 7 days whose weekday is in
      ``days_of_week``; otherwise +interval weeks
    - monthly: +interval months on ``day_of_month`` (default 1), clamped to
      the month's last day
    - custom: +interval days
    """
    base = _as_date(completion_date)
    interval = pattern.interval or 1

    if pattern.type == RecurringType.DAILY:
        return (base + timedelta(days=interval)).isoformat()

    if pattern.type == RecurringType.WEEKDAYS:
        next_date = base + timedelta(days=1)
        while _is_weekend(next_date):
            next_date += timedelta(days=1)
        return next_date.isoformat()

    if pattern.type == RecurringType.WEEKLY:
        target_days = pattern.days_of_week or []
        for offset in range(1, 8):
            candidate = base + timedelta(days=offset)
            if _js_weekday(candidate) in target_days:
                return candidate.isoformat()
        return (base + timedelta(weeks=interval)).isoformat()

    if pattern.type == RecurringType.MONTHLY:
        return _add_months(base, interval, pattern.day_of_month or 1).isoformat()

    if pattern.type == RecurringType.CUSTOM:
        return (base + timedelta(days=interval)).isoformat()

    return (base + timedelta(days=1)).isoformat()


# =============================================================================
# Instances
# =============================================================================


def create_recurring_instance(
    original: Todo,
    next_due_date: str,
    *,
    todo_id: int,
    now: str | None = None,
) -> Todo:
    """Build the next instance of a recurring todo.

    The instance starts incomplete with no subtasks and no focus, is due on
    ``next_due_date``, and points back at the root of the recurring chain.
    """
    pattern = original.recurring_pattern
    if pattern is not None:
        pattern = pattern.model_copy(update={"next_due_date": next_due_date})
    return original.model_copy(
        update={
            "id": todo_id,
            "completed": False,
            "completed_at": None,
            "created_at": now or now_iso(),
            "due_date": next_due_date,
            "parent_recurring_id": original.parent_recurring_id or original.id,
            "subtasks": [],
            "focus_priority": None,
            "recurring_pattern": pattern,
            "is_editing": False,
        }
    )


def spawn_recurring_instance(
    tree: list[Todo],
    path: TodoPath,
    *,
    ids: IdSource | None = None,
    now: str | None = None,
) -> list[Todo]:
    """Insert the next instance after a just-completed recurring todo.

    The next date is computed from the todo's due date when it has one,
    otherwise from the completion date. Nothing happens when the todo is
    not completed, has no pattern, or an incomplete sibling of the same
    chain already holds the next date.
    """
    found = find_by_path(tree, path)
    if isinstance(found, Err):
        return tree
    todo = found.value
    if not todo.completed or todo.recurring_pattern is None:
        return tree

    base = todo.due_date or todo.completed_at or now or now_iso()
    next_due = generate_next_occurrence(todo.recurring_pattern, base)
    chain_root = todo.parent_recurring_id or todo.id

    parent_path = path[:-1]
    siblings = get_children(tree, parent_path) or []
    already_spawned = any(
        not sibling.completed
        and (sibling.parent_recurring_id or sibling.id) == chain_root
        and sibling.due_date == next_due
        for sibling in siblings
        if sibling.id != todo.id
    )
    if already_spawned:
        return tree

    ids = ids or new_id_source(tree)
    instance = create_recurring_instance(todo, next_due, todo_id=next(ids), now=now)
    logger.info(f"Created recurring instance of '{todo.text}' due {next_due}")

    def insert(todos: list[Todo]) -> list[Todo]:
        index = next(i for i, t in enumerate(todos) if t.id == todo.id)
        return [*todos[: index + 1], instance, *todos[index + 1 :]]

    return update_children(tree, parent_path, insert)


# =============================================================================
# Text Parsing and Display
# =============================================================================

_DAILY = re.compile(r"\s*\bevery\s+day\s*$", re.IGNORECASE)
_WEEKDAYS = re.compile(r"\s*\bevery\s+weekday\s*$", re.IGNORECASE)
_WEEKLY = re.compile(
    r"\s*\bevery\s+(sunday|monday|tuesday|wednesday|thursday|friday|saturday)\s*$",
    re.IGNORECASE,
)
_MONTHLY = re.compile(
    r"\s*\bevery\s+month\s+on\s+the\s+(\d{1,2})(?:st|nd|rd|th)?\s*$", re.IGNORECASE
)
_CUSTOM = re.compile(r"\s*\bevery\s+(\d+)\s+days\s*$", re.IGNORECASE)


def parse_recurring_text(
    text: str,
    today: date | None = None,
) -> tuple[str, RecurringPattern | None]:
    """Split a trailing recurrence phrase off todo text.

    Recognized endings: "every day", "every weekday", "every <dayname>",
    "every month on the <n>th", "every <n> days".

    Returns:
        (clean_text, pattern) where pattern is None when no phrase matched.
    """
    today = today or date.today()

    if match := _DAILY.search(text):
        pattern = RecurringPattern(
            type=RecurringType.DAILY,
            interval=1,
            next_due_date=(today + timedelta(days=1)).isoformat(),
        )
        return text[: match.start()].strip(), pattern

    if match := _WEEKDAYS.search(text):
        pattern = RecurringPattern(
            type=RecurringType.WEEKDAYS,
            days_of_week=[1, 2, 3, 4, 5],
            next_due_date=generate_next_occurrence(
                RecurringPattern(type=RecurringType.WEEKDAYS), today
            ),
        )
        return text[: match.start()].strip(), pattern

    if match := _WEEKLY.search(text):
        day_index = DAY_NAMES.index(match.group(1).lower())
        pattern = RecurringPattern(
            type=RecurringType.WEEKLY,
            days_of_week=[day_index],
            interval=1,
        )
        pattern.next_due_date = generate_next_occurrence(pattern, today)
        return text[: match.start()].strip(), pattern

    if match := _MONTHLY.search(text):
        day = int(match.group(1))
        if 1 <= day <= 31:
            this_month = _add_months(today, 0, day)
            next_due = this_month if this_month > today else _add_months(today, 1, day)
            pattern = RecurringPattern(
                type=RecurringType.MONTHLY,
                day_of_month=day,
                interval=1,
                next_due_date=next_due.isoformat(),
            )
            return text[: match.start()].strip(), pattern

    if match := _CUSTOM.search(text):
        interval = int(match.group(1))
        if interval >= 1:
            pattern = RecurringPattern(
                type=RecurringType.CUSTOM,
                interval=interval,
                next_due_date=(today + timedelta(days=interval)).isoformat(),
            )
            return text[: match.start()].strip(), pattern

    return text, None


def recurring_display_text(pattern: RecurringPattern) -> str:
    """Human-readable description of a pattern."""
    if pattern.type == RecurringType.DAILY:
        return "Every day"
    if pattern.type == RecurringType.WEEKDAYS:
        return "Every weekday"
    if pattern.type == RecurringType.WEEKLY:
        days = ", ".join(DAY_NAMES[d].capitalize() for d in pattern.days_of_week or [])
        return f"Every {days}"
    if pattern.type == RecurringType.MONTHLY:
        return f"Every month on day {pattern.day_of_month}"
    if pattern.type == RecurringType.CUSTOM:
        return f"Every {pattern.interval} days"
    return ""


def should_show_in_today_view(
    todo: Todo,
    view_mode: str,
    today: date | None = None,
) -> bool:
    """Whether a todo belongs in the "today" view.

    Todos without a due date (inbox items) always show; dated todos show
    when due today or overdue.
    """
    if view_mode == "all":
        return True
    if not todo.due_date:
        return True
    return todo.due_date[:10] <= (today or date.today()).isoformat()
