"""Todo domain models.

Pure domain models for the todo tree. Uses Pydantic for validation and
for the camelCase JSON wire format shared with the HTTP stores.
"""

import re
from datetime import UTC, date, datetime
from enum import Enum
from typing import Annotated

from pydantic import AfterValidator, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

# Tree shape limits
MAX_DEPTH = 5
MAX_FOCUS = 5
MAX_SUBTASKS_PER_TODO = 100
MAX_TEXT_LENGTH = 500

DEFAULT_SUBTASK_TEXT = "New subtask"

TodoPath = list[int]

# A calendar date, optionally followed by a time part
_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}(T.*)?$")


def now_iso() -> str:
    """Current UTC time as an ISO-8601 string with millisecond precision."""
    return datetime.now(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def is_iso_date(value: str) -> bool:
    """Check that ``value`` starts with a real ``YYYY-MM-DD`` date."""
    if not _ISO_DATE.match(value):
        return False
    try:
        date.fromisoformat(value[:10])
    except ValueError:
        return False
    return True


def _check_date(value: str) -> str:
    if not is_iso_date(value):
        raise ValueError(f"expected a YYYY-MM-DD date, got {value!r}")
    return value


DateString = Annotated[str, AfterValidator(_check_date)]


class Difficulty(str, Enum):
    """Self-assessed difficulty of a todo."""

    EASY = "easy"
    NORMAL = "normal"
    HARD = "hard"


class RecurringType(str, Enum):
    """How a recurring todo repeats."""

    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    WEEKDAYS = "weekdays"
    CUSTOM = "custom"


class CamelModel(BaseModel):
    """Base model serializing attribute names as camelCase."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=False,
    )


class RecurringPattern(CamelModel):
    """Recurrence rule attached to a todo.

    ``days_of_week`` uses 0 for Sunday through 6 for Saturday.
    """

    type: RecurringType
    interval: int | None = Field(default=None, ge=1)
    days_of_week: list[int] | None = None
    day_of_month: int | None = Field(default=None, ge=1, le=31)
    next_due_date: DateString | None = None


class Todo(CamelModel):
    """A node in the todo tree.

    A todo with subtasks is a parent whose ``completed`` flag is derived
    from its children. ``is_editing`` is UI state only and is never
    serialized.
    """

    id: int
    text: str
    completed: bool = False
    created_at: str = Field(default_factory=now_iso)
    completed_at: str | None = None
    subtasks: list["Todo"] = Field(default_factory=list)
    focus_priority: int | None = Field(default=None, ge=1, le=MAX_FOCUS)
    due_date: DateString | None = None
    difficulty: Difficulty | None = None
    recurring_pattern: RecurringPattern | None = None
    is_recurring: bool | None = None
    parent_recurring_id: int | None = None
    is_editing: bool = Field(default=False, exclude=True)

    def has_subtasks(self) -> bool:
        """Check if this todo has at least one subtask."""
        return len(self.subtasks) > 0

    def is_focused(self) -> bool:
        return self.focus_priority is not None


class TodoWithPath(BaseModel):
    """A todo with its id path from the root."""

    todo: Todo
    path: list[int]


class FlatTodo(BaseModel):
    """A todo with its path and nesting level (0 for top-level)."""

    todo: Todo
    path: list[int]
    level: int


def dump_todos(todos: list[Todo]) -> list[dict]:
    """Serialize a tree to JSON-ready dicts in the wire format."""
    return [
        todo.model_dump(mode="json", by_alias=True, exclude_none=True)
        for todo in todos
    ]
