"""Timer domain models.

A timer session records time spent on one todo. Sessions are grouped by
calendar date for the daily view.
"""

from pydantic import ConfigDict, Field

from focustree.domain.todo.models import CamelModel


class TimerSession(CamelModel):
    """One tracked work session on a todo.

    ``duration`` is in milliseconds and stays 0 until the session is
    stopped. Unknown fields are kept so that stores never drop data.
    """

    model_config = ConfigDict(extra="allow")

    id: str
    todo_id: int
    todo_text: str
    todo_path: list[str] | None = None
    started_at: str
    ended_at: str | None = None
    duration: int = 0
    date: str


class ActiveTimer(CamelModel):
    """The currently running timer, if any."""

    todo_id: int
    todo_text: str
    todo_path: list[str] | None = None
    started_at: str


class TodoTimeBreakdown(CamelModel):
    todo_id: int
    todo_text: str
    total_duration: int = 0
    session_count: int = 0
    last_session: str | None = None


class DailyTimerStats(CamelModel):
    """Totals for one day, with a per-todo breakdown."""

    date: str
    total_duration: int = 0
    session_count: int = 0
    todo_breakdown: list[TodoTimeBreakdown] = Field(default_factory=list)
