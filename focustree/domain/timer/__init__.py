"""Timer domain - time tracking sessions and daily statistics."""

from .models import ActiveTimer, DailyTimerStats, TimerSession, TodoTimeBreakdown
from .stats import (
    compute_daily_stats,
    elapsed_ms,
    format_duration,
    generate_session_id,
    sort_sessions,
    today_date_string,
    todo_time_spent,
)

__all__ = [
    "TimerSession",
    "ActiveTimer",
    "DailyTimerStats",
    "TodoTimeBreakdown",
    "compute_daily_stats",
    "elapsed_ms",
    "format_duration",
    "generate_session_id",
    "sort_sessions",
    "today_date_string",
    "todo_time_spent",
]
