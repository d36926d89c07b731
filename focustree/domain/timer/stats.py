"""Pure helpers for timer sessions."""

import uuid
from datetime import UTC, datetime

from .models import ActiveTimer, DailyTimerStats, TimerSession, TodoTimeBreakdown


def generate_session_id() -> str:
    return f"session-{int(datetime.now(UTC).timestamp() * 1000)}-{uuid.uuid4().hex[:8]}"


def today_date_string() -> str:
    """Today's local date as ``YYYY-MM-DD``."""
    return datetime.now().date().isoformat()


def _parse_timestamp(value: str) -> datetime:
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def elapsed_ms(started_at: str, now: datetime | None = None) -> int:
    """Milliseconds between ``started_at`` and ``now``."""
    now = now or datetime.now(UTC)
    return int((now - _parse_timestamp(started_at)).total_seconds() * 1000)


def sort_sessions(sessions: list[TimerSession]) -> list[TimerSession]:
    """Newest first by ``started_at``."""
    return sorted(sessions, key=lambda s: _parse_timestamp(s.started_at), reverse=True)


def todo_time_spent(sessions: list[TimerSession], todo_id: int) -> int:
    """Total recorded milliseconds for one todo."""
    return sum(s.duration for s in sessions if s.todo_id == todo_id and s.duration)


def compute_daily_stats(
    sessions: list[TimerSession],
    date: str,
    active: ActiveTimer | None = None,
    now: datetime | None = None,
) -> DailyTimerStats:
    """Aggregate one day's sessions, including a running timer if given.

    The breakdown is sorted by total duration, longest first.
    """
    day_sessions = [s for s in sessions if s.date == date]
    breakdown: dict[int, TodoTimeBreakdown] = {}

    for session in day_sessions:
        entry = breakdown.setdefault(
            session.todo_id,
            TodoTimeBreakdown(todo_id=session.todo_id, todo_text=session.todo_text),
        )
        entry.total_duration += session.duration or 0
        entry.session_count += 1
        if entry.last_session is None or session.started_at > entry.last_session:
            entry.last_session = session.started_at

    total = sum(s.duration or 0 for s in day_sessions)

    if active is not None:
        running = elapsed_ms(active.started_at, now)
        total += running
        entry = breakdown.get(active.todo_id)
        if entry is None:
            breakdown[active.todo_id] = TodoTimeBreakdown(
                todo_id=active.todo_id,
                todo_text=active.todo_text,
                total_duration=running,
                session_count=1,
                last_session=active.started_at,
            )
        else:
            entry.total_duration += running

    return DailyTimerStats(
        date=date,
        total_duration=total,
        session_count=len(day_sessions),
        todo_breakdown=sorted(
            breakdown.values(), key=lambda e: e.total_duration, reverse=True
        ),
    )


def format_duration(ms: int) -> str:
    """Format milliseconds as ``1h 05m``, ``12m 30s`` or ``45s``."""
    total_seconds = max(ms, 0) // 1000
    hours, remainder = divmod(total_seconds, 3600)
    minutes, seconds = divmod(remainder, 60)
    if hours:
        return f"{hours}h {minutes:02d}m"
    if minutes:
        return f"{minutes}m {seconds:02d}s"
    return f"{seconds}s"
