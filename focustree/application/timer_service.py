"""Timer service.

Tracks one running timer at a time. Starting a timer writes a session
with zero duration straight away; stopping it fills in the end time and
duration. A session that has no end time is the running timer, so a new
process can pick up a timer started by another.
"""

import logging
from datetime import UTC, datetime
from typing import Any, Protocol

from focustree.domain.shared import Err, Ok, Result
from focustree.domain.timer import (
    ActiveTimer,
    DailyTimerStats,
    TimerSession,
    compute_daily_stats,
    elapsed_ms,
    generate_session_id,
    today_date_string,
    todo_time_spent,
)
from focustree.domain.todo.models import now_iso

logger = logging.getLogger(__name__)


class TimerSessionStore(Protocol):
    def list_for_date(self, date: str | None = None) -> Result[list[TimerSession], str]: ...

    def add(self, session: TimerSession) -> Result[TimerSession, str]: ...

    def update(self, session_id: str, updates: dict[str, Any]) -> Result[TimerSession, str]: ...

    def delete(self, session_id: str) -> Result[None, str]: ...


class TimerService:
    """Start/stop time tracking against a session store."""

    def __init__(self, store: TimerSessionStore) -> None:
        self._store = store
        self.sessions: list[TimerSession] = []
        self.active: ActiveTimer | None = None
        self._current_session_id: str | None = None
        self.error: str | None = None

    def load_today_sessions(self, date: str | None = None) -> Result[list[TimerSession], str]:
        """Load one day's sessions and resume a running timer among them."""
        result = self._store.list_for_date(date or today_date_string())
        if isinstance(result, Err):
            logger.error(f"Failed to load timer sessions: {result.error}")
            self.error = result.error
            return result

        self.error = None
        self.sessions = result.value
        running = next((s for s in self.sessions if s.ended_at is None), None)
        if running is not None:
            self._current_session_id = running.id
            self.active = ActiveTimer(
                todo_id=running.todo_id,
                todo_text=running.todo_text,
                todo_path=running.todo_path,
                started_at=running.started_at,
            )
        return result

    def start_timer(
        self,
        todo_id: int,
        todo_text: str,
        todo_path: list[str] | None = None,
    ) -> Result[ActiveTimer, str]:
        """Start timing a todo, stopping any running timer first."""
        if self.active is not None:
            stopped = self.stop_timer()
            if isinstance(stopped, Err):
                return stopped

        started_at = now_iso()
        session = TimerSession(
            id=generate_session_id(),
            todo_id=todo_id,
            todo_text=todo_text,
            todo_path=todo_path,
            started_at=started_at,
            duration=0,
            date=today_date_string(),
        )
        result = self._store.add(session)
        if isinstance(result, Err):
            logger.error(f"Failed to start timer: {result.error}")
            self.error = result.error
            return result

        self.sessions = [session, *self.sessions]
        self._current_session_id = session.id
        self.active = ActiveTimer(
            todo_id=todo_id, todo_text=todo_text, todo_path=todo_path, started_at=started_at
        )
        logger.info(f"Started timer for '{todo_text}'")
        return Ok(self.active)

    def stop_timer(self, now: datetime | None = None) -> Result[TimerSession, str]:
        """Stop the running timer and record its duration."""
        if self.active is None or self._current_session_id is None:
            return Err("No active timer")

        now = now or datetime.now(UTC)
        updates = {
            "endedAt": now.isoformat(timespec="milliseconds").replace("+00:00", "Z"),
            "duration": max(elapsed_ms(self.active.started_at, now), 0),
        }
        result = self._store.update(self._current_session_id, updates)
        if isinstance(result, Err):
            logger.error(f"Failed to stop timer: {result.error}")
            self.error = result.error
            return result

        self.sessions = [result.value if s.id == result.value.id else s for s in self.sessions]
        self.active = None
        self._current_session_id = None
        return result

    def delete_session(self, session_id: str) -> Result[None, str]:
        result = self._store.delete(session_id)
        if isinstance(result, Err):
            self.error = result.error
            return result
        self.sessions = [s for s in self.sessions if s.id != session_id]
        if session_id == self._current_session_id:
            self.active = None
            self._current_session_id = None
        return result

    def elapsed(self, now: datetime | None = None) -> int:
        """Milliseconds on the running timer, 0 when idle."""
        if self.active is None:
            return 0
        return elapsed_ms(self.active.started_at, now)

    def todo_time_spent(self, todo_id: int) -> int:
        return todo_time_spent(self.sessions, todo_id)

    def daily_stats(self, date: str | None = None, now: datetime | None = None) -> DailyTimerStats:
        return compute_daily_stats(
            self.sessions, date or today_date_string(), active=self.active, now=now
        )
