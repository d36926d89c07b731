"""Tests for timer statistics and the timer service."""

from datetime import UTC, datetime, timedelta

import pytest

from focustree.application import TimerService
from focustree.domain.shared import Err, Ok
from focustree.domain.timer import (
    ActiveTimer,
    TimerSession,
    compute_daily_stats,
    format_duration,
    generate_session_id,
    sort_sessions,
    todo_time_spent,
)
from focustree.infrastructure.storage import TimerSessionRepository

DAY = "2024-03-01"


def finished(session_id, todo_id, started_at, duration, date=DAY, text=None):
    return TimerSession(
        id=session_id,
        todo_id=todo_id,
        todo_text=text or f"Todo {todo_id}",
        started_at=started_at,
        ended_at=started_at,
        duration=duration,
        date=date,
    )


@pytest.fixture
def sessions():
    return [
        finished("a", 1, "2024-03-01T08:00:00.000Z", 600_000),
        finished("b", 2, "2024-03-01T09:00:00.000Z", 1_500_000),
        finished("c", 1, "2024-03-01T10:00:00.000Z", 300_000),
        finished("d", 1, "2024-02-29T10:00:00.000Z", 999_000, date="2024-02-29"),
    ]


@pytest.mark.parametrize(
    "ms, expected",
    [
        (0, "0s"),
        (45_000, "45s"),
        (750_000, "12m 30s"),
        (3_900_000, "1h 05m"),
        (-5, "0s"),
    ],
)
def test_format_duration(ms, expected):
    assert format_duration(ms) == expected


def test_session_ids_are_unique():
    assert generate_session_id().startswith("session-")
    assert generate_session_id() != generate_session_id()


def test_sort_sessions_newest_first(sessions):
    assert [s.id for s in sort_sessions(sessions)] == ["c", "b", "a", "d"]


def test_todo_time_spent_spans_days(sessions):
    assert todo_time_spent(sessions, 1) == 1_899_000


def test_daily_stats_breakdown(sessions):
    stats = compute_daily_stats(sessions, DAY)
    assert stats.total_duration == 2_400_000
    assert stats.session_count == 3
    assert [(e.todo_id, e.total_duration, e.session_count) for e in stats.todo_breakdown] == [
        (2, 1_500_000, 1),
        (1, 900_000, 2),
    ]
    assert stats.todo_breakdown[1].last_session == "2024-03-01T10:00:00.000Z"


def test_daily_stats_include_running_timer(sessions):
    active = ActiveTimer(todo_id=3, todo_text="Todo 3", started_at="2024-03-01T11:00:00.000Z")
    now = datetime(2024, 3, 1, 12, 0, tzinfo=UTC)
    stats = compute_daily_stats(sessions, DAY, active=active, now=now)

    assert stats.total_duration == 2_400_000 + 3_600_000
    assert stats.todo_breakdown[0].todo_id == 3
    assert stats.session_count == 3


class TestTimerService:
    def test_start_and_stop_records_duration(self, data_dir):
        repo = TimerSessionRepository(data_dir)
        service = TimerService(repo)
        service.load_today_sessions()

        started = service.start_timer(7, "Write report", ["Work", "Write report"])
        assert isinstance(started, Ok)
        stored = repo.list_all().value[0]
        assert stored.duration == 0
        assert stored.ended_at is None

        start = datetime.fromisoformat(started.value.started_at.replace("Z", "+00:00"))
        stopped = service.stop_timer(now=start + timedelta(minutes=5))
        assert isinstance(stopped, Ok)
        assert service.active is None
        assert stopped.value.duration == 300_000
        assert repo.list_all().value[0].duration == 300_000

    def test_stop_without_timer(self, data_dir):
        service = TimerService(TimerSessionRepository(data_dir))
        assert service.stop_timer() == Err("No active timer")

    def test_starting_again_stops_previous(self, data_dir):
        repo = TimerSessionRepository(data_dir)
        service = TimerService(repo)
        service.start_timer(1, "One")
        service.start_timer(2, "Two")

        stored = repo.list_all().value
        assert len(stored) == 2
        assert [s.ended_at is None for s in stored if s.todo_id == 1] == [False]
        assert service.active.todo_id == 2

    def test_running_timer_is_resumed(self, data_dir):
        TimerService(TimerSessionRepository(data_dir)).start_timer(4, "Four")

        resumed = TimerService(TimerSessionRepository(data_dir))
        resumed.load_today_sessions()
        assert resumed.active is not None
        assert resumed.active.todo_id == 4
        assert isinstance(resumed.stop_timer(), Ok)

    def test_delete_running_session(self, data_dir):
        service = TimerService(TimerSessionRepository(data_dir))
        service.start_timer(4, "Four")
        session_id = service.sessions[0].id

        assert service.delete_session(session_id) == Ok(None)
        assert service.active is None
        assert service.elapsed() == 0
