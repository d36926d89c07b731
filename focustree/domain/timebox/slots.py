"""Calendar slot helpers for timeboxing."""

import uuid
from datetime import UTC, datetime

from .models import TimeboxItem, TimeSlot


def generate_timebox_id() -> str:
    return f"timebox-{int(datetime.now(UTC).timestamp() * 1000)}-{uuid.uuid4().hex[:8]}"


def generate_time_slots(
    start_hour: int = 6,
    end_hour: int = 24,
    step_minutes: int = 30,
) -> list[TimeSlot]:
    """Slots from ``start_hour`` (inclusive) to ``end_hour`` (exclusive)."""
    slots = []
    for total in range(start_hour * 60, end_hour * 60, step_minutes):
        hour, minute = divmod(total, 60)
        slots.append(TimeSlot(time=f"{hour:02d}:{minute:02d}", hour=hour, minute=minute))
    return slots


def to_minutes(hhmm: str) -> int:
    hours, minutes = hhmm.split(":")
    return int(hours) * 60 + int(minutes)


def from_minutes(total: int) -> str:
    hours, minutes = divmod(total, 60)
    return f"{hours:02d}:{minutes:02d}"


def end_time(item: TimeboxItem) -> str:
    """``HH:mm`` at which the item ends. May run past 24:00."""
    return from_minutes(to_minutes(item.start_time) + item.duration)


def items_for_date(items: list[TimeboxItem], date: str) -> list[TimeboxItem]:
    """Items scheduled on ``date``, earliest first."""
    return sorted(
        (item for item in items if item.date == date),
        key=lambda item: to_minutes(item.start_time),
    )


def overlaps(a: TimeboxItem, b: TimeboxItem) -> bool:
    if a.date != b.date:
        return False
    a_start, b_start = to_minutes(a.start_time), to_minutes(b.start_time)
    return a_start < b_start + b.duration and b_start < a_start + a.duration
