"""Timebox domain - scheduling todos into blocks of the day."""

from .models import DEFAULT_DURATION, TimeboxItem, TimeSlot
from .slots import (
    end_time,
    from_minutes,
    generate_time_slots,
    generate_timebox_id,
    items_for_date,
    overlaps,
    to_minutes,
)

__all__ = [
    "DEFAULT_DURATION",
    "TimeboxItem",
    "TimeSlot",
    "end_time",
    "from_minutes",
    "generate_time_slots",
    "generate_timebox_id",
    "items_for_date",
    "overlaps",
    "to_minutes",
]
