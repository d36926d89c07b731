"""Timebox calendar models."""

from pydantic import ConfigDict, Field

from focustree.domain.todo.models import CamelModel

DEFAULT_DURATION = 30


class TimeboxItem(CamelModel):
    """A todo scheduled into a block of the day.

    ``start_time`` is ``HH:mm``, ``duration`` is in minutes.
    """

    model_config = ConfigDict(extra="allow")

    id: str
    todo_id: int
    start_time: str = Field(pattern=r"^\d{2}:\d{2}$")
    duration: int = Field(default=DEFAULT_DURATION, ge=1)
    date: str


class TimeSlot(CamelModel):
    time: str
    hour: int
    minute: int
