"""Timebox service - the day calendar of scheduled todos."""

import logging
from typing import Any, Protocol

from focustree.application.debounce import DebouncedSaver
from focustree.domain.shared import Err, Result
from focustree.domain.timebox import (
    DEFAULT_DURATION,
    TimeboxItem,
    generate_timebox_id,
    items_for_date,
)
from focustree.domain.timer import today_date_string

logger = logging.getLogger(__name__)


class TimeboxStore(Protocol):
    def load(self) -> Result[list[TimeboxItem], str]: ...

    def save(self, items: list[TimeboxItem]) -> Result[None, str]: ...


class TimeboxService:
    """In-memory timebox items with debounced persistence."""

    def __init__(self, store: TimeboxStore, delay: float = 0.5) -> None:
        self._store = store
        self.items: list[TimeboxItem] = []
        self.default_duration = DEFAULT_DURATION
        self._load_error: str | None = None
        self._saver: DebouncedSaver[list[TimeboxItem]] = DebouncedSaver(store.save, delay)

    @property
    def error(self) -> str | None:
        return self._load_error or self._saver.last_error

    def load(self) -> list[TimeboxItem]:
        result = self._store.load()
        if isinstance(result, Err):
            logger.error(f"Failed to load timeboxes: {result.error}")
            self._load_error = result.error
            return self.items
        self._load_error = None
        self.items = result.value
        return self.items

    def _commit(self, items: list[TimeboxItem]) -> list[TimeboxItem]:
        self.items = items
        self._saver.schedule(items)
        return items

    def flush(self) -> None:
        self._saver.flush()

    def close(self) -> None:
        self._saver.flush()
        self._saver.cancel()

    def add_item(
        self,
        todo_id: int,
        start_time: str,
        duration: int | None = None,
        date: str | None = None,
    ) -> TimeboxItem:
        item = TimeboxItem(
            id=generate_timebox_id(),
            todo_id=todo_id,
            start_time=start_time,
            duration=duration or self.default_duration,
            date=date or today_date_string(),
        )
        self._commit([*self.items, item])
        return item

    def update_item(self, item_id: str, **updates: Any) -> list[TimeboxItem]:
        if not any(item.id == item_id for item in self.items):
            logger.warning(f"Timebox {item_id} not found")
            return self.items
        return self._commit(
            [
                TimeboxItem.model_validate({**item.model_dump(), **updates})
                if item.id == item_id
                else item
                for item in self.items
            ]
        )

    def remove_item(self, item_id: str) -> list[TimeboxItem]:
        return self._commit([item for item in self.items if item.id != item_id])

    def move_item(self, item_id: str, start_time: str) -> list[TimeboxItem]:
        return self.update_item(item_id, start_time=start_time)

    def resize_item(self, item_id: str, duration: int) -> list[TimeboxItem]:
        return self.update_item(item_id, duration=duration)

    def items_for_date(self, date: str) -> list[TimeboxItem]:
        return items_for_date(self.items, date)

    def clear_date(self, date: str) -> list[TimeboxItem]:
        return self._commit([item for item in self.items if item.date != date])
