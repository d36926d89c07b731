"""Repositories for the three flat JSON stores.

Each repository owns one file under the data directory and converts
between the camelCase JSON on disk and the domain models, returning
Result types for explicit error handling.
"""

import logging
from pathlib import Path
from typing import Any

from pydantic import TypeAdapter, ValidationError

from focustree.domain.shared.result import Err, Ok, Result, flat_map
from focustree.domain.timebox.models import TimeboxItem
from focustree.domain.timer.models import TimerSession
from focustree.domain.timer.stats import sort_sessions
from focustree.domain.todo.models import Todo, dump_todos
from focustree.domain.todo.validation import validate_todos
from focustree.infrastructure.storage.json_storage import JsonStorage

logger = logging.getLogger(__name__)

TODOS_FILE = "todos.json"
TIMER_SESSIONS_FILE = "timer-sessions.json"
TIMEBOXES_FILE = "timeboxes.json"

_SESSION_LIST = TypeAdapter(list[TimerSession])
_TIMEBOX_LIST = TypeAdapter(list[TimeboxItem])


def _dump_models(items: list) -> list[dict[str, Any]]:
    return [item.model_dump(mode="json", by_alias=True, exclude_none=True) for item in items]


class TodoRepository:
    """Persistence for the whole todo tree (``todos.json``).

    The tree is loaded and saved as one collection; there is no
    per-record addressing.
    """

    def __init__(self, data_dir: Path, storage: JsonStorage | None = None) -> None:
        """Initialize the repository.

        Args:
            data_dir: Directory holding the store files.
            storage: JsonStorage instance to use. Creates new one if not provided.
        """
        self._storage = storage or JsonStorage()
        self.path = Path(data_dir) / TODOS_FILE

    def load(self) -> Result[list[Todo], str]:
        """Load and validate the stored tree, creating an empty store if absent."""
        created = self._storage.ensure_json(self.path, [])
        if isinstance(created, Err):
            return created

        return flat_map(self._storage.load_json(self.path), validate_todos)

    def save(self, todos: list[Todo]) -> Result[None, str]:
        """Back up the current file, then overwrite it with ``todos``."""
        return self.save_raw(dump_todos(todos))

    def save_raw(self, data: Any) -> Result[None, str]:
        """Validate a raw JSON payload and persist it.

        Returns:
            Err("Failed to save todos: ...") when validation fails, in which
            case nothing is written.
        """
        validated = validate_todos(data)
        if isinstance(validated, Err):
            return Err(f"Failed to save todos: {validated.error}")

        backed_up = self._storage.backup(self.path)
        if isinstance(backed_up, Err):
            logger.warning(backed_up.error)

        return self._storage.save_json(self.path, dump_todos(validated.value))


class TimerSessionRepository:
    """Persistence for timer sessions (``timer-sessions.json``).

    Sessions are kept sorted by ``startedAt``, newest first.
    """

    def __init__(self, data_dir: Path, storage: JsonStorage | None = None) -> None:
        self._storage = storage or JsonStorage()
        self.path = Path(data_dir) / TIMER_SESSIONS_FILE

    def list_all(self) -> Result[list[TimerSession], str]:
        created = self._storage.ensure_json(self.path, [])
        if isinstance(created, Err):
            return created

        result = self._storage.load_json(self.path)
        if isinstance(result, Err):
            return result
        try:
            return Ok(_SESSION_LIST.validate_python(result.value))
        except ValidationError as e:
            return Err(f"Invalid timer session data: {e}")

    def list_for_date(self, date: str | None = None) -> Result[list[TimerSession], str]:
        """Sessions on exactly ``date``, or all sessions when it is None."""
        result = self.list_all()
        if isinstance(result, Err) or date is None:
            return result
        return Ok([s for s in result.value if s.date == date])

    def add(self, session: TimerSession) -> Result[TimerSession, str]:
        result = self.list_all()
        if isinstance(result, Err):
            return result

        sessions = sort_sessions([*result.value, session])
        saved = self._storage.save_json(self.path, _dump_models(sessions))
        if isinstance(saved, Err):
            return saved
        return Ok(session)

    def update(self, session_id: str, updates: dict[str, Any]) -> Result[TimerSession, str]:
        """Merge camelCase ``updates`` into the session with ``session_id``.

        Returns:
            Err("Session not found") when no session has that id.
        """
        result = self.list_all()
        if isinstance(result, Err):
            return result

        sessions = result.value
        index = next((i for i, s in enumerate(sessions) if s.id == session_id), None)
        if index is None:
            return Err("Session not found")

        merged = {**_dump_models([sessions[index]])[0], **updates, "id": session_id}
        try:
            sessions[index] = TimerSession.model_validate(merged)
        except ValidationError as e:
            return Err(f"Invalid session update: {e}")

        saved = self._storage.save_json(self.path, _dump_models(sessions))
        if isinstance(saved, Err):
            return saved
        return Ok(sessions[index])

    def delete(self, session_id: str) -> Result[None, str]:
        result = self.list_all()
        if isinstance(result, Err):
            return result

        remaining = [s for s in result.value if s.id != session_id]
        if len(remaining) == len(result.value):
            return Err("Session not found")
        return self._storage.save_json(self.path, _dump_models(remaining))


class TimeboxRepository:
    """Persistence for timebox items (``timeboxes.json``)."""

    def __init__(self, data_dir: Path, storage: JsonStorage | None = None) -> None:
        self._storage = storage or JsonStorage()
        self.path = Path(data_dir) / TIMEBOXES_FILE

    def load(self) -> Result[list[TimeboxItem], str]:
        created = self._storage.ensure_json(self.path, [])
        if isinstance(created, Err):
            return created

        result = self._storage.load_json(self.path)
        if isinstance(result, Err):
            return result
        try:
            return Ok(_TIMEBOX_LIST.validate_python(result.value))
        except ValidationError as e:
            return Err(f"Invalid timebox data: {e}")

    def save(self, items: list[TimeboxItem]) -> Result[None, str]:
        return self.save_raw(_dump_models(items))

    def save_raw(self, data: Any) -> Result[None, str]:
        """Validate a raw JSON array, then back up and overwrite the store.

        Returns:
            Err("Invalid timebox data: ...") when an item does not validate,
            in which case nothing is written.
        """
        if not isinstance(data, list):
            return Err("Timeboxes must be an array")
        try:
            items = _TIMEBOX_LIST.validate_python(data)
        except ValidationError as e:
            return Err(f"Invalid timebox data: {e}")

        backed_up = self._storage.backup(self.path)
        if isinstance(backed_up, Err):
            logger.warning(backed_up.error)

        return self._storage.save_json(self.path, _dump_models(items))
