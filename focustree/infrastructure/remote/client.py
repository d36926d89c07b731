"""HTTP client for a remote focustree store.

Speaks the same ``/api`` contract the bundled server exposes, so a
session can persist to another machine instead of a local file.
"""

import logging
from typing import Any

import httpx

from focustree.domain.shared.result import Err, Ok, Result, flat_map
from focustree.domain.timebox.models import TimeboxItem
from focustree.domain.timer.models import TimerSession
from focustree.domain.todo.models import Todo, dump_todos
from focustree.domain.todo.validation import validate_todos

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "http://127.0.0.1:8000"


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return f"HTTP {response.status_code}"
    if isinstance(body, dict) and "error" in body:
        return str(body["error"])
    return f"HTTP {response.status_code}"


class TodoApiClient:
    """Synchronous client for the todo, timer-session and timebox stores.

    ``load``/``save`` mirror ``TodoRepository`` so either can back a
    ``TodoSession``.

    Example:
        client = TodoApiClient("http://localhost:8000")
        result = client.load()
        if isinstance(result, Ok):
            todos = result.value
    """

    def __init__(
        self,
        base_url: str = DEFAULT_API_URL,
        timeout: float = 10.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._client = httpx.Client(
            base_url=f"{self.base_url}/api", timeout=timeout, transport=transport
        )

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "TodoApiClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def _request(self, method: str, url: str, **kwargs: Any) -> Result[Any, str]:
        try:
            response = self._client.request(method, url, **kwargs)
        except httpx.ConnectError:
            logger.error(f"Cannot connect to focustree at {self.base_url}")
            return Err(f"Cannot connect to {self.base_url}")
        except httpx.HTTPError as e:
            logger.error(f"Request {method} {url} failed: {e}")
            return Err(f"Request failed: {e}")

        if response.is_error:
            return Err(_error_message(response))
        return Ok(response.json())

    # Todos

    def load(self) -> Result[list[Todo], str]:
        return flat_map(self._request("GET", "/todos"), validate_todos)

    def save(self, todos: list[Todo]) -> Result[None, str]:
        result = self._request("POST", "/todos", json=dump_todos(todos))
        if isinstance(result, Err):
            return result
        return Ok(None)

    # Timer sessions

    def list_sessions(self, date: str | None = None) -> Result[list[TimerSession], str]:
        params = {"date": date} if date else None
        result = self._request("GET", "/timer-sessions", params=params)
        if isinstance(result, Err):
            return result
        return Ok([TimerSession.model_validate(item) for item in result.value])

    def add_session(self, session: TimerSession) -> Result[TimerSession, str]:
        payload = session.model_dump(mode="json", by_alias=True, exclude_none=True)
        result = self._request("POST", "/timer-sessions", json=payload)
        if isinstance(result, Err):
            return result
        return Ok(session)

    def update_session(self, session_id: str, updates: dict[str, Any]) -> Result[None, str]:
        result = self._request(
            "PUT", "/timer-sessions", json={"id": session_id, "updates": updates}
        )
        if isinstance(result, Err):
            return result
        return Ok(None)

    def delete_session(self, session_id: str) -> Result[None, str]:
        result = self._request("DELETE", "/timer-sessions", params={"id": session_id})
        if isinstance(result, Err):
            return result
        return Ok(None)

    # Timeboxes

    def list_timeboxes(self) -> Result[list[TimeboxItem], str]:
        result = self._request("GET", "/timeboxes")
        if isinstance(result, Err):
            return result
        return Ok([TimeboxItem.model_validate(item) for item in result.value])

    def save_timeboxes(self, items: list[TimeboxItem]) -> Result[None, str]:
        payload = [item.model_dump(mode="json", by_alias=True, exclude_none=True) for item in items]
        result = self._request("POST", "/timeboxes", json=payload)
        if isinstance(result, Err):
            return result
        return Ok(None)
