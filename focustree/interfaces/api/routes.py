"""FastAPI routes for focustree.

Three flat JSON stores under the configured data directory: the todo
tree, timer sessions and timeboxes. Every failure is answered with a
``{"error": message}`` body.
"""

import logging
from pathlib import Path
from typing import Any

from fastapi import APIRouter, Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from focustree import __version__
from focustree.config import Settings, load_settings
from focustree.domain.shared.result import Err
from focustree.domain.timer.models import TimerSession
from focustree.domain.todo.models import dump_todos
from focustree.infrastructure.storage import (
    TimeboxRepository,
    TimerSessionRepository,
    TodoRepository,
)
from focustree.interfaces.api.schemas import (
    AppInfo,
    ErrorResponse,
    SuccessResponse,
    UpdateSessionRequest,
)

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """Raised by a route to answer with ``{"error": message}``."""

    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.message = message


def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


def get_data_dir(request: Request) -> Path:
    return Path(request.app.state.settings.data_dir)


def get_todo_repository(data_dir: Path = Depends(get_data_dir)) -> TodoRepository:
    return TodoRepository(data_dir)


def get_session_repository(data_dir: Path = Depends(get_data_dir)) -> TimerSessionRepository:
    return TimerSessionRepository(data_dir)


def get_timebox_repository(data_dir: Path = Depends(get_data_dir)) -> TimeboxRepository:
    return TimeboxRepository(data_dir)


async def _read_json(request: Request, action: str) -> Any:
    try:
        return await request.json()
    except ValueError as e:
        raise ApiError(400, f"Failed to {action}: invalid JSON body ({e})") from e


def _dump(items: list) -> list[dict[str, Any]]:
    return [item.model_dump(mode="json", by_alias=True, exclude_none=True) for item in items]


# =============================================================================
# Router
# =============================================================================


router = APIRouter(
    prefix="/api",
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)


# =============================================================================
# Todos
# =============================================================================


@router.get("/todos")
def get_todos(repo: TodoRepository = Depends(get_todo_repository)):
    """Return the whole tree, creating an empty store on first use."""
    result = repo.load()
    if isinstance(result, Err):
        logger.error(f"Error reading todos: {result.error}")
        raise ApiError(500, f"Failed to read todos: {result.error}")
    return dump_todos(result.value)


@router.post("/todos", response_model=SuccessResponse)
async def save_todos(request: Request, repo: TodoRepository = Depends(get_todo_repository)):
    """Validate and overwrite the whole tree, keeping a ``.backup`` copy."""
    payload = await _read_json(request, "save todos")
    result = repo.save_raw(payload)
    if isinstance(result, Err):
        logger.error(f"Error saving todos: {result.error}")
        status = 400 if result.error.startswith("Failed to save todos") else 500
        raise ApiError(status, result.error)
    return SuccessResponse()


# =============================================================================
# Timer Sessions
# =============================================================================


@router.get("/timer-sessions")
def list_timer_sessions(
    date: str | None = None,
    repo: TimerSessionRepository = Depends(get_session_repository),
):
    """All sessions, or only those on ``date`` (``YYYY-MM-DD``)."""
    result = repo.list_for_date(date)
    if isinstance(result, Err):
        logger.error(f"Error reading timer sessions: {result.error}")
        raise ApiError(500, "Failed to read timer sessions")
    return _dump(result.value)


@router.post("/timer-sessions", response_model=SuccessResponse)
async def add_timer_session(
    request: Request,
    repo: TimerSessionRepository = Depends(get_session_repository),
):
    payload = await _read_json(request, "save timer session")
    try:
        session = TimerSession.model_validate(payload)
    except ValidationError as e:
        raise ApiError(400, f"Invalid timer session: {e.errors()[0]['msg']}") from e

    result = repo.add(session)
    if isinstance(result, Err):
        logger.error(f"Error saving timer session: {result.error}")
        raise ApiError(500, "Failed to save timer session")
    return SuccessResponse()


@router.put("/timer-sessions", response_model=SuccessResponse)
def update_timer_session(
    req: UpdateSessionRequest,
    repo: TimerSessionRepository = Depends(get_session_repository),
):
    result = repo.update(req.id, req.updates)
    if isinstance(result, Err):
        if result.error == "Session not found":
            raise ApiError(404, result.error)
        logger.error(f"Error updating timer session: {result.error}")
        raise ApiError(500, "Failed to update timer session")
    return SuccessResponse()


@router.delete("/timer-sessions", response_model=SuccessResponse)
def delete_timer_session(
    id: str | None = None,
    repo: TimerSessionRepository = Depends(get_session_repository),
):
    if not id:
        raise ApiError(400, "Session ID required")

    result = repo.delete(id)
    if isinstance(result, Err):
        if result.error == "Session not found":
            raise ApiError(404, result.error)
        logger.error(f"Error deleting timer session: {result.error}")
        raise ApiError(500, "Failed to delete timer session")
    return SuccessResponse()


# =============================================================================
# Timeboxes
# =============================================================================


@router.get("/timeboxes")
def get_timeboxes(repo: TimeboxRepository = Depends(get_timebox_repository)):
    result = repo.load()
    if isinstance(result, Err):
        logger.error(f"Failed to load timeboxes: {result.error}")
        raise ApiError(500, "Failed to load timeboxes")
    return _dump(result.value)


@router.post("/timeboxes", response_model=SuccessResponse)
async def save_timeboxes(
    request: Request,
    repo: TimeboxRepository = Depends(get_timebox_repository),
):
    payload = await _read_json(request, "save timeboxes")
    if not isinstance(payload, list):
        raise ApiError(400, "Invalid data format")

    result = repo.save_raw(payload)
    if isinstance(result, Err):
        logger.error(f"Failed to save timeboxes: {result.error}")
        if result.error.startswith("Invalid timebox data"):
            raise ApiError(400, result.error)
        raise ApiError(500, "Failed to save timeboxes")
    return SuccessResponse()


# =============================================================================
# App
# =============================================================================


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create the FastAPI application."""
    settings = settings or load_settings()

    app = FastAPI(
        title="focustree",
        description="Hierarchical todo tree with focus priorities and time tracking",
        version=__version__,
    )
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["http://localhost:5173", "http://localhost:3000"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(ApiError, api_error_handler)

    app.include_router(router)

    @app.get("/", response_model=AppInfo)
    def root():
        return AppInfo(name="focustree", version=__version__)

    return app
