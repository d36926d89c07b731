"""Storage infrastructure for focustree.

File-backed persistence for the todo tree, timer sessions and timeboxes,
using Result types for explicit error handling.
"""

from focustree.infrastructure.storage.json_storage import JsonStorage
from focustree.infrastructure.storage.repositories import (
    TimeboxRepository,
    TimerSessionRepository,
    TodoRepository,
)

__all__ = [
    "JsonStorage",
    "TodoRepository",
    "TimerSessionRepository",
    "TimeboxRepository",
]
