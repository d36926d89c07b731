"""Infrastructure layer for focustree.

I/O behind Result-returning interfaces.

Exports:
    Storage:
        - JsonStorage: Low-level JSON file I/O
        - TodoRepository: Todo tree persistence
        - TimerSessionRepository: Timer session persistence
        - TimeboxRepository: Timebox persistence

    Remote:
        - TodoApiClient: httpx client for a remote focustree server
"""

from focustree.infrastructure.remote import TodoApiClient
from focustree.infrastructure.storage import (
    JsonStorage,
    TimeboxRepository,
    TimerSessionRepository,
    TodoRepository,
)

__all__ = [
    # Storage
    "JsonStorage",
    "TodoRepository",
    "TimerSessionRepository",
    "TimeboxRepository",
    # Remote
    "TodoApiClient",
]
