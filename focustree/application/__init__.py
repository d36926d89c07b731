"""Application layer for focustree.

Services that hold session state and coordinate the pure domain
functions with persistence.
"""

from focustree.application.debounce import DebouncedSaver
from focustree.application.timebox_service import TimeboxService
from focustree.application.timer_service import TimerService
from focustree.application.todo_service import TodoSession, TodoStats, prune_blank

__all__ = [
    "DebouncedSaver",
    "TodoSession",
    "TodoStats",
    "prune_blank",
    "TimerService",
    "TimeboxService",
]
