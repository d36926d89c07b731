"""focustree - hierarchical todo tree with focus priorities, recurrence and time tracking."""

__version__ = "1.0.0"
