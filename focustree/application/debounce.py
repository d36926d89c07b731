"""Trailing-debounce persistence.

Rapid successive mutations collapse into one write of the latest
snapshot, issued ``delay`` seconds after the last change.
"""

import logging
import threading
from collections.abc import Callable
from typing import Generic, TypeVar

from focustree.domain.shared.result import Err, Result

logger = logging.getLogger(__name__)

T = TypeVar("T")

SaveFn = Callable[[T], Result[None, str]]


class DebouncedSaver(Generic[T]):
    """Schedule saves of a snapshot, keeping only the most recent one.

    ``schedule`` cancels any pending timer and arms a new one. When the
    timer fires, the latest snapshot is written. A failed write is logged
    and kept in ``last_error``; it is not retried.
    """

    def __init__(self, save: SaveFn, delay: float = 0.5) -> None:
        self._save = save
        self.delay = delay
        self._lock = threading.Lock()
        self._write_lock = threading.Lock()
        self._timer: threading.Timer | None = None
        self._pending: T | None = None
        self._has_pending = False
        self.last_error: str | None = None
        self.save_count = 0

    @property
    def pending(self) -> bool:
        with self._lock:
            return self._has_pending

    def schedule(self, snapshot: T) -> None:
        """Replace the pending snapshot and restart the delay."""
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._pending = snapshot
            self._has_pending = True
            if self.delay <= 0:
                self._timer = None
            else:
                self._timer = threading.Timer(self.delay, self._fire)
                self._timer.daemon = True
                self._timer.start()
        if self.delay <= 0:
            self._fire()

    def flush(self) -> None:
        """Write the pending snapshot now, if there is one."""
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
        self._fire()

    def cancel(self) -> None:
        """Drop the pending snapshot without writing it."""
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
            self._pending = None
            self._has_pending = False

    def _fire(self) -> None:
        # Writes never overlap; the snapshot is taken once the previous
        # write is done, so the latest one always lands last.
        with self._write_lock:
            with self._lock:
                if not self._has_pending:
                    return
                snapshot = self._pending
                self._pending = None
                self._has_pending = False
                self._timer = None

            try:
                result = self._save(snapshot)
            except Exception as e:
                logger.error(f"Save failed: {e}")
                self.last_error = str(e)
                return

            if isinstance(result, Err):
                logger.error(f"Save failed: {result.error}")
                self.last_error = result.error
                return

            self.last_error = None
            self.save_count += 1
            logger.debug("Saved snapshot")
