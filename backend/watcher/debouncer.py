"""
DiffWatch Debouncer.

Coalesces bursts of file system events into a single flush.
Requires Python 3.11+.
"""

import threading
import time
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from models.payload import ChangeType
from utils.logger import LoggerMixin


@dataclass
class PendingChange:
    """The most recent file change waiting for the window to elapse."""

    path: Path
    change_type: ChangeType
    timestamp: float


class Debouncer(LoggerMixin):
    """
    Debounces rapid file changes.

    Each new change cancels the pending timer and starts a fresh one.
    Only the latest change within the window is handed to the callback,
    so a burst of saves produces exactly one flush.
    """

    def __init__(
        self,
        delay_ms: int = 2000,
        callback: Callable[[Path, ChangeType], Any] | None = None,
    ) -> None:
        """
        Initialize the debouncer.

        Args:
            delay_ms: Quiet period in milliseconds before flushing
            callback: Function called with the latest (path, change_type)
        """
        self._delay = delay_ms / 1000.0
        self._callback = callback
        self._pending: PendingChange | None = None
        self._timer: threading.Timer | None = None
        self._lock = threading.Lock()
        # Serializes flushes so at most one callback runs at a time
        self._run_lock = threading.Lock()

    def debounce(self, path: Path, change_type: ChangeType) -> None:
        """
        Record a file change and restart the timer.

        Args:
            path: Path to the changed file
            change_type: Type of change
        """
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None

            self._pending = PendingChange(
                path=path,
                change_type=change_type,
                timestamp=time.time(),
            )

            self._timer = threading.Timer(self._delay, self._process_pending)
            self._timer.daemon = True
            self._timer.start()

    def _take_pending(self) -> PendingChange | None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
            pending = self._pending
            self._pending = None
        return pending

    def _process_pending(self) -> None:
        """Timer target: flush the latest pending change."""
        pending = self._take_pending()
        if pending is None:
            return
        self._run(pending)

    def _run(self, pending: PendingChange) -> None:
        if self._callback is None:
            return

        self.log.debug(
            "processing_debounced_change",
            path=str(pending.path),
            change_type=pending.change_type.value,
        )

        with self._run_lock:
            try:
                self._callback(pending.path, pending.change_type)
            except Exception as e:
                self.log.error("debounce_callback_failed", error=str(e))

    def flush(self) -> tuple[Path, ChangeType] | None:
        """
        Immediately process the pending change, if any.

        Returns:
            The (path, change_type) that was flushed, or None
        """
        pending = self._take_pending()
        if pending is None:
            return None

        self._run(pending)
        return pending.path, pending.change_type

    def clear(self) -> None:
        """Drop the pending change without processing it."""
        self._take_pending()

    @property
    def has_pending(self) -> bool:
        """Check if a change is waiting for the window to elapse."""
        return self._pending is not None

    @property
    def pending(self) -> tuple[Path, ChangeType] | None:
        """The change that would be flushed next."""
        pending = self._pending
        if pending is None:
            return None
        return pending.path, pending.change_type
