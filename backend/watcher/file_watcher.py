"""
DiffWatch File Watcher.

Cross-platform working tree monitoring using watchdog.
Requires Python 3.11+.
"""

import fnmatch
from collections.abc import Callable
from pathlib import Path
from typing import Any

from watchdog.observers import Observer
from watchdog.events import (
    FileSystemEvent,
    FileSystemEventHandler,
    FileSystemMovedEvent,
)

from models.payload import ChangeType
from watcher.debouncer import Debouncer
from utils.config import get_settings
from utils.logger import LoggerMixin


class ChangeEventHandler(FileSystemEventHandler, LoggerMixin):
    """
    Handles file system events inside a working tree.

    Directory events are dropped, as are hidden paths and any path with
    a component matching an ignore pattern. Everything else is forwarded
    to the debouncer.
    """

    def __init__(
        self,
        root_path: Path,
        debouncer: Debouncer,
        ignore_patterns: list[str] | None = None,
        ignore_hidden: bool = True,
    ) -> None:
        """
        Initialize the handler.

        Args:
            root_path: Watched root; ignore rules apply to paths relative to it
            debouncer: Debouncer to coalesce changes
            ignore_patterns: Component names or glob patterns to ignore
            ignore_hidden: Skip any path with a dot-prefixed component
        """
        super().__init__()
        self._root_path = root_path
        self._debouncer = debouncer
        self._ignore_patterns = ignore_patterns or []
        self._ignore_hidden = ignore_hidden

    def _relative(self, path: str) -> Path:
        try:
            return Path(path).relative_to(self._root_path)
        except ValueError:
            return Path(path)

    def should_ignore(self, path: str) -> bool:
        """Check if a path should be ignored."""
        for part in self._relative(path).parts:
            if self._ignore_hidden and part.startswith("."):
                return True
            for pattern in self._ignore_patterns:
                if part == pattern or fnmatch.fnmatch(part, pattern):
                    return True
        return False

    def _dispatch(self, path: str | bytes, change_type: ChangeType) -> None:
        if isinstance(path, bytes):
            path = path.decode()
        if self.should_ignore(path):
            return

        self.log.info(f"file_{change_type.value}", path=self._relative(path).as_posix())
        self._debouncer.debounce(Path(path), change_type)

    def on_created(self, event: FileSystemEvent) -> None:
        """Handle file creation."""
        if event.is_directory:
            return
        self._dispatch(event.src_path, ChangeType.CREATED)

    def on_modified(self, event: FileSystemEvent) -> None:
        """Handle file modification."""
        if event.is_directory:
            return
        self._dispatch(event.src_path, ChangeType.MODIFIED)

    def on_deleted(self, event: FileSystemEvent) -> None:
        """Handle file deletion."""
        if event.is_directory:
            return
        self._dispatch(event.src_path, ChangeType.DELETED)

    def on_moved(self, event: FileSystemMovedEvent) -> None:
        """Handle file move/rename as a delete followed by a create."""
        if event.is_directory:
            return
        self._dispatch(event.src_path, ChangeType.DELETED)
        self._dispatch(event.dest_path, ChangeType.CREATED)


class FileWatcher(LoggerMixin):
    """
    Watches a working tree for file changes.

    Uses watchdog for cross-platform file system monitoring
    with debouncing so a burst of saves yields one notification.
    """

    def __init__(
        self,
        root_path: Path,
        on_change: Callable[[Path, ChangeType], Any] | None = None,
        debounce_delay_ms: int | None = None,
        ignore_patterns: list[str] | None = None,
        ignore_hidden: bool | None = None,
        recursive: bool | None = None,
    ) -> None:
        """
        Initialize the file watcher.

        Args:
            root_path: Root directory to watch
            on_change: Callback for the settled change (path, change_type)
            debounce_delay_ms: Debounce delay in milliseconds
            ignore_patterns: Component names or glob patterns to ignore
            ignore_hidden: Skip dot-prefixed paths
            recursive: Whether to watch subdirectories
        """
        settings = get_settings().watcher

        self._root_path = Path(root_path).resolve()
        self._recursive = settings.recursive if recursive is None else recursive
        self._ignore_patterns = (
            settings.ignore_patterns if ignore_patterns is None else ignore_patterns
        )
        self._ignore_hidden = settings.ignore_hidden if ignore_hidden is None else ignore_hidden
        self._debounce_delay = debounce_delay_ms or settings.debounce_delay_ms

        self._debouncer = Debouncer(
            delay_ms=self._debounce_delay,
            callback=on_change,
        )

        self._handler = ChangeEventHandler(
            root_path=self._root_path,
            debouncer=self._debouncer,
            ignore_patterns=self._ignore_patterns,
            ignore_hidden=self._ignore_hidden,
        )

        self._observer: Observer | None = None
        self._running = False

    @property
    def debouncer(self) -> Debouncer:
        return self._debouncer

    def start(self) -> None:
        """Start watching for file changes."""
        if self._running:
            return

        self._observer = Observer()
        self._observer.schedule(
            self._handler,
            str(self._root_path),
            recursive=self._recursive,
        )
        self._observer.start()
        self._running = True

        self.log.info(
            "file_watcher_started",
            path=str(self._root_path),
            recursive=self._recursive,
            debounce_ms=self._debounce_delay,
            ignore_patterns=self._ignore_patterns,
        )

    def stop(self) -> None:
        """Stop watching and flush any pending change."""
        if not self._running:
            return

        if self._observer is not None:
            self._observer.stop()
            self._observer.join(timeout=5.0)
            self._observer = None

        self._debouncer.flush()

        self._running = False
        self.log.info("file_watcher_stopped")

    def flush(self) -> tuple[Path, ChangeType] | None:
        """Immediately process the pending change, if any."""
        return self._debouncer.flush()

    @property
    def is_running(self) -> bool:
        """Check if the watcher is running."""
        return self._running

    def __enter__(self) -> "FileWatcher":
        """Context manager entry."""
        self.start()
        return self

    def __exit__(self, *args: Any) -> None:
        """Context manager exit."""
        self.stop()
