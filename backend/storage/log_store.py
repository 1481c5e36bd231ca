"""
DiffWatch Log Store.

Bounded, ordered log of ingested notifications.
Requires Python 3.11+.
"""

import json
from pathlib import Path
from typing import Any, Protocol

from utils.logger import LoggerMixin


class LogStoreError(Exception):
    """The persisted log could not be read or written."""


class LogStore(Protocol):
    """Append-one, read-last-N store capped at a fixed size."""

    def read_all(self) -> list[dict[str, Any]]:
        ...

    def recent(self, limit: int) -> list[dict[str, Any]]:
        ...

    def append(self, entry: dict[str, Any]) -> None:
        ...

    def count(self) -> int:
        ...


class JsonLogStore(LoggerMixin):
    """
    Log store backed by a single JSON array file.

    The whole file is read, modified and rewritten on every append.
    Entries beyond max_entries are evicted oldest first.
    """

    def __init__(self, path: Path, max_entries: int = 100) -> None:
        """
        Initialize the store, creating an empty log if none exists.

        Args:
            path: Location of the JSON file
            max_entries: Maximum number of retained entries
        """
        self._path = Path(path)
        self._max_entries = max_entries

        if not self._path.exists():
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._write([])
            self.log.info("log_file_created", path=str(self._path))

    @property
    def path(self) -> Path:
        return self._path

    @property
    def max_entries(self) -> int:
        return self._max_entries

    def read_all(self) -> list[dict[str, Any]]:
        """
        Read every retained entry, oldest first.

        Raises:
            LogStoreError: If the file is unreadable or not a JSON array of objects
        """
        try:
            entries = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            raise LogStoreError(f"Failed to read log file {self._path}: {e}") from e

        if not isinstance(entries, list):
            raise LogStoreError(f"Log file {self._path} does not contain a JSON array")
        if not all(isinstance(entry, dict) for entry in entries):
            raise LogStoreError(f"Log file {self._path} contains non-object entries")
        return entries

    def recent(self, limit: int) -> list[dict[str, Any]]:
        """Return the last `limit` entries, newest first."""
        if limit <= 0:
            return []
        return self.read_all()[-limit:][::-1]

    def count(self) -> int:
        return len(self.read_all())

    def append(self, entry: dict[str, Any]) -> None:
        """
        Append an entry, evicting the oldest ones past the cap.

        Raises:
            LogStoreError: If the existing log cannot be read or rewritten
        """
        entries = self.read_all()
        entries.append(entry)

        if len(entries) > self._max_entries:
            evicted = len(entries) - self._max_entries
            entries = entries[evicted:]
            self.log.debug("log_entries_evicted", count=evicted)

        self._write(entries)

    def _write(self, entries: list[dict[str, Any]]) -> None:
        try:
            self._path.write_text(json.dumps(entries, indent=2), encoding="utf-8")
        except OSError as e:
            raise LogStoreError(f"Failed to write log file {self._path}: {e}") from e
