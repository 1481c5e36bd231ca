"""
DiffWatch Change Recorder.

Persists an ingested payload as diff blobs plus one log entry.
Requires Python 3.11+.
"""

import threading
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path

from models.log_entry import LogEntry
from models.payload import ChangePayload, DiffKind
from storage.diff_store import DiffStore
from storage.log_store import LogStore, LogStoreError
from utils.logger import LoggerMixin


@dataclass
class RecordResult:
    """Outcome of recording one payload."""

    diff_id: int
    received_at: datetime
    entry: LogEntry
    staged_path: Path | None = None
    unstaged_path: Path | None = None
    logged: bool = True


class ChangeRecorder(LoggerMixin):
    """
    Records payloads for the receiver.

    Diff write failures and log append failures are logged and
    reflected in the result, but never abort the request.
    """

    def __init__(self, log_store: LogStore, diff_store: DiffStore) -> None:
        self._log_store = log_store
        self._diff_store = diff_store
        self._last_id = 0
        self._id_lock = threading.Lock()

    def next_id(self, received_at: datetime) -> int:
        """Allocate an id from the receipt time in epoch milliseconds."""
        candidate = int(received_at.timestamp() * 1000)
        with self._id_lock:
            # Two receipts in the same millisecond must not share blob names
            self._last_id = max(candidate, self._last_id + 1)
            return self._last_id

    def _write_diff(self, kind: DiffKind, diff_id: int, text: str) -> Path | None:
        if not text:
            return None
        try:
            path = self._diff_store.write(kind, diff_id, text)
        except (OSError, UnicodeError) as e:
            self.log.error("diff_write_failed", kind=kind.value, diff_id=diff_id, error=str(e))
            return None
        self.log.info(f"{kind.value}_diff_saved", path=str(path))
        return path

    def record(self, payload: ChangePayload, received_at: datetime | None = None) -> RecordResult:
        """
        Persist a payload.

        Args:
            payload: Ingested payload
            received_at: Receipt time, defaults to now (UTC)

        Returns:
            Identifier, written blob paths and the appended entry
        """
        received_at = received_at or datetime.now(timezone.utc)
        diff_id = self.next_id(received_at)

        self._print_summary(payload)

        written = {
            kind: self._write_diff(kind, diff_id, payload.diff_for(kind)) for kind in DiffKind
        }
        staged_path = written[DiffKind.STAGED]
        unstaged_path = written[DiffKind.UNSTAGED]

        entry = LogEntry.from_payload(
            payload,
            diff_id=diff_id,
            received_at=received_at,
            has_staged_diff=staged_path is not None,
            has_unstaged_diff=unstaged_path is not None,
        )

        logged = True
        try:
            self._log_store.append(entry.model_dump(mode="json"))
        except LogStoreError as e:
            self.log.error("log_save_failed", diff_id=diff_id, error=str(e))
            logged = False

        return RecordResult(
            diff_id=diff_id,
            received_at=received_at,
            entry=entry,
            staged_path=staged_path,
            unstaged_path=unstaged_path,
            logged=logged,
        )

    def _print_summary(self, payload: ChangePayload) -> None:
        trigger = payload.triggered_by
        self.log.info(
            "webhook_received",
            repository=payload.repository,
            branch=payload.branch,
            time=payload.timestamp,
            triggered_by=f"{trigger.file} ({trigger.event_type.value})" if trigger else None,
            last_commit=payload.last_commit,
        )
        self.log.info(
            "changes_summary",
            staged=payload.staged_changes.count,
            staged_files=payload.staged_changes.files,
            unstaged=payload.unstaged_changes.count,
            unstaged_files=payload.unstaged_changes.files,
            untracked=len(payload.untracked_files),
            untracked_files=payload.untracked_files,
        )
