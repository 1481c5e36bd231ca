"""
DiffWatch Log Entry Model.

Diff-free projection of a payload kept in the receiver's bounded log.
Requires Python 3.11+.
"""

from datetime import datetime

from pydantic import BaseModel, Field

from models.payload import ChangePayload, TriggeredBy


class LogEntry(BaseModel):
    """A single ingested notification, without its diff text."""

    id: int
    repository: str | None = None
    branch: str | None = None
    triggered_by: TriggeredBy | None = None
    staged_files: list[str] = Field(default_factory=list)
    unstaged_files: list[str] = Field(default_factory=list)
    untracked_files: list[str] = Field(default_factory=list)
    last_commit: str | None = None
    has_staged_diff: bool = False
    has_unstaged_diff: bool = False
    timestamp: str | None = None
    received_at: str

    @classmethod
    def from_payload(
        cls,
        payload: ChangePayload,
        diff_id: int,
        received_at: datetime,
        has_staged_diff: bool,
        has_unstaged_diff: bool,
    ) -> "LogEntry":
        """
        Project a payload into a log entry.

        Args:
            payload: Ingested payload
            diff_id: Identifier shared with the entry's diff blobs
            received_at: Receipt time
            has_staged_diff: Whether a staged blob was written
            has_unstaged_diff: Whether an unstaged blob was written
        """
        return cls(
            id=diff_id,
            repository=payload.repository,
            branch=payload.branch,
            triggered_by=payload.triggered_by,
            staged_files=payload.staged_changes.files,
            unstaged_files=payload.unstaged_changes.files,
            untracked_files=payload.untracked_files,
            last_commit=payload.last_commit,
            has_staged_diff=has_staged_diff,
            has_unstaged_diff=has_unstaged_diff,
            timestamp=payload.timestamp,
            received_at=received_at.isoformat(),
        )
