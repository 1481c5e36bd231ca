"""
DiffWatch Change Payload Models.

The JSON document the watcher posts and the receiver ingests.
Requires Python 3.11+.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, ValidationInfo, field_validator


class ChangeType(str, Enum):
    """Filesystem event that triggered a notification."""

    CREATED = "created"
    MODIFIED = "modified"
    DELETED = "deleted"


class DiffKind(str, Enum):
    """Which side of the index a diff describes."""

    STAGED = "staged"
    UNSTAGED = "unstaged"


class TriggeredBy(BaseModel):
    """The file event that started the flush."""

    file: str
    event_type: ChangeType


class ChangeSet(BaseModel):
    """File list and unified diff for one side of the index."""

    files: list[str] = Field(default_factory=list)
    diff: str = ""
    count: int = 0

    @field_validator("files", "diff", "count", mode="before")
    @classmethod
    def null_as_empty(cls, v: Any, info: ValidationInfo) -> Any:
        """Treat an explicit null like an omitted field."""
        if v is None:
            return cls.model_fields[info.field_name].get_default(call_default_factory=True)
        return v

    @classmethod
    def from_files(cls, files: list[str], diff: str) -> "ChangeSet":
        """Build a change set whose count always matches its file list."""
        return cls(files=list(files), diff=diff, count=len(files))


class ChangePayload(BaseModel):
    """
    Snapshot of a working tree sent after a debounced flush.

    Every section is optional on ingestion so that partial payloads
    from older or third-party senders are still recorded.
    """

    event: str = "file_change"
    repository: str | None = None
    branch: str | None = None
    triggered_by: TriggeredBy | None = None
    staged_changes: ChangeSet = Field(default_factory=ChangeSet)
    unstaged_changes: ChangeSet = Field(default_factory=ChangeSet)
    untracked_files: list[str] = Field(default_factory=list)
    last_commit: str | None = None
    timestamp: str | None = None

    @field_validator("staged_changes", "unstaged_changes", "untracked_files", mode="before")
    @classmethod
    def null_section_as_empty(cls, v: Any, info: ValidationInfo) -> Any:
        if v is None:
            return cls.model_fields[info.field_name].get_default(call_default_factory=True)
        return v

    def diff_for(self, kind: DiffKind) -> str:
        """Return the raw diff text for the given kind."""
        if kind is DiffKind.STAGED:
            return self.staged_changes.diff
        return self.unstaged_changes.diff
