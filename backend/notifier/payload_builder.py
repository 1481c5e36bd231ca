"""
DiffWatch Payload Builder.

Turns a repository snapshot and its triggering event into a payload.
Requires Python 3.11+.
"""

from datetime import datetime, timezone
from pathlib import Path

from models.payload import ChangePayload, ChangeSet, ChangeType, TriggeredBy
from vcs.git_client import RepositoryState


def relative_trigger_path(repo_path: Path, trigger_path: Path) -> str:
    """Express the triggering file relative to the repository root."""
    try:
        return Path(trigger_path).relative_to(repo_path).as_posix()
    except ValueError:
        try:
            return Path(trigger_path).resolve().relative_to(Path(repo_path).resolve()).as_posix()
        except ValueError:
            return Path(trigger_path).as_posix()


def build_payload(
    state: RepositoryState,
    repo_path: Path,
    trigger_path: Path,
    change_type: ChangeType,
    now: datetime | None = None,
) -> ChangePayload:
    """
    Build the notification payload for one flush.

    Args:
        state: Snapshot taken when the debounce window elapsed
        repo_path: Root of the working tree
        trigger_path: File whose event closed the window
        change_type: Kind of that event
        now: Timestamp override, defaults to the current UTC time

    Returns:
        Payload ready to be posted
    """
    now = now or datetime.now(timezone.utc)

    return ChangePayload(
        repository=Path(repo_path).resolve().name,
        branch=state.branch,
        triggered_by=TriggeredBy(
            file=relative_trigger_path(repo_path, trigger_path),
            event_type=change_type,
        ),
        staged_changes=ChangeSet.from_files(state.staged_files, state.staged_diff),
        unstaged_changes=ChangeSet.from_files(state.unstaged_files, state.unstaged_diff),
        untracked_files=list(state.untracked_files),
        last_commit=state.last_commit,
        timestamp=now.isoformat(),
    )
