"""
DiffWatch Change Reporter.

Runs on each debounced flush: snapshot, filter, build, deliver.
Requires Python 3.11+.
"""

from pathlib import Path

from models.payload import ChangePayload, ChangeType
from notifier.payload_builder import build_payload
from notifier.webhook_client import WebhookClient
from vcs.git_client import GitClient, GitCommandError
from utils.logger import LoggerMixin


class ChangeReporter(LoggerMixin):
    """
    Reports the working tree state after a settled file change.

    A failed git query or a clean tree skips the notification
    without raising, so the watcher keeps running.
    """

    def __init__(self, git_client: GitClient, webhook_client: WebhookClient) -> None:
        self._git = git_client
        self._webhook = webhook_client

    def report(self, path: Path, change_type: ChangeType) -> ChangePayload | None:
        """
        Snapshot the repository and post a notification.

        Args:
            path: File whose event closed the debounce window
            change_type: Kind of that event

        Returns:
            The payload handed to the webhook, or None if delivery was skipped
        """
        try:
            state = self._git.snapshot()
        except GitCommandError as e:
            self.log.error(
                "git_query_failed",
                command=" ".join(e.command),
                returncode=e.returncode,
                error=e.stderr,
            )
            return None

        if not state.has_changes:
            self.log.info("no_changes_to_report")
            return None

        payload = build_payload(state, self._git.repo_path, path, change_type)
        delivered = self._webhook.send(payload)

        if delivered:
            self.log.info(
                "changes_reported",
                staged_files=payload.staged_changes.count,
                unstaged_files=payload.unstaged_changes.count,
                untracked_files=len(payload.untracked_files),
            )
        return payload
