#!/usr/bin/env python3
"""
DiffWatch Watcher Script.

Watches a git working tree and posts a change summary to the receiver
after each burst of file events settles.
Requires Python 3.11+.

Usage:
    WATCHER_REPO_PATH=/path/to/repo python scripts/run_watcher.py
"""

import sys
import time
from pathlib import Path

# Add backend to path
sys.path.insert(0, str(Path(__file__).parent.parent / "backend"))

from notifier.reporter import ChangeReporter
from notifier.webhook_client import WebhookClient
from vcs.git_client import GitClient
from watcher.file_watcher import FileWatcher
from utils.config import get_settings
from utils.logger import configure_logging, get_logger


configure_logging("watcher")
logger = get_logger("run_watcher")


def build_watcher() -> FileWatcher:
    """Wire git client, webhook client and reporter into a file watcher."""
    settings = get_settings()
    repo_path = settings.watcher.repo_path.resolve()

    git_client = GitClient(
        repo_path,
        executable=settings.git.executable,
        timeout=settings.git.timeout_seconds,
    )
    webhook_client = WebhookClient(
        settings.webhook.url,
        timeout=settings.webhook.timeout_seconds,
    )
    reporter = ChangeReporter(git_client, webhook_client)

    return FileWatcher(
        root_path=repo_path,
        on_change=reporter.report,
        debounce_delay_ms=settings.watcher.debounce_delay_ms,
    )


def main() -> int:
    """Run the watcher until interrupted."""
    settings = get_settings()
    repo_path = settings.watcher.repo_path.resolve()

    if not repo_path.is_dir():
        logger.error("repository_not_found", path=str(repo_path))
        return 1

    print("=" * 60)
    print("  Git Diff Watcher with Webhook")
    print(f"  Repo: {repo_path.name}")
    print(f"  Webhook: {settings.webhook.url}")
    print(f"  Debounce: {settings.watcher.debounce_delay_ms}ms")
    print("  Tracking: staged, unstaged and untracked changes")
    print("=" * 60)
    print("Press Ctrl+C to stop\n")

    with build_watcher():
        logger.info("watcher_ready")
        try:
            while True:
                time.sleep(1.0)
        except KeyboardInterrupt:
            logger.info("watcher_interrupted")

    return 0


if __name__ == "__main__":
    sys.exit(main())
