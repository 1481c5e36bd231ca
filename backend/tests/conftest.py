"""
DiffWatch Test Configuration.

Pytest fixtures and configuration.
Requires Python 3.11+.
"""

import shutil
import subprocess
from pathlib import Path
from typing import Any, Generator

import pytest
from fastapi.testclient import TestClient

from models.payload import ChangePayload
from utils.config import Settings, StorageSettings


requires_git = pytest.mark.skipif(shutil.which("git") is None, reason="git executable not available")


def git(repo: Path, *args: str) -> str:
    """Run a git command in a test repository."""
    result = subprocess.run(
        [
            "git",
            "-c", "user.name=Test User",
            "-c", "user.email=test@example.com",
            "-c", "commit.gpgsign=false",
            *args,
        ],
        cwd=repo,
        capture_output=True,
        text=True,
        check=True,
    )
    return result.stdout


@pytest.fixture
def git_repo(tmp_path: Path) -> Path:
    """Create a repository on branch main with one commit."""
    repo = tmp_path / "sample-repo"
    repo.mkdir()
    git(repo, "init", "-q")
    git(repo, "symbolic-ref", "HEAD", "refs/heads/main")

    (repo / "README.md").write_text("# Sample\n")
    (repo / "app.py").write_text("print('hello')\n")
    git(repo, "add", "README.md", "app.py")
    git(repo, "commit", "-q", "-m", "Initial commit")
    return repo


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Settings pointing storage at a temporary directory."""
    return Settings(
        environment="test",
        storage=StorageSettings(
            log_file=tmp_path / "data" / "webhook-logs.json",
            diff_dir=tmp_path / "data" / "diffs",
            max_log_entries=100,
        ),
    )


@pytest.fixture
def client(settings: Settings) -> Generator[TestClient, None, None]:
    """Create a test client with the lifespan running."""
    from api.main import create_app

    with TestClient(create_app(settings)) as test_client:
        yield test_client


@pytest.fixture
def sample_payload_data() -> dict[str, Any]:
    """A payload as the watcher would post it."""
    return {
        "event": "file_change",
        "repository": "sample-repo",
        "branch": "main",
        "triggered_by": {"file": "src/a.txt", "event_type": "modified"},
        "staged_changes": {
            "files": ["a.txt"],
            "diff": "diff --git a/a.txt b/a.txt\n--- a/a.txt\n+++ b/a.txt\n@@ -1 +1 @@\n-old\n+new\n",
            "count": 1,
        },
        "unstaged_changes": {"files": [], "diff": "", "count": 0},
        "untracked_files": [],
        "last_commit": "abc1234 - Initial commit - Test User",
        "timestamp": "2024-05-01T12:00:00+00:00",
    }


@pytest.fixture
def sample_payload(sample_payload_data: dict[str, Any]) -> ChangePayload:
    return ChangePayload.model_validate(sample_payload_data)
