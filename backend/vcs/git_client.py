"""
DiffWatch Git Client.

Thin wrapper around the git command line for reading working tree state.
Requires Python 3.11+.
"""

import subprocess
from dataclasses import dataclass, field
from pathlib import Path

from utils.logger import LoggerMixin


LAST_COMMIT_FORMAT = "%h - %s - %an"


class GitCommandError(Exception):
    """A git invocation failed or could not be started."""

    def __init__(self, command: list[str], returncode: int | None, stderr: str = "") -> None:
        self.command = command
        self.returncode = returncode
        self.stderr = stderr.strip()
        detail = self.stderr or "no output"
        super().__init__(
            f"'{' '.join(command)}' failed (exit {returncode}): {detail}"
        )


@dataclass
class RepositoryState:
    """Working tree state captured by a single snapshot."""

    branch: str
    staged_diff: str
    unstaged_diff: str
    staged_files: list[str] = field(default_factory=list)
    unstaged_files: list[str] = field(default_factory=list)
    untracked_files: list[str] = field(default_factory=list)
    last_commit: str = ""

    @property
    def has_staged_changes(self) -> bool:
        return len(self.staged_diff) > 0

    @property
    def has_unstaged_changes(self) -> bool:
        return len(self.unstaged_diff) > 0

    @property
    def has_changes(self) -> bool:
        """Check if there is anything worth reporting."""
        return (
            self.has_staged_changes
            or self.has_unstaged_changes
            or len(self.untracked_files) > 0
        )


def _split_lines(output: str) -> list[str]:
    return [line for line in output.strip().splitlines() if line]


class GitClient(LoggerMixin):
    """
    Runs read-only git queries against one working tree.

    Every query is a separate subprocess with the repository as its
    working directory. Any failure raises GitCommandError.
    """

    def __init__(
        self,
        repo_path: Path,
        executable: str = "git",
        timeout: float = 30.0,
    ) -> None:
        """
        Initialize the client.

        Args:
            repo_path: Root of the working tree
            executable: git binary to invoke
            timeout: Seconds allowed per command
        """
        self._repo_path = Path(repo_path)
        self._executable = executable
        self._timeout = timeout

    @property
    def repo_path(self) -> Path:
        return self._repo_path

    def run(self, *args: str) -> str:
        """
        Run a git command and return its stdout.

        Args:
            *args: Arguments after the git executable

        Returns:
            Captured stdout decoded as UTF-8

        Raises:
            GitCommandError: On non-zero exit, timeout, or launch failure
        """
        command = [self._executable, *args]

        try:
            result = subprocess.run(  # noqa: S603
                command,
                cwd=self._repo_path,
                capture_output=True,
                timeout=self._timeout,
                check=False,
            )
        except OSError as e:
            raise GitCommandError(command, None, str(e)) from e
        except subprocess.TimeoutExpired as e:
            raise GitCommandError(command, None, f"timed out after {self._timeout}s") from e

        if result.returncode != 0:
            raise GitCommandError(
                command, result.returncode, result.stderr.decode("utf-8", errors="replace")
            )

        return result.stdout.decode("utf-8", errors="replace")

    def current_branch(self) -> str:
        return self.run("rev-parse", "--abbrev-ref", "HEAD").strip()

    def staged_diff(self) -> str:
        return self.run("diff", "--cached")

    def unstaged_diff(self) -> str:
        return self.run("diff")

    def staged_files(self) -> list[str]:
        return _split_lines(self.run("diff", "--cached", "--name-only"))

    def unstaged_files(self) -> list[str]:
        return _split_lines(self.run("diff", "--name-only"))

    def untracked_files(self) -> list[str]:
        return _split_lines(self.run("ls-files", "--others", "--exclude-standard"))

    def last_commit(self) -> str:
        """Summarize HEAD as '<short hash> - <subject> - <author>'."""
        return self.run("log", "-1", f"--pretty=format:{LAST_COMMIT_FORMAT}").strip()

    def snapshot(self) -> RepositoryState:
        """
        Capture the full working tree state.

        Raises:
            GitCommandError: If any individual query fails
        """
        state = RepositoryState(
            branch=self.current_branch(),
            staged_diff=self.staged_diff(),
            unstaged_diff=self.unstaged_diff(),
            staged_files=self.staged_files(),
            unstaged_files=self.unstaged_files(),
            untracked_files=self.untracked_files(),
            last_commit=self.last_commit(),
        )

        self.log.debug(
            "repository_snapshot",
            branch=state.branch,
            staged=len(state.staged_files),
            unstaged=len(state.unstaged_files),
            untracked=len(state.untracked_files),
        )
        return state
