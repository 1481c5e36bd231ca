"""
DiffWatch Version Control Package.

Shell-out interface to git.
Requires Python 3.11+.
"""

from vcs.git_client import GitClient, GitCommandError, RepositoryState

__all__ = ["GitClient", "GitCommandError", "RepositoryState"]
