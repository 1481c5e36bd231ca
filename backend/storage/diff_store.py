"""
DiffWatch Diff Store.

Immutable diff blobs on disk, one file per kind and entry id.
Requires Python 3.11+.
"""

from pathlib import Path

from models.payload import DiffKind
from utils.logger import LoggerMixin


class DiffNotFoundError(Exception):
    """No blob exists for the requested kind and id."""


class DiffStore(LoggerMixin):
    """
    Stores raw diff text as `<kind>_<id>.diff` files.

    Blobs are written byte-for-byte as UTF-8 with no newline
    translation, so reads return exactly what was submitted.
    """

    def __init__(self, directory: Path) -> None:
        self._directory = Path(directory)
        self._directory.mkdir(parents=True, exist_ok=True)

    @property
    def directory(self) -> Path:
        return self._directory

    def _blob_path(self, kind: DiffKind | str, diff_id: int | str) -> Path:
        try:
            kind = DiffKind(kind)
        except ValueError as e:
            raise DiffNotFoundError(f"Unknown diff kind: {kind}") from e

        diff_id = str(diff_id)
        if not diff_id.isdigit():
            raise DiffNotFoundError(f"Invalid diff id: {diff_id}")

        return self._directory / f"{kind.value}_{diff_id}.diff"

    def write(self, kind: DiffKind, diff_id: int, text: str) -> Path:
        """
        Write a diff blob.

        Args:
            kind: Staged or unstaged
            diff_id: Identifier of the owning log entry
            text: Raw diff text

        Returns:
            Path of the written file
        """
        path = self._blob_path(kind, diff_id)
        path.write_bytes(text.encode("utf-8"))
        return path

    def read(self, kind: DiffKind | str, diff_id: int | str) -> bytes:
        """
        Read a diff blob.

        Raises:
            DiffNotFoundError: If kind or id is invalid, or no blob exists
        """
        path = self._blob_path(kind, diff_id)
        try:
            return path.read_bytes()
        except FileNotFoundError as e:
            raise DiffNotFoundError(f"Diff file not found: {path.name}") from e

    def exists(self, kind: DiffKind | str, diff_id: int | str) -> bool:
        try:
            return self._blob_path(kind, diff_id).is_file()
        except DiffNotFoundError:
            return False
