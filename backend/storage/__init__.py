"""
DiffWatch Storage Package.

On-disk state for the receiver: the bounded log and the diff blobs.
Requires Python 3.11+.
"""

from storage.diff_store import DiffNotFoundError, DiffStore
from storage.log_store import JsonLogStore, LogStore, LogStoreError
from storage.recorder import ChangeRecorder, RecordResult

__all__ = [
    "DiffNotFoundError",
    "DiffStore",
    "JsonLogStore",
    "LogStore",
    "LogStoreError",
    "ChangeRecorder",
    "RecordResult",
]
