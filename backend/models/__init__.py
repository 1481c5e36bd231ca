"""
DiffWatch Models Package.

Data structures shared by the watcher and the receiver.
Requires Python 3.11+.
"""

from models.payload import ChangePayload, ChangeSet, ChangeType, DiffKind, TriggeredBy
from models.log_entry import LogEntry

__all__ = [
    "ChangePayload",
    "ChangeSet",
    "ChangeType",
    "DiffKind",
    "TriggeredBy",
    "LogEntry",
]
