"""
DiffWatch File Watcher Package.

Working tree monitoring with debounced flushes.
Requires Python 3.11+.
"""

from watcher.file_watcher import ChangeEventHandler, FileWatcher
from watcher.debouncer import Debouncer

__all__ = ["ChangeEventHandler", "FileWatcher", "Debouncer"]
