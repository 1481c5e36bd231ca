"""
DiffWatch API Dependencies.

Shared dependencies for FastAPI routes.
Requires Python 3.11+.
"""

from typing import Any

from fastapi import HTTPException

from api.rendering import DashboardRenderer
from storage.diff_store import DiffStore
from storage.log_store import LogStore
from storage.recorder import ChangeRecorder


# Shared state - populated by main.py lifespan
_state: dict[str, Any] = {}


def set_stores(log_store: LogStore | None, diff_store: DiffStore | None) -> None:
    """Set the shared stores and the recorder built on them."""
    _state["log_store"] = log_store
    _state["diff_store"] = diff_store
    if log_store is not None and diff_store is not None:
        _state["recorder"] = ChangeRecorder(log_store, diff_store)
    else:
        _state["recorder"] = None


def set_renderer(renderer: DashboardRenderer | None) -> None:
    """Set the shared dashboard renderer."""
    _state["renderer"] = renderer


def _require(key: str) -> Any:
    value = _state.get(key)
    if value is None:
        raise HTTPException(
            status_code=503,
            detail="Storage unavailable",
        )
    return value


def get_log_store() -> LogStore:
    """Dependency providing the log store."""
    return _require("log_store")


def get_diff_store() -> DiffStore:
    """Dependency providing the diff store."""
    return _require("diff_store")


def get_recorder() -> ChangeRecorder:
    """Dependency providing the change recorder."""
    return _require("recorder")


def get_renderer() -> DashboardRenderer:
    """Dependency providing the dashboard renderer."""
    return _require("renderer")
