"""
DiffWatch Webhook API Routes.

Ingestion, log listing and diff retrieval endpoints.
Requires Python 3.11+.
"""

from typing import Any

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel

from api.dependencies import get_diff_store, get_log_store, get_recorder
from models.payload import ChangePayload
from storage.diff_store import DiffNotFoundError, DiffStore
from storage.log_store import LogStore
from storage.recorder import ChangeRecorder
from utils.logger import get_logger

router = APIRouter()
logger = get_logger("api.webhook")

DEFAULT_LOG_LIMIT = 10


class WebhookResponse(BaseModel):
    """Acknowledgment for an ingested payload."""

    success: bool
    message: str
    diff_id: int
    staged_files: int
    unstaged_files: int
    timestamp: str


class LogsResponse(BaseModel):
    """Most recent log entries, newest first."""

    total: int
    logs: list[dict[str, Any]]


def parse_limit(raw: str | None) -> int:
    """Parse the logs limit, using the default for unusable values."""
    try:
        limit = int(raw) if raw is not None else DEFAULT_LOG_LIMIT
    except ValueError:
        return DEFAULT_LOG_LIMIT
    return limit if limit > 0 else DEFAULT_LOG_LIMIT


@router.post("", response_model=WebhookResponse)
async def receive_webhook(
    payload: ChangePayload,
    recorder: ChangeRecorder = Depends(get_recorder),
) -> WebhookResponse:
    """
    Ingest a change payload.

    Writes diff blobs and appends a log entry. Storage failures are
    logged but still acknowledged.
    """
    result = recorder.record(payload)

    return WebhookResponse(
        success=True,
        message="Webhook received and diffs saved",
        diff_id=result.diff_id,
        staged_files=payload.staged_changes.count,
        unstaged_files=payload.unstaged_changes.count,
        timestamp=result.received_at.isoformat(),
    )


@router.get("/logs", response_model=LogsResponse)
async def get_logs(
    limit: str | None = Query(default=None, description="Number of entries to return"),
    log_store: LogStore = Depends(get_log_store),
) -> LogsResponse:
    """
    Return the most recent log entries, newest first.

    An unusable limit falls back to the default.
    """
    return LogsResponse(total=log_store.count(), logs=log_store.recent(parse_limit(limit)))


@router.get("/diff/{kind}/{diff_id}")
async def get_diff(
    kind: str,
    diff_id: str,
    diff_store: DiffStore = Depends(get_diff_store),
) -> Response:
    """Return a stored diff blob as plain text."""
    try:
        content = diff_store.read(kind, diff_id)
    except DiffNotFoundError as e:
        logger.debug("diff_not_found", kind=kind, diff_id=diff_id, reason=str(e))
        return JSONResponse(status_code=404, content={"error": "Diff file not found"})

    return Response(content=content, media_type="text/plain; charset=utf-8")
