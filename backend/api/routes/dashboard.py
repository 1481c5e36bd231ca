"""
DiffWatch Dashboard Route.

HTML view over the same log the JSON endpoints read.
Requires Python 3.11+.
"""

from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse

from api.dependencies import get_log_store, get_renderer
from api.rendering import DashboardRenderer
from storage.log_store import LogStore

router = APIRouter()


@router.get("/", response_class=HTMLResponse)
async def dashboard(
    log_store: LogStore = Depends(get_log_store),
    renderer: DashboardRenderer = Depends(get_renderer),
) -> HTMLResponse:
    """Render totals and the most recent entries."""
    return HTMLResponse(renderer.render(log_store.read_all()))
