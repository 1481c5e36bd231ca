"""
DiffWatch API Main Application.

FastAPI receiver with error handling and lifecycle management.
Requires Python 3.11+.
"""

from contextlib import asynccontextmanager
from typing import Any, AsyncIterator

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from api.dependencies import set_renderer, set_stores
from api.rendering import DashboardRenderer
from storage.diff_store import DiffStore
from storage.log_store import JsonLogStore, LogStoreError
from utils.config import Settings, get_settings
from utils.logger import configure_logging, get_logger


# Initialize logging
configure_logging("receiver")
logger = get_logger("api")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """
    Application lifespan manager.

    Creates the log file and diff directory if needed and shares
    the stores with the routes.
    """
    settings: Settings = app.state.settings
    logger.info(
        "starting_application",
        app_name=settings.app_name,
        version=settings.app_version,
        environment=settings.environment,
        log_file=str(settings.storage.log_file),
        diff_dir=str(settings.storage.diff_dir),
    )

    log_store = JsonLogStore(
        settings.storage.log_file,
        max_entries=settings.storage.max_log_entries,
    )
    diff_store = DiffStore(settings.storage.diff_dir)
    set_stores(log_store, diff_store)
    set_renderer(DashboardRenderer())

    yield

    logger.info("shutting_down_application")
    set_stores(None, None)
    set_renderer(None)


def create_app(settings: Settings | None = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Settings override, defaults to the cached settings

    Returns:
        Configured FastAPI instance
    """
    settings = settings or get_settings()

    application = FastAPI(
        title=settings.app_name,
        description="Git working tree change notifications",
        version=settings.app_version,
        lifespan=lifespan,
        docs_url="/docs" if settings.is_development else None,
        redoc_url="/redoc" if settings.is_development else None,
    )
    application.state.settings = settings

    @application.exception_handler(LogStoreError)
    async def log_store_exception_handler(
        request: Request, exc: LogStoreError
    ) -> JSONResponse:
        logger.error(
            "log_read_failed",
            path=request.url.path,
            error=str(exc),
        )
        return JSONResponse(
            status_code=500,
            content={"error": "Failed to read logs"},
        )

    # Global exception handler
    @application.exception_handler(Exception)
    async def global_exception_handler(
        request: Request, exc: Exception
    ) -> JSONResponse:
        logger.exception(
            "unhandled_exception",
            path=request.url.path,
            method=request.method,
            error=str(exc),
        )
        return JSONResponse(
            status_code=500,
            content={
                "error": "Internal server error",
                "message": str(exc) if settings.is_development else "An unexpected error occurred",
            },
        )

    @application.get("/health")
    async def health_check() -> dict[str, Any]:
        """Health check endpoint."""
        return {
            "status": "ok",
            "message": "Webhook server is running",
        }

    # Import and include routers here to avoid circular imports
    from api.routes import dashboard, webhook

    application.include_router(webhook.router, prefix="/autodocs/git", tags=["Webhook"])
    application.include_router(dashboard.router, tags=["Dashboard"])

    return application


# Create the application instance
app = create_app()
