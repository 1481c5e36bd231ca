"""
DiffWatch Structured Logging Module.

The watcher and the receiver each call configure_logging() once with
their process role, so every line says which side emitted it.
Requires Python 3.11+.
"""

import logging
import sys
from typing import Any, Callable

import structlog
from structlog.types import EventDict, Processor

from utils.config import Settings, get_settings

# Libraries whose debug chatter drowns out per-event lines
QUIET_LOGGERS = ("httpcore", "httpx", "watchdog")


def app_context(settings: Settings, component: str | None) -> Callable[..., EventDict]:
    """Build a processor stamping app, version and process role on each event."""
    context = {"app": settings.app_name, "version": settings.app_version}
    if component is not None:
        context["component"] = component

    def add_context(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
        for key, value in context.items():
            event_dict.setdefault(key, value)
        return event_dict

    return add_context


def build_processors(settings: Settings, component: str | None = None) -> list[Processor]:
    """
    Assemble the processor chain for the configured output format.

    Args:
        settings: Application settings (format is read from settings.logging)
        component: Process role ("watcher" or "receiver")

    Returns:
        Processors ending in a JSON or console renderer
    """
    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        app_context(settings, component),
    ]

    if settings.logging.format == "json":
        processors += [
            structlog.processors.dict_tracebacks,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors += [
            structlog.dev.set_exc_info,
            structlog.dev.ConsoleRenderer(exception_formatter=structlog.dev.plain_traceback),
        ]
    return processors


def configure_logging(component: str | None = None, settings: Settings | None = None) -> None:
    """Configure structlog and stdlib logging for this process."""
    settings = settings or get_settings()
    level = logging.getLevelNamesMapping().get(settings.logging.level.upper(), logging.INFO)

    structlog.configure(
        processors=build_processors(settings, component),
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


class LoggerMixin:
    """Gives a class a `log` property bound to its class name."""

    @property
    def log(self) -> structlog.stdlib.BoundLogger:
        if not hasattr(self, "_logger"):
            self._logger = get_logger(self.__class__.__name__)
        return self._logger
