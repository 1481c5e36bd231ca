"""
DiffWatch Dashboard Rendering.

Turns log entries into the HTML dashboard.
Requires Python 3.11+.
"""

from datetime import datetime
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, select_autoescape

TEMPLATES_DIR = Path(__file__).parent / "templates"

RECENT_ENTRIES = 20


def format_timestamp(value: str | None) -> str:
    """Render an ISO timestamp as local wall-clock time."""
    if not value:
        return ""
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return value
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone()
    return parsed.strftime("%Y-%m-%d %H:%M:%S")


class DashboardRenderer:
    """
    Renders the dashboard from log entries.

    The renderer only sees entries, oldest first, as returned by
    LogStore.read_all(); it never touches storage itself.
    """

    def __init__(self, templates_dir: Path = TEMPLATES_DIR, recent: int = RECENT_ENTRIES) -> None:
        self._recent = recent
        self._env = Environment(
            loader=FileSystemLoader(str(templates_dir)),
            autoescape=select_autoescape(["html"]),
        )
        self._env.filters["localtime"] = format_timestamp

    def summarize(self, entries: list[dict[str, Any]]) -> dict[str, Any]:
        """Compute the dashboard's template context."""
        return {
            "total": len(entries),
            "with_staged": sum(1 for e in entries if e.get("has_staged_diff")),
            "with_unstaged": sum(1 for e in entries if e.get("has_unstaged_diff")),
            "entries": entries[-self._recent:][::-1],
        }

    def render(self, entries: list[dict[str, Any]]) -> str:
        """Render the full dashboard page."""
        template = self._env.get_template("dashboard.html")
        return template.render(**self.summarize(entries))
