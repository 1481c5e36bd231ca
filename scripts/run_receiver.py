#!/usr/bin/env python3
"""
DiffWatch Receiver Script.

Serves the webhook endpoint and the dashboard.
Requires Python 3.11+.

Usage:
    python scripts/run_receiver.py
"""

import sys
from pathlib import Path

# Add backend to path
sys.path.insert(0, str(Path(__file__).parent.parent / "backend"))

import uvicorn

from api.main import app
from utils.config import get_settings
from utils.logger import get_logger


logger = get_logger("run_receiver")


def main() -> None:
    """Start the receiver."""
    settings = get_settings()
    base_url = f"http://localhost:{settings.api.port}"

    logger.info(
        "receiver_starting",
        url=base_url,
        endpoint=f"{base_url}/autodocs/git",
        dashboard=base_url,
        diff_dir=str(settings.storage.diff_dir.resolve()),
    )

    uvicorn.run(
        app,
        host=settings.api.host,
        port=settings.api.port,
        log_level="debug" if settings.api.debug else "info",
    )


if __name__ == "__main__":
    main()
