"""
DiffWatch Notifier Package.

Payload assembly and webhook delivery for the watcher process.
Requires Python 3.11+.
"""

from notifier.payload_builder import build_payload
from notifier.reporter import ChangeReporter
from notifier.webhook_client import WebhookClient

__all__ = ["build_payload", "ChangeReporter", "WebhookClient"]
