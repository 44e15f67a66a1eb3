"""
Notices — Transient user-facing messages.
"""

from __future__ import annotations

import logging
from typing import Protocol

logger = logging.getLogger(__name__)

UNCONFIGURED_NOTICE = "⚠️ Please configure Imgur plugin or disable it"
NOTICE_TIMEOUT_MS = 5_000


class Notifier(Protocol):
    def show(self, message: str, timeout_ms: int = NOTICE_TIMEOUT_MS) -> None:
        ...


class LoggingNotifier:
    """Notifier for headless hosts: notices go to the log."""

    def __init__(self):
        self.shown: list = []

    def show(self, message: str, timeout_ms: int = NOTICE_TIMEOUT_MS) -> None:
        self.shown.append(message)
        logger.warning(f"Notice: {message}")
