"""Downstream engine interface"""

import logging
from typing import Protocol

logger = logging.getLogger(__name__)


class SuspendableEngine(Protocol):
    """The packet-forwarding engine, seen as a single suspended flag"""

    def suspended(self, value: bool) -> None: ...


class LoggingEngine:
    """Stand-in engine that logs and remembers the last signal"""

    def __init__(self):
        self.last_value: bool | None = None

    def suspended(self, value: bool) -> None:
        self.last_value = value
        logger.info("Engine %s", "suspended" if value else "resumed")
