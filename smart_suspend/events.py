"""Event sources consumed by the watchers.

The host platform is seen through two narrow interfaces: a NetworkMonitor
that reports link changes and can list current link addresses, and a
PowerMonitor that reports screen and idle changes and can be queried for
the current state. Real implementations live in smart_suspend.host.
"""

import logging
import threading
from collections.abc import Callable
from enum import Enum
from typing import Any

from pydantic import BaseModel

logger = logging.getLogger(__name__)


class NetworkEvent(str, Enum):
    AVAILABLE = "available"
    LINK_PROPERTIES_CHANGED = "link_properties_changed"
    LOST = "lost"
    CAPABILITIES_CHANGED = "capabilities_changed"


class PowerEvent(str, Enum):
    SCREEN_ON = "screen_on"
    SCREEN_OFF = "screen_off"
    IDLE_MODE_CHANGED = "idle_mode_changed"


class LinkAddress(BaseModel):
    """An address assigned to one network link"""

    network: str
    address: str
    is_loopback: bool = False


class EventSource:
    """Thread-safe subscriber list with synchronous delivery"""

    def __init__(self):
        self._lock = threading.Lock()
        self._subscribers: list[Callable[..., None]] = []

    def subscribe(self, callback: Callable[..., None]) -> None:
        with self._lock:
            if callback not in self._subscribers:
                self._subscribers.append(callback)

    def unsubscribe(self, callback: Callable[..., None]) -> None:
        """Remove a subscriber; unknown callbacks are ignored"""
        with self._lock:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscribers)

    def emit(self, *args: Any) -> None:
        """Deliver an event to every current subscriber"""
        with self._lock:
            subscribers = list(self._subscribers)

        for callback in subscribers:
            try:
                callback(*args)
            except Exception:
                logger.exception("Subscriber %r failed handling %r", callback, args)


class NetworkMonitor(EventSource):
    """Emits (NetworkEvent, network_id) and lists link addresses"""

    def link_addresses(self) -> list[LinkAddress]:
        raise NotImplementedError


class PowerMonitor(EventSource):
    """Emits PowerEvent and answers screen/idle queries"""

    def is_screen_on(self) -> bool:
        raise NotImplementedError

    def is_device_idle(self) -> bool:
        raise NotImplementedError
