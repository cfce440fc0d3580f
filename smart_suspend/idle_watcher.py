"""Doze suspend: suspend the engine while the screen is off and the device idles"""

import logging
import threading

from .arbitrator import SuspendArbitrator
from .events import PowerEvent, PowerMonitor
from .sources import SuspendSource

logger = logging.getLogger(__name__)


class IdleWatcher:
    """Reports DOZE requests from screen and idle-mode changes.

    Screen on always wins: the engine is never suspended for doze while the
    screen is interactive. State updates and the report they cause happen
    under one lock, so reports reach the arbitrator in the order the
    updates were made.
    """

    source = SuspendSource.DOZE

    def __init__(self, arbitrator: SuspendArbitrator, monitor: PowerMonitor):
        self.arbitrator = arbitrator
        self.monitor = monitor
        self._lock = threading.RLock()
        self._enabled = False
        self._screen_on = True
        self._installed = False

    @property
    def enabled(self) -> bool:
        with self._lock:
            return self._enabled

    def install(self):
        with self._lock:
            if self._installed:
                return
            self._installed = True
            self._screen_on = self._query_screen_on()
            self.monitor.subscribe(self._on_power_event)
            self._report()

    def uninstall(self):
        """Stop watching and withdraw any suspend request"""
        self.monitor.unsubscribe(self._on_power_event)
        with self._lock:
            self._installed = False
            self.arbitrator.update_suspend(self.source, False)

    def update_suspend_enabled(self, enabled: bool):
        """Turn doze suspend on or off; stored only until install()"""
        with self._lock:
            self._enabled = enabled
            if self._installed:
                self._report()

    def evaluate(self) -> bool:
        """Compute the doze decision from current state and report it"""
        with self._lock:
            return self._report()

    def _report(self) -> bool:
        # Caller holds self._lock
        should_suspend = self._enabled and not self._screen_on and self._query_device_idle()
        if self._installed:
            self.arbitrator.update_suspend(self.source, should_suspend)
        return should_suspend

    def _on_power_event(self, event: PowerEvent):
        logger.debug("Power event: %s", event.value)
        with self._lock:
            if event == PowerEvent.SCREEN_ON:
                self._screen_on = True
            elif event == PowerEvent.SCREEN_OFF:
                self._screen_on = False
            self._report()

    def _query_screen_on(self) -> bool:
        try:
            return self.monitor.is_screen_on()
        except Exception as e:
            logger.warning("Screen state unavailable, assuming on: %s", e)
            return True

    def _query_device_idle(self) -> bool:
        try:
            return self.monitor.is_device_idle()
        except Exception as e:
            logger.warning("Idle state unavailable, assuming not idle: %s", e)
            return False
