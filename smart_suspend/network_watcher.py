"""Smart suspend: suspend the engine while the device sits on a known network.

The watcher listens for link changes, re-reads every IPv4 address the
device currently holds and tests them against the user's IP/CIDR rules.
Checks are debounced so a flurry of link events produces one evaluation.
"""

import logging
import threading
from enum import Enum

from .arbitrator import SuspendArbitrator
from .debounce import Debouncer
from .events import NetworkEvent, NetworkMonitor
from .rules import RuleSet, matches, parse_rules
from .sources import SuspendSource

logger = logging.getLogger(__name__)


class WatcherState(str, Enum):
    UNINSTALLED = "uninstalled"
    IDLE = "idle"
    CHECK_PENDING = "check_pending"


class SmartSuspendWatcher:
    """Reports SMART_SUSPEND requests based on current device addresses.

    Attributes:
        arbitrator: Receives the boolean decision
        monitor: Network event source and address query
        debouncer: Coalesces checks triggered by events and reconfiguration
    """

    source = SuspendSource.SMART_SUSPEND

    def __init__(self, arbitrator: SuspendArbitrator, monitor: NetworkMonitor, debouncer: Debouncer | None = None):
        self.arbitrator = arbitrator
        self.monitor = monitor
        self.debouncer = debouncer or Debouncer()

        self._config_lock = threading.RLock()
        self._enabled = False
        self._rules = RuleSet()
        self._installed = False

    @property
    def enabled(self) -> bool:
        with self._config_lock:
            return self._enabled

    @property
    def rules(self) -> RuleSet:
        with self._config_lock:
            return self._rules

    @property
    def state(self) -> WatcherState:
        with self._config_lock:
            installed = self._installed
        if not installed:
            return WatcherState.UNINSTALLED
        if self.debouncer.pending:
            return WatcherState.CHECK_PENDING
        return WatcherState.IDLE

    def install(self):
        """Subscribe to network events and schedule the initial check"""
        with self._config_lock:
            if self._installed:
                return
            self._installed = True
        self.monitor.subscribe(self._on_network_event)
        logger.debug("SmartSuspendWatcher installed")
        self.schedule_check()

    def uninstall(self):
        """Stop watching and withdraw any suspend request"""
        self.monitor.unsubscribe(self._on_network_event)
        self.debouncer.cancel()
        # Running checks report under this lock and skip once uninstalled
        with self._config_lock:
            self._installed = False
            self.arbitrator.update_suspend(self.source, False)
        logger.debug("SmartSuspendWatcher uninstalled")

    def update_config(self, enabled: bool, raw_ips: str):
        """Replace the enabled flag and rules, then re-evaluate

        While uninstalled the settings are only stored; install() runs the
        check that applies them.

        Args:
            enabled: Whether smart suspend is on
            raw_ips: Comma-separated rules, e.g. "192.168.1.0/24,10.0.0.1"
        """
        rules = parse_rules(raw_ips)
        with self._config_lock:
            self._enabled = enabled
            self._rules = rules
            installed = self._installed
        logger.debug("update_config: enabled=%s, rules=%s", enabled, rules.raw_rules())

        if installed:
            self.schedule_check()

    def schedule_check(self):
        self.debouncer.trigger(self.check)

    def _on_network_event(self, event: NetworkEvent, network: str):
        logger.debug("%s: %s", event.value, network)
        if self.state != WatcherState.UNINSTALLED:
            self.schedule_check()

    def current_addresses(self) -> set[str]:
        """Non-loopback IPv4 addresses across all known networks"""
        try:
            links = self.monitor.link_addresses()
        except Exception as e:
            logger.warning("Error getting IP addresses: %s", e)
            return set()
        return {link.address for link in links if link.address and not link.is_loopback}

    def check(self) -> bool:
        """Evaluate the rules now and report the result

        Nothing is reported once the watcher has been uninstalled.
        """
        with self._config_lock:
            enabled = self._enabled
            rules = self._rules

        matched = False
        if enabled and not rules.is_empty:
            addresses = self.current_addresses()
            matched = matches(addresses, rules)
            logger.debug("Current IPs: %s, matched: %s", sorted(addresses), matched)

        with self._config_lock:
            if self._installed:
                self.arbitrator.update_suspend(self.source, matched)
        return matched
