"""SuspendService - wires monitors, watchers and the arbitrator together"""

import logging
from typing import Any

from .arbitrator import ReasonCallback, SuspendArbitrator
from .config import SuspendConfig
from .debounce import Debouncer, Scheduler
from .engine import SuspendableEngine
from .events import NetworkMonitor, PowerMonitor
from .idle_watcher import IdleWatcher
from .network_watcher import SmartSuspendWatcher

logger = logging.getLogger(__name__)


class SuspendService:
    """Owns one arbitrator and the watchers reporting into it

    Monitors with start()/stop() methods (the host implementations) are
    started and stopped with the service; injected fakes need not have them.
    """

    def __init__(
        self,
        engine: SuspendableEngine,
        network_monitor: NetworkMonitor,
        power_monitor: PowerMonitor,
        config: SuspendConfig | None = None,
        on_reason_changed: ReasonCallback | None = None,
        scheduler: Scheduler | None = None,
    ):
        self.config = config or SuspendConfig()
        self.network_monitor = network_monitor
        self.power_monitor = power_monitor
        self.arbitrator = SuspendArbitrator(engine, on_reason_changed=on_reason_changed)
        self.smart_suspend = SmartSuspendWatcher(
            self.arbitrator,
            network_monitor,
            Debouncer(self.config.debounce_seconds, scheduler),
        )
        self.idle = IdleWatcher(self.arbitrator, power_monitor)
        self.running = False

    def start(self):
        if self.running:
            return
        for monitor in (self.network_monitor, self.power_monitor):
            start = getattr(monitor, "start", None)
            if start:
                start()
        self.smart_suspend.install()
        self.idle.install()
        self.running = True
        self.apply_config(self.config)
        logger.info("Suspend service started")

    def apply_config(self, config: SuspendConfig):
        """Push the user settings into both watchers"""
        self.config = config
        self.smart_suspend.update_config(config.smart_suspend_enabled, config.smart_suspend_ips)
        self.idle.update_suspend_enabled(config.doze_suspend_enabled)

    def stop(self):
        if not self.running:
            return
        self.smart_suspend.uninstall()
        self.idle.uninstall()
        for monitor in (self.network_monitor, self.power_monitor):
            stop = getattr(monitor, "stop", None)
            if stop:
                stop()
        self.arbitrator.clear()
        self.running = False
        logger.info("Suspend service stopped")

    def status(self) -> dict[str, Any]:
        reason = self.arbitrator.get_reason()
        return {
            "running": self.running,
            "suspended": self.arbitrator.is_suspended(),
            "reason": reason.name if reason else None,
            "sources": {source.name: value for source, value in self.arbitrator.states().items()},
            "smart_suspend_enabled": self.smart_suspend.enabled,
            "smart_suspend_rules": self.smart_suspend.rules.raw_rules(),
            "smart_suspend_state": self.smart_suspend.state.value,
            "doze_suspend_enabled": self.idle.enabled,
        }
