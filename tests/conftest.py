"""Pytest configuration and fixtures"""

import pytest

from smart_suspend.arbitrator import SuspendArbitrator
from smart_suspend.debounce import Debouncer
from smart_suspend.events import LinkAddress, NetworkEvent, NetworkMonitor, PowerEvent, PowerMonitor


class ManualHandle:
    def __init__(self, when: float, callback):
        self.when = when
        self.callback = callback
        self.cancelled = False

    def cancel(self):
        self.cancelled = True


class ManualScheduler:
    """Scheduler driven by an explicit clock instead of real time"""

    def __init__(self):
        self.now = 0.0
        self.handles: list[ManualHandle] = []

    def call_later(self, delay, callback):
        handle = ManualHandle(self.now + delay, callback)
        self.handles.append(handle)
        return handle

    @property
    def pending(self) -> list[ManualHandle]:
        return [h for h in self.handles if not h.cancelled]

    def advance(self, seconds: float):
        """Move the clock forward, firing due timers in order"""
        target = self.now + seconds
        while True:
            due = [h for h in self.handles if not h.cancelled and h.when <= target]
            if not due:
                break
            handle = min(due, key=lambda h: h.when)
            self.handles.remove(handle)
            self.now = handle.when
            handle.callback()
        self.now = target


class RecordingEngine:
    def __init__(self):
        self.calls: list[bool] = []

    def suspended(self, value: bool) -> None:
        self.calls.append(value)


class FakeNetworkMonitor(NetworkMonitor):
    """Delivers network events synchronously from test code"""

    def __init__(self):
        super().__init__()
        self.links: list[LinkAddress] = [LinkAddress(network="lo", address="127.0.0.1", is_loopback=True)]

    def link_addresses(self) -> list[LinkAddress]:
        return list(self.links)

    def set_addresses(self, *addresses: str, network: str = "wlan0"):
        """Replace non-loopback addresses and announce the change"""
        self.links = [link for link in self.links if link.is_loopback]
        self.links.extend(LinkAddress(network=network, address=address) for address in addresses)
        self.emit(NetworkEvent.LINK_PROPERTIES_CHANGED, network)


class FakePowerMonitor(PowerMonitor):
    """Screen/idle state set directly by tests"""

    def __init__(self, screen_on: bool = True, device_idle: bool = False):
        super().__init__()
        self.screen_on = screen_on
        self.device_idle = device_idle

    def is_screen_on(self) -> bool:
        return self.screen_on

    def is_device_idle(self) -> bool:
        return self.device_idle

    def turn_screen_off(self):
        self.screen_on = False
        self.emit(PowerEvent.SCREEN_OFF)

    def turn_screen_on(self):
        self.screen_on = True
        self.emit(PowerEvent.SCREEN_ON)

    def set_idle(self, idle: bool):
        self.device_idle = idle
        self.emit(PowerEvent.IDLE_MODE_CHANGED)


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def debouncer(scheduler):
    return Debouncer(0.5, scheduler)


@pytest.fixture
def engine():
    return RecordingEngine()


@pytest.fixture
def reasons():
    return []


@pytest.fixture
def arbitrator(engine, reasons):
    return SuspendArbitrator(engine, on_reason_changed=reasons.append)


@pytest.fixture
def network_monitor():
    return FakeNetworkMonitor()


@pytest.fixture
def power_monitor():
    return FakePowerMonitor()
