"""Host platform monitors.

Desktop operating systems have no portable push notification for link or
power changes, so both monitors poll on a background thread and turn state
differences into events.
"""

import ipaddress
import logging
import socket
import threading
from collections.abc import Callable

import psutil
from pydantic import BaseModel

from .events import LinkAddress, NetworkEvent, NetworkMonitor, PowerEvent, PowerMonitor

logger = logging.getLogger(__name__)


class _PollingThread:
    """Daemon thread calling poll() every interval until stopped"""

    def __init__(self, name: str, interval: float, poll: Callable[[], None]):
        self.name = name
        self.interval = interval
        self._poll = poll
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None

    def start(self):
        if self._thread is not None:
            return
        self._stop_event.clear()
        self._thread = threading.Thread(target=self._loop, name=self.name, daemon=True)
        self._thread.start()

    def stop(self):
        if self._thread is None:
            return
        self._stop_event.set()
        self._thread.join(timeout=2.0)
        self._thread = None

    def _loop(self):
        while not self._stop_event.wait(self.interval):
            try:
                self._poll()
            except Exception:
                logger.exception("%s poll failed", self.name)


class _InterfaceSnapshot(BaseModel):
    addresses: frozenset[str]
    ipv4: tuple[str, ...]
    speed: int = 0
    mtu: int = 0


class PsutilNetworkMonitor(NetworkMonitor):
    """Network monitor backed by psutil interface enumeration.

    An interface counts as an active network while it is listed and up.
    Appearing interfaces emit AVAILABLE, vanishing ones LOST, address changes
    LINK_PROPERTIES_CHANGED and speed/MTU changes CAPABILITIES_CHANGED.
    """

    def __init__(self, poll_interval: float = 2.0):
        super().__init__()
        self._snapshot: dict[str, _InterfaceSnapshot] = {}
        self._poller = _PollingThread("network-monitor", poll_interval, self.poll)

    def start(self):
        self._snapshot = self._take_snapshot()
        self._poller.start()

    def stop(self):
        self._poller.stop()

    def link_addresses(self) -> list[LinkAddress]:
        result = []
        for name, snapshot in self._take_snapshot().items():
            for address in snapshot.ipv4:
                result.append(
                    LinkAddress(network=name, address=address, is_loopback=ipaddress.IPv4Address(address).is_loopback)
                )
        return result

    def poll(self):
        """Compare the interface table with the previous one and emit changes"""
        current = self._take_snapshot()
        previous = self._snapshot
        self._snapshot = current

        for name in current.keys() - previous.keys():
            self.emit(NetworkEvent.AVAILABLE, name)
        for name in previous.keys() - current.keys():
            self.emit(NetworkEvent.LOST, name)
        for name in current.keys() & previous.keys():
            old, new = previous[name], current[name]
            if old.addresses != new.addresses:
                self.emit(NetworkEvent.LINK_PROPERTIES_CHANGED, name)
            if (old.speed, old.mtu) != (new.speed, new.mtu):
                self.emit(NetworkEvent.CAPABILITIES_CHANGED, name)

    def _take_snapshot(self) -> dict[str, _InterfaceSnapshot]:
        try:
            addrs = psutil.net_if_addrs()
            stats = psutil.net_if_stats()
        except (OSError, RuntimeError) as e:
            logger.warning("Could not enumerate network interfaces: %s", e)
            return {}

        snapshot = {}
        for name, entries in addrs.items():
            stat = stats.get(name)
            if stat is not None and not stat.isup:
                continue

            ipv4 = []
            for entry in entries:
                if entry.family != socket.AF_INET or not entry.address:
                    continue
                try:
                    ipaddress.IPv4Address(entry.address)
                except ValueError:
                    continue
                ipv4.append(entry.address)

            snapshot[name] = _InterfaceSnapshot(
                addresses=frozenset(f"{entry.family}:{entry.address}" for entry in entries),
                ipv4=tuple(ipv4),
                speed=stat.speed if stat else 0,
                mtu=stat.mtu if stat else 0,
            )

        return snapshot


class PowerState(BaseModel):
    screen_on: bool = True
    device_idle: bool = False


def default_power_state() -> PowerState:
    """Used when no platform power service is available: screen on, not idle"""
    return PowerState()


class PollingPowerMonitor(PowerMonitor):
    """Power monitor driven by a state reader function.

    The reader returns the current PowerState. Reader failures are treated as
    "screen on, not idle" so that a broken power service never suspends the
    engine.
    """

    def __init__(self, read_state: Callable[[], PowerState] = default_power_state, poll_interval: float = 5.0):
        super().__init__()
        self.read_state = read_state
        self._state = PowerState()
        self._poller = _PollingThread("power-monitor", poll_interval, self.poll)

    def start(self):
        self._state = self._read()
        self._poller.start()

    def stop(self):
        self._poller.stop()

    def is_screen_on(self) -> bool:
        return self._read().screen_on

    def is_device_idle(self) -> bool:
        return self._read().device_idle

    def poll(self):
        current = self._read()
        previous = self._state
        self._state = current

        if current.screen_on != previous.screen_on:
            self.emit(PowerEvent.SCREEN_ON if current.screen_on else PowerEvent.SCREEN_OFF)
        if current.device_idle != previous.device_idle:
            self.emit(PowerEvent.IDLE_MODE_CHANGED)

    def _read(self) -> PowerState:
        try:
            return self.read_state()
        except Exception as e:
            logger.warning("Reading power state failed, assuming screen on: %s", e)
            return PowerState()
