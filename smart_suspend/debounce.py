"""Delay-coalescing of repeated triggers.

A Debouncer runs its action once, a fixed delay after the most recent
trigger. Timers come from a Scheduler so the same code runs on real
threading timers in production and on a manually advanced clock in tests.
"""

import logging
import threading
from collections.abc import Callable
from typing import Any, Protocol

logger = logging.getLogger(__name__)

DEFAULT_DEBOUNCE_SECONDS = 0.5


class TimerHandle(Protocol):
    def cancel(self) -> Any: ...


class Scheduler(Protocol):
    """Anything with an asyncio-style call_later"""

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle: ...


class ThreadingScheduler:
    """Runs each callback on its own daemon timer thread"""

    def call_later(self, delay: float, callback: Callable[[], None]) -> threading.Timer:
        timer = threading.Timer(delay, callback)
        timer.daemon = True
        timer.start()
        return timer


class Debouncer:
    """Collapse bursts of triggers into a single deferred action.

    Each trigger cancels the previously scheduled action and arms a new one.
    A timer that already started firing when it was superseded is detected
    through a generation counter and does nothing, so a burst produces
    exactly one execution, using the action passed by the last trigger.

    Attributes:
        delay: Quiet period (seconds) required after the last trigger
        scheduler: Source of cancellable timers
    """

    def __init__(self, delay: float = DEFAULT_DEBOUNCE_SECONDS, scheduler: Scheduler | None = None):
        self.delay = delay
        self.scheduler = scheduler or ThreadingScheduler()
        self._lock = threading.Lock()
        self._handle: TimerHandle | None = None
        self._generation = 0

    @property
    def pending(self) -> bool:
        """Whether an action is armed and has not fired yet"""
        with self._lock:
            return self._handle is not None

    def trigger(self, action: Callable[[], None]) -> None:
        """Schedule action after the delay, replacing any pending one"""
        with self._lock:
            if self._handle is not None:
                self._handle.cancel()
            self._generation += 1
            generation = self._generation
            self._handle = self.scheduler.call_later(self.delay, lambda: self._fire(generation, action))

    def cancel(self) -> None:
        """Discard the pending action, if any"""
        with self._lock:
            if self._handle is not None:
                self._handle.cancel()
                self._handle = None
            self._generation += 1

    def _fire(self, generation: int, action: Callable[[], None]) -> None:
        with self._lock:
            if generation != self._generation:
                return
            self._handle = None

        try:
            action()
        except Exception:
            logger.exception("Debounced action failed")
