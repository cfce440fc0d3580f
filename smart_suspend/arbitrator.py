"""Priority-based arbitration of suspend requests.

Every watcher reports a boolean under its own SuspendSource. The arbitrator
merges those reports into one decision and tells the downstream engine only
when that decision actually changes.
"""

import logging
import threading
from collections import deque
from collections.abc import Callable
from typing import TYPE_CHECKING

from .sources import SuspendSource

if TYPE_CHECKING:
    from .engine import SuspendableEngine

logger = logging.getLogger(__name__)

ReasonCallback = Callable[[SuspendSource | None], None]


class SuspendArbitrator:
    """Single source of truth for "is the engine suspended".

    Mutations and reads are serialized on one lock, so reports arriving from
    different watcher threads cannot interleave. The engine is signalled on
    boolean transitions only, while that lock is held. The reason observer is
    called on every change of the active source, including a hand-over
    between two sources that both want suspension (the boolean stays True in
    that case). Reason changes are queued under the lock and delivered after
    it is released, in the order they happened, so an observer may call back
    into the arbitrator from any thread.

    Attributes:
        engine: Receives suspended(bool) on merged-state transitions
        on_reason_changed: Optional callback receiving the active source or None
    """

    def __init__(self, engine: "SuspendableEngine", on_reason_changed: ReasonCallback | None = None):
        self.engine = engine
        self.on_reason_changed = on_reason_changed
        self._lock = threading.RLock()
        self._states: dict[SuspendSource, bool] = {}
        self._suspended = False
        self._reason: SuspendSource | None = None
        self._pending_reasons: deque[SuspendSource | None] = deque()
        self._notifying = False

    def update_suspend(self, source: SuspendSource, should_suspend: bool) -> None:
        """Record the request of one source and re-arbitrate"""
        with self._lock:
            logger.debug("update_suspend: source=%s, should_suspend=%s", source.name, should_suspend)
            self._states[source] = bool(should_suspend)
            self._apply(self._active_source())
        self._notify_reasons()

    def clear(self) -> None:
        """Forget every source; resumes the engine if it was suspended"""
        with self._lock:
            self._states.clear()
            self._apply(None)
        self._notify_reasons()

    def get_reason(self) -> SuspendSource | None:
        """Highest-priority source currently requesting suspension"""
        with self._lock:
            return self._reason

    def is_suspended(self) -> bool:
        with self._lock:
            return self._suspended

    def states(self) -> dict[SuspendSource, bool]:
        """Snapshot of the recorded per-source requests"""
        with self._lock:
            return dict(self._states)

    def _active_source(self) -> SuspendSource | None:
        for source in SuspendSource.by_priority():
            if self._states.get(source, False):
                return source
        return None

    def _apply(self, reason: SuspendSource | None) -> None:
        suspended = reason is not None
        suspended_changed = suspended != self._suspended
        reason_changed = reason != self._reason

        self._suspended = suspended
        self._reason = reason

        if suspended_changed:
            logger.info("Engine suspended=%s (reason: %s)", suspended, reason.name if reason else None)
            try:
                self.engine.suspended(suspended)
            except Exception:
                logger.exception("Engine failed to apply suspended=%s", suspended)

        if reason_changed:
            self._pending_reasons.append(reason)

    def _notify_reasons(self) -> None:
        # One thread at a time drains the queue; others leave their changes to it
        with self._lock:
            if self._notifying:
                return
            self._notifying = True

        while True:
            with self._lock:
                if not self._pending_reasons:
                    self._notifying = False
                    return
                reason = self._pending_reasons.popleft()
            if self.on_reason_changed is None:
                continue
            try:
                self.on_reason_changed(reason)
            except Exception:
                logger.exception("Suspend reason observer failed")
