"""Tests for debounced action scheduling"""

import threading
import time
from unittest.mock import MagicMock

import pytest

from smart_suspend.debounce import Debouncer, ThreadingScheduler


def test_action_runs_after_delay(scheduler, debouncer):
    action = MagicMock()
    debouncer.trigger(action)

    scheduler.advance(0.4)
    action.assert_not_called()
    assert debouncer.pending is True

    scheduler.advance(0.1)
    action.assert_called_once()
    assert debouncer.pending is False


def test_burst_collapses_to_last_trigger(scheduler, debouncer):
    """Test that 5 triggers within 100ms run only the last action, 500ms after it"""
    calls = []

    for i in range(5):
        debouncer.trigger(lambda i=i: calls.append((i, scheduler.now)))
        scheduler.advance(0.02)

    scheduler.advance(1.0)

    assert len(calls) == 1
    index, fired_at = calls[0]
    assert index == 4
    assert fired_at == pytest.approx(0.08 + 0.5)


def test_trigger_restarts_the_window(scheduler, debouncer):
    action = MagicMock()

    debouncer.trigger(action)
    scheduler.advance(0.4)
    debouncer.trigger(action)
    scheduler.advance(0.4)
    action.assert_not_called()

    scheduler.advance(0.2)
    action.assert_called_once()


def test_cancel_discards_pending(scheduler, debouncer):
    action = MagicMock()
    debouncer.trigger(action)

    debouncer.cancel()
    scheduler.advance(1.0)

    action.assert_not_called()
    assert debouncer.pending is False


def test_cancel_without_pending_is_noop(debouncer):
    debouncer.cancel()
    debouncer.cancel()

    assert debouncer.pending is False


def test_superseded_timer_that_fires_anyway_is_ignored(scheduler, debouncer):
    """Test that a timer whose cancel came too late does not run its action"""
    stale = MagicMock()
    fresh = MagicMock()

    debouncer.trigger(stale)
    stale_handle = scheduler.handles[0]
    debouncer.trigger(fresh)

    # Simulate a timer thread that was already running when cancelled
    stale_handle.callback()
    stale.assert_not_called()

    scheduler.advance(0.5)
    fresh.assert_called_once()


def test_action_failure_is_contained(scheduler, debouncer):
    debouncer.trigger(MagicMock(side_effect=RuntimeError("boom")))
    scheduler.advance(0.5)

    follow_up = MagicMock()
    debouncer.trigger(follow_up)
    scheduler.advance(0.5)

    follow_up.assert_called_once()


def test_action_can_retrigger(scheduler, debouncer):
    runs = []

    def action():
        runs.append(scheduler.now)
        if len(runs) == 1:
            debouncer.trigger(action)

    debouncer.trigger(action)
    scheduler.advance(2.0)

    assert runs == [0.5, 1.0]


def test_threading_scheduler_coalesces_burst():
    """Test real timers: a burst produces a single execution"""
    fired = threading.Event()
    calls = []

    def action(i):
        calls.append(i)
        fired.set()

    debouncer = Debouncer(0.1, ThreadingScheduler())
    for i in range(5):
        debouncer.trigger(lambda i=i: action(i))
        time.sleep(0.01)

    assert fired.wait(2.0)
    time.sleep(0.2)

    assert calls == [4]
    assert debouncer.pending is False
