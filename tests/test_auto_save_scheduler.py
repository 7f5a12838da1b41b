# -*- coding: utf-8 -*-
"""
Tests for the auto-save scheduler.

Tests cover:
- Throttling (one write per window)
- Flush and cancel
- Retry after a failed write
"""

import pytest

from services.auto_save_scheduler import AutoSaveScheduler


class Recorder:
    """Save callback that records calls and returns scripted outcomes."""

    def __init__(self, *outcomes):
        self.calls = 0
        self._outcomes = list(outcomes)

    def __call__(self):
        self.calls += 1
        if self._outcomes:
            return self._outcomes.pop(0)
        return True


@pytest.fixture
def recorder():
    return Recorder()


@pytest.fixture
def scheduler(qapp, recorder):
    scheduler = AutoSaveScheduler(recorder, interval_ms=50)
    yield scheduler
    scheduler.cancel()


class TestThrottling:
    """schedule()."""

    def test_burst_of_changes_writes_once(self, qtbot, scheduler, recorder):
        with qtbot.waitSignal(scheduler.saved, timeout=1000) as blocker:
            for _ in range(5):
                scheduler.schedule()
        assert blocker.args == [True]
        qtbot.wait(150)
        assert recorder.calls == 1
        assert scheduler.get_stats() == {'requests': 5, 'writes': 1, 'failures': 0}

    def test_nothing_written_before_window_ends(self, qtbot, qapp, recorder):
        scheduler = AutoSaveScheduler(recorder, interval_ms=10_000)
        scheduler.schedule()
        qtbot.wait(50)
        assert recorder.calls == 0
        assert scheduler.is_pending
        assert scheduler.is_armed
        scheduler.cancel()

    def test_change_after_write_opens_new_window(self, qtbot, scheduler, recorder):
        with qtbot.waitSignal(scheduler.saved, timeout=1000):
            scheduler.schedule()
        with qtbot.waitSignal(scheduler.saved, timeout=1000):
            scheduler.schedule()
        assert recorder.calls == 2


class TestFlushAndCancel:
    """flush() and cancel()."""

    def test_flush_writes_immediately(self, scheduler, recorder):
        scheduler.schedule()
        assert scheduler.flush() is True
        assert recorder.calls == 1
        assert not scheduler.is_pending
        assert not scheduler.is_armed

    def test_flush_without_changes(self, scheduler, recorder):
        assert scheduler.flush() is True
        assert recorder.calls == 0

    def test_cancel_drops_pending_change(self, qtbot, scheduler, recorder):
        scheduler.schedule()
        scheduler.cancel()
        qtbot.wait(150)
        assert recorder.calls == 0
        assert not scheduler.is_pending


class TestFailures:
    """Failed writes stay pending."""

    def test_failed_write_is_retried_on_flush(self, qtbot, qapp):
        recorder = Recorder(False, True)
        scheduler = AutoSaveScheduler(recorder, interval_ms=20)
        with qtbot.waitSignal(scheduler.saved, timeout=1000) as blocker:
            scheduler.schedule()
        assert blocker.args == [False]
        assert scheduler.is_pending

        assert scheduler.flush() is True
        assert recorder.calls == 2
        assert scheduler.get_stats()['failures'] == 1
