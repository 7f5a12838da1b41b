# -*- coding: utf-8 -*-
"""
Auto-save scheduler for wizard progress.

Throttles save requests with a single-shot QTimer:
- The first change after a write arms the timer
- Further changes inside the window only mark the state dirty
- When the timer fires, one write runs with whatever is current then
- flush() writes a pending change immediately (used on teardown)

A failed write leaves the scheduler dirty, so the next change or flush
retries it.
"""

from typing import Callable, Dict, Optional

from PyQt5.QtCore import QObject, QTimer, pyqtSignal

from utils.logger import get_logger

logger = get_logger(__name__)


class AutoSaveScheduler(QObject):
    """
    Cancellable, re-arming save timer.

    Signals:
        saved: Emitted after each write attempt with its outcome
    """

    saved = pyqtSignal(bool)

    def __init__(self, save_callback: Callable[[], bool], interval_ms: int,
                 parent: Optional[QObject] = None):
        """
        Args:
            save_callback: Performs the write; returns True on success
            interval_ms: Minimum time between two writes
            parent: Parent QObject
        """
        super().__init__(parent)
        self._save_callback = save_callback
        self.interval_ms = max(0, int(interval_ms))
        self._dirty = False

        self._timer = QTimer(self)
        self._timer.setSingleShot(True)
        self._timer.timeout.connect(self._on_timeout)

        self._stats = {
            'requests': 0,   # schedule() calls
            'writes': 0,     # write attempts
            'failures': 0,   # failed writes
        }

    @property
    def is_pending(self) -> bool:
        """True while a change is waiting to be written."""
        return self._dirty

    @property
    def is_armed(self) -> bool:
        return self._timer.isActive()

    def schedule(self):
        """Record a change; arms the timer unless a window is already open."""
        self._stats['requests'] += 1
        self._dirty = True
        if not self._timer.isActive():
            self._timer.start(self.interval_ms)

    def flush(self) -> bool:
        """
        Write a pending change now and disarm the timer.

        Returns:
            True if nothing was pending or the write succeeded
        """
        self._timer.stop()
        if not self._dirty:
            return True
        return self._write()

    def cancel(self):
        """Drop any pending change without writing it."""
        self._timer.stop()
        self._dirty = False

    def get_stats(self) -> Dict[str, int]:
        return dict(self._stats)

    def _on_timeout(self):
        if self._dirty:
            self._write()

    def _write(self) -> bool:
        self._dirty = False
        self._stats['writes'] += 1
        success = bool(self._save_callback())
        if not success:
            self._stats['failures'] += 1
            self._dirty = True
            logger.debug("Auto-save failed; will retry on the next scheduled save")
        self.saved.emit(success)
        return success
