#!/usr/bin/env python3
"""
Qt-backed scheduler.

Delivers engine timer callbacks (confirmation expiry, now-marker ticks) on
the Qt event loop using QTimer, so they never race with gesture handlers.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from PyQt6.QtCore import QTimer

logger = logging.getLogger(__name__)


class QtScheduledCall:
    """Handle wrapping one QTimer."""

    def __init__(self, owner: QtScheduler, timer: QTimer, single_shot: bool) -> None:
        self._owner = owner
        self._timer = timer
        self._single_shot = single_shot
        self._done = False

    @property
    def active(self) -> bool:
        return not self._done

    def cancel(self) -> None:
        if self._done:
            return
        self._done = True
        self._timer.stop()
        self._owner._release(self)

    def _fire(self, callback: Callable[[], None]) -> None:
        if self._done:
            return
        if self._single_shot:
            self._done = True
            self._owner._release(self)
        try:
            callback()
        except Exception as e:
            logger.exception("Error in scheduled callback: %s", e)


class QtScheduler:
    """
    Scheduler implementation on top of QTimer.

    Must be used from the thread that owns the Qt event loop.
    """

    def __init__(self) -> None:
        # Keep timers referenced until they fire or are cancelled
        self._calls: dict[QtScheduledCall, QTimer] = {}

    def call_later(self, delay_seconds: float, callback: Callable[[], None]) -> QtScheduledCall:
        return self._schedule(delay_seconds, callback, single_shot=True)

    def call_every(self, interval_seconds: float, callback: Callable[[], None]) -> QtScheduledCall:
        if interval_seconds <= 0:
            msg = f"interval_seconds must be positive, got {interval_seconds}"
            raise ValueError(msg)
        return self._schedule(interval_seconds, callback, single_shot=False)

    @property
    def pending_count(self) -> int:
        return len(self._calls)

    def cancel_all(self) -> None:
        for call in list(self._calls):
            call.cancel()

    def _schedule(self, seconds: float, callback: Callable[[], None], single_shot: bool) -> QtScheduledCall:
        timer = QTimer()
        timer.setSingleShot(single_shot)
        call = QtScheduledCall(self, timer, single_shot)
        timer.timeout.connect(lambda: call._fire(callback))
        self._calls[call] = timer
        timer.start(max(0, int(seconds * 1000)))
        return call

    def _release(self, call: QtScheduledCall) -> None:
        timer = self._calls.pop(call, None)
        if timer is not None:
            timer.stop()
