#!/usr/bin/env python3
"""
Timer scheduling for the engine.

The drag state machine and the now-marker ticker never touch a clock
directly; they ask a Scheduler for delayed and recurring callbacks. In the
application this is QtScheduler (callbacks land on the Qt event loop).
ManualScheduler runs headless on virtual time and is what the tests use.
"""

from __future__ import annotations

import heapq
import itertools
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable

logger = logging.getLogger(__name__)


@runtime_checkable
class ScheduledCall(Protocol):
    """Handle to a pending callback."""

    @property
    def active(self) -> bool:
        """True while the callback may still fire."""
        ...

    def cancel(self) -> None:
        """Stop the callback from firing again. Safe to call repeatedly."""
        ...


@runtime_checkable
class Scheduler(Protocol):
    """Protocol for delayed and recurring callbacks on the engine's thread."""

    def call_later(self, delay_seconds: float, callback: Callable[[], None]) -> ScheduledCall:
        """Run callback once after delay_seconds."""
        ...

    def call_every(self, interval_seconds: float, callback: Callable[[], None]) -> ScheduledCall:
        """Run callback every interval_seconds until cancelled."""
        ...


# =============================================================================
# Manual (virtual time) scheduler
# =============================================================================


@dataclass(order=True)
class _ManualCall:
    due: float
    sequence: int
    callback: Callable[[], None] = field(compare=False)
    interval: float | None = field(default=None, compare=False)
    cancelled: bool = field(default=False, compare=False)
    fired: bool = field(default=False, compare=False)

    @property
    def active(self) -> bool:
        return not self.cancelled and not (self.fired and self.interval is None)

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """
    Scheduler driven by explicit calls to advance().

    Callbacks due within the advanced span run in due order; callbacks
    scheduled with the same due time run in scheduling order.
    """

    def __init__(self) -> None:
        self.now_seconds = 0.0
        self._queue: list[_ManualCall] = []
        self._sequence = itertools.count()

    def call_later(self, delay_seconds: float, callback: Callable[[], None]) -> ScheduledCall:
        call = _ManualCall(self.now_seconds + max(0.0, delay_seconds), next(self._sequence), callback)
        heapq.heappush(self._queue, call)
        return call

    def call_every(self, interval_seconds: float, callback: Callable[[], None]) -> ScheduledCall:
        if interval_seconds <= 0:
            msg = f"interval_seconds must be positive, got {interval_seconds}"
            raise ValueError(msg)
        call = _ManualCall(self.now_seconds + interval_seconds, next(self._sequence), callback, interval_seconds)
        heapq.heappush(self._queue, call)
        return call

    @property
    def pending_count(self) -> int:
        """Number of callbacks that can still fire."""
        return sum(1 for call in self._queue if call.active)

    def advance(self, seconds: float) -> None:
        """Move virtual time forward, running every callback that falls due."""
        target = self.now_seconds + seconds
        while self._queue and self._queue[0].due <= target:
            call = heapq.heappop(self._queue)
            if call.cancelled:
                continue
            self.now_seconds = call.due
            call.fired = True
            call.callback()
            if call.interval is not None and not call.cancelled:
                call.due += call.interval
                call.sequence = next(self._sequence)
                heapq.heappush(self._queue, call)
        self.now_seconds = target

    def cancel_all(self) -> None:
        for call in self._queue:
            call.cancel()
        self._queue.clear()
