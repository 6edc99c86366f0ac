#!/usr/bin/env python3
"""
Current-time marker ticker.

Keeps the "now" marker and the active-nap indicator fresh while a day is
on screen. Runs as a recurring task on the injected scheduler:

- every tick the current-time angle is recomputed; listeners hear about it
  only when it moved by more than the configured threshold
- every Nth tick the ongoing nap is re-checked; listeners hear about it when
  it started, stopped, paused or resumed
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import date, datetime
from typing import TYPE_CHECKING

from waking_arc.core.dataclasses_config import EngineConfig
from waking_arc.core.time_angle import angle_difference, angle_for_time
from waking_arc.services.entry_store import arc_bounds_for_day

if TYPE_CHECKING:
    from waking_arc.core.dataclasses_arc import ScheduleEntry
    from waking_arc.services.protocols import EntryStore
    from waking_arc.services.scheduling import ScheduledCall, Scheduler

logger = logging.getLogger(__name__)


class NowMarkerTicker:
    """Recurring refresh of the now marker and ongoing-nap state."""

    def __init__(
        self,
        store: EntryStore,
        scheduler: Scheduler,
        config: EngineConfig | None = None,
        clock: Callable[[], datetime] = datetime.now,
        on_now_changed: Callable[[float], None] | None = None,
        on_ongoing_state_changed: Callable[[ScheduleEntry | None], None] | None = None,
    ) -> None:
        self.store = store
        self.scheduler = scheduler
        self.config = config or EngineConfig()
        self._clock = clock
        self._on_now_changed = on_now_changed
        self._on_ongoing_state_changed = on_ongoing_state_changed

        self.displayed_day: date | None = None
        self.now_angle: float | None = None
        self.ongoing_nap: ScheduleEntry | None = None
        self.tick_count = 0
        self._call: ScheduledCall | None = None

    @property
    def running(self) -> bool:
        return self._call is not None and self._call.active

    def start(self, day: date | None = None) -> None:
        """
        Refresh immediately, then every ticker interval.

        Args:
            day: Day on screen; defaults to today. The now marker only moves
                while the displayed day is today.

        """
        self.displayed_day = day
        if self.running:
            return
        self.tick_count = 0
        self._update_now_marker(force=True)
        self._check_ongoing()
        self._call = self.scheduler.call_every(self.config.ticker_interval_seconds, self.tick)
        logger.info("Now-marker ticker started (every %.0fs)", self.config.ticker_interval_seconds)

    def stop(self) -> None:
        if self._call is not None:
            self._call.cancel()
            self._call = None
            logger.info("Now-marker ticker stopped")

    def tick(self) -> None:
        """One timer period. Safe to call repeatedly."""
        self._update_now_marker()
        self.tick_count += 1
        if self.tick_count % self.config.ongoing_check_every_ticks == 0:
            self._check_ongoing()

    def _is_showing_today(self, now: datetime) -> bool:
        return self.displayed_day is None or self.displayed_day == now.date()

    def _update_now_marker(self, force: bool = False) -> None:
        now = self._clock()
        if not self._is_showing_today(now):
            return

        bounds = arc_bounds_for_day(self.store, now.date(), self.config)
        angle = angle_for_time(now, bounds)
        if (
            not force
            and self.now_angle is not None
            and angle_difference(angle, self.now_angle) <= self.config.now_marker_min_change_degrees
        ):
            return

        self.now_angle = angle
        if self._on_now_changed is not None:
            self._on_now_changed(angle)

    def _check_ongoing(self) -> None:
        now = self._clock()
        if not self._is_showing_today(now):
            return

        ongoing = next((nap for nap in self.store.list_naps(now.date()) if nap.is_ongoing), None)
        if ongoing == self.ongoing_nap:
            return

        logger.debug("Ongoing nap changed: %s", ongoing.id if ongoing else None)
        self.ongoing_nap = ongoing
        if self._on_ongoing_state_changed is not None:
            self._on_ongoing_state_changed(ongoing)
