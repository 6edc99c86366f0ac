#!/usr/bin/env python3
"""
In-memory entry store.

Reference implementation of the EntryStore protocol. Entries are kept per
day under a "YYYY-MM-DD" key in insertion order. Also hosts the nap
lifecycle operations (start now, pause/resume, stop) and the helper that
turns a day's wake/bed markers into ArcBounds.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable
from dataclasses import replace
from datetime import date, datetime, timedelta
from typing import TYPE_CHECKING

from waking_arc.core.constants import EntryCategory, SleepType, TimeFormat
from waking_arc.core.dataclasses_arc import ArcBounds, PauseInterval, ScheduleEntry
from waking_arc.core.dataclasses_config import EngineConfig
from waking_arc.core.exceptions import EntryNotFoundError, ErrorCodes, WakingArcError
from waking_arc.core.sleep_utils import total_pause_seconds

if TYPE_CHECKING:
    from waking_arc.services.protocols import EntryStore

logger = logging.getLogger(__name__)

DEFAULT_NAP_MINUTES = 30


def day_key(day: date) -> str:
    """Storage key for a day."""
    return day.strftime(TimeFormat.DATE_ONLY)


class InMemoryEntryStore:
    """Dictionary-backed store keyed by day."""

    def __init__(self, clock: Callable[[], datetime] = datetime.now) -> None:
        self._entries: dict[str, list[ScheduleEntry]] = {}
        self._locked_days: set[str] = set()
        self._clock = clock

    # =========================================================================
    # EntryStore protocol
    # =========================================================================

    def get_entry(self, entry_id: str, day: date) -> ScheduleEntry | None:
        for entry in self._entries.get(day_key(day), []):
            if entry.id == entry_id:
                return entry
        return None

    def update_entry(self, entry: ScheduleEntry, day: date) -> None:
        """
        Replace the stored entry with the same id.

        Raises:
            EntryNotFoundError: If no entry with that id exists on the day

        """
        entries = self._entries.get(day_key(day), [])
        for index, existing in enumerate(entries):
            if existing.id == entry.id:
                entries[index] = entry
                logger.debug("Updated entry %s on %s", entry.id, day_key(day))
                return
        msg = f"Entry {entry.id} not found on {day_key(day)}"
        raise EntryNotFoundError(msg, ErrorCodes.ENTRY_NOT_FOUND, {"entry_id": entry.id, "day": day_key(day)})

    def find_wake_marker(self, day: date) -> ScheduleEntry | None:
        return self._find_marker(day, SleepType.WAKETIME)

    def find_bed_marker(self, day: date) -> ScheduleEntry | None:
        return self._find_marker(day, SleepType.BEDTIME)

    def list_naps(self, day: date) -> list[ScheduleEntry]:
        return [entry for entry in self._entries.get(day_key(day), []) if entry.is_nap]

    def is_editing_allowed(self, day: date) -> bool:
        return day_key(day) not in self._locked_days

    # =========================================================================
    # Collection management
    # =========================================================================

    def add_entry(self, entry: ScheduleEntry, day: date) -> ScheduleEntry:
        self._entries.setdefault(day_key(day), []).append(entry)
        logger.debug("Added %s entry %s on %s", entry.category, entry.id, day_key(day))
        return entry

    def delete_entry(self, entry_id: str, day: date) -> bool:
        """Remove an entry. Returns False if it was not present."""
        entries = self._entries.get(day_key(day), [])
        for index, entry in enumerate(entries):
            if entry.id == entry_id:
                del entries[index]
                logger.debug("Deleted entry %s on %s", entry_id, day_key(day))
                return True
        return False

    def list_entries(self, day: date) -> list[ScheduleEntry]:
        return list(self._entries.get(day_key(day), []))

    def lock_day(self, day: date, locked: bool = True) -> None:
        """Disallow (or re-allow) edits on a day."""
        if locked:
            self._locked_days.add(day_key(day))
        else:
            self._locked_days.discard(day_key(day))

    def find_ongoing_nap(self, day: date) -> ScheduleEntry | None:
        for entry in self.list_naps(day):
            if entry.is_ongoing:
                return entry
        return None

    def _find_marker(self, day: date, sleep_type: SleepType) -> ScheduleEntry | None:
        for entry in self._entries.get(day_key(day), []):
            if entry.category == EntryCategory.SLEEP and entry.sleep_type == sleep_type:
                return entry
        return None

    def _require(self, entry_id: str, day: date) -> ScheduleEntry:
        entry = self.get_entry(entry_id, day)
        if entry is None:
            msg = f"Entry {entry_id} not found on {day_key(day)}"
            raise EntryNotFoundError(msg, ErrorCodes.ENTRY_NOT_FOUND, {"entry_id": entry_id})
        return entry

    def _require_ongoing(self, entry_id: str, day: date) -> ScheduleEntry:
        entry = self._require(entry_id, day)
        if not entry.is_ongoing:
            msg = f"Entry {entry_id} is not an ongoing nap"
            raise WakingArcError(msg, ErrorCodes.ENTRY_NOT_ONGOING, {"entry_id": entry_id})
        return entry

    # =========================================================================
    # Nap lifecycle
    # =========================================================================

    def start_nap_now(self, day: date, duration_minutes: int = DEFAULT_NAP_MINUTES) -> ScheduleEntry:
        """Create an ongoing nap starting now with a planned end."""
        now = self._clock()
        nap = ScheduleEntry(
            id=str(uuid.uuid4()),
            category=EntryCategory.SLEEP,
            start=now,
            end=now + timedelta(minutes=duration_minutes),
            sleep_type=SleepType.NAP,
            is_ongoing=True,
            title="Started from quick action",
        )
        logger.info("Started nap %s at %s", nap.id, now.strftime(TimeFormat.HOUR_MINUTE))
        return self.add_entry(nap, day)

    def toggle_pause(self, entry_id: str, day: date) -> ScheduleEntry:
        """
        Pause a running nap, or resume a paused one.

        Resuming records the finished pause as a PauseInterval.

        Raises:
            EntryNotFoundError: If the nap does not exist
            WakingArcError: If the entry is not ongoing

        """
        entry = self._require_ongoing(entry_id, day)
        now = self._clock()

        if entry.is_paused:
            intervals = entry.pause_intervals
            if entry.paused_at is not None:
                intervals = (*intervals, PauseInterval(entry.paused_at, now))
            updated = replace(entry, is_paused=False, paused_at=None, pause_intervals=intervals)
            logger.debug("Resumed nap %s", entry_id)
        else:
            updated = replace(entry, is_paused=True, paused_at=now)
            logger.debug("Paused nap %s", entry_id)

        self.update_entry(updated, day)
        return updated

    def stop_ongoing_nap(self, entry_id: str, day: date) -> ScheduleEntry:
        """
        Finish an ongoing nap.

        The end becomes now minus all pause time (including a pause still in
        progress), so the stored span equals the sleep actually taken.

        Raises:
            EntryNotFoundError: If the nap does not exist
            WakingArcError: If the entry is not ongoing

        """
        entry = self._require_ongoing(entry_id, day)
        now = self._clock()
        end = now - timedelta(seconds=total_pause_seconds(entry, now))
        updated = replace(entry, end=end, is_ongoing=False, is_paused=False, paused_at=None)
        self.update_entry(updated, day)
        logger.info("Stopped nap %s at %s", entry_id, end.strftime(TimeFormat.HOUR_MINUTE))
        return updated


def arc_bounds_for_day(store: EntryStore, day: date, config: EngineConfig | None = None) -> ArcBounds:
    """
    Build the arc bounds for a day from its wake/bed markers.

    Missing markers fall back to the configured default window.
    """
    config = config or EngineConfig()
    wake_marker = store.find_wake_marker(day)
    bed_marker = store.find_bed_marker(day)

    wake = wake_marker.start.time().replace(second=0, microsecond=0) if wake_marker else config.default_wake_time
    if bed_marker:
        bed = bed_marker.start.time().replace(second=0, microsecond=0)
    else:
        fallback = datetime.combine(day, wake) + timedelta(minutes=config.default_window_minutes)
        bed = fallback.time()

    return ArcBounds(
        start_angle=config.arc_start_angle,
        end_angle=config.arc_end_angle,
        wake_time=wake,
        bed_time=bed,
    )

