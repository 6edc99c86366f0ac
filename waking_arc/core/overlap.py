#!/usr/bin/env python3
"""Overlap detection for new and edited naps."""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import TYPE_CHECKING

from waking_arc.core.sleep_utils import effective_end

if TYPE_CHECKING:
    from collections.abc import Iterable

    from waking_arc.core.dataclasses_arc import ScheduleEntry
    from waking_arc.services.protocols import EntryStore

logger = logging.getLogger(__name__)


def intervals_overlap(start_a: datetime, end_a: datetime, start_b: datetime, end_b: datetime) -> bool:
    """Half-open interval test; touching intervals do not overlap."""
    return start_a < end_b and start_b < end_a


def has_overlap(
    candidate_start: datetime,
    candidate_end: datetime,
    existing_naps: Iterable[ScheduleEntry],
    now: datetime | None = None,
    exclude_id: str | None = None,
) -> ScheduleEntry | None:
    """
    Find the first nap overlapping a candidate interval.

    Only entries whose sleep type is NAP are considered. Ongoing naps are
    treated as ending now, or at their pause instant when paused.

    Args:
        candidate_start: Start of the proposed nap
        candidate_end: End of the proposed nap
        existing_naps: Entries in storage order
        now: Current time for ongoing naps (defaults to the wall clock)
        exclude_id: Entry to ignore, typically the nap being edited

    Returns:
        The first overlapping nap, or None

    """
    reference_now = now or datetime.now()
    for entry in existing_naps:
        if not entry.is_nap or entry.id == exclude_id:
            continue
        entry_end = effective_end(entry, reference_now)
        if entry_end is None:
            continue
        if intervals_overlap(candidate_start, candidate_end, entry.start, entry_end):
            logger.debug("Candidate %s-%s overlaps nap %s", candidate_start, candidate_end, entry.id)
            return entry
    return None


def find_overlapping_nap(
    store: EntryStore,
    day: date,
    start: datetime,
    end: datetime,
    now: datetime | None = None,
    exclude_id: str | None = None,
) -> ScheduleEntry | None:
    """Check a candidate interval against the naps stored for a day."""
    return has_overlap(start, end, store.list_naps(day), now=now, exclude_id=exclude_id)
