#!/usr/bin/env python3
"""
Render order resolution.

Decides the stacking order of entries drawn on the arc. Higher z-index
draws on top:

- the entry being dragged is always on top
- feeds over tasks over sleep, with ongoing naps above all of those
- within a tier, shorter entries stack above longer ones
- wake and bed markers sit underneath everything
"""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from typing import TYPE_CHECKING

from waking_arc.core.constants import EntryCategory, ZIndexTier
from waking_arc.core.dataclasses_arc import RenderDescriptor
from waking_arc.core.sleep_utils import effective_end

if TYPE_CHECKING:
    from collections.abc import Iterable

    from waking_arc.core.dataclasses_arc import DragSession, ScheduleEntry


_CATEGORY_TIERS = {
    EntryCategory.FEED: ZIndexTier.FEED,
    EntryCategory.TASK: ZIndexTier.TASK,
    EntryCategory.SLEEP: ZIndexTier.SLEEP,
}


def z_index(descriptor: RenderDescriptor) -> float:
    """Stacking value for one descriptor."""
    if descriptor.is_dragged:
        return ZIndexTier.DRAGGED
    if descriptor.is_fixed:
        return ZIndexTier.FIXED_MARKER

    value = _CATEGORY_TIERS.get(descriptor.category, ZIndexTier.BASE)
    if descriptor.category == EntryCategory.SLEEP and descriptor.is_ongoing:
        value = ZIndexTier.SLEEP_ONGOING_PAUSED if descriptor.is_paused else ZIndexTier.SLEEP_ONGOING

    if descriptor.duration > 0:
        clamped = min(descriptor.duration, ZIndexTier.PENALTY_FULL_DURATION_SECONDS)
        value -= clamped / ZIndexTier.PENALTY_FULL_DURATION_SECONDS * ZIndexTier.MAX_DURATION_PENALTY
    return value


def describe(entry: ScheduleEntry, session: DragSession | None, now: datetime) -> RenderDescriptor:
    """
    Build the render descriptor of an entry for the current frame.

    A dragged entry reports its live times and live duration; ongoing entries
    measure their duration up to now (or their pause instant).
    """
    is_dragged = session is not None and session.target_id == entry.id
    live_start = entry.start
    live_end = entry.end

    if is_dragged:
        live_start = session.live_start
        live_end = session.live_end
        duration = session.live_duration_seconds
    elif entry.is_ongoing:
        end = effective_end(entry, now)
        duration = max(0.0, (end - entry.start).total_seconds()) if end else 0.0
        live_end = end
    else:
        duration = entry.duration_seconds

    descriptor = RenderDescriptor(
        entry_id=entry.id,
        category=entry.category,
        is_dragged=is_dragged,
        duration=duration,
        is_ongoing=entry.is_ongoing,
        is_paused=entry.is_paused,
        is_fixed=entry.is_fixed_marker,
        live_start=live_start,
        live_end=live_end,
    )
    return replace(descriptor, z_index=z_index(descriptor))


def render_order(
    entries: Iterable[ScheduleEntry],
    session: DragSession | None,
    now: datetime,
) -> list[RenderDescriptor]:
    """Descriptors sorted by ascending z-index; ties keep input order."""
    descriptors = [describe(entry, session, now) for entry in entries]
    # sorted() is stable
    return sorted(descriptors, key=lambda d: d.z_index)
