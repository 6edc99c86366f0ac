#!/usr/bin/env python3
"""
Time <-> angle mapping for the waking arc.

The waking window (wake time to bed time) is laid out along an arc that
starts at ``ArcBounds.start_angle`` and sweeps clockwise to
``ArcBounds.end_angle``. Every function here is pure and total: times outside
the window are clamped onto it, a zero-length window is widened to one
minute, and missing wake/bed components fall back to the default window.

Two edge cases shape the arithmetic:
- Overnight windows: a bed time numerically before the wake time means the
  window crosses midnight.
- Midnight bedtime: a bed time of 00:00 (or 24:00) is treated as 23:59 so the
  window spans almost the whole day instead of collapsing to zero.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta

from waking_arc.core.constants import ArcDefaults, HourMarkerSpacing, TimeConstants
from waking_arc.core.dataclasses_arc import ArcBounds


@dataclass(frozen=True)
class WakingWindow:
    """Minute-of-day view of a waking window."""

    wake_minutes: int
    bed_minutes: int
    total_minutes: int
    is_midnight_bedtime: bool
    is_overnight: bool

    @property
    def wake_hour(self) -> int:
        return self.wake_minutes // TimeConstants.MINUTES_PER_HOUR

    @property
    def effective_bed_minutes(self) -> int:
        """Bed minute used for span purposes (23:59 for a midnight bedtime)."""
        if self.is_midnight_bedtime:
            return TimeConstants.LAST_MINUTE_OF_DAY
        return self.bed_minutes

    def offset_of(self, minutes: int) -> int:
        """Minutes elapsed since wake, walking forward around the clock."""
        return (minutes - self.wake_minutes) % TimeConstants.MINUTES_PER_DAY

    def contains(self, minutes: int) -> bool:
        """Check if a minute of day lies inside the window (bounds inclusive)."""
        return self.offset_of(minutes) <= self.total_minutes


@dataclass(frozen=True)
class HourMarker:
    """An hour tick drawn outside the arc."""

    hour_value: float
    angle: float
    label: str


def minutes_of_day(value: datetime | time) -> int:
    """Minutes since midnight, ignoring seconds."""
    return value.hour * TimeConstants.MINUTES_PER_HOUR + value.minute


def _resolve_times(bounds: ArcBounds) -> tuple[int, int]:
    """Wake/bed minutes with the default window filled in for missing parts."""
    day = TimeConstants.MINUTES_PER_DAY
    window = ArcDefaults.WINDOW_MINUTES
    wake = minutes_of_day(bounds.wake_time) if bounds.wake_time is not None else None
    bed = minutes_of_day(bounds.bed_time) if bounds.bed_time is not None else None

    if wake is None and bed is None:
        wake = ArcDefaults.WAKE_HOUR * TimeConstants.MINUTES_PER_HOUR + ArcDefaults.WAKE_MINUTE
        bed = (wake + window) % day
    elif wake is None:
        wake = (bed - window) % day
    elif bed is None:
        bed = (wake + window) % day
    return wake, bed


def waking_window(bounds: ArcBounds) -> WakingWindow:
    """
    Compute the minute-of-day window described by the bounds.

    Args:
        bounds: Arc bounds holding the wake and bed times

    Returns:
        WakingWindow with total_minutes always >= 1

    """
    wake, bed = _resolve_times(bounds)
    is_midnight_bedtime = bed == 0

    if is_midnight_bedtime:
        total = TimeConstants.LAST_MINUTE_OF_DAY - wake
        is_overnight = False
    elif bed > wake:
        total = bed - wake
        is_overnight = False
    else:
        total = (TimeConstants.MINUTES_PER_DAY - wake) + bed
        is_overnight = True

    return WakingWindow(
        wake_minutes=wake,
        bed_minutes=bed,
        total_minutes=max(total, ArcDefaults.MIN_WINDOW_MINUTES),
        is_midnight_bedtime=is_midnight_bedtime,
        is_overnight=is_overnight,
    )


def window_datetimes(bounds: ArcBounds, day: date) -> tuple[datetime, datetime]:
    """
    Wake and bed instants of the window starting on day.

    A midnight bedtime ends at 23:59 the same day; an overnight window ends
    on the following day.
    """
    window = waking_window(bounds)
    start_of_day = datetime.combine(day, time())
    wake = start_of_day + timedelta(minutes=window.wake_minutes)
    return wake, wake + timedelta(minutes=window.total_minutes)


def _minutes_since_wake(minutes: int, window: WakingWindow) -> int:
    """Position of a minute inside the window, clamped onto it when outside."""
    wake = window.wake_minutes
    bed = window.bed_minutes
    total = window.total_minutes

    if window.is_midnight_bedtime:
        # Every minute up to 23:59 after wake is inside; earlier ones snap to wake
        return minutes - wake if minutes >= wake else 0

    if not window.is_overnight:
        if wake <= minutes <= bed:
            return minutes - wake
        return 0 if minutes < wake else total

    if minutes >= wake:
        return minutes - wake
    if minutes <= bed:
        return (TimeConstants.MINUTES_PER_DAY - wake) + minutes

    # In the daytime gap between bed and the next wake: snap to the closer one
    distance_to_wake = wake - minutes
    distance_to_bed = minutes - bed
    return 0 if distance_to_wake < distance_to_bed else total


def angle_for_time(value: datetime | time, bounds: ArcBounds) -> float:
    """
    Map a time of day onto the arc.

    Args:
        value: Time to place; only its hour and minute are used
        bounds: Arc bounds

    Returns:
        Angle in [0, 360)

    Example:
        >>> bounds = ArcBounds(110.0, 70.0, time(7, 0), time(19, 0))
        >>> angle_for_time(time(13, 0), bounds)
        270.0

    """
    window = waking_window(bounds)
    since_wake = _minutes_since_wake(minutes_of_day(value), window)
    normalized = max(0.0, min(1.0, since_wake / window.total_minutes))
    return (bounds.start_angle + normalized * bounds.sweep) % 360.0


def time_for_angle(angle: float, bounds: ArcBounds, reference_date: date | datetime) -> datetime:
    """
    Map an arc angle back to a wall-clock time.

    Angles past the end of the arc are capped at bed time. Minutes since wake
    are truncated, so a round trip through angle_for_time can lose up to one
    minute.

    Args:
        angle: Pointer angle in degrees
        bounds: Arc bounds
        reference_date: Day the waking window starts on

    Returns:
        Naive datetime on reference_date, or the following day when the
        window wrapped past midnight

    """
    window = waking_window(bounds)
    sweep = bounds.sweep

    relative = (angle - bounds.start_angle + 360.0) % 360.0
    if relative > sweep:
        relative = sweep

    normalized = relative / sweep
    since_wake = int(normalized * window.total_minutes)

    total = window.wake_minutes + since_wake
    hours = (total // TimeConstants.MINUTES_PER_HOUR) % TimeConstants.HOURS_PER_DAY
    minutes = total % TimeConstants.MINUTES_PER_HOUR

    base_day = reference_date.date() if isinstance(reference_date, datetime) else reference_date
    result = datetime.combine(base_day, time(hours, minutes))
    if total >= TimeConstants.MINUTES_PER_DAY:
        result += timedelta(days=1)
    return result


def angle_difference(first: float, second: float) -> float:
    """Smallest unsigned angle between two angles, in [0, 180]."""
    diff = abs(first - second) % 360.0
    return min(diff, 360.0 - diff)


def constrain_angle_to_arc(angle: float, bounds: ArcBounds) -> float:
    """
    Keep an angle on the arc.

    Angles inside the sweep are returned normalised to [0, 360); angles in
    the gap snap to whichever arc end is angularly closer.
    """
    relative = (angle - bounds.start_angle) % 360.0
    if relative <= bounds.sweep:
        return angle % 360.0

    distance_to_end = relative - bounds.sweep
    distance_to_start = 360.0 - relative
    if distance_to_start < distance_to_end:
        return bounds.start_angle % 360.0
    return bounds.end_angle % 360.0


def is_time_within_waking_hours(value: datetime | time, bounds: ArcBounds) -> bool:
    """Check if a time of day falls inside the waking window."""
    return waking_window(bounds).contains(minutes_of_day(value))


def _marker_spacing(total_hours: float) -> float:
    if total_hours <= HourMarkerSpacing.HOURLY_UP_TO:
        return 1.0
    if total_hours <= HourMarkerSpacing.TWO_HOURLY_UP_TO:
        return 2.0
    if total_hours <= HourMarkerSpacing.THREE_HOURLY_UP_TO:
        return 3.0
    return 4.0


def format_hour_label(hour_value: float) -> str:
    """Format an hour as a 12-hour label, e.g. 13 -> "1PM"."""
    whole = int(hour_value) % TimeConstants.HOURS_PER_DAY
    hour12 = 12 if whole == 0 else (whole - 12 if whole > 12 else whole)
    suffix = "PM" if whole >= 12 else "AM"
    return f"{hour12}{suffix}"


def hour_markers(bounds: ArcBounds) -> list[HourMarker]:
    """
    Hour ticks for the waking window.

    Spacing widens with the window: hourly up to 8 h, every 2 h up to 14 h,
    every 3 h up to 20 h and every 4 h beyond that.
    """
    window = waking_window(bounds)
    wake_hour = window.wake_minutes / TimeConstants.MINUTES_PER_HOUR
    total_hours = round(100 * window.total_minutes / TimeConstants.MINUTES_PER_HOUR) / 100
    spacing = _marker_spacing(total_hours)
    end_hour = wake_hour + total_hours

    hours: list[float] = []
    current = math.ceil(wake_hour / spacing) * spacing
    if end_hour > TimeConstants.HOURS_PER_DAY:
        while current < TimeConstants.HOURS_PER_DAY:
            hours.append(current)
            current += spacing
        current = 0.0
        remaining = end_hour % TimeConstants.HOURS_PER_DAY
        while current < remaining:
            hours.append(current)
            current += spacing
    else:
        while current < end_hour:
            hours.append(current)
            current += spacing

    markers = []
    for hour_value in hours:
        whole = int(hour_value) % TimeConstants.HOURS_PER_DAY
        minute = int((hour_value - int(hour_value)) * TimeConstants.MINUTES_PER_HOUR)
        angle = angle_for_time(time(whole, minute), bounds)
        markers.append(HourMarker(hour_value=hour_value, angle=angle, label=format_hour_label(hour_value)))
    return markers
