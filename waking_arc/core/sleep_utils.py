#!/usr/bin/env python3
"""
Sleep duration helpers.

Ongoing naps run until "now" (or the instant they were paused); completed
pauses are subtracted from the elapsed time.
"""

from __future__ import annotations

from datetime import datetime

from waking_arc.core.constants import TimeConstants
from waking_arc.core.dataclasses_arc import ScheduleEntry


def effective_end(entry: ScheduleEntry, now: datetime) -> datetime | None:
    """End time used for drawing: now or the pause instant for ongoing entries."""
    if not entry.is_ongoing:
        return entry.end
    if entry.is_paused:
        return entry.paused_at or entry.end or now
    return now


def completed_pause_seconds(entry: ScheduleEntry) -> float:
    """Total length of finished pauses."""
    return sum(interval.duration_seconds for interval in entry.pause_intervals)


def total_pause_seconds(entry: ScheduleEntry, now: datetime) -> float:
    """Finished pauses plus the pause currently in progress, if any."""
    total = completed_pause_seconds(entry)
    if entry.is_paused and entry.paused_at is not None:
        total += max(0.0, (now - entry.paused_at).total_seconds())
    return total


def effective_duration_seconds(entry: ScheduleEntry, now: datetime) -> float:
    """
    Sleep time actually accrued by the entry.

    Completed entries use their stored span. Ongoing entries count up to now
    (or the pause instant) minus finished pauses.
    """
    if not entry.is_ongoing:
        return entry.duration_seconds

    end_point = now
    if entry.is_paused and entry.paused_at is not None:
        end_point = entry.paused_at
    return (end_point - entry.start).total_seconds() - completed_pause_seconds(entry)


def expected_duration_seconds(entry: ScheduleEntry) -> float:
    """Planned duration from the stored start and end."""
    return entry.duration_seconds


def completion_percentage(entry: ScheduleEntry, now: datetime) -> float:
    """Percentage of the planned nap already slept, capped at 100."""
    if not entry.is_ongoing:
        return 100.0
    expected = expected_duration_seconds(entry)
    if expected <= 0:
        return 100.0
    return min(100.0, effective_duration_seconds(entry, now) / expected * 100.0)


def time_remaining_seconds(entry: ScheduleEntry, now: datetime) -> float:
    """Planned sleep still to go for an ongoing nap; 0 for completed entries."""
    if not entry.is_ongoing:
        return 0.0
    return max(0.0, expected_duration_seconds(entry) - effective_duration_seconds(entry, now))


def format_duration(seconds: float) -> str:
    """
    Format a duration as H:MM:SS, or MM:SS below one hour.

    Example:
        >>> format_duration(3725)
        '1:02:05'
        >>> format_duration(125)
        '02:05'

    """
    whole = int(seconds)
    hours = whole // TimeConstants.SECONDS_PER_HOUR
    minutes = (whole % TimeConstants.SECONDS_PER_HOUR) // TimeConstants.SECONDS_PER_MINUTE
    secs = whole % TimeConstants.SECONDS_PER_MINUTE
    if hours > 0:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes:02d}:{secs:02d}"


def _plural(count: int, unit: str) -> str:
    return f"{count} {unit}" if count == 1 else f"{count} {unit}s"


def format_time_remaining(seconds: float) -> str:
    """Human-readable remaining time, e.g. "1 hour, 5 minutes"."""
    minutes = int(seconds) // TimeConstants.SECONDS_PER_MINUTE
    if minutes < 1:
        return "Less than a minute"
    if minutes < TimeConstants.MINUTES_PER_HOUR:
        return _plural(minutes, "minute")

    hours, remaining = divmod(minutes, TimeConstants.MINUTES_PER_HOUR)
    if remaining == 0:
        return _plural(hours, "hour")
    return f"{_plural(hours, 'hour')}, {_plural(remaining, 'minute')}"
