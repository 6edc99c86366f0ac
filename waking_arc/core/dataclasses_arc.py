#!/usr/bin/env python3
"""Arc, schedule entry and drag session dataclasses."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date, datetime, time
from typing import Any

from waking_arc.core.constants import (
    ArcDefaults,
    DragMode,
    EntryCategory,
    EntryKind,
    SleepType,
    TimeFormat,
)


@dataclass(frozen=True)
class ArcBounds:
    """
    Placement of the waking window on the circle.

    Angles are degrees measured the same way as the pointer angle the UI
    reports. A bed time earlier than the wake time means the window crosses
    midnight. Missing times fall back to the default 14-hour window.
    """

    start_angle: float = ArcDefaults.START_ANGLE
    end_angle: float = ArcDefaults.END_ANGLE
    wake_time: time | None = None
    bed_time: time | None = None

    @property
    def sweep(self) -> float:
        """Angular sweep of the arc in (0, 360]."""
        sweep = (self.end_angle - self.start_angle + 360.0) % 360.0
        if sweep <= 0:
            return ArcDefaults.FULL_CIRCLE
        return sweep

    def with_times(self, wake_time: time | None, bed_time: time | None) -> ArcBounds:
        """Return a copy bound to a different waking window."""
        return replace(self, wake_time=wake_time, bed_time=bed_time)


@dataclass(frozen=True)
class PauseInterval:
    """A completed pause of an ongoing nap."""

    paused_at: datetime
    resumed_at: datetime

    @property
    def duration_seconds(self) -> float:
        """Length of the pause in seconds."""
        return max(0.0, (self.resumed_at - self.paused_at).total_seconds())


@dataclass(frozen=True)
class ScheduleEntry:
    """
    A feed, sleep interval or task placed on the arc.

    Point entries (feeds, reminder tasks) have no end. Ongoing entries run
    until "now" (or their pause instant) and cannot be dragged.
    """

    id: str
    category: EntryCategory
    start: datetime
    end: datetime | None = None
    sleep_type: SleepType | None = None
    is_ongoing: bool = False
    is_paused: bool = False
    paused_at: datetime | None = None
    pause_intervals: tuple[PauseInterval, ...] = ()
    title: str = ""

    @property
    def kind(self) -> EntryKind:
        """POINT when the entry has no end, INTERVAL otherwise."""
        return EntryKind.POINT if self.end is None else EntryKind.INTERVAL

    @property
    def is_point(self) -> bool:
        return self.end is None

    @property
    def is_nap(self) -> bool:
        return self.category == EntryCategory.SLEEP and self.sleep_type == SleepType.NAP

    @property
    def is_fixed_marker(self) -> bool:
        """Wake and bed markers are rendered at fixed positions."""
        return self.sleep_type is not None and self.sleep_type.is_fixed_marker

    @property
    def duration_seconds(self) -> float:
        """Stored duration in seconds, 0 for point entries."""
        if self.end is None:
            return 0.0
        return (self.end - self.start).total_seconds()

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for storage."""
        return {
            "id": self.id,
            "category": self.category.value,
            "start": self.start.isoformat(),
            "end": self.end.isoformat() if self.end else None,
            "sleep_type": self.sleep_type.value if self.sleep_type else None,
            "is_ongoing": self.is_ongoing,
            "is_paused": self.is_paused,
            "paused_at": self.paused_at.isoformat() if self.paused_at else None,
            "pause_intervals": [[p.paused_at.isoformat(), p.resumed_at.isoformat()] for p in self.pause_intervals],
            "title": self.title,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ScheduleEntry:
        """Create from dictionary data."""
        sleep_type = None
        if data.get("sleep_type"):
            try:
                sleep_type = SleepType(data["sleep_type"])
            except ValueError:
                pass  # Unknown subtypes are treated as plain sleep

        return cls(
            id=str(data["id"]),
            category=EntryCategory(data.get("category", EntryCategory.SLEEP)),
            start=_parse_datetime(data["start"]),
            end=_parse_datetime(data["end"]) if data.get("end") else None,
            sleep_type=sleep_type,
            is_ongoing=bool(data.get("is_ongoing", False)),
            is_paused=bool(data.get("is_paused", False)),
            paused_at=_parse_datetime(data["paused_at"]) if data.get("paused_at") else None,
            pause_intervals=tuple(
                PauseInterval(_parse_datetime(p[0]), _parse_datetime(p[1])) for p in data.get("pause_intervals", [])
            ),
            title=data.get("title", ""),
        )


@dataclass(frozen=True)
class AnchorAngles:
    """Last confirmed angular position of an entry."""

    start_angle: float
    end_angle: float | None = None


@dataclass
class DragSession:
    """
    State of a single in-progress gesture.

    Created on gesture start, mutated on every pointer move, frozen on
    release and cleared once the confirmation window has passed. Only the
    drag interaction state machine mutates it; everyone else receives copies.
    """

    target_id: str
    day: date
    mode: DragMode
    live_start: datetime
    live_end: datetime | None
    original_start: datetime
    original_end: datetime | None
    start_angle: float
    end_angle: float | None = None
    confirming: bool = False
    confirmation_visible: bool = False
    released_at: datetime | None = None
    generation: int = 0

    @property
    def original_duration_seconds(self) -> float:
        """Duration captured at gesture start (preserved by whole-interval drags)."""
        if self.original_end is None:
            return 0.0
        return (self.original_end - self.original_start).total_seconds()

    @property
    def live_duration_seconds(self) -> float:
        if self.live_end is None:
            return 0.0
        return (self.live_end - self.live_start).total_seconds()

    @property
    def is_point(self) -> bool:
        return self.original_end is None

    def snapshot(self) -> DragSession:
        """Copy handed to the renderer and subscribers."""
        return replace(self)

    def format_live_times(self) -> str:
        """Label text for the live/confirmation time display."""
        start = self.live_start.strftime(TimeFormat.HOUR_MINUTE)
        if self.live_end is None:
            return start
        return f"{start} - {self.live_end.strftime(TimeFormat.HOUR_MINUTE)}"


@dataclass(frozen=True)
class RenderDescriptor:
    """Per-frame rendering facts for one visible entry."""

    entry_id: str
    category: EntryCategory
    is_dragged: bool = False
    duration: float = 0.0
    is_ongoing: bool = False
    is_paused: bool = False
    is_fixed: bool = False
    live_start: datetime | None = None
    live_end: datetime | None = None
    z_index: float = field(default=0.0, compare=False)


def _parse_datetime(value: str | datetime) -> datetime:
    """Parse timestamp to datetime object."""
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value))
