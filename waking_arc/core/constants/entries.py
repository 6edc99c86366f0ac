"""
Entry-related constants for the Waking Arc Engine.

Contains enums describing schedule entries, drag interaction modes and the
feedback signals handed to the UI layer.
"""

from enum import StrEnum


class EntryKind(StrEnum):
    """Shape of a schedule entry on the arc."""

    POINT = "point"  # Feeds and reminder tasks, no end time
    INTERVAL = "interval"  # Sleep and timed tasks


class EntryCategory(StrEnum):
    """What a schedule entry represents."""

    FEED = "feed"
    SLEEP = "sleep"
    TASK = "task"


class SleepType(StrEnum):
    """Sleep entry subtype. Wake and bed markers bound the waking window."""

    NAP = "nap"
    BEDTIME = "bedtime"
    WAKETIME = "waketime"

    @property
    def is_fixed_marker(self) -> bool:
        """Wake and bed markers have fixed positions and are never dragged."""
        return self in (SleepType.BEDTIME, SleepType.WAKETIME)


class DragMode(StrEnum):
    """Which part of an entry a gesture edits."""

    START_POINT = "start_point"
    END_POINT = "end_point"
    WHOLE_INTERVAL = "whole_interval"


class DragPhase(StrEnum):
    """States of the drag interaction state machine."""

    IDLE = "idle"
    DRAGGING = "dragging"
    CONFIRMING = "confirming"


class FeedbackSignal(StrEnum):
    """Abstract feedback the UI layer may map to haptics."""

    CONSTRAINED = "constrained"
    CONFIRMED = "confirmed"
    REJECTED = "rejected"


class RejectReason(StrEnum):
    """Why a drag start was refused (used for logging only)."""

    ENTRY_NOT_FOUND = "entry_not_found"
    ONGOING = "ongoing"
    FIXED_MARKER = "fixed_marker"
    EDITING_LOCKED = "editing_locked"
    DRAG_IN_PROGRESS = "drag_in_progress"
