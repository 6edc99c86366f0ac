"""
Constants for the Waking Arc Engine.

The constants are organized into domain-specific modules:
- arc: geometry, timing thresholds and render tiers
- entries: schedule entry, drag mode and feedback enums

All constants are re-exported from this __init__.py:

    from waking_arc.core.constants import DragMode, DragLimits
"""

from .arc import (
    ArcDefaults,
    ConfirmationTiming,
    DragLimits,
    HourMarkerSpacing,
    TickerDefaults,
    TimeConstants,
    TimeFormat,
    ZIndexTier,
)
from .entries import (
    DragMode,
    DragPhase,
    EntryCategory,
    EntryKind,
    FeedbackSignal,
    RejectReason,
    SleepType,
)

__all__ = [
    "ArcDefaults",
    "ConfirmationTiming",
    "DragLimits",
    "DragMode",
    "DragPhase",
    "EntryCategory",
    "EntryKind",
    "FeedbackSignal",
    "HourMarkerSpacing",
    "RejectReason",
    "SleepType",
    "TickerDefaults",
    "TimeConstants",
    "TimeFormat",
    "ZIndexTier",
]
