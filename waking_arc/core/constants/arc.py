"""
Arc geometry and timing constants for the Waking Arc Engine.

These are the tuned numbers the engine relies on. Runtime values live in
EngineConfig; the classes here provide the defaults.
"""

from enum import StrEnum


class TimeConstants:
    """Time-related constants."""

    SECONDS_PER_MINUTE = 60
    SECONDS_PER_HOUR = 3600
    MINUTES_PER_HOUR = 60
    HOURS_PER_DAY = 24
    MINUTES_PER_DAY = 1440
    LAST_MINUTE_OF_DAY = 1439  # 23:59, stands in for a midnight bedtime


class TimeFormat(StrEnum):
    """Time format strings."""

    HOUR_MINUTE = "%H:%M"
    DATE_ONLY = "%Y-%m-%d"


class ArcDefaults:
    """Default arc placement and fallback waking window."""

    START_ANGLE = 110.0
    END_ANGLE = 70.0
    FULL_CIRCLE = 360.0
    WAKE_HOUR = 7
    WAKE_MINUTE = 0
    WINDOW_MINUTES = 14 * 60  # Fallback when wake/bed components are missing
    MIN_WINDOW_MINUTES = 1  # Zero-length windows are widened to this


class DragLimits:
    """Thresholds applied while dragging and validating entries."""

    MODE_PROXIMITY_DEGREES = 10.0
    NEAR_BED_TOLERANCE_MINUTES = 10
    MIN_DURATION_MINUTES = 15
    MAX_DURATION_MINUTES = 12 * 60
    POSITION_CACHE_CAPACITY = 256


class ConfirmationTiming:
    """Post-release confirmation window, in seconds."""

    DISPLAY_SECONDS = 1.0
    FADE_SECONDS = 0.3


class TickerDefaults:
    """Current-time marker refresh settings."""

    INTERVAL_SECONDS = 60.0
    ONGOING_CHECK_EVERY_TICKS = 5
    MIN_ANGLE_CHANGE_DEGREES = 0.5


class ZIndexTier:
    """Stacking tiers used by the render order resolver."""

    BASE = 10.0
    FIXED_MARKER = 5.0
    TASK = 40.0
    FEED = 50.0
    SLEEP = 30.0
    SLEEP_ONGOING = 70.0
    SLEEP_ONGOING_PAUSED = 65.0
    DRAGGED = 100.0
    MAX_DURATION_PENALTY = 20.0
    PENALTY_FULL_DURATION_SECONDS = 7200.0  # 2 hours


class HourMarkerSpacing:
    """Hour tick spacing chosen by waking-window length (in hours)."""

    HOURLY_UP_TO = 8
    TWO_HOURLY_UP_TO = 14
    THREE_HOURLY_UP_TO = 20
