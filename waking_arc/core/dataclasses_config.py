#!/usr/bin/env python3
"""Configuration-related dataclasses."""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from datetime import time
from typing import Any

from waking_arc.core.constants import (
    ArcDefaults,
    ConfirmationTiming,
    DragLimits,
    TickerDefaults,
    TimeFormat,
)
from waking_arc.core.exceptions import ConfigurationError, ErrorCodes, ValidationError
from waking_arc.core.validation import InputValidator


@dataclass(frozen=True)
class EngineConfig:
    """
    Tuned numbers for the arc engine.

    The thresholds are UX values found by feel; they are kept here as
    configuration rather than derived from one another.
    """

    # Arc placement
    arc_start_angle: float = ArcDefaults.START_ANGLE
    arc_end_angle: float = ArcDefaults.END_ANGLE

    # Fallback waking window
    default_wake_time: time = time(ArcDefaults.WAKE_HOUR, ArcDefaults.WAKE_MINUTE)
    default_window_minutes: int = ArcDefaults.WINDOW_MINUTES

    # Drag constraints
    mode_proximity_degrees: float = DragLimits.MODE_PROXIMITY_DEGREES
    near_bed_tolerance_minutes: int = DragLimits.NEAR_BED_TOLERANCE_MINUTES
    min_duration_minutes: int = DragLimits.MIN_DURATION_MINUTES
    max_duration_minutes: int = DragLimits.MAX_DURATION_MINUTES
    position_cache_capacity: int = DragLimits.POSITION_CACHE_CAPACITY

    # Confirmation window
    confirmation_display_seconds: float = ConfirmationTiming.DISPLAY_SECONDS
    confirmation_fade_seconds: float = ConfirmationTiming.FADE_SECONDS

    # Now-marker ticker
    ticker_interval_seconds: float = TickerDefaults.INTERVAL_SECONDS
    ongoing_check_every_ticks: int = TickerDefaults.ONGOING_CHECK_EVERY_TICKS
    now_marker_min_change_degrees: float = TickerDefaults.MIN_ANGLE_CHANGE_DEGREES

    @property
    def confirmation_total_seconds(self) -> float:
        return self.confirmation_display_seconds + self.confirmation_fade_seconds

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for config storage."""
        data = asdict(self)
        data["default_wake_time"] = self.default_wake_time.strftime(TimeFormat.HOUR_MINUTE)
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> EngineConfig:
        """
        Create from dictionary data, ignoring unknown keys.

        Raises:
            ConfigurationError: If a known key holds an invalid value

        """
        known = {f.name for f in fields(cls)}
        values: dict[str, Any] = {}
        try:
            for key, raw in data.items():
                if key not in known:
                    continue
                if key == "default_wake_time":
                    values[key] = raw if isinstance(raw, time) else InputValidator.parse_time_of_day(str(raw))
                elif key in ("arc_start_angle", "arc_end_angle"):
                    values[key] = InputValidator.validate_angle(raw, key)
                elif key in ("default_window_minutes", "min_duration_minutes", "max_duration_minutes",
                             "position_cache_capacity", "ongoing_check_every_ticks"):
                    values[key] = int(InputValidator.validate_positive_number(raw, key))
                    if values[key] < 1:
                        msg = f"{key} must be at least 1, got {raw!r}"
                        raise ValidationError(msg, ErrorCodes.OUT_OF_RANGE)
                elif key == "ticker_interval_seconds":
                    values[key] = InputValidator.validate_positive_number(raw, key)
                elif key == "near_bed_tolerance_minutes":
                    values[key] = int(InputValidator.validate_positive_number(raw, key, allow_zero=True))
                else:
                    values[key] = InputValidator.validate_positive_number(raw, key, allow_zero=True)
        except ValidationError as e:
            raise ConfigurationError(str(e.message), ErrorCodes.CONFIG_INVALID, {"key": key}) from e

        config = cls(**values)
        if config.min_duration_minutes > config.max_duration_minutes:
            msg = "min_duration_minutes cannot exceed max_duration_minutes"
            raise ConfigurationError(msg, ErrorCodes.CONFIG_INVALID)
        return config
