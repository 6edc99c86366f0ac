#!/usr/bin/env python3
"""
Input Validation Module for the Waking Arc Engine
Validates user-supplied times and numeric settings before they reach the engine.
"""

from __future__ import annotations

import math
import re
from datetime import time

from waking_arc.core.exceptions import ErrorCodes, ValidationError


class InputValidator:
    """Input validation for times of day and tuning values."""

    TIME_PATTERN = re.compile(r"^([01]?\d|2[0-4]):([0-5]?\d)$")

    @staticmethod
    def validate_time_string(time_str: str) -> tuple[int, int]:
        """
        Validate time string in HH:MM format.

        "24:00" is accepted as an alias for midnight at the end of the day.

        Args:
            time_str: Time string to validate

        Returns:
            Tuple of (hour, minute)

        Raises:
            ValidationError: If time format is invalid

        """
        if not time_str:
            msg = "Time string cannot be empty"
            raise ValidationError(msg, ErrorCodes.MISSING_REQUIRED)

        match = InputValidator.TIME_PATTERN.match(time_str.strip())
        if not match:
            msg = f"Invalid time format: {time_str}. Expected HH:MM"
            raise ValidationError(
                msg,
                ErrorCodes.INVALID_FORMAT,
            )

        hour, minute = int(match.group(1)), int(match.group(2))

        if hour == 24 and minute != 0:
            msg = f"Invalid time: {time_str}. Only 24:00 is allowed past 23:59"
            raise ValidationError(msg, ErrorCodes.OUT_OF_RANGE)

        return hour, minute

    @staticmethod
    def parse_time_of_day(time_str: str) -> time:
        """Parse an HH:MM string into a time, mapping 24:00 to 00:00."""
        hour, minute = InputValidator.validate_time_string(time_str)
        return time(hour % 24, minute)

    @staticmethod
    def validate_angle(value: float, name: str = "angle") -> float:
        """
        Validate an angle and normalise it into [0, 360).

        Raises:
            ValidationError: If the value is not a finite number

        """
        try:
            angle = float(value)
        except (TypeError, ValueError) as e:
            msg = f"Invalid {name}: {value!r}"
            raise ValidationError(msg, ErrorCodes.INVALID_INPUT) from e

        if not math.isfinite(angle):
            msg = f"Invalid {name}: {value!r} is not finite"
            raise ValidationError(msg, ErrorCodes.OUT_OF_RANGE)

        return angle % 360.0

    @staticmethod
    def validate_positive_number(value: float, name: str, allow_zero: bool = False) -> float:
        """
        Validate a positive numeric setting.

        Raises:
            ValidationError: If the value is not a number or out of range

        """
        try:
            number = float(value)
        except (TypeError, ValueError) as e:
            msg = f"Invalid {name}: {value!r}"
            raise ValidationError(msg, ErrorCodes.INVALID_INPUT) from e

        if not math.isfinite(number) or number < 0 or (number == 0 and not allow_zero):
            msg = f"{name} must be {'non-negative' if allow_zero else 'positive'}, got {value!r}"
            raise ValidationError(msg, ErrorCodes.OUT_OF_RANGE)

        return number
