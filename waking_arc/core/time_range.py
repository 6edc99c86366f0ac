#!/usr/bin/env python3
"""
Time range validation for interval entries.

Normalises a proposed (start, end) pair so it lies inside the waking window
and respects the configured minimum and maximum durations. The validator is
total: it never raises, it only corrects.
"""

from __future__ import annotations

import logging
from datetime import datetime, time, timedelta

from waking_arc.core.constants import TimeConstants
from waking_arc.core.dataclasses_arc import ArcBounds
from waking_arc.core.dataclasses_config import EngineConfig
from waking_arc.core.time_angle import WakingWindow, minutes_of_day, waking_window

logger = logging.getLogger(__name__)


class TimeRangeValidator:
    """
    Clamp interval times into the waking window.

    Work happens in "minutes since wake" so overnight and midnight-bedtime
    windows need no special casing once the window is known.
    """

    def __init__(self, config: EngineConfig | None = None) -> None:
        self.config = config or EngineConfig()

    def validate(
        self,
        start: datetime,
        end: datetime,
        bounds: ArcBounds,
        *,
        live: bool = False,
    ) -> tuple[datetime, datetime]:
        """
        Validate and correct a start/end pair.

        Args:
            start: Proposed start; its date is kept on the result
            end: Proposed end; only its time of day is used
            bounds: Arc bounds describing the waking window
            live: True while a drag is in progress. An end just past bed time
                (within the near-bed tolerance) is then left alone so the
                handle does not jitter against the boundary.

        Returns:
            Tuple of (start, end). The end is derived from the start and so
            lands on the following day exactly when it crosses midnight.

        """
        window = waking_window(bounds)
        total = window.total_minutes

        start_offset = window.offset_of(self._clamp_minutes(minutes_of_day(start), window))

        end_minutes = minutes_of_day(end)
        end_offset = window.offset_of(end_minutes)
        past_bed = end_offset - total
        if not (live and 0 < past_bed < self.config.near_bed_tolerance_minutes):
            end_offset = window.offset_of(self._clamp_minutes(end_minutes, window))

        min_duration = self.config.min_duration_minutes
        if end_offset - start_offset < min_duration:
            end_offset = start_offset + min_duration
            if end_offset > total:
                end_offset = total
                if total >= min_duration:
                    start_offset = min(start_offset, total - min_duration)

        max_duration = self.config.max_duration_minutes
        if end_offset - start_offset > max_duration:
            end_offset = start_offset + max_duration

        start_minute = (window.wake_minutes + start_offset) % TimeConstants.MINUTES_PER_DAY
        validated_start = datetime.combine(
            start.date(),
            time(start_minute // TimeConstants.MINUTES_PER_HOUR, start_minute % TimeConstants.MINUTES_PER_HOUR),
        )
        validated_end = validated_start + timedelta(minutes=end_offset - start_offset)

        if validated_start != start.replace(second=0, microsecond=0) or validated_end != end.replace(
            second=0, microsecond=0
        ):
            logger.debug(
                "Corrected range %s-%s to %s-%s",
                start.strftime("%H:%M"),
                end.strftime("%H:%M"),
                validated_start.strftime("%H:%M"),
                validated_end.strftime("%H:%M"),
            )
        return validated_start, validated_end

    @staticmethod
    def _clamp_minutes(minutes: int, window: WakingWindow) -> int:
        """Snap a minute of day onto the numerically closer window boundary."""
        if window.contains(minutes):
            return minutes
        wake = window.wake_minutes
        bed = window.effective_bed_minutes
        return wake if abs(minutes - wake) < abs(minutes - bed) else bed
