#!/usr/bin/env python3
"""
Unit tests for TimeRangeValidator.

Covers boundary clamping, the live near-bed tolerance, minimum and maximum
duration rules, date handling across midnight and the general properties
(idempotence, containment, duration limits) over a grid of inputs.
"""

from __future__ import annotations

from datetime import time, timedelta

import pytest

from tests.fixtures import at, make_bounds
from waking_arc.core.dataclasses_arc import ArcBounds
from waking_arc.core.dataclasses_config import EngineConfig
from waking_arc.core.time_angle import is_time_within_waking_hours
from waking_arc.core.time_range import TimeRangeValidator


@pytest.fixture
def validator() -> TimeRangeValidator:
    return TimeRangeValidator(EngineConfig())


# ============================================================================
# TestClamping - Window Boundaries
# ============================================================================


class TestClamping:
    """Tests for clamping start and end into the window."""

    def test_valid_range_unchanged(self, validator: TimeRangeValidator, day_bounds: ArcBounds):
        """A range well inside the window passes through."""
        assert validator.validate(at(10, 0), at(11, 0), day_bounds) == (at(10, 0), at(11, 0))

    def test_start_before_wake_snaps_to_wake(self, validator: TimeRangeValidator, day_bounds: ArcBounds):
        """06:00 is closer to wake than to bed."""
        assert validator.validate(at(6, 0), at(8, 0), day_bounds) == (at(7, 0), at(8, 0))

    def test_end_after_bed_snaps_to_bed(self, validator: TimeRangeValidator, day_bounds: ArcBounds):
        """20:00 is closer to bed than to wake."""
        assert validator.validate(at(18, 0), at(20, 0), day_bounds) == (at(18, 0), at(19, 0))

    def test_seconds_are_dropped(self, validator: TimeRangeValidator, day_bounds: ArcBounds):
        """Results are whole minutes."""
        start, end = validator.validate(at(10, 0).replace(second=40), at(11, 0).replace(second=5), day_bounds)

        assert (start, end) == (at(10, 0), at(11, 0))

    def test_default_config_used_when_omitted(self, day_bounds: ArcBounds):
        """The validator works without an explicit config."""
        assert TimeRangeValidator().validate(at(10, 0), at(10, 5), day_bounds) == (at(10, 0), at(10, 15))


# ============================================================================
# TestLiveTolerance - Near-bed Tolerance While Dragging
# ============================================================================


class TestLiveTolerance:
    """Tests for the near-bed tolerance applied in live mode."""

    def test_live_end_slightly_past_bed_kept(self, validator: TimeRangeValidator, day_bounds: ArcBounds):
        """An end 5 minutes past bed is left alone while dragging."""
        assert validator.validate(at(18, 0), at(19, 5), day_bounds, live=True) == (at(18, 0), at(19, 5))

    def test_final_pass_clamps_same_end(self, validator: TimeRangeValidator, day_bounds: ArcBounds):
        """The same end is clamped once the drag is released."""
        assert validator.validate(at(18, 0), at(19, 5), day_bounds) == (at(18, 0), at(19, 0))

    def test_live_end_far_past_bed_clamped(self, validator: TimeRangeValidator, day_bounds: ArcBounds):
        """Beyond the tolerance the end is clamped even while dragging."""
        assert validator.validate(at(18, 0), at(19, 15), day_bounds, live=True) == (at(18, 0), at(19, 0))


# ============================================================================
# TestDurationRules - Minimum and Maximum Duration
# ============================================================================


class TestDurationRules:
    """Tests for the 15 minute minimum and 12 hour maximum."""

    def test_short_range_extended_to_minimum(self, validator: TimeRangeValidator, day_bounds: ArcBounds):
        """A 5 minute range becomes 15 minutes."""
        assert validator.validate(at(10, 0), at(10, 5), day_bounds) == (at(10, 0), at(10, 15))

    def test_end_before_start_extended_to_minimum(self, validator: TimeRangeValidator, day_bounds: ArcBounds):
        """An inverted range becomes start + 15 minutes."""
        assert validator.validate(at(10, 0), at(9, 0), day_bounds) == (at(10, 0), at(10, 15))

    def test_minimum_near_bed_pulls_start_back(self, validator: TimeRangeValidator, day_bounds: ArcBounds):
        """When start + 15 would pass bed the range ends at bed and starts 15 minutes earlier."""
        assert validator.validate(at(18, 55), at(18, 58), day_bounds) == (at(18, 45), at(19, 0))

    def test_start_at_bed_pulled_back(self, validator: TimeRangeValidator, day_bounds: ArcBounds):
        """A start clamped onto bed still yields a 15 minute range."""
        assert validator.validate(at(21, 0), at(22, 0), day_bounds) == (at(18, 45), at(19, 0))

    def test_long_range_capped_at_twelve_hours(self, validator: TimeRangeValidator):
        """A 14 hour range inside a 22 hour window is capped to 12 hours."""
        bounds = make_bounds(time(6, 0), time(4, 0))

        assert validator.validate(at(7, 0), at(21, 0), bounds) == (at(7, 0), at(19, 0))

    def test_custom_limits(self, day_bounds: ArcBounds):
        """Limits come from the config."""
        validator = TimeRangeValidator(EngineConfig(min_duration_minutes=30, max_duration_minutes=60))

        assert validator.validate(at(10, 0), at(10, 10), day_bounds) == (at(10, 0), at(10, 30))
        assert validator.validate(at(10, 0), at(13, 0), day_bounds) == (at(10, 0), at(11, 0))


# ============================================================================
# TestOvernight - Windows Crossing Midnight
# ============================================================================


class TestOvernight:
    """Tests for overnight and midnight-bedtime windows."""

    def test_range_across_midnight_ends_next_day(self, validator: TimeRangeValidator, overnight_bounds: ArcBounds):
        """The end carries +1 day exactly when the range crosses midnight."""
        start, end = validator.validate(at(23, 0), at(1, 0, days=1), overnight_bounds)

        assert start == at(23, 0)
        assert end == at(1, 0, days=1)

    def test_start_date_is_preserved(self, validator: TimeRangeValidator, overnight_bounds: ArcBounds):
        """A start after midnight keeps its own date."""
        start, end = validator.validate(at(2, 0, days=1), at(3, 0, days=1), overnight_bounds)

        assert (start, end) == (at(2, 0, days=1), at(3, 0, days=1))

    def test_midnight_bedtime_clamps_to_last_minute(self, validator: TimeRangeValidator, midnight_bounds: ArcBounds):
        """With a 00:00 bedtime the window ends at 23:59."""
        assert validator.validate(at(23, 0), at(23, 59), midnight_bounds) == (at(23, 0), at(23, 59))
        assert validator.validate(at(23, 50), at(23, 55), midnight_bounds) == (at(23, 44), at(23, 59))


# ============================================================================
# TestProperties - Invariants Over an Input Grid
# ============================================================================


def _input_grid():
    for start_hour in range(4, 23, 2):
        for duration in (-60, 0, 5, 30, 200, 800):
            start = at(start_hour, 10)
            yield start, start + timedelta(minutes=duration)


class TestProperties:
    """Invariants every validated range satisfies."""

    @pytest.mark.parametrize("bounds_name", ["day_bounds", "overnight_bounds", "midnight_bounds"])
    def test_invariants(self, validator: TimeRangeValidator, bounds_name: str, request: pytest.FixtureRequest):
        """Idempotent, within the window and within the duration limits."""
        bounds = request.getfixturevalue(bounds_name)

        for start, end in _input_grid():
            result = validator.validate(start, end, bounds)
            valid_start, valid_end = result

            assert validator.validate(valid_start, valid_end, bounds) == result
            assert timedelta(minutes=15) <= valid_end - valid_start <= timedelta(hours=12)
            assert is_time_within_waking_hours(valid_start, bounds)
            assert is_time_within_waking_hours(valid_end, bounds)
