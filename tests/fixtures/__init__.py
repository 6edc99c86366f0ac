"""Test fixtures for the waking arc engine."""

from tests.fixtures.arc_fixtures import (
    TEST_DAY,
    FakeClock,
    at,
    make_bounds,
    make_feed,
    make_marker,
    make_nap,
    make_task,
)

__all__ = [
    "TEST_DAY",
    "FakeClock",
    "at",
    "make_bounds",
    "make_feed",
    "make_marker",
    "make_nap",
    "make_task",
]
