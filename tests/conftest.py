#!/usr/bin/env python3
"""
Shared test fixtures for the waking arc engine.
Provides common test setup and utilities.
"""

from __future__ import annotations

import os
from datetime import time

import pytest

from tests.fixtures import TEST_DAY, FakeClock, at, make_bounds, make_marker
from waking_arc.core.constants import SleepType
from waking_arc.core.dataclasses_config import EngineConfig
from waking_arc.services.entry_store import InMemoryEntryStore
from waking_arc.services.scheduling import ManualScheduler

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")


def pytest_configure(config):
    """Register markers used across the suite."""
    config.addinivalue_line("markers", "gui: mark test as a GUI test")
    config.addinivalue_line("markers", "unit: mark test as a unit test")


# ============================================================================
# Geometry
# ============================================================================


@pytest.fixture
def day():
    """The day every store-backed test works on."""
    return TEST_DAY


@pytest.fixture
def day_bounds():
    """07:00-19:00 window on the default 110 -> 70 degree arc (sweep 320)."""
    return make_bounds(time(7, 0), time(19, 0))


@pytest.fixture
def overnight_bounds():
    """20:00-06:00 window crossing midnight."""
    return make_bounds(time(20, 0), time(6, 0))


@pytest.fixture
def midnight_bounds():
    """06:00 wake with a 00:00 bedtime."""
    return make_bounds(time(6, 0), time(0, 0))


# ============================================================================
# Engine collaborators
# ============================================================================


@pytest.fixture
def config():
    return EngineConfig()


@pytest.fixture
def clock():
    """Controllable clock starting at noon on the test day."""
    return FakeClock(at(12, 0))


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def store(clock):
    """Store with 07:00 wake and 19:00 bed markers on the test day."""
    entry_store = InMemoryEntryStore(clock=clock)
    entry_store.add_entry(make_marker("wake", at(7, 0), SleepType.WAKETIME), TEST_DAY)
    entry_store.add_entry(make_marker("bed", at(19, 0), SleepType.BEDTIME), TEST_DAY)
    return entry_store
