#!/usr/bin/env python3
"""
Comprehensive unit tests for DragInteractionStateMachine.

Window used throughout: 07:00-19:00 on the default 110 -> 70 degree arc, so
every 20 degrees past 110 is exactly 45 minutes past 07:00 (130 -> 07:45,
190 -> 10:00, 270 -> 13:00, 50 -> 18:15, 70 -> 19:00).
"""

from __future__ import annotations

import logging
from dataclasses import replace

import pytest

from tests.fixtures import TEST_DAY, at, make_feed, make_nap
from waking_arc.core.constants import DragMode, DragPhase, FeedbackSignal
from waking_arc.core.dataclasses_arc import AnchorAngles
from waking_arc.services.drag_interaction import (
    DragInteractionStateMachine,
    PositionCache,
    shift_interval_into_window,
)


@pytest.fixture
def nap(store):
    """Nap 10:00-11:00, anchors at 190 and ~216.67 degrees."""
    return store.add_entry(make_nap("nap-1", at(10, 0), at(11, 0)), TEST_DAY)


@pytest.fixture
def machine(store, scheduler, config, clock):
    return DragInteractionStateMachine(store, scheduler, config, clock=clock)


@pytest.fixture
def feedback(machine):
    """Collected feedback signals."""
    signals = []
    machine.subscribe_feedback(signals.append)
    return signals


# ============================================================================
# TestHelpers - Interval Shifting and Position Cache
# ============================================================================


class TestShiftIntervalIntoWindow:
    """Tests for shift_interval_into_window."""

    def test_centred_inside_window(self):
        """An interval that fits stays centred on the pointer."""
        start, end = shift_interval_into_window(at(12, 0), at(13, 0) - at(12, 0), at(7, 0), at(19, 0))

        assert (start, end) == (at(11, 30), at(12, 30))

    def test_slides_back_from_bed(self):
        """A 30 minute nap centred on 23:30 lands at 18:30-19:00."""
        start, end = shift_interval_into_window(at(23, 30), at(0, 30) - at(0, 0), at(7, 0), at(19, 0))

        assert (start, end) == (at(18, 30), at(19, 0))

    def test_slides_forward_from_wake(self):
        """An interval starting before wake is pushed to wake."""
        start, end = shift_interval_into_window(at(7, 0), at(2, 0) - at(0, 0), at(7, 0), at(19, 0))

        assert (start, end) == (at(7, 0), at(9, 0))


class TestPositionCache:
    """Tests for PositionCache."""

    def test_least_recently_used_evicted(self):
        """Capacity overflow drops the oldest untouched entry."""
        cache = PositionCache(capacity=2)
        cache.put("a", AnchorAngles(110.0))
        cache.put("b", AnchorAngles(120.0))
        cache.get("a")
        cache.put("c", AnchorAngles(130.0))

        assert "a" in cache
        assert "b" not in cache
        assert len(cache) == 2

    def test_discard_and_clear(self):
        cache = PositionCache(capacity=4)
        cache.put("a", AnchorAngles(110.0))
        cache.put("b", AnchorAngles(120.0))

        cache.discard("a")
        cache.discard("missing")
        assert cache.get("a") is None

        cache.clear()
        assert len(cache) == 0


# ============================================================================
# TestBeginDrag - Mode Resolution and Rejections
# ============================================================================


class TestBeginDrag:
    """Tests for begin_drag."""

    @pytest.mark.parametrize(
        ("pointer", "expected"),
        [
            (190.0, DragMode.START_POINT),
            (216.0, DragMode.END_POINT),
            (203.0, DragMode.WHOLE_INTERVAL),
            (185.0, DragMode.START_POINT),
        ],
    )
    def test_mode_from_pointer_position(self, machine, nap, pointer: float, expected: DragMode):
        """Near an anchor edits that anchor, anywhere else moves the whole nap."""
        assert machine.begin_drag(nap.id, TEST_DAY, pointer)

        assert machine.phase == DragPhase.DRAGGING
        assert machine.session.mode == expected

    def test_point_entry_always_whole(self, machine, store):
        """Feeds have a single anchor and always move as a whole."""
        feed = store.add_entry(make_feed("feed-1", at(9, 0)), TEST_DAY)

        assert machine.begin_drag(feed.id, TEST_DAY, 150.0)
        assert machine.session.mode == DragMode.WHOLE_INTERVAL
        assert machine.session.end_angle is None

    def test_session_snapshot_fields(self, machine, nap):
        """The session starts from the stored times."""
        machine.begin_drag(nap.id, TEST_DAY, 203.0)
        session = machine.session

        assert session.target_id == nap.id
        assert (session.live_start, session.live_end) == (at(10, 0), at(11, 0))
        assert (session.original_start, session.original_end) == (at(10, 0), at(11, 0))
        assert session.start_angle == pytest.approx(190.0)
        assert session.end_angle == pytest.approx(216.6667, abs=1e-3)
        assert not session.confirming

    def test_missing_entry_rejected(self, machine, feedback):
        assert not machine.begin_drag("missing", TEST_DAY, 190.0)

        assert machine.phase == DragPhase.IDLE
        assert feedback == [FeedbackSignal.REJECTED]

    def test_ongoing_nap_rejected(self, machine, store, feedback):
        """Naps still running cannot be dragged."""
        store.add_entry(make_nap("live", at(11, 30), at(12, 30), ongoing=True), TEST_DAY)

        assert not machine.begin_drag("live", TEST_DAY, 240.0)
        assert machine.session is None
        assert feedback == [FeedbackSignal.REJECTED]

    def test_fixed_marker_rejected(self, machine, feedback):
        """Wake and bed markers are not draggable."""
        assert not machine.begin_drag("wake", TEST_DAY, 110.0)
        assert not machine.begin_drag("bed", TEST_DAY, 70.0)
        assert feedback == [FeedbackSignal.REJECTED, FeedbackSignal.REJECTED]

    def test_locked_day_rejected(self, machine, store, nap, feedback):
        store.lock_day(TEST_DAY)

        assert not machine.begin_drag(nap.id, TEST_DAY, 190.0)
        assert feedback == [FeedbackSignal.REJECTED]

    def test_second_drag_rejected_without_state_change(self, machine, store, nap, feedback):
        """Only one drag at a time; the active one is untouched."""
        store.add_entry(make_nap("nap-2", at(14, 0), at(15, 0)), TEST_DAY)
        machine.begin_drag(nap.id, TEST_DAY, 203.0)

        assert not machine.begin_drag("nap-2", TEST_DAY, 300.0)
        assert machine.session.target_id == nap.id
        assert feedback == [FeedbackSignal.REJECTED]


# ============================================================================
# TestMoveDrag - Constraints per Mode
# ============================================================================


class TestMoveDrag:
    """Tests for move_drag."""

    def test_idle_move_is_noop(self, machine):
        assert machine.move_drag(200.0) is None

    def test_start_point_follows_pointer(self, machine, store, nap):
        """Moving the start earlier leaves the end alone."""
        machine.begin_drag(nap.id, TEST_DAY, 190.0)

        session = machine.move_drag(130.0)

        assert (session.live_start, session.live_end) == (at(7, 45), at(11, 0))
        assert session.start_angle == pytest.approx(130.0)
        assert store.get_entry(nap.id, TEST_DAY).start == at(10, 0)

    def test_start_point_keeps_minimum_duration(self, machine, nap, feedback):
        """The start cannot come within 15 minutes of the end."""
        machine.begin_drag(nap.id, TEST_DAY, 190.0)

        session = machine.move_drag(250.0)

        assert session.live_start == at(10, 45)
        assert feedback == [FeedbackSignal.CONSTRAINED]

    def test_start_point_snaps_to_wake_from_gap(self, machine, nap):
        """A pointer in the gap nearer the arc start pins the start at wake."""
        machine.begin_drag(nap.id, TEST_DAY, 190.0)

        assert machine.move_drag(100.0).live_start == at(7, 0)

    def test_end_point_follows_pointer(self, machine, nap):
        machine.begin_drag(nap.id, TEST_DAY, 216.0)

        session = machine.move_drag(50.0)

        assert (session.live_start, session.live_end) == (at(10, 0), at(18, 15))

    def test_end_point_keeps_minimum_duration(self, machine, nap):
        """The end cannot come within 15 minutes of the start."""
        machine.begin_drag(nap.id, TEST_DAY, 216.0)

        assert machine.move_drag(150.0).live_end == at(10, 15)

    def test_end_point_snaps_to_bed_from_gap(self, machine, nap, feedback):
        """A pointer in the gap nearer the arc end pins the end at bed."""
        machine.begin_drag(nap.id, TEST_DAY, 216.0)

        session = machine.move_drag(80.0)

        assert session.live_end == at(19, 0)
        assert session.end_angle == pytest.approx(70.0)
        assert feedback == [FeedbackSignal.CONSTRAINED]

    def test_whole_interval_preserves_duration(self, machine, nap, feedback):
        """The nap is centred on the pointer with its duration intact."""
        machine.begin_drag(nap.id, TEST_DAY, 203.0)

        session = machine.move_drag(270.0)

        assert (session.live_start, session.live_end) == (at(12, 30), at(13, 30))
        assert session.live_duration_seconds == 3600
        assert feedback == []

    def test_whole_interval_slides_back_from_bed(self, machine, nap, feedback):
        """Centred on bed time the nap is pushed back inside the window."""
        machine.begin_drag(nap.id, TEST_DAY, 203.0)

        session = machine.move_drag(70.0)

        assert (session.live_start, session.live_end) == (at(18, 0), at(19, 0))
        assert feedback == [FeedbackSignal.CONSTRAINED]

    def test_constrained_emitted_once_per_transition(self, machine, nap, feedback):
        """Staying against a limit does not repeat the signal."""
        machine.begin_drag(nap.id, TEST_DAY, 190.0)

        machine.move_drag(250.0)
        machine.move_drag(270.0)
        assert feedback == [FeedbackSignal.CONSTRAINED]

        machine.move_drag(130.0)
        machine.move_drag(250.0)
        assert feedback == [FeedbackSignal.CONSTRAINED, FeedbackSignal.CONSTRAINED]

    def test_point_entry_moves_start_only(self, machine, store):
        feed = store.add_entry(make_feed("feed-1", at(9, 0)), TEST_DAY)
        machine.begin_drag(feed.id, TEST_DAY, 150.0)

        session = machine.move_drag(170.0)

        assert (session.live_start, session.live_end) == (at(9, 15), None)


# ============================================================================
# TestEndDrag - Commit and Confirmation Window
# ============================================================================


class TestEndDrag:
    """Tests for end_drag and the confirmation timeline."""

    def test_idle_end_is_noop(self, machine):
        assert machine.end_drag() is None

    def test_commit_updates_store(self, machine, store, nap, feedback):
        machine.begin_drag(nap.id, TEST_DAY, 203.0)
        machine.move_drag(270.0)

        committed = machine.end_drag()

        assert (committed.start, committed.end) == (at(12, 30), at(13, 30))
        assert store.get_entry(nap.id, TEST_DAY) == committed
        assert feedback == [FeedbackSignal.CONFIRMED]

    def test_commit_enters_confirming(self, machine, nap, clock):
        machine.begin_drag(nap.id, TEST_DAY, 190.0)
        machine.move_drag(130.0)
        machine.end_drag()
        session = machine.session

        assert machine.phase == DragPhase.CONFIRMING
        assert session.confirming and session.confirmation_visible
        assert session.released_at == clock()
        assert session.format_live_times() == "07:45 - 11:00"

    def test_drag_ended_subscribers_get_entry(self, machine, nap):
        ended = []
        machine.subscribe_drag_ended(ended.append)
        machine.begin_drag(nap.id, TEST_DAY, 216.0)
        machine.move_drag(50.0)

        machine.end_drag()

        assert [entry.end for entry in ended] == [at(18, 15)]

    def test_confirmation_timeline(self, machine, scheduler, nap):
        """Visible for 1.0 s, then fading, then cleared at 1.3 s."""
        machine.begin_drag(nap.id, TEST_DAY, 203.0)
        machine.move_drag(270.0)
        machine.end_drag()

        scheduler.advance(0.99)
        assert machine.session.confirmation_visible

        scheduler.advance(0.02)
        assert machine.phase == DragPhase.CONFIRMING
        assert not machine.session.confirmation_visible

        scheduler.advance(0.3)
        assert machine.phase == DragPhase.IDLE
        assert machine.session is None
        assert scheduler.pending_count == 0

    def test_begin_during_confirmation_cancels_timers(self, machine, scheduler, nap):
        """A fresh grab keeps the new session alive past the old expiry."""
        machine.begin_drag(nap.id, TEST_DAY, 203.0)
        machine.move_drag(270.0)
        machine.end_drag()

        assert machine.begin_drag(nap.id, TEST_DAY, 270.0)
        assert scheduler.pending_count == 0

        scheduler.advance(5.0)
        assert machine.phase == DragPhase.DRAGGING
        assert machine.session.live_start == at(12, 30)

    def test_cached_anchors_win_over_store(self, machine, store, nap):
        """The last confirmed position is used until the entry is forgotten."""
        machine.begin_drag(nap.id, TEST_DAY, 203.0)
        machine.move_drag(270.0)
        machine.end_drag()
        machine.cancel_drag()

        # Store falls behind and still reports the old times
        store.update_entry(nap, TEST_DAY)

        machine.begin_drag(nap.id, TEST_DAY, 257.0)
        assert machine.session.mode == DragMode.START_POINT
        machine.cancel_drag()

        machine.forget_entry(nap.id)
        machine.begin_drag(nap.id, TEST_DAY, 257.0)
        assert machine.session.mode == DragMode.WHOLE_INTERVAL

    def test_whole_interval_commit_is_validated(self, machine, store):
        """Whole moves get a final pass that enforces the minimum duration."""
        short_nap = store.add_entry(make_nap("short", at(8, 0), at(8, 10)), TEST_DAY)
        machine.begin_drag(short_nap.id, TEST_DAY, 160.0)
        assert machine.move_drag(170.0).live_start == at(9, 10)

        committed = machine.end_drag()

        assert (committed.start, committed.end) == (at(9, 10), at(9, 25))
        assert machine.session.format_live_times() == "09:10 - 09:25"

    def test_entry_deleted_mid_drag(self, machine, store, nap, feedback, caplog):
        """A vanished entry discards the edit instead of resurrecting it."""
        sessions = []
        machine.subscribe_drag_changed(sessions.append)
        machine.begin_drag(nap.id, TEST_DAY, 203.0)
        store.delete_entry(nap.id, TEST_DAY)

        with caplog.at_level(logging.WARNING):
            assert machine.end_drag() is None

        assert machine.phase == DragPhase.IDLE
        assert sessions[-1] is None
        assert feedback == [FeedbackSignal.REJECTED]
        assert "disappeared" in caplog.text

    def test_feed_commit_keeps_point(self, machine, store):
        feed = store.add_entry(make_feed("feed-1", at(9, 0)), TEST_DAY)
        machine.begin_drag(feed.id, TEST_DAY, 150.0)
        machine.move_drag(130.0)

        committed = machine.end_drag()

        assert committed.start == at(7, 45)
        assert committed.end is None


# ============================================================================
# TestCancelAndForget
# ============================================================================


class TestCancelAndForget:
    """Tests for cancel_drag and forget_entry."""

    def test_cancel_leaves_store_untouched(self, machine, store, nap):
        machine.begin_drag(nap.id, TEST_DAY, 203.0)
        machine.move_drag(270.0)

        assert machine.cancel_drag()
        assert machine.phase == DragPhase.IDLE
        assert store.get_entry(nap.id, TEST_DAY) == nap

    def test_cancel_when_idle(self, machine):
        assert not machine.cancel_drag()

    def test_forget_active_entry_cancels(self, machine, nap):
        machine.begin_drag(nap.id, TEST_DAY, 203.0)

        machine.forget_entry(nap.id)

        assert machine.phase == DragPhase.IDLE
        assert nap.id not in machine.position_cache


# ============================================================================
# TestSubscriptions
# ============================================================================


class TestSubscriptions:
    """Tests for subscriber management."""

    def test_drag_changed_receives_copies(self, machine, nap):
        sessions = []
        machine.subscribe_drag_changed(sessions.append)
        machine.begin_drag(nap.id, TEST_DAY, 203.0)

        sessions[0].live_start = at(8, 0)

        assert machine.session.live_start == at(10, 0)

    def test_unsubscribe_stops_notifications(self, machine, nap):
        sessions = []
        unsubscribe = machine.subscribe_drag_changed(sessions.append)
        machine.begin_drag(nap.id, TEST_DAY, 203.0)

        unsubscribe()
        unsubscribe()
        machine.move_drag(270.0)

        assert len(sessions) == 1

    def test_failing_subscriber_does_not_break_others(self, machine, nap, caplog):
        def broken(_session):
            msg = "boom"
            raise RuntimeError(msg)

        sessions = []
        machine.subscribe_drag_changed(broken)
        machine.subscribe_drag_changed(sessions.append)

        with caplog.at_level(logging.ERROR):
            assert machine.begin_drag(nap.id, TEST_DAY, 203.0)

        assert len(sessions) == 1
        assert "boom" in caplog.text


# ============================================================================
# TestGestureAdapters
# ============================================================================


class TestGestureAdapters:
    """Tests for on_gesture_changed and on_gesture_ended."""

    def test_first_sample_begins_and_moves(self, machine, store, nap):
        session = machine.on_gesture_changed(nap.id, TEST_DAY, 203.0, 270.0)

        assert session.mode == DragMode.WHOLE_INTERVAL
        assert session.live_start == at(12, 30)

        machine.on_gesture_changed(nap.id, TEST_DAY, 203.0, 250.0)
        committed = machine.on_gesture_ended()

        assert committed.start == at(11, 45)
        assert store.get_entry(nap.id, TEST_DAY).end == at(12, 45)

    def test_rejected_gesture_stays_rejected(self, machine, feedback):
        """A refused gesture does not retry on every sample."""
        assert machine.on_gesture_changed("wake", TEST_DAY, 110.0, 130.0) is None
        assert machine.on_gesture_changed("wake", TEST_DAY, 110.0, 150.0) is None
        assert feedback == [FeedbackSignal.REJECTED]

        assert machine.on_gesture_ended() is None
        machine.on_gesture_changed("wake", TEST_DAY, 110.0, 130.0)
        assert feedback == [FeedbackSignal.REJECTED, FeedbackSignal.REJECTED]


def test_updated_entry_keeps_other_fields(machine, store):
    """Only start and end change on commit."""
    nap = store.add_entry(replace(make_nap("nap-9", at(14, 0), at(15, 0)), title="Afternoon"), TEST_DAY)
    machine.begin_drag(nap.id, TEST_DAY, 330.0)
    machine.move_drag(310.0)

    committed = machine.end_drag()

    assert committed.title == "Afternoon"
    assert committed.sleep_type == nap.sleep_type
