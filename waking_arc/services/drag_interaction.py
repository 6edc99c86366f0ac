#!/usr/bin/env python3
"""
Drag Interaction State Machine for the Waking Arc Engine.

Turns pointer samples on the arc into live edits of a schedule entry:

    IDLE -> DRAGGING(mode) -> CONFIRMING -> IDLE

- begin_drag picks the edit mode from where the pointer landed: near the
  start anchor moves the start, near the end anchor moves the end, anywhere
  else moves the whole interval with its duration preserved.
- move_drag applies the mode's constraints on every sample and recomputes
  the anchor angles from the resulting times.
- end_drag commits the result to the store and shows a confirmation that is
  hidden after a short delay and cleared shortly after that.

The machine is the only writer of the DragSession. Subscribers and the
renderer receive copies.

Usage:
    machine = DragInteractionStateMachine(store, QtScheduler())
    machine.subscribe_drag_changed(view.on_session_changed)
    machine.subscribe_feedback(haptics.play)

    # From the gesture recognizer
    machine.on_gesture_changed(entry.id, day, start_angle, current_angle)
    machine.on_gesture_ended()
"""

from __future__ import annotations

import logging
from collections import OrderedDict
from collections.abc import Callable
from dataclasses import replace
from datetime import date, datetime, timedelta
from typing import TYPE_CHECKING, Any

from waking_arc.core.constants import DragMode, DragPhase, FeedbackSignal, RejectReason
from waking_arc.core.dataclasses_arc import AnchorAngles, ArcBounds, DragSession, ScheduleEntry
from waking_arc.core.dataclasses_config import EngineConfig
from waking_arc.core.time_angle import (
    angle_difference,
    angle_for_time,
    constrain_angle_to_arc,
    time_for_angle,
    window_datetimes,
)
from waking_arc.core.time_range import TimeRangeValidator
from waking_arc.services.entry_store import arc_bounds_for_day

if TYPE_CHECKING:
    from waking_arc.services.protocols import EntryStore
    from waking_arc.services.scheduling import ScheduledCall, Scheduler

logger = logging.getLogger(__name__)

DragChangedCallback = Callable[[DragSession | None], None]
DragEndedCallback = Callable[[ScheduleEntry], None]
FeedbackCallback = Callable[[FeedbackSignal], None]
UnsubscribeFunction = Callable[[], None]


# =============================================================================
# Helpers
# =============================================================================


def shift_interval_into_window(
    center: datetime,
    duration: timedelta,
    wake: datetime,
    bed: datetime,
) -> tuple[datetime, datetime]:
    """
    Centre an interval on a time and slide it back inside [wake, bed].

    The duration is preserved; only the position changes.

    Example:
        A 30 minute nap centred on 23:30 in a 07:00-19:00 window
        becomes 18:30-19:00.

    """
    start = center - duration / 2
    end = start + duration
    if start < wake:
        start = wake
        end = wake + duration
    elif end > bed:
        end = bed
        start = bed - duration
    return start, end


class PositionCache:
    """
    Last confirmed anchor angles per entry, least recently used evicted first.

    Lets a freshly released entry be grabbed again at the exact place it was
    dropped, even before the store round-trip settles.
    """

    def __init__(self, capacity: int) -> None:
        self.capacity = max(1, capacity)
        self._anchors: OrderedDict[str, AnchorAngles] = OrderedDict()

    def get(self, entry_id: str) -> AnchorAngles | None:
        anchors = self._anchors.get(entry_id)
        if anchors is not None:
            self._anchors.move_to_end(entry_id)
        return anchors

    def put(self, entry_id: str, anchors: AnchorAngles) -> None:
        self._anchors[entry_id] = anchors
        self._anchors.move_to_end(entry_id)
        while len(self._anchors) > self.capacity:
            evicted, _ = self._anchors.popitem(last=False)
            logger.debug("Evicted cached position for %s", evicted)

    def discard(self, entry_id: str) -> None:
        self._anchors.pop(entry_id, None)

    def clear(self) -> None:
        self._anchors.clear()

    def __contains__(self, entry_id: object) -> bool:
        return entry_id in self._anchors

    def __len__(self) -> int:
        return len(self._anchors)


# =============================================================================
# State machine
# =============================================================================


class DragInteractionStateMachine:
    """
    Owns the drag session, the position cache and the confirmation timers.

    All callbacks run on the caller's thread; timer callbacks run on the
    injected scheduler's thread, which is expected to be the same one.
    """

    def __init__(
        self,
        store: EntryStore,
        scheduler: Scheduler,
        config: EngineConfig | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.store = store
        self.scheduler = scheduler
        self.config = config or EngineConfig()
        self.validator = TimeRangeValidator(self.config)
        self.position_cache = PositionCache(self.config.position_cache_capacity)
        self._clock = clock

        self._phase = DragPhase.IDLE
        self._session: DragSession | None = None
        self._bounds: ArcBounds | None = None
        self._window: tuple[datetime, datetime] | None = None
        self._constrained = False
        self._generation = 0
        self._timers: list[ScheduledCall] = []
        self._rejected_gesture: str | None = None

        self._drag_changed_subscribers: list[DragChangedCallback] = []
        self._drag_ended_subscribers: list[DragEndedCallback] = []
        self._feedback_subscribers: list[FeedbackCallback] = []

    # =========================================================================
    # State
    # =========================================================================

    @property
    def phase(self) -> DragPhase:
        return self._phase

    @property
    def session(self) -> DragSession | None:
        """Copy of the current session, or None when idle."""
        return self._session.snapshot() if self._session else None

    @property
    def is_dragging(self) -> bool:
        return self._phase == DragPhase.DRAGGING

    # =========================================================================
    # Subscriptions
    # =========================================================================

    def subscribe_drag_changed(self, callback: DragChangedCallback) -> UnsubscribeFunction:
        """Called with a session copy on every change, and with None when cleared."""
        return self._subscribe(self._drag_changed_subscribers, callback)

    def subscribe_drag_ended(self, callback: DragEndedCallback) -> UnsubscribeFunction:
        """Called with the committed entry after a successful release."""
        return self._subscribe(self._drag_ended_subscribers, callback)

    def subscribe_feedback(self, callback: FeedbackCallback) -> UnsubscribeFunction:
        return self._subscribe(self._feedback_subscribers, callback)

    @staticmethod
    def _subscribe(subscribers: list[Any], callback: Callable[..., None]) -> UnsubscribeFunction:
        subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in subscribers:
                subscribers.remove(callback)

        return unsubscribe

    @staticmethod
    def _notify(subscribers: list[Any], *args: Any) -> None:
        for callback in subscribers[:]:  # Copy list to allow unsubscribe during iteration
            try:
                callback(*args)
            except Exception as e:
                logger.exception("Error in drag subscriber callback: %s", e)

    def _emit_feedback(self, signal: FeedbackSignal) -> None:
        self._notify(self._feedback_subscribers, signal)

    def _publish_session(self) -> None:
        self._notify(self._drag_changed_subscribers, self.session)

    # =========================================================================
    # Gesture lifecycle
    # =========================================================================

    def begin_drag(self, entry_id: str, day: date, pointer_angle: float) -> bool:
        """
        Start dragging an entry.

        Args:
            entry_id: Entry under the pointer
            day: Day whose waking window the entry belongs to
            pointer_angle: Angle where the gesture started

        Returns:
            True if a session was started. Rejections emit REJECTED and
            leave the state untouched.

        """
        if self._phase == DragPhase.DRAGGING:
            return self._reject(entry_id, RejectReason.DRAG_IN_PROGRESS)

        entry = self.store.get_entry(entry_id, day)
        if entry is None:
            return self._reject(entry_id, RejectReason.ENTRY_NOT_FOUND)
        if entry.is_ongoing:
            return self._reject(entry_id, RejectReason.ONGOING)
        if entry.is_fixed_marker:
            return self._reject(entry_id, RejectReason.FIXED_MARKER)
        if not self.store.is_editing_allowed(day):
            return self._reject(entry_id, RejectReason.EDITING_LOCKED)

        if self._phase == DragPhase.CONFIRMING:
            self._cancel_timers()

        bounds = arc_bounds_for_day(self.store, day, self.config)
        anchors = self.position_cache.get(entry.id) or self._anchors_for(entry.start, entry.end, bounds)
        mode = self._resolve_mode(entry, anchors, pointer_angle)

        self._generation += 1
        self._session = DragSession(
            target_id=entry.id,
            day=day,
            mode=mode,
            live_start=entry.start,
            live_end=entry.end,
            original_start=entry.start,
            original_end=entry.end,
            start_angle=anchors.start_angle,
            end_angle=anchors.end_angle,
            generation=self._generation,
        )
        self._bounds = bounds
        self._window = window_datetimes(bounds, day)
        self._constrained = False
        self._phase = DragPhase.DRAGGING

        logger.debug("Drag started on %s in %s mode", entry.id, mode)
        self._publish_session()
        return True

    def move_drag(self, pointer_angle: float) -> DragSession | None:
        """
        Apply a pointer sample to the active session.

        Returns:
            Copy of the updated session, or None when no drag is active

        """
        if self._phase != DragPhase.DRAGGING or self._session is None:
            return None

        session = self._session
        bounds = self._bounds
        wake, bed = self._window
        min_duration = timedelta(minutes=self.config.min_duration_minutes)

        on_arc = constrain_angle_to_arc(pointer_angle, bounds)
        constrained = angle_difference(on_arc, pointer_angle) > 0
        pointer_time = time_for_angle(on_arc, bounds, session.day)

        if session.is_point:
            session.live_start = pointer_time
        elif session.mode == DragMode.START_POINT:
            new_start = max(wake, min(pointer_time, session.live_end - min_duration))
            constrained = constrained or new_start != pointer_time
            session.live_start = new_start
        elif session.mode == DragMode.END_POINT:
            new_end = min(bed, max(pointer_time, session.live_start + min_duration))
            constrained = constrained or new_end != pointer_time
            session.live_end = new_end
        else:
            duration = timedelta(seconds=session.original_duration_seconds)
            new_start, new_end = shift_interval_into_window(pointer_time, duration, wake, bed)
            constrained = constrained or new_start != pointer_time - duration / 2
            session.live_start = new_start
            session.live_end = new_end

        anchors = self._anchors_for(session.live_start, session.live_end, bounds)
        session.start_angle = anchors.start_angle
        session.end_angle = anchors.end_angle

        if constrained and not self._constrained:
            self._emit_feedback(FeedbackSignal.CONSTRAINED)
        self._constrained = constrained

        self._publish_session()
        return session.snapshot()

    def end_drag(self) -> ScheduleEntry | None:
        """
        Commit the active session.

        Whole-interval moves get a final validation pass. The committed entry
        is pushed to the store, its anchors are cached and the confirmation
        window starts.

        Returns:
            The committed entry, or None when nothing was committed

        """
        if self._phase != DragPhase.DRAGGING or self._session is None:
            return None

        session = self._session
        current = self.store.get_entry(session.target_id, session.day)
        if current is None:
            logger.warning("Entry %s disappeared during drag, discarding edit", session.target_id)
            self._clear()
            self._emit_feedback(FeedbackSignal.REJECTED)
            return None

        start, end = session.live_start, session.live_end
        if session.mode == DragMode.WHOLE_INTERVAL and end is not None:
            start, end = self.validator.validate(start, end, self._bounds)
            session.live_start, session.live_end = start, end

        updated = replace(current, start=start, end=end)
        self.store.update_entry(updated, session.day)

        anchors = self._anchors_for(start, end, self._bounds)
        self.position_cache.put(updated.id, anchors)
        session.start_angle = anchors.start_angle
        session.end_angle = anchors.end_angle
        session.confirming = True
        session.confirmation_visible = True
        session.released_at = self._clock()
        self._phase = DragPhase.CONFIRMING
        self._rejected_gesture = None

        logger.debug("Drag committed on %s: %s", updated.id, session.format_live_times())
        self._emit_feedback(FeedbackSignal.CONFIRMED)
        self._notify(self._drag_ended_subscribers, updated)
        self._publish_session()

        generation = session.generation
        self._timers = [
            self.scheduler.call_later(
                self.config.confirmation_display_seconds,
                lambda: self._hide_confirmation(generation),
            )
        ]
        return updated

    def cancel_drag(self) -> bool:
        """Abandon the active drag or confirmation without touching the store."""
        if self._phase == DragPhase.IDLE:
            return False
        logger.debug("Drag cancelled in %s phase", self._phase)
        self._clear()
        return True

    def forget_entry(self, entry_id: str) -> None:
        """Drop everything known about a deleted entry."""
        self.position_cache.discard(entry_id)
        if self._session is not None and self._session.target_id == entry_id:
            self.cancel_drag()

    # =========================================================================
    # Gesture recognizer adapters
    # =========================================================================

    def on_gesture_changed(
        self,
        entry_id: str,
        day: date,
        start_angle: float,
        current_angle: float,
    ) -> DragSession | None:
        """
        Feed one sample of a continuous gesture.

        The first sample of a gesture starts the drag at start_angle. A
        gesture whose start was rejected stays rejected until it ends.
        """
        if self._rejected_gesture == entry_id:
            return None
        if self._phase != DragPhase.DRAGGING or self._session is None or self._session.target_id != entry_id:
            if not self.begin_drag(entry_id, day, start_angle):
                self._rejected_gesture = entry_id
                return None
        return self.move_drag(current_angle)

    def on_gesture_ended(self) -> ScheduleEntry | None:
        self._rejected_gesture = None
        return self.end_drag()

    # =========================================================================
    # Internals
    # =========================================================================

    def _reject(self, entry_id: str, reason: RejectReason) -> bool:
        logger.debug("Drag rejected for %s: %s", entry_id, reason)
        self._emit_feedback(FeedbackSignal.REJECTED)
        return False

    def _resolve_mode(self, entry: ScheduleEntry, anchors: AnchorAngles, pointer_angle: float) -> DragMode:
        if entry.is_point:
            return DragMode.WHOLE_INTERVAL
        proximity = self.config.mode_proximity_degrees
        if angle_difference(pointer_angle, anchors.start_angle) < proximity:
            return DragMode.START_POINT
        if anchors.end_angle is not None and angle_difference(pointer_angle, anchors.end_angle) < proximity:
            return DragMode.END_POINT
        return DragMode.WHOLE_INTERVAL

    @staticmethod
    def _anchors_for(start: datetime, end: datetime | None, bounds: ArcBounds) -> AnchorAngles:
        return AnchorAngles(
            start_angle=angle_for_time(start, bounds),
            end_angle=angle_for_time(end, bounds) if end is not None else None,
        )

    def _hide_confirmation(self, generation: int) -> None:
        session = self._session
        if session is None or session.generation != generation or self._phase != DragPhase.CONFIRMING:
            return
        session.confirmation_visible = False
        self._publish_session()
        self._timers = [
            self.scheduler.call_later(
                self.config.confirmation_fade_seconds,
                lambda: self._expire_session(generation),
            )
        ]

    def _expire_session(self, generation: int) -> None:
        if self._session is None or self._session.generation != generation:
            return
        logger.debug("Confirmation expired for %s", self._session.target_id)
        self._clear()

    def _cancel_timers(self) -> None:
        for timer in self._timers:
            timer.cancel()
        self._timers = []

    def _clear(self) -> None:
        self._cancel_timers()
        self._session = None
        self._bounds = None
        self._window = None
        self._constrained = False
        self._phase = DragPhase.IDLE
        self._publish_session()
