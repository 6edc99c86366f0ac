#!/usr/bin/env python3
"""
Service Protocol Interfaces for the Waking Arc Engine.

The engine never owns entry storage. Consumers provide an object satisfying
EntryStore; InMemoryEntryStore is the reference implementation.

Usage:
    from waking_arc.services.protocols import EntryStore

    def bounds_for(store: EntryStore, day: date) -> ArcBounds:
        ...
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from datetime import date

    from waking_arc.core.dataclasses_arc import ScheduleEntry


@runtime_checkable
class EntryStore(Protocol):
    """
    Protocol for the external store that owns schedule entries.

    Updates are fire-and-forget from the engine's point of view.
    """

    def get_entry(self, entry_id: str, day: date) -> ScheduleEntry | None:
        """
        Look up an entry on a given day.

        Returns:
            The entry, or None if it does not exist

        """
        ...

    def update_entry(self, entry: ScheduleEntry, day: date) -> None:
        """Replace the stored entry with the same id."""
        ...

    def find_wake_marker(self, day: date) -> ScheduleEntry | None:
        """Wake-time marker for the day, if one was recorded."""
        ...

    def find_bed_marker(self, day: date) -> ScheduleEntry | None:
        """Bed-time marker for the day, if one was recorded."""
        ...

    def list_naps(self, day: date) -> list[ScheduleEntry]:
        """Nap entries for the day in storage order."""
        ...

    def is_editing_allowed(self, day: date) -> bool:
        """Check if entries on the day may be edited."""
        ...
