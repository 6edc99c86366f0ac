# Services package for the Waking Arc Engine
#
# Use explicit imports to avoid circular dependencies:
#   from waking_arc.services.drag_interaction import DragInteractionStateMachine
#   from waking_arc.services.protocols import EntryStore

__all__ = [
    "DragInteractionStateMachine",
    "EntryStore",
    "InMemoryEntryStore",
    "ManualScheduler",
    "NowMarkerTicker",
    "Scheduler",
]


def __getattr__(name: str):
    """Lazy import to avoid circular dependencies."""
    if name == "DragInteractionStateMachine":
        from waking_arc.services.drag_interaction import DragInteractionStateMachine

        return DragInteractionStateMachine
    if name == "InMemoryEntryStore":
        from waking_arc.services.entry_store import InMemoryEntryStore

        return InMemoryEntryStore
    if name == "NowMarkerTicker":
        from waking_arc.services.now_marker import NowMarkerTicker

        return NowMarkerTicker
    if name in ("ManualScheduler", "Scheduler"):
        from waking_arc.services import scheduling

        return getattr(scheduling, name)
    if name == "EntryStore":
        from waking_arc.services.protocols import EntryStore

        return EntryStore
    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
