"""Functional core - pure scheduling logic with no I/O."""

from .timegrid import (
    pixels_to_seconds,
    snap,
    snap_velocity_aware,
    clamp_to_day,
)
from .events import (
    Category,
    DecodeError,
    Event,
    EventDraft,
    MissingSeriesReference,
    RepeatKind,
    RepeatOption,
    ScheduleError,
    ValidationError,
    Weekday,
    occurs_on,
    weekday_of,
)
from .gesture import DragGesture, GestureKind, GesturePhase, Proposal

__all__ = [
    # Time grid
    "pixels_to_seconds",
    "snap",
    "snap_velocity_aware",
    "clamp_to_day",
    # Events
    "Category",
    "Event",
    "EventDraft",
    "RepeatKind",
    "RepeatOption",
    "Weekday",
    "occurs_on",
    "weekday_of",
    # Errors
    "ScheduleError",
    "ValidationError",
    "DecodeError",
    "MissingSeriesReference",
    # Gestures
    "DragGesture",
    "GestureKind",
    "GesturePhase",
    "Proposal",
]
