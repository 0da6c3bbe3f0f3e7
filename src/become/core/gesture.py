"""Drag/resize gesture state machine - in-memory only, no I/O."""

import math
from dataclasses import dataclass
from enum import Enum

from .events import Event
from .timegrid import (
    pixels_to_seconds,
    snap_move,
    snap_tile,
    snap_tile_top,
    velocity_increment,
)


class GestureKind(Enum):
    MOVE = "move"
    RESIZE_TOP = "resize_top"
    RESIZE_BOTTOM = "resize_bottom"


class GesturePhase(Enum):
    IDLE = "idle"
    DRAGGING = "dragging"
    COMMITTED = "committed"
    CANCELLED = "cancelled"  # tap, long-press or abandoned drag


@dataclass
class Proposal:
    """Tentative tile values while dragging; final values once finished."""

    start_time: float
    duration: float
    increment: float

    @property
    def end_time(self) -> float:
        return self.start_time + self.duration


class DragGesture:
    """
    One move or resize interaction on an event tile.

    idle -> dragging -> committed (or cancelled). Updates never touch
    storage; the finished proposal is handed to the mutation engine.
    """

    def __init__(
        self,
        event: Event,
        kind: GestureKind,
        hour_height: float = 80.0,
        snap_increment: float = 900,
        slow_increment: float = 60,
        velocity_threshold: float = 300.0,
        tap_threshold: float = 10.0,
    ):
        self.event = event
        self.kind = kind
        self.hour_height = hour_height
        self.snap_increment = snap_increment
        self.slow_increment = slow_increment
        self.velocity_threshold = velocity_threshold
        self.tap_threshold = tap_threshold
        self.phase = GesturePhase.IDLE
        self.translation = 0.0
        self.horizontal = 0.0
        self.velocity = 0.0

    def begin(self) -> None:
        if self.phase is not GesturePhase.IDLE:
            raise RuntimeError(f"Cannot begin a gesture that is {self.phase.value}")
        self.phase = GesturePhase.DRAGGING

    def update(self, translation: float, velocity: float = 0.0, horizontal: float = 0.0) -> Proposal:
        """Record the latest drag translation (pixels) and return tentative values."""
        if self.phase is GesturePhase.IDLE:
            self.begin()
        elif self.phase is not GesturePhase.DRAGGING:
            raise RuntimeError(f"Cannot update a gesture that is {self.phase.value}")
        self.translation = translation
        self.horizontal = horizontal
        self.velocity = velocity
        return self.proposal()

    @property
    def distance(self) -> float:
        return math.hypot(self.horizontal, self.translation)

    @property
    def increment(self) -> float:
        """Snap increment selected by the most recent drag velocity."""
        return velocity_increment(
            self.velocity, self.snap_increment, self.velocity_threshold, self.slow_increment
        )

    def proposal(self) -> Proposal:
        """Tentative values for the current translation."""
        delta = pixels_to_seconds(self.translation, self.hour_height)
        increment = self.increment
        # Duration floor is always one configured increment, even on slow drags
        floor = self.snap_increment
        event = self.event

        if self.kind is GestureKind.MOVE:
            start, duration = snap_move(event.start_time + delta, event.duration, increment)
        elif self.kind is GestureKind.RESIZE_TOP:
            start, duration = snap_tile_top(event.start_time + delta, event.end_time, increment, floor)
        else:
            duration = event.duration + delta
            start, duration = snap_tile(event.start_time, duration, increment, floor)

        return Proposal(start_time=start, duration=duration, increment=increment)

    def finish(self) -> Proposal | None:
        """
        End the drag.

        Returns the final proposal, or None when the finger barely moved:
        that is a tap or long-press and must not mutate anything.
        """
        if self.phase is not GesturePhase.DRAGGING:
            raise RuntimeError(f"Cannot finish a gesture that is {self.phase.value}")
        if self.distance < self.tap_threshold:
            self.phase = GesturePhase.CANCELLED
            return None
        self.phase = GesturePhase.COMMITTED
        return self.proposal()

    def cancel(self) -> None:
        self.phase = GesturePhase.CANCELLED
