"""Pure time-grid math for the day timeline - no I/O dependencies."""

import math
from datetime import datetime

SECONDS_PER_HOUR = 3600
SECONDS_PER_DAY = 24 * SECONDS_PER_HOUR


def pixels_to_seconds(delta_pixels: float, hour_height_pixels: float) -> float:
    """Convert a vertical drag distance into a time delta in seconds."""
    if hour_height_pixels <= 0:
        raise ValueError(f"Hour height must be positive, got {hour_height_pixels}")
    return delta_pixels / hour_height_pixels * SECONDS_PER_HOUR


def snap(seconds: float, increment: float) -> float:
    """
    Round a time value to the nearest multiple of the increment.

    Pure function - no I/O. Idempotent: snapping a snapped value is a no-op.
    """
    if increment <= 0:
        raise ValueError(f"Snap increment must be positive, got {increment}")
    return round(seconds / increment) * increment


def velocity_increment(
    velocity: float,
    fast_increment: float,
    threshold: float,
    slow_increment: float = 60,
) -> float:
    """Pick the snap increment for a drag moving at the given velocity."""
    if abs(velocity) < threshold:
        return slow_increment
    return fast_increment


def snap_velocity_aware(
    seconds: float,
    velocity: float,
    fast_increment: float,
    threshold: float,
    slow_increment: float = 60,
) -> float:
    """
    Snap with an increment chosen by drag speed.

    Slow, deliberate drags get minute precision; fast flicks land on the
    coarse grid.
    """
    increment = velocity_increment(velocity, fast_increment, threshold, slow_increment)
    return snap(seconds, increment)


def clamp_to_day(start_time: float, duration: float) -> tuple[float, float]:
    """Keep a tile inside the day: start >= 0 and end <= midnight."""
    duration = min(duration, SECONDS_PER_DAY)
    start_time = max(0, min(start_time, SECONDS_PER_DAY - duration))
    return start_time, duration


def snap_move(start_time: float, duration: float, increment: float) -> tuple[float, float]:
    """
    Snap a moved tile's start and keep the tile inside the day.

    The start stays on the grid: near midnight it falls back to the last
    grid line the whole tile fits after.
    """
    start_time = snap(start_time, increment)
    duration = min(duration, SECONDS_PER_DAY)
    latest = math.floor((SECONDS_PER_DAY - duration) / increment) * increment
    return max(0, min(start_time, latest)), duration


def snap_tile(
    start_time: float,
    duration: float,
    increment: float,
    min_duration: float | None = None,
) -> tuple[float, float]:
    """
    Snap a resized tile's start and duration and keep it inside the day.

    Duration never drops below `min_duration` (one increment by default).
    """
    floor = increment if min_duration is None else min_duration
    start_time = snap(start_time, increment)
    duration = max(floor, snap(duration, increment))
    return clamp_to_day(start_time, duration)


def snap_tile_top(
    start_time: float,
    end_time: float,
    increment: float,
    min_duration: float | None = None,
) -> tuple[float, float]:
    """
    Snap a tile whose top edge was dragged. The end edge stays put.

    Past the floor the start stops at `end_time - min_duration`.
    """
    floor = increment if min_duration is None else min_duration
    start_time = max(0, snap(start_time, increment))
    if end_time - start_time < floor:
        start_time = end_time - floor
    return clamp_to_day(start_time, end_time - start_time)


def seconds_since_midnight(moment: datetime) -> int:
    """Wall-clock offset of a moment from its local midnight."""
    return moment.hour * SECONDS_PER_HOUR + moment.minute * 60 + moment.second
