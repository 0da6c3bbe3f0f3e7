"""Pure event domain logic: entities, repeat rules, recurrence - no I/O."""

import math
import uuid
from dataclasses import dataclass, field, replace
from datetime import date
from enum import Enum, IntEnum
from typing import Iterable


class ScheduleError(Exception):
    """Base class for scheduling errors."""


class ValidationError(ScheduleError, ValueError):
    """Event fields were rejected before any write."""


class DecodeError(ScheduleError):
    """A persisted event record could not be decoded."""


class MissingSeriesReference(ScheduleError, LookupError):
    """An occurrence points at a series that is no longer stored."""

    def __init__(self, series_id: str | None):
        super().__init__(f"No template for series {series_id}")
        self.series_id = series_id


class Category(Enum):
    """Event category. Color is derived at display time, never stored."""

    APPOINTMENT = "appointment"
    ERRANDS = "errands"
    EXERCISE = "exercise"
    FAMILY = "family"
    MEAL = "meal"
    MEETING = "meeting"
    PERSONAL = "personal"
    REST = "rest"
    SOCIAL = "social"
    STUDY = "study"
    TRAVEL = "travel"
    WORK = "work"
    OTHER = "other"


class Weekday(IntEnum):
    """Day of week, Sunday=1 through Saturday=7."""

    SUNDAY = 1
    MONDAY = 2
    TUESDAY = 3
    WEDNESDAY = 4
    THURSDAY = 5
    FRIDAY = 6
    SATURDAY = 7

    @property
    def short_name(self) -> str:
        return self.name[:3].title()

    @classmethod
    def parse(cls, value: str) -> "Weekday":
        """Parse '4', 'wed' or 'Wednesday'."""
        value = value.strip()
        if value.isdigit():
            return cls(int(value))
        for day in cls:
            if day.name.lower().startswith(value.lower()) and len(value) >= 2:
                return day
        raise ValueError(f"Unknown weekday: {value!r}")


def weekday_of(d: date) -> Weekday:
    """Weekday of a calendar date."""
    # isoweekday: Monday=1 .. Sunday=7
    return Weekday(d.isoweekday() % 7 + 1)


class RepeatKind(Enum):
    NONE = "none"
    DAILY = "daily"
    WEEKLY = "weekly"


@dataclass(frozen=True)
class RepeatOption:
    """
    Repeat rule as a tagged union: none, daily, or weekly(days).

    Equality compares tag and payload. Only weekly rules carry days; a
    weekly rule with no days is legal and never occurs.
    """

    kind: RepeatKind = RepeatKind.NONE
    days: frozenset[Weekday] = frozenset()

    def __post_init__(self):
        if self.kind is not RepeatKind.WEEKLY and self.days:
            raise ValueError(f"{self.kind.value} repeat rule cannot carry weekdays")
        object.__setattr__(self, "days", frozenset(Weekday(d) for d in self.days))

    @classmethod
    def none(cls) -> "RepeatOption":
        return cls(RepeatKind.NONE)

    @classmethod
    def daily(cls) -> "RepeatOption":
        return cls(RepeatKind.DAILY)

    @classmethod
    def weekly(cls, days: Iterable[int]) -> "RepeatOption":
        return cls(RepeatKind.WEEKLY, frozenset(Weekday(d) for d in days))

    @property
    def is_repeating(self) -> bool:
        return self.kind is not RepeatKind.NONE

    def describe(self) -> str:
        """Human-readable rule, e.g. 'Weekly on Mon, Wed'."""
        if self.kind is RepeatKind.NONE:
            return "Never"
        if self.kind is RepeatKind.DAILY:
            return "Daily"
        if not self.days:
            return "Weekly (no days)"
        return "Weekly on " + ", ".join(d.short_name for d in sorted(self.days))

    def to_json(self) -> str | dict:
        if self.kind is RepeatKind.WEEKLY:
            return {"weekly": sorted(int(d) for d in self.days)}
        return self.kind.value

    @classmethod
    def from_json(cls, data) -> "RepeatOption":
        """Decode `"none"`, `"daily"` or `{"weekly": [ints]}`."""
        try:
            if data == "none":
                return cls.none()
            if data == "daily":
                return cls.daily()
            if isinstance(data, dict) and set(data) == {"weekly"}:
                days = data["weekly"]
                if not isinstance(days, list) or any(isinstance(d, bool) for d in days):
                    raise TypeError("weekdays must be a list of numbers")
                return cls.weekly(days)
        except (TypeError, ValueError) as e:
            raise DecodeError(f"Invalid weekly repeat rule {data!r}: {e}") from e
        raise DecodeError(f"Unknown repeat rule: {data!r}")


def new_id() -> str:
    return str(uuid.uuid4())


@dataclass
class Event:
    """
    A calendar event: either a standalone event stored under one date,
    or a repeating template stored in the master collection.

    `start_time` is seconds from local midnight of the owning date.
    """

    id: str
    title: str
    start_time: float
    duration: float
    category: Category = Category.OTHER
    repeat_option: RepeatOption = field(default_factory=RepeatOption.none)
    series_id: str | None = None
    exception_dates: frozenset[date] = frozenset()

    @property
    def end_time(self) -> float:
        return self.start_time + self.duration

    @property
    def is_template(self) -> bool:
        return self.repeat_option.is_repeating

    def with_exception(self, d: date) -> "Event":
        """Copy of this template suppressed on one more date."""
        return replace(self, exception_dates=self.exception_dates | {d})

    def to_dict(self) -> dict:
        data = {"id": self.id}
        if self.series_id is not None:
            data["seriesId"] = self.series_id
        data.update(
            {
                "title": self.title,
                "startTime": self.start_time,
                "duration": self.duration,
                "category": self.category.value,
                "repeatOption": self.repeat_option.to_json(),
                "exceptionDates": sorted(d.isoformat() for d in self.exception_dates),
            }
        )
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "Event":
        """Create Event from a persisted JSON record."""
        try:
            start_time = data["startTime"]
            duration = data["duration"]
            if isinstance(start_time, bool) or isinstance(duration, bool):
                raise TypeError("times must be numbers")
            if not isinstance(start_time, (int, float)) or not isinstance(duration, (int, float)):
                raise TypeError("times must be numbers")
            if not math.isfinite(start_time) or not math.isfinite(duration):
                raise ValueError("times must be finite")
            if start_time < 0:
                raise ValueError(f"negative start time {start_time}")
            if duration <= 0:
                raise ValueError(f"non-positive duration {duration}")
            return cls(
                id=str(data["id"]),
                series_id=data.get("seriesId"),
                title=str(data["title"]),
                start_time=start_time,
                duration=duration,
                category=Category(data.get("category", Category.OTHER.value)),
                repeat_option=RepeatOption.from_json(data.get("repeatOption", "none")),
                exception_dates=frozenset(
                    date.fromisoformat(d) for d in data.get("exceptionDates", [])
                ),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise DecodeError(f"Invalid event record: {e}") from e


def occurs_on(event: Event, d: date) -> bool:
    """
    Whether a template yields an occurrence on a date.

    Pure function - no I/O. Single events always answer False; they are
    stored directly under their date instead.
    """
    if d in event.exception_dates:
        return False
    if event.repeat_option.kind is RepeatKind.NONE:
        return False
    if event.repeat_option.kind is RepeatKind.DAILY:
        return True
    return weekday_of(d) in event.repeat_option.days


@dataclass
class EventDraft:
    """
    In-progress form values, kept apart from the committed Event.

    Times are seconds from midnight of `target_date`.
    """

    title: str
    start_time: float
    end_time: float
    target_date: date
    category: Category = Category.OTHER
    repeat_option: RepeatOption = field(default_factory=RepeatOption.none)

    @property
    def duration(self) -> float:
        return self.end_time - self.start_time

    def validate(self) -> None:
        """Raise ValidationError if this draft cannot be saved."""
        if not self.title.strip():
            raise ValidationError("Title cannot be empty")
        if self.start_time < 0:
            raise ValidationError(f"Start time cannot be negative ({self.start_time})")
        if self.end_time <= self.start_time:
            raise ValidationError("End time must be after start time")

    def apply_to(self, event: Event) -> Event:
        """Copy of an event carrying this draft's fields."""
        return replace(
            event,
            title=self.title.strip(),
            category=self.category,
            start_time=self.start_time,
            duration=self.duration,
            repeat_option=self.repeat_option,
        )

    @classmethod
    def from_event(cls, event: Event, target_date: date) -> "EventDraft":
        """Pre-fill a draft for editing an event rendered on a date."""
        return cls(
            title=event.title,
            start_time=event.start_time,
            end_time=event.end_time,
            target_date=target_date,
            category=event.category,
            repeat_option=event.repeat_option,
        )
