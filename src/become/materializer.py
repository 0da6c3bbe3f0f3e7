"""Day materializer - builds the render list for a date."""

from datetime import date, timedelta

from .core.events import Event, occurs_on
from .ports.event_store import EventStore


def sort_by_start(events: list[Event]) -> list[Event]:
    """Sort events by start time, then title."""
    return sorted(events, key=lambda e: (e.start_time, e.title))


class DayMaterializer:
    """
    Combines a day's standalone events with the repeating templates that
    occur on it.

    Occurrences are the template objects as read, not copies persisted
    anywhere; they only become standalone events when a mutation
    detaches them.
    """

    def __init__(self, store: EventStore):
        self.store = store

    def materialize(self, target_date: date) -> list[Event]:
        """Render list for a date: standalone events, then occurrences."""
        singles = self.store.load_day(target_date)
        templates = self.store.load_master_templates()
        occurrences = [t for t in templates if occurs_on(t, target_date)]
        return singles + occurrences

    def materialize_range(self, start_date: date, end_date: date) -> dict[date, list[Event]]:
        """Render lists for every date in an inclusive range."""
        templates = self.store.load_master_templates()
        days = {}
        d = start_date
        while d <= end_date:
            singles = self.store.load_day(d)
            days[d] = singles + [t for t in templates if occurs_on(t, d)]
            d += timedelta(days=1)
        return days
