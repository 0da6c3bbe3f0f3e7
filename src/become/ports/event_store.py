"""Event storage interface."""

from datetime import date
from typing import Protocol

from become.core.events import Event

MASTER_KEY = "masterRepeatingEvents"


def day_key(target_date: date) -> str:
    """Canonical storage key for a date's standalone events."""
    return target_date.isoformat()


class EventStore(Protocol):
    """Interface for reading and writing per-day events and repeating templates."""

    def load_day(self, target_date: date) -> list[Event]:
        """Standalone events for a date. Empty if absent or unreadable."""
        ...

    def save_day(self, target_date: date, events: list[Event]) -> None:
        """Overwrite the standalone events stored for a date."""
        ...

    def load_master_templates(self) -> list[Event]:
        """All repeating templates. Empty if absent or unreadable."""
        ...

    def save_master_templates(self, events: list[Event]) -> None:
        """Overwrite the whole master template collection."""
        ...
