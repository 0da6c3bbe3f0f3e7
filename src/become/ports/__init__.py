"""Ports - interfaces/protocols for external dependencies."""

from .event_store import MASTER_KEY, EventStore, day_key

__all__ = [
    "EventStore",
    "MASTER_KEY",
    "day_key",
]
