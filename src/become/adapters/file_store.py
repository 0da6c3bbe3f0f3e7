"""File-based event storage adapter."""

import json
import logging
from datetime import date
from pathlib import Path

from become.core.events import DecodeError, Event
from become.ports.event_store import MASTER_KEY, day_key

logger = logging.getLogger(__name__)


class FileEventStore:
    """
    File-based event storage.

    Implements EventStore protocol. Every key gets one JSON file in a
    single directory: `<YYYY-MM-DD>.json` for a day's standalone events
    and `masterRepeatingEvents.json` for the repeating templates.
    """

    def __init__(self, data_dir: Path | str):
        self.data_dir = Path(data_dir).expanduser()
        self.data_dir.mkdir(parents=True, exist_ok=True)

    def _path_for_key(self, key: str) -> Path:
        return self.data_dir / f"{key}.json"

    def _read_key(self, key: str) -> list[Event]:
        """Decode the events under a key. Corrupt data reads as no data."""
        path = self._path_for_key(key)
        if not path.exists():
            return []
        try:
            records = json.loads(path.read_text())
            if not isinstance(records, list):
                raise DecodeError(f"expected a JSON array, got {type(records).__name__}")
            return [Event.from_dict(record) for record in records]
        except (json.JSONDecodeError, UnicodeDecodeError, DecodeError) as e:
            logger.warning(f"Discarding unreadable events under '{key}': {e}")
            return []

    def _write_key(self, key: str, events: list[Event]) -> None:
        """Replace the whole collection under a key in one rename."""
        path = self._path_for_key(key)
        if not events:
            path.unlink(missing_ok=True)
            logger.debug(f"Cleared '{key}'")
            return
        tmp_path = path.with_suffix(".tmp")
        tmp_path.write_text(json.dumps([e.to_dict() for e in events], indent=2))
        tmp_path.replace(path)
        logger.debug(f"Wrote {len(events)} events to '{key}'")

    def load_day(self, target_date: date) -> list[Event]:
        """Standalone events for a date. Empty if absent or unreadable."""
        return self._read_key(day_key(target_date))

    def save_day(self, target_date: date, events: list[Event]) -> None:
        """Overwrite the standalone events stored for a date."""
        self._write_key(day_key(target_date), events)

    def load_master_templates(self) -> list[Event]:
        """All repeating templates. Empty if absent or unreadable."""
        return self._read_key(MASTER_KEY)

    def save_master_templates(self, events: list[Event]) -> None:
        """Overwrite the whole master template collection."""
        self._write_key(MASTER_KEY, events)

