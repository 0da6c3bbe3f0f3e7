"""Application root - wires store, notifications, materializer and engine."""

from dataclasses import dataclass
from datetime import date
from pathlib import Path

from .adapters.file_store import FileEventStore
from .config import DATA_DIR, Config
from .core.events import Event, EventDraft
from .core.gesture import DragGesture, GestureKind
from .materializer import DayMaterializer
from .mutations import MutationEngine
from .notifications import NotificationBus
from .ports.event_store import EventStore


def get_store(config: Config) -> FileEventStore:
    """Resolve data directory from config."""
    if config.data_dir:
        return FileEventStore(Path(config.data_dir).expanduser())
    return FileEventStore(DATA_DIR)


@dataclass
class Planner:
    """Everything a day view needs, sharing one notification bus."""

    config: Config
    store: EventStore
    bus: NotificationBus
    materializer: DayMaterializer
    engine: MutationEngine

    def materialize(self, target_date: date) -> list[Event]:
        return self.materializer.materialize(target_date)

    def create_event(self, draft: EventDraft) -> Event:
        return self.engine.create_event(draft)

    def start_gesture(self, event: Event, kind: GestureKind) -> DragGesture:
        """New drag on a tile, tuned from configuration."""
        return DragGesture(
            event,
            kind,
            hour_height=self.config.hour_height,
            snap_increment=self.config.snap_increment,
            slow_increment=self.config.slow_snap_increment,
            velocity_threshold=self.config.velocity_threshold,
            tap_threshold=self.config.tap_threshold,
        )


def build_planner(config: Config, store: EventStore | None = None) -> Planner:
    """Assemble a planner. The store defaults to the configured data directory."""
    store = store or get_store(config)
    bus = NotificationBus()
    return Planner(
        config=config,
        store=store,
        bus=bus,
        materializer=DayMaterializer(store),
        engine=MutationEngine(store, bus, snap_increment=config.snap_increment),
    )
