"""Tests for application wiring."""

from datetime import date
from pathlib import Path
from unittest.mock import MagicMock

from become.config import DATA_DIR, Config
from become.core.events import EventDraft, RepeatOption
from become.core.gesture import GestureKind
from become.planner import build_planner, get_store

WEDNESDAY = date(2025, 1, 15)


class TestGetStore:
    def test_uses_configured_dir(self, tmp_path):
        store = get_store(Config(data_dir=str(tmp_path)))
        assert store.data_dir == tmp_path

    def test_expands_user_path(self, monkeypatch, tmp_path):
        monkeypatch.setenv("HOME", str(tmp_path))
        store = get_store(Config(data_dir="~/some/data"))
        assert store.data_dir == Path.home() / "some" / "data"

    def test_falls_back_to_default(self, monkeypatch):
        monkeypatch.setattr("become.planner.FileEventStore", MagicMock())
        get_store(Config(data_dir=""))
        from become import planner
        planner.FileEventStore.assert_called_once_with(DATA_DIR)


class TestBuildPlanner:
    def test_views_refresh_after_mutation(self, tmp_path):
        planner = build_planner(Config(data_dir=str(tmp_path)))
        renders = []

        def refresh():
            renders.append(planner.materialize(WEDNESDAY))

        unsubscribe = planner.bus.subscribe(refresh)
        planner.create_event(
            EventDraft(title="Run", start_time=25200, end_time=27000, target_date=WEDNESDAY,
                       repeat_option=RepeatOption.daily())
        )
        assert [e.title for e in renders[-1]] == ["Run"]

        unsubscribe()
        planner.create_event(
            EventDraft(title="Read", start_time=72000, end_time=75600, target_date=WEDNESDAY)
        )
        assert len(renders) == 1

    def test_engine_uses_configured_increment(self, tmp_path):
        planner = build_planner(Config(data_dir=str(tmp_path), snap_increment=300))
        assert planner.engine.snap_increment == 300
        assert planner.engine.bus is planner.bus

    def test_gesture_from_config(self, tmp_path):
        config = Config(data_dir=str(tmp_path), hour_height=60, snap_increment=600, tap_threshold=4)
        planner = build_planner(config)
        event = planner.create_event(
            EventDraft(title="Nap", start_time=50400, end_time=52200, target_date=WEDNESDAY)
        )
        gesture = planner.start_gesture(event, GestureKind.MOVE)
        assert gesture.hour_height == 60
        assert gesture.snap_increment == 600
        assert gesture.tap_threshold == 4
        gesture.update(60, 1000)
        moved = planner.engine.commit_gesture(gesture, WEDNESDAY)
        assert moved.start_time == 54000
        assert planner.materialize(WEDNESDAY) == [moved]
