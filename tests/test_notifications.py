"""Tests for the change notification bus."""

from unittest.mock import MagicMock

from become.notifications import NotificationBus


class TestNotificationBus:
    def test_post_calls_listeners_in_order(self):
        bus = NotificationBus()
        calls = []
        bus.subscribe(lambda: calls.append("first"))
        bus.subscribe(lambda: calls.append("second"))
        bus.post()
        assert calls == ["first", "second"]

    def test_unsubscribe_handle(self):
        bus = NotificationBus()
        listener = MagicMock()
        unsubscribe = bus.subscribe(listener)
        unsubscribe()
        bus.post()
        listener.assert_not_called()
        assert bus.listener_count == 0

    def test_unsubscribe_twice_is_harmless(self):
        bus = NotificationBus()
        listener = MagicMock()
        bus.subscribe(listener)
        bus.unsubscribe(listener)
        bus.unsubscribe(listener)
        assert bus.listener_count == 0

    def test_failing_listener_does_not_block_others(self, caplog):
        bus = NotificationBus()
        after = MagicMock()
        bus.subscribe(MagicMock(side_effect=RuntimeError("view gone")))
        bus.subscribe(after)
        bus.post()
        after.assert_called_once_with()
        assert "failed" in caplog.text

    def test_listener_may_unsubscribe_while_notified(self):
        bus = NotificationBus()
        other = MagicMock()
        unsubscribe = None

        def once():
            unsubscribe()

        unsubscribe = bus.subscribe(once)
        bus.subscribe(other)
        bus.post()
        other.assert_called_once_with()
        assert bus.listener_count == 1

    def test_buses_are_independent(self):
        first, second = NotificationBus(), NotificationBus()
        listener = MagicMock()
        first.subscribe(listener)
        second.post()
        listener.assert_not_called()
