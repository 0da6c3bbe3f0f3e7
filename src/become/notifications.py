"""Change notifications so independently rendered day views can refresh."""

import logging
from typing import Callable

logger = logging.getLogger(__name__)

Listener = Callable[[], None]


class NotificationBus:
    """
    "Events changed" signal owned by the application root.

    Consumers subscribe explicitly and unsubscribe on teardown; the
    mutation engine posts after every successful write.
    """

    def __init__(self):
        self._listeners: list[Listener] = []

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener. Returns a function that unsubscribes it."""
        self._listeners.append(listener)
        return lambda: self.unsubscribe(listener)

    def unsubscribe(self, listener: Listener) -> None:
        try:
            self._listeners.remove(listener)
        except ValueError:
            pass

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def post(self) -> None:
        """Notify every listener, in subscription order."""
        for listener in list(self._listeners):
            try:
                listener()
            except Exception:
                logger.exception(f"Listener {listener!r} failed")
