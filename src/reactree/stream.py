"""Push-based event stream for container item events.

Containers publish item-level changes (which index was set, which keys
were removed) through streams. These events are for outside consumers;
dependency tracking only sees the container as a whole.
"""

from __future__ import annotations

from typing import Callable, Generic, TypeVar

T = TypeVar("T")

Disposer = Callable[[], None]


class EventStream(Generic[T]):
    """Synchronous push stream delivering each event to every subscriber."""

    __slots__ = ("_subscribers",)

    def __init__(self) -> None:
        self._subscribers: list[Callable[[T], None]] = []

    def emit(self, value: T) -> None:
        # Snapshot so callbacks may unsubscribe while being notified.
        for callback in list(self._subscribers):
            callback(value)

    def subscribe(self, callback: Callable[[T], None]) -> Disposer:
        """Register a callback. Returns a function that removes it."""
        self._subscribers.append(callback)

        def _unsubscribe() -> None:
            try:
                self._subscribers.remove(callback)
            except ValueError:
                pass  # already removed

        return _unsubscribe
