"""Notifier nodes, the containment tree observables report through.

Every observable object owns one NotifierNode. When an observable is
stored as a property of another, its node is attached under the
container's node with the property name, so read/write notifications
bubble to the root with the full path composed on the way up:

    root.corge.waldo = "x"
    # corge's node sees ("waldo",), root's node sees ("corge", "waldo")
"""

from __future__ import annotations

from typing import Callable, Iterable

from reactree._trie import Path
from reactree.errors import CycleError

ReadObserver = Callable[[Path], None]
WriteObserver = Callable[[Path, object, object], None]


class NotifierNode:
    """Parent-pointer node bubbling get/set notifications towards the root."""

    __slots__ = ("_parent", "_name", "_read_observers", "_write_observers")

    def __init__(self) -> None:
        self._parent: NotifierNode | None = None
        self._name = ""
        self._read_observers: list[ReadObserver] = []
        self._write_observers: list[WriteObserver] = []

    @property
    def parent(self) -> NotifierNode | None:
        return self._parent

    @property
    def name(self) -> str:
        return self._name

    @property
    def path(self) -> Path:
        """Path from the topmost ancestor down to this node."""
        segments: list[str] = []
        node = self
        while node._parent is not None:
            segments.append(node._name)
            node = node._parent
        return tuple(reversed(segments))

    def attach_to(self, parent: NotifierNode, name: str) -> None:
        """Hang this node under parent as property `name`. Replaces any previous parent."""
        ancestor: NotifierNode | None = parent
        while ancestor is not None:
            if ancestor is self:
                raise CycleError(f"attaching under {name!r} would make the node its own ancestor")
            ancestor = ancestor._parent
        self._parent = parent
        self._name = name

    def detach(self) -> None:
        self._parent = None
        self._name = ""

    # --- Local observers ---

    def subscribe_read(self, observer: ReadObserver) -> Callable[[], None]:
        """Register a read observer. Returns a function that removes it."""
        self._read_observers.append(observer)
        return _remover(self._read_observers, observer)

    def subscribe_write(self, observer: WriteObserver) -> Callable[[], None]:
        """Register a write observer. Returns a function that removes it."""
        self._write_observers.append(observer)
        return _remover(self._write_observers, observer)

    # --- Bubbling ---

    def notify_read(self, path: Iterable[str]) -> None:
        path = tuple(path)
        node = self
        while node is not None:
            for observer in list(node._read_observers):
                observer(path)
            if node._parent is not None:
                path = (node._name,) + path
            node = node._parent

    def notify_write(self, path: Iterable[str], new_value: object, old_value: object) -> None:
        path = tuple(path)
        node = self
        while node is not None:
            for observer in list(node._write_observers):
                observer(path, new_value, old_value)
            if node._parent is not None:
                path = (node._name,) + path
            node = node._parent

    def __repr__(self) -> str:
        where = ".".join(self.path) or "<root>"
        return f"NotifierNode({where})"


def _remover(observers: list, observer) -> Callable[[], None]:
    def _remove() -> None:
        try:
            observers.remove(observer)
        except ValueError:
            pass  # already removed

    return _remove


def notifier_of(value: object) -> NotifierNode | None:
    """The NotifierNode an observable exposes, or None for plain values."""
    notifier = getattr(value, "__notifier__", None)
    return notifier if isinstance(notifier, NotifierNode) else None
