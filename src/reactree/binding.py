"""Dependency bindings — a listener plus the paths it read last time.

A binding runs its listener while the store records every path the
listener reads. The freshly recorded trie is diffed against the previous
one and the store's subscriptions are patched with the difference, so a
binding is always registered under exactly the paths of its last run.

Static bindings record once, on the first run, and keep those
dependencies for good. Dynamic bindings re-record on every run, which
lets conditional reads (`a.b if a.flag else a.c`) follow the branch taken.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable

from reactree._trie import Path, PathTrie

if TYPE_CHECKING:
    from reactree.store import ReactiveStore

logger = logging.getLogger("reactree.binding")


class DependencyBinding:
    """A listener coupled to its recorded dependency paths."""

    __slots__ = ("_store", "_listener", "_static", "_dependencies", "_cancelled")

    def __init__(self, store: ReactiveStore, listener: Callable[[object], None], *, static: bool = False) -> None:
        self._store = store
        self._listener = listener
        self._static = static
        self._dependencies: PathTrie | None = None
        self._cancelled = False

    @property
    def static(self) -> bool:
        return self._static

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def dependencies(self) -> list[Path]:
        """Leaf paths this binding is currently registered under."""
        if self._dependencies is None:
            return []
        return list(self._dependencies.leaves())

    def record(self, path: Path) -> None:
        """Note a read. Called by the store while this binding is recording."""
        if self._dependencies is not None:
            self._dependencies.touch(path)

    def invoke(self) -> None:
        """Run the listener, re-tracking dependencies unless static and already tracked."""
        if self._cancelled:
            return

        state = self._store.state
        if self._static and self._dependencies is not None:
            self._listener(state)
            return

        previous = self._dependencies if self._dependencies is not None else PathTrie()
        # Refused recordings leave the current dependencies untouched.
        self._store._begin_recording(self)
        self._dependencies = PathTrie()
        try:
            self._listener(state)
        except Exception:
            logger.debug("Listener of %r raised; keeping partial dependencies", self)
            raise
        finally:
            self._store._end_recording(self)
            if self._cancelled:
                # Cancelled from inside its own listener.
                self._store._resubscribe(self, [], list(previous.leaves()))
            else:
                # Reads made before a failure stay subscribed.
                added, removed = self._dependencies.diff(previous)
                self._store._resubscribe(self, added, removed)

    def cancel(self) -> None:
        """Unregister from every dependency path. Idempotent."""
        with self._store._lock:
            if self._dependencies is None:
                self._cancelled = True
                return
            removed = list(self._dependencies.leaves())
            self._dependencies = None
            self._cancelled = True
            self._store._resubscribe(self, [], removed)
            logger.debug("Cancelled %r (%d paths released)", self, len(removed))

    def __repr__(self) -> str:
        name = getattr(self._listener, "__name__", type(self._listener).__name__)
        if self._cancelled:
            state = "cancelled"
        elif self._dependencies is None:
            state = "uninitialized"
        else:
            state = "static" if self._static else "dynamic"
        return f"DependencyBinding({name}, {state})"
