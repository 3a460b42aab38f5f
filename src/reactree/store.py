"""ReactiveStore — owns a state tree and notifies only affected listeners.

The store listens to the root observable's notifier:
- reads while a binding is recording are added to that binding's
  dependency trie,
- writes are always added to the dirty trie.

update() runs a mutator, then matches the dirty trie against the
subscription trie and re-invokes each triggered binding once. Writing
`corge.waldo` fires listeners that read `corge.waldo`, `corge` or any
path below `corge.waldo`, and leaves listeners of `corge.grault` alone.
"""

from __future__ import annotations

import logging
import threading
from typing import Callable, Generic, Iterable, TypeVar

from reactree._trie import Path, PathTrie
from reactree.action import action
from reactree.binding import DependencyBinding
from reactree.errors import ReentrantUpdateError
from reactree.notifier import notifier_of

S = TypeVar("S")
R = TypeVar("R")

logger = logging.getLogger("reactree.store")


class ReactiveStore(Generic[S]):
    """Root orchestrator: state tree, subscriptions, dirty marks."""

    def __init__(self, root: S) -> None:
        notifier = notifier_of(root)
        if notifier is None:
            raise TypeError(f"{type(root).__name__} is not observable (no __notifier__)")
        self._root = root
        self._subscriptions: PathTrie[set[DependencyBinding]] = PathTrie(set)
        self._dirty: PathTrie = PathTrie()
        self._recording: DependencyBinding | None = None
        self._recording_thread: int | None = None
        self._mutating = False
        # Serializes store operations for multi-threaded hosts.
        self._lock = threading.RLock()
        notifier.subscribe_read(self._on_read)
        notifier.subscribe_write(self._on_write)

    @classmethod
    def of(cls, model: Callable[..., S], **values) -> ReactiveStore[S]:
        """Build the root from a model class and wrap it in a store."""
        return cls(model(**values))

    @property
    def state(self) -> S:
        return self._root

    def bind(self, listener: Callable[[S], None], *, static: bool = False) -> Callable[[], None]:
        """Run listener now and again whenever something it read changes.

        Returns a canceller. With static=True dependencies are recorded on the
        first run only.
        """
        with self._lock:
            binding = DependencyBinding(self, listener, static=static)
            binding.invoke()
            return binding.cancel

    def update(self, mutator: Callable[[S], R]) -> R:
        """Run mutator against the state, then notify affected bindings once each."""
        with self._lock:
            if self._recording is not None:
                raise ReentrantUpdateError(f"update() called while {self._recording!r} is recording")
            if self._mutating:
                raise ReentrantUpdateError("update() called from inside another update's mutator")

            self._mutating = True
            try:
                result = mutator(self._root)
            finally:
                self._mutating = False

            if not self._dirty:
                logger.debug("update wrote nothing")
                return result

            triggered = self._dirty.search(self._subscriptions)
            self._dirty = PathTrie()
            logger.debug("update triggered %d binding(s)", len(triggered))
            for binding in triggered:
                binding.invoke()
            return result

    def action(self, fn: Callable[..., R]) -> Callable[..., R]:
        """Decorator form of update(); see reactree.action."""
        return action(self)(fn)

    def clear_bindings(self) -> None:
        """Forget every subscription without cancelling the bindings."""
        with self._lock:
            self._subscriptions = PathTrie(set)
            logger.debug("Cleared all bindings")

    def subscribers(self, path: Iterable[str]) -> set[DependencyBinding]:
        """Bindings registered exactly at path."""
        node = self._subscriptions.find(path)
        if node is None or not node.has_value:
            return set()
        return set(node.value)

    # --- Binding protocol ---

    def _begin_recording(self, binding: DependencyBinding) -> None:
        if self._recording is not None:
            raise ReentrantUpdateError(f"{binding!r} cannot record while {self._recording!r} is recording")
        self._recording = binding
        self._recording_thread = threading.get_ident()

    def _end_recording(self, binding: DependencyBinding) -> None:
        if self._recording is binding:
            self._recording = None
            self._recording_thread = None

    def _resubscribe(self, binding: DependencyBinding, added: list[Path], removed: list[Path]) -> None:
        for path in added:
            self._subscriptions.touch(path).add(binding)
        for path in removed:
            self._subscriptions.discard(path, binding)
        if added or removed:
            logger.debug("%r: +%d/-%d paths", binding, len(added), len(removed))

    # --- Root notifier observers ---

    def _on_read(self, path: Path) -> None:
        # Only the recording thread's reads belong to the recording binding.
        binding = self._recording
        if binding is not None and threading.get_ident() == self._recording_thread:
            binding.record(path)

    def _on_write(self, path: Path, new_value: object, old_value: object) -> None:
        with self._lock:
            self._dirty.touch(path)

    def __repr__(self) -> str:
        return f"ReactiveStore({type(self._root).__name__})"
