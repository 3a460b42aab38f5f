"""Path-keyed trie — dependency sets, dirty marks and subscriptions.

A Path is a tuple of property names from the state root, e.g.
("corge", "waldo"). Each trie node maps a segment to a child node and may
hold a lazily created value. A node can hold a value AND have children:
a listener may depend on a property and on its sub-properties at once.

Three tries cooperate:
- a binding's dependency trie (value unused, only the shape matters),
- the store's dirty trie (paths written during the current update),
- the store's subscription trie (path -> set of bindings).
"""

from __future__ import annotations

from typing import Callable, Generic, Iterable, Iterator, TypeVar

V = TypeVar("V")
W = TypeVar("W")

Path = tuple[str, ...]


class PathTrie(Generic[V]):
    """Trie keyed by path segments with an optional value per node."""

    __slots__ = ("_factory", "_children", "_value", "_has_value")

    def __init__(self, factory: Callable[[], V] = lambda: None) -> None:
        self._factory = factory
        self._children: dict[str, PathTrie[V]] = {}
        self._value: V | None = None
        self._has_value = False

    @property
    def value(self) -> V | None:
        return self._value

    @property
    def has_value(self) -> bool:
        return self._has_value

    @property
    def children(self) -> dict[str, PathTrie[V]]:
        return self._children

    def __bool__(self) -> bool:
        return self._has_value or bool(self._children)

    def touch(self, path: Iterable[str]) -> V:
        """Walk (creating nodes) to path, creating its value if absent. Returns the value."""
        node = self
        for segment in path:
            child = node._children.get(segment)
            if child is None:
                child = PathTrie(node._factory)
                node._children[segment] = child
            node = child
        if not node._has_value:
            node._value = node._factory()
            node._has_value = True
        return node._value

    def find(self, path: Iterable[str]) -> PathTrie[V] | None:
        """Node at path, or None. Never creates nodes."""
        node = self
        for segment in path:
            node = node._children.get(segment)
            if node is None:
                return None
        return node

    def discard(self, path: Iterable[str], item: object) -> None:
        """Remove item from the set stored at path, pruning emptied nodes."""
        segments = tuple(path)
        trail: list[PathTrie[V]] = [self]
        for segment in segments:
            child = trail[-1]._children.get(segment)
            if child is None:
                return
            trail.append(child)

        node = trail[-1]
        if node._has_value:
            node._value.discard(item)
            if not node._value:
                node._value = None
                node._has_value = False

        # Prune bottom-up; the root node itself is never removed.
        for depth in range(len(segments), 0, -1):
            node = trail[depth]
            if node._has_value or node._children:
                break
            del trail[depth - 1]._children[segments[depth - 1]]

    def leaves(self, prefix: Path = ()) -> Iterator[Path]:
        """Every path reaching a childless node. The root path () is never a leaf."""
        for name, child in self._children.items():
            path = prefix + (name,)
            if child._children:
                yield from child.leaves(path)
            else:
                yield path

    def values(self) -> Iterator[V]:
        """Every stored value, this node first, then descendants."""
        if self._has_value:
            yield self._value
        for child in self._children.values():
            yield from child.values()

    def diff(self, other: PathTrie, prefix: Path = ()) -> tuple[list[Path], list[Path]]:
        """Compare leaf paths: (added in self, removed from other)."""
        added: list[Path] = []
        removed: list[Path] = []

        for name, child in self._children.items():
            path = prefix + (name,)
            theirs = other._children.get(name)
            if theirs is None:
                added.extend(child.leaves(path) if child._children else [path])
            elif not child._children and theirs._children:
                # Narrowed: we stop here, they went deeper.
                added.append(path)
                removed.extend(theirs.leaves(path))
            elif child._children and not theirs._children:
                added.extend(child.leaves(path))
                removed.append(path)
            else:
                sub_added, sub_removed = child.diff(theirs, path)
                added.extend(sub_added)
                removed.extend(sub_removed)

        for name, theirs in other._children.items():
            if name not in self._children:
                path = prefix + (name,)
                removed.extend(theirs.leaves(path) if theirs._children else [path])

        return added, removed

    def search(self, subscriptions: PathTrie[set[W]]) -> set[W]:
        """Match this dirty trie against a subscription trie.

        A write exactly at a node (no deeper writes recorded) triggers every
        binding in the matching subscription subtree. Deeper writes trigger
        bindings stored exactly at this node and recurse into shared children.
        """
        triggered: set[W] = set()
        self._search(subscriptions, triggered)
        return triggered

    def _search(self, subscriptions: PathTrie[set[W]], triggered: set[W]) -> None:
        if not self._children:
            for bindings in subscriptions.values():
                triggered.update(bindings)
            return
        if subscriptions._has_value:
            triggered.update(subscriptions._value)
        for name, child in self._children.items():
            theirs = subscriptions._children.get(name)
            if theirs is not None:
                child._search(theirs, triggered)

    def __repr__(self) -> str:
        return f"PathTrie(leaves={list(self.leaves())!r})"
