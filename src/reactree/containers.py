"""Observable list and dict.

Dependency tracking treats a container as one value: every read reports
the synthetic path ("items",) and every structural mutation reports
exactly one write to it. A listener reading `state.qux` therefore re-runs
when anything inside `qux` changes, whichever element it was.

Consumers that need element-level detail subscribe to the item events
(`on_add_item`, `on_remove_item`, ...), which are EventStreams.
"""

from __future__ import annotations

from typing import Callable, Generic, Iterable, Iterator, NamedTuple, TypeVar

from reactree.notifier import NotifierNode
from reactree.stream import EventStream

T = TypeVar("T")
KT = TypeVar("KT")
VT = TypeVar("VT")

ITEMS = ("items",)

_MISSING = object()


class ItemSet(NamedTuple):
    index: object
    new: object
    old: object


class ItemsAdded(NamedTuple):
    index: int
    items: tuple


class ItemsRemoved(NamedTuple):
    index: int
    items: tuple


class ItemsRemovedWhere(NamedTuple):
    predicate: Callable
    count: int


class ObservableList(Generic[T]):
    """A list that participates in tracking as a whole."""

    __slots__ = ("_items", "__notifier__", "on_set_item", "on_add_item", "on_remove_item", "on_remove_where")

    def __init__(self, items: Iterable[T] | None = None) -> None:
        self._items: list[T] = list(items) if items else []
        self.__notifier__ = NotifierNode()
        self.on_set_item: EventStream[ItemSet] = EventStream()
        self.on_add_item: EventStream[ItemsAdded] = EventStream()
        self.on_remove_item: EventStream[ItemsRemoved] = EventStream()
        self.on_remove_where: EventStream[ItemsRemovedWhere] = EventStream()

    def _track(self) -> None:
        self.__notifier__.notify_read(ITEMS)

    def _notify(self) -> None:
        self.__notifier__.notify_write(ITEMS, self, None)

    # --- Read operations (track) ---

    def __getitem__(self, index):
        self._track()
        return self._items[index]

    def __len__(self) -> int:
        self._track()
        return len(self._items)

    def __iter__(self) -> Iterator[T]:
        self._track()
        return iter(list(self._items))

    def __contains__(self, item: object) -> bool:
        self._track()
        return item in self._items

    def __bool__(self) -> bool:
        self._track()
        return bool(self._items)

    def index(self, item: T) -> int:
        self._track()
        return self._items.index(item)

    def count(self, item: T) -> int:
        self._track()
        return self._items.count(item)

    # --- Write operations (notify) ---

    def __setitem__(self, index: int, value: T) -> None:
        old = self._items[index]
        self._items[index] = value
        self.on_set_item.emit(ItemSet(index, value, old))
        self._notify()

    def __delitem__(self, index: int) -> None:
        self.pop(index)

    def append(self, item: T) -> None:
        self.insert(len(self._items), item)

    def extend(self, items: Iterable[T]) -> None:
        self.insert_range(len(self._items), items)

    def insert(self, index: int, item: T) -> None:
        self.insert_range(index, [item])

    def insert_range(self, index: int, items: Iterable[T]) -> None:
        added = tuple(items)
        index = _clamp(index, len(self._items))
        self._items[index:index] = added
        self.on_add_item.emit(ItemsAdded(index, added))
        self._notify()

    def pop(self, index: int = -1) -> T:
        if index < 0:
            index += len(self._items)
        if not 0 <= index < len(self._items):
            raise IndexError("pop index out of range")
        item = self._items.pop(index)
        self.on_remove_item.emit(ItemsRemoved(index, (item,)))
        self._notify()
        return item

    def remove(self, item: T) -> bool:
        """Remove the first occurrence. Returns False (and notifies nothing) if absent."""
        try:
            index = self._items.index(item)
        except ValueError:
            return False
        self.pop(index)
        return True

    def remove_range(self, index: int, count: int) -> None:
        if index < 0 or count < 0 or index + count > len(self._items):
            raise IndexError(f"range [{index}, {index + count}) out of bounds")
        removed = tuple(self._items[index:index + count])
        del self._items[index:index + count]
        self.on_remove_item.emit(ItemsRemoved(index, removed))
        self._notify()

    def remove_where(self, predicate: Callable[[T], bool]) -> int:
        """Remove every item matching predicate. Returns how many were removed."""
        kept = [item for item in self._items if not predicate(item)]
        removed = len(self._items) - len(kept)
        self._items[:] = kept
        self.on_remove_where.emit(ItemsRemovedWhere(predicate, removed))
        self._notify()
        return removed

    def clear(self) -> None:
        removed = tuple(self._items)
        self._items.clear()
        self.on_remove_item.emit(ItemsRemoved(0, removed))
        self._notify()

    def __repr__(self) -> str:
        return f"ObservableList({self._items!r})"


class KeySet(NamedTuple):
    key: object
    new: object
    old: object


class KeysRemoved(NamedTuple):
    items: tuple


class ObservableDict(Generic[KT, VT]):
    """A dict that participates in tracking as a whole."""

    __slots__ = ("_data", "__notifier__", "on_set_item", "on_remove_item")

    def __init__(self, data: dict[KT, VT] | None = None) -> None:
        self._data: dict[KT, VT] = dict(data) if data else {}
        self.__notifier__ = NotifierNode()
        self.on_set_item: EventStream[KeySet] = EventStream()
        self.on_remove_item: EventStream[KeysRemoved] = EventStream()

    def _track(self) -> None:
        self.__notifier__.notify_read(ITEMS)

    def _notify(self) -> None:
        self.__notifier__.notify_write(ITEMS, self, None)

    # --- Read operations (track) ---

    def __getitem__(self, key: KT) -> VT:
        self._track()
        return self._data[key]

    def get(self, key: KT, default: VT | None = None) -> VT | None:
        self._track()
        return self._data.get(key, default)

    def __contains__(self, key: object) -> bool:
        self._track()
        return key in self._data

    def __len__(self) -> int:
        self._track()
        return len(self._data)

    def __iter__(self) -> Iterator[KT]:
        self._track()
        return iter(list(self._data))

    def keys(self):
        self._track()
        return self._data.keys()

    def values(self):
        self._track()
        return self._data.values()

    def items(self):
        self._track()
        return self._data.items()

    def __bool__(self) -> bool:
        self._track()
        return bool(self._data)

    # --- Write operations (notify) ---

    def __setitem__(self, key: KT, value: VT) -> None:
        old = self._data.get(key)
        self._data[key] = value
        self.on_set_item.emit(KeySet(key, value, old))
        self._notify()

    def __delitem__(self, key: KT) -> None:
        value = self._data.pop(key)
        self.on_remove_item.emit(KeysRemoved(((key, value),)))
        self._notify()

    def pop(self, key: KT, default=_MISSING):
        if key not in self._data:
            if default is _MISSING:
                raise KeyError(key)
            return default
        value = self._data[key]
        del self[key]
        return value

    def update(self, other=None, **kwargs) -> None:
        """Set several keys with a single tracking notification."""
        incoming = dict(other or {}, **kwargs)
        if not incoming:
            return
        for key, value in incoming.items():
            old = self._data.get(key)
            self._data[key] = value
            self.on_set_item.emit(KeySet(key, value, old))
        self._notify()

    def setdefault(self, key: KT, default: VT | None = None) -> VT:
        if key not in self._data:
            self[key] = default
        return self._data[key]

    def clear(self) -> None:
        removed = tuple(self._data.items())
        self._data.clear()
        self.on_remove_item.emit(KeysRemoved(removed))
        self._notify()

    def __repr__(self) -> str:
        return f"ObservableDict({self._data!r})"


def _clamp(index: int, length: int) -> int:
    if index < 0:
        index += length
    return max(0, min(index, length))
