"""Actions: named, reusable mutations bound to a store.

An action wraps `fn(state, *args, **kwargs)` so that each call runs as
one store.update() batch. Listeners fire once, after fn returns, no
matter how many properties it wrote.
"""

from __future__ import annotations

import functools
from typing import TYPE_CHECKING, Callable, Concatenate, ParamSpec, TypeVar

if TYPE_CHECKING:
    from reactree.store import ReactiveStore

P = ParamSpec("P")
R = TypeVar("R")


def action(store: ReactiveStore) -> Callable[[Callable[Concatenate[object, P], R]], Callable[P, R]]:
    """Decorator factory: batch every call of fn into one update of store.

    Usage:
        store = ReactiveStore(Foo())

        @action(store)
        def rename(state, bar, baz):
            state.bar = bar
            state.baz = baz

        rename("wow", 42)
        # listeners of bar/baz fire once, seeing both values
    """

    def decorator(fn: Callable[Concatenate[object, P], R]) -> Callable[P, R]:
        @functools.wraps(fn)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            return store.update(lambda state: fn(state, *args, **kwargs))

        return wrapper

    return decorator
