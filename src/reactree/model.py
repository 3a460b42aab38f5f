"""Observable models — plain classes with instrumented properties.

Declare tracked properties on a Model subclass:

    class Corge(Model):
        grault = tracked(0)
        waldo = tracked("")

    class Foo(Model):
        bar = tracked("")
        corge = tracked(factory=Corge)     # eagerly initialized
        blob = tracked(None, shallow=True)  # opaque, never reparented

Reading a tracked property reports `(name,)` to the instance's notifier;
writing a different value stores it, moves nested observables in the
containment tree, then reports the write. Writing an equal value does
nothing at all.
"""

from __future__ import annotations

from typing import Any, Callable, Generic, TypeVar, overload

from reactree.notifier import NotifierNode, notifier_of

T = TypeVar("T")


class tracked(Generic[T]):
    """Data descriptor for a property that notifies reads and writes."""

    def __init__(
        self,
        default: T | None = None,
        *,
        factory: Callable[[], T] | None = None,
        shallow: bool = False,
    ) -> None:
        self.default = default
        self.factory = factory
        self.shallow = shallow
        self.name = ""

    def __set_name__(self, owner: type, name: str) -> None:
        self.name = name

    @overload
    def __get__(self, instance: None, owner: type) -> tracked[T]: ...

    @overload
    def __get__(self, instance: object, owner: type) -> T: ...

    def __get__(self, instance, owner):
        if instance is None:
            return self
        instance.__notifier__.notify_read((self.name,))
        return instance.__dict__.get(self.name, self.default)

    def __set__(self, instance: Any, value: T) -> None:
        old = instance.__dict__.get(self.name, self.default)
        if old is value or old == value:
            return

        node: NotifierNode = instance.__notifier__
        if not self.shallow:
            new_child = notifier_of(value)
            if new_child is not None:
                # Raises CycleError before anything is changed.
                new_child.attach_to(node, self.name)
            old_child = notifier_of(old)
            if old_child is not None and old_child.parent is node and old_child.name == self.name:
                old_child.detach()

        instance.__dict__[self.name] = value
        node.notify_write((self.name,), value, old)

    def __repr__(self) -> str:
        flags = []
        if self.factory is not None:
            flags.append(f"factory={getattr(self.factory, '__name__', self.factory)!s}")
        if self.shallow:
            flags.append("shallow")
        extra = ", " + ", ".join(flags) if flags else ""
        return f"tracked({self.name!r}{extra})"


class Model:
    """Base class for observable state objects.

    Each instance owns a NotifierNode (`__notifier__`). Properties declared
    with `factory=` are filled with a fresh value at construction; keyword
    arguments then override any tracked property.
    """

    __tracked__: dict[str, tracked] = {}

    def __init_subclass__(cls, **kwargs) -> None:
        super().__init_subclass__(**kwargs)
        props: dict[str, tracked] = {}
        for klass in reversed(cls.__mro__):
            for name, attr in vars(klass).items():
                if isinstance(attr, tracked):
                    props[name] = attr
        cls.__tracked__ = props

    def __init__(self, **values: Any) -> None:
        self.__notifier__ = NotifierNode()
        props = type(self).__tracked__
        unknown = set(values) - set(props)
        if unknown:
            raise TypeError(f"{type(self).__name__} has no tracked properties {sorted(unknown)}")
        for name, prop in props.items():
            if prop.factory is not None and name not in values:
                setattr(self, name, prop.factory())
        for name, value in values.items():
            setattr(self, name, value)

    def __repr__(self) -> str:
        # Reads __dict__ directly so repr() never registers dependencies.
        fields = ", ".join(
            f"{name}={self.__dict__.get(name, prop.default)!r}"
            for name, prop in type(self).__tracked__.items()
        )
        return f"{type(self).__name__}({fields})"
