"""Reactree: fine-grained reactive state with path-level dependency tracking."""

from importlib.metadata import version as _version

__version__ = _version("reactree")

from reactree.errors import ReactreeError, CycleError, ReentrantUpdateError
from reactree.notifier import NotifierNode, notifier_of
from reactree.model import Model, tracked
from reactree.containers import ObservableList, ObservableDict
from reactree.binding import DependencyBinding
from reactree.store import ReactiveStore
from reactree.action import action
from reactree.stream import EventStream

__all__ = [
    "ReactiveStore",
    "DependencyBinding",
    "NotifierNode",
    "notifier_of",
    "Model",
    "tracked",
    "ObservableList",
    "ObservableDict",
    "action",
    "EventStream",
    "ReactreeError",
    "CycleError",
    "ReentrantUpdateError",
]
