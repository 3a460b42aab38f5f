"""Reactree exceptions."""

from __future__ import annotations


class ReactreeError(Exception):
    """Base exception for reactree errors."""

    pass


class CycleError(ReactreeError):
    """Raised when attaching a notifier would make it its own ancestor."""

    pass


class ReentrantUpdateError(ReactreeError):
    """Raised when update() is called while the same store is recording or mutating."""

    pass
