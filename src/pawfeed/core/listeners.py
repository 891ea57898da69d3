"""Change listeners for the rendering layer.

Both the feed controller and the viewer push a fresh snapshot to every
subscriber after each state change.

Example:
    >>> from pawfeed.core.listeners import ListenerSet
    >>> seen = []
    >>> listeners = ListenerSet("demo")
    >>> unsubscribe = listeners.subscribe(seen.append)
    >>> listeners.emit(1)
    >>> unsubscribe()
    >>> listeners.emit(2)
    >>> seen
    [1]
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Generic, TypeVar

logger = logging.getLogger("pawfeed.listeners")

T = TypeVar("T")


class ListenerSet(Generic[T]):
    """Ordered set of callbacks receiving snapshots of type ``T``."""

    def __init__(self, owner: str) -> None:
        self._owner = owner
        self._listeners: list[Callable[[T], None]] = []

    def __len__(self) -> int:
        return len(self._listeners)

    def subscribe(self, listener: Callable[[T], None]) -> Callable[[], None]:
        """Register ``listener``; returns a function that unregisters it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def emit(self, snapshot: T) -> None:
        """Deliver ``snapshot`` to every listener.

        A failing listener is logged and skipped; the owner's state change
        has already happened and must not be undone by a renderer bug.
        """
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception:
                logger.exception("%s listener %r failed", self._owner, listener)
