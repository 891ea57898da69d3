"""Selection/viewer state machine.

Drives the full-screen viewer through CLOSED -> OPEN -> CLOSING -> CLOSED.
Closing is two-step: ``request_close()`` enters CLOSING right away so the
renderer can start its exit transition, and a completion scheduled
``close_delay`` seconds later returns to CLOSED and drops the selection.
The selected image therefore stays mounted for the whole transition.

Each close request carries a token. A completion only runs if its token is
still the latest, so a close that was overtaken by a reopen cannot clear
the new selection.

Example:
    >>> import asyncio
    >>> from pawfeed.models.base import SourceType
    >>> from pawfeed.models.item import FeedItem
    >>> from pawfeed.viewer import ViewerStateMachine
    >>> async def example():
    ...     viewer = ViewerStateMachine(close_delay=0.01)
    ...     viewer.select(FeedItem(url="https://images.dog.ceo/a.jpg", source_type=SourceType.PRIMARY))
    ...     viewer.request_close()
    ...     closing = viewer.phase.value
    ...     await viewer.wait_closed()
    ...     return closing, viewer.phase.value, viewer.selection
    >>> asyncio.run(example())
    ('closing', 'closed', None)
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable

from pawfeed.core.listeners import ListenerSet
from pawfeed.models.base import ViewerPhase
from pawfeed.models.item import FeedItem
from pawfeed.models.state import ViewerSnapshot

logger = logging.getLogger("pawfeed.viewer")

DEFAULT_CLOSE_DELAY = 0.2


class ViewerStateMachine:
    """Owns the viewer's selection and phase.

    Args:
        close_delay: Seconds between entering CLOSING and reaching CLOSED.

    Raises:
        ValueError: If close_delay is negative.
    """

    def __init__(self, *, close_delay: float = DEFAULT_CLOSE_DELAY) -> None:
        if close_delay < 0:
            raise ValueError(f"close_delay must be >= 0, got {close_delay}")
        self._close_delay = close_delay
        self._selection: FeedItem | None = None
        self._phase = ViewerPhase.CLOSED
        self._close_token = 0
        self._close_handle: asyncio.TimerHandle | None = None
        self._close_waiter: asyncio.Future[bool] | None = None
        self._listeners: ListenerSet[ViewerSnapshot] = ListenerSet("viewer")

    @property
    def selection(self) -> FeedItem | None:
        """Item shown in the viewer; kept until CLOSING has finished."""
        return self._selection

    @property
    def phase(self) -> ViewerPhase:
        return self._phase

    @property
    def scroll_locked(self) -> bool:
        """Renderers suppress background scrolling while this is True."""
        return self._phase is ViewerPhase.OPEN

    @property
    def close_delay(self) -> float:
        return self._close_delay

    def snapshot(self) -> ViewerSnapshot:
        return ViewerSnapshot(selection=self._selection, phase=self._phase)

    def subscribe(self, listener: Callable[[ViewerSnapshot], None]) -> Callable[[], None]:
        """Call ``listener`` with a snapshot after every transition."""
        return self._listeners.subscribe(listener)

    def select(self, item: FeedItem) -> None:
        """Show ``item``.

        Valid from any phase. From OPEN it replaces the item; from CLOSING
        it reopens and the pending close completion becomes a no-op.
        """
        if self._phase is ViewerPhase.CLOSING:
            self._close_token += 1
            self._settle_waiter(False)
            logger.debug("reopened during close, token now %d", self._close_token)

        self._selection = item
        self._phase = ViewerPhase.OPEN
        self._listeners.emit(self.snapshot())

    def request_close(self) -> bool:
        """Start closing the viewer.

        Only acts from OPEN; calls in CLOSING or CLOSED do nothing.

        Returns:
            True if a close was started.

        Raises:
            RuntimeError: If called from OPEN without a running event loop.
        """
        if self._phase is not ViewerPhase.OPEN:
            return False

        loop = asyncio.get_running_loop()
        self._close_token += 1
        token = self._close_token
        self._phase = ViewerPhase.CLOSING
        self._close_waiter = loop.create_future()
        self._close_handle = loop.call_later(self._close_delay, self._complete_close, token)
        self._listeners.emit(self.snapshot())
        return True

    async def wait_closed(self) -> bool:
        """Wait for the pending close to settle.

        Returns:
            True if the viewer reached CLOSED, False if it was reopened
            first or no close was pending while open.
        """
        if self._close_waiter is not None:
            return await asyncio.shield(self._close_waiter)
        return self._phase is ViewerPhase.CLOSED

    def close(self) -> None:
        """Cancel a pending completion; used when tearing the viewer down."""
        if self._close_handle is not None:
            self._close_handle.cancel()
            self._close_handle = None
        self._settle_waiter(False)

    def _complete_close(self, token: int) -> None:
        if token != self._close_token or self._phase is not ViewerPhase.CLOSING:
            logger.debug("ignoring close completion %d (current %d)", token, self._close_token)
            return

        self._close_handle = None
        self._phase = ViewerPhase.CLOSED
        self._selection = None
        self._settle_waiter(True)
        self._listeners.emit(self.snapshot())

    def _settle_waiter(self, closed: bool) -> None:
        waiter, self._close_waiter = self._close_waiter, None
        if waiter is not None and not waiter.done():
            waiter.set_result(closed)
