"""Read-only views handed to the rendering layer.

The controller and the viewer own their state; renderers only ever see
these frozen snapshots.

Example:
    >>> from pawfeed.models.state import FeedSnapshot, FeedStats
    >>> snap = FeedSnapshot()
    >>> snap.feed, snap.loading, snap.filter.value
    ((), False, 'all')
    >>> FeedStats(rounds_started=4, rounds_discarded=1).discard_rate
    0.25
"""

from __future__ import annotations

from dataclasses import dataclass

from pydantic import Field

from pawfeed.models.base import FilterMode, PawFeedModel, ViewerPhase
from pawfeed.models.item import FeedItem


class FeedSnapshot(PawFeedModel):
    """Controller state as seen by the rendering layer."""

    feed: tuple[FeedItem, ...] = Field(default=())
    loading: bool = False
    filter: FilterMode = FilterMode.ALL

    def __len__(self) -> int:
        return len(self.feed)


class ViewerSnapshot(PawFeedModel):
    """Viewer state as seen by the rendering layer.

    Example:
        >>> from pawfeed.models.state import ViewerSnapshot
        >>> ViewerSnapshot().scroll_locked
        False
    """

    selection: FeedItem | None = None
    phase: ViewerPhase = ViewerPhase.CLOSED

    @property
    def scroll_locked(self) -> bool:
        """Background scrolling is suppressed only while fully open."""
        return self.phase is ViewerPhase.OPEN


@dataclass
class FeedStats:
    """Counters describing what the controller has done so far.

    Kept across filter changes; they describe the controller's lifetime.
    """

    rounds_started: int = 0
    rounds_committed: int = 0
    rounds_discarded: int = 0
    rounds_failed: int = 0
    source_failures: int = 0
    items_appended: int = 0
    prefills_fired: int = 0

    @property
    def discard_rate(self) -> float:
        """Share of started rounds whose result was stale (0.0 to 1.0)."""
        if self.rounds_started == 0:
            return 0.0
        return self.rounds_discarded / self.rounds_started
