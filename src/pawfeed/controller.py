"""Incremental feed controller.

The FeedController owns the feed, the active filter, the loading flag and
the request epoch. Every fetch round captures the epoch it started under
and may only commit its batch if that epoch is still current when the
round finishes; anything else is discarded. In-flight HTTP calls are never
cancelled, their results are just dropped.

Example:
    >>> import asyncio
    >>> from pawfeed.controller import FeedController
    >>> from pawfeed.models.base import SourceType
    >>> from pawfeed.testing import FakeImageSource
    >>> async def example():
    ...     controller = FeedController({
    ...         SourceType.PRIMARY: FakeImageSource(SourceType.PRIMARY),
    ...         SourceType.SECONDARY: FakeImageSource(SourceType.SECONDARY),
    ...     })
    ...     await controller.load_more()
    ...     return len(controller.feed), controller.loading
    >>> asyncio.run(example())
    (20, False)
"""

from __future__ import annotations

import asyncio
import logging
import random
from collections.abc import Callable, Mapping

from pawfeed.adapter.base import ImageSource
from pawfeed.core.exceptions import ConfigurationError, StaleResultDiscarded, UpstreamError
from pawfeed.core.listeners import ListenerSet
from pawfeed.merger import merge
from pawfeed.models.base import FilterMode, SourceType
from pawfeed.models.item import FeedItem
from pawfeed.models.state import FeedSnapshot, FeedStats

logger = logging.getLogger("pawfeed.controller")

DEFAULT_PAGE_SIZE = 10
DEFAULT_PREFILL_CAP = 5


class FeedController:
    """Stateful orchestrator behind the infinite-scroll feed.

    The rendering layer reads ``feed``, ``loading`` and ``filter`` (or a
    ``snapshot()``) and drives the controller only through ``load_more``,
    ``request_more``, ``set_filter`` and ``maybe_prefill``. All mutation
    happens on the event loop thread.

    Args:
        sources: One image source per SourceType.
        page_size: Items requested from each enabled source per round.
        prefill_cap: Automatic loads allowed between filter changes.
        initial_filter: Filter in effect before the first ``set_filter``.
        rng: Random source for the merger.

    Raises:
        ConfigurationError: If a source is missing or mislabeled.
        ValueError: If page_size < 1 or prefill_cap < 0.
    """

    def __init__(
        self,
        sources: Mapping[SourceType, ImageSource],
        *,
        page_size: int = DEFAULT_PAGE_SIZE,
        prefill_cap: int = DEFAULT_PREFILL_CAP,
        initial_filter: FilterMode = FilterMode.ALL,
        rng: random.Random | None = None,
    ) -> None:
        for source_type in SourceType:
            source = sources.get(source_type)
            if source is None:
                raise ConfigurationError(f"No image source configured for {source_type.value}")
            if source.source_type is not source_type:
                raise ConfigurationError(
                    f"Source '{source.name}' yields {source.source_type.value} items "
                    f"but is registered for {source_type.value}"
                )
        if page_size < 1:
            raise ValueError(f"page_size must be >= 1, got {page_size}")
        if prefill_cap < 0:
            raise ValueError(f"prefill_cap must be >= 0, got {prefill_cap}")

        self._sources = dict(sources)
        self._page_size = page_size
        self._prefill_cap = prefill_cap
        self._rng = rng

        self._feed: list[FeedItem] = []
        self._filter = FilterMode(initial_filter)
        self._epoch = 0
        self._loading = False
        self._prefill_budget = 0
        self._started = False

        self._tasks: set[asyncio.Task[None]] = set()
        self._listeners: ListenerSet[FeedSnapshot] = ListenerSet("feed")
        self._stats = FeedStats()

    # ------------------------------------------------------------------
    # Read state
    # ------------------------------------------------------------------

    @property
    def feed(self) -> tuple[FeedItem, ...]:
        """Items in display order."""
        return tuple(self._feed)

    @property
    def loading(self) -> bool:
        """True while the most recent round is outstanding."""
        return self._loading

    @property
    def filter(self) -> FilterMode:
        """Active category filter."""
        return self._filter

    @property
    def epoch(self) -> int:
        """Number of rounds started so far."""
        return self._epoch

    @property
    def prefill_budget(self) -> int:
        """Automatic loads fired since the last filter change."""
        return self._prefill_budget

    @property
    def prefill_cap(self) -> int:
        return self._prefill_cap

    @property
    def page_size(self) -> int:
        return self._page_size

    @property
    def stats(self) -> FeedStats:
        """Lifetime counters."""
        return self._stats

    @property
    def pending_rounds(self) -> int:
        """Scheduled rounds that have not finished yet."""
        return len(self._tasks)

    def snapshot(self) -> FeedSnapshot:
        """Immutable view for the rendering layer."""
        return FeedSnapshot(feed=tuple(self._feed), loading=self._loading, filter=self._filter)

    def subscribe(self, listener: Callable[[FeedSnapshot], None]) -> Callable[[], None]:
        """Call ``listener`` with a snapshot after every state change.

        Returns:
            Function that removes the listener.
        """
        return self._listeners.subscribe(listener)

    # ------------------------------------------------------------------
    # Mutators
    # ------------------------------------------------------------------

    async def load_more(self) -> None:
        """Fetch one page from every enabled source and append it.

        The round runs as a tracked task, so ``wait_idle()`` and
        ``aclose()`` cover it like a background round.

        Source failures become empty batches and any other failure is
        logged and treated as an empty round.

        Raises:
            asyncio.CancelledError: If the round is cancelled by ``aclose()``.
        """
        await self.request_more()

    def request_more(self) -> asyncio.Task[None]:
        """Start a round in the background and return its task.

        The epoch is bumped before this returns, so any round already in
        flight is stale from this point on.

        Raises:
            RuntimeError: If called without a running event loop.
        """
        loop = asyncio.get_running_loop()
        epoch, mode = self._begin_round()
        task = loop.create_task(self._run_round(epoch, mode), name=f"pawfeed-round-{epoch}")
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    def start(self) -> asyncio.Task[None] | None:
        """Kick off the first page. Later calls do nothing."""
        if self._started:
            return None
        self._started = True
        return self.request_more()

    def set_filter(self, mode: FilterMode | str) -> None:
        """Switch category, clearing the feed and reloading.

        The feed is empty when this returns; the reload runs in the
        background. Setting the current filter again is a no-op.

        Raises:
            ValueError: If ``mode`` is not a FilterMode value.
            RuntimeError: If called without a running event loop.
        """
        mode = FilterMode(mode)
        if mode is self._filter:
            return
        # Fail before clearing anything if there is no loop to reload on.
        asyncio.get_running_loop()

        logger.info("filter %s -> %s, clearing %d items", self._filter.value, mode.value, len(self._feed))
        self._filter = mode
        self._feed.clear()
        self._prefill_budget = 0
        self._started = True
        self.request_more()

    def maybe_prefill(self, viewport_is_scrollable: bool) -> bool:
        """Load another page if the viewport cannot scroll yet.

        Called by the rendering layer after each render. Fires only when
        idle, when the page is not scrollable and while the prefill budget
        lasts.

        Returns:
            True if a load was started.
        """
        if self._loading or viewport_is_scrollable:
            return False
        if self._prefill_budget >= self._prefill_cap:
            return False
        self.request_more()
        self._prefill_budget += 1
        self._stats.prefills_fired += 1
        logger.debug("prefill %d/%d", self._prefill_budget, self._prefill_cap)
        return True

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def wait_idle(self) -> None:
        """Wait for every scheduled round to finish."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def aclose(self) -> None:
        """Cancel scheduled rounds."""
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        self._loading = False

    async def __aenter__(self) -> FeedController:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()

    # ------------------------------------------------------------------
    # Rounds
    # ------------------------------------------------------------------

    def _begin_round(self) -> tuple[int, FilterMode]:
        self._epoch += 1
        self._stats.rounds_started += 1
        self._loading = True
        self._notify()
        logger.debug("round %d started (filter=%s)", self._epoch, self._filter.value)
        return self._epoch, self._filter

    async def _run_round(self, epoch: int, mode: FilterMode) -> None:
        try:
            enabled = mode.enabled_sources()
            fetched = await asyncio.gather(*(self._fetch_source(st) for st in enabled))
            batches = dict(zip(enabled, fetched))
            batch = merge(
                (batches.get(st, []) for st in SourceType),
                rng=self._rng,
            )
        except Exception:
            logger.exception("round %d failed, treating it as an empty batch", epoch)
            self._stats.rounds_failed += 1
            batch = []

        try:
            self._commit(epoch, batch)
        except StaleResultDiscarded as e:
            self._stats.rounds_discarded += 1
            logger.debug("discarding %d items: %s", len(batch), e)

    async def _fetch_source(self, source_type: SourceType) -> list[FeedItem]:
        source = self._sources[source_type]
        try:
            return await source.fetch_batch(self._page_size)
        except UpstreamError as e:
            self._stats.source_failures += 1
            logger.warning("%s failed (%s), using an empty batch", source.name, e)
        except Exception:
            self._stats.source_failures += 1
            logger.exception("%s raised unexpectedly, using an empty batch", source.name)
        return []

    def _commit(self, epoch: int, batch: list[FeedItem]) -> None:
        """Single point where fetched items reach the feed."""
        if epoch != self._epoch:
            raise StaleResultDiscarded(epoch, self._epoch)

        self._feed.extend(batch)
        self._loading = False
        self._stats.rounds_committed += 1
        self._stats.items_appended += len(batch)
        logger.info("round %d appended %d items (feed=%d)", epoch, len(batch), len(self._feed))
        self._notify()

    def _notify(self) -> None:
        if len(self._listeners):
            self._listeners.emit(self.snapshot())
