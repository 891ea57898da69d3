"""Gallery - wires settings, providers, feed and viewer together.

The Gallery is what a rendering layer holds on to. It owns the shared
HTTP client and the two provider adapters, and exposes the feed controller
and the viewer state machine.

Example:
    >>> from pawfeed import Gallery, get_settings
    >>> async def example():
    ...     async with Gallery(get_settings(page_size=5)) as gallery:
    ...         await gallery.feed.load_more()
    ...         print(len(gallery.feed.feed))
"""

from __future__ import annotations

import logging
import random
from typing import Any

from pawfeed.adapter.base import ImageSource
from pawfeed.adapter.cat import TheCatApiAdapter
from pawfeed.adapter.dog import DogCeoAdapter
from pawfeed.controller import FeedController
from pawfeed.core.config import Settings, get_settings
from pawfeed.core.log import configure_logging
from pawfeed.http.client import HttpClient
from pawfeed.models.base import SourceType
from pawfeed.models.state import FeedSnapshot, ViewerSnapshot
from pawfeed.viewer import ViewerStateMachine

logger = logging.getLogger("pawfeed.gallery")


class Gallery:
    """Feed controller plus viewer, backed by the configured providers.

    Args:
        settings: Configuration (default: loaded from the environment).
        sources: Override the HTTP adapters, e.g. with test fakes.
        client: Shared HTTP client; created from settings if omitted.
        setup_logging: Install the pawfeed log handler from settings.
        rng: Random source for the feed merger.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        sources: dict[SourceType, ImageSource] | None = None,
        client: HttpClient | None = None,
        setup_logging: bool = False,
        rng: random.Random | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        if setup_logging:
            configure_logging(self._settings)

        self._owns_client = client is None and sources is None
        self._client = client
        if sources is None:
            if self._client is None:
                self._client = HttpClient(
                    rate_limit=self._settings.rate_limit,
                    user_agent=self._settings.user_agent,
                    timeout=self._settings.request_timeout,
                    max_retries=self._settings.max_retries,
                )
            sources = {
                SourceType.PRIMARY: DogCeoAdapter(
                    base_url=self._settings.primary_base_url,
                    client=self._client,
                    allowed_hosts=self._settings.allowed_image_hosts,
                ),
                SourceType.SECONDARY: TheCatApiAdapter(
                    base_url=self._settings.secondary_base_url,
                    api_key=self._settings.secondary_api_key,
                    client=self._client,
                    allowed_hosts=self._settings.allowed_image_hosts,
                ),
            }

        self._sources = sources
        self._feed = FeedController(
            sources,
            page_size=self._settings.page_size,
            prefill_cap=self._settings.prefill_cap,
            rng=rng,
        )
        self._viewer = ViewerStateMachine(close_delay=self._settings.close_delay)

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def feed(self) -> FeedController:
        """The incremental feed controller."""
        return self._feed

    @property
    def viewer(self) -> ViewerStateMachine:
        """The selection/viewer state machine."""
        return self._viewer

    @property
    def sources(self) -> dict[SourceType, ImageSource]:
        return dict(self._sources)

    def snapshot(self) -> tuple[FeedSnapshot, ViewerSnapshot]:
        """Everything a renderer needs for one frame."""
        return self._feed.snapshot(), self._viewer.snapshot()

    def info(self) -> dict[str, Any]:
        """Gallery metadata."""
        return {
            "sources": {st.value: s.name for st, s in self._sources.items()},
            "filter": self._feed.filter.value,
            "feed_length": len(self._feed.feed),
            "loading": self._feed.loading,
            "viewer_phase": self._viewer.phase.value,
            "page_size": self._feed.page_size,
            "prefill_cap": self._feed.prefill_cap,
        }

    async def initialize(self) -> None:
        """Initialize sources and start the first page."""
        for source in self._sources.values():
            await source.initialize()
        self._feed.start()

    async def close(self) -> None:
        """Stop background work and release connections."""
        self._viewer.close()
        await self._feed.aclose()
        for source in self._sources.values():
            try:
                await source.close()
            except Exception:
                logger.exception("closing %s failed", source.name)
        if self._owns_client and self._client is not None:
            await self._client.close()

    async def __aenter__(self) -> Gallery:
        await self.initialize()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()
