"""Tests for pawfeed.gallery - wiring of providers, feed and viewer."""

from __future__ import annotations

import random
from typing import Any

import httpx
import pytest

from pawfeed import FilterMode, Gallery, HttpClient, SourceType, ViewerPhase, get_settings
from pawfeed.adapter.cat import TheCatApiAdapter
from pawfeed.adapter.dog import DogCeoAdapter
from pawfeed.testing import FakeImageSource

# =============================================================================
# Test Fixtures
# =============================================================================


def provider_handler(request: httpx.Request) -> httpx.Response:
    """Answers like dog.ceo and TheCatAPI."""
    if request.url.host == "dog.ceo":
        count = int(request.url.path.rsplit("/", 1)[-1])
        urls = [f"https://images.dog.ceo/breeds/beagle/{i}.jpg" for i in range(count)]
        # One image on a host outside the allow-list.
        urls[-1] = "https://tracker.example.net/pixel.gif"
        return httpx.Response(200, json={"message": urls, "status": "success"})
    if request.url.host == "api.thecatapi.com":
        limit = int(request.url.params["limit"])
        return httpx.Response(200, json=[{"id": str(i), "url": f"https://cdn2.thecatapi.com/images/{i}.jpg"} for i in range(limit)])
    return httpx.Response(404)


@pytest.fixture
def fake_sources() -> dict[SourceType, Any]:
    return {
        SourceType.PRIMARY: FakeImageSource(SourceType.PRIMARY),
        SourceType.SECONDARY: FakeImageSource(SourceType.SECONDARY),
    }


@pytest.fixture
def settings():
    return get_settings(page_size=4, prefill_cap=2, close_delay=0.01)


# =============================================================================
# Tests
# =============================================================================


class TestGalleryWiring:
    """Tests for Gallery construction."""

    def test_builds_http_adapters(self) -> None:
        gallery = Gallery(get_settings(secondary_api_key="live_x"))

        sources = gallery.sources
        assert isinstance(sources[SourceType.PRIMARY], DogCeoAdapter)
        assert isinstance(sources[SourceType.SECONDARY], TheCatApiAdapter)
        assert sources[SourceType.SECONDARY].api_key == "live_x"
        assert sources[SourceType.PRIMARY].client is sources[SourceType.SECONDARY].client

    def test_settings_flow_into_components(self, settings, fake_sources) -> None:
        gallery = Gallery(settings, sources=fake_sources)

        assert gallery.feed.page_size == 4
        assert gallery.feed.prefill_cap == 2
        assert gallery.viewer.close_delay == 0.01
        assert gallery.settings is settings

    def test_info(self, settings, fake_sources) -> None:
        info = Gallery(settings, sources=fake_sources).info()
        assert info["sources"] == {"primary": "fake-primary", "secondary": "fake-secondary"}
        assert info["filter"] == "all"
        assert info["viewer_phase"] == "closed"
        assert info["feed_length"] == 0


class TestGalleryLifecycle:
    """Tests for the async context manager."""

    async def test_enter_loads_first_page(self, settings, fake_sources) -> None:
        async with Gallery(settings, sources=fake_sources) as gallery:
            assert gallery.feed.loading is True
            await gallery.feed.wait_idle()

            feed, viewer = gallery.snapshot()
            assert len(feed) == 8
            assert viewer.phase is ViewerPhase.CLOSED

    async def test_browse_filter_and_view(self, settings, fake_sources) -> None:
        async with Gallery(settings, sources=fake_sources, rng=random.Random(5)) as gallery:
            await gallery.feed.wait_idle()

            gallery.feed.set_filter(FilterMode.SECONDARY_ONLY)
            assert gallery.feed.feed == ()
            await gallery.feed.wait_idle()

            item = gallery.feed.feed[0]
            assert item.source_type is SourceType.SECONDARY
            gallery.viewer.select(item)
            assert gallery.viewer.scroll_locked
            gallery.viewer.request_close()
            assert await gallery.viewer.wait_closed() is True

    async def test_end_to_end_over_http(self, settings) -> None:
        client = HttpClient(
            transport=httpx.MockTransport(provider_handler),
            rate_limit=1000.0,
            backoff_base=0.0,
        )
        async with client:
            async with Gallery(settings, client=client) as gallery:
                await gallery.feed.wait_idle()
                feed = gallery.feed.feed

        # 4 dogs (one off-allow-list host dropped) + 4 cats
        assert len(feed) == 7
        assert sum(1 for i in feed if i.source_type is SourceType.PRIMARY) == 3
        assert all(i.host in settings.allowed_image_hosts for i in feed)

    async def test_provider_outage_degrades(self, settings) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.host == "api.thecatapi.com":
                return httpx.Response(503)
            return provider_handler(request)

        client = HttpClient(transport=httpx.MockTransport(handler), rate_limit=1000.0, max_retries=1, backoff_base=0.0)
        async with client:
            async with Gallery(settings, client=client) as gallery:
                await gallery.feed.wait_idle()
                assert len(gallery.feed.feed) == 3
                assert gallery.feed.stats.source_failures == 1
                assert gallery.feed.loading is False
