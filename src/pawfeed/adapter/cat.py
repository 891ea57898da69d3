"""TheCatAPI adapter (SECONDARY source).

``GET {base_url}/images/search?limit={count}`` answers with a list of
image objects::

    [{"id": "abc", "url": "https://cdn2.thecatapi.com/images/abc.jpg", ...}, ...]

Without an API key the provider may return fewer (or more) items than
requested; whatever arrives is passed through.

Example:
    >>> from pawfeed.adapter.cat import TheCatApiAdapter
    >>> adapter = TheCatApiAdapter(api_key="live_123")
    >>> adapter.source_type.value
    'secondary'
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from pawfeed.adapter.base import BaseImageAdapter
from pawfeed.http.client import HttpClient
from pawfeed.models.base import SourceType

DEFAULT_BASE_URL = "https://api.thecatapi.com/v1"


class TheCatApiAdapter(BaseImageAdapter):
    """Random cat images from thecatapi.com."""

    def __init__(
        self,
        *,
        name: str = "thecatapi",
        base_url: str = DEFAULT_BASE_URL,
        api_key: str | None = None,
        client: HttpClient | None = None,
        allowed_hosts: Iterable[str] = (),
    ) -> None:
        super().__init__(
            name=name,
            source_type=SourceType.SECONDARY,
            client=client,
            allowed_hosts=allowed_hosts,
        )
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key

    async def _fetch_payload(self, count: int) -> Any:
        headers = {"x-api-key": self.api_key} if self.api_key else None
        return await self.client.get_json(
            f"{self.base_url}/images/search",
            params={"limit": count},
            headers=headers,
        )

    def _extract_urls(self, payload: Any) -> list[Any] | None:
        if not isinstance(payload, list):
            return None
        return [entry.get("url") if isinstance(entry, dict) else None for entry in payload]
