"""Dog CEO adapter (PRIMARY source).

``GET {base_url}/breeds/image/random/{count}`` answers with::

    {"message": ["https://images.dog.ceo/breeds/...jpg", ...], "status": "success"}

Example:
    >>> from pawfeed.adapter.dog import DogCeoAdapter
    >>> adapter = DogCeoAdapter()
    >>> adapter.source_type.value
    'primary'
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from pawfeed.adapter.base import BaseImageAdapter
from pawfeed.http.client import HttpClient
from pawfeed.models.base import SourceType

DEFAULT_BASE_URL = "https://dog.ceo/api"

# The provider refuses to return more than this many random images at once.
MAX_PER_REQUEST = 50


class DogCeoAdapter(BaseImageAdapter):
    """Random dog images from dog.ceo."""

    def __init__(
        self,
        *,
        name: str = "dog.ceo",
        base_url: str = DEFAULT_BASE_URL,
        client: HttpClient | None = None,
        allowed_hosts: Iterable[str] = (),
    ) -> None:
        super().__init__(
            name=name,
            source_type=SourceType.PRIMARY,
            client=client,
            allowed_hosts=allowed_hosts,
        )
        self.base_url = base_url.rstrip("/")

    async def _fetch_payload(self, count: int) -> Any:
        count = min(count, MAX_PER_REQUEST)
        return await self.client.get_json(f"{self.base_url}/breeds/image/random/{count}")

    def _extract_urls(self, payload: Any) -> list[Any] | None:
        if not isinstance(payload, dict):
            return None
        message = payload.get("message")
        # On errors the provider puts a string in "message".
        if not isinstance(message, list):
            return None
        return message
