"""Base image source adapter.

Provides the ImageSource protocol and BaseImageAdapter base class for
adapters that fetch one page of image URLs from an upstream provider and
normalize it into FeedItems.

Example:
    >>> from pawfeed.adapter.base import BaseImageAdapter, ImageSource
    >>> hasattr(ImageSource, "fetch_batch")
    True
    >>> hasattr(BaseImageAdapter, "fetch_batch")
    True
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable
from datetime import UTC, datetime
from typing import Any, Protocol, runtime_checkable

from pydantic import ValidationError

from pawfeed.core.exceptions import MalformedPayloadError, UpstreamError
from pawfeed.http.client import HttpClient, HttpClientError, InvalidJSONError
from pawfeed.models.base import SourceType
from pawfeed.models.item import FeedItem

logger = logging.getLogger("pawfeed.adapter")


@runtime_checkable
class ImageSource(Protocol):
    """Protocol defining an upstream image source.

    The feed controller only depends on this interface, so tests can swap
    in the fakes from ``pawfeed.testing``.
    """

    @property
    def name(self) -> str:
        """Source name/identifier."""
        ...

    @property
    def source_type(self) -> SourceType:
        """Tag applied to every item this source yields."""
        ...

    async def fetch_batch(self, count: int) -> list[FeedItem]:
        """Fetch up to ``count`` items.

        Raises:
            UpstreamError: If the provider could not be reached or
                answered with a non-JSON body.
        """
        ...

    async def initialize(self) -> None:
        """Initialize the source (open connections, etc.)."""
        ...

    async def close(self) -> None:
        """Clean up resources."""
        ...


class BaseImageAdapter(ABC):
    """Base class for HTTP image providers.

    Subclasses implement ``_fetch_payload()`` to issue the request and
    ``_extract_urls()`` to pull the raw URL values out of the decoded JSON.
    Everything else (error translation, entry validation, host filtering,
    bookkeeping) lives here.

    Example:
        >>> class StaticAdapter(BaseImageAdapter):
        ...     async def _fetch_payload(self, count):
        ...         return {"urls": ["https://images.dog.ceo/a.jpg"] * count}
        ...     def _extract_urls(self, payload):
        ...         return payload.get("urls")
    """

    def __init__(
        self,
        name: str,
        source_type: SourceType,
        *,
        client: HttpClient | None = None,
        allowed_hosts: Iterable[str] = (),
    ) -> None:
        """Initialize the base adapter.

        Args:
            name: Adapter name/identifier.
            source_type: Tag for produced items.
            client: Shared HTTP client. When omitted the adapter creates
                and owns one.
            allowed_hosts: Image hosts to accept; empty accepts any host.
        """
        self._name = name
        self._source_type = source_type
        self._owns_client = client is None
        self._client = client if client is not None else HttpClient()
        self._allowed_hosts = frozenset(h.lower() for h in allowed_hosts)
        self._initialized = False

        self._last_fetch_at: datetime | None = None
        self._last_fetch_count: int = 0
        self._last_fetch_errors: int = 0

    @property
    def name(self) -> str:
        """Adapter name."""
        return self._name

    @property
    def source_type(self) -> SourceType:
        """Tag applied to produced items."""
        return self._source_type

    @property
    def client(self) -> HttpClient:
        """HTTP client used for requests."""
        return self._client

    @property
    def allowed_hosts(self) -> frozenset[str]:
        """Accepted image hosts (empty means any)."""
        return self._allowed_hosts

    @property
    def last_fetch_at(self) -> datetime | None:
        """When the last successful fetch finished."""
        return self._last_fetch_at

    @property
    def last_fetch_count(self) -> int:
        """Number of items from last fetch."""
        return self._last_fetch_count

    @property
    def last_fetch_errors(self) -> int:
        """Number of entries skipped in the last fetch."""
        return self._last_fetch_errors

    @property
    def info(self) -> dict[str, Any]:
        """Source information."""
        return {
            "name": self._name,
            "source_type": self._source_type.value,
            "initialized": self._initialized,
            "last_fetch_at": self._last_fetch_at,
            "last_fetch_count": self._last_fetch_count,
            "last_fetch_errors": self._last_fetch_errors,
        }

    async def initialize(self) -> None:
        """Initialize the adapter. The HTTP connection opens on first use."""
        self._initialized = True

    async def close(self) -> None:
        """Clean up resources."""
        self._initialized = False
        if self._owns_client:
            await self._client.close()

    async def __aenter__(self) -> BaseImageAdapter:
        """Async context manager entry."""
        await self.initialize()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit."""
        await self.close()

    async def fetch_batch(self, count: int) -> list[FeedItem]:
        """Fetch one page and normalize it.

        A payload that decodes but has an unexpected shape yields an empty
        list. Individual entries that are not usable URLs are skipped.

        Args:
            count: Number of items to request (>= 1).

        Returns:
            Items tagged with this adapter's source type.

        Raises:
            ValueError: If count is less than 1.
            MalformedPayloadError: If the body is not valid JSON.
            UpstreamError: If the request failed.
        """
        if count < 1:
            raise ValueError(f"count must be >= 1, got {count}")

        self._last_fetch_count = 0
        self._last_fetch_errors = 0

        try:
            payload = await self._fetch_payload(count)
        except InvalidJSONError as e:
            raise MalformedPayloadError(str(e), source=self._name, cause=e) from e
        except HttpClientError as e:
            raise UpstreamError(str(e), source=self._name, cause=e) from e

        raw_urls = self._extract_urls(payload)
        if not isinstance(raw_urls, list):
            logger.warning(
                "%s: unexpected payload shape (%s), treating as no items",
                self._name,
                type(payload).__name__,
            )
            self._last_fetch_at = datetime.now(UTC)
            return []

        items: list[FeedItem] = []
        for value in raw_urls:
            item = self._to_item(value)
            if item is None:
                self._last_fetch_errors += 1
                continue
            items.append(item)

        if self._last_fetch_errors:
            logger.debug("%s: skipped %d unusable entries", self._name, self._last_fetch_errors)

        self._last_fetch_count = len(items)
        self._last_fetch_at = datetime.now(UTC)
        return items

    def _to_item(self, value: Any) -> FeedItem | None:
        """Turn a raw URL value into a FeedItem, or None to skip it."""
        if not isinstance(value, str):
            return None
        try:
            item = FeedItem(url=value, source_type=self._source_type)
        except ValidationError:
            return None
        if self._allowed_hosts and item.host not in self._allowed_hosts:
            return None
        return item

    @abstractmethod
    async def _fetch_payload(self, count: int) -> Any:
        """Request ``count`` items and return the decoded JSON body.

        Raises:
            HttpClientError: On transport failure.
        """
        ...

    @abstractmethod
    def _extract_urls(self, payload: Any) -> list[Any] | None:
        """Return the raw URL values, or None if the shape is unexpected."""
        ...
