"""HTTP client used by the upstream image adapters.

Provides a small async client with:
- Rate limiting shared across providers
- Bounded retry with exponential backoff on transient failures
- JSON decoding that reports undecodable bodies separately

Example:
    >>> from pawfeed.http import HttpClient
    >>>
    >>> async with HttpClient(base_url="https://dog.ceo/api") as client:
    ...     payload = await client.get_json("/breeds/image/random/10")
"""

from __future__ import annotations

import asyncio
import json
import logging
import math
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Any

import httpx

from pawfeed.http.rate_limiter import RateLimiter

logger = logging.getLogger("pawfeed.http")

RETRYABLE_STATUS = (500, 502, 503, 504)
DEFAULT_RETRY_AFTER = 1.0


def parse_retry_after(value: str | None) -> float:
    """Seconds to wait according to a Retry-After header.

    Accepts delta-seconds or an HTTP-date. Dates in the past give 0 and
    missing or unparseable values give DEFAULT_RETRY_AFTER.

    Example:
        >>> parse_retry_after("2.5")
        2.5
        >>> parse_retry_after("Wed, 21 Oct 2015 07:28:00 GMT")
        0.0
        >>> parse_retry_after("soon")
        1.0
    """
    if value is None:
        return DEFAULT_RETRY_AFTER
    try:
        seconds = float(value)
    except ValueError:
        pass
    else:
        return max(seconds, 0.0) if math.isfinite(seconds) else DEFAULT_RETRY_AFTER
    try:
        when = parsedate_to_datetime(value)
    except (TypeError, ValueError):
        logger.debug("unparseable Retry-After %r", value)
        return DEFAULT_RETRY_AFTER
    if when.tzinfo is None:
        when = when.replace(tzinfo=timezone.utc)
    return max((when - datetime.now(timezone.utc)).total_seconds(), 0.0)


class HttpClientError(Exception):
    """Base exception for HTTP client errors."""

    pass


class RateLimitError(HttpClientError):
    """Raised when rate limited by server."""

    def __init__(self, retry_after: float):
        self.retry_after = retry_after
        super().__init__(f"Rate limited, retry after {retry_after}s")


class InvalidJSONError(HttpClientError):
    """Raised when a response body cannot be decoded as JSON."""

    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"Invalid JSON from {url}: {reason}")


class HttpClient:
    """Async HTTP client with rate limiting and retry support.

    Example:
        >>> async with HttpClient(rate_limit=10.0, max_retries=1) as client:
        ...     data = await client.get_json("https://api.thecatapi.com/v1/images/search")

    Attributes:
        rate_limit: Requests per second limit
        user_agent: User-Agent header value
        timeout: Default request timeout in seconds
        max_retries: Maximum retry attempts
    """

    def __init__(
        self,
        base_url: str = "",
        rate_limit: float = 10.0,
        user_agent: str = "PawFeed/1.0",
        timeout: float = 10.0,
        max_retries: int = 2,
        headers: dict[str, str] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        backoff_base: float = 0.5,
    ):
        """Initialize HTTP client.

        Args:
            base_url: Base URL for relative requests
            rate_limit: Maximum requests per second
            user_agent: User-Agent header
            timeout: Default request timeout
            max_retries: Maximum retry attempts on transient failure
            headers: Additional default headers
            transport: Custom httpx transport (tests pass httpx.MockTransport)
            backoff_base: First backoff delay in seconds, doubled per attempt
        """
        self._base_url = base_url
        self._rate_limiter = RateLimiter(rate_limit)
        self._user_agent = user_agent
        self._timeout = timeout
        self._max_retries = max_retries
        self._extra_headers = headers or {}
        self._transport = transport
        self._backoff_base = backoff_base
        self._client: httpx.AsyncClient | None = None

    @property
    def rate_limit(self) -> float:
        """Current rate limit (requests per second)."""
        return self._rate_limiter.rate

    @property
    def user_agent(self) -> str:
        """User-Agent header value."""
        return self._user_agent

    @property
    def timeout(self) -> float:
        """Default request timeout in seconds."""
        return self._timeout

    @property
    def max_retries(self) -> int:
        """Maximum retry attempts."""
        return self._max_retries

    @property
    def headers(self) -> dict[str, str]:
        """Default headers for requests."""
        return {
            "User-Agent": self._user_agent,
            "Accept": "application/json",
            **self._extra_headers,
        }

    async def _ensure_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None or self._client.is_closed:
            # Try HTTP/2 if h2 is available
            try:
                import h2  # noqa: F401
                use_http2 = self._transport is None
            except ImportError:
                use_http2 = False

            self._client = httpx.AsyncClient(
                base_url=self._base_url,
                headers=self.headers,
                timeout=httpx.Timeout(self._timeout),
                follow_redirects=True,
                http2=use_http2,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> HttpClient:
        """Async context manager entry."""
        await self._ensure_client()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit."""
        await self.close()

    async def _backoff(self, attempt: int) -> None:
        await asyncio.sleep(self._backoff_base * (2**attempt))

    async def _request(
        self,
        method: str,
        url: str,
        *,
        retry: bool = True,
        **kwargs: Any,
    ) -> httpx.Response:
        """Make a rate-limited request with retries.

        Args:
            method: HTTP method
            url: URL (relative to base_url or absolute)
            retry: Whether to retry on failure
            **kwargs: Additional arguments for httpx

        Returns:
            HTTP response

        Raises:
            RateLimitError: If rate limited by server
            HttpClientError: For other HTTP errors
        """
        client = await self._ensure_client()

        max_retries = self._max_retries if retry else 0
        last_error: Exception | None = None

        for attempt in range(max_retries + 1):
            await self._rate_limiter.acquire()

            try:
                response = await client.request(method, url, **kwargs)

                if response.status_code == 429:
                    retry_after = parse_retry_after(response.headers.get("Retry-After"))
                    if attempt < max_retries:
                        logger.debug("429 from %s, sleeping %.1fs", url, retry_after)
                        await asyncio.sleep(retry_after)
                        continue
                    raise RateLimitError(retry_after)

                response.raise_for_status()
                return response

            except httpx.HTTPStatusError as e:
                last_error = e
                if e.response.status_code in RETRYABLE_STATUS and attempt < max_retries:
                    await self._backoff(attempt)
                    continue
                raise HttpClientError(f"HTTP {e.response.status_code}: {e}") from e

            except httpx.TimeoutException as e:
                last_error = e
                if attempt < max_retries:
                    await self._backoff(attempt)
                    continue
                raise HttpClientError(f"Request timeout: {e}") from e

            except httpx.RequestError as e:
                last_error = e
                if attempt < max_retries:
                    await self._backoff(attempt)
                    continue
                raise HttpClientError(f"Request failed: {e}") from e

        raise HttpClientError(f"Max retries exceeded: {last_error}")

    async def get(self, url: str, **kwargs: Any) -> httpx.Response:
        """Make a GET request.

        Args:
            url: URL (relative or absolute)
            **kwargs: Additional arguments for httpx

        Returns:
            HTTP response
        """
        return await self._request("GET", url, **kwargs)

    async def get_json(self, url: str, **kwargs: Any) -> Any:
        """Get JSON content from URL.

        Args:
            url: URL to fetch
            **kwargs: Additional arguments

        Returns:
            Parsed JSON

        Raises:
            InvalidJSONError: If the body is not valid JSON
        """
        response = await self.get(url, **kwargs)
        try:
            return response.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise InvalidJSONError(str(response.request.url), str(e)) from e


__all__ = [
    "HttpClient",
    "HttpClientError",
    "RateLimitError",
    "InvalidJSONError",
    "parse_retry_after",
]
