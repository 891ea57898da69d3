"""PawFeed HTTP utilities.

Provides the rate-limited, retrying client shared by the upstream adapters.

Example:
    >>> from pawfeed.http import HttpClient
    >>>
    >>> async with HttpClient(rate_limit=10.0) as client:
    ...     payload = await client.get_json("https://dog.ceo/api/breeds/image/random/10")
"""

from pawfeed.http.client import (
    HttpClient,
    HttpClientError,
    InvalidJSONError,
    RateLimitError,
)
from pawfeed.http.rate_limiter import RateLimiter

__all__ = [
    "HttpClient",
    "HttpClientError",
    "InvalidJSONError",
    "RateLimitError",
    "RateLimiter",
]
