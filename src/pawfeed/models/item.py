"""FeedItem - one image in the feed.

Example:
    >>> from pawfeed.models.base import SourceType
    >>> from pawfeed.models.item import FeedItem
    >>> item = FeedItem(url=" https://images.dog.ceo/breeds/hound/1.jpg ", source_type=SourceType.PRIMARY)
    >>> item.url
    'https://images.dog.ceo/breeds/hound/1.jpg'
    >>> item.host
    'images.dog.ceo'
"""

from __future__ import annotations

from urllib.parse import urlsplit

from pydantic import Field, field_validator

from pawfeed.models.base import PawFeedModel, SourceType


class FeedItem(PawFeedModel):
    """An image URL tagged with its provider.

    Immutable. Two items with the same URL are still two feed entries;
    providers return random images and repeats are expected.
    """

    url: str = Field(..., min_length=1, description="Absolute http(s) image URL")
    source_type: SourceType = Field(..., description="Provider the image came from")

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        """Only absolute http(s) URLs can be rendered."""
        parts = urlsplit(v)
        if parts.scheme not in ("http", "https") or not parts.netloc:
            raise ValueError(f"not an absolute http(s) URL: {v!r}")
        return v

    @property
    def host(self) -> str:
        """Lower-cased hostname of the image URL."""
        return (urlsplit(self.url).hostname or "").lower()
