"""Base models and shared enums.

Example:
    >>> from pawfeed.models.base import FilterMode, SourceType
    >>> SourceType.PRIMARY.value
    'primary'
    >>> FilterMode.PRIMARY_ONLY.enables(SourceType.SECONDARY)
    False
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict


class SourceType(str, Enum):
    """Which upstream provider an item came from.

    Example:
        >>> list(SourceType)
        [<SourceType.PRIMARY: 'primary'>, <SourceType.SECONDARY: 'secondary'>]
    """

    PRIMARY = "primary"  # dog provider
    SECONDARY = "secondary"  # cat provider


class FilterMode(str, Enum):
    """Category filter applied to the feed.

    Example:
        >>> FilterMode.ALL.enabled_sources()
        (<SourceType.PRIMARY: 'primary'>, <SourceType.SECONDARY: 'secondary'>)
        >>> FilterMode("secondary")
        <FilterMode.SECONDARY_ONLY: 'secondary'>
    """

    ALL = "all"
    PRIMARY_ONLY = "primary"
    SECONDARY_ONLY = "secondary"

    def enables(self, source_type: SourceType) -> bool:
        """Whether items from ``source_type`` belong in this filter."""
        if self is FilterMode.ALL:
            return True
        return self.value == source_type.value

    def enabled_sources(self) -> tuple[SourceType, ...]:
        """Sources to fetch from, in a stable order."""
        return tuple(s for s in SourceType if self.enables(s))


class ViewerPhase(str, Enum):
    """Lifecycle of the full-screen viewer.

    Transitions strictly CLOSED -> OPEN -> CLOSING -> CLOSED.
    """

    CLOSED = "closed"
    OPEN = "open"
    CLOSING = "closing"


class PawFeedModel(BaseModel):
    """Base model with standard configuration."""

    model_config = ConfigDict(
        str_strip_whitespace=True,
        extra="forbid",
        frozen=True,
    )
