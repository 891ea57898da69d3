"""PawFeed data models."""

from pawfeed.models.base import FilterMode, PawFeedModel, SourceType, ViewerPhase
from pawfeed.models.item import FeedItem
from pawfeed.models.state import FeedSnapshot, FeedStats, ViewerSnapshot

__all__ = [
    "PawFeedModel",
    "SourceType",
    "FilterMode",
    "ViewerPhase",
    "FeedItem",
    "FeedSnapshot",
    "FeedStats",
    "ViewerSnapshot",
]
