"""
PawFeed - Incremental image feed core for an infinite-scrolling gallery.

PawFeed aggregates random images from two upstream providers (dog.ceo as
the primary source, TheCatAPI as the secondary source), merges each page
into one shuffled batch and exposes an append-only feed plus a viewer
state machine to a rendering layer.

Key Features:
- Concurrent per-source fetches with partial-failure tolerance
- Epoch-guarded commits (late results from superseded rounds are dropped)
- Category filter that resets the feed
- Bounded auto-prefill until the viewport can scroll
- Viewer close transition that keeps the image mounted until it finishes

Quick Start:
    >>> from pawfeed import FilterMode, Gallery
    >>> async with Gallery() as gallery:
    ...     await gallery.feed.wait_idle()
    ...     gallery.feed.set_filter(FilterMode.PRIMARY_ONLY)
    ...     gallery.viewer.select(gallery.feed.feed[0])
"""

# Adapters
from pawfeed.adapter.base import BaseImageAdapter, ImageSource
from pawfeed.adapter.cat import TheCatApiAdapter
from pawfeed.adapter.dog import DogCeoAdapter

# Feed and viewer
from pawfeed.controller import FeedController
from pawfeed.gallery import Gallery
from pawfeed.merger import merge
from pawfeed.viewer import ViewerStateMachine

# Configuration, logging, errors
from pawfeed.core.config import Settings, get_settings
from pawfeed.core.exceptions import (
    ConfigurationError,
    MalformedPayloadError,
    PawFeedError,
    StaleResultDiscarded,
    UpstreamError,
)
from pawfeed.core.log import configure_logging

# HTTP utilities
from pawfeed.http import HttpClient, HttpClientError, RateLimitError

# Models
from pawfeed.models.base import FilterMode, SourceType, ViewerPhase
from pawfeed.models.item import FeedItem
from pawfeed.models.state import FeedSnapshot, FeedStats, ViewerSnapshot

__version__ = "0.1.0"

__all__ = [
    # Models
    "FeedItem",
    "SourceType",
    "FilterMode",
    "ViewerPhase",
    "FeedSnapshot",
    "ViewerSnapshot",
    "FeedStats",
    # Adapters
    "ImageSource",
    "BaseImageAdapter",
    "DogCeoAdapter",
    "TheCatApiAdapter",
    # Feed
    "merge",
    "FeedController",
    # Viewer
    "ViewerStateMachine",
    # Facade
    "Gallery",
    # Configuration
    "Settings",
    "get_settings",
    "configure_logging",
    # Errors
    "PawFeedError",
    "UpstreamError",
    "MalformedPayloadError",
    "StaleResultDiscarded",
    "ConfigurationError",
    # HTTP
    "HttpClient",
    "HttpClientError",
    "RateLimitError",
    # Version
    "__version__",
]
