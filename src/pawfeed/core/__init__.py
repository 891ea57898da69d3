"""Core configuration, logging and exceptions."""

from pawfeed.core.config import Settings, get_settings
from pawfeed.core.exceptions import (
    ConfigurationError,
    MalformedPayloadError,
    PawFeedError,
    StaleResultDiscarded,
    UpstreamError,
)
from pawfeed.core.log import configure_logging

__all__ = [
    # Configuration
    "Settings",
    "get_settings",
    "configure_logging",
    # Exceptions
    "PawFeedError",
    "UpstreamError",
    "MalformedPayloadError",
    "StaleResultDiscarded",
    "ConfigurationError",
]
