"""PawFeed configuration.

Application settings loaded from environment variables with PAWFEED_ prefix.

Example:
    >>> from pawfeed.core.config import get_settings
    >>> settings = get_settings(log_level="DEBUG")
    >>> settings.log_level
    'DEBUG'
    >>> settings.page_size
    10
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_IMAGE_HOSTS: tuple[str, ...] = (
    "images.dog.ceo",
    "cdn.thedogapi.com",
    "cdn.thecatapi.com",
    "cdn2.thecatapi.com",
    "media.thedogapi.com",
    "media.thecatapi.com",
)


class Settings(BaseSettings):
    """Application settings.

    Loads from environment variables with PAWFEED_ prefix.

    Example:
        >>> from pawfeed.core.config import Settings
        >>> s = Settings(secondary_api_key="live_abc")
        >>> s.secondary_api_key
        'live_abc'
        >>> s.prefill_cap
        5
    """

    model_config = SettingsConfigDict(
        env_prefix="PAWFEED_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Upstream providers
    primary_base_url: str = Field(default="https://dog.ceo/api", description="Dog provider API root")
    secondary_base_url: str = Field(
        default="https://api.thecatapi.com/v1", description="Cat provider API root"
    )
    secondary_api_key: str | None = Field(default=None, description="Optional x-api-key for the cat provider")
    allowed_image_hosts: list[str] = Field(
        default_factory=lambda: list(DEFAULT_IMAGE_HOSTS),
        description="Image hosts accepted from providers (empty list accepts any host)",
    )

    # Feed
    page_size: int = Field(default=10, ge=1, le=50, description="Items requested per source per round")
    prefill_cap: int = Field(default=5, ge=0, description="Automatic loads allowed per filter")

    # Viewer
    close_delay: float = Field(default=0.2, ge=0.0, description="Seconds the viewer stays mounted while closing")

    # HTTP
    request_timeout: float = Field(default=10.0, ge=1.0)
    rate_limit: float = Field(default=10.0, gt=0.0, description="Requests per second across providers")
    max_retries: int = Field(default=2, ge=0)
    user_agent: str = Field(default="PawFeed/1.0")

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: Literal["console", "plain"] = Field(default="console", description="Log format: console or plain")


def get_settings(**overrides: Any) -> Settings:
    """Get settings with optional overrides.

    Example:
        >>> from pawfeed.core.config import get_settings
        >>> s = get_settings(close_delay=0.5)
        >>> s.close_delay
        0.5
    """
    return Settings(**overrides)
