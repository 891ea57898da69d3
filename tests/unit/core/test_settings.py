"""Tests for pawfeed.core - settings, logging setup and exceptions."""

from __future__ import annotations

import logging
from collections.abc import Iterator

import pytest
from pydantic import ValidationError
from rich.logging import RichHandler

from pawfeed.core.config import DEFAULT_IMAGE_HOSTS, Settings, get_settings
from pawfeed.core.exceptions import (
    ConfigurationError,
    MalformedPayloadError,
    PawFeedError,
    StaleResultDiscarded,
    UpstreamError,
)
from pawfeed.core.log import configure_logging

# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    """Environment without PAWFEED_ variables."""
    import os

    for key in list(os.environ):
        if key.startswith("PAWFEED_"):
            monkeypatch.delenv(key)
    return monkeypatch


@pytest.fixture
def restore_pawfeed_logger() -> Iterator[logging.Logger]:
    """Undo configure_logging() after the test."""
    logger = logging.getLogger("pawfeed")
    handlers, level, propagate = list(logger.handlers), logger.level, logger.propagate
    yield logger
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    for handler in handlers:
        logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = propagate


# =============================================================================
# Settings
# =============================================================================


class TestSettings:
    """Tests for Settings defaults and environment loading."""

    def test_defaults(self, clean_env: pytest.MonkeyPatch) -> None:
        s = Settings()
        assert s.primary_base_url == "https://dog.ceo/api"
        assert s.secondary_base_url == "https://api.thecatapi.com/v1"
        assert s.secondary_api_key is None
        assert s.page_size == 10
        assert s.prefill_cap == 5
        assert s.close_delay == 0.2
        assert s.allowed_image_hosts == list(DEFAULT_IMAGE_HOSTS)
        assert s.log_format == "console"

    def test_reads_prefixed_env(self, clean_env: pytest.MonkeyPatch) -> None:
        clean_env.setenv("PAWFEED_PAGE_SIZE", "25")
        clean_env.setenv("PAWFEED_SECONDARY_API_KEY", "live_abc")
        s = Settings()
        assert s.page_size == 25
        assert s.secondary_api_key == "live_abc"

    def test_env_list_as_json(self, clean_env: pytest.MonkeyPatch) -> None:
        clean_env.setenv("PAWFEED_ALLOWED_IMAGE_HOSTS", '["images.dog.ceo"]')
        assert Settings().allowed_image_hosts == ["images.dog.ceo"]

    def test_overrides(self, clean_env: pytest.MonkeyPatch) -> None:
        s = get_settings(prefill_cap=0, close_delay=0.0)
        assert s.prefill_cap == 0
        assert s.close_delay == 0.0

    @pytest.mark.parametrize(
        "overrides",
        [{"page_size": 0}, {"page_size": 51}, {"prefill_cap": -1}, {"close_delay": -0.1}, {"log_format": "xml"}],
    )
    def test_rejects_invalid(self, clean_env: pytest.MonkeyPatch, overrides: dict) -> None:
        with pytest.raises(ValidationError):
            get_settings(**overrides)


# =============================================================================
# Logging
# =============================================================================


class TestConfigureLogging:
    """Tests for configure_logging()."""

    def test_console_uses_rich(self, restore_pawfeed_logger: logging.Logger) -> None:
        logger = configure_logging(get_settings(log_format="console", log_level="debug"))
        assert logger is restore_pawfeed_logger
        assert len(logger.handlers) == 1
        assert isinstance(logger.handlers[0], RichHandler)
        assert logger.level == logging.DEBUG

    def test_plain_uses_stream_handler(self, restore_pawfeed_logger: logging.Logger) -> None:
        logger = configure_logging(get_settings(log_format="plain", log_level="WARNING"))
        assert len(logger.handlers) == 1
        assert type(logger.handlers[0]) is logging.StreamHandler
        assert logger.level == logging.WARNING

    def test_reconfigure_replaces_handler(self, restore_pawfeed_logger: logging.Logger) -> None:
        configure_logging(get_settings(log_format="plain"))
        logger = configure_logging(get_settings(log_format="console"))
        assert len(logger.handlers) == 1

    def test_module_loggers_are_children(self, restore_pawfeed_logger: logging.Logger) -> None:
        configure_logging(get_settings(log_format="plain", log_level="ERROR"))
        assert logging.getLogger("pawfeed.controller").getEffectiveLevel() == logging.ERROR


# =============================================================================
# Exceptions
# =============================================================================


class TestExceptions:
    """Tests for the exception hierarchy."""

    def test_hierarchy(self) -> None:
        assert issubclass(UpstreamError, PawFeedError)
        assert issubclass(MalformedPayloadError, UpstreamError)
        assert issubclass(StaleResultDiscarded, PawFeedError)
        assert issubclass(ConfigurationError, PawFeedError)

    def test_upstream_error_carries_source_and_cause(self) -> None:
        cause = OSError("reset")
        err = UpstreamError("failed", source="dog.ceo", cause=cause)
        assert err.source == "dog.ceo"
        assert err.cause is cause
        assert str(err) == "failed"

    def test_stale_result_message(self) -> None:
        err = StaleResultDiscarded(epoch=1, current_epoch=2)
        assert err.epoch == 1
        assert err.current_epoch == 2
        assert "stale" in str(err)
