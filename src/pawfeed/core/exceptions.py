"""Custom exceptions.

PawFeed uses a hierarchy of exceptions to keep upstream failures, stale
results and configuration problems apart:

Example:
    >>> from pawfeed.core.exceptions import MalformedPayloadError, PawFeedError
    >>> isinstance(MalformedPayloadError("bad json"), PawFeedError)
    True
    >>> try:
    ...     raise MalformedPayloadError("bad json", source="dog.ceo")
    ... except PawFeedError as e:
    ...     print(f"Caught: {type(e).__name__}")
    Caught: MalformedPayloadError
"""

from __future__ import annotations


class PawFeedError(Exception):
    """Base exception for PawFeed.

    Example:
        >>> from pawfeed.core.exceptions import PawFeedError
        >>> e = PawFeedError("something went wrong")
        >>> str(e)
        'something went wrong'
    """


class UpstreamError(PawFeedError):
    """An upstream image provider could not deliver a batch.

    Raised for network failures and non-2xx responses that survived the
    HTTP client's retries.

    Example:
        >>> from pawfeed.core.exceptions import UpstreamError
        >>> err = UpstreamError("Connection failed", source="thecatapi")
        >>> err.source
        'thecatapi'
    """

    def __init__(
        self,
        message: str,
        source: str | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.source = source
        self.cause = cause


class MalformedPayloadError(UpstreamError):
    """The provider answered with a body that is not valid JSON.

    Example:
        >>> from pawfeed.core.exceptions import MalformedPayloadError
        >>> raise MalformedPayloadError("not json")  # doctest: +IGNORE_EXCEPTION_DETAIL
        Traceback (most recent call last):
        MalformedPayloadError: not json
    """


class StaleResultDiscarded(PawFeedError):
    """A fetch round finished after a newer round started.

    Not a failure: the controller raises and catches this at its commit
    point so the discard shows up in logs.

    Example:
        >>> from pawfeed.core.exceptions import StaleResultDiscarded
        >>> err = StaleResultDiscarded(epoch=3, current_epoch=5)
        >>> str(err)
        'result of epoch 3 is stale (current epoch 5)'
    """

    def __init__(self, epoch: int, current_epoch: int) -> None:
        super().__init__(f"result of epoch {epoch} is stale (current epoch {current_epoch})")
        self.epoch = epoch
        self.current_epoch = current_epoch


class ConfigurationError(PawFeedError):
    """Configuration is invalid.

    Example:
        >>> from pawfeed.core.exceptions import ConfigurationError
        >>> raise ConfigurationError("missing source")  # doctest: +IGNORE_EXCEPTION_DETAIL
        Traceback (most recent call last):
        ConfigurationError: missing source
    """
