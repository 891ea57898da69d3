"""Logging setup.

Every module logs through a ``pawfeed.<area>`` logger obtained with
``logging.getLogger``; this module only decides where those records go.

Example:
    >>> from pawfeed.core.config import get_settings
    >>> from pawfeed.core.log import configure_logging
    >>> logger = configure_logging(get_settings(log_format="plain", log_level="WARNING"))
    >>> logger.name
    'pawfeed'
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

from pawfeed.core.config import Settings

ROOT_LOGGER = "pawfeed"
PLAIN_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def configure_logging(settings: Settings) -> logging.Logger:
    """Attach a single handler to the ``pawfeed`` logger.

    Calling this again replaces the previous handler, so it is safe to
    call once per Gallery.

    Args:
        settings: Source of ``log_level`` and ``log_format``.

    Returns:
        The configured ``pawfeed`` logger.
    """
    logger = logging.getLogger(ROOT_LOGGER)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    handler: logging.Handler
    if settings.log_format == "console":
        handler = RichHandler(
            console=Console(stderr=True),
            show_path=False,
            rich_tracebacks=True,
        )
        handler.setFormatter(logging.Formatter("%(name)s %(message)s"))
    else:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(PLAIN_FORMAT))

    logger.addHandler(handler)
    logger.setLevel(settings.log_level.upper())
    logger.propagate = False
    return logger
