"""Logging setup for the hrviews command line.

Library modules only call ``logging.getLogger(__name__)``; handlers are
attached here, once, by the CLI.
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

_ROOT_LOGGER = "hrviews"


def configure_logging(level: str = "WARNING", console: Console | None = None) -> logging.Logger:
    """Attach a single RichHandler to the ``hrviews`` logger at *level*.

    Repeated calls replace the previously installed handler.
    """
    logger = logging.getLogger(_ROOT_LOGGER)
    for handler in list(logger.handlers):
        if isinstance(handler, RichHandler):
            logger.removeHandler(handler)

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        rich_tracebacks=False,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    logger.setLevel(level.upper())
    return logger
