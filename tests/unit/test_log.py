"""Tests for CLI logging setup."""

from __future__ import annotations

import io
import logging

from rich.console import Console
from rich.logging import RichHandler

from hrviews.log import configure_logging


def _rich_handlers(logger: logging.Logger) -> list[logging.Handler]:
    return [h for h in logger.handlers if isinstance(h, RichHandler)]


def test_configure_sets_level_and_single_handler():
    logger = configure_logging("info")
    configure_logging("debug")
    assert logger.name == "hrviews"
    assert logger.level == logging.DEBUG
    assert len(_rich_handlers(logger)) == 1


def test_library_warnings_reach_console():
    buf = io.StringIO()
    configure_logging("WARNING", console=Console(file=buf, width=120))
    logging.getLogger("hrviews.materializer").warning("City c9 not found for employee e1")
    assert "City c9 not found for employee e1" in buf.getvalue()


def test_below_level_suppressed():
    buf = io.StringIO()
    configure_logging("ERROR", console=Console(file=buf, width=120))
    logging.getLogger("hrviews.cache").warning("No city documents found in store")
    assert buf.getvalue() == ""
