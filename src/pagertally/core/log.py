"""Logging setup for the command line entry points."""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

_FORMAT = "%(message)s"


def configure_logging(verbose: bool = False, console: Console | None = None) -> None:
    """Route ``pagertally`` log records through a rich handler.

    Library modules only call ``logging.getLogger(__name__)``; handlers are attached here,
    once, by the CLI. ``verbose`` lowers the threshold to ``DEBUG`` so per-user shift
    breakdowns and schedule totals are shown.
    """
    level = logging.DEBUG if verbose else logging.WARNING
    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
        markup=False,
    )
    handler.setFormatter(logging.Formatter(_FORMAT, datefmt="[%X]"))
    logger = logging.getLogger("pagertally")
    logger.handlers.clear()
    logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False


__all__ = ["configure_logging"]
