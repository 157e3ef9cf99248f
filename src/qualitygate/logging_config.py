"""Logging setup — Rich handler on stderr."""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler


def setup_logging(verbose: bool = False, debug: bool = False) -> logging.Logger:
    """Configure the ``qualitygate`` logger.

    WARNING by default, INFO with *verbose*, DEBUG with *debug*.
    """
    if debug:
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    else:
        level = logging.WARNING

    handler = RichHandler(
        console=Console(stderr=True),
        rich_tracebacks=True,
        markup=False,
        show_time=debug,
        show_path=debug,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))

    logger = logging.getLogger("qualitygate")
    logger.handlers.clear()
    logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False
    return logger
