"""Logging configuration for the command line."""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler


def setup_logging(log_level: Optional[str] = None, verbose: bool = False) -> None:
    """Send log records to stderr through a rich handler.

    Args:
        log_level: Level name such as "WARNING"; falls back to WARNING when unknown.
        verbose: Force DEBUG regardless of ``log_level``.
    """
    level = logging.DEBUG if verbose else logging.getLevelName((log_level or "WARNING").upper())
    if not isinstance(level, int):
        level = logging.WARNING

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    console_handler = RichHandler(
        console=Console(stderr=True),
        show_time=False,
        show_path=False,
        rich_tracebacks=True,
    )
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter("%(message)s"))
    root_logger.addHandler(console_handler)

    logging.getLogger(__name__).debug("Logging configured at %s", logging.getLevelName(level))
