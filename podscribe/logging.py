"""
podscribe.logging - Package logger and CLI log setup.

Modules log through ``logger``; the CLI calls configure_logging once.
Log records go to stderr through rich so they interleave cleanly with
console progress output.
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

logger = logging.getLogger("podscribe")


def configure_logging(verbose: bool = False, console: Console | None = None) -> None:
    """Configure the podscribe logger.

    Args:
        verbose: DEBUG level if True, otherwise WARNING
        console: Console to render through (a stderr console if None)
    """
    level = logging.DEBUG if verbose else logging.WARNING

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=verbose,
        show_time=verbose,
        markup=False,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))

    logger.handlers.clear()
    logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False
