"""Logging setup for the cocinero CLI"""

from __future__ import annotations

import logging
import os

from rich.console import Console
from rich.logging import RichHandler

console = Console(stderr=True)


def setup_logging(verbose: bool = False) -> None:
    """Configure logging for the cocinero CLI.

    Log levels:
    - Normal: Only warnings/errors shown
    - Verbose (-v): INFO level - shows recipes loaded and files staged
    - Debug (COCINERO_DEBUG=1): DEBUG level - shows everything
    """
    debug = bool(os.environ.get("COCINERO_DEBUG"))
    if debug:
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    else:
        level = logging.WARNING

    handler = RichHandler(
        console=console,
        show_time=verbose,
        show_path=debug,
        rich_tracebacks=True,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))

    logger = logging.getLogger("cocinero")
    logger.setLevel(level)
    logger.handlers = [handler]
    logger.propagate = False
