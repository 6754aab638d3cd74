"""
Logging setup for a11ycheck.

Log records go to stderr through Rich; stdout belongs to the MCP stdio
transport and to CLI report output.
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

_HANDLER_NAME = "a11ycheck-rich"


def configure(level: str | int = "INFO") -> None:
    """
    Install a Rich handler on the ``a11ycheck`` logger.

    Calling this again only changes the level.

    Args:
        level: Logging level name or number.
    """
    logger = logging.getLogger("a11ycheck")
    logger.setLevel(level if isinstance(level, int) else level.upper())

    if any(h.get_name() == _HANDLER_NAME for h in logger.handlers):
        return

    handler = RichHandler(
        console=Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
        markup=False,
    )
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    logger.addHandler(handler)
    logger.propagate = False
