"""Shared logging configuration.

Call ``configure_logging()`` once at a CLI entry point. It is idempotent: if
the root logger already has handlers it does nothing.
"""

import logging
import sys

from rich.console import Console
from rich.logging import RichHandler


def configure_logging(level: int | str = logging.INFO) -> None:
    """Send log records to stderr through a rich handler."""
    root = logging.getLogger()
    if root.handlers:
        return

    handler = RichHandler(
        console=Console(file=sys.stderr),
        show_path=False,
        rich_tracebacks=True,
    )
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    root.addHandler(handler)
    root.setLevel(level.upper() if isinstance(level, str) else level)
