"""Logging setup for the CLI."""

import logging

from rich.console import Console
from rich.logging import RichHandler

# stdout is reserved for tables and --json output
log_console = Console(stderr=True)


def setup_logging(verbose: bool = False) -> None:
    """Route `catalogsync` loggers through Rich on stderr."""
    handler = RichHandler(console=log_console, show_path=False, markup=False)
    handler.setFormatter(logging.Formatter("%(message)s"))

    root = logging.getLogger("catalogsync")
    root.handlers[:] = [handler]
    root.setLevel(logging.DEBUG if verbose else logging.INFO)
    root.propagate = False

    # boto is chatty at DEBUG
    logging.getLogger("botocore").setLevel(logging.WARNING)
