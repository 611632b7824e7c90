"""Shared CLI helpers: console, exit codes, message and logging setup."""

import logging

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

EXIT_SUCCESS = 0
EXIT_ERROR = 1
EXIT_CONFIG_ERROR = 2

# Errors and logs go to stderr
err_console = Console(stderr=True)


def _error(message: str) -> None:
    err_console.print(f"[red]Error:[/red] {escape(message)}", highlight=False)


def _setup_logging(verbose: bool = False) -> None:
    """Route library logging through rich.

    Args:
        verbose: Log DEBUG and above instead of WARNING and above.

    """
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=verbose, rich_tracebacks=False)],
        force=True,
    )
