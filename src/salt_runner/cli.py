"""Command-line entry point for salt.

The first argument is an intrinsic verb (init, pin, watch, ...) or a project
name; the second selects a command of that project. Everything after the
first positional argument is passed through untouched, so project commands
can take their own flags.

Example:
    $ salt                      # list verbs and loaded projects
    $ salt my-app build         # run my-app's build command
    $ salt watch my-app serve   # restart serve on every file change
"""

import logging
from typing import List, Optional

import typer

from salt_runner.cli_utils import (
    EXIT_CONFIG_ERROR,
    EXIT_ERROR,
    _error,
    _setup_logging,
)
from salt_runner.core.exceptions import ConfigError, SaltError
from salt_runner.interface import Interface

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="salt",
    help="Run the commands a project declares in its SALT.md",
    add_completion=False,
)


@app.command(
    context_settings={
        "allow_extra_args": True,
        "ignore_unknown_options": True,
        "allow_interspersed_args": False,
    }
)
def main(
    args: Optional[List[str]] = typer.Argument(
        None,
        help="Intrinsic verb or project name, followed by its arguments",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable debug logging",
    ),
) -> None:
    """Run a salt verb or a project command."""
    _setup_logging(verbose)
    args = args or []
    argv = ["salt", *args]

    try:
        interface = Interface.init(argv)
        code = interface.run(args)
    except KeyboardInterrupt:
        raise typer.Exit(code=130) from None
    except ConfigError as e:
        _error(str(e))
        raise typer.Exit(code=EXIT_CONFIG_ERROR) from None
    except SaltError as e:
        logger.debug("Run failed", exc_info=True)
        _error(str(e))
        raise typer.Exit(code=EXIT_ERROR) from None

    raise typer.Exit(code=_exit_code(code))


def _exit_code(returncode: int) -> int:
    """Map a child return code to a shell exit status.

    A child killed by signal N reports -N; shells report that as 128 + N.
    """
    if returncode < 0:
        return 128 - returncode
    return returncode


def run() -> None:
    """Console script entry point."""
    app(prog_name="salt")
