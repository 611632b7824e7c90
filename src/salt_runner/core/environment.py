"""Variables every spawned command receives."""

import os
import platform
import sys
from collections.abc import Sequence
from pathlib import Path

ARCH_VAR = "SALT_ARCH"
OS_VAR = "SALT_OS"
CWD_VAR = "SALT_CWD"
ARGS_VAR = "SALT_ARGS"

_OS_NAMES = {"darwin": "macos", "win32": "windows", "cygwin": "windows"}


def current_os() -> str:
    """Return a short OS name: linux, macos, windows, or sys.platform."""
    if sys.platform.startswith("linux"):
        return "linux"
    return _OS_NAMES.get(sys.platform, sys.platform)


def build_base_env(argv: Sequence[str], cwd: Path | None = None) -> dict[str, str]:
    """Build the SALT_* variables for one run.

    Args:
        argv: Full original argument line, program name included.
        cwd: Directory salt was started from. Defaults to os.getcwd().

    Returns:
        Mapping of SALT_ARCH, SALT_OS, SALT_CWD and SALT_ARGS.

    """
    return {
        ARCH_VAR: platform.machine(),
        OS_VAR: current_os(),
        CWD_VAR: str(cwd or Path(os.getcwd())),
        ARGS_VAR: " ".join(argv),
    }
