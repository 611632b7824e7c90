"""Exception hierarchy for salt-runner.

Every error the CLI reports to the user derives from SaltError. Structural
problems in a SALT.md are not exceptions: the parser returns a partial
definition instead.
"""

from pathlib import Path

__all__ = [
    "CommandNotFoundError",
    "ConfigError",
    "EmptyCommandError",
    "IntrinsicNameError",
    "InvocationError",
    "MalformedEnvBlockError",
    "NotAProjectError",
    "ProjectExistsError",
    "ProjectNotFoundError",
    "RegistryError",
    "SaltError",
    "SpawnError",
]


class SaltError(Exception):
    """Base class for all salt-runner errors."""


class ConfigError(SaltError):
    """Config file is unreadable, invalid, or missing a required setting."""


class NotAProjectError(SaltError):
    """Directory has no usable SALT.md."""

    def __init__(self, path: Path, reason: str = "not a salt project") -> None:
        self.path = path
        super().__init__(f"{reason}: {path}")


class ProjectExistsError(SaltError):
    """Directory already holds a SALT.md."""

    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(f"already a salt project: {path}")


# =============================================================================
# Registry
# =============================================================================


class RegistryError(SaltError):
    """Project registry could not be loaded."""


class IntrinsicNameError(RegistryError):
    """A project is named after a built-in verb."""

    def __init__(self, name: str, path: Path | None = None) -> None:
        self.name = name
        self.path = path
        location = f" (at {path})" if path is not None else ""
        super().__init__(
            f"cannot use {name!r} as a project name, it is an intrinsic command{location}"
        )


# =============================================================================
# Invocation
# =============================================================================


class InvocationError(SaltError):
    """A command could not be resolved or launched."""


class MalformedEnvBlockError(InvocationError):
    """Inline ``[KEY=value ...]`` block is missing its closing bracket."""

    def __init__(self, raw: str) -> None:
        self.raw = raw
        super().__init__(f"environment block not terminated: {raw}")


class EmptyCommandError(InvocationError):
    """Command string names no program."""

    def __init__(self, raw: str) -> None:
        self.raw = raw
        super().__init__(f"no program to run in command: {raw!r}")


class ProjectNotFoundError(InvocationError):
    """No loaded project has the requested name."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"project not found: {name}")


class CommandNotFoundError(InvocationError):
    """Project has no command with the requested name."""

    def __init__(self, project: str, command: str) -> None:
        self.project = project
        self.command = command
        super().__init__(f"command {command!r} not found in project {project!r}")


class SpawnError(InvocationError):
    """Child process could not be started."""

    def __init__(self, program: str, cause: OSError) -> None:
        self.program = program
        self.cause = cause
        super().__init__(f"failed to launch {program!r}: {cause.strerror or cause}")
