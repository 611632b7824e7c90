"""Command invocation engine.

Turns a command string from SALT.md into a process specification and runs
it. A command may start with an inline environment block::

    [PORT=8080 DEBUG=1] python -m http.server

The block interior is split on spaces into ``KEY=value`` pairs (tokens
without ``=`` are ignored). The rest of the string is split on spaces into
program and arguments; no shell is involved.
"""

import logging
import os
import subprocess
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path

from salt_runner.core.config import SaltConfig
from salt_runner.core.exceptions import EmptyCommandError, MalformedEnvBlockError, SpawnError
from salt_runner.definition.models import Command, ProjectDefinition

logger = logging.getLogger(__name__)

ENV_BLOCK_OPEN = "["
ENV_BLOCK_CLOSE = "]"

PopenFactory = Callable[..., "subprocess.Popen[bytes]"]


@dataclass(frozen=True)
class ProcessSpec:
    """Everything needed to launch one command.

    Attributes:
        program: Executable name or path.
        args: Arguments after the program.
        env: Variables from the inline environment block.
        base_env: Caller-supplied variables (SALT_* and friends).

    """

    program: str
    args: tuple[str, ...] = ()
    env: Mapping[str, str] = field(default_factory=dict)
    base_env: Mapping[str, str] = field(default_factory=dict)

    @property
    def argv(self) -> list[str]:
        return [self.program, *self.args]

    def environ(self) -> dict[str, str]:
        """Child environment: os.environ, then base_env, then the inline block."""
        merged = dict(os.environ)
        merged.update(self.base_env)
        merged.update(self.env)
        return merged


def parse_env_block(raw: str) -> tuple[dict[str, str], str]:
    """Split a leading ``[...]`` block off a command string.

    Args:
        raw: Command string. If it does not start with ``[`` it is returned
            unchanged with no variables.

    Returns:
        Tuple of (variables, remainder). The remainder is stripped.

    Raises:
        MalformedEnvBlockError: If the block has no closing bracket.

    """
    if not raw.startswith(ENV_BLOCK_OPEN):
        return {}, raw.strip()

    close = raw.find(ENV_BLOCK_CLOSE, 1)
    if close == -1:
        raise MalformedEnvBlockError(raw)

    env: dict[str, str] = {}
    for token in raw[1:close].split(" "):
        key, sep, value = token.partition("=")
        if not sep or not key:
            continue
        env[key] = value
    return env, raw[close + 1 :].strip()


def build(
    raw: str,
    base_env: Mapping[str, str] | None = None,
    extra_args: Sequence[str] = (),
) -> ProcessSpec:
    """Build a process spec from a command string.

    Args:
        raw: Command string, optionally prefixed with an environment block.
        base_env: Variables every child receives.
        extra_args: Arguments appended after those parsed from ``raw``.

    Returns:
        The process spec.

    Raises:
        MalformedEnvBlockError: If the environment block is not terminated.
        EmptyCommandError: If no program remains after the block.

    """
    env, remainder = parse_env_block(raw)
    tokens = [token for token in remainder.split(" ") if token]
    if not tokens:
        raise EmptyCommandError(raw)
    return ProcessSpec(
        program=tokens[0],
        args=(*tokens[1:], *extra_args),
        env=env,
        base_env=dict(base_env or {}),
    )


def build_command(command: Command, base_env: Mapping[str, str] | None = None) -> ProcessSpec:
    """Build the process spec for a parsed project command."""
    return build(command.command, base_env, extra_args=command.args)


def resolve_exec_dir(project: ProjectDefinition, config: SaltConfig, cwd: Path) -> Path:
    """Pick the directory a project's command runs in.

    Pinned projects run in their registered path; everything else runs in
    the current directory.
    """
    if project.is_pinned:
        pinned = config.pinned_paths.get(project.name)
        return Path(pinned) if pinned else project.exec_path
    return cwd


def run(spec: ProcessSpec, cwd: Path) -> int:
    """Run a process to completion.

    Args:
        spec: What to run.
        cwd: Working directory.

    Returns:
        The child's exit status. Non-zero statuses are returned, not raised.

    Raises:
        SpawnError: If the program cannot be launched.

    """
    logger.info("Running %s in %s", " ".join(spec.argv), cwd)
    try:
        completed = subprocess.run(spec.argv, cwd=cwd, env=spec.environ(), check=False)
    except OSError as e:
        raise SpawnError(spec.program, e) from e
    logger.debug("%s exited with %d", spec.program, completed.returncode)
    return completed.returncode


def spawn(
    spec: ProcessSpec,
    cwd: Path,
    popen: PopenFactory = subprocess.Popen,
) -> "subprocess.Popen[bytes]":
    """Start a process without waiting for it.

    Raises:
        SpawnError: If the program cannot be launched.

    """
    try:
        process = popen(spec.argv, cwd=cwd, env=spec.environ())
    except OSError as e:
        raise SpawnError(spec.program, e) from e
    logger.info("Started %s (PID %d)", " ".join(spec.argv), process.pid)
    return process
