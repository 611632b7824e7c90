"""Dispatch of intrinsic verbs and project commands.

The Interface is built once per run: it loads the config, keeps an untouched
copy of it, loads the project registry and the base environment, and then
routes the first argument either to an intrinsic verb or to a project.
"""

import logging
import shlex
import subprocess
from collections.abc import Callable, Sequence
from pathlib import Path

import typer
from rich.console import Console
from rich.markdown import Markdown
from rich.markup import escape
from rich.table import Table

from salt_runner.cli_utils import EXIT_SUCCESS
from salt_runner.core.config import SaltConfig, get_cache_dir, load_config, write_config
from salt_runner.core.environment import build_base_env
from salt_runner.core.exceptions import (
    CommandNotFoundError,
    ConfigError,
    IntrinsicNameError,
    NotAProjectError,
    ProjectExistsError,
    ProjectNotFoundError,
    SaltError,
    SpawnError,
)
from salt_runner.definition import DEFINITION_FILENAME, ProjectDefinition, parse_file
from salt_runner.doc import render_project_doc
from salt_runner.invocation import ProcessSpec, build, build_command, resolve_exec_dir, run
from salt_runner.registry import INTRINSICS, ProjectRegistry, find_intrinsic, is_intrinsic, load_registry
from salt_runner.watcher import DebouncedEventSource, WatchSupervisor

logger = logging.getLogger(__name__)

INIT_TEMPLATE = """\
# {name}

{name} is a salt project.

## Help

commands for {name}

## Commands

- hello - `echo hello from {name}` - prints a greeting

## Options

- name - {name}
- type - project

### Getting started

Run `salt {name} hello` from anywhere after `salt pin`.
"""


class Interface:
    """One salt run.

    Attributes:
        config: Working config. Loses the current directory's pin while the
            registry loads so that project is only loaded once.
        full_config: Config exactly as read from disk.
        registry: Loaded projects.
        env_vars: SALT_* variables passed to every child.

    """

    def __init__(
        self,
        config: SaltConfig,
        cwd: Path,
        argv: Sequence[str],
        cache_dir: Path,
        console: Console | None = None,
    ) -> None:
        self.full_config = config
        self.config = config.model_copy(deep=True)
        self.cwd = cwd
        self.cache_dir = cache_dir
        self.console = console or Console()
        self.env_vars = build_base_env(argv, cwd)
        self.registry: ProjectRegistry = load_registry(self.config, cwd)

        self._verbs: dict[str, Callable[[Sequence[str]], int]] = {
            "init": self.init_project,
            "add": self._unsupported("add"),
            "doc": self.show_doc,
            "edit": self.open_editor,
            "pin": self.pin_project,
            "open": self.open_project,
            "unpin": self.unpin_project,
            "jump": self.jump_to_project,
            "watch": self.watch_project_cmd,
            "+": self.run_wildcard,
            "-": self._unsupported("-"),
        }

    @classmethod
    def init(
        cls,
        argv: Sequence[str],
        cwd: Path | None = None,
        cache_dir: Path | None = None,
        console: Console | None = None,
    ) -> "Interface":
        """Load config and projects for a run.

        Raises:
            ConfigError: If the config file is invalid.
            IntrinsicNameError: If a project is named after a verb.

        """
        cache_dir = cache_dir or get_cache_dir()
        config = load_config(cache_dir)
        return cls(config, cwd or Path.cwd(), argv, cache_dir, console)

    def run(self, args: Sequence[str]) -> int:
        """Dispatch the arguments that follow the program name.

        Returns:
            Exit status: the child's status for commands, 0 for verbs.

        """
        if not args:
            self.display_salt_help()
            return EXIT_SUCCESS

        word, rest = args[0], args[1:]
        intrinsic = find_intrinsic(word)
        if intrinsic is None:
            return self.run_project_cmd(word, rest)
        logger.debug("Intrinsic %s with %s", intrinsic.name, list(rest))
        return self._verbs[intrinsic.name](rest)

    # =========================================================================
    # Project commands
    # =========================================================================

    def run_project_cmd(self, project_name: str, args: Sequence[str]) -> int:
        """Run ``salt <project> <command> [extra args...]``."""
        project = self.registry.require(project_name)
        if not args:
            self.display_project_help(project)
            return EXIT_SUCCESS

        command = project.commands.get(args[0])
        if command is None:
            self.console.print("Cannot find command in this project, here's something to work with...")
            self.display_project_help(project)
            raise CommandNotFoundError(project_name, args[0])

        spec = build(command.command, self.env_vars, extra_args=(*command.args, *args[1:]))
        exec_dir = resolve_exec_dir(project, self.config, self.cwd)
        logger.info("Setting working dir: %s", exec_dir)
        return run(spec, exec_dir)

    def watch_project_cmd(self, args: Sequence[str]) -> int:
        """Run ``salt watch <project> <command>`` until interrupted."""
        if len(args) < 2:
            raise SaltError("usage: salt watch {project} {command}")
        project = self.registry.require(args[0])
        command = project.commands.get(args[1])
        if command is None:
            raise CommandNotFoundError(project.name, args[1])

        spec = build_command(command, self.env_vars)
        source = DebouncedEventSource(project.exec_path, self.config.watcher.debounce_secs)
        supervisor = WatchSupervisor(spec, resolve_exec_dir(project, self.config, self.cwd), source)
        self.console.print(f"watching {project.exec_path} for {project.name} {args[1]}", markup=False)
        try:
            supervisor.run()
        finally:
            source.close()
        return EXIT_SUCCESS

    def run_wildcard(self, args: Sequence[str]) -> int:
        """Run ``salt + <project> <program> [args...]`` in a project directory.

        When the first argument is not a project it is run as a program in the
        current directory. Program and arguments are passed as given, without
        environment-block parsing or splitting.
        """
        if not args:
            raise ProjectNotFoundError("")
        project = self.registry.get(args[0])
        if project is None:
            spec = ProcessSpec(program=args[0], args=tuple(args[1:]), base_env=self.env_vars)
            return run(spec, self.cwd)
        if len(args) < 2:
            raise SaltError("usage: salt + {project} {commands...}")
        spec = ProcessSpec(program=args[1], args=tuple(args[2:]), base_env=self.env_vars)
        return run(spec, project.exec_path)

    # =========================================================================
    # Project management verbs
    # =========================================================================

    def init_project(self, args: Sequence[str]) -> int:
        definition_path = self.cwd / DEFINITION_FILENAME
        if definition_path.exists():
            raise ProjectExistsError(self.cwd)
        definition_path.write_text(INIT_TEMPLATE.format(name=self.cwd.name), encoding="utf-8")
        self.console.print(f"created {definition_path}", markup=False)
        return EXIT_SUCCESS

    def pin_project(self, args: Sequence[str]) -> int:
        project = self._cwd_definition()
        if is_intrinsic(project.name):
            raise IntrinsicNameError(project.name, self.cwd)

        config = self.full_config.model_copy(deep=True)
        config.pinned_paths[project.name] = str(self.cwd)
        write_config(config, self.cache_dir)
        self.full_config = config
        self.console.print(f"pinned :: {self.cwd}", markup=False)
        return EXIT_SUCCESS

    def unpin_project(self, args: Sequence[str]) -> int:
        if not args:
            raise ProjectNotFoundError("")
        name = args[0]
        if name not in self.registry and name not in self.full_config.pinned_paths:
            raise ProjectNotFoundError(name)
        if name not in self.full_config.pinned_paths:
            raise SaltError(f"project {name} is not pinned")

        config = self.full_config.model_copy(deep=True)
        del config.pinned_paths[name]
        write_config(config, self.cache_dir)
        self.full_config = config
        self.console.print(f"unpinned :: {name}", markup=False)
        return EXIT_SUCCESS

    def jump_to_project(self, args: Sequence[str]) -> int:
        if not args:
            raise ProjectNotFoundError("")
        project = self.registry.require(args[0])
        self.console.print(str(project.exec_path), soft_wrap=True, markup=False, highlight=False)
        return EXIT_SUCCESS

    def open_editor(self, args: Sequence[str]) -> int:
        editor = self.config.editor
        if not editor:
            raise ConfigError(f"add your editor to {self.cache_dir / 'config.yaml'}")
        if args:
            path = self.registry.require(args[0]).exec_path
        else:
            path = self._cwd_definition().project_path

        argv = [*shlex.split(editor), str(path)]
        logger.info("Opening editor: %s", " ".join(argv))
        try:
            return subprocess.run(argv, check=False).returncode
        except OSError as e:
            raise SpawnError(argv[0], e) from e

    def open_project(self, args: Sequence[str]) -> int:
        if not args:
            raise ProjectNotFoundError("")
        project = self.registry.require(args[0])
        return typer.launch(str(project.exec_path))

    def show_doc(self, args: Sequence[str]) -> int:
        project = self.registry.require(args[0]) if args else self._cwd_definition()
        self.console.print(Markdown(render_project_doc(project)))
        return EXIT_SUCCESS

    # =========================================================================
    # Help output
    # =========================================================================

    def display_salt_help(self) -> None:
        from salt_runner import __version__

        self.console.print(f"[bold]\\[salt][/bold] gives you superpowers\nversion: {__version__}\n")

        verbs = Table(title="salt commands", show_header=False, box=None, title_justify="left")
        for intrinsic in INTRINSICS:
            alias = f"[{intrinsic.alias}]" if intrinsic.alias else ""
            verbs.add_row(escape(intrinsic.name), escape(alias), escape(intrinsic.about))
        self.console.print(verbs)

        projects = Table(title="project commands", show_header=False, box=None, title_justify="left")
        for project in self.registry:
            projects.add_row(escape(project.name), "pinned" if project.is_pinned else "", escape(project.help))
        self.console.print(projects)

    def display_project_help(self, project: ProjectDefinition) -> None:
        self.console.print(f"[bold]\\[{escape(project.name.upper())} :: {escape(project.kind)}][/bold]\n")
        if project.about:
            self.console.print(project.about, markup=False, highlight=False)
        table = Table(title="Commands", show_header=False, box=None, title_justify="left")
        for name, command in sorted(project.commands.items()):
            table.add_row(escape(name), escape(command.about))
        self.console.print(table)

    # =========================================================================
    # Helpers
    # =========================================================================

    def _cwd_definition(self) -> ProjectDefinition:
        definition_path = self.cwd / DEFINITION_FILENAME
        if not definition_path.exists():
            raise NotAProjectError(self.cwd)
        definition = parse_file(definition_path)
        if not definition.name:
            raise NotAProjectError(self.cwd, reason="project has no name")
        definition.project_path = self.cwd
        definition.exec_path = self.cwd
        return definition

    @staticmethod
    def _unsupported(verb: str) -> Callable[[Sequence[str]], int]:
        def handler(args: Sequence[str]) -> int:
            raise SaltError(f"'{verb}' is not supported by this version of salt")

        return handler
