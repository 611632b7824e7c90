"""Typed project definition produced by the definition parser."""

from dataclasses import dataclass, field
from pathlib import Path

from salt_runner.definition.blocks import Block

DEFAULT_KIND = "project"
DEFAULT_HELP = "no help provided, add a ## Help section to SALT.md"


@dataclass(frozen=True)
class Command:
    """A named command declared by a project.

    Attributes:
        about: One-line description shown in help output.
        command: Literal string to execute. May start with an inline
            environment block, e.g. ``[PORT=8080] python -m http.server``.
        args: Pre-split arguments appended after the parsed command line.

    """

    about: str
    command: str
    args: tuple[str, ...] = ()


@dataclass
class ProjectOptions:
    """Free-form options from the ``## Options`` section."""

    typ: str = DEFAULT_KIND
    name: str = ""


@dataclass
class ProjectDefinition:
    """Parsed form of a project's SALT.md.

    ``processed`` is True only when the whole document was consumed without
    hitting a malformed section marker or list item. A definition with an
    empty ``name`` is never a valid project.
    """

    options: ProjectOptions = field(default_factory=ProjectOptions)
    about: str = ""
    help: str = DEFAULT_HELP
    commands: dict[str, Command] = field(default_factory=dict)
    docs: dict[str, list[Block]] = field(default_factory=dict)
    processed: bool = False

    is_pinned: bool = False
    project_path: Path = field(default_factory=Path)
    exec_path: Path = field(default_factory=Path)

    @property
    def name(self) -> str:
        return self.options.name

    @property
    def kind(self) -> str:
        return self.options.typ
