"""Project registry.

Loads the SALT.md of the current directory plus one per pinned path into a
name-keyed map. Rules:

- A project named after an intrinsic verb aborts the load.
- The first project loaded under a name wins; later ones are dropped and
  recorded as collisions.
- A current directory that is also pinned is loaded once, as the current
  directory project.
"""

import logging
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path

from salt_runner.core.config import SaltConfig
from salt_runner.core.exceptions import IntrinsicNameError, ProjectNotFoundError
from salt_runner.definition import DEFINITION_FILENAME, ProjectDefinition, parse_file

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Intrinsic:
    """Built-in verb."""

    name: str
    alias: str
    about: str


INTRINSICS: tuple[Intrinsic, ...] = (
    Intrinsic("init", "i", "Initialize new salt project in this directory"),
    Intrinsic("add", "a", "Adds a salt project to your machine"),
    Intrinsic("doc", "d", "Show a project's documentation"),
    Intrinsic("edit", "e", "Open the project in your editor"),
    Intrinsic("pin", "p", "Pin this folder as a salt project"),
    Intrinsic("open", "o", "Open a salt project in the file explorer"),
    Intrinsic("unpin", "unp", "Unpin a pinned salt project"),
    Intrinsic("jump", "j", "Print a project directory: cd $(salt j PROJECT)"),
    Intrinsic("watch", "w", "Run a project command, restarting it on file changes"),
    Intrinsic("+", "", "Run any program in a project's directory"),
    Intrinsic("-", "", "Run the last salt command"),
)


def find_intrinsic(word: str) -> Intrinsic | None:
    """Return the intrinsic whose name or alias is ``word``."""
    if not word:
        return None
    for intrinsic in INTRINSICS:
        if word in (intrinsic.name, intrinsic.alias):
            return intrinsic
    return None


def is_intrinsic(word: str) -> bool:
    return find_intrinsic(word) is not None


@dataclass(frozen=True)
class Collision:
    """A project dropped because its name was already taken."""

    name: str
    path: Path
    kept_path: Path


class ProjectRegistry:
    """Name-keyed map of loaded project definitions.

    Attributes:
        collisions: Projects dropped because of a duplicate name, in load order.

    """

    def __init__(self) -> None:
        self._projects: dict[str, ProjectDefinition] = {}
        self.collisions: list[Collision] = []

    def add(self, definition: ProjectDefinition) -> bool:
        """Insert a definition unless its name is taken.

        Args:
            definition: Parsed definition with paths and origin set.

        Returns:
            True if inserted, False if dropped as a collision.

        Raises:
            IntrinsicNameError: If the name is an intrinsic verb.

        """
        name = definition.name
        if is_intrinsic(name):
            raise IntrinsicNameError(name, definition.project_path)

        existing = self._projects.get(name)
        if existing is not None:
            collision = Collision(name, definition.project_path, existing.project_path)
            self.collisions.append(collision)
            logger.warning(
                "There is a name conflict for project: %s at path: %s (keeping %s)",
                name,
                definition.project_path,
                existing.project_path,
            )
            return False

        self._projects[name] = definition
        logger.debug("Registered project %s from %s", name, definition.project_path)
        return True

    def get(self, name: str) -> ProjectDefinition | None:
        return self._projects.get(name)

    def require(self, name: str) -> ProjectDefinition:
        """Return the named project.

        Raises:
            ProjectNotFoundError: If no project has that name.

        """
        project = self._projects.get(name)
        if project is None:
            raise ProjectNotFoundError(name)
        return project

    def __contains__(self, name: object) -> bool:
        return name in self._projects

    def __iter__(self) -> Iterator[ProjectDefinition]:
        return iter(self._projects.values())

    def __len__(self) -> int:
        return len(self._projects)


def load_registry(config: SaltConfig, cwd: Path) -> ProjectRegistry:
    """Load the current-directory project and all pinned projects.

    Args:
        config: Working copy of the config. If ``cwd`` is pinned, its entry is
            removed from this copy so the project is only loaded once.
        cwd: Current working directory.

    Returns:
        The populated registry.

    Raises:
        IntrinsicNameError: If any project is named after an intrinsic verb.
            Remaining projects are not loaded.

    """
    registry = ProjectRegistry()
    _load_current_dir_project(registry, config, cwd)
    _load_pinned_projects(registry, config)
    return registry


def _load_current_dir_project(registry: ProjectRegistry, config: SaltConfig, cwd: Path) -> None:
    definition_path = cwd / DEFINITION_FILENAME
    if not definition_path.exists():
        logger.debug("No %s in %s", DEFINITION_FILENAME, cwd)
        return

    pinned_name = config.pinned_name_for(cwd)
    if pinned_name is not None:
        logger.debug("Current directory is also pinned as %s, loading it once", pinned_name)
        del config.pinned_paths[pinned_name]

    definition = parse_file(definition_path)
    if not definition.name:
        logger.warning("Current salt %s doesn't have a name!", definition.kind)
        return

    definition.project_path = cwd
    definition.exec_path = cwd
    registry.add(definition)


def _load_pinned_projects(registry: ProjectRegistry, config: SaltConfig) -> None:
    for pin_name, path_str in config.pinned_paths.items():
        path = Path(path_str)
        definition_path = path / DEFINITION_FILENAME
        if not definition_path.exists():
            logger.warning("Pinned path %s (%s) has no %s", path, pin_name, DEFINITION_FILENAME)
            continue

        definition = parse_file(definition_path)
        if not definition.name:
            logger.warning("Pinned %s at %s doesn't have a name!", definition.kind, path)
            continue

        definition.is_pinned = True
        definition.project_path = path
        definition.exec_path = path
        registry.add(definition)
