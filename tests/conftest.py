"""Pytest configuration and fixtures for salt-runner tests."""

from collections.abc import Callable
from pathlib import Path

import pytest

from salt_runner.core.config import CACHE_DIR_ENV


@pytest.fixture(autouse=True)
def salt_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point the cache directory at a per-test temp dir.

    This ensures tests never read or write the real ~/.salt.
    """
    home = tmp_path / "salt-home"
    monkeypatch.setenv(CACHE_DIR_ENV, str(home))
    return home


@pytest.fixture
def write_project(tmp_path: Path) -> Callable[..., Path]:
    """Create a project directory holding a SALT.md.

    Returns a factory: write_project(dirname, name, commands=..., extra=...)
    where commands maps command name to (command string, about).
    """

    def _write(
        dirname: str,
        name: str,
        commands: dict[str, tuple[str, str]] | None = None,
        extra: str = "",
    ) -> Path:
        project_dir = tmp_path / dirname
        project_dir.mkdir(parents=True, exist_ok=True)
        lines = [f"# {name}", "", f"About {name}.", "", "## Commands", ""]
        for cmd_name, (command, about) in (commands or {}).items():
            lines.append(f"- {cmd_name} - `{command}` - {about}")
        lines += ["", "## Options", "", f"- name - {name}", ""]
        if extra:
            lines.append(extra)
        (project_dir / "SALT.md").write_text("\n".join(lines) + "\n", encoding="utf-8")
        return project_dir

    return _write
