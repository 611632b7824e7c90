"""Tests for salt_runner.invocation.

Covers:
- Inline environment block parsing
- Program/argument splitting and extra arguments
- Environment merge order
- Working directory selection
- Synchronous runs and launch failures
"""

import sys
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from salt_runner.core.config import SaltConfig
from salt_runner.core.exceptions import EmptyCommandError, MalformedEnvBlockError, SpawnError
from salt_runner.definition import Command, ProjectDefinition, ProjectOptions
from salt_runner.invocation import (
    ProcessSpec,
    build,
    build_command,
    parse_env_block,
    resolve_exec_dir,
    run,
    spawn,
)


class TestParseEnvBlock:
    def test_no_block(self) -> None:
        assert parse_env_block("  echo hi ") == ({}, "echo hi")

    def test_pairs_and_remainder(self) -> None:
        assert parse_env_block("[a=1 b=2] echo hi") == ({"a": "1", "b": "2"}, "echo hi")

    def test_tokens_without_equals_are_ignored(self) -> None:
        env, _ = parse_env_block("[a=1 junk =x b=] run")

        assert env == {"a": "1", "b": ""}

    def test_value_may_contain_equals(self) -> None:
        env, _ = parse_env_block("[URL=a=b] run")

        assert env == {"URL": "a=b"}

    def test_unterminated(self) -> None:
        with pytest.raises(MalformedEnvBlockError, match="not terminated"):
            parse_env_block("[a=1 echo hi")


class TestBuild:
    def test_env_block_command(self) -> None:
        spec = build("[a=1 b=2] echo hi")

        assert spec.env == {"a": "1", "b": "2"}
        assert spec.program == "echo"
        assert spec.args == ("hi",)

    def test_unterminated_block(self) -> None:
        with pytest.raises(MalformedEnvBlockError):
            build("[a=1 echo hi")

    def test_repeated_spaces_do_not_make_empty_args(self) -> None:
        spec = build("go  build   .")

        assert spec.argv == ["go", "build", "."]

    def test_extra_args_are_appended(self) -> None:
        spec = build("go test", extra_args=["./...", "-v"])

        assert spec.args == ("test", "./...", "-v")

    def test_empty_command(self) -> None:
        with pytest.raises(EmptyCommandError):
            build("[A=1]   ")

    def test_build_command_uses_legacy_args(self) -> None:
        command = Command(about="x", command="[X=1] ls", args=("-la",))

        spec = build_command(command, {"SALT_OS": "linux"})

        assert spec.argv == ["ls", "-la"]
        assert spec.base_env == {"SALT_OS": "linux"}


class TestEnviron:
    def test_merge_order(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """os.environ < base env < inline block."""
        monkeypatch.setenv("SHARED", "process")
        monkeypatch.setenv("ONLY_PROCESS", "yes")
        spec = ProcessSpec(
            program="x",
            env={"SHARED": "block"},
            base_env={"SHARED": "base", "SALT_OS": "linux"},
        )

        environ = spec.environ()

        assert environ["SHARED"] == "block"
        assert environ["SALT_OS"] == "linux"
        assert environ["ONLY_PROCESS"] == "yes"


class TestResolveExecDir:
    def _project(self, pinned: bool, exec_path: Path) -> ProjectDefinition:
        return ProjectDefinition(
            options=ProjectOptions(name="app"), is_pinned=pinned, exec_path=exec_path
        )

    def test_pinned_uses_registered_path(self, tmp_path: Path) -> None:
        config = SaltConfig(pinned_paths={"app": "/srv/app"})

        assert resolve_exec_dir(self._project(True, tmp_path), config, Path("/cwd")) == Path("/srv/app")

    def test_pinned_without_entry_uses_exec_path(self, tmp_path: Path) -> None:
        assert resolve_exec_dir(self._project(True, tmp_path), SaltConfig(), Path("/cwd")) == tmp_path

    def test_unpinned_uses_cwd(self, tmp_path: Path) -> None:
        config = SaltConfig(pinned_paths={"app": "/srv/app"})

        assert resolve_exec_dir(self._project(False, tmp_path), config, Path("/cwd")) == Path("/cwd")


class TestRun:
    def test_exit_status_is_returned(self, tmp_path: Path) -> None:
        spec = ProcessSpec(program=sys.executable, args=("-c", "import sys; sys.exit(3)"))

        assert run(spec, tmp_path) == 3

    def test_child_sees_env_and_cwd(self, tmp_path: Path) -> None:
        script = "import os, pathlib; pathlib.Path('out.txt').write_text(os.environ['FOO'] + os.environ['SALT_OS'])"
        spec = ProcessSpec(
            program=sys.executable,
            args=("-c", script),
            env={"FOO": "bar"},
            base_env={"SALT_OS": "-os"},
        )

        assert run(spec, tmp_path) == 0
        assert (tmp_path / "out.txt").read_text() == "bar-os"

    def test_launch_failure(self, tmp_path: Path) -> None:
        spec = ProcessSpec(program="salt-test-no-such-program-xyz")

        with pytest.raises(SpawnError) as exc_info:
            run(spec, tmp_path)
        assert exc_info.value.program == "salt-test-no-such-program-xyz"


class TestSpawn:
    def test_uses_popen_factory(self, tmp_path: Path) -> None:
        popen = MagicMock()
        popen.return_value.pid = 42

        process = spawn(ProcessSpec(program="srv", args=("--port", "1")), tmp_path, popen)

        assert process.pid == 42
        args, kwargs = popen.call_args
        assert args == (["srv", "--port", "1"],)
        assert kwargs["cwd"] == tmp_path

    def test_oserror_becomes_spawn_error(self, tmp_path: Path) -> None:
        popen = MagicMock(side_effect=PermissionError(13, "Permission denied"))

        with pytest.raises(SpawnError):
            spawn(ProcessSpec(program="srv"), tmp_path, popen)
