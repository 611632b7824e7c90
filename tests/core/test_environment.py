"""Tests for salt_runner.core.environment."""

import sys
from pathlib import Path
from unittest.mock import patch

from salt_runner.core import environment
from salt_runner.core.environment import build_base_env, current_os


class TestBuildBaseEnv:
    def test_contains_all_variables(self, tmp_path: Path) -> None:
        env = build_base_env(["salt", "app", "build"], cwd=tmp_path)

        assert env["SALT_ARGS"] == "salt app build"
        assert env["SALT_CWD"] == str(tmp_path)
        assert env["SALT_OS"] == current_os()
        assert "SALT_ARCH" in env


class TestCurrentOs:
    def test_macos(self) -> None:
        with patch.object(environment.sys, "platform", "darwin"):
            assert current_os() == "macos"

    def test_linux(self) -> None:
        with patch.object(environment.sys, "platform", "linux"):
            assert current_os() == "linux"

    def test_windows(self) -> None:
        with patch.object(sys, "platform", "win32"):
            assert current_os() == "windows"
