"""
Tests for elevation module.

PURPOSE: Verify the administrator check and the elevated relaunch command.
AI CONTEXT: sys attributes are patched; PowerShell is never started.
"""

from __future__ import annotations

import sys
from unittest.mock import patch

import pytest
from conftest import MockCommandRunner

from zapret_service_manager.commands import CommandError
from zapret_service_manager.elevation import (
    ElevationError,
    WindowsElevation,
    current_program,
)


class TestIsElevated:
    def test_net_session_success(self, runner: MockCommandRunner) -> None:
        assert WindowsElevation(runner).is_elevated() is True
        assert runner.calls == [["net", "session"]]

    def test_net_session_denied(self, runner: MockCommandRunner) -> None:
        runner.script(["net", "session"], "System error 5 has occurred.", returncode=2)

        assert WindowsElevation(runner).is_elevated() is False

    def test_net_unavailable(self, runner: MockCommandRunner) -> None:
        runner.fail(["net"])

        assert WindowsElevation(runner).is_elevated() is False


class TestCurrentProgram:
    def test_interpreter_runs_module(self) -> None:
        with patch.object(sys, "executable", r"C:\Python\python.exe"):
            assert current_program() == (
                r"C:\Python\python.exe",
                ["-m", "zapret_service_manager"],
            )

    def test_frozen_build_runs_itself(self) -> None:
        with (
            patch.object(sys, "executable", r"C:\tools\zapret-sm.exe"),
            patch.object(sys, "frozen", True, create=True),
        ):
            assert current_program() == (r"C:\tools\zapret-sm.exe", [])

    def test_missing_executable(self) -> None:
        with patch.object(sys, "executable", ""), pytest.raises(ElevationError):
            current_program()


class TestRelaunch:
    """Tests for WindowsElevation.relaunch()."""

    def test_powershell_runas_command(self, runner: MockCommandRunner) -> None:
        """
        Verifies the relaunch passes the marker and operation to an elevated copy.

        Business context:
        The elevated copy must resume the operation the operator chose,
        not reopen the menu.

        Arrangement:
        Interpreter path containing a space and an apostrophe.

        Action:
        relaunch(['admin', 'install']).

        Assertion Strategy:
        One PowerShell spawn with RunAs, quoted path and the argument list.
        """
        with patch.object(sys, "executable", r"C:\Program Files\O'Py\python.exe"):
            WindowsElevation(runner).relaunch(["admin", "install"])

        assert runner.calls == []
        assert len(runner.spawned) == 1
        cmd = runner.spawned[0]
        assert cmd[:3] == ["powershell", "-NoProfile", "-Command"]
        assert cmd[3] == (
            "Start-Process -FilePath 'C:\\Program Files\\O''Py\\python.exe' "
            "-ArgumentList '-m zapret_service_manager admin install' -Verb RunAs"
        )

    def test_spawn_failure_is_elevation_error(self, runner: MockCommandRunner) -> None:
        runner.spawn_error = CommandError(["powershell"], "not found")

        with patch.object(sys, "executable", "python.exe"), pytest.raises(ElevationError):
            WindowsElevation(runner).relaunch(["admin", "remove"])
