"""
Administrator privilege check and elevated relaunch.

PURPOSE: Capability used by install/remove to obtain administrator rights.
AI CONTEXT: Lifecycle code depends on the Elevation protocol only, so tests
inject an always-elevated fake.

FLOW:
1. is_elevated() runs `net session`, which succeeds only for administrators
2. relaunch() starts this program again through PowerShell
   `Start-Process -Verb RunAs`, passing the marker argument and the operation
3. The caller exits; the elevated copy sees the marker and runs the operation
"""

from __future__ import annotations

import logging
import subprocess  # nosec B404
import sys
from collections.abc import Sequence
from typing import TYPE_CHECKING, Protocol

from .commands import CommandError, ZapretServiceError

if TYPE_CHECKING:
    from .commands import CommandRunner

__all__ = ["Elevation", "ElevationError", "WindowsElevation", "current_program"]

logger = logging.getLogger(__name__)

MODULE_NAME = "zapret_service_manager"


class ElevationError(ZapretServiceError):
    """The elevated relaunch could not be requested."""


class Elevation(Protocol):
    """Privilege capability: check, or hand off to an elevated copy."""

    def is_elevated(self) -> bool: ...

    def relaunch(self, marker_args: Sequence[str]) -> None: ...


def current_program() -> tuple[str, list[str]]:
    """
    Resolve how to start this program again.

    Returns:
        (executable, leading arguments). A frozen build relaunches its own
        executable; otherwise the interpreter runs the package module.

    Raises:
        ElevationError: If the interpreter path is unavailable.
    """
    executable = sys.executable
    if not executable:
        raise ElevationError("Cannot determine the path of the running executable")
    if getattr(sys, "frozen", False):
        return executable, []
    return executable, ["-m", MODULE_NAME]


def _ps_quote(value: str) -> str:
    """Quote a value as a PowerShell single-quoted string."""
    return "'" + value.replace("'", "''") + "'"


class WindowsElevation:
    """Elevation via `net session` and PowerShell Start-Process -Verb RunAs."""

    def __init__(self, runner: CommandRunner) -> None:
        self._runner = runner

    def is_elevated(self) -> bool:
        """
        Check for administrator rights.

        Returns:
            True if `net session` succeeds. Any failure, including being
            unable to run net.exe, counts as not elevated.
        """
        try:
            return self._runner.run(["net", "session"]).ok
        except CommandError as e:
            logger.debug(f"Elevation check failed: {e}")
            return False

    def relaunch(self, marker_args: Sequence[str]) -> None:
        """
        Start an elevated copy of this program with the given arguments.

        The UAC prompt is shown by Windows; this call returns as soon as
        PowerShell has been started and the caller is expected to exit.

        Args:
            marker_args: Arguments for the elevated copy, e.g. ['admin', 'install'].

        Raises:
            ElevationError: If the program path cannot be resolved or
                PowerShell cannot be started.
        """
        executable, leading = current_program()
        arguments = subprocess.list2cmdline([*leading, *marker_args])
        command = (
            f"Start-Process -FilePath {_ps_quote(executable)} "
            f"-ArgumentList {_ps_quote(arguments)} -Verb RunAs"
        )
        logger.info("Requesting administrator privileges")
        try:
            self._runner.spawn(["powershell", "-NoProfile", "-Command", command])
        except CommandError as e:
            raise ElevationError(f"Failed to request elevation: {e}") from e
