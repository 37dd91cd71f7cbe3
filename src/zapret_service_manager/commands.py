"""
Command runner abstraction for Zapret Service Manager.

PURPOSE: Single injectable seam for every OS facility the tool invokes.
AI CONTEXT: Allows tests to script sc.exe/tasklist/ipconfig output without Windows.

DESIGN:
- CommandRunner protocol defines run() (blocking, captured) and spawn() (detached)
- SubprocessRunner uses subprocess with a bounded timeout
- MockCommandRunner in tests/conftest.py returns scripted results

ERROR MODEL:
- The facility ran: CommandResult with its return code (non-zero is not an exception)
- The facility could not be started or timed out: CommandError
"""

from __future__ import annotations

import logging
import subprocess  # nosec B404
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol

from .config import Config

__all__ = [
    "ZapretServiceError",
    "CommandError",
    "CommandResult",
    "CommandRunner",
    "SubprocessRunner",
]

logger = logging.getLogger(__name__)


class ZapretServiceError(Exception):
    """Base class for errors raised by this package."""


class CommandError(ZapretServiceError, RuntimeError):
    """
    An external command could not be run to completion.

    Raised when the executable is missing, cannot be spawned, or exceeds
    the configured timeout.

    Attributes:
        command: The argument list that was attempted.
        reason: Human-readable cause.
    """

    def __init__(self, command: Sequence[str], reason: str) -> None:
        self.command = list(command)
        self.reason = reason
        super().__init__(f"{' '.join(self.command)}: {reason}")


@dataclass(frozen=True)
class CommandResult:
    """Completed external command."""

    args: tuple[str, ...]
    returncode: int
    stdout: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class CommandRunner(Protocol):
    """
    Protocol for invoking OS facilities.

    Implementations include SubprocessRunner for production and
    MockCommandRunner for tests.
    """

    def run(self, args: Sequence[str]) -> CommandResult:
        """
        Run a command to completion and capture its output.

        Args:
            args: Executable followed by its arguments.

        Returns:
            CommandResult with return code and combined stdout/stderr text.

        Raises:
            CommandError: If the command cannot be started or times out.
        """
        ...

    def spawn(self, args: Sequence[str]) -> None:
        """
        Start a command without waiting for it.

        Raises:
            CommandError: If the command cannot be started.
        """
        ...


class SubprocessRunner:
    """
    Production runner backed by subprocess.

    Output is decoded as text with undecodable bytes replaced, since
    Windows console tools write in the OEM code page.
    """

    def __init__(self, timeout: float = Config.COMMAND_TIMEOUT) -> None:
        """
        Args:
            timeout: Seconds to wait for run() before giving up.
        """
        self._timeout = timeout

    def run(self, args: Sequence[str]) -> CommandResult:
        cmd = [str(arg) for arg in args]
        logger.debug(f"RUN: {' '.join(cmd)}")
        try:
            completed = subprocess.run(  # nosec B603
                cmd,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                errors="replace",
                timeout=self._timeout,
                check=False,
            )
        except subprocess.TimeoutExpired as e:
            raise CommandError(cmd, f"timed out after {self._timeout:g}s") from e
        except OSError as e:
            raise CommandError(cmd, str(e)) from e

        output = completed.stdout or ""
        logger.debug(f"RET={completed.returncode}\n{output.strip()}")
        return CommandResult(tuple(cmd), completed.returncode, output)

    def spawn(self, args: Sequence[str]) -> None:
        cmd = [str(arg) for arg in args]
        logger.debug(f"SPAWN: {' '.join(cmd)}")
        try:
            subprocess.Popen(  # nosec B603
                cmd,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
            )
        except OSError as e:
            raise CommandError(cmd, str(e)) from e
