"""
Worker process detection via tasklist.

PURPOSE: Report whether an executable image currently has a running instance.
AI CONTEXT: Status checks must never crash the tool, so failures read as "not running".
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .commands import CommandError

if TYPE_CHECKING:
    from .commands import CommandRunner

__all__ = ["ProcessChecker"]

logger = logging.getLogger(__name__)


class ProcessChecker:
    """Checks process presence with `tasklist /FI "IMAGENAME eq <image>"`."""

    def __init__(self, runner: CommandRunner) -> None:
        self._runner = runner

    def is_running(self, image: str) -> bool:
        """
        Check whether a process with the given image name is running.

        tasklist prints a table row per match and an informational line
        otherwise, so presence is a substring test on the image name.

        Args:
            image: Executable image name, e.g. 'winws.exe'.

        Returns:
            True if the image name appears in the filtered listing. False
            when it does not, or when tasklist could not be run (logged).

        Example:
            >>> ProcessChecker(SubprocessRunner()).is_running("winws.exe")
            False
        """
        try:
            result = self._runner.run(["tasklist", "/FI", f"IMAGENAME eq {image}"])
        except CommandError as e:
            logger.warning(f"Could not list processes, treating {image} as not running: {e}")
            return False
        return image in result.stdout
