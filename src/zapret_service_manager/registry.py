"""
Service registry client for the Windows service manager.

PURPOSE: Thin synchronous wrappers around sc.exe for one named service.
AI CONTEXT: create/start/stop/delete/query; status parsing lives in status.py.

OPERATIONS:
    sc query  <name>
    sc create <name> binPath= "<binary>" <args> start= auto
    sc start  <name>
    sc stop   <name>
    sc delete <name>

IDEMPOTENCE:
sc.exe refuses to create an existing service (1073) and to delete a missing
one (1060) with a non-zero exit code, so repeating any operation fails
cleanly instead of corrupting state.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Protocol

from .status import parse_query_output

if TYPE_CHECKING:
    from .commands import CommandResult, CommandRunner
    from .models import ServiceDescriptor, ServiceStatus

__all__ = ["ServiceRegistry", "ScServiceRegistry"]

logger = logging.getLogger(__name__)

SC_EXECUTABLE = "sc"


class ServiceRegistry(Protocol):
    """
    Protocol for service-manager operations on a named service.

    Mutating operations return True on success and False when the service
    manager ran but reported failure. CommandError propagates when the
    service manager itself cannot be invoked.
    """

    def query(self, name: str) -> str: ...

    def status(self, name: str) -> ServiceStatus: ...

    def create(self, descriptor: ServiceDescriptor) -> bool: ...

    def start(self, name: str) -> bool: ...

    def stop(self, name: str) -> bool: ...

    def delete(self, name: str) -> bool: ...


class ScServiceRegistry:
    """
    ServiceRegistry backed by sc.exe.

    Business context: zapret runs winws.exe as a Windows service so the
    filter survives logoff and reboot. sc.exe ships with every Windows
    install, so no extra tooling is needed.
    """

    def __init__(self, runner: CommandRunner) -> None:
        """
        Args:
            runner: CommandRunner used for every sc.exe invocation.
        """
        self._runner = runner

    def query(self, name: str) -> str:
        """
        Return raw `sc query` output for a service.

        The text is returned whatever the exit code; a missing service
        simply has no STATE field.

        Raises:
            CommandError: If sc.exe cannot be run.
        """
        return self._runner.run([SC_EXECUTABLE, "query", name]).stdout

    def status(self, name: str) -> ServiceStatus:
        """Query a service and normalize its state."""
        return parse_query_output(self.query(name))

    def create(self, descriptor: ServiceDescriptor) -> bool:
        """
        Register a service from a descriptor.

        sc.exe expects each `key=` and its value as separate arguments.

        Raises:
            CommandError: If sc.exe cannot be run.
        """
        result = self._runner.run(
            [
                SC_EXECUTABLE,
                "create",
                descriptor.name,
                "binPath=",
                descriptor.command_line,
                "start=",
                descriptor.start_mode.value,
            ]
        )
        return self._report(result, "create", descriptor.name)

    def start(self, name: str) -> bool:
        return self._report(self._runner.run([SC_EXECUTABLE, "start", name]), "start", name)

    def stop(self, name: str) -> bool:
        return self._report(self._runner.run([SC_EXECUTABLE, "stop", name]), "stop", name)

    def delete(self, name: str) -> bool:
        return self._report(self._runner.run([SC_EXECUTABLE, "delete", name]), "delete", name)

    @staticmethod
    def _report(result: CommandResult, action: str, name: str) -> bool:
        if result.ok:
            logger.info(f"sc {action} {name}: success")
            return True
        logger.error(
            f"sc {action} {name} failed with exit code {result.returncode}: "
            f"{result.stdout.strip()}"
        )
        return False
