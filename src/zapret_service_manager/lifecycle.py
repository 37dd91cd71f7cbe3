"""
Service lifecycle orchestration.

PURPOSE: Install the zapret service from a strategy file, report status, remove services.
AI CONTEXT: Composes discovery, registry, process checker and elevation. No I/O of its own.

INSTALL SEQUENCE:
1. Require elevation (otherwise relaunch elevated with 'admin install')
2. List candidates; none -> NO_CONFIGURATION, service manager untouched
3. Operator chooses by 1-based index; invalid -> INVALID_SELECTION,
   unreadable file -> UNREADABLE_CONFIG
4. Extract arguments; none -> NO_ARGUMENTS (install aborted)
5. sc create, then sc start only if create succeeded

REMOVE SEQUENCE:
For the agent service and then the driver service: sc stop (best effort),
then sc delete. Every step is attempted and reported regardless of earlier
failures.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING

from .commands import CommandError
from .config import Config
from .discovery import InvalidSelectionError
from .elevation import ElevationError
from .models import (
    InstallOutcome,
    InstallResult,
    RemovalResult,
    ServiceDescriptor,
    ServiceStatus,
    StartMode,
    StatusReport,
    StepResult,
)

if TYPE_CHECKING:
    from .config import ManagerSettings
    from .discovery import ConfigDiscovery
    from .elevation import Elevation
    from .processes import ProcessChecker
    from .registry import ServiceRegistry

__all__ = ["ServiceLifecycleManager", "Chooser", "query_status"]

logger = logging.getLogger(__name__)

Chooser = Callable[[Sequence[str]], int]
"""Receives candidate file names, returns the operator's 1-based choice (0 if none)."""

COMMAND_FAILED_DETAIL = "service manager reported failure"


def query_status(registry: ServiceRegistry, name: str) -> ServiceStatus:
    """
    Query one service, mapping an unreachable service manager to UNKNOWN.

    A status line must never take the whole report down, so CommandError
    becomes UNKNOWN('error') for this service only.
    """
    try:
        return registry.status(name)
    except CommandError as e:
        logger.error(f"Could not query service {name}: {e}")
        return ServiceStatus.unknown("error")


class ServiceLifecycleManager:
    """
    Installs, inspects and removes the zapret services.

    Business context: This is what the operator's menu choices map to.
    Install and remove change system state and need administrator rights;
    the status report is read-only and runs unprivileged.
    """

    def __init__(
        self,
        registry: ServiceRegistry,
        processes: ProcessChecker,
        discovery: ConfigDiscovery,
        elevation: Elevation,
        settings: ManagerSettings,
        allow_relaunch: bool = True,
    ) -> None:
        self._registry = registry
        self._processes = processes
        self._discovery = discovery
        self._elevation = elevation
        self._settings = settings
        self.allow_relaunch = allow_relaunch

    def _ensure_elevated(self, operation: str) -> bool:
        """
        Return True if elevated; otherwise request an elevated relaunch.

        A copy that was itself started by a relaunch has allow_relaunch
        cleared and never relaunches again.

        Raises:
            ElevationError: If the relaunch cannot be requested, or this
                copy was relaunched and is still not elevated.
        """
        if self._elevation.is_elevated():
            return True
        if not self.allow_relaunch:
            raise ElevationError(
                f"Administrator privileges are required to {operation} but were not granted"
            )
        logger.info(f"{operation} requires administrator privileges, relaunching")
        self._elevation.relaunch([Config.ELEVATION_MARKER, operation])
        return False

    def install(self, choose: Chooser) -> InstallResult:
        """
        Install the agent service from an operator-selected configuration.

        Args:
            choose: Callback shown the candidate names; returns the 1-based
                index picked by the operator.

        Returns:
            InstallResult describing how far the install got and each
            service-manager step performed.

        Raises:
            ElevationError: If elevation is needed and cannot be requested.
            OSError: If the working directory cannot be enumerated. A chosen
                file that cannot be read is UNREADABLE_CONFIG instead.

        Example:
            >>> result = manager.install(lambda names: 1)
            >>> result.outcome
            <InstallOutcome.INSTALLED: 'installed'>
        """
        if not self._ensure_elevated("install"):
            return InstallResult(
                InstallOutcome.ELEVATION_REQUESTED,
                message="Relaunching with administrator privileges",
            )

        candidates = self._discovery.list_candidates()
        if not candidates:
            return InstallResult(
                InstallOutcome.NO_CONFIGURATION,
                message=f"No {self._settings.config_extension} files found in current directory",
            )

        try:
            candidate = self._discovery.select(candidates, choose(candidates))
        except InvalidSelectionError as e:
            return InstallResult(InstallOutcome.INVALID_SELECTION, message=str(e))
        except OSError as e:
            logger.error(f"Could not read configuration: {e}")
            return InstallResult(
                InstallOutcome.UNREADABLE_CONFIG,
                message=f"Could not read the selected configuration: {e}",
            )

        arguments = self._discovery.extract_arguments(candidate)
        if not arguments:
            return InstallResult(
                InstallOutcome.NO_ARGUMENTS,
                config_file=candidate.file_name,
                message=(
                    f"No {self._settings.worker_image} arguments found in "
                    f"{candidate.file_name}; service not created"
                ),
            )

        descriptor = ServiceDescriptor(
            name=self._settings.primary_service,
            binary_path=self._settings.worker_binary,
            arguments=arguments,
            start_mode=StartMode.AUTOMATIC,
        )
        result = InstallResult(
            InstallOutcome.CREATE_FAILED,
            config_file=candidate.file_name,
            descriptor=descriptor,
        )
        logger.info(f"Creating service {descriptor.name}: {descriptor.command_line}")

        name = descriptor.name
        created = self._step(result.steps, name, "create", self._registry.create, descriptor)
        if created is None:
            result.outcome = InstallOutcome.COMMAND_ERROR
            return result
        if not created:
            return result

        started = self._step(result.steps, name, "start", self._registry.start, name)
        result.outcome = InstallOutcome.INSTALLED if started else InstallOutcome.START_FAILED
        return result

    def status_report(self) -> StatusReport:
        """
        Collect the three independent status lines.

        Returns:
            StatusReport for the agent service, the driver service and the
            worker process. Each line is queried on its own; a failure on
            one never changes another.
        """
        settings = self._settings
        return StatusReport(
            primary_service=settings.primary_service,
            primary_status=query_status(self._registry, settings.primary_service),
            driver_service=settings.driver_service,
            driver_status=query_status(self._registry, settings.driver_service),
            worker_image=settings.worker_image,
            worker_running=self._processes.is_running(settings.worker_image),
        )

    def remove(self) -> RemovalResult:
        """
        Stop and delete the agent and driver services, best effort.

        A failed or impossible stop never prevents the delete, and a
        failure on the agent service never prevents processing the driver.
        Running remove() twice is safe: the second pass reports failed
        deletes.

        Returns:
            RemovalResult with a stop and a delete step per service.

        Raises:
            ElevationError: If elevation is needed and cannot be requested.
        """
        if not self._ensure_elevated("remove"):
            return RemovalResult(elevation_requested=True)

        result = RemovalResult()
        for service in self._settings.managed_services:
            self._step(result.steps, service, "stop", self._registry.stop, service)
            self._step(result.steps, service, "delete", self._registry.delete, service)
        return result

    @staticmethod
    def _step(
        steps: list[StepResult],
        service: str,
        action: str,
        operation: Callable[..., bool],
        argument: object,
    ) -> bool | None:
        """
        Run one registry operation and record it.

        Returns:
            The operation's result, or None if the service manager could
            not be invoked (recorded as a failed step).
        """
        try:
            success = operation(argument)
        except CommandError as e:
            logger.error(f"{action} {service}: {e}")
            steps.append(StepResult(service, action, False, str(e)))
            return None
        steps.append(StepResult(service, action, success, "" if success else COMMAND_FAILED_DETAIL))
        return success
