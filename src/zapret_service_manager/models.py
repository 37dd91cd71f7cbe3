"""
Data models for Zapret Service Manager.

PURPOSE: Value types passed between discovery, registry, lifecycle and CLI.
AI CONTEXT: Nothing here is persisted; the OS service manager is the only store.

MODEL OVERVIEW:
- ServiceStatus: Normalized service state (closed set, Unknown keeps raw code)
- ServiceDescriptor: Registration request built at install time
- ConfigCandidate: Selected .bat file and its full text
- StepResult: One reported step of install/remove
- InstallResult / RemovalResult / StatusReport / DiagnosticsReport: Operation results

USAGE:
    status = ServiceStatus.running()
    descriptor = ServiceDescriptor("zapret", "winws.exe", "--wf-tcp=80")
    descriptor.command_line   # '"winws.exe" --wf-tcp=80'
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

__all__ = [
    "StatusKind",
    "ServiceStatus",
    "StartMode",
    "ServiceDescriptor",
    "ConfigCandidate",
    "StepResult",
    "InstallOutcome",
    "InstallResult",
    "RemovalResult",
    "StatusReport",
    "ConflictEntry",
    "DiagnosticsReport",
    "CleanupOutcome",
    "CacheCleanupResult",
]


class StatusKind(str, Enum):
    """Normalized service states. Values match sc.exe state names."""

    NOT_FOUND = "NOT_FOUND"
    STOPPED = "STOPPED"
    START_PENDING = "START_PENDING"
    STOP_PENDING = "STOP_PENDING"
    RUNNING = "RUNNING"
    UNKNOWN = "UNKNOWN"


@dataclass(frozen=True)
class ServiceStatus:
    """
    Status of one named service as reported by the service manager.

    `raw_code` is set only for UNKNOWN and holds the exact token that could
    not be mapped, so an unexpected code is never lost.
    """

    kind: StatusKind
    raw_code: str | None = None

    @classmethod
    def not_found(cls) -> ServiceStatus:
        return cls(StatusKind.NOT_FOUND)

    @classmethod
    def stopped(cls) -> ServiceStatus:
        return cls(StatusKind.STOPPED)

    @classmethod
    def start_pending(cls) -> ServiceStatus:
        return cls(StatusKind.START_PENDING)

    @classmethod
    def stop_pending(cls) -> ServiceStatus:
        return cls(StatusKind.STOP_PENDING)

    @classmethod
    def running(cls) -> ServiceStatus:
        return cls(StatusKind.RUNNING)

    @classmethod
    def unknown(cls, raw_code: str) -> ServiceStatus:
        return cls(StatusKind.UNKNOWN, raw_code)

    @property
    def is_installed(self) -> bool:
        """Whether the service is registered at all, running or not."""
        return self.kind is not StatusKind.NOT_FOUND

    @property
    def label(self) -> str:
        """
        Operator-facing label.

        Returns:
            'NOT FOUND' for missing services, 'UNKNOWN (<code>)' when a raw
            code is available, otherwise the sc.exe state name.

        Example:
            >>> ServiceStatus.unknown("7").label
            'UNKNOWN (7)'
        """
        if self.kind is StatusKind.NOT_FOUND:
            return "NOT FOUND"
        if self.kind is StatusKind.UNKNOWN:
            return f"UNKNOWN ({self.raw_code})" if self.raw_code else "UNKNOWN"
        return self.kind.value


class StartMode(str, Enum):
    """Service start type. Values are the sc.exe `start=` arguments."""

    AUTOMATIC = "auto"
    MANUAL = "demand"


@dataclass(frozen=True)
class ServiceDescriptor:
    """
    Registration request for the service manager.

    Built transiently during install and dropped once `create` returns.
    `arguments` comes verbatim from the configuration file; it is never
    re-quoted or escaped.
    """

    name: str
    binary_path: str
    arguments: str
    start_mode: StartMode = StartMode.AUTOMATIC

    @property
    def command_line(self) -> str:
        """Exact command line the service manager launches on start."""
        quoted = f'"{self.binary_path}"'
        return f"{quoted} {self.arguments}" if self.arguments else quoted


@dataclass(frozen=True)
class ConfigCandidate:
    """A configuration file chosen by the operator, with its full text."""

    file_name: str
    raw_content: str


@dataclass(frozen=True)
class StepResult:
    """
    Outcome of one service-manager step.

    Attributes:
        service: Service the step acted on.
        action: 'create', 'start', 'stop' or 'delete'.
        success: Whether the service manager reported success.
        detail: Failure reason (command output or spawn error), if any.
    """

    service: str
    action: str
    success: bool
    detail: str = ""


class InstallOutcome(str, Enum):
    """Terminal states of an install attempt."""

    INSTALLED = "installed"
    START_FAILED = "start_failed"
    CREATE_FAILED = "create_failed"
    COMMAND_ERROR = "command_error"
    NO_CONFIGURATION = "no_configuration"
    INVALID_SELECTION = "invalid_selection"
    UNREADABLE_CONFIG = "unreadable_config"
    NO_ARGUMENTS = "no_arguments"
    ELEVATION_REQUESTED = "elevation_requested"


@dataclass
class InstallResult:
    """Result of ServiceLifecycleManager.install()."""

    outcome: InstallOutcome
    config_file: str | None = None
    descriptor: ServiceDescriptor | None = None
    steps: list[StepResult] = field(default_factory=list)
    message: str = ""

    @property
    def success(self) -> bool:
        return self.outcome is InstallOutcome.INSTALLED


@dataclass
class RemovalResult:
    """Result of ServiceLifecycleManager.remove(); one stop+delete pair per service."""

    steps: list[StepResult] = field(default_factory=list)
    elevation_requested: bool = False

    def removed(self, service: str) -> bool:
        """Whether the delete step for `service` succeeded."""
        return any(
            step.service == service and step.action == "delete" and step.success
            for step in self.steps
        )


@dataclass(frozen=True)
class StatusReport:
    """Three independent status lines: agent service, driver service, worker process."""

    primary_service: str
    primary_status: ServiceStatus
    driver_service: str
    driver_status: ServiceStatus
    worker_image: str
    worker_running: bool


@dataclass(frozen=True)
class ConflictEntry:
    """A catalog service found on the host."""

    service: str
    status: ServiceStatus


@dataclass
class DiagnosticsReport:
    """Conflicting services found plus the DNS resolver lines from ipconfig."""

    conflicts: list[ConflictEntry] = field(default_factory=list)
    dns_lines: list[str] = field(default_factory=list)


class CleanupOutcome(str, Enum):
    CLEARED = "cleared"
    NOT_FOUND = "not_found"
    FAILED = "failed"


@dataclass(frozen=True)
class CacheCleanupResult:
    outcome: CleanupOutcome
    path: str
    error: str = ""
