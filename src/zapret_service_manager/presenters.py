"""
Presenters for Zapret Service Manager output.

PURPOSE: Testable transformation of operation results into display rows.
AI CONTEXT: Pure data transformation - no I/O, no rendering.

DESIGN PRINCIPLES:
1. Presenters receive result models, return DisplayRow lists
2. Styles are rich style names, but nothing here imports rich
3. Each function covers one screen of the CLI

USAGE:
    rows = status_rows(manager.status_report())
    for row in rows:
        console.print(f"{row.label}: [{row.style}]{row.value}[/]")
"""

from __future__ import annotations

from dataclasses import dataclass

from .models import (
    CacheCleanupResult,
    CleanupOutcome,
    DiagnosticsReport,
    InstallOutcome,
    InstallResult,
    RemovalResult,
    ServiceStatus,
    StatusKind,
    StatusReport,
)

__all__ = [
    "DisplayRow",
    "STATUS_STYLES",
    "status_style",
    "status_rows",
    "install_rows",
    "removal_rows",
    "conflict_rows",
    "cleanup_row",
]

STATUS_STYLES: dict[StatusKind, str] = {
    StatusKind.RUNNING: "green",
    StatusKind.STOPPED: "yellow",
    StatusKind.STOP_PENDING: "yellow",
    StatusKind.START_PENDING: "yellow",
    StatusKind.NOT_FOUND: "red",
    StatusKind.UNKNOWN: "magenta",
}

INSTALL_STYLES: dict[InstallOutcome, str] = {
    InstallOutcome.INSTALLED: "green",
    InstallOutcome.ELEVATION_REQUESTED: "yellow",
    InstallOutcome.START_FAILED: "yellow",
}


@dataclass(frozen=True)
class DisplayRow:
    """One labelled, styled line of CLI output."""

    label: str
    value: str
    style: str = ""


def status_style(status: ServiceStatus) -> str:
    return STATUS_STYLES[status.kind]


def status_rows(report: StatusReport) -> list[DisplayRow]:
    """
    Build the three status lines.

    Each row depends only on its own field of the report.

    Args:
        report: StatusReport from ServiceLifecycleManager.status_report().

    Returns:
        Rows for the agent service, the driver service and the worker
        process, in that order.

    Example:
        >>> [row.value for row in status_rows(report)]
        ['RUNNING', 'STOPPED', 'NOT RUNNING']
    """
    return [
        DisplayRow(
            f"{report.primary_service} service",
            report.primary_status.label,
            status_style(report.primary_status),
        ),
        DisplayRow(
            f"{report.driver_service} service",
            report.driver_status.label,
            status_style(report.driver_status),
        ),
        DisplayRow(
            f"{report.worker_image} process",
            "RUNNING" if report.worker_running else "NOT RUNNING",
            "green" if report.worker_running else "red",
        ),
    ]


def install_rows(result: InstallResult) -> list[DisplayRow]:
    """
    Describe an install attempt: chosen file, each step, then the outcome.

    Returns:
        Rows in display order. The last row always carries the outcome.
    """
    rows = []
    if result.config_file:
        rows.append(DisplayRow("Configuration", result.config_file, "green"))
    if result.descriptor is not None:
        rows.append(DisplayRow("Command line", result.descriptor.command_line))
    for step in result.steps:
        value = "OK" if step.success else f"FAILED ({step.detail})" if step.detail else "FAILED"
        rows.append(
            DisplayRow(f"{step.action} {step.service}", value, "green" if step.success else "red")
        )

    if result.outcome is InstallOutcome.INSTALLED:
        message = "Service created and started"
    elif result.outcome is InstallOutcome.START_FAILED:
        message = "Service created but failed to start"
    elif result.outcome is InstallOutcome.CREATE_FAILED:
        message = "Service creation failed"
    elif result.outcome is InstallOutcome.COMMAND_ERROR:
        message = "Service manager could not be run"
    else:
        message = result.message
    rows.append(DisplayRow("Result", message, INSTALL_STYLES.get(result.outcome, "red")))
    return rows


def removal_rows(result: RemovalResult) -> list[DisplayRow]:
    """
    One row per service, in processing order.

    A service counts as removed when its delete step succeeded; the stop
    step is informational only.
    """
    services: list[str] = []
    for step in result.steps:
        if step.service not in services:
            services.append(step.service)
    return [
        DisplayRow(service, "Successfully removed", "green")
        if result.removed(service)
        else DisplayRow(service, "Removal failed", "red")
        for service in services
    ]


def conflict_rows(report: DiagnosticsReport) -> list[DisplayRow]:
    return [
        DisplayRow(entry.service, entry.status.label, "red") for entry in report.conflicts
    ]


def cleanup_row(result: CacheCleanupResult) -> DisplayRow:
    if result.outcome is CleanupOutcome.CLEARED:
        return DisplayRow("Discord cache", "cleared", "green")
    if result.outcome is CleanupOutcome.NOT_FOUND:
        return DisplayRow("Discord cache", "not found", "yellow")
    return DisplayRow("Discord cache", f"failed to clear: {result.error}", "red")
