"""
Tests for presenters module.

PURPOSE: Verify result models become the right labelled, styled rows.
AI CONTEXT: Pure functions; models are built directly.
"""

from __future__ import annotations

import pytest

from zapret_service_manager.models import (
    CacheCleanupResult,
    CleanupOutcome,
    ConflictEntry,
    DiagnosticsReport,
    InstallOutcome,
    InstallResult,
    RemovalResult,
    ServiceDescriptor,
    ServiceStatus,
    StatusReport,
    StepResult,
)
from zapret_service_manager.presenters import (
    DisplayRow,
    cleanup_row,
    conflict_rows,
    install_rows,
    removal_rows,
    status_rows,
)


def make_report(
    primary: ServiceStatus, driver: ServiceStatus, worker_running: bool
) -> StatusReport:
    return StatusReport("zapret", primary, "WinDivert", driver, "winws.exe", worker_running)


class TestStatusRows:
    """Tests for status_rows()."""

    def test_labels_and_styles(self) -> None:
        """
        Verifies the three status lines and their colors.

        Business context:
        Green means working, yellow transitional or stopped, red missing.

        Arrangement:
        Running agent, missing driver, stopped worker.

        Action:
        status_rows().

        Assertion Strategy:
        Exact rows in order.
        """
        rows = status_rows(make_report(ServiceStatus.running(), ServiceStatus.not_found(), False))

        assert rows == [
            DisplayRow("zapret service", "RUNNING", "green"),
            DisplayRow("WinDivert service", "NOT FOUND", "red"),
            DisplayRow("winws.exe process", "NOT RUNNING", "red"),
        ]

    def test_lines_are_independent(self) -> None:
        a = status_rows(make_report(ServiceStatus.unknown("7"), ServiceStatus.stopped(), True))
        b = status_rows(make_report(ServiceStatus.running(), ServiceStatus.stopped(), True))

        assert a[0] == DisplayRow("zapret service", "UNKNOWN (7)", "magenta")
        assert a[1:] == b[1:]
        assert a[2] == DisplayRow("winws.exe process", "RUNNING", "green")


class TestInstallRows:
    """Tests for install_rows()."""

    def test_installed(self) -> None:
        result = InstallResult(
            InstallOutcome.INSTALLED,
            config_file="general.bat",
            descriptor=ServiceDescriptor("zapret", "winws.exe", "--wf-tcp=80"),
            steps=[StepResult("zapret", "create", True), StepResult("zapret", "start", True)],
        )

        rows = install_rows(result)

        assert rows == [
            DisplayRow("Configuration", "general.bat", "green"),
            DisplayRow("Command line", '"winws.exe" --wf-tcp=80'),
            DisplayRow("create zapret", "OK", "green"),
            DisplayRow("start zapret", "OK", "green"),
            DisplayRow("Result", "Service created and started", "green"),
        ]

    def test_failed_step_shows_detail(self) -> None:
        result = InstallResult(
            InstallOutcome.CREATE_FAILED,
            steps=[StepResult("zapret", "create", False, "service manager reported failure")],
        )

        rows = install_rows(result)

        assert rows[0] == DisplayRow(
            "create zapret", "FAILED (service manager reported failure)", "red"
        )
        assert rows[-1] == DisplayRow("Result", "Service creation failed", "red")

    @pytest.mark.parametrize(
        "outcome,message,style",
        [
            (InstallOutcome.START_FAILED, "Service created but failed to start", "yellow"),
            (InstallOutcome.COMMAND_ERROR, "Service manager could not be run", "red"),
            (InstallOutcome.NO_CONFIGURATION, "No .bat files found", "red"),
            (InstallOutcome.UNREADABLE_CONFIG, "Could not read the selected configuration", "red"),
            (InstallOutcome.ELEVATION_REQUESTED, "Relaunching", "yellow"),
        ],
    )
    def test_outcome_row(self, outcome: InstallOutcome, message: str, style: str) -> None:
        rows = install_rows(InstallResult(outcome, message=message))

        assert rows[-1] == DisplayRow("Result", message, style)


class TestRemovalRows:
    def test_one_row_per_service(self) -> None:
        result = RemovalResult(
            steps=[
                StepResult("zapret", "stop", False),
                StepResult("zapret", "delete", True),
                StepResult("WinDivert", "stop", False),
                StepResult("WinDivert", "delete", False),
            ]
        )

        assert removal_rows(result) == [
            DisplayRow("zapret", "Successfully removed", "green"),
            DisplayRow("WinDivert", "Removal failed", "red"),
        ]


class TestDiagnosticsRows:
    def test_conflict_rows(self) -> None:
        report = DiagnosticsReport(conflicts=[ConflictEntry("Adguard", ServiceStatus.running())])

        assert conflict_rows(report) == [DisplayRow("Adguard", "RUNNING", "red")]

    @pytest.mark.parametrize(
        "result,value",
        [
            (CacheCleanupResult(CleanupOutcome.CLEARED, "/c"), "cleared"),
            (CacheCleanupResult(CleanupOutcome.NOT_FOUND, ""), "not found"),
            (CacheCleanupResult(CleanupOutcome.FAILED, "/c", "denied"), "failed to clear: denied"),
        ],
    )
    def test_cleanup_row(self, result: CacheCleanupResult, value: str) -> None:
        assert cleanup_row(result).value == value
