"""
Tests for processes module.

PURPOSE: Verify tasklist-based worker detection.
"""

from __future__ import annotations

from conftest import MockCommandRunner

from zapret_service_manager.processes import ProcessChecker

TASKLIST_MATCH = """
Image Name                     PID Session Name        Session#    Mem Usage
========================= ======== ================ =========== ============
winws.exe                     4120 Services                   0      9,388 K
"""

TASKLIST_EMPTY = "INFO: No tasks are running which match the specified criteria.\n"


class TestProcessChecker:
    """Tests for ProcessChecker.is_running()."""

    def test_running(self, runner: MockCommandRunner) -> None:
        runner.script(["tasklist"], TASKLIST_MATCH)

        assert ProcessChecker(runner).is_running("winws.exe") is True
        assert runner.calls == [["tasklist", "/FI", "IMAGENAME eq winws.exe"]]

    def test_not_running(self, runner: MockCommandRunner) -> None:
        runner.script(["tasklist"], TASKLIST_EMPTY)

        assert ProcessChecker(runner).is_running("winws.exe") is False

    def test_tasklist_unavailable_reads_as_not_running(self, runner: MockCommandRunner) -> None:
        """
        Verifies a failure to list processes never crashes the status report.

        Business context:
        The status screen shows three independent lines; the process line
        simply reads NOT RUNNING when tasklist is missing.
        """
        runner.fail(["tasklist"], "tasklist not found")

        assert ProcessChecker(runner).is_running("winws.exe") is False
