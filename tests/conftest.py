"""
Pytest configuration and shared fixtures for Zapret Service Manager tests.

This module contains:
- MockFileSystem: In-memory filesystem for testing without actual I/O
- MockCommandRunner: Scripted sc.exe/tasklist/ipconfig output
- FakeRegistry: In-memory service manager
- FakeElevation: Elevation capability with a fixed answer
- Shared fixtures available to all test modules
"""

from __future__ import annotations

from collections.abc import Sequence

import pytest

from zapret_service_manager.commands import CommandError, CommandResult
from zapret_service_manager.config import ManagerSettings
from zapret_service_manager.models import ServiceDescriptor, ServiceStatus


class MockFileSystem:
    """
    In-memory file system for testing.

    Simulates a file system using:
    - _files: dict mapping path -> content (str), insertion ordered
    - _dirs: list of directory paths, insertion ordered
    - _failing: paths whose rmtree raises PermissionError
    - _unreadable: paths whose read_text raises PermissionError

    FEATURES:
    - No actual I/O operations
    - iterdir() returns entries in the order they were added, like a real
      directory listing
    - Easy to inspect state
    """

    def __init__(self) -> None:
        """
        Initialize empty mock file system.

        Business context: Discovery and cache cleanup act on the operator's
        disk. The mock keeps tests deterministic and harmless.

        Example:
            >>> fs = MockFileSystem()
            >>> fs.exists('/work/general.bat')
            False
        """
        self._files: dict[str, str] = {}
        self._dirs: list[str] = []
        self._failing: set[str] = set()
        self._unreadable: set[str] = set()
        self.removed: list[str] = []
        self.listed: list[str] = []

    # Test helpers

    def set_file(self, path: str, content: str) -> None:
        self._files[path] = content

    def add_dir(self, path: str) -> None:
        self._dirs.append(path)

    def fail_read(self, path: str) -> None:
        self._unreadable.add(path)

    def fail_removal(self, path: str) -> None:
        self._failing.add(path)

    # FileSystem protocol

    def exists(self, path: str) -> bool:
        return path in self._files or path in self._dirs

    def is_file(self, path: str) -> bool:
        return path in self._files

    def iterdir(self, path: str) -> list[str]:
        """
        List direct children of `path`, files and directories in insertion order.

        Raises:
            FileNotFoundError: If nothing lives below `path`.
        """
        self.listed.append(path)
        prefix = path.rstrip("/") + "/"
        entries = [p for p in [*self._files, *self._dirs] if p.startswith(prefix)]
        children = [p for p in entries if "/" not in p[len(prefix) :]]
        if not entries and path not in self._dirs:
            raise FileNotFoundError(f"No such directory: {path}")
        return children

    def read_text(self, path: str, encoding: str = "utf-8") -> str:
        if path in self._unreadable:
            raise PermissionError(f"Access is denied: {path}")
        if path not in self._files:
            raise FileNotFoundError(f"No such file: {path}")
        return self._files[path]

    def rmtree(self, path: str) -> None:
        if path in self._failing:
            raise PermissionError(f"Access is denied: {path}")
        prefix = path.rstrip("/") + "/"
        self._files = {p: c for p, c in self._files.items() if not p.startswith(prefix)}
        self._dirs = [d for d in self._dirs if d != path and not d.startswith(prefix)]
        self.removed.append(path)


class MockCommandRunner:
    """
    CommandRunner returning scripted results, matched by argument prefix.

    Scripts are looked up longest-prefix first, so ['sc', 'query', 'zapret']
    wins over ['sc', 'query']. Unscripted commands return exit code 0 with
    empty output. A script may also be a CommandError, which is raised.

    Every run() and spawn() call is recorded in `calls` / `spawned`.
    """

    def __init__(self) -> None:
        self._scripts: dict[tuple[str, ...], CommandResult | CommandError] = {}
        self.calls: list[list[str]] = []
        self.spawned: list[list[str]] = []
        self.spawn_error: CommandError | None = None

    def script(self, prefix: Sequence[str], stdout: str = "", returncode: int = 0) -> None:
        key = tuple(prefix)
        self._scripts[key] = CommandResult(key, returncode, stdout)

    def fail(self, prefix: Sequence[str], reason: str = "not found") -> None:
        self._scripts[tuple(prefix)] = CommandError(list(prefix), reason)

    def run(self, args: Sequence[str]) -> CommandResult:
        cmd = list(args)
        self.calls.append(cmd)
        for length in range(len(cmd), 0, -1):
            scripted = self._scripts.get(tuple(cmd[:length]))
            if scripted is None:
                continue
            if isinstance(scripted, CommandError):
                raise scripted
            return CommandResult(tuple(cmd), scripted.returncode, scripted.stdout)
        return CommandResult(tuple(cmd), 0, "")

    def spawn(self, args: Sequence[str]) -> None:
        cmd = list(args)
        if self.spawn_error is not None:
            raise self.spawn_error
        self.spawned.append(cmd)


class FakeRegistry:
    """
    In-memory ServiceRegistry.

    `statuses` maps service name to ServiceStatus (missing -> NOT_FOUND).
    `results` maps (action, name) to the bool an operation returns, or to a
    CommandError to raise. Unlisted operations succeed. Every mutating call
    is appended to `calls` as (action, name).
    """

    def __init__(self) -> None:
        self.statuses: dict[str, ServiceStatus] = {}
        self.results: dict[tuple[str, str], bool | CommandError] = {}
        self.calls: list[tuple[str, str]] = []
        self.created: list[ServiceDescriptor] = []
        self.query_errors: set[str] = set()

    def query(self, name: str) -> str:
        return ""

    def status(self, name: str) -> ServiceStatus:
        self.calls.append(("query", name))
        if name in self.query_errors:
            raise CommandError(["sc", "query", name], "not found")
        return self.statuses.get(name, ServiceStatus.not_found())

    def _do(self, action: str, name: str) -> bool:
        self.calls.append((action, name))
        result = self.results.get((action, name), True)
        if isinstance(result, CommandError):
            raise result
        return result

    def create(self, descriptor: ServiceDescriptor) -> bool:
        ok = self._do("create", descriptor.name)
        if ok:
            self.created.append(descriptor)
        return ok

    def start(self, name: str) -> bool:
        return self._do("start", name)

    def stop(self, name: str) -> bool:
        return self._do("stop", name)

    def delete(self, name: str) -> bool:
        return self._do("delete", name)


class FakeElevation:
    """Elevation with a fixed answer; records relaunch requests."""

    def __init__(self, elevated: bool = True) -> None:
        self.elevated = elevated
        self.relaunches: list[list[str]] = []

    def is_elevated(self) -> bool:
        return self.elevated

    def relaunch(self, marker_args: Sequence[str]) -> None:
        self.relaunches.append(list(marker_args))


@pytest.fixture
def mock_fs() -> MockFileSystem:
    """
    Create a MockFileSystem for testing.

    Provides a fresh in-memory filesystem instance for each test,
    ensuring test isolation without actual disk I/O.

    Example:
        >>> def test_discovery(mock_fs):
        ...     mock_fs.set_file('/work/general.bat', 'winws.exe --wf-tcp=80')
    """
    return MockFileSystem()


@pytest.fixture
def runner() -> MockCommandRunner:
    return MockCommandRunner()


@pytest.fixture
def registry() -> FakeRegistry:
    return FakeRegistry()


@pytest.fixture
def elevation() -> FakeElevation:
    return FakeElevation(elevated=True)


@pytest.fixture
def settings() -> ManagerSettings:
    """Default settings table, independent of the test process environment."""
    return ManagerSettings()
