"""
Environment diagnostics.

PURPOSE: Flag services known to conflict with zapret, show DNS servers, clear a stale cache.
AI CONTEXT: Read-only except clear_cache(), which the CLI runs only on operator consent.

CONFLICT RULE:
A catalog service is reported when it is registered at all. A stopped VPN
adapter service still installs its own filter driver, so the registration,
not the running state, is the signal.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from typing import TYPE_CHECKING

from .commands import CommandError
from .lifecycle import query_status
from .models import (
    CacheCleanupResult,
    CleanupOutcome,
    ConflictEntry,
    DiagnosticsReport,
)

if TYPE_CHECKING:
    from .commands import CommandRunner
    from .config import ManagerSettings
    from .filesystem import FileSystem
    from .registry import ServiceRegistry

__all__ = ["DiagnosticsScanner", "clear_cache", "cache_directory"]

logger = logging.getLogger(__name__)


class DiagnosticsScanner:
    """
    Scans the host for conflicting services and resolver settings.

    Business context: Other packet filters (VPN clients, AdGuard, Killer
    network suites) intercept the same traffic as WinDivert and are the
    most common reason zapret appears installed but does nothing.
    """

    def __init__(
        self,
        registry: ServiceRegistry,
        runner: CommandRunner,
        settings: ManagerSettings,
    ) -> None:
        self._registry = registry
        self._runner = runner
        self._settings = settings

    def scan_conflicts(self) -> list[ConflictEntry]:
        """
        Query every catalog service and keep the registered ones.

        Returns:
            ConflictEntry per catalog service whose status is not NOT_FOUND,
            in catalog order.
        """
        conflicts = []
        for service in self._settings.conflicting_services:
            status = query_status(self._registry, service)
            if status.is_installed:
                logger.info(f"Conflicting service present: {service} ({status.label})")
                conflicts.append(ConflictEntry(service, status))
        return conflicts

    def dns_servers(self) -> list[str]:
        """
        Return the DNS server lines of `ipconfig /all`, verbatim.

        Returns:
            Lines containing the DNS label, right-trimmed. Empty if ipconfig
            cannot be run (logged as a warning).
        """
        try:
            result = self._runner.run(["ipconfig", "/all"])
        except CommandError as e:
            logger.warning(f"Could not read DNS settings: {e}")
            return []
        return [
            line.rstrip()
            for line in result.stdout.splitlines()
            if self._settings.dns_label in line
        ]

    def run(self) -> DiagnosticsReport:
        return DiagnosticsReport(conflicts=self.scan_conflicts(), dns_lines=self.dns_servers())


def cache_directory(
    settings: ManagerSettings,
    environ: Mapping[str, str] | None = None,
) -> str | None:
    """Resolve the cache directory below %APPDATA%, or None when APPDATA is unset."""
    env = os.environ if environ is None else environ
    appdata = env.get("APPDATA")
    if not appdata:
        return None
    return os.path.join(appdata, *settings.cache_path)


def clear_cache(
    filesystem: FileSystem,
    settings: ManagerSettings,
    environ: Mapping[str, str] | None = None,
) -> CacheCleanupResult:
    """
    Delete the Discord cache directory.

    Business context: Discord keeps cached connection failures from before
    zapret was running; clearing the cache makes the client retry.

    Args:
        filesystem: FileSystem used for the existence check and deletion.
        settings: Supplies the cache location below %APPDATA%.
        environ: Environment mapping, defaults to os.environ.

    Returns:
        CacheCleanupResult: CLEARED, NOT_FOUND, or FAILED with the error.
    """
    path = cache_directory(settings, environ)
    if path is None or not filesystem.exists(path):
        return CacheCleanupResult(CleanupOutcome.NOT_FOUND, path or "")
    try:
        filesystem.rmtree(path)
    except OSError as e:
        logger.error(f"Failed to clear cache {path}: {e}")
        return CacheCleanupResult(CleanupOutcome.FAILED, path, str(e))
    logger.info(f"Cleared cache {path}")
    return CacheCleanupResult(CleanupOutcome.CLEARED, path)
