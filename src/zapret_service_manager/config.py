"""
Configuration for Zapret Service Manager.

PURPOSE: Centralized constants and the immutable settings table.
AI CONTEXT: All fixed names (services, worker image, catalog) live here.

CONFIGURATION CATEGORIES:
- Services: Primary agent service and its driver dependency
- Worker: Executable image launched by the service
- Discovery: Configuration file extension and reserved prefix
- Diagnostics: Catalog of conflicting services, DNS label, cache location
- Runtime: External command timeout

ENVIRONMENT VARIABLES:
- ZAPRET_SM_COMMAND_TIMEOUT: Seconds before an OS command is abandoned (default: 30)
- ZAPRET_SM_WORKER_PATH: Binary path written into the service command line
- ZAPRET_SM_RELEASES_URL: Release page shown by check_updates (default: none)

USAGE:
    from zapret_service_manager.config import Config, ManagerSettings
    settings = ManagerSettings.from_env()
    manager = ServiceLifecycleManager(..., settings=settings)
"""

from __future__ import annotations

import logging
import math
import os
from collections.abc import Mapping
from dataclasses import dataclass
from typing import ClassVar

__all__ = ["Config", "ManagerSettings"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Config:
    """
    Immutable constants for Zapret Service Manager.

    DESIGN: Frozen dataclass of class-level constants, no instance needed.
    Runtime code receives these values through ManagerSettings so tests can
    substitute their own table.
    """

    # =========================================================================
    # SERVICES
    # =========================================================================
    PRIMARY_SERVICE: ClassVar[str] = "zapret"
    DRIVER_SERVICE: ClassVar[str] = "WinDivert"

    # =========================================================================
    # WORKER PROCESS
    # =========================================================================
    WORKER_IMAGE: ClassVar[str] = "winws.exe"
    """Image name reported by tasklist and the keyword searched in .bat files."""

    # =========================================================================
    # CONFIGURATION DISCOVERY
    # =========================================================================
    CONFIG_EXTENSION: ClassVar[str] = ".bat"
    RESERVED_PREFIX: ClassVar[str] = "service"
    """Files starting with this prefix are the tool's own installer scripts."""

    # =========================================================================
    # DIAGNOSTICS
    # =========================================================================
    CONFLICTING_SERVICES: ClassVar[tuple[str, ...]] = (
        "Adguard",
        "Killer",
        "Check Point",
        "SmartByte",
        "tapinstall",
        "hamachi",
        "OpenVPNService",
        "WireGuard",
        "NordVPN",
        "ExpressVPN",
    )
    DNS_LABEL: ClassVar[str] = "DNS Servers"
    CACHE_PATH: ClassVar[tuple[str, ...]] = ("discord", "Cache")
    """Cache location relative to %APPDATA%."""

    # =========================================================================
    # RUNTIME
    # =========================================================================
    COMMAND_TIMEOUT: ClassVar[float] = 30.0
    ELEVATION_MARKER: ClassVar[str] = "admin"

    ENV_COMMAND_TIMEOUT: ClassVar[str] = "ZAPRET_SM_COMMAND_TIMEOUT"
    ENV_WORKER_PATH: ClassVar[str] = "ZAPRET_SM_WORKER_PATH"
    ENV_RELEASES_URL: ClassVar[str] = "ZAPRET_SM_RELEASES_URL"


@dataclass(frozen=True)
class ManagerSettings:
    """
    Settings table handed to the lifecycle manager and diagnostics scanner.

    Every field defaults to the matching Config constant. Instances are
    immutable; tests build their own with a fake catalog or service names.

    Attributes:
        primary_service: Service name of the filtering agent.
        driver_service: Service name of the packet-filter driver.
        worker_image: Image name used for process detection and as the
            launcher keyword when scanning configuration files.
        worker_binary: Binary path written into the service command line.
        config_extension: Extension of eligible configuration files.
        reserved_prefix: File-name prefix excluded from discovery.
        conflicting_services: Catalog checked by diagnostics.
        dns_label: Label of the resolver lines in ipconfig output.
        cache_path: Cache directory components below %APPDATA%.
        command_timeout: Seconds before an external command is abandoned.
        releases_url: Optional release page shown by the update check.
    """

    primary_service: str = Config.PRIMARY_SERVICE
    driver_service: str = Config.DRIVER_SERVICE
    worker_image: str = Config.WORKER_IMAGE
    worker_binary: str = Config.WORKER_IMAGE
    config_extension: str = Config.CONFIG_EXTENSION
    reserved_prefix: str = Config.RESERVED_PREFIX
    conflicting_services: tuple[str, ...] = Config.CONFLICTING_SERVICES
    dns_label: str = Config.DNS_LABEL
    cache_path: tuple[str, ...] = Config.CACHE_PATH
    command_timeout: float = Config.COMMAND_TIMEOUT
    releases_url: str | None = None

    @property
    def managed_services(self) -> tuple[str, str]:
        """Services removed together: the agent first, then its driver."""
        return (self.primary_service, self.driver_service)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> ManagerSettings:
        """
        Build settings with environment overrides applied.

        Business context: Operators occasionally keep winws.exe outside the
        working directory or run against a slow service manager. Both can be
        adjusted without editing code.

        Args:
            environ: Mapping to read overrides from. Defaults to os.environ.

        Returns:
            ManagerSettings with overrides applied. An unparseable or
            non-positive timeout keeps the default and logs a warning.

        Example:
            >>> ManagerSettings.from_env({"ZAPRET_SM_COMMAND_TIMEOUT": "5"}).command_timeout
            5.0
        """
        env = os.environ if environ is None else environ

        timeout = Config.COMMAND_TIMEOUT
        raw_timeout = env.get(Config.ENV_COMMAND_TIMEOUT)
        if raw_timeout:
            try:
                timeout = float(raw_timeout)
            except ValueError:
                logger.warning(
                    f"Ignoring {Config.ENV_COMMAND_TIMEOUT}={raw_timeout!r}: not a number"
                )
            else:
                if not math.isfinite(timeout) or timeout <= 0:
                    logger.warning(
                        f"Ignoring {Config.ENV_COMMAND_TIMEOUT}={raw_timeout!r}: "
                        "must be a positive finite number"
                    )
                    timeout = Config.COMMAND_TIMEOUT

        return cls(
            worker_binary=env.get(Config.ENV_WORKER_PATH) or Config.WORKER_IMAGE,
            command_timeout=timeout,
            releases_url=env.get(Config.ENV_RELEASES_URL) or None,
        )
