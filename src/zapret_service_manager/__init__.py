"""
Zapret Service Manager.

PURPOSE: Operator tool for running the zapret filtering agent as a Windows service.
AI CONTEXT: Service lifecycle and status normalization around sc.exe and tasklist.

PACKAGE STRUCTURE:
- status.py: Raw sc.exe state codes -> ServiceStatus
- commands.py: Injectable command runner with bounded timeouts
- registry.py: sc.exe create/start/stop/delete/query
- processes.py: tasklist-based worker process detection
- discovery.py: .bat configuration discovery and argument extraction
- lifecycle.py: Install / status / remove orchestration
- diagnostics.py: Conflicting services, DNS settings, cache cleanup
- elevation.py: Administrator check and elevated relaunch
- presenters.py: Result -> display rows
- cli.py: Interactive menu and direct commands

QUICK START:
    # Interactive menu
    zapret-service-manager

    # Status only
    zapret-service-manager status_zapret
"""

from zapret_service_manager.__version__ import (
    __author__,
    __copyright__,
    __description__,
    __license__,
    __title__,
    __version__,
    __version_date__,
)

__all__ = [
    "__version__",
    "__version_date__",
    "__title__",
    "__description__",
    "__author__",
    "__license__",
    "__copyright__",
]
