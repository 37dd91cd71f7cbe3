"""Version information for zapret-service-manager."""

__version__ = "1.0.0"
__version_date__ = "2026-10-19"

__title__ = "zapret_service_manager"
__description__ = "Install, inspect and remove the zapret filtering agent as a Windows service"

__author__ = "MelvinSGjr"

__license__ = "MIT"
__copyright__ = "Copyright 2025 MelvinSGjr"

__all__ = [
    "__version__",
    "__version_date__",
    "__title__",
    "__description__",
    "__author__",
    "__license__",
    "__copyright__",
]
