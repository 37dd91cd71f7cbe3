"""
FileSystem abstraction for Zapret Service Manager.

PURPOSE: Injectable file system interface for testability.
AI CONTEXT: Lets discovery and cache cleanup run in unit tests without a real directory.

DESIGN:
- Protocol defines the interface
- RealFileSystem uses actual os/shutil operations
- MockFileSystem in tests/conftest.py keeps files in memory, in insertion order

USAGE:
    # Production
    discovery = ConfigDiscovery(RealFileSystem(), settings, directory=os.getcwd())

    # Tests (MockFileSystem from conftest.py)
    discovery = ConfigDiscovery(mock_fs, settings, directory="/work")
"""

from __future__ import annotations

import os
import shutil
from typing import Protocol

__all__ = ["FileSystem", "RealFileSystem"]


class FileSystem(Protocol):
    """
    Protocol for file system operations.

    All paths are strings. Implementations include RealFileSystem for
    production and MockFileSystem for testing.

    Business context: Configuration discovery reads the operator's working
    directory and diagnostics may delete a cache directory. Both must be
    testable without touching the host.
    """

    def exists(self, path: str) -> bool:
        """
        Check if path exists (file or directory).

        Args:
            path: Path to check.

        Returns:
            True if the path exists as either a file or directory.
            Never raises.
        """
        ...

    def is_file(self, path: str) -> bool:
        """
        Check if path is a regular file.

        Business context: Discovery skips directories that happen to carry
        a .bat suffix.

        Args:
            path: Path to check.

        Returns:
            True if path exists and is a regular file. Never raises.
        """
        ...

    def iterdir(self, path: str) -> list[str]:
        """
        List the entries of a directory.

        Order is the directory-enumeration order of the implementation; the
        operator's numbered selection depends on it staying stable between
        listing and choosing.

        Args:
            path: Directory to list.

        Returns:
            Full paths of the entries.

        Raises:
            OSError: If the directory cannot be read.
        """
        ...

    def read_text(self, path: str, encoding: str = "utf-8") -> str:
        """
        Read file contents as text.

        Args:
            path: File to read.
            encoding: Text encoding (default utf-8).

        Returns:
            File contents as a string.

        Raises:
            FileNotFoundError: If file doesn't exist.
        """
        ...

    def rmtree(self, path: str) -> None:
        """
        Delete a directory and everything below it.

        Args:
            path: Directory to delete.

        Raises:
            OSError: If any entry cannot be removed.
        """
        ...


class RealFileSystem:
    """
    Real file system implementation using os and shutil.

    Each method delegates directly to the corresponding standard
    library function.
    """

    def exists(self, path: str) -> bool:  # pragma: no cover
        return os.path.exists(path)

    def is_file(self, path: str) -> bool:  # pragma: no cover
        return os.path.isfile(path)

    def iterdir(self, path: str) -> list[str]:  # pragma: no cover
        """
        List contents of a directory on disk.

        Uses os.listdir(), so order follows the underlying directory
        (alphabetical on NTFS).

        Example:
            >>> RealFileSystem().iterdir('.')
            ['./general.bat', './service_install.bat']
        """
        return [os.path.join(path, name) for name in os.listdir(path)]

    def read_text(self, path: str, encoding: str = "utf-8") -> str:  # pragma: no cover
        """
        Read file contents from disk as text.

        Undecodable bytes are replaced rather than raised: .bat files are
        often saved in a legacy code page and only the ASCII argument list
        matters here.
        """
        with open(path, encoding=encoding, errors="replace") as f:
            return f.read()

    def rmtree(self, path: str) -> None:  # pragma: no cover
        shutil.rmtree(path)
