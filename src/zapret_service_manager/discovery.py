"""
Configuration discovery for service installation.

PURPOSE: Find candidate .bat strategy files and pull winws.exe arguments out of them.
AI CONTEXT: Candidates are enumerated fresh on every install attempt; nothing is cached.

ELIGIBILITY:
- Regular file in the working directory
- Extension .bat (any case)
- Name does not start with the reserved prefix ('service'), which marks the
  tool's own installer scripts

EXTRACTION:
Given a strategy file such as

    start "zapret: general" /min "%BIN%winws.exe" --wf-tcp=80,443 ^
    --filter-udp=443 --dpi-desync=fake

the arguments are everything after the winws.exe token on its logical line
(caret continuations folded): '--wf-tcp=80,443 --filter-udp=443 --dpi-desync=fake'.
Only the first occurrence counts.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence
from pathlib import Path
from typing import TYPE_CHECKING

from .commands import ZapretServiceError
from .models import ConfigCandidate

if TYPE_CHECKING:
    from .config import ManagerSettings
    from .filesystem import FileSystem

__all__ = ["ConfigDiscovery", "InvalidSelectionError", "extract_arguments"]

logger = logging.getLogger(__name__)

LINE_CONTINUATION = "^"


class InvalidSelectionError(ZapretServiceError, ValueError):
    """The operator picked an index outside the candidate list."""

    def __init__(self, index: int, count: int) -> None:
        self.index = index
        self.count = count
        super().__init__(f"Selection {index} is not between 1 and {count}")


def _logical_lines(content: str) -> Iterator[str]:
    """
    Yield lines with batch caret continuations folded into one line.

    Only an odd run of trailing carets continues the line; '^^' is an
    escaped literal caret.
    """
    pending = ""
    for line in content.splitlines():
        stripped = line.rstrip()
        carets = len(stripped) - len(stripped.rstrip(LINE_CONTINUATION))
        if carets % 2:
            pending += stripped[: -len(LINE_CONTINUATION)]
            continue
        yield pending + line
        pending = ""
    if pending:
        yield pending


def extract_arguments(content: str, keyword: str) -> str:
    """
    Extract the launcher arguments from configuration file text.

    Scans logical lines in order and stops at the first one containing
    `keyword` (case-insensitive). The rest of the keyword's token, such as
    a closing quote, is skipped up to the first whitespace run; everything
    after that run is returned with trailing whitespace removed. The text
    is not re-quoted or escaped.

    Args:
        content: Full text of the configuration file.
        keyword: Launcher token to look for, e.g. 'winws.exe'.

    Returns:
        The argument string, or '' when no line invokes the launcher or the
        invocation has no arguments.

    Example:
        >>> extract_arguments('winws.exe -a -b -c \\nwinws.exe -z', 'winws.exe')
        '-a -b -c'
    """
    needle = keyword.lower()
    for line in _logical_lines(content):
        position = line.lower().find(needle)
        if position < 0:
            continue

        remainder = line[position + len(keyword) :]
        boundary = next(
            (index for index, char in enumerate(remainder) if char.isspace()),
            None,
        )
        if boundary is None:
            return ""
        return remainder[boundary:].strip()
    return ""


class ConfigDiscovery:
    """
    Lists eligible configuration files and reads the operator's choice.

    Business context: A zapret release ships several strategy .bat files,
    each launching winws.exe with different DPI-evasion flags. The operator
    picks the one that works for their ISP and it becomes the service.
    """

    def __init__(
        self,
        filesystem: FileSystem,
        settings: ManagerSettings,
        directory: str = ".",
    ) -> None:
        """
        Args:
            filesystem: FileSystem used for listing and reading.
            settings: Supplies extension, reserved prefix and launcher keyword.
            directory: Directory to scan, normally the working directory.
        """
        self._fs = filesystem
        self._settings = settings
        self._directory = directory

    def _path(self, file_name: str) -> str:
        return "/".join((self._directory.rstrip("/\\"), file_name))

    def is_eligible(self, file_name: str) -> bool:
        """Whether a file name qualifies as a configuration candidate."""
        return file_name.lower().endswith(
            self._settings.config_extension.lower()
        ) and not file_name.startswith(self._settings.reserved_prefix)

    def list_candidates(self) -> list[str]:
        """
        List eligible configuration file names.

        Returns:
            File names in directory-enumeration order. Empty when none
            qualify.

        Raises:
            OSError: If the directory cannot be enumerated at all.
        """
        candidates = []
        for entry in self._fs.iterdir(self._directory):
            name = Path(entry).name
            if self.is_eligible(name) and self._fs.is_file(entry):
                candidates.append(name)
        logger.debug(f"Found {len(candidates)} configuration candidate(s) in {self._directory}")
        return candidates

    def select(self, candidates: Sequence[str], index: int) -> ConfigCandidate:
        """
        Load the candidate at a 1-based index.

        Args:
            candidates: Names previously returned by list_candidates().
            index: Operator's 1-based choice.

        Returns:
            ConfigCandidate holding the file name and full text.

        Raises:
            InvalidSelectionError: If index is 0, negative or past the end.
            OSError: If the chosen file cannot be read.
        """
        if not 1 <= index <= len(candidates):
            raise InvalidSelectionError(index, len(candidates))
        file_name = candidates[index - 1]
        return ConfigCandidate(file_name, self._fs.read_text(self._path(file_name)))

    def extract_arguments(self, candidate: ConfigCandidate) -> str:
        """Extract launcher arguments from a selected candidate."""
        arguments = extract_arguments(candidate.raw_content, self._settings.worker_image)
        if not arguments:
            logger.warning(
                f"No {self._settings.worker_image} invocation with arguments in {candidate.file_name}"
            )
        return arguments
