"""
State code translation for sc.exe query output.

PURPOSE: Normalize raw service-manager state codes into ServiceStatus.
AI CONTEXT: Pure functions, no I/O. The only contract with sc.exe output is
"a STATE field with a numeric code, or no STATE field at all".

EXAMPLE INPUT (sc query zapret):

    SERVICE_NAME: zapret
            TYPE               : 10  WIN32_OWN_PROCESS
            STATE              : 4  RUNNING
                                    (STOPPABLE, NOT_PAUSABLE, IGNORES_SHUTDOWN)
            WIN32_EXIT_CODE    : 0  (0x0)
"""

from __future__ import annotations

from .models import ServiceStatus

__all__ = ["STATE_FIELD", "STATE_CODES", "translate_state", "parse_query_output"]

STATE_FIELD = "STATE"

STATE_CODES: dict[str, ServiceStatus] = {
    "1": ServiceStatus.stopped(),
    "2": ServiceStatus.start_pending(),
    "3": ServiceStatus.stop_pending(),
    "4": ServiceStatus.running(),
}


def translate_state(token: str, found: bool = True) -> ServiceStatus:
    """
    Map a raw state token to a ServiceStatus.

    Args:
        token: The numeric code following the STATE field (e.g. '4').
        found: False when the query output had no STATE field at all.

    Returns:
        NOT_FOUND when not found, the mapped status for codes 1-4, and
        UNKNOWN carrying the token for anything else. Never raises.

    Example:
        >>> translate_state("4").label
        'RUNNING'
        >>> translate_state("7").raw_code
        '7'
    """
    if not found:
        return ServiceStatus.not_found()
    return STATE_CODES.get(token, ServiceStatus.unknown(token))


def parse_query_output(text: str) -> ServiceStatus:
    """
    Extract and translate the state code from `sc query` output.

    Uses the first line containing STATE. The token is the first word after
    the colon; a STATE line with no colon or no word yields UNKNOWN('').

    Args:
        text: Raw stdout of `sc query <name>`. May be empty.

    Returns:
        Normalized ServiceStatus.
    """
    state_line = next(
        (line for line in text.splitlines() if STATE_FIELD in line),
        None,
    )
    if state_line is None:
        return translate_state("", found=False)

    _, colon, value = state_line.partition(":")
    words = value.split()
    if not colon or not words:
        return ServiceStatus.unknown("")
    return translate_state(words[0])
