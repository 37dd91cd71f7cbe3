"""
CLI entry point for Zapret Service Manager.

PURPOSE: Interactive menu and direct commands for the zapret service.
AI CONTEXT: Wires the real runner/filesystem into the lifecycle manager and renders results with rich.

USAGE:
    # Interactive menu (install, remove, status, diagnostics, updates, exit)
    zapret-service-manager

    # Direct commands
    zapret-service-manager status_zapret
    zapret-service-manager check_updates

    # Used by the elevated relaunch, skips the menu
    zapret-service-manager admin install
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from logging.handlers import RotatingFileHandler
from typing import TYPE_CHECKING

from rich import box
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from .config import Config, ManagerSettings
from .elevation import ElevationError
from .models import InstallOutcome
from .presenters import (
    DisplayRow,
    cleanup_row,
    conflict_rows,
    install_rows,
    removal_rows,
    status_rows,
)

if TYPE_CHECKING:
    from .commands import CommandRunner
    from .diagnostics import DiagnosticsScanner
    from .filesystem import FileSystem
    from .lifecycle import ServiceLifecycleManager

__all__ = [
    "CliContext",
    "build_context",
    "run_install",
    "run_remove",
    "run_status",
    "run_diagnostics",
    "run_check_updates",
    "interactive_menu",
    "main",
]

logger = logging.getLogger(__name__)

PROG_NAME = "zapret-service-manager"
STATUS_COMMAND = "status_zapret"
UPDATES_COMMAND = "check_updates"
ELEVATED_OPERATIONS = ("install", "remove")
LOG_MAX_BYTES = 2_000_000
LOG_BACKUP_COUNT = 3

MENU_OPTIONS: tuple[tuple[str, str, str], ...] = (
    ("1", "Install service", "install"),
    ("2", "Remove services", "remove"),
    ("3", "Check service status", "status"),
    ("4", "Run diagnostics", "diagnostics"),
    ("5", "Check for updates", "updates"),
    ("6", "Exit", "exit"),
)

Prompt = Callable[[str], str]


@dataclass
class CliContext:
    """Everything a CLI action needs, built once per invocation."""

    console: Console
    settings: ManagerSettings
    manager: ServiceLifecycleManager
    scanner: DiagnosticsScanner
    filesystem: FileSystem
    prompt: Prompt


def build_context(
    settings: ManagerSettings | None = None,
    *,
    console: Console | None = None,
    runner: CommandRunner | None = None,
    filesystem: FileSystem | None = None,
    directory: str | None = None,
    prompt: Prompt | None = None,
) -> CliContext:
    """
    Wire production collaborators, allowing any of them to be replaced.

    Args:
        settings: Settings table. Defaults to ManagerSettings.from_env().
        console: rich Console for output. Defaults to stdout.
        runner: CommandRunner. Defaults to SubprocessRunner with the
            configured timeout.
        filesystem: FileSystem. Defaults to RealFileSystem.
        directory: Directory scanned for configurations. Defaults to cwd.
        prompt: Reads one line of operator input. Defaults to console.input.

    Returns:
        CliContext ready for the run_* functions.
    """
    from .commands import SubprocessRunner
    from .diagnostics import DiagnosticsScanner
    from .discovery import ConfigDiscovery
    from .elevation import WindowsElevation
    from .filesystem import RealFileSystem
    from .lifecycle import ServiceLifecycleManager
    from .processes import ProcessChecker
    from .registry import ScServiceRegistry

    settings = settings or ManagerSettings.from_env()
    console = console or Console()
    runner = runner or SubprocessRunner(timeout=settings.command_timeout)
    fs = filesystem or RealFileSystem()
    registry = ScServiceRegistry(runner)

    manager = ServiceLifecycleManager(
        registry=registry,
        processes=ProcessChecker(runner),
        discovery=ConfigDiscovery(fs, settings, directory or os.getcwd()),
        elevation=WindowsElevation(runner),
        settings=settings,
    )
    return CliContext(
        console=console,
        settings=settings,
        manager=manager,
        scanner=DiagnosticsScanner(registry, runner, settings),
        filesystem=fs,
        prompt=prompt or console.input,
    )


def _configure_logging(verbose: bool, log_file: str | None) -> None:
    """Send log records to stderr via rich and, optionally, a rotating file."""
    handlers: list[logging.Handler] = [
        RichHandler(
            console=Console(stderr=True),
            level=logging.DEBUG if verbose else logging.INFO,
            show_path=False,
        )
    ]
    if log_file:
        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=LOG_MAX_BYTES,
            backupCount=LOG_BACKUP_COUNT,
            encoding="utf-8",
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")
        )
        handlers.append(file_handler)
    logging.basicConfig(level=logging.DEBUG, format="%(message)s", handlers=handlers, force=True)


def _print_rows(console: Console, title: str, rows: Sequence[DisplayRow]) -> None:
    table = Table(title=title, box=box.ROUNDED, show_header=False, title_style="bold cyan")
    table.add_column("Item", style="bold")
    table.add_column("Value")
    for row in rows:
        value = escape(row.value)
        table.add_row(escape(row.label), f"[{row.style}]{value}[/]" if row.style else value)
    console.print(table)


def _parse_index(text: str) -> int:
    """Parse a 1-based menu choice; anything unparseable becomes 0 (invalid)."""
    try:
        return int(text.strip())
    except ValueError:
        return 0


def run_status(ctx: CliContext) -> None:
    """Print the agent service, driver service and worker process status."""
    _print_rows(ctx.console, "Service Status", status_rows(ctx.manager.status_report()))


def run_install(ctx: CliContext) -> InstallOutcome:
    """
    Install the service from a configuration chosen at the prompt.

    Returns:
        The install outcome; ELEVATION_REQUESTED means an elevated copy
        has been started and this process should exit.
    """

    def choose(candidates: Sequence[str]) -> int:
        ctx.console.print("[bold yellow]Select a configuration file:[/]")
        for number, name in enumerate(candidates, start=1):
            ctx.console.print(f"{number}. {name}", markup=False, highlight=False)
        try:
            return _parse_index(ctx.prompt("\nEnter your choice: "))
        except EOFError:
            return 0

    result = ctx.manager.install(choose)
    _print_rows(ctx.console, "Service Installation", install_rows(result))
    return result.outcome


def run_remove(ctx: CliContext) -> bool:
    """
    Stop and delete both services.

    Returns:
        True if an elevated copy was started instead.
    """
    result = ctx.manager.remove()
    if result.elevation_requested:
        ctx.console.print("[yellow]Requesting administrator privileges...[/]")
        return True
    _print_rows(ctx.console, "Removing Services", removal_rows(result))
    return False


def run_diagnostics(ctx: CliContext, *, offer_cleanup: bool = True) -> None:
    """
    Report conflicting services and DNS servers, then offer cache cleanup.

    Args:
        ctx: CLI context.
        offer_cleanup: Ask before clearing the Discord cache. Nothing is
            deleted without an explicit 'y'.
    """
    report = ctx.scanner.run()
    rows = conflict_rows(report)
    if rows:
        _print_rows(ctx.console, "Conflicting services", rows)
    else:
        ctx.console.print("[green]No conflicting services found[/]")

    ctx.console.print("\n[bold yellow]DNS settings:[/]")
    if report.dns_lines:
        for line in report.dns_lines:
            ctx.console.print(line, markup=False, highlight=False)
    else:
        ctx.console.print("[yellow]No DNS server entries found[/]")

    if not offer_cleanup:
        return
    try:
        answer = ctx.prompt("\nClear Discord cache? (y/n): ")
    except EOFError:
        answer = "n"
    if answer.strip().lower() == "y":
        from .diagnostics import clear_cache

        row = cleanup_row(clear_cache(ctx.filesystem, ctx.settings))
        ctx.console.print(f"{row.label}: [{row.style}]{escape(row.value)}[/]")


def run_check_updates(ctx: CliContext) -> None:
    """Show the installed version. No online lookup is performed."""
    from .__version__ import __version__

    ctx.console.print(f"Current version: [green]{__version__}[/]")
    if ctx.settings.releases_url:
        ctx.console.print(f"Compare with the latest release: [blue]{ctx.settings.releases_url}[/]")
    else:
        ctx.console.print(
            f"[yellow]Automatic update lookup is not available. "
            f"Set {Config.ENV_RELEASES_URL} to show a release page.[/]"
        )


def _run_operation(ctx: CliContext, operation: str) -> bool:
    """
    Run one menu operation.

    Returns:
        True if the process should exit (elevated copy started, or 'exit').
    """
    if operation == "install":
        return run_install(ctx) is InstallOutcome.ELEVATION_REQUESTED
    if operation == "remove":
        return run_remove(ctx)
    if operation == "status":
        run_status(ctx)
    elif operation == "diagnostics":
        run_diagnostics(ctx)
    elif operation == "updates":
        run_check_updates(ctx)
    elif operation == "exit":
        return True
    return False


def interactive_menu(ctx: CliContext) -> None:
    """
    Show the main menu until the operator exits.

    Invalid choices are reported and the menu is shown again. End of input
    or Ctrl+C at the prompt leaves the menu.
    """
    from .__version__ import __version__

    operations = {key: operation for key, _, operation in MENU_OPTIONS}
    while True:
        ctx.console.print(f"\n[bright_blue]===== Zapret Service Manager {__version__} =====[/]")
        for key, label, _ in MENU_OPTIONS:
            ctx.console.print(f"{key}. {label}")
        try:
            choice = ctx.prompt("\nEnter your choice: ").strip()
        except (EOFError, KeyboardInterrupt):
            ctx.console.print()
            return

        operation = operations.get(choice)
        if operation is None:
            ctx.console.print("[red]Invalid choice[/]")
            continue
        if _run_operation(ctx, operation):
            return


def _run_elevated(ctx: CliContext, operation: str) -> int:
    """
    Run the operation an elevated relaunch was started for, then pause.

    The window opened by the relaunch closes when this process exits, so a
    missing elevation is shown before the pause rather than left to main().

    Returns:
        0 on success, 1 if administrator privileges were still missing.
    """
    code = 0
    try:
        _run_operation(ctx, operation)
    except ElevationError as e:
        logger.error(f"Elevated {operation} failed: {e}")
        ctx.console.print(Panel(escape(str(e)), title="FATAL", style="red"))
        code = 1
    try:
        ctx.prompt("\nPress Enter to close...")
    except (EOFError, KeyboardInterrupt):
        pass
    return code


def main(argv: Sequence[str] | None = None, *, context: CliContext | None = None) -> int:
    """
    Main CLI entry point for Zapret Service Manager.

    With no command the interactive menu opens. `status_zapret` and
    `check_updates` run directly. `admin <operation>` is passed by the
    elevated relaunch and runs that operation without the menu.

    Args:
        argv: Arguments without the program name. Defaults to sys.argv[1:].
        context: Pre-built CliContext, used by tests.

    Returns:
        0 on success or after handing off to an elevated copy, 1 on a
        fatal error, 130 when interrupted.

    Example:
        >>> # From command line:
        >>> # zapret-service-manager status_zapret
        >>> sys.exit(main(["status_zapret"]))
    """
    from .__version__ import __version__

    parser = argparse.ArgumentParser(
        prog=PROG_NAME,
        description="Install, inspect and remove the zapret Windows service",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Show debug logging, including every system command",
    )
    parser.add_argument(
        "--log-file",
        default=None,
        help="Also write a rotating debug log to this file",
    )
    parser.add_argument(
        "command",
        nargs="?",
        choices=(STATUS_COMMAND, UPDATES_COMMAND, Config.ELEVATION_MARKER),
        help="Run a command directly instead of opening the menu",
    )
    parser.add_argument(
        "operation",
        nargs="?",
        choices=ELEVATED_OPERATIONS,
        help=f"Operation to resume after '{Config.ELEVATION_MARKER}'",
    )
    args = parser.parse_args(argv)
    if args.operation and args.command != Config.ELEVATION_MARKER:
        parser.error(f"an operation is only accepted after '{Config.ELEVATION_MARKER}'")

    _configure_logging(args.verbose, args.log_file)
    ctx = context or build_context()
    if args.command == Config.ELEVATION_MARKER:
        # Already the relaunched copy: a missing elevation is an error, not another relaunch
        ctx.manager.allow_relaunch = False

    try:
        if args.command == STATUS_COMMAND:
            run_status(ctx)
        elif args.command == UPDATES_COMMAND:
            run_check_updates(ctx)
        elif args.operation:
            return _run_elevated(ctx, args.operation)
        else:
            interactive_menu(ctx)
    except KeyboardInterrupt:
        ctx.console.print(Panel("Interrupted by user.", style="red"))
        return 130
    except (ElevationError, OSError) as e:
        logger.exception("Fatal error")
        ctx.console.print(Panel(escape(str(e)), title="FATAL", style="red"))
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
