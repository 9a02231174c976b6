"""
Uninstall wizard: take profilecore back out of a shell profile.

Steps:
  1. Confirm the user actually wants to do this
  2. Locate the profile of the detected shell (or --shell)
  3. Back up the profile, strip every profilecore block, write it back
  4. Optionally delete the config directory (asked separately)

Only one shell is handled per run. Unrelated profile lines are left
exactly as they were; a missing profile or one without a block is
reported and not touched.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from . import BINARY_NAME
from .backup import backup_path_for, backup_profile
from .config import ConfigDirectory
from .errors import BackupError, ProfileWriteError
from .profile_block import content_has_marker, read_profile, strip_block, write_profile
from .shells import HostEnvironment, ShellDialect, detect_current_shell, resolve_profile_path

logger = logging.getLogger("profilecore.uninstall_wizard")

console = Console()


@dataclass
class UninstallResult:
    """What an uninstall run actually changed."""

    shell: ShellDialect
    profile_path: Path
    block_removed: bool = False
    backup_path: Optional[Path] = None
    config_removed: bool = False
    error: str = ""


def remove_from_profile(profile_path: Path) -> bool:
    """Strip profilecore blocks from a profile, backing it up first.

    Args:
        profile_path: Profile to clean.

    Returns:
        True if a block was found and removed, False if there was
        nothing to remove (missing file or no marker).

    Raises:
        BackupError: If the backup failed; the profile is not touched.
        ProfileWriteError: If the profile cannot be read or written.
    """
    if not profile_path.exists():
        return False

    content = read_profile(profile_path)
    if not content_has_marker(content):
        return False

    backup_profile(profile_path)
    write_profile(profile_path, strip_block(content))
    logger.info("Removed profilecore block from %s", profile_path)
    return True


def _remove_config_dir(config_dir: ConfigDirectory) -> bool:
    console.print("  Removing config directory...", end=" ")
    try:
        removed = config_dir.remove()
    except OSError as exc:
        console.print(f"\n    [red]Could not delete {config_dir.path}: {exc}[/]")
        return False
    console.print("[green]removed[/]" if removed else "[dim]not found[/]")
    return removed


def run_uninstall_wizard(
    shell: Optional[ShellDialect] = None,
    assume_yes: bool = False,
    purge: bool = False,
    env: Optional[HostEnvironment] = None,
) -> Optional[UninstallResult]:
    """Run the uninstall wizard.

    Args:
        shell: Shell to clean (defaults to the detected one).
        assume_yes: Skip the "are you sure" confirmation.
        purge: Delete the config directory without asking.
        env: Host snapshot (defaults to the running host).

    Returns:
        UninstallResult, or None if the user cancelled.

    Raises:
        HomeDirectoryError: If the profile location cannot be resolved.
    """
    env = env or HostEnvironment.current()
    shell = shell or detect_current_shell(env)
    profile_path = resolve_profile_path(shell, env)
    config_dir = ConfigDirectory.for_host(env)

    console.print()
    console.print(
        Panel(
            "[bold]ProfileCore Uninstaller[/]\n\n"
            "Removes the profilecore init block from your shell profile.\n"
            "Everything else in the file is kept.",
            title="Uninstall",
            border_style="yellow",
            padding=(1, 3),
        )
    )
    console.print()

    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column("Item", width=18)
    table.add_column("Details")
    table.add_row("Shell", shell.value)
    table.add_row("Profile", str(profile_path))
    table.add_row(
        "Config directory",
        str(config_dir.path) if config_dir.exists() else "[dim]not found[/]",
    )
    console.print(table)
    console.print()

    if not assume_yes and not click.confirm(
        f"  Remove ProfileCore from {shell.value}?", default=False
    ):
        console.print("  [green]Cancelled.[/] Nothing was changed.")
        return None

    result = UninstallResult(shell=shell, profile_path=profile_path)

    console.print(f"  Cleaning {profile_path}...", end=" ")
    try:
        result.block_removed = remove_from_profile(profile_path)
    except (BackupError, ProfileWriteError) as exc:
        logger.warning("Uninstall failed for %s: %s", shell.value, exc)
        result.error = str(exc)
        console.print(f"\n    [red]{exc}[/]")
    else:
        if result.block_removed:
            result.backup_path = backup_path_for(profile_path)
            console.print("[green]block removed[/]")
            console.print(f"    [dim]Backup: {result.backup_path}[/]")
        elif profile_path.exists():
            console.print("[dim]no ProfileCore block found[/]")
        else:
            console.print("[dim]profile not found[/]")

    if config_dir.exists():
        console.print()
        if purge or click.confirm(
            f"  Also delete the config directory {config_dir.path}? "
            "This cannot be undone.",
            default=False,
        ):
            result.config_removed = _remove_config_dir(config_dir)
        else:
            console.print("  [dim]Config directory kept.[/]")

    console.print()
    console.print(
        Panel(
            _done_message(result),
            title="Done",
            border_style="green" if result.block_removed else "yellow",
            padding=(1, 3),
        )
    )
    return result


def _done_message(result: UninstallResult) -> str:
    if result.error:
        return (
            "[bold red]Could not update your shell profile.[/]\n\n"
            f"{result.error}\n\n"
            "Remove the ProfileCore block by hand, or fix the file and\n"
            f"run [cyan]{BINARY_NAME} uninstall[/] again."
        )
    if result.block_removed:
        return (
            "[bold]ProfileCore has been removed from your shell.[/]\n\n"
            "Open a new terminal for the change to take effect.\n"
            f"To reinstall: [cyan]{BINARY_NAME} install[/]"
        )
    return (
        f"[bold]ProfileCore was not installed in {result.profile_path}.[/]\n\n"
        "Nothing in your shell profile was changed."
    )
