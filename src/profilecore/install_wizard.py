"""
Install wizard: hook profilecore into one or more shells.

Flow:

  1. Find which shells exist on this machine and which one is running
  2. Let the user pick one shell, several, or a different one
  3. Make sure the profilecore binary is reachable on PATH
     (offer to fix PATH if it was found somewhere else)
  4. For each chosen shell, independently:
       probe → [ask before reinstalling] → backup → config dir → write block
  5. Summarise and verify the shells that succeeded

One shell failing never stops the others, and nothing already done is
rolled back. Saying "no" to a prompt is a normal outcome, not an error.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional, Sequence

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from . import BINARY_NAME, __version__
from .backup import backup_profile
from .config import ConfigDirectory, InstallerConfig, ReinstallMode
from .doctor import VerificationReport, verify_installation
from .errors import BackupError, ProfileWriteError
from .preflight import (
    BinaryStatus,
    check_binary,
    configure_path,
    manual_path_instructions,
)
from .profile_block import (
    append_to_profile,
    generate_block,
    is_installed,
    read_profile,
    strip_block,
    write_profile,
)
from .shells import (
    HostEnvironment,
    ShellDialect,
    detect_current_shell,
    get_available_shells,
    ordered_shells,
    reload_command,
    resolve_profile_path,
)

logger = logging.getLogger("profilecore.install_wizard")

console = Console()


class InstallOutcome(str, Enum):
    """How one shell fared in a batch run."""

    SUCCESS = "success"
    FAILED = "failed"
    SKIPPED = "skipped"


@dataclass
class ShellInstallResult:
    """Result of installing into a single shell."""

    shell: ShellDialect
    outcome: InstallOutcome
    profile_path: Optional[Path] = None
    backup_path: Optional[Path] = None
    error: str = ""

    @property
    def success(self) -> bool:
        return self.outcome == InstallOutcome.SUCCESS


@dataclass
class InstallContext:
    """State shared by every shell in one install run."""

    env: HostEnvironment
    config_dir: ConfigDirectory
    config: InstallerConfig
    assume_yes: bool = False

    @classmethod
    def for_host(cls, env: HostEnvironment, assume_yes: bool = False) -> "InstallContext":
        config_dir = ConfigDirectory.for_host(env)
        return cls(
            env=env,
            config_dir=config_dir,
            config=config_dir.load(),
            assume_yes=assume_yes,
        )

    def ensure_config_dir(self) -> None:
        """Create the config directory once per run.

        Raises:
            OSError: If it cannot be created.
        """
        if self.config_dir.ensure():
            console.print(f"    [green]Created config directory:[/] {self.config_dir.path}")


# ---------------------------------------------------------------------------
# Prompts
# ---------------------------------------------------------------------------

def _confirm(question: str, default: bool, assume_yes: bool) -> bool:
    if assume_yes:
        return True
    return click.confirm(question, default=default)


def _shell_label(shell: ShellDialect, detected: ShellDialect) -> str:
    return f"{shell.value} (detected)" if shell == detected else shell.value


def _print_header(title: str) -> None:
    console.print()
    console.print(
        Panel(
            f"[bold]ProfileCore v{__version__}[/]  {title}",
            border_style="cyan",
            padding=(0, 2),
            expand=False,
        )
    )
    console.print()


def _print_cancelled() -> None:
    console.print("  [yellow]Installation cancelled.[/]")


# ---------------------------------------------------------------------------
# Shell selection
# ---------------------------------------------------------------------------

def select_initial_shell(
    available: Sequence[ShellDialect],
    env: HostEnvironment,
) -> ShellDialect:
    """The detected shell if it is installed, else the first available one."""
    detected = detect_current_shell(env)
    if detected in available:
        return detected
    return available[0]


def _display_shell_info(detected: ShellDialect, available: Sequence[ShellDialect]) -> None:
    console.print(f"  [green]Detected shell:[/] [bold]{detected.value}[/]")
    if len(available) > 1:
        names = ", ".join(s.value for s in available)
        console.print(f"  [dim]Available shells: {names}[/]")
    console.print()


def prompt_shell_selection(
    detected: ShellDialect,
    available: Sequence[ShellDialect],
    assume_yes: bool = False,
) -> list[ShellDialect]:
    """Ask which shells to install into.

    Args:
        detected: The shell offered as the default.
        available: Installed shells, in display order.
        assume_yes: Take the detected shell without asking.

    Returns:
        Chosen shells; empty if the user cancelled.
    """
    if assume_yes:
        return [detected]

    if len(available) == 1:
        only = available[0]
        if click.confirm(f"  Install for {only.value}?", default=True):
            return [only]
        return []

    console.print("  [bold]Choose installation mode:[/]\n")
    table = Table(show_header=False, box=None, padding=(0, 3), show_edge=False)
    table.add_column("Option", style="bold cyan", width=6, justify="center")
    table.add_column("Description")
    table.add_row("1", f"Install for [bold]{detected.value}[/] (detected)")
    table.add_row("2", "Install for several shells")
    table.add_row("3", "Choose a different shell")
    table.add_row("4", "Cancel installation")
    console.print(table)
    console.print()

    mode = click.prompt("  Enter your choice", type=click.IntRange(1, 4), default=1)
    console.print()

    if mode == 1:
        return [detected]
    if mode == 2:
        return _prompt_multi_select(available, detected)
    if mode == 3:
        return _prompt_single_select(available, detected)
    return []


def _print_numbered(available: Sequence[ShellDialect], detected: ShellDialect) -> None:
    for idx, shell in enumerate(available, 1):
        console.print(f"    [cyan]{idx}[/]  {_shell_label(shell, detected)}")
    console.print()


def parse_selection(raw: str, available: Sequence[ShellDialect]) -> list[ShellDialect]:
    """Turn "1, 3" into shells, ignoring out-of-range or non-numeric items.

    Args:
        raw: Comma- or space-separated 1-based indices.
        available: Shells the indices refer to.

    Returns:
        Selected shells in the order given, without duplicates.
    """
    chosen: list[ShellDialect] = []
    for token in raw.replace(",", " ").split():
        if not token.isdigit():
            continue
        idx = int(token)
        if 1 <= idx <= len(available) and available[idx - 1] not in chosen:
            chosen.append(available[idx - 1])
    return chosen


def _prompt_multi_select(
    available: Sequence[ShellDialect],
    detected: ShellDialect,
) -> list[ShellDialect]:
    _print_numbered(available, detected)
    default = str(list(available).index(detected) + 1) if detected in available else "1"
    raw = click.prompt("  Shells to install (e.g. 1,3)", default=default)
    chosen = parse_selection(raw, available)
    if not chosen:
        console.print("  [yellow]No shells selected.[/]")
    return chosen


def _prompt_single_select(
    available: Sequence[ShellDialect],
    detected: ShellDialect,
) -> list[ShellDialect]:
    _print_numbered(available, detected)
    default = list(available).index(detected) + 1 if detected in available else 1
    idx = click.prompt(
        "  Choose your shell",
        type=click.IntRange(1, len(available)),
        default=default,
    )
    return [available[idx - 1]]


# ---------------------------------------------------------------------------
# Binary on PATH
# ---------------------------------------------------------------------------

def check_binary_step(env: HostEnvironment, assume_yes: bool = False) -> bool:
    """Make sure the binary will resolve when the hook runs.

    Returns:
        True to carry on with the install, False to stop.
    """
    check = check_binary(env)

    if check.status == BinaryStatus.ON_PATH:
        console.print(f"  [green]{BINARY_NAME} binary found in PATH[/]")
        console.print()
        return True

    console.print(f"  [yellow]Warning: {BINARY_NAME} binary not found in PATH[/]")

    if check.status == BinaryStatus.OFF_PATH and check.directory is not None:
        console.print(f"  Found binary at: [cyan]{check.directory}[/]")
        console.print()
        return _offer_path_configuration(check.directory, env, assume_yes)

    console.print(f"  Could not locate the {BINARY_NAME} binary automatically.")
    console.print()
    return _manual_path_prompt(assume_yes)


def _offer_path_configuration(bin_dir: Path, env: HostEnvironment, assume_yes: bool) -> bool:
    if assume_yes:
        choice = 1
    else:
        console.print("  [bold]How would you like to handle PATH?[/]\n")
        console.print("    [cyan]1[/]  Add it to my shell profile automatically")
        console.print("    [cyan]2[/]  Show me how to do it by hand")
        console.print("    [cyan]3[/]  Continue without adding to PATH")
        console.print("    [cyan]4[/]  Cancel installation")
        console.print()
        choice = click.prompt("  Your choice", type=click.IntRange(1, 4), default=1)
        console.print()

    if choice == 1:
        if _auto_configure_path(bin_dir, env):
            shell = detect_current_shell(env)
            console.print("  [green]PATH configured.[/] Reload your shell or run:")
            console.print(f"    [cyan]{reload_command(shell)}[/]")
            console.print()
            return True
        console.print("  [red]Automatic PATH setup failed.[/] Here is how to do it by hand:")
        _show_manual_path_instructions(bin_dir, env)
        return _manual_path_prompt(assume_yes)
    if choice == 2:
        _show_manual_path_instructions(bin_dir, env)
        return _manual_path_prompt(assume_yes)
    if choice == 3:
        console.print("  [yellow]Continuing without PATH configuration.[/]")
        console.print()
        return True

    _print_cancelled()
    return False


def _auto_configure_path(bin_dir: Path, env: HostEnvironment) -> bool:
    shell = detect_current_shell(env)
    try:
        result = configure_path(shell, bin_dir, env)
    except (BackupError, ProfileWriteError) as exc:
        console.print(f"  [red]{exc}[/]")
        return False

    if result.already_configured:
        console.print(f"  [green]PATH already configured in[/] {result.profile_path}")
    else:
        if result.backup_path:
            console.print(f"  [green]Backed up profile to:[/] {result.backup_path}")
        console.print(f"  [green]Added PATH configuration to:[/] {result.profile_path}")
    return True


def _show_manual_path_instructions(bin_dir: Path, env: HostEnvironment) -> None:
    lines = [f"Add [cyan]{bin_dir}[/] to your PATH.\n"]
    for label, command in manual_path_instructions(bin_dir, env):
        lines.append(f"[bold]{label}:[/]\n  [cyan]{command}[/]\n")
    lines.append(
        "Then reload your shell (or open a new terminal) and run\n"
        f"[cyan]{BINARY_NAME} install[/] again if needed."
    )

    console.print()
    console.print(
        Panel(
            "\n".join(lines),
            title="Manual PATH setup",
            border_style="yellow",
            padding=(1, 3),
        )
    )
    console.print()


def _manual_path_prompt(assume_yes: bool) -> bool:
    if _confirm("  Continue with the installation anyway?", default=True, assume_yes=assume_yes):
        console.print()
        return True
    _print_cancelled()
    console.print(f"  [dim]After adding it to PATH, run [cyan]{BINARY_NAME} install[/] again.[/]")
    return False


# ---------------------------------------------------------------------------
# Per-shell install
# ---------------------------------------------------------------------------

def write_block(shell: ShellDialect, profile_path: Path, replace: bool = False) -> None:
    """Write the hook block into a profile.

    Args:
        shell: Dialect whose block to write.
        profile_path: Target profile (created if missing).
        replace: Strip existing blocks first instead of appending a copy.

    Raises:
        ProfileWriteError: If the profile cannot be read or written.
    """
    block = generate_block(shell)
    if replace:
        content = strip_block(read_profile(profile_path))
        write_profile(profile_path, content + block)
    else:
        append_to_profile(profile_path, block)


def _prompt_reinstall(shell: ShellDialect, assume_yes: bool) -> bool:
    console.print("    [yellow]ProfileCore is already installed in this profile.[/]")
    if _confirm("    Reinstall / update it?", default=False, assume_yes=assume_yes):
        return True
    console.print(f"    [yellow]Skipping {shell.value}.[/]")
    return False


def install_for_shell(shell: ShellDialect, context: InstallContext) -> ShellInstallResult:
    """Install the hook into one shell's profile.

    Args:
        shell: Dialect to install.
        context: Shared run state.

    Returns:
        ShellInstallResult with SUCCESS, FAILED, or SKIPPED.

    Raises:
        HomeDirectoryError: If the profile location cannot be resolved.
    """
    console.print(f"  [bold cyan]Installing for {shell.value}...[/]")
    profile_path = resolve_profile_path(shell, context.env)
    console.print(f"    Profile file: [cyan]{profile_path}[/]")

    reinstall = is_installed(profile_path)
    if reinstall and not _prompt_reinstall(shell, context.assume_yes):
        console.print()
        return ShellInstallResult(shell, InstallOutcome.SKIPPED, profile_path)

    try:
        backup = backup_profile(profile_path)
    except BackupError as exc:
        logger.warning("Backup failed for %s: %s", shell.value, exc)
        console.print(f"    [red]Failed to back up profile: {exc.cause}[/]\n")
        return ShellInstallResult(shell, InstallOutcome.FAILED, profile_path, error=str(exc))
    if backup:
        console.print(f"    [green]Backed up existing profile to:[/] {backup}")

    try:
        context.ensure_config_dir()
    except OSError as exc:
        logger.warning("Config directory failed: %s", exc)
        console.print(f"    [red]Failed to create config directory: {exc}[/]\n")
        return ShellInstallResult(shell, InstallOutcome.FAILED, profile_path, backup, str(exc))

    replace = reinstall and context.config.reinstall_mode == ReinstallMode.REPLACE
    try:
        write_block(shell, profile_path, replace=replace)
    except ProfileWriteError as exc:
        logger.warning("Write failed for %s: %s", shell.value, exc)
        console.print(f"    [red]Failed to add init code: {exc.cause}[/]\n")
        return ShellInstallResult(shell, InstallOutcome.FAILED, profile_path, backup, str(exc))

    console.print(f"    [green]Added ProfileCore init to:[/] {profile_path}\n")
    return ShellInstallResult(shell, InstallOutcome.SUCCESS, profile_path, backup)


def install_for_shells(
    shells: Sequence[ShellDialect],
    context: InstallContext,
) -> list[ShellInstallResult]:
    """Install into each shell in turn; failures don't stop the batch."""
    return [install_for_shell(shell, context) for shell in shells]


# ---------------------------------------------------------------------------
# Summary + verification
# ---------------------------------------------------------------------------

_OUTCOME_STYLE = {
    InstallOutcome.SUCCESS: "[green]installed[/]",
    InstallOutcome.FAILED: "[red]failed[/]",
    InstallOutcome.SKIPPED: "[yellow]skipped[/]",
}


def _print_results_table(results: Sequence[ShellInstallResult]) -> None:
    table = Table(show_header=True, header_style="bold", box=None, padding=(0, 2))
    table.add_column("Shell", width=12)
    table.add_column("Profile")
    table.add_column("Result", width=10)
    for result in results:
        table.add_row(
            f"  {result.shell.value}",
            str(result.profile_path or ""),
            _OUTCOME_STYLE[result.outcome],
        )
    console.print(table)
    console.print()


def _print_success_message(primary: ShellDialect, installed: int, selected: int) -> None:
    lines = ["[bold green]Installation complete![/]\n"]
    if installed < selected:
        lines.append(f"[yellow]Installed for {installed} of {selected} selected shells.[/]\n")
    lines.append(
        "[bold]Next steps:[/]\n\n"
        f"  1. Reload your shell:   [cyan]{reload_command(primary)}[/]\n"
        f"  2. Check the install:   [cyan]{BINARY_NAME} doctor[/]\n"
        f"  3. Get help:            [cyan]{BINARY_NAME} --help[/]"
    )
    console.print(
        Panel(
            "\n".join(lines),
            title="Setup Complete",
            border_style="green",
            padding=(1, 2),
        )
    )
    console.print()


def print_verification(report: VerificationReport) -> None:
    """Render one shell's verification report."""
    table = Table(
        show_header=False,
        box=None,
        padding=(0, 2),
        title=f"Verification: {report.shell.value}",
        title_justify="left",
    )
    table.add_column("Status", width=6)
    table.add_column("Check")
    table.add_column("Detail", style="dim")
    for check in report.checks:
        icon = "[green]OK[/]" if check.passed else "[red]NO[/]"
        table.add_row(f"  {icon}", check.description, check.detail)
    console.print(table)
    console.print()


def verify_installations(
    results: Sequence[ShellInstallResult],
    context: InstallContext,
) -> list[VerificationReport]:
    """Verify every shell that installed successfully. Never mutates."""
    reports = []
    for result in results:
        if result.success:
            report = verify_installation(result.shell, context.env, context.config_dir)
            print_verification(report)
            reports.append(report)
    return reports


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------

def run_install_wizard(
    shells: Optional[Sequence[ShellDialect]] = None,
    assume_yes: bool = False,
    env: Optional[HostEnvironment] = None,
) -> list[ShellInstallResult]:
    """Run the interactive installer.

    Args:
        shells: Pre-selected shells (skips the selection prompts).
        assume_yes: Answer every confirmation with yes.
        env: Host snapshot (defaults to the running host).

    Returns:
        One result per attempted shell; empty if the run stopped early.

    Raises:
        HomeDirectoryError: If profile locations cannot be resolved.
    """
    env = env or HostEnvironment.current()
    _print_header("Installer")

    available = ordered_shells(get_available_shells(env))
    if not available:
        console.print(
            Panel(
                "[bold red]No supported shells found.[/]\n\n"
                "ProfileCore supports bash, zsh, fish and PowerShell.",
                title="Nothing to install",
                border_style="red",
            )
        )
        return []

    if shells:
        selected = ordered_shells(shells)
        for shell in selected:
            if shell not in available:
                console.print(f"  [yellow]{shell.value} was not found on this system; installing anyway.[/]")
    else:
        detected = select_initial_shell(available, env)
        _display_shell_info(detected, available)
        selected = prompt_shell_selection(detected, available, assume_yes)

    if not selected:
        _print_cancelled()
        return []

    console.print()
    if not check_binary_step(env, assume_yes):
        return []

    context = InstallContext.for_host(env, assume_yes)
    results = install_for_shells(selected, context)
    _print_results_table(results)

    succeeded = [r for r in results if r.success]
    if not succeeded:
        console.print("  [yellow]No shells were configured.[/]")
        return results

    _print_success_message(succeeded[0].shell, len(succeeded), len(selected))
    if context.config.verify_after_install:
        verify_installations(results, context)
    return results
