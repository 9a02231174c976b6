"""Setup commands: install, uninstall."""

from __future__ import annotations

import sys
from typing import Optional

import click

from ._common import SHELL_CHOICE, console, fail, to_dialect
from ..errors import HomeDirectoryError


def register_setup_commands(main: click.Group) -> None:
    """Register the install/uninstall commands on the main CLI group."""

    @main.command()
    @click.option(
        "--shell", "shell_names", multiple=True, type=SHELL_CHOICE,
        help="Shell to install into (repeatable). Skips the selection prompts.",
    )
    @click.option("--yes", "-y", is_flag=True, help="Answer yes to every confirmation.")
    def install(shell_names: tuple[str, ...], yes: bool):
        """Hook profilecore into your shell profile(s)."""
        from ..install_wizard import InstallOutcome, run_install_wizard

        shells = [to_dialect(name) for name in shell_names] or None
        try:
            results = run_install_wizard(shells=shells, assume_yes=yes)
        except HomeDirectoryError as exc:
            fail(str(exc))
            return

        if any(r.outcome == InstallOutcome.FAILED for r in results):
            sys.exit(1)

    @main.command()
    @click.option("--shell", "shell_name", default=None, type=SHELL_CHOICE,
                  help="Shell to clean up (defaults to the detected one).")
    @click.option("--yes", "-y", is_flag=True, help="Skip the confirmation prompt.")
    @click.option("--purge", is_flag=True, help="Also delete the config directory without asking.")
    def uninstall(shell_name: Optional[str], yes: bool, purge: bool):
        """Remove profilecore from your shell profile."""
        from ..uninstall_wizard import run_uninstall_wizard

        try:
            result = run_uninstall_wizard(
                shell=to_dialect(shell_name), assume_yes=yes, purge=purge,
            )
        except HomeDirectoryError as exc:
            fail(str(exc))
            return

        if result is not None and result.error:
            console.print()
            sys.exit(1)
