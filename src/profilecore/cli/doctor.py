"""The doctor command: verify an installation."""

from __future__ import annotations

import json
import sys
from typing import Optional

import click

from ._common import SHELL_CHOICE, console, fail, to_dialect
from ..errors import HomeDirectoryError


def register_doctor_commands(main: click.Group) -> None:
    """Register the doctor command."""

    @main.command()
    @click.option("--shell", "shell_name", default=None, type=SHELL_CHOICE,
                  help="Shell to check (defaults to the detected one).")
    @click.option("--json", "json_out", is_flag=True, help="Output as machine-readable JSON.")
    def doctor(shell_name: Optional[str], json_out: bool):
        """Check that profilecore is hooked into your shell."""
        from ..doctor import verify_installation
        from ..shells import HostEnvironment, detect_current_shell

        env = HostEnvironment.current()
        shell = to_dialect(shell_name) or detect_current_shell(env)
        try:
            report = verify_installation(shell, env)
        except HomeDirectoryError as exc:
            fail(str(exc))
            return

        if json_out:
            click.echo(json.dumps(report.to_dict(), indent=2))
        else:
            console.print()
            console.print(f"  [bold]{shell.value}[/] [dim]({report.profile_path})[/]")
            for c in report.checks:
                icon = "[green]✓[/]" if c.passed else "[red]✗[/]"
                detail = f" [dim]({c.detail})[/]" if c.detail else ""
                console.print(f"    {icon} {c.description}{detail}")
                if not c.passed and c.fix:
                    console.print(f"      [yellow]Fix: {c.fix}[/]")
            console.print()

            total = len(report.checks)
            if report.all_passed:
                console.print(f"  [bold green]✓ All {total} checks passed.[/]")
            else:
                console.print(
                    f"  [bold green]{report.passed_count}[/] passed, "
                    f"[bold red]{report.failed_count}[/] failed "
                    f"out of {total} checks."
                )
            console.print()

        if not report.all_passed:
            sys.exit(1)
