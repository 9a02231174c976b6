"""Shared utilities for the CLI command modules.

Provides the Rich console instance, the shell-name parameter type and
the fatal-error exit used by every command.
"""

from __future__ import annotations

import sys
from typing import Optional

import click
from rich.console import Console

from ..shells import SHELL_NAMES, ShellDialect, parse_shell

console = Console()

SHELL_CHOICE = click.Choice(SHELL_NAMES, case_sensitive=False)


def to_dialect(name: Optional[str]) -> Optional[ShellDialect]:
    """Map a validated ``--shell`` value onto its dialect."""
    return parse_shell(name) if name else None


def fail(message: str) -> None:
    """Print a red error line and exit with status 1."""
    console.print(f"\n  [red]{message}[/]\n")
    sys.exit(1)
