"""
ProfileCore CLI: install, uninstall and check the shell integration.

Each group of commands lives in its own module and is attached to the
main Click group through a register function.

Entry point: profilecore.cli:main
"""

from __future__ import annotations

import logging

import click

from .. import __version__


@click.group()
@click.version_option(version=__version__, prog_name="profilecore")
@click.option("--verbose", "-v", is_flag=True, help="Log debug output to stderr.")
def main(verbose: bool):
    """ProfileCore shell integration.

    Hook profilecore into bash, zsh, fish or PowerShell.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


# ---------------------------------------------------------------------------
# Register all commands from modular files
# ---------------------------------------------------------------------------

from .setup import register_setup_commands
from .init_cmd import register_init_commands
from .doctor import register_doctor_commands

register_setup_commands(main)
register_init_commands(main)
register_doctor_commands(main)
