"""The init command, evaluated by the installed shell hook."""

from __future__ import annotations

import click

from ._common import SHELL_CHOICE, to_dialect


def register_init_commands(main: click.Group) -> None:
    """Register the init command."""

    @main.command()
    @click.argument("shell_name", metavar="SHELL", type=SHELL_CHOICE)
    def init(shell_name: str):
        """Print the integration script for SHELL.

        Not meant to be run by hand; your profile evaluates it:

            eval "$(profilecore init bash)"
        """
        from ..init_script import generate_init_script

        click.echo(generate_init_script(to_dialect(shell_name)), nl=False)
