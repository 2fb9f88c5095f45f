"""Subcommand modules for enumlab.

Provides register_commands(), which imports each command module only
when the root group is assembled.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Attach the ``account`` group and the ``describe`` command to the root group."""
    from enumlab.commands.account import account
    from enumlab.commands.describe import describe

    cli.add_command(account)
    cli.add_command(describe)
