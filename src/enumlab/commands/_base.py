"""Click base classes that add an ``--examples`` flag.

``--examples`` prints a few ready-to-paste invocations and exits, so
``--help`` can stay short.
"""

from __future__ import annotations

from typing import Any

import click


def _attach_examples(cmd: click.Command, examples: str) -> None:
    def _show(ctx: click.Context, _param: click.Parameter, value: bool) -> None:
        if not value or ctx.resilient_parsing:
            return
        click.echo(f"Examples for '{ctx.command_path}':\n")
        click.echo(examples)
        ctx.exit(0)

    cmd.params.append(
        click.Option(
            ["--examples"],
            is_flag=True,
            expose_value=False,
            is_eager=True,
            callback=_show,
            help="Show usage examples.",
        )
    )


class EnumlabCommand(click.Command):
    """A click Command accepting ``examples=`` at declaration time."""

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.examples = examples
        if examples:
            _attach_examples(self, examples)


class EnumlabGroup(click.Group):
    """A click Group accepting ``examples=``.

    Subcommands declared with ``@group.command`` are EnumlabCommands too.
    """

    command_class = EnumlabCommand

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.examples = examples
        if examples:
            _attach_examples(self, examples)
