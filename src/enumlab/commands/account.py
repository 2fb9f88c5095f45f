"""Command group: drive the Account state machine."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from enumlab.commands._base import EnumlabGroup
from enumlab.services.account import AccountService

if TYPE_CHECKING:
    from enumlab.commands._context import AppContext


@click.group(
    cls=EnumlabGroup,
    examples="""\
  enumlab account replay 100 -30 -70
  enumlab account replay --opening 20 -- -50""",
)
def account() -> None:
    """Apply balance changes to an in-memory account."""


@account.command(
    context_settings={"ignore_unknown_options": True},
    examples="""\
  enumlab account replay 100
  enumlab account replay 100 -30 -70
  enumlab account replay --opening 50 -20
  enumlab -v account replay 100 -30
  enumlab --json account replay 10 -20""",
)
@click.argument("amounts", nargs=-1, type=int)
@click.option(
    "--opening",
    type=click.IntRange(min=0),
    default=None,
    help="Opening balance (defaults to [account] opening_funds).",
)
@click.pass_obj
def replay(app: AppContext, amounts: tuple[int, ...], opening: int | None) -> None:
    """Apply AMOUNTS in order; positive adds funds, negative removes them.

    Stops at the first change that would overdraw the account and exits
    with status 1, leaving the balance as it was before that change.
    """
    app.emit(AccountService(app.settings).replay(amounts, opening=opening))
