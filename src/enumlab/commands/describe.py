"""Command: list or describe the registered unions and enumerations."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from enumlab.commands._base import EnumlabCommand

if TYPE_CHECKING:
    from enumlab.commands._context import AppContext


@click.command(
    cls=EnumlabCommand,
    examples="""\
  enumlab describe
  enumlab describe Account
  enumlab describe FileNode
  enumlab -q describe Device
  enumlab --json describe Maybe""",
)
@click.argument("name", required=False)
@click.pass_obj
def describe(app: AppContext, name: str | None) -> None:
    """Show the variants of union NAME, or list everything when NAME is omitted."""
    from enumlab.services.catalog import CatalogService

    svc = CatalogService(app.settings)
    app.emit(svc.describe(name) if name else svc.list_all())
