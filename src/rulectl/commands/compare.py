"""Command: compare two attribute values by type."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from rulectl.commands._base import RuleCommand

if TYPE_CHECKING:
    from rulectl.commands._context import AppContext


@click.command(
    cls=RuleCommand,
    examples="""\
  rulectl compare ABC abc
  rulectl compare 10 9 --op gt
  rulectl compare 2.10 2.9 --type version
  rulectl compare 1.5 1.25 --op lt""",
)
@click.argument("left")
@click.argument("right")
@click.option(
    "--op",
    "operation",
    default=None,
    help="Comparison to check (defined, not_defined, eq, ne, lt, lte, gt, gte).",
)
@click.option(
    "--type",
    "type_name",
    default=None,
    help="Value type (string, integer, number, version); inferred when omitted.",
)
@click.pass_obj
def compare(
    app: AppContext,
    left: str,
    right: str,
    operation: str | None,
    type_name: str | None,
) -> None:
    """Compare LEFT with RIGHT the way attribute expressions do."""
    app.emit(app.service.compare(left, right, operation=operation, type_name=type_name))
