"""Command: evaluate a rule or expression tree from a JSON file."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from rulectl.commands._base import RuleCommand

if TYPE_CHECKING:
    from rulectl.commands._context import AppContext

# Exit status for --check when the rule does not pass
EXIT_NOT_PASSING = 2


@click.command(
    cls=RuleCommand,
    examples="""\
  rulectl evaluate rule.json
  rulectl evaluate rule.json --now 2024-01-15T12:00:00
  rulectl evaluate rule.json --attr '#uname=node1' --attr rack=2
  rulectl evaluate rule.json --rsc ocf:heartbeat:IPaddr2 --op monitor:10s
  rulectl --json evaluate rule.json --check""",
)
@click.argument("path", type=click.Path(dir_okay=False, path_type=Path))
@click.option("--now", default=None, help="Evaluate at this ISO 8601 time (default: now).")
@click.option(
    "--attr",
    "attrs",
    multiple=True,
    metavar="NAME=VALUE",
    help="Node attribute value (repeatable).",
)
@click.option("--rsc", default=None, metavar="CLASS:PROVIDER:TYPE", help="Resource agent.")
@click.option("--op", "operation", default=None, metavar="NAME[:INTERVAL]", help="Operation.")
@click.option("--check", is_flag=True, help=f"Exit {EXIT_NOT_PASSING} if the rule does not pass.")
@click.pass_obj
def evaluate(
    app: AppContext,
    path: Path,
    now: str | None,
    attrs: tuple[str, ...],
    rsc: str | None,
    operation: str | None,
    check: bool,
) -> None:
    """Evaluate the rule or expression in PATH."""
    from rulectl.services._helpers import parse_assignments

    try:
        node_attrs = parse_assignments(attrs)
    except ValueError as exc:
        raise click.BadParameter(str(exc), param_hint="--attr") from exc

    result = app.service.evaluate_file(
        path, now=now, node_attrs=node_attrs, rsc=rsc, operation=operation
    )
    app.emit(result)
    if check and not result.data.get("passed"):
        raise SystemExit(EXIT_NOT_PASSING)
