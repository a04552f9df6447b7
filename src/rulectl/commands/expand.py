"""Command: expand %0-%9 submatch placeholders."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from rulectl.commands._base import RuleCommand

if TYPE_CHECKING:
    from rulectl.commands._context import AppContext


@click.command(
    cls=RuleCommand,
    examples="""\
  rulectl expand '%1-%2' --pattern '(\\w+)@(\\w+)' --input user@host
  rulectl -q expand 'rack-%1' --pattern 'node(\\d+)' --input node12""",
)
@click.argument("template")
@click.option("--pattern", required=True, help="Regular expression to match.")
@click.option("--input", "text", required=True, help="Text to match the pattern against.")
@click.pass_obj
def expand(app: AppContext, template: str, pattern: str, text: str) -> None:
    """Expand %N placeholders in TEMPLATE with groups matched from --input."""
    app.emit(app.service.expand(template, pattern, text))
