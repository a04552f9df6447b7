"""Subcommand modules for rulectl.

Provides register_commands() which uses deferred imports to keep
``rulectl --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all standalone commands on the root CLI group."""
    from rulectl.commands.compare import compare
    from rulectl.commands.evaluate import evaluate
    from rulectl.commands.expand import expand

    cli.add_command(evaluate)
    cli.add_command(compare)
    cli.add_command(expand)
