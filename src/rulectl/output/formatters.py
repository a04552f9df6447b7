"""Rich/JSON output helpers.

The CLI renders ServiceResult for humans (Rich output, colors) or
machines (--json). The formatter layer adapts ServiceResult to the
requested output mode.
"""

from __future__ import annotations

import json as _json
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from rich.text import Text

from rulectl.output.console import create_console, get_output, style_for_result

if TYPE_CHECKING:
    from rich.console import Console

    from rulectl.services.result import ServiceResult


@dataclass(frozen=True)
class OutputSettings:
    """Output flags taken from the global CLI options."""

    json_output: bool = False
    quiet: bool = False
    verbose: bool = False


def _value_text(key: str, value: Any) -> Text:
    if isinstance(value, (dict, list)):
        return Text(_json.dumps(value, separators=(",", ":")))
    if key == "result":
        return Text(str(value), style=style_for_result(str(value)))
    if key == "passed" or key == "holds":
        return Text(str(value), style="rule.passed" if value else "rule.failed")
    if key == "id":
        return Text(str(value), style="rule.id")
    if key == "next_change" or key == "now":
        return Text(str(value), style="rule.time")
    return Text(str(value))


def _field(console: Console, key: str, value: Any, indent: int = 2) -> None:
    console.print(Text(f"{' ' * indent}{key}:", style="rule.key"), _value_text(key, value))


def _render_human(result: ServiceResult, verbose: bool) -> str:
    console = create_console()
    if result.ok:
        console.print(Text("OK", style="rule.ok"), Text(result.op, style="rule.op"))
        for key, value in result.data.items():
            _field(console, key, value)
        if verbose and result.meta:
            console.print(Text("  meta:", style="dim"))
            for key, value in result.meta.items():
                _field(console, key, value, indent=4)
    else:
        message = result.error.message if result.error else "Unknown error"
        console.print(
            Text("ERROR", style="rule.error"),
            Text(result.op, style="rule.op"),
            Text(f"— {message}"),
        )
        if verbose and result.error and result.error.detail:
            for key, value in result.error.detail.items():
                _field(console, key, value)
    return get_output(console).rstrip("\n")


def _render_quiet(result: ServiceResult) -> str:
    if not result.ok:
        message = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} — {message}"
    if "result" in result.data:
        return str(result.data["result"])
    if "cmp" in result.data:
        return str(result.data.get("holds", result.data["cmp"]))
    return f"OK: {result.op}"


def format_result(result: ServiceResult, *, settings: OutputSettings | None = None) -> str:
    """Format a ServiceResult for display.

    Args:
        result: The service result to format.
        settings: Output mode; human-readable text when omitted.
    """
    settings = settings or OutputSettings()
    if settings.json_output:
        return result.model_dump_json(indent=2)
    if settings.quiet:
        return _render_quiet(result)
    return _render_human(result, settings.verbose)
