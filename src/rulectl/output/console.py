"""Rich Console factory and theme for rulectl output.

Creates Console instances that render to a StringIO buffer, preserving
the ``format_result() -> str`` contract.  In non-TTY environments
(tests, pipes) Rich automatically disables color codes.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

RULE_THEME = Theme(
    {
        "rule.ok": "bold green",
        "rule.error": "bold red",
        "rule.warning": "bold yellow",
        "rule.op": "bold cyan",
        "rule.key": "dim",
        "rule.id": "bold blue",
        "rule.passed": "green",
        "rule.failed": "red",
        "rule.time": "magenta",
    }
)

_RESULT_STYLES: dict[str, str] = {
    "ok": "rule.passed",
    "within_range": "rule.passed",
    "before_range": "rule.failed",
    "after_range": "rule.failed",
    "op_unsatisfied": "rule.failed",
    "undetermined": "rule.warning",
}


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer.

    Args:
        no_color: Disable ANSI escape codes (used in tests).
        width: Override terminal width (useful for consistent test output).
    """
    return Console(
        file=StringIO(),
        theme=RULE_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def style_for_result(result_code: str) -> str:
    """Return the Rich style name for an evaluation result code."""
    return _RESULT_STYLES.get(result_code, "")
