"""Regular-expression submatch expansion (``%0`` to ``%9``).

A template such as ``"%1-%2"`` is expanded with the text captured by
groups 1 and 2 of an earlier match. Placeholders for groups that did not
participate, or matched nothing, are dropped from the result.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from io import StringIO

# (start, end) offsets into the matched string; (-1, -1) if the group
# did not participate
Span = tuple[int, int]


def _is_placeholder(template: str, pos: int) -> bool:
    return template[pos] == "%" and pos + 1 < len(template) and "0" <= template[pos + 1] <= "9"


def replace_submatches(
    template: str | None,
    match: str,
    submatches: Sequence[Span],
) -> str | None:
    """Expand ``%N`` placeholders in *template* from *submatches* of *match*.

    Returns the expanded string, or None when *template* is empty or has
    no ``%N`` sequence (the caller can keep using *template* as-is).
    """
    if not template:
        return None

    out = StringIO()
    expanded = False
    pos = 0
    length = len(template)
    while pos < length:
        if not _is_placeholder(template, pos):
            out.write(template[pos])
            pos += 1
            continue

        group = int(template[pos + 1])
        pos += 2
        expanded = True
        if group >= len(submatches):
            continue
        start, end = submatches[group]
        if start < 0 or end <= start:
            continue
        out.write(match[start:end])

    return out.getvalue() if expanded else None


def match_spans(m: re.Match[str]) -> list[Span]:
    """Capture-group spans of *m*, group 0 (the whole match) first."""
    return [m.span(i) for i in range(m.re.groups + 1)]


def expand_match(template: str | None, m: re.Match[str]) -> str | None:
    """Expand *template* against a :class:`re.Match` object."""
    return replace_submatches(template, m.string, match_spans(m))
