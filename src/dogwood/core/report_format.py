"""
Terminal formatting for diagnostic reports.

Lays a report out against its source line:

     × parsing error
      │ 1 + * 2
      │     ^ delete *
      help: Parsing error at line 1 column 5. ...

Spans are byte offsets; they are mapped to character columns before
drawing, so non-ASCII input still lines up.
"""

from __future__ import annotations

from rich.style import Style
from rich.text import Text

from dogwood.core.diagnostics import Report, Severity
from dogwood.core.expressions import Span

STYLES = {
    "error": Style(color="red", bold=True),
    "gutter": Style(color="bright_black"),
    "marker": Style(color="magenta", bold=True),
    "help": Style(color="cyan"),
}

_SEVERITY_MARK = {Severity.ERROR: "×"}


def char_columns(s: Span, source: str) -> tuple[int, int]:
    """Convert a byte span into ``(column, width)`` in characters."""
    encoded = source.encode("utf-8")
    start = len(encoded[: s.start].decode("utf-8", errors="ignore"))
    width = len(encoded[s.start : s.end].decode("utf-8", errors="ignore"))
    return start, width


def format_report(report: Report, source: str) -> Text:
    """Build a styled, multi-line rendering of ``report`` over ``source``."""
    out = Text()
    out.append(f"{_SEVERITY_MARK[report.severity]} {report.message}\n", style=STYLES["error"])

    out.append("  │ ", style=STYLES["gutter"])
    out.append(f"{source}\n")

    for label in report.labels:
        column, width = char_columns(label.span, source)
        out.append("  │ ", style=STYLES["gutter"])
        out.append(" " * column)
        out.append("^" * max(1, width), style=STYLES["marker"])
        if label.text:
            out.append(f" {label.text}", style=STYLES["marker"])
        out.append("\n")

    if report.help:
        help_lines = report.help.splitlines()
        out.append(f"  help: {help_lines[0]}\n", style=STYLES["help"])
        for line in help_lines[1:]:
            out.append(f"        {line}\n", style=STYLES["help"])

    out.rstrip()
    return out
