"""
The parser-service boundary.

The core never tokenizes or parses text itself. Anything that turns a line
into ``(tree | None, failures)`` and can name token kinds and describe its
own failures can drive the evaluator and the diagnostic renderer.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable

from dogwood.core.expressions import Expr
from dogwood.core.failures import Failure


@dataclass(frozen=True)
class ParseOutcome:
    """
    Result of parsing one line.

    ``expr`` is present only if parsing ultimately succeeded, possibly after
    error recovery; ``failures`` may be non-empty even when it is.
    """

    expr: Expr | None
    failures: list[Failure] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.expr is not None and not self.failures


@runtime_checkable
class ParserService(Protocol):
    """What the core needs from a parser."""

    def parse(self, text: str) -> ParseOutcome:
        """Parse one line of text (no line terminator)."""
        ...

    def token_display_name(self, token_kind: str) -> str:
        """Human-readable name of a token kind, e.g. ``"INT"`` or ``")"``."""
        ...

    def pretty_print(self, failure: Failure, text: str) -> str:
        """Opaque explanation of ``failure``, used verbatim as report help."""
        ...
