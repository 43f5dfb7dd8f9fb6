"""
Expression types for Dogwood.

A parsed line is a tree of two node kinds:
- Number: a numeric literal, identified only by its source span
- Infix: a binary operation over two exclusively owned sub-expressions

Literals are never materialised at parse time. The evaluator resolves a
Number by slicing the source line through its span, so an ill-formed
literal is only diagnosed when the node is actually reached.
"""

from __future__ import annotations

from collections.abc import Iterator
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, model_validator

# ---------------------------------------------------------------------------
# Source spans
# ---------------------------------------------------------------------------


class Span(BaseModel):
    """Half-open byte range ``[start, end)`` into the current input line."""

    start: int = Field(ge=0, description="First byte offset (inclusive)")
    end: int = Field(ge=0, description="Last byte offset (exclusive)")

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def _check_order(self) -> Span:
        if self.start > self.end:
            raise ValueError(f"span start {self.start} is after end {self.end}")
        return self

    def __str__(self) -> str:
        return f"{self.start}..{self.end}"

    @property
    def length(self) -> int:
        return self.end - self.start

    def union(self, other: Span) -> Span:
        """Smallest span covering both spans."""
        return Span(start=min(self.start, other.start), end=max(self.end, other.end))

    def text(self, source: str) -> str:
        """The substring of ``source`` this span denotes (byte-accurate)."""
        return source.encode("utf-8")[self.start : self.end].decode("utf-8", errors="replace")


def span(start: int, end: int) -> Span:
    """Shorthand constructor used by the parser and tests."""
    return Span(start=start, end=end)


# ---------------------------------------------------------------------------
# Operators
# ---------------------------------------------------------------------------


class Operator(StrEnum):
    """Binary operators. The value is the operator's source text."""

    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"
    MOD = "%"
    POW = "**"


# ---------------------------------------------------------------------------
# AST node types
# ---------------------------------------------------------------------------


class Number(BaseModel):
    """A numeric literal. Its value lives in the source text at ``span``."""

    span: Span

    model_config = ConfigDict(frozen=True)


class Infix(BaseModel):
    """Binary operation: lhs op rhs. ``span`` covers the whole sub-expression."""

    span: Span
    lhs: Expr
    op: Operator
    rhs: Expr

    model_config = ConfigDict(frozen=True)


# ---------------------------------------------------------------------------
# Union type
# ---------------------------------------------------------------------------

Expr = Number | Infix

Infix.model_rebuild()


# ---------------------------------------------------------------------------
# Postfix rendering
# ---------------------------------------------------------------------------


def rpn_tokens(expr: Expr, source: str) -> Iterator[str]:
    """Yield the postfix tokens of ``expr``: left, right, then operator or literal.

    Each call returns a fresh generator, so the sequence can be restarted.
    """
    pending: list[tuple[Expr, bool]] = [(expr, False)]
    while pending:
        node, expanded = pending.pop()
        if isinstance(node, Number):
            yield node.span.text(source)
        elif expanded:
            yield node.op.value
        else:
            pending.extend(((node, True), (node.rhs, False), (node.lhs, False)))


def as_rpn(expr: Expr, source: str) -> str:
    """Render ``expr`` in Reverse Polish notation, tokens joined by single spaces."""
    return " ".join(rpn_tokens(expr, source))
