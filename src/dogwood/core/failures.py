"""
Failure types consumed by the diagnostic renderer.

Lex and parse failures are produced by a parser service; evaluation
failures are produced by the evaluator. All of them are read-only data
whose lifetime is a single REPL turn.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from dogwood.core.expressions import Span

# ---------------------------------------------------------------------------
# Repairs
# ---------------------------------------------------------------------------


class Delete(BaseModel):
    """Delete the token at ``span``."""

    kind: Literal["delete"] = "delete"
    span: Span

    model_config = ConfigDict(frozen=True)


class Insert(BaseModel):
    """Insert a token of kind ``token_kind`` (opaque to the core)."""

    kind: Literal["insert"] = "insert"
    token_kind: str

    model_config = ConfigDict(frozen=True)


class Shift(BaseModel):
    """Shift past the token at ``span`` unchanged."""

    kind: Literal["shift"] = "shift"
    span: Span

    model_config = ConfigDict(frozen=True)


Repair = Delete | Insert | Shift


# ---------------------------------------------------------------------------
# Lex / parse failures
# ---------------------------------------------------------------------------


class LexFailure(BaseModel):
    """The lexer could not match any token at ``error_span``."""

    kind: Literal["lex"] = "lex"
    error_span: Span

    model_config = ConfigDict(frozen=True)


class ParseFailure(BaseModel):
    """
    The parser stopped at ``error_span``.

    ``repairs`` holds every repair sequence the parser service offered; the
    first one is the sequence that was applied to continue parsing.
    """

    kind: Literal["parse"] = "parse"
    error_span: Span
    repairs: list[list[Repair]] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)


Failure = LexFailure | ParseFailure


# ---------------------------------------------------------------------------
# Evaluation failures
# ---------------------------------------------------------------------------


class Overflow(BaseModel):
    """
    A checked arithmetic step produced no result.

    Also used for subtraction underflow and division/remainder by zero.
    """

    kind: Literal["overflow"] = "overflow"
    lhs_span: Span
    rhs_span: Span

    model_config = ConfigDict(frozen=True)


class LiteralOutOfRange(BaseModel):
    """The literal at ``span`` is not a u64."""

    kind: Literal["literal_out_of_range"] = "literal_out_of_range"
    span: Span

    model_config = ConfigDict(frozen=True)


EvalFailure = Overflow | LiteralOutOfRange
