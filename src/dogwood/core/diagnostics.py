"""
Diagnostic rendering for Dogwood.

Turns lex/parse failures from a parser service and evaluation failures from
the evaluator into uniform ``Report`` values: a message, a severity, an
ordered list of labelled source spans and optional help text.

Rendering is pure and total: every failure maps to exactly one report.
"""

from __future__ import annotations

from collections.abc import Iterable
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

from dogwood.core.expressions import Span
from dogwood.core.failures import (
    Delete,
    EvalFailure,
    Failure,
    Insert,
    LexFailure,
    LiteralOutOfRange,
    Overflow,
    ParseFailure,
    Repair,
    Shift,
)
from dogwood.core.service import ParserService


class Severity(StrEnum):
    """Report severities. Only errors are produced today."""

    ERROR = "error"


class Label(BaseModel):
    """A piece of text attached to a source span."""

    text: str | None = None
    span: Span

    model_config = ConfigDict(frozen=True)


class Report(BaseModel):
    """A rendered diagnostic. Label order is the order the user sees."""

    severity: Severity = Severity.ERROR
    message: str
    labels: tuple[Label, ...] = Field(default_factory=tuple)
    help: str | None = None

    model_config = ConfigDict(frozen=True)


def render(failure: Failure | EvalFailure, source: str, service: ParserService) -> Report:
    """Render a single failure against the line it was produced from."""
    if isinstance(failure, LexFailure):
        return Report(
            message="lexing error",
            labels=(Label(text="here", span=failure.error_span),),
            help=service.pretty_print(failure, source),
        )

    if isinstance(failure, ParseFailure):
        first = failure.repairs[0] if failure.repairs else []
        labels = repair_labels(first, failure.error_span, source, service)
        if not labels:
            labels = [Label(text="here", span=failure.error_span)]
        return Report(
            message="parsing error",
            labels=tuple(labels),
            help=service.pretty_print(failure, source),
        )

    if isinstance(failure, Overflow):
        return Report(
            message="evaluation overflowed",
            labels=(
                Label(text="lhs", span=failure.lhs_span),
                Label(text="rhs", span=failure.rhs_span),
            ),
        )

    if isinstance(failure, LiteralOutOfRange):
        return Report(
            message="cannot be represented as a u64",
            labels=(Label(text="this number", span=failure.span),),
        )

    raise TypeError(f"Unknown failure type: {type(failure).__name__}")


def render_all(
    failures: Iterable[Failure | EvalFailure], source: str, service: ParserService
) -> list[Report]:
    """Render failures one report each, keeping the supplied order."""
    return [render(f, source, service) for f in failures]


def repair_labels(
    repairs: list[Repair], error_span: Span, source: str, service: ParserService
) -> list[Label]:
    """Build one label per repair step, merging runs of touching deletes.

    Deletes separated by even a single character stay separate. Inserts are
    anchored at the error lexeme, since that is where parsing stopped.
    """
    labels: list[Label] = []
    pending: Span | None = None

    for repair in repairs:
        if isinstance(repair, Delete):
            if pending is not None and repair.span.start == pending.end:
                pending = pending.union(repair.span)
                continue
            if pending is not None:
                labels.append(_delete_label(pending, source))
            pending = repair.span
            continue

        if pending is not None:
            labels.append(_delete_label(pending, source))
            pending = None

        if isinstance(repair, Insert):
            name = service.token_display_name(repair.token_kind)
            labels.append(Label(text=f"insert {name}", span=error_span))
        elif isinstance(repair, Shift):
            labels.append(Label(text=f"shift {_escaped(repair.span, source)}", span=repair.span))

    if pending is not None:
        labels.append(_delete_label(pending, source))
    return labels


def _delete_label(deleted: Span, source: str) -> Label:
    return Label(text=f"delete {_escaped(deleted, source)}", span=deleted)


def _escaped(s: Span, source: str) -> str:
    return s.text(source).replace("\n", "\\n")
