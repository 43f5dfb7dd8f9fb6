"""
The bundled parser service.

Wraps the tokenizer and parser behind the ``ParserService`` protocol and
provides the token names and failure explanations the diagnostic renderer
uses verbatim.
"""

from __future__ import annotations

import logging

from dogwood.core.expressions import Span
from dogwood.core.failures import Delete, Failure, Insert, LexFailure, Repair
from dogwood.core.service import ParseOutcome
from dogwood.parsing.parser import parse_tokens
from dogwood.parsing.tokenizer import DISPLAY_NAMES, TokenizeError, TokenKind, tokenize

logger = logging.getLogger(__name__)


class DefaultParserService:
    """Tokenizer + recursive descent parser for Dogwood arithmetic."""

    def parse(self, text: str) -> ParseOutcome:
        try:
            tokens = tokenize(text)
        except TokenizeError as e:
            logger.debug("Lexing stopped: %s", e)
            return ParseOutcome(expr=None, failures=[e.failure])
        return parse_tokens(tokens)

    def token_display_name(self, token_kind: str) -> str:
        try:
            return DISPLAY_NAMES[TokenKind(token_kind)]
        except ValueError:
            return token_kind

    def pretty_print(self, failure: Failure, text: str) -> str:
        line, column = line_col(failure.error_span, text)
        if isinstance(failure, LexFailure):
            return f"Lexing error at line {line} column {column}."

        head = f"Parsing error at line {line} column {column}."
        if not failure.repairs:
            return f"{head} No repair sequences found."
        sequences = [
            f"  {i:>2}: {', '.join(self._describe(r, text) for r in seq)}"
            for i, seq in enumerate(failure.repairs, start=1)
        ]
        return "\n".join([f"{head} Repair sequences found:", *sequences])

    def _describe(self, repair: Repair, text: str) -> str:
        if isinstance(repair, Insert):
            return f"Insert {self.token_display_name(repair.token_kind)}"
        verb = "Delete" if isinstance(repair, Delete) else "Shift"
        return f"{verb} {repair.span.text(text)}"


def line_col(s: Span, text: str) -> tuple[int, int]:
    """1-based line and character column of the start of ``s``."""
    before = text.encode("utf-8")[: s.start].decode("utf-8", errors="ignore")
    line = before.count("\n") + 1
    column = len(before) - (before.rfind("\n") + 1) + 1
    return line, column
