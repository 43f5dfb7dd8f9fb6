"""
Tokenizer for Dogwood arithmetic.

Converts a line into a sequence of typed tokens with byte spans.
"""

from __future__ import annotations

from enum import StrEnum, auto

from dogwood.core.expressions import Span
from dogwood.core.failures import LexFailure


class TokenKind(StrEnum):
    """Token types for the calculator language."""

    INT = auto()
    PLUS = auto()
    MINUS = auto()
    STAR = auto()
    SLASH = auto()
    PERCENT = auto()
    POW = auto()
    LPAREN = auto()
    RPAREN = auto()

    # End of input
    EOF = auto()


DISPLAY_NAMES: dict[TokenKind, str] = {
    TokenKind.INT: "INT",
    TokenKind.PLUS: "+",
    TokenKind.MINUS: "-",
    TokenKind.STAR: "*",
    TokenKind.SLASH: "/",
    TokenKind.PERCENT: "%",
    TokenKind.POW: "**",
    TokenKind.LPAREN: "(",
    TokenKind.RPAREN: ")",
    TokenKind.EOF: "end of input",
}


class Token:
    """A single token from the tokenizer."""

    __slots__ = ("kind", "value", "span")

    def __init__(self, kind: TokenKind, value: str, span: Span) -> None:
        self.kind = kind
        self.value = value
        self.span = span

    def __repr__(self) -> str:
        return f"Token({self.kind}, {self.value!r}, span={self.span})"


class TokenizeError(Exception):
    """No token matches the input at ``failure.error_span``."""

    def __init__(self, failure: LexFailure, char: str) -> None:
        super().__init__(f"Unexpected character: {char!r}")
        self.failure = failure


_SINGLE: dict[str, TokenKind] = {
    "+": TokenKind.PLUS,
    "-": TokenKind.MINUS,
    "*": TokenKind.STAR,
    "/": TokenKind.SLASH,
    "%": TokenKind.PERCENT,
    "(": TokenKind.LPAREN,
    ")": TokenKind.RPAREN,
}

_WHITESPACE = " \t\r\n"
_DIGITS = "0123456789"


def tokenize(source: str) -> list[Token]:
    """Tokenize a line. The result always ends with an EOF token.

    Raises:
        TokenizeError: At the first character no token can start with.
    """
    tokens: list[Token] = []
    i = 0
    pos = 0  # byte offset of source[i]
    n = len(source)

    while i < n:
        c = source[i]

        if c in _WHITESPACE:
            i += 1
            pos += 1
            continue

        if c in _DIGITS:
            j = i
            while j < n and source[j] in _DIGITS:
                j += 1
            tokens.append(Token(TokenKind.INT, source[i:j], Span(start=pos, end=pos + j - i)))
            pos += j - i
            i = j
            continue

        if source.startswith("**", i):
            tokens.append(Token(TokenKind.POW, "**", Span(start=pos, end=pos + 2)))
            i += 2
            pos += 2
            continue

        if c in _SINGLE:
            tokens.append(Token(_SINGLE[c], c, Span(start=pos, end=pos + 1)))
            i += 1
            pos += 1
            continue

        width = len(c.encode("utf-8"))
        raise TokenizeError(LexFailure(error_span=Span(start=pos, end=pos + width)), c)

    tokens.append(Token(TokenKind.EOF, "", Span(start=pos, end=pos)))
    return tokens
