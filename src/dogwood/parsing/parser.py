"""
Recursive descent parser for Dogwood arithmetic, with error recovery.

Grammar (precedence low to high):
    expr    → term (("+" | "-") term)*
    term    → factor (("*" | "/" | "%") factor)*
    factor  → atom ("**" factor)?
    atom    → INT | "(" expr ")"

``**`` is right-associative; everything else is left-associative.
Parentheses only group: they never create nodes, and a parenthesised
sub-expression keeps the span of what is inside them. Nesting deeper than
``MAX_NESTING`` parentheses is reported as a parse failure with no repairs
and no tree.

Recovery is a fixed strategy rather than a repair search. Each point where
parsing could not continue records one ``ParseFailure`` listing the repair
sequences considered; the first is applied and parsing carries on:

- operand expected, operators found: delete the operators if an operand
  follows them (alternative: insert INT); otherwise insert INT
- operand expected, ``)`` or end of input found: insert INT
- ``)`` expected: insert ``)``
- tokens after a complete expression: ``1 2`` becomes ``1 + 2``
  (insert ``+``, shift ``2``; alternative: delete ``2``), and stray
  ``)`` are deleted

A tree that needed an inserted INT has no value to evaluate, so it is not
returned.
"""

from __future__ import annotations

import logging

from dogwood.core.expressions import Expr, Infix, Number, Operator, Span
from dogwood.core.failures import Delete, Insert, ParseFailure, Repair, Shift
from dogwood.core.service import ParseOutcome
from dogwood.parsing.tokenizer import Token, TokenKind

logger = logging.getLogger(__name__)

_ADDITIVE: dict[TokenKind, Operator] = {
    TokenKind.PLUS: Operator.ADD,
    TokenKind.MINUS: Operator.SUB,
}
_MULTIPLICATIVE: dict[TokenKind, Operator] = {
    TokenKind.STAR: Operator.MUL,
    TokenKind.SLASH: Operator.DIV,
    TokenKind.PERCENT: Operator.MOD,
}
_OPERATORS = {*_ADDITIVE, *_MULTIPLICATIVE, TokenKind.POW}
_OPERAND_START = {TokenKind.INT, TokenKind.LPAREN}

MAX_NESTING = 100


class _NestingTooDeep(Exception):
    """Raised at the "(" that opens one level too many."""

    def __init__(self, token: Token) -> None:
        super().__init__(f"parentheses nested deeper than {MAX_NESTING}")
        self.token = token


class _Parser:
    """Recursive descent parser over a token list ending in EOF."""

    def __init__(self, tokens: list[Token]) -> None:
        self.tokens = tokens
        self.pos = 0
        self.failures: list[ParseFailure] = []
        self.inserted_operand = False
        self.depth = 0

    @property
    def current(self) -> Token:
        return self.tokens[self.pos]

    def advance(self) -> Token:
        tok = self.tokens[self.pos]
        if self.pos < len(self.tokens) - 1:
            self.pos += 1
        return tok

    def fail(self, at: Token, *repairs: list[Repair]) -> None:
        logger.debug("Recovering at %r with %s", at, repairs[0] if repairs else [])
        self.failures.append(ParseFailure(error_span=at.span, repairs=list(repairs)))

    # -- Grammar rules --

    def parse_line(self) -> Expr:
        """expr, then recovery for anything left before EOF."""
        tree = self.parse_expr()

        while self.current.kind != TokenKind.EOF:
            tok = self.current
            if tok.kind in _OPERAND_START:
                self.fail(
                    tok,
                    [Insert(token_kind=TokenKind.PLUS.value), Shift(span=tok.span)],
                    [Delete(span=tok.span)],
                )
                rhs = self.parse_term()
                tree = Infix(span=tree.span.union(rhs.span), lhs=tree, op=Operator.ADD, rhs=rhs)
                while self.current.kind in _ADDITIVE:
                    tree = self._additive_tail(tree)
                continue

            # Only ")" can be left over: operators are always consumed by the loops.
            deletes: list[Repair] = []
            while self.current.kind == TokenKind.RPAREN:
                deletes.append(Delete(span=self.advance().span))
            self.fail(tok, deletes)

        return tree

    def parse_expr(self) -> Expr:
        """term (('+' | '-') term)*"""
        left = self.parse_term()
        while self.current.kind in _ADDITIVE:
            left = self._additive_tail(left)
        return left

    def _additive_tail(self, left: Expr) -> Expr:
        op = _ADDITIVE[self.advance().kind]
        right = self.parse_term()
        return Infix(span=left.span.union(right.span), lhs=left, op=op, rhs=right)

    def parse_term(self) -> Expr:
        """factor (('*' | '/' | '%') factor)*"""
        left = self.parse_factor()
        while self.current.kind in _MULTIPLICATIVE:
            op = _MULTIPLICATIVE[self.advance().kind]
            right = self.parse_factor()
            left = Infix(span=left.span.union(right.span), lhs=left, op=op, rhs=right)
        return left

    def parse_factor(self) -> Expr:
        """atom ('**' atom)*, folded from the right"""
        operands = [self.parse_atom()]
        while self.current.kind == TokenKind.POW:
            self.advance()
            operands.append(self.parse_atom())

        exponent = operands.pop()
        while operands:
            base = operands.pop()
            exponent = Infix(span=base.span.union(exponent.span), lhs=base, op=Operator.POW, rhs=exponent)
        return exponent

    def parse_atom(self) -> Expr:
        """INT | '(' expr ')'"""
        tok = self.current

        if tok.kind == TokenKind.INT:
            self.advance()
            return Number(span=tok.span)

        if tok.kind == TokenKind.LPAREN:
            self.depth += 1
            if self.depth > MAX_NESTING:
                raise _NestingTooDeep(tok)
            self.advance()
            inner = self.parse_expr()
            if self.current.kind == TokenKind.RPAREN:
                self.advance()
            else:
                self.fail(self.current, [Insert(token_kind=TokenKind.RPAREN.value)])
            self.depth -= 1
            return inner

        return self._recover_operand(tok)

    def _recover_operand(self, tok: Token) -> Expr:
        start = self.pos
        deletes: list[Repair] = []
        while self.current.kind in _OPERATORS:
            deletes.append(Delete(span=self.advance().span))

        if deletes and self.current.kind in _OPERAND_START:
            self.fail(tok, deletes, [Insert(token_kind=TokenKind.INT.value)])
            return self.parse_atom()

        self.pos = start
        self.fail(tok, [Insert(token_kind=TokenKind.INT.value)])
        self.inserted_operand = True
        return Number(span=Span(start=tok.span.start, end=tok.span.start))


def parse_tokens(tokens: list[Token]) -> ParseOutcome:
    """Parse a token list (as produced by ``tokenize``) into a ParseOutcome."""
    parser = _Parser(tokens)
    try:
        tree = parser.parse_line()
    except _NestingTooDeep as e:
        logger.debug("Giving up at %r: %s", e.token, e)
        failures = [*parser.failures, ParseFailure(error_span=e.token.span)]
        return ParseOutcome(expr=None, failures=failures)
    if parser.inserted_operand:
        logger.debug("Discarding tree built on an inserted operand (%d failures)", len(parser.failures))
        return ParseOutcome(expr=None, failures=list(parser.failures))
    return ParseOutcome(expr=tree, failures=list(parser.failures))
