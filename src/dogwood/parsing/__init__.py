"""
Bundled parser service for Dogwood.

Usage:
    from dogwood.parsing import DefaultParserService

    outcome = DefaultParserService().parse("1 + 2 * 3")
    # outcome.expr is an Infix tree, outcome.failures == []
"""

from dogwood.parsing.service import DefaultParserService
from dogwood.parsing.tokenizer import TokenKind, tokenize

__all__ = ["DefaultParserService", "TokenKind", "tokenize"]
