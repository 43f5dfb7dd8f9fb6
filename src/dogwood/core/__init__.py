"""
Dogwood core: expression model, evaluator and diagnostic renderer.

Usage:
    from dogwood.core import evaluate, render
    from dogwood.parsing import DefaultParserService

    service = DefaultParserService()
    outcome = service.parse("30 / (2 * 3)")
    evaluate(outcome.expr, "30 / (2 * 3)")
    # 5
"""

from dogwood.core.diagnostics import Label, Report, Severity, render, render_all
from dogwood.core.evaluator import evaluate
from dogwood.core.expressions import Expr, Infix, Number, Operator, Span, as_rpn
from dogwood.core.service import ParseOutcome, ParserService

__all__ = [
    "Expr",
    "Infix",
    "Label",
    "Number",
    "Operator",
    "ParseOutcome",
    "ParserService",
    "Report",
    "Severity",
    "Span",
    "as_rpn",
    "evaluate",
    "render",
    "render_all",
]
