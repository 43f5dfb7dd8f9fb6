"""
Expression evaluator for Dogwood.

Walks an expression tree and computes a u64. Every arithmetic step is
checked: a step that would overflow, underflow, divide by zero, or produce
an unrepresentable power yields no result, and the whole evaluation fails
with the spans of that step's operands.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from dogwood.core.errors import EvaluationError
from dogwood.core.expressions import Expr, Infix, Number, Operator
from dogwood.core.failures import LiteralOutOfRange, Overflow

logger = logging.getLogger(__name__)

U64_MAX = 2**64 - 1
U32_MAX = 2**32 - 1

CheckedOp = Callable[[int, int], int | None]


def _fits(value: int) -> int | None:
    return value if 0 <= value <= U64_MAX else None


def checked_add(a: int, b: int) -> int | None:
    return _fits(a + b)


def checked_sub(a: int, b: int) -> int | None:
    return _fits(a - b)


def checked_mul(a: int, b: int) -> int | None:
    return _fits(a * b)


def checked_div(a: int, b: int) -> int | None:
    if b == 0:
        return None
    return a // b


def checked_rem_euclid(a: int, b: int) -> int | None:
    # Both operands are unsigned, so the Euclidean remainder is plain modulo.
    if b == 0:
        return None
    return a % b


def checked_pow(base: int, exponent: int) -> int | None:
    """``base ** exponent``, or None if the exponent is wider than 32 bits or the result overflows."""
    if exponent > U32_MAX:
        return None
    if base in (0, 1):
        return base if exponent else 1
    # 2**64 already overflows, so any base >= 2 caps the useful exponent at 63.
    if exponent >= 64:
        return None
    return _fits(base**exponent)


_CHECKED_OPS: dict[Operator, CheckedOp] = {
    Operator.ADD: checked_add,
    Operator.SUB: checked_sub,
    Operator.MUL: checked_mul,
    Operator.DIV: checked_div,
    Operator.MOD: checked_rem_euclid,
    Operator.POW: checked_pow,
}


def checked_op(op: Operator) -> CheckedOp:
    """Return the checked binary function implementing ``op``."""
    return _CHECKED_OPS[op]


def evaluate(expr: Expr, source: str) -> int:
    """Evaluate an expression tree parsed from ``source``.

    Operands are evaluated left to right; the first failure propagates and
    the right operand of a failed left operand is never visited.

    Args:
        expr: Parsed expression tree.
        source: The input line the tree's spans point into.

    Returns:
        The computed value, in ``[0, 2**64 - 1]``.

    Raises:
        EvaluationError: Carrying an ``Overflow`` or ``LiteralOutOfRange``.
    """
    # Post-order, explicit stack: depth is not limited by recursion.
    values: list[int] = []
    pending: list[tuple[Expr, bool]] = [(expr, False)]
    while pending:
        node, operands_done = pending.pop()

        if isinstance(node, Number):
            values.append(_resolve_literal(node, source))

        elif isinstance(node, Infix):
            if not operands_done:
                pending.extend(((node, True), (node.rhs, False), (node.lhs, False)))
                continue
            rhs = values.pop()
            lhs = values.pop()
            result = checked_op(node.op)(lhs, rhs)
            if result is None:
                logger.debug("checked %s failed for %d %s %d", node.op.name, lhs, node.op.value, rhs)
                raise EvaluationError(Overflow(lhs_span=node.lhs.span, rhs_span=node.rhs.span))
            values.append(result)

        else:
            raise TypeError(f"Unknown expression type: {type(node).__name__}")

    return values.pop()


def _resolve_literal(expr: Number, source: str) -> int:
    text = expr.span.text(source)
    if not (text.isascii() and text.isdigit()):
        raise EvaluationError(LiteralOutOfRange(span=expr.span))
    value = int(text)
    if value > U64_MAX:
        raise EvaluationError(LiteralOutOfRange(span=expr.span))
    return value
