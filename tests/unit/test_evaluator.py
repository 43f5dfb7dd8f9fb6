"""Tests for the checked u64 evaluator.

Covers:
- Literal resolution through spans (lazy, range-checked)
- Checked rules for every operator
- Overflow bucket (underflow, division/remainder by zero)
- Left-to-right short-circuiting
- End-to-end scenarios through the bundled parser
"""

from __future__ import annotations

import pytest

from dogwood.core.errors import EvaluationError
from dogwood.core.evaluator import (
    U64_MAX,
    checked_add,
    checked_div,
    checked_mul,
    checked_op,
    checked_pow,
    checked_rem_euclid,
    checked_sub,
    evaluate,
)
from dogwood.core.expressions import Infix, Number, Operator, span
from dogwood.core.failures import LiteralOutOfRange, Overflow
from dogwood.parsing import DefaultParserService


def _eval(source: str) -> int:
    outcome = DefaultParserService().parse(source)
    assert outcome.failures == []
    assert outcome.expr is not None
    return evaluate(outcome.expr, source)


def _eval_failure(source: str):
    with pytest.raises(EvaluationError) as exc_info:
        _eval(source)
    return exc_info.value.failure


# ============================================================================
# Checked operations
# ============================================================================


class TestCheckedOps:
    """Each checked rule returns None instead of wrapping."""

    def test_add(self) -> None:
        assert checked_add(2, 3) == 5
        assert checked_add(U64_MAX, 0) == U64_MAX
        assert checked_add(U64_MAX, 1) is None

    def test_sub(self) -> None:
        assert checked_sub(5, 5) == 0
        assert checked_sub(3, 5) is None

    def test_mul(self) -> None:
        assert checked_mul(2**32, 2**31) == 2**63
        assert checked_mul(2**32, 2**32) is None

    def test_div(self) -> None:
        assert checked_div(7, 2) == 3
        assert checked_div(7, 0) is None

    def test_rem(self) -> None:
        assert checked_rem_euclid(7, 3) == 1
        assert checked_rem_euclid(7, 0) is None

    def test_pow(self) -> None:
        assert checked_pow(2, 63) == 2**63
        assert checked_pow(2, 64) is None
        assert checked_pow(3, 40) == 3**40
        assert checked_pow(3, 41) is None

    def test_pow_trivial_bases(self) -> None:
        assert checked_pow(0, 0) == 1
        assert checked_pow(0, 10**9) == 0
        assert checked_pow(1, 2**32 - 1) == 1

    def test_pow_exponent_wider_than_u32(self) -> None:
        assert checked_pow(1, 2**32) is None
        assert checked_pow(0, 2**32) is None

    def test_dispatch_table_covers_every_operator(self) -> None:
        for op in Operator:
            assert callable(checked_op(op))
        assert checked_op(Operator.MOD) is checked_rem_euclid


# ============================================================================
# Literals
# ============================================================================


class TestLiterals:
    """Numbers are resolved from the source text at evaluation time."""

    @pytest.mark.parametrize("n", [0, 1, 42, 2**63, U64_MAX])
    def test_in_range(self, n: int) -> None:
        source = str(n)
        assert evaluate(Number(span=span(0, len(source))), source) == n

    def test_just_above_range(self) -> None:
        source = str(U64_MAX + 1)
        failure = _eval_failure(source)
        assert failure == LiteralOutOfRange(span=span(0, len(source)))

    def test_spec_example_out_of_range(self) -> None:
        failure = _eval_failure("99999999999999999999")
        assert isinstance(failure, LiteralOutOfRange)
        assert failure.span == span(0, 20)

    @pytest.mark.parametrize("text", ["1_0", "+5", " 5", "", "١٢"])
    def test_non_decimal_text(self, text: str) -> None:
        node = Number(span=span(0, len(text.encode("utf-8"))))
        with pytest.raises(EvaluationError) as exc_info:
            evaluate(node, text)
        assert isinstance(exc_info.value.failure, LiteralOutOfRange)

    def test_span_selects_substring(self) -> None:
        assert evaluate(Number(span=span(4, 6)), "1 + 23") == 23

    def test_unreached_literal_is_not_checked(self) -> None:
        # Only the node under evaluation is resolved.
        source = "7 99999999999999999999"
        assert evaluate(Number(span=span(0, 1)), source) == 7


# ============================================================================
# Operators
# ============================================================================


class TestArithmetic:
    """Checked rules through the full pipeline."""

    def test_basic(self) -> None:
        assert _eval("1 + 1") == 2
        assert _eval("1 + 2") == 3
        assert _eval("3 * 5") == 15
        assert _eval("3 ** 2") == 9

    def test_order_of_operations(self) -> None:
        assert _eval("3 + 7 * 2") == 17
        assert _eval("3 + 5 ** 3 ** 3") == 7450580596923828128
        assert _eval("30 / 2 * 3") == 45
        assert _eval("(30 / 2) * 3") == 45
        assert _eval("30 / (2 * 3)") == 5
        assert _eval("2 ** 5 % 6") == 2

    def test_left_associative_subtraction(self) -> None:
        assert _eval("10 - 4 - 3") == 3

    def test_largest_value(self) -> None:
        assert _eval("18446744073709551615") == U64_MAX
        assert _eval("18446744073709551614 + 1") == U64_MAX
        assert _eval("2 ** 63 - 1 + 2 ** 63") == U64_MAX

    def test_integer_division_truncates(self) -> None:
        assert _eval("7 / 2") == 3
        assert _eval("17 % 5") == 2

    @pytest.mark.parametrize(
        "source, expected",
        [
            ("(5)", 5),
            ("(5) + 1", 6),
            ("2 * (3)", 6),
            ("2 ** (3)", 8),
            ("(2) ** (3)", 8),
            ("((1)) - (1)", 0),
            ("(((7)))", 7),
        ],
    )
    def test_parenthesised_literals(self, source: str, expected: int) -> None:
        assert _eval(source) == expected

    def test_long_sum(self) -> None:
        assert _eval("+".join(["1"] * 1500)) == 1500

    def test_long_power_chain(self) -> None:
        assert _eval(" ** ".join(["1"] * 1500)) == 1

    def test_deep_nesting_within_limit(self) -> None:
        assert _eval("(1 + " * 90 + "1" + ")" * 90) == 91


class TestOverflow:
    """Every checked-rule failure is reported as Overflow with operand spans."""

    def test_addition_overflow(self) -> None:
        failure = _eval_failure("18446744073709551615 + 1")
        assert failure == Overflow(lhs_span=span(0, 20), rhs_span=span(23, 24))

    def test_subtraction_underflow(self) -> None:
        assert _eval_failure("2 - 3") == Overflow(lhs_span=span(0, 1), rhs_span=span(4, 5))

    def test_division_by_zero(self) -> None:
        assert _eval_failure("5 / 0") == Overflow(lhs_span=span(0, 1), rhs_span=span(4, 5))

    def test_remainder_by_zero(self) -> None:
        assert isinstance(_eval_failure("5 % 0"), Overflow)

    def test_multiplication_overflow(self) -> None:
        assert isinstance(_eval_failure("4294967296 * 4294967296"), Overflow)

    def test_power_overflow(self) -> None:
        assert isinstance(_eval_failure("2 ** 64"), Overflow)

    def test_power_exponent_too_wide(self) -> None:
        assert isinstance(_eval_failure("1 ** 4294967296"), Overflow)

    def test_spans_cover_parenthesised_operands(self) -> None:
        failure = _eval_failure("(1 - 2) * 3")
        # The failing step is the inner subtraction.
        assert failure == Overflow(lhs_span=span(1, 2), rhs_span=span(5, 6))

    def test_spans_of_compound_operands(self) -> None:
        failure = _eval_failure("(2 + 2) - (3 + 3)")
        assert failure == Overflow(lhs_span=span(1, 6), rhs_span=span(11, 16))

    def test_spans_of_parenthesised_literals(self) -> None:
        assert _eval_failure("(5) / ((0))") == Overflow(lhs_span=span(1, 2), rhs_span=span(8, 9))


class TestShortCircuit:
    """Operands evaluate left to right; the first failure wins."""

    def test_lhs_failure_skips_rhs(self) -> None:
        failure = _eval_failure("99999999999999999999 + 5 / 0")
        assert isinstance(failure, LiteralOutOfRange)

    def test_rhs_failure_after_good_lhs(self) -> None:
        failure = _eval_failure("5 / 0 + 99999999999999999999")
        assert failure == Overflow(lhs_span=span(0, 1), rhs_span=span(4, 5))

    def test_tree_shape_decides_grouping(self) -> None:
        source = "8 4 2"
        right_nested = Infix(
            span=span(0, 5),
            lhs=Number(span=span(0, 1)),
            op=Operator.DIV,
            rhs=Infix(
                span=span(2, 5),
                lhs=Number(span=span(2, 3)),
                op=Operator.DIV,
                rhs=Number(span=span(4, 5)),
            ),
        )
        left_nested = Infix(
            span=span(0, 5),
            lhs=Infix(
                span=span(0, 3),
                lhs=Number(span=span(0, 1)),
                op=Operator.DIV,
                rhs=Number(span=span(2, 3)),
            ),
            op=Operator.DIV,
            rhs=Number(span=span(4, 5)),
        )
        assert evaluate(right_nested, source) == 4
        assert evaluate(left_nested, source) == 1


class TestEvaluationError:
    """EvaluationError carries the failure and a readable message."""

    def test_message(self) -> None:
        with pytest.raises(EvaluationError, match="evaluation overflowed"):
            _eval("1 - 2")
        with pytest.raises(EvaluationError, match="cannot be represented as a u64"):
            _eval("99999999999999999999")
