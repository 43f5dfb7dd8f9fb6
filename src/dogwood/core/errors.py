"""
Error types for Dogwood.

Lex and parse problems are never raised: parser services return them as
data. Only evaluation failures and configuration problems become
exceptions, and the REPL turns every evaluation failure into a report.
"""

from __future__ import annotations

from pathlib import Path

from dogwood.core.failures import EvalFailure


class DogwoodError(Exception):
    """Base exception for all Dogwood errors."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class EvaluationError(DogwoodError):
    """
    Raised when an expression cannot be evaluated.

    Examples:
    - Literal does not fit in a u64
    - Checked addition, multiplication or exponentiation overflows
    - Subtraction underflows
    - Division or remainder by zero
    """

    def __init__(self, failure: EvalFailure):
        self.failure = failure
        super().__init__(_describe(failure))


class ConfigError(DogwoodError):
    """
    Raised when configuration cannot be loaded.

    Examples:
    - Malformed TOML
    - Unknown color mode
    - Unknown log level
    """

    def __init__(self, message: str, path: Path | None = None):
        self.path = path
        super().__init__(f"{path}: {message}" if path else message)


def _describe(failure: EvalFailure) -> str:
    if failure.kind == "overflow":
        return f"evaluation overflowed (lhs {failure.lhs_span}, rhs {failure.rhs_span})"
    return f"cannot be represented as a u64 ({failure.span})"
