"""
The Dogwood REPL driver.

One turn per input line: parse, render any lex/parse failures, echo the
postfix form of the tree, evaluate it, and print the result or the
evaluation failure. Nothing carries over between turns.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from rich.console import Console

from dogwood.core.config import ReplConfig
from dogwood.core.diagnostics import Report, render, render_all
from dogwood.core.errors import EvaluationError
from dogwood.core.evaluator import evaluate
from dogwood.core.expressions import as_rpn
from dogwood.core.report_format import format_report
from dogwood.core.service import ParserService

logger = logging.getLogger(__name__)


@dataclass
class TurnResult:
    """Everything one line produced."""

    source: str
    parse_reports: list[Report] = field(default_factory=list)
    rpn: str | None = None
    value: int | None = None
    eval_report: Report | None = None

    @property
    def reports(self) -> list[Report]:
        if self.eval_report is None:
            return list(self.parse_reports)
        return [*self.parse_reports, self.eval_report]

    @property
    def ok(self) -> bool:
        return self.value is not None and not self.reports


def run_turn(line: str, service: ParserService) -> TurnResult:
    """Parse, evaluate and render diagnostics for a single line."""
    outcome = service.parse(line)
    result = TurnResult(source=line, parse_reports=render_all(outcome.failures, line, service))

    if outcome.expr is None:
        return result

    result.rpn = as_rpn(outcome.expr, line)
    try:
        result.value = evaluate(outcome.expr, line)
    except EvaluationError as e:
        logger.debug("Evaluation failed: %s", e)
        result.eval_report = render(e.failure, line, service)
    return result


class Repl:
    """Interactive read-evaluate-print loop."""

    def __init__(
        self,
        service: ParserService,
        config: ReplConfig | None = None,
        out: Console | None = None,
        err: Console | None = None,
        read_line: Callable[[str], str] | None = None,
    ) -> None:
        self.service = service
        self.config = config or ReplConfig()
        self.out = out or Console(force_terminal=self.config.force_terminal, highlight=False)
        self.err = err or Console(stderr=True, force_terminal=self.config.force_terminal, highlight=False)
        self.read_line = read_line or self.out.input

    def run(self) -> int:
        """Loop until end of input. Returns the number of turns evaluated."""
        turns = 0
        while True:
            try:
                line = self.read_line(self.config.prompt)
            except (EOFError, KeyboardInterrupt):
                self.out.print()
                break

            if not line.strip():
                continue
            self.show(run_turn(line, self.service))
            turns += 1

        logger.info("REPL finished after %d turns", turns)
        return turns

    def show(self, result: TurnResult) -> None:
        """Print a turn: parse diagnostics, postfix echo, then result or eval diagnostic."""
        for report in result.parse_reports:
            self.err.print(format_report(report, result.source))
        if result.rpn is not None and self.config.show_rpn:
            self.out.print(result.rpn, markup=False)
        if result.value is not None:
            self.out.print(f"Result: {result.value}", markup=False)
        if result.eval_report is not None:
            self.err.print(format_report(result.eval_report, result.source))
