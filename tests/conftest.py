"""Shared pytest fixtures for Dogwood tests."""

import pytest

from dogwood.core.failures import Failure
from dogwood.parsing import DefaultParserService


class FakeParserService:
    """Parser service stand-in for renderer tests: no parsing, fixed names and help."""

    names = {"int": "INT", "rparen": ")", "plus": "+"}

    def parse(self, text):
        raise NotImplementedError

    def token_display_name(self, token_kind: str) -> str:
        return self.names.get(token_kind, token_kind)

    def pretty_print(self, failure: Failure, text: str) -> str:
        return f"pp:{failure.kind}@{failure.error_span}"


@pytest.fixture
def service() -> DefaultParserService:
    """Return the bundled parser service."""
    return DefaultParserService()


@pytest.fixture
def fake_service() -> FakeParserService:
    """Return a parser service with predictable names and help text."""
    return FakeParserService()
