"""Shared test fixtures and helpers."""

from __future__ import annotations

import pytest

from quokka.ast import ExpressionStatement, Program
from quokka.builtins import new_global_environment
from quokka.environment import Environment
from quokka.eval import evaluate
from quokka.lexer import Lexer
from quokka.objects import Object
from quokka.parser import parse
from quokka.tokens import Token, TokenType


@pytest.fixture
def lex():
    """Return a helper that scans source and returns tokens (excluding EOF)."""

    def _lex(source: str) -> list[Token]:
        return [t for t in Lexer(source) if t.type != TokenType.EOF]

    return _lex


@pytest.fixture
def parse_source():
    """Return a helper that parses source, asserting it produced no diagnostics."""

    def _parse(source: str) -> Program:
        program, diagnostics = parse(source)
        assert diagnostics == [], f"unexpected diagnostics: {[str(d) for d in diagnostics]}"
        return program

    return _parse


@pytest.fixture
def run_source(parse_source):
    """Return a helper that parses and evaluates source in a fresh global environment."""

    def _run(source: str, env: Environment | None = None) -> Object | None:
        program = parse_source(source)
        return evaluate(program, env if env is not None else new_global_environment())

    return _run


def assert_types(tokens: list[Token], expected: list[TokenType]) -> None:
    """Assert that the token types match the expected list."""
    actual = [t.type for t in tokens]
    assert actual == expected, f"Expected {expected}, got {actual}"


def single_expression(program: Program):
    """Return the expression of a one-statement program."""
    assert len(program.statements) == 1, f"Expected 1 statement, got {len(program.statements)}"
    stmt = program.statements[0]
    assert isinstance(stmt, ExpressionStatement), f"Expected ExpressionStatement, got {stmt}"
    return stmt.expression
