"""Quokka, a small dynamically-typed language and its tree-walking interpreter."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from quokka.environment import Environment
    from quokka.objects import Object

__version__ = "0.1.0"


def run(source: str, env: Environment | None = None) -> Object | None:
    """Scan, parse, and evaluate Quokka source.

    Raises SyntaxErrors when scanning or parsing reported diagnostics. When
    *env* is omitted a fresh global environment with the native functions
    is used.
    """
    from quokka.builtins import new_global_environment
    from quokka.errors import SyntaxErrors
    from quokka.eval import evaluate
    from quokka.parser import parse

    program, diagnostics = parse(source)
    if diagnostics:
        raise SyntaxErrors(diagnostics, source)
    if env is None:
        env = new_global_environment()
    return evaluate(program, env)
