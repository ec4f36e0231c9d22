"""--debug token and AST dumps to stderr."""

from __future__ import annotations

import sys
from typing import TextIO

from quokka.ast import (
    BlockStatement,
    BooleanLiteral,
    CallExpression,
    ExpressionStatement,
    FunctionLiteral,
    Identifier,
    IfExpression,
    InfixExpression,
    IntegerLiteral,
    LetStatement,
    Node,
    PrefixExpression,
    Program,
    ReturnStatement,
    StringLiteral,
    WhileStatement,
)
from quokka.lexer import Lexer


def dump_tokens(source: str, *, file: TextIO = sys.stderr) -> None:
    """Print one line per token: position, type, and literal."""
    for tok in Lexer(source):
        file.write(f"{tok.line}:{tok.column}\t{tok.type.name}\t{tok.literal!r}\n")


def dump_ast(program: Program, *, file: TextIO = sys.stderr) -> None:
    """Print a human-readable AST tree to *file*."""
    _dump(program, 0, file)


def _indent(depth: int) -> str:
    return "  " * depth


def _dump(node: Node, depth: int, f: TextIO) -> None:
    pad = _indent(depth)

    if isinstance(node, Program):
        f.write(f"{pad}Program\n")
        for stmt in node.statements:
            _dump(stmt, depth + 1, f)
    elif isinstance(node, BlockStatement):
        f.write(f"{pad}Block\n")
        for stmt in node.statements:
            _dump(stmt, depth + 1, f)
    elif isinstance(node, LetStatement):
        f.write(f"{pad}Let {node.name.value}\n")
        _dump(node.value, depth + 1, f)
    elif isinstance(node, ReturnStatement):
        f.write(f"{pad}Return\n")
        if node.value is not None:
            _dump(node.value, depth + 1, f)
    elif isinstance(node, ExpressionStatement):
        f.write(f"{pad}ExpressionStatement\n")
        _dump(node.expression, depth + 1, f)
    elif isinstance(node, WhileStatement):
        f.write(f"{pad}While\n")
        _dump(node.condition, depth + 1, f)
        _dump(node.body, depth + 1, f)
    elif isinstance(node, Identifier):
        f.write(f"{pad}Identifier({node.value})\n")
    elif isinstance(node, IntegerLiteral):
        f.write(f"{pad}Integer({node.value})\n")
    elif isinstance(node, StringLiteral):
        f.write(f"{pad}String({node.value!r})\n")
    elif isinstance(node, BooleanLiteral):
        f.write(f"{pad}Boolean({'true' if node.value else 'false'})\n")
    elif isinstance(node, PrefixExpression):
        f.write(f"{pad}Prefix {node.operator}\n")
        _dump(node.right, depth + 1, f)
    elif isinstance(node, InfixExpression):
        f.write(f"{pad}Infix {node.operator}\n")
        _dump(node.left, depth + 1, f)
        _dump(node.right, depth + 1, f)
    elif isinstance(node, IfExpression):
        f.write(f"{pad}If\n")
        _dump(node.condition, depth + 1, f)
        _dump(node.consequence, depth + 1, f)
        if node.alternative is not None:
            f.write(f"{_indent(depth + 1)}Else\n")
            _dump(node.alternative, depth + 2, f)
    elif isinstance(node, FunctionLiteral):
        params = ", ".join(p.value for p in node.parameters)
        f.write(f"{pad}Function({params})\n")
        _dump(node.body, depth + 1, f)
    elif isinstance(node, CallExpression):
        f.write(f"{pad}Call\n")
        _dump(node.function, depth + 1, f)
        for arg in node.arguments:
            _dump(arg, depth + 1, f)
