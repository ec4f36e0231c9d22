"""AST node types for parsed Quokka programs."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from quokka.tokens import Token


@dataclass(frozen=True, slots=True)
class Identifier:
    token: Token
    value: str


@dataclass(frozen=True, slots=True)
class IntegerLiteral:
    token: Token
    value: int


@dataclass(frozen=True, slots=True)
class StringLiteral:
    token: Token
    value: str


@dataclass(frozen=True, slots=True)
class BooleanLiteral:
    token: Token
    value: bool


@dataclass(frozen=True, slots=True)
class PrefixExpression:
    """Unary operator application: -x, !x."""

    token: Token
    operator: str
    right: Expression


@dataclass(frozen=True, slots=True)
class InfixExpression:
    """Binary operator application; token is the operator token."""

    token: Token
    left: Expression
    operator: str
    right: Expression


@dataclass(frozen=True, slots=True)
class IfExpression:
    token: Token
    condition: Expression
    consequence: BlockStatement
    alternative: BlockStatement | None


@dataclass(frozen=True, slots=True)
class FunctionLiteral:
    token: Token
    parameters: tuple[Identifier, ...]
    body: BlockStatement


@dataclass(frozen=True, slots=True)
class CallExpression:
    """Call of a function expression; token is the opening parenthesis."""

    token: Token
    function: Expression
    arguments: tuple[Expression, ...]


@dataclass(frozen=True, slots=True)
class LetStatement:
    token: Token
    name: Identifier
    value: Expression


@dataclass(frozen=True, slots=True)
class ReturnStatement:
    token: Token
    value: Expression | None


@dataclass(frozen=True, slots=True)
class ExpressionStatement:
    token: Token
    expression: Expression


@dataclass(frozen=True, slots=True)
class WhileStatement:
    """Loop re-evaluating body while condition is truthy."""

    token: Token
    condition: Expression
    body: BlockStatement


@dataclass(frozen=True, slots=True)
class BlockStatement:
    """Braced statement sequence: function bodies, loop bodies, if/else branches."""

    token: Token
    statements: tuple[Statement, ...]


@dataclass(frozen=True, slots=True)
class Program:
    """Root node."""

    statements: tuple[Statement, ...]


Expression = Union[
    Identifier,
    IntegerLiteral,
    StringLiteral,
    BooleanLiteral,
    PrefixExpression,
    InfixExpression,
    IfExpression,
    FunctionLiteral,
    CallExpression,
]

Statement = Union[
    LetStatement,
    ReturnStatement,
    ExpressionStatement,
    WhileStatement,
    BlockStatement,
]

Node = Union[Program, Statement, Expression]
