"""Quokka parser. Pratt (precedence-climbing) parser producing an AST."""

from __future__ import annotations

from collections.abc import Callable
from enum import IntEnum

from quokka.ast import (
    BlockStatement,
    BooleanLiteral,
    CallExpression,
    Expression,
    ExpressionStatement,
    FunctionLiteral,
    Identifier,
    IfExpression,
    InfixExpression,
    IntegerLiteral,
    LetStatement,
    PrefixExpression,
    Program,
    ReturnStatement,
    Statement,
    StringLiteral,
    WhileStatement,
)
from quokka.errors import Diagnostic
from quokka.lexer import Lexer
from quokka.tokens import Token, TokenType


class Precedence(IntEnum):
    LOWEST = 1
    LOGICAL = 2  # && ||
    EQUALS = 3  # == !=
    LESSGREATER = 4  # < > <= >=
    SUM = 5  # + -
    PRODUCT = 6  # * /
    PREFIX = 7  # -x !x
    CALL = 8  # f(x)


PRECEDENCES: dict[TokenType, Precedence] = {
    TokenType.OR: Precedence.LOGICAL,
    TokenType.AND: Precedence.LOGICAL,
    TokenType.EQ: Precedence.EQUALS,
    TokenType.NOT_EQ: Precedence.EQUALS,
    TokenType.LT: Precedence.LESSGREATER,
    TokenType.GT: Precedence.LESSGREATER,
    TokenType.LT_EQ: Precedence.LESSGREATER,
    TokenType.GT_EQ: Precedence.LESSGREATER,
    TokenType.PLUS: Precedence.SUM,
    TokenType.MINUS: Precedence.SUM,
    TokenType.ASTERISK: Precedence.PRODUCT,
    TokenType.SLASH: Precedence.PRODUCT,
    TokenType.LPAREN: Precedence.CALL,
}

# Tokens after which a bare ``return`` carries no value
_RETURN_TERMINATORS = frozenset({TokenType.SEMICOLON, TokenType.RBRACE, TokenType.EOF})


class Parser:
    """Recursive descent parser over a Lexer's token stream.

    Failures never raise: each is recorded on ``errors`` and the failing
    production returns None, so one pass reports as many problems as it can.
    """

    def __init__(self, lexer: Lexer) -> None:
        self._lexer = lexer
        self.errors: list[Diagnostic] = []

        self._prefix_fns: dict[TokenType, Callable[[], Expression | None]] = {
            TokenType.IDENT: self._parse_identifier,
            TokenType.INT: self._parse_integer_literal,
            TokenType.STRING: self._parse_string_literal,
            TokenType.TRUE: self._parse_boolean,
            TokenType.FALSE: self._parse_boolean,
            TokenType.BANG: self._parse_prefix_expression,
            TokenType.MINUS: self._parse_prefix_expression,
            TokenType.LPAREN: self._parse_grouped_expression,
            TokenType.IF: self._parse_if_expression,
            TokenType.FUNCTION: self._parse_function_literal,
        }
        self._infix_fns: dict[TokenType, Callable[[Expression], Expression | None]] = {
            tt: self._parse_infix_expression for tt in PRECEDENCES if tt != TokenType.LPAREN
        }
        self._infix_fns[TokenType.LPAREN] = self._parse_call_expression

        # Prime current and peek tokens
        self._cur = lexer.next_token()
        self._peek = lexer.next_token()

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    def _next_token(self) -> None:
        self._cur = self._peek
        self._peek = self._lexer.next_token()

    def _cur_is(self, tt: TokenType) -> bool:
        return self._cur.type == tt

    def _peek_is(self, tt: TokenType) -> bool:
        return self._peek.type == tt

    def _expect_peek(self, tt: TokenType) -> bool:
        """Advance if the next token has type *tt*, else record a diagnostic."""
        if self._peek_is(tt):
            self._next_token()
            return True
        self._peek_error(tt)
        return False

    def _peek_precedence(self) -> Precedence:
        return PRECEDENCES.get(self._peek.type, Precedence.LOWEST)

    def _cur_precedence(self) -> Precedence:
        return PRECEDENCES.get(self._cur.type, Precedence.LOWEST)

    # ------------------------------------------------------------------
    # Diagnostics
    # ------------------------------------------------------------------

    def _error(self, message: str, tok: Token) -> None:
        self.errors.append(Diagnostic(message, tok.line, tok.column))

    def _peek_error(self, tt: TokenType) -> None:
        self._error(
            f'expected next token to be "{tt.value}", got "{self._peek.type.value}" instead',
            self._peek,
        )

    def _no_prefix_error(self, tok: Token) -> None:
        self._error(f'no prefix parse function for "{tok.type.value}" found', tok)

    # ------------------------------------------------------------------
    # Program and statements
    # ------------------------------------------------------------------

    def parse_program(self) -> Program:
        statements: list[Statement] = []
        while not self._cur_is(TokenType.EOF):
            stmt = self._parse_statement()
            if stmt is not None:
                statements.append(stmt)
            # Either past the statement, or one token on after a failure
            self._next_token()
        return Program(tuple(statements))

    def _parse_statement(self) -> Statement | None:
        if self._cur_is(TokenType.LET):
            return self._parse_let_statement()
        if self._cur_is(TokenType.RETURN):
            return self._parse_return_statement()
        if self._cur_is(TokenType.WHILE):
            return self._parse_while_statement()
        return self._parse_expression_statement()

    def _skip_optional_semicolon(self) -> None:
        if self._peek_is(TokenType.SEMICOLON):
            self._next_token()

    def _parse_let_statement(self) -> LetStatement | None:
        tok = self._cur
        if not self._expect_peek(TokenType.IDENT):
            return None
        name = Identifier(self._cur, self._cur.literal)
        if not self._expect_peek(TokenType.ASSIGN):
            return None
        self._next_token()

        value = self._parse_expression(Precedence.LOWEST)
        if value is None:
            return None
        self._skip_optional_semicolon()
        return LetStatement(tok, name, value)

    def _parse_return_statement(self) -> ReturnStatement | None:
        tok = self._cur
        if self._peek.type in _RETURN_TERMINATORS:
            self._skip_optional_semicolon()
            return ReturnStatement(tok, None)
        self._next_token()

        value = self._parse_expression(Precedence.LOWEST)
        if value is None:
            return None
        self._skip_optional_semicolon()
        return ReturnStatement(tok, value)

    def _parse_while_statement(self) -> WhileStatement | None:
        tok = self._cur
        if not self._expect_peek(TokenType.LPAREN):
            return None
        self._next_token()
        condition = self._parse_expression(Precedence.LOWEST)
        if condition is None:
            return None
        if not self._expect_peek(TokenType.RPAREN):
            return None
        if not self._expect_peek(TokenType.LBRACE):
            return None
        body = self._parse_block_statement()
        if body is None:
            return None
        return WhileStatement(tok, condition, body)

    def _parse_expression_statement(self) -> ExpressionStatement | None:
        tok = self._cur
        expression = self._parse_expression(Precedence.LOWEST)
        if expression is None:
            return None
        self._skip_optional_semicolon()
        return ExpressionStatement(tok, expression)

    def _parse_block_statement(self) -> BlockStatement | None:
        tok = self._cur  # LBRACE
        statements: list[Statement] = []
        self._next_token()

        while not self._cur_is(TokenType.RBRACE):
            if self._cur_is(TokenType.EOF):
                self._error(
                    f'expected next token to be "{TokenType.RBRACE.value}", '
                    f'got "{TokenType.EOF.value}" instead',
                    self._cur,
                )
                return None
            stmt = self._parse_statement()
            if stmt is not None:
                statements.append(stmt)
            self._next_token()

        return BlockStatement(tok, tuple(statements))

    # ------------------------------------------------------------------
    # Expressions
    # ------------------------------------------------------------------

    def _parse_expression(self, precedence: Precedence) -> Expression | None:
        prefix = self._prefix_fns.get(self._cur.type)
        if prefix is None:
            self._no_prefix_error(self._cur)
            return None
        left = prefix()

        while (
            left is not None
            and not self._peek_is(TokenType.SEMICOLON)
            and precedence < self._peek_precedence()
        ):
            infix = self._infix_fns[self._peek.type]
            self._next_token()
            left = infix(left)

        return left

    def _parse_identifier(self) -> Identifier:
        return Identifier(self._cur, self._cur.literal)

    def _parse_integer_literal(self) -> IntegerLiteral:
        return IntegerLiteral(self._cur, int(self._cur.literal))

    def _parse_string_literal(self) -> StringLiteral:
        return StringLiteral(self._cur, self._cur.literal)

    def _parse_boolean(self) -> BooleanLiteral:
        return BooleanLiteral(self._cur, self._cur_is(TokenType.TRUE))

    def _parse_prefix_expression(self) -> PrefixExpression | None:
        tok = self._cur
        self._next_token()
        right = self._parse_expression(Precedence.PREFIX)
        if right is None:
            return None
        return PrefixExpression(tok, tok.literal, right)

    def _parse_infix_expression(self, left: Expression) -> InfixExpression | None:
        tok = self._cur
        precedence = self._cur_precedence()
        self._next_token()
        right = self._parse_expression(precedence)
        if right is None:
            return None
        return InfixExpression(tok, left, tok.literal, right)

    def _parse_grouped_expression(self) -> Expression | None:
        self._next_token()
        expression = self._parse_expression(Precedence.LOWEST)
        if expression is None or not self._expect_peek(TokenType.RPAREN):
            return None
        return expression

    def _parse_if_expression(self) -> IfExpression | None:
        tok = self._cur
        if not self._expect_peek(TokenType.LPAREN):
            return None
        self._next_token()
        condition = self._parse_expression(Precedence.LOWEST)
        if condition is None:
            return None
        if not self._expect_peek(TokenType.RPAREN):
            return None
        if not self._expect_peek(TokenType.LBRACE):
            return None
        consequence = self._parse_block_statement()
        if consequence is None:
            return None

        alternative: BlockStatement | None = None
        if self._peek_is(TokenType.ELSE):
            self._next_token()
            if self._peek_is(TokenType.IF):
                # else if: wrap the nested if in a one-statement block
                self._next_token()
                nested = self._parse_if_expression()
                if nested is None:
                    return None
                alternative = BlockStatement(
                    nested.token, (ExpressionStatement(nested.token, nested),)
                )
            else:
                if not self._expect_peek(TokenType.LBRACE):
                    return None
                alternative = self._parse_block_statement()
                if alternative is None:
                    return None

        return IfExpression(tok, condition, consequence, alternative)

    def _parse_function_literal(self) -> FunctionLiteral | None:
        tok = self._cur
        if not self._expect_peek(TokenType.LPAREN):
            return None
        parameters = self._parse_function_parameters()
        if parameters is None:
            return None
        if not self._expect_peek(TokenType.LBRACE):
            return None
        body = self._parse_block_statement()
        if body is None:
            return None
        return FunctionLiteral(tok, parameters, body)

    def _parse_function_parameters(self) -> tuple[Identifier, ...] | None:
        identifiers: list[Identifier] = []

        if self._peek_is(TokenType.RPAREN):
            self._next_token()
            return ()

        if not self._expect_peek(TokenType.IDENT):
            return None
        identifiers.append(Identifier(self._cur, self._cur.literal))

        while self._peek_is(TokenType.COMMA):
            self._next_token()
            if not self._expect_peek(TokenType.IDENT):
                return None
            identifiers.append(Identifier(self._cur, self._cur.literal))

        if not self._expect_peek(TokenType.RPAREN):
            return None
        return tuple(identifiers)

    def _parse_call_expression(self, function: Expression) -> CallExpression | None:
        tok = self._cur  # LPAREN
        arguments = self._parse_expression_list(TokenType.RPAREN)
        if arguments is None:
            return None
        return CallExpression(tok, function, arguments)

    def _parse_expression_list(self, end: TokenType) -> tuple[Expression, ...] | None:
        items: list[Expression] = []

        if self._peek_is(end):
            self._next_token()
            return ()

        self._next_token()
        item = self._parse_expression(Precedence.LOWEST)
        if item is None:
            return None
        items.append(item)

        while self._peek_is(TokenType.COMMA):
            self._next_token()
            self._next_token()
            item = self._parse_expression(Precedence.LOWEST)
            if item is None:
                return None
            items.append(item)

        if not self._expect_peek(end):
            return None
        return tuple(items)


def parse(source: str) -> tuple[Program, list[Diagnostic]]:
    """Convenience function: parse source text, returning the Program and all diagnostics.

    Scanner diagnostics come first, followed by parser diagnostics.
    """
    lexer = Lexer(source)
    parser = Parser(lexer)
    program = parser.parse_program()
    return program, lexer.errors + parser.errors
