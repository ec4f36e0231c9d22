"""Quokka scanner. Converts source text into a lazily produced token stream."""

from __future__ import annotations

from collections.abc import Callable, Iterator

from quokka.errors import Diagnostic
from quokka.tokens import Token, TokenType, is_digit, is_letter, lookup_ident

# Single-character tokens that never start a two-character operator
_SINGLE: dict[str, TokenType] = {
    "+": TokenType.PLUS,
    "-": TokenType.MINUS,
    "*": TokenType.ASTERISK,
    "/": TokenType.SLASH,
    ",": TokenType.COMMA,
    ";": TokenType.SEMICOLON,
    "(": TokenType.LPAREN,
    ")": TokenType.RPAREN,
    "{": TokenType.LBRACE,
    "}": TokenType.RBRACE,
}

# first char -> (second char, two-char type, fallback single-char type or None)
_DOUBLE: dict[str, tuple[str, TokenType, TokenType | None]] = {
    "=": ("=", TokenType.EQ, TokenType.ASSIGN),
    "!": ("=", TokenType.NOT_EQ, TokenType.BANG),
    "<": ("=", TokenType.LT_EQ, TokenType.LT),
    ">": ("=", TokenType.GT_EQ, TokenType.GT),
    "&": ("&", TokenType.AND, None),
    "|": ("|", TokenType.OR, None),
}

_WHITESPACE = frozenset(" \t\n\r")


class Lexer:
    """Scan Quokka source text one token at a time.

    Diagnostics are collected on ``errors`` rather than raised; once the
    input is exhausted ``next_token`` keeps returning EOF.
    """

    def __init__(self, source: str) -> None:
        self._source = source
        self._pos = 0
        self._line = 1
        self._col = 1
        self.errors: list[Diagnostic] = []

    def __iter__(self) -> Iterator[Token]:
        """Yield tokens up to and including the first EOF."""
        while True:
            tok = self.next_token()
            yield tok
            if tok.type == TokenType.EOF:
                return

    def next_token(self) -> Token:
        self._skip_whitespace()

        line, col = self._line, self._col
        ch = self._peek()

        if ch == "":
            return Token(TokenType.EOF, "", line, col)

        if ch in _SINGLE:
            self._advance()
            return Token(_SINGLE[ch], ch, line, col)

        if ch in _DOUBLE:
            second, double_type, single_type = _DOUBLE[ch]
            self._advance()
            if self._peek() == second:
                self._advance()
                return Token(double_type, ch + second, line, col)
            if single_type is not None:
                return Token(single_type, ch, line, col)
            self._add_error(f"illegal character '{ch}'", line, col)
            return Token(TokenType.ILLEGAL, ch, line, col)

        if ch == '"':
            return Token(TokenType.STRING, self._read_string(), line, col)

        if is_letter(ch):
            ident = self._read_while(is_letter)
            return Token(lookup_ident(ident), ident, line, col)

        if is_digit(ch):
            return Token(TokenType.INT, self._read_while(is_digit), line, col)

        self._advance()
        self._add_error(f"illegal character '{ch}'", line, col)
        return Token(TokenType.ILLEGAL, ch, line, col)

    # ------------------------------------------------------------------
    # Position helpers
    # ------------------------------------------------------------------

    def _peek(self) -> str:
        if self._pos < len(self._source):
            return self._source[self._pos]
        return ""

    def _advance(self) -> str:
        ch = self._source[self._pos]
        self._pos += 1
        if ch == "\n":
            self._line += 1
            self._col = 1
        else:
            self._col += 1
        return ch

    def _add_error(self, message: str, line: int, column: int) -> None:
        self.errors.append(Diagnostic(message, line, column))

    # ------------------------------------------------------------------
    # Scanning helpers
    # ------------------------------------------------------------------

    def _skip_whitespace(self) -> None:
        while self._peek() in _WHITESPACE:
            self._advance()

    def _read_while(self, pred: Callable[[str], bool]) -> str:
        start = self._pos
        while self._pos < len(self._source) and pred(self._peek()):
            self._advance()
        return self._source[start : self._pos]

    def _read_string(self) -> str:
        """Read a string literal; the raw text between quotes is kept verbatim."""
        self._advance()  # opening quote
        start = self._pos
        while True:
            ch = self._peek()
            if ch == '"':
                text = self._source[start : self._pos]
                self._advance()
                return text
            if ch in ("", "\n", "\r"):
                # Newline is left for _skip_whitespace
                self._add_error(
                    "string not terminated with closing quote", self._line, self._col
                )
                return self._source[start : self._pos]
            self._advance()


def tokenize(source: str) -> tuple[list[Token], list[Diagnostic]]:
    """Convenience function: scan all of *source*, returning tokens and diagnostics."""
    lexer = Lexer(source)
    tokens = list(lexer)
    return tokens, lexer.errors
