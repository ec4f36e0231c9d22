"""Test scanner diagnostics, positions, and formatted source context."""

import pytest

from quokka import run
from quokka.errors import Diagnostic, SyntaxErrors, write_diagnostics
from quokka.lexer import tokenize
from quokka.tokens import TokenType


class TestUnterminatedString:
    def test_newline_before_closing_quote(self):
        tokens, errors = tokenize('"abc\nx')
        assert len(errors) == 1
        err = errors[0]
        assert err.message == "string not terminated with closing quote"
        assert (err.line, err.column) == (1, 5)
        # The text read so far is still delivered, and scanning resumes
        assert tokens[0].type == TokenType.STRING
        assert tokens[0].literal == "abc"
        assert tokens[1].type == TokenType.IDENT
        assert (tokens[1].line, tokens[1].column) == (2, 1)

    def test_carriage_return_before_closing_quote(self):
        _, errors = tokenize('"abc\r\n"')
        assert errors[0].message == "string not terminated with closing quote"

    def test_end_of_input(self):
        _, errors = tokenize('let s = "abc')
        assert len(errors) == 1
        assert (errors[0].line, errors[0].column) == (1, 13)


class TestIllegalCharacters:
    def test_lone_ampersand(self):
        tokens, errors = tokenize("a & b")
        assert tokens[1].type == TokenType.ILLEGAL
        assert tokens[1].literal == "&"
        assert errors[0].message == "illegal character '&'"
        assert (errors[0].line, errors[0].column) == (1, 3)

    def test_lone_pipe(self):
        tokens, errors = tokenize("|")
        assert tokens[0].type == TokenType.ILLEGAL
        assert len(errors) == 1

    def test_unknown_character(self):
        tokens, errors = tokenize("x\n  @")
        assert tokens[1].type == TokenType.ILLEGAL
        assert (errors[0].line, errors[0].column) == (2, 3)

    def test_errors_accumulate(self):
        _, errors = tokenize("@ # $")
        assert len(errors) == 3


class TestDiagnosticFormatting:
    def test_str_has_position_prefix(self):
        assert str(Diagnostic("bad thing", 3, 7)) == "[3:7] bad thing"

    def test_format_contains_line(self):
        formatted = Diagnostic("oops", 1, 5).format("let @ = 1;")
        assert "let @ = 1;" in formatted

    def test_format_contains_carets(self):
        formatted = Diagnostic("oops", 1, 5).format("let @ = 1;")
        assert formatted.splitlines()[-1].endswith("    ^")

    def test_format_contains_error_prefix(self):
        formatted = Diagnostic("oops", 1, 1).format("@")
        assert formatted.startswith("error: oops")

    def test_format_with_filename(self):
        formatted = Diagnostic("oops", 2, 1).format("a\n@", "main.qk")
        assert "--> main.qk:2:1" in formatted

    def test_format_position_past_end(self):
        formatted = Diagnostic("oops", 5, 1).format("a")
        assert "5:1" in formatted

    def test_write_diagnostics(self, capsys):
        import sys

        write_diagnostics(sys.stdout, [Diagnostic("one", 1, 1), Diagnostic("two", 2, 4)])
        assert capsys.readouterr().out == "\t[1:1] one\n\t[2:4] two\n"


class TestSyntaxErrors:
    def test_run_raises_with_diagnostics(self):
        with pytest.raises(SyntaxErrors) as exc_info:
            run("let x 5;")
        err = exc_info.value
        assert len(err.diagnostics) == 1
        assert "[1:7]" in str(err)

    def test_format_all(self):
        with pytest.raises(SyntaxErrors) as exc_info:
            run("@\n@")
        formatted = exc_info.value.format("t.qk")
        assert "t.qk:1:1" in formatted
        assert "t.qk:2:1" in formatted
