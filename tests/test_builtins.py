"""Tests for the native functions and printf formatting."""

from __future__ import annotations

import pytest

from quokka.builtins import BUILTINS, format_template, new_global_environment, replace_escapes
from quokka.objects import (
    FALSE,
    NULL,
    TRUE,
    Error,
    Integer,
    NativeFunction,
    String,
    inspect,
)


class TestRegistry:
    def test_names(self):
        assert sorted(BUILTINS) == ["inspect", "len", "print", "printf", "println", "type"]

    def test_loaded_into_global_environment(self):
        env = new_global_environment()
        for name in BUILTINS:
            assert isinstance(env.get(name), NativeFunction)

    def test_display(self, run_source):
        assert inspect(run_source("len")) == "builtin function len"

    def test_can_be_shadowed(self, run_source):
        assert run_source('let len = fn(x) { 42 }; len("abc")') == Integer(42)


class TestPrint:
    def test_print_concatenates(self, run_source, capsys):
        run_source('print("a", 1, true, " ", "b")')
        assert capsys.readouterr().out == "a1true b"

    def test_println(self, run_source, capsys):
        run_source('println("x = ", 5); println()')
        assert capsys.readouterr().out == "x = 5\n\n"

    def test_no_escape_processing(self, run_source, capsys):
        run_source('print("a\\nb")')
        assert capsys.readouterr().out == "a\\nb"

    def test_displays_values(self, run_source, capsys):
        run_source("println(fn(x) { x * 2 }, if (false) { 1 })")
        assert capsys.readouterr().out == "fn(x) {\n(x * 2)\n}null\n"

    def test_returns_no_value(self, run_source):
        assert run_source('print("")') is None
        assert run_source('println("")') is None

    def test_result_in_value_position_is_null(self, run_source, capsys):
        assert run_source('let r = println("hi"); r') is NULL
        assert capsys.readouterr().out == "hi\n"


class TestLen:
    @pytest.mark.parametrize(
        ("source", "expected"),
        [('len("")', 0), ('len("four")', 4), ('len("hello world")', 11)],
    )
    def test_strings(self, run_source, source, expected):
        assert run_source(source) == Integer(expected)

    @pytest.mark.parametrize(
        ("source", "message"),
        [
            ("len(1)", "type INTEGER not supported for 'len'"),
            ("len(true)", "type BOOLEAN not supported for 'len'"),
            ("len()", "missing parameter in call to 'len'"),
            ('len("one", "two")', "too many parameters in call to 'len'"),
        ],
    )
    def test_errors(self, run_source, source, message):
        result = run_source(source)
        assert isinstance(result, Error)
        assert result.message == message

    def test_error_has_no_position(self, run_source):
        result = run_source("len(1)")
        assert result.line is None
        assert inspect(result) == "ERROR: type INTEGER not supported for 'len'"


class TestInspect:
    @pytest.mark.parametrize(
        ("source", "expected"),
        [
            ("inspect(5)", "5"),
            ('inspect("x")', "x"),
            ("inspect(true)", "true"),
            ("inspect(fn(a, b) { a })", "fn(a, b) {\na\n}"),
            ("inspect(println)", "builtin function println"),
        ],
    )
    def test_display_string(self, run_source, source, expected):
        assert run_source(source) == String(expected)

    def test_arity(self, run_source):
        result = run_source("inspect(1, 2)")
        assert result.message == "incorrect number of parameters to 'inspect': expected 1, got 2"


class TestType:
    @pytest.mark.parametrize(
        ("source", "expected"),
        [
            ("type(1)", "INTEGER"),
            ('type("")', "STRING"),
            ("type(false)", "BOOLEAN"),
            ("type(if (false) { 1 })", "NULL"),
            ("type(fn() { 1 })", "FUNCTION"),
            ("type(len)", "BUILTIN"),
        ],
    )
    def test_tags(self, run_source, source, expected):
        assert run_source(source) == String(expected)

    def test_arity(self, run_source):
        result = run_source("type()")
        assert result.message == "incorrect number of parameters to 'type': expected 1, got 0"


class TestPrintf:
    def test_directives(self, run_source, capsys):
        run_source('printf("%d + %d = %d\\n", 1, 2, 3)')
        assert capsys.readouterr().out == "1 + 2 = 3\n"

    def test_mixed_verbs(self, run_source, capsys):
        run_source('printf("%s is %t, %v%%", "it", true, 100)')
        assert capsys.readouterr().out == "it is true, 100%"

    def test_returns_no_value(self, run_source, capsys):
        assert run_source('printf("x")') is None
        assert capsys.readouterr().out == "x"

    @pytest.mark.parametrize(
        ("source", "message"),
        [
            ("printf()", "missing parameter in call to 'printf'"),
            ("printf(1)", "first parameter to 'printf' must be STRING, got INTEGER"),
            (
                'printf("%v", fn() { 1 })',
                "invalid parameter to 'printf': type FUNCTION not supported",
            ),
            ('printf("%v", len)', "invalid parameter to 'printf': type BUILTIN not supported"),
        ],
    )
    def test_errors(self, run_source, capsys, source, message):
        result = run_source(source)
        assert isinstance(result, Error)
        assert result.message == message
        assert capsys.readouterr().out == ""


class TestFormatTemplate:
    @pytest.mark.parametrize(
        ("template", "params", "expected"),
        [
            ("plain", [], "plain"),
            ("%d", [Integer(-4)], "-4"),
            ("%s", [String("hi")], "hi"),
            ("%t", [FALSE], "false"),
            ("%v|%v", [TRUE, Integer(3)], "true|3"),
            ("100%%", [], "100%"),
            ("%d", [], "%!d(MISSING)"),
            ("%d", [String("x")], "%!d(STRING=x)"),
            ("%t", [Integer(1)], "%!t(INTEGER=1)"),
            ("%d", [Integer(1), Integer(2), String("a")], "1%!(EXTRA INTEGER=2, STRING=a)"),
            ("end%", [], "end%!(NOVERB)"),
            ("%q", [], "%!q(BADVERB)"),
            ("%5d", [Integer(3)], "%!5(BADVERB)d%!(EXTRA INTEGER=3)"),
        ],
    )
    def test_expansion(self, template, params, expected):
        assert format_template(template, params) == expected


class TestReplaceEscapes:
    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("a\\nb", "a\nb"),
            ("a\\tb", "a\tb"),
            ("a\\\\b", "a\\b"),
            ("a\\qb", "a\\qb"),
            ("trailing\\", "trailing\\"),
            ("none", "none"),
        ],
    )
    def test_escapes(self, text, expected):
        assert replace_escapes(text) == expected
