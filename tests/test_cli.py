"""Tests for the CLI module: arg parsing, exit codes, end-to-end runs."""

from __future__ import annotations

import io
from pathlib import Path

import pytest

from quokka import __version__
from quokka.cli import build_parser, main

# ---------------------------------------------------------------------------
# Arg parsing via build_parser
# ---------------------------------------------------------------------------


class TestArgParsing:
    def test_input_only(self) -> None:
        ns = build_parser().parse_args(["prog.qk"])
        assert ns.input == "prog.qk"
        assert ns.strict is None
        assert ns.debug is None
        assert ns.config is None

    def test_no_input(self) -> None:
        ns = build_parser().parse_args([])
        assert ns.input is None

    def test_flags(self) -> None:
        ns = build_parser().parse_args(
            ["prog.qk", "--strict", "--debug", "--extended-errors", "--prompt", "$ "]
        )
        assert ns.strict is True
        assert ns.debug is True
        assert ns.extended_errors is True
        assert ns.prompt == "$ "

    def test_version(self, capsys) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["--version"])
        assert exc_info.value.code == 0
        assert __version__ in capsys.readouterr().out


# ---------------------------------------------------------------------------
# Running files
# ---------------------------------------------------------------------------


class TestRunFile:
    def test_success(self, tmp_path: Path, capsys) -> None:
        src = tmp_path / "prog.qk"
        src.write_text("let a = 5;\nlet double = fn(x) { x * 2 };\ndouble(a)\n")
        assert main([str(src)]) == 0
        assert capsys.readouterr().out == "10\n"

    def test_output_then_no_value(self, tmp_path: Path, capsys) -> None:
        src = tmp_path / "hello.qk"
        src.write_text('println("Hello, World!")\n')
        assert main([str(src)]) == 0
        assert capsys.readouterr().out == "Hello, World!\n"

    def test_empty_file(self, tmp_path: Path, capsys) -> None:
        src = tmp_path / "empty.qk"
        src.write_text("")
        assert main([str(src)]) == 0
        assert capsys.readouterr().out == ""

    def test_syntax_error_returns_1(self, tmp_path: Path, capsys) -> None:
        src = tmp_path / "bad.qk"
        src.write_text('println("never");\nlet x 5;\n')
        assert main([str(src)]) == 1
        assert capsys.readouterr().out == (
            '\t[2:7] expected next token to be "=", got "INT" instead\n'
        )

    def test_runtime_error_is_printed(self, tmp_path: Path, capsys) -> None:
        src = tmp_path / "err.qk"
        src.write_text("1 + true")
        assert main([str(src)]) == 0
        assert capsys.readouterr().out == "[1:3] ERROR: type mismatch: INTEGER + BOOLEAN\n"

    def test_runtime_error_strict_returns_2(self, tmp_path: Path) -> None:
        src = tmp_path / "err.qk"
        src.write_text("5 / 0")
        assert main([str(src), "--strict"]) == 2

    def test_strict_success(self, tmp_path: Path) -> None:
        src = tmp_path / "ok.qk"
        src.write_text("1")
        assert main([str(src), "--strict"]) == 0

    def test_missing_file_returns_1(self, tmp_path: Path, capsys) -> None:
        assert main([str(tmp_path / "nope.qk")]) == 1
        assert "cannot read" in capsys.readouterr().err

    def test_runaway_recursion_returns_2(self, tmp_path: Path, capsys) -> None:
        src = tmp_path / "loop.qk"
        src.write_text("let f = fn(n) { f(n + 1) }; f(0)")
        assert main([str(src)]) == 2
        assert "recursion" in capsys.readouterr().err

    def test_debug_dumps_to_stderr(self, tmp_path: Path, capsys) -> None:
        src = tmp_path / "dbg.qk"
        src.write_text("let a = 1;\na")
        assert main([str(src), "--debug"]) == 0
        captured = capsys.readouterr()
        assert captured.out == "1\n"
        assert "1:1\tLET\t'let'" in captured.err
        assert "Program" in captured.err
        assert "  Let a" in captured.err

    def test_debug_formats_diagnostics(self, tmp_path: Path, capsys) -> None:
        src = tmp_path / "bad.qk"
        src.write_text("let = 1;")
        assert main([str(src), "--debug"]) == 1
        err = capsys.readouterr().err
        assert f"--> {src}:1:5" in err
        assert "let = 1;" in err


# ---------------------------------------------------------------------------
# Interactive mode
# ---------------------------------------------------------------------------


class TestRepl:
    def test_no_input_starts_session(self, tmp_path: Path, monkeypatch, capsys) -> None:
        monkeypatch.chdir(tmp_path)
        monkeypatch.setattr("sys.stdin", io.StringIO("let a = 1;\na + 1\n"))
        assert main([]) == 0
        out = capsys.readouterr().out
        assert out.startswith("Type in commands\n")
        assert "2\n" in out
