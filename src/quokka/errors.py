"""Scanner and parser diagnostics with formatted source context."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TextIO


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """A positioned message from the scanner or parser."""

    message: str
    line: int
    column: int

    def __str__(self) -> str:
        return f"[{self.line}:{self.column}] {self.message}"

    def format(self, source: str, filename: str = "<input>") -> str:
        lines = source.splitlines(keepends=True)
        line_idx = self.line - 1
        col = max(self.column, 1)

        # Build the source line (strip trailing newline for display)
        if 0 <= line_idx < len(lines):
            source_line = lines[line_idx].rstrip("\n").rstrip("\r")
        else:
            source_line = ""

        pad = " " * (col - 1)

        line_num = str(self.line)
        gutter_width = len(line_num) + 1

        blank_gutter = " " * gutter_width + "|"
        line_gutter = f"{line_num:>{gutter_width - 1}} |"

        return (
            f"error: {self.message}\n"
            f"{' ' * gutter_width}--> {filename}:{self.line}:{col}\n"
            f"{blank_gutter}\n"
            f"{line_gutter} {source_line}\n"
            f"{blank_gutter} {pad}^"
        )


class SyntaxErrors(Exception):
    """Raised by the convenience runners when scanning or parsing failed."""

    def __init__(self, diagnostics: list[Diagnostic], source: str) -> None:
        self.diagnostics = list(diagnostics)
        self.source = source
        super().__init__("\n".join(str(d) for d in self.diagnostics))

    def format(self, filename: str = "<input>") -> str:
        return "\n".join(d.format(self.source, filename) for d in self.diagnostics)


def write_diagnostics(out: TextIO, diagnostics: list[Diagnostic]) -> None:
    """Write each diagnostic as a tab-indented line."""
    for diag in diagnostics:
        out.write(f"\t{diag}\n")
