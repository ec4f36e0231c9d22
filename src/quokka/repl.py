"""Interactive read-eval-print loop. Uses cmd as backend."""

from __future__ import annotations

import cmd
from typing import TextIO

from quokka.builtins import new_global_environment
from quokka.environment import Environment
from quokka.errors import write_diagnostics
from quokka.eval import evaluate
from quokka.objects import inspect
from quokka.parser import parse

PROMPT = ">> "
INTRO = "Type in commands"


class Repl(cmd.Cmd):
    """Quokka shell: every line is scanned, parsed, and evaluated on its own.

    All lines share one environment, so bindings and function definitions
    accumulate over the session.
    """

    def __init__(
        self,
        env: Environment | None = None,
        *,
        prompt: str = PROMPT,
        extended_errors: bool = False,
        stdin: TextIO | None = None,
        stdout: TextIO | None = None,
    ) -> None:
        super().__init__(stdin=stdin, stdout=stdout)
        if stdin is not None:
            self.use_rawinput = False
        self.intro = INTRO
        self.prompt = prompt
        self.env = env if env is not None else new_global_environment()
        self.extended_errors = extended_errors

    def cmdloop(self, intro: str | None = None) -> None:
        """Read and run lines until end of input."""
        self.preloop()
        if intro is not None:
            self.intro = intro
        if self.intro:
            self.stdout.write(f"{self.intro}\n")
        stop = False
        while not stop:
            line = self.read_line()
            if line is None:
                self.stdout.write("\n")
                break
            stop = self.onecmd(line)
        self.postloop()

    def read_line(self) -> str | None:
        """Prompt for one line; None at end of input."""
        if self.use_rawinput:
            try:
                return input(self.prompt)
            except EOFError:
                return None
        self.stdout.write(self.prompt)
        self.stdout.flush()
        line = self.stdin.readline()
        if not line:
            return None
        return line.rstrip("\r\n")

    def onecmd(self, line: str) -> bool:
        """Evaluate one line; blank lines are skipped."""
        if line.strip():
            self.execute(line)
        return False

    def execute(self, line: str) -> None:
        program, diagnostics = parse(line)
        if diagnostics:
            write_diagnostics(self.stdout, diagnostics)
            return

        try:
            result = evaluate(program, self.env)
        except RecursionError:
            self.stdout.write("ERROR: maximum recursion depth exceeded\n")
            return

        if result is not None:
            self.stdout.write(inspect(result, extended=self.extended_errors))
            self.stdout.write("\n")
