"""Command-line interface for Quokka."""

from __future__ import annotations

import argparse
import sys
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from quokka import __version__

CONFIG_NAME = "quokka.toml"


@dataclass(frozen=True, slots=True)
class CliOptions:
    """Parsed CLI options."""

    input_file: Path | None
    strict: bool
    debug: bool
    prompt: str
    extended_errors: bool


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser (separate function for testability)."""
    p = argparse.ArgumentParser(
        prog="quokka",
        description="Quokka interpreter; starts an interactive session when no file is given",
    )
    p.add_argument("input", nargs="?", help="Source file to run")
    p.add_argument(
        "--config",
        metavar="FILE",
        help=f"Config file (default: auto-discover {CONFIG_NAME})",
    )
    p.add_argument(
        "--strict",
        action="store_true",
        default=None,
        help="Exit with status 2 when the program evaluates to an error",
    )
    p.add_argument(
        "--debug",
        action="store_true",
        default=None,
        help="Dump tokens and AST to stderr",
    )
    p.add_argument("--prompt", default=None, help="Interactive prompt (default: '>> ')")
    p.add_argument(
        "--extended-errors",
        action="store_true",
        default=None,
        help="Show [line:column] on error values in interactive mode",
    )
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return p


def load_config(config_path: Path | None, base_dir: Path) -> dict[str, Any]:
    """Load a TOML config file, returning an empty dict on missing/absent file."""
    path = config_path if config_path is not None else base_dir / CONFIG_NAME

    if not path.is_file():
        return {}

    with open(path, "rb") as f:
        return tomllib.load(f)


def _config_bool(config: dict[str, Any], key: str, section: str | None = None) -> bool | None:
    table = config.get(section, {}) if section else config
    if not isinstance(table, dict) or key not in table:
        return None
    value = table[key]
    if not isinstance(value, bool):
        name = f"{section}.{key}" if section else key
        raise argparse.ArgumentTypeError(f"config key '{name}' must be a boolean")
    return value


def resolve_options(args: argparse.Namespace) -> CliOptions:
    """Merge config file and CLI args into CliOptions.

    Precedence: config file < CLI flags.
    """
    input_file = Path(args.input) if args.input else None
    if input_file is not None:
        base_dir = input_file.parent
        if not base_dir.parts:
            base_dir = Path(".")
    else:
        base_dir = Path.cwd()

    config_path = Path(args.config) if args.config else None
    try:
        config = load_config(config_path, base_dir)
    except tomllib.TOMLDecodeError as exc:
        raise argparse.ArgumentTypeError(f"invalid config file: {exc}") from exc

    strict = _config_bool(config, "strict") or False
    if args.strict is not None:
        strict = args.strict

    debug = _config_bool(config, "debug") or False
    if args.debug is not None:
        debug = args.debug

    # Interactive settings: [repl] table < CLI
    prompt = ">> "
    cfg_repl = config.get("repl")
    if isinstance(cfg_repl, dict):
        cfg_prompt = cfg_repl.get("prompt")
        if isinstance(cfg_prompt, str):
            prompt = cfg_prompt
    if args.prompt is not None:
        prompt = args.prompt

    extended_errors = _config_bool(config, "extended_errors", "repl") or False
    if args.extended_errors is not None:
        extended_errors = args.extended_errors

    return CliOptions(
        input_file=input_file,
        strict=strict,
        debug=debug,
        prompt=prompt,
        extended_errors=extended_errors,
    )


def run_file(options: CliOptions) -> int:
    """Read, parse, and evaluate a source file, printing the result to stdout."""
    from quokka.builtins import new_global_environment
    from quokka.debug import dump_ast, dump_tokens
    from quokka.errors import write_diagnostics
    from quokka.eval import evaluate
    from quokka.objects import Error, inspect
    from quokka.parser import parse

    assert options.input_file is not None
    try:
        source = options.input_file.read_text(encoding="utf-8")
    except OSError as exc:
        print(f"error: cannot read {options.input_file}: {exc.strerror}", file=sys.stderr)
        return 1

    program, diagnostics = parse(source)

    if options.debug:
        dump_tokens(source, file=sys.stderr)
        dump_ast(program, file=sys.stderr)

    if diagnostics:
        write_diagnostics(sys.stdout, diagnostics)
        if options.debug:
            for diag in diagnostics:
                print(diag.format(source, str(options.input_file)), file=sys.stderr)
        return 1

    try:
        result = evaluate(program, new_global_environment())
    except RecursionError:
        print("error: maximum recursion depth exceeded", file=sys.stderr)
        return 2

    if result is not None:
        sys.stdout.write(inspect(result))
        sys.stdout.write("\n")

    if options.strict and isinstance(result, Error):
        return 2
    return 0


def run_repl(options: CliOptions) -> int:
    """Run an interactive session on stdin/stdout until end of input."""
    from quokka.repl import Repl

    shell = Repl(prompt=options.prompt, extended_errors=options.extended_errors)
    try:
        shell.cmdloop()
    except KeyboardInterrupt:
        print()
    return 0


def main(argv: list[str] | None = None) -> int:
    """CLI entry point. Returns exit code (0/1/2). Does not call sys.exit()."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        options = resolve_options(args)
    except argparse.ArgumentTypeError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    if options.input_file is None:
        return run_repl(options)
    return run_file(options)
