"""Native function registry: print, println, len, printf, inspect, type."""

from __future__ import annotations

import sys

from quokka.environment import Environment
from quokka.objects import (
    STRING_OBJ,
    Boolean,
    Error,
    Integer,
    NativeFunction,
    NativeImpl,
    Object,
    String,
    inspect,
    new_integer,
    type_of,
)

# Escapes interpreted in printf templates; anything else keeps its backslash
_TEMPLATE_ESCAPES: dict[str, str] = {"n": "\n", "t": "\t", "\\": "\\"}


def _write(text: str) -> None:
    # sys.stdout is looked up per call
    sys.stdout.write(text)


def _print(env: Environment, args: list[Object]) -> None:
    _write("".join(inspect(arg) for arg in args))


def _println(env: Environment, args: list[Object]) -> None:
    _print(env, args)
    _write("\n")


def _len(env: Environment, args: list[Object]) -> Object:
    if not args:
        return Error("missing parameter in call to 'len'")
    if len(args) > 1:
        return Error("too many parameters in call to 'len'")

    arg = args[0]
    if isinstance(arg, String):
        return new_integer(len(arg.value))
    return Error(f"type {type_of(arg)} not supported for 'len'")


def _inspect(env: Environment, args: list[Object]) -> Object:
    if len(args) != 1:
        return Error(
            f"incorrect number of parameters to 'inspect': expected 1, got {len(args)}"
        )
    return String(inspect(args[0]))


def _type(env: Environment, args: list[Object]) -> Object:
    if len(args) != 1:
        return Error(f"incorrect number of parameters to 'type': expected 1, got {len(args)}")
    return String(type_of(args[0]))


def _printf(env: Environment, args: list[Object]) -> Object | None:
    if not args:
        return Error("missing parameter in call to 'printf'")
    template = args[0]
    if not isinstance(template, String):
        return Error(
            f"first parameter to 'printf' must be {STRING_OBJ}, got {type_of(template)}"
        )

    params = args[1:]
    for param in params:
        if not isinstance(param, (Boolean, Integer, String)):
            return Error(f"invalid parameter to 'printf': type {type_of(param)} not supported")

    _write(format_template(replace_escapes(template.value), params))
    return None


def replace_escapes(text: str) -> str:
    """Interpret \\n, \\t and \\\\ in *text*; other escapes pass through unchanged."""
    result: list[str] = []
    i = 0
    while i < len(text):
        ch = text[i]
        if ch == "\\" and i + 1 < len(text):
            nxt = text[i + 1]
            result.append(_TEMPLATE_ESCAPES.get(nxt, "\\" + nxt))
            i += 2
            continue
        result.append(ch)
        i += 1
    return "".join(result)


def format_template(template: str, params: list[Object]) -> str:
    """Expand %d, %s, %t, %v and %% directives against *params*.

    Problems are reported inline rather than failing the call:
    ``%!d(MISSING)`` for an absent argument, ``%!d(STRING=x)`` for a wrong
    type, and ``%!(EXTRA ...)`` for unused arguments. Width, precision and
    flags are not supported: ``%5d`` renders as ``%!5(BADVERB)``.
    """
    result: list[str] = []
    remaining = list(params)
    i = 0
    while i < len(template):
        ch = template[i]
        if ch != "%":
            result.append(ch)
            i += 1
            continue

        if i + 1 >= len(template):
            result.append("%!(NOVERB)")
            break

        verb = template[i + 1]
        i += 2
        if verb == "%":
            result.append("%")
            continue
        if verb not in "dstv":
            result.append(f"%!{verb}(BADVERB)")
            continue
        if not remaining:
            result.append(f"%!{verb}(MISSING)")
            continue

        arg = remaining.pop(0)
        if verb == "d" and not isinstance(arg, Integer):
            result.append(f"%!d({type_of(arg)}={inspect(arg)})")
        elif verb == "t" and not isinstance(arg, Boolean):
            result.append(f"%!t({type_of(arg)}={inspect(arg)})")
        else:
            result.append(inspect(arg))

    if remaining:
        extra = ", ".join(f"{type_of(arg)}={inspect(arg)}" for arg in remaining)
        result.append(f"%!(EXTRA {extra})")
    return "".join(result)


def _make_builtins() -> dict[str, NativeFunction]:
    defs: dict[str, NativeFunction] = {}

    def d(name: str, fn: NativeImpl) -> None:
        defs[name] = NativeFunction(name, fn)

    # Output
    d("print", _print)
    d("println", _println)
    d("printf", _printf)

    # Introspection
    d("len", _len)
    d("inspect", _inspect)
    d("type", _type)

    return defs


BUILTINS: dict[str, NativeFunction] = _make_builtins()


def load_builtins(env: Environment) -> Environment:
    """Bind every native function into *env* and return it."""
    for name, fn in BUILTINS.items():
        env.set(name, fn)
    return env


def new_global_environment() -> Environment:
    """A fresh top-level environment with the native functions loaded."""
    return load_builtins(Environment())
