"""Runtime value types, singletons, and display forms."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Union

from quokka.render import render, render_parameters

if TYPE_CHECKING:
    from quokka.ast import BlockStatement, Identifier
    from quokka.environment import Environment

INTEGER_OBJ = "INTEGER"
STRING_OBJ = "STRING"
BOOLEAN_OBJ = "BOOLEAN"
NULL_OBJ = "NULL"
RETURN_VALUE_OBJ = "RETURN_VALUE"
ERROR_OBJ = "ERROR"
FUNCTION_OBJ = "FUNCTION"
BUILTIN_OBJ = "BUILTIN"

_INT64_MASK = (1 << 64) - 1
_INT64_SIGN = 1 << 63


def wrap_int64(value: int) -> int:
    """Reduce *value* to a signed 64-bit integer (two's complement wraparound)."""
    value &= _INT64_MASK
    if value & _INT64_SIGN:
        value -= 1 << 64
    return value


@dataclass(frozen=True, slots=True)
class Integer:
    value: int


@dataclass(frozen=True, slots=True)
class String:
    value: str


@dataclass(frozen=True, slots=True, eq=False)
class Boolean:
    """Only the TRUE and FALSE singletons exist; compared by identity."""

    value: bool


@dataclass(frozen=True, slots=True, eq=False)
class Null:
    pass


@dataclass(frozen=True, slots=True)
class ReturnValue:
    """Marks an in-flight ``return``; unwrapped at the enclosing call boundary."""

    value: Object


@dataclass(frozen=True, slots=True)
class Error:
    """Runtime error value. Native functions leave the position unset."""

    message: str
    line: int | None = None
    column: int | None = None


@dataclass(frozen=True, slots=True, eq=False)
class Function:
    """User-defined function closing over the environment it was created in."""

    parameters: tuple[Identifier, ...]
    body: BlockStatement
    env: Environment = field(repr=False)


# Native callables receive the calling environment and evaluated arguments
NativeImpl = Callable[["Environment", list["Object"]], "Object | None"]


@dataclass(frozen=True, slots=True, eq=False)
class NativeFunction:
    """Host-provided function exposed under the same calling contract."""

    name: str
    fn: NativeImpl = field(repr=False)


Object = Union[Integer, String, Boolean, Null, ReturnValue, Error, Function, NativeFunction]

TRUE = Boolean(True)
FALSE = Boolean(False)
NULL = Null()


def native_bool(value: bool) -> Boolean:
    return TRUE if value else FALSE


def new_integer(value: int) -> Integer:
    return Integer(wrap_int64(value))


def type_of(obj: Object) -> str:
    """Return the type tag of a runtime value."""
    if isinstance(obj, Integer):
        return INTEGER_OBJ
    if isinstance(obj, String):
        return STRING_OBJ
    if isinstance(obj, Boolean):
        return BOOLEAN_OBJ
    if isinstance(obj, Null):
        return NULL_OBJ
    if isinstance(obj, ReturnValue):
        return RETURN_VALUE_OBJ
    if isinstance(obj, Error):
        return ERROR_OBJ
    if isinstance(obj, Function):
        return FUNCTION_OBJ
    if isinstance(obj, NativeFunction):
        return BUILTIN_OBJ
    raise TypeError(f"not a runtime value: {type(obj).__name__}")


def inspect(obj: Object, *, extended: bool = True) -> str:
    """Return the display form of a runtime value.

    With *extended* set, positioned errors are prefixed with ``[line:column]``.
    """
    if isinstance(obj, Integer):
        return str(obj.value)
    if isinstance(obj, String):
        return obj.value
    if isinstance(obj, Boolean):
        return "true" if obj.value else "false"
    if isinstance(obj, Null):
        return "null"
    if isinstance(obj, ReturnValue):
        return inspect(obj.value, extended=extended)
    if isinstance(obj, Error):
        if extended and obj.line is not None:
            return f"[{obj.line}:{obj.column}] ERROR: {obj.message}"
        return f"ERROR: {obj.message}"
    if isinstance(obj, Function):
        return f"fn({render_parameters(obj.parameters)}) {{\n{render(obj.body)}\n}}"
    if isinstance(obj, NativeFunction):
        return f"builtin function {obj.name}"
    raise TypeError(f"not a runtime value: {type(obj).__name__}")
