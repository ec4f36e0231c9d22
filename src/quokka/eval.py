"""Tree-walking evaluator. Runs a Quokka AST against an Environment."""

from __future__ import annotations

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
    Node,
    PrefixExpression,
    Program,
    ReturnStatement,
    StringLiteral,
    WhileStatement,
)
from quokka.environment import Environment, new_enclosed_environment
from quokka.objects import (
    FALSE,
    NULL,
    TRUE,
    Error,
    Function,
    Integer,
    NativeFunction,
    Object,
    ReturnValue,
    String,
    native_bool,
    new_integer,
    type_of,
)


def evaluate(node: Node, env: Environment) -> Object | None:
    """Evaluate *node* in *env*.

    Statements that produce no value (``let``, ``while``) and empty programs
    yield None. Runtime failures are returned as Error values, never raised.
    """
    # Containers
    if isinstance(node, Program):
        return _eval_program(node, env)
    if isinstance(node, BlockStatement):
        return _eval_block(node, env)

    # Statements
    if isinstance(node, ExpressionStatement):
        return evaluate(node.expression, env)
    if isinstance(node, LetStatement):
        value = _eval_expression(node.value, env)
        if _is_abrupt(value):
            return value
        env.set(node.name.value, value)
        return None
    if isinstance(node, ReturnStatement):
        if node.value is None:
            return ReturnValue(NULL)
        value = _eval_expression(node.value, env)
        if _is_abrupt(value):
            return value
        return ReturnValue(value)
    if isinstance(node, WhileStatement):
        return _eval_while(node, env)

    # Literals
    if isinstance(node, IntegerLiteral):
        return new_integer(node.value)
    if isinstance(node, StringLiteral):
        return String(node.value)
    if isinstance(node, BooleanLiteral):
        return native_bool(node.value)

    # Expressions
    if isinstance(node, Identifier):
        return _eval_identifier(node, env)
    if isinstance(node, PrefixExpression):
        return _eval_prefix(node, env)
    if isinstance(node, InfixExpression):
        return _eval_infix(node, env)
    if isinstance(node, IfExpression):
        return _eval_if(node, env)
    if isinstance(node, FunctionLiteral):
        return Function(node.parameters, node.body, env)
    if isinstance(node, CallExpression):
        return _eval_call(node, env)

    raise TypeError(f"cannot evaluate {type(node).__name__}")


def _eval_expression(node: Expression | BlockStatement, env: Environment) -> Object:
    """Evaluate in value position: no result at all becomes NULL."""
    result = evaluate(node, env)
    return NULL if result is None else result


def new_error(node: Node, message: str) -> Error:
    tok = getattr(node, "token", None)
    if tok is None:
        return Error(message)
    return Error(message, tok.line, tok.column)


def _is_abrupt(obj: Object | None) -> bool:
    """True for values that end evaluation early: an Error or a pending return."""
    return isinstance(obj, (Error, ReturnValue))


def is_truthy(obj: Object) -> bool:
    if obj is TRUE:
        return True
    if obj is FALSE or obj is NULL:
        return False
    if isinstance(obj, Integer):
        return obj.value != 0
    return True


# ---------------------------------------------------------------------------
# Programs and blocks
# ---------------------------------------------------------------------------


def _eval_program(program: Program, env: Environment) -> Object | None:
    result: Object | None = None
    for stmt in program.statements:
        result = evaluate(stmt, env)
        if isinstance(result, ReturnValue):
            return result.value
        if isinstance(result, Error):
            return result
    return result


def _eval_block(block: BlockStatement, env: Environment) -> Object | None:
    result: Object | None = None
    for stmt in block.statements:
        result = evaluate(stmt, env)
        # Leave ReturnValue wrapped so enclosing blocks stop too
        if _is_abrupt(result):
            return result
    return result


def _eval_while(node: WhileStatement, env: Environment) -> Object | None:
    while True:
        condition = _eval_expression(node.condition, env)
        if _is_abrupt(condition):
            return condition
        if not is_truthy(condition):
            return None
        result = _eval_block(node.body, env)
        if _is_abrupt(result):
            return result


# ---------------------------------------------------------------------------
# Identifiers and conditionals
# ---------------------------------------------------------------------------


def _eval_identifier(node: Identifier, env: Environment) -> Object:
    value = env.get(node.value)
    if value is None:
        return new_error(node, f"identifier not found: {node.value}")
    return value


def _eval_if(node: IfExpression, env: Environment) -> Object | None:
    condition = _eval_expression(node.condition, env)
    if _is_abrupt(condition):
        return condition

    if is_truthy(condition):
        return evaluate(node.consequence, env)
    if node.alternative is not None:
        return evaluate(node.alternative, env)
    return NULL


# ---------------------------------------------------------------------------
# Operators
# ---------------------------------------------------------------------------


def _eval_prefix(node: PrefixExpression, env: Environment) -> Object:
    right = _eval_expression(node.right, env)
    if _is_abrupt(right):
        return right

    if node.operator == "!":
        return native_bool(not is_truthy(right))
    if node.operator == "-":
        if not isinstance(right, Integer):
            return new_error(node, f"unknown operator: -{type_of(right)}")
        return new_integer(-right.value)
    return new_error(node, f"unknown operator: {node.operator}{type_of(right)}")


def _eval_infix(node: InfixExpression, env: Environment) -> Object:
    left = _eval_expression(node.left, env)
    if _is_abrupt(left):
        return left

    if node.operator in ("&&", "||"):
        return _eval_logical(node, left, env)

    right = _eval_expression(node.right, env)
    if _is_abrupt(right):
        return right

    if isinstance(left, Integer) and isinstance(right, Integer):
        return _eval_integer_infix(node, left, right)
    if isinstance(left, String) and isinstance(right, String):
        return _eval_string_infix(node, left, right)

    lt, rt = type_of(left), type_of(right)
    if lt != rt:
        return new_error(node, f"type mismatch: {lt} {node.operator} {rt}")
    if node.operator == "==":
        return native_bool(left is right)
    if node.operator == "!=":
        return native_bool(left is not right)
    return new_error(node, f"unknown operator: {lt} {node.operator} {rt}")


def _eval_logical(node: InfixExpression, left: Object, env: Environment) -> Object:
    """Short-circuit && and ||; the result is always a Boolean."""
    if node.operator == "&&" and not is_truthy(left):
        return FALSE
    if node.operator == "||" and is_truthy(left):
        return TRUE

    right = _eval_expression(node.right, env)
    if _is_abrupt(right):
        return right
    return native_bool(is_truthy(right))


def _eval_integer_infix(node: InfixExpression, left: Integer, right: Integer) -> Object:
    a, b = left.value, right.value
    op = node.operator

    if op == "+":
        return new_integer(a + b)
    if op == "-":
        return new_integer(a - b)
    if op == "*":
        return new_integer(a * b)
    if op == "/":
        if b == 0:
            return new_error(node, "division by zero")
        # Truncate toward zero
        quotient = abs(a) // abs(b)
        if (a < 0) != (b < 0):
            quotient = -quotient
        return new_integer(quotient)
    if op == "<":
        return native_bool(a < b)
    if op == ">":
        return native_bool(a > b)
    if op == "<=":
        return native_bool(a <= b)
    if op == ">=":
        return native_bool(a >= b)
    if op == "==":
        return native_bool(a == b)
    if op == "!=":
        return native_bool(a != b)
    return new_error(node, f"unknown operator: INTEGER {op} INTEGER")


def _eval_string_infix(node: InfixExpression, left: String, right: String) -> Object:
    op = node.operator
    if op == "+":
        return String(left.value + right.value)
    if op == "==":
        return native_bool(left.value == right.value)
    if op == "!=":
        return native_bool(left.value != right.value)
    return new_error(node, f"unknown operator: STRING {op} STRING")


# ---------------------------------------------------------------------------
# Calls
# ---------------------------------------------------------------------------


def _eval_call(node: CallExpression, env: Environment) -> Object | None:
    function = _eval_expression(node.function, env)
    if _is_abrupt(function):
        return function

    args: list[Object] = []
    for arg in node.arguments:
        value = _eval_expression(arg, env)
        if _is_abrupt(value):
            return value
        args.append(value)

    return apply_function(node, function, args, env)


def apply_function(
    node: CallExpression, function: Object, args: list[Object], env: Environment
) -> Object | None:
    """Call a user or native function with already-evaluated arguments.

    A call that produces no value (a native such as ``print``, or a body
    ending in ``let``) returns None; value positions turn that into NULL.
    """
    if isinstance(function, NativeFunction):
        return function.fn(env, args)

    if not isinstance(function, Function):
        return new_error(node, f"not a function: {type_of(function)}")

    if len(args) != len(function.parameters):
        return new_error(
            node,
            f"wrong number of arguments: want={len(function.parameters)}, got={len(args)}",
        )

    call_env = new_enclosed_environment(function.env)
    for param, arg in zip(function.parameters, args):
        call_env.set(param.value, arg)

    result = _eval_block(function.body, call_env)
    if isinstance(result, ReturnValue):
        return result.value
    return result
