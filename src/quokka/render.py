"""Source renderer: converts a syntax tree back to canonical, fully parenthesized text."""

from __future__ import annotations

from quokka.ast import (
    BlockStatement,
    BooleanLiteral,
    CallExpression,
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


def render(node: Node) -> str:
    """Render *node* as source text with every operator application parenthesized.

    ``a + b * c`` renders as ``(a + (b * c))``, which makes the parsed
    precedence and associativity visible.
    """
    if isinstance(node, (Program, BlockStatement)):
        return "".join(render(stmt) for stmt in node.statements)

    # Statements
    if isinstance(node, LetStatement):
        return f"let {node.name.value} = {render(node.value)};"
    if isinstance(node, ReturnStatement):
        if node.value is None:
            return "return;"
        return f"return {render(node.value)};"
    if isinstance(node, ExpressionStatement):
        return render(node.expression)
    if isinstance(node, WhileStatement):
        return f"while {render(node.condition)} {{ {render(node.body)} }}"

    # Leaves
    if isinstance(node, Identifier):
        return node.value
    if isinstance(node, IntegerLiteral):
        return node.token.literal
    if isinstance(node, StringLiteral):
        return f'"{node.value}"'
    if isinstance(node, BooleanLiteral):
        return "true" if node.value else "false"

    # Compound expressions
    if isinstance(node, PrefixExpression):
        return f"({node.operator}{render(node.right)})"
    if isinstance(node, InfixExpression):
        return f"({render(node.left)} {node.operator} {render(node.right)})"
    if isinstance(node, IfExpression):
        result = f"if {render(node.condition)} {{ {render(node.consequence)} }}"
        if node.alternative is not None:
            result += f" else {{ {render(node.alternative)} }}"
        return result
    if isinstance(node, FunctionLiteral):
        return f"fn({render_parameters(node.parameters)}) {{ {render(node.body)} }}"
    if isinstance(node, CallExpression):
        args = ", ".join(render(arg) for arg in node.arguments)
        return f"{render(node.function)}({args})"

    raise TypeError(f"cannot render {type(node).__name__}")


def render_parameters(parameters: tuple[Identifier, ...]) -> str:
    return ", ".join(p.value for p in parameters)
