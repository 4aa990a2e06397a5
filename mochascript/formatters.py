"""Human-readable dumps of tokens and AST nodes, used by `--tokens` and
`--dump-ast`."""

from __future__ import annotations

from typing import Callable, Dict, List

from .ast import (
    AssignmentStatement, BinaryExpression, BooleanLiteral, CommentStatement,
    DeclarationStatement, ElseIfClause, ForStatement, Identifier, IfStatement,
    Node, NumberLiteral, ReturnStatement, StringLiteral, WriteLineStatement,
    WriteStatement,
)
from .tokens import Token


def format_token(token: Token) -> str:
    text = 'N/A' if token.text is None else token.text
    return f"{{ type: {token.kind.name}, value: {text} }}"


def format_tokens(tokens: List[Token]) -> str:
    return '\n'.join(format_token(t) for t in tokens)


def format_block(body: List[Node]) -> str:
    return '; '.join(format_node(n) for n in body)


def format_else_if(clause: ElseIfClause) -> str:
    return f"elif ({format_node(clause.condition)}) {{ {format_block(clause.body)} }}"


def format_if(node: IfStatement) -> str:
    s = f"if ({format_node(node.condition)}) {{ {format_block(node.then_branch)} }}"
    for clause in node.else_ifs:
        s += ' ' + format_else_if(clause)
    if node.else_branch is not None:
        s += f" else {{ {format_block(node.else_branch)} }}"
    return s


def format_write(node: WriteStatement) -> str:
    name = 'WriteLn' if isinstance(node, WriteLineStatement) else 'Write'
    if node.text is not None:
        return f'{name}Str("{node.text}")'
    if node.expr is not None:
        return f"{name}Expr({format_node(node.expr)})"
    return f"{name}(?)"


FORMATTERS: Dict[type, Callable[[Node], str]] = {
    NumberLiteral: lambda n: f"Num({n.value})",
    StringLiteral: lambda n: f'Str("{n.value}")',
    BooleanLiteral: lambda n: f"Bool({'true' if n.value else 'false'})",
    Identifier: lambda n: f"Id({n.name})",
    BinaryExpression: lambda n: f"({format_node(n.left)} {n.operator} {format_node(n.right)})",
    DeclarationStatement: lambda n: f"Declare{' mut' if n.mutable else ''} {n.identifier} = {format_node(n.value)}",
    AssignmentStatement: lambda n: f"Assign {n.identifier} = {format_node(n.value)}",
    ForStatement: lambda n: (
        f"for ({format_node(n.init)}; {format_node(n.condition)}; {format_node(n.update)}) "
        f"{{ {format_block(n.body)} }}"
    ),
    IfStatement: format_if,
    WriteStatement: format_write,
    WriteLineStatement: format_write,
    ReturnStatement: lambda n: f"Return {format_node(n.value)}",
    CommentStatement: lambda n: f"Comment({n.text!r})",
}


def format_node(node: Node) -> str:
    formatter = FORMATTERS.get(type(node))
    if formatter is None:
        return f"UnknownNode({type(node).__name__})"
    return formatter(node)


def format_ast(program: List[Node]) -> str:
    return '\n'.join(f"{i:02d}: {format_node(n)}" for i, n in enumerate(program))
