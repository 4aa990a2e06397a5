"""Abstract Syntax Tree (AST) definitions for MochaScript.

The parser produces a list of statement nodes; expressions hang off those
statements. Each class corresponds to one construct of the language and is
consumed by the interpreter.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Union


@dataclass
class Node:
    """Base class for all AST nodes."""
    pass


@dataclass
class NumberLiteral(Node):
    value: Union[int, float]


@dataclass
class StringLiteral(Node):
    value: str


@dataclass
class BooleanLiteral(Node):
    value: bool


@dataclass
class Identifier(Node):
    name: str


@dataclass
class BinaryExpression(Node):
    left: Node
    operator: str
    right: Node


@dataclass
class ElseIfClause:
    condition: Node
    body: List[Node]


@dataclass
class IfStatement(Node):
    condition: Node
    then_branch: List[Node]
    else_ifs: List[ElseIfClause] = field(default_factory=list)
    else_branch: Optional[List[Node]] = None


@dataclass
class ForStatement(Node):
    init: Node  # DeclarationStatement or AssignmentStatement
    condition: Node
    update: Node  # AssignmentStatement or a bare expression
    body: List[Node]


@dataclass
class DeclarationStatement(Node):
    identifier: str
    value: Node
    mutable: bool = False


@dataclass
class AssignmentStatement(Node):
    identifier: str
    value: Node


@dataclass
class WriteStatement(Node):
    text: Optional[str] = None
    expr: Optional[Node] = None


@dataclass
class WriteLineStatement(WriteStatement):
    pass


@dataclass
class ReturnStatement(Node):
    value: Node


@dataclass
class CommentStatement(Node):
    text: str


EXPRESSION_NODES = (NumberLiteral, StringLiteral, BooleanLiteral, Identifier, BinaryExpression)
