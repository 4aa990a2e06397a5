"""JSON serialization/deserialization for the MochaScript AST.

This module converts between AST dataclasses and plain Python dict/list
structures suitable for JSON encoding. Every node becomes a dict with a
`type` key naming its class; the round-trip is exact.
"""

from __future__ import annotations

from dataclasses import fields
from typing import Any, Dict, List

from . import ast as nodes
from .ast import ElseIfClause, Node

NODE_TYPES: Dict[str, type] = {
    cls.__name__: cls
    for cls in (
        nodes.NumberLiteral,
        nodes.StringLiteral,
        nodes.BooleanLiteral,
        nodes.Identifier,
        nodes.BinaryExpression,
        nodes.IfStatement,
        nodes.ElseIfClause,
        nodes.ForStatement,
        nodes.DeclarationStatement,
        nodes.AssignmentStatement,
        nodes.WriteStatement,
        nodes.WriteLineStatement,
        nodes.ReturnStatement,
        nodes.CommentStatement,
    )
}


def ast_to_obj(node: Any) -> Any:
    # Primitives
    if node is None or isinstance(node, (int, float, str, bool)):
        return node
    if isinstance(node, list):
        return [ast_to_obj(n) for n in node]
    if isinstance(node, (Node, ElseIfClause)):
        obj: Dict[str, Any] = {"type": type(node).__name__}
        for f in fields(node):
            obj[f.name] = ast_to_obj(getattr(node, f.name))
        return obj
    raise TypeError(f"cannot serialize {type(node).__name__}")


def ast_from_obj(obj: Any) -> Any:
    if obj is None or isinstance(obj, (int, float, str, bool)):
        return obj
    if isinstance(obj, list):
        return [ast_from_obj(o) for o in obj]
    if isinstance(obj, dict):
        kind = obj.get("type")
        cls = NODE_TYPES.get(kind)
        if cls is None:
            raise ValueError(f"unknown AST node type {kind!r}")
        kwargs = {f.name: ast_from_obj(obj.get(f.name)) for f in fields(cls)}
        return cls(**kwargs)
    raise ValueError(f"cannot deserialize {obj!r}")


def program_to_obj(program: List[Node]) -> Dict[str, Any]:
    return {"type": "Program", "body": ast_to_obj(program)}


def program_from_obj(obj: Dict[str, Any]) -> List[Node]:
    if obj.get("type") != "Program":
        raise ValueError("expected a Program object")
    return ast_from_obj(obj["body"])
