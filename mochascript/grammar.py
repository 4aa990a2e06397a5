"""Grammar-driven front end for MochaScript.

The hand-written parser in `mochascript.parser` is the primary front end.
This module describes the same surface language as a Lark LALR grammar and
transforms the parse tree into the very same AST classes, so both front
ends are interchangeable (`python -m mochascript --parser lark`).

Operator precedence is encoded in the rule layering: comparison < sum <
product < power, with `power` recursing on its right operand to make `^`
right-associative.

`parse_source` is the public entry point.
"""

from __future__ import annotations

from typing import List

from lark import Lark, Transformer
from lark.exceptions import UnexpectedInput

from .ast import (
    AssignmentStatement, BinaryExpression, BooleanLiteral, CommentStatement,
    DeclarationStatement, ElseIfClause, ForStatement, Identifier, IfStatement,
    Node, NumberLiteral, ReturnStatement, StringLiteral, WriteLineStatement,
    WriteStatement,
)
from .errors import ParseError
from .lexer import unescape
from .types import number_from_text


MOCHA_GRAMMAR = r"""
    start: statement*

    ?statement: comment
              | declaration
              | assignment
              | if_stmt
              | for_stmt
              | return_stmt
              | write_stmt
              | writeln_stmt

    comment: COMMENT

    ?declaration: "def" [MUT] NAME "=" expr ";"   -> def_decl
                | MUT NAME "=" expr ";"           -> mut_decl
    assignment: NAME "=" expr ";"

    if_stmt: "if" expr block elif_clause* [else_clause]
    elif_clause: "elif" expr block
    else_clause: "else" block

    for_stmt: "for" "(" for_init expr ";" for_update ")" block
    ?for_init: declaration | assignment
    ?for_update: update_assign | expr
    update_assign: NAME "=" expr

    return_stmt: "ret" expr ";"
    write_stmt: "write" "(" expr ")" ";"
    writeln_stmt: "writeln" "(" expr ")" ";"

    block: "{" statement* "}"

    // Expressions with precedence
    ?expr: comparison
    ?comparison: sum (COMP_OP sum)*
    ?sum: product (ADD_OP product)*
    ?product: power (MUL_OP power)*
    ?power: atom
          | atom "^" power      -> power_op
    ?atom: NUMBER               -> number
         | STRING               -> string
         | "true"               -> true
         | "false"              -> false
         | NAME                 -> identifier
         | "(" expr ")"

    // Tokens
    MUT: "mut"
    NAME: /[A-Za-z_][A-Za-z0-9_]*/
    NUMBER: /[0-9]+/
    STRING: /"(\\.|[^"\\])*"/s
    COMP_OP: /[<>=!]=|[<>]/
    ADD_OP: /[+-]/
    MUL_OP: /[*\/%]/
    COMMENT: /@[^\n]*/

    %import common.WS
    %ignore WS
"""


MOCHA_PARSER = Lark(
    MOCHA_GRAMMAR,
    parser='lalr',
    lexer='basic',
    propagate_positions=True,
    maybe_placeholders=True,
)


class ASTTransformer(Transformer):
    """Transforms the raw parse tree into an AST."""

    def start(self, items):
        # top-level comments are dropped, block comments are kept
        return [item for item in items if not isinstance(item, CommentStatement)]

    def block(self, items):
        return list(items)

    def comment(self, items):
        return CommentStatement(str(items[0])[1:])

    def def_decl(self, items):
        mut_token, name, value = items
        return DeclarationStatement(str(name), value, mutable=mut_token is not None)

    def mut_decl(self, items):
        _, name, value = items
        return DeclarationStatement(str(name), value, mutable=True)

    def assignment(self, items):
        name, value = items
        return AssignmentStatement(str(name), value)

    def update_assign(self, items):
        return self.assignment(items)

    def if_stmt(self, items):
        condition, then_branch = items[0], items[1]
        else_branch = items[-1]
        else_ifs = list(items[2:-1])
        return IfStatement(condition, then_branch, else_ifs, else_branch)

    def elif_clause(self, items):
        condition, body = items
        return ElseIfClause(condition, body)

    def else_clause(self, items):
        return items[0]

    def for_stmt(self, items):
        init, condition, update, body = items
        return ForStatement(init, condition, update, body)

    def return_stmt(self, items):
        return ReturnStatement(items[0])

    def write_stmt(self, items):
        return self._write(WriteStatement, items[0])

    def writeln_stmt(self, items):
        return self._write(WriteLineStatement, items[0])

    def _write(self, node_type, payload: Node):
        # a bare string literal is written verbatim
        if isinstance(payload, StringLiteral):
            return node_type(text=payload.value)
        return node_type(expr=payload)

    # Expressions
    def _fold_left(self, items):
        left = items[0]
        i = 1
        while i < len(items):
            op = items[i]
            right = items[i + 1]
            left = BinaryExpression(left, str(op), right)
            i += 2
        return left

    def comparison(self, items):
        return self._fold_left(items)

    def sum(self, items):
        return self._fold_left(items)

    def product(self, items):
        return self._fold_left(items)

    def power_op(self, items):
        base, exponent = items
        return BinaryExpression(base, '^', exponent)

    def number(self, items):
        return NumberLiteral(number_from_text(str(items[0])))

    def string(self, items):
        return StringLiteral(unescape(str(items[0])[1:-1]))

    def true(self, items):
        return BooleanLiteral(True)

    def false(self, items):
        return BooleanLiteral(False)

    def identifier(self, items):
        return Identifier(str(items[0]))


def parse_source(source: str) -> List[Node]:
    """Parse MochaScript source into the top-level statement list."""
    try:
        tree = MOCHA_PARSER.parse(source)
    except UnexpectedInput as e:
        raise ParseError(str(e)) from e
    return ASTTransformer().transform(tree)
