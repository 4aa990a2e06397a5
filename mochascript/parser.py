"""Recursive-descent parser for MochaScript.

Statements are parsed by dispatching on the leading token; expressions use
precedence climbing over the table below. `parse` returns the top-level
statement list.
"""

from __future__ import annotations

from typing import Callable, Dict, List, Optional, Type

from .ast import (
    AssignmentStatement, BinaryExpression, BooleanLiteral, CommentStatement,
    DeclarationStatement, ElseIfClause, ForStatement, Identifier, IfStatement,
    Node, NumberLiteral, ReturnStatement, StringLiteral, WriteLineStatement,
    WriteStatement,
)
from .errors import ExpectedTokenError, UnexpectedEndOfInputError, UnexpectedTokenError
from .lexer import lex
from .tokens import IDENTIFIER_KINDS, Token, TokenKind
from .types import number_from_text

PRECEDENCE: Dict[str, int] = {
    '^': 4,
    '*': 3, '/': 3, '%': 3,
    '+': 2, '-': 2,
    '>': 1, '<': 1, '>=': 1, '<=': 1, '==': 1, '!=': 1,
}
RIGHT_ASSOCIATIVE = frozenset({'^'})
OPERATOR_KINDS = frozenset({TokenKind.BINARY_OP, TokenKind.COMPARISON_OP})


class Parser:
    def __init__(self, tokens: List[Token]):
        self.tokens = tokens
        self.pos = 0
        self.dispatch: Dict[TokenKind, Callable[[], Node]] = {
            TokenKind.COMMENT: self.parse_comment,
            TokenKind.DEF: self.parse_declaration,
            TokenKind.MUT: self.parse_declaration,
            TokenKind.ALPHA: self.parse_assignment,
            TokenKind.ALPHANUM: self.parse_assignment,
            TokenKind.IF: self.parse_if_stmt,
            TokenKind.FOR: self.parse_for_stmt,
            TokenKind.RET: self.parse_return_stmt,
            TokenKind.WRITE: lambda: self.parse_write_stmt(TokenKind.WRITE, WriteStatement),
            TokenKind.WRITELN: lambda: self.parse_write_stmt(TokenKind.WRITELN, WriteLineStatement),
        }

    def peek(self, offset: int = 0) -> Optional[Token]:
        if self.pos + offset < len(self.tokens):
            return self.tokens[self.pos + offset]
        return None

    def advance(self) -> Token:
        token = self.peek()
        if token is None:
            raise UnexpectedEndOfInputError()
        self.pos += 1
        return token

    def match(self, kind: TokenKind, offset: int = 0) -> bool:
        token = self.peek(offset)
        return token is not None and token.kind == kind

    def expect(self, kind: TokenKind) -> Token:
        token = self.peek()
        if token is None or token.kind != kind:
            raise ExpectedTokenError(kind, token)
        self.pos += 1
        return token

    def expect_identifier(self) -> Token:
        token = self.peek()
        if token is None or token.kind not in IDENTIFIER_KINDS:
            raise ExpectedTokenError(TokenKind.ALPHA, token)
        self.pos += 1
        return token

    def skip_comments(self):
        while self.match(TokenKind.COMMENT):
            self.pos += 1

    def parse_program(self) -> List[Node]:
        statements: List[Node] = []
        while self.peek() is not None:
            self.skip_comments()
            if self.peek() is None:
                break
            statements.append(self.parse_statement())
        return statements

    def parse_statement(self) -> Node:
        token = self.peek()
        if token is None:
            raise UnexpectedEndOfInputError()
        handler = self.dispatch.get(token.kind)
        if handler is None:
            raise UnexpectedTokenError(token)
        return handler()

    def parse_block(self) -> List[Node]:
        self.expect(TokenKind.LBRACE)
        statements: List[Node] = []
        while not self.match(TokenKind.RBRACE):
            statements.append(self.parse_statement())
        self.expect(TokenKind.RBRACE)
        return statements

    def parse_comment(self) -> CommentStatement:
        token = self.expect(TokenKind.COMMENT)
        return CommentStatement(token.text or '')

    def parse_declaration(self) -> DeclarationStatement:
        # def x = ...;  def mut x = ...;  mut x = ...;
        mutable = False
        if self.match(TokenKind.DEF):
            self.advance()
        else:
            self.expect(TokenKind.MUT)
            mutable = True
        if self.match(TokenKind.MUT):
            self.advance()
            mutable = True
        name, value = self.parse_binding()
        return DeclarationStatement(name, value, mutable)

    def parse_assignment(self) -> AssignmentStatement:
        name, value = self.parse_binding()
        return AssignmentStatement(name, value)

    def parse_binding(self):
        """Shared tail of declarations and assignments: `name = value ;`."""
        name_token = self.expect_identifier()
        self.expect(TokenKind.ASSIGN)
        if self.match(TokenKind.STR_DELIM):
            value: Node = StringLiteral(self.parse_string())
        else:
            value = self.parse_expression()
        self.expect(TokenKind.SEMI)
        return name_token.text, value

    def parse_condition(self) -> Node:
        # parentheses around if/elif conditions are optional
        if self.match(TokenKind.LPAREN):
            self.advance()
            condition = self.parse_expression()
            self.expect(TokenKind.RPAREN)
            return condition
        return self.parse_expression()

    def parse_if_stmt(self) -> IfStatement:
        self.expect(TokenKind.IF)
        condition = self.parse_condition()
        then_branch = self.parse_block()
        else_ifs: List[ElseIfClause] = []
        while self.match(TokenKind.ELIF):
            self.advance()
            elif_condition = self.parse_condition()
            else_ifs.append(ElseIfClause(elif_condition, self.parse_block()))
        else_branch = None
        if self.match(TokenKind.ELSE):
            self.advance()
            else_branch = self.parse_block()
        return IfStatement(condition, then_branch, else_ifs, else_branch)

    def parse_for_stmt(self) -> ForStatement:
        self.expect(TokenKind.FOR)
        self.expect(TokenKind.LPAREN)
        if self.match(TokenKind.DEF) or self.match(TokenKind.MUT):
            init: Node = self.parse_declaration()
        else:
            init = self.parse_assignment()
        condition = self.parse_expression()
        self.expect(TokenKind.SEMI)
        # `i = i + 1` needs two tokens of lookahead to tell from an expression
        token = self.peek()
        if token is not None and token.kind in IDENTIFIER_KINDS and self.match(TokenKind.ASSIGN, 1):
            name_token = self.expect_identifier()
            self.expect(TokenKind.ASSIGN)
            update: Node = AssignmentStatement(name_token.text, self.parse_expression())
        else:
            update = self.parse_expression()
        self.expect(TokenKind.RPAREN)
        body = self.parse_block()
        return ForStatement(init, condition, update, body)

    def parse_return_stmt(self) -> ReturnStatement:
        self.expect(TokenKind.RET)
        value = self.parse_expression()
        self.expect(TokenKind.SEMI)
        return ReturnStatement(value)

    def parse_write_stmt(self, keyword: TokenKind, node_type: Type[WriteStatement]) -> WriteStatement:
        self.expect(keyword)
        self.expect(TokenKind.LPAREN)
        if self.match(TokenKind.STR_DELIM):
            node = node_type(text=self.parse_string())
        else:
            node = node_type(expr=self.parse_expression())
        self.expect(TokenKind.RPAREN)
        self.expect(TokenKind.SEMI)
        return node

    def parse_string(self) -> str:
        self.expect(TokenKind.STR_DELIM)
        content = self.expect(TokenKind.STR)
        self.expect(TokenKind.STR_DELIM)
        return content.text or ''

    # Expression parsing (precedence climbing)
    def parse_expression(self, min_prec: int = 0) -> Node:
        left = self.parse_primary()
        while True:
            token = self.peek()
            if token is None or token.kind not in OPERATOR_KINDS:
                break
            prec = PRECEDENCE[token.text]
            if prec < min_prec:
                break
            self.advance()
            next_min = prec if token.text in RIGHT_ASSOCIATIVE else prec + 1
            right = self.parse_expression(next_min)
            left = BinaryExpression(left, token.text, right)
        return left

    def parse_primary(self) -> Node:
        token = self.peek()
        if token is None:
            raise UnexpectedEndOfInputError('expression')
        if token.kind == TokenKind.NUMERIC:
            self.advance()
            return NumberLiteral(number_from_text(token.text))
        if token.kind == TokenKind.STR_DELIM:
            return StringLiteral(self.parse_string())
        if token.kind in (TokenKind.TRUE, TokenKind.FALSE):
            self.advance()
            return BooleanLiteral(token.kind == TokenKind.TRUE)
        if token.kind in IDENTIFIER_KINDS:
            self.advance()
            return Identifier(token.text)
        if token.kind == TokenKind.LPAREN:
            self.advance()
            expr = self.parse_expression()
            self.expect(TokenKind.RPAREN)
            return expr
        raise UnexpectedTokenError(token)


def parse(tokens: List[Token]) -> List[Node]:
    """Parse a token list into the top-level statement list."""
    return Parser(tokens).parse_program()


def parse_program(source: str) -> List[Node]:
    """Lex and parse MochaScript source code."""
    return parse(lex(source))
