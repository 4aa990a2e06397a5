"""Token definitions for the MochaScript lexer."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional


class TokenKind(Enum):
    ALPHA = 'alpha'              # identifier made of letters/underscores
    ALPHANUM = 'alphanum'        # identifier mixing letters and digits
    NUMERIC = 'numeric'          # 123
    STR_DELIM = 'str_delim'      # "
    STR = 'str'                  # string content between delimiters
    COMMENT = 'comment'          # @ ... newline

    DEF = 'def'
    MUT = 'mut'
    RET = 'ret'
    WRITE = 'write'
    WRITELN = 'writeln'
    IF = 'if'
    ELIF = 'elif'
    ELSE = 'else'
    FOR = 'for'
    TRUE = 'true'
    FALSE = 'false'

    BINARY_OP = 'binary_op'          # + - * / % ^
    COMPARISON_OP = 'comparison_op'  # > < >= <= == !=
    ASSIGN = 'assign'
    LPAREN = 'lparen'
    RPAREN = 'rparen'
    LBRACE = 'lbrace'
    RBRACE = 'rbrace'
    SEMI = 'semi'


KEYWORDS: Dict[str, TokenKind] = {
    'def': TokenKind.DEF,
    'mut': TokenKind.MUT,
    'ret': TokenKind.RET,
    'write': TokenKind.WRITE,
    'writeln': TokenKind.WRITELN,
    'if': TokenKind.IF,
    'elif': TokenKind.ELIF,
    'else': TokenKind.ELSE,
    'for': TokenKind.FOR,
    'true': TokenKind.TRUE,
    'false': TokenKind.FALSE,
}

# Words a declaration may not bind. 'return' is not a keyword token but
# stays reserved.
RESERVED_WORDS = frozenset(KEYWORDS) | {'return'}

PUNCTUATION: Dict[str, TokenKind] = {
    '(': TokenKind.LPAREN,
    ')': TokenKind.RPAREN,
    '{': TokenKind.LBRACE,
    '}': TokenKind.RBRACE,
    '=': TokenKind.ASSIGN,
    ';': TokenKind.SEMI,
}

BINARY_OPERATORS = frozenset('+-*/%^')
COMPARISON_OPERATORS = frozenset({'>', '<', '>=', '<=', '==', '!='})
IDENTIFIER_KINDS = frozenset({TokenKind.ALPHA, TokenKind.ALPHANUM})

COMMENT_SIGIL = '@'


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    text: Optional[str] = None
    # Source position is carried for diagnostics only.
    line: int = field(default=0, compare=False)
    column: int = field(default=0, compare=False)

    @property
    def position(self) -> str:
        return f"{self.line}:{self.column}"

    def describe(self) -> str:
        if self.text is None:
            return self.kind.value
        return f"{self.kind.value} {self.text!r}"
