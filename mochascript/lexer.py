"""Lexer for MochaScript.

`lex` turns source text into a flat list of tokens in one left-to-right
pass. String literals come out as three tokens (delimiter, content,
delimiter) and `@` comments as a single COMMENT token so that the parser
can decide what to do with them.
"""

from __future__ import annotations

from typing import List

from .errors import UnexpectedCharacterError, UnterminatedStringError
from .tokens import (
    BINARY_OPERATORS, COMMENT_SIGIL, COMPARISON_OPERATORS, KEYWORDS,
    PUNCTUATION, Token, TokenKind,
)

ESCAPES = {'n': '\n', 't': '\t'}


def classify_word(word: str) -> TokenKind:
    """Keyword kind for `word`, else its identifier class."""
    if word in KEYWORDS:
        return KEYWORDS[word]
    if word.isdigit():
        return TokenKind.NUMERIC
    if not any(ch.isdigit() for ch in word):
        return TokenKind.ALPHA
    return TokenKind.ALPHANUM


def unescape(raw: str) -> str:
    """Decode the backslash escapes of a string literal body."""
    chars: List[str] = []
    i = 0
    while i < len(raw):
        ch = raw[i]
        if ch == '\\' and i + 1 < len(raw):
            i += 1
            ch = ESCAPES.get(raw[i], raw[i])
        chars.append(ch)
        i += 1
    return ''.join(chars)


def is_word_start(ch: str) -> bool:
    return ch.isascii() and (ch.isalpha() or ch == '_')


def is_word_char(ch: str) -> bool:
    return ch.isascii() and (ch.isalnum() or ch == '_')


def lex(source: str) -> List[Token]:
    """Convert source code into a list of tokens."""
    tokens: List[Token] = []
    i = 0
    line = 1
    col = 1
    length = len(source)

    def advance(n: int = 1):
        nonlocal i, col, line
        for _ in range(n):
            if i < length and source[i] == '\n':
                line += 1
                col = 1
            else:
                col += 1
            i += 1

    while i < length:
        c = source[i]
        if c.isspace():
            advance()
            continue
        # <= >= == != before their one-character prefixes
        pair = source[i:i + 2]
        if pair in COMPARISON_OPERATORS:
            tokens.append(Token(TokenKind.COMPARISON_OP, pair, line, col))
            advance(2)
            continue
        if c == '"':
            start_line, start_col = line, col
            tokens.append(Token(TokenKind.STR_DELIM, None, line, col))
            advance()
            chars: List[str] = []
            content_line, content_col = line, col
            while i < length and source[i] != '"':
                ch = source[i]
                if ch == '\\':
                    advance()
                    if i >= length:
                        break
                    ch = ESCAPES.get(source[i], source[i])
                chars.append(ch)
                advance()
            if i >= length:
                raise UnterminatedStringError(start_line, start_col)
            tokens.append(Token(TokenKind.STR, ''.join(chars), content_line, content_col))
            tokens.append(Token(TokenKind.STR_DELIM, None, line, col))
            advance()
            continue
        if c == COMMENT_SIGIL:
            start_col = col
            advance()
            start_i = i
            while i < length and source[i] != '\n':
                advance()
            tokens.append(Token(TokenKind.COMMENT, source[start_i:i], line, start_col))
            continue
        if is_word_start(c):
            start_col = col
            start_i = i
            while i < length and is_word_char(source[i]):
                advance()
            word = source[start_i:i]
            kind = classify_word(word)
            text = None if word in KEYWORDS else word
            tokens.append(Token(kind, text, line, start_col))
            continue
        if c.isascii() and c.isdigit():
            start_col = col
            start_i = i
            while i < length and source[i].isascii() and source[i].isdigit():
                advance()
            tokens.append(Token(TokenKind.NUMERIC, source[start_i:i], line, start_col))
            continue
        if c in BINARY_OPERATORS:
            tokens.append(Token(TokenKind.BINARY_OP, c, line, col))
            advance()
            continue
        if c in COMPARISON_OPERATORS:
            tokens.append(Token(TokenKind.COMPARISON_OP, c, line, col))
            advance()
            continue
        if c in PUNCTUATION:
            tokens.append(Token(PUNCTUATION[c], None, line, col))
            advance()
            continue
        raise UnexpectedCharacterError(c, line, col)
    return tokens
