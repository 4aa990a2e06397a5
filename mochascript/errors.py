"""Exception types raised by the MochaScript lexer, parser and interpreter."""

from typing import Any, Optional


class MochaError(Exception):
    """Base class for every error a MochaScript program can trigger."""
    phase = 'Runtime'


###############################################################################
# Lexical errors
###############################################################################

class LexError(MochaError):
    phase = 'Lex'

    def __init__(self, message: str, line: int, column: int):
        super().__init__(f"{message} at {line}:{column}")
        self.line = line
        self.column = column


class UnexpectedCharacterError(LexError):
    def __init__(self, char: str, line: int, column: int):
        super().__init__(f"unexpected character {char!r}", line, column)
        self.char = char


class UnterminatedStringError(LexError):
    def __init__(self, line: int, column: int):
        super().__init__("unterminated string literal", line, column)


###############################################################################
# Syntax errors
###############################################################################

class ParseError(MochaError):
    phase = 'Parse'


class UnexpectedTokenError(ParseError):
    def __init__(self, token):
        super().__init__(f"unexpected token {token.describe()} at {token.position}")
        self.token = token


class ExpectedTokenError(ParseError):
    """A required token kind was missing; `actual` is None at end of input."""
    def __init__(self, expected, actual):
        got = 'end of input' if actual is None else f"{actual.describe()} at {actual.position}"
        super().__init__(f"expected {expected.value}, got {got}")
        self.expected = expected
        self.actual = actual


class UnexpectedEndOfInputError(ParseError):
    def __init__(self, context: str = 'statement'):
        super().__init__(f"unexpected end of input in {context}")


###############################################################################
# Evaluation errors
###############################################################################

class EvaluationError(MochaError):
    pass


class UndefinedVariableError(EvaluationError):
    def __init__(self, name: str, what: str = 'variable'):
        super().__init__(f"undefined {what} {name}")
        self.name = name


class UndefinedFunctionError(UndefinedVariableError):
    def __init__(self, name: str):
        super().__init__(name, 'function')


class DuplicateDeclarationError(EvaluationError):
    def __init__(self, name: str, what: str = 'variable'):
        super().__init__(f"{what} {name} already declared in this scope")
        self.name = name


class ImmutableAssignmentError(EvaluationError):
    def __init__(self, name: str):
        super().__init__(f"cannot assign to immutable variable {name}")
        self.name = name


class UndeclaredAssignmentError(EvaluationError):
    def __init__(self, name: str):
        super().__init__(f"cannot assign to undeclared variable {name}")
        self.name = name


class IllegalIdentifierError(EvaluationError):
    def __init__(self, name: str):
        super().__init__(f"identifier cannot be a keyword: {name}")
        self.name = name


class InvalidWritePayloadError(EvaluationError):
    def __init__(self):
        super().__init__("write payload needs exactly one of text or expression")


class UnknownOperatorError(EvaluationError):
    def __init__(self, operator: str):
        super().__init__(f"unknown operator {operator}")
        self.operator = operator


class UnknownNodeError(EvaluationError):
    def __init__(self, node: Any):
        super().__init__(f"unknown node {type(node).__name__}")
        self.node = node


class PopGlobalScopeError(EvaluationError):
    def __init__(self):
        super().__init__("cannot pop the global scope")


class DivisionByZeroError(EvaluationError):
    def __init__(self, operator: str):
        what = 'modulo' if operator == '%' else 'division'
        super().__init__(f"{what} by zero")
        self.operator = operator


###############################################################################
# Control flow
###############################################################################

class ReturnSignal(Exception):
    """Carries a `ret` value out of nested blocks up to the top level."""
    def __init__(self, value: Any):
        super().__init__('return')
        self.value = value


class ProgramExit(SystemExit):
    """Raised by a top-level `ret`; terminates the host with `code`."""
    def __init__(self, code: int, value: Optional[Any] = None):
        super().__init__(code)
        self.value = value
