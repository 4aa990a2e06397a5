"""Tree-walking interpreter for MochaScript.

The interpreter executes the statement list produced by the parser against
an explicit `Environment`. Statements return either None or a
`ReturnSignal`; a signal short-circuits every enclosing block until it
reaches the top level, where it becomes the program's exit code.
"""

from __future__ import annotations

import math
import sys
from typing import Any, Callable, List, Optional, TextIO

from .ast import (
    AssignmentStatement, BinaryExpression, BooleanLiteral, CommentStatement,
    DeclarationStatement, EXPRESSION_NODES, ForStatement, Identifier,
    IfStatement, Node, NumberLiteral, ReturnStatement, StringLiteral,
    WriteLineStatement, WriteStatement,
)
from .environment import Environment
from .errors import (
    DivisionByZeroError, IllegalIdentifierError, InvalidWritePayloadError,
    ProgramExit, ReturnSignal, UndeclaredAssignmentError, UnknownNodeError,
    UnknownOperatorError,
)
from .parser import parse_program
from .tokens import RESERVED_WORDS
from .types import (
    NAN, Number, Scalar, clamp_number, is_truthy, to_exit_code, to_number,
    to_string, type_name,
)

Emit = Callable[[str], None]

ARITHMETIC_OPERATORS = frozenset('+-*/%^')


def write_stdout(text: str):
    sys.stdout.write(text)
    sys.stdout.flush()


class Interpreter:
    """Core interpreter that executes a MochaScript AST."""
    def __init__(self, emit: Optional[Emit] = None, debug_level: int = 0,
                 debug_file: Optional[str] = 'debug.txt'):
        self.emit = emit or write_stdout
        self.debug_level = debug_level
        self.debug_fp: Optional[TextIO] = None
        if debug_level > 0 and debug_file:
            self.debug_fp = open(debug_file, 'w', encoding='utf-8')

    def debug(self, msg: str):
        if self.debug_level > 0:
            if self.debug_fp:
                self.debug_fp.write(msg + '\n')
                self.debug_fp.flush()
            else:
                print(msg, file=sys.stderr)

    def close(self):
        if self.debug_fp:
            self.debug_fp.close()
            self.debug_fp = None

    # Public API
    def run(self, program: List[Node], env: Environment):
        """Execute a top-level statement list.

        A `ret` reaching this level, directly or out of a nested block,
        raises `ProgramExit` with the value converted to an exit code.
        """
        for stmt in program:
            result = self.eval_stmt(stmt, env)
            if isinstance(result, ReturnSignal):
                code = to_exit_code(result.value)
                self.debug(f"exit {code} (ret {result.value!r})")
                raise ProgramExit(code, result.value)

    def execute_block(self, statements: List[Node], env: Environment) -> Optional[ReturnSignal]:
        for stmt in statements:
            result = self.eval_stmt(stmt, env)
            if isinstance(result, ReturnSignal):
                return result
        return None

    def eval_stmt(self, node: Node, env: Environment) -> Optional[ReturnSignal]:
        if isinstance(node, DeclarationStatement):
            if node.identifier in RESERVED_WORDS:
                raise IllegalIdentifierError(node.identifier)
            value = self.eval_expr(node.value, env)
            env.declare_var(node.identifier, value, node.mutable)
            if self.debug_level >= 2:
                kind = 'mut' if node.mutable else 'def'
                self.debug(f"{kind} {node.identifier}: {type_name(value)} = {value!r}")
            return None
        if isinstance(node, AssignmentStatement):
            if not env.has_var(node.identifier):
                raise UndeclaredAssignmentError(node.identifier)
            value = self.eval_expr(node.value, env)
            env.assign_var(node.identifier, value)
            if self.debug_level >= 2:
                self.debug(f"assign {node.identifier} = {value!r}")
            return None
        if isinstance(node, IfStatement):
            return self.eval_if(node, env)
        if isinstance(node, ForStatement):
            return self.eval_for(node, env)
        if isinstance(node, WriteStatement):
            has_text = node.text is not None
            has_expr = node.expr is not None
            if has_text == has_expr:
                raise InvalidWritePayloadError()
            if has_text:
                self.emit(node.text)
            else:
                self.emit(to_string(self.eval_expr(node.expr, env)))
            if isinstance(node, WriteLineStatement):
                self.emit('\n')
            return None
        if isinstance(node, ReturnStatement):
            return ReturnSignal(self.eval_expr(node.value, env))
        if isinstance(node, CommentStatement):
            return None
        raise UnknownNodeError(node)

    def eval_if(self, node: IfStatement, env: Environment) -> Optional[ReturnSignal]:
        # branches run in the enclosing scope
        cond = self.eval_expr(node.condition, env)
        truthy = is_truthy(cond)
        if self.debug_level >= 3:
            self.debug(f"if condition {cond!r} -> {truthy}")
        if truthy:
            return self.execute_block(node.then_branch, env)
        for clause in node.else_ifs:
            cond = self.eval_expr(clause.condition, env)
            truthy = is_truthy(cond)
            if self.debug_level >= 3:
                self.debug(f"elif condition {cond!r} -> {truthy}")
            if truthy:
                return self.execute_block(clause.body, env)
        if node.else_branch is not None:
            return self.execute_block(node.else_branch, env)
        return None

    def eval_for(self, node: ForStatement, env: Environment) -> Optional[ReturnSignal]:
        # init bindings live in the enclosing scope and outlast the loop
        self.eval_stmt(node.init, env)
        iteration = 0
        while to_number(self.eval_expr(node.condition, env)) != 0:
            if self.debug_level >= 3:
                self.debug(f"for iteration {iteration}")
            res = self.execute_block(node.body, env)
            if isinstance(res, ReturnSignal):
                return res
            if isinstance(node.update, EXPRESSION_NODES):
                self.eval_expr(node.update, env)
            else:
                self.eval_stmt(node.update, env)
            iteration += 1
        return None

    def eval_expr(self, node: Node, env: Environment) -> Scalar:
        if isinstance(node, (NumberLiteral, StringLiteral, BooleanLiteral)):
            return node.value
        if isinstance(node, Identifier):
            return env.get_var(node.name)
        if isinstance(node, BinaryExpression):
            left = to_number(self.eval_expr(node.left, env))
            right = to_number(self.eval_expr(node.right, env))
            return self.apply_binary_op(node.operator, left, right)
        raise UnknownNodeError(node)

    def apply_binary_op(self, op: str, a: Number, b: Number) -> Number:
        if op in ARITHMETIC_OPERATORS:
            return clamp_number(self.apply_arithmetic(op, a, b))
        if op == '>': return 1 if a > b else 0
        if op == '<': return 1 if a < b else 0
        if op == '>=': return 1 if a >= b else 0
        if op == '<=': return 1 if a <= b else 0
        if op == '==': return 1 if a == b else 0
        if op == '!=': return 1 if a != b else 0
        raise UnknownOperatorError(op)

    def apply_arithmetic(self, op: str, a: Number, b: Number) -> Number:
        if op == '+':
            return a + b
        if op == '-':
            return a - b
        if op == '*':
            return a * b
        if op == '/':
            if b == 0:
                raise DivisionByZeroError(op)
            if isinstance(a, int) and isinstance(b, int) and a % b == 0:
                return a // b
            try:
                return a / b
            except OverflowError:
                return math.inf if (a < 0) == (b < 0) else -math.inf
        if op == '%':
            if b == 0:
                raise DivisionByZeroError(op)
            if isinstance(a, int) and isinstance(b, int):
                # remainder takes the sign of the dividend
                r = abs(a) % abs(b)
                return -r if a < 0 else r
            if math.isinf(a):
                return NAN
            return math.fmod(a, b)
        if op == '^':
            if isinstance(a, int) and isinstance(b, int) and b >= 0 and fits_float(a, b):
                return a ** b
            try:
                return math.pow(a, b)
            except OverflowError:
                odd = float(b).is_integer() and int(b) % 2 == 1
                return -math.inf if a < 0 and odd else math.inf
            except ValueError:
                return NAN
        raise UnknownOperatorError(op)


def fits_float(base: int, exponent: int) -> bool:
    """Whether base ** exponent stays within the range of a double."""
    if abs(base) <= 1 or exponent == 0:
        return True
    return exponent * math.log10(abs(base)) <= 308.3


def interpret(ast: List[Node], env: Environment, emit: Optional[Emit] = None):
    """Execute `ast` against `env`, sending output through `emit`."""
    Interpreter(emit=emit).run(ast, env)


def run_program(source: str, env: Optional[Environment] = None, emit: Optional[Emit] = None,
                debug_level: int = 0) -> Environment:
    """Convenience function to parse and run MochaScript source.

    Returns the environment the program ran in so callers can inspect the
    resulting bindings.
    """
    ast_program = parse_program(source)
    env = env if env is not None else Environment()
    interpreter = Interpreter(emit=emit, debug_level=debug_level)
    try:
        interpreter.run(ast_program, env)
    finally:
        interpreter.close()
    return env


def run_file(file_path: str, debug_level: int = 0) -> Environment:
    """Run a MochaScript file, returning its environment."""
    with open(file_path, 'r', encoding='utf-8') as f:
        source = f.read()
    return run_program(source, debug_level=debug_level)
