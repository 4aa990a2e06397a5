# MochaScript language package
# This package provides a lexer, parser and tree-walking interpreter for MochaScript.
from .environment import Environment
from .errors import MochaError, ProgramExit
from .interpreter import Interpreter, interpret, run_program, run_file
from .lexer import lex
from .parser import parse, parse_program

__all__ = [
    'lex',
    'parse',
    'parse_program',
    'interpret',
    'run_program',
    'run_file',
    'Interpreter',
    'Environment',
    'MochaError',
    'ProgramExit',
]
