"""Interactive MochaScript shell. Uses cmd as backend."""

import cmd
import sys
from typing import Callable, List, Optional

from .ast import Node
from .environment import Environment
from .errors import MochaError
from .formatters import format_ast, format_tokens
from .interpreter import Interpreter
from .lexer import lex
from .parser import parse

VERSION = '0.0.1'


class Shell(cmd.Cmd):
    """Read-eval-print loop sharing one Environment across lines.

    An error aborts only the current line. `ret n` terminates the process
    with exit code n, exactly like a program run.
    """
    intro = f"MochaScript v{VERSION}\nType 'exit' or press Ctrl-D to leave."
    prompt = "> "

    def __init__(self, interpreter: Optional[Interpreter] = None,
                 front_end: Optional[Callable[[str], List[Node]]] = None, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.interpreter = interpreter or Interpreter()
        self.front_end = front_end
        self.env = Environment()
        self.line_num = 0

    def parse_line(self, line: str) -> List[Node]:
        if self.front_end is not None:
            return self.front_end(line)
        tokens = lex(line)
        self.interpreter.debug(format_tokens(tokens))
        return parse(tokens)

    def onecmd(self, line):
        """Treat only a bare `exit` or EOF as a shell command.

        Everything else is MochaScript, so variables named `exit` or
        `help` are assigned rather than dispatched to `do_*` methods.
        """
        command = line.strip()
        if command == 'exit':
            return self.do_exit('')
        if command == 'EOF':
            return self.do_EOF('')
        if not command:
            return self.emptyline()
        return self.default(line)

    def default(self, line):
        """Executes one line of MochaScript."""
        self.line_num += 1
        try:
            program = self.parse_line(line)
            self.interpreter.debug(format_ast(program))
            self.interpreter.run(program, self.env)
        except MochaError as e:
            print(f"{e.phase} error (line {self.line_num}): {e}", file=sys.stderr)
        finally:
            # nothing may leak into the next input
            while self.env.depth > 1:
                self.env.pop_scope()
        sys.stdout.flush()

    def emptyline(self):
        """Do not repeat previous command on empty line."""
        return False

    def do_exit(self, arg):
        """Exits the interpreter."""
        print(">> Exiting Process", file=sys.stderr)
        return True

    def do_EOF(self, arg):
        """Exits the interpreter."""
        print()
        return self.do_exit(arg)
