"""CLI entry point for the MochaScript interpreter.

Usage:
    python -m mochascript [-v|-vv|-vvv] [--parser {handwritten,lark}] <program_file>
    python -m mochascript [-v...] --tokens <program_file>
    python -m mochascript [-v...] --dump-ast <program_file>
    python -m mochascript [-v...] --emit-ast <program_file>
    python -m mochascript [-v...] --ast <ast_json_file>
    python -m mochascript [-v...]

Options:
  -v            Increase debug verbosity (can be repeated)
  --parser      Front end used to parse source text (default: handwritten)
  --tokens      Print the token stream of the given file and exit
  --dump-ast    Print a readable AST of the given file and exit
  --emit-ast    Parse the given file and emit an AST JSON file
  --ast         Execute a previously emitted AST JSON file

Without a program file an interactive shell is started. Debug information
is written to `debug.txt` in the current directory when verbosity is
greater than zero. A top-level `ret` in the program becomes the process
exit code; any error is reported on stderr and exits with status 1.
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Callable, List, Optional

from .ast import Node
from .ast_json import program_from_obj, program_to_obj
from .environment import Environment
from .errors import MochaError
from .formatters import format_ast, format_tokens
from .interpreter import Interpreter
from .lexer import lex
from .parser import parse_program
from .repl import Shell


def select_front_end(name: str) -> Callable[[str], List[Node]]:
    if name == 'lark':
        from .grammar import parse_source
        return parse_source
    return parse_program


def read_source(path_arg: str) -> str:
    program_file = Path(path_arg)
    if not program_file.exists():
        print(f"Error: file {program_file} not found", file=sys.stderr)
        sys.exit(1)
    with open(program_file, 'r', encoding='utf-8') as f:
        return f.read()


def execute(program: List[Node], debug_level: int) -> None:
    interpreter = Interpreter(debug_level=debug_level)
    try:
        interpreter.run(program, Environment())
    except MochaError as e:
        sys.stdout.flush()
        print(f"{e.phase} error: {e}", file=sys.stderr)
        sys.exit(1)
    finally:
        interpreter.close()


def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(prog='mochascript', description="MochaScript language interpreter")
    parser.add_argument('-v', action='count', default=0, help='increase debug verbosity (can be repeated)')
    parser.add_argument('--parser', choices=('handwritten', 'lark'), default='handwritten',
                        help='front end used to parse source text')
    group = parser.add_mutually_exclusive_group()
    group.add_argument('--tokens', metavar='MS_FILE', help='print the token stream of the given file')
    group.add_argument('--dump-ast', metavar='MS_FILE', help='print a readable AST of the given file')
    group.add_argument('--emit-ast', metavar='MS_FILE', help='emit AST JSON for the given .ms file')
    group.add_argument('--ast', metavar='AST_JSON_FILE', help='execute AST from a JSON file')
    parser.add_argument('program', nargs='?', help='MochaScript program file (.ms) to execute')
    args = parser.parse_args(argv)
    front_end = select_front_end(args.parser)

    try:
        if args.tokens:
            print(format_tokens(lex(read_source(args.tokens))))
            return

        if args.dump_ast:
            print(format_ast(front_end(read_source(args.dump_ast))))
            return

        # Emit AST mode
        if args.emit_ast:
            program_file = Path(args.emit_ast)
            ast_program = front_end(read_source(args.emit_ast))
            out_path = program_file.with_name(program_file.name + '.ast.json')
            with open(out_path, 'w', encoding='utf-8') as out:
                json.dump(program_to_obj(ast_program), out, ensure_ascii=False, indent=2)
            print(str(out_path))
            return

        # Execute from AST JSON
        if args.ast:
            ast_path = Path(args.ast)
            if not ast_path.exists():
                print(f"Error: file {ast_path} not found", file=sys.stderr)
                sys.exit(1)
            with open(ast_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
            try:
                ast_program = program_from_obj(data)
            except (TypeError, ValueError) as e:
                print(f"Error: invalid AST file {ast_path}: {e}", file=sys.stderr)
                sys.exit(1)
            execute(ast_program, args.v)
            return

        if not args.program:
            shell_front_end = front_end if args.parser == 'lark' else None
            Shell(Interpreter(debug_level=args.v, debug_file=None), front_end=shell_front_end).cmdloop()
            return

        execute(front_end(read_source(args.program)), args.v)
    except MochaError as e:
        # lex and parse failures; runtime errors are reported by execute()
        print(f"{e.phase} error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == '__main__':
    main()
