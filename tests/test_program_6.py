from pathlib import Path

import pytest

from mochascript.environment import Environment
from mochascript.errors import ProgramExit
from mochascript.interpreter import Interpreter
from mochascript.parser import parse_program

PROGRAM = Path(__file__).resolve().parent.parent / 'examples' / 'program_6.ms'


def test_program_6_nested_return_exit_code(capsys):
    source = PROGRAM.read_text(encoding='utf-8')
    ast = parse_program(source)
    interp = Interpreter()
    env = Environment()
    with pytest.raises(ProgramExit) as exc:
        interp.run(ast, env)
    out = capsys.readouterr().out
    # the ret inside the if inside the for ends the whole program
    assert out == 'found\n'
    assert exc.value.code == 64
    assert env.get_var('k') == 8
