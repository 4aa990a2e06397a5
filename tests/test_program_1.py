from pathlib import Path

from mochascript.environment import Environment
from mochascript.interpreter import Interpreter
from mochascript.parser import parse_program

PROGRAM = Path(__file__).resolve().parent.parent / 'examples' / 'program_1.ms'


def test_program_1_hello_world(capsys):
    source = PROGRAM.read_text(encoding='utf-8')
    ast = parse_program(source)
    interp = Interpreter()
    interp.run(ast, Environment())
    out = capsys.readouterr().out
    assert out == 'Hello World!!\n'
