import json

import pytest

from mochascript.__main__ import main
from mochascript.errors import ProgramExit
from mochascript.interpreter import Interpreter
from mochascript.repl import Shell


@pytest.fixture
def program(tmp_path):
    def write(source, name='prog.ms'):
        path = tmp_path / name
        path.write_text(source, encoding='utf-8')
        return path
    return write


def test_runs_a_program(program, capsys):
    main([str(program('writeln("hi"); write(2 + 3 * 4);'))])
    assert capsys.readouterr().out == "hi\n14"


def test_top_level_return_sets_exit_code(program):
    with pytest.raises(SystemExit) as exc:
        main([str(program('ret 7;'))])
    assert exc.value.code == 7


def test_runtime_error_exits_with_one(program, capsys):
    with pytest.raises(SystemExit) as exc:
        main([str(program('write("a"); write(missing);'))])
    assert exc.value.code == 1
    captured = capsys.readouterr()
    assert captured.out == "a"
    assert "Runtime error: undefined variable missing" in captured.err


def test_parse_error_exits_with_one(program, capsys):
    with pytest.raises(SystemExit) as exc:
        main([str(program('def = 1;'))])
    assert exc.value.code == 1
    assert "Parse error" in capsys.readouterr().err


def test_lex_error_exits_with_one(program, capsys):
    with pytest.raises(SystemExit) as exc:
        main([str(program('def a = 1 & 2;'))])
    assert exc.value.code == 1
    assert "Lex error: unexpected character '&' at 1:11" in capsys.readouterr().err


def test_missing_file(tmp_path, capsys):
    with pytest.raises(SystemExit) as exc:
        main([str(tmp_path / 'nope.ms')])
    assert exc.value.code == 1
    assert "not found" in capsys.readouterr().err


def test_lark_front_end(program, capsys):
    main(['--parser', 'lark', str(program('for (def mut i = 0; i < 3; i = i + 1) { write(i); }'))])
    assert capsys.readouterr().out == "012"


def test_tokens_dump(program, capsys):
    main(['--tokens', str(program('def a = 1;'))])
    lines = capsys.readouterr().out.splitlines()
    assert lines[0] == "{ type: DEF, value: N/A }"
    assert lines[1] == "{ type: ALPHA, value: a }"


def test_ast_dump(program, capsys):
    main(['--dump-ast', str(program('def mut a = 1; if a > 0 { write("x"); }'))])
    lines = capsys.readouterr().out.splitlines()
    assert lines == [
        "00: Declare mut a = Num(1)",
        '01: if ((Id(a) > Num(0))) { WriteStr("x") }',
    ]


def test_emit_and_execute_ast(program, capsys):
    source_path = program('def x = 20; writeln(x + 1);')
    main(['--emit-ast', str(source_path)])
    out_path = capsys.readouterr().out.strip()
    assert out_path.endswith('prog.ms.ast.json')
    with open(out_path, encoding='utf-8') as f:
        assert json.load(f)["type"] == "Program"
    main(['--ast', out_path])
    assert capsys.readouterr().out == "21\n"


def make_shell():
    out = []
    shell = Shell(Interpreter(emit=out.append, debug_file=None))
    return shell, out


def test_repl_keeps_state_between_lines():
    shell, out = make_shell()
    shell.onecmd('def mut a = 1;')
    shell.onecmd('a = a + 1;')
    shell.onecmd('write(a);')
    assert ''.join(out) == "2"
    assert shell.env.depth == 1


def test_repl_survives_errors(capsys):
    shell, out = make_shell()
    shell.onecmd('def a = 1;')
    shell.onecmd('write(zz);')
    shell.onecmd('def a = 2;')
    shell.onecmd('write(a);')
    err = capsys.readouterr().err
    assert "Runtime error (line 2): undefined variable zz" in err
    assert "already declared" in err
    assert ''.join(out) == "1"


def test_repl_ignores_comment_lines():
    shell, out = make_shell()
    shell.onecmd('@ just a note')
    shell.onecmd('')
    assert out == []


def test_repl_return_terminates():
    shell, _ = make_shell()
    with pytest.raises(ProgramExit) as exc:
        shell.onecmd('ret 3;')
    assert exc.value.code == 3


def test_repl_variables_named_like_commands():
    shell, out = make_shell()
    for line in ['def mut help = 1;', 'help = help + 1;', 'def mut exit = 1;', 'exit = 5;',
                 'write(help); write(exit);']:
        assert not shell.onecmd(line)
    assert ''.join(out) == "25"


def test_repl_big_numbers_do_not_end_the_session():
    shell, out = make_shell()
    shell.onecmd('write(9 ^ 9 ^ 9);')
    shell.onecmd('write(1);')
    assert ''.join(out) == "Infinity1"


def test_repl_exit_command_allows_surrounding_space():
    shell, _ = make_shell()
    assert shell.onecmd('  exit  ') is True


def test_repl_exit_command():
    shell, _ = make_shell()
    assert shell.onecmd('exit') is True
    assert "MochaScript v0.0.1" in shell.intro
