import pytest

from mochascript.ast import (
    BinaryExpression, CommentStatement, DeclarationStatement, IfStatement, Node,
    NumberLiteral, ReturnStatement, WriteStatement,
)
from mochascript.environment import Environment
from mochascript.errors import (
    DivisionByZeroError, DuplicateDeclarationError, IllegalIdentifierError,
    ImmutableAssignmentError, InvalidWritePayloadError, ProgramExit, ReturnSignal,
    UndeclaredAssignmentError, UndefinedVariableError, UnknownNodeError,
    UnknownOperatorError,
)
from mochascript.interpreter import Interpreter, interpret, run_program
from mochascript.parser import parse_program


def run(source, env=None):
    out = []
    if env is None:
        env = Environment()
    interpret(parse_program(source), env, emit=out.append)
    return ''.join(out)


def run_until_exit(source):
    out = []
    with pytest.raises(ProgramExit) as exc:
        interpret(parse_program(source), Environment(), emit=out.append)
    return ''.join(out), exc.value.code


def test_write_and_writeln():
    assert run('write("X"); writeln("Y");') == "XY\n"


def test_expressions_and_comparisons():
    source = """
      def x = 4; mut y = 2;
      write(x + y * 3); write(" ");
      write(x > y); write(" "); write(x == 4);
    """
    assert run(source) == "10 1 1"


def test_precedence():
    assert run("write(2+3*4);") == "14"
    assert run("write(2^3^2);") == "512"


def test_comparison_truthiness():
    assert run("write(4>2); write(4==4);") == "11"
    assert run("write(4<2); write(4!=4); write(3>=3); write(2<=1);") == "0010"


def test_if_elif_else_first_match_wins():
    source = 'if 0>1 { write("a"); } elif 1==1 { write("b"); } else { write("c"); }'
    assert run(source) == "b"


def test_only_first_matching_elif_runs():
    source = 'if 0 { write("a"); } elif 1 { write("b"); } elif 1 { write("c"); }'
    assert run(source) == "b"


def test_else_runs_when_nothing_matches():
    assert run('if 0 { write("a"); } elif 0 { write("b"); } else { write("c"); }') == "c"
    assert run('if 0 { write("a"); }') == ""


def test_for_loop_terminates():
    assert run("for (def mut i = 0; i < 3; i = i + 1) { write(i); }") == "012"


def test_for_loop_with_assignment_init():
    assert run("def mut i = 9; for (i = 0; i < 3; i = i + 1) { write(i); }") == "012"


def test_for_loop_condition_false_initially():
    assert run("for (def mut i = 5; i < 3; i = i + 1) { write(i); } write(i);") == "5"


def test_mutable_reassignment_is_observable():
    assert run("def mut a = 1; a = a + 41; write(a);") == "42"


def test_immutable_assignment_fails():
    with pytest.raises(ImmutableAssignmentError):
        run("def a = 1; a = 2;")


def test_assignment_to_undeclared_variable_fails():
    with pytest.raises(UndeclaredAssignmentError):
        run("b = 1;")


def test_undefined_variable_in_expression():
    with pytest.raises(UndefinedVariableError):
        run("write(q);")


def test_redeclaration_in_same_scope_fails():
    with pytest.raises(DuplicateDeclarationError):
        run("def a = 1; def a = 2;")


def test_keyword_as_identifier_is_rejected():
    with pytest.raises(IllegalIdentifierError):
        run("def return = 1;")
    env = Environment()
    with pytest.raises(IllegalIdentifierError):
        Interpreter().eval_stmt(DeclarationStatement('if', NumberLiteral(1)), env)


def test_output_before_failing_statement_is_kept():
    out = []
    with pytest.raises(UndefinedVariableError):
        interpret(parse_program('write("ok"); write(nope); write("never");'), Environment(), emit=out.append)
    assert out == ["ok"]


def test_top_level_return_exits_with_code():
    out, code = run_until_exit("ret 7;")
    assert code == 7
    assert out == ""


def test_statements_after_return_do_not_run():
    out, code = run_until_exit('write("a"); ret 3; write("b");')
    assert (out, code) == ("a", 3)


def test_return_nested_in_if_inside_for_exits_with_its_value():
    source = """
    for (def mut i = 0; i < 10; i = i + 1) {
        if i == 4 { ret i * 2; }
        write(i);
    }
    write("after");
    """
    assert run_until_exit(source) == ("0123", 8)


def test_return_short_circuits_nested_ifs():
    source = 'if 1 { if 1 { ret 5; } write("no"); } write("no");'
    assert run_until_exit(source) == ("", 5)


def test_return_from_else_branch():
    assert run_until_exit('if 0 { ret 1; } elif 0 { ret 2; } else { ret 3; }') == ("", 3)


def test_non_numeric_return_exits_with_zero():
    assert run_until_exit('ret "abc";')[1] == 0
    assert run_until_exit('ret "12";')[1] == 12
    assert run_until_exit('ret true;')[1] == 1
    assert run_until_exit('ret 7 / 2;')[1] == 3


def test_program_exit_is_a_system_exit():
    with pytest.raises(SystemExit) as exc:
        run("ret 4;")
    assert exc.value.code == 4


def test_nested_return_signal_propagates_from_eval_stmt():
    env = Environment()
    node = IfStatement(NumberLiteral(1), [ReturnStatement(NumberLiteral(9)), WriteStatement(text='x')])
    result = Interpreter(emit=lambda s: None).eval_stmt(node, env)
    assert isinstance(result, ReturnSignal)
    assert result.value == 9


def test_if_branches_do_not_introduce_a_scope():
    env = Environment()
    assert run("if 1 { def inner = 3; } write(inner);", env) == "3"
    assert env.depth == 1


def test_for_variables_outlive_the_loop():
    assert run("for (def mut i = 0; i < 3; i = i + 1) { } write(i);") == "3"


def test_declaration_in_loop_body_collides_on_second_iteration():
    with pytest.raises(DuplicateDeclarationError):
        run("for (def mut i = 0; i < 3; i = i + 1) { def t = i; }")


def test_comments_never_affect_output_or_state():
    source = """
    @ leading
    def mut a = 1; @ trailing
    if a {
        @ inside a branch
        a = 2;
        @ after a statement
    }
    for (def mut i = 0; i < 2; i = i + 1) { @ loop body
        write(i);
    }
    @ before write
    write(a);
    """
    env = Environment()
    assert run(source, env) == "012"
    assert sorted(name for name, _ in env.all_variables()) == ['a', 'i']


def test_comment_node_is_a_no_op():
    assert Interpreter().eval_stmt(CommentStatement("x"), Environment()) is None


def test_division_and_modulo():
    assert run("write(7 / 2);") == "3.5"
    assert run("write(6 / 3);") == "2"
    assert run("write(7 % 3);") == "1"
    assert run("write((0 - 7) % 3);") == "-1"
    assert run("write(2 ^ 0 - 1);") == "0"


def test_division_by_zero():
    with pytest.raises(DivisionByZeroError):
        run("write(1 / 0);")
    with pytest.raises(DivisionByZeroError):
        run("write(7 % (2 - 2));")


def test_negative_exponent_gives_fraction():
    assert run("write(2 ^ (0 - 1));") == "0.5"


def test_big_integers_stay_exact():
    assert run("write(2 ^ 64);") == "18446744073709551616"


def test_numbers_past_double_range_become_infinity():
    assert run("write(10 ^ 5000);") == "Infinity"
    assert run("write(10 ^ 400 / 3);") == "Infinity"
    assert run("def x = 10 ^ 400 / 3; write(x);") == "Infinity"
    assert run("write(9 ^ 9 ^ 9);") == "Infinity"
    assert run("write((0 - 10) ^ 401);") == "-Infinity"
    assert run("write(2 ^ 1023 * 4);") == "Infinity"
    assert run("write(10 ^ 400 % 3);") == "NaN"


def test_huge_number_literal_is_infinity():
    assert run("write(" + "9" * 5000 + ");") == "Infinity"


def test_numeric_strings_follow_plain_decimal_syntax():
    assert run('write("1_0" + 0);') == "NaN"
    assert run('write("inf" + 0); write("nan" + 0);') == "NaNNaN"
    assert run('write("Infinity" + 0);') == "Infinity"
    assert run('write(" 12 " + 1);') == "13"
    assert run('write("1e3" + 0); write(".5" * 2);') == "10001"


def test_large_and_tiny_floats_use_exponent_notation():
    assert run('write("1e22" * 1);') == "1e+22"
    assert run('write("2.5e-7" * 1);') == "2.5e-7"
    assert run('write("1e20" * 1);') == "100000000000000000000"


def test_strings_coerce_to_numbers_in_arithmetic():
    assert run('def s = "5"; write(s + 1);') == "6"
    assert run('def s = "abc"; write(s + 1);') == "NaN"
    assert run('def s = ""; write(s + 1);') == "1"


def test_strings_and_booleans_are_written_as_is():
    assert run('def s = "hey"; write(s);') == "hey"
    assert run("write(true); write(false);") == "truefalse"
    assert run("write(true + 1);") == "2"


def test_truthiness():
    assert run('if false { write("x"); } else { write("y"); }') == "y"
    assert run('def e = ""; if e { write("t"); } else { write("f"); }') == "f"
    assert run('def z = "0"; if z { write("t"); } else { write("f"); }') == "t"
    assert run('if 2 - 2 { write("t"); } else { write("f"); }') == "f"


def test_invalid_write_payload():
    interp = Interpreter(emit=lambda s: None)
    with pytest.raises(InvalidWritePayloadError):
        interp.eval_stmt(WriteStatement(), Environment())
    with pytest.raises(InvalidWritePayloadError):
        interp.eval_stmt(WriteStatement(text='a', expr=NumberLiteral(1)), Environment())


def test_unknown_nodes():
    interp = Interpreter()
    with pytest.raises(UnknownNodeError):
        interp.eval_stmt(Node(), Environment())
    with pytest.raises(UnknownNodeError):
        interp.eval_expr(CommentStatement('x'), Environment())


def test_unknown_operator():
    with pytest.raises(UnknownOperatorError):
        Interpreter().eval_expr(BinaryExpression(NumberLiteral(1), '&', NumberLiteral(2)), Environment())


def test_environment_survives_between_runs():
    env = Environment()
    run("def mut counter = 1;", env)
    run("counter = counter + 1;", env)
    assert run("write(counter);", env) == "2"


def test_run_program_returns_environment():
    env = run_program("def mut a = 2; a = a * 21;", emit=lambda s: None)
    assert env.get_var('a') == 42


def test_default_emit_writes_to_stdout(capsys):
    run_program('writeln("to stdout");')
    assert capsys.readouterr().out == "to stdout\n"


def test_debug_trace_is_written_to_file(tmp_path):
    debug_file = tmp_path / 'debug.txt'
    interp = Interpreter(emit=lambda s: None, debug_level=3, debug_file=str(debug_file))
    interp.run(parse_program("def mut a = 1; if a { a = 2; }"), Environment())
    interp.close()
    trace = debug_file.read_text(encoding='utf-8')
    assert "mut a: number = 1" in trace
    assert "if condition 1 -> True" in trace
    assert "assign a = 2" in trace
