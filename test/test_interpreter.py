"""
Tests for the evaluator on hand-built expression trees
"""

import pytest
from environment import EMPTY_ENV, env_extend, env_lookup
from error_handling import (
  ChiffreRuntimeError,
  IncompatibleOperandsError,
  IntrinsicError,
  NonBooleanConditionError,
  NotAFunctionError,
  UnboundVariableError
)
from interpreter import (
  create_initial_env,
  create_interpreter,
  eval_expr,
  tie_recursive_knot
)
from syntax import (
  make_app,
  make_apps,
  make_binary,
  make_bool_literal,
  make_if,
  make_int_literal,
  make_lambda,
  make_let,
  make_string_literal,
  make_var
)
from values import make_bool, make_closure, make_int, make_string


def var(name):
  return make_var(name)


def num(n):
  return make_int_literal(n)


@pytest.fixture
def env():
  return create_initial_env()


class TestLiterals:

  def test_int(self, env):
    assert eval_expr(env, num(42)) == make_int(42)

  def test_bool(self, env):
    assert eval_expr(env, make_bool_literal(False)) == make_bool(False)

  def test_string(self, env):
    assert eval_expr(env, make_string_literal("hi")) == make_string("hi")


class TestVariables:

  def test_bound_variable(self):
    env = env_extend(EMPTY_ENV, "x", make_int(7))
    assert eval_expr(env, var("x")) == make_int(7)

  def test_unbound_variable(self, env):
    with pytest.raises(UnboundVariableError) as exc_info:
      eval_expr(env, var("q"))
    assert exc_info.value.name == "q"
    assert exc_info.value.message == "Unbound variable q"

  def test_sentinel_names_are_ordinary_variables(self):
    env = env_extend(EMPTY_ENV, "x", make_string("abc"))
    with pytest.raises(UnboundVariableError):
      eval_expr(env, var("#firstChar"))


class TestBinary:

  def test_arithmetic(self, env):
    expr = make_binary(num(2), "Add", make_binary(num(3), "Multiply", num(4)))
    assert eval_expr(env, expr) == make_int(14)

  def test_both_operands_always_evaluated(self, env):
    expr = make_binary(make_bool_literal(False), "Equality", var("q"))
    with pytest.raises(UnboundVariableError):
      eval_expr(env, expr)

  def test_left_operand_evaluated_first(self, env):
    expr = make_binary(var("left"), "Add", var("right"))
    with pytest.raises(UnboundVariableError) as exc_info:
      eval_expr(env, expr)
    assert exc_info.value.name == "left"

  def test_equality_across_types(self, env):
    with pytest.raises(IncompatibleOperandsError):
      eval_expr(env, make_binary(num(1), "Equality", make_bool_literal(True)))


class TestConditional:

  def test_then_branch(self, env):
    assert eval_expr(env, make_if(make_bool_literal(True), num(1), num(2))) == make_int(1)

  def test_else_branch(self, env):
    assert eval_expr(env, make_if(make_bool_literal(False), num(1), num(2))) == make_int(2)

  def test_untaken_branch_not_evaluated(self, env):
    failing = make_binary(num(1), "Divide", num(0))
    assert eval_expr(env, make_if(make_bool_literal(True), num(1), failing)) == make_int(1)
    assert eval_expr(env, make_if(make_bool_literal(False), var("nope"), num(2))) == make_int(2)

  def test_non_boolean_condition(self, env):
    with pytest.raises(NonBooleanConditionError) as exc_info:
      eval_expr(env, make_if(num(0), num(1), num(2)))
    assert exc_info.value.value == make_int(0)


class TestLambdaAndApplication:

  def test_lambda_captures_current_env(self):
    env = env_extend(EMPTY_ENV, "y", make_int(1))
    closure = eval_expr(env, make_lambda("x", var("nope")))
    assert closure['type'] == "Closure"
    assert closure['env'] is env
    assert closure['binder'] == "x"

  def test_identity(self, env):
    expr = make_app(make_lambda("x", var("x")), num(5))
    assert eval_expr(env, expr) == make_int(5)

  def test_curried_add(self, env):
    add = make_lambda("a", make_lambda("b", make_binary(var("a"), "Add", var("b"))))
    expr = make_let(False, "add", add, make_apps(var("add"), [num(2), num(3)]))
    assert eval_expr(env, expr) == make_int(5)

  def test_lexical_scoping(self, env):
    # let x = 1 in let f = \y => x in let x = 2 in f 0
    expr = make_let(False, "x", num(1),
                    make_let(False, "f", make_lambda("y", var("x")),
                             make_let(False, "x", num(2), make_app(var("f"), num(0)))))
    assert eval_expr(env, expr) == make_int(1)

  def test_closure_applied_in_unrelated_env(self):
    closure = eval_expr(env_extend(EMPTY_ENV, "x", make_int(1)), make_lambda("y", var("x")))
    caller_env = env_extend(env_extend(EMPTY_ENV, "x", make_int(2)), "f", closure)
    assert eval_expr(caller_env, make_app(var("f"), num(0))) == make_int(1)

  def test_argument_evaluated_in_caller_env(self):
    closure = make_closure(EMPTY_ENV, "a", var("a"))
    env = env_extend(env_extend(EMPTY_ENV, "f", closure), "z", make_int(9))
    assert eval_expr(env, make_app(var("f"), var("z"))) == make_int(9)

  def test_not_a_function(self, env):
    with pytest.raises(NotAFunctionError) as exc_info:
      eval_expr(env, make_app(num(3), num(4)))
    assert exc_info.value.value == make_int(3)

  def test_not_a_function_argument_not_evaluated(self, env):
    with pytest.raises(NotAFunctionError):
      eval_expr(env, make_app(num(3), var("q")))

  def test_type_annotation_ignored(self, env):
    annotated = make_lambda("x", var("x"), {'type': 'TYPE_NAME', 'name': 'Int'})
    assert eval_expr(env, make_app(annotated, make_string_literal("s"))) == make_string("s")


class TestLet:

  def test_non_recursive_let(self, env):
    expr = make_let(False, "x", num(5), make_binary(var("x"), "Multiply", num(2)))
    assert eval_expr(env, expr) == make_int(10)

  def test_shadowing(self, env):
    # let x = 1 in (let x = 2 in x) + x
    inner = make_let(False, "x", num(2), var("x"))
    expr = make_let(False, "x", num(1), make_binary(inner, "Add", var("x")))
    assert eval_expr(env, expr) == make_int(3)

  def test_binding_invisible_outside_body(self, env):
    expr = make_binary(make_let(False, "t", num(1), var("t")), "Add", var("t"))
    with pytest.raises(UnboundVariableError):
      eval_expr(env, expr)

  def test_non_recursive_function_cannot_see_itself(self, env):
    body = make_app(var("f"), num(1))
    expr = make_let(False, "f", make_lambda("n", body), make_app(var("f"), num(0)))
    with pytest.raises(UnboundVariableError):
      eval_expr(env, expr)


class TestRecursiveLet:

  @pytest.fixture
  def factorial(self):
    # let rec f = \n => if n == 0 then 1 else n * f (n - 1) in f 5
    body = make_if(
        make_binary(var("n"), "Equality", num(0)),
        num(1),
        make_binary(var("n"), "Multiply",
                    make_app(var("f"), make_binary(var("n"), "Subtract", num(1)))))
    return make_let(True, "f", make_lambda("n", body), make_app(var("f"), num(5)))

  def test_factorial(self, env, factorial):
    assert eval_expr(env, factorial) == make_int(120)

  def test_recursive_flag_on_non_closure(self):
    # let x = 5 in let rec x = x + 1 in x
    expr = make_let(False, "x", num(5),
                    make_let(True, "x", make_binary(var("x"), "Add", num(1)), var("x")))
    assert eval_expr(EMPTY_ENV, expr) == make_int(6)

  def test_tie_recursive_knot_leaves_original_untouched(self):
    original = make_closure(EMPTY_ENV, "n", var("f"))
    recursive = tie_recursive_knot(original, "f")
    assert original['env'] is EMPTY_ENV
    assert recursive is not original
    assert env_lookup(recursive['env'], "f") is recursive
    assert recursive['env']['parent'] is EMPTY_ENV

  def test_aliased_closure_does_not_gain_binding(self, env):
    # let g = 1 in let f = \n => g in let rec g = f in f 0
    expr = make_let(False, "g", num(1),
                    make_let(False, "f", make_lambda("n", var("g")),
                             make_let(True, "g", var("f"), make_app(var("f"), num(0)))))
    assert eval_expr(env, expr) == make_int(1)

  def test_recursive_binding_seen_by_alias(self, env):
    # let rec g = \n => if n == 0 then 0 else g (n - 1) in let h = g in h 3
    body = make_if(make_binary(var("n"), "Equality", num(0)), num(0),
                   make_app(var("g"), make_binary(var("n"), "Subtract", num(1))))
    expr = make_let(True, "g", make_lambda("n", body),
                    make_let(False, "h", var("g"), make_app(var("h"), num(3))))
    assert eval_expr(env, expr) == make_int(0)


class TestIntrinsicApplication:

  @pytest.mark.parametrize("name,arg,expected", [
      ("firstChar", make_string_literal("abc"), make_string("a")),
      ("remainingChars", make_string_literal("abc"), make_string("bc")),
      ("charCode", make_string_literal("A"), make_int(65)),
      ("codeChar", make_int_literal(97), make_string("a")),
  ])
  def test_intrinsics(self, env, name, arg, expected):
    assert eval_expr(env, make_app(var(name), arg)) == expected

  def test_intrinsic_passed_as_value(self, env):
    # (\f => f "xyz") firstChar
    expr = make_app(make_lambda("f", make_app(var("f"), make_string_literal("xyz"))), var("firstChar"))
    assert eval_expr(env, expr) == make_string("x")

  def test_intrinsic_rebound_by_user(self, env):
    expr = make_let(False, "firstChar", num(1), var("firstChar"))
    assert eval_expr(env, expr) == make_int(1)

  def test_intrinsic_error(self, env):
    with pytest.raises(IntrinsicError):
      eval_expr(env, make_app(var("firstChar"), make_string_literal("")))

  def test_initial_envs_are_independent(self):
    assert create_initial_env() is not create_initial_env()


class TestInterpreterFactory:

  def test_evaluate_uses_initial_env(self):
    interpreter = create_interpreter()
    assert interpreter.evaluate(make_app(var("charCode"), make_string_literal("a"))) == make_int(97)

  def test_evaluate_with_explicit_env(self):
    interpreter = create_interpreter()
    env = env_extend(EMPTY_ENV, "x", make_int(3))
    assert interpreter.evaluate(var("x"), env) == make_int(3)

  def test_debug_trace(self, capsys):
    interpreter = create_interpreter(debug=True)
    interpreter.evaluate(make_app(make_lambda("x", var("x")), num(1)))
    output = capsys.readouterr().out
    assert "Evaluating: APP" in output
    assert "DEBUG: apply <closure \\x> to 1" in output

  def test_quiet_without_debug(self, capsys):
    create_interpreter().evaluate(num(1))
    assert capsys.readouterr().out == ""

  def test_deep_recursion_propagates(self, env, small_recursion_limit):
    # let rec f = \n => 1 + f n in f 0
    body = make_binary(num(1), "Add", make_app(var("f"), var("n")))
    expr = make_let(True, "f", make_lambda("n", body), make_app(var("f"), num(0)))
    with pytest.raises(RecursionError):
      eval_expr(env, expr)

  def test_unknown_node_type(self, env):
    with pytest.raises(ChiffreRuntimeError):
      eval_expr(env, {'type': 'WHILE'})
