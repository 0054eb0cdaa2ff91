"""
Tests for time-bounded evaluation on worker actors and concurrent use
"""

import time
from concurrent.futures import ThreadPoolExecutor

import pytest

from error_handling import EvaluationTimeout, UndefinedVariable
from interpreter import create_interpreter, evaluate, evaluate_with_timeout
from syntax import App, Binop, FunDef, If, Num, VarRef
from values import NumVal, make_env


def slow_fib(n):
  """Doubly recursive fib via self-application: exponential time, shallow stack"""
  fib = FunDef(["self", "n"], If(
    Binop("<=", VarRef("n"), Num(1)),
    VarRef("n"),
    Binop("+",
          App(VarRef("self"), [VarRef("self"), Binop("-", VarRef("n"), Num(1))]),
          App(VarRef("self"), [VarRef("self"), Binop("-", VarRef("n"), Num(2))]))
  ))
  return App(fib, [fib, Num(n)])


class TestTimeBoundedEvaluation:
  """evaluate_with_timeout runs the evaluation on a pykka actor"""

  def test_result_within_deadline(self):
    assert evaluate_with_timeout(Binop("*", Num(6), Num(7)), timeout=5.0) == NumVal(42)

  def test_uses_given_environment(self):
    env = make_env(x=NumVal(2))
    assert evaluate_with_timeout(Binop("+", VarRef("x"), Num(1)), env, timeout=5.0) == NumVal(3)

  def test_evaluation_errors_propagate_unchanged(self):
    with pytest.raises(UndefinedVariable) as exc:
      evaluate_with_timeout(VarRef("nope"), timeout=5.0)
    assert exc.value.name == "nope"

  def test_deadline_exceeded(self):
    # The abandoned worker finishes fib(18) in the background; keep it small
    started = time.monotonic()
    with pytest.raises(EvaluationTimeout) as exc:
      evaluate_with_timeout(slow_fib(18), timeout=0.01)
    assert exc.value.timeout == 0.01
    assert time.monotonic() - started < 5.0

  def test_small_recursive_program_finishes(self):
    assert evaluate_with_timeout(slow_fib(10), timeout=30.0) == NumVal(55)

  def test_interpreter_with_timeout(self):
    interpreter = create_interpreter(timeout=5.0)
    assert interpreter.interpret(Binop("/", Num(9), Num(0))) == "UIRE: division by zero"
    assert interpreter.interpret(Binop("-", Num(9), Num(10))) == "-1"

  def test_interpreter_evaluate_with_timeout(self):
    interpreter = create_interpreter()
    env = make_env(x=NumVal(20))
    assert interpreter.evaluate_with_timeout(Binop("+", VarRef("x"), Num(22)), env) == NumVal(42)
    with pytest.raises(UndefinedVariable):
      interpreter.evaluate_with_timeout(VarRef("y"), timeout=5.0)
    with pytest.raises(EvaluationTimeout):
      interpreter.evaluate_with_timeout(slow_fib(18), timeout=0.01)


class TestConcurrentEvaluation:
  """Independent evaluations share no state"""

  def test_parallel_evaluations(self):
    programs = [(Binop("+", VarRef("x"), Num(i)), make_env(x=NumVal(i))) for i in range(20)]
    with ThreadPoolExecutor(max_workers=4) as pool:
      results = list(pool.map(lambda pair: evaluate(*pair), programs))
    assert results == [NumVal(2 * i) for i in range(20)]

  def test_shared_closure_across_threads(self):
    adder = evaluate(FunDef(["a", "b"], Binop("+", VarRef("a"), VarRef("b"))))
    env = make_env(add=adder)
    calls = [App(VarRef("add"), [Num(i), Num(i)]) for i in range(10)]
    with ThreadPoolExecutor(max_workers=4) as pool:
      results = list(pool.map(lambda expr: evaluate(expr, env), calls))
    assert results == [NumVal(2 * i) for i in range(10)]
    assert "a" not in adder.env
