"""
Tests for rendering values and errors
"""

import pytest

from error_handling import (
  ArityMismatch,
  DivisionByZero,
  EvaluationTimeout,
  NotCallable,
  UndefinedVariable,
  UnknownOperator,
  UIRETypeError,
)
from printer import serialize, serialize_error, serialize_outcome
from syntax import Num
from values import BoolVal, Closure, Environment, NumVal


class TestSerialize:

  @pytest.mark.parametrize("value, text", [
    (NumVal(-7), "-7"),
    (NumVal(0), "0"),
    (NumVal(10 ** 20), "100000000000000000000"),
    (BoolVal(True), "true"),
    (BoolVal(False), "false"),
  ])
  def test_values(self, value, text):
    assert serialize(value) == text

  def test_closure(self):
    assert serialize(Closure(("x",), Num(1), Environment.empty())) == "#<procedure>"

  def test_rejects_non_values(self):
    with pytest.raises(TypeError):
      serialize(5)


class TestSerializeErrors:

  @pytest.mark.parametrize("error, text", [
    (UndefinedVariable("x"), "UIRE: undefined variable: x"),
    (UIRETypeError("operands must be numbers"), "UIRE: operands must be numbers"),
    (UnknownOperator("%"), "UIRE: unknown operator: %"),
    (NotCallable("Num"), "UIRE: application of a non-procedure (Num)"),
    (ArityMismatch(1, 2), "UIRE: arity mismatch: expected 1 argument(s), got 2"),
    (DivisionByZero(), "UIRE: division by zero"),
    (EvaluationTimeout(0.5), "UIRE: evaluation exceeded 0.5 second(s)"),
  ])
  def test_errors(self, error, text):
    assert serialize_error(error) == text

  def test_outcome_dispatch(self):
    assert serialize_outcome(NumVal(3)) == "3"
    assert serialize_outcome(UndefinedVariable("y")) == "UIRE: undefined variable: y"
