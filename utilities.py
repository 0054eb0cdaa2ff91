"""
Utilities module for the UIRE interpreter
Helpers shared by the operator table and the evaluator
"""

from typing import Any, Callable, Sequence

from error_handling import UIRETypeError, ArityMismatch
from values import BoolVal, NumVal, Value


NUMERIC_OPERANDS_MESSAGE = "operands must be numbers"
BOOLEAN_CONDITION_MESSAGE = "condition must be boolean"


# ==================== TYPE CHECKING UTILITIES ====================

def is_number(value: Any) -> bool:
  return isinstance(value, NumVal)


def is_boolean(value: Any) -> bool:
  return isinstance(value, BoolVal)


def require_numbers(left: Value, right: Value) -> None:
  """
  Ensure both operands of a numeric operator are numbers

  Raises:
    UIRETypeError("operands must be numbers") otherwise
  """
  if not (is_number(left) and is_number(right)):
    raise UIRETypeError(NUMERIC_OPERANDS_MESSAGE)


def check_arity(params: Sequence[str], args: Sequence[Value]) -> None:
  """Raise ArityMismatch unless one argument was supplied per parameter"""
  if len(args) != len(params):
    raise ArityMismatch(len(params), len(args))


# ==================== INTEGER ARITHMETIC ====================

def truncating_div(dividend: int, divisor: int) -> int:
  """
  Integer division rounding toward zero

  Python's // floors, so -7 // 2 == -4; UIRE gives -3.

  Examples:
    truncating_div(7, 2) -> 3
    truncating_div(-7, 2) -> -3
  """
  quotient = abs(dividend) // abs(divisor)
  if (dividend < 0) != (divisor < 0):
    return -quotient
  return quotient


# ==================== BINARY OPERATION FACTORIES ====================

def binary_arithmetic_op(op: Callable[[int, int], int]) -> Callable[[Value, Value], Value]:
  """
  Factory for numeric operators producing a number

  Examples:
    uire_add = binary_arithmetic_op(operator.add)
    uire_add(NumVal(1), NumVal(2)) -> NumVal(3)
  """
  def arithmetic(left: Value, right: Value) -> Value:
    require_numbers(left, right)
    return NumVal(op(left.value, right.value))

  return arithmetic


def binary_comparison_op(op: Callable[[int, int], bool]) -> Callable[[Value, Value], Value]:
  """
  Factory for numeric operators producing a boolean

  Examples:
    uire_le = binary_comparison_op(operator.le)
    uire_le(NumVal(1), NumVal(2)) -> BoolVal(True)
  """
  def comparison(left: Value, right: Value) -> Value:
    require_numbers(left, right)
    return BoolVal(bool(op(left.value, right.value)))

  return comparison
