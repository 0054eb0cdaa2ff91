"""
UIRE Standard Operators
The binary operators understood by Binop nodes
"""

from typing import Callable, Dict, Optional
import operator

from error_handling import DivisionByZero
from utilities import binary_arithmetic_op, binary_comparison_op, require_numbers, truncating_div
from values import BoolVal, Closure, NumVal, Value


# ============================================================================
# EQUALITY
# ============================================================================

def values_equal(left: Value, right: Value) -> bool:
  """Structural equality over any two values; closures only equal themselves"""
  if isinstance(left, Closure) or isinstance(right, Closure):
    return left is right
  if type(left) is not type(right):
    return False
  return left.value == right.value


def uire_equal(left: Value, right: Value) -> Value:
  """
  equal? - defined for every pair of value kinds, never a type error.
  Numbers and booleans compare by value; a closure is equal only to itself
  (identity), so two evaluations of the same lam text are not equal.
  """
  return BoolVal(values_equal(left, right))


# ============================================================================
# ARITHMETIC
# ============================================================================

uire_add = binary_arithmetic_op(operator.add)
uire_sub = binary_arithmetic_op(operator.sub)
uire_mul = binary_arithmetic_op(operator.mul)


def uire_div(left: Value, right: Value) -> Value:
  """Integer division truncating toward zero"""
  require_numbers(left, right)
  if right.value == 0:
    raise DivisionByZero()
  return NumVal(truncating_div(left.value, right.value))


# ============================================================================
# COMPARISON
# ============================================================================

uire_le = binary_comparison_op(operator.le)


# ============================================================================
# OPERATOR TABLE
# ============================================================================

BUILTIN_OPERATORS: Dict[str, Callable[[Value, Value], Value]] = {
    '+': uire_add,
    '-': uire_sub,
    '*': uire_mul,
    '/': uire_div,
    '<=': uire_le,
    'equal?': uire_equal,
}


def lookup_operator(op: str) -> Optional[Callable[[Value, Value], Value]]:
  return BUILTIN_OPERATORS.get(op)


def is_operator(name: str) -> bool:
  return name in BUILTIN_OPERATORS
