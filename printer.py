"""
Printer for UIRE results
Turns values and evaluation errors into text; never reinterprets an error
"""

from typing import Union

from error_handling import UIREError
from values import BoolVal, Closure, NumVal, Value


ERROR_PREFIX = "UIRE: "
PROCEDURE_TOKEN = "#<procedure>"


def serialize(value: Value) -> str:
  """Render a runtime value"""
  if isinstance(value, NumVal):
    return str(value.value)
  if isinstance(value, BoolVal):
    return "true" if value.value else "false"
  if isinstance(value, Closure):
    return PROCEDURE_TOKEN
  raise TypeError(f"Not a UIRE value: {value!r}")


def serialize_error(error: UIREError) -> str:
  return ERROR_PREFIX + error.message


def serialize_outcome(outcome: Union[Value, UIREError]) -> str:
  """Render the value-or-error result of one evaluation"""
  if isinstance(outcome, UIREError):
    return serialize_error(outcome)
  return serialize(outcome)
