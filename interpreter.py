"""
UIRE Interpreter
A pure recursive evaluator over immutable ASTs and copy-on-extend environments
The only side effects (debug tracing, worker actors) live at the boundaries
"""

from typing import List, Optional, Union

import pykka

from error_handling import (
  EvalError,
  EvaluationTimeout,
  NotCallable,
  UndefinedVariable,
  UnknownOperator,
  UIRETypeError,
)
from printer import serialize_outcome
from stdlib import lookup_operator
from syntax import App, Binop, Bool, Expr, FunDef, If, Num, VarRef, show_expr
from utilities import BOOLEAN_CONDITION_MESSAGE, check_arity, is_boolean
from values import BoolVal, Closure, Environment, NumVal, Value, type_name


Outcome = Union[Value, EvalError]


# ============================================================================
# EVALUATION
# ============================================================================

def evaluate(expr: Expr, env: Optional[Environment] = None, debug: bool = False) -> Value:
  """
  Evaluate an expression in an environment and return its value.
  Raises an EvalError subclass on the first failure in left-to-right order.
  """
  if env is None:
    env = Environment.empty()

  if debug:
    print(f"Evaluating: {show_expr(expr)}")

  if isinstance(expr, Num):
    return eval_number(expr, env, debug)
  elif isinstance(expr, Bool):
    return eval_boolean(expr, env, debug)
  elif isinstance(expr, VarRef):
    return eval_varref(expr, env, debug)
  elif isinstance(expr, Binop):
    return eval_binop(expr, env, debug)
  elif isinstance(expr, If):
    return eval_if(expr, env, debug)
  elif isinstance(expr, FunDef):
    return eval_fundef(expr, env, debug)
  elif isinstance(expr, App):
    return eval_application(expr, env, debug)
  raise TypeError(f"Not a UIRE expression: {expr!r}")


def eval_number(expr: Num, env: Environment, debug: bool = False) -> Value:
  return NumVal(expr.value)


def eval_boolean(expr: Bool, env: Environment, debug: bool = False) -> Value:
  return BoolVal(expr.value)


def eval_varref(expr: VarRef, env: Environment, debug: bool = False) -> Value:
  """Evaluate a variable reference by looking it up in the environment"""
  value = env.lookup(expr.name)
  if value is None:
    raise UndefinedVariable(expr.name)
  return value


def eval_binop(expr: Binop, env: Environment, debug: bool = False) -> Value:
  """Evaluate both operands left to right, then dispatch on the operator"""
  left = evaluate(expr.left, env, debug)
  right = evaluate(expr.right, env, debug)

  operation = lookup_operator(expr.op)
  if operation is None:
    raise UnknownOperator(expr.op)

  result = operation(left, right)
  if debug:
    print(f"  {expr.op} => {result}")
  return result


def eval_if(expr: If, env: Environment, debug: bool = False) -> Value:
  """Evaluate the condition, then only the branch it selects"""
  condition = evaluate(expr.condition, env, debug)
  if not is_boolean(condition):
    raise UIRETypeError(BOOLEAN_CONDITION_MESSAGE)

  if condition.value:
    return evaluate(expr.then_branch, env, debug)
  return evaluate(expr.else_branch, env, debug)


def eval_fundef(expr: FunDef, env: Environment, debug: bool = False) -> Value:
  """Create a closure over the defining environment"""
  return Closure(expr.params, expr.body, env)


def eval_application(expr: App, env: Environment, debug: bool = False) -> Value:
  """Evaluate function application"""
  function = evaluate(expr.function, env, debug)
  if not isinstance(function, Closure):
    raise NotCallable(type_name(function))

  # Arguments see the caller's environment, not the closure's
  args = [evaluate(arg, env, debug) for arg in expr.args]
  return apply_closure(function, args, debug)


def apply_closure(closure: Closure, args: List[Value], debug: bool = False) -> Value:
  """Bind arguments over the captured environment and evaluate the body"""
  check_arity(closure.params, args)

  call_env = closure.env.extend(zip(closure.params, args))
  if debug:
    print(f"  Applying closure ({' '.join(closure.params)}) to {len(args)} argument(s)")
  return evaluate(closure.body, call_env, debug)


def run(expr: Expr, env: Optional[Environment] = None, debug: bool = False) -> Outcome:
  """Evaluate and return either the value or the EvalError that stopped it"""
  try:
    return evaluate(expr, env, debug)
  except EvalError as e:
    if debug:
      print(f"  Evaluation failed: {e.message}")
    return e


def interpret_program(exprs: List[Expr], env: Optional[Environment] = None,
                      debug: bool = False) -> List[Outcome]:
  """
  Evaluate each top-level expression independently against the same
  initial environment and collect the outcomes in order.
  """
  if env is None:
    env = Environment.empty()
  return [run(expr, env, debug) for expr in exprs]


# ============================================================================
# TIME-BOUNDED EVALUATION (Using Pykka)
# ============================================================================

class EvaluatorActor(pykka.ThreadingActor):
  """Worker that runs one top-level evaluation per message"""

  # A runaway evaluation must not keep the process alive
  use_daemon_thread = True

  def __init__(self, debug: bool = False):
    super().__init__()
    self.debug = debug

  def on_receive(self, message):
    return evaluate(message['expr'], message['env'], self.debug)


def evaluate_with_timeout(expr: Expr, env: Optional[Environment] = None,
                          timeout: float = 5.0, debug: bool = False) -> Value:
  """
  Evaluate on a worker actor and wait at most `timeout` seconds.
  EvalErrors raised by the worker propagate unchanged; a missed deadline
  raises EvaluationTimeout and the worker is abandoned.
  """
  actor_ref = EvaluatorActor.start(debug)
  try:
    future = actor_ref.ask({'expr': expr, 'env': env}, block=False)
    return future.get(timeout=timeout)
  except pykka.Timeout as e:
    raise EvaluationTimeout(timeout) from e
  finally:
    actor_ref.stop(block=False)


# ============================================================================
# FACTORY FUNCTIONS (for main.py)
# ============================================================================

class UIREInterpreter:
  """Interpreter bound to a debug setting and a default deadline"""

  def __init__(self, debug: bool = False, timeout: Optional[float] = None):
    self.debug = debug
    self.timeout = timeout

  def evaluate(self, expr: Expr, env: Optional[Environment] = None) -> Value:
    if self.timeout is not None:
      return evaluate_with_timeout(expr, env, self.timeout, self.debug)
    return evaluate(expr, env, self.debug)

  def evaluate_with_timeout(self, expr: Expr, env: Optional[Environment] = None,
                            timeout: float = 5.0) -> Value:
    """Evaluate with an explicit deadline, overriding the default one"""
    return evaluate_with_timeout(expr, env, timeout, self.debug)

  def run(self, expr: Expr, env: Optional[Environment] = None) -> Outcome:
    try:
      return self.evaluate(expr, env)
    except EvalError as e:
      return e

  def interpret(self, expr: Expr, env: Optional[Environment] = None) -> str:
    """Evaluate and render the outcome as text"""
    return serialize_outcome(self.run(expr, env))

  def interpret_program(self, exprs: List[Expr], env: Optional[Environment] = None) -> List[Outcome]:
    return [self.run(expr, env) for expr in exprs]


def create_interpreter(debug: bool = False, timeout: Optional[float] = None) -> UIREInterpreter:
  """Create a UIRE interpreter"""
  return UIREInterpreter(debug=debug, timeout=timeout)


def create_debug_interpreter(timeout: Optional[float] = None) -> UIREInterpreter:
  """Create a UIRE interpreter with debug tracing enabled"""
  return UIREInterpreter(debug=True, timeout=timeout)
