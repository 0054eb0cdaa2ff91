"""
UIRE Semantics Analysis
Turns the reader's concrete syntax tree into interpreter ASTs
"""

from typing import List, Tuple
import re

from error_handling import UIRESemanticsError
from parsing import CSTNode
from stdlib import is_operator
from syntax import App, Binop, Bool, Expr, FunDef, If, Num, VarRef


LAMBDA_KEYWORDS = ('lam', 'lambda')
KEYWORDS = {'if', 'true', 'false', *LAMBDA_KEYWORDS}

# Looks like the start of a number but did not read as an integer
_MALFORMED_NUMBER = re.compile(r'^[+-]?(\d|\.\d)')


# ============================================================================
# HELPER FUNCTIONS
# ============================================================================

def is_reserved(name: str) -> bool:
  """Keywords and operator symbols cannot name variables"""
  return name in KEYWORDS or is_operator(name)


def head_symbol(cst_node: CSTNode):
  """Name of the symbol heading a list form, or None"""
  if cst_node.children and cst_node.children[0].type == "SYMBOL":
    return cst_node.children[0].value
  return None


def expect_operands(cst_node: CSTNode, form: str, count: int) -> Tuple[CSTNode, ...]:
  """Return the operands after the head, checking how many there are"""
  operands = cst_node.children[1:]
  if len(operands) != count:
    raise UIRESemanticsError(
        f"{form} expects {count} sub-expression(s), got {len(operands)}", cst_node.span)
  return operands


# ============================================================================
# NODE ANALYSIS
# ============================================================================

def analyze_cst_node(cst_node: CSTNode, debug: bool = False) -> Expr:
  """Analyze one CST node and return its AST"""
  if debug:
    print(f"Analyzing: {cst_node.type} {cst_node}")

  node_type = cst_node.type

  if node_type == "NUMBER":
    return analyze_number(cst_node, debug)
  elif node_type == "SYMBOL":
    return analyze_symbol(cst_node, debug)
  elif node_type == "LIST":
    return analyze_list(cst_node, debug)
  raise UIRESemanticsError(f"Unknown CST node type: {node_type}", cst_node.span)


def analyze_number(cst_node: CSTNode, debug: bool = False) -> Expr:
  return Num(cst_node.value)


def analyze_symbol(cst_node: CSTNode, debug: bool = False) -> Expr:
  """Boolean literals or variable references"""
  name = cst_node.value
  if name == "true":
    return Bool(True)
  if name == "false":
    return Bool(False)
  if _MALFORMED_NUMBER.match(name):
    raise UIRESemanticsError(f"Invalid number '{name}': only integers are supported", cst_node.span)
  if is_reserved(name):
    raise UIRESemanticsError(f"'{name}' is reserved and cannot be used as a variable", cst_node.span)
  return VarRef(name)


def analyze_list(cst_node: CSTNode, debug: bool = False) -> Expr:
  """Special forms, operator applications and function applications"""
  if not cst_node.children:
    raise UIRESemanticsError("Empty form: expected a function or operator", cst_node.span)

  head = head_symbol(cst_node)

  if head == "if":
    return analyze_if(cst_node, debug)
  elif head in LAMBDA_KEYWORDS:
    return analyze_lambda(cst_node, debug)
  elif head is not None and is_operator(head):
    return analyze_operation(cst_node, debug)
  return analyze_application(cst_node, debug)


def analyze_if(cst_node: CSTNode, debug: bool = False) -> Expr:
  condition, then_branch, else_branch = expect_operands(cst_node, "if", 3)
  return If(
      analyze_cst_node(condition, debug),
      analyze_cst_node(then_branch, debug),
      analyze_cst_node(else_branch, debug),
  )


def analyze_lambda(cst_node: CSTNode, debug: bool = False) -> Expr:
  """{lam {x y} body}"""
  params_node, body = expect_operands(cst_node, head_symbol(cst_node), 2)

  if params_node.type != "LIST":
    raise UIRESemanticsError("Function parameters must be a bracketed list of names", params_node.span)

  params = []
  for param in params_node.children:
    if param.type != "SYMBOL":
      raise UIRESemanticsError(f"Parameter must be a name, got '{param}'", param.span)
    if is_reserved(param.value) or _MALFORMED_NUMBER.match(param.value):
      raise UIRESemanticsError(f"'{param.value}' cannot be used as a parameter name", param.span)
    params.append(param.value)

  # Duplicate names are accepted; the last binding wins at application time
  return FunDef(tuple(params), analyze_cst_node(body, debug))


def analyze_operation(cst_node: CSTNode, debug: bool = False) -> Expr:
  op = head_symbol(cst_node)
  left, right = expect_operands(cst_node, op, 2)
  return Binop(op, analyze_cst_node(left, debug), analyze_cst_node(right, debug))


def analyze_application(cst_node: CSTNode, debug: bool = False) -> Expr:
  function, *args = cst_node.children
  return App(
      analyze_cst_node(function, debug),
      tuple(analyze_cst_node(arg, debug) for arg in args),
  )


def analyze_program(cst_nodes: List[CSTNode], debug: bool = False) -> List[Expr]:
  """Analyze every top-level form"""
  return [analyze_cst_node(cst_node, debug) for cst_node in cst_nodes]


# ============================================================================
# FACTORY FUNCTIONS (for main.py)
# ============================================================================

class UIREAnalyzer:
  """Analyzer turning reader output into ASTs"""

  def __init__(self, debug: bool = False):
    self.debug = debug

  def analyze(self, cst_nodes: List[CSTNode]) -> List[Expr]:
    return analyze_program(cst_nodes, self.debug)

  def analyze_expression(self, cst_node: CSTNode) -> Expr:
    return analyze_cst_node(cst_node, self.debug)


def create_analyzer(debug: bool = False) -> UIREAnalyzer:
  """Create a UIRE analyzer"""
  return UIREAnalyzer(debug=debug)


def create_debug_analyzer() -> UIREAnalyzer:
  """Create a UIRE analyzer with debug enabled"""
  return UIREAnalyzer(debug=True)
