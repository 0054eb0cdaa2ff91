"""
UIRE Abstract Syntax
Immutable expression nodes consumed by the interpreter
"""

from typing import Tuple, Union
from dataclasses import dataclass


# ============================================================================
# EXPRESSION NODES
# ============================================================================

@dataclass(frozen=True)
class Bool:
    """Boolean literal"""
    value: bool


@dataclass(frozen=True)
class Num:
    """Integer literal"""
    value: int


@dataclass(frozen=True)
class Binop:
    """Binary operator application, e.g. {+ 1 2}"""
    op: str
    left: 'Expr'
    right: 'Expr'


@dataclass(frozen=True)
class If:
    condition: 'Expr'
    then_branch: 'Expr'
    else_branch: 'Expr'


@dataclass(frozen=True)
class VarRef:
    name: str


@dataclass(frozen=True)
class App:
    """Function application; `function` must evaluate to a closure"""
    function: 'Expr'
    args: Tuple['Expr', ...] = ()

    def __post_init__(self):
        # Accept any sequence from producers but store a tuple
        object.__setattr__(self, 'args', tuple(self.args))


@dataclass(frozen=True)
class FunDef:
    """Function literal with a fixed parameter list and a single body"""
    params: Tuple[str, ...]
    body: 'Expr'

    def __post_init__(self):
        object.__setattr__(self, 'params', tuple(self.params))


Expr = Union[Bool, Num, Binop, If, VarRef, App, FunDef]


def show_expr(expr: Expr) -> str:
    """Render an expression back in UIRE surface syntax"""
    if isinstance(expr, Bool):
        return "true" if expr.value else "false"
    if isinstance(expr, Num):
        return str(expr.value)
    if isinstance(expr, VarRef):
        return expr.name
    if isinstance(expr, Binop):
        return f"{{{expr.op} {show_expr(expr.left)} {show_expr(expr.right)}}}"
    if isinstance(expr, If):
        parts = [show_expr(expr.condition), show_expr(expr.then_branch), show_expr(expr.else_branch)]
        return "{if " + " ".join(parts) + "}"
    if isinstance(expr, FunDef):
        return "{lam {" + " ".join(expr.params) + "} " + show_expr(expr.body) + "}"
    if isinstance(expr, App):
        parts = [show_expr(expr.function)] + [show_expr(arg) for arg in expr.args]
        return "{" + " ".join(parts) + "}"
    raise TypeError(f"Not a UIRE expression: {expr!r}")


def pretty_print_expr(expr: Expr, indent: int = 0) -> str:
    """Pretty print an AST as an indented tree (for --analyze)"""
    pad = "  " * indent
    if isinstance(expr, (Bool, Num)):
        return f"{pad}{type(expr).__name__}({show_expr(expr)})\n"
    if isinstance(expr, VarRef):
        return f"{pad}VarRef({expr.name})\n"
    if isinstance(expr, Binop):
        return (f"{pad}Binop({expr.op})\n"
                + pretty_print_expr(expr.left, indent + 1)
                + pretty_print_expr(expr.right, indent + 1))
    if isinstance(expr, If):
        return (f"{pad}If\n"
                + pretty_print_expr(expr.condition, indent + 1)
                + pretty_print_expr(expr.then_branch, indent + 1)
                + pretty_print_expr(expr.else_branch, indent + 1))
    if isinstance(expr, FunDef):
        return f"{pad}FunDef({', '.join(expr.params)})\n" + pretty_print_expr(expr.body, indent + 1)
    if isinstance(expr, App):
        result = f"{pad}App\n" + pretty_print_expr(expr.function, indent + 1)
        for arg in expr.args:
            result += pretty_print_expr(arg, indent + 1)
        return result
    raise TypeError(f"Not a UIRE expression: {expr!r}")
