"""
UIRE Runtime Values and Environments
Values are immutable; environments are extended by copy, never mutated
"""

from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Tuple, Union
from dataclasses import dataclass

from syntax import Expr


# ============================================================================
# VALUES
# ============================================================================

@dataclass(frozen=True)
class BoolVal:
  value: bool


@dataclass(frozen=True)
class NumVal:
  value: int


@dataclass(frozen=True, eq=False)
class Closure:
  """Function value: parameters and body paired with the defining environment

  Closures compare by identity, so `equal?` only holds between a closure
  and itself.
  """
  params: Tuple[str, ...]
  body: Expr
  env: 'Environment'

  @property
  def arity(self) -> int:
    return len(self.params)


Value = Union[BoolVal, NumVal, Closure]


def type_name(value: Any) -> str:
  """Kind of a runtime value, used in error messages"""
  if isinstance(value, NumVal):
    return "Num"
  if isinstance(value, BoolVal):
    return "Bool"
  if isinstance(value, Closure):
    return "Closure"
  return type(value).__name__


# ============================================================================
# ENVIRONMENT
# ============================================================================

class Environment:
  """Mapping from identifier to value

  `extend` returns a fresh environment and leaves the receiver untouched, so
  a closure's captured environment never observes bindings made after it was
  created.
  """

  __slots__ = ('_bindings',)

  def __init__(self, bindings: Optional[Mapping[str, Value]] = None):
    self._bindings: Dict[str, Value] = dict(bindings) if bindings else {}

  @classmethod
  def empty(cls) -> 'Environment':
    return cls()

  def extend(self, bindings: Union[Mapping[str, Value], Iterable[Tuple[str, Value]]]) -> 'Environment':
    """Return a new environment where `bindings` shadow same-named entries

    Pairs are applied in order, so a repeated name keeps its last value.
    """
    items = bindings.items() if isinstance(bindings, Mapping) else bindings
    new_bindings = dict(self._bindings)
    for name, value in items:
      new_bindings[name] = value
    return Environment(new_bindings)

  def bind(self, name: str, value: Value) -> 'Environment':
    """Return a new environment with a single extra binding"""
    return self.extend([(name, value)])

  def lookup(self, name: str) -> Optional[Value]:
    return self._bindings.get(name)

  def names(self) -> List[str]:
    return sorted(self._bindings)

  def items(self) -> Iterator[Tuple[str, Value]]:
    return iter(list(self._bindings.items()))

  def __contains__(self, name: object) -> bool:
    return name in self._bindings

  def __len__(self) -> int:
    return len(self._bindings)

  def __repr__(self) -> str:
    return f"Environment({', '.join(self.names())})"


def make_env(**bindings: Value) -> Environment:
  """Convenience constructor: make_env(x=NumVal(1))"""
  return Environment(bindings)
