"""
Marker Call Scanner.

Finds the calls the macro rules must expand. A call is a marker when its
callee is a bare identifier named like a macro (``$signal``, ``$memo``) or like
a local alias imported from a macro module (``import { $signal as s }``), and
the name does not resolve to some other local declaration.
"""

from dataclasses import dataclass
from typing import List, Mapping

from solid_macros.config import RuntimeConfig
from solid_macros.core.js.nodes import NodePath, NodeVisitor
from solid_macros.core.js.scope import ScopeInfo
from solid_macros.core.tracer import get_tracer
from solid_macros.enums import MacroKind


@dataclass
class MarkerCall:
  """
  A call expression selected for expansion.

  Attributes:
      path (NodePath): The ``CallExpression``.
      kind (MacroKind): The macro it invokes.
      name (str): Callee name as written.
  """

  path: NodePath
  kind: MacroKind
  name: str


class MarkerScanner(NodeVisitor):
  """
  Collects marker calls in source order (outer calls before nested ones).
  """

  def __init__(self, names: Mapping[str, MacroKind], scope: ScopeInfo, config: RuntimeConfig):
    """
    Args:
        names: Callee names to match, mapped to their macro kind.
        scope: Scope analysis of the module, used to skip shadowed names.
        config: Configuration listing the macro modules.
    """
    self.names = dict(names)
    self.scope = scope
    self.config = config
    self.found: List[MarkerCall] = []

  def scan(self, program: NodePath) -> List[MarkerCall]:
    self.found = []
    self.visit(program)
    return self.found

  def visit_CallExpression(self, path: NodePath) -> None:
    callee = path.get("callee")
    if callee.type == "Identifier" and callee.node["name"] in self.names:
      name = callee.node["name"]
      binding = self.scope.resolve(callee)
      if binding is None or (binding.kind == "import" and self.config.is_macro_module(binding.source)):
        self.found.append(MarkerCall(path, self.names[name], name))
      else:
        get_tracer().log_inspection(name, "skipped", f"'{name}' is a local {binding.kind} binding")
    self.generic_visit(path)
