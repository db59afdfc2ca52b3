"""
Lexical Scope Analysis for ES Modules.

Builds the scope tree of a module and resolves every identifier occurrence to
the binding it refers to. The macro rules depend on this to find every read
and write of a declared name within its lexical scope, without re-deriving
JavaScript scoping rules themselves.

Scoping rules implemented:

- The program is the ``MODULE`` scope; module code is strict, so function
  declarations are block scoped like ``let``.
- ``var`` declarations hoist to the nearest function or module scope.
- ``let``, ``const`` and ``class`` bind in the current block.
- Functions and arrows open a ``FUNCTION`` scope holding their parameters;
  a function body block shares that scope. A named function expression binds
  its own name inside it.
- Blocks, ``for``/``for-in``/``for-of`` heads, ``switch`` bodies and ``catch``
  clauses open ``BLOCK`` scopes. Class bodies open a ``CLASS`` scope.

Occurrences are collected during one walk and resolved after it, so hoisted
declarations and later ``let`` declarations shadowing outer names are seen
by every occurrence in their scope.
"""

import re
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Set

from solid_macros.core.js.nodes import Node, NodePath, NodeVisitor, is_node
from solid_macros.enums import OccurrenceRole, ScopeKind, WriteForm


@dataclass
class Occurrence:
  """
  One syntactic use of an identifier.

  Attributes:
      path (NodePath): Path of the ``Identifier`` node.
      scope (Scope): Innermost scope enclosing the occurrence.
      role (OccurrenceRole): Read, write or export.
      form (Optional[WriteForm]): Syntactic form for writes.
  """

  path: NodePath
  scope: "Scope"
  role: OccurrenceRole
  form: Optional[WriteForm] = None

  @property
  def name(self) -> str:
    return self.path.node["name"]

  @property
  def site(self) -> NodePath:
    """
    The expression a rewrite replaces.

    For assignments and updates this is the enclosing ``AssignmentExpression``
    or ``UpdateExpression``; otherwise the identifier itself.
    """
    if self.form in (WriteForm.ASSIGN, WriteForm.COMPOUND, WriteForm.UPDATE):
      return self.path.parent
    return self.path


@dataclass
class Binding:
  """
  A declared name and everything that refers to it.

  Attributes:
      name (str): Declared identifier.
      kind (str): Declaration kind (``var``, ``let``, ``const``, ``function``,
          ``class``, ``param``, ``catch`` or ``import``).
      scope (Scope): Declaring scope.
      identifier (NodePath): The binding identifier.
      declaration (Optional[NodePath]): The declarator, function, class or import node.
      source (Optional[str]): Module specifier for import bindings.
      imported (Optional[str]): Exported name for import bindings
          (``default`` and ``*`` for default and namespace imports).
      references (List[Occurrence]): Reads, in source order.
      violations (List[Occurrence]): Writes, in source order.
      exports (List[Occurrence]): ``export { name }`` specifiers.
  """

  name: str
  kind: str
  scope: "Scope"
  identifier: NodePath
  declaration: Optional[NodePath] = None
  source: Optional[str] = None
  imported: Optional[str] = None
  references: List[Occurrence] = field(default_factory=list)
  violations: List[Occurrence] = field(default_factory=list)
  exports: List[Occurrence] = field(default_factory=list)

  def add(self, occurrence: Occurrence) -> None:
    if occurrence.role == OccurrenceRole.READ:
      self.references.append(occurrence)
    elif occurrence.role == OccurrenceRole.WRITE:
      self.violations.append(occurrence)
    else:
      self.exports.append(occurrence)


class Scope:
  """
  A lexical scope.

  Attributes:
      kind (ScopeKind): Scope category.
      path (NodePath): Node that opened the scope.
      parent (Optional[Scope]): Enclosing scope.
      bindings (Dict[str, Binding]): Names declared directly in this scope.
  """

  def __init__(self, kind: ScopeKind, path: NodePath, parent: Optional["Scope"] = None):
    self.kind = kind
    self.path = path
    self.parent = parent
    self.bindings: Dict[str, Binding] = {}

  def __repr__(self) -> str:
    return f"Scope({self.kind.value}, {sorted(self.bindings)})"

  def function_scope(self) -> "Scope":
    """Returns the nearest scope that receives hoisted ``var`` declarations."""
    scope = self
    while scope.kind not in (ScopeKind.FUNCTION, ScopeKind.MODULE) and scope.parent is not None:
      scope = scope.parent
    return scope

  def lookup(self, name: str) -> Optional[Binding]:
    """Resolves a name through the scope chain."""
    scope: Optional[Scope] = self
    while scope is not None:
      if name in scope.bindings:
        return scope.bindings[name]
      scope = scope.parent
    return None


class ScopeInfo:
  """
  Result of analyzing one module.

  Attributes:
      root (Scope): The module scope.
      occurrences (List[Occurrence]): Every collected occurrence, resolved or not.
  """

  def __init__(self, root: Scope, occurrences: List[Occurrence], names: Set[str]):
    self.root = root
    self.occurrences = occurrences
    self._names = names
    self._by_node: Dict[int, Binding] = {}

  def _register(self, node: Node, binding: Binding) -> None:
    self._by_node[id(node)] = binding

  def binding_for(self, node: Node) -> Optional[Binding]:
    """
    Returns the binding an identifier node declares or refers to.

    Args:
        node: An ``Identifier`` node from the analyzed tree.

    Returns:
        Optional[Binding]: None for globals and non-reference identifiers.
    """
    return self._by_node.get(id(node))

  def resolve(self, path: NodePath) -> Optional[Binding]:
    return self.binding_for(path.node)

  def generate_uid(self, hint: str = "temp") -> str:
    """
    Generates an identifier that is unused anywhere in the module.

    Candidates are ``_hint``, ``_hint2``, ``_hint3``...; each returned name is
    reserved so later calls never hand it out again.

    Args:
        hint: Readable stem for the name.

    Returns:
        str: A fresh identifier.
    """
    base = re.sub(r"[^0-9A-Za-z_$]", "", hint).lstrip("_") or "temp"
    i = 1
    while True:
      candidate = f"_{base}" if i == 1 else f"_{base}{i}"
      if candidate not in self._names:
        self._names.add(candidate)
        return candidate
      i += 1


class ScopeAnalyzer(NodeVisitor):
  """
  Walks a module, building scopes and collecting identifier occurrences.
  """

  def __init__(self) -> None:
    self._root: Optional[Scope] = None
    self._scope: Optional[Scope] = None
    self._pending: List[Occurrence] = []
    self._declared: Dict[int, Binding] = {}

  def analyze(self, program: Node) -> ScopeInfo:
    """
    Analyzes a ``Program`` node.

    Args:
        program: Root of the parsed module.

    Returns:
        ScopeInfo: Scopes, bindings and resolved occurrences.
    """
    root_path = NodePath(program)
    self._root = Scope(ScopeKind.MODULE, root_path)
    self._scope = self._root
    self._pending = []
    self._declared = {}

    self.generic_visit(root_path)

    info = ScopeInfo(self._root, list(self._pending), collect_names(program))
    for node_id, binding in self._declared.items():
      info._by_node[node_id] = binding
    for occurrence in self._pending:
      binding = occurrence.scope.lookup(occurrence.name)
      if binding is None:
        continue
      binding.add(occurrence)
      info._register(occurrence.path.node, binding)
    return info

  # --- Bookkeeping ---

  @contextmanager
  def _enter(self, kind: ScopeKind, path: NodePath) -> Iterator[Scope]:
    previous = self._scope
    self._scope = Scope(kind, path, previous)
    try:
      yield self._scope
    finally:
      self._scope = previous

  def _declare(self, ident: NodePath, kind: str, scope: Scope, declaration: Optional[NodePath], **extra) -> None:
    name = ident.node["name"]
    binding = scope.bindings.get(name)
    if binding is None:
      binding = Binding(name=name, kind=kind, scope=scope, identifier=ident, declaration=declaration, **extra)
      scope.bindings[name] = binding
    self._declared[id(ident.node)] = binding

  def _record(self, ident: NodePath, role: OccurrenceRole, form: Optional[WriteForm] = None) -> None:
    self._pending.append(Occurrence(ident, self._scope, role, form))

  def _declare_pattern(self, path: Optional[NodePath], kind: str, scope: Scope, declaration: NodePath) -> None:
    """Declares every identifier bound by a (possibly destructuring) pattern."""
    if path is None:
      return
    if path.type == "Identifier":
      self._declare(path, kind, scope, declaration)
    elif path.type == "ObjectPattern":
      for prop in path.get_list("properties"):
        if prop.type == "RestElement":
          self._declare_pattern(prop.get("argument"), kind, scope, declaration)
          continue
        if prop.node.get("computed"):
          self.visit(prop.get("key"))
        self._declare_pattern(prop.get("value"), kind, scope, declaration)
    elif path.type == "ArrayPattern":
      for element in path.get_list("elements"):
        self._declare_pattern(element, kind, scope, declaration)
    elif path.type == "AssignmentPattern":
      self._declare_pattern(path.get("left"), kind, scope, declaration)
      self.visit(path.get("right"))
    elif path.type == "RestElement":
      self._declare_pattern(path.get("argument"), kind, scope, declaration)

  def _assign_pattern(self, path: Optional[NodePath]) -> None:
    """Records the targets of a destructuring assignment or loop head as writes."""
    if path is None:
      return
    if path.type == "Identifier":
      self._record(path, OccurrenceRole.WRITE, WriteForm.PATTERN)
    elif path.type == "MemberExpression":
      self.visit(path)
    elif path.type == "ObjectPattern":
      for prop in path.get_list("properties"):
        if prop.type == "RestElement":
          self._assign_pattern(prop.get("argument"))
          continue
        if prop.node.get("computed"):
          self.visit(prop.get("key"))
        self._assign_pattern(prop.get("value"))
    elif path.type == "ArrayPattern":
      for element in path.get_list("elements"):
        self._assign_pattern(element)
    elif path.type == "AssignmentPattern":
      self._assign_pattern(path.get("left"))
      self.visit(path.get("right"))
    elif path.type == "RestElement":
      self._assign_pattern(path.get("argument"))

  # --- Declarations ---

  def visit_VariableDeclaration(self, path: NodePath) -> None:
    kind = path.node["kind"]
    target = self._scope.function_scope() if kind == "var" else self._scope
    for declarator in path.get_list("declarations"):
      self._declare_pattern(declarator.get("id"), kind, target, declarator)
      self.visit_optional(declarator.get("init"))

  def visit_FunctionDeclaration(self, path: NodePath) -> None:
    ident = path.get("id")
    if ident is not None:
      self._declare(ident, "function", self._scope, path)
    self._visit_function(path, own_name=False)

  def visit_FunctionExpression(self, path: NodePath) -> None:
    self._visit_function(path, own_name=True)

  def visit_ArrowFunctionExpression(self, path: NodePath) -> None:
    self._visit_function(path, own_name=False)

  def _visit_function(self, path: NodePath, own_name: bool) -> None:
    with self._enter(ScopeKind.FUNCTION, path) as scope:
      ident = path.get("id")
      if own_name and ident is not None:
        self._declare(ident, "function", scope, path)
      for param in path.get_list("params"):
        self._declare_pattern(param, "param", scope, path)
      body = path.get("body")
      if body is None:
        return
      if body.type == "BlockStatement":
        for statement in body.get_list("body"):
          self.visit(statement)
      else:
        self.visit(body)

  def visit_ClassDeclaration(self, path: NodePath) -> None:
    ident = path.get("id")
    if ident is not None:
      self._declare(ident, "class", self._scope, path)
    self._visit_class(path, own_name=False)

  def visit_ClassExpression(self, path: NodePath) -> None:
    self._visit_class(path, own_name=True)

  def _visit_class(self, path: NodePath, own_name: bool) -> None:
    self.visit_optional(path.get("superClass"))
    with self._enter(ScopeKind.CLASS, path) as scope:
      ident = path.get("id")
      if own_name and ident is not None:
        self._declare(ident, "class", scope, path)
      self.visit_optional(path.get("body"))

  def visit_ImportDeclaration(self, path: NodePath) -> None:
    source = path.node["source"]["value"]
    for spec in path.get_list("specifiers"):
      if spec.type == "ImportSpecifier":
        imported = spec.node["imported"]["name"]
      elif spec.type == "ImportDefaultSpecifier":
        imported = "default"
      else:
        imported = "*"
      self._declare(spec.get("local"), "import", self._root, path, source=source, imported=imported)

  def visit_ExportNamedDeclaration(self, path: NodePath) -> None:
    declaration = path.get("declaration")
    if declaration is not None:
      self.visit(declaration)
      return
    if path.node.get("source"):
      return
    for spec in path.get_list("specifiers"):
      self._record(spec.get("local"), OccurrenceRole.EXPORT)

  def visit_ExportDefaultDeclaration(self, path: NodePath) -> None:
    self.visit_optional(path.get("declaration"))

  def visit_ExportAllDeclaration(self, path: NodePath) -> None:
    pass

  # --- Block scopes ---

  def visit_BlockStatement(self, path: NodePath) -> None:
    with self._enter(ScopeKind.BLOCK, path):
      self.generic_visit(path)

  def visit_ForStatement(self, path: NodePath) -> None:
    with self._enter(ScopeKind.BLOCK, path):
      self.generic_visit(path)

  def visit_ForInStatement(self, path: NodePath) -> None:
    self._visit_for_each(path)

  def visit_ForOfStatement(self, path: NodePath) -> None:
    self._visit_for_each(path)

  def _visit_for_each(self, path: NodePath) -> None:
    with self._enter(ScopeKind.BLOCK, path):
      left = path.get("left")
      if left is not None and left.type == "VariableDeclaration":
        self.visit(left)
      else:
        self._assign_pattern(left)
      self.visit_optional(path.get("right"))
      self.visit_optional(path.get("body"))

  def visit_SwitchStatement(self, path: NodePath) -> None:
    self.visit_optional(path.get("discriminant"))
    with self._enter(ScopeKind.BLOCK, path):
      for case in path.get_list("cases"):
        self.visit(case)

  def visit_CatchClause(self, path: NodePath) -> None:
    with self._enter(ScopeKind.BLOCK, path) as scope:
      self._declare_pattern(path.get("param"), "catch", scope, path)
      body = path.get("body")
      if body is not None:
        for statement in body.get_list("body"):
          self.visit(statement)

  # --- Non-reference identifier positions ---

  def visit_LabeledStatement(self, path: NodePath) -> None:
    self.visit_optional(path.get("body"))

  def visit_BreakStatement(self, path: NodePath) -> None:
    pass

  def visit_ContinueStatement(self, path: NodePath) -> None:
    pass

  def visit_MetaProperty(self, path: NodePath) -> None:
    pass

  def visit_MemberExpression(self, path: NodePath) -> None:
    self.visit(path.get("object"))
    if path.node.get("computed"):
      self.visit(path.get("property"))

  def visit_Property(self, path: NodePath) -> None:
    if path.node.get("computed"):
      self.visit(path.get("key"))
    self.visit_optional(path.get("value"))

  def visit_MethodDefinition(self, path: NodePath) -> None:
    if path.node.get("computed"):
      self.visit(path.get("key"))
    self.visit_optional(path.get("value"))

  # --- Occurrences ---

  def visit_Identifier(self, path: NodePath) -> None:
    self._record(path, OccurrenceRole.READ)

  def visit_AssignmentExpression(self, path: NodePath) -> None:
    left = path.get("left")
    if left.type == "Identifier":
      form = WriteForm.ASSIGN if path.node["operator"] == "=" else WriteForm.COMPOUND
      self._record(left, OccurrenceRole.WRITE, form)
    elif left.type == "MemberExpression":
      self.visit(left)
    else:
      self._assign_pattern(left)
    self.visit(path.get("right"))

  def visit_UpdateExpression(self, path: NodePath) -> None:
    argument = path.get("argument")
    if argument.type == "Identifier":
      self._record(argument, OccurrenceRole.WRITE, WriteForm.UPDATE)
    else:
      self.visit(argument)


def collect_names(root: Node) -> Set[str]:
  """
  Collects the name of every identifier (including JSX names) in a tree.

  Args:
      root: Any node.

  Returns:
      Set[str]: Names in use, bound or not.
  """
  names: Set[str] = set()
  stack = [root]
  while stack:
    node = stack.pop()
    if node["type"] in ("Identifier", "JSXIdentifier"):
      names.add(node["name"])
    for key, value in node.items():
      if key in ("range", "loc"):
        continue
      if isinstance(value, list):
        stack.extend(item for item in value if is_node(item))
      elif is_node(value):
        stack.append(value)
  return names


def analyze_scopes(program: Node) -> ScopeInfo:
  """Convenience wrapper around `ScopeAnalyzer`."""
  return ScopeAnalyzer().analyze(program)
