"""
Shared Scaffold of the Reactive Macros.

`ReactiveMacro` implements everything ``$signal`` and ``$memo`` have in
common, parameterized by marker name, exported constructor and alias stem:

1.  Validate the call's arguments.
2.  Allocate a collision-free alias, request ``import { <export> as <alias> }``
    from the runtime module, and point the callee at the alias.
3.  Normalize the arguments (memo wraps its argument in a thunk).
4.  Locate the binding context, the nearest enclosing declaration within the
    same function. Without one the marker is plain expression usage and
    expansion stops here.
5.  Validate the declaration (``let``, a single declarator, a plain name, the
    marker as the whole initializer) and turn ``let`` into ``const``: the
    name now holds the accessor(s).
6.  Rewrite every occurrence of the bound name (subclass specific).

Subclasses override `normalize_arguments` and `rewrite_binding`.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from solid_macros.config import RuntimeConfig
from solid_macros.core.errors import (
  InvalidArgumentsError,
  InvalidDeclarationKind,
  MacroError,
  MultipleDeclaratorsError,
  NestedMarkerError,
  NonIdentifierBindingError,
)
from solid_macros.core.imports import ImportRegistry
from solid_macros.core.js.nodes import NodePath
from solid_macros.core.js.patcher import Part, SourcePatcher, Span
from solid_macros.core.js.scope import Binding, Occurrence, ScopeInfo
from solid_macros.core.tracer import TraceLogger
from solid_macros.enums import MacroKind

logger = logging.getLogger(__name__)


@dataclass
class MacroContext:
  """
  Services a macro rule needs while expanding one module.

  Attributes:
      code (str): Original module source.
      scope (ScopeInfo): Scope analysis of the module.
      patcher (SourcePatcher): Edit sink for the module.
      imports (ImportRegistry): Import request sink.
      config (RuntimeConfig): Active configuration.
      tracer (TraceLogger): Trace event recorder.
      filename (Optional[str]): Module being expanded, for diagnostics.
  """

  code: str
  scope: ScopeInfo
  patcher: SourcePatcher
  imports: ImportRegistry
  config: RuntimeConfig
  tracer: TraceLogger
  filename: Optional[str] = None

  def text(self, path: NodePath) -> str:
    return self.code[path.start : path.end]


@dataclass
class BindingContext:
  """
  The declaration a marker call initializes.

  Attributes:
      declaration (NodePath): The ``VariableDeclaration``.
      declarator (NodePath): The ``VariableDeclarator`` whose init is the marker call.
      binding (Binding): The declared name and its occurrences.
  """

  declaration: NodePath
  declarator: NodePath
  binding: Binding

  @property
  def name(self) -> str:
    return self.binding.name


def operand(path: NodePath, parens: bool) -> Tuple[Part, ...]:
  """Template parts re-emitting an expression, optionally parenthesized."""
  span = Span(path.start, path.end)
  if parens:
    return ("(", span, ")")
  return (span,)


class ReactiveMacro:
  """
  Base rule for a reactive marker call.

  Attributes:
      kind (MacroKind): Which macro this rule implements.
      marker (str): Callee name recognized in source (e.g. ``$signal``).
      export (str): Constructor imported from the runtime module.
      alias_hint (str): Stem for the generated local alias.
      min_args (int): Minimum accepted argument count.
      max_args (int): Maximum accepted argument count.
      type_import (str): Type import needed by `signature` in declaration files.
      signature (str): TypeScript call signature of the marker.
  """

  kind: MacroKind
  marker: str
  export: str
  alias_hint: str
  min_args: int = 1
  max_args: int = 1
  type_import: str = ""
  signature: str = ""

  def __repr__(self) -> str:
    return f"{type(self).__name__}({self.marker!r} -> {self.export!r})"

  def handle(self, call: NodePath, ctx: MacroContext) -> Optional[BindingContext]:
    """
    Expands one marker call.

    Args:
        call: Path of the ``CallExpression``.
        ctx: Module services.

    Returns:
        Optional[BindingContext]: The bound declaration, or None for expression usage.

    Raises:
        UsageError: If the call or its declaration has an unsupported shape.
    """
    self.check_arguments(call)

    alias = ctx.scope.generate_uid(self.alias_hint)
    ctx.imports.append(ctx.config.runtime_module, self.export, alias)
    ctx.tracer.log_import(ctx.config.runtime_module, self.export, alias)
    callee = call.get("callee")
    ctx.patcher.replace(callee.start, callee.end, alias)

    self.normalize_arguments(call, ctx)

    line = call.location.line if call.location else None
    binding_ctx = self.find_binding_context(call, ctx)
    if binding_ctx is None:
      logger.debug("%s() at %s:%s used as a plain expression", self.marker, ctx.filename or "<module>", line)
      ctx.tracer.log_macro(self.marker, None, line)
      return None

    ctx.tracer.log_macro(self.marker, binding_ctx.name, line)
    self.make_const(binding_ctx.declaration, ctx)
    self.rewrite_binding(binding_ctx.binding, ctx)
    return binding_ctx

  def check_arguments(self, call: NodePath) -> None:
    """
    Validates the argument count and rejects spread arguments.

    Raises:
        InvalidArgumentsError: On a mismatch.
    """
    args = call.get_list("arguments")
    for arg in args:
      if arg.type == "SpreadElement":
        raise InvalidArgumentsError(f"{self.marker}() does not accept spread arguments.", arg.location)
    if not self.min_args <= len(args) <= self.max_args:
      if self.min_args == self.max_args:
        expected = str(self.min_args)
      else:
        expected = f"{self.min_args} to {self.max_args}"
      raise InvalidArgumentsError(
        f"{self.marker}() expects {expected} argument(s), got {len(args)}.",
        call.location,
      )

  def normalize_arguments(self, call: NodePath, ctx: MacroContext) -> None:
    """Hook for rewriting the marker's arguments. No-op by default."""

  def find_binding_context(self, call: NodePath, ctx: MacroContext) -> Optional[BindingContext]:
    """
    Locates and validates the declaration initialized by the marker call.

    The nearest enclosing ``VariableDeclaration`` is searched up to the first
    function boundary. Inside it the marker must be the whole initializer of
    the single declarator.

    Args:
        call: Path of the marker ``CallExpression``.
        ctx: Module services.

    Returns:
        Optional[BindingContext]: None if no declaration encloses the call.

    Raises:
        InvalidDeclarationKind: If the declaration is not ``let``.
        MultipleDeclaratorsError: If it declares more than one name.
        NonIdentifierBindingError: If the target is a destructuring pattern.
        NestedMarkerError: If the marker is only part of the initializer.
    """
    declaration = call.find_parent(lambda p: p.type == "VariableDeclaration" or p.is_function())
    if declaration is None or declaration.is_function():
      return None
    declarator = call.find_parent(lambda p: p.type == "VariableDeclarator")

    kind = declaration.node["kind"]
    if kind != "let":
      raise InvalidDeclarationKind(
        f"Should use 'let' with {self.marker}() macro, found '{kind}'.",
        declaration.location,
      )
    if len(declaration.node["declarations"]) > 1:
      raise MultipleDeclaratorsError(
        f"Please declare one variable in one let statement with {self.marker}() macro.",
        declaration.location,
      )
    target = declarator.get("id")
    if target.type != "Identifier":
      raise NonIdentifierBindingError(
        f"Only identifier is allowed with {self.marker}() macro, found {target.type}.",
        target.location,
      )
    if call.parent is not declarator or call.key != "init":
      raise NestedMarkerError(
        f"{self.marker}() must be the whole initializer of '{target.node['name']}', found inside {call.parent.type}.",
        call.location,
      )

    binding = ctx.scope.binding_for(target.node)
    if binding is None:
      raise MacroError(f"No scope binding recorded for '{target.node['name']}'.", target.location)
    return BindingContext(declaration, declarator, binding)

  def make_const(self, declaration: NodePath, ctx: MacroContext) -> None:
    """Replaces the ``let`` keyword of the declaration with ``const``."""
    start = declaration.start
    if ctx.code.startswith("let", start):
      ctx.patcher.replace(start, start + 3, "const")

  def rewrite_binding(self, binding: Binding, ctx: MacroContext) -> None:
    raise NotImplementedError

  # --- Occurrence helpers ---

  def is_insert_argument(self, occurrence: Occurrence, ctx: MacroContext) -> bool:
    """True if the occurrence is passed directly to the renderer's insertion helper."""
    path = occurrence.path
    parent = path.parent
    if parent is None or parent.type != "CallExpression" or path.key != "arguments":
      return False
    callee = parent.node["callee"]
    return callee["type"] == "Identifier" and callee["name"] == ctx.config.insert_callee

  def replace_read(self, occurrence: Occurrence, ctx: MacroContext, replacement: str) -> None:
    """
    Replaces a read of the bound name with an accessor expression.

    Shorthand properties are expanded (``{ x }`` becomes ``{ x: <replacement> }``)
    and a ``new`` callee is parenthesized so the call is not taken as the
    constructor's argument list.
    """
    path = occurrence.path
    parent = path.parent
    text = replacement
    if parent is not None and parent.type == "Property" and parent.node.get("shorthand") and path.key == "value":
      text = f"{occurrence.name}: {replacement}"
    elif parent is not None and parent.type == "NewExpression" and path.key == "callee":
      text = f"({replacement})"
    ctx.patcher.replace(path.start, path.end, text)
    ctx.tracer.log_rewrite("read", occurrence.name, text)

  def replace_site(self, site: NodePath, ctx: MacroContext, form: str, parts: Sequence[Part]) -> None:
    """Replaces a whole write expression with a template."""
    ctx.patcher.replace(site.start, site.end, *parts)
    preview = "".join(p if isinstance(p, str) else ctx.code[p.start : p.end] for p in parts)
    ctx.tracer.log_rewrite(form, ctx.text(site), preview)
