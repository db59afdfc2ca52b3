"""
The ``$memo`` Macro.

Turns a variable into a derived value::

    let doubled = $memo(count * 2);    const doubled = _memo(() => count * 2);
    log(doubled);               ->     log(doubled());

``createMemo`` expects a computation, so an argument that is not already a
function expression is wrapped in a zero-argument arrow. The declared name
holds the memo's getter; there is no setter, so writes to it are rejected
unless `RuntimeConfig.guard_memo_writes` is disabled, in which case they are
left for the runtime to reject (the binding is ``const`` after expansion).
"""

from solid_macros.core.errors import MemoAssignmentError
from solid_macros.core.js.nodes import NodePath
from solid_macros.core.js.patcher import Span
from solid_macros.core.js.scope import Binding
from solid_macros.core.js.snippets import thunk_body_needs_parens
from solid_macros.core.macros.base import MacroContext, ReactiveMacro
from solid_macros.enums import MacroKind


class MemoMacro(ReactiveMacro):
  """
  Rule for ``$memo(computation)``.
  """

  kind = MacroKind.MEMO
  marker = "$memo"
  export = "createMemo"
  alias_hint = "memo"
  min_args = 1
  max_args = 1
  type_import = "import { EffectFunction } from 'solid-js/types/reactive/signal';"
  signature = "<T>(value: EffectFunction<T, T> | T): T"

  def normalize_arguments(self, call: NodePath, ctx: MacroContext) -> None:
    """Wraps a non-function argument into ``() => argument``."""
    arg = call.get("arguments", 0)
    if arg is None or arg.is_function():
      return
    span = Span(arg.start, arg.end)
    if thunk_body_needs_parens(arg.node):
      parts = ("() => (", span, ")")
    else:
      parts = ("() => ", span)
    # Outer edit: reads of other bindings inside the argument are nested in it.
    ctx.patcher.replace(arg.start, arg.end, *parts, priority=1)
    ctx.tracer.log_rewrite("memo computation", ctx.text(arg), f"() => {ctx.text(arg)}")

  def rewrite_binding(self, binding: Binding, ctx: MacroContext) -> None:
    name = binding.name
    if ctx.config.guard_memo_writes and binding.violations:
      first = binding.violations[0]
      raise MemoAssignmentError(
        f"Cannot assign to '{name}': {self.marker}() values are derived and read-only.",
        first.site.location,
      )
    for occurrence in binding.references:
      if ctx.config.memo_insert_accessor and self.is_insert_argument(occurrence, ctx):
        continue
      self.replace_read(occurrence, ctx, f"{name}()")
