"""
The ``$signal`` Macro.

Turns a mutable variable into a signal::

    let count = $signal(0);          const count = _signal(0);
    count++;                   ->    count[1](count[0]() + 1);
    count = 5;                       count[1](5);
    count *= a + b;                  count[1](count[0]() * (a + b));
    log(count);                      log(count[0]());
    _$insert(el, count);             _$insert(el, count[0]);

The declared name holds the ``[getter, setter]`` pair returned by
``createSignal``. Reads call the getter, except where the value is handed to
the renderer's insertion helper, which needs the getter itself to track it.

Increments and decrements are normalized to "set to the new value"; the
rewritten expression evaluates to the setter's return value, not to the old
(postfix) or new (prefix) number.
"""

from solid_macros.core.errors import UnsupportedWriteError
from solid_macros.core.js.scope import Binding, Occurrence
from solid_macros.core.js.snippets import argument_needs_parens, compound_operator, operand_needs_parens
from solid_macros.core.macros.base import MacroContext, ReactiveMacro, operand
from solid_macros.enums import MacroKind, WriteForm


class SignalMacro(ReactiveMacro):
  """
  Rule for ``$signal(value, options?)``.
  """

  kind = MacroKind.SIGNAL
  marker = "$signal"
  export = "createSignal"
  alias_hint = "signal"
  min_args = 1
  max_args = 2
  type_import = "import { SignalOptions } from 'solid-js/types/reactive/signal';"
  signature = "<T>(value: T, options?: SignalOptions<T> | undefined): T"

  def rewrite_binding(self, binding: Binding, ctx: MacroContext) -> None:
    name = binding.name
    for occurrence in binding.references:
      if self.is_insert_argument(occurrence, ctx):
        self.replace_read(occurrence, ctx, f"{name}[0]")
      else:
        self.replace_read(occurrence, ctx, f"{name}[0]()")
    for occurrence in binding.violations:
      self.rewrite_write(occurrence, ctx)

  def rewrite_write(self, occurrence: Occurrence, ctx: MacroContext) -> None:
    """
    Rewrites one write of the signal into a setter call.

    Raises:
        UnsupportedWriteError: For destructuring targets, loop heads and
            operators without a binary counterpart.
    """
    name = occurrence.name
    site = occurrence.site
    getter = f"{name}[0]()"
    setter = f"{name}[1]"

    if occurrence.form == WriteForm.UPDATE:
      op = site.node["operator"][0]
      self.replace_site(site, ctx, "update", [f"{setter}({getter} {op} 1)"])

    elif occurrence.form == WriteForm.ASSIGN:
      right = site.get("right")
      parts = operand(right, argument_needs_parens(right.node))
      self.replace_site(site, ctx, "assignment", [f"{setter}(", *parts, ")"])

    elif occurrence.form == WriteForm.COMPOUND:
      try:
        op = compound_operator(site.node["operator"])
      except ValueError:
        raise UnsupportedWriteError(
          f"Operator '{site.node['operator']}' cannot be applied to {self.marker}() binding '{name}'.",
          site.location,
        ) from None
      right = site.get("right")
      parts = operand(right, operand_needs_parens(right.node, op))
      self.replace_site(site, ctx, "compound assignment", [f"{setter}({getter} {op} ", *parts, ")"])

    else:
      raise UnsupportedWriteError(
        f"Cannot assign {self.marker}() binding '{name}' through destructuring or a loop head; assign it directly.",
        occurrence.path.location,
      )
