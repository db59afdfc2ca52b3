"""
Ambient Type Declarations.

Editors and type checkers need to know what the macro modules export even
though nothing is ever imported from them at runtime. This module renders a
``.d.ts`` file declaring every configured macro module, e.g.::

    declare module 'solid-js/macro' {
      import { SignalOptions } from 'solid-js/types/reactive/signal';
      export function $signal<T>(value: T, options?: SignalOptions<T> | undefined): T;
      ...
    }

The signatures type a macro call as returning the plain value, which is how
the bound name is used in source before expansion.
"""

from typing import List, Optional, Sequence

from solid_macros.config import RuntimeConfig
from solid_macros.core.macros import ReactiveMacro, build_macros


def render_declarations(
  config: Optional[RuntimeConfig] = None,
  macros: Optional[Sequence[ReactiveMacro]] = None,
) -> str:
  """
  Renders the declaration file text.

  Args:
      config (RuntimeConfig, optional): Supplies the macro module specifiers.
      macros (Sequence[ReactiveMacro], optional): Rules to declare. Defaults to all.

  Returns:
      str: One ``declare module`` block per macro module, newline terminated.
  """
  config = config or RuntimeConfig()
  macros = list(macros) if macros is not None else list(build_macros())

  type_imports: List[str] = []
  for macro in macros:
    if macro.type_import and macro.type_import not in type_imports:
      type_imports.append(macro.type_import)

  blocks = []
  for module in config.macro_modules:
    lines = [f"declare module '{module}' {{"]
    lines.extend(f"  {statement}" for statement in type_imports)
    lines.extend(f"  export function {macro.marker}{macro.signature};" for macro in macros)
    lines.append("}")
    blocks.append("\n".join(lines) + "\n")
  return "\n".join(blocks)
