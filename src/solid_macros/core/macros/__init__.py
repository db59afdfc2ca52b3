"""
Reactive Macro Rules.

Provides the ``$signal`` and ``$memo`` rules and helpers to look them up by
kind or by the name they export from the macro module.
"""

from typing import Dict, Sequence, Tuple

from solid_macros.core.macros.base import BindingContext, MacroContext, ReactiveMacro
from solid_macros.core.macros.memo import MemoMacro
from solid_macros.core.macros.signal import SignalMacro
from solid_macros.enums import MacroKind


def build_macros() -> Tuple[ReactiveMacro, ...]:
  """Instantiates the available macro rules, in declaration order."""
  return (SignalMacro(), MemoMacro())


def macro_exports(macros: Sequence[ReactiveMacro]) -> Dict[str, MacroKind]:
  """Maps each macro's marker name (its export from the macro module) to its kind."""
  return {macro.marker: macro.kind for macro in macros}


__all__ = [
  "BindingContext",
  "MacroContext",
  "MemoMacro",
  "ReactiveMacro",
  "SignalMacro",
  "build_macros",
  "macro_exports",
]
