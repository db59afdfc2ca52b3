"""
Enumerations for solid-macros.

This module defines the enumerations shared by the scope analysis and the
macro rules: which macro matched a call, which scope a node opens, and how
an identifier occurrence touches its binding.
"""

from enum import Enum


class MacroKind(str, Enum):
  """
  The reactive macros recognized in source modules.
  """

  SIGNAL = "signal"
  MEMO = "memo"


class ScopeKind(str, Enum):
  """
  Lexical scope categories created by the scope analyzer.
  """

  MODULE = "module"
  FUNCTION = "function"
  BLOCK = "block"
  CLASS = "class"


class OccurrenceRole(str, Enum):
  """
  How an identifier occurrence relates to the binding it resolves to.
  """

  READ = "read"
  WRITE = "write"
  EXPORT = "export"  # local name of `export { x }`


class WriteForm(str, Enum):
  """
  Syntactic form of a write occurrence.
  """

  ASSIGN = "assign"  # x = v
  COMPOUND = "compound"  # x op= v
  UPDATE = "update"  # x++, --x
  PATTERN = "pattern"  # [x] = v, for (x of xs)
