"""
JavaScript Front-End.

Parsing, node paths, scope analysis and positional patching for ES modules.
"""

from solid_macros.core.js.nodes import NodePath, NodeVisitor
from solid_macros.core.js.parser import parse_module
from solid_macros.core.js.patcher import SourcePatcher, Span
from solid_macros.core.js.scope import Binding, Occurrence, Scope, ScopeInfo, analyze_scopes

__all__ = [
  "Binding",
  "NodePath",
  "NodeVisitor",
  "Occurrence",
  "Scope",
  "ScopeInfo",
  "SourcePatcher",
  "Span",
  "analyze_scopes",
  "parse_module",
]
