"""
Orchestration Engine for Macro Expansion.

This module provides the `MacroEngine`, the driver that expands ``$signal``
and ``$memo`` in one JavaScript module.

The pipeline consists of:

1.  **Fast path**: Modules that mention neither a marker name nor a macro
    module are returned untouched without parsing. Re-running the engine on
    its own output is therefore a no-op.
2.  **Parsing**: esprima parses the module into an ESTree dictionary tree.
3.  **Scope Analysis**: Every identifier occurrence is resolved to its binding.
4.  **Macro Imports**: Imports from the macro modules are validated, mapped to
    local marker names, and scheduled for removal.
5.  **Expansion**: Each marker call found by the `MarkerScanner` is handed to
    the rule of its kind, which records edits against the original source.
6.  **Import Injection**: Requested runtime imports are aggregated and placed
    before the first statement.
7.  **Rendering**: The patcher applies all edits.

Any `MacroError` aborts the module: `rewrite` raises it, `run` reports it and
returns the original code.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from solid_macros.config import RuntimeConfig
from solid_macros.core.errors import MacroError
from solid_macros.core.imports import (
  ImportRegistry,
  MacroImportCollector,
  header_position,
  remove_statement,
)
from solid_macros.core.js.parser import parse_module
from solid_macros.core.js.patcher import SourcePatcher
from solid_macros.core.js.scope import analyze_scopes
from solid_macros.core.macros import MacroContext, ReactiveMacro, build_macros, macro_exports
from solid_macros.core.result import TransformResult
from solid_macros.core.scanner import MarkerScanner
from solid_macros.core.tracer import get_tracer, reset_tracer
from solid_macros.enums import MacroKind

logger = logging.getLogger(__name__)


@dataclass
class Expansion:
  """
  Outcome of expanding one module.

  Attributes:
      code (str): Rewritten source.
      macro_count (int): Number of marker calls expanded.
      imports (List[str]): Import statements added.
  """

  code: str
  macro_count: int = 0
  imports: List[str] = field(default_factory=list)


class MacroEngine:
  """
  The main expansion unit.

  Holds the configuration and the macro rules; each call to `rewrite` or `run`
  processes one module independently.
  """

  def __init__(self, config: Optional[RuntimeConfig] = None):
    """
    Initializes the Engine.

    Args:
        config (RuntimeConfig, optional): Runtime configuration. Defaults are used if None.
    """
    self.config = config or RuntimeConfig()
    self.macros: Dict[MacroKind, ReactiveMacro] = {macro.kind: macro for macro in build_macros()}

  def might_contain_macros(self, code: str) -> bool:
    """
    Cheap textual pre-check before parsing.

    Args:
        code (str): Module source.

    Returns:
        bool: False only if the module certainly contains no macro usage.
    """
    if any(macro.marker in code for macro in self.macros.values()):
      return True
    return any(module in code for module in self.config.macro_modules)

  def rewrite(self, code: str, filename: Optional[str] = None) -> str:
    """
    Expands the macros of a module.

    Args:
        code (str): Module source.
        filename (str, optional): Label used in error messages.

    Returns:
        str: The rewritten module.

    Raises:
        MacroError: If the module cannot be parsed or a macro is misused.
    """
    reset_tracer()
    return self.expand(code, filename).code

  def run(self, code: str, filename: Optional[str] = None) -> TransformResult:
    """
    Expands a module and reports the outcome instead of raising.

    Args:
        code (str): Module source.
        filename (str, optional): Label used in error messages.

    Returns:
        TransformResult: Rewritten code, or the original code and the error.
    """
    reset_tracer()
    tracer = get_tracer()
    tracer.start_phase("Macro Expansion", filename or "<module>")
    try:
      expansion = self.expand(code, filename)
    except MacroError as e:
      logger.debug("Expansion of %s failed: %s", filename or "<module>", e)
      return TransformResult(code=code, errors=[str(e)], success=False, trace_events=tracer.export())
    tracer.end_phase()
    return TransformResult(
      code=expansion.code,
      success=True,
      changed=expansion.code != code,
      macro_count=expansion.macro_count,
      imports=expansion.imports,
      trace_events=tracer.export(),
    )

  def expand(self, code: str, filename: Optional[str] = None) -> Expansion:
    """
    Runs the expansion pipeline, recording into the current tracer.

    Args:
        code (str): Module source.
        filename (str, optional): Label used in error messages.

    Returns:
        Expansion: The rewritten module and statistics.

    Raises:
        MacroError: If the module cannot be parsed or a macro is misused.
    """
    tracer = get_tracer()
    if not self.might_contain_macros(code):
      tracer.log_inspection(filename or "<module>", "skipped", "no macro usage")
      return Expansion(code)

    try:
      tracer.start_phase("Parsing", "Source -> ESTree")
      program = parse_module(code, jsx=self.config.jsx)
      tracer.end_phase()

      tracer.start_phase("Scope Analysis", "Resolving bindings")
      scope = analyze_scopes(program)
      root = scope.root.path
      tracer.end_phase()

      patcher = SourcePatcher(code)
      registry = ImportRegistry()

      macro_imports = MacroImportCollector(self.config, macro_exports(list(self.macros.values()))).collect(root)
      names = {macro.marker: kind for kind, macro in self.macros.items()}
      names.update(macro_imports.aliases)
      calls = MarkerScanner(names, scope, self.config).scan(root)

      tracer.start_phase("Expansion", f"{len(calls)} marker call(s)")
      ctx = MacroContext(
        code=code,
        scope=scope,
        patcher=patcher,
        imports=registry,
        config=self.config,
        tracer=tracer,
        filename=filename,
      )
      for call in calls:
        self.macros[call.kind].handle(call.path, ctx)
      tracer.end_phase()

      for declaration in macro_imports.declarations:
        remove_statement(patcher, declaration)

      header = registry.render()
      if header:
        patcher.insert(header_position(root), header)

      output = patcher.render()
    except MacroError as e:
      raise e.with_filename(filename)

    logger.debug("Expanded %d macro call(s) in %s", len(calls), filename or "<module>")
    return Expansion(output, len(calls), registry.render_statements())
