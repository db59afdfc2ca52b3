"""
Import Handling.

Two concerns live here:

1.  **Import sink** (`ImportRegistry`): macro rules request runtime imports as
    ``(module, export, local alias)`` triples. The registry is append-only and
    order preserving; identical requests collapse into one. At the end of a
    module pass the requests are aggregated into one import statement per
    module and placed before the first statement of the module.
2.  **Macro imports** (`MacroImportCollector`): the ``import { $signal } from
    "solid-js/macro"`` declarations only exist for editors and type checkers.
    They are validated, mapped to local marker names (supporting aliases), and
    removed from the output.
"""

import json
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Mapping

from solid_macros.config import RuntimeConfig
from solid_macros.core.errors import MacroImportError
from solid_macros.core.js.nodes import NodePath
from solid_macros.core.js.patcher import SourcePatcher
from solid_macros.enums import MacroKind


@dataclass(frozen=True)
class ImportRequest:
  """
  A named import the rewritten module needs.

  Attributes:
      module (str): Module specifier (e.g. ``solid-js``).
      export (str): Exported name (e.g. ``createSignal``).
      local (str): Local alias bound in the module.
  """

  module: str
  export: str
  local: str

  def specifier(self) -> str:
    if self.export == self.local:
      return self.export
    return f"{self.export} as {self.local}"


class ImportRegistry:
  """
  Append-only sink of import requests for one module.
  """

  def __init__(self) -> None:
    self._requests: List[ImportRequest] = []

  def __len__(self) -> int:
    return len(self._requests)

  def __iter__(self) -> Iterator[ImportRequest]:
    return iter(self._requests)

  def append(self, module: str, export: str, local: str) -> ImportRequest:
    """
    Registers an import. Repeating an identical request is a no-op.

    Args:
        module: Module specifier.
        export: Exported name.
        local: Local alias.

    Returns:
        ImportRequest: The stored request.
    """
    request = ImportRequest(module, export, local)
    if request not in self._requests:
      self._requests.append(request)
    return request

  def render_statements(self) -> List[str]:
    """
    Aggregates requests into import statements.

    Returns:
        List[str]: One ``import { ... } from "module";`` per module, in
        first-registration order.
    """
    grouped: Dict[str, List[ImportRequest]] = {}
    for request in self._requests:
      grouped.setdefault(request.module, []).append(request)
    statements = []
    for module, requests in grouped.items():
      names = ", ".join(r.specifier() for r in requests)
      statements.append(f"import {{ {names} }} from {json.dumps(module)};")
    return statements

  def render(self) -> str:
    """Returns the import block, one statement per line, or an empty string."""
    return "".join(f"{statement}\n" for statement in self.render_statements())


@dataclass
class MacroImports:
  """
  Macro module imports found in a module.

  Attributes:
      aliases (Dict[str, MacroKind]): Local names bound to macros.
      declarations (List[NodePath]): The import declarations to remove.
  """

  aliases: Dict[str, MacroKind] = field(default_factory=dict)
  declarations: List[NodePath] = field(default_factory=list)


class MacroImportCollector:
  """
  Finds and validates imports from the configured macro modules.
  """

  def __init__(self, config: RuntimeConfig, exports: Mapping[str, MacroKind]):
    """
    Args:
        config: Runtime configuration listing the macro modules.
        exports: Macro names exported by every macro module (e.g. ``$signal``).
    """
    self.config = config
    self.exports = dict(exports)

  def collect(self, program: NodePath) -> MacroImports:
    """
    Scans the top-level import declarations of a module.

    Args:
        program: Path of the ``Program`` node.

    Returns:
        MacroImports: Local macro names and the declarations to strip.

    Raises:
        MacroImportError: For default or namespace imports, or names the
            macro module does not export.
    """
    found = MacroImports()
    for statement in program.get_list("body"):
      if statement.type != "ImportDeclaration":
        continue
      source = statement.node["source"]["value"]
      if not self.config.is_macro_module(source):
        continue
      for spec in statement.get_list("specifiers"):
        if spec.type != "ImportSpecifier":
          raise MacroImportError(
            f"Only named imports are supported from '{source}' (e.g. import {{ $signal }} from '{source}').",
            spec.location,
          )
        imported = spec.node["imported"]["name"]
        if imported not in self.exports:
          available = ", ".join(sorted(self.exports))
          raise MacroImportError(
            f"'{imported}' is not exported by '{source}'. Available macros: {available}.",
            spec.location,
          )
        found.aliases[spec.node["local"]["name"]] = self.exports[imported]
      found.declarations.append(statement)
    return found


def remove_statement(patcher: SourcePatcher, statement: NodePath) -> None:
  """
  Deletes a statement together with the line break that follows it.

  Args:
      patcher: The module patcher.
      statement: The statement path.
  """
  source = patcher.source
  end = statement.end
  if source.startswith("\r\n", end):
    end += 2
  elif source.startswith("\n", end):
    end += 1
  patcher.remove(statement.start, end)


def header_position(program: NodePath) -> int:
  """
  Finds where generated imports are inserted: before the first statement
  that is not a directive prologue entry.

  Args:
      program: Path of the ``Program`` node.

  Returns:
      int: Source offset.
  """
  for statement in program.get_list("body"):
    if statement.type == "ExpressionStatement" and statement.node.get("directive"):
      continue
    return statement.start
  return 0
