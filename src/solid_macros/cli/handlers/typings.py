"""
Typings Command Handler.

Writes (or prints) the ambient declarations that let editors resolve imports
from the macro modules.
"""

from pathlib import Path
from typing import List, Optional

from solid_macros.config import RuntimeConfig
from solid_macros.core.typings import render_declarations
from solid_macros.utils.console import log_error, log_success


def handle_typings(output_path: Optional[Path], macro_modules: Optional[List[str]] = None) -> int:
  """
  Handles the 'typings' command execution.

  Args:
      output_path: Destination ``.d.ts`` file; stdout if None.
      macro_modules: Override for the declared module specifiers.

  Returns:
      int: Exit code.
  """
  search_path = output_path.parent if output_path else None
  config = RuntimeConfig.load(macro_modules=macro_modules, search_path=search_path)
  text = render_declarations(config)

  if output_path is None:
    print(text, end="")
    return 0

  try:
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "wt", encoding="utf-8") as f:
      f.write(text)
  except OSError as e:
    log_error(f"Failed to write {output_path}: {e}")
    return 1
  log_success(f"Declarations written to [path]{output_path}[/path]")
  return 0
