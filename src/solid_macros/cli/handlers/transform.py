"""
Transform Command Handler.

This module implements the logic for the `solid-macros transform` command.
It orchestrates:
1. Configuration loading (``pyproject.toml`` plus CLI overrides).
2. Macro expansion via the Engine, per file.
3. Output writing, trace dumping and the batch summary.
"""

import json
from pathlib import Path
from typing import Dict, List, Optional

from rich.table import Table

from solid_macros.config import RuntimeConfig
from solid_macros.core.engine import MacroEngine
from solid_macros.core.result import TransformResult
from solid_macros.utils.console import (
  console,
  log_error,
  log_info,
  log_success,
  log_warning,
)


def handle_transform(
  input_path: Path,
  output_path: Optional[Path],
  macro_modules: Optional[List[str]] = None,
  runtime_module: Optional[str] = None,
  jsx: Optional[bool] = None,
  json_trace_path: Optional[Path] = None,
) -> int:
  """
  Handles the 'transform' command execution.

  Args:
      input_path: Source file or directory.
      output_path: Destination file or directory. A single file is printed to
          stdout when omitted; a directory requires it.
      macro_modules: Override for the macro module specifiers.
      runtime_module: Override for the runtime module.
      jsx: Override for JSX parsing.
      json_trace_path: Optional path to dump the execution trace JSON.

  Returns:
      int: Exit code (0 for success, 1 if any module failed).
  """
  if not input_path.exists():
    log_error(f"Input not found: {input_path}")
    return 1

  config = RuntimeConfig.load(
    macro_modules=macro_modules,
    runtime_module=runtime_module,
    jsx=jsx,
    search_path=input_path if input_path.is_dir() else input_path.parent,
  )
  engine = MacroEngine(config=config)
  batch_results: Dict[str, TransformResult] = {}

  if input_path.is_file():
    result = _transform_single_file(engine, input_path, output_path, json_trace_path)
    return 0 if result.success else 1

  if not output_path:
    log_error("Directory transformation requires --out destination directory.")
    return 1

  sources = sorted(p for p in input_path.rglob("*") if p.is_file() and p.suffix.lower() in config.extensions)
  if not sources:
    log_warning(f"No {', '.join(config.extensions)} files found in {input_path}")
    return 0

  log_info(f"Processing {len(sources)} files from {input_path}...")

  for src_file in sources:
    rel_path = src_file.relative_to(input_path)
    batch_trace = None
    if json_trace_path:
      # One trace per module, next to its output
      batch_trace = (output_path / rel_path).with_suffix(".trace.json")
    result = _transform_single_file(engine, src_file, output_path / rel_path, batch_trace)
    batch_results[str(rel_path)] = result

  _print_batch_summary(batch_results)
  return 0 if all(r.success for r in batch_results.values()) else 1


def _transform_single_file(
  engine: MacroEngine,
  input_path: Path,
  output_path: Optional[Path],
  json_trace_path: Optional[Path] = None,
) -> TransformResult:
  """
  Expands one file.

  Args:
      engine: Configured engine.
      input_path: Source file path.
      output_path: Destination file path; stdout if None.
      json_trace_path: Path to save trace event logs.

  Returns:
      TransformResult: Result object containing status and code.
  """
  try:
    with open(input_path, "rt", encoding="utf-8") as f:
      code = f.read()
  except (OSError, UnicodeDecodeError) as e:
    log_error(f"Failed to read {input_path}: {e}")
    return TransformResult(success=False, errors=[str(e)])

  result = engine.run(code, filename=str(input_path))

  if json_trace_path and result.trace_events:
    try:
      json_trace_path.parent.mkdir(parents=True, exist_ok=True)
      with open(json_trace_path, "wt", encoding="utf-8") as f:
        json.dump(result.trace_events, f, indent=2)
      log_info(f"Trace saved to [path]{json_trace_path}[/path]")
    except OSError as e:
      log_error(f"Failed to write trace: {e}")

  if not result.success:
    for error in result.errors:
      log_error(error)
    return result

  if output_path:
    try:
      output_path.parent.mkdir(parents=True, exist_ok=True)
      with open(output_path, "wt", encoding="utf-8") as f:
        f.write(result.code)
    except OSError as e:
      log_error(f"Failed to write {output_path}: {e}")
      return TransformResult(code=result.code, success=False, errors=[str(e)])
    log_success(f"Expanded {result.macro_count} macro(s): [path]{input_path}[/path] -> [path]{output_path}[/path]")
  else:
    print(result.code, end="")

  return result


def _print_batch_summary(results: Dict[str, TransformResult]) -> None:
  """
  Renders a summary table of the failed modules to the console.

  Args:
      results: Dictionary mapping relative filenames to results.
  """
  total = len(results)
  successes = sum(1 for r in results.values() if r.success)
  failures = total - successes

  if failures == 0:
    expanded = sum(r.macro_count for r in results.values())
    log_success(f"Batch Complete: {successes}/{total} files processed, {expanded} macro(s) expanded.")
    return

  table = Table(title="Macro Expansion Report")
  table.add_column("File", style="cyan")
  table.add_column("Status", justify="center")
  table.add_column("Issues", style="red")

  for filename, res in results.items():
    if res.success:
      continue
    issues = "; ".join(res.errors) if res.errors else "Unknown Error"
    table.add_row(filename, "❌ Failed", issues)

  console.print(table)
  console.print(f"\n[bold]Summary:[/bold] {successes} Passed, {failures} Failed.")
