"""
Main Entry Point for the solid-macros CLI.

This module handles argument parsing and dispatches to the command handlers
re-exported by `solid_macros.cli.commands`.
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from solid_macros import __version__
from solid_macros.cli import commands


def main(argv: Optional[List[str]] = None) -> int:
  """
  Main CLI entry point.

  Parses arguments via argparse and calls the appropriate handler function.

  Args:
      argv: Optional list of command line arguments (defaults to sys.argv).

  Returns:
      int: Exit code (0 for success, non-zero for failure).
  """
  parser = argparse.ArgumentParser(description="solid-macros: Compile-time $signal/$memo expansion for Solid")
  parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

  subparsers = parser.add_subparsers(dest="command", required=True)

  # --- Command: TRANSFORM ---
  cmd_tr = subparsers.add_parser("transform", help="Expand macros in a JavaScript file or directory")
  cmd_tr.add_argument("path", type=Path, help="Input source file or directory")
  cmd_tr.add_argument("--out", type=Path, help="Output destination (file or dir). Prints to stdout if omitted.")
  cmd_tr.add_argument(
    "--macro-module",
    dest="macro_modules",
    action="append",
    default=None,
    help="Module specifier providing the macros (repeatable, default: from toml or solid-js/macro)",
  )
  cmd_tr.add_argument("--runtime-module", default=None, help="Module providing createSignal/createMemo")
  cmd_tr.add_argument("--no-jsx", action="store_true", help="Parse plain JavaScript without JSX")
  cmd_tr.add_argument(
    "--json-trace", type=Path, default=None, help="Dump the expansion trace (phases, rewrites) to a JSON file."
  )

  # --- Command: TYPINGS ---
  cmd_ty = subparsers.add_parser("typings", help="Emit TypeScript declarations for the macro modules")
  cmd_ty.add_argument("--out", type=Path, default=None, help="Output .d.ts file. Prints to stdout if omitted.")
  cmd_ty.add_argument(
    "--macro-module",
    dest="macro_modules",
    action="append",
    default=None,
    help="Module specifier to declare (repeatable, default: from toml or solid-js/macro)",
  )

  args = parser.parse_args(argv)

  if args.command == "transform":
    return commands.handle_transform(
      args.path,
      args.out,
      args.macro_modules,
      args.runtime_module,
      False if args.no_jsx else None,
      args.json_trace,
    )

  elif args.command == "typings":
    return commands.handle_typings(args.out, args.macro_modules)

  return 0


if __name__ == "__main__":
  sys.exit(main())
