"""
CLI Command Handlers Facade.

Re-exports the handlers from `solid_macros.cli.handlers` so the dispatcher
and tests address a single module.
"""

from solid_macros.cli.handlers.transform import (
  handle_transform,
  _print_batch_summary,
  _transform_single_file,
)
from solid_macros.cli.handlers.typings import handle_typings

__all__ = [
  "_print_batch_summary",
  "_transform_single_file",
  "handle_transform",
  "handle_typings",
]
