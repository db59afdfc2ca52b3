"""
JavaScript Module Parser.

Wraps `esprima` to parse ECMAScript modules (with optional JSX) into an ESTree
shaped tree of plain dictionaries and lists.

Every node carries:

- ``type``: The ESTree node type (e.g. ``"CallExpression"``).
- ``range``: ``[start, end)`` string offsets into the source.
- ``loc``: ``{"start": {"line", "column"}, "end": {...}}`` with 1-based lines.

Working on plain dictionaries keeps the rest of the pipeline independent from
esprima's node classes, and lets tests build small trees by hand.
"""

from typing import Any, Dict

import esprima
from esprima.error_handler import Error as EsprimaError

from solid_macros.core.errors import JsSyntaxError, SourceLocation


def parse_module(code: str, jsx: bool = True) -> Dict[str, Any]:
  """
  Parses a JavaScript module into an ESTree dictionary.

  Args:
      code (str): Module source text.
      jsx (bool): Accept JSX syntax.

  Returns:
      Dict[str, Any]: The ``Program`` node.

  Raises:
      JsSyntaxError: If the source is not a valid module.
  """
  options = {"range": True, "loc": True, "jsx": jsx}
  try:
    program = esprima.parseModule(code, options)
  except EsprimaError as e:
    line = getattr(e, "lineNumber", None)
    column = getattr(e, "column", None)
    location = None
    if isinstance(line, int) and isinstance(column, int):
      # esprima reports 1-based columns
      location = SourceLocation(line, max(column - 1, 0))
    message = getattr(e, "description", None) or str(e)
    raise JsSyntaxError(f"Syntax error: {message}", location) from e
  return to_plain(program)


def to_plain(value: Any) -> Any:
  """
  Recursively converts esprima node objects into dictionaries.

  Lists stay lists, scalars are returned unchanged, and any object exposing
  attributes (nodes, locations, positions) becomes a dictionary of its fields
  in declaration order. Objects without a ``__dict__`` (such as compiled regex
  values of literals) are kept as-is.

  Args:
      value: An esprima node, list or scalar.

  Returns:
      Any: The plain equivalent.
  """
  if value is None or isinstance(value, (str, int, float, bool)):
    return value
  if isinstance(value, (list, tuple)):
    return [to_plain(item) for item in value]
  if isinstance(value, dict):
    return {key: to_plain(item) for key, item in value.items()}
  if hasattr(value, "__dict__"):
    return {key: to_plain(item) for key, item in vars(value).items()}
  return value
