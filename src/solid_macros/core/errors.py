"""
Error Taxonomy for Macro Expansion.

Every failure raised while expanding a module is a `MacroError`. They are all
fatal for the module being processed: the engine discards the partially
patched output and reports the error as a build diagnostic pointing at the
offending source location.

Hierarchy:

- `MacroError`
    - `JsSyntaxError`: The module is not valid JavaScript/JSX.
    - `PatchConflictError`: Two rewrites claimed overlapping source ranges.
    - `UsageError`: The macro was used in a way it cannot be expanded.
        - `InvalidDeclarationKind`
        - `MultipleDeclaratorsError`
        - `NonIdentifierBindingError`
        - `NestedMarkerError`
        - `InvalidArgumentsError`
        - `UnsupportedWriteError`
        - `MemoAssignmentError`
        - `MacroImportError`
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class SourceLocation:
  """
  Position of a node in the original source.

  Attributes:
      line (int): 1-based line number.
      column (int): 0-based column offset.
  """

  line: int
  column: int

  def __str__(self) -> str:
    return f"{self.line}:{self.column}"


class MacroError(Exception):
  """
  Base class for all expansion failures.

  Attributes:
      message (str): Human readable description.
      location (Optional[SourceLocation]): Where the failure was detected.
      filename (Optional[str]): Module being expanded, if known.
  """

  def __init__(
    self,
    message: str,
    location: Optional[SourceLocation] = None,
    filename: Optional[str] = None,
  ):
    super().__init__(message)
    self.message = message
    self.location = location
    self.filename = filename

  def with_filename(self, filename: Optional[str]) -> "MacroError":
    """
    Attaches the module name if it was not known where the error was raised.

    Args:
        filename: Path or label of the module.

    Returns:
        MacroError: self, for re-raising.
    """
    if self.filename is None:
      self.filename = filename
    return self

  def __str__(self) -> str:
    prefix = []
    if self.filename:
      prefix.append(self.filename)
    if self.location:
      prefix.append(str(self.location))
    if prefix:
      return f"{':'.join(prefix)}: {self.message}"
    return self.message


class JsSyntaxError(MacroError):
  """Raised when the parser rejects the module."""


class PatchConflictError(MacroError):
  """Raised when two edits overlap without nesting."""


class UsageError(MacroError):
  """Base class for user mistakes in macro usage."""


class InvalidDeclarationKind(UsageError):
  """The macro initializes a `const` or `var` declaration instead of `let`."""


class MultipleDeclaratorsError(UsageError):
  """The `let` declaration around the macro declares more than one name."""


class NonIdentifierBindingError(UsageError):
  """The macro result is destructured instead of bound to a plain name."""


class NestedMarkerError(UsageError):
  """The macro is part of a `let` initializer instead of the whole of it."""


class InvalidArgumentsError(UsageError):
  """The macro was called with the wrong number or shape of arguments."""


class UnsupportedWriteError(UsageError):
  """A write to a signal binding has a form that cannot become a setter call."""


class MemoAssignmentError(UsageError):
  """A memo binding is assigned or updated."""


class MacroImportError(UsageError):
  """The macro module is imported in a form the expander does not support."""
