"""
Data structures representing the output of a module expansion.

This module defines the `TransformResult` Pydantic model, which encapsulates
the generated code, any errors encountered, and the execution trace logs.
"""

from typing import Any, Dict, List

from pydantic import BaseModel, Field


class TransformResult(BaseModel):
  """
  Container for the result of expanding one module.
  """

  code: str = Field(default="", description="The generated source code (the input on failure).")
  errors: List[str] = Field(default_factory=list, description="Diagnostics, formatted as 'file:line:col: message'.")
  success: bool = Field(default=True, description="True if the module was expanded without a fatal error.")
  changed: bool = Field(default=False, description="True if the output differs from the input.")
  macro_count: int = Field(default=0, description="Number of marker calls expanded.")
  imports: List[str] = Field(default_factory=list, description="Import statements added to the module.")
  trace_events: List[Dict[str, Any]] = Field(default_factory=list, description="Execution trace log data.")

  @property
  def has_errors(self) -> bool:
    """
    Check if the result contains any error messages.

    Returns:
        True if one or more errors are present.
    """
    return len(self.errors) > 0
