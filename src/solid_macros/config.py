"""
Runtime Configuration Store.

Holds the settings of the macro expander: which module specifiers expose the
macros, which runtime module provides ``createSignal`` / ``createMemo``, the
renderer's insertion helper name, and the policy switches for edge cases.

Settings are read from the ``[tool.solid_macros]`` table of the nearest
``pyproject.toml`` and may be overridden by explicit arguments (e.g. from the CLI).
"""

import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, Field, field_validator

if sys.version_info >= (3, 11):
  import tomllib
else:
  import tomli as tomllib

DEFAULT_MACRO_MODULE = "solid-js/macro"
DEFAULT_RUNTIME_MODULE = "solid-js"
DEFAULT_INSERT_CALLEE = "_$insert"
TOML_SECTION = "solid_macros"


class RuntimeConfig(BaseModel):
  """
  Global configuration container for the macro engine.
  """

  macro_modules: List[str] = Field(
    default_factory=lambda: [DEFAULT_MACRO_MODULE],
    description="Module specifiers whose imports provide $signal/$memo (e.g. a legacy 'macros/ref').",
  )
  runtime_module: str = Field(DEFAULT_RUNTIME_MODULE, description="Module exporting createSignal and createMemo.")
  insert_callee: str = Field(
    DEFAULT_INSERT_CALLEE,
    description="Renderer insertion helper whose arguments receive accessors instead of values.",
  )
  jsx: bool = Field(True, description="Parse JSX syntax.")
  guard_memo_writes: bool = Field(True, description="Reject assignments to memo bindings at rewrite time.")
  memo_insert_accessor: bool = Field(
    False,
    description="Pass a memo accessor uninvoked to the insertion helper instead of calling it.",
  )
  extensions: List[str] = Field(
    default_factory=lambda: [".js", ".jsx", ".mjs"],
    description="File extensions processed when transforming a directory.",
  )

  @field_validator("macro_modules")
  @classmethod
  def validate_macro_modules(cls, v: List[str]) -> List[str]:
    """
    Strips and de-duplicates macro module specifiers.

    Raises:
        ValueError: If the list is empty or contains a blank entry.
    """
    cleaned = []
    for item in v:
      spec = item.strip()
      if not spec:
        raise ValueError("Macro module specifiers must not be empty.")
      if spec not in cleaned:
        cleaned.append(spec)
    if not cleaned:
      raise ValueError("At least one macro module is required.")
    return cleaned

  @field_validator("runtime_module", "insert_callee")
  @classmethod
  def validate_not_blank(cls, v: str) -> str:
    v_clean = v.strip()
    if not v_clean:
      raise ValueError("Value must not be empty.")
    return v_clean

  @field_validator("extensions")
  @classmethod
  def validate_extensions(cls, v: List[str]) -> List[str]:
    """Normalizes extensions to lowercase with a leading dot."""
    normalized = []
    for ext in v:
      ext = ext.strip().lower()
      if not ext:
        continue
      if not ext.startswith("."):
        ext = f".{ext}"
      normalized.append(ext)
    return normalized

  def is_macro_module(self, specifier: str) -> bool:
    return specifier in self.macro_modules

  @classmethod
  def load(
    cls,
    macro_modules: Optional[List[str]] = None,
    runtime_module: Optional[str] = None,
    jsx: Optional[bool] = None,
    guard_memo_writes: Optional[bool] = None,
    search_path: Optional[Path] = None,
  ) -> "RuntimeConfig":
    """
    Loads configuration from pyproject.toml and overrides with explicit arguments.

    Args:
        macro_modules (Optional[List[str]]): Override for the macro module specifiers.
        runtime_module (Optional[str]): Override for the runtime module.
        jsx (Optional[bool]): Override for JSX parsing.
        guard_memo_writes (Optional[bool]): Override for the memo write policy.
        search_path (Optional[Path]): Directory to start searching for TOML config.

    Returns:
        RuntimeConfig: The fully resolved configuration object.
    """
    start_dir = search_path or Path.cwd()
    toml_config, _ = _load_toml_settings(start_dir)

    merged: Dict[str, Any] = dict(toml_config)
    overrides = {
      "macro_modules": macro_modules,
      "runtime_module": runtime_module,
      "jsx": jsx,
      "guard_memo_writes": guard_memo_writes,
    }
    for key, value in overrides.items():
      if value is not None:
        merged[key] = value

    known = cls.model_fields.keys()
    return cls(**{k: v for k, v in merged.items() if k in known})


def _load_toml_settings(start_path: Path) -> Tuple[Dict[str, Any], Optional[Path]]:
  """
  Searches the directory and its parents for 'pyproject.toml' and extracts config.

  Args:
      start_path (Path): Directory to start search from.

  Returns:
      Tuple[Dict, Optional[Path]]: The ``[tool.solid_macros]`` table and the directory it was found in.
  """
  current = start_path.resolve()

  for parent in [current, *current.parents]:
    toml_path = parent / "pyproject.toml"
    if toml_path.exists() and toml_path.is_file():
      try:
        with open(toml_path, "rb") as f:
          data = tomllib.load(f)
      except (OSError, tomllib.TOMLDecodeError):
        return {}, None
      return data.get("tool", {}).get(TOML_SECTION, {}), parent

  return {}, None
