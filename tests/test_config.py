"""
Tests for RuntimeConfig validation and pyproject.toml loading.
"""

import pytest
from pydantic import ValidationError

from solid_macros.config import DEFAULT_MACRO_MODULE, RuntimeConfig


def test_defaults():
  config = RuntimeConfig()
  assert config.macro_modules == [DEFAULT_MACRO_MODULE]
  assert config.runtime_module == "solid-js"
  assert config.insert_callee == "_$insert"
  assert config.jsx is True
  assert config.guard_memo_writes is True
  assert config.memo_insert_accessor is False
  assert config.is_macro_module("solid-js/macro")
  assert not config.is_macro_module("solid-js")


def test_macro_modules_are_cleaned():
  config = RuntimeConfig(macro_modules=[" solid-js/macro ", "macros/ref", "solid-js/macro"])
  assert config.macro_modules == ["solid-js/macro", "macros/ref"]


@pytest.mark.parametrize("modules", [[], ["  "]])
def test_invalid_macro_modules(modules):
  with pytest.raises(ValidationError):
    RuntimeConfig(macro_modules=modules)


def test_blank_runtime_module_is_rejected():
  with pytest.raises(ValidationError):
    RuntimeConfig(runtime_module=" ")


def test_extensions_are_normalized():
  config = RuntimeConfig(extensions=["JSX", ".mjs", ""])
  assert config.extensions == [".jsx", ".mjs"]


def test_load_from_pyproject(tmp_path):
  """
  Scenario: A pyproject.toml with a [tool.solid_macros] table above the input.
  Expectation: Its values are used; unknown keys are ignored.
  """
  (tmp_path / "pyproject.toml").write_text(
    '[tool.solid_macros]\nmacro_modules = ["macros/ref"]\nruntime_module = "solid-js/store"\nunknown = 1\n',
    encoding="utf-8",
  )
  nested = tmp_path / "src" / "components"
  nested.mkdir(parents=True)

  config = RuntimeConfig.load(search_path=nested)
  assert config.macro_modules == ["macros/ref"]
  assert config.runtime_module == "solid-js/store"


def test_explicit_overrides_win(tmp_path):
  (tmp_path / "pyproject.toml").write_text(
    '[tool.solid_macros]\nruntime_module = "solid-js/store"\njsx = true\n',
    encoding="utf-8",
  )
  config = RuntimeConfig.load(runtime_module="solid-js", jsx=False, search_path=tmp_path)
  assert config.runtime_module == "solid-js"
  assert config.jsx is False


def test_load_without_pyproject_table(tmp_path):
  (tmp_path / "pyproject.toml").write_text('[project]\nname = "app"\n', encoding="utf-8")
  assert RuntimeConfig.load(search_path=tmp_path) == RuntimeConfig()


def test_invalid_toml_falls_back_to_defaults(tmp_path):
  (tmp_path / "pyproject.toml").write_text("[tool.solid_macros\n", encoding="utf-8")
  assert RuntimeConfig.load(search_path=tmp_path) == RuntimeConfig()
