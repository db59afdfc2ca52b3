"""
Pytest Configuration and Fixtures.

Includes:
- Syspath patching for local imports.
- A `rewrite` fixture expanding a module with default or overridden settings.
- Tracer isolation between tests.
"""

import sys
from pathlib import Path
from typing import Callable

import pytest

# Add src to path so we can import 'solid_macros' without installing it
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

from solid_macros.config import RuntimeConfig  # noqa: E402
from solid_macros.core.engine import MacroEngine  # noqa: E402
from solid_macros.core.tracer import reset_tracer  # noqa: E402


@pytest.fixture(autouse=True)
def _fresh_tracer():
  """Every test starts with an empty trace."""
  reset_tracer()
  yield
  reset_tracer()


@pytest.fixture
def rewrite() -> Callable[..., str]:
  """
  Expands a module and returns the rewritten code.

  Keyword arguments are `RuntimeConfig` fields, e.g.
  ``rewrite(code, memo_insert_accessor=True)``.
  """

  def _rewrite(code: str, **settings) -> str:
    engine = MacroEngine(config=RuntimeConfig(**settings))
    return engine.rewrite(code)

  return _rewrite
