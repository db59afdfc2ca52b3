"""
solid-macros Package.

Compile-time ``$signal`` and ``$memo`` macros for Solid. Plain variable syntax
is rewritten into ``createSignal`` / ``createMemo`` calls before the module
reaches the JSX compiler.

Usage
-----

Simple String Transformation
^^^^^^^^^^^^^^^^^^^^^^^^^^^^

.. code-block:: python

    import solid_macros
    code = "import { $signal } from 'solid-js/macro';\\nlet count = $signal(0);\\ncount++;\\n"
    print(solid_macros.transform(code))
    # import { createSignal as _signal } from "solid-js";
    # const count = _signal(0);
    # count[1](count[0]() + 1);

Advanced Usage (Engine)
^^^^^^^^^^^^^^^^^^^^^^^

.. code-block:: python

    from solid_macros import MacroEngine, RuntimeConfig

    config = RuntimeConfig(macro_modules=["solid-js/macro", "macros/ref"])
    engine = MacroEngine(config=config)
    res = engine.run(code, filename="Counter.jsx")

    if res.success:
        print(res.code)
    else:
        print(f"Errors: {res.errors}")
"""

from typing import Any, Optional

from solid_macros.config import RuntimeConfig
from solid_macros.core.engine import MacroEngine
from solid_macros.core.errors import MacroError
from solid_macros.core.result import TransformResult

__version__ = "0.1.0"


def transform(
  code: str,
  filename: Optional[str] = None,
  config: Optional[RuntimeConfig] = None,
  **overrides: Any,
) -> str:
  """
  Expands the reactive macros of one JavaScript module.

  This is a convenience wrapper around `MacroEngine.rewrite`. Use
  `MacroEngine.run` to get a `TransformResult` instead of an exception.

  Args:
      code (str): Module source.
      filename (str, optional): Label used in error messages.
      config (RuntimeConfig, optional): Settings. Defaults are used if None.
      **overrides: `RuntimeConfig` fields replacing those of `config`
          (e.g. ``runtime_module="solid-js/web"``).

  Returns:
      str: The rewritten module. Modules without macros are returned unchanged.

  Raises:
      MacroError: If the module cannot be parsed or a macro is misused.
  """
  config = config or RuntimeConfig()
  if overrides:
    config = RuntimeConfig(**{**config.model_dump(), **overrides})
  return MacroEngine(config=config).rewrite(code, filename=filename)


__all__ = [
  "MacroEngine",
  "MacroError",
  "RuntimeConfig",
  "TransformResult",
  "transform",
  "__version__",
]
