"""
Tests for the declaration rules shared by $signal and $memo.

Verifies the validation order (declaration kind, declarator count, target
shape), the `let` to `const` rewrite, plain expression usage and argument
checks.
"""

import pytest

from solid_macros.core.errors import (
  InvalidArgumentsError,
  InvalidDeclarationKind,
  MultipleDeclaratorsError,
  NestedMarkerError,
  NonIdentifierBindingError,
  UsageError,
)

IMPORT = "import { $signal, $memo } from 'solid-js/macro';\n"


@pytest.mark.parametrize("kind", ["const", "var"])
def test_non_let_declaration_is_rejected(rewrite, kind):
  with pytest.raises(InvalidDeclarationKind) as excinfo:
    rewrite(IMPORT + f"{kind} count = $signal(0);\n")
  assert str(excinfo.value) == f"2:0: Should use 'let' with $signal() macro, found '{kind}'."


def test_multiple_declarators_are_rejected(rewrite):
  with pytest.raises(MultipleDeclaratorsError) as excinfo:
    rewrite(IMPORT + "let a = $signal(0), b = 1;\n")
  assert "one variable" in excinfo.value.message


def test_kind_is_checked_before_declarator_count(rewrite):
  with pytest.raises(InvalidDeclarationKind):
    rewrite(IMPORT + "const a = $signal(0), b = 1;\n")


@pytest.mark.parametrize("target", ["[a, b]", "{ a }"])
def test_destructuring_target_is_rejected(rewrite, target):
  with pytest.raises(NonIdentifierBindingError) as excinfo:
    rewrite(IMPORT + f"let {target} = $memo(x);\n")
  assert "$memo()" in excinfo.value.message


def test_declarator_count_is_checked_before_target(rewrite):
  with pytest.raises(MultipleDeclaratorsError):
    rewrite(IMPORT + "let [a] = $signal(0), b = 1;\n")


def test_all_usage_errors_share_a_base(rewrite):
  with pytest.raises(UsageError):
    rewrite(IMPORT + "const a = $memo(x);\n")


@pytest.mark.parametrize(
  "code",
  ["const el = wrap($signal(0));\n", "const pair = [$signal(0)];\n", "var m = f($memo(a));\n"],
)
def test_nested_marker_in_non_let_declaration_is_rejected(rewrite, code):
  """
  Scenario: The marker is nested in the initializer of a `const`/`var`.
  Expectation: The enclosing declaration is still checked.
  """
  with pytest.raises(InvalidDeclarationKind):
    rewrite(IMPORT + code)


def test_nested_marker_in_let_declaration_is_rejected(rewrite):
  """
  Scenario: `let x = wrap($signal(0))` would leave `x` unbound to the signal.
  Expectation: The nesting is reported at the marker call.
  """
  with pytest.raises(NestedMarkerError) as excinfo:
    rewrite(IMPORT + "let x = wrap($signal(0));\nx++;\nlog(x);\n")
  assert str(excinfo.value) == "2:13: $signal() must be the whole initializer of 'x', found inside CallExpression."


def test_nested_marker_reports_destructuring_first(rewrite):
  with pytest.raises(NonIdentifierBindingError):
    rewrite(IMPORT + "let [a] = [$signal(0)];\n")


def test_function_boundary_stops_declaration_lookup(rewrite):
  """A marker inside an arrow body does not belong to the outer declaration."""
  code = IMPORT + "const make = () => $signal(0);\n"
  expected = 'import { createSignal as _signal } from "solid-js";\nconst make = () => _signal(0);\n'
  assert rewrite(code) == expected


def test_bare_statement_usage(rewrite):
  code = IMPORT + "$signal(0);\n"
  assert rewrite(code) == 'import { createSignal as _signal } from "solid-js";\n_signal(0);\n'


@pytest.mark.parametrize("args", ["", "1, 2, 3", "...xs", "a, ...xs"])
def test_signal_argument_count(rewrite, args):
  with pytest.raises(InvalidArgumentsError):
    rewrite(IMPORT + f"let s = $signal({args});\n")


def test_signal_declared_inside_function(rewrite):
  code = IMPORT + "function Counter() {\n  let n = $signal(0);\n  return () => n;\n}\n"
  expected = (
    'import { createSignal as _signal } from "solid-js";\n'
    "function Counter() {\n  const n = _signal(0);\n  return () => n[0]();\n}\n"
  )
  assert rewrite(code) == expected


def test_marker_without_import_is_expanded(rewrite):
  """An unresolved marker name is treated as the macro."""
  code = "let n = $signal(0);\nn = 2;\n"
  assert rewrite(code) == 'import { createSignal as _signal } from "solid-js";\nconst n = _signal(0);\nn[1](2);\n'


def test_locally_defined_marker_name_is_ignored(rewrite):
  code = "function $signal(v) { return v; }\nlet n = $signal(0);\n"
  assert rewrite(code) == code


@pytest.mark.parametrize(
  "code, error",
  [
    ("const z = $signal(0);\n", InvalidDeclarationKind),
    ("let a = $signal(0), b = $signal(1);\n", MultipleDeclaratorsError),
    ("let { a } = $signal({a:1});\n", NonIdentifierBindingError),
  ],
)
def test_documented_declaration_errors(rewrite, code, error):
  with pytest.raises(error):
    rewrite(code)
