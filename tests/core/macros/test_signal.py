"""
Tests for the $signal macro.

Verifies that a signal binding becomes a `[getter, setter]` pair:
1. Reads call the getter.
2. Increments, assignments and compound assignments call the setter.
3. Arguments of the insertion helper receive the getter itself.
4. Shorthand properties and `new` callees stay syntactically valid.
"""

import pytest

from solid_macros.core.errors import MacroError, UnsupportedWriteError

HEADER = 'import { createSignal as _signal } from "solid-js";\n'
IMPORT = "import { $signal } from 'solid-js/macro';\n"


def test_basic_counter(rewrite):
  code = IMPORT + "let count = $signal(0);\ncount++;\nconsole.log(count);\n"
  expected = HEADER + "const count = _signal(0);\ncount[1](count[0]() + 1);\nconsole.log(count[0]());\n"
  assert rewrite(code) == expected


@pytest.mark.parametrize(
  "statement, expected",
  [
    ("count++;", "count[1](count[0]() + 1);"),
    ("++count;", "count[1](count[0]() + 1);"),
    ("count--;", "count[1](count[0]() - 1);"),
    ("--count;", "count[1](count[0]() - 1);"),
    ("count = 5;", "count[1](5);"),
    ("count = count * 2;", "count[1](count[0]() * 2);"),
    ("count = (a, b);", "count[1]((a, b));"),
    ("count += 2;", "count[1](count[0]() + 2);"),
    ("count -= a - b;", "count[1](count[0]() - (a - b));"),
    ("count *= a + b;", "count[1](count[0]() * (a + b));"),
    ("count += a * b;", "count[1](count[0]() + a * b);"),
    ("count **= 2;", "count[1](count[0]() ** 2);"),
    ("count |= flag ? 1 : 2;", "count[1](count[0]() | (flag ? 1 : 2));"),
  ],
)
def test_write_forms(rewrite, statement, expected):
  code = IMPORT + f"let count = $signal(0);\n{statement}\n"
  assert rewrite(code) == HEADER + f"const count = _signal(0);\n{expected}\n"


def test_insert_argument_receives_getter(rewrite):
  """
  Scenario: The signal is passed directly to the renderer's insertion helper.
  Expectation: The getter is passed uninvoked so the renderer can track it.
  """
  code = IMPORT + "let count = $signal(0);\n_$insert(el, count);\n_$insert(el, count + 1);\n"
  expected = HEADER + "const count = _signal(0);\n_$insert(el, count[0]);\n_$insert(el, count[0]() + 1);\n"
  assert rewrite(code) == expected


def test_custom_insert_callee(rewrite):
  code = IMPORT + "let count = $signal(0);\ninsert(el, count);\n"
  expected = HEADER + "const count = _signal(0);\ninsert(el, count[0]);\n"
  assert rewrite(code, insert_callee="insert") == expected


def test_shorthand_property_is_expanded(rewrite):
  code = IMPORT + "let count = $signal(0);\nconst state = { count };\n"
  expected = HEADER + "const count = _signal(0);\nconst state = { count: count[0]() };\n"
  assert rewrite(code) == expected


def test_new_callee_is_parenthesized(rewrite):
  code = IMPORT + "let Klass = $signal(Base);\nconst obj = new Klass();\n"
  expected = HEADER + "const Klass = _signal(Base);\nconst obj = new (Klass[0]())();\n"
  assert rewrite(code) == expected


def test_reads_inside_closures_and_jsx(rewrite):
  code = (
    IMPORT
    + "let count = $signal(0);\n"
    + "const inc = () => count++;\n"
    + "const view = <button onClick={inc}>{count}</button>;\n"
  )
  expected = (
    HEADER
    + "const count = _signal(0);\n"
    + "const inc = () => count[1](count[0]() + 1);\n"
    + "const view = <button onClick={inc}>{count[0]()}</button>;\n"
  )
  assert rewrite(code) == expected


def test_shadowed_name_is_untouched(rewrite):
  code = IMPORT + "let count = $signal(0);\nfunction show(count) { return count; }\nshow(count);\n"
  expected = HEADER + "const count = _signal(0);\nfunction show(count) { return count; }\nshow(count[0]());\n"
  assert rewrite(code) == expected


def test_options_argument_is_kept(rewrite):
  code = IMPORT + "let v = $signal(0, { equals: false });\n"
  assert rewrite(code) == HEADER + "const v = _signal(0, { equals: false });\n"


def test_signal_initialized_from_other_signal(rewrite):
  code = IMPORT + "let a = $signal(1);\nlet b = $signal(a);\n"
  expected = (
    'import { createSignal as _signal, createSignal as _signal2 } from "solid-js";\n'
    "const a = _signal(1);\nconst b = _signal2(a[0]());\n"
  )
  assert rewrite(code) == expected


def test_exported_declaration(rewrite):
  code = IMPORT + "export let count = $signal(0);\ncount = 1;\n"
  expected = HEADER + "export const count = _signal(0);\ncount[1](1);\n"
  assert rewrite(code) == expected


def test_export_specifier_is_left_alone(rewrite):
  code = IMPORT + "let count = $signal(0);\nexport { count };\n"
  expected = HEADER + "const count = _signal(0);\nexport { count };\n"
  assert rewrite(code) == expected


@pytest.mark.parametrize("statement", ["[count] = [1];", "({ count } = obj);", "for (count of xs) {}"])
def test_pattern_writes_are_rejected(rewrite, statement):
  code = IMPORT + f"let count = $signal(0);\n{statement}\n"
  with pytest.raises(UnsupportedWriteError) as excinfo:
    rewrite(code)
  assert "count" in str(excinfo.value)


def test_logical_assignment_is_rejected(rewrite):
  """`||=` has no binary counterpart and is not ES2017 syntax."""
  with pytest.raises(MacroError):
    rewrite(IMPORT + "let count = $signal(0);\ncount ||= 1;\n")
