"""
Tests for lexical scope analysis.

Verifies that identifier occurrences resolve to the right binding across
block scoping, hoisting, shadowing, closures and non-reference positions.
"""

from solid_macros.core.js.parser import parse_module
from solid_macros.core.js.scope import analyze_scopes, collect_names
from solid_macros.enums import OccurrenceRole, ScopeKind, WriteForm


def _analyze(code):
  return analyze_scopes(parse_module(code))


def _occurrences(info, name):
  return [o for o in info.occurrences if o.name == name]


def test_module_binding_reads_and_writes():
  info = _analyze("let count = 0;\ncount++;\ncount = 2;\ncount += 1;\nlog(count);\n")
  binding = info.root.bindings["count"]

  assert binding.kind == "let"
  assert [o.form for o in binding.violations] == [WriteForm.UPDATE, WriteForm.ASSIGN, WriteForm.COMPOUND]
  assert len(binding.references) == 1
  assert binding.references[0].role == OccurrenceRole.READ


def test_write_site_is_enclosing_expression():
  code = "let a = 0;\na = a + 1;\n"
  info = _analyze(code)
  write = info.root.bindings["a"].violations[0]
  assert write.site.type == "AssignmentExpression"
  assert write.site.source(code) == "a = a + 1"


def test_shadowing_parameter():
  """
  Scenario: A function parameter shadows a module binding.
  Expectation: Inner uses resolve to the parameter only.
  """
  info = _analyze("let count = 0;\nfunction f(count) { return count; }\ncount;\n")
  outer = info.root.bindings["count"]
  assert len(outer.references) == 1
  assert outer.references[0].path.location.line == 3


def test_block_scoped_shadow():
  info = _analyze("let x = 1;\n{ let x = 2; x; }\nx;\n")
  outer = info.root.bindings["x"]
  assert [r.path.location.line for r in outer.references] == [3]


def test_var_hoists_to_function_scope():
  """A `var` declared in a nested block is visible in the whole function."""
  info = _analyze("function f() { { var x = 1; } return x; }\n")
  reads = _occurrences(info, "x")
  assert len(reads) == 1
  binding = info.resolve(reads[0].path)
  assert binding is not None
  assert binding.kind == "var"
  assert binding.scope.kind == ScopeKind.FUNCTION


def test_later_declaration_is_seen_by_closure():
  """Occurrences resolve after the walk, so closures see later lets."""
  info = _analyze("function f() { return late; }\nlet late = 1;\n")
  binding = info.root.bindings["late"]
  assert len(binding.references) == 1


def test_closure_reads_outer_binding():
  info = _analyze("let c = 0;\nconst inc = () => { c = c + 1; };\n")
  binding = info.root.bindings["c"]
  assert len(binding.violations) == 1
  assert len(binding.references) == 1


def test_non_reference_identifiers_are_ignored():
  """Member properties, object keys, labels and method names are not occurrences."""
  code = "let a = 1;\nobj.a;\n({ a: 2 });\nouter: for (;;) { break outer; }\nclass K { a() {} }\n"
  info = _analyze(code)
  binding = info.root.bindings["a"]
  assert binding.references == []
  assert binding.violations == []


def test_computed_member_is_a_read():
  info = _analyze("let a = 'k';\nobj[a];\n")
  assert len(info.root.bindings["a"].references) == 1


def test_shorthand_property_is_a_read():
  info = _analyze("let a = 1;\nconst o = { a };\n")
  refs = info.root.bindings["a"].references
  assert len(refs) == 1
  assert refs[0].path.parent.type == "Property"


def test_destructuring_assignment_is_pattern_write():
  info = _analyze("let a = 1;\n[a] = [2];\nfor (a of xs) {}\n")
  forms = [o.form for o in info.root.bindings["a"].violations]
  assert forms == [WriteForm.PATTERN, WriteForm.PATTERN]


def test_export_specifier_is_recorded():
  info = _analyze("let a = 1;\nexport { a };\n")
  binding = info.root.bindings["a"]
  assert len(binding.exports) == 1
  assert binding.references == []


def test_import_binding_records_source():
  info = _analyze("import { $signal as s } from 'solid-js/macro';\nimport d from 'dep';\ns(1);\n")
  s = info.root.bindings["s"]
  assert s.kind == "import"
  assert s.source == "solid-js/macro"
  assert s.imported == "$signal"
  assert info.root.bindings["d"].imported == "default"
  assert len(s.references) == 1


def test_catch_param_scope():
  info = _analyze("let e = 1;\ntry { x(); } catch (e) { e; }\ne;\n")
  assert len(info.root.bindings["e"].references) == 1


def test_binding_for_declaration_identifier():
  program = parse_module("let a = 1;\n")
  info = analyze_scopes(program)
  ident = program["body"][0]["declarations"][0]["id"]
  assert info.binding_for(ident) is info.root.bindings["a"]


def test_generate_uid_avoids_existing_names():
  info = _analyze("const _signal = 1;\nlet x = _signal2;\n")
  assert info.generate_uid("signal") == "_signal3"
  assert info.generate_uid("signal") == "_signal4"
  assert info.generate_uid("memo") == "_memo"


def test_collect_names_includes_jsx():
  names = collect_names(parse_module("const v = <Comp prop={x} />;"))
  assert {"v", "Comp", "prop", "x"} <= names
