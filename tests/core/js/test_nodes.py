"""
Tests for NodePath navigation and the NodeVisitor dispatch.
"""

from solid_macros.core.js.nodes import NodePath, NodeVisitor
from solid_macros.core.js.parser import parse_module

CODE = "let a = f(b, c);\n[, d] = e;\n"


def _root():
  return NodePath(parse_module(CODE))


def test_child_access_and_parent_links():
  call = _root().get("body", 0).get("declarations", 0).get("init")
  assert call.type == "CallExpression"
  assert call.key == "init"
  assert call.parent.type == "VariableDeclarator"
  assert call.source(CODE) == "f(b, c)"
  assert [arg.node["name"] for arg in call.get_list("arguments")] == ["b", "c"]
  assert call.get_list("arguments")[1].index == 1
  assert call.get("arguments", 5) is None
  assert call.get("missing") is None


def test_ancestors_and_find_parent():
  ident = _root().get("body", 0).get("declarations", 0).get("init").get("arguments", 0)
  assert [p.type for p in ident.ancestors()] == ["CallExpression", "VariableDeclarator", "VariableDeclaration", "Program"]
  decl = ident.find_parent(lambda p: p.type == "VariableDeclaration")
  assert decl.parent_node["type"] == "Program"
  assert ident.find_parent(lambda p: p.is_function()) is None


def test_children_skip_holes():
  pattern = _root().get("body", 1).get("expression").get("left")
  assert pattern.type == "ArrayPattern"
  children = list(pattern.children())
  assert [c.node["name"] for c in children] == ["d"]
  assert children[0].index == 1


def test_location_is_one_based_line():
  second = _root().get("body", 1)
  assert second.location.line == 2
  assert second.location.column == 0


def test_visitor_dispatch():
  """Specific handlers win; other nodes are walked generically."""

  class Collector(NodeVisitor):
    def __init__(self):
      self.calls = []
      self.names = []

    def visit_CallExpression(self, path):
      self.calls.append(path.get("callee").node["name"])
      self.generic_visit(path)

    def visit_Identifier(self, path):
      self.names.append(path.node["name"])

  collector = Collector()
  collector.visit(_root())
  assert collector.calls == ["f"]
  assert collector.names == ["a", "f", "b", "c", "d", "e"]
