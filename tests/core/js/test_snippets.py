"""
Tests for expression snippet helpers (operator mapping and parenthesization).
"""

import pytest

from solid_macros.core.js.parser import parse_module
from solid_macros.core.js.snippets import (
  argument_needs_parens,
  compound_operator,
  operand_needs_parens,
  thunk_body_needs_parens,
)


def _expr(code: str) -> dict:
  """Parses a single expression statement and returns its expression."""
  return parse_module(f"({code});")["body"][0]["expression"]


@pytest.mark.parametrize(
  "op, expected",
  [("+=", "+"), ("-=", "-"), ("**=", "**"), (">>>=", ">>>"), ("|=", "|"), ("&=", "&"), ("^=", "^")],
)
def test_compound_operator(op, expected):
  assert compound_operator(op) == expected


@pytest.mark.parametrize("op", ["=", "==", "<=", ">=", "&&=", "||=", "??=", "x"])
def test_compound_operator_rejects(op):
  with pytest.raises(ValueError):
    compound_operator(op)


@pytest.mark.parametrize(
  "code, operator, expected",
  [
    ("b", "*", False),
    ("a + b", "*", True),
    ("a * b", "+", False),
    ("a - b", "-", True),
    ("a ** b", "**", False),
    ("a ? b : c", "+", True),
    ("a || b", "&&", True),
    ("f(a)", "-", False),
  ],
)
def test_operand_needs_parens(code, operator, expected):
  assert operand_needs_parens(_expr(code), operator) is expected


def test_argument_needs_parens():
  assert argument_needs_parens(_expr("a, b"))
  assert not argument_needs_parens(_expr("a + b"))


def test_thunk_body_needs_parens():
  assert thunk_body_needs_parens(_expr("{ a: 1 }"))
  assert thunk_body_needs_parens(_expr("a, b"))
  assert not thunk_body_needs_parens(_expr("a * 2"))
