"""
Expression Snippet Helpers.

Small helpers for emitting JavaScript expression text around reused source
fragments. Since rewrites splice original text into new expressions, these
decide when a fragment must be parenthesized to keep its meaning.
"""

from typing import Any, Dict

Node = Dict[str, Any]

# Binary and logical operator precedence (higher binds tighter).
PRECEDENCE = {
  "||": 1,
  "&&": 2,
  "|": 3,
  "^": 4,
  "&": 5,
  "==": 6,
  "!=": 6,
  "===": 6,
  "!==": 6,
  "<": 7,
  ">": 7,
  "<=": 7,
  ">=": 7,
  "in": 7,
  "instanceof": 7,
  "<<": 8,
  ">>": 8,
  ">>>": 8,
  "+": 9,
  "-": 9,
  "*": 10,
  "/": 10,
  "%": 10,
  "**": 11,
}

# Compound assignments equivalent to `x = x <op> v` (no logical assignments).
COMPOUND_OPERATORS = frozenset({"+=", "-=", "*=", "/=", "%=", "**=", "<<=", ">>=", ">>>=", "&=", "|=", "^="})

# Expressions binding looser than any binary operator.
_LOOSE_TYPES = frozenset(
  {
    "SequenceExpression",
    "AssignmentExpression",
    "ConditionalExpression",
    "ArrowFunctionExpression",
    "YieldExpression",
  }
)


def compound_operator(operator: str) -> str:
  """
  Strips the trailing ``=`` of a compound assignment operator.

  Args:
      operator: e.g. ``"+="`` or ``">>>="``.

  Returns:
      str: The binary operator, e.g. ``"+"`` or ``">>>"``.

  Raises:
      ValueError: If the operator is not a compound assignment.
  """
  if operator not in COMPOUND_OPERATORS:
    raise ValueError(f"Not a compound assignment operator: {operator!r}")
  return operator[:-1]


def operand_needs_parens(node: Node, operator: str) -> bool:
  """
  Checks whether an expression needs parentheses as the right operand of `operator`.

  Binary operators are left associative except ``**``, so an equal precedence
  right operand needs parentheses unless both operators are ``**``.

  Args:
      node: The operand expression.
      operator: The binary operator it is placed after.

  Returns:
      bool: True if the operand must be wrapped.
  """
  node_type = node["type"]
  if node_type in _LOOSE_TYPES:
    return True
  if node_type in ("BinaryExpression", "LogicalExpression"):
    inner = PRECEDENCE.get(node["operator"], 0)
    outer = PRECEDENCE[operator]
    if inner < outer:
      return True
    if inner == outer:
      return not (operator == "**" and node["operator"] == "**")
  return False


def argument_needs_parens(node: Node) -> bool:
  """A comma expression passed as a single call argument must be wrapped."""
  return node["type"] == "SequenceExpression"


def thunk_body_needs_parens(node: Node) -> bool:
  """An arrow body that is an object literal or comma expression must be wrapped."""
  return node["type"] in ("ObjectExpression", "SequenceExpression")
