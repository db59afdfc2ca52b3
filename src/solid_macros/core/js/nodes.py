"""
Node Paths and Visitors for ESTree Dictionaries.

The parser produces bare dictionaries without parent links. `NodePath` wraps a
node together with the path that reached it (parent, field key, list index),
which is what the macro rules need to inspect ancestors such as the enclosing
declarator or the call a reference is passed to.

`NodeVisitor` mirrors the familiar ``visit_<Type>`` / ``generic_visit``
dispatch style.
"""

from typing import Any, Callable, Dict, Iterator, List, Optional

from solid_macros.core.errors import SourceLocation

Node = Dict[str, Any]

# Keys holding metadata rather than child nodes.
_NON_CHILD_KEYS = frozenset({"type", "range", "loc", "leadingComments", "trailingComments", "innerComments"})

FUNCTION_TYPES = frozenset({"FunctionDeclaration", "FunctionExpression", "ArrowFunctionExpression"})


def is_node(value: Any) -> bool:
  """Returns True if value is an ESTree node dictionary."""
  return isinstance(value, dict) and "type" in value


class NodePath:
  """
  A node plus its position in the tree.

  Attributes:
      node (Node): The wrapped ESTree dictionary.
      parent (Optional[NodePath]): Path of the parent node, None for the root.
      key (Optional[str]): Field of the parent holding this node.
      index (Optional[int]): Position inside the parent field when it is a list.
  """

  __slots__ = ("node", "parent", "key", "index")

  def __init__(
    self,
    node: Node,
    parent: Optional["NodePath"] = None,
    key: Optional[str] = None,
    index: Optional[int] = None,
  ):
    self.node = node
    self.parent = parent
    self.key = key
    self.index = index

  def __repr__(self) -> str:
    return f"NodePath({self.type}@{self.start}:{self.end})"

  @property
  def type(self) -> str:
    return self.node["type"]

  @property
  def start(self) -> int:
    return self.node["range"][0]

  @property
  def end(self) -> int:
    return self.node["range"][1]

  @property
  def parent_node(self) -> Optional[Node]:
    return self.parent.node if self.parent else None

  @property
  def location(self) -> Optional[SourceLocation]:
    """The start position of the node, if the parser recorded one."""
    loc = self.node.get("loc")
    if not loc:
      return None
    start = loc["start"]
    return SourceLocation(start["line"], start["column"])

  def get(self, key: str, index: Optional[int] = None) -> Optional["NodePath"]:
    """
    Returns the path of a child node.

    Args:
        key: Field name (e.g. ``"init"``).
        index: Element position when the field holds a list.

    Returns:
        Optional[NodePath]: The child path, or None if the slot is empty.
    """
    value = self.node.get(key)
    if index is not None:
      if not isinstance(value, list) or index >= len(value):
        return None
      value = value[index]
    if not is_node(value):
      return None
    return NodePath(value, self, key, index)

  def get_list(self, key: str) -> List["NodePath"]:
    """Returns paths for every node in a list field, skipping holes."""
    items = self.node.get(key) or []
    return [NodePath(item, self, key, i) for i, item in enumerate(items) if is_node(item)]

  def children(self) -> Iterator["NodePath"]:
    """Yields child paths in field order."""
    return iter_child_paths(self)

  def ancestors(self) -> Iterator["NodePath"]:
    """Yields the parent, grandparent, ... up to the root."""
    current = self.parent
    while current is not None:
      yield current
      current = current.parent

  def find_parent(self, predicate: Callable[["NodePath"], bool]) -> Optional["NodePath"]:
    """
    Finds the nearest ancestor matching a predicate.

    Args:
        predicate: Test applied to each ancestor, nearest first.

    Returns:
        Optional[NodePath]: The first match, or None.
    """
    for ancestor in self.ancestors():
      if predicate(ancestor):
        return ancestor
    return None

  def is_function(self) -> bool:
    return self.type in FUNCTION_TYPES

  def source(self, code: str) -> str:
    """Slices the original text of this node out of the module source."""
    return code[self.start : self.end]


def iter_child_paths(path: NodePath) -> Iterator[NodePath]:
  """
  Yields the child node paths of a node, in source field order.

  Args:
      path: The parent path.

  Yields:
      NodePath: One path per child node. ``None`` holes (e.g. ``[, a]``) are skipped.
  """
  for key, value in path.node.items():
    if key in _NON_CHILD_KEYS:
      continue
    if isinstance(value, list):
      for i, item in enumerate(value):
        if is_node(item):
          yield NodePath(item, path, key, i)
    elif is_node(value):
      yield NodePath(value, path, key, None)


class NodeVisitor:
  """
  Depth-first visitor over node paths.

  Subclasses define ``visit_<NodeType>(self, path)`` methods. Nodes without a
  dedicated method fall back to `generic_visit`, which visits every child.
  A handler that still wants its children visited calls `generic_visit`.
  """

  def visit(self, path: NodePath) -> None:
    handler = getattr(self, f"visit_{path.type}", None)
    if handler is None:
      self.generic_visit(path)
    else:
      handler(path)

  def generic_visit(self, path: NodePath) -> None:
    for child in iter_child_paths(path):
      self.visit(child)

  def visit_optional(self, path: Optional[NodePath]) -> None:
    """Visits a child slot that may be empty."""
    if path is not None:
      self.visit(path)
