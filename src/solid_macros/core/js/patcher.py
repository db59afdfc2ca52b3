"""
Positional Source Patcher.

Rewrites are expressed as edits over ranges of the *original* source instead
of mutating the syntax tree. Each edit replaces a range with a template made
of literal text and `Span` markers; a span re-emits an original range with any
edits nested inside it applied. This lets independent rewrites compose:

    count = count + 1
    ^^^^^^^^^^^^^^^^^  replace -> "count[1](" Span(rhs) ")"
            ^^^^^      replace -> "count[0]()"

renders as ``count[1](count[0]() + 1)`` no matter which edit was recorded first.

Rules:
    - Edits must nest or be disjoint; partial overlaps raise `PatchConflictError`.
    - Two edits over the same range need different priorities. The higher
      priority edit is the outer one and must carry a span to keep the inner edit.
    - Nested edits that fall outside every span of their enclosing template are
      dropped, since the text they patched is no longer emitted.
    - Insertions are zero-width edits; several at one position keep their order.
"""

from dataclasses import dataclass
from typing import List, Sequence, Tuple, Union

from solid_macros.core.errors import PatchConflictError


@dataclass(frozen=True)
class Span:
  """
  Template marker standing for an original source range.

  Attributes:
      start (int): Range start offset.
      end (int): Range end offset (exclusive).
  """

  start: int
  end: int


Part = Union[str, Span]


@dataclass
class Edit:
  """
  A single recorded substitution.

  Attributes:
      start (int): Replaced range start.
      end (int): Replaced range end; equal to `start` for insertions.
      parts (Tuple[Part, ...]): Replacement template.
      priority (int): Tie breaker between edits of the same range.
      seq (int): Recording order.
  """

  start: int
  end: int
  parts: Tuple[Part, ...]
  priority: int = 0
  seq: int = 0

  @property
  def is_insertion(self) -> bool:
    return self.start == self.end

  def sort_key(self) -> Tuple[int, int, int, int, int]:
    return (self.start, 0 if self.is_insertion else 1, -self.end, -self.priority, self.seq)

  def contains(self, other: "Edit") -> bool:
    if other.is_insertion:
      return self.start < other.start < self.end
    return self.start <= other.start and other.end <= self.end


class SourcePatcher:
  """
  Collects edits against one source string and renders the result.

  Attributes:
      source (str): The original text. Never modified.
  """

  def __init__(self, source: str):
    self.source = source
    self._edits: List[Edit] = []

  def __len__(self) -> int:
    return len(self._edits)

  @property
  def has_edits(self) -> bool:
    return bool(self._edits)

  def replace(self, start: int, end: int, *parts: Part, priority: int = 0) -> None:
    """
    Replaces ``source[start:end]`` with a template.

    Args:
        start: Range start.
        end: Range end (exclusive). Must be greater than `start`.
        *parts: Literal strings and `Span` markers.
        priority: Higher wins the outer position for identical ranges.

    Raises:
        ValueError: If the range is empty or out of bounds.
    """
    if not 0 <= start < end <= len(self.source):
      raise ValueError(f"Invalid replacement range [{start}, {end})")
    for part in parts:
      if isinstance(part, Span) and not (start <= part.start <= part.end <= end):
        raise ValueError(f"Span [{part.start}, {part.end}) escapes edit [{start}, {end})")
    self._edits.append(Edit(start, end, tuple(parts), priority, len(self._edits)))

  def insert(self, position: int, text: str) -> None:
    """Inserts text before ``source[position]``."""
    if not 0 <= position <= len(self.source):
      raise ValueError(f"Invalid insertion position {position}")
    self._edits.append(Edit(position, position, (text,), 0, len(self._edits)))

  def remove(self, start: int, end: int) -> None:
    """Deletes ``source[start:end]``."""
    self.replace(start, end)

  def render(self) -> str:
    """
    Applies every edit to the original text.

    Returns:
        str: Patched source. Identical to the input when no edits exist.

    Raises:
        PatchConflictError: If two edits overlap without nesting.
    """
    if not self._edits:
      return self.source
    ordered = sorted(self._edits, key=Edit.sort_key)
    return self._render(0, len(self.source), ordered)

  def _render(self, start: int, end: int, edits: Sequence[Edit]) -> str:
    out: List[str] = []
    cursor = start
    i = 0
    while i < len(edits):
      edit = edits[i]
      j = i + 1
      while j < len(edits) and edits[j].start < edit.end:
        inner = edits[j]
        if not edit.contains(inner):
          raise PatchConflictError(self._describe_conflict(edit, inner))
        if (inner.start, inner.end, inner.priority) == (edit.start, edit.end, edit.priority):
          raise PatchConflictError(self._describe_conflict(edit, inner))
        j += 1
      nested = edits[i + 1 : j]

      out.append(self.source[cursor : edit.start])
      for part in edit.parts:
        if isinstance(part, str):
          out.append(part)
        else:
          out.append(self._render(part.start, part.end, _within(nested, part)))
      cursor = max(cursor, edit.end)
      i = j
    out.append(self.source[cursor:end])
    return "".join(out)

  def _describe_conflict(self, first: Edit, second: Edit) -> str:
    return (
      f"Conflicting rewrites of {self.source[first.start : first.end]!r} "
      f"[{first.start}, {first.end}) and {self.source[second.start : second.end]!r} "
      f"[{second.start}, {second.end})"
    )


def _within(edits: Sequence[Edit], span: Span) -> List[Edit]:
  return [e for e in edits if span.start <= e.start and e.end <= span.end]

