"""Textual bounds of syntax tree nodes.

WHY: Parser locations are close to, but not exactly, what the editor
needs. A node that nominally ends at the start of the following line
would drag its block boundary over a blank continuation, and a statement
sequence has to begin right after the line that introduces it so the
indent absorbs the newline.

HOW: get_bounds() dispatches on the node kind. The default rule turns
the inclusive parser span into a half-open (start, end) pair, then pulls
an end that lands on a whitespace-only line prefix back to the end of
the previous line with content. Blocks and conditionals override the
default with recursive rules.

RULES:
- start = (first_line, first_column); end = (last_line, last_column + 1)
- Pull-back: while the text before end on its line is whitespace only,
  move end to the end of the previous line (never above line 0)
- Block: start = end of the nearest non-blank line above first_line;
  end = end of the last expression
- Conditional with else: end = end of the else branch, then pull-back
- Empty required child lists raise EmptyNodeError
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence

from blockmark.core.errors import EmptyNodeError
from blockmark.core.ir import Position
from blockmark.core.nodes import Block, Conditional, SyntaxNode


@dataclass(frozen=True)
class Bounds:
    """Half-open text span: start is the first character, end one past the last."""

    start: Position
    end: Position


def _pull_back(end: Position, lines: List[str]) -> Position:
    """Move an end sitting on a blank line prefix to the previous content line."""
    line, column = end
    if line >= len(lines):
        # Out of range; the stream builder reports it with full context
        return end
    while line > 0 and not lines[line][:column].lstrip():
        line -= 1
        column = len(lines[line])
    return (line, column)


def _end_of_line_before(first_line: int, lines: List[str]) -> Position:
    """End of the nearest non-blank line above first_line, or (0, 0)."""
    line = first_line - 1
    if line < 0:
        return (0, 0)
    while line > 0 and not lines[line].strip():
        line -= 1
    return (line, len(lines[line]))


def _default_end(node: SyntaxNode) -> Position:
    loc = node.location
    return (loc.last_line, loc.last_column + 1)


def get_bounds(node: SyntaxNode, lines: List[str]) -> Bounds:
    """Resolve the text span a node's boundary should cover.

    Args:
        node: Any syntax tree node.
        lines: The source text split on "\\n".

    Returns:
        Bounds with start/end (line, column) positions.

    Raises:
        EmptyNodeError: node is a Block with no expressions.
    """
    loc = node.location

    if isinstance(node, Block):
        if not node.expressions:
            raise EmptyNodeError(node.kind, "expressions")
        return Bounds(
            start=_end_of_line_before(loc.first_line, lines),
            end=get_bounds(node.expressions[-1], lines).end,
        )

    if isinstance(node, Conditional) and node.else_branch is not None:
        end = get_bounds(node.else_branch, lines).end
    else:
        end = _default_end(node)

    return Bounds(
        start=(loc.first_line, loc.first_column),
        end=_pull_back(end, lines),
    )


def span_bounds(
    owner: SyntaxNode,
    children: Sequence[SyntaxNode],
    field_name: str,
    lines: List[str],
) -> Bounds:
    """Bounds running from the first child's start to the last child's end.

    WHY: An object literal's body indent covers its properties, not the
    braces around them.

    RULES:
    - Raises EmptyNodeError naming owner's kind and field_name when
      children is empty
    """
    if not children:
        raise EmptyNodeError(owner.kind, field_name)
    return Bounds(
        start=get_bounds(children[0], lines).start,
        end=get_bounds(children[-1], lines).end,
    )
