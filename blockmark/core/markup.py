"""Markup generation: walk a syntax tree into paired boundary entries.

WHY: The editor needs to know which spans of the source are blocks,
sockets, and indented bodies. The syntax tree knows the structure but
not how the editor groups it. This module decides, per node kind, which
boundary to draw and which children to descend into.

HOW: generate() seeds a MarkupContext with the root segment and visits
each top-level node. _HANDLERS maps every SyntaxNode kind to one handler;
a handler optionally opens a boundary over the node's bounds and then
visits its children left to right. Operator precedence is threaded down
so that literal sockets record how tightly their parent binds.

RULES:
- Ids start at 1 and increase by one per boundary; 0 is the root
- Each boundary contributes exactly two entries: start then end
- The dispatch table covers every SyntaxNode kind; anything else raises
  UnsupportedNodeKindError
- The tree and the text are never modified
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Tuple

from blockmark.config import DEFAULT_INDENT_WIDTH, Color, operator_precedence
from blockmark.core.bounds import Bounds, get_bounds, span_bounds
from blockmark.core.errors import MalformedMarkupError, UnsupportedNodeKindError
from blockmark.core.ir import Boundary, BoundaryKind, MarkupEntry
from blockmark.core.nodes import (
    NODE_KINDS,
    ArrayLiteral,
    Assignment,
    Block,
    Call,
    Conditional,
    ForLoop,
    FunctionDef,
    Literal,
    ObjectLiteral,
    Operator,
    Parameter,
    Parenthesized,
    Range,
    Return,
    SyntaxNode,
    Value,
)

logger = logging.getLogger(__name__)

ROOT_ID = 0


@dataclass
class MarkupContext:
    """Per-call state of one markup generation.

    WHY: The id counter and the markup list must not outlive a call, or
    two conversions would share ids. Passing the context explicitly keeps
    every handler a plain function of (node, context, precedence).

    RULES:
    - next_id is the id the next boundary will receive
    - markup is seeded with the root entries by generate()
    """

    lines: List[str]
    root: Boundary
    indent_width: int = DEFAULT_INDENT_WIDTH
    next_id: int = 1
    markup: List[MarkupEntry] = field(default_factory=list)

    def open(
        self,
        kind: BoundaryKind,
        bounds: Bounds,
        color: Optional[Color] = None,
        precedence: int = 0,
    ) -> Boundary:
        """Create a boundary over bounds, register its entries, advance the id."""
        if bounds.end < bounds.start:
            raise MalformedMarkupError(
                "{} boundary {} ends at {} before it starts at {}".format(
                    kind.value, self.next_id, bounds.end, bounds.start
                )
            )
        boundary = Boundary(
            kind,
            self.next_id,
            color=color,
            precedence=precedence,
            indent_width=self.indent_width if kind is BoundaryKind.INDENT else None,
        )
        self.markup.append(MarkupEntry(boundary.start, bounds.start, boundary.id, True))
        self.markup.append(MarkupEntry(boundary.end, bounds.end, boundary.id, False))
        self.next_id += 1
        return boundary

    def bounds(self, node: SyntaxNode) -> Bounds:
        return get_bounds(node, self.lines)


def mark(node: SyntaxNode, ctx: MarkupContext, precedence: int = 0) -> None:
    """Visit one node, dispatching on its exact kind."""
    handler = _HANDLERS.get(type(node))
    if handler is None:
        raise UnsupportedNodeKindError(type(node).__name__)
    handler(node, ctx, precedence)


def _mark_optional(node: Optional[SyntaxNode], ctx: MarkupContext) -> None:
    if node is not None:
        mark(node, ctx)


def _mark_unwrapped(body: Optional[Block], ctx: MarkupContext) -> None:
    # An empty body has nothing to unwrap into
    if body is not None and body.expressions:
        mark(body.unwrap(), ctx)


# ---------------------------------------------------------------------------
# Handlers, one per node kind
# ---------------------------------------------------------------------------


def _mark_block(node: Block, ctx: MarkupContext, precedence: int) -> None:
    ctx.open(BoundaryKind.INDENT, ctx.bounds(node))
    for expression in node.expressions:
        mark(expression, ctx)


def _mark_operator(node: Operator, ctx: MarkupContext, precedence: int) -> None:
    own = operator_precedence(node.operator)
    ctx.open(BoundaryKind.BLOCK, ctx.bounds(node), color=Color.VALUE, precedence=own)
    mark(node.first, ctx, own)
    if node.second is not None:
        mark(node.second, ctx, own)


def _mark_value(node: Value, ctx: MarkupContext, precedence: int) -> None:
    mark(node.base, ctx, precedence)


def _mark_literal(node: Literal, ctx: MarkupContext, precedence: int) -> None:
    ctx.open(BoundaryKind.SOCKET, ctx.bounds(node), precedence=precedence)


def _mark_call(node: Call, ctx: MarkupContext, precedence: int) -> None:
    ctx.open(BoundaryKind.BLOCK, ctx.bounds(node), color=Color.COMMAND)
    for arg in node.args:
        mark(arg, ctx)


def _mark_function_def(node: FunctionDef, ctx: MarkupContext, precedence: int) -> None:
    ctx.open(BoundaryKind.BLOCK, ctx.bounds(node), color=Color.VALUE)
    for param in node.params:
        mark(param, ctx)
    _mark_unwrapped(node.body, ctx)


def _mark_parameter(node: Parameter, ctx: MarkupContext, precedence: int) -> None:
    mark(node.name, ctx)


def _mark_assignment(node: Assignment, ctx: MarkupContext, precedence: int) -> None:
    ctx.open(BoundaryKind.BLOCK, ctx.bounds(node), color=Color.COMMAND)
    mark(node.target, ctx)
    mark(node.value, ctx)


def _mark_for_loop(node: ForLoop, ctx: MarkupContext, precedence: int) -> None:
    ctx.open(BoundaryKind.BLOCK, ctx.bounds(node), color=Color.CONTROL)
    _mark_optional(node.index, ctx)
    _mark_optional(node.source, ctx)
    _mark_optional(node.name, ctx)
    _mark_optional(node.range_from, ctx)
    mark(node.body, ctx)


def _mark_range(node: Range, ctx: MarkupContext, precedence: int) -> None:
    ctx.open(BoundaryKind.BLOCK, ctx.bounds(node), color=Color.VALUE)
    mark(node.range_from, ctx)
    mark(node.range_to, ctx)


def _mark_conditional(node: Conditional, ctx: MarkupContext, precedence: int) -> None:
    ctx.open(BoundaryKind.BLOCK, ctx.bounds(node), color=Color.CONTROL)
    mark(node.condition, ctx)
    mark(node.body, ctx)
    _mark_optional(node.else_branch, ctx)


def _mark_array(node: ArrayLiteral, ctx: MarkupContext, precedence: int) -> None:
    ctx.open(BoundaryKind.BLOCK, ctx.bounds(node), color=Color.VALUE)
    for element in node.elements:
        mark(element, ctx)


def _mark_return(node: Return, ctx: MarkupContext, precedence: int) -> None:
    ctx.open(BoundaryKind.BLOCK, ctx.bounds(node), color=Color.RETURN)
    _mark_optional(node.expression, ctx)


def _mark_parenthesized(node: Parenthesized, ctx: MarkupContext, precedence: int) -> None:
    ctx.open(BoundaryKind.BLOCK, ctx.bounds(node), color=Color.VALUE)
    _mark_unwrapped(node.body, ctx)


def _mark_object(node: ObjectLiteral, ctx: MarkupContext, precedence: int) -> None:
    ctx.open(BoundaryKind.BLOCK, ctx.bounds(node), color=Color.VALUE)
    ctx.open(BoundaryKind.INDENT, span_bounds(node, node.properties, "properties", ctx.lines))
    for prop in node.properties:
        mark(prop, ctx)


_HANDLERS: Dict[type, Callable[..., None]] = {
    Block: _mark_block,
    Operator: _mark_operator,
    Value: _mark_value,
    Literal: _mark_literal,
    Call: _mark_call,
    FunctionDef: _mark_function_def,
    Parameter: _mark_parameter,
    Assignment: _mark_assignment,
    ForLoop: _mark_for_loop,
    Range: _mark_range,
    Conditional: _mark_conditional,
    ArrayLiteral: _mark_array,
    Return: _mark_return,
    Parenthesized: _mark_parenthesized,
    ObjectLiteral: _mark_object,
}

_unhandled = [kind.__name__ for kind in NODE_KINDS if kind not in _HANDLERS]
if _unhandled:
    raise TypeError("No markup handler for node kinds: {}".format(", ".join(_unhandled)))


def generate(
    nodes: List[SyntaxNode],
    text: str,
    indent_width: Optional[int] = None,
) -> Tuple[List[MarkupEntry], Boundary]:
    """Generate the markup entries for a list of top-level nodes.

    WHY: This is the tree-facing half of the pipeline. Its output is an
    unordered list the stream builder sorts and merges with the text.

    HOW: Splits the text into lines for bounds resolution, seeds the
    markup with the root segment spanning the whole text, and visits
    each node in order.

    RULES:
    - Root (id 0) starts at (0, 0) and ends one past the last character
      of the last line
    - indent_width defaults to the configured DEFAULT_INDENT_WIDTH

    Args:
        nodes: Top-level expressions of the parsed program.
        text: The full source text the tree was parsed from.
        indent_width: Width recorded on every Indent boundary.

    Returns:
        Tuple of (markup entries, root boundary).

    Raises:
        UnsupportedNodeKindError: A node kind has no handler.
        EmptyNodeError: A node needing children has none.
        MalformedMarkupError: A resolved span ends before it starts.
    """
    lines = text.split("\n")
    root = Boundary(BoundaryKind.SEGMENT, ROOT_ID)
    ctx = MarkupContext(lines=lines, root=root)
    if indent_width is not None:
        ctx.indent_width = indent_width

    ctx.markup.append(MarkupEntry(root.start, (0, 0), ROOT_ID, True))
    ctx.markup.append(
        MarkupEntry(root.end, (len(lines) - 1, len(lines[-1]) + 1), ROOT_ID, False)
    )

    for node in nodes:
        mark(node, ctx)

    logger.debug(
        "Generated %d boundaries from %d top-level nodes over %d lines",
        ctx.next_id - 1, len(nodes), len(lines),
    )
    return ctx.markup, root
