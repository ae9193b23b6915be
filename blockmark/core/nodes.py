"""Syntax tree dataclasses consumed by the markup generator.

WHY: The converter never parses source itself — an external parser
(e.g. CoffeeScript's ``nodes()``) produces the tree. The core needs a
small, closed set of typed node kinds so the generator can handle each
one explicitly and reject anything else.

HOW: SyntaxNode is the common base carrying a Location. One dataclass per
node kind adds its children. Together they form a closed tagged union:
NODE_KINDS lists every variant, and the generator's dispatch table is
checked against it.

RULES:
- Lines and columns are 0-based; last_column is inclusive
- Optional children are None when absent; list children may be empty
- Nodes are read-only input — nothing in the pipeline mutates them
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass(frozen=True)
class Location:
    """Source span of a node, as reported by the parser."""

    first_line: int
    first_column: int
    last_line: int
    last_column: int


@dataclass
class SyntaxNode:
    """Base of all syntax tree node kinds."""

    location: Location

    @property
    def kind(self) -> str:
        return type(self).__name__


@dataclass
class Block(SyntaxNode):
    """A sequence of statements (a body)."""

    expressions: List[SyntaxNode] = field(default_factory=list)

    def unwrap(self) -> SyntaxNode:
        """Return the lone expression of a one-statement block, else the block."""
        if len(self.expressions) == 1:
            return self.expressions[0]
        return self


@dataclass
class Operator(SyntaxNode):
    """Unary or binary operation; second is None for unary operators."""

    operator: str
    first: SyntaxNode
    second: Optional[SyntaxNode] = None


@dataclass
class Value(SyntaxNode):
    """Wrapper around a base expression."""

    base: SyntaxNode


@dataclass
class Literal(SyntaxNode):
    """Identifier, number, string, or other atomic leaf."""

    value: str


@dataclass
class Call(SyntaxNode):
    """Function invocation."""

    args: List[SyntaxNode] = field(default_factory=list)


@dataclass
class FunctionDef(SyntaxNode):
    """Function literal with parameters and a body."""

    params: List[SyntaxNode]
    body: Block


@dataclass
class Parameter(SyntaxNode):
    """Function parameter wrapping its name node."""

    name: SyntaxNode


@dataclass
class Assignment(SyntaxNode):
    """``target = value`` (also object properties ``key: value``)."""

    target: SyntaxNode
    value: SyntaxNode


@dataclass
class ForLoop(SyntaxNode):
    """Loop over a source; every part but the body is optional."""

    body: SyntaxNode
    index: Optional[SyntaxNode] = None
    source: Optional[SyntaxNode] = None
    name: Optional[SyntaxNode] = None
    range_from: Optional[SyntaxNode] = None


@dataclass
class Range(SyntaxNode):
    """``[from..to]`` range."""

    range_from: SyntaxNode
    range_to: SyntaxNode


@dataclass
class Conditional(SyntaxNode):
    """``if`` with an optional else branch."""

    condition: SyntaxNode
    body: SyntaxNode
    else_branch: Optional[SyntaxNode] = None


@dataclass
class ArrayLiteral(SyntaxNode):
    elements: List[SyntaxNode] = field(default_factory=list)


@dataclass
class Return(SyntaxNode):
    expression: Optional[SyntaxNode] = None


@dataclass
class Parenthesized(SyntaxNode):
    body: Optional[Block] = None


@dataclass
class ObjectLiteral(SyntaxNode):
    properties: List[SyntaxNode] = field(default_factory=list)


NODE_KINDS = (
    Block,
    Operator,
    Value,
    Literal,
    Call,
    FunctionDef,
    Parameter,
    Assignment,
    ForLoop,
    Range,
    Conditional,
    ArrayLiteral,
    Return,
    Parenthesized,
    ObjectLiteral,
)
"""Every SyntaxNode variant, in declaration order."""
