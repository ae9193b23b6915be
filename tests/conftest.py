"""Shared test fixtures for the blockmark test suite.

WHY: Multiple test modules need the same small programs with exact parser
locations. Hand-built trees are the only way to pin those locations down
without running a real parser, so they are written once here.

HOW: Each fixture returns a (nodes, text) pair — the top-level syntax
nodes and the source they were "parsed" from. Locations use the parser
convention: 0-based lines and columns, last_column inclusive.

RULES:
- Every location in these trees is checked against its source by hand;
  keep column comments in sync when editing a source string.
- Literals are wrapped in Value nodes, as a real parser produces them.
"""

from typing import List, Tuple

import pytest

from blockmark.core.nodes import (
    Assignment,
    Block,
    Call,
    Conditional,
    ForLoop,
    FunctionDef,
    Literal,
    Location,
    ObjectLiteral,
    Operator,
    Parameter,
    Range,
    SyntaxNode,
    Value,
)

Program = Tuple[List[SyntaxNode], str]


def loc(first_line: int, first_column: int, last_line: int, last_column: int) -> Location:
    return Location(first_line, first_column, last_line, last_column)


def lit(line: int, column: int, value: str) -> Literal:
    return Literal(loc(line, column, line, column + len(value) - 1), value)


def val(line: int, column: int, value: str) -> Value:
    """A literal wrapped in a Value node covering the same span."""
    literal = lit(line, column, value)
    return Value(literal.location, literal)


# ---------------------------------------------------------------------------
# Sample programs
# ---------------------------------------------------------------------------

OPERATOR_SOURCE = "a + b\n"

BLANK_LINE_SOURCE = "x = 1\n\n"

NESTED_CALL_SOURCE = "f(g(1))\n"

#            0         1         2
#            012345678901234567890
SAMPLE_SOURCE = (
    "square = (x) -> x * x\n"   # line 0
    "\n"                        # line 1
    "if ready\n"                # line 2
    "  total = square(3)\n"     # line 3
    "else\n"                    # line 4
    "  total = 0\n"             # line 5
)

OBJECT_SOURCE = (
    "point =\n"                 # line 0
    "  x: 1\n"                  # line 1
    "  y: 2\n"                  # line 2
)

COMMENTED_SOURCE = (
    "if a\n"                    # line 0
    "  b = 1\n"                 # line 1
    "  # note\n"                # line 2, absent from the tree
    "  c = 2"                   # line 3
)

#         0         1
#         012345678901234
FOR_SOURCE = (
    "for i in [1..3]\n"         # line 0
    "  log i\n"                 # line 1
)


@pytest.fixture
def operator_program() -> Program:
    """``a + b`` — one binary operator over two literal sockets."""
    nodes = [Operator(loc(0, 0, 0, 4), "+", val(0, 0, "a"), val(0, 4, "b"))]
    return nodes, OPERATOR_SOURCE


@pytest.fixture
def blank_line_program() -> Program:
    """``x = 1`` followed by a blank line."""
    nodes = [Assignment(loc(0, 0, 0, 4), val(0, 0, "x"), val(0, 4, "1"))]
    return nodes, BLANK_LINE_SOURCE


@pytest.fixture
def nested_call_program() -> Program:
    """``f(g(1))`` — a call block directly inside another call block."""
    inner = Call(loc(0, 2, 0, 5), args=[val(0, 4, "1")])
    nodes = [Call(loc(0, 0, 0, 6), args=[inner])]
    return nodes, NESTED_CALL_SOURCE


@pytest.fixture
def sample_program() -> Program:
    """Function assignment, blank line, and an if/else with indented bodies."""
    square = Assignment(
        loc(0, 0, 0, 20),
        target=val(0, 0, "square"),
        value=FunctionDef(
            loc(0, 9, 0, 20),
            params=[Parameter(loc(0, 10, 0, 10), name=lit(0, 10, "x"))],
            body=Block(
                loc(0, 16, 0, 20),
                [Operator(loc(0, 16, 0, 20), "*", val(0, 16, "x"), val(0, 20, "x"))],
            ),
        ),
    )
    conditional = Conditional(
        loc(2, 0, 5, 10),
        condition=val(2, 3, "ready"),
        body=Block(
            loc(3, 2, 3, 18),
            [Assignment(
                loc(3, 2, 3, 18),
                target=val(3, 2, "total"),
                value=Call(loc(3, 10, 3, 18), args=[val(3, 17, "3")]),
            )],
        ),
        else_branch=Block(
            loc(5, 2, 5, 10),
            [Assignment(loc(5, 2, 5, 10), target=val(5, 2, "total"), value=val(5, 10, "0"))],
        ),
    )
    return [square, conditional], SAMPLE_SOURCE


@pytest.fixture
def object_program() -> Program:
    """Assignment of a two-property object literal written without braces."""
    properties = [
        Assignment(loc(1, 2, 1, 5), target=val(1, 2, "x"), value=val(1, 5, "1")),
        Assignment(loc(2, 2, 2, 5), target=val(2, 2, "y"), value=val(2, 5, "2")),
    ]
    nodes = [Assignment(
        loc(0, 0, 2, 5),
        target=val(0, 0, "point"),
        value=ObjectLiteral(loc(1, 2, 2, 5), properties),
    )]
    return nodes, OBJECT_SOURCE


@pytest.fixture
def for_program() -> Program:
    """``for`` loop over a range with an indented call body."""
    loop = ForLoop(
        loc(0, 0, 1, 6),
        body=Block(
            loc(1, 2, 1, 6),
            [Call(loc(1, 2, 1, 6), args=[val(1, 6, "i")])],
        ),
        source=Range(loc(0, 9, 0, 14), val(0, 10, "1"), val(0, 13, "3")),
        name=lit(0, 4, "i"),
    )
    return [loop], FOR_SOURCE


@pytest.fixture
def commented_program() -> Program:
    """Conditional whose body has an indented comment line the parser dropped."""
    body = Block(
        loc(1, 2, 3, 6),
        [
            Assignment(loc(1, 2, 1, 6), target=val(1, 2, "b"), value=val(1, 6, "1")),
            Assignment(loc(3, 2, 3, 6), target=val(3, 2, "c"), value=val(3, 6, "2")),
        ],
    )
    nodes = [Conditional(loc(0, 0, 3, 6), condition=val(0, 3, "a"), body=body)]
    return nodes, COMMENTED_SOURCE


@pytest.fixture(params=[
    "operator_program",
    "blank_line_program",
    "nested_call_program",
    "sample_program",
    "object_program",
    "for_program",
    "commented_program",
])
def any_program(request) -> Program:
    """Each sample program in turn, for property tests."""
    return request.getfixturevalue(request.param)
