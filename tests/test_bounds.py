"""Unit tests for the bounds resolver.

WHY: Every boundary the generator emits is placed by get_bounds(). An
off-by-one here shifts a marker into the wrong text slice, and a missed
pull-back lets a block swallow the following blank line.

HOW: Tests cover each rule of the resolver:
  - Default half-open span
  - Blank-prefix pull-back, including across several blank lines
  - Block start at the end of the previous content line
  - Conditional end taken from the else branch
  - EmptyNodeError for empty required child lists

RULES:
- Positions are (line, column) tuples, 0-based.
"""

import pytest

from blockmark.core.bounds import Bounds, get_bounds, span_bounds
from blockmark.core.errors import EmptyNodeError
from blockmark.core.nodes import Block, Conditional, Literal, Location, ObjectLiteral

from conftest import SAMPLE_SOURCE, lit, loc


class TestDefaultRule:
    """start = first position; end = one past the last character."""

    def test_single_character_literal(self):
        bounds = get_bounds(lit(0, 4, "b"), ["a + b", ""])
        assert bounds == Bounds(start=(0, 4), end=(0, 5))

    def test_end_at_line_end_is_kept(self):
        bounds = get_bounds(lit(0, 0, "hello"), ["hello"])
        assert bounds.end == (0, 5)

    def test_multi_line_node(self):
        node = Literal(loc(0, 2, 1, 3), "x")
        bounds = get_bounds(node, ["ab(cd", "efgh)"])
        assert bounds == Bounds(start=(0, 2), end=(1, 4))


class TestBlankPullBack:
    """An end preceded only by whitespace moves to the previous content line."""

    def test_end_on_whitespace_prefix_pulls_back(self):
        node = Literal(loc(0, 0, 1, 1), "foo")
        bounds = get_bounds(node, ["foo", "  ", "bar"])
        assert bounds.end == (0, 3)

    def test_pull_back_skips_blank_lines(self):
        node = Literal(loc(0, 0, 2, 0), "foo")
        bounds = get_bounds(node, ["foo", "", "   ", "bar"])
        assert bounds.end == (0, 3)

    def test_indented_content_before_end_prevents_pull_back(self):
        node = Literal(loc(0, 0, 1, 3), "foo")
        bounds = get_bounds(node, ["foo", "  ba"])
        assert bounds.end == (1, 4)

    def test_never_pulls_above_first_line(self):
        node = Literal(loc(0, 0, 0, 0), " ")
        bounds = get_bounds(node, ["  x"])
        assert bounds.end == (0, 1)

    def test_start_is_not_adjusted(self):
        node = Literal(loc(1, 0, 2, 0), "x")
        bounds = get_bounds(node, ["a", "bc", " "])
        assert bounds.start == (1, 0)
        assert bounds.end == (1, 2)


class TestBlockBounds:
    """Blocks start where the introducing line ends and end with their last statement."""

    def test_block_starts_at_end_of_previous_line(self):
        lines = SAMPLE_SOURCE.split("\n")
        body = Block(loc(3, 2, 3, 18), [Literal(loc(3, 2, 3, 18), "total = square(3)")])
        bounds = get_bounds(body, lines)
        assert bounds.start == (2, len("if ready"))
        assert bounds.end == (3, 19)

    def test_block_start_skips_blank_lines(self):
        body = Block(loc(2, 2, 2, 2), [lit(2, 2, "b")])
        bounds = get_bounds(body, ["if a", "", "  b"])
        assert bounds == Bounds(start=(0, 4), end=(2, 3))

    def test_block_on_first_line_starts_at_origin(self):
        body = Block(loc(0, 0, 0, 0), [lit(0, 0, "a")])
        assert get_bounds(body, ["a"]).start == (0, 0)

    def test_block_end_follows_last_expression(self):
        body = Block(loc(1, 2, 2, 4), [lit(1, 2, "a"), lit(2, 2, "bcd")])
        bounds = get_bounds(body, ["if x", "  a", "  bcd"])
        assert bounds.end == (2, 5)

    def test_empty_block_raises(self):
        with pytest.raises(EmptyNodeError) as exc_info:
            get_bounds(Block(loc(0, 0, 0, 0), []), ["x"])
        assert exc_info.value.kind == "Block"
        assert exc_info.value.field == "expressions"


class TestConditionalBounds:
    """An else branch extends the conditional to the branch's end."""

    def test_end_taken_from_else_branch(self):
        lines = SAMPLE_SOURCE.split("\n")
        else_branch = Block(loc(5, 2, 5, 10), [Literal(loc(5, 2, 5, 10), "total = 0")])
        node = Conditional(
            loc(2, 0, 3, 18),
            condition=lit(2, 3, "ready"),
            body=Block(loc(3, 2, 3, 18), [Literal(loc(3, 2, 3, 18), "total = square(3)")]),
            else_branch=else_branch,
        )
        bounds = get_bounds(node, lines)
        assert bounds == Bounds(start=(2, 0), end=(5, 11))

    def test_else_end_on_blank_prefix_pulls_back(self):
        node = Conditional(
            loc(0, 0, 2, 3),
            condition=lit(0, 3, "a"),
            body=Block(loc(1, 2, 1, 2), [lit(1, 2, "b")]),
            else_branch=Literal(loc(3, 2, 4, 0), "c"),
        )
        bounds = get_bounds(node, ["if a", "  b", "else", "  c", " "])
        assert bounds.end == (3, 3)

    def test_without_else_uses_default_rule(self):
        node = Conditional(
            loc(0, 0, 2, 0),
            condition=lit(0, 3, "a"),
            body=Block(loc(1, 2, 1, 2), [lit(1, 2, "b")]),
        )
        bounds = get_bounds(node, ["if a", "  b", "", "x"])
        assert bounds == Bounds(start=(0, 0), end=(1, 3))


class TestSpanBounds:
    """span_bounds() covers first child start to last child end."""

    def test_span_over_children(self):
        children = [lit(1, 2, "x"), lit(2, 2, "yy")]
        owner = ObjectLiteral(loc(1, 2, 2, 3), children)
        bounds = span_bounds(owner, children, "properties", ["o =", "  x", "  yy"])
        assert bounds == Bounds(start=(1, 2), end=(2, 4))

    def test_empty_children_raise(self):
        owner = ObjectLiteral(Location(0, 0, 0, 1), [])
        with pytest.raises(EmptyNodeError) as exc_info:
            span_bounds(owner, [], "properties", ["{}"])
        assert exc_info.value.kind == "ObjectLiteral"
        assert exc_info.value.field == "properties"
