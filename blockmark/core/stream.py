"""Token stream construction: merge markup entries with the source text.

WHY: The generator's markup is an unordered bag of positioned markers.
The renderer needs one ordered, well-nested stream in which markers sit
between the exact text fragments they delimit. Several markers often
share a position, so the merge order decides how adjacent blocks nest.

HOW: Entries are bucketed by line and each bucket is sorted (column,
then ends before starts, starts by ascending id, ends by descending id).
Lines are walked in order: blank lines become a handwritten block/socket
placeholder, other lines interleave text slices with their sorted
markers. A parse stack of Frames tracks open boundaries; a block opened
directly inside another block is wrapped in an implicit socket.

RULES:
- Every line is preceded by a newline token; the first one is dropped
- Blank (whitespace-only) lines emit no text, only the placeholder pair
- The slice before a line's first marker is left-trimmed; the slice
  after the last marker (the whole line when it has no markers) is kept
  as is; empty slices are skipped
- The root entries (id 0) bootstrap the stream and are not emitted
- Synthesized boundaries get ids above the largest markup id
- Any pairing or nesting violation raises MalformedMarkupError; a
  partial stream is never returned
"""

from __future__ import annotations

import logging
from collections import Counter, defaultdict
from dataclasses import dataclass, field
from typing import DefaultDict, Dict, List, Optional, Tuple

from blockmark.core.errors import MalformedMarkupError
from blockmark.core.ir import (
    Boundary,
    BoundaryKind,
    MarkupEntry,
    Token,
    TokenKind,
    check_well_nested,
)
from blockmark.core.markup import ROOT_ID

logger = logging.getLogger(__name__)


@dataclass
class Frame:
    """One open boundary on the parse stack."""

    kind: BoundaryKind
    boundary_id: int
    implicit: bool = False
    boundary: Optional[Boundary] = field(default=None, repr=False)


class ParseStack:
    """Stack of open boundaries; push and pop are the only mutators.

    RULES:
    - pop() must name the boundary being closed; closing anything but
      the innermost open boundary raises MalformedMarkupError
    """

    def __init__(self) -> None:
        self._frames: List[Frame] = []

    def __len__(self) -> int:
        return len(self._frames)

    @property
    def top(self) -> Optional[Frame]:
        return self._frames[-1] if self._frames else None

    def push(self, boundary: Boundary) -> None:
        self._frames.append(Frame(
            kind=boundary.kind,
            boundary_id=boundary.id,
            implicit=boundary.implicit,
            boundary=boundary,
        ))

    def pop(self, boundary: Boundary) -> Frame:
        top = self.top
        if top is None:
            raise MalformedMarkupError(
                "End of {} boundary {} with nothing open".format(
                    boundary.kind.value, boundary.id
                )
            )
        if top.boundary is not boundary:
            raise MalformedMarkupError(
                "End of {} boundary {} while {} boundary {} is still open".format(
                    boundary.kind.value, boundary.id, top.kind.value, top.boundary_id
                )
            )
        return self._frames.pop()


def _sort_key(entry: MarkupEntry) -> Tuple[int, int, int]:
    """Column, then ends before starts; starts outer-first, ends inner-first."""
    if entry.is_start:
        return (entry.column, 1, entry.id)
    return (entry.column, 0, -entry.id)


def _validate_markup(markup: List[MarkupEntry], lines: List[str]) -> None:
    """Reject markup the builder could not turn into a well-nested stream.

    WHY: A marker without its partner, or one on a line the builder never
    scans for markers, would silently unbalance the stream.

    RULES:
    - Every non-root id has exactly one start and one end entry
    - is_start agrees with the marker token's kind
    - Non-root entries lie inside the text and not on a blank line
    """
    starts: Counter = Counter()
    ends: Counter = Counter()
    for entry in markup:
        if entry.is_start != entry.marker.is_start:
            raise MalformedMarkupError(
                "Entry for boundary {} says is_start={} but carries a {} marker".format(
                    entry.id, entry.is_start, entry.marker.kind.value
                )
            )
        (starts if entry.is_start else ends)[entry.id] += 1
        if entry.id == ROOT_ID:
            continue
        line, column = entry.position
        if not 0 <= line < len(lines) or not 0 <= column <= len(lines[line]):
            raise MalformedMarkupError(
                "Boundary {} marker at {} lies outside the text".format(entry.id, entry.position)
            )
        if not lines[line].strip():
            raise MalformedMarkupError(
                "Boundary {} marker at {} lies on a blank line".format(entry.id, entry.position)
            )

    for boundary_id in sorted(set(starts) | set(ends)):
        if boundary_id == ROOT_ID:
            continue
        if starts[boundary_id] != 1 or ends[boundary_id] != 1:
            raise MalformedMarkupError(
                "Boundary {} has {} start and {} end entries".format(
                    boundary_id, starts[boundary_id], ends[boundary_id]
                )
            )


def _append_text(head: Token, text: str, trim: bool) -> Token:
    if trim:
        text = text.lstrip()
    if text:
        head = head.append(Token(TokenKind.TEXT, text=text))
    return head


def build(text: str, markup: List[MarkupEntry]) -> Token:
    """Merge markup with the text into a doubly-linked token stream.

    WHY: This is the renderer-facing half of the pipeline. The stream it
    returns is everything the editor needs to draw the program.

    HOW: See the module docstring. After the last line the stack must be
    empty and the stream is re-checked with check_well_nested().

    Args:
        text: The full source text.
        markup: Entries from markup.generate(), in any order.

    Returns:
        The head token of the stream; its prev link is None.

    Raises:
        MalformedMarkupError: markup is unpaired, misplaced, or crossing.
    """
    lines = text.split("\n")
    _validate_markup(markup, lines)

    buckets: DefaultDict[int, List[MarkupEntry]] = defaultdict(list)
    for entry in markup:
        if entry.id != ROOT_ID:
            buckets[entry.line].append(entry)

    next_id = max((entry.id for entry in markup), default=ROOT_ID) + 1
    stats: Dict[str, int] = {"handwritten": 0, "implicit": 0}

    first = head = Token(TokenKind.TEXT)
    stack = ParseStack()

    for index, line in enumerate(lines):
        head = head.append(Token(TokenKind.NEWLINE))

        if not line.strip():
            block = Boundary(BoundaryKind.BLOCK, next_id, handwritten=True)
            socket = Boundary(BoundaryKind.SOCKET, next_id + 1, handwritten=True)
            next_id += 2
            stats["handwritten"] += 1
            head = head.append(block.start).append(socket.start)
            head = head.append(socket.end).append(block.end)
            continue

        last = 0
        for entry in sorted(buckets.get(index, ()), key=_sort_key):
            head = _append_text(head, line[last:entry.column], trim=last == 0)

            top = stack.top
            if (
                entry.marker.kind is TokenKind.BLOCK_START
                and top is not None
                and top.kind is BoundaryKind.BLOCK
            ):
                wrapper = Boundary(BoundaryKind.SOCKET, next_id, implicit=True)
                next_id += 1
                stats["implicit"] += 1
                stack.push(wrapper)
                head = head.append(wrapper.start)

            if entry.is_start:
                stack.push(entry.boundary)
            else:
                stack.pop(entry.boundary)
            head = head.append(entry.marker)

            top = stack.top
            if top is not None and top.implicit:
                frame = stack.pop(top.boundary)
                head = head.append(frame.boundary.end)

            last = entry.column

        head = _append_text(head, line[last:], trim=False)

    if len(stack):
        top = stack.top
        raise MalformedMarkupError(
            "{} boundaries still open at end of text (innermost {} {})".format(
                len(stack), top.kind.value, top.boundary_id
            )
        )

    stream = first.next.next
    stream.prev = None
    check_well_nested(stream)

    logger.debug(
        "Built stream over %d lines: %d handwritten placeholders, %d implicit sockets",
        len(lines), stats["handwritten"], stats["implicit"],
    )
    return stream
