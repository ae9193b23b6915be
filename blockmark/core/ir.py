"""Intermediate representation: boundaries, markup entries, and tokens.

WHY: The markup generator and the stream builder need a shared vocabulary
for the regions they delimit. The renderer and formatters need a single,
well-typed token stream they can walk without knowing how it was built.

HOW: Four pieces form the contract:
  Boundary    — a Block, Socket, or Indent region owning one start and
                one end marker token
  Token       — one node of the doubly-linked output stream: text,
                newline, or a boundary marker
  MarkupEntry — a boundary marker anchored to a (line, column) position,
                produced by the generator and consumed by the builder
  helpers     — forward/backward traversal, text reconstruction, and the
                well-nestedness check

RULES:
- A boundary's start and end tokens are created with it and never replaced
- Each token is linked into at most one stream
- Positions are (line, column) tuples, 0-based, compared lexicographically
- The SEGMENT kind is reserved for the root boundary and never reaches
  an output stream
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Tuple

from blockmark.config import Color
from blockmark.core.errors import MalformedMarkupError

Position = Tuple[int, int]


class BoundaryKind(str, enum.Enum):
    BLOCK = "block"
    SOCKET = "socket"
    INDENT = "indent"
    SEGMENT = "segment"


class TokenKind(str, enum.Enum):
    """Every token type that can appear in a stream.

    Values are the wire names used by the JSON formatter.
    """

    TEXT = "text"
    NEWLINE = "newline"
    BLOCK_START = "blockStart"
    BLOCK_END = "blockEnd"
    SOCKET_START = "socketStart"
    SOCKET_END = "socketEnd"
    INDENT_START = "indentStart"
    INDENT_END = "indentEnd"
    SEGMENT_START = "segmentStart"
    SEGMENT_END = "segmentEnd"


_MARKER_KINDS: dict[BoundaryKind, Tuple[TokenKind, TokenKind]] = {
    BoundaryKind.BLOCK: (TokenKind.BLOCK_START, TokenKind.BLOCK_END),
    BoundaryKind.SOCKET: (TokenKind.SOCKET_START, TokenKind.SOCKET_END),
    BoundaryKind.INDENT: (TokenKind.INDENT_START, TokenKind.INDENT_END),
    BoundaryKind.SEGMENT: (TokenKind.SEGMENT_START, TokenKind.SEGMENT_END),
}

START_KINDS = frozenset(pair[0] for pair in _MARKER_KINDS.values())
END_KINDS = frozenset(pair[1] for pair in _MARKER_KINDS.values())


@dataclass(eq=False)
class Token:
    """One element of the doubly-linked token stream.

    WHY: The renderer walks the stream linearly in both directions and
    splices tokens around while editing, so a linked structure fits it
    better than a list.

    HOW: text is set only for TEXT tokens; boundary only for marker
    tokens. append() links a token directly after this one.

    RULES:
    - prev/next are excluded from repr and equality (identity matters)
    - append() returns the appended token so callers can chain
    """

    kind: TokenKind
    text: str = ""
    boundary: Optional[Boundary] = None
    prev: Optional[Token] = field(default=None, repr=False)
    next: Optional[Token] = field(default=None, repr=False)

    @property
    def is_start(self) -> bool:
        return self.kind in START_KINDS

    @property
    def is_end(self) -> bool:
        return self.kind in END_KINDS

    def append(self, token: Token) -> Token:
        token.prev = self
        token.next = self.next
        if self.next is not None:
            self.next.prev = token
        self.next = token
        return token


@dataclass(eq=False)
class Boundary:
    """A paired start/end region in the stream.

    WHY: Blocks, sockets and indents are what the editor draws. Each
    needs its metadata (color, precedence, indent width) reachable from
    both of its markers.

    HOW: __post_init__ creates the start and end marker tokens, each
    pointing back at this boundary.

    RULES:
    - precedence is meaningful for BLOCK and SOCKET only
    - indent_width is set for INDENT only
    - handwritten marks blank-line placeholders; implicit marks sockets
      synthesized around directly nested blocks
    """

    kind: BoundaryKind
    id: int
    color: Optional[Color] = None
    precedence: int = 0
    indent_width: Optional[int] = None
    handwritten: bool = False
    implicit: bool = False
    start: Token = field(init=False, repr=False)
    end: Token = field(init=False, repr=False)

    def __post_init__(self) -> None:
        start_kind, end_kind = _MARKER_KINDS[self.kind]
        self.start = Token(start_kind, boundary=self)
        self.end = Token(end_kind, boundary=self)


@dataclass
class MarkupEntry:
    """A boundary marker anchored to a text position."""

    marker: Token
    position: Position
    id: int
    is_start: bool

    @property
    def line(self) -> int:
        return self.position[0]

    @property
    def column(self) -> int:
        return self.position[1]

    @property
    def boundary(self) -> Boundary:
        return self.marker.boundary


def iter_tokens(head: Optional[Token]) -> Iterator[Token]:
    """Yield tokens from head forward along next links."""
    token = head
    while token is not None:
        yield token
        token = token.next


def iter_tokens_reversed(tail: Optional[Token]) -> Iterator[Token]:
    """Yield tokens from tail backward along prev links."""
    token = tail
    while token is not None:
        yield token
        token = token.prev


def last_token(head: Token) -> Token:
    token = head
    while token.next is not None:
        token = token.next
    return token


def stream_text(head: Optional[Token]) -> str:
    """Concatenate the text and newline tokens of a stream.

    WHY: Reconstructing the source from the stream is how callers (and
    tests) confirm that no characters were lost or duplicated.

    RULES:
    - Marker tokens contribute nothing
    - Each newline token contributes one "\\n"
    """
    parts: List[str] = []
    for token in iter_tokens(head):
        if token.kind is TokenKind.TEXT:
            parts.append(token.text)
        elif token.kind is TokenKind.NEWLINE:
            parts.append("\n")
    return "".join(parts)


def check_well_nested(head: Optional[Token]) -> None:
    """Verify that the markers of a stream are properly bracketed.

    WHY: The renderer builds its block tree by treating markers as
    brackets. A crossing or unclosed pair would corrupt every block after
    it, so the builder verifies its own output before returning it.

    HOW: Scan left to right with a stack of open boundaries. Every end
    token must close the boundary on top of the stack.

    RULES:
    - Raises MalformedMarkupError on the first violation
    - The stack must be empty at the end of the stream
    """
    stack: List[Boundary] = []
    for token in iter_tokens(head):
        if token.is_start:
            stack.append(token.boundary)
        elif token.is_end:
            if not stack:
                raise MalformedMarkupError(
                    "{} for boundary {} has no open start".format(
                        token.kind.value, token.boundary.id
                    )
                )
            top = stack.pop()
            if top is not token.boundary:
                raise MalformedMarkupError(
                    "{} for boundary {} closes open {} boundary {}".format(
                        token.kind.value, token.boundary.id, top.kind.value, top.id
                    )
                )
    if stack:
        raise MalformedMarkupError(
            "Stream ends with {} unclosed boundaries (innermost {})".format(
                len(stack), stack[-1].id
            )
        )
