"""Plain text token listing, one token per line.

WHY: Developers debugging a tree or a parser upgrade need to eyeball
the stream and diff it between runs. JSON is too noisy for that; an
indented listing shows the nesting at a glance.

HOW: Walks the stream keeping a nesting depth. Start markers print at
the current depth and increase it; end markers decrease it first, so a
pair lines up. Text is shown JSON-quoted so whitespace stays visible.

RULES:
- Two spaces of indentation per open boundary
- Marker lines: "<kind> #<id>" then the color and any flags
- No trailing whitespace on any line; output ends with a newline
- Output suffix: "-tokens.txt"
- Media type: "text/plain"
"""

from __future__ import annotations

import json
from typing import List

from blockmark.core.ir import Token, TokenKind, iter_tokens
from blockmark.formatters.base import BaseFormatter, FormatterOutput


def describe_token(token: Token) -> str:
    """Single-line description of a token, without indentation."""
    if token.kind is TokenKind.TEXT:
        return "text {}".format(json.dumps(token.text, ensure_ascii=False))
    if token.kind is TokenKind.NEWLINE:
        return "newline"

    boundary = token.boundary
    parts = ["{} #{}".format(token.kind.value, boundary.id)]
    if boundary.color is not None:
        parts.append(boundary.color.value)
    if boundary.handwritten:
        parts.append("handwritten")
    if boundary.implicit:
        parts.append("implicit")
    return " ".join(parts)


class PlainTextFormatter(BaseFormatter):
    """Formatter that lists the stream as indented plain text."""

    @property
    def name(self) -> str:
        return "Plain text listing"

    def format(self, stream: Token) -> list[FormatterOutput]:
        lines: List[str] = []
        depth = 0
        for token in iter_tokens(stream):
            if token.is_end:
                depth -= 1
            lines.append("{}{}".format("  " * depth, describe_token(token)))
            if token.is_start:
                depth += 1

        return [
            FormatterOutput(
                suffix="-tokens.txt",
                content="\n".join(lines) + "\n",
                media_type="text/plain",
            )
        ]
