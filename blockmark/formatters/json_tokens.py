"""Token stream JSON formatter.

WHY: The editor front end usually runs in another process (or another
language) and cannot walk Python objects. A JSON array of tokens, in
stream order, carries everything the renderer needs: marker kinds,
boundary ids, colors, flags, and indent widths.

HOW: Walks the stream once, turning each token into a dict. Wraps the
list with the format version, the default indent width, and the color
palette, then validates the document with jsonschema against the bundled
token_stream_schema.json before returning.

RULES:
- Token order in the array is stream order
- text tokens: {"type": "text", "value": ...}; newline: {"type": "newline"}
- block/socket markers carry id, color (or null), precedence, handwritten,
  implicit
- indent markers carry id and indentWidth
- Output suffix: "-tokens.json"; media type "application/json"
- Validate output against the schema before returning; raise on failure
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import jsonschema

from blockmark.config import DEFAULT_INDENT_WIDTH, PALETTE
from blockmark.core.ir import BoundaryKind, Token, TokenKind, iter_tokens
from blockmark.formatters.base import BaseFormatter, FormatterOutput

FORMAT_VERSION = "1.0.0"

_SCHEMA_PATH = Path(__file__).resolve().parent / "token_stream_schema.json"


def _load_schema() -> dict[str, Any]:
    """Load the token stream JSON schema from disk.

    Cached at module level after first call to avoid repeated I/O.
    """
    with open(_SCHEMA_PATH, encoding="utf-8") as f:
        return json.load(f)


_CACHED_SCHEMA: dict[str, Any] | None = None


def _get_schema() -> dict[str, Any]:
    global _CACHED_SCHEMA
    if _CACHED_SCHEMA is None:
        _CACHED_SCHEMA = _load_schema()
    return _CACHED_SCHEMA


def token_to_dict(token: Token) -> dict[str, Any]:
    """Convert one stream token to its JSON object."""
    if token.kind is TokenKind.TEXT:
        return {"type": "text", "value": token.text}
    if token.kind is TokenKind.NEWLINE:
        return {"type": "newline"}

    boundary = token.boundary
    if boundary.kind is BoundaryKind.INDENT:
        return {
            "type": token.kind.value,
            "id": boundary.id,
            "indentWidth": boundary.indent_width or DEFAULT_INDENT_WIDTH,
        }
    return {
        "type": token.kind.value,
        "id": boundary.id,
        "color": boundary.color.value if boundary.color is not None else None,
        "precedence": boundary.precedence,
        "handwritten": boundary.handwritten,
        "implicit": boundary.implicit,
    }


class JSONTokensFormatter(BaseFormatter):
    """Formatter that produces the token stream as a JSON document.

    RULES:
    - One document per stream, schema-validated
    - Raises jsonschema.ValidationError on invalid output
    """

    @property
    def name(self) -> str:
        return "Token stream JSON"

    def format(self, stream: Token) -> list[FormatterOutput]:
        output: dict[str, Any] = {
            "version": FORMAT_VERSION,
            "indentWidth": DEFAULT_INDENT_WIDTH,
            "palette": {color.value: hex_code for color, hex_code in PALETTE.items()},
            "tokens": [token_to_dict(token) for token in iter_tokens(stream)],
        }

        schema = _get_schema()
        jsonschema.validate(instance=output, schema=schema)

        content = json.dumps(output, indent=2, ensure_ascii=False)

        return [
            FormatterOutput(
                suffix="-tokens.json",
                content=content,
                media_type="application/json",
            )
        ]
