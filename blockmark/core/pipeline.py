"""One-call conversion: syntax tree + source text → token stream.

WHY: The CLI, the formatters' callers, and embedding applications all
want the same thing — a finished stream — without wiring the two stages
together themselves.

HOW: Runs markup.generate() then stream.build() on the same text.

RULES:
- Pure function of its inputs; safe to call repeatedly
- Errors from either stage propagate unchanged
"""

from __future__ import annotations

import logging
from typing import List, Optional

from blockmark.core import markup as markup_stage
from blockmark.core import stream as stream_stage
from blockmark.core.ir import Token
from blockmark.core.nodes import SyntaxNode

logger = logging.getLogger(__name__)


def build_token_stream(
    nodes: List[SyntaxNode],
    text: str,
    indent_width: Optional[int] = None,
) -> Token:
    """Convert top-level syntax nodes and their source into a token stream.

    Args:
        nodes: Top-level expressions produced by the external parser.
        text: The source text the nodes were parsed from.
        indent_width: Optional override of the configured Indent width.

    Returns:
        Head token of the well-nested, doubly-linked stream.
    """
    entries, _root = markup_stage.generate(nodes, text, indent_width=indent_width)
    logger.debug("Merging %d markup entries into the text", len(entries))
    return stream_stage.build(text, entries)
