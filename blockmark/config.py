"""Configuration constants, palette, operator precedences, and .env loading.

WHY: Centralizes all configurable values so they are easy to find,
update, and override. The color palette and the operator precedence
table are plain data — not buried in the tree walker — so both humans
and coding agents can modify them confidently.

HOW: python-dotenv loads the .env file on import. Constants are defined
as module-level dicts and strings. load_indent_width() provides a clear
error when the environment holds an unusable value.

RULES:
- PALETTE is a static lookup; the core reads it, never computes colors
- Unknown operators have precedence 0
- Indent width defaults to 2 and must be a positive integer
- All defaults can be overridden via environment variables
"""

from __future__ import annotations

import enum
import os

from dotenv import load_dotenv

# Load .env from the project root (where the script is run from)
load_dotenv()


class Color(str, enum.Enum):
    """Boundary color tags understood by the renderer.

    Inherits from str so values serialize cleanly to JSON.
    """

    COMMAND = "COMMAND"
    CONTROL = "CONTROL"
    VALUE = "VALUE"
    RETURN = "RETURN"


# ---------------------------------------------------------------------------
# Palette: color tag → hex
# ---------------------------------------------------------------------------

PALETTE: dict[Color, str] = {
    Color.COMMAND: "#268bd2",
    Color.CONTROL: "#daa520",
    Color.VALUE: "#26cf3c",
    Color.RETURN: "#dc322f",
}

# ---------------------------------------------------------------------------
# Operator precedence (higher binds tighter)
# ---------------------------------------------------------------------------

OPERATOR_PRECEDENCES: dict[str, int] = {
    "||": 1,
    "&&": 2,
    "===": 3,
    "!==": 3,
    ">": 3,
    "<": 3,
    ">=": 3,
    "<=": 3,
    "+": 4,
    "-": 4,
    "*": 5,
    "/": 5,
    "÷": 5,
    "%": 6,
}

UNKNOWN_OPERATOR_PRECEDENCE = 0


def operator_precedence(operator: str) -> int:
    """Look up an operator's precedence, falling back to 0 when unknown."""
    return OPERATOR_PRECEDENCES.get(operator, UNKNOWN_OPERATOR_PRECEDENCE)


# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------

TREE_SUFFIX = ".tree.json"
"""Companion syntax-tree file suffix: ``program.coffee`` → ``program.tree.json``."""

LOG_LEVEL = os.getenv("BLOCKMARK_LOG_LEVEL", "WARNING").upper()


def load_indent_width() -> int:
    """Load the Indent boundary width from the environment.

    WHY: Editors differ in how far they indent block bodies. The width is
    carried on every Indent boundary so the renderer does not guess.

    HOW: Reads BLOCKMARK_INDENT_WIDTH from os.environ (populated by
    python-dotenv), defaulting to 2.

    RULES:
    - Raises ValueError if the value is not a positive integer
    """
    raw = os.getenv("BLOCKMARK_INDENT_WIDTH", "2").strip()
    try:
        width = int(raw)
    except ValueError:
        raise ValueError(
            "BLOCKMARK_INDENT_WIDTH must be an integer, got {!r}".format(raw)
        ) from None
    if width <= 0:
        raise ValueError(
            "BLOCKMARK_INDENT_WIDTH must be positive, got {}".format(width)
        )
    return width


DEFAULT_INDENT_WIDTH = load_indent_width()
