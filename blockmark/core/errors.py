"""Exception types raised by the markup pipeline.

WHY: Every failure in the pipeline is fatal for the current call — a
partial token stream would render broken nesting in the editor. Callers
(CLI, tests, embedding applications) need typed exceptions to tell a
tree the converter cannot handle apart from an internal defect.

HOW: A single BlockmarkError base with one subclass per failure kind.
The core raises them and never catches them; only the CLI translates
them into an exit status.

RULES:
- Never raised for recoverable conditions — there are none
- Messages name the node kind, position, or boundary id involved
"""

from __future__ import annotations


class BlockmarkError(Exception):
    """Base class for all pipeline errors."""


class UnsupportedNodeKindError(BlockmarkError):
    """Raised when the tree holds a node kind the generator has no case for.

    WHY: Silently skipping a subtree would drop its markup and corrupt
    the nesting of everything around it.

    HOW: Raised by the markup dispatch table and by the JSON tree loader.

    RULES:
    - kind is the offending node's kind name
    """

    def __init__(self, kind: str) -> None:
        self.kind = kind
        super().__init__("Unsupported syntax node kind: {}".format(kind))


class EmptyNodeError(BlockmarkError):
    """Raised when bounds are requested for a node with no required children.

    WHY: A Block's end is its last statement's end and an object literal's
    indent spans its first to last property. With no children there is
    nothing to measure.

    RULES:
    - kind is the node kind; field is the empty child list's name
    """

    def __init__(self, kind: str, field: str) -> None:
        self.kind = kind
        self.field = field
        super().__init__("{} node has no {} to take bounds from".format(kind, field))


class MalformedMarkupError(BlockmarkError):
    """Raised when markup cannot be merged into a well-nested stream.

    WHY: Unmatched or crossing markers mean the generator produced bad
    output. Patching it up would hide the defect and mis-render blocks.

    HOW: Raised by the stream builder's pre-flight checks and parse stack,
    and by check_well_nested().
    """
