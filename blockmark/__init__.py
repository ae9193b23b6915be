"""blockmark — syntax tree to block-editor token stream converter.

WHY: Block-based code editors render source as nested, draggable blocks
with editable sockets and indented bodies. A language parser only yields
a syntax tree, and the editor needs the original text with those regions
marked inline. This package bridges the two.

HOW: Three-stage pipeline — resolve node bounds, generate paired markup
from the tree, then merge the markup with the raw text into one
doubly-linked token stream. Each stage is independently testable.

RULES:
- The syntax tree and the source text are borrowed, never mutated
- Every call recomputes the whole stream; no state survives between calls
- The token stream is the stable contract with the renderer and formatters
"""

__version__ = "0.1.0"
