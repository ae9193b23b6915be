"""Adapters between external parser output and the core syntax tree.

WHY: Parsers run outside this package and hand over their trees in
their own shape. Adapters keep that translation out of the core.

RULES:
- Adapters produce SyntaxNode dataclasses and nothing else
- Unknown node types are rejected, never skipped
"""

from blockmark.adapters.tree_json import load_node, load_tree, load_tree_file

__all__ = ["load_node", "load_tree", "load_tree_file"]
