"""Core markup and token stream modules.

WHY: The core package contains the stable heart of the converter — the
tree and token dataclasses plus the three pipeline stages. These are
consumed by the CLI and all formatters and must remain backward-compatible.

HOW: nodes.py defines the syntax tree, ir.py the boundaries and tokens,
bounds.py resolves text positions, markup.py walks the tree into markup
entries, stream.py merges markup with text, pipeline.py chains them.

RULES:
- IR dataclasses are the contract — change with care
- Stages only call forward: tree → markup → tokens
- No module-level mutable state; each call owns its own context
"""
