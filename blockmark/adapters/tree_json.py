"""Adapter: JSON-serialized syntax tree to SyntaxNode dataclasses.

WHY: The parser lives outside this package (typically CoffeeScript's
``CoffeeScript.nodes()`` run under Node, with the result dumped as JSON).
The core only understands the typed SyntaxNode union, so something has
to turn the parser's plain dicts into it and reject what it cannot map.

HOW: Each JSON node is an object with a ``type``, a location object, and
kind-specific fields. ``type`` is resolved through KIND_ALIASES (the
CoffeeScript class names) to a SyntaxNode class; _FIELDS lists, per kind,
which JSON keys feed which dataclass field and what shape the value has.
Children are loaded recursively.

RULES:
- type may be the SyntaxNode class name or its CoffeeScript alias
- Location comes from ``locationData`` (CoffeeScript) or ``location``
  and needs first_line, first_column, last_line, last_column
- Unknown types raise UnsupportedNodeKindError
- Missing or mistyped fields raise ValueError naming the node and field
- Literal values are coerced to str (numbers arrive as JSON numbers)
- A document is a list of top-level nodes, a Block node, or an object
  with an ``expressions`` list
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Tuple, Union

from blockmark.core.errors import UnsupportedNodeKindError
from blockmark.core.nodes import NODE_KINDS, Block, Location, SyntaxNode

KIND_ALIASES: Dict[str, str] = {
    "Op": "Operator",
    "Code": "FunctionDef",
    "Param": "Parameter",
    "Assign": "Assignment",
    "For": "ForLoop",
    "If": "Conditional",
    "Arr": "ArrayLiteral",
    "Parens": "Parenthesized",
    "Obj": "ObjectLiteral",
}

_CLASSES: Dict[str, type] = {cls.__name__: cls for cls in NODE_KINDS}

# Value shapes
_NODE = "node"
_OPTIONAL = "optional"
_LIST = "list"
_STR = "str"
_BLOCK = "block"
_OPTIONAL_BLOCK = "optional_block"

# kind → [(dataclass field, accepted JSON keys, shape)]
_FIELDS: Dict[str, List[Tuple[str, Tuple[str, ...], str]]] = {
    "Block": [("expressions", ("expressions",), _LIST)],
    "Operator": [
        ("operator", ("operator",), _STR),
        ("first", ("first",), _NODE),
        ("second", ("second",), _OPTIONAL),
    ],
    "Value": [("base", ("base",), _NODE)],
    "Literal": [("value", ("value",), _STR)],
    "Call": [("args", ("args",), _LIST)],
    "FunctionDef": [
        ("params", ("params",), _LIST),
        ("body", ("body",), _BLOCK),
    ],
    "Parameter": [("name", ("name",), _NODE)],
    "Assignment": [
        ("target", ("target", "variable"), _NODE),
        ("value", ("value",), _NODE),
    ],
    "ForLoop": [
        ("body", ("body",), _NODE),
        ("index", ("index",), _OPTIONAL),
        ("source", ("source",), _OPTIONAL),
        ("name", ("name",), _OPTIONAL),
        ("range_from", ("range_from", "from"), _OPTIONAL),
    ],
    "Range": [
        ("range_from", ("range_from", "from"), _NODE),
        ("range_to", ("range_to", "to"), _NODE),
    ],
    "Conditional": [
        ("condition", ("condition",), _NODE),
        ("body", ("body",), _NODE),
        ("else_branch", ("else_branch", "elseBody"), _OPTIONAL),
    ],
    "ArrayLiteral": [("elements", ("elements", "objects"), _LIST)],
    "Return": [("expression", ("expression",), _OPTIONAL)],
    "Parenthesized": [("body", ("body",), _OPTIONAL_BLOCK)],
    "ObjectLiteral": [("properties", ("properties",), _LIST)],
}

_LOCATION_KEYS = ("first_line", "first_column", "last_line", "last_column")


def _lookup(data: Dict[str, Any], keys: Tuple[str, ...]) -> Any:
    for key in keys:
        if data.get(key) is not None:
            return data[key]
    return None


def _load_location(data: Dict[str, Any], kind: str) -> Location:
    raw = _lookup(data, ("locationData", "location"))
    if not isinstance(raw, dict):
        raise ValueError("{} node has no location".format(kind))
    values = []
    for key in _LOCATION_KEYS:
        value = raw.get(key)
        if not isinstance(value, int) or isinstance(value, bool):
            raise ValueError("{} node location needs integer {!r}".format(kind, key))
        values.append(value)
    return Location(*values)


def _load_value(value: Any, shape: str, kind: str, field_name: str) -> Any:
    if shape == _STR:
        if value is None or isinstance(value, (dict, list)):
            raise ValueError("{} node needs a scalar {!r}".format(kind, field_name))
        return str(value)

    if shape == _LIST:
        if value is None:
            return []
        if not isinstance(value, list):
            raise ValueError("{} node field {!r} must be a list".format(kind, field_name))
        return [load_node(item) for item in value]

    if value is None:
        if shape in (_OPTIONAL, _OPTIONAL_BLOCK):
            return None
        raise ValueError("{} node missing field {!r}".format(kind, field_name))

    node = load_node(value)
    if shape in (_BLOCK, _OPTIONAL_BLOCK) and not isinstance(node, Block):
        raise ValueError(
            "{} node field {!r} must be a Block, got {}".format(kind, field_name, node.kind)
        )
    return node


def load_node(data: Any) -> SyntaxNode:
    """Load one JSON node (and its subtree) into a SyntaxNode.

    Raises:
        UnsupportedNodeKindError: The node's type maps to no SyntaxNode kind.
        ValueError: The node is not an object, or a field is missing or mistyped.
    """
    if not isinstance(data, dict):
        raise ValueError("Syntax node must be a JSON object, got {}".format(type(data).__name__))
    raw_type = data.get("type")
    if not isinstance(raw_type, str):
        raise ValueError("Syntax node has no 'type'")

    kind = KIND_ALIASES.get(raw_type, raw_type)
    cls = _CLASSES.get(kind)
    if cls is None:
        raise UnsupportedNodeKindError(raw_type)

    kwargs: Dict[str, Any] = {"location": _load_location(data, kind)}
    for field_name, keys, shape in _FIELDS[kind]:
        kwargs[field_name] = _load_value(_lookup(data, keys), shape, kind, field_name)
    return cls(**kwargs)


def load_tree(document: Union[List[Any], Dict[str, Any]]) -> List[SyntaxNode]:
    """Load the top-level nodes of a parsed program.

    WHY: Parsers dump either the root Block or just its expressions; the
    core wants the expression list either way.

    RULES:
    - A list is read as the top-level nodes
    - A Block node (type "Block") yields its expressions
    - Any other object with an ``expressions`` list yields those
    - Any other single node is returned as a one-element list
    """
    if isinstance(document, list):
        return [load_node(item) for item in document]
    if not isinstance(document, dict):
        raise ValueError("Tree document must be a JSON list or object")
    if document.get("type") is None and isinstance(document.get("expressions"), list):
        return [load_node(item) for item in document["expressions"]]
    node = load_node(document)
    if isinstance(node, Block):
        return list(node.expressions)
    return [node]


def load_tree_file(path: Union[str, Path]) -> List[SyntaxNode]:
    """Read a JSON tree file from disk and load its top-level nodes."""
    with open(path, encoding="utf-8") as f:
        document = json.load(f)
    return load_tree(document)
