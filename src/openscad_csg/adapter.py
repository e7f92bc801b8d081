"""Uniform access to loosely typed AST nodes.

Upstream parsers expose either a normalized node shape, where parameters are
plain fields (``{"type": "cylinder", "h": 10, "r": 2}``), or a raw
parameter-list shape (``{"type": "cylinder", "parameters": [{"name": "h",
"value": ...}]}``). Nodes may be mappings or attribute objects. Every alias is
resolved here so the evaluator and converters never probe node shapes
themselves.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Optional, Sequence

from .tree.nodes import SourceLocation


# Bare discriminants used by parsers in their raw shape, mapped to the
# canonical expression kinds the evaluator dispatches on.
_EXPRESSION_KINDS = {
    "literal": "literal",
    "number": "literal",
    "integer": "literal",
    "float": "literal",
    "string": "literal",
    "boolean": "literal",
    "true": "literal",
    "false": "literal",
    "identifier": "identifier",
    "variable": "identifier",
    "identifier_expression": "identifier",
    "special_variable": "special_variable",
    "binary_expression": "binary_expression",
    "binary": "binary_expression",
    "unary_expression": "unary_expression",
    "unary": "unary_expression",
    "conditional_expression": "conditional_expression",
    "conditional": "conditional_expression",
    "ternary": "conditional_expression",
    "parenthesized_expression": "parenthesized_expression",
    "vector_expression": "vector_expression",
    "vector": "vector_expression",
    "array": "vector_expression",
    "list": "vector_expression",
    "accessor": "accessor",
    "accessor_expression": "accessor",
    "member_expression": "accessor",
    "index_expression": "accessor",
    "function_call": "function_call",
    "call_expression": "function_call",
    "error": "error",
    "ERROR": "error",
}

_PARAMETER_CONTAINERS = ("parameters", "arguments", "args")


def get_field(node: Any, name: str) -> Any:
    """Read a field from a mapping or attribute object, None when absent."""
    if node is None:
        return None
    if isinstance(node, Mapping):
        return node.get(name)
    return getattr(node, name, None)


def first_field(node: Any, *names: str) -> Any:
    """Return the first of the named fields that is present and not None."""
    for name in names:
        value = get_field(node, name)
        if value is not None:
            return value
    return None


def is_ast_node(value: Any) -> bool:
    """Return True for values shaped like an AST node rather than a raw value."""
    if value is None or isinstance(value, (str, bytes, int, float, bool, list, tuple)):
        return False
    return True


def node_type(node: Any) -> Optional[str]:
    value = get_field(node, "type")
    return value if isinstance(value, str) else None


def expression_kind(node: Any) -> Optional[str]:
    """Return the canonical expression kind of a node.

    Expression nodes are tagged ``type="expression"`` with a secondary
    ``expressionType``; raw-shape nodes carry the kind in ``type`` directly.
    A typeless mapping with a ``value`` is treated as a literal.
    """
    kind = node_type(node)
    if kind == "expression":
        kind = first_field(node, "expressionType", "expression_type")
    if kind is None:
        if get_field(node, "value") is not None:
            return "literal"
        return None
    return _EXPRESSION_KINDS.get(kind, kind)


def raw_text(node: Any) -> Optional[str]:
    """Return the source slice a node was parsed from, if it kept one."""
    text = get_field(node, "text")
    if isinstance(text, str):
        return text
    text = get_field(get_field(node, "location"), "text")
    return text if isinstance(text, str) else None


def source_location(node: Any) -> Optional[SourceLocation]:
    """Build a SourceLocation from ``location.start``; None when unlocated."""
    location = get_field(node, "location")
    if location is None:
        return None
    start = get_field(location, "start")
    return SourceLocation(
        line=get_field(start, "line") or 0,
        column=get_field(start, "column") or 0,
    )


def children(node: Any) -> Sequence[Any]:
    value = get_field(node, "children")
    if isinstance(value, (list, tuple)):
        return value
    return ()


def _parameter_container(node: Any) -> Any:
    return first_field(node, *_PARAMETER_CONTAINERS)


def _parameter_name(entry: Any) -> Optional[str]:
    name = get_field(entry, "name")
    if name is None:
        return None
    if isinstance(name, str):
        return name
    # Identifier nodes wrap the name one level down.
    return first_field(name, "name", "text")


def lookup_param(node: Any, *names: str, position: Optional[int] = None) -> Any:
    """Find a module parameter by any of its aliases.

    Fields on the node itself are tried first, then the node's parameter
    container, which may be a mapping (``parameters.size``) or a list of
    ``{name, value}`` entries. When ``position`` is given and no named
    parameter matched, the positional argument at that index is returned.

    Args:
        node: The AST node of a module instantiation.
        names: Parameter aliases in order of preference.
        position: Index of the matching positional argument, if any.

    Returns:
        The raw parameter value (usually an expression node), or None.
    """
    value = first_field(node, *names)
    if value is not None:
        return value

    container = _parameter_container(node)
    if container is None:
        return None
    if isinstance(container, Mapping):
        return first_field(container, *names)
    if not isinstance(container, (list, tuple)):
        return None

    named = {}
    positional = []
    for entry in container:
        if not is_ast_node(entry) or node_type(entry) == "expression":
            positional.append(entry)
            continue
        name = _parameter_name(entry)
        entry_value = first_field(entry, "value", "expr")
        if entry_value is None:
            # A raw-shape expression such as {"type": "vector", ...}.
            positional.append(entry)
        elif name is None:
            positional.append(entry_value)
        else:
            named.setdefault(name, entry_value)
    for name in names:
        if named.get(name) is not None:
            return named[name]
    if position is not None and position < len(positional):
        return positional[position]
    return None
