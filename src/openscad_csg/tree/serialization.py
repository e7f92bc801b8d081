"""JSON and YAML serialization for CSG trees.

This module converts CSG nodes, node lists, trees and processing results to
plain dictionaries with camelCase keys, and reads them back.

Example:
    from openscad_csg import process_ast_to_csg_tree
    from openscad_csg.tree import csg_to_json, csg_from_json

    result = process_ast_to_csg_tree([{"type": "cube", "size": 10}])
    json_str = csg_to_json(result.tree)
    tree = csg_from_json(json_str)
"""

from __future__ import annotations

import dataclasses
import json
import re
from typing import Any

import yaml

from ..errors import CSGError
from .nodes import (
    NODE_CLASSES,
    Color,
    CSGMaterial,
    CSGProcessingResult,
    CSGTree,
    CSGTreeMetadata,
    CSGTreeNode,
    SourceLocation,
    Transform3D,
)


# Non-node values that are written as dictionaries. Nodes are tagged with
# their "type"; these are recognized by the field they occupy.
_VALUE_CLASSES: dict[str, type] = {
    "material": CSGMaterial,
    "color": Color,
    "sourceLocation": SourceLocation,
    "transform": Transform3D,
    "metadata": CSGTreeMetadata,
    "tree": CSGTree,
}

# Fields holding vectors or vector lists, rebuilt as tuples.
_TUPLE_FIELDS = ("size", "translation", "rotation", "scale", "points", "faces")


def _camel_case(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


def _snake_case(name: str) -> str:
    return re.sub(r'(?<!^)(?=[A-Z])', '_', name).lower()


def _serialize_value(value: Any, include_source_ast: bool) -> Any:
    """Serialize a field value recursively."""
    if value is None:
        return None
    elif isinstance(value, CSGTreeNode):
        return _serialize_node(value, include_source_ast)
    elif dataclasses.is_dataclass(value) and not isinstance(value, type):
        return _serialize_fields(value, include_source_ast)
    elif isinstance(value, (list, tuple)):
        return [_serialize_value(item, include_source_ast) for item in value]
    elif isinstance(value, (str, int, float, bool)):
        return value
    else:
        raise TypeError(f"Unsupported type for serialization: {type(value)}")


def _serialize_fields(obj: Any, include_source_ast: bool) -> dict[str, Any]:
    result: dict[str, Any] = {}
    for field in dataclasses.fields(obj):
        value = getattr(obj, field.name)
        if field.name == "source_ast":
            if include_source_ast:
                result["sourceAst"] = value
            continue
        result[_camel_case(field.name)] = _serialize_value(value, include_source_ast)
    return result


def _serialize_node(node: CSGTreeNode, include_source_ast: bool) -> dict[str, Any]:
    """Serialize a single CSG node to a dictionary."""
    result: dict[str, Any] = {"type": node.type}
    result.update(_serialize_fields(node, include_source_ast))
    return result


def csg_to_dict(
    obj: CSGTreeNode | list[CSGTreeNode] | tuple[CSGTreeNode, ...] | CSGTree | CSGProcessingResult | None,
    include_source_ast: bool = False,
) -> dict[str, Any] | list[dict[str, Any]] | None:
    """Convert CSG data to a Python dictionary (JSON-serializable).

    Args:
        obj: A node, a sequence of nodes, a CSGTree, a CSGProcessingResult,
            or None.
        include_source_ast: If True, include the tree's ``source_ast``
            verbatim under ``sourceAst`` (default: False). The AST must
            itself be JSON-serializable for ``csg_to_json`` to succeed.

    Returns:
        A dictionary representation, a list of dictionaries, or None.

    Example:
        data = csg_to_dict(result.tree)
        data["metadata"]["nodeCount"]
    """
    if obj is None:
        return None
    elif isinstance(obj, (list, tuple)):
        return [_serialize_node(node, include_source_ast) for node in obj]
    elif isinstance(obj, CSGTreeNode):
        return _serialize_node(obj, include_source_ast)
    elif isinstance(obj, (CSGTree, CSGProcessingResult)):
        return _serialize_fields(obj, include_source_ast)
    else:
        raise TypeError(f"Unsupported type for serialization: {type(obj)}")


def csg_to_json(
    obj: CSGTreeNode | list[CSGTreeNode] | CSGTree | CSGProcessingResult | None,
    include_source_ast: bool = False,
    indent: int | None = 2,
) -> str:
    """Serialize CSG data to a JSON string.

    Args:
        obj: A node, a sequence of nodes, a CSGTree, a CSGProcessingResult,
            or None.
        include_source_ast: If True, include the tree's source AST.
        indent: Indentation level for pretty-printing. Use None for compact output.

    Returns:
        A JSON string representation.
    """
    data = csg_to_dict(obj, include_source_ast=include_source_ast)
    return json.dumps(data, indent=indent)


def csg_to_yaml(
    obj: CSGTreeNode | list[CSGTreeNode] | CSGTree | CSGProcessingResult | None,
    include_source_ast: bool = False,
) -> str:
    """Serialize CSG data to a YAML string."""
    data = csg_to_dict(obj, include_source_ast=include_source_ast)
    return yaml.dump(data, default_flow_style=False, sort_keys=False, allow_unicode=True)


def _deserialize_value(key: str, value: Any) -> Any:
    """Deserialize a field value recursively."""
    if value is None:
        return None
    elif isinstance(value, dict) and "type" in value:
        return _deserialize_node(value)
    elif isinstance(value, dict) and key in _VALUE_CLASSES:
        return _deserialize_fields(_VALUE_CLASSES[key], value)
    elif isinstance(value, list):
        if key in ("root", "children"):
            return tuple(_deserialize_node(item) for item in value)
        if key in ("errors", "warnings"):
            return tuple(_deserialize_fields(CSGError, item) for item in value)
        if key in _TUPLE_FIELDS:
            return tuple(tuple(item) if isinstance(item, list) else item for item in value)
        return [_deserialize_value(key, item) for item in value]
    elif isinstance(value, (str, int, float, bool)):
        return value
    else:
        raise TypeError(f"Unsupported type for deserialization: {type(value)}")


def _deserialize_fields(cls: type, data: dict[str, Any]) -> Any:
    if not isinstance(data, dict):
        raise ValueError(f"Expected a mapping for {cls.__name__}, got {type(data).__name__}")
    field_names = {f.name for f in dataclasses.fields(cls)}
    kwargs: dict[str, Any] = {}
    for key, value in data.items():
        name = _snake_case(key)
        if name == "source_ast":
            kwargs[name] = value
        elif name in field_names:
            kwargs[name] = _deserialize_value(key, value)
    return cls(**kwargs)


def _deserialize_node(data: dict[str, Any]) -> CSGTreeNode:
    """Deserialize a single CSG node from a dictionary."""
    if not isinstance(data, dict) or "type" not in data:
        raise ValueError("Missing 'type' field in node data")

    type_name = data["type"]
    if type_name not in NODE_CLASSES:
        raise ValueError(f"Unknown node type: {type_name}")

    fields = {key: value for key, value in data.items() if key != "type"}
    return _deserialize_fields(NODE_CLASSES[type_name], fields)


def csg_from_dict(
    data: dict[str, Any] | list[dict[str, Any]] | None,
) -> CSGTreeNode | tuple[CSGTreeNode, ...] | CSGTree | CSGProcessingResult | None:
    """Reconstruct CSG data from a Python dictionary.

    A dictionary with a ``type`` is a node, one with ``root`` is a tree and
    one with ``success`` is a processing result. A list is a node sequence.

    Raises:
        ValueError: If the data contains an unknown node type or is malformed.

    Example:
        data = csg_to_dict(tree)
        tree_restored = csg_from_dict(data)
    """
    if data is None:
        return None
    elif isinstance(data, list):
        return tuple(_deserialize_node(item) for item in data)
    elif not isinstance(data, dict):
        raise ValueError(f"Cannot deserialize CSG data from {type(data).__name__}")
    elif "type" in data:
        return _deserialize_node(data)
    elif "root" in data:
        return _deserialize_fields(CSGTree, data)
    elif "success" in data:
        return _deserialize_fields(CSGProcessingResult, data)
    else:
        raise ValueError("Unrecognized CSG data: expected a node, a tree or a processing result")


def csg_from_json(json_str: str) -> CSGTreeNode | tuple[CSGTreeNode, ...] | CSGTree | CSGProcessingResult | None:
    """Deserialize CSG data from a JSON string.

    Raises:
        ValueError: If the JSON contains an unknown node type or is malformed.
        json.JSONDecodeError: If the string is not valid JSON.
    """
    data = json.loads(json_str)
    return csg_from_dict(data)


def csg_from_yaml(yaml_str: str) -> CSGTreeNode | tuple[CSGTreeNode, ...] | CSGTree | CSGProcessingResult | None:
    """Deserialize CSG data from a YAML string.

    Raises:
        ValueError: If the YAML contains an unknown node type or is malformed.
    """
    data = yaml.safe_load(yaml_str)
    return csg_from_dict(data)
