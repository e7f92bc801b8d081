"""Conversion of whole OpenSCAD ASTs into CSG trees.

The builder walks the AST recursively and degrades instead of aborting: a
node that cannot be converted drops only its own subtree, and every problem
is reported as a :class:`~openscad_csg.errors.CSGError`.

Example:
    from openscad_csg import process_ast_to_csg_tree

    result = process_ast_to_csg_tree([
        {"type": "union", "children": [
            {"type": "cube", "size": 1},
            {"type": "sphere", "r": 1},
        ]},
    ])
    result.success                         # True
    result.tree.metadata.primitive_count   # 2
"""

from __future__ import annotations

import logging
import time
from collections.abc import Mapping
from typing import Any, Optional, Sequence

from .adapter import children as ast_children, node_type, source_location
from .config import CSGProcessorConfig, coerce_config
from .converters import (
    TRANSFORM_TYPES,
    convert_csg_operation,
    convert_cube,
    convert_cylinder,
    convert_sphere,
    convert_transform,
)
from .errors import (
    CONVERSION_ERROR,
    ERROR,
    MAX_DEPTH_EXCEEDED,
    PROCESSING_ERROR,
    UNSUPPORTED_NODE_TYPE,
    WARNING,
    CSGError,
    create_csg_error,
)
from .tree.nodes import (
    OPERATION_TYPES,
    CSGOperation,
    CSGPrimitive,
    CSGProcessingResult,
    CSGTree,
    CSGTreeMetadata,
    CSGTreeNode,
)
from .tree.traversal import iter_csg_nodes


logger = logging.getLogger(__name__)

_PRIMITIVE_CONVERTERS = {
    "cube": convert_cube,
    "sphere": convert_sphere,
    "cylinder": convert_cylinder,
}


def convert_ast_node(
    node: Any,
    config: CSGProcessorConfig,
    depth: int = 0,
) -> tuple[Optional[CSGTreeNode], list[CSGError]]:
    """Convert one AST node and its subtree.

    Children of an operation that fail to convert are left out, so an
    operation survives as long as one child does. A transform converts only
    its first child.

    Args:
        node: The AST node.
        config: Conversion options.
        depth: Nesting depth of node, roots being at 0.

    Returns:
        A ``(csg_node, errors)`` pair. csg_node is None when nothing was
        produced; errors holds every diagnostic from the subtree, including
        warnings for skipped node types.
    """
    location = source_location(node)
    if depth > config.max_depth:
        return None, [create_csg_error(
            f"Maximum depth {config.max_depth} exceeded",
            MAX_DEPTH_EXCEEDED,
            source_location=location,
        )]

    kind = node_type(node)
    errors: list[CSGError] = []
    try:
        if kind in _PRIMITIVE_CONVERTERS:
            result = _PRIMITIVE_CONVERTERS[kind](node, config)
            if not result.success:
                return None, [result.error]
            return result.data, []

        elif kind in OPERATION_TYPES:
            converted = []
            for child_node in ast_children(node):
                child, child_errors = convert_ast_node(child_node, config, depth + 1)
                errors.extend(child_errors)
                if child is not None:
                    converted.append(child)
            result = convert_csg_operation(node, converted, config)

        elif kind in TRANSFORM_TYPES:
            child = None
            child_nodes = ast_children(node)
            if child_nodes:
                if len(child_nodes) > 1:
                    logger.debug(
                        "%s has %d children, only the first is converted",
                        kind, len(child_nodes),
                    )
                child, child_errors = convert_ast_node(child_nodes[0], config, depth + 1)
                errors.extend(child_errors)
            result = convert_transform(node, child, config)

        else:
            return None, [create_csg_error(
                f"Unsupported AST node type: {kind}",
                UNSUPPORTED_NODE_TYPE,
                severity=WARNING,
                source_location=location,
            )]

        if not result.success:
            errors.append(result.error)
            return None, errors
        return result.data, errors

    except Exception as e:
        logger.debug("Conversion of %s node failed", kind, exc_info=True)
        errors.append(create_csg_error(
            f"Failed to convert {kind} node: {e}",
            CONVERSION_ERROR,
            source_location=location,
        ))
        return None, errors


def compute_metadata(roots: Sequence[CSGTreeNode]) -> CSGTreeMetadata:
    """Count nodes, primitives and operations and find the deepest level."""
    node_count = primitive_count = operation_count = max_depth = 0
    for node, depth, _path in iter_csg_nodes(roots):
        node_count += 1
        max_depth = max(max_depth, depth)
        if isinstance(node, CSGPrimitive):
            primitive_count += 1
        elif isinstance(node, CSGOperation):
            operation_count += 1
    return CSGTreeMetadata(
        node_count=node_count,
        primitive_count=primitive_count,
        operation_count=operation_count,
        max_depth=max_depth,
    )


def _elapsed_ms(start: float) -> float:
    return (time.perf_counter() - start) * 1000


def process_ast_to_csg_tree(
    ast: Optional[Sequence[Any]],
    config: CSGProcessorConfig | Mapping[str, Any] | None = None,
) -> CSGProcessingResult:
    """Convert a list of top-level AST nodes into a CSG tree.

    Each root is converted independently, so one failing root never blocks
    its siblings. The run succeeds when no error-severity diagnostic was
    recorded; warnings never fail it. An empty or None AST is a successful
    no-op.

    Args:
        ast: Top-level AST nodes as produced by the upstream parser.
        config: A CSGProcessorConfig, a mapping of option overrides, or None
            for the defaults.

    Returns:
        A CSGProcessingResult. Only an unanticipated fault yields a result
        without a tree, carrying a single PROCESSING_ERROR.
    """
    start = time.perf_counter()
    try:
        config = coerce_config(config)
        if config.enable_logging:
            logger.info("Converting %d AST root nodes", len(ast or ()))

        roots: list[CSGTreeNode] = []
        diagnostics: list[CSGError] = []
        for ast_node in ast or ():
            node, node_errors = convert_ast_node(ast_node, config, 0)
            diagnostics.extend(node_errors)
            if node is not None:
                roots.append(node)

        metadata = compute_metadata(roots)
        processing_time = _elapsed_ms(start)
        tree = CSGTree(
            root=tuple(roots),
            metadata=metadata,
            processing_time=processing_time,
            source_ast=ast,
        )
        errors = tuple(d for d in diagnostics if d.severity == ERROR)
        warnings = tuple(d for d in diagnostics if d.severity != ERROR)

        if config.enable_logging:
            logger.info(
                "CSG conversion finished in %.2f ms: %d nodes, %d primitives, "
                "%d operations, %d errors, %d warnings",
                processing_time, metadata.node_count, metadata.primitive_count,
                metadata.operation_count, len(errors), len(warnings),
            )

        return CSGProcessingResult(
            success=not errors,
            tree=tree,
            errors=errors,
            warnings=warnings,
            processing_time=processing_time,
        )
    except Exception as e:
        logger.exception("CSG conversion failed")
        return CSGProcessingResult(
            success=False,
            errors=(create_csg_error(f"CSG processing failed: {e}", PROCESSING_ERROR),),
            processing_time=_elapsed_ms(start),
        )
