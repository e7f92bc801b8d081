"""Post-hoc structural checks for converted CSG trees.

The converters already refuse to build nodes with non-positive dimensions;
``validate_csg_tree()`` re-checks those invariants on any tree, including
ones assembled by hand or read back with :mod:`.serialization`. It is never
run automatically.
"""

from __future__ import annotations

from typing import Iterable, Optional, Sequence

from ..errors import (
    CSGError,
    INVALID_CUBE_SIZE,
    INVALID_CYLINDER_HEIGHT,
    INVALID_CYLINDER_RADIUS,
    INVALID_SPHERE_RADIUS,
    MISSING_NODE_ID,
    MISSING_NODE_TYPE,
    Result,
    create_csg_error,
)
from .nodes import (
    Cone,
    CSGTree,
    CSGTreeNode,
    Cube,
    Cylinder,
    SourceLocation,
    Sphere,
    Vector3,
)
from .traversal import iter_csg_nodes


def check_cube_size(
    size: Vector3,
    node_id: Optional[str] = None,
    source_location: Optional[SourceLocation] = None,
) -> Optional[CSGError]:
    """Return an INVALID_CUBE_SIZE error unless every component is positive."""
    if all(component > 0 for component in size):
        return None
    return create_csg_error(
        f"Cube size must be positive in every dimension, got {list(size)}",
        INVALID_CUBE_SIZE,
        source_location=source_location,
        node_id=node_id,
    )


def check_sphere_radius(
    radius: float,
    node_id: Optional[str] = None,
    source_location: Optional[SourceLocation] = None,
) -> Optional[CSGError]:
    if radius > 0:
        return None
    return create_csg_error(
        f"Sphere radius must be positive, got {radius}",
        INVALID_SPHERE_RADIUS,
        source_location=source_location,
        node_id=node_id,
    )


def check_cylinder_dimensions(
    height: float,
    radius1: float,
    radius2: Optional[float] = None,
    node_id: Optional[str] = None,
    source_location: Optional[SourceLocation] = None,
) -> list[CSGError]:
    """Check a cylinder's height and radii.

    Height and the bottom radius must be positive. The top radius may be
    zero, which makes a pointed cone, but not negative.
    """
    errors = []
    if not height > 0:
        errors.append(create_csg_error(
            f"Cylinder height must be positive, got {height}",
            INVALID_CYLINDER_HEIGHT,
            source_location=source_location,
            node_id=node_id,
        ))
    if not radius1 > 0:
        errors.append(create_csg_error(
            f"Cylinder radius must be positive, got {radius1}",
            INVALID_CYLINDER_RADIUS,
            source_location=source_location,
            node_id=node_id,
        ))
    if radius2 is not None and radius2 < 0:
        errors.append(create_csg_error(
            f"Cylinder top radius must not be negative, got {radius2}",
            INVALID_CYLINDER_RADIUS,
            source_location=source_location,
            node_id=node_id,
        ))
    return errors


def _check_node(node: CSGTreeNode) -> list[CSGError]:
    node_id = getattr(node, "id", None) or None
    location = getattr(node, "source_location", None)
    errors: list[Optional[CSGError]] = []

    if not node_id:
        errors.append(create_csg_error(
            "Node is missing an id",
            MISSING_NODE_ID,
            source_location=location,
        ))
    node_type = getattr(node, "type", None)
    if not node_type:
        errors.append(create_csg_error(
            "Node is missing a type",
            MISSING_NODE_TYPE,
            source_location=location,
            node_id=node_id,
        ))

    if isinstance(node, Cube):
        errors.append(check_cube_size(node.size, node_id, location))
    elif isinstance(node, Sphere):
        errors.append(check_sphere_radius(node.radius, node_id, location))
    elif isinstance(node, Cylinder):
        errors.extend(check_cylinder_dimensions(
            node.height, node.radius1, node.radius2, node_id, location,
        ))
    elif isinstance(node, Cone):
        errors.extend(check_cylinder_dimensions(
            node.height, node.radius, None, node_id, location,
        ))
    return [error for error in errors if error is not None]


def validate_csg_tree(tree: CSGTree | Sequence[CSGTreeNode]) -> Result[bool]:
    """Check every node of a tree against the structural invariants.

    All violations are collected rather than stopping at the first one.

    Args:
        tree: A CSGTree or a sequence of root nodes.

    Returns:
        ``Result.ok(True)`` for a valid tree, otherwise a failed Result whose
        ``error`` is a tuple of every CSGError found.

    Example:
        result = validate_csg_tree(processing_result.tree)
        if not result.success:
            for error in result.error:
                print(error)
    """
    roots: Iterable[CSGTreeNode] = tree.root if isinstance(tree, CSGTree) else tree
    errors: list[CSGError] = []
    for node, _depth, _path in iter_csg_nodes(roots):
        errors.extend(_check_node(node))
    if errors:
        return Result.fail(tuple(errors))
    return Result.ok(True)
