"""Converters from single AST nodes to CSG tree nodes.

Primitive converters read their parameters from the AST node and build a
typed node. Operation and transform converters assemble a node around
children the caller has already converted. Every converter returns a
:class:`~openscad_csg.errors.Result` and never raises.

Example:
    from openscad_csg.config import CSGProcessorConfig
    from openscad_csg.converters import convert_cube

    result = convert_cube({"type": "cube", "size": [2, 3, 4]}, CSGProcessorConfig())
    result.data.size  # (2, 3, 4)
"""

from __future__ import annotations

import logging
import random
import string
import time
from typing import Any, Optional, Sequence

from .adapter import expression_kind, is_ast_node, lookup_param, node_type, source_location
from .config import CSGProcessorConfig
from .errors import (
    CSG_OPERATION_ERROR,
    CUBE_CONVERSION_ERROR,
    CYLINDER_CONVERSION_ERROR,
    EMPTY_CSG_OPERATION,
    INVALID_TRANSFORM,
    SPHERE_CONVERSION_ERROR,
    TRANSFORM_CONVERSION_ERROR,
    TRANSFORM_NO_CHILD,
    Result,
    create_csg_error,
)
from .evaluator import extract_boolean, extract_value, extract_vector
from .scraper import DEFAULT_SCRAPER, FragmentScraper
from .tree.nodes import (
    NODE_CLASSES,
    OPERATION_TYPES,
    CSGOperation,
    CSGTreeNode,
    Cube,
    Cylinder,
    Sphere,
    Transform,
    Transform3D,
    Vector3,
)
from .tree.validation import check_cube_size, check_cylinder_dimensions, check_sphere_radius


logger = logging.getLogger(__name__)

DEFAULT_SEGMENTS = 32
TRANSFORM_TYPES = ("translate", "rotate", "scale")

_ID_ALPHABET = string.digits + string.ascii_lowercase


def generate_node_id() -> str:
    """Return a fresh node id of the form ``csg_<millis>_<9 base-36 chars>``.

    Ids are unique with high probability, not guaranteed.
    """
    millis = int(time.time() * 1000)
    suffix = "".join(random.choices(_ID_ALPHABET, k=9))
    return f"csg_{millis}_{suffix}"


def _scraper(config: CSGProcessorConfig) -> Optional[FragmentScraper]:
    return DEFAULT_SCRAPER if config.enable_text_recovery else None


def _number(node: Any, names: Sequence[str], scraper, position: Optional[int] = None) -> Optional[float]:
    raw = lookup_param(node, *names, position=position)
    if raw is None:
        return None
    return extract_value(raw, scraper=scraper)


def _half(value: Optional[float]) -> Optional[float]:
    return None if value is None else value / 2


def _segments(node: Any, scraper) -> int:
    # $fn=0 means "derive from $fa/$fs" in OpenSCAD; neither is modeled.
    value = _number(node, ("fn", "$fn", "segments"), scraper)
    if value is None or value <= 0:
        return DEFAULT_SEGMENTS
    return int(value)


def _center(node: Any, scraper, position: Optional[int] = None) -> bool:
    raw = lookup_param(node, "center", position=position)
    if raw is None:
        return False
    value = extract_boolean(raw, scraper=scraper)
    return bool(value)


def convert_cube(node: Any, config: CSGProcessorConfig) -> Result[Cube]:
    """Convert a ``cube`` AST node.

    ``size`` may be a vector or a scalar edge length and defaults to
    ``(1, 1, 1)``; ``center`` defaults to False. Fails with
    INVALID_CUBE_SIZE if any edge is not positive.
    """
    location = source_location(node)
    try:
        scraper = _scraper(config)
        size: Optional[Vector3] = None
        raw_size = lookup_param(node, "size", position=0)
        if raw_size is not None:
            size = extract_vector(raw_size, scraper=scraper)
        if size is None:
            size = (1.0, 1.0, 1.0)

        node_id = generate_node_id()
        error = check_cube_size(size, node_id, location)
        if error is not None:
            return Result.fail(error)

        return Result.ok(Cube(
            id=node_id,
            size=size,
            center=_center(node, scraper, position=1),
            material=config.default_material,
            source_location=location,
        ))
    except Exception as e:
        logger.debug("Cube conversion failed", exc_info=True)
        return Result.fail(create_csg_error(
            f"Failed to convert cube: {e}",
            CUBE_CONVERSION_ERROR,
            source_location=location,
        ))


def convert_sphere(node: Any, config: CSGProcessorConfig) -> Result[Sphere]:
    """Convert a ``sphere`` AST node.

    The radius comes from ``radius`` or ``r``, or half of ``d`` /
    ``diameter``, and defaults to 1. Segments come from ``$fn`` and default
    to 32.
    """
    location = source_location(node)
    try:
        scraper = _scraper(config)
        radius = _number(node, ("radius", "r"), scraper, position=0)
        if radius is None:
            radius = _half(_number(node, ("d", "diameter"), scraper))
        if radius is None:
            radius = 1.0

        node_id = generate_node_id()
        error = check_sphere_radius(radius, node_id, location)
        if error is not None:
            return Result.fail(error)

        return Result.ok(Sphere(
            id=node_id,
            radius=radius,
            segments=_segments(node, scraper),
            material=config.default_material,
            source_location=location,
        ))
    except Exception as e:
        logger.debug("Sphere conversion failed", exc_info=True)
        return Result.fail(create_csg_error(
            f"Failed to convert sphere: {e}",
            SPHERE_CONVERSION_ERROR,
            source_location=location,
        ))


def convert_cylinder(node: Any, config: CSGProcessorConfig) -> Result[Cylinder]:
    """Convert a ``cylinder`` AST node.

    Positional arguments follow OpenSCAD's ``cylinder(h, r1, r2, center)``.

    - height: ``height`` or ``h``, default 1.
    - radius1: ``radius``, ``r`` or ``r1``, else half of ``d`` or ``d1``,
      default 1.
    - radius2: ``r2``, else half of ``d2``, default radius1. Zero makes a
      pointed cone.
    """
    location = source_location(node)
    try:
        scraper = _scraper(config)
        height = _number(node, ("height", "h"), scraper, position=0)
        if height is None:
            height = 1.0

        radius1 = _number(node, ("radius", "r", "r1"), scraper, position=1)
        if radius1 is None:
            radius1 = _half(_number(node, ("d", "diameter", "d1"), scraper))
        if radius1 is None:
            radius1 = 1.0

        radius2 = _number(node, ("r2",), scraper, position=2)
        if radius2 is None:
            radius2 = _half(_number(node, ("d2",), scraper))
        if radius2 is None:
            radius2 = radius1

        node_id = generate_node_id()
        errors = check_cylinder_dimensions(height, radius1, radius2, node_id, location)
        if errors:
            return Result.fail(errors[0])

        return Result.ok(Cylinder(
            id=node_id,
            height=height,
            radius1=radius1,
            radius2=radius2,
            segments=_segments(node, scraper),
            center=_center(node, scraper, position=3),
            material=config.default_material,
            source_location=location,
        ))
    except Exception as e:
        logger.debug("Cylinder conversion failed", exc_info=True)
        return Result.fail(create_csg_error(
            f"Failed to convert cylinder: {e}",
            CYLINDER_CONVERSION_ERROR,
            source_location=location,
        ))


def convert_csg_operation(
    node: Any,
    children: Sequence[CSGTreeNode],
    config: CSGProcessorConfig,
) -> Result[CSGOperation]:
    """Assemble a union, difference or intersection around converted children.

    Fails with EMPTY_CSG_OPERATION when there are no children.
    """
    location = source_location(node)
    kind = node_type(node)
    try:
        if kind not in OPERATION_TYPES:
            raise ValueError(f"{kind!r} is not a CSG operation")
        if not children:
            return Result.fail(create_csg_error(
                f"CSG operation {kind} has no children",
                EMPTY_CSG_OPERATION,
                source_location=location,
            ))
        return Result.ok(NODE_CLASSES[kind](
            id=generate_node_id(),
            children=tuple(children),
            material=config.default_material,
            source_location=location,
        ))
    except Exception as e:
        logger.debug("CSG operation conversion failed", exc_info=True)
        return Result.fail(create_csg_error(
            f"Failed to convert CSG operation: {e}",
            CSG_OPERATION_ERROR,
            source_location=location,
        ))


def _is_vector_like(raw: Any) -> bool:
    if isinstance(raw, (list, tuple)):
        return True
    return is_ast_node(raw) and expression_kind(raw) == "vector_expression"


def _rotation(node: Any, scraper) -> Optional[Vector3]:
    axis_raw = lookup_param(node, "vector", "v")
    angle_raw = lookup_param(node, "a", position=0)

    if angle_raw is not None and _is_vector_like(angle_raw):
        return extract_vector(angle_raw, scraper=scraper)
    if angle_raw is None:
        if axis_raw is None:
            return None
        return extract_vector(axis_raw, scraper=scraper)

    angle = extract_value(angle_raw, scraper=scraper)
    if angle is None:
        return None
    if axis_raw is None:
        return (0, 0, angle)
    # Axis-angle form. Exact for unit axes along x, y or z.
    axis = extract_vector(axis_raw, scraper=scraper)
    if axis is None:
        return (0, 0, angle)
    return (angle * axis[0], angle * axis[1], angle * axis[2])


def _transform_data(node: Any, kind: Optional[str], scraper) -> Transform3D:
    if kind == "translate":
        raw = lookup_param(node, "vector", "v", position=0)
        if raw is not None:
            return Transform3D(translation=extract_vector(raw, scraper=scraper))
    elif kind == "rotate":
        return Transform3D(rotation=_rotation(node, scraper))
    elif kind == "scale":
        raw = lookup_param(node, "vector", "v", position=0)
        if raw is not None:
            scale = extract_vector(raw, scraper=scraper, pad=1)
            return Transform3D(scale=scale if scale is not None else (1.0, 1.0, 1.0))
    return Transform3D()


def convert_transform(
    node: Any,
    child: Optional[CSGTreeNode],
    config: CSGProcessorConfig,
) -> Result[Transform]:
    """Wrap a converted child in a translate, rotate or scale.

    Rotation angles are kept in the units of the source. ``rotate(a=n)``
    without an axis rotates about z.

    Fails with TRANSFORM_NO_CHILD when child is None and with
    INVALID_TRANSFORM when no vector can be extracted.
    """
    location = source_location(node)
    kind = node_type(node)
    try:
        if child is None:
            return Result.fail(create_csg_error(
                f"Transform {kind} requires a child node",
                TRANSFORM_NO_CHILD,
                source_location=location,
            ))

        transform = _transform_data(node, kind, _scraper(config))
        if transform.is_empty():
            return Result.fail(create_csg_error(
                f"Could not extract transform data from {kind} node",
                INVALID_TRANSFORM,
                source_location=location,
            ))

        return Result.ok(Transform(
            id=generate_node_id(),
            child=child,
            transform=transform,
            material=config.default_material,
            source_location=location,
        ))
    except Exception as e:
        logger.debug("Transform conversion failed", exc_info=True)
        return Result.fail(create_csg_error(
            f"Failed to convert transform: {e}",
            TRANSFORM_CONVERSION_ERROR,
            source_location=location,
        ))
