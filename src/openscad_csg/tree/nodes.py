from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, ClassVar, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from ..errors import CSGError


Vector3 = tuple[float, float, float]

PRIMITIVE_TYPES = ("cube", "sphere", "cylinder", "cone", "polyhedron")
OPERATION_TYPES = ("union", "difference", "intersection")


def _num(value: float) -> str:
    return f"{value:g}"


def _vec(vector: Vector3) -> str:
    return f"[{', '.join(_num(v) for v in vector)}]"


def _bool(value: bool) -> str:
    return "true" if value else "false"


# --- Supporting value types. ---

@dataclass(frozen=True)
class SourceLocation:
    """A line/column position in the OpenSCAD source a CSG node came from.

    Attributes:
        line: Line number as reported by the upstream parser.
        column: Column number as reported by the upstream parser.
    """
    line: int = 0
    column: int = 0

    def __str__(self):
        return f"{self.line}:{self.column}"


@dataclass(frozen=True)
class Color:
    """An RGBA color with components in the range 0..1."""
    r: float
    g: float
    b: float
    a: float = 1.0


@dataclass(frozen=True)
class CSGMaterial:
    """Surface appearance attached to every CSG node.

    Attributes:
        color: Base RGBA color.
        opacity: Overall opacity, 1.0 being fully opaque.
        metalness: PBR metalness factor.
        roughness: PBR roughness factor.
        wireframe: Render as wireframe instead of solid.
    """
    color: Color = field(default_factory=lambda: Color(r=0.3, g=0.5, b=0.8, a=1.0))
    opacity: float = 1.0
    metalness: float = 0.1
    roughness: float = 0.4
    wireframe: bool = False


@dataclass(frozen=True)
class Transform3D:
    """An affine adjustment applied to the single child of a transform node.

    A field left as None is the identity for that component. Rotation angles
    are kept in the units of the source (degrees for OpenSCAD).

    Attributes:
        translation: Offset along x, y and z.
        rotation: Euler rotation around x, y and z.
        scale: Scale factors along x, y and z.
    """
    translation: Optional[Vector3] = None
    rotation: Optional[Vector3] = None
    scale: Optional[Vector3] = None

    def is_empty(self) -> bool:
        """Return True when no component is set."""
        return self.translation is None and self.rotation is None and self.scale is None

    def __str__(self):
        # OpenSCAD applies the innermost call first: scale, then rotate, then translate.
        parts = []
        if self.translation is not None:
            parts.append(f"translate({_vec(self.translation)})")
        if self.rotation is not None:
            parts.append(f"rotate({_vec(self.rotation)})")
        if self.scale is not None:
            parts.append(f"scale({_vec(self.scale)})")
        return " ".join(parts)


# --- CSG tree node classes. ---

@dataclass(frozen=True, kw_only=True)
class CSGTreeNode:
    """Base class for all CSG tree nodes.

    Nodes are immutable values. To change a node, build a new one with
    ``dataclasses.replace()``.

    Attributes:
        id: Identifier unique across the conversion run.
        material: Surface appearance, or None.
        source_location: Where the originating AST node started, or None.
    """
    type: ClassVar[str] = ""

    id: str
    material: Optional[CSGMaterial] = None
    source_location: Optional[SourceLocation] = None

    def __str__(self) -> str:
        """Return an OpenSCAD-like rendering of the node."""
        raise NotImplementedError


@dataclass(frozen=True, kw_only=True)
class CSGPrimitive(CSGTreeNode):
    """Base class for atomic solids."""
    pass


@dataclass(frozen=True, kw_only=True)
class Cube(CSGPrimitive):
    """An axis-aligned box.

    Example:
        cube([2, 3, 4], center=true);

    Attributes:
        size: Edge lengths along x, y and z. All components are positive.
        center: If True the box is centered on the origin, otherwise its
            minimum corner sits on the origin.
    """
    type: ClassVar[str] = "cube"

    size: Vector3 = (1.0, 1.0, 1.0)
    center: bool = False

    def __str__(self):
        return f"cube(size={_vec(self.size)}, center={_bool(self.center)})"


@dataclass(frozen=True, kw_only=True)
class Sphere(CSGPrimitive):
    """A sphere centered on the origin.

    Example:
        sphere(r=5, $fn=64);

    Attributes:
        radius: Positive radius.
        segments: Tessellation hint ($fn).
    """
    type: ClassVar[str] = "sphere"

    radius: float = 1.0
    segments: int = 32

    def __str__(self):
        return f"sphere(r={_num(self.radius)}, $fn={self.segments})"


@dataclass(frozen=True, kw_only=True)
class Cylinder(CSGPrimitive):
    """A cylinder or truncated cone along the z axis.

    When radius2 differs from radius1 the shape is a cone frustum; a radius2
    of zero gives a pointed cone.

    Example:
        cylinder(h=10, r1=5, r2=2, center=true);

    Attributes:
        height: Positive extent along z.
        radius1: Positive bottom radius.
        radius2: Top radius, zero or more.
        segments: Tessellation hint ($fn).
        center: If True the cylinder is centered on z=0.
    """
    type: ClassVar[str] = "cylinder"

    height: float = 1.0
    radius1: float = 1.0
    radius2: float = 1.0
    segments: int = 32
    center: bool = False

    def __str__(self):
        return (
            f"cylinder(h={_num(self.height)}, r1={_num(self.radius1)}, "
            f"r2={_num(self.radius2)}, center={_bool(self.center)}, $fn={self.segments})"
        )


@dataclass(frozen=True, kw_only=True)
class Cone(CSGPrimitive):
    """A pointed cone along the z axis.

    Attributes:
        height: Positive extent along z.
        radius: Positive base radius.
        segments: Tessellation hint ($fn).
        center: If True the cone is centered on z=0.
    """
    type: ClassVar[str] = "cone"

    height: float = 1.0
    radius: float = 1.0
    segments: int = 32
    center: bool = False

    def __str__(self):
        return (
            f"cylinder(h={_num(self.height)}, r1={_num(self.radius)}, r2=0, "
            f"center={_bool(self.center)}, $fn={self.segments})"
        )


@dataclass(frozen=True, kw_only=True)
class Polyhedron(CSGPrimitive):
    """A closed solid given by its vertices and faces.

    Attributes:
        points: Vertex coordinates.
        faces: Each face as a tuple of indices into points.
    """
    type: ClassVar[str] = "polyhedron"

    points: tuple[Vector3, ...] = ()
    faces: tuple[tuple[int, ...], ...] = ()

    def __str__(self):
        points = ", ".join(_vec(p) for p in self.points)
        faces = ", ".join(f"[{', '.join(str(i) for i in face)}]" for face in self.faces)
        return f"polyhedron(points=[{points}], faces=[{faces}])"


@dataclass(frozen=True, kw_only=True)
class CSGOperation(CSGTreeNode):
    """Base class for boolean set operations.

    Attributes:
        children: Operands, in source order. Never empty when built by the
            converters.
    """
    children: tuple[CSGTreeNode, ...] = ()

    def __str__(self):
        return f"{self.type}() {{ {' '.join(f'{child};' for child in self.children)} }}"


@dataclass(frozen=True, kw_only=True)
class Union(CSGOperation):
    """The union of all children.

    Example:
        union() { cube(1); sphere(1); }
    """
    type: ClassVar[str] = "union"


@dataclass(frozen=True, kw_only=True)
class Difference(CSGOperation):
    """The first child minus every following child.

    Example:
        difference() { cube(10); sphere(6); }
    """
    type: ClassVar[str] = "difference"


@dataclass(frozen=True, kw_only=True)
class Intersection(CSGOperation):
    """The volume common to all children.

    Example:
        intersection() { cube(10, center=true); sphere(7); }
    """
    type: ClassVar[str] = "intersection"


@dataclass(frozen=True, kw_only=True)
class Group(CSGTreeNode):
    """An unordered collection of nodes with no boolean semantics."""
    type: ClassVar[str] = "group"

    children: tuple[CSGTreeNode, ...] = ()

    def __str__(self):
        return f"group() {{ {' '.join(f'{child};' for child in self.children)} }}"


@dataclass(frozen=True, kw_only=True)
class Transform(CSGTreeNode):
    """Wraps exactly one child with an affine adjustment.

    Example:
        translate([1, 0, 0]) sphere(5);

    Attributes:
        child: The transformed node.
        transform: The translation, rotation and scale to apply.
    """
    type: ClassVar[str] = "transform"

    child: CSGTreeNode
    transform: Transform3D = field(default_factory=Transform3D)

    def __str__(self):
        return f"{self.transform} {self.child}"


NODE_CLASSES: dict[str, type[CSGTreeNode]] = {
    cls.type: cls
    for cls in [
        Cube, Sphere, Cylinder, Cone, Polyhedron,
        Union, Difference, Intersection,
        Group, Transform,
    ]
}


def node_children(node: CSGTreeNode) -> tuple[CSGTreeNode, ...]:
    """Return the direct children of a node: its operands or its single child."""
    children = getattr(node, "children", None)
    if children is not None:
        return tuple(children)
    child = getattr(node, "child", None)
    if child is not None:
        return (child,)
    return ()


# --- Tree containers. ---

@dataclass(frozen=True)
class CSGTreeMetadata:
    """Aggregate statistics for a converted tree.

    Attributes:
        node_count: Number of nodes in the tree.
        primitive_count: Number of primitive nodes.
        operation_count: Number of union/difference/intersection nodes.
        max_depth: Deepest nesting level, roots being at depth 0.
    """
    node_count: int = 0
    primitive_count: int = 0
    operation_count: int = 0
    max_depth: int = 0


@dataclass(frozen=True)
class CSGTree:
    """The root container returned by a conversion.

    Attributes:
        root: Top-level nodes in source order.
        metadata: Aggregate statistics.
        processing_time: Milliseconds spent converting.
        source_ast: The AST the tree was converted from.
    """
    root: tuple[CSGTreeNode, ...] = ()
    metadata: CSGTreeMetadata = field(default_factory=CSGTreeMetadata)
    processing_time: float = 0.0
    source_ast: Any = None


@dataclass(frozen=True)
class CSGProcessingResult:
    """Outcome of ``process_ast_to_csg_tree()``.

    Attributes:
        success: True when no error-severity diagnostic was recorded.
        tree: The converted tree, or None after an unexpected failure.
        errors: Error-severity diagnostics.
        warnings: Warning and info diagnostics.
        processing_time: Milliseconds spent in the whole call.
    """
    success: bool
    tree: Optional[CSGTree] = None
    errors: tuple["CSGError", ...] = ()
    warnings: tuple["CSGError", ...] = ()
    processing_time: float = 0.0
