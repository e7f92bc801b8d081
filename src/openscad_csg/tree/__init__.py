# Import all CSG node types from nodes
from .nodes import (
    Vector3,
    PRIMITIVE_TYPES,
    OPERATION_TYPES,
    NODE_CLASSES,
    SourceLocation,
    Color,
    CSGMaterial,
    Transform3D,
    CSGTreeNode,
    CSGPrimitive,
    Cube,
    Sphere,
    Cylinder,
    Cone,
    Polyhedron,
    CSGOperation,
    Union,
    Difference,
    Intersection,
    Group,
    Transform,
    CSGTreeMetadata,
    CSGTree,
    CSGProcessingResult,
    node_children,
)

# Import traversal functions
from .traversal import (
    iter_csg_nodes,
    traverse_csg_tree,
    find_csg_node_by_id,
)

# Import validation functions
from .validation import (
    validate_csg_tree,
    check_cube_size,
    check_sphere_radius,
    check_cylinder_dimensions,
)

# Import serialization functions
from .serialization import (
    csg_to_dict,
    csg_to_json,
    csg_to_yaml,
    csg_from_dict,
    csg_from_json,
    csg_from_yaml,
)


# vim: set ts=4 sw=4 expandtab:
