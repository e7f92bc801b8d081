#######################################################################
# OpenSCAD AST to CSG tree conversion
#######################################################################

from .config import (
    CSGProcessorConfig,
    DEFAULT_MATERIAL,
    load_config,
)
from .errors import (
    CSGError,
    Result,
    create_csg_error,
)
from .evaluator import (
    extract_value,
    extract_vector,
    extract_boolean,
)
from .scraper import FragmentScraper
from .converters import (
    generate_node_id,
    convert_cube,
    convert_sphere,
    convert_cylinder,
    convert_csg_operation,
    convert_transform,
)
from .processor import (
    convert_ast_node,
    process_ast_to_csg_tree,
)
from .tree import (
    CSGTree,
    CSGTreeMetadata,
    CSGTreeNode,
    CSGProcessingResult,
    traverse_csg_tree,
    find_csg_node_by_id,
    iter_csg_nodes,
    validate_csg_tree,
    csg_to_dict,
    csg_to_json,
    csg_to_yaml,
    csg_from_dict,
    csg_from_json,
    csg_from_yaml,
)


# vim: set ts=4 sw=4 expandtab:
