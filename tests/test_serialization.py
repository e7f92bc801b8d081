"""Tests for CSG tree JSON and YAML serialization."""

import json

import pytest

from openscad_csg import process_ast_to_csg_tree
from openscad_csg.errors import CSGError, INVALID_CUBE_SIZE
from openscad_csg.tree import (
    Color,
    CSGMaterial,
    CSGProcessingResult,
    CSGTree,
    CSGTreeMetadata,
    Cube,
    Cylinder,
    Polyhedron,
    SourceLocation,
    Sphere,
    Transform,
    Transform3D,
    Union,
    csg_from_dict,
    csg_from_json,
    csg_from_yaml,
    csg_to_dict,
    csg_to_json,
    csg_to_yaml,
)

from conftest import cube, sphere, translate, union


def _tree():
    """A small hand-built tree exercising every value type."""
    material = CSGMaterial(color=Color(1.0, 0.0, 0.0, 0.5), opacity=0.5)
    return CSGTree(
        root=(
            Union(id="u", material=material, source_location=SourceLocation(1, 1), children=(
                Cube(id="c", size=(2.0, 3.0, 4.0), center=True),
                Transform(
                    id="t",
                    child=Sphere(id="s", radius=5.0, segments=16),
                    transform=Transform3D(translation=(1.0, 0.0, 0.0), rotation=(0.0, 0.0, 90.0)),
                ),
            )),
            Polyhedron(id="p", points=((0, 0, 0), (1, 0, 0), (0, 1, 0), (0, 0, 1)),
                       faces=((0, 1, 2), (0, 1, 3), (0, 2, 3), (1, 2, 3))),
        ),
        metadata=CSGTreeMetadata(node_count=6, primitive_count=3, operation_count=1, max_depth=2),
        processing_time=1.25,
    )


class TestCSGToDict:
    """Tests for csg_to_dict."""

    def test_none_input(self):
        assert csg_to_dict(None) is None

    def test_single_node(self):
        """Test that nodes carry their type and camelCase keys."""
        data = csg_to_dict(Cube(id="c", size=(2, 3, 4), source_location=SourceLocation(3, 5)))
        assert data["type"] == "cube"
        assert data["id"] == "c"
        assert data["size"] == [2, 3, 4]
        assert data["center"] is False
        assert data["sourceLocation"] == {"line": 3, "column": 5}
        assert data["material"] is None

    def test_cylinder_keys(self):
        data = csg_to_dict(Cylinder(id="y", height=2, radius1=1, radius2=0))
        assert (data["height"], data["radius1"], data["radius2"]) == (2, 1, 0)

    def test_node_list(self):
        data = csg_to_dict([Sphere(id="a"), Sphere(id="b")])
        assert [item["id"] for item in data] == ["a", "b"]

    def test_tree(self):
        data = csg_to_dict(_tree())
        assert data["metadata"] == {"nodeCount": 6, "primitiveCount": 3, "operationCount": 1, "maxDepth": 2}
        assert data["processingTime"] == 1.25
        assert data["root"][0]["children"][1]["transform"]["translation"] == [1.0, 0.0, 0.0]
        assert data["root"][0]["material"]["color"] == {"r": 1.0, "g": 0.0, "b": 0.0, "a": 0.5}
        assert "sourceAst" not in data

    def test_source_ast_on_request(self):
        ast = [{"type": "cube", "size": [1, 2, 3]}]
        tree = process_ast_to_csg_tree(ast).tree
        assert csg_to_dict(tree, include_source_ast=True)["sourceAst"] == ast

    def test_processing_result(self):
        result = process_ast_to_csg_tree([cube(size=0), {"type": "text"}])
        data = csg_to_dict(result)
        assert data["success"] is False
        assert data["errors"][0]["code"] == INVALID_CUBE_SIZE
        assert data["warnings"][0]["severity"] == "warning"

    def test_unsupported_type(self):
        with pytest.raises(TypeError):
            csg_to_dict(42)


class TestCSGFromDict:
    """Tests for csg_from_dict."""

    def test_none_input(self):
        assert csg_from_dict(None) is None

    def test_round_trip_tree(self):
        tree = _tree()
        assert csg_from_dict(csg_to_dict(tree)) == tree

    def test_round_trip_node_list(self):
        nodes = (Cube(id="a"), Sphere(id="b", radius=2))
        assert csg_from_dict(csg_to_dict(list(nodes))) == nodes

    def test_vectors_become_tuples(self):
        node = csg_from_dict({"type": "cube", "id": "c", "size": [1, 2, 3]})
        assert node.size == (1, 2, 3)

    def test_missing_fields_use_defaults(self):
        node = csg_from_dict({"type": "sphere", "id": "s"})
        assert node == Sphere(id="s")

    def test_unknown_type(self):
        with pytest.raises(ValueError, match="Unknown node type"):
            csg_from_dict({"type": "torus", "id": "x"})

    def test_child_without_type(self):
        with pytest.raises(ValueError, match="Missing 'type'"):
            csg_from_dict({"type": "union", "id": "u", "children": [{"id": "c"}]})

    def test_unrecognized_mapping(self):
        with pytest.raises(ValueError):
            csg_from_dict({"foo": 1})


class TestJSON:
    """Tests for JSON serialization."""

    def test_valid_json(self):
        data = json.loads(csg_to_json(_tree()))
        assert data["root"][1]["type"] == "polyhedron"

    def test_compact(self):
        assert "\n" not in csg_to_json(Cube(id="c"), indent=None)

    def test_round_trip_processing_result(self):
        """Test that diagnostics survive a JSON round trip."""
        result = process_ast_to_csg_tree([
            union(cube(size=1), translate([1, 2, 3], sphere(r=2))),
            cube(size=0, location={"start": {"line": 7, "column": 2}}),
        ])
        restored = csg_from_json(csg_to_json(result))
        assert isinstance(restored, CSGProcessingResult)
        assert restored.tree.root == result.tree.root
        assert restored.errors == result.errors
        assert isinstance(restored.errors[0], CSGError)
        assert restored.errors[0].source_location == SourceLocation(7, 2)

    def test_invalid_json(self):
        with pytest.raises(json.JSONDecodeError):
            csg_from_json("{not json")


class TestYAML:
    """Tests for YAML serialization."""

    def test_round_trip(self):
        tree = _tree()
        assert csg_from_yaml(csg_to_yaml(tree)) == tree

    def test_key_order_preserved(self):
        text = csg_to_yaml(Cube(id="c"))
        assert text.index("type:") < text.index("id:") < text.index("size:")
