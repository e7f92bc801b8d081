"""Tests for CSG tree traversal."""

import types

import pytest

from openscad_csg.tree import (
    Cube,
    Cylinder,
    Difference,
    Sphere,
    Transform,
    Transform3D,
    Union,
    find_csg_node_by_id,
    iter_csg_nodes,
    traverse_csg_tree,
)


@pytest.fixture
def roots():
    """Two roots: union(cube, translate(sphere)) and difference(cylinder)."""
    return (
        Union(id="u", children=(
            Cube(id="c"),
            Transform(id="t", child=Sphere(id="s"), transform=Transform3D(translation=(1, 0, 0))),
        )),
        Difference(id="d", children=(Cylinder(id="y"),)),
    )


class TestTraverseCSGTree:
    """Tests for traverse_csg_tree."""

    def test_pre_order(self, roots):
        ids = traverse_csg_tree(roots, lambda node, depth, path: node.id)
        assert ids == ["u", "c", "t", "s", "d", "y"]

    def test_depths(self, roots):
        depths = traverse_csg_tree(roots, lambda node, depth, path: depth)
        assert depths == [0, 1, 1, 2, 0, 1]

    def test_paths(self, roots):
        """Test that paths hold sibling indices from the root down."""
        paths = traverse_csg_tree(roots, lambda node, depth, path: path)
        assert paths == [(0,), (0, 0), (0, 1), (0, 1, 0), (1,), (1, 0)]

    def test_empty(self):
        assert traverse_csg_tree((), lambda node, depth, path: node) == []

    def test_start_depth_and_path(self, roots):
        result = traverse_csg_tree(roots[1:], lambda node, depth, path: (depth, path), depth=2, path=(5,))
        assert result == [(2, (5, 0)), (3, (5, 0, 0))]


class TestIterCSGNodes:
    """Tests for iter_csg_nodes."""

    def test_is_generator(self, roots):
        assert isinstance(iter_csg_nodes(roots), types.GeneratorType)

    def test_yields_triples(self, roots):
        node, depth, path = next(iter_csg_nodes(roots))
        assert (node.id, depth, path) == ("u", 0, (0,))


class TestFindCSGNodeById:
    """Tests for find_csg_node_by_id."""

    def test_nested(self, roots):
        node = find_csg_node_by_id(roots, "s")
        assert isinstance(node, Sphere)

    def test_second_root(self, roots):
        assert find_csg_node_by_id(roots, "y").type == "cylinder"

    def test_first_match(self):
        first = Cube(id="dup", size=(1, 1, 1))
        second = Cube(id="dup", size=(2, 2, 2))
        assert find_csg_node_by_id((Union(id="u", children=(first,)), second), "dup") is first

    def test_missing(self, roots):
        assert find_csg_node_by_id(roots, "nope") is None
