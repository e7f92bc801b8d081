"""Walking converted CSG trees.

Example:
    from openscad_csg.tree import traverse_csg_tree, find_csg_node_by_id

    types = traverse_csg_tree(tree.root, lambda node, depth, path: node.type)
    node = find_csg_node_by_id(tree.root, "csg_1700000000000_abc123xyz")
"""

from __future__ import annotations

from typing import Callable, Iterable, Iterator, Optional, TypeVar

from .nodes import CSGTreeNode, node_children


T = TypeVar("T")

Path = tuple[int, ...]


def iter_csg_nodes(
    nodes: Iterable[CSGTreeNode],
    depth: int = 0,
    path: Path = (),
) -> Iterator[tuple[CSGTreeNode, int, Path]]:
    """Yield ``(node, depth, path)`` for every node, pre-order depth-first.

    ``path`` holds the index of each node among its siblings, from the
    root down. A transform's single child has index 0.
    """
    for index, node in enumerate(nodes):
        node_path = path + (index,)
        yield node, depth, node_path
        yield from iter_csg_nodes(node_children(node), depth + 1, node_path)


def traverse_csg_tree(
    nodes: Iterable[CSGTreeNode],
    visitor: Callable[[CSGTreeNode, int, Path], T],
    depth: int = 0,
    path: Path = (),
) -> list[T]:
    """Call visitor on every node in pre-order and collect the results.

    Args:
        nodes: Root nodes to walk.
        visitor: Called as ``visitor(node, depth, path)``.
        depth: Depth assigned to the given nodes.
        path: Path prefix for the given nodes.

    Returns:
        The visitor's return values in visiting order.
    """
    return [visitor(node, d, p) for node, d, p in iter_csg_nodes(nodes, depth, path)]


def find_csg_node_by_id(nodes: Iterable[CSGTreeNode], node_id: str) -> Optional[CSGTreeNode]:
    """Return the first node, in pre-order, whose id matches, or None."""
    for node, _depth, _path in iter_csg_nodes(nodes):
        if node.id == node_id:
            return node
    return None
