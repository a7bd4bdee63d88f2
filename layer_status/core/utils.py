from __future__ import annotations

"""Simple reusable helpers over the document tree.

These helpers are side-effect-free (except :func:`update_status`, which only
touches the status map it is given) and contain no GUI or disk I/O; they can be
used across all layers of the package.
"""

from typing import Any, Callable, Iterable, List, Optional, Sequence

from layer_status.core.models import Id, Node, NodeStatusMap, NodeType

__all__ = [
    "is_page",
    "is_page_fragment",
    "traverse_node",
    "iter_subtree",
    "get_node_path",
    "get_node",
    "get_parent",
    "update_status",
    "collect_ids",
]


def is_page(node: Optional[Node]) -> bool:
    return node is not None and node.type == NodeType.PAGE


def is_page_fragment(node: Optional[Node]) -> bool:
    return node is not None and node.type == NodeType.PAGE_FRAGMENT


def traverse_node(node: Node, callback: Callable[[Node], Any]) -> None:
    """Visit *node* and all of its descendants depth-first (pre-order)."""
    stack: List[Node] = [node]
    while stack:
        current = stack.pop()
        callback(current)
        if current.items:
            stack.extend(reversed(current.items))


def iter_subtree(node: Node) -> List[Node]:
    """Return *node* and its descendants in depth-first pre-order.

    The enumeration is complete before the list is returned, so callers can
    mutate maps keyed by these nodes while looping over the result.
    """
    nodes: List[Node] = []
    traverse_node(node, nodes.append)
    return nodes


def get_node_path(node_id: Id, items: Optional[Sequence[Node]]) -> List[Node]:
    """Return the chain of nodes leading to *node_id* within *items*.

    The path starts at the matching top-level entry of *items* and ends with
    the node itself. The container owning *items* (usually the page) is not
    part of the path. An unknown id yields an empty list.

    Examples:
        >>> leaf = Node("b")
        >>> group = Node("a", items=[leaf])
        >>> [n.id for n in get_node_path("b", [group])]
        ['a', 'b']
    """
    if not items:
        return []

    # Iterative DFS keeping the current chain; avoids recursion limits on deep trees
    path: List[Node] = []
    stack: List[tuple[Node, int]] = [(item, 0) for item in reversed(items)]
    while stack:
        node, depth = stack.pop()
        del path[depth:]
        path.append(node)
        if node.id == node_id:
            return path
        if node.items:
            stack.extend((child, depth + 1) for child in reversed(node.items))
    return []


def get_node(node_id: Id, root: Optional[Node]) -> Optional[Node]:
    """Find the node with *node_id* in the tree under *root* (inclusive)."""
    if root is None:
        return None
    if root.id == node_id:
        return root
    path = get_node_path(node_id, root.items)
    return path[-1] if path else None


def get_parent(node_id: Id, root: Optional[Node]) -> Optional[Node]:
    """Return the parent of *node_id* under *root*, or None for root/unknown ids."""
    if root is None or root.id == node_id:
        return None
    path = get_node_path(node_id, root.items)
    if not path:
        return None
    return path[-2] if len(path) > 1 else root


def update_status(status_map: Optional[NodeStatusMap], node_id: Id, **changes: bool) -> bool:
    """Set flags on the record of *node_id*.

    Returns False without touching anything when the map or the record is
    missing.
    """
    if status_map is None:
        return False
    status = status_map.get(node_id)
    if status is None:
        return False
    for name, value in changes.items():
        if not hasattr(status, name):
            raise AttributeError(f"Unknown status flag '{name}'")
        setattr(status, name, value)
    return True


def collect_ids(nodes: Iterable[Node]) -> List[Id]:
    """Flatten the ids of *nodes* and all their descendants."""
    ids: List[Id] = []
    for node in nodes:
        ids.extend(n.id for n in iter_subtree(node))
    return ids
