from __future__ import annotations

"""Shared data structures used across the layer status core.

This package exposes the document node value object and the per-node display
status record. It is intentionally free of UI / I/O code so that the contained
objects can be reused in any context (unit-tests, CLI, GUI, etc.).
"""

from dataclasses import asdict, dataclass, replace
from typing import Dict, List, Optional, Union

__all__ = [
    "Id",
    "NodeType",
    "Node",
    "LayerNodeStatus",
    "NodeStatusMap",
    "root_status",
    "default_status",
    "added_status",
]

Id = Union[str, int]


class NodeType:
    """Well-known node ``type`` values.

    Any other string denotes a regular element (text, button, container…).
    """

    APP = "app"
    PAGE = "page"
    PAGE_FRAGMENT = "page-fragment"


@dataclass(eq=False)
class Node:
    """A unit of the document tree.

    Attributes
    ----------
    id
        Stable identifier, unique within the document.
    type
        Node variant, see :class:`NodeType`.
    name
        Optional display name used by the layer panel.
    items
        Ordered child nodes. ``None`` means the node has no child sequence
        (a leaf); a list, even an empty one, makes the node a container.
    """

    id: Id
    type: str = ""
    name: Optional[str] = None
    items: Optional[List["Node"]] = None

    def is_container(self) -> bool:
        """Return True if this node carries a child sequence."""
        return self.items is not None

    def __repr__(self) -> str:
        return f"Node(id={self.id!r}, type={self.type!r})"


@dataclass
class LayerNodeStatus:
    """Display state of one node in the layer panel."""

    visible: bool = True
    expand: bool = False
    selected: bool = False
    draggable: bool = True

    def copy(self) -> "LayerNodeStatus":
        return replace(self)

    def as_dict(self) -> Dict[str, bool]:
        return asdict(self)


NodeStatusMap = Dict[Id, LayerNodeStatus]


def root_status() -> LayerNodeStatus:
    """Fixed record of a page/fragment root; never user-toggleable."""
    return LayerNodeStatus(visible=True, expand=True, selected=True, draggable=False)


def default_status() -> LayerNodeStatus:
    """Record of a descendant seen for the first time by a page build."""
    return LayerNodeStatus(visible=True, expand=False, selected=False, draggable=True)


def added_status(node: Node) -> LayerNodeStatus:
    """Record of a freshly inserted node: adding implies selecting.

    Containers open so the new content is visible right away.
    """
    return LayerNodeStatus(
        visible=True,
        expand=node.is_container(),
        selected=True,
        draggable=True,
    )
