"""Top-level package for the layer panel node status layer.

This package hosts the GUI-agnostic state that backs an editor's layer
(outline) panel. Front-ends should only depend on the public API exposed here
rather than importing internal modules directly.
"""

from .core.models import LayerNodeStatus, Node, NodeType  # re-export for convenience
from .core.services import EditorService, NodeStatusService

__all__: list[str] = [
    "EditorService",
    "LayerNodeStatus",
    "Node",
    "NodeStatusService",
    "NodeType",
]
