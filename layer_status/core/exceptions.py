from __future__ import annotations

"""Exception classes for the document/editor collaborator layer.

The node status synchronizers never raise; these exceptions report invalid
requests made to the editor service or malformed documents handed to the
importer.
"""

from typing import Optional

from layer_status.core.models import Id

__all__ = [
    "LayerStatusError",
    "NodeNotFoundError",
    "EditorOperationError",
    "DocumentImportError",
]


class LayerStatusError(Exception):
    """Base exception for all errors raised by this package."""

    def __init__(self, message: str, node_id: Optional[Id] = None,
                 cause: Optional[Exception] = None) -> None:
        super().__init__(message)
        self.node_id = node_id
        self.cause = cause

    def __str__(self) -> str:
        if self.node_id is not None:
            return f"[Node: {self.node_id}] {super().__str__()}"
        return super().__str__()


class NodeNotFoundError(LayerStatusError):
    """Raised when an operation references an id absent from the document."""
    pass


class EditorOperationError(LayerStatusError):
    """Raised when a structural edit cannot be applied.

    This includes adding under a leaf, duplicate ids and removing the
    document root.
    """
    pass


class DocumentImportError(LayerStatusError):
    """Raised when a document source cannot be turned into a node tree."""

    def __init__(self, message: str, source: Optional[str] = None,
                 node_id: Optional[Id] = None, cause: Optional[Exception] = None) -> None:
        super().__init__(message, node_id, cause)
        self.source = source
