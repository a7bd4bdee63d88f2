from __future__ import annotations

"""Editor collaborator and layer status synchronization services."""

from .editor_service import EditorService  # noqa: F401
from .node_status_service import NodeStatusService, create_page_node_status  # noqa: F401

__all__: list[str] = [
    "EditorService",
    "NodeStatusService",
    "create_page_node_status",
]
