from __future__ import annotations

"""Controller backing the layer panel.

Translates panel gestures (expand/collapse, eye toggle, clicks) into updates of
the active page's status map or requests to the editor service, and flattens
the page tree into the rows a panel renders.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional

from layer_status.core.exceptions import LayerStatusError
from layer_status.core.models import Id, LayerNodeStatus, Node
from layer_status.core.utils import iter_subtree, update_status

__all__ = ["LayerRow", "LayerPanelController"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LayerRow:
    """One rendered row: the node, its indentation level and its status."""

    node: Node
    depth: int
    status: LayerNodeStatus


class LayerPanelController:
    """Coordinate layer panel actions with the editor and status services.

    Parameters
    ----------
    editor_service : EditorService
        Document/editor collaborator.
    status_service : NodeStatusService
        Owner of the page status table.

    Notes
    -----
    - Methods are non-raising for routine failures and return booleans.
    - The page root row is fixed: it cannot be collapsed, hidden or dragged.
    """

    def __init__(self, editor_service, status_service) -> None:
        self.editor_service = editor_service
        self.status_service = status_service

    # ---------------------------------------------------------------------------------
    # Status toggles
    # ---------------------------------------------------------------------------------

    def get_status(self, node_id: Id) -> Optional[LayerNodeStatus]:
        return self.status_service.get_status(node_id)

    def set_expand(self, node_id: Id, expand: bool) -> bool:
        """Open or close *node_id*; returns True if the record changed."""
        if self._is_page_root(node_id):
            return False
        status = self.get_status(node_id)
        if status is None or status.expand == expand:
            return False
        return update_status(self.status_service.node_status_map, node_id, expand=expand)

    def toggle_expand(self, node_id: Id) -> bool:
        status = self.get_status(node_id)
        if status is None:
            return False
        return self.set_expand(node_id, not status.expand)

    def set_visible(self, node_id: Id, visible: bool) -> bool:
        """Show or hide *node_id* on the canvas; the page root always stays visible."""
        if self._is_page_root(node_id):
            return False
        status = self.get_status(node_id)
        if status is None or status.visible == visible:
            return False
        return update_status(self.status_service.node_status_map, node_id, visible=visible)

    def expand_all(self) -> int:
        """Open every container of the active page; returns the number changed."""
        return self._set_expand_everywhere(True)

    def collapse_all(self) -> int:
        """Close every node of the active page except its root."""
        return self._set_expand_everywhere(False)

    def _set_expand_everywhere(self, expand: bool) -> int:
        page = self.status_service.page
        status_map = self.status_service.node_status_map
        if page is None or status_map is None:
            return 0
        changed = 0
        for row_node in iter_subtree(page):
            if row_node is page:
                continue
            if expand and not row_node.is_container():
                continue
            status = status_map.get(row_node.id)
            if status is not None and status.expand != expand:
                status.expand = expand
                changed += 1
        logger.debug("%s all: %d nodes changed", "Expand" if expand else "Collapse", changed)
        return changed

    # ---------------------------------------------------------------------------------
    # Selection
    # ---------------------------------------------------------------------------------

    def click(self, node_id: Id, multiple: bool = False) -> bool:
        """Select *node_id*; with *multiple*, add it to (or drop it from) the selection."""
        ids = [node_id]
        if multiple:
            current = [n.id for n in self.editor_service.get("nodes")]
            if node_id in current:
                ids = [i for i in current if i != node_id]
            else:
                ids = current + [node_id]
        try:
            self.editor_service.select(ids)
        except LayerStatusError as exc:
            logger.warning("Selection rejected: %s", exc)
            return False
        return True

    # ---------------------------------------------------------------------------------
    # Rendering
    # ---------------------------------------------------------------------------------

    def rows(self) -> List[LayerRow]:
        """Return the rows of the active page, hiding children of closed nodes."""
        page = self.status_service.page
        status_map = self.status_service.node_status_map
        if page is None or status_map is None:
            return []

        rows: List[LayerRow] = []
        stack: List[tuple[Node, int]] = [(page, 0)]
        while stack:
            node, depth = stack.pop()
            status = status_map.get(node.id)
            if status is None:
                logger.warning("No layer status for node %s", node.id)
                continue
            rows.append(LayerRow(node=node, depth=depth, status=status))
            if status.expand and node.items:
                stack.extend((child, depth + 1) for child in reversed(node.items))
        return rows

    def expanded_ids(self) -> List[Id]:
        status_map = self.status_service.node_status_map or {}
        return [node_id for node_id, status in status_map.items() if status.expand]

    # ---------------------------------------------------------------------------------
    # Internal helpers
    # ---------------------------------------------------------------------------------

    def _is_page_root(self, node_id: Id) -> bool:
        page = self.status_service.page
        return page is not None and page.id == node_id

