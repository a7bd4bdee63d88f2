from __future__ import annotations

"""Per-page layer panel status, kept in sync with the editor.

The service maintains a table ``page id -> (node id -> LayerNodeStatus)`` for
every page or fragment activated so far and keeps the active page's map
consistent with four independent change sources:

- active page switch: (re)build the page's map, keeping prior records by id;
- selection change: recompute ``selected`` and open every ancestor of
  a selected node;
- node insertion: add fresh, selected records for the inserted subtrees;
- node removal: drop the records of the removed subtrees.

Design principles
-----------------
- Derived, session-only state. Nothing here is persisted.
- Handlers never raise for missing pages or unknown ids; those are no-ops.
- Subtrees are fully enumerated before any map is mutated.
- The root record of a page is fixed: ``visible``, ``expand`` and ``selected``
  are True and it is not draggable.

Examples
--------
    editor = EditorService(root)
    with NodeStatusService(editor) as statuses:
        editor.select(["button_1"])
        statuses.node_status_map["container_1"].expand  # True
"""

import logging
from typing import Dict, List, Optional, Sequence

from layer_status.core.models import (
    Id,
    LayerNodeStatus,
    Node,
    NodeStatusMap,
    added_status,
    default_status,
    root_status,
)
from layer_status.core.observable import Unsubscribe
from layer_status.core.utils import (
    get_node_path,
    is_page,
    is_page_fragment,
    iter_subtree,
    update_status,
)

__all__ = ["create_page_node_status", "NodeStatusService"]

logger = logging.getLogger(__name__)


def create_page_node_status(
    page: Node,
    initial_layer_node_status: Optional[NodeStatusMap] = None,
) -> NodeStatusMap:
    """Build the complete status map of *page*.

    Parameters
    ----------
    page : Node
        Page or page fragment root.
    initial_layer_node_status : dict, optional
        Previously built map of the same page. Records found there for nodes
        still in the tree are reused as-is, which keeps manual expand/collapse
        and visibility toggles across rebuilds.

    Returns
    -------
    dict
        One record per node reachable from *page*, root included.
    """
    status_map: NodeStatusMap = {page.id: root_status()}
    initial = initial_layer_node_status or {}
    for item in page.items or []:
        for node in iter_subtree(item):
            prior = initial.get(node.id)
            status_map[node.id] = prior if prior is not None else default_status()
    return status_map


class NodeStatusService:
    """Keep the layer panel's status table in sync with an editor service.

    Parameters
    ----------
    editor_service
        Collaborator exposing ``page`` and ``nodes`` observables, ``on``/``off``
        for the ``"add"`` and ``"remove"`` events. See
        :class:`~layer_status.core.services.editor_service.EditorService`.

    Notes
    -----
    The page and selection watchers fire once during construction, so the
    initially active page already has a map when the constructor returns.
    Call :meth:`dispose` (or use the service as a context manager) to release
    every subscription when the panel goes away.
    """

    def __init__(self, editor_service) -> None:
        self._editor = editor_service
        self.node_status_maps: Dict[Id, NodeStatusMap] = {}
        self._unsubscribers: List[Unsubscribe] = []
        self._disposed = False

        self._unsubscribers.append(editor_service.page.watch(self._on_page_change, immediate=True))
        self._unsubscribers.append(editor_service.nodes.watch(self._on_selection_change, immediate=True))
        self._unsubscribers.append(editor_service.on("add", self._on_add))
        self._unsubscribers.append(editor_service.on("remove", self._on_remove))

    # -------------------------------------------------------------------------
    # Read access
    # -------------------------------------------------------------------------

    @property
    def page(self) -> Optional[Node]:
        return self._editor.page.value

    @property
    def node_status_map(self) -> Optional[NodeStatusMap]:
        """Status map of the active page, or None when nothing is active/built."""
        page = self.page
        if page is None:
            return None
        return self.node_status_maps.get(page.id)

    def get_status(self, node_id: Id) -> Optional[LayerNodeStatus]:
        status_map = self.node_status_map
        return status_map.get(node_id) if status_map is not None else None

    @property
    def disposed(self) -> bool:
        return self._disposed

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def dispose(self) -> None:
        """Release the page, selection, add and remove subscriptions."""
        if self._disposed:
            return
        self._disposed = True
        while self._unsubscribers:
            unsubscribe = self._unsubscribers.pop()
            unsubscribe()
        logger.debug("Node status service disposed (%d pages tracked)", len(self.node_status_maps))

    def __enter__(self) -> "NodeStatusService":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.dispose()

    # -------------------------------------------------------------------------
    # Synchronizers
    # -------------------------------------------------------------------------

    def _on_page_change(self, page: Optional[Node], _previous: Optional[Node] = None) -> None:
        if self._disposed or page is None:
            return
        previous_map = self.node_status_maps.get(page.id)
        self.node_status_maps[page.id] = create_page_node_status(page, previous_map)
        logger.debug(
            "Page %s status %s: %d entries",
            page.id,
            "rebuilt" if previous_map is not None else "built",
            len(self.node_status_maps[page.id]),
        )
        # Records reused from the previous build may carry a stale selection
        self._apply_selection(self._editor.nodes.value)

    def _on_selection_change(self, nodes: Sequence[Node], _previous=None) -> None:
        if self._disposed:
            return
        self._apply_selection(nodes)

    def _apply_selection(self, nodes: Sequence[Node]) -> None:
        status_map = self.node_status_map
        page = self.page
        if status_map is None or page is None:
            return

        selected_ids = {node.id for node in nodes}
        newly_selected: List[Id] = []
        for node_id, status in status_map.items():
            if node_id == page.id:
                continue
            status.selected = node_id in selected_ids
            if status.selected:
                newly_selected.append(node_id)

        for node_id in newly_selected:
            # Open the ancestors only; the selected node keeps its own state
            for node in get_node_path(node_id, page.items)[:-1]:
                update_status(status_map, node.id, expand=True)

        logger.debug("Selection applied on page %s: %d selected", page.id, len(newly_selected))

    def _on_add(self, nodes: Sequence[Node]) -> None:
        if self._disposed:
            return
        status_map = self.node_status_map
        if status_map is None:
            logger.debug("Add ignored: no active page status")
            return

        added: List[Node] = []
        for node in nodes:
            if is_page(node) or is_page_fragment(node):
                continue
            added.extend(iter_subtree(node))
        for node in added:
            status_map[node.id] = added_status(node)
        logger.debug("Add: %d status entries created", len(added))

    def _on_remove(self, nodes: Sequence[Node]) -> None:
        if self._disposed:
            return
        status_map = self.node_status_map
        if status_map is None:
            logger.debug("Remove ignored: no active page status")
            return

        removed_ids = [n.id for node in nodes for n in iter_subtree(node)]
        deleted = 0
        for node_id in removed_ids:
            if status_map.pop(node_id, None) is not None:
                deleted += 1
        logger.debug("Remove: %d of %d status entries deleted", deleted, len(removed_ids))
