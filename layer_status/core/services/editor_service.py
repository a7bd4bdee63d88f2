from __future__ import annotations

"""Document/editor collaborator consumed by the layer panel.

This service owns the in-memory document tree (an ``app`` root whose items are
pages and page fragments), the active page and the current selection. It
exposes both as :class:`~layer_status.core.observable.Observable` values and
publishes structural changes on a small event bus:

- ``"add"``: payload is the list of inserted nodes (subtree roots).
- ``"remove"``: payload is the list of detached nodes (subtree roots).
- ``"select"``: payload is the new selection list.
- ``"page-change"``: payload is the newly active page (or None).

Ordering guarantees
-------------------
- Page observers run before selection observers whenever one request changes
  both, so a page's status map exists before selection logic touches it.
- ``add`` is announced before the new nodes are selected; ``remove`` is
  announced before the selection is pruned.

Examples
--------
    editor = EditorService(root)
    editor.select(["text_1"])
    editor.add([Node("button_2", "button")], parent_id="container_1")
"""

import logging
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence

from layer_status.core.exceptions import EditorOperationError, NodeNotFoundError
from layer_status.core.models import Id, Node, NodeType
from layer_status.core.observable import Observable, Unsubscribe
from layer_status.core.utils import (
    collect_ids,
    get_node,
    get_parent,
    is_page,
    is_page_fragment,
    iter_subtree,
)

__all__ = ["EditorService", "EVENTS", "make_document"]

logger = logging.getLogger(__name__)

EVENTS = ("add", "remove", "select", "page-change")

Handler = Callable[[Any], None]


class EditorService:
    """Holds the document, the active page and the selection.

    Parameters
    ----------
    root : Node, optional
        Document root of type ``app``. When given, its first page becomes
        active immediately.
    """

    def __init__(self, root: Optional[Node] = None) -> None:
        self._root: Optional[Node] = None
        self.page: Observable[Optional[Node]] = Observable(None, "page")
        self.nodes: Observable[List[Node]] = Observable([], "nodes")
        self._handlers: Dict[str, List[Handler]] = {event: [] for event in EVENTS}
        self._logger = logging.getLogger(f"{__name__}.EditorService")
        if root is not None:
            self.set_root(root)

    # -------------------------------------------------------------------------
    # Read access
    # -------------------------------------------------------------------------

    @property
    def root(self) -> Optional[Node]:
        return self._root

    def get(self, name: str) -> Any:
        """Return one of ``root``, ``page``, ``nodes`` or ``node`` (first selected)."""
        if name == "root":
            return self._root
        if name == "page":
            return self.page.value
        if name == "nodes":
            return list(self.nodes.value)
        if name == "node":
            nodes = self.nodes.value
            return nodes[0] if nodes else None
        raise KeyError(f"Unknown editor state '{name}'")

    def get_node_by_id(self, node_id: Id) -> Optional[Node]:
        return get_node(node_id, self._root)

    def pages(self) -> List[Node]:
        """Pages and page fragments of the document, in order."""
        if self._root is None or not self._root.items:
            return []
        return [n for n in self._root.items if is_page(n) or is_page_fragment(n)]

    # -------------------------------------------------------------------------
    # Event bus
    # -------------------------------------------------------------------------

    def on(self, event: str, handler: Handler) -> Unsubscribe:
        """Subscribe *handler* to *event* and return its unsubscribe handle."""
        handlers = self._handlers_for(event)
        if handler not in handlers:
            handlers.append(handler)

        def unsubscribe() -> None:
            self.off(event, handler)

        return unsubscribe

    def off(self, event: str, handler: Handler) -> None:
        handlers = self._handlers_for(event)
        if handler in handlers:
            handlers.remove(handler)

    def emit(self, event: str, payload: Any) -> None:
        """Deliver *payload* to every handler of *event*.

        A failing handler is logged and does not prevent delivery to the
        remaining ones.
        """
        for handler in list(self._handlers_for(event)):
            try:
                handler(payload)
            except Exception:
                self._logger.exception("Handler %r failed for event '%s'", handler, event)

    def listener_count(self, event: str) -> int:
        return len(self._handlers_for(event))

    def _handlers_for(self, event: str) -> List[Handler]:
        try:
            return self._handlers[event]
        except KeyError:
            raise ValueError(f"Unknown editor event '{event}'") from None

    # -------------------------------------------------------------------------
    # Page and selection
    # -------------------------------------------------------------------------

    def set_root(self, root: Node) -> None:
        """Replace the whole document and activate its first page."""
        if root.items is None:
            root.items = []
        self._root = root
        logger.info("Document loaded: root=%s pages=%d", root.id, len(self.pages()))
        pages = self.pages()
        self._activate(pages[0] if pages else None)
        self._set_selection([])

    def select_page(self, page_id: Id) -> Node:
        """Activate the page or fragment *page_id*.

        Switching to another page clears the selection.
        """
        page = next((p for p in self.pages() if p.id == page_id), None)
        if page is None:
            raise NodeNotFoundError("Page not found", node_id=page_id)
        if page is not self.page.value:
            self._activate(page)
            self._set_selection([])
        return page

    def select(self, node_ids: Iterable[Id]) -> List[Node]:
        """Make *node_ids* the current selection.

        All ids must live in the same page. When that page is not active it is
        activated first.
        """
        ids = list(node_ids)
        nodes: List[Node] = []
        owner: Optional[Node] = None
        for node_id in ids:
            node = self.get_node_by_id(node_id)
            if node is None or node is self._root:
                raise NodeNotFoundError("Cannot select unknown node", node_id=node_id)
            page = self._owner_page(node)
            if owner is not None and page is not owner:
                raise EditorOperationError("Selection spans several pages", node_id=node_id)
            owner = page
            if node not in nodes:
                nodes.append(node)

        if owner is not None and owner is not self.page.value:
            self._activate(owner)
        self._set_selection(nodes)
        return nodes

    def clear_selection(self) -> None:
        self._set_selection([])

    def _activate(self, page: Optional[Node]) -> None:
        previous = self.page.value
        self.page.set(page)
        if page is not previous:
            logger.info("Active page: %s", page.id if page is not None else None)
            self.emit("page-change", page)

    def _set_selection(self, nodes: List[Node]) -> None:
        previous = self.nodes.value
        self.nodes.set(list(nodes))
        if self.nodes.value is not previous:
            self._logger.debug("Selection: %s", [n.id for n in nodes])
            self.emit("select", list(nodes))

    def _owner_page(self, node: Node) -> Optional[Node]:
        for page in self.pages():
            if page is node or get_node(node.id, page) is node:
                return page
        return None

    # -------------------------------------------------------------------------
    # Structural edits
    # -------------------------------------------------------------------------

    def add(self, nodes: Sequence[Node], parent_id: Optional[Id] = None) -> List[Node]:
        """Insert *nodes* and announce them.

        Regular nodes are appended to *parent_id* (default: the active page)
        and selected afterwards. Pages and fragments always go under the
        document root; the last one added becomes active.

        The request is validated as a whole before the tree is touched, so a
        rejected call leaves the document unchanged.
        """
        if self._root is None:
            raise EditorOperationError("No document loaded")
        new_nodes = list(nodes)
        if not new_nodes:
            return []
        self._check_unique_ids(new_nodes)

        pages = [n for n in new_nodes if is_page(n) or is_page_fragment(n)]
        regular = [n for n in new_nodes if not (is_page(n) or is_page_fragment(n))]

        if pages and parent_id is not None and parent_id != self._root.id:
            raise EditorOperationError("Pages can only be added to the document root",
                                       node_id=parent_id)
        parent: Optional[Node] = self._resolve_parent(parent_id) if regular else None

        if parent is not None:
            owner = self._owner_page(parent)
            if owner is not None and owner is not self.page.value:
                self._activate(owner)
                self._set_selection([])
            parent.items.extend(regular)
        if pages:
            self._root.items.extend(pages)

        logger.info("Edit: add nodes=%s parent=%s",
                    [n.id for n in new_nodes], parent.id if parent is not None else self._root.id)
        self.emit("add", new_nodes)

        if regular:
            self._set_selection(regular)
        elif pages:
            self._activate(pages[-1])
            self._set_selection([])
        return new_nodes

    def remove(self, node_ids: Iterable[Id]) -> List[Node]:
        """Detach the nodes *node_ids* (with their subtrees) and announce them.

        Regular nodes must all belong to one page. When that page is not
        active it is activated before the removal is announced.
        """
        if self._root is None:
            raise EditorOperationError("No document loaded")
        targets: List[tuple[Node, Node]] = []
        for node_id in node_ids:
            if node_id == self._root.id:
                raise EditorOperationError("The document root cannot be removed", node_id=node_id)
            node = self.get_node_by_id(node_id)
            parent = get_parent(node_id, self._root)
            if node is None or parent is None:
                raise NodeNotFoundError("Cannot remove unknown node", node_id=node_id)
            if any(node is t for t, _ in targets):
                continue
            targets.append((node, parent))

        # Targets inside another target's subtree leave together with it
        nested = {id(n) for node, _ in targets for n in iter_subtree(node)[1:]}
        targets = [(node, parent) for node, parent in targets if id(node) not in nested]
        if not targets:
            return []

        owner: Optional[Node] = None
        for node, _ in targets:
            if is_page(node) or is_page_fragment(node):
                continue
            page = self._owner_page(node)
            if owner is not None and page is not owner:
                raise EditorOperationError("Removal spans several pages", node_id=node.id)
            owner = page
        if owner is not None and owner is not self.page.value:
            self._activate(owner)
            self._set_selection([])

        removed: List[Node] = []
        for node, parent in targets:
            parent.items[:] = [child for child in parent.items or [] if child is not node]
            removed.append(node)

        logger.info("Edit: remove nodes=%s", [n.id for n in removed])
        self.emit("remove", removed)

        gone = {id(n) for r in removed for n in iter_subtree(r)}
        remaining = [n for n in self.nodes.value if id(n) not in gone]
        active = self.page.value
        if active is not None and id(active) in gone:
            pages = self.pages()
            self._activate(pages[0] if pages else None)
            remaining = []
        if len(remaining) != len(self.nodes.value):
            self._set_selection(remaining)
        return removed

    def _resolve_parent(self, parent_id: Optional[Id]) -> Node:
        if parent_id is None:
            parent = self.page.value
            if parent is None:
                raise EditorOperationError("No active page to add nodes to")
        else:
            parent = self.get_node_by_id(parent_id)
            if parent is None or parent is self._root:
                raise NodeNotFoundError("Parent not found", node_id=parent_id)
        if parent.items is None:
            raise EditorOperationError("Parent cannot hold child nodes", node_id=parent.id)
        return parent

    def _check_unique_ids(self, nodes: Sequence[Node]) -> None:
        existing = set(collect_ids([self._root])) if self._root else set()
        seen: set = set()
        for node_id in collect_ids(nodes):
            if node_id in existing or node_id in seen:
                raise EditorOperationError("Duplicate node id", node_id=node_id)
            seen.add(node_id)


def make_document(pages: Iterable[Node], root_id: Id = "app") -> Node:
    """Wrap *pages* in an ``app`` root node."""
    return Node(root_id, NodeType.APP, items=list(pages))
