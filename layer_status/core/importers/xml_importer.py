from __future__ import annotations

"""XML document importer.

Builds the node tree consumed by :class:`EditorService` from an XML
description of the document::

    <app id="app">
      <page id="page_1" name="Home">
        <container id="container_1">
          <text id="text_1"/>
        </container>
        <button id="button_1"/>
      </page>
      <page-fragment id="fragment_1"/>
    </app>

The root element becomes the ``app`` node. ``<page>`` and ``<page-fragment>``
children become page roots; any other element becomes a regular node whose
``type`` is the element's tag. Pages always get an ``items`` list. Regular
elements get one when they contain child elements or carry
``container="true"``.
"""

import logging
from pathlib import Path
from typing import Optional, Set, Union

from lxml import etree as ET

from layer_status.core.exceptions import DocumentImportError
from layer_status.core.models import Node, NodeType

logger = logging.getLogger(__name__)

__all__ = ["XmlDocumentImporter"]

_TRUE_VALUES = {"1", "true", "yes", "on"}


class XmlDocumentImporter:
    """Importer for XML document descriptions."""

    def __init__(self) -> None:
        self.logger = logging.getLogger(f"{__name__}.XmlDocumentImporter")

    def load_file(self, file_path: Union[str, Path]) -> Node:
        """Parse *file_path* and return the document root node.

        Raises:
            DocumentImportError: If the file cannot be read or is malformed
        """
        path = Path(file_path)
        if not path.is_file():
            raise DocumentImportError(f"Document not found: {path}", source=str(path))
        try:
            tree = ET.parse(str(path), parser=self._parser())
        except (ET.XMLSyntaxError, OSError) as exc:
            raise DocumentImportError(f"Could not parse {path.name}: {exc}",
                                      source=str(path), cause=exc) from exc
        root = self._build(tree.getroot(), str(path))
        self.logger.debug("Loaded document %s from %s", root.id, path)
        return root

    def load_string(self, text: Union[str, bytes]) -> Node:
        """Parse an XML string and return the document root node."""
        data = text.encode("utf-8") if isinstance(text, str) else text
        try:
            element = ET.fromstring(data, parser=self._parser())
        except ET.XMLSyntaxError as exc:
            raise DocumentImportError(f"Malformed document: {exc}", cause=exc) from exc
        return self._build(element, None)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _parser() -> ET.XMLParser:
        # No entity expansion or network access for document sources
        return ET.XMLParser(remove_comments=True, resolve_entities=False, no_network=True)

    def _build(self, element: ET._Element, source: Optional[str]) -> Node:
        seen: Set[str] = set()
        root = self._make_node(element, source, seen)
        root.type = NodeType.APP
        root.items = root.items or []
        for child in element:
            if not isinstance(child.tag, str):
                continue
            tag = ET.QName(child).localname
            if tag not in (NodeType.PAGE, NodeType.PAGE_FRAGMENT):
                raise DocumentImportError(
                    f"Unexpected <{tag}> at document level; expected page or page-fragment",
                    source=source,
                    node_id=child.get("id"),
                )
            root.items.append(self._convert(child, source, seen))
        return root

    def _convert(self, element: ET._Element, source: Optional[str], seen: Set[str]) -> Node:
        node = self._make_node(element, source, seen)
        children = [child for child in element if isinstance(child.tag, str)]
        if children:
            # Any element with child elements was made a container
            node.items = [self._convert(child, source, seen) for child in children]
        return node

    def _make_node(self, element: ET._Element, source: Optional[str], seen: Set[str]) -> Node:
        node_id = (element.get("id") or "").strip()
        tag = ET.QName(element).localname
        if not node_id:
            raise DocumentImportError(
                f"<{tag}> element at line {element.sourceline} has no id", source=source
            )
        if node_id in seen:
            raise DocumentImportError("Duplicate node id", source=source, node_id=node_id)
        seen.add(node_id)

        has_children = any(isinstance(child.tag, str) for child in element)
        is_container = (
            has_children
            or tag in (NodeType.PAGE, NodeType.PAGE_FRAGMENT)
            or (element.get("container") or "").strip().lower() in _TRUE_VALUES
        )
        return Node(
            id=node_id,
            type=tag,
            name=element.get("name"),
            items=[] if is_container else None,
        )
