import pytest

from layer_status.core.exceptions import DocumentImportError
from layer_status.core.importers import XmlDocumentImporter
from layer_status.core.models import NodeType
from layer_status.core.services import EditorService, NodeStatusService

SAMPLE_XML = """<?xml version="1.0" encoding="utf-8"?>
<app id="app">
  <page id="page_1" name="Home">
    <!-- header area -->
    <container id="container_1">
      <text id="text_1"/>
    </container>
    <container id="empty_box" container="true"/>
    <button id="button_1"/>
  </page>
  <page-fragment id="fragment_1"/>
</app>
"""


@pytest.fixture
def importer():
    return XmlDocumentImporter()


def test_load_string_builds_tree(importer):
    root = importer.load_string(SAMPLE_XML)
    assert root.type == NodeType.APP
    page_1, fragment_1 = root.items
    assert page_1.type == NodeType.PAGE
    assert page_1.name == "Home"
    assert [n.id for n in page_1.items] == ["container_1", "empty_box", "button_1"]
    assert fragment_1.type == NodeType.PAGE_FRAGMENT
    assert fragment_1.items == []


def test_container_detection(importer):
    root = importer.load_string(SAMPLE_XML)
    container_1, empty_box, button_1 = root.items[0].items
    assert container_1.items[0].id == "text_1"
    assert container_1.items[0].items is None
    assert empty_box.items == []
    assert button_1.items is None
    assert button_1.type == "button"


def test_load_file(importer, tmp_path):
    path = tmp_path / "doc.xml"
    path.write_text(SAMPLE_XML, encoding="utf-8")
    root = importer.load_file(path)
    assert root.id == "app"


def test_missing_file(importer, tmp_path):
    with pytest.raises(DocumentImportError) as info:
        importer.load_file(tmp_path / "missing.xml")
    assert info.value.source.endswith("missing.xml")


def test_malformed_xml(importer):
    with pytest.raises(DocumentImportError) as info:
        importer.load_string("<app id='app'><page id='p'></app>")
    assert info.value.cause is not None


def test_missing_id(importer):
    with pytest.raises(DocumentImportError):
        importer.load_string("<app id='app'><page id='p'><text/></page></app>")


def test_duplicate_id(importer):
    with pytest.raises(DocumentImportError) as info:
        importer.load_string("<app id='app'><page id='p'><text id='p'/></page></app>")
    assert info.value.node_id == "p"


def test_regular_element_at_document_level(importer):
    with pytest.raises(DocumentImportError):
        importer.load_string("<app id='app'><text id='t'/></app>")


def test_imported_document_drives_status_service(importer):
    editor = EditorService(importer.load_string(SAMPLE_XML))
    with NodeStatusService(editor) as statuses:
        editor.select(["text_1"])
        assert statuses.node_status_map["container_1"].expand is True
        assert set(statuses.node_status_map) == {
            "page_1", "container_1", "text_1", "empty_box", "button_1",
        }
