"""Shared fixtures for the layer status test-suite.

The sample document used throughout::

    app
    ├── page_1
    │   ├── container_1
    │   │   ├── text_1
    │   │   └── group_1
    │   │       └── button_1
    │   └── text_2
    ├── page_2
    │   └── text_3
    └── fragment_1 (page-fragment)
        └── empty_box (container without children)
"""

import logging
import sys
from pathlib import Path

import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from layer_status.core.models import Node, NodeType
from layer_status.core.services import EditorService, NodeStatusService
from layer_status.core.services.editor_service import make_document

# Configure test logging
logging.basicConfig(
    level=logging.DEBUG,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)


def build_sample_document() -> Node:
    button_1 = Node("button_1", "button")
    group_1 = Node("group_1", "container", items=[button_1])
    text_1 = Node("text_1", "text")
    container_1 = Node("container_1", "container", items=[text_1, group_1])
    text_2 = Node("text_2", "text")
    page_1 = Node("page_1", NodeType.PAGE, name="Home", items=[container_1, text_2])
    page_2 = Node("page_2", NodeType.PAGE, items=[Node("text_3", "text")])
    fragment_1 = Node("fragment_1", NodeType.PAGE_FRAGMENT,
                      items=[Node("empty_box", "container", items=[])])
    return make_document([page_1, page_2, fragment_1])


@pytest.fixture
def sample_root():
    return build_sample_document()


@pytest.fixture
def editor(sample_root):
    return EditorService(sample_root)


@pytest.fixture
def statuses(editor):
    service = NodeStatusService(editor)
    yield service
    service.dispose()


@pytest.fixture
def status_of(statuses):
    """Return the active-page record of a node as a plain dict."""
    def getter(node_id):
        status = statuses.node_status_map.get(node_id)
        return status.as_dict() if status is not None else None
    return getter

