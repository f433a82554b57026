"""Shared fixtures and fakes for side tree tests.

The controller is exercised against ``FakeHost``, an in-memory editor host
whose timers only run when a test calls :meth:`FakeHost.run_timers`.
"""

import logging
import sys
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple

import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from side_tree.config import ConfigManager
from side_tree.core.document import Document
from side_tree.core.models.panel import TreePanel
from side_tree.core.models.ui_config import SideTreeOptions
from side_tree.core.services.heading_indexer import HeadingIndexer
from side_tree.ui.controllers.host import EditorHost
from side_tree.ui.controllers.tree_panel_controller import TreePanelController

logging.basicConfig(
    level=logging.DEBUG,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

# Headings start at offsets 16, 35, 61 and 78; the text is 106 characters long.
SAMPLE_ORG = (
    "#+TITLE: Sample\n"
    "* Alpha\n"
    "alpha body\n"
    "** Alpha child\n"
    "child body\n"
    "* Beta\n"
    "beta body\n"
    "* Alpha\n"
    "repeated title body\n"
)


class FakeHost(EditorHost):
    """Records every host call; timers fire only through ``run_timers``."""

    def __init__(self, confirm_answer: bool = True) -> None:
        self.confirm_answer = confirm_answer
        self.calls: List[Tuple[str, Any]] = []
        self.displayed: Dict[str, TreePanel] = {}
        self.focused: Optional[object] = None
        self.errors: List[Tuple[str, str]] = []
        self.confirmations: List[str] = []
        self.scrolled: List[Tuple[str, int]] = []
        self._timers: Dict[int, Tuple[int, Callable[[], None]]] = {}
        self._next_handle = 0

    # EditorHost
    def display_panel(self, panel, document, *, side, width):
        self.calls.append(("display_panel", panel.id))
        self.displayed[panel.id] = panel

    def remove_panel(self, panel):
        self.calls.append(("remove_panel", panel.id))
        self.displayed.pop(panel.id, None)

    def focus_document(self, document):
        self.calls.append(("focus_document", document.id))
        self.focused = document

    def focus_panel(self, panel):
        self.calls.append(("focus_panel", panel.id))
        self.focused = panel

    def scroll_to_top(self, document, offset):
        self.scrolled.append((document.id, offset))

    def confirm(self, title, message):
        self.confirmations.append(message)
        return self.confirm_answer

    def show_error(self, title, message):
        self.errors.append((title, message))

    def after(self, delay_ms, callback):
        self._next_handle += 1
        self._timers[self._next_handle] = (delay_ms, callback)
        return self._next_handle

    def after_cancel(self, handle):
        self._timers.pop(handle, None)

    # Test helpers
    @property
    def pending_timers(self) -> int:
        return len(self._timers)

    def run_timers(self) -> int:
        """Fire every pending timer (including ones scheduled while firing)."""
        fired = 0
        while self._timers:
            handle = min(self._timers)
            _delay, callback = self._timers.pop(handle)
            callback()
            fired += 1
        return fired


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Point user config at a temp dir and drop the shared ConfigManager."""
    monkeypatch.setenv("SIDE_TREE_CONFIG_DIR", str(tmp_path / "config"))
    ConfigManager.reset()
    yield tmp_path / "config"
    ConfigManager.reset()


@pytest.fixture
def host():
    return FakeHost()


@pytest.fixture
def options():
    return SideTreeOptions()


@pytest.fixture
def indexer():
    return HeadingIndexer()


@pytest.fixture
def controller(host, indexer, options):
    return TreePanelController(host, indexer=indexer, options=options)


@pytest.fixture
def make_document():
    def _make(text: str = SAMPLE_ORG, kind: str = "org", document_id: Optional[str] = None) -> Document:
        return Document(text, kind=kind, document_id=document_id)
    return _make


@pytest.fixture
def sample_document(make_document):
    return make_document(SAMPLE_ORG, document_id="sample")
