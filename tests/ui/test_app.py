import tkinter as tk

import pytest

from side_tree.core.document import Document
from side_tree.ui import app as app_module
from side_tree.ui.app import SideTreeApp


def _can_create_tk_root() -> bool:
    try:
        r = tk.Tk()
        r.destroy()
        return True
    except tk.TclError:
        return False


requires_tk = pytest.mark.skipif(
    not _can_create_tk_root(),
    reason="Tkinter root cannot be created in this environment (likely headless CI without display).",
)


@pytest.fixture
def dialogs(monkeypatch):
    """Capture message boxes instead of showing them."""
    shown = []
    monkeypatch.setattr(app_module.messagebox, "showerror",
                        lambda title, message, **kw: shown.append((title, message)))
    return shown


@pytest.fixture
def app(tk_root):
    return SideTreeApp(tk_root)


@pytest.fixture
def tk_root():
    root = tk.Tk()
    root.withdraw()
    yield root
    try:
        root.destroy()
    except tk.TclError:
        pass


# ---------------------------
# Gesture wrapper (no display needed)
# ---------------------------

def test_gesture_swallows_handler_errors_and_breaks(monkeypatch):
    logged = []
    monkeypatch.setattr(app_module.logger, "exception", lambda msg, *args: logged.append(msg))

    def boom():
        raise RuntimeError("handler failed")

    assert SideTreeApp._gesture(boom)(None) == "break"
    assert logged == ["Document gesture failed"]


def test_gesture_runs_handler():
    calls = []
    assert SideTreeApp._gesture(lambda: calls.append("ran"))(None) == "break"
    assert calls == ["ran"]


# ---------------------------
# Error dialogs
# ---------------------------

@requires_tk
def test_toggle_on_document_without_headings_shows_error(app, dialogs):
    app.show_document(Document("just prose\n", kind="org", document_id="notes"))
    app._on_toggle_side_tree(app.document)

    assert dialogs == [("Side Tree", "[Document: notes] No headings found")]
    assert app.controller.panel_for(app.document) is None


@requires_tk
def test_second_open_reports_already_treed(app, dialogs):
    app.show_document(Document("* A\nbody\n", kind="org", document_id="outline"))
    app._on_toggle_side_tree(app.document)
    assert dialogs == []

    assert app._guarded(app.controller.open, app.document) is None
    assert dialogs == [("Side Tree", "[Document: outline] A side tree is already open for this document")]


@requires_tk
def test_unsupported_document_reports_kind(app, dialogs):
    app.show_document(Document("* A\n", kind="text", document_id="plain"))
    app._on_toggle_side_tree(app.document)
    assert len(dialogs) == 1
    assert "Documents of kind 'text' are not supported" in dialogs[0][1]


@requires_tk
def test_status_names_heading_under_cursor(app):
    app.show_document(Document("* Alpha\nbody\n", kind="org", name="notes.org"))
    app.document.point = 3
    app._on_cursor_moved(app.document)
    assert app.status_label.cget("text") == "notes.org  line 1  level 1: Alpha"

    app.document.point = 10
    app._on_cursor_moved(app.document)
    assert app.status_label.cget("text") == "notes.org  line 2"
