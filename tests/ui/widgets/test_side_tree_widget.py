import tkinter as tk

import pytest

from side_tree.core.models.ui_config import SideTreeOptions
from side_tree.ui.widgets.side_tree.markers import marker_image
from side_tree.ui.widgets.side_tree.population import row_text


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
def tk_root():
    root = tk.Tk()
    # Avoid showing a window during tests
    root.withdraw()
    yield root
    try:
        root.update_idletasks()
    except tk.TclError:
        pass
    root.destroy()


def _row_texts(widget):
    tree = widget._tree
    return [tree.item(iid, "text") for iid in tree.get_children("")]


@pytest.fixture
def opened_panel(controller, sample_document):
    return controller.open(sample_document)


def test_row_text_indents_by_level(indexer, sample_document):
    records = indexer.scan(sample_document)
    assert row_text(records[0]) == "Alpha"
    assert row_text(records[1]) == "  Alpha child"


def test_marker_image_is_transparent_dot():
    img = marker_image(1, "#FF0000")
    assert img.mode == "RGBA"
    assert img.size == (16, 16)
    assert img.getpixel((8, 8)) == (255, 0, 0, 255)
    assert img.getpixel((0, 0))[3] == 0


@requires_tk
def test_widget_lists_panel_rows(tk_root, opened_panel):
    from side_tree.ui.widgets.side_tree_widget import SideTreeWidget

    widget = SideTreeWidget(tk_root, opened_panel, options=SideTreeOptions())
    assert _row_texts(widget) == ["Alpha", "  Alpha child", "Beta", "Alpha"]
    assert widget.selected_index() == 0


@requires_tk
def test_widget_follows_panel_cursor_and_entries(tk_root, opened_panel, sample_document, controller):
    from side_tree.ui.widgets.side_tree_widget import SideTreeWidget

    widget = SideTreeWidget(tk_root, opened_panel, options=SideTreeOptions(fontify=False))
    opened_panel.set_cursor(2)
    assert widget.selected_index() == 2

    sample_document.insert(len(sample_document), "* Gamma\n")
    controller.update(sample_document)
    assert _row_texts(widget)[-1] == "Gamma"


@requires_tk
def test_widget_dispatches_gestures_to_callbacks(tk_root, opened_panel, controller):
    from side_tree.ui.widgets.side_tree_widget import SideTreeWidget

    seen = []
    widget = SideTreeWidget(
        tk_root,
        opened_panel,
        on_activate=lambda p: seen.append(("activate", p.cursor)),
        on_quit=controller.close,
    )
    assert widget._dispatch("activate") == "break"
    assert seen == [("activate", 0)]

    widget._dispatch("quit")
    assert not opened_panel.is_live
    # Callbacks are dropped once the panel is closed
    widget._dispatch("activate")
    assert seen == [("activate", 0)]


@requires_tk
def test_destroyed_widget_stops_listening(tk_root, opened_panel, controller, sample_document):
    from side_tree.ui.widgets.side_tree_widget import SideTreeWidget

    widget = SideTreeWidget(tk_root, opened_panel, options=SideTreeOptions(fontify=False))
    widget.destroy()
    sample_document.insert(len(sample_document), "* Gamma\n")
    controller.update(sample_document)
    assert len(opened_panel.entries) == 5
    assert widget not in opened_panel._listeners
