# -*- coding: utf-8 -*-
"""Tk-based GUI front-end for the side tree.

Exposes :class:`SideTreeApp`, instantiated by ``run.py``. The app is the
editor host: it owns the document view, creates panel widgets on request and
is the only place where "which document / panel has focus" is resolved
before calling into the controller.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional

import tkinter as tk
from tkinter import filedialog, messagebox, ttk

from side_tree.config import ConfigManager
from side_tree.core.document import Document
from side_tree.core.exceptions import SideTreeError
from side_tree.core.models.panel import TreePanel
from side_tree.core.models.ui_config import SideTreeOptions
from side_tree.ui.controllers.host import EditorHost
from side_tree.ui.controllers.tree_panel_controller import TreePanelController
from side_tree.ui.widgets.document_view import DocumentView
from side_tree.ui.widgets.side_tree_widget import SideTreeWidget
from side_tree.version import get_app_version

logger = logging.getLogger(__name__)

__all__ = ["SideTreeApp"]

_FILE_TYPES = [
    ("Outline files", "*.org *.md *.markdown"),
    ("Org files", "*.org"),
    ("Markdown files", "*.md *.markdown"),
    ("All files", "*.*"),
]

_DEFAULT_DOCUMENT_KEYS: Dict[str, List[str]] = {
    "toggle_side_tree": ["<F8>"],
    "next_heading": ["<Alt-n>"],
    "previous_heading": ["<Alt-p>"],
    "toggle_fold": ["<Tab>"],
    "save": ["<Control-s>"],
}


class SideTreeApp(EditorHost):
    """Main application window: a document editor with side tree panels."""

    def __init__(self, root: tk.Tk, *, config: Optional[ConfigManager] = None) -> None:
        self.root = root
        config = config or ConfigManager()
        self.options = SideTreeOptions.from_config(config.get_side_tree_config())
        self.keymap: Dict[str, Any] = dict(config.get_keymap() or {})
        self.controller = TreePanelController(self, options=self.options)

        self.document: Optional[Document] = None
        self.document_view: Optional[DocumentView] = None
        self._panel_widgets: Dict[str, SideTreeWidget] = {}

        self.root.title(f"Side Tree {get_app_version()}")
        self._build_menu()
        self.paned = ttk.PanedWindow(self.root, orient="horizontal")
        self.paned.pack(expand=True, fill="both")
        self.status_label = ttk.Label(self.root, text="", anchor="w")
        self.status_label.pack(fill="x", side="bottom")

        self.root.protocol("WM_DELETE_WINDOW", self.on_close)

    # ------------------------------------------------------------------
    # Documents
    # ------------------------------------------------------------------

    def open_file(self, path: str | Path) -> Optional[Document]:
        try:
            document = Document.from_file(path)
        except (OSError, UnicodeDecodeError) as exc:
            logger.error("Could not open %s: %s", path, exc)
            self.show_error("Open File", f"Could not open {path}:\n\n{exc}")
            return None
        self.show_document(document)
        return document

    def show_document(self, document: Document) -> None:
        """Replace the current document (closing it) with ``document``."""
        self.close_document()
        self.document = document
        self.document_view = DocumentView(self.paned, document, on_cursor_moved=self._on_cursor_moved)
        self.paned.add(self.document_view, weight=4)
        self._bind_document_gestures(self.document_view.text_widget, document)
        self.document_view.focus_text()
        self._set_status(f"{document.name} ({document.kind})")

    def close_document(self) -> None:
        """Kill the current document; open side trees stay, unbound."""
        if self.document is None:
            return
        if self.document_view is not None:
            self.document_view.detach()
            self.paned.forget(self.document_view)
            self.document_view.destroy()
            self.document_view = None
        self.document.close()
        self.document = None
        self._set_status("No document")

    # ------------------------------------------------------------------
    # EditorHost
    # ------------------------------------------------------------------

    def display_panel(self, panel: TreePanel, document: Document, *, side: str, width: int) -> None:
        widget = SideTreeWidget(
            self.paned,
            panel,
            options=self.options,
            keymap=self.keymap.get("panel"),
            on_activate=self._on_panel_activate,
            on_next=lambda p: self._guarded(self.controller.step_next, p),
            on_previous=lambda p: self._guarded(self.controller.step_previous, p),
            on_update=self._on_panel_update,
            on_quit=self.controller.close,
        )
        if side == "left":
            self.paned.insert(0, widget, weight=1)
        else:
            self.paned.add(widget, weight=1)
        self._panel_widgets[panel.id] = widget

    def remove_panel(self, panel: TreePanel) -> None:
        widget = self._panel_widgets.pop(panel.id, None)
        if widget is None:
            return
        try:
            self.paned.forget(widget)
        except tk.TclError:
            pass
        widget.destroy()
        if self.document_view is not None:
            self.document_view.focus_text()

    def focus_document(self, document: Document) -> None:
        if self.document_view is not None and self.document_view.document is document:
            self.document_view.focus_text()

    def focus_panel(self, panel: TreePanel) -> None:
        widget = self._panel_widgets.get(panel.id)
        if widget is not None:
            widget.focus_tree()

    def scroll_to_top(self, document: Document, offset: int) -> None:
        if self.document_view is not None and self.document_view.document is document:
            self.document_view.scroll_to_top(offset)

    def confirm(self, title: str, message: str) -> bool:
        return bool(messagebox.askyesno(title, message, parent=self.root))

    def show_error(self, title: str, message: str) -> None:
        messagebox.showerror(title, message, parent=self.root)

    def after(self, delay_ms: int, callback: Callable[[], None]) -> Any:
        return self.root.after(delay_ms, callback)

    def after_cancel(self, handle: Any) -> None:
        self.root.after_cancel(handle)

    # ------------------------------------------------------------------
    # Menu and gestures
    # ------------------------------------------------------------------

    def _build_menu(self) -> None:
        menubar = tk.Menu(self.root)
        file_menu = tk.Menu(menubar, tearoff=False)
        file_menu.add_command(label="Open…", command=self._on_open_clicked)
        file_menu.add_command(label="Save", command=lambda: self._on_save(self.document))
        file_menu.add_command(label="Close Document", command=self.close_document)
        file_menu.add_separator()
        file_menu.add_command(label="Quit", command=self.on_close)
        menubar.add_cascade(label="File", menu=file_menu)

        view_menu = tk.Menu(menubar, tearoff=False)
        view_menu.add_command(label="Toggle Side Tree", command=lambda: self._on_toggle_side_tree(self.document))
        view_menu.add_command(label="Next Heading", command=lambda: self._on_document_step(self.document, True))
        view_menu.add_command(label="Previous Heading", command=lambda: self._on_document_step(self.document, False))
        menubar.add_cascade(label="View", menu=view_menu)

        help_menu = tk.Menu(menubar, tearoff=False)
        help_menu.add_command(label="About", command=self._on_about)
        menubar.add_cascade(label="Help", menu=help_menu)
        self.root.config(menu=menubar)

    def _bind_document_gestures(self, widget: tk.Text, document: Document) -> None:
        actions: Dict[str, Callable[[], None]] = {
            "toggle_side_tree": lambda: self._on_toggle_side_tree(document),
            "next_heading": lambda: self._on_document_step(document, True),
            "previous_heading": lambda: self._on_document_step(document, False),
            "toggle_fold": lambda: self._on_toggle_fold(document),
            "save": lambda: self._on_save(document),
        }
        keymap: Mapping[str, List[str]] = self.keymap.get("document") or _DEFAULT_DOCUMENT_KEYS
        for action, handler in actions.items():
            for sequence in keymap.get(action, _DEFAULT_DOCUMENT_KEYS[action]):
                try:
                    widget.bind(sequence, self._gesture(handler))
                except tk.TclError:
                    logger.warning("Ignoring invalid key sequence %r for %s", sequence, action)

    @staticmethod
    def _gesture(handler: Callable[[], None]) -> Callable[[tk.Event], str]:
        def callback(_event: tk.Event) -> str:
            try:
                handler()
            except Exception:
                # Never let a handler error escape into the Tk mainloop
                logger.exception("Document gesture failed")
            return "break"
        return callback

    def _guarded(self, action: Callable[..., Any], *args: Any) -> Any:
        """Run a controller action, reporting side tree errors in a dialog."""
        try:
            return action(*args)
        except SideTreeError as exc:
            logger.info("Side tree action failed: %s", exc)
            self.show_error("Side Tree", str(exc))
            return None

    def _on_toggle_side_tree(self, document: Optional[Document]) -> None:
        if document is None:
            self._set_status("No document")
            return
        self._guarded(self.controller.toggle, document)

    def _on_document_step(self, document: Optional[Document], forward: bool) -> None:
        if document is None:
            return
        if forward:
            self._guarded(self.controller.step_next, document)
        else:
            self._guarded(self.controller.step_previous, document)

    def _on_toggle_fold(self, document: Document) -> None:
        self._guarded(self.controller.indexer.toggle_fold, document)

    def _on_cursor_moved(self, document: Document) -> None:
        self.controller.refresh_highlight(document)
        self._set_status(self._describe_position(document))

    def _describe_position(self, document: Document) -> str:
        line = document.line_number(document.point)
        try:
            heading = self.controller.indexer.heading_at(document, document.point)
        except SideTreeError:
            heading = None
        if heading is None:
            return f"{document.name}  line {line}"
        level, title = heading
        return f"{document.name}  line {line}  level {level}: {title}"

    def _on_panel_activate(self, panel: TreePanel) -> None:
        self._guarded(self.controller.activate_entry, panel)

    def _on_panel_update(self, panel: TreePanel) -> None:
        if self.document is not None and self.document.id == panel.document_id:
            self._guarded(self.controller.update, self.document)

    def _on_save(self, document: Optional[Document]) -> None:
        if document is None:
            return
        path = document.path
        if path is None:
            chosen = filedialog.asksaveasfilename(parent=self.root, filetypes=_FILE_TYPES)
            if not chosen:
                return
            path = Path(chosen)
        try:
            document.save(path)
            self._set_status(f"Saved {path}")
        except OSError as exc:
            logger.error("Could not save %s: %s", path, exc)
            self.show_error("Save File", f"Could not save {path}:\n\n{exc}")

    def _on_open_clicked(self) -> None:
        chosen = filedialog.askopenfilename(parent=self.root, filetypes=_FILE_TYPES)
        if chosen:
            self.open_file(chosen)

    def _on_about(self) -> None:
        messagebox.showinfo(
            "About Side Tree",
            f"Side Tree {get_app_version()}\n\nHeading outline panel for Org and Markdown documents.",
            parent=self.root,
        )

    def _set_status(self, text: str) -> None:
        self.status_label.config(text=text)

    def on_close(self) -> None:
        logger.info("Closing application")
        self.close_document()
        self.root.destroy()
