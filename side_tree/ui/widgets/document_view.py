from __future__ import annotations

import logging
import tkinter as tk
from tkinter import ttk
from typing import Callable, Optional

from side_tree.core.document import ChangeEvent, Document

logger = logging.getLogger(__name__)


class DocumentView(ttk.Frame):
    """Tk text editor bound to a :class:`Document`.

    The Text widget always holds the full document. Narrowing and folding are
    rendered with elided tags, so edits typed in the widget can be pushed back
    to the document as a single minimal replacement.

    Parameters
    ----------
    master : tk.Widget
        Parent widget.
    document : Document
        Document to display and edit.
    on_cursor_moved : Optional[Callable[[Document], None]], optional
        Invoked after the user moves the cursor (keys or mouse).

    Notes
    -----
    - Cursor moves made by the controller (``document.point = ...``) are
      mirrored into the widget through the document's state observers.
    - Edits made to the document by other code reload the widget content.
    """

    def __init__(
        self,
        master: "tk.Widget",
        document: Document,
        *,
        on_cursor_moved: Optional[Callable[[Document], None]] = None,
    ) -> None:
        super().__init__(master)
        self.document = document
        self._on_cursor_moved = on_cursor_moved
        self._pushing = False

        self._text = tk.Text(self, wrap="word", undo=True, width=80, height=30)
        self._vsb = ttk.Scrollbar(self, orient="vertical", command=self._text.yview)
        self._text.configure(yscrollcommand=self._vsb.set)
        self._text.grid(row=0, column=0, sticky="nsew")
        self._vsb.grid(row=0, column=1, sticky="ns")
        self.columnconfigure(0, weight=1)
        self.rowconfigure(0, weight=1)

        self._text.tag_configure("narrowed-out", elide=True)
        self._text.tag_configure("folded", elide=True)

        self._text.bind("<<Modified>>", self._on_modified, add="+")
        self._text.bind("<KeyRelease>", self._on_user_cursor, add="+")
        self._text.bind("<ButtonRelease-1>", self._on_user_cursor, add="+")

        document.add_change_observer(self._on_document_changed)
        document.add_state_observer(self._on_document_state)
        self._load_text()

    # ------------------------------------------------------------------ Public API

    @property
    def text_widget(self) -> tk.Text:
        return self._text

    def focus_text(self) -> None:
        self._text.focus_set()

    def scroll_to_top(self, offset: int) -> None:
        """Make the line holding ``offset`` the first visible line."""
        index = self._index(self.document.line_start(offset))
        self._text.yview(index)

    def detach(self) -> None:
        self.document.remove_change_observer(self._on_document_changed)
        self.document.remove_state_observer(self._on_document_state)

    # ------------------------------------------------------------------ Offsets

    def _index(self, offset: int) -> str:
        return f"1.0 + {int(offset)} chars"

    def _offset(self, index: str) -> int:
        return len(self._text.get("1.0", index))

    # ------------------------------------------------------------------ Rendering

    def _load_text(self) -> None:
        self._pushing = True
        try:
            self._text.delete("1.0", "end")
            self._text.insert("1.0", self.document.text)
            self._text.edit_reset()
            self._text.edit_modified(False)
        finally:
            self._pushing = False
        self._apply_restriction()
        self._apply_folding()
        self._apply_point()

    def _apply_point(self) -> None:
        index = self._index(self.document.point)
        self._text.mark_set("insert", index)
        self._text.see(index)

    def _apply_restriction(self) -> None:
        self._text.tag_remove("narrowed-out", "1.0", "end")
        if not self.document.is_narrowed:
            return
        start, end = self.document.accessible_start, self.document.accessible_end
        if start > 0:
            self._text.tag_add("narrowed-out", "1.0", self._index(start))
        if end < len(self.document):
            self._text.tag_add("narrowed-out", self._index(end), "end")

    def _apply_folding(self) -> None:
        self._text.tag_remove("folded", "1.0", "end")
        for start, end in self.document.hidden_regions():
            self._text.tag_add("folded", self._index(start), self._index(end))

    # ------------------------------------------------------------------ Events

    def _on_modified(self, _event: tk.Event) -> None:
        if self._pushing or not self._text.edit_modified():
            return
        self._pushing = True
        try:
            self.document.set_text(self._text.get("1.0", "end-1c"))
            self.document.point = self._offset("insert")
        finally:
            self._pushing = False
            self._text.edit_modified(False)

    def _on_user_cursor(self, _event: tk.Event) -> None:
        offset = self._offset("insert")
        if offset == self.document.point:
            return
        self._pushing = True
        try:
            self.document.point = offset
        finally:
            self._pushing = False
        if self.document.point != offset:
            # Clamped by narrowing
            self._apply_point()
        if self._on_cursor_moved is not None:
            try:
                self._on_cursor_moved(self.document)
            except Exception:
                logger.exception("Cursor callback failed")

    def _on_document_changed(self, document: Document, event: ChangeEvent) -> None:
        if self._pushing:
            return
        self._load_text()

    def _on_document_state(self, document: Document, what: str) -> None:
        if what == "restriction":
            self._apply_restriction()
        elif what == "visibility":
            self._apply_folding()
        elif what == "point" and not self._pushing:
            self._apply_point()
