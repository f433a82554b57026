from __future__ import annotations

"""List-panel model backing a side tree view.

The panel holds the ordered heading rows of one document and the index of
the highlighted row. It knows nothing about Tk: widgets subscribe as
listeners and redraw when rows are replaced, the highlight moves or the panel
closes.
"""

import uuid
from typing import List, Optional, Protocol, Sequence, Tuple

from side_tree.core.models.heading import HeadingRecord

__all__ = ["PanelListener", "TreePanel"]


class PanelListener(Protocol):
    def on_entries_replaced(self, panel: "TreePanel") -> None: ...

    def on_cursor_moved(self, panel: "TreePanel") -> None: ...

    def on_closed(self, panel: "TreePanel") -> None: ...


class TreePanel:
    """Ordered, wholesale-replaceable rows plus a highlighted row."""

    def __init__(self, document_id: str, *, panel_id: Optional[str] = None) -> None:
        self.id: str = panel_id or f"side-tree-{uuid.uuid4().hex[:8]}"
        self.document_id: str = document_id
        self._entries: Tuple[HeadingRecord, ...] = ()
        self._cursor: int = 0
        self._live: bool = True
        self._listeners: List[PanelListener] = []

    @property
    def entries(self) -> Tuple[HeadingRecord, ...]:
        return self._entries

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def is_live(self) -> bool:
        return self._live

    @property
    def current_entry(self) -> Optional[HeadingRecord]:
        if not self._entries:
            return None
        return self._entries[self._cursor]

    def replace_entries(self, entries: Sequence[HeadingRecord]) -> None:
        """Swap in a new row list; the cursor is clamped to the new length."""
        self._entries = tuple(entries)
        self._cursor = min(self._cursor, max(0, len(self._entries) - 1))
        for listener in list(self._listeners):
            listener.on_entries_replaced(self)

    def set_cursor(self, index: int) -> bool:
        """Highlight row ``index`` (clamped). Returns True if the highlight moved."""
        if not self._entries:
            return False
        index = min(max(index, 0), len(self._entries) - 1)
        if index == self._cursor:
            return False
        self._cursor = index
        for listener in list(self._listeners):
            listener.on_cursor_moved(self)
        return True

    def move_cursor(self, delta: int) -> bool:
        """Move the highlight by ``delta`` rows; False when already at the edge."""
        return self.set_cursor(self._cursor + delta)

    def index_of(self, entry: HeadingRecord) -> int:
        for idx, candidate in enumerate(self._entries):
            if candidate is entry:
                return idx
        return -1

    def add_listener(self, listener: PanelListener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def remove_listener(self, listener: PanelListener) -> None:
        try:
            self._listeners.remove(listener)
        except ValueError:
            pass

    def close(self) -> None:
        if not self._live:
            return
        self._live = False
        listeners, self._listeners = self._listeners, []
        for listener in listeners:
            listener.on_closed(self)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"TreePanel(id={self.id!r}, document={self.document_id!r}, rows={len(self._entries)})"
