from __future__ import annotations

import logging
import tkinter as tk
from tkinter import ttk
from tkinter import font as tkfont
from typing import Callable, Dict, List, Mapping, Optional, Tuple

from PIL import ImageTk

from side_tree.core.models.panel import TreePanel
from side_tree.core.models.ui_config import SideTreeOptions
from side_tree.ui.widgets.side_tree import markers as _markers
from side_tree.ui.widgets.side_tree import population as _pop

logger = logging.getLogger(__name__)

PanelCallback = Callable[[TreePanel], None]

DEFAULT_PANEL_KEYS: Dict[str, List[str]] = {
    "activate": ["<Return>", "<Double-1>"],
    "next": ["n"],
    "previous": ["p"],
    "update": ["g"],
    "quit": ["q"],
}


class SideTreeWidget(ttk.Frame):
    """Tkinter widget presenting a :class:`TreePanel` as a flat Treeview.

    The widget is a listener of its panel: rows are rebuilt when the panel's
    entries are replaced and the selection follows the panel cursor. User
    gestures are forwarded to callbacks; no controller is imported here.

    Callbacks (each receives the panel):
        - on_activate: primary activation gesture (Return, double-click).
        - on_next / on_previous: step gestures.
        - on_update: manual rescan request.
        - on_quit: close request.

    Notes
    -----
    - Clicking or arrowing through rows moves the panel cursor without
      jumping; activation is explicit.
    - Gesture sequences come from the ``panel`` section of the keymap.
    """

    def __init__(
        self,
        master: "tk.Widget",
        panel: TreePanel,
        *,
        options: Optional[SideTreeOptions] = None,
        keymap: Optional[Mapping[str, List[str]]] = None,
        on_activate: Optional[PanelCallback] = None,
        on_next: Optional[PanelCallback] = None,
        on_previous: Optional[PanelCallback] = None,
        on_update: Optional[PanelCallback] = None,
        on_quit: Optional[PanelCallback] = None,
    ) -> None:
        super().__init__(master)
        self.panel = panel
        self._options = options or SideTreeOptions()
        self._markers: Dict[Tuple[int, str], ImageTk.PhotoImage] = {}
        self._syncing = False
        self._callbacks: Dict[str, Optional[PanelCallback]] = {
            "activate": on_activate,
            "next": on_next,
            "previous": on_previous,
            "update": on_update,
            "quit": on_quit,
        }

        self._tree = ttk.Treeview(self, show="tree", selectmode="browse", height=20)
        self._vsb = ttk.Scrollbar(self, orient="vertical", command=self._tree.yview)
        self._tree.configure(yscrollcommand=self._vsb.set)
        self._tree.grid(row=0, column=0, sticky="nsew")
        self._vsb.grid(row=0, column=1, sticky="ns")
        self.columnconfigure(0, weight=1)
        self.rowconfigure(0, weight=1)

        try:
            char_width = max(1, int(tkfont.nametofont("TkDefaultFont").measure("0")))
        except tk.TclError:
            char_width = 7
        self._tree.column("#0", width=self._options.panel_width * char_width, stretch=True)

        self._tree.bind("<<TreeviewSelect>>", self._on_select_event, add="+")
        self._bind_gestures(keymap or DEFAULT_PANEL_KEYS)

        panel.add_listener(self)
        self.populate()

    # Public API

    def populate(self) -> None:
        """Rebuild all rows from the panel and re-apply the highlight."""
        self._syncing = True
        try:
            _pop.populate_tree(self, self.panel.entries)
        finally:
            self._syncing = False
        self._sync_selection()

    def focus_tree(self) -> None:
        self._tree.focus_set()
        current = str(self.panel.cursor)
        if self._tree.exists(current):
            self._tree.focus(current)

    def selected_index(self) -> Optional[int]:
        selection = self._tree.selection()
        if not selection:
            return None
        return int(selection[0])

    def destroy(self) -> None:
        self.panel.remove_listener(self)
        super().destroy()

    # Panel listener

    def on_entries_replaced(self, panel: TreePanel) -> None:
        self.populate()

    def on_cursor_moved(self, panel: TreePanel) -> None:
        self._sync_selection()

    def on_closed(self, panel: TreePanel) -> None:
        self._callbacks = {name: None for name in self._callbacks}

    # Internal helpers

    def _marker_for(self, level: int) -> ImageTk.PhotoImage:
        return _markers.get_marker(self, level, self._options.color_for_level(level))

    def _sync_selection(self) -> None:
        iid = str(self.panel.cursor)
        if not self._tree.exists(iid):
            return
        self._syncing = True
        try:
            self._tree.selection_set(iid)
            self._tree.focus(iid)
            self._tree.see(iid)
        finally:
            self._syncing = False

    def _bind_gestures(self, keymap: Mapping[str, List[str]]) -> None:
        for action in self._callbacks:
            for sequence in keymap.get(action, DEFAULT_PANEL_KEYS.get(action, [])):
                try:
                    self._tree.bind(sequence, lambda _e, a=action: self._dispatch(a))
                except tk.TclError:
                    logger.warning("Ignoring invalid key sequence %r for panel action %s", sequence, action)

    def _dispatch(self, action: str) -> str:
        callback = self._callbacks.get(action)
        if callback is not None:
            try:
                callback(self.panel)
            except Exception:
                # Never let a callback error escape into the Tk mainloop
                logger.exception("Side tree action %s failed", action)
        return "break"

    def _on_select_event(self, _event: tk.Event) -> None:
        if self._syncing:
            return
        index = self.selected_index()
        if index is not None:
            self.panel.set_cursor(index)
