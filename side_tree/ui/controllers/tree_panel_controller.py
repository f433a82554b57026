from __future__ import annotations

"""Controller binding side tree panels to their source documents.

The controller owns the ``document id -> panel`` bindings, keeps each panel's
rows in sync with its document through a debounced refresh, and translates
panel activations into cursor moves in the document (and back). It contains
no UI toolkit code: views, focus, dialogs and timers are reached through the
:class:`~side_tree.ui.controllers.host.EditorHost` it is given, and every
operation receives the document or panel it acts on explicitly.
"""

import logging
from typing import Dict, Optional, Union

from side_tree.core.document import ChangeEvent, ChangeObserver, Document
from side_tree.core.exceptions import AlreadyTreedError, NoHeadingsFoundError
from side_tree.core.models.heading import HeadingRecord
from side_tree.core.models.panel import TreePanel
from side_tree.core.models.ui_config import SideTreeOptions
from side_tree.core.services.heading_indexer import HeadingIndexer
from side_tree.core.services.refresh_scheduler import DebouncedRefresh
from side_tree.ui.controllers.host import EditorHost

logger = logging.getLogger(__name__)

__all__ = ["TreePanelController"]

StepTarget = Union[TreePanel, Document]


class TreePanelController:
    """Coordinate side tree panels with documents.

    Parameters
    ----------
    host : EditorHost
        Editor surface used for views, focus, prompts and timers.
    indexer : HeadingIndexer, optional
        Heading scanner; built from ``options.heading_patterns`` when omitted.
    options : SideTreeOptions, optional
        Behaviour options (``narrow_on_jump``, ``debounce_ms``...).

    Notes
    -----
    - At most one live panel is bound to a document.
    - Panel rows are always replaced wholesale by a fresh scan.
    - Closing a panel does not cancel a pending refresh: when the timer fires
      and finds no panel, the change observer unregisters itself.
    """

    def __init__(
        self,
        host: EditorHost,
        indexer: Optional[HeadingIndexer] = None,
        options: Optional[SideTreeOptions] = None,
    ) -> None:
        self.host = host
        self.options: SideTreeOptions = options or SideTreeOptions()
        self.indexer: HeadingIndexer = indexer or HeadingIndexer(self.options.heading_patterns)

        self._panels: Dict[str, TreePanel] = {}
        self._observers: Dict[str, ChangeObserver] = {}
        self._refreshes: Dict[str, DebouncedRefresh] = {}

    # ---------------------------------------------------------------------------------
    # Bindings
    # ---------------------------------------------------------------------------------

    def panel_for(self, document: Document) -> Optional[TreePanel]:
        """Return the live panel bound to ``document``, if any."""
        panel = self._panels.get(document.id)
        if panel is not None and not panel.is_live:
            del self._panels[document.id]
            return None
        return panel

    def is_observing(self, document: Document) -> bool:
        observer = self._observers.get(document.id)
        return observer is not None and document.has_change_observer(observer)

    def refresh_for(self, document: Document) -> Optional[DebouncedRefresh]:
        return self._refreshes.get(document.id)

    # ---------------------------------------------------------------------------------
    # Opening and closing
    # ---------------------------------------------------------------------------------

    def open(self, document: Document) -> TreePanel:
        """Open a side tree for ``document`` and focus it.

        Raises
        ------
        AlreadyTreedError
            A live panel is already bound to the document.
        NotASupportedDocumentError
            The document kind has no heading syntax.
        NoHeadingsFoundError
            The document has no headings; no panel is created.
        """
        if self.panel_for(document) is not None:
            raise AlreadyTreedError(document.id)
        # Scan before creating anything so failures leave no panel behind
        entries = self.indexer.scan(document)

        panel = TreePanel(document.id)
        self._panels[document.id] = panel
        document.add_close_observer(self.on_document_closed)
        self.host.display_panel(panel, document, side=self.options.display_side, width=self.options.panel_width)
        if self.options.live_update:
            self._start_observing(document)

        panel.replace_entries(entries)
        self.refresh_highlight(document)
        self.host.focus_panel(panel)
        logger.info("Opened side tree %s for %s (%d headings)", panel.id, document.id, len(entries))
        return panel

    def close(self, panel: TreePanel) -> None:
        """Close ``panel`` and remove its view; pending refreshes are left to expire."""
        if self._panels.get(panel.document_id) is panel:
            del self._panels[panel.document_id]
        was_live = panel.is_live
        panel.close()
        if was_live:
            self.host.remove_panel(panel)
            logger.info("Closed side tree %s", panel.id)

    def toggle(self, document: Document) -> Optional[TreePanel]:
        """Close the panel bound to ``document`` or open one. Returns the open panel."""
        panel = self.panel_for(document)
        if panel is not None:
            self.close(panel)
            return None
        return self.open(document)

    def on_document_closed(self, document: Document) -> None:
        """Destroy the binding of a killed document; its panel is left dangling."""
        panel = self._panels.pop(document.id, None)
        self._stop_observing(document, cancel=True)
        if panel is not None:
            logger.info("Document %s closed; side tree %s no longer bound", document.id, panel.id)

    # ---------------------------------------------------------------------------------
    # Live updates
    # ---------------------------------------------------------------------------------

    def on_document_changed(self, document: Document, event: Optional[ChangeEvent] = None) -> None:
        """Schedule a debounced refresh; coalesced into any pending one."""
        refresh = self._refreshes.get(document.id)
        if refresh is None:
            refresh = DebouncedRefresh(
                lambda: self._on_refresh_timer(document),
                delay_ms=self.options.debounce_ms,
                after=self.host.after,
                after_cancel=self.host.after_cancel,
                name=f"side tree refresh ({document.id})",
            )
            self._refreshes[document.id] = refresh
        refresh.schedule()

    def update(self, document: Document) -> bool:
        """Rescan ``document`` now and replace its panel rows.

        A document without headings keeps its previous rows; the error is
        logged and reported through the host. Returns True when rows changed.
        """
        panel = self.panel_for(document)
        if panel is None:
            return False
        try:
            entries = self.indexer.scan(document)
        except NoHeadingsFoundError as exc:
            logger.warning("Side tree %s not updated: %s", panel.id, exc)
            self.host.show_error("Side Tree", str(exc))
            return False
        panel.replace_entries(entries)
        self.refresh_highlight(document)
        return True

    def refresh_highlight(self, document: Document, ordinal: Optional[int] = None) -> Optional[int]:
        """Highlight the row of the heading containing the cursor.

        ``ordinal`` (1-based) skips the lookup when the caller already knows
        it. The row list itself is not touched. Returns the highlighted index.
        """
        panel = self.panel_for(document)
        if panel is None:
            return None
        if ordinal is None:
            ordinal = self.indexer.locate_ordinal(document)
        panel.set_cursor(max(ordinal, 1) - 1)
        return panel.cursor

    # ---------------------------------------------------------------------------------
    # Navigation
    # ---------------------------------------------------------------------------------

    def activate_entry(self, panel: TreePanel, entry: Optional[HeadingRecord] = None, *,
                       from_step: bool = False) -> bool:
        """Jump to ``entry`` (default: highlighted row) in its document.

        When the document is gone, offers to close the panel instead. With
        ``from_step`` focus goes back to the panel after the jump.
        Returns True when the cursor was moved.
        """
        entry = entry if entry is not None else panel.current_entry
        if entry is None:
            return False
        document = entry.document
        if document is None or not document.is_live or entry.offset is None:
            if self.host.confirm("Side Tree", "The base document has been closed. Close this side tree?"):
                self.close(panel)
            return False

        offset = entry.offset
        self.host.focus_document(document)
        document.show_all()
        document.widen()
        document.point = offset
        self.host.scroll_to_top(document, offset)
        if self.options.narrow_on_jump:
            self.indexer.narrow_to_subtree(document, offset)

        index = panel.index_of(entry)
        if index >= 0:
            panel.set_cursor(index)
        if from_step:
            self.host.focus_panel(panel)
        logger.debug("Jumped to '%s' in %s", entry.display_text, document.id)
        return True

    def step_next(self, target: StepTarget) -> bool:
        """Go to the next heading from the panel or from the document."""
        if isinstance(target, TreePanel):
            return self._step_panel(target, 1)
        return self._step_document(target, forward=True)

    def step_previous(self, target: StepTarget) -> bool:
        """Go to the previous heading from the panel or from the document."""
        if isinstance(target, TreePanel):
            return self._step_panel(target, -1)
        return self._step_document(target, forward=False)

    # ---------------------------------------------------------------------------------
    # Internal helpers
    # ---------------------------------------------------------------------------------

    def _step_panel(self, panel: TreePanel, delta: int) -> bool:
        if not panel.move_cursor(delta):
            return False
        return self.activate_entry(panel, panel.current_entry, from_step=True)

    def _step_document(self, document: Document, *, forward: bool) -> bool:
        narrow = self.options.narrow_on_jump
        if narrow:
            document.widen()
        if forward:
            moved = self.indexer.next_heading(document)
        else:
            moved = self.indexer.previous_heading(document)
        ordinal = self.indexer.locate_ordinal(document)
        self.refresh_highlight(document, ordinal)
        # No enclosing subtree before the first heading
        if narrow and ordinal > 0:
            self.indexer.narrow_to_subtree(document)
        return moved is not None

    def _start_observing(self, document: Document) -> None:
        if self.is_observing(document):
            return

        def observer(doc: Document, event: ChangeEvent) -> None:
            self.on_document_changed(doc, event)

        self._observers[document.id] = observer
        document.add_change_observer(observer)

    def _stop_observing(self, document: Document, *, cancel: bool = False) -> None:
        observer = self._observers.pop(document.id, None)
        if observer is not None:
            document.remove_change_observer(observer)
        refresh = self._refreshes.pop(document.id, None)
        if refresh is not None and cancel:
            refresh.cancel()

    def _on_refresh_timer(self, document: Document) -> None:
        if self.panel_for(document) is None:
            self._stop_observing(document)
            logger.debug("No side tree for %s; change observer removed", document.id)
            return
        self.update(document)
