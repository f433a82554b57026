from __future__ import annotations

"""In-memory document buffer used by the side tree.

This module is intentionally free of UI code. A :class:`Document` owns the
full text of an outline file together with the editor state the side tree
needs to cooperate with: a cursor, an optional view restriction (narrowing),
hidden regions (folding) and change notifications. Positions handed out by
:meth:`Document.create_position` are live markers that follow their text
across edits made elsewhere in the document.
"""

import logging
import uuid
import weakref
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional, Tuple

logger = logging.getLogger(__name__)

__all__ = ["ChangeEvent", "Document", "StablePosition", "kind_for_path"]

_KIND_BY_SUFFIX = {
    ".org": "org",
    ".md": "markdown",
    ".markdown": "markdown",
}


def kind_for_path(path: str | Path) -> str:
    """Return the document kind implied by a file extension (``text`` if unknown)."""
    return _KIND_BY_SUFFIX.get(Path(path).suffix.lower(), "text")


@dataclass(frozen=True)
class ChangeEvent:
    """Description of a single text replacement.

    Attributes
    ----------
    start
        Offset where the replacement begins.
    old_end
        End offset of the replaced text before the edit.
    new_end
        End offset of the inserted text after the edit.
    """

    start: int
    old_end: int
    new_end: int

    @property
    def deleted_length(self) -> int:
        return self.old_end - self.start

    @property
    def inserted_length(self) -> int:
        return self.new_end - self.start


class StablePosition:
    """A position in a document that tracks its text across edits.

    Text inserted before the position shifts it right; text deleted around it
    collapses it to the start of the deletion. Insertion exactly at the
    position moves it only when ``insertion_type`` is true. Once the owning
    document is closed the position is detached and ``offset`` becomes None.
    """

    def __init__(self, document: "Document", offset: int, insertion_type: bool = False) -> None:
        self._document: Optional[Document] = document
        self._offset: Optional[int] = offset
        self.insertion_type = insertion_type

    @property
    def document(self) -> Optional["Document"]:
        return self._document

    @property
    def offset(self) -> Optional[int]:
        return self._offset

    @property
    def is_live(self) -> bool:
        return self._document is not None and self._document.is_live

    def _adjust(self, start: int, old_end: int, inserted: int) -> None:
        offset = self._offset
        if offset is None or offset < start:
            return
        if offset > old_end or (offset == old_end and old_end > start):
            self._offset = offset + inserted - (old_end - start)
        else:
            # Inside the replaced span, or a pure insertion at the position
            self._offset = start + (inserted if self.insertion_type else 0)

    def _detach(self) -> None:
        self._document = None
        self._offset = None

    def __repr__(self) -> str:
        owner = self._document.id if self._document is not None else "detached"
        return f"StablePosition({owner}@{self._offset})"


ChangeObserver = Callable[["Document", ChangeEvent], None]
StateObserver = Callable[["Document", str], None]
CloseObserver = Callable[["Document"], None]


class Document:
    """Editable text buffer with cursor, narrowing, folding and observers.

    Parameters
    ----------
    text : str, optional
        Initial content.
    kind : str, default="org"
        Document kind; selects the heading syntax used by the indexer.
    name : str, optional
        Display name (file name when loaded from disk).
    document_id : str, optional
        Stable identifier; generated when omitted.
    path : Path, optional
        Backing file, used by :meth:`save`.

    Notes
    -----
    - :attr:`text` always returns the full content regardless of narrowing.
    - State observers receive one of ``"point"``, ``"restriction"`` or
      ``"visibility"`` so views can redraw the relevant part only.
    """

    def __init__(
        self,
        text: str = "",
        *,
        kind: str = "org",
        name: Optional[str] = None,
        document_id: Optional[str] = None,
        path: Optional[Path] = None,
    ) -> None:
        self.id: str = document_id or uuid.uuid4().hex[:12]
        self.kind: str = kind
        self.name: str = name or self.id
        self.path: Optional[Path] = path
        self._text: str = text
        self._live: bool = True

        self._positions: "weakref.WeakSet[StablePosition]" = weakref.WeakSet()
        self._point = self.create_position(0, insertion_type=True)
        self._restriction: Optional[Tuple[StablePosition, StablePosition]] = None
        self._hidden: List[Tuple[StablePosition, StablePosition]] = []

        self._change_observers: List[ChangeObserver] = []
        self._state_observers: List[StateObserver] = []
        self._close_observers: List[CloseObserver] = []

    @classmethod
    def from_file(cls, path: str | Path, kind: Optional[str] = None) -> "Document":
        """Load a document from disk, inferring the kind from the extension."""
        file_path = Path(path)
        text = file_path.read_text(encoding="utf-8")
        doc = cls(text, kind=kind or kind_for_path(file_path), name=file_path.name, path=file_path)
        logger.info("Loaded %s (%s, %d chars)", file_path, doc.kind, len(text))
        return doc

    def save(self, path: Optional[str | Path] = None) -> Path:
        """Write the full text to ``path`` (or the backing file) and return it."""
        target = Path(path) if path is not None else self.path
        if target is None:
            raise ValueError("Document has no backing file")
        target.write_text(self._text, encoding="utf-8")
        self.path = target
        logger.info("Saved %s", target)
        return target

    # ------------------------------------------------------------------
    # Text access
    # ------------------------------------------------------------------
    @property
    def text(self) -> str:
        return self._text

    def __len__(self) -> int:
        return len(self._text)

    @property
    def is_live(self) -> bool:
        return self._live

    @property
    def accessible_start(self) -> int:
        if self._restriction is None:
            return 0
        return self._restriction[0].offset or 0

    @property
    def accessible_end(self) -> int:
        if self._restriction is None:
            return len(self._text)
        end = self._restriction[1].offset
        return len(self._text) if end is None else end

    @property
    def accessible_text(self) -> str:
        return self._text[self.accessible_start:self.accessible_end]

    @property
    def is_narrowed(self) -> bool:
        return self._restriction is not None

    def line_start(self, offset: int) -> int:
        offset = self._clamp(offset)
        return self._text.rfind("\n", 0, offset) + 1

    def line_end(self, offset: int) -> int:
        offset = self._clamp(offset)
        end = self._text.find("\n", offset)
        return len(self._text) if end == -1 else end

    def line_number(self, offset: int) -> int:
        """Return the 1-based line number containing ``offset``."""
        return self._text.count("\n", 0, self._clamp(offset)) + 1

    # ------------------------------------------------------------------
    # Positions and cursor
    # ------------------------------------------------------------------
    def create_position(self, offset: int, insertion_type: bool = False) -> StablePosition:
        self._ensure_live()
        pos = StablePosition(self, self._clamp(offset), insertion_type)
        self._positions.add(pos)
        return pos

    @property
    def point(self) -> int:
        return self._point.offset or 0

    @point.setter
    def point(self, offset: int) -> None:
        clamped = min(max(offset, self.accessible_start), self.accessible_end)
        if clamped == self._point.offset:
            return
        self._point._offset = clamped
        self._notify_state("point")

    # ------------------------------------------------------------------
    # Editing
    # ------------------------------------------------------------------
    def replace(self, start: int, end: int, new_text: str) -> ChangeEvent:
        """Replace ``text[start:end]`` with ``new_text`` and notify observers."""
        self._ensure_live()
        start = self._clamp(start)
        end = max(start, self._clamp(end))
        self._text = self._text[:start] + new_text + self._text[end:]
        for pos in list(self._positions):
            pos._adjust(start, end, len(new_text))
        self._drop_collapsed_hidden_regions()
        event = ChangeEvent(start=start, old_end=end, new_end=start + len(new_text))
        for observer in list(self._change_observers):
            observer(self, event)
        return event

    def insert(self, offset: int, new_text: str) -> ChangeEvent:
        return self.replace(offset, offset, new_text)

    def delete(self, start: int, end: int) -> ChangeEvent:
        return self.replace(start, end, "")

    def set_text(self, new_text: str) -> Optional[ChangeEvent]:
        """Replace the content with ``new_text`` as one minimal edit.

        Only the span between the common prefix and common suffix is replaced,
        so positions outside the changed span keep tracking their text.
        Returns None when the content is unchanged.
        """
        old = self._text
        if new_text == old:
            return None
        limit = min(len(old), len(new_text))
        prefix = 0
        while prefix < limit and old[prefix] == new_text[prefix]:
            prefix += 1
        suffix = 0
        while (suffix < limit - prefix
               and old[len(old) - 1 - suffix] == new_text[len(new_text) - 1 - suffix]):
            suffix += 1
        return self.replace(prefix, len(old) - suffix, new_text[prefix:len(new_text) - suffix])

    # ------------------------------------------------------------------
    # Narrowing
    # ------------------------------------------------------------------
    def narrow(self, start: int, end: int) -> None:
        """Restrict the accessible region to ``[start, end)``."""
        self._ensure_live()
        start, end = sorted((self._clamp(start), self._clamp(end)))
        self._restriction = (self.create_position(start), self.create_position(end, insertion_type=True))
        # Setter clamps to the new region and notifies "point" when it moves
        self.point = self.point
        self._notify_state("restriction")

    def widen(self) -> None:
        if self._restriction is None:
            return
        self._restriction = None
        self._notify_state("restriction")

    # ------------------------------------------------------------------
    # Folding
    # ------------------------------------------------------------------
    def hide_region(self, start: int, end: int) -> None:
        """Make ``[start, end)`` invisible; the text itself is untouched."""
        self._ensure_live()
        start, end = sorted((self._clamp(start), self._clamp(end)))
        if start == end:
            return
        self._hidden.append((self.create_position(start), self.create_position(end)))
        self._notify_state("visibility")

    def reveal_region(self, start: int, end: int) -> bool:
        """Remove hidden regions overlapping ``[start, end)``. Returns True if any."""
        kept = [(s, e) for s, e in self._hidden
                if (e.offset or 0) <= start or (s.offset or 0) >= end]
        if len(kept) == len(self._hidden):
            return False
        self._hidden = kept
        self._notify_state("visibility")
        return True

    def show_all(self) -> None:
        if not self._hidden:
            return
        self._hidden = []
        self._notify_state("visibility")

    def hidden_regions(self) -> List[Tuple[int, int]]:
        return sorted((s.offset or 0, e.offset or 0) for s, e in self._hidden)

    def is_hidden(self, offset: int) -> bool:
        return any((s.offset or 0) <= offset < (e.offset or 0) for s, e in self._hidden)

    # ------------------------------------------------------------------
    # Observers
    # ------------------------------------------------------------------
    def add_change_observer(self, observer: ChangeObserver) -> None:
        if observer not in self._change_observers:
            self._change_observers.append(observer)

    def remove_change_observer(self, observer: ChangeObserver) -> None:
        try:
            self._change_observers.remove(observer)
        except ValueError:
            pass

    def has_change_observer(self, observer: ChangeObserver) -> bool:
        return observer in self._change_observers

    def add_state_observer(self, observer: StateObserver) -> None:
        if observer not in self._state_observers:
            self._state_observers.append(observer)

    def remove_state_observer(self, observer: StateObserver) -> None:
        try:
            self._state_observers.remove(observer)
        except ValueError:
            pass

    def add_close_observer(self, observer: CloseObserver) -> None:
        if observer not in self._close_observers:
            self._close_observers.append(observer)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def close(self) -> None:
        """Kill the document: detach every position and notify close observers."""
        if not self._live:
            return
        self._live = False
        for pos in list(self._positions):
            pos._detach()
        self._positions = weakref.WeakSet()
        self._restriction = None
        self._hidden = []
        self._change_observers.clear()
        self._state_observers.clear()
        observers, self._close_observers = self._close_observers, []
        for observer in observers:
            observer(self)
        logger.info("Document %s closed", self.id)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _clamp(self, offset: int) -> int:
        return min(max(int(offset), 0), len(self._text))

    def _ensure_live(self) -> None:
        if not self._live:
            raise ValueError(f"Document {self.id} is closed")

    def _drop_collapsed_hidden_regions(self) -> None:
        self._hidden = [(s, e) for s, e in self._hidden if (e.offset or 0) > (s.offset or 0)]

    def _notify_state(self, what: str) -> None:
        for observer in list(self._state_observers):
            observer(self, what)

    def __repr__(self) -> str:
        return f"Document(id={self.id!r}, kind={self.kind!r}, len={len(self._text)})"
