from __future__ import annotations

"""Heading records produced by the heading indexer."""

from dataclasses import dataclass
from typing import Optional, TYPE_CHECKING

from side_tree.core.document import StablePosition

if TYPE_CHECKING:
    from side_tree.core.document import Document

__all__ = ["HeadingRecord"]


@dataclass(frozen=True)
class HeadingRecord:
    """One heading line of a document, as displayed in a side tree row.

    Attributes
    ----------
    display_text
        Heading title with the marker syntax stripped. Captured at scan time
        and never updated; a rescan produces new records.
    position
        Live position at the start of the heading line.
    document_id
        Id of the document the heading belongs to.
    level
        Number of marker characters (1 for a top-level heading).
    """

    display_text: str
    position: StablePosition
    document_id: str
    level: int = 1

    @property
    def document(self) -> Optional["Document"]:
        return self.position.document

    @property
    def offset(self) -> Optional[int]:
        return self.position.offset

    @property
    def is_live(self) -> bool:
        return self.position.is_live
