from __future__ import annotations

"""Heading extraction and heading-based navigation (UI-agnostic).

The indexer scans a :class:`Document` for heading-marker lines using one
regular expression per document kind. Heading identity is always positional:
"which heading is the cursor in" is answered by counting heading lines from
the start of the document every time, never by comparing heading texts, so
repeated titles stay unambiguous and no cached ordinal can go stale after an
edit.

Every pattern must be line-anchored and expose two named groups, ``marker``
(its length is the heading level) and ``title``.
"""

import logging
import re
from typing import Dict, Iterator, Mapping, Optional, Pattern, Tuple

from side_tree.core.document import Document
from side_tree.core.exceptions import NoHeadingsFoundError, NotASupportedDocumentError
from side_tree.core.models.heading import HeadingRecord
from side_tree.core.models.ui_config import DEFAULT_HEADING_PATTERNS

logger = logging.getLogger(__name__)

__all__ = ["HeadingIndexer"]


class HeadingIndexer:
    """Scan documents for headings and move the cursor between them.

    Parameters
    ----------
    heading_patterns : Mapping[str, str], optional
        Regular expression per document kind. Defaults to Org and Markdown.

    Notes
    -----
    - Scans and ordinal computations always cover the whole document; any
      narrowing in effect is ignored.
    - Navigation (:meth:`next_heading`, :meth:`previous_heading`) stays inside
      the accessible region and skips headings hidden by folding.
    """

    def __init__(self, heading_patterns: Optional[Mapping[str, str]] = None) -> None:
        patterns = heading_patterns if heading_patterns is not None else DEFAULT_HEADING_PATTERNS
        self._patterns: Dict[str, Pattern[str]] = {}
        for kind, expr in patterns.items():
            compiled = re.compile(expr, re.MULTILINE)
            if not {"marker", "title"} <= set(compiled.groupindex):
                raise ValueError(f"Heading pattern for '{kind}' must define 'marker' and 'title' groups")
            self._patterns[kind] = compiled

    # ------------------------------------------------------------------
    # Document kinds
    # ------------------------------------------------------------------
    @property
    def supported_kinds(self) -> list[str]:
        return sorted(self._patterns)

    def pattern_for(self, document: Document) -> Pattern[str]:
        try:
            return self._patterns[document.kind]
        except KeyError:
            raise NotASupportedDocumentError(document.kind, document.id, self.supported_kinds) from None

    # ------------------------------------------------------------------
    # Scanning
    # ------------------------------------------------------------------
    def scan(self, document: Document) -> Tuple[HeadingRecord, ...]:
        """Return one record per heading line, in document order.

        Raises
        ------
        NotASupportedDocumentError
            If the document kind has no heading pattern.
        NoHeadingsFoundError
            If the document contains no heading lines.
        """
        records = tuple(
            HeadingRecord(
                display_text=match.group("title").strip(),
                position=document.create_position(match.start()),
                document_id=document.id,
                level=len(match.group("marker")),
            )
            for match in self._iter_headings(document)
        )
        if not records:
            raise NoHeadingsFoundError(document.id)
        logger.debug("Scanned %d headings in %s", len(records), document.id)
        return records

    def heading_at(self, document: Document, position: int) -> Optional[Tuple[int, str]]:
        """Return ``(level, title)`` when ``position`` is on a heading line."""
        start = document.line_start(position)
        match = self.pattern_for(document).match(document.text, start)
        if match is None:
            return None
        return len(match.group("marker")), match.group("title").strip()

    # ------------------------------------------------------------------
    # Ordinals
    # ------------------------------------------------------------------
    def locate_ordinal(self, document: Document, position: Optional[int] = None) -> int:
        """Return the 1-based ordinal of the heading containing ``position``.

        The ordinal counts heading lines from the document start up to and
        including the line of ``position`` (the cursor by default). A
        position before the first heading yields 0.
        """
        target = document.line_start(document.point if position is None else position)
        ordinal = 0
        for match in self._iter_headings(document):
            if match.start() > target:
                break
            ordinal += 1
        return ordinal

    def go_to_ordinal(self, document: Document, n: int) -> int:
        """Move the cursor to the start of the n-th heading line.

        Walks heading transitions from the document start ``n - 1`` times.
        ``n <= 0`` moves to the document start; walking past the last heading
        stops on the last heading. Widens the document when the target lies
        outside the current restriction. Returns the new cursor offset.
        """
        target = 0
        if n > 0:
            for index, match in enumerate(self._iter_headings(document), start=1):
                target = match.start()
                if index >= n:
                    break
        self._move_point(document, target)
        return document.point

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------
    def next_heading(self, document: Document) -> Optional[int]:
        """Move to the next visible heading after the cursor line.

        Returns the new offset, or None (cursor unchanged) when the search is
        exhausted.
        """
        after = document.line_end(document.point)
        end = document.accessible_end
        for match in self._iter_headings(document):
            start = match.start()
            if start <= after:
                continue
            if start >= end:
                break
            if document.is_hidden(start):
                continue
            document.point = start
            return start
        return None

    def previous_heading(self, document: Document) -> Optional[int]:
        """Move to the previous visible heading before the cursor line.

        When there is none, moves to the start of the accessible region and
        returns None.
        """
        before = document.line_start(document.point)
        begin = document.accessible_start
        found: Optional[int] = None
        for match in self._iter_headings(document):
            start = match.start()
            if start >= before:
                break
            if start < begin or document.is_hidden(start):
                continue
            found = start
        document.point = begin if found is None else found
        return found

    # ------------------------------------------------------------------
    # Subtrees
    # ------------------------------------------------------------------
    def subtree_range(self, document: Document, position: Optional[int] = None) -> Tuple[int, int]:
        """Return the extent of the subtree containing ``position``.

        The subtree starts at the containing heading line and ends before the
        next heading of the same or a higher level (or at the document end).
        Before the first heading the range covers the preamble.
        """
        target = document.line_start(document.point if position is None else position)
        start = 0
        level: Optional[int] = None
        end = len(document)
        for match in self._iter_headings(document):
            m_start = match.start()
            m_level = len(match.group("marker"))
            if m_start <= target:
                start, level = m_start, m_level
                continue
            if level is None or m_level <= level:
                end = m_start
                break
        return start, end

    def narrow_to_subtree(self, document: Document, position: Optional[int] = None) -> Tuple[int, int]:
        start, end = self.subtree_range(document, position)
        document.narrow(start, end)
        return start, end

    def toggle_fold(self, document: Document, position: Optional[int] = None) -> bool:
        """Hide or reveal the body of the subtree at ``position``.

        Returns True when the subtree is folded afterwards. Positions outside
        any heading are left alone.
        """
        pos = document.point if position is None else position
        if self.locate_ordinal(document, pos) == 0:
            return False
        start, end = self.subtree_range(document, pos)
        body_start = document.line_end(start)
        # Keep the newline that ends the subtree visible
        body_end = end - 1 if document.text[end - 1:end] == "\n" else end
        if body_end <= body_start:
            return False
        if document.reveal_region(body_start, body_end):
            return False
        document.hide_region(body_start, body_end)
        if document.is_hidden(document.point):
            document.point = start
        return True

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _iter_headings(self, document: Document) -> Iterator["re.Match[str]"]:
        return self.pattern_for(document).finditer(document.text)

    @staticmethod
    def _move_point(document: Document, offset: int) -> None:
        if not document.accessible_start <= offset <= document.accessible_end:
            logger.debug("Widening %s to reach offset %d", document.id, offset)
            document.widen()
        document.point = offset
