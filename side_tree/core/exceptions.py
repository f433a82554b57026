from __future__ import annotations

"""Side tree exception classes.

All errors raised by the heading indexer and the tree panel controller derive
from :class:`SideTreeError`. They are user-facing, raised synchronously by the
offending operation and never retried; the Tk layer catches the base class and
reports the message in a dialog.
"""

from typing import Optional


class SideTreeError(Exception):
    """Base exception for all side tree errors.

    Carries the id of the document the failing operation was working on, when
    one is known, so log lines and dialogs can name it.
    """

    def __init__(self, message: str, document_id: Optional[str] = None) -> None:
        super().__init__(message)
        self.document_id = document_id

    def __str__(self) -> str:
        if self.document_id:
            return f"[Document: {self.document_id}] {super().__str__()}"
        return super().__str__()


class AlreadyTreedError(SideTreeError):
    """Raised when a side tree is already open for the document."""

    def __init__(self, document_id: Optional[str] = None) -> None:
        super().__init__("A side tree is already open for this document", document_id)


class NotASupportedDocumentError(SideTreeError):
    """Raised when the document kind has no heading syntax configured."""

    def __init__(self, kind: str, document_id: Optional[str] = None,
                 supported_kinds: Optional[list[str]] = None) -> None:
        self.kind = kind
        self.supported_kinds = supported_kinds or []
        if self.supported_kinds:
            message = (f"Documents of kind '{kind}' are not supported. "
                       f"Supported kinds: {', '.join(self.supported_kinds)}")
        else:
            message = f"Documents of kind '{kind}' are not supported"
        super().__init__(message, document_id)


class NoHeadingsFoundError(SideTreeError):
    """Raised when a scan finds no heading lines in the document."""

    def __init__(self, document_id: Optional[str] = None) -> None:
        super().__init__("No headings found", document_id)
