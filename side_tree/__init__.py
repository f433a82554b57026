"""Top-level package of the side tree.

The core (document model, heading indexer, refresh scheduling) is GUI-agnostic;
the Tk front-end lives in :mod:`side_tree.ui`. Front-ends should depend on the
public API exposed here rather than importing internal modules directly.
"""

from .core.document import Document, StablePosition
from .core.exceptions import (
    AlreadyTreedError,
    NoHeadingsFoundError,
    NotASupportedDocumentError,
    SideTreeError,
)
from .core.models import HeadingRecord, SideTreeOptions, TreePanel
from .core.services import DebouncedRefresh, HeadingIndexer

__all__: list[str] = [
    "AlreadyTreedError",
    "DebouncedRefresh",
    "Document",
    "HeadingIndexer",
    "HeadingRecord",
    "NoHeadingsFoundError",
    "NotASupportedDocumentError",
    "SideTreeError",
    "SideTreeOptions",
    "StablePosition",
    "TreePanel",
]
