from __future__ import annotations

"""UI-agnostic services: heading indexing and debounced refresh scheduling."""

from .heading_indexer import HeadingIndexer  # noqa: F401
from .refresh_scheduler import DebouncedRefresh  # noqa: F401

__all__: list[str] = [
    "HeadingIndexer",
    "DebouncedRefresh",
]
