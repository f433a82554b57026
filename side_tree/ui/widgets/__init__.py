"""UI widgets package.

Tk widgets for the side tree: the heading panel and the document editor view.
"""

from .document_view import DocumentView
from .side_tree_widget import SideTreeWidget

__all__ = ["DocumentView", "SideTreeWidget"]
