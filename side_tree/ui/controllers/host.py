from __future__ import annotations

"""Editor host interface used by the tree panel controller.

The controller never reaches for a "current window" or "current document":
everything it needs from the surrounding editor goes through this interface,
with the document or panel passed explicitly. The Tk application implements
it; tests use an in-memory fake.
"""

from abc import ABC, abstractmethod
from typing import Any, Callable

from side_tree.core.document import Document
from side_tree.core.models.panel import TreePanel


class EditorHost(ABC):
    """Contract between the controller and the editor that embeds it."""

    @abstractmethod
    def display_panel(self, panel: TreePanel, document: Document, *, side: str, width: int) -> None:
        """Create and show a view for ``panel`` next to ``document``."""

    @abstractmethod
    def remove_panel(self, panel: TreePanel) -> None:
        """Tear down the view showing ``panel``."""

    @abstractmethod
    def focus_document(self, document: Document) -> None:
        """Give input focus to the view showing ``document``."""

    @abstractmethod
    def focus_panel(self, panel: TreePanel) -> None:
        """Give input focus to the view showing ``panel``."""

    @abstractmethod
    def scroll_to_top(self, document: Document, offset: int) -> None:
        """Scroll the document view so the line at ``offset`` is the first visible line."""

    @abstractmethod
    def confirm(self, title: str, message: str) -> bool:
        """Ask a yes/no question and return the answer."""

    @abstractmethod
    def show_error(self, title: str, message: str) -> None:
        """Report an error to the user."""

    @abstractmethod
    def after(self, delay_ms: int, callback: Callable[[], None]) -> Any:
        """Run ``callback`` on the event loop after ``delay_ms``; return a handle."""

    @abstractmethod
    def after_cancel(self, handle: Any) -> None:
        """Cancel a handle returned by :meth:`after`."""
