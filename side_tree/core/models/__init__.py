from __future__ import annotations

"""Side tree models: heading records, the panel model and user options.

Nothing here imports Tk; widgets observe a TreePanel through its listener
protocol.
"""

from .heading import HeadingRecord
from .panel import PanelListener, TreePanel
from .ui_config import SideTreeOptions

__all__ = ["HeadingRecord", "PanelListener", "SideTreeOptions", "TreePanel"]
