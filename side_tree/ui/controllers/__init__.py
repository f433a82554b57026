"""UI controllers package for the side tree.

Controllers mediate between the Tk widgets and the core services and models.
They contain no UI toolkit code.
"""

from .host import EditorHost
from .tree_panel_controller import TreePanelController

__all__: list[str] = ["EditorHost", "TreePanelController"]
