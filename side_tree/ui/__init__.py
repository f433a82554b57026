"""Side tree UI package.

Tkinter-based application, widgets and controllers. Controllers contain no
Tk code; widgets contain no controller imports; :mod:`side_tree.ui.app` wires
them together. Only the controllers are re-exported here so that importing
them does not require a Tk installation.
"""

from .controllers.host import EditorHost  # noqa: F401
from .controllers.tree_panel_controller import TreePanelController  # noqa: F401

__all__: list[str] = [
    "EditorHost",
    "TreePanelController",
]
