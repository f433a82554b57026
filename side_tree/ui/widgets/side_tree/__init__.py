"""Helpers split out of :mod:`side_tree.ui.widgets.side_tree_widget`."""
