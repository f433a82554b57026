from __future__ import annotations

from typing import Sequence

from side_tree.core.models.heading import HeadingRecord

INDENT = "  "


def row_text(entry: HeadingRecord) -> str:
    """Indented display text of a heading row."""
    return f"{INDENT * (max(1, entry.level) - 1)}{entry.display_text or '(untitled)'}"


def populate_tree(widget: object, entries: Sequence[HeadingRecord]) -> None:
    """Rebuild every row of the widget's Treeview from ``entries``.

    Row ids are the entry indexes, so the panel cursor maps to ``str(index)``.
    """
    tree = widget._tree
    tree.delete(*tree.get_children(""))
    options = widget._options
    for index, entry in enumerate(entries):
        tag = f"level-{entry.level}"
        kwargs = {"text": row_text(entry), "tags": (tag,)}
        if options.fontify:
            tree.tag_configure(tag, foreground=options.color_for_level(entry.level))
            kwargs["image"] = widget._marker_for(entry.level)
        tree.insert("", "end", iid=str(index), **kwargs)
