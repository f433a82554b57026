from __future__ import annotations

"""Level marker images for side tree rows, drawn with Pillow."""

from typing import Dict, Tuple

from PIL import Image, ImageDraw, ImageTk

MARKER_SIZE: Tuple[int, int] = (16, 16)


def marker_image(level: int, color: str, size: Tuple[int, int] = MARKER_SIZE) -> Image.Image:
    """Return an RGBA dot whose radius shrinks with the heading level."""
    width, height = size
    img = Image.new("RGBA", size, (0, 0, 0, 0))
    radius = max(2, min(width, height) // 2 - 1 - min(level - 1, 4))
    cx, cy = width // 2, height // 2
    draw = ImageDraw.Draw(img)
    draw.ellipse((cx - radius, cy - radius, cx + radius, cy + radius), fill=color)
    return img


def get_marker(widget: object, level: int, color: str) -> ImageTk.PhotoImage:
    """Return a cached Tk image for ``(level, color)``.

    The cache lives on the widget (``_markers``) so images stay referenced for
    as long as rows may display them.
    """
    cache: Dict[Tuple[int, str], ImageTk.PhotoImage] = widget._markers
    key = (level, color)
    if key not in cache:
        cache[key] = ImageTk.PhotoImage(marker_image(level, color), master=widget)
    return cache[key]
