"""User-facing options for the side tree.

Built from the ``side_tree`` configuration section (see
:class:`side_tree.config.ConfigManager`).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping

DEFAULT_HEADING_PATTERNS: Dict[str, str] = {
    "org": r"^(?P<marker>\*+)[ \t]+(?P<title>.*)$",
    "markdown": r"^(?P<marker>#{1,6})[ \t]+(?P<title>.*?)(?:[ \t]+#+)?[ \t]*$",
}

DEFAULT_LEVEL_COLORS: List[str] = [
    "#1565C0",
    "#2E7D32",
    "#EF6C00",
    "#6A1B9A",
    "#00838F",
    "#AD1457",
]


@dataclass
class SideTreeOptions:
    """Behaviour and presentation options for side trees."""

    narrow_on_jump: bool = True
    debounce_ms: int = 50
    live_update: bool = True
    display_side: str = "left"
    panel_width: int = 32
    fontify: bool = True
    level_colors: List[str] = field(default_factory=lambda: list(DEFAULT_LEVEL_COLORS))
    heading_patterns: Dict[str, str] = field(default_factory=lambda: dict(DEFAULT_HEADING_PATTERNS))

    def __post_init__(self):
        """Validate option values after initialization."""
        if self.display_side not in ("left", "right"):
            raise ValueError(f"display_side must be 'left' or 'right', got {self.display_side!r}")
        if int(self.debounce_ms) < 0:
            raise ValueError("debounce_ms cannot be negative")
        self.debounce_ms = int(self.debounce_ms)
        self.panel_width = max(8, int(self.panel_width))
        if not self.level_colors:
            self.level_colors = list(DEFAULT_LEVEL_COLORS)

    @classmethod
    def from_config(cls, section: Mapping[str, Any] | None) -> "SideTreeOptions":
        """Create options from a configuration mapping, ignoring unknown keys.

        Args:
            section: The ``side_tree`` configuration section

        Returns:
            SideTreeOptions instance
        """
        section = dict(section or {})
        known = {name for name in cls.__dataclass_fields__}
        kwargs = {k: v for k, v in section.items() if k in known and v is not None}
        patterns = kwargs.get("heading_patterns")
        if patterns is not None:
            merged = dict(DEFAULT_HEADING_PATTERNS)
            merged.update(patterns)
            kwargs["heading_patterns"] = merged
        return cls(**kwargs)

    def color_for_level(self, level: int) -> str:
        return self.level_colors[(max(1, level) - 1) % len(self.level_colors)]
