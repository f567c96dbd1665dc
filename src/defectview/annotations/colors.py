"""Damage class -> RGBA color. Pure; independent of draw order and data source."""

from __future__ import annotations

from typing import NamedTuple

NORMAL_OPACITY = 0.4
HOVER_OPACITY = 0.7
BORDER_OPACITY = 1.0


class RGBA(NamedTuple):
    r: int
    g: int
    b: int
    a: float

    def with_alpha(self, a: float) -> "RGBA":
        return self._replace(a=a)

    def to_bgr(self) -> tuple[int, int, int]:
        return (self.b, self.g, self.r)

    def css(self) -> str:
        return f"rgba({self.r}, {self.g}, {self.b}, {self.a})"


DEFAULT_COLOR = (132, 94, 247)  # violet

# Checked in order against the lower-cased label; first substring match wins.
CLASS_COLORS: tuple[tuple[str, tuple[int, int, int]], ...] = (
    ("crack", (0, 255, 0)),
    ("spalling", (255, 165, 0)),
    ("corrosion", (255, 69, 19)),
    ("stain", (128, 128, 128)),
)


def color_for(label: str | None, opacity: float = NORMAL_OPACITY) -> RGBA:
    """Color for a damage class label, e.g. color_for("Crack_2", 0.4) == color_for("crack", 0.4)."""
    name = (label or "").lower()
    for key, rgb in CLASS_COLORS:
        if key in name:
            return RGBA(*rgb, opacity)
    return RGBA(*DEFAULT_COLOR, opacity)
