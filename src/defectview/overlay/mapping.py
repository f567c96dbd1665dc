"""Original-image pixel space <-> on-screen surface space."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from ..annotations.types import Box, ImageSize, Point

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Scale:
    """Per-axis factors sx = dw / W, sy = dh / H. Recompute on every draw and hit test."""

    sx: float
    sy: float

    def to_screen(self, x: float, y: float) -> Point:
        return (x * self.sx, y * self.sy)

    def to_image(self, x: float, y: float) -> Point:
        """Inverse of to_screen; only meaningful for non-zero factors."""
        return (x / self.sx, y / self.sy)

    def box_to_screen(self, box: Box) -> Box:
        x1, y1, x2, y2 = box
        return (x1 * self.sx, y1 * self.sy, x2 * self.sx, y2 * self.sy)


def compute_scale(image_size: ImageSize, display_width: float, display_height: float) -> Scale:
    """Scale factors for the current displayed size.

    No bounds checking on the display size: zero or negative sizes give degenerate
    factors and annotations collapse to a point.
    """
    if image_size.width <= 0 or image_size.height <= 0:
        logger.warning("Non-positive original image size %s; using zero scale", image_size)
        return Scale(0.0, 0.0)
    return Scale(display_width / image_size.width, display_height / image_size.height)
