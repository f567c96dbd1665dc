"""OverlaySurface: RGBA drawing surface with a canvas-style path API, rasterized with OpenCV.

The buffer is float32 premultiplied RGBA in [0, 1], sized to the displayed image.
Paths are built with begin_path / move_to / line_to / close_path and then filled,
stroked, or queried with is_point_in_path, so the hit tester can build exactly the
path the renderer draws.
"""

from __future__ import annotations

import logging
import math
from typing import Callable, Sequence

import cv2
import numpy as np

from ..annotations.colors import RGBA
from ..annotations.types import Point

logger = logging.getLogger(__name__)

_SHIFT = 4  # sub-pixel bits for cv2 fixed-point coordinates
_ONE = 1 << _SHIFT


def _is_degenerate(contour: np.ndarray) -> bool:
    """True when all points are collinear (or coincide), so the path encloses nothing.

    Uses the convex hull: a self-intersecting outline (bow-tie) can have zero
    signed area while still enclosing two lobes.
    """
    return cv2.contourArea(cv2.convexHull(contour)) == 0


class _SubPath:
    __slots__ = ("points", "closed")

    def __init__(self, start: Point) -> None:
        self.points: list[Point] = [start]
        self.closed = False


class OverlaySurface:
    """Drawing surface. A zero-area surface accepts every call and draws nothing."""

    def __init__(self, width: int = 0, height: int = 0) -> None:
        self._buf = np.zeros((0, 0, 4), dtype=np.float32)
        self._path: list[_SubPath] = []
        self.resize(width, height)

    # ------------------------------------------------------------------
    # Size and buffer
    # ------------------------------------------------------------------

    @property
    def width(self) -> int:
        return self._buf.shape[1]

    @property
    def height(self) -> int:
        return self._buf.shape[0]

    @property
    def pixels(self) -> np.ndarray:
        """Premultiplied RGBA float32 buffer, shape (height, width, 4)."""
        return self._buf

    def resize(self, width: float, height: float) -> None:
        """Set the surface size (truncated to whole pixels). Resizing clears the surface."""
        w = max(0, int(width))
        h = max(0, int(height))
        self._buf = np.zeros((h, w, 4), dtype=np.float32)

    def clear(self) -> None:
        self._buf[...] = 0.0

    # ------------------------------------------------------------------
    # Path construction
    # ------------------------------------------------------------------

    def begin_path(self) -> None:
        self._path = []

    def move_to(self, x: float, y: float) -> None:
        self._path.append(_SubPath((float(x), float(y))))

    def line_to(self, x: float, y: float) -> None:
        if not self._path:
            self.move_to(x, y)
            return
        self._path[-1].points.append((float(x), float(y)))

    def close_path(self) -> None:
        if self._path:
            self._path[-1].closed = True

    def is_point_in_path(self, x: float, y: float) -> bool:
        """True if (x, y) lies inside any closed-or-not subpath of the current path (edges count)."""
        for sub in self._path:
            if len(sub.points) < 3:
                continue
            contour = np.asarray(sub.points, dtype=np.float32).reshape(-1, 1, 2)
            if not np.all(np.isfinite(contour)) or _is_degenerate(contour):
                continue
            if cv2.pointPolygonTest(contour, (float(x), float(y)), False) >= 0:
                return True
        return False

    # ------------------------------------------------------------------
    # Painting
    # ------------------------------------------------------------------

    def fill(self, color: RGBA) -> None:
        polys = [s.points for s in self._path if len(s.points) >= 3]
        if polys:
            self._paint(color, polys, 0, lambda m, pts: cv2.fillPoly(m, pts, 255, cv2.LINE_AA, _SHIFT))

    def stroke(self, color: RGBA, line_width: float = 1.0) -> None:
        thickness = max(1, int(round(line_width)))
        for sub in self._path:
            if len(sub.points) < 2:
                continue
            closed = sub.closed
            self._paint(
                color,
                [sub.points],
                thickness,
                lambda m, pts: cv2.polylines(m, pts, closed, 255, thickness, cv2.LINE_AA, _SHIFT),
            )

    def fill_rect(self, x: float, y: float, w: float, h: float, color: RGBA) -> None:
        self.begin_path()
        self._rect_path(x, y, w, h)
        self.fill(color)

    def stroke_rect(self, x: float, y: float, w: float, h: float, color: RGBA, line_width: float = 1.0) -> None:
        self.begin_path()
        self._rect_path(x, y, w, h)
        self.stroke(color, line_width)

    def _rect_path(self, x: float, y: float, w: float, h: float) -> None:
        self.move_to(x, y)
        self.line_to(x + w, y)
        self.line_to(x + w, y + h)
        self.line_to(x, y + h)
        self.close_path()

    def _paint(
        self,
        color: RGBA,
        polys: Sequence[Sequence[Point]],
        pad: int,
        draw: Callable[[np.ndarray, list[np.ndarray]], object],
    ) -> None:
        """Rasterize polys into a coverage mask over their bounding box and blend color (source-over)."""
        if self.width == 0 or self.height == 0 or color.a <= 0:
            return
        flat = [p for poly in polys for p in poly]
        if not all(math.isfinite(px) and math.isfinite(py) for px, py in flat):
            logger.debug("Skipping path with non-finite coordinates")
            return
        xs = [p[0] for p in flat]
        ys = [p[1] for p in flat]
        x0 = max(0, int(math.floor(min(xs))) - pad - 1)
        y0 = max(0, int(math.floor(min(ys))) - pad - 1)
        x1 = min(self.width, int(math.ceil(max(xs))) + pad + 2)
        y1 = min(self.height, int(math.ceil(max(ys))) + pad + 2)
        if x1 <= x0 or y1 <= y0:
            return

        pts = [
            (np.round((np.asarray(poly, dtype=np.float64) - (x0, y0)) * _ONE)).astype(np.int32).reshape(-1, 1, 2)
            for poly in polys
        ]
        mask = np.zeros((y1 - y0, x1 - x0), dtype=np.uint8)
        draw(mask, pts)
        coverage = (mask.astype(np.float32) / 255.0)[..., None]

        a = float(min(max(color.a, 0.0), 1.0))
        src = np.array([color.r / 255.0 * a, color.g / 255.0 * a, color.b / 255.0 * a, a], dtype=np.float32)
        roi = self._buf[y0:y1, x0:x1]
        roi[...] = src * coverage + roi * (1.0 - a * coverage)

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------

    def composite(self, image_bgr: np.ndarray) -> np.ndarray:
        """Blend the overlay onto a BGR uint8 image of the same size; returns a new image."""
        if image_bgr.shape[:2] != (self.height, self.width):
            raise ValueError(
                f"Image size {image_bgr.shape[1]}x{image_bgr.shape[0]} does not match surface {self.width}x{self.height}"
            )
        base = image_bgr.astype(np.float32) / 255.0
        overlay_bgr = self._buf[..., 2::-1]
        alpha = self._buf[..., 3:4]
        out = overlay_bgr + base * (1.0 - alpha)
        return np.clip(out * 255.0 + 0.5, 0, 255).astype(np.uint8)
