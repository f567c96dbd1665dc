"""Interactive OpenCV window: shows the image with the overlay, hover tooltips, live resize.

The window is the hosting view: it dispatches load / resize / pointermove /
pointerleave to the overlay and draws the tooltip from the hover bridge.
"""

from __future__ import annotations

import logging

import cv2
import numpy as np

from .annotations.types import AnnotationFrame
from .overlay.controller import (
    LOAD,
    POINTER_LEAVE,
    POINTER_MOVE,
    RESIZE,
    AnnotationOverlay,
    EventHost,
    PointerEvent,
)
from .overlay.renderer import DEFAULT_STYLE, RenderStyle
from .tooltip import format_tooltip

logger = logging.getLogger(__name__)

_FONT = cv2.FONT_HERSHEY_SIMPLEX
_FONT_SCALE = 0.5
_LINE_H = 18
_PAD = 6
_QUIT_KEYS = (ord("q"), 27)


def draw_tooltip(image: np.ndarray, lines: list[str], position: tuple[float, float]) -> np.ndarray:
    """Draw a dark box with text lines near position (kept inside the image). Modifies image in place."""
    if not lines:
        return image
    h, w = image.shape[:2]
    text_w = max(cv2.getTextSize(line, _FONT, _FONT_SCALE, 1)[0][0] for line in lines)
    box_w = text_w + 2 * _PAD
    box_h = len(lines) * _LINE_H + _PAD
    x = int(position[0]) + 12
    y = int(position[1]) + 12
    x = max(0, min(x, w - box_w))
    y = max(0, min(y, h - box_h))
    roi = image[y:y + box_h, x:x + box_w]
    roi[...] = (roi * 0.25).astype(image.dtype)
    for i, line in enumerate(lines):
        cv2.putText(image, line, (x + _PAD, y + (i + 1) * _LINE_H - 4), _FONT, _FONT_SCALE, (255, 255, 255), 1, cv2.LINE_AA)
    return image


def compose_view(image_bgr: np.ndarray, overlay: AnnotationOverlay) -> np.ndarray:
    """Image scaled to the surface size, overlay blended on top, tooltip from the hover bridge."""
    surface = overlay.surface
    if surface.width == 0 or surface.height == 0:
        return image_bgr
    shown = cv2.resize(image_bgr, (surface.width, surface.height), interpolation=cv2.INTER_AREA)
    out = surface.composite(shown)
    lines = format_tooltip(overlay.bridge.hovered)
    if lines:
        draw_tooltip(out, lines, overlay.bridge.pointer_position)
    return out


class OverlayWindow:
    """OpenCV window hosting one AnnotationOverlay."""

    def __init__(
        self,
        image_bgr: np.ndarray,
        frame: AnnotationFrame,
        window_name: str = "Annotated Image Viewer",
        style: RenderStyle = DEFAULT_STYLE,
        max_initial_width: int = 1280,
    ) -> None:
        self.image = image_bgr
        self.window_name = window_name
        self.host = EventHost()
        self.overlay = AnnotationOverlay(frame, style=style)
        h, w = image_bgr.shape[:2]
        ratio = min(1.0, max_initial_width / float(w)) if w else 1.0
        self._initial_size = (max(1, int(w * ratio)), max(1, int(h * ratio)))
        self._size: tuple[int, int] = (0, 0)
        self._inside = False

    def _on_mouse(self, event: int, x: int, y: int, flags: int, param: object) -> None:
        if event != cv2.EVENT_MOUSEMOVE:
            return
        w, h = self._size
        if 0 <= x < w and 0 <= y < h:
            self._inside = True
            self.host.dispatch(POINTER_MOVE, PointerEvent(float(x), float(y)))
        elif self._inside:
            self._inside = False
            self.host.dispatch(POINTER_LEAVE)

    def _display_size(self) -> tuple[int, int]:
        try:
            _, _, w, h = cv2.getWindowImageRect(self.window_name)
        except cv2.error:
            return self._size
        if w <= 0 or h <= 0:
            return self._size
        return (w, h)

    def run(self) -> None:
        """Show the window until q/ESC or the window is closed."""
        cv2.namedWindow(self.window_name, cv2.WINDOW_NORMAL)
        cv2.resizeWindow(self.window_name, *self._initial_size)
        cv2.setMouseCallback(self.window_name, self._on_mouse)
        self.overlay.attach(self.host)
        logger.info("Viewer opened: %s (%dx%d)", self.window_name, *self._initial_size)
        try:
            self._size = self._initial_size
            self.host.dispatch(LOAD, *self._size)
            while True:
                size = self._display_size()
                if size != self._size:
                    self._size = size
                    self.host.dispatch(RESIZE, *size)
                cv2.imshow(self.window_name, compose_view(self.image, self.overlay))
                key = cv2.waitKey(15) & 0xFF
                if key in _QUIT_KEYS:
                    break
                if cv2.getWindowProperty(self.window_name, cv2.WND_PROP_VISIBLE) < 1:
                    break
        finally:
            self.overlay.detach()
            cv2.destroyWindow(self.window_name)
            logger.info("Viewer closed: %s", self.window_name)
