"""Event wiring: image load / resize -> full render; pointer move / leave -> hit test, then re-render if needed.

Single-threaded. Everything runs synchronously in the thread that dispatches events.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass
from typing import Any, Callable

from ..annotations.types import AnnotationFrame, HoveredAnnotation, Point
from .hover import HoverBridge
from .mapping import Scale, compute_scale
from .renderer import DEFAULT_STYLE, RenderStyle, render
from .hit_test import hit_test
from .surface import OverlaySurface

logger = logging.getLogger(__name__)

Listener = Callable[..., Any]

LOAD = "load"
RESIZE = "resize"
POINTER_MOVE = "pointermove"
POINTER_LEAVE = "pointerleave"


@dataclass(frozen=True)
class PointerEvent:
    """Pointer position in client (window) coordinates."""

    client_x: float
    client_y: float


class EventHost:
    """Minimal listener registry standing in for the hosting view."""

    def __init__(self) -> None:
        self._listeners: dict[str, list[Listener]] = defaultdict(list)

    def add_listener(self, event: str, listener: Listener) -> None:
        self._listeners[event].append(listener)

    def remove_listener(self, event: str, listener: Listener) -> None:
        try:
            self._listeners[event].remove(listener)
        except ValueError:
            pass

    def listener_count(self, event: str | None = None) -> int:
        if event is None:
            return sum(len(v) for v in self._listeners.values())
        return len(self._listeners[event])

    def dispatch(self, event: str, *args: Any) -> None:
        for listener in list(self._listeners[event]):
            listener(*args)


class AnnotationOverlay:
    """Owns one drawing surface and one hover bridge for one displayed frame."""

    def __init__(
        self,
        frame: AnnotationFrame,
        surface: OverlaySurface | None = None,
        style: RenderStyle = DEFAULT_STYLE,
        surface_origin: Point = (0.0, 0.0),
    ) -> None:
        self.frame = frame
        self.surface = surface if surface is not None else OverlaySurface()
        self.style = style
        self.surface_origin = surface_origin
        self.bridge = HoverBridge()
        self.render_count = 0
        self._host: EventHost | None = None
        self._registered: list[tuple[str, Listener]] = []

    # ------------------------------------------------------------------
    # Listener lifecycle
    # ------------------------------------------------------------------

    def attach(self, host: EventHost) -> None:
        """Register load / pointer listeners. Resize is registered on first load."""
        if self._host is not None:
            self.detach()
        self._host = host
        self._listen(LOAD, self.on_load)
        self._listen(POINTER_MOVE, self.on_pointer_move)
        self._listen(POINTER_LEAVE, self.on_pointer_leave)

    def detach(self) -> None:
        """Remove every listener this overlay registered."""
        if self._host is None:
            return
        for event, listener in self._registered:
            self._host.remove_listener(event, listener)
        logger.debug("Detached %d listeners", len(self._registered))
        self._registered = []
        self._host = None

    def _listen(self, event: str, listener: Listener) -> None:
        if self._host is None or (event, listener) in self._registered:
            return
        self._host.add_listener(event, listener)
        self._registered.append((event, listener))

    # ------------------------------------------------------------------
    # Handlers
    # ------------------------------------------------------------------

    @property
    def hovered(self) -> HoveredAnnotation:
        return self.bridge.hovered

    def current_scale(self) -> Scale:
        """Scale re-derived from the live surface size."""
        return compute_scale(self.frame.image_size, self.surface.width, self.surface.height)

    def on_load(self, display_width: float, display_height: float) -> None:
        self.redraw(display_width, display_height)
        self._listen(RESIZE, self.on_resize)

    def on_resize(self, display_width: float, display_height: float) -> None:
        self.redraw(display_width, display_height)

    def redraw(self, display_width: float | None = None, display_height: float | None = None) -> None:
        """Size the surface to the displayed image (if given) and repaint everything."""
        if display_width is not None and display_height is not None:
            self.surface.resize(display_width, display_height)
        scale = self.current_scale()
        render(self.surface, self.frame, scale.sx, scale.sy, self.bridge.hovered, self.style)
        self.render_count += 1

    def on_pointer_move(self, event: PointerEvent) -> HoveredAnnotation:
        ox, oy = self.surface_origin
        point = (event.client_x - ox, event.client_y - oy)
        scale = self.current_scale()
        hovered = hit_test(self.surface, self.frame, scale.sx, scale.sy, point)
        if self.bridge.pointer_move(hovered, (event.client_x, event.client_y)):
            self.redraw()
        return hovered

    def on_pointer_leave(self) -> None:
        if self.bridge.pointer_leave():
            self.redraw()
