"""Hover state: IDLE or HOVERING(descriptor), plus the last pointer screen position.

pointer_move -> recompute, pointer_leave -> IDLE. Both report whether the change
affects drawing so the caller knows when to re-render.
"""

from __future__ import annotations

import logging
from enum import Enum

from ..annotations.types import HoveredAnnotation, Point, same_hover

logger = logging.getLogger(__name__)


class HoverState(Enum):
    IDLE = "idle"
    HOVERING = "hovering"


class HoverBridge:
    """Current hovered annotation and pointer position, read by a tooltip surface."""

    def __init__(self) -> None:
        self.hovered: HoveredAnnotation = None
        self.pointer_position: Point = (0.0, 0.0)

    @property
    def state(self) -> HoverState:
        return HoverState.IDLE if self.hovered is None else HoverState.HOVERING

    @property
    def visible(self) -> bool:
        return self.hovered is not None

    def pointer_move(self, hovered: HoveredAnnotation, screen_position: Point) -> bool:
        """Store the latest hit-test result. Returns True when the hover identity changed."""
        self.pointer_position = screen_position
        return self._set(hovered, "pointer_move")

    def pointer_leave(self) -> bool:
        return self._set(None, "pointer_leave")

    def _set(self, hovered: HoveredAnnotation, reason: str) -> bool:
        changed = not same_hover(self.hovered, hovered)
        if changed:
            logger.debug("Hover %s -> %s (%s): %r", self.state.value,
                         HoverState.IDLE.value if hovered is None else HoverState.HOVERING.value,
                         reason, hovered)
        self.hovered = hovered
        return changed
