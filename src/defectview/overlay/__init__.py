"""Overlay engine: coordinate mapping, layered rendering, hit testing and hover state."""

from .controller import AnnotationOverlay, EventHost, PointerEvent
from .hit_test import hit_test
from .hover import HoverBridge, HoverState
from .mapping import Scale, compute_scale
from .renderer import DEFAULT_STYLE, RenderStyle, render
from .structure import associate
from .surface import OverlaySurface

__all__ = [
    "AnnotationOverlay",
    "EventHost",
    "PointerEvent",
    "hit_test",
    "HoverBridge",
    "HoverState",
    "Scale",
    "compute_scale",
    "DEFAULT_STYLE",
    "RenderStyle",
    "render",
    "associate",
    "OverlaySurface",
]
