"""Layered renderer: open-world boxes (bottom), structural boxes, damage polygons (top).

render() clears and repaints the whole surface every call. It is a pure function of
(frame, scale, hovered) apart from the surface it paints.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from ..annotations.colors import BORDER_OPACITY, HOVER_OPACITY, NORMAL_OPACITY, RGBA, color_for
from ..annotations.types import (
    AnnotationFrame,
    Box,
    DamageAnomaly,
    DamageHover,
    Element,
    HoveredAnnotation,
    OpenWorldHover,
    Polygon,
)
from .mapping import Scale
from .surface import OverlaySurface

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RenderStyle:
    """Colors and widths for the three layers."""

    open_world_stroke: RGBA = RGBA(0, 255, 34, 0.2)
    open_world_fill: RGBA = RGBA(0, 255, 34, 0.001)
    open_world_stroke_hover: RGBA = RGBA(0, 255, 34, 0.8)
    open_world_fill_hover: RGBA = RGBA(0, 255, 34, 0.05)
    # Structural boxes are an invisible hit region, not a highlight.
    structural_stroke: RGBA = RGBA(238, 0, 255, 0.0)
    structural_fill: RGBA = RGBA(194, 32, 206, 0.001)
    damage_opacity: float = NORMAL_OPACITY
    damage_hover_opacity: float = HOVER_OPACITY
    line_width: float = 1.0
    hover_line_width: float = 2.0


DEFAULT_STYLE = RenderStyle()


def trace_polygon(surface: OverlaySurface, polygon: Polygon, scale_x: float, scale_y: float) -> bool:
    """Build the scaled path for one polygon on surface. Returns False (no path) for < 3 points."""
    if len(polygon) < 3:
        return False
    surface.begin_path()
    x, y = polygon[0]
    surface.move_to(x * scale_x, y * scale_y)
    for x, y in polygon[1:]:
        surface.line_to(x * scale_x, y * scale_y)
    surface.close_path()
    return True


def _box_rect(box: Box, scale_x: float, scale_y: float) -> tuple[float, float, float, float]:
    """(x, y, w, h) of the scaled box."""
    sx1, sy1, sx2, sy2 = Scale(scale_x, scale_y).box_to_screen(box)
    return sx1, sy1, sx2 - sx1, sy2 - sy1


def draw_open_world(
    surface: OverlaySurface,
    element: Element,
    scale_x: float,
    scale_y: float,
    hovered: HoveredAnnotation,
    style: RenderStyle = DEFAULT_STYLE,
) -> None:
    hovered_label = hovered.label if isinstance(hovered, OpenWorldHover) else None
    for det in element.open_world_detections:
        box = det.valid_box
        if box is None:
            logger.debug("Skipping open-world detection %r with malformed box", det.label)
            continue
        is_hovered = hovered_label is not None and det.label == hovered_label
        rect = _box_rect(box, scale_x, scale_y)
        surface.fill_rect(*rect, style.open_world_fill_hover if is_hovered else style.open_world_fill)
        surface.stroke_rect(
            *rect,
            style.open_world_stroke_hover if is_hovered else style.open_world_stroke,
            style.hover_line_width if is_hovered else style.line_width,
        )


def draw_structural_box(
    surface: OverlaySurface,
    element: Element,
    scale_x: float,
    scale_y: float,
    style: RenderStyle = DEFAULT_STYLE,
) -> None:
    structure = element.structure
    if structure is None:
        return
    rect = _box_rect(structure[0], scale_x, scale_y)
    surface.fill_rect(*rect, style.structural_fill)
    surface.stroke_rect(*rect, style.structural_stroke, style.line_width)


def draw_anomaly(
    surface: OverlaySurface,
    anomaly: DamageAnomaly,
    scale_x: float,
    scale_y: float,
    hovered: HoveredAnnotation,
    style: RenderStyle = DEFAULT_STYLE,
) -> int:
    """Draw every valid polygon of anomaly. Returns how many were drawn."""
    is_hovered = isinstance(hovered, DamageHover) and hovered.is_same_anomaly(anomaly)
    fill = color_for(anomaly.damage_class, style.damage_hover_opacity if is_hovered else style.damage_opacity)
    border = color_for(anomaly.damage_class, BORDER_OPACITY)
    width = style.hover_line_width if is_hovered else style.line_width
    drawn = 0
    for polygon in anomaly.damage_masks:
        if not trace_polygon(surface, polygon, scale_x, scale_y):
            continue
        surface.fill(fill)
        surface.stroke(border, width)
        drawn += 1
    return drawn


def render(
    surface: OverlaySurface | None,
    frame: AnnotationFrame | None,
    scale_x: float,
    scale_y: float,
    hovered: HoveredAnnotation = None,
    style: RenderStyle = DEFAULT_STYLE,
) -> None:
    """Clear surface and paint all three layers in order."""
    if surface is None:
        return
    surface.clear()
    if frame is None:
        return

    for element in frame.elements:
        draw_open_world(surface, element, scale_x, scale_y, hovered, style)

    for element in frame.elements:
        draw_structural_box(surface, element, scale_x, scale_y, style)

    polygons = 0
    for element in frame.elements:
        for anomaly in element.all_anomalies():
            polygons += draw_anomaly(surface, anomaly, scale_x, scale_y, hovered, style)
    logger.debug("Rendered %d elements, %d polygons at scale (%.4f, %.4f)",
                 len(frame.elements), polygons, scale_x, scale_y)
