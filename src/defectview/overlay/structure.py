"""Structural association: which structural element encloses a damage anomaly."""

from __future__ import annotations

from ..annotations.types import AnnotationFrame, Box, DamageAnomaly


def _contains(box: Box, x: float, y: float) -> bool:
    x1, y1, x2, y2 = box
    return x1 <= x <= x2 and y1 <= y <= y2


def touches_box(anomaly: DamageAnomaly, box: Box) -> bool:
    """True if any vertex of any polygon of anomaly lies in box (inclusive)."""
    return any(_contains(box, x, y) for polygon in anomaly.damage_masks for x, y in polygon)


def associate(anomaly: DamageAnomaly, frame: AnnotationFrame | None) -> str | None:
    """Structural class of the LAST element (frame order) whose box holds a vertex of anomaly."""
    if frame is None:
        return None
    structural_class = None
    for element in frame.elements:
        structure = element.structure
        if structure is None:
            continue
        box, cls = structure
        if touches_box(anomaly, box):
            structural_class = cls
    return structural_class
