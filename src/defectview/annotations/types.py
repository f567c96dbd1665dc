"""Annotation types: AnnotationFrame, Element, DamageAnomaly, OpenWorldDetection, hover descriptors."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Tuple, Union

Point = Tuple[float, float]
Polygon = Tuple[Point, ...]
Box = Tuple[float, float, float, float]  # x1, y1, x2, y2

DEFAULT_IMAGE_SIZE: tuple[int, int] = (5184, 3888)
DEFAULT_OPEN_WORLD_LABEL = "unknown"
DEFAULT_SEVERITY = 1


def as_box(values: tuple[float, ...] | None) -> Box | None:
    """Return values as a 4-tuple box, or None when missing or of the wrong arity."""
    if values is None or len(values) != 4:
        return None
    x1, y1, x2, y2 = values
    return (x1, y1, x2, y2)


@dataclass(frozen=True)
class ImageSize:
    """Original-image pixel size. Fixed for the lifetime of one displayed frame."""

    width: float = DEFAULT_IMAGE_SIZE[0]
    height: float = DEFAULT_IMAGE_SIZE[1]


@dataclass(frozen=True)
class DamageAnomaly:
    """One detected defect: class label, optional severity/confidence, polygons in original-image space."""

    damage_class: str | None = None  # e.g. "crack_2"; severity is NOT parsed out of it
    severity: float | str | None = None
    confidence_score: float | None = None
    damage_masks: tuple[Polygon, ...] = ()

    @property
    def display_severity(self) -> float | str:
        """Severity for display; the stored value is left untouched."""
        return DEFAULT_SEVERITY if self.severity is None else self.severity


@dataclass(frozen=True)
class OpenWorldDetection:
    """Generic detection: a box and a label. Box may be malformed; see valid_box."""

    box: tuple[float, ...] | None = None
    label: str = DEFAULT_OPEN_WORLD_LABEL

    @property
    def valid_box(self) -> Box | None:
        return as_box(self.box)


@dataclass(frozen=True)
class Element:
    """A structural region (optional box + class) and the detections tied to it."""

    structural_box: tuple[float, ...] | None = None
    structural_class: str | None = None
    yolo_anomalies: tuple[DamageAnomaly, ...] = ()
    mask_rcnn_anomalies: tuple[DamageAnomaly, ...] = ()
    unmatched_anomalies: tuple[DamageAnomaly, ...] = ()
    open_world_detections: tuple[OpenWorldDetection, ...] = ()

    @property
    def structure(self) -> tuple[Box, str] | None:
        """(box, class) when both are present and the box is well formed."""
        box = as_box(self.structural_box)
        if box is None or not self.structural_class:
            return None
        return box, self.structural_class

    def all_anomalies(self) -> tuple[DamageAnomaly, ...]:
        """yolo, mask-rcnn, then unmatched anomalies, in that order."""
        return self.yolo_anomalies + self.mask_rcnn_anomalies + self.unmatched_anomalies


@dataclass(frozen=True)
class AnnotationFrame:
    """All annotations for one displayed image. Read-only to the overlay."""

    elements: tuple[Element, ...] = ()
    image_size: ImageSize = field(default_factory=ImageSize)


# ---------------------------------------------------------------------------
# Hover descriptors
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class OpenWorldHover:
    label: str


@dataclass(frozen=True, eq=False)
class DamageHover:
    """Hovered damage anomaly. mask_identity is compared by identity, never by value."""

    damage_class: str | None
    severity: float | str
    confidence_score: float | None
    mask_identity: tuple[Polygon, ...] = field(repr=False)
    structural_class: str | None = None

    def is_same_anomaly(self, anomaly: DamageAnomaly) -> bool:
        return self.mask_identity is anomaly.damage_masks


HoveredAnnotation = Union[OpenWorldHover, DamageHover, None]


def same_hover(a: HoveredAnnotation, b: HoveredAnnotation) -> bool:
    """True when switching from a to b would not change what is drawn."""
    if a is None or b is None:
        return a is b
    if isinstance(a, OpenWorldHover) and isinstance(b, OpenWorldHover):
        return a.label == b.label
    if isinstance(a, DamageHover) and isinstance(b, DamageHover):
        return a.mask_identity is b.mask_identity
    return False
