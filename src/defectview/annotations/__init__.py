"""Annotation data model, payload parsing and the damage color policy."""

from .colors import RGBA, color_for
from .parse import frame_from_payload, frame_to_payload
from .types import (
    DEFAULT_IMAGE_SIZE,
    AnnotationFrame,
    DamageAnomaly,
    DamageHover,
    Element,
    HoveredAnnotation,
    ImageSize,
    OpenWorldDetection,
    OpenWorldHover,
    same_hover,
)

__all__ = [
    "RGBA",
    "color_for",
    "frame_from_payload",
    "frame_to_payload",
    "DEFAULT_IMAGE_SIZE",
    "AnnotationFrame",
    "DamageAnomaly",
    "DamageHover",
    "Element",
    "HoveredAnnotation",
    "ImageSize",
    "OpenWorldDetection",
    "OpenWorldHover",
    "same_hover",
]
