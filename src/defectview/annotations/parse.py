"""Build an AnnotationFrame from the deserialized annotation payload, and back.

Malformed geometry is kept or dropped here but never raises: short polygons and
wrong-arity boxes stay in the model so the renderer and hit tester can skip them.
"""

from __future__ import annotations

import logging
import numbers
from typing import Any, Iterable, Mapping

from ..errors import PayloadError
from .types import (
    DEFAULT_IMAGE_SIZE,
    DEFAULT_OPEN_WORLD_LABEL,
    AnnotationFrame,
    DamageAnomaly,
    Element,
    ImageSize,
    OpenWorldDetection,
    Polygon,
)

logger = logging.getLogger(__name__)

ANOMALY_GROUPS = ("yolo_anomalies", "mask_rcnn_anomalies", "unmatched_anomalies")


def _is_number(v: Any) -> bool:
    return isinstance(v, numbers.Real) and not isinstance(v, bool)


def _numbers(values: Any) -> tuple[float, ...] | None:
    """Tuple of floats, or None if values is not a sequence of numbers."""
    if not isinstance(values, (list, tuple)):
        return None
    if not all(_is_number(v) for v in values):
        return None
    return tuple(float(v) for v in values)


def _mappings(values: Any, what: str) -> Iterable[Mapping[str, Any]]:
    if not isinstance(values, (list, tuple)):
        if values is not None:
            logger.debug("Ignoring %s: expected a list, got %s", what, type(values).__name__)
        return
    for item in values:
        if isinstance(item, Mapping):
            yield item
        else:
            logger.debug("Skipping non-mapping entry in %s", what)


def _polygon(raw: Any) -> Polygon | None:
    if not isinstance(raw, (list, tuple)):
        return None
    points = []
    for p in raw:
        # Extra per-point values (e.g. a score) are ignored.
        xy = _numbers(p[:2]) if isinstance(p, (list, tuple)) else None
        if xy is None or len(xy) != 2:
            return None
        points.append((xy[0], xy[1]))
    return tuple(points)


def parse_anomaly(raw: Mapping[str, Any]) -> DamageAnomaly:
    masks = []
    for poly in raw.get("damage_masks_original_frame") or []:
        parsed = _polygon(poly)
        if parsed is None:
            logger.debug("Dropping malformed polygon for %s", raw.get("damage_class"))
            continue
        masks.append(parsed)
    confidence = raw.get("confidence_score")
    damage_class = raw.get("damage_class")
    return DamageAnomaly(
        damage_class=str(damage_class) if damage_class is not None else None,
        severity=raw.get("severity"),
        confidence_score=float(confidence) if _is_number(confidence) else None,
        damage_masks=tuple(masks),
    )


def parse_open_world(raw: Mapping[str, Any]) -> OpenWorldDetection:
    return OpenWorldDetection(
        box=_numbers(raw.get("boxes")),
        label=str(raw.get("label") or DEFAULT_OPEN_WORLD_LABEL),
    )


def parse_element(raw: Mapping[str, Any]) -> Element:
    groups = {
        key: tuple(parse_anomaly(a) for a in _mappings(raw.get(key), key))
        for key in ANOMALY_GROUPS
    }
    structural_class = raw.get("structural_class")
    return Element(
        structural_box=_numbers(raw.get("structural_bbox_original_frame")),
        structural_class=str(structural_class) if structural_class else None,
        open_world_detections=tuple(
            parse_open_world(d) for d in _mappings(raw.get("open_world_detections"), "open_world_detections")
        ),
        **groups,
    )


def _image_size(raw: Any) -> ImageSize:
    size = _numbers(raw)
    if size is None or len(size) != 2:
        if raw is not None:
            logger.warning("Ignoring malformed image_size %r; using default %s", raw, DEFAULT_IMAGE_SIZE)
        return ImageSize()
    return ImageSize(width=size[0], height=size[1])


def frame_from_payload(payload: Any) -> AnnotationFrame:
    """Build a frame from a bare element list or a mapping with image_size + elements."""
    if isinstance(payload, Mapping):
        raw_elements = payload.get("elements")
        if raw_elements is None:
            raw_elements = payload.get("annotations")
        image_size = _image_size(payload.get("image_size"))
    elif isinstance(payload, (list, tuple)):
        raw_elements = payload
        image_size = ImageSize()
    else:
        raise PayloadError(f"Annotation payload must be a list or an object, got {type(payload).__name__}")

    elements = tuple(parse_element(e) for e in _mappings(raw_elements, "elements"))
    logger.debug("Parsed %d elements (image size %sx%s)", len(elements), image_size.width, image_size.height)
    return AnnotationFrame(elements=elements, image_size=image_size)


# ---------------------------------------------------------------------------
# Serialization back to the wire shape
# ---------------------------------------------------------------------------

def _anomaly_to_dict(a: DamageAnomaly) -> dict[str, Any]:
    return {
        "damage_class": a.damage_class,
        "severity": a.severity,
        "confidence_score": a.confidence_score,
        "damage_masks_original_frame": [[list(p) for p in poly] for poly in a.damage_masks],
    }


def frame_to_payload(frame: AnnotationFrame) -> dict[str, Any]:
    """Inverse of frame_from_payload (mapping form)."""
    elements = []
    for e in frame.elements:
        d: dict[str, Any] = {
            "structural_bbox_original_frame": list(e.structural_box) if e.structural_box is not None else None,
            "structural_class": e.structural_class,
            "open_world_detections": [
                {"boxes": list(det.box) if det.box is not None else None, "label": det.label}
                for det in e.open_world_detections
            ],
        }
        for key in ANOMALY_GROUPS:
            d[key] = [_anomaly_to_dict(a) for a in getattr(e, key)]
        elements.append(d)
    return {
        "image_size": [frame.image_size.width, frame.image_size.height],
        "elements": elements,
    }
