"""Tooltip text for a hovered annotation. Formatting only; the overlay supplies the descriptor."""

from __future__ import annotations

from .annotations.types import DamageHover, HoveredAnnotation, OpenWorldHover

HIDDEN_OPEN_WORLD_LABEL = "unknown"


def sanitize(text: str | None) -> str:
    """'deck_panel' -> 'Deck Panel'."""
    if not text:
        return ""
    return " ".join(w[:1].upper() + w[1:] for w in text.replace("_", " ").split(" "))


def clean_class_name(name: str | None) -> str:
    """Drop everything after the first underscore: 'crack_2' -> 'crack'."""
    if not name:
        return ""
    return name.split("_")[0]


def format_tooltip(hovered: HoveredAnnotation) -> list[str] | None:
    """Tooltip lines, or None when nothing should be shown."""
    if hovered is None:
        return None
    if isinstance(hovered, OpenWorldHover):
        if hovered.label == HIDDEN_OPEN_WORLD_LABEL:
            return None
        return [sanitize(hovered.label)]
    if isinstance(hovered, DamageHover):
        lines = [f"Anomaly: {sanitize(clean_class_name(hovered.damage_class))}"]
        if hovered.severity:
            lines.append(f"Severity: {hovered.severity}")
        if hovered.confidence_score is not None:
            lines.append(f"Confidence: {hovered.confidence_score:.2f}")
        if hovered.structural_class:
            lines.append(f"Structure: {sanitize(hovered.structural_class)}")
        return lines
    return None
