"""Tests for the headless parts of the OpenCV viewer."""

from __future__ import annotations

import cv2
import numpy as np

from defectview.annotations.types import AnnotationFrame, DamageAnomaly, Element, ImageSize
from defectview.overlay.controller import LOAD, AnnotationOverlay, PointerEvent
from defectview.viewer import OverlayWindow, compose_view, draw_tooltip


def _frame() -> AnnotationFrame:
    masks = (tuple([(10.0, 10.0), (20.0, 10.0), (20.0, 20.0), (10.0, 20.0)]),)
    return AnnotationFrame(
        elements=(Element(
            structural_box=(0, 0, 100, 100),
            structural_class="girder",
            yolo_anomalies=(DamageAnomaly("crack_2", damage_masks=masks),),
        ),),
        image_size=ImageSize(100, 100),
    )


def test_compose_view_scales_image_to_surface():
    overlay = AnnotationOverlay(_frame())
    overlay.on_load(200, 200)
    out = compose_view(np.zeros((100, 100, 3), dtype=np.uint8), overlay)
    assert out.shape == (200, 200, 3)
    # crack green at 0.4 over black
    assert out[30, 30].tolist() == [0, 102, 0]


def test_compose_view_draws_tooltip_when_hovered():
    overlay = AnnotationOverlay(_frame())
    overlay.on_load(200, 200)
    plain = compose_view(np.zeros((100, 100, 3), dtype=np.uint8), overlay)
    overlay.on_pointer_move(PointerEvent(30, 30))
    hovered = compose_view(np.zeros((100, 100, 3), dtype=np.uint8), overlay)
    # tooltip text is white, below-right of the pointer
    assert hovered[42:120, 42:200].max() > 200
    assert plain[42:120, 42:200].max() < 50


def test_compose_view_zero_surface_returns_image():
    overlay = AnnotationOverlay(_frame())
    img = np.zeros((10, 10, 3), dtype=np.uint8)
    assert compose_view(img, overlay) is img


def test_draw_tooltip_stays_inside_image():
    img = np.full((60, 80, 3), 200, dtype=np.uint8)
    draw_tooltip(img, ["Anomaly: Crack", "Severity: 2"], (79, 59))
    assert img.shape == (60, 80, 3)
    assert (img < 200).any()


def test_mouse_callback_dispatches_move_and_leave():
    window = OverlayWindow(np.zeros((100, 100, 3), dtype=np.uint8), _frame())
    window.overlay.attach(window.host)
    window._size = (200, 200)
    window.host.dispatch(LOAD, 200, 200)

    window._on_mouse(cv2.EVENT_MOUSEMOVE, 30, 30, 0, None)
    assert window.overlay.hovered.damage_class == "crack_2"
    assert window.overlay.hovered.structural_class == "girder"

    window._on_mouse(cv2.EVENT_LBUTTONDOWN, 150, 150, 0, None)
    assert window.overlay.hovered is not None

    window._on_mouse(cv2.EVENT_MOUSEMOVE, 250, 30, 0, None)
    assert window.overlay.hovered is None
    window.overlay.detach()
    assert window.host.listener_count() == 0
