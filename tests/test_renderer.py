"""Tests for the layered renderer."""

from __future__ import annotations

import pytest

from defectview.annotations.colors import color_for
from defectview.annotations.types import (
    AnnotationFrame,
    DamageAnomaly,
    DamageHover,
    Element,
    ImageSize,
    OpenWorldDetection,
    OpenWorldHover,
)
from defectview.overlay.renderer import draw_anomaly, render, trace_polygon
from defectview.overlay.surface import OverlaySurface


def square(x0: float, y0: float, size: float):
    return tuple([(x0, y0), (x0 + size, y0), (x0 + size, y0 + size), (x0, y0 + size)])


def anomaly(cls: str, *polygons) -> DamageAnomaly:
    return DamageAnomaly(damage_class=cls, damage_masks=tuple(polygons))


def frame_of(*elements: Element, size: float = 200) -> AnnotationFrame:
    return AnnotationFrame(elements=tuple(elements), image_size=ImageSize(size, size))


class TestDamageLayer:

    def test_polygon_filled_with_class_color(self):
        s = OverlaySurface(200, 200)
        render(s, frame_of(Element(yolo_anomalies=(anomaly("crack_2", square(10, 10, 40)),))), 1.0, 1.0)
        assert s.pixels[30, 30] == pytest.approx([0.0, 0.4, 0.0, 0.4], abs=1e-6)

    def test_hovered_anomaly_is_more_opaque(self):
        crack = anomaly("crack", square(10, 10, 40))
        s = OverlaySurface(200, 200)
        hovered = DamageHover("crack", 1, None, mask_identity=crack.damage_masks)
        render(s, frame_of(Element(yolo_anomalies=(crack,))), 1.0, 1.0, hovered)
        assert s.pixels[30, 30, 3] == pytest.approx(0.7, abs=1e-6)

    def test_hover_uses_identity_not_value(self):
        a = anomaly("crack", square(10, 10, 40))
        b = anomaly("crack", square(10, 10, 40))
        assert a == b
        hovered = DamageHover("crack", 1, None, mask_identity=b.damage_masks)
        s = OverlaySurface(200, 200)
        render(s, frame_of(Element(yolo_anomalies=(a,))), 1.0, 1.0, hovered)
        assert s.pixels[30, 30, 3] == pytest.approx(0.4, abs=1e-6)

    def test_scaled_per_vertex(self):
        s = OverlaySurface(200, 200)
        render(s, frame_of(Element(yolo_anomalies=(anomaly("crack", square(10, 10, 20)),))), 2.0, 3.0)
        assert s.pixels[60, 40, 3] > 0  # (20, 20) -> (40, 60)
        assert s.pixels[60, 80, 3] == 0  # x = 80 is right of the scaled square
        assert s.pixels[100, 40, 3] == 0

    def test_two_point_polygon_never_drawn(self):
        s = OverlaySurface(200, 200)
        line = anomaly("crack", ((10.0, 10.0), (100.0, 100.0)))
        assert draw_anomaly(s, line, 1.0, 1.0, None) == 0
        render(s, frame_of(Element(yolo_anomalies=(line,))), 1.0, 1.0)
        assert not s.pixels.any()

    def test_valid_polygons_still_drawn_next_to_invalid(self):
        s = OverlaySurface(200, 200)
        mixed = anomaly("crack", ((0.0, 0.0), (1.0, 1.0)), square(10, 10, 40))
        assert draw_anomaly(s, mixed, 1.0, 1.0, None) == 1


class TestBoxLayers:

    def test_open_world_box_nearly_transparent(self):
        s = OverlaySurface(200, 200)
        el = Element(open_world_detections=(OpenWorldDetection(box=(100, 100, 150, 150), label="bird"),))
        render(s, frame_of(el), 1.0, 1.0)
        assert s.pixels[125, 125, 3] == pytest.approx(0.001, abs=1e-6)
        assert s.pixels[100, 125, 3] > 0.01  # border

    def test_open_world_hover_by_label(self):
        s = OverlaySurface(200, 200)
        el = Element(open_world_detections=(
            OpenWorldDetection(box=(0, 0, 50, 50), label="bird"),
            OpenWorldDetection(box=(100, 100, 150, 150), label="bird"),
            OpenWorldDetection(box=(0, 100, 50, 150), label="plant"),
        ))
        render(s, frame_of(el), 1.0, 1.0, OpenWorldHover("bird"))
        assert s.pixels[25, 25, 3] == pytest.approx(0.05, abs=1e-6)
        assert s.pixels[125, 125, 3] == pytest.approx(0.05, abs=1e-6)
        assert s.pixels[125, 25, 3] == pytest.approx(0.001, abs=1e-6)

    def test_malformed_open_world_box_skipped(self):
        s = OverlaySurface(200, 200)
        el = Element(open_world_detections=(OpenWorldDetection(box=(0, 0, 50), label="x"), OpenWorldDetection()))
        render(s, frame_of(el), 1.0, 1.0)
        assert not s.pixels.any()

    def test_structural_box_is_invisible_hit_region(self):
        s = OverlaySurface(200, 200)
        render(s, frame_of(Element(structural_box=(0, 0, 100, 100), structural_class="girder")), 1.0, 1.0)
        assert s.pixels[50, 50, 3] == pytest.approx(0.001, abs=1e-6)
        assert s.pixels[..., 3].max() <= 0.001 + 1e-6  # stroke is fully transparent

    def test_structural_box_needs_class(self):
        s = OverlaySurface(200, 200)
        render(s, frame_of(Element(structural_box=(0, 0, 100, 100))), 1.0, 1.0)
        assert not s.pixels.any()

    def test_damage_drawn_over_boxes(self):
        s = OverlaySurface(200, 200)
        el = Element(
            structural_box=(0, 0, 100, 100),
            structural_class="girder",
            open_world_detections=(OpenWorldDetection(box=(0, 0, 100, 100), label="bird"),),
            unmatched_anomalies=(anomaly("spalling", square(20, 20, 40)),),
        )
        render(s, frame_of(el), 1.0, 1.0)
        # spalling (255, 165, 0) at 0.4 on top of two ~transparent fills
        r, g, b, a = s.pixels[40, 40]
        assert r / a == pytest.approx(1.0, abs=0.01)
        assert g / a == pytest.approx(165 / 255, abs=0.01)
        assert a == pytest.approx(0.4, abs=0.002)


class TestRenderPass:

    def test_render_clears_previous_content(self):
        s = OverlaySurface(200, 200)
        render(s, frame_of(Element(yolo_anomalies=(anomaly("crack", square(10, 10, 40)),))), 1.0, 1.0)
        render(s, frame_of(), 1.0, 1.0)
        assert not s.pixels.any()

    def test_missing_surface_or_frame_is_skipped(self):
        render(None, frame_of(), 1.0, 1.0)
        s = OverlaySurface(10, 10)
        s.fill_rect(0, 0, 10, 10, color_for("crack", 1))
        render(s, None, 1.0, 1.0)
        assert not s.pixels.any()

    def test_zero_scale_collapses_without_error(self):
        s = OverlaySurface(200, 200)
        el = Element(
            structural_box=(0, 0, 100, 100),
            structural_class="girder",
            open_world_detections=(OpenWorldDetection(box=(0, 0, 100, 100)),),
            yolo_anomalies=(anomaly("crack", square(10, 10, 40)),),
        )
        render(s, frame_of(el), 0.0, 0.0)
        assert s.pixels[30, 30, 3] == 0


def test_trace_polygon_matches_scaled_vertices():
    s = OverlaySurface(300, 300)
    poly = ((10.0, 20.0), (30.0, 20.0), (20.0, 50.0))
    assert trace_polygon(s, poly, 2.0, 3.0)
    # centroid of the scaled triangle (40, 90) is inside, the unscaled one is not
    assert s.is_point_in_path(40, 90)
    assert not s.is_point_in_path(20, 30)
    assert not trace_polygon(s, poly[:2], 2.0, 3.0)
