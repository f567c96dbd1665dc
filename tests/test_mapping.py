"""Tests for original-image <-> screen coordinate mapping."""

from __future__ import annotations

import pytest

from defectview.annotations.types import DEFAULT_IMAGE_SIZE, ImageSize
from defectview.overlay.mapping import Scale, compute_scale


def test_scale_factors():
    s = compute_scale(ImageSize(5184, 3888), 1296, 972)
    assert s.sx == pytest.approx(0.25)
    assert s.sy == pytest.approx(0.25)


def test_independent_axes():
    s = compute_scale(ImageSize(100, 50), 300, 100)
    assert (s.sx, s.sy) == (3.0, 2.0)
    assert s.to_screen(10, 10) == (30.0, 20.0)
    assert s.box_to_screen((1, 2, 3, 4)) == (3.0, 4.0, 9.0, 8.0)


def test_default_image_size():
    assert ImageSize() == ImageSize(*DEFAULT_IMAGE_SIZE)
    assert DEFAULT_IMAGE_SIZE == (5184, 3888)


@pytest.mark.parametrize("point", [(0.0, 0.0), (12.5, 7.25), (5183.0, 3887.0)])
def test_unscale_rescale_round_trip(point):
    s = compute_scale(ImageSize(5184, 3888), 1013, 757)
    sx, sy = s.to_screen(*point)
    assert s.to_screen(*s.to_image(sx, sy)) == pytest.approx((sx, sy))
    assert s.to_image(sx, sy) == pytest.approx(point)


def test_zero_container_collapses_without_error():
    s = compute_scale(ImageSize(100, 100), 0, 0)
    assert s == Scale(0.0, 0.0)
    assert s.to_screen(50, 50) == (0.0, 0.0)


def test_negative_container_gives_negative_scale():
    s = compute_scale(ImageSize(100, 100), -50, 100)
    assert s.sx == -0.5
    assert s.sy == 1.0


def test_non_positive_image_size_gives_zero_scale():
    assert compute_scale(ImageSize(0, 100), 100, 100) == Scale(0.0, 0.0)
