"""Tests for curve-space <-> presentation-space mapping."""

from __future__ import annotations

import pytest

from throttlemap.config import CurveRange
from throttlemap.model.points import Point
from throttlemap.model.transform import CoordinateTransform


@pytest.fixture
def transform() -> CoordinateTransform:
    return CoordinateTransform(200, 100, CurveRange(1000, 1000))


class TestCoordinateTransform:

    def test_corners_with_inverted_y(self, transform):
        assert transform.to_presentation(Point(0, 0)) == (0.0, 100.0)
        assert transform.to_presentation(Point(1000, 1000)) == (200.0, 0.0)

    def test_centre(self, transform):
        assert transform.to_presentation(Point(500, 500)) == (100.0, 50.0)
        assert transform.to_curve(100, 50) == Point(500, 500)

    def test_to_curve_clamps_outside_positions(self, transform):
        assert transform.to_curve(-10, 500) == Point(0, 0)
        assert transform.to_curve(400, -20) == Point(1000, 1000)

    def test_hit_test_is_in_presentation_units(self, transform):
        p = Point(500, 500)
        assert transform.hit_test(p, 105, 50, radius=10)
        assert not transform.hit_test(p, 111, 50, radius=10)

    def test_resize(self, transform):
        transform.resize(400, 200)
        assert transform.to_presentation(Point(500, 500)) == (200.0, 100.0)

    def test_rejects_empty_view(self):
        with pytest.raises(ValueError):
            CoordinateTransform(0, 100)
