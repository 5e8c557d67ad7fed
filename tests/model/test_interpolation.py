"""Tests for the interpolation kernels and the cached Interpolator."""

from __future__ import annotations

import logging

import numpy as np
import pytest

from throttlemap.model.interpolation import (
    InterpolationMethod,
    Interpolator,
    all_identifiers,
    interpolate,
    make_interpolator,
)
from throttlemap.model.points import Point

ZIGZAG = [Point(0, 0), Point(100, 500), Point(200, 300), Point(300, 1000)]


class TestLinear:

    def test_midpoint(self):
        out = interpolate(InterpolationMethod.LINEAR, [Point(0, 0), Point(100, 100)], 2)
        assert out == [Point(0, 0), Point(50, 50), Point(100, 100)]

    def test_output_length(self):
        out = interpolate(InterpolationMethod.LINEAR, ZIGZAG[:3], 10)
        assert len(out) == 2 * 10 + 1

    def test_non_positive_speed_ratio_is_clamped(self, caplog):
        with caplog.at_level(logging.WARNING):
            out = interpolate(InterpolationMethod.LINEAR, [Point(0, 0), Point(10, 10)], 0)
        assert out == [Point(0, 0), Point(10, 10)]
        assert "not positive" in caplog.text


class TestCosine:

    def test_ease_endpoints_and_midpoint(self):
        out = interpolate(InterpolationMethod.COSINE, [Point(0, 0), Point(10, 10)], 2)
        assert out == [Point(0, 0), Point(5, 5), Point(10, 10)]

    def test_no_overshoot(self):
        out = interpolate(InterpolationMethod.COSINE, [Point(0, 0), Point(100, 1000), Point(200, 0)], 50)
        ys = [p.y for p in out]
        assert min(ys) == 0
        assert max(ys) == 1000

    def test_x_stays_linear(self):
        cosine = interpolate(InterpolationMethod.COSINE, ZIGZAG, 10)
        linear = interpolate(InterpolationMethod.LINEAR, ZIGZAG, 10)
        assert [p.x for p in cosine] == [p.x for p in linear]


class TestSpline:

    def test_two_points_fall_back_to_linear(self):
        pts = [Point(0, 0), Point(1023, 32767)]
        assert interpolate(InterpolationMethod.SPLINE, pts, 7) == interpolate(InterpolationMethod.LINEAR, pts, 7)

    def test_passes_through_control_points(self):
        out = interpolate(InterpolationMethod.SPLINE, ZIGZAG, 10)
        assert [out[i * 10] for i in range(len(ZIGZAG))] == ZIGZAG

    def test_is_smooth_between_knots(self):
        out = interpolate(InterpolationMethod.SPLINE, ZIGZAG, 10)
        linear = interpolate(InterpolationMethod.LINEAR, ZIGZAG, 10)
        assert out != linear

    def test_duplicate_knots_are_shifted(self, caplog):
        pts = [Point(0, 0), Point(10, 5), Point(10, 8), Point(20, 20)]
        with caplog.at_level(logging.WARNING):
            out = interpolate(InterpolationMethod.SPLINE, pts, 4)
        assert len(out) == 3 * 4 + 1
        assert "shifted" in caplog.text


class TestDegenerate:

    @pytest.mark.parametrize("method", list(InterpolationMethod))
    def test_empty_and_single(self, method):
        assert interpolate(method, [], 10) == []
        assert interpolate(method, [Point(3, 4)], 10) == [Point(3, 4)]


class TestInterpolatorCache:
    """process() recomputes only after invalidate()."""

    def test_second_process_reuses_buffer(self):
        interp = Interpolator(InterpolationMethod.SPLINE)
        first = interp.process(ZIGZAG, 10)
        second = interp.process(ZIGZAG, 10)
        assert first is second
        assert interp.recompute_count == 1

    def test_invalidate_forces_recompute(self):
        interp = Interpolator(InterpolationMethod.LINEAR)
        first = interp.process(ZIGZAG, 10)
        interp.invalidate()
        assert not interp.valid
        second = interp.process(ZIGZAG[:3], 10)
        assert second is not first
        assert len(second) == 21
        assert interp.recompute_count == 2

    def test_new_speed_ratio_recomputes(self):
        interp = Interpolator(InterpolationMethod.LINEAR)
        interp.process(ZIGZAG, 10)
        assert len(interp.process(ZIGZAG, 5)) == 16

    def test_sample_between_and_past_samples(self):
        interp = Interpolator(InterpolationMethod.LINEAR)
        values = interp.sample([Point(0, 0), Point(100, 100)], [25, 150])
        np.testing.assert_allclose(values, [25.0, 100.0])

    def test_sample_uses_unrounded_grid(self):
        # 100 samples across three input units collapse onto four integer x values
        interp = Interpolator(InterpolationMethod.LINEAR)
        values = interp.sample([Point(0, 0), Point(3, 3000)], [1, 2, 3])
        np.testing.assert_allclose(values, [1000.0, 2000.0, 3000.0])


class TestFactory:

    def test_known_identifiers(self):
        assert all_identifiers() == ["Linear", "Cosine", "Spline"]
        assert make_interpolator("Cosine").method == InterpolationMethod.COSINE

    def test_unknown_identifier_fails_closed(self, caplog):
        with caplog.at_level(logging.ERROR):
            assert make_interpolator("Bezier") is None
        assert "Bezier" in caplog.text

    def test_identifiers_are_case_sensitive(self):
        assert make_interpolator("linear") is None
